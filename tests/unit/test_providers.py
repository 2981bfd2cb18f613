"""
Unit tests for the JSON-RPC provider.

Endpoints are served by httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from chains.providers import RPCProvider, resolve_rpc_urls
from core.exceptions import ErrorCode, InfraError

PRIMARY = "https://primary.example"
BACKUP = "https://backup.example"


def make_transport(handlers: dict):
    """Route requests by host to a per-endpoint handler."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = f"{request.url.scheme}://{request.url.host}"
        seen.append((url, json.loads(request.content)))
        return handlers[url](request)

    return httpx.MockTransport(handler), seen


def ok(result):
    return lambda request: httpx.Response(
        200, json={"jsonrpc": "2.0", "id": 1, "result": result}
    )


def rpc_error(message):
    return lambda request: httpx.Response(
        200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": message}}
    )


def timeout(request):
    raise httpx.ConnectTimeout("timed out", request=request)


class TestResolveRpcUrls:

    def test_placeholder_filled(self, monkeypatch):
        monkeypatch.setenv("ARBWATCH_TEST_KEY", "abc123")
        urls = resolve_rpc_urls(["https://rpc.example/v2/${ARBWATCH_TEST_KEY}"])
        assert urls == ["https://rpc.example/v2/abc123"]

    def test_unset_placeholder_dropped(self, monkeypatch):
        monkeypatch.delenv("ARBWATCH_TEST_KEY", raising=False)
        urls = resolve_rpc_urls(["https://rpc.example/v2/${ARBWATCH_TEST_KEY}", PRIMARY])
        assert urls == [PRIMARY]

    def test_plain_urls_untouched(self):
        assert resolve_rpc_urls([PRIMARY, BACKUP]) == [PRIMARY, BACKUP]


class TestRPCProvider:

    @pytest.mark.asyncio
    async def test_eth_call_payload(self):
        transport, seen = make_transport({PRIMARY: ok("0x01")})
        provider = RPCProvider(137, [PRIMARY], transport=transport)
        try:
            response = await provider.eth_call(to="0xrouter", data="0xd06ca61f")
        finally:
            await provider.close()

        assert response.result == "0x01"
        assert response.endpoint_used == PRIMARY
        payload = seen[0][1]
        assert payload["method"] == "eth_call"
        assert payload["params"] == [{"to": "0xrouter", "data": "0xd06ca61f"}, "latest"]

    @pytest.mark.asyncio
    async def test_failover_on_rpc_error(self):
        transport, seen = make_transport({
            PRIMARY: rpc_error("execution reverted"),
            BACKUP: ok("0x02"),
        })
        provider = RPCProvider(137, [PRIMARY, BACKUP], transport=transport)
        try:
            response = await provider.call("eth_blockNumber")
        finally:
            await provider.close()

        assert response.endpoint_used == BACKUP
        assert [url for url, _ in seen] == [PRIMARY, BACKUP]
        stats = provider.get_stats_summary()
        assert stats[PRIMARY]["last_error"] == "execution reverted"
        assert stats[BACKUP]["success_rate"] == 1.0

    @pytest.mark.asyncio
    async def test_failover_on_http_status(self):
        transport, _ = make_transport({
            PRIMARY: lambda request: httpx.Response(503),
            BACKUP: ok("0x03"),
        })
        provider = RPCProvider(137, [PRIMARY, BACKUP], transport=transport)
        try:
            response = await provider.call("eth_blockNumber")
        finally:
            await provider.close()

        assert response.result == "0x03"

    @pytest.mark.asyncio
    async def test_all_endpoints_timeout(self):
        transport, _ = make_transport({PRIMARY: timeout, BACKUP: timeout})
        provider = RPCProvider(137, [PRIMARY, BACKUP], transport=transport)
        try:
            with pytest.raises(InfraError) as exc_info:
                await provider.call("eth_blockNumber")
        finally:
            await provider.close()

        assert exc_info.value.code == ErrorCode.INFRA_TIMEOUT
        assert exc_info.value.details["endpoints_tried"] == 2

    @pytest.mark.asyncio
    async def test_no_endpoints(self):
        provider = RPCProvider(137, [])
        with pytest.raises(InfraError) as exc_info:
            await provider.call("eth_blockNumber")
        assert exc_info.value.code == ErrorCode.INFRA_RPC_ERROR

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [None, [1, 2], 42, "0x01"])
    async def test_non_object_body_fails_over(self, body):
        transport, _ = make_transport({
            PRIMARY: lambda request: httpx.Response(200, content=json.dumps(body).encode()),
            BACKUP: ok("0x04"),
        })
        provider = RPCProvider(137, [PRIMARY, BACKUP], transport=transport)
        try:
            response = await provider.call("eth_blockNumber")
        finally:
            await provider.close()

        assert response.result == "0x04"
        assert "Malformed JSON-RPC response" in provider.get_stats_summary()[PRIMARY]["last_error"]

    @pytest.mark.asyncio
    async def test_non_object_body_everywhere(self):
        transport, _ = make_transport({PRIMARY: lambda request: httpx.Response(200, content=b"null")})
        provider = RPCProvider(137, [PRIMARY], transport=transport)
        try:
            with pytest.raises(InfraError) as exc_info:
                await provider.call("eth_blockNumber")
        finally:
            await provider.close()

        assert exc_info.value.code == ErrorCode.INFRA_RPC_ERROR
