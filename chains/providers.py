"""
chains/providers.py - JSON-RPC provider with failover.

Provides RPC access with:
- Multiple endpoint failover (tried in configured order)
- Request timeout handling
- Connection pooling
- Latency tracking per endpoint
"""

import os
import re
from dataclasses import dataclass
from typing import Any

import httpx
from dotenv import load_dotenv

from core.exceptions import ErrorCode, InfraError
from core.logging import get_logger
from core.time import now_ms

logger = get_logger(__name__)

# Load environment variables
load_dotenv()

ENV_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def resolve_rpc_urls(urls: list[str]) -> list[str]:
    """
    Fill ${VAR} placeholders in RPC urls from the environment.

    Urls referencing an unset or empty variable are dropped, so a keyed
    endpoint is skipped when its API key is not configured.
    """
    resolved = []
    for url in urls:
        missing = [name for name in ENV_PLACEHOLDER.findall(url) if not os.getenv(name)]
        if missing:
            logger.debug(
                "Skipping RPC url with unset placeholder",
                extra={"context": {"missing": missing}},
            )
            continue
        resolved.append(ENV_PLACEHOLDER.sub(lambda m: os.environ[m.group(1)], url))
    return resolved


@dataclass
class RPCStats:
    """Statistics for an RPC endpoint."""
    url: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_latency_ms: int = 0
    last_error: str | None = None
    last_success_ts: int | None = None

    @property
    def avg_latency_ms(self) -> int:
        if self.successful_requests == 0:
            return 0
        return self.total_latency_ms // self.successful_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests


@dataclass
class RPCResponse:
    """Response from an RPC call."""
    result: Any
    latency_ms: int
    endpoint_used: str


class RPCProvider:
    """
    RPC provider with failover support.

    Tries multiple endpoints in order until one succeeds.
    Tracks statistics per endpoint for monitoring.
    """

    def __init__(
        self,
        chain_id: int,
        rpc_urls: list[str],
        timeout_seconds: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.chain_id = chain_id
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._request_id = 0

        self.rpc_urls = resolve_rpc_urls(rpc_urls)

        self.stats: dict[str, RPCStats] = {
            url: RPCStats(url=url) for url in self.rpc_urls
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                limits=httpx.Limits(max_connections=10),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _next_request_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def call(
        self,
        method: str,
        params: list | None = None,
    ) -> RPCResponse:
        """
        Make an RPC call with failover.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            RPCResponse with result and metadata

        Raises:
            InfraError: If all endpoints fail
        """
        if not self.rpc_urls:
            raise InfraError(
                code=ErrorCode.INFRA_RPC_ERROR,
                message="No RPC endpoints configured",
                details={"chain_id": self.chain_id},
            )

        client = await self._get_client()
        last_error: Exception | None = None
        last_code = ErrorCode.INFRA_RPC_ERROR

        for url in self.rpc_urls:
            stats = self.stats[url]
            stats.total_requests += 1

            payload = {
                "jsonrpc": "2.0",
                "method": method,
                "params": params or [],
                "id": self._next_request_id(),
            }

            start_ms = now_ms()

            try:
                resp = await client.post(url, json=payload)
                latency_ms = now_ms() - start_ms
                resp.raise_for_status()
                result = resp.json()
                if not isinstance(result, dict):
                    raise ValueError(f"Malformed JSON-RPC response: {type(result).__name__}")

                if "error" in result:
                    error = result["error"]
                    error_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
                    stats.failed_requests += 1
                    stats.last_error = error_msg
                    last_error = InfraError(
                        code=ErrorCode.INFRA_RPC_ERROR,
                        message=f"RPC error: {error_msg}",
                        details={"url": url, "method": method},
                    )
                    last_code = ErrorCode.INFRA_RPC_ERROR
                    logger.debug(
                        "RPC error response",
                        extra={"context": {"url": url, "method": method, "error": error_msg}},
                    )
                    continue

                stats.successful_requests += 1
                stats.total_latency_ms += latency_ms
                stats.last_success_ts = now_ms()

                return RPCResponse(
                    result=result.get("result"),
                    latency_ms=latency_ms,
                    endpoint_used=url,
                )

            except httpx.TimeoutException as e:
                latency_ms = now_ms() - start_ms
                stats.failed_requests += 1
                stats.last_error = f"Timeout after {latency_ms}ms"
                last_error = e
                last_code = ErrorCode.INFRA_TIMEOUT
                logger.debug(
                    "RPC timeout",
                    extra={"context": {"url": url, "latency_ms": latency_ms}},
                )
                continue

            except (httpx.HTTPError, ValueError) as e:
                stats.failed_requests += 1
                stats.last_error = str(e)
                last_error = e
                last_code = ErrorCode.INFRA_RPC_ERROR
                logger.debug(
                    "RPC request failed",
                    extra={"context": {"url": url, "error": str(e)}},
                )
                continue

        raise InfraError(
            code=last_code,
            message=f"All RPC endpoints failed for chain {self.chain_id}",
            details={
                "chain_id": self.chain_id,
                "endpoints_tried": len(self.rpc_urls),
                "last_error": str(last_error),
            },
        )

    async def eth_call(
        self,
        to: str,
        data: str,
        block: str = "latest",
    ) -> RPCResponse:
        """
        Make eth_call.

        Args:
            to: Contract address
            data: Encoded call data
            block: Block number or "latest"

        Returns:
            RPCResponse with call result
        """
        return await self.call(
            "eth_call",
            [{"to": to, "data": data}, block],
        )

    def get_stats_summary(self) -> dict:
        """Get statistics summary for all endpoints."""
        return {
            url: {
                "total_requests": s.total_requests,
                "success_rate": round(s.success_rate, 3),
                "avg_latency_ms": s.avg_latency_ms,
                "last_error": s.last_error,
            }
            for url, s in self.stats.items()
        }
