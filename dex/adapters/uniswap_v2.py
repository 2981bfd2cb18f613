"""
dex/adapters/uniswap_v2.py - Uniswap V2 router quoting adapter.

Quotes through the router's getAmountsOut, which every V2 fork (QuickSwap,
SushiSwap, PancakeSwap...) exposes with the same ABI.
"""

from core.exceptions import ErrorCode, InfraError, QuoteError, QuoteUnavailableError
from core.logging import get_logger
from core.models import RawQuote, Token
from chains.providers import RPCProvider

logger = get_logger(__name__)


# =============================================================================
# ABI ENCODING
# =============================================================================

# Function selector: getAmountsOut(uint256,address[])
# keccak256("getAmountsOut(uint256,address[])")[:4]
SELECTOR_GET_AMOUNTS_OUT = "0xd06ca61f"

WORD_HEX_CHARS = 64


def _encode_word(value: int) -> str:
    return hex(value)[2:].zfill(WORD_HEX_CHARS)


def _encode_address(address: str) -> str:
    return address.lower().replace("0x", "").zfill(WORD_HEX_CHARS)


def encode_get_amounts_out(amount_in: int, path: list[str]) -> str:
    """
    Encode getAmountsOut call data.

    Layout (address[] is dynamic, so it is passed by offset):
        selector
        amountIn
        offset of path (0x40 = two head words)
        path length
        path[0] .. path[n-1]
    """
    if amount_in < 0:
        raise ValueError(f"amount_in must be >= 0, got {amount_in}")
    if len(path) < 2:
        raise ValueError("path needs at least two token addresses")

    head = _encode_word(amount_in) + _encode_word(2 * 32)
    tail = _encode_word(len(path)) + "".join(_encode_address(a) for a in path)
    return f"{SELECTOR_GET_AMOUNTS_OUT}{head}{tail}"


def decode_amounts_out(hex_result: str | None) -> list[int]:
    """
    Decode the uint256[] returned by getAmountsOut.

    Raises:
        QuoteError: empty, truncated or malformed response
    """
    if hex_result is not None and not isinstance(hex_result, str):
        raise QuoteError(
            code=ErrorCode.QUOTE_REVERT,
            message=f"Unexpected getAmountsOut result type: {type(hex_result).__name__}",
        )

    if not hex_result or hex_result == "0x":
        raise QuoteError(
            code=ErrorCode.QUOTE_REVERT,
            message="Empty getAmountsOut response",
        )

    data = hex_result[2:] if hex_result.startswith("0x") else hex_result

    try:
        offset = int(data[0:WORD_HEX_CHARS], 16) * 2
        length = int(data[offset:offset + WORD_HEX_CHARS], 16)
        start = offset + WORD_HEX_CHARS
        if length < 2 or len(data) < start + length * WORD_HEX_CHARS:
            raise ValueError(f"expected at least 2 full words, got length={length}")
        words = [
            data[start + i * WORD_HEX_CHARS:start + (i + 1) * WORD_HEX_CHARS]
            for i in range(length)
        ]
        return [int(w, 16) for w in words]
    except ValueError as e:
        raise QuoteError(
            code=ErrorCode.QUOTE_REVERT,
            message=f"Malformed getAmountsOut response: {e}",
            details={"data_length": len(data), "raw": hex_result[:100]},
        )


# =============================================================================
# ADAPTER
# =============================================================================

class UniswapV2RouterSource:
    """
    QuoteSource for a Uniswap V2 style router.

    Usage:
        source = UniswapV2RouterSource(provider, "QuickSwap", router, weth, usdc, 10**18)
        raw = await source.fetch_quote()
    """

    def __init__(
        self,
        provider: RPCProvider,
        venue_id: str,
        router_address: str,
        token_in: Token,
        token_out: Token,
        amount_in: int,
    ):
        self.provider = provider
        self.venue_id = venue_id
        self.router_address = router_address
        self.token_in = token_in
        self.token_out = token_out
        self.amount_in = amount_in
        self._call_data = encode_get_amounts_out(
            amount_in, [token_in.address, token_out.address]
        )

    async def fetch_quote(self) -> RawQuote:
        """
        Quote amount_in of token_in through the router.

        Returns:
            RawQuote with the router's first and last path amounts

        Raises:
            QuoteUnavailableError: RPC failure or undecodable response
        """
        try:
            response = await self.provider.eth_call(
                to=self.router_address,
                data=self._call_data,
            )
            amounts = decode_amounts_out(response.result)
        except (InfraError, QuoteError) as e:
            raise QuoteUnavailableError(
                venue_id=self.venue_id,
                message=f"{self.venue_id} quote failed: {e.message}",
                details={"router": self.router_address, "cause": e.code.value},
            )

        quote = RawQuote(
            venue_id=self.venue_id,
            amount_in=amounts[0],
            amount_out=amounts[-1],
        )

        logger.debug(
            f"Quote: {self.venue_id} {self.token_in.symbol}->{self.token_out.symbol} "
            f"{quote.amount_in} -> {quote.amount_out} (latency={response.latency_ms}ms)"
        )

        return quote
