"""
strategy/normalizer.py - Raw quote -> comparable decimal price.

Routers on different venues return integer amounts in each token's smallest
unit. Rescaling by token decimals turns them into a price of one base token
in quote tokens that can be compared across venues.
"""

from decimal import Decimal

from core.constants import DEFAULT_MIN_PRICE, UINT256_MAX
from core.exceptions import ErrorCode, InvalidPriceError
from core.math import normalize_price, safe_decimal
from core.models import DecimalPrice, RawQuote


def _check_amount(name: str, amount: int, quote: RawQuote) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidPriceError(
            f"{name} must be int, got {type(amount).__name__}",
            {"venue_id": quote.venue_id, name: repr(amount)},
        )
    if amount <= 0:
        raise InvalidPriceError(
            f"{name} must be positive",
            {"venue_id": quote.venue_id, name: str(amount)},
        )
    if amount > UINT256_MAX:
        raise InvalidPriceError(
            f"{name} exceeds uint256",
            {"venue_id": quote.venue_id, name: str(amount)},
        )


def normalize_quote(
    quote: RawQuote,
    base_decimals: int,
    quote_decimals: int,
    min_price: Decimal | int | str = DEFAULT_MIN_PRICE,
) -> DecimalPrice:
    """
    Convert a raw router quote into a DecimalPrice.
    
    Args:
        quote: Raw amounts (amount_in in base units, amount_out in quote units)
        base_decimals: Decimals of the base token (e.g. 18 for WETH)
        quote_decimals: Decimals of the quote token (e.g. 6 for USDC)
        min_price: Sanity floor; prices below it are rejected (0 disables)
    
    Returns:
        DecimalPrice with value > 0
    
    Raises:
        InvalidPriceError: non-positive or oversized amounts, unrepresentable
            price, or price below the sanity floor
    """
    _check_amount("amount_in", quote.amount_in, quote)
    _check_amount("amount_out", quote.amount_out, quote)
    
    try:
        value = normalize_price(
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            decimals_in=base_decimals,
            decimals_out=quote_decimals,
        )
    except InvalidPriceError as e:
        e.details.setdefault("venue_id", quote.venue_id)
        raise
    
    floor = safe_decimal(min_price)
    if floor > 0 and value < floor:
        raise InvalidPriceError(
            f"Price {value} below sanity floor {floor}",
            {"venue_id": quote.venue_id, "price": str(value), "min_price": str(floor)},
            code=ErrorCode.PRICE_SANITY_FAILED,
        )
    
    return DecimalPrice(venue_id=quote.venue_id, value=value)
