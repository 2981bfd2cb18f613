# PATH: core/math.py
"""
core/math.py - Mathematical utilities.

CRITICAL: No float allowed in quoting/price/PnL.
All monetary values use int (raw token units) or Decimal.
"""

from decimal import Decimal, DecimalException, InvalidOperation, localcontext

from core.constants import MAX_PRICE_EXPONENT, MAX_TOKEN_DECIMALS, PRICE_PRECISION
from core.exceptions import InvalidPriceError, ValidationError

BPS_DENOMINATOR = Decimal("10000")


# =============================================================================
# BASIS POINTS
# =============================================================================

def calculate_bps_diff(value_a: Decimal, value_b: Decimal) -> Decimal:
    """
    Calculate basis points difference between two values.
    
    Returns: (value_a - value_b) / value_b * 10000
    """
    if value_b == 0:
        return Decimal("0")
    return ((value_a - value_b) / value_b) * BPS_DENOMINATOR


# =============================================================================
# TOKEN AMOUNT CONVERSIONS
# =============================================================================

def validate_decimals(decimals: int) -> int:
    """Check that a token decimals value is usable for rescaling."""
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValidationError(
            f"Token decimals must be int, got {type(decimals).__name__}",
            {"decimals": decimals},
        )
    if decimals < 0 or decimals > MAX_TOKEN_DECIMALS:
        raise ValidationError(
            f"Invalid decimals: {decimals}",
            {"decimals": decimals, "max": MAX_TOKEN_DECIMALS},
        )
    return decimals


def wei_to_human(wei: int, decimals: int) -> Decimal:
    """
    Convert raw token amount to human-readable Decimal.
    
    Example: wei_to_human(1000000, 6) -> Decimal('1')  # 1 USDC
    """
    validate_decimals(decimals)
    return Decimal(wei).scaleb(-decimals)


# =============================================================================
# SAFE CONVERSIONS (NO FLOAT)
# =============================================================================

def safe_decimal(value: int | str | Decimal) -> Decimal:
    """
    Safely convert value to Decimal.
    
    Raises ValidationError if float is passed or conversion fails.
    """
    if isinstance(value, float):
        raise ValidationError(
            "Float values are not allowed. Use int, str, or Decimal.",
            {"value": value, "type": type(value).__name__}
        )
    
    try:
        result = Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(
            f"Cannot convert to Decimal: {value}",
            {"value": value, "type": type(value).__name__, "error": str(e)}
        )
    
    if not result.is_finite():
        raise ValidationError(
            f"Non-finite Decimal: {value}",
            {"value": str(value)}
        )
    return result


# =============================================================================
# PRICE CALCULATIONS
# =============================================================================

def normalize_price(
    amount_in: int,
    amount_out: int,
    decimals_in: int,
    decimals_out: int,
) -> Decimal:
    """
    Price of one unit of token_in expressed in token_out.
    
    Both raw amounts are rescaled by their token decimals before dividing:
    
        price = (amount_out / 10**decimals_out) / (amount_in / 10**decimals_in)
              = (amount_out * 10**decimals_in) / (amount_in * 10**decimals_out)
    
    The right-hand form is evaluated from exact integers, so the only rounding
    is the final division at PRICE_PRECISION significant digits.
    
    Example: normalize_price(10**18, 4147445571, 18, 6) -> Decimal('4147.445571')
    
    Raises:
        InvalidPriceError: zero amount_in, or result outside 1e-38 .. 1e38
        ValidationError: bad decimals
    """
    validate_decimals(decimals_in)
    validate_decimals(decimals_out)
    
    numerator = amount_out * 10**decimals_in
    denominator = amount_in * 10**decimals_out
    
    if denominator == 0:
        raise InvalidPriceError(
            "Cannot price a quote with zero amount_in",
            {"amount_in": str(amount_in), "amount_out": str(amount_out)},
        )
    
    try:
        with localcontext() as ctx:
            ctx.prec = PRICE_PRECISION
            price = Decimal(numerator) / Decimal(denominator)
    except DecimalException as e:
        raise InvalidPriceError(
            f"Price not representable: {type(e).__name__}",
            {"amount_in": str(amount_in), "amount_out": str(amount_out)},
        )
    
    if price != 0 and abs(price.adjusted()) > MAX_PRICE_EXPONENT:
        raise InvalidPriceError(
            f"Price magnitude out of range: 1e{price.adjusted()}",
            {
                "amount_in": str(amount_in),
                "amount_out": str(amount_out),
                "max_exponent": MAX_PRICE_EXPONENT,
            },
        )
    
    return price

