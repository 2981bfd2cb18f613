# PATH: core/format_money.py
"""
Safe money formatting utilities for ARBWATCH.

No float money: values are str, int or Decimal. Used for console and log
output only; stored values keep full precision.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

from core.constants import MONEY_DISPLAY_DECIMALS


def format_money(value: Union[str, Decimal, int, None], decimals: int = MONEY_DISPLAY_DECIMALS) -> str:
    """
    Safely format a money value to string with specified decimal places.
    
    Uses ROUND_HALF_UP (0.005 -> 0.01 with 2 decimals).
    Never raises on valid numeric input.
    
    Example:
        >>> format_money("44.88815")
        '44.888150'
        >>> format_money(None)
        '0.000000'
    """
    zero = f"0.{'0' * decimals}" if decimals > 0 else "0"
    if value is None:
        return zero
    
    try:
        if isinstance(value, str):
            if not value.strip():
                return zero
            dec_value = Decimal(value)
        elif isinstance(value, bool):
            # bool is a subclass of int
            dec_value = Decimal(1 if value else 0)
        else:
            dec_value = Decimal(value)
        
        with localcontext() as ctx:
            ctx.prec = 80
            quantize_str = "0." + "0" * decimals if decimals > 0 else "0"
            rounded = dec_value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)
        
        return f"{rounded:.{decimals}f}"
    
    except (InvalidOperation, ValueError, TypeError):
        return zero


def format_bps(value: Union[str, Decimal, int, None]) -> str:
    """Format basis points value, e.g. "121.75"."""
    return format_money(value, decimals=2)
