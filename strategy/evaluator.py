"""
strategy/evaluator.py - Buy/sell direction from two venue prices.
"""

from decimal import localcontext
from typing import Optional

from core.constants import PRICE_PRECISION
from core.exceptions import ValidationError
from core.models import ArbitrageDecision, DecimalPrice


def evaluate_prices(
    first: DecimalPrice,
    second: DecimalPrice,
) -> Optional[ArbitrageDecision]:
    """
    Pick the buy and sell venue for a pair of prices.
    
    The cheaper venue is the buy side and the dearer one the sell side, so
    gross_diff is never negative. Swapping the arguments yields the same
    decision.
    
    Returns:
        ArbitrageDecision, or None when both prices are equal (no opportunity)
    
    Raises:
        ValidationError: both prices come from the same venue
    """
    if first.venue_id == second.venue_id:
        raise ValidationError(
            f"Cannot compare venue {first.venue_id} with itself",
            {"venue_id": first.venue_id},
        )
    
    if first.value == second.value:
        return None
    
    buy, sell = (first, second) if first.value < second.value else (second, first)
    
    with localcontext() as ctx:
        ctx.prec = PRICE_PRECISION
        gross_diff = sell.value - buy.value
    
    return ArbitrageDecision(
        buy_venue=buy.venue_id,
        sell_venue=sell.venue_id,
        gross_diff=gross_diff,
        buy_price=buy.value,
        sell_price=sell.value,
    )
