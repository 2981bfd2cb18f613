"""
strategy/simulator.py - Gas-adjusted profit and threshold filter.

gas_cost and threshold are in quote-token units (e.g. USDC), the same unit
as ArbitrageDecision.gross_diff.
"""

from decimal import Decimal, localcontext

from core.constants import PRICE_PRECISION
from core.exceptions import ValidationError
from core.math import safe_decimal
from core.models import ArbitrageDecision, ProfitResult


def simulate_profit(
    decision: ArbitrageDecision,
    gas_cost: Decimal | int | str,
    threshold: Decimal | int | str,
) -> ProfitResult:
    """
    Subtract a fixed gas cost from the gross spread.
    
    net_profit may be negative. A profit exactly equal to the threshold is
    rejected.
    
    Raises:
        ValidationError: negative gas_cost or float inputs
    """
    gas = safe_decimal(gas_cost)
    min_profit = safe_decimal(threshold)
    
    if gas < 0:
        raise ValidationError(
            "gas_cost must be >= 0",
            {"gas_cost": str(gas)},
        )
    
    with localcontext() as ctx:
        ctx.prec = PRICE_PRECISION
        net_profit = decision.gross_diff - gas
    
    return ProfitResult(
        net_profit=net_profit,
        accepted=net_profit > min_profit,
    )
