"""
strategy/cycle.py - One poll cycle: normalize -> evaluate -> simulate -> record.

evaluate_cycle() never raises for bad market data. Every path ends in a
CycleOutcome whose status tells the operator which stage stopped the cycle:

    SKIPPED_QUOTE_UNAVAILABLE  quote source failed (see skipped_outcome)
    SKIPPED_INVALID_PRICE      a raw quote could not be normalized
    NO_OPPORTUNITY             both venues report the same price
    BELOW_THRESHOLD            net profit did not clear the threshold
    OPPORTUNITY                record built, ready for persistence

Cycles share no state; a skipped cycle has no effect on the next one.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from core.constants import CycleStatus, DEFAULT_MIN_PRICE
from core.exceptions import ArbWatchError, InvalidPriceError, ValidationError
from core.format_money import format_bps, format_money
from core.models import (
    ArbitrageDecision,
    DecimalPrice,
    OpportunityRecord,
    ProfitResult,
    RawQuote,
    TokenPair,
)
from core.time import Clock, now_utc
from strategy.evaluator import evaluate_prices
from strategy.normalizer import normalize_quote
from strategy.record import build_opportunity_record
from strategy.simulator import simulate_profit


@dataclass(frozen=True)
class CycleOutcome:
    """Result of a single poll cycle."""
    status: CycleStatus
    prices: tuple[DecimalPrice, ...] = ()
    decision: Optional[ArbitrageDecision] = None
    profit: Optional[ProfitResult] = None
    record: Optional[OpportunityRecord] = None
    reason: Dict[str, Any] = field(default_factory=dict)

    def to_context(self) -> Dict[str, Any]:
        """Flat dict for extra={"context": ...} logging."""
        context: Dict[str, Any] = {"status": self.status.value}
        for price in self.prices:
            context[f"price_{price.venue_id}"] = format_money(price.value)
        if self.decision is not None:
            context["buy_venue"] = self.decision.buy_venue
            context["sell_venue"] = self.decision.sell_venue
            context["gross_diff"] = format_money(self.decision.gross_diff)
            context["spread_bps"] = format_bps(self.decision.spread_bps)
        if self.profit is not None:
            context["net_profit"] = format_money(self.profit.net_profit)
        if self.reason:
            context["reason"] = self.reason
        return context


def skipped_outcome(error: ArbWatchError) -> CycleOutcome:
    """Outcome for a cycle whose quotes could not be fetched."""
    return CycleOutcome(
        status=CycleStatus.SKIPPED_QUOTE_UNAVAILABLE,
        reason=error.to_dict(),
    )


def evaluate_cycle(
    quotes: Sequence[RawQuote],
    pair: TokenPair,
    gas_cost: Decimal | int | str,
    threshold: Decimal | int | str,
    clock: Clock = now_utc,
    min_price: Decimal | int | str = DEFAULT_MIN_PRICE,
) -> CycleOutcome:
    """
    Run the decision engine over one raw quote per venue.

    Args:
        quotes: Exactly two raw quotes from distinct venues, any order
        pair: Base/quote token metadata used for rescaling
        gas_cost: Fixed transaction cost in quote-token units
        threshold: Minimum net profit (exclusive) for a record
        clock: Time source read only when a record is built
        min_price: Price sanity floor passed to the normalizer

    Raises:
        ValidationError: caller passed the wrong number of quotes, duplicate
            venues, or invalid gas/threshold values
    """
    if len(quotes) != 2:
        raise ValidationError(
            f"Expected quotes from exactly two venues, got {len(quotes)}",
            {"venues": [q.venue_id for q in quotes]},
        )

    try:
        prices = tuple(
            normalize_quote(
                quote,
                base_decimals=pair.base.decimals,
                quote_decimals=pair.quote.decimals,
                min_price=min_price,
            )
            for quote in quotes
        )
    except InvalidPriceError as e:
        return CycleOutcome(
            status=CycleStatus.SKIPPED_INVALID_PRICE,
            reason=e.to_dict(),
        )

    decision = evaluate_prices(prices[0], prices[1])
    if decision is None:
        return CycleOutcome(status=CycleStatus.NO_OPPORTUNITY, prices=prices)

    profit = simulate_profit(decision, gas_cost=gas_cost, threshold=threshold)
    if not profit.accepted:
        return CycleOutcome(
            status=CycleStatus.BELOW_THRESHOLD,
            prices=prices,
            decision=decision,
            profit=profit,
        )

    record = build_opportunity_record(decision, profit, clock=clock)
    return CycleOutcome(
        status=CycleStatus.OPPORTUNITY,
        prices=prices,
        decision=decision,
        profit=profit,
        record=record,
    )
