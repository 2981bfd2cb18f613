"""
strategy/record.py - Build the persisted opportunity record.
"""

from datetime import timezone

from core.exceptions import ErrorCode, ValidationError
from core.models import ArbitrageDecision, OpportunityRecord, ProfitResult
from core.time import Clock, is_aware, now_utc


def build_opportunity_record(
    decision: ArbitrageDecision,
    result: ProfitResult,
    clock: Clock = now_utc,
) -> OpportunityRecord:
    """
    Assemble an OpportunityRecord for an accepted result.
    
    The clock is read here, not at evaluation time, so the timestamp marks
    the moment the opportunity was detected.
    
    Raises:
        ValidationError: result not accepted, or clock returned a naive datetime
    """
    if not result.accepted:
        raise ValidationError(
            "Opportunity record requires an accepted profit result",
            {"net_profit": str(result.net_profit)},
            code=ErrorCode.RECORD_NOT_ACCEPTED,
        )
    
    timestamp = clock()
    if not is_aware(timestamp):
        raise ValidationError(
            "Clock must return a timezone-aware datetime",
            {"timestamp": timestamp.isoformat()},
        )
    
    return OpportunityRecord(
        buy_dex=decision.buy_venue,
        sell_dex=decision.sell_venue,
        profit=result.net_profit,
        timestamp=timestamp.astimezone(timezone.utc),
    )
