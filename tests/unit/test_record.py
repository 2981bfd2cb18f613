"""
tests/unit/test_record.py - Opportunity record builder.
"""

import dataclasses
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.exceptions import ErrorCode, ValidationError
from core.models import ArbitrageDecision, ProfitResult
from strategy.record import build_opportunity_record


@pytest.fixture
def decision():
    return ArbitrageDecision(
        buy_venue="SushiSwap",
        sell_venue="QuickSwap",
        gross_diff=Decimal("49.888150"),
        buy_price=Decimal("4097.557421"),
        sell_price=Decimal("4147.445571"),
    )


@pytest.fixture
def accepted():
    return ProfitResult(net_profit=Decimal("44.88815"), accepted=True)


class TestBuildRecord:

    def test_fields(self, decision, accepted, fixed_clock, fixed_now):
        record = build_opportunity_record(decision, accepted, clock=fixed_clock)
        assert record.buy_dex == "SushiSwap"
        assert record.sell_dex == "QuickSwap"
        assert record.profit == Decimal("44.88815")
        assert record.timestamp == fixed_now

    def test_clock_read_at_build_time(self, decision, accepted):
        calls = []

        def clock():
            calls.append(1)
            return datetime(2026, 1, 1, tzinfo=timezone.utc)

        build_opportunity_record(decision, accepted, clock=clock)
        assert len(calls) == 1

    def test_timestamp_converted_to_utc(self, decision, accepted):
        kyiv = timezone(timedelta(hours=2))
        record = build_opportunity_record(
            decision, accepted, clock=lambda: datetime(2026, 1, 1, 14, 0, tzinfo=kyiv)
        )
        assert record.timestamp == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert record.timestamp.utcoffset() == timedelta(0)

    def test_default_clock_is_utc(self, decision, accepted):
        record = build_opportunity_record(decision, accepted)
        assert record.timestamp.tzinfo is not None
        assert record.timestamp.utcoffset() == timedelta(0)

    def test_record_is_immutable(self, decision, accepted, fixed_clock):
        record = build_opportunity_record(decision, accepted, clock=fixed_clock)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.profit = Decimal("0")

    def test_to_dict(self, decision, accepted, fixed_clock):
        data = build_opportunity_record(decision, accepted, clock=fixed_clock).to_dict()
        assert data == {
            "buy_dex": "SushiSwap",
            "sell_dex": "QuickSwap",
            "profit": "44.88815",
            "timestamp": "2026-01-22T17:14:26+00:00",
        }


class TestCallerErrors:

    def test_rejected_result(self, decision, fixed_clock):
        rejected = ProfitResult(net_profit=Decimal("3"), accepted=False)
        with pytest.raises(ValidationError) as exc_info:
            build_opportunity_record(decision, rejected, clock=fixed_clock)
        assert exc_info.value.code == ErrorCode.RECORD_NOT_ACCEPTED

    def test_naive_clock(self, decision, accepted):
        with pytest.raises(ValidationError):
            build_opportunity_record(decision, accepted, clock=lambda: datetime(2026, 1, 1))
