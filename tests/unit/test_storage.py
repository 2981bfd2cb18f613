"""
Unit tests for the opportunity store.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from core.exceptions import ErrorCode, StorageError
from core.models import OpportunityRecord
from storage import OpportunityStore


@pytest.fixture
def store(tmp_path):
    store = OpportunityStore(str(tmp_path / "data" / "opportunities.db"))
    yield store
    store.close()


def make_record(profit: str, now, minutes: int = 0) -> OpportunityRecord:
    return OpportunityRecord(
        buy_dex="SushiSwap",
        sell_dex="QuickSwap",
        profit=Decimal(profit),
        timestamp=now + timedelta(minutes=minutes),
    )


class TestOpportunityStore:

    def test_empty(self, store):
        assert store.count() == 0
        assert store.list_records() == []

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "o.db"
        OpportunityStore(str(path)).close()
        assert path.exists()

    def test_append_roundtrip(self, store, fixed_now):
        record = make_record("44.88815", fixed_now)
        row_id = store.append(record)

        assert row_id == 1
        assert store.list_records() == [record]

    def test_profit_precision_preserved(self, store, fixed_now):
        record = make_record("0.000000000000000000123456789", fixed_now)
        store.append(record)
        assert store.list_records()[0].profit == Decimal("0.000000000000000000123456789")

    def test_insertion_order(self, store, fixed_now):
        records = [make_record(str(i), fixed_now, minutes=i) for i in range(1, 4)]
        for record in records:
            store.append(record)

        assert store.count() == 3
        assert [r.profit for r in store.list_records()] == [Decimal("1"), Decimal("2"), Decimal("3")]

    def test_limit_returns_most_recent(self, store, fixed_now):
        for i in range(1, 6):
            store.append(make_record(str(i), fixed_now, minutes=i))

        recent = store.list_records(limit=2)
        assert [r.profit for r in recent] == [Decimal("4"), Decimal("5")]

    def test_reopen_keeps_records(self, tmp_path, fixed_now):
        path = str(tmp_path / "o.db")
        first = OpportunityStore(path)
        first.append(make_record("12.5", fixed_now))
        first.close()

        second = OpportunityStore(path)
        try:
            assert second.count() == 1
            assert second.list_records()[0].timestamp == fixed_now
        finally:
            second.close()

    def test_unwritable_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(StorageError) as exc_info:
            OpportunityStore(str(blocker / "o.db"))
        assert exc_info.value.code == ErrorCode.STORAGE_ERROR
