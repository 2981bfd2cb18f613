"""
tests/unit/test_evaluator.py - Buy/sell direction selection.
"""

import pytest
from decimal import Decimal

from core.exceptions import ValidationError
from core.models import DecimalPrice
from strategy.evaluator import evaluate_prices


QUICKSWAP = DecimalPrice("QuickSwap", Decimal("4147.445571"))
SUSHISWAP = DecimalPrice("SushiSwap", Decimal("4097.557421"))


class TestDirection:

    def test_buy_low_sell_high(self):
        decision = evaluate_prices(QUICKSWAP, SUSHISWAP)
        assert decision.buy_venue == "SushiSwap"
        assert decision.sell_venue == "QuickSwap"
        assert decision.gross_diff == Decimal("49.888150")
        assert decision.buy_price == Decimal("4097.557421")
        assert decision.sell_price == Decimal("4147.445571")

    def test_symmetric_under_swap(self):
        assert evaluate_prices(QUICKSWAP, SUSHISWAP) == evaluate_prices(SUSHISWAP, QUICKSWAP)

    @pytest.mark.parametrize(
        "low,high",
        [
            ("0.000001", "0.000002"),
            ("1", "1.000000000000000000000001"),
            ("4097.557421", "4147.445571"),
            ("99999999", "100000000"),
        ],
    )
    def test_lower_price_is_always_buy(self, low, high):
        a = DecimalPrice("A", Decimal(low))
        b = DecimalPrice("B", Decimal(high))
        for first, second in ((a, b), (b, a)):
            decision = evaluate_prices(first, second)
            assert decision.buy_venue == "A"
            assert decision.sell_venue == "B"
            assert decision.gross_diff > 0

    def test_spread_bps(self):
        decision = evaluate_prices(
            DecimalPrice("A", Decimal("100")),
            DecimalPrice("B", Decimal("101")),
        )
        assert decision.spread_bps == Decimal("100")


class TestNoOpportunity:

    def test_equal_prices(self):
        a = DecimalPrice("A", Decimal("4147.445571"))
        b = DecimalPrice("B", Decimal("4147.445571"))
        assert evaluate_prices(a, b) is None

    def test_equal_values_different_exponent(self):
        """4147.4 and 4147.400000 are the same price."""
        a = DecimalPrice("A", Decimal("4147.4"))
        b = DecimalPrice("B", Decimal("4147.400000"))
        assert evaluate_prices(a, b) is None


class TestCallerErrors:

    def test_same_venue_rejected(self):
        with pytest.raises(ValidationError):
            evaluate_prices(QUICKSWAP, DecimalPrice("QuickSwap", Decimal("1")))


class TestPrecision:

    def test_gross_diff_keeps_all_digits(self):
        """36-decimal quote tokens give prices longer than the default 28 digits."""
        low = DecimalPrice("A", Decimal("4000"))
        high = DecimalPrice("B", Decimal("4015.000000000000000000000000000000000001"))
        decision = evaluate_prices(low, high)
        assert decision.gross_diff == Decimal("15.000000000000000000000000000000000001")
