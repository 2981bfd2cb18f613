# PATH: strategy/__init__.py
"""Strategy package for ARBWATCH: price normalization and arbitrage decisions."""

from strategy.cycle import CycleOutcome, evaluate_cycle, skipped_outcome
from strategy.evaluator import evaluate_prices
from strategy.normalizer import normalize_quote
from strategy.record import build_opportunity_record
from strategy.simulator import simulate_profit

__all__ = [
    "CycleOutcome",
    "build_opportunity_record",
    "evaluate_cycle",
    "evaluate_prices",
    "normalize_quote",
    "simulate_profit",
    "skipped_outcome",
]
