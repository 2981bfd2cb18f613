# PATH: core/models.py
"""
Core data models for ARBWATCH.

MONEY CONTRACT
==============
- Raw on-chain amounts are int (uint256, token's smallest unit).
- Prices and profits are Decimal, never float.
- to_dict() renders Decimals as strings so JSON logs and storage stay exact.

All models are frozen: a value produced in one stage of a poll cycle cannot be
mutated by a later stage.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from core.math import calculate_bps_diff


@dataclass(frozen=True)
class Token:
    """ERC-20 token metadata needed for rescaling."""
    symbol: str
    address: str
    decimals: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "address": self.address,
            "decimals": self.decimals,
        }


@dataclass(frozen=True)
class TokenPair:
    """Base/quote pair. Prices are quoted as base priced in quote."""
    base: Token
    quote: Token

    @property
    def symbol(self) -> str:
        return f"{self.base.symbol}/{self.quote.symbol}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": self.base.to_dict(),
            "quote": self.quote.to_dict(),
        }


@dataclass(frozen=True)
class RawQuote:
    """
    Unscaled router output for a fixed input size.

    amount_in is in base-token units, amount_out in quote-token units.
    """
    venue_id: str
    amount_in: int
    amount_out: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "venue_id": self.venue_id,
            "amount_in": str(self.amount_in),
            "amount_out": str(self.amount_out),
        }


@dataclass(frozen=True)
class DecimalPrice:
    """Normalized price of one base token in quote tokens."""
    venue_id: str
    value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "venue_id": self.venue_id,
            "value": str(self.value),
        }


@dataclass(frozen=True)
class ArbitrageDecision:
    """Buy on the cheaper venue, sell on the dearer one."""
    buy_venue: str
    sell_venue: str
    gross_diff: Decimal
    buy_price: Decimal
    sell_price: Decimal

    @property
    def spread_bps(self) -> Decimal:
        """Gross spread relative to the buy price, in basis points."""
        return calculate_bps_diff(self.sell_price, self.buy_price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buy_venue": self.buy_venue,
            "sell_venue": self.sell_venue,
            "gross_diff": str(self.gross_diff),
            "buy_price": str(self.buy_price),
            "sell_price": str(self.sell_price),
        }


@dataclass(frozen=True)
class ProfitResult:
    """Net profit after fixed gas cost, and whether it clears the threshold."""
    net_profit: Decimal
    accepted: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "net_profit": str(self.net_profit),
            "accepted": self.accepted,
        }


@dataclass(frozen=True)
class OpportunityRecord:
    """Detected opportunity handed to persistence. Timestamp is UTC."""
    buy_dex: str
    sell_dex: str
    profit: Decimal
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buy_dex": self.buy_dex,
            "sell_dex": self.sell_dex,
            "profit": str(self.profit),
            "timestamp": self.timestamp.isoformat(),
        }
