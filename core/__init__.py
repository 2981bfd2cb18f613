"""
core - Core utilities and models for ARBWATCH.

This package contains:
- models.py: Data models (RawQuote, DecimalPrice, ArbitrageDecision, ...)
- constants.py: Enums, limits and defaults
- exceptions.py: Typed exceptions with error codes
- math.py: Safe mathematical utilities (no float)
- format_money.py: Display formatting for money values
- time.py: Clock helpers
- logging.py: Structured JSON / console logging
"""

from core.constants import (
    CycleStatus,
    DexType,
    UINT256_MAX,
)
from core.exceptions import (
    ArbWatchError,
    ConfigError,
    ErrorCode,
    InfraError,
    InvalidPriceError,
    QuoteUnavailableError,
    StorageError,
    ValidationError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    ArbitrageDecision,
    DecimalPrice,
    OpportunityRecord,
    ProfitResult,
    RawQuote,
    Token,
    TokenPair,
)

__all__ = [
    # Constants
    "CycleStatus",
    "DexType",
    "UINT256_MAX",
    # Exceptions
    "ArbWatchError",
    "ConfigError",
    "ErrorCode",
    "InfraError",
    "InvalidPriceError",
    "QuoteUnavailableError",
    "StorageError",
    "ValidationError",
    # Models
    "ArbitrageDecision",
    "DecimalPrice",
    "OpportunityRecord",
    "ProfitResult",
    "RawQuote",
    "Token",
    "TokenPair",
    # Logging
    "get_logger",
    "setup_logging",
]
