# PATH: core/constants.py
"""
Constants for ARBWATCH.

Contains enums, numeric limits and configuration defaults.
"""

from decimal import Decimal
from enum import Enum
from typing import Final

# =============================================================================
# NUMERIC LIMITS
# =============================================================================

# Raw router amounts are uint256
UINT256_MAX: Final[int] = 2**256 - 1

# Token decimals accepted by the normalizer (USDC=6, WETH=18, some tokens 24+)
MAX_TOKEN_DECIMALS: Final[int] = 36

# Significant digits kept when rescaling raw quotes into prices
PRICE_PRECISION: Final[int] = 50

# Prices outside 1e-38 .. 1e38 are treated as unrepresentable
MAX_PRICE_EXPONENT: Final[int] = 38

# Display precision for quote-token money (USDC)
MONEY_DISPLAY_DECIMALS: Final[int] = 6

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_CHECK_INTERVAL_SECONDS: Final[int] = 10
DEFAULT_RPC_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_DB_PATH: Final[str] = "data/opportunities.db"
DEFAULT_MIN_PRICE: Final[Decimal] = Decimal("0")

# Environment override for the RPC endpoint list (comma separated)
RPC_URL_ENV_VAR: Final[str] = "ARBWATCH_RPC_URL"


class DexType(str, Enum):
    """DEX router families ARBWATCH can quote."""
    UNISWAP_V2 = "UNISWAP_V2"


class CycleStatus(str, Enum):
    """
    Outcome of a single poll cycle.

    SKIPPED_* cycles never reached the evaluator; the others were evaluated.
    """
    OPPORTUNITY = "OPPORTUNITY"                              # accepted, record built
    BELOW_THRESHOLD = "BELOW_THRESHOLD"                      # evaluated, net profit too small
    NO_OPPORTUNITY = "NO_OPPORTUNITY"                        # evaluated, equal prices
    SKIPPED_INVALID_PRICE = "SKIPPED_INVALID_PRICE"          # normalizer rejected a quote
    SKIPPED_QUOTE_UNAVAILABLE = "SKIPPED_QUOTE_UNAVAILABLE"  # quote source failed

    @property
    def evaluated(self) -> bool:
        return not self.value.startswith("SKIPPED_")
