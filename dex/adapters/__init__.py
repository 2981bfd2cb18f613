"""
dex/adapters/ - DEX-specific quoting adapters.

Adapters:
- uniswap_v2: Uniswap V2 style router (getAmountsOut) adapter
"""

from dex.adapters.base import QuoteSource
from dex.adapters.uniswap_v2 import UniswapV2RouterSource

__all__ = [
    "QuoteSource",
    "UniswapV2RouterSource",
]
