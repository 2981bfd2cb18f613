"""
dex/adapters/base.py - Quote source interface.
"""

from typing import Protocol, runtime_checkable

from core.models import RawQuote


@runtime_checkable
class QuoteSource(Protocol):
    """
    One venue's quote provider.

    fetch_quote() returns the raw router output for the configured fixed
    trade size, or raises QuoteUnavailableError.
    """

    venue_id: str

    async def fetch_quote(self) -> RawQuote:
        ...
