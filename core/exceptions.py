# PATH: core/exceptions.py
"""
Typed exceptions for ARBWATCH.

Every error carries an ErrorCode so that log lines and cycle outcomes can be
grouped without parsing messages. All of them are cycle-scoped: the poll loop
logs them and moves on to the next cycle.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Canonical error codes."""
    # Price normalization
    INVALID_PRICE = "INVALID_PRICE"
    PRICE_SANITY_FAILED = "PRICE_SANITY_FAILED"

    # Quote acquisition
    QUOTE_UNAVAILABLE = "QUOTE_UNAVAILABLE"
    QUOTE_REVERT = "QUOTE_REVERT"

    # Infrastructure
    INFRA_RPC_ERROR = "INFRA_RPC_ERROR"
    INFRA_TIMEOUT = "INFRA_TIMEOUT"

    # Caller / config errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RECORD_NOT_ACCEPTED = "RECORD_NOT_ACCEPTED"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Persistence
    STORAGE_ERROR = "STORAGE_ERROR"

    UNKNOWN = "UNKNOWN"


class ArbWatchError(Exception):
    """Base exception for ARBWATCH."""

    def __init__(
        self,
        code: ErrorCode = ErrorCode.UNKNOWN,
        message: str = "",
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidPriceError(ArbWatchError):
    """A raw quote cannot be turned into a comparable price."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        code: ErrorCode = ErrorCode.INVALID_PRICE,
    ):
        super().__init__(code, message, details)


class QuoteUnavailableError(ArbWatchError):
    """A venue could not produce a quote this cycle."""

    def __init__(
        self,
        venue_id: str,
        message: str,
        details: Optional[dict] = None,
        code: ErrorCode = ErrorCode.QUOTE_UNAVAILABLE,
    ):
        super().__init__(code, message, {"venue_id": venue_id, **(details or {})})
        self.venue_id = venue_id


class QuoteError(ArbWatchError):
    """A quote call reverted or returned undecodable data."""

    def __init__(
        self,
        message: str = "",
        code: ErrorCode = ErrorCode.QUOTE_REVERT,
        details: Optional[dict] = None,
    ):
        super().__init__(code, message, details)


class InfraError(ArbWatchError):
    """Infrastructure-related errors (RPC, timeouts)."""
    pass


class ValidationError(ArbWatchError):
    """Invalid input passed by a caller."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(code, message, details)


class ConfigError(ArbWatchError):
    """Configuration file missing or invalid."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(ErrorCode.CONFIG_INVALID, message, details)


class StorageError(ArbWatchError):
    """Opportunity persistence failed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(ErrorCode.STORAGE_ERROR, message, details)
