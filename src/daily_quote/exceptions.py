"""Custom exceptions for the daily_quote package."""

from __future__ import annotations

from typing import ClassVar


class QuoteError(Exception):
    """Base exception for all daily-quote errors.

    ``status`` is a transport hint (HTTP-like) for the layer that turns
    errors into responses.  The engine itself never interprets it.
    """

    status: ClassVar[int] = 500


class NotFoundError(QuoteError):
    """Raised when a referenced quote id does not exist."""

    status = 404

    def __init__(self, quote_id: str) -> None:
        self.quote_id = quote_id
        super().__init__(f"Quote not found: {quote_id!r}")


class ValidationError(QuoteError):
    """Raised when input fails validation.  Nothing has been written."""

    status = 400

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Invalid '{field}': {message}")


class NoQuotesAvailableError(QuoteError):
    """Raised when a selection is attempted against an empty collection."""

    status = 503

    def __init__(self) -> None:
        super().__init__("No quotes available to select from")


class StorageUnavailableError(QuoteError):
    """Raised when a store operation fails."""

    status = 503

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ConfigError(QuoteError):
    """Raised when the engine is misconfigured."""

    def __init__(self, setting: str, message: str) -> None:
        self.setting = setting
        super().__init__(f"Setting '{setting}' misconfigured: {message}")
