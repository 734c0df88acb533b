"""daily_quote — picks one quote per day and keeps it from repeating.

Today's quote is chosen lazily on the first read of a day, pinned in the
store, and excluded from selection for the following 30 days.  Admin
operations can inspect or override the pin at any time without ever
leaving more than one quote pinned.
"""

from daily_quote._internal.clock import DateKeyPolicy, FixedClock, SystemClock
from daily_quote.admin import QuoteAdmin
from daily_quote.exceptions import (
    ConfigError,
    NoQuotesAvailableError,
    NotFoundError,
    QuoteError,
    StorageUnavailableError,
    ValidationError,
)
from daily_quote.models import Quote, QuoteQuery
from daily_quote.selection import DailySelector
from daily_quote.service import QuoteService

__all__ = [
    "ConfigError",
    "DailySelector",
    "DateKeyPolicy",
    "FixedClock",
    "NoQuotesAvailableError",
    "NotFoundError",
    "Quote",
    "QuoteAdmin",
    "QuoteError",
    "QuoteQuery",
    "QuoteService",
    "StorageUnavailableError",
    "SystemClock",
    "ValidationError",
]
