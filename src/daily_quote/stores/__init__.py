"""Storage backends for quotes and the daily pin."""

from daily_quote.stores.base import QuoteStore
from daily_quote.stores.memory import InMemoryStore
from daily_quote.stores.sqlite import SQLiteStore

__all__ = ["InMemoryStore", "QuoteStore", "SQLiteStore"]
