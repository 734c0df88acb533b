"""QuoteStore — abstract, storage-agnostic repository for quotes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from daily_quote.models import QuoteQuery, pin_patch, unpin_patch

if TYPE_CHECKING:
    from datetime import date

    from daily_quote.models import Quote


class QuoteStore(ABC):
    """Abstract base for all quote storage backends.

    Queries are :class:`QuoteQuery` predicates and patches are mappings of
    mutable field names to new values.  Backends maintain ``id``,
    ``created_at`` and ``updated_at`` themselves and report failures as
    :class:`~daily_quote.exceptions.StorageUnavailableError`.

    ``pin`` and ``claim_day`` have default implementations composed from the
    primitives.  Those defaults are not atomic; backends that can do better
    override them.
    """

    @abstractmethod
    async def find_one(self, query: QuoteQuery) -> Quote | None:
        """Return the newest matching quote, or ``None``."""
        ...

    @abstractmethod
    async def find_many(
        self,
        query: QuoteQuery,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Quote]:
        """Return matching quotes, newest first."""
        ...

    @abstractmethod
    async def update_many(self, query: QuoteQuery, patch: Mapping[str, Any]) -> int:
        """Apply *patch* to every match and return how many were updated."""
        ...

    @abstractmethod
    async def insert(self, fields: Mapping[str, Any]) -> Quote:
        """Create a quote from *fields* and return it."""
        ...

    @abstractmethod
    async def update_by_id(self, quote_id: str, patch: Mapping[str, Any]) -> Quote | None:
        """Apply *patch* to one quote.  ``None`` if the id does not exist."""
        ...

    @abstractmethod
    async def delete_by_id(self, quote_id: str) -> bool:
        """Delete one quote.  ``False`` if the id does not exist."""
        ...

    @abstractmethod
    async def count(self, query: QuoteQuery) -> int:
        """Return the number of matching quotes."""
        ...

    async def close(self) -> None:
        """Release backend resources.  No-op by default."""

    # ── pinning ──────────────────────────────────────────────

    async def pin(self, quote_id: str, day: date, *, keep_history: bool) -> Quote | None:
        """Make *quote_id* the only pinned quote, selected on *day*.

        Every other pinned quote is unpinned first; with ``keep_history`` they
        keep their ``selected_on``.  Returns ``None`` (and changes nothing)
        if the id does not exist.
        """
        if await self.find_one(QuoteQuery(id=quote_id)) is None:
            return None
        others = QuoteQuery(is_today=True, exclude_ids=frozenset({quote_id}))
        await self.update_many(others, unpin_patch(keep_history=keep_history))
        return await self.update_by_id(quote_id, pin_patch(day))

    async def claim_day(self, quote_id: str, day: date) -> Quote | None:
        """Pin *quote_id* for *day* unless some quote already holds *day*.

        Returns the quote pinned for *day* afterwards: the existing holder
        if there was one, otherwise *quote_id*.  ``None`` if *quote_id* does
        not exist and nothing holds the day.
        """
        holder = await self.find_one(QuoteQuery(is_today=True, selected_on=day))
        if holder is not None:
            return holder
        return await self.pin(quote_id, day, keep_history=True)
