"""InMemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import replace
from itertools import count
from typing import TYPE_CHECKING, Any

from daily_quote._internal.clock import Clock, SystemClock
from daily_quote.models import Quote, QuoteQuery, check_patch, pin_patch, unpin_patch
from daily_quote.stores.base import QuoteStore

if TYPE_CHECKING:
    from datetime import date


class InMemoryStore(QuoteStore):
    """In-memory store keyed by quote id.  Data is lost on process exit.

    No method awaits anything, so every call (``pin`` and ``claim_day``
    included) runs to completion without yielding to the event loop.

    Parameters:
        clock: Source of ``created_at`` / ``updated_at``.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._data: dict[str, Quote] = {}
        self._order: dict[str, int] = {}
        self._seq = count()

    def _sorted(self, query: QuoteQuery) -> list[Quote]:
        matches = [q for q in self._data.values() if query.matches(q)]
        return sorted(matches, key=lambda q: (q.created_at, self._order[q.id]), reverse=True)

    def _apply(self, quote: Quote, patch: dict[str, Any]) -> Quote:
        updated = replace(quote, **patch, updated_at=self._clock.now())
        self._data[quote.id] = updated
        return updated

    # ── QuoteStore ───────────────────────────────────────────

    async def find_one(self, query: QuoteQuery) -> Quote | None:
        matches = self._sorted(query)
        return matches[0] if matches else None

    async def find_many(
        self,
        query: QuoteQuery,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Quote]:
        matches = self._sorted(query)
        end = None if limit is None else offset + limit
        return matches[offset:end]

    async def update_many(self, query: QuoteQuery, patch: Mapping[str, Any]) -> int:
        values = check_patch(patch)
        targets = [q for q in self._data.values() if query.matches(q)]
        for quote in targets:
            self._apply(quote, values)
        return len(targets)

    async def insert(self, fields: Mapping[str, Any]) -> Quote:
        values = check_patch(fields)
        now = self._clock.now()
        quote = Quote(id=uuid.uuid4().hex, created_at=now, updated_at=now, **values)
        self._data[quote.id] = quote
        self._order[quote.id] = next(self._seq)
        return quote

    async def update_by_id(self, quote_id: str, patch: Mapping[str, Any]) -> Quote | None:
        values = check_patch(patch)
        quote = self._data.get(quote_id)
        if quote is None:
            return None
        return self._apply(quote, values)

    async def delete_by_id(self, quote_id: str) -> bool:
        self._order.pop(quote_id, None)
        return self._data.pop(quote_id, None) is not None

    async def count(self, query: QuoteQuery) -> int:
        return sum(1 for q in self._data.values() if query.matches(q))

    # ── pinning ──────────────────────────────────────────────

    async def pin(self, quote_id: str, day: date, *, keep_history: bool) -> Quote | None:
        target = self._data.get(quote_id)
        if target is None:
            return None
        release = unpin_patch(keep_history=keep_history)
        for quote in list(self._data.values()):
            if quote.is_today and quote.id != quote_id:
                self._apply(quote, release)
        return self._apply(target, pin_patch(day))

    async def claim_day(self, quote_id: str, day: date) -> Quote | None:
        for quote in self._data.values():
            if quote.is_today and quote.selected_on == day:
                return quote
        return await self.pin(quote_id, day, keep_history=True)
