"""QuoteService — the operation surface consumed by a transport layer."""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from daily_quote._internal.clock import Clock, DateKeyPolicy, SystemClock
from daily_quote.admin import QuoteAdmin
from daily_quote.schemas import QuoteOut, TodayQuoteOut
from daily_quote.selection import DailySelector
from daily_quote.stores.memory import InMemoryStore

if TYPE_CHECKING:
    from daily_quote.config import Settings
    from daily_quote.models import Quote
    from daily_quote.stores.base import QuoteStore


class QuoteService:
    """Wires the selector and the admin surface to one shared store.

    Every operation returns a JSON-serializable success envelope
    (``{"success": True, "data": ...}``) or raises a
    :class:`~daily_quote.exceptions.QuoteError` for the caller to turn into
    a transport status (see ``QuoteError.status``).  Authorization of the
    ``admin_*`` operations is the caller's job.

    Parameters:
        store:    Persistence backend.  Defaults to :class:`InMemoryStore`.
        selector: Selection policy.  Built from the other arguments if omitted.
        admin:    Admin surface.  Built from the other arguments if omitted.
        clock:    Injectable clock for testing.
        date_keys: Timezone policy shared by selector and admin.
    """

    def __init__(
        self,
        store: QuoteStore | None = None,
        *,
        selector: DailySelector | None = None,
        admin: QuoteAdmin | None = None,
        clock: Clock | None = None,
        date_keys: DateKeyPolicy | None = None,
    ) -> None:
        self._store: QuoteStore = store or InMemoryStore()
        clock = clock or SystemClock()
        date_keys = date_keys or DateKeyPolicy()
        self.selector = selector or DailySelector(self._store, clock=clock, date_keys=date_keys)
        self.admin = admin or QuoteAdmin(self._store, clock=clock, date_keys=date_keys)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: QuoteStore,
        *,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> QuoteService:
        """Build a service whose selector and admin follow *settings*."""
        date_keys = DateKeyPolicy.from_name(settings.timezone)
        selector = DailySelector(
            store,
            clock=clock,
            date_keys=date_keys,
            window_days=settings.exclusion_window_days,
            rng=rng,
            strict=settings.strict_selection,
        )
        admin = QuoteAdmin(
            store,
            clock=clock,
            date_keys=date_keys,
            default_page_size=settings.default_page_size,
        )
        return cls(store, selector=selector, admin=admin, clock=clock, date_keys=date_keys)

    @property
    def store(self) -> QuoteStore:
        return self._store

    async def close(self) -> None:
        await self._store.close()

    # ── public ───────────────────────────────────────────────

    async def get_today(self) -> dict[str, Any]:
        quote = await self.selector.get_or_select_today()
        return _ok(TodayQuoteOut.from_quote(quote).model_dump(mode="json"))

    # ── admin ────────────────────────────────────────────────

    async def admin_list(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        items, pagination = await self.admin.list(params)
        envelope = _ok([_dump(q) for q in items])
        envelope["pagination"] = pagination.model_dump()
        return envelope

    async def admin_get(self, quote_id: str) -> dict[str, Any]:
        return _ok(_dump(await self.admin.get(quote_id)))

    async def admin_create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return _ok(_dump(await self.admin.create(data)))

    async def admin_update(self, quote_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        return _ok(_dump(await self.admin.update(quote_id, data)))

    async def admin_set_today(self, quote_id: str) -> dict[str, Any]:
        return _ok(_dump(await self.admin.set_as_today(quote_id)))

    async def admin_delete(self, quote_id: str) -> dict[str, Any]:
        await self.admin.delete(quote_id)
        return {"success": True, "message": "Quote deleted successfully"}

    async def admin_stats(self) -> dict[str, Any]:
        return _ok((await self.admin.stats()).model_dump())

    async def admin_import(self, rows: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        return _ok((await self.admin.import_quotes(rows)).model_dump())


def _dump(quote: Quote) -> dict[str, Any]:
    return QuoteOut.from_quote(quote).model_dump(mode="json")


def _ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}
