"""QuoteAdmin — administrator CRUD and manual overrides of the daily pin."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from daily_quote._internal.clock import Clock, DateKeyPolicy, SystemClock
from daily_quote.exceptions import NotFoundError
from daily_quote.models import QuoteQuery, unpin_patch
from daily_quote.schemas import (
    ImportReport,
    ImportRow,
    Pagination,
    QuoteCreate,
    QuoteListParams,
    QuoteStats,
    QuoteUpdate,
    parse,
)

if TYPE_CHECKING:
    from daily_quote.models import Quote
    from daily_quote.stores.base import QuoteStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class QuoteAdmin:
    """Admin operations over the quote collection.

    Callers are expected to have authorized the administrator already.
    Anything that turns a pin on goes through :meth:`QuoteStore.pin`, which
    clears every other pin in the same step.  A pin removed by an admin also
    loses its ``selected_on``, so the quote is not held out of future
    selections for a day it was overridden on.

    Parameters:
        store:             Quote repository.
        clock:             Injectable clock for testing.
        date_keys:         Timezone policy that turns instants into DateKeys.
        default_page_size: Page size used when a list request omits one.
    """

    def __init__(
        self,
        store: QuoteStore,
        *,
        clock: Clock | None = None,
        date_keys: DateKeyPolicy | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._date_keys = date_keys or DateKeyPolicy()
        self.default_page_size = default_page_size

    async def list(
        self, params: QuoteListParams | Mapping[str, Any] | None = None
    ) -> tuple[list[Quote], Pagination]:
        request = parse(QuoteListParams, params)
        page_size = request.page_size or self.default_page_size
        query = QuoteQuery(is_today=request.is_today, search=request.search)

        items = await self._store.find_many(
            query, offset=(request.page - 1) * page_size, limit=page_size
        )
        total = await self._store.count(query)
        return items, Pagination.compute(request.page, page_size, total)

    async def get(self, quote_id: str) -> Quote:
        quote = await self._store.find_one(QuoteQuery(id=quote_id))
        if quote is None:
            raise NotFoundError(quote_id)
        return quote

    async def create(self, data: QuoteCreate | Mapping[str, Any]) -> Quote:
        request = parse(QuoteCreate, data)
        quote = await self._store.insert(
            {
                "text_primary": request.text_primary,
                "text_secondary": request.text_secondary,
                "annotation": request.annotation,
            }
        )
        if request.is_today:
            quote = await self._pin(quote.id)
        return quote

    async def update(self, quote_id: str, data: QuoteUpdate | Mapping[str, Any]) -> Quote:
        request = parse(QuoteUpdate, data)
        quote = await self.get(quote_id)

        patch: dict[str, Any] = request.text_changes()
        if request.is_today is False and quote.is_today:
            patch.update(unpin_patch(keep_history=False))
            logger.info("Unpinned quote %s", quote_id, extra={"quote_id": quote_id})
        if patch:
            updated = await self._store.update_by_id(quote_id, patch)
            if updated is None:
                raise NotFoundError(quote_id)
            quote = updated

        today = self._date_keys.today(self._clock)
        if request.is_today and not (quote.is_today and quote.selected_on == today):
            quote = await self._pin(quote_id)
        return quote

    async def set_as_today(self, quote_id: str) -> Quote:
        await self.get(quote_id)
        return await self._pin(quote_id)

    async def delete(self, quote_id: str) -> None:
        if not await self._store.delete_by_id(quote_id):
            raise NotFoundError(quote_id)
        logger.info("Deleted quote %s", quote_id, extra={"quote_id": quote_id})

    async def stats(self) -> QuoteStats:
        return QuoteStats(
            total=await self._store.count(QuoteQuery()),
            today=await self._store.count(QuoteQuery(is_today=True)),
        )

    async def import_quotes(self, rows: Iterable[Mapping[str, Any]]) -> ImportReport:
        """Insert every row that has a primary text; blank rows are skipped.

        Imported quotes are never pinned.
        """
        report = ImportReport()
        for number, raw in enumerate(rows, start=1):
            row = parse(ImportRow, raw)
            if not row.text_primary:
                logger.debug("Skipping import row %d: missing text_primary", number)
                report.skipped += 1
                continue
            quote = await self._store.insert(row.model_dump())
            report.ids.append(quote.id)
            report.imported += 1
        logger.info("Imported %d quotes, skipped %d", report.imported, report.skipped)
        return report

    async def _pin(self, quote_id: str) -> Quote:
        today = self._date_keys.today(self._clock)
        pinned = await self._store.pin(quote_id, today, keep_history=False)
        if pinned is None:
            raise NotFoundError(quote_id)
        logger.info(
            "Pinned quote %s for %s", quote_id, today.isoformat(),
            extra={"quote_id": quote_id, "date_key": today.isoformat()},
        )
        return pinned
