"""DailySelector — lazily picks and pins one quote per DateKey."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from daily_quote._internal.clock import Clock, DateKeyPolicy, SystemClock
from daily_quote.exceptions import NoQuotesAvailableError, StorageUnavailableError
from daily_quote.models import QuoteQuery, unpin_patch

if TYPE_CHECKING:
    from datetime import date

    from daily_quote.models import Quote
    from daily_quote.stores.base import QuoteStore

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30


class DailySelector:
    """Returns today's quote, selecting and pinning one on the first read of a day.

    A quote picked on day *D* stays ineligible while ``selected_on >= today -
    window_days``.  When every quote is inside that window the whole
    collection becomes eligible again (pool exhaustion).

    In the default mode every pin clears every other pin, so at most one
    quote is pinned no matter how callers interleave; concurrent first
    reads of a day may still flap between two picks until the last write
    lands.  With ``strict=True`` the pin is a compare-and-swap on the
    DateKey and every caller gets the first winner.

    Parameters:
        store:       Quote repository.
        clock:       Injectable clock for testing.
        date_keys:   Timezone policy that turns instants into DateKeys.
        window_days: Length of the non-repetition window in days.
        rng:         Random source for the pick.  Defaults to ``SystemRandom``.
        strict:      Use the compare-and-swap pin.
    """

    def __init__(
        self,
        store: QuoteStore,
        *,
        clock: Clock | None = None,
        date_keys: DateKeyPolicy | None = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
        rng: random.Random | None = None,
        strict: bool = False,
    ) -> None:
        if window_days < 0:
            raise ValueError("window_days must be >= 0")
        self._store = store
        self._clock = clock or SystemClock()
        self._date_keys = date_keys or DateKeyPolicy()
        self.window_days = window_days
        self._rng = rng or random.SystemRandom()
        self.strict = strict

    async def get_or_select_today(self) -> Quote:
        """Return the quote pinned for today, selecting one if needed."""
        return await self.select_for_day(self._date_keys.today(self._clock))

    async def select_for_day(self, day: date) -> Quote:
        """Return the quote pinned for *day*, selecting one if needed.

        Raises:
            NoQuotesAvailableError: The collection is empty.
            StorageUnavailableError: A store call failed; later steps were
                not attempted.
        """
        current = await self._store.find_one(QuoteQuery(is_today=True, selected_on=day))
        if current is not None:
            return current

        if not self.strict:
            # Stale pins keep selected_on so they still count against the window.
            await self._store.update_many(QuoteQuery(is_today=True), unpin_patch(keep_history=True))

        chosen = await self._choose(day)

        if self.strict:
            pinned = await self._store.claim_day(chosen.id, day)
        else:
            pinned = await self._store.pin(chosen.id, day, keep_history=True)
        if pinned is None:
            # Deleted between the pick and the pin.
            raise StorageUnavailableError("pin", f"quote {chosen.id!r} vanished before pinning")

        if pinned.id != chosen.id:
            logger.info(
                "Quote %s already claimed %s", pinned.id, day.isoformat(),
                extra={"quote_id": pinned.id, "date_key": day.isoformat()},
            )
        else:
            logger.info(
                "Selected quote %s for %s", pinned.id, day.isoformat(),
                extra={"quote_id": pinned.id, "date_key": day.isoformat()},
            )
        return pinned

    async def _choose(self, day: date) -> Quote:
        since = self._date_keys.window_start(day, self.window_days)
        recent = await self._store.find_many(QuoteQuery(selected_since=since))
        excluded = frozenset(q.id for q in recent)

        candidates = await self._store.find_many(QuoteQuery(exclude_ids=excluded))
        if not candidates:
            candidates = await self._store.find_many(QuoteQuery())
            if not candidates:
                raise NoQuotesAvailableError()
            logger.warning(
                "All %d quotes used in the last %d days, resetting selection pool",
                len(candidates), self.window_days,
                extra={"date_key": day.isoformat()},
            )
        return candidates[self._rng.randrange(len(candidates))]
