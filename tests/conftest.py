"""Shared test fixtures."""

import random
from datetime import UTC, datetime, timedelta

import pytest

from daily_quote import DailySelector, QuoteAdmin, QuoteQuery
from daily_quote.stores import InMemoryStore, SQLiteStore

START = datetime(2025, 3, 10, 9, 30, tzinfo=UTC)


class FakeClock:
    def __init__(self, start: datetime = START):
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> None:
        self._now += timedelta(**delta)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def today(clock):
    return clock.now().date()


@pytest.fixture
def store(clock):
    return InMemoryStore(clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
async def any_store(request, clock, tmp_path):
    if request.param == "memory":
        backend = InMemoryStore(clock=clock)
    else:
        backend = SQLiteStore(str(tmp_path / "quotes.db"), clock=clock)
    yield backend
    await backend.close()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def selector(any_store, clock, rng):
    return DailySelector(any_store, clock=clock, rng=rng)


@pytest.fixture
def admin(any_store, clock):
    return QuoteAdmin(any_store, clock=clock)


@pytest.fixture
def add_quotes(any_store, clock):
    """Insert one quote per text, one second apart, oldest first."""

    async def _add(*texts, **fields):
        quotes = []
        for text in texts:
            quotes.append(await any_store.insert({"text_primary": text, **fields}))
            clock.advance(seconds=1)
        return quotes

    return _add


@pytest.fixture
def pinned(any_store):
    """Return the currently pinned quotes."""

    async def _pinned():
        return await any_store.find_many(QuoteQuery(is_today=True))

    return _pinned
