"""SQLiteStore — durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

import asyncio
import sqlite3
import uuid
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from typing import Any

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteStore requires the 'aiosqlite' package. "
        "Install it with: pip install daily-quote"
    ) from exc

from daily_quote._internal.clock import Clock, SystemClock
from daily_quote.exceptions import StorageUnavailableError
from daily_quote.models import Quote, QuoteQuery, check_patch, pin_patch, unpin_patch
from daily_quote.stores.base import QuoteStore

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS quotes (
        id             TEXT PRIMARY KEY,
        text_primary   TEXT NOT NULL,
        text_secondary TEXT NOT NULL DEFAULT '',
        annotation     TEXT NOT NULL DEFAULT '',
        is_today       INTEGER NOT NULL DEFAULT 0,
        selected_on    TEXT,
        created_at     TEXT NOT NULL,
        updated_at     TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS quotes_pin ON quotes (is_today, selected_on)",
    # At most one row may carry the pin.
    "CREATE UNIQUE INDEX IF NOT EXISTS quotes_single_pin ON quotes (is_today) WHERE is_today = 1",
)

_COLUMNS = (
    "id, text_primary, text_secondary, annotation, is_today, selected_on, created_at, updated_at"
)


def _to_column(name: str, value: Any) -> Any:
    if name == "is_today":
        return int(bool(value))
    if name == "selected_on":
        return value.isoformat() if value is not None else None
    return value


def _row_to_quote(row: aiosqlite.Row) -> Quote:
    return Quote(
        id=row["id"],
        text_primary=row["text_primary"],
        text_secondary=row["text_secondary"],
        annotation=row["annotation"],
        is_today=bool(row["is_today"]),
        selected_on=date.fromisoformat(row["selected_on"]) if row["selected_on"] else None,
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _where(query: QuoteQuery) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []
    if query.id is not None:
        clauses.append("id = ?")
        params.append(query.id)
    if query.exclude_ids:
        clauses.append(f"id NOT IN ({', '.join('?' * len(query.exclude_ids))})")
        params.extend(sorted(query.exclude_ids))
    if query.is_today is not None:
        clauses.append("is_today = ?")
        params.append(int(query.is_today))
    if query.selected_on is not None:
        clauses.append("selected_on = ?")
        params.append(query.selected_on.isoformat())
    if query.selected_since is not None:
        clauses.append("selected_on >= ?")
        params.append(query.selected_since.isoformat())
    if query.search:
        needle = query.search.lower()
        clauses.append(
            "(instr(lower(text_primary), ?) > 0"
            " OR instr(lower(text_secondary), ?) > 0"
            " OR instr(lower(annotation), ?) > 0)"
        )
        params.extend([needle] * 3)
    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


class SQLiteStore(QuoteStore):
    """Persistent store backed by a single SQLite file.

    Every operation holds an ``asyncio.Lock`` on the shared connection.
    Multi-statement writes (``update_by_id``, ``pin``, ``claim_day``) run in
    ``BEGIN IMMEDIATE`` transactions, so they are also atomic against other
    processes using the same file.  A partial unique index rejects any write
    that would leave two pinned rows.

    Parameters:
        db_path:  Path to the SQLite database file.  Use ``":memory:"``
                  for an in-memory database (useful for testing).
        clock:    Source of ``created_at`` / ``updated_at``.
        timeout:  Seconds to wait on a locked database before failing.
    """

    def __init__(
        self,
        db_path: str = "quotes.db",
        *,
        clock: Clock | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._db_path = db_path
        self._clock = clock or SystemClock()
        self._timeout = timeout
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            db = await aiosqlite.connect(
                self._db_path, timeout=self._timeout, isolation_level=None
            )
            db.row_factory = aiosqlite.Row
            for statement in _SCHEMA:
                await db.execute(statement)
            self._db = db
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @asynccontextmanager
    async def _session(
        self, operation: str, *, transaction: bool = False
    ) -> AsyncIterator[aiosqlite.Connection]:
        async with self._lock:
            try:
                db = await self._connect()
                if not transaction:
                    yield db
                    return
                await db.execute("BEGIN IMMEDIATE")
                try:
                    yield db
                    await db.execute("COMMIT")
                except BaseException:
                    # A failed COMMIT (SQLITE_BUSY) leaves the transaction open.
                    if db.in_transaction:
                        await db.execute("ROLLBACK")
                    raise
            except sqlite3.Error as exc:
                raise StorageUnavailableError(operation, str(exc)) from exc

    def _now(self) -> str:
        return self._clock.now().astimezone(UTC).isoformat()

    async def _update(
        self, db: aiosqlite.Connection, query: QuoteQuery, patch: Mapping[str, Any]
    ) -> int:
        values = check_patch(patch)
        assignments = [f"{name} = ?" for name in values] + ["updated_at = ?"]
        params = [_to_column(name, value) for name, value in values.items()] + [self._now()]
        where, where_params = _where(query)
        cursor = await db.execute(
            f"UPDATE quotes SET {', '.join(assignments)}{where}", params + where_params
        )
        return cursor.rowcount

    async def _select_one(self, db: aiosqlite.Connection, query: QuoteQuery) -> Quote | None:
        where, params = _where(query)
        cursor = await db.execute(
            f"SELECT {_COLUMNS} FROM quotes{where} ORDER BY created_at DESC, rowid DESC LIMIT 1",
            params,
        )
        row = await cursor.fetchone()
        return _row_to_quote(row) if row is not None else None

    async def _pin(
        self, db: aiosqlite.Connection, quote_id: str, day: date, *, keep_history: bool
    ) -> Quote | None:
        if await self._select_one(db, QuoteQuery(id=quote_id)) is None:
            return None
        others = QuoteQuery(is_today=True, exclude_ids=frozenset({quote_id}))
        await self._update(db, others, unpin_patch(keep_history=keep_history))
        await self._update(db, QuoteQuery(id=quote_id), pin_patch(day))
        return await self._select_one(db, QuoteQuery(id=quote_id))

    # ── QuoteStore ───────────────────────────────────────────

    async def find_one(self, query: QuoteQuery) -> Quote | None:
        async with self._session("find_one") as db:
            return await self._select_one(db, query)

    async def find_many(
        self,
        query: QuoteQuery,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Quote]:
        where, params = _where(query)
        async with self._session("find_many") as db:
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM quotes{where}"
                " ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
                [*params, -1 if limit is None else limit, offset],
            )
            rows = await cursor.fetchall()
        return [_row_to_quote(row) for row in rows]

    async def update_many(self, query: QuoteQuery, patch: Mapping[str, Any]) -> int:
        async with self._session("update_many") as db:
            return await self._update(db, query, patch)

    async def insert(self, fields: Mapping[str, Any]) -> Quote:
        values = check_patch(fields)
        now = self._clock.now().astimezone(UTC)
        quote = Quote(id=uuid.uuid4().hex, created_at=now, updated_at=now, **values)
        async with self._session("insert") as db:
            await db.execute(
                f"INSERT INTO quotes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    quote.id,
                    quote.text_primary,
                    quote.text_secondary,
                    quote.annotation,
                    int(quote.is_today),
                    _to_column("selected_on", quote.selected_on),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
        return quote

    async def update_by_id(self, quote_id: str, patch: Mapping[str, Any]) -> Quote | None:
        async with self._session("update_by_id", transaction=True) as db:
            if not await self._update(db, QuoteQuery(id=quote_id), patch):
                return None
            return await self._select_one(db, QuoteQuery(id=quote_id))

    async def delete_by_id(self, quote_id: str) -> bool:
        async with self._session("delete_by_id") as db:
            cursor = await db.execute("DELETE FROM quotes WHERE id = ?", (quote_id,))
            return cursor.rowcount > 0

    async def count(self, query: QuoteQuery) -> int:
        where, params = _where(query)
        async with self._session("count") as db:
            cursor = await db.execute(f"SELECT COUNT(*) FROM quotes{where}", params)
            row = await cursor.fetchone()
        return int(row[0]) if row else 0

    # ── pinning ──────────────────────────────────────────────

    async def pin(self, quote_id: str, day: date, *, keep_history: bool) -> Quote | None:
        async with self._session("pin", transaction=True) as db:
            return await self._pin(db, quote_id, day, keep_history=keep_history)

    async def claim_day(self, quote_id: str, day: date) -> Quote | None:
        async with self._session("claim_day", transaction=True) as db:
            holder = await self._select_one(db, QuoteQuery(is_today=True, selected_on=day))
            if holder is not None:
                return holder
            return await self._pin(db, quote_id, day, keep_history=True)
