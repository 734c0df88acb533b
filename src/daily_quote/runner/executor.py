# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for running one quote-service command.

Orchestrates the full execution flow:
1. Create store from configuration
2. Build QuoteService from settings
3. Dispatch the requested operation
4. Return structured result
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from daily_quote.config import Settings, get_settings
from daily_quote.exceptions import QuoteError, ValidationError
from daily_quote.service import QuoteService
from daily_quote.stores import InMemoryStore, QuoteStore, SQLiteStore

from .schema import RunnerInput, RunnerOutput, StoreConfigSchema

if TYPE_CHECKING:
    from daily_quote._internal.clock import Clock

logger = logging.getLogger(__name__)

_NEEDS_ID = frozenset({"admin_get", "admin_update", "admin_set_today", "admin_delete"})


class Executor:
    """Executes one command against a :class:`QuoteService`.

    The executor is designed for dependency injection to support testing.
    Pass a store, settings, clock or random source to override the defaults.

    Example:
        executor = Executor()
        output = await executor.execute(input_data)

        # For testing with an in-memory store and a fixed day:
        executor = Executor(store=InMemoryStore(), clock=FixedClock(moment))
    """

    def __init__(
        self,
        store: QuoteStore | None = None,
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._injected_store = store
        self._settings = settings
        self._clock = clock
        self._rng = rng

    async def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Run the command, converting every failure into a RunnerOutput."""
        try:
            result = await self._execute_internal(input_data)
        except QuoteError as e:
            logger.log(
                logging.ERROR if e.status >= 500 else logging.INFO,
                "%s failed: %s", input_data.operation, e,
                extra={"operation": input_data.operation, "error_type": type(e).__name__},
            )
            return RunnerOutput(
                success=False, error=str(e), error_type=type(e).__name__, status=e.status
            )
        except Exception as e:
            logger.exception(
                "%s crashed", input_data.operation, extra={"operation": input_data.operation}
            )
            return RunnerOutput(
                success=False, error=str(e), error_type=type(e).__name__, status=500
            )
        return RunnerOutput(success=True, result=result)

    async def _execute_internal(self, input_data: RunnerInput) -> dict[str, Any]:
        """Internal execution logic.

        Separated from execute() to allow exception propagation
        for testing while execute() catches all errors.
        """
        settings = self._settings or get_settings()
        store = self._injected_store or self._create_store(input_data.store, settings)
        owns_store = self._injected_store is None

        try:
            service = QuoteService.from_settings(
                settings, store, clock=self._clock, rng=self._rng
            )
            return await self._dispatch(service, input_data)
        finally:
            if owns_store:
                await store.close()

    async def _dispatch(self, service: QuoteService, input_data: RunnerInput) -> dict[str, Any]:
        op = input_data.operation
        quote_id = input_data.quote_id
        if op in _NEEDS_ID and not quote_id:
            raise ValidationError("quote_id", f"required for {op}")

        if op == "get_today":
            return await service.get_today()
        if op == "admin_list":
            return await service.admin_list(input_data.params)
        if op == "admin_create":
            return await service.admin_create(input_data.params)
        if op == "admin_stats":
            return await service.admin_stats()
        if op == "admin_import":
            return await service.admin_import(input_data.rows)

        assert quote_id is not None
        if op == "admin_get":
            return await service.admin_get(quote_id)
        if op == "admin_update":
            return await service.admin_update(quote_id, input_data.params)
        if op == "admin_set_today":
            return await service.admin_set_today(quote_id)
        return await service.admin_delete(quote_id)

    def _create_store(self, config: StoreConfigSchema, settings: Settings) -> QuoteStore:
        """Create store from the command override, falling back to settings."""
        store_type = config.type or settings.store_type
        if store_type == "sqlite":
            path = config.path or settings.store_path
            if not path:
                raise ValidationError("store.path", "SQLite store requires a path")
            return SQLiteStore(path, clock=self._clock, timeout=settings.sqlite_timeout_seconds)
        return InMemoryStore(clock=self._clock)
