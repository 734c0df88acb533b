# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON contract between a transport layer
(an HTTP handler, a cron wrapper, a shell script) and the runner.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Operation = Literal[
    "get_today",
    "admin_list",
    "admin_get",
    "admin_create",
    "admin_update",
    "admin_set_today",
    "admin_delete",
    "admin_stats",
    "admin_import",
]


class StoreConfigSchema(BaseModel):
    """Store override for a single command.

    Attributes:
        type: Store type ("memory" or "sqlite").  Falls back to settings.
        path: Path to SQLite database file (for sqlite type).
    """

    type: Literal["memory", "sqlite"] | None = None
    path: str = ""


class RunnerInput(BaseModel):
    """One command read from stdin.

    Attributes:
        operation: Which service operation to run
        quote_id: Target quote for get/update/set_today/delete
        params: Operation payload (list filter, create/update fields)
        rows: Quotes to insert for admin_import
        store: Optional store override
    """

    operation: Operation
    quote_id: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    store: StoreConfigSchema = Field(default_factory=StoreConfigSchema)


class RunnerOutput(BaseModel):
    """Complete output written to stdout.

    The runner always outputs valid JSON matching this schema,
    even on errors.

    Attributes:
        success: Whether the operation completed successfully
        result: Operation envelope (on success)
        error: Error message (on failure)
        error_type: Error class name (on failure)
        status: Transport status hint (200 on success)
    """

    success: bool
    result: Any = None
    error: str = ""
    error_type: str = ""
    status: int = 200
