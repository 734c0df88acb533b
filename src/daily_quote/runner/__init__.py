# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for executing quote-service commands.

Usage:
    python -m daily_quote.runner < command.json > output.json

Exports:
    Executor: Runs one command against a QuoteService
    RunnerInput: Command schema read from stdin
    RunnerOutput: Result schema written to stdout
"""

from .executor import Executor
from .schema import RunnerInput, RunnerOutput, StoreConfigSchema

__all__ = [
    "Executor",
    "RunnerInput",
    "RunnerOutput",
    "StoreConfigSchema",
]
