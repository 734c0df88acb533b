# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Entry point for the daily-quote runner.

Usage:
    python -m daily_quote.runner < command.json > output.json

The runner reads one JSON command from stdin, runs it against the
configured store, and writes JSON output to stdout.

Exit codes:
    0: Success
    1: Failure (error details in JSON output)
"""

from __future__ import annotations

import asyncio
import sys

from daily_quote._internal.logging import setup_logging
from daily_quote.config import get_settings

from .executor import Executor
from .schema import RunnerInput, RunnerOutput


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_format)

        input_data = RunnerInput.model_validate_json(sys.stdin.read())

        output = asyncio.run(Executor(settings=settings).execute(input_data))
        print(output.model_dump_json())

        return 0 if output.success else 1

    except Exception as e:
        # Ensure we always output valid JSON, even on unexpected errors
        error_output = RunnerOutput(
            success=False,
            error=str(e),
            error_type=type(e).__name__,
            status=getattr(e, "status", 400),
        )
        print(error_output.model_dump_json())
        return 1


if __name__ == "__main__":
    sys.exit(main())
