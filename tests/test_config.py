"""Tests for Settings and logging setup."""

import json
import logging

import pydantic
import pytest

from daily_quote import ConfigError
from daily_quote._internal.logging import JSONFormatter, setup_logging
from daily_quote.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.timezone == "UTC"
    assert settings.exclusion_window_days == 30
    assert not settings.strict_selection
    assert settings.default_page_size == 1000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DAILY_QUOTE_EXCLUSION_WINDOW_DAYS", "14")
    monkeypatch.setenv("DAILY_QUOTE_STRICT_SELECTION", "true")
    monkeypatch.setenv("DAILY_QUOTE_STORE_TYPE", "memory")

    settings = Settings()

    assert settings.exclusion_window_days == 14
    assert settings.strict_selection
    assert settings.store_type == "memory"


def test_unknown_timezone_is_a_config_error():
    with pytest.raises(ConfigError):
        Settings(timezone="Nowhere/Atlantis")


def test_negative_window_rejected():
    with pytest.raises(pydantic.ValidationError):
        Settings(exclusion_window_days=-1)


def test_json_formatter_includes_extras():
    record = logging.LogRecord(
        "daily_quote.selection", logging.INFO, __file__, 1, "Selected %s", ("abc",), None
    )
    record.quote_id = "abc"
    record.date_key = "2025-03-10"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Selected abc"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "daily_quote.selection"
    assert payload["quote_id"] == "abc"
    assert payload["date_key"] == "2025-03-10"
    assert "operation" not in payload


def test_setup_logging_replaces_handlers():
    logger = logging.getLogger("daily_quote")
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("WARNING", "text")
        assert logger.handlers == [second]
        assert first not in logger.handlers
        assert logger.level == logging.WARNING
        assert not isinstance(second.formatter, JSONFormatter)
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
