"""Tests for QuoteService — the envelope-returning operation surface."""

import random

import pytest

from daily_quote import NoQuotesAvailableError, NotFoundError, QuoteService
from daily_quote.config import Settings


@pytest.fixture
def service(any_store, clock):
    settings = Settings(store_type="memory", exclusion_window_days=30)
    return QuoteService.from_settings(settings, any_store, clock=clock, rng=random.Random(5))


async def test_default_construction_uses_memory_store():
    service = QuoteService()
    created = await service.admin_create({"text_primary": "a"})
    assert (await service.get_today())["data"]["id"] == created["data"]["id"]


async def test_get_today_envelope(service, today):
    await service.admin_create({"text_primary": "Be still"})
    envelope = await service.get_today()
    assert envelope["success"] is True
    data = envelope["data"]
    assert data["text_primary"] == "Be still"
    assert data["is_today"] is True
    assert data["today_quote"] is True
    assert data["selected_on"] == today.isoformat()


async def test_get_today_empty_raises(service):
    with pytest.raises(NoQuotesAvailableError) as exc_info:
        await service.get_today()
    assert exc_info.value.status == 503


async def test_admin_crud_envelopes(service):
    created = await service.admin_create({"text_primary": "a"})
    quote_id = created["data"]["id"]
    assert created["success"] is True

    fetched = await service.admin_get(quote_id)
    assert fetched["data"]["text_primary"] == "a"

    updated = await service.admin_update(quote_id, {"text_secondary": "b"})
    assert updated["data"]["text_secondary"] == "b"

    pinned = await service.admin_set_today(quote_id)
    assert pinned["data"]["is_today"] is True

    deleted = await service.admin_delete(quote_id)
    assert deleted == {"success": True, "message": "Quote deleted successfully"}

    with pytest.raises(NotFoundError):
        await service.admin_get(quote_id)


async def test_admin_list_envelope(service):
    for text in ("a", "b", "c"):
        await service.admin_create({"text_primary": text})
    envelope = await service.admin_list({"page_size": 2})
    assert envelope["success"] is True
    assert len(envelope["data"]) == 2
    assert envelope["pagination"] == {
        "page": 1,
        "page_size": 2,
        "total": 3,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }


async def test_admin_stats_and_import(service):
    imported = await service.admin_import([{"text_primary": "a"}, {"text_primary": ""}])
    assert imported["data"]["imported"] == 1
    assert imported["data"]["skipped"] == 1

    await service.get_today()
    stats = await service.admin_stats()
    assert stats["data"] == {"total": 1, "today": 1}


async def test_from_settings_applies_selection_settings(any_store, clock):
    settings = Settings(store_type="memory", exclusion_window_days=7, strict_selection=True)
    service = QuoteService.from_settings(settings, any_store, clock=clock)
    assert service.selector.window_days == 7
    assert service.selector.strict
    assert service.store is any_store
