"""Behaviour every QuoteStore backend must share."""

from datetime import timedelta

import pytest

from daily_quote import QuoteQuery


async def test_insert_assigns_id_and_defaults(any_store, clock):
    quote = await any_store.insert({"text_primary": "Be kind"})
    assert quote.id
    assert quote.text_secondary == ""
    assert quote.annotation == ""
    assert not quote.is_today
    assert quote.selected_on is None
    assert quote.created_at == quote.updated_at == clock.now()


async def test_insert_ids_are_unique(add_quotes):
    quotes = await add_quotes("a", "b", "c")
    assert len({q.id for q in quotes}) == 3


async def test_find_one_missing(any_store):
    assert await any_store.find_one(QuoteQuery(id="nope")) is None


async def test_find_one_by_id(any_store, add_quotes):
    a, _ = await add_quotes("a", "b")
    found = await any_store.find_one(QuoteQuery(id=a.id))
    assert found is not None
    assert found.id == a.id
    assert found.text_primary == "a"


async def test_find_many_newest_first(any_store, add_quotes):
    await add_quotes("first", "second", "third")
    texts = [q.text_primary for q in await any_store.find_many(QuoteQuery())]
    assert texts == ["third", "second", "first"]


async def test_find_many_offset_and_limit(any_store, add_quotes):
    await add_quotes("1", "2", "3", "4", "5")
    page = await any_store.find_many(QuoteQuery(), offset=1, limit=2)
    assert [q.text_primary for q in page] == ["4", "3"]
    tail = await any_store.find_many(QuoteQuery(), offset=4)
    assert [q.text_primary for q in tail] == ["1"]


async def test_search_is_case_insensitive_across_fields(any_store, add_quotes):
    await any_store.insert({"text_primary": "Patience is bitter"})
    await any_store.insert({"text_primary": "x", "text_secondary": "PATIENT heart"})
    await any_store.insert({"text_primary": "y", "annotation": "on patience"})
    await add_quotes("unrelated")

    assert await any_store.count(QuoteQuery(search="patien")) == 3
    assert await any_store.count(QuoteQuery(search="BITTER")) == 1


async def test_exclude_ids(any_store, add_quotes):
    a, b, c = await add_quotes("a", "b", "c")
    rest = await any_store.find_many(QuoteQuery(exclude_ids=frozenset({a.id, c.id})))
    assert [q.id for q in rest] == [b.id]


async def test_selected_since_ignores_unset(any_store, today):
    await any_store.insert({"text_primary": "old", "selected_on": today - timedelta(days=40)})
    await any_store.insert({"text_primary": "edge", "selected_on": today - timedelta(days=30)})
    await any_store.insert({"text_primary": "never"})

    recent = await any_store.find_many(QuoteQuery(selected_since=today - timedelta(days=30)))
    assert [q.text_primary for q in recent] == ["edge"]


async def test_update_many_returns_count(any_store, add_quotes, clock):
    await add_quotes("a", "b", "c")
    clock.advance(minutes=5)
    assert await any_store.update_many(QuoteQuery(search="b"), {"annotation": "note"}) == 1
    assert await any_store.update_many(QuoteQuery(), {"text_secondary": "s"}) == 3

    b = await any_store.find_one(QuoteQuery(search="b"))
    assert b.annotation == "note"
    assert b.updated_at == clock.now()
    assert b.created_at < b.updated_at


async def test_update_by_id(any_store, add_quotes):
    (a,) = await add_quotes("a")
    updated = await any_store.update_by_id(a.id, {"text_primary": "A!"})
    assert updated.text_primary == "A!"
    assert updated.id == a.id


async def test_update_by_id_missing(any_store):
    assert await any_store.update_by_id("nope", {"text_primary": "x"}) is None


async def test_patch_rejects_store_owned_fields(any_store, add_quotes):
    (a,) = await add_quotes("a")
    with pytest.raises(ValueError, match="created_at"):
        await any_store.update_by_id(a.id, {"created_at": None})


async def test_delete_by_id(any_store, add_quotes):
    a, b = await add_quotes("a", "b")
    assert await any_store.delete_by_id(a.id)
    assert not await any_store.delete_by_id(a.id)
    assert await any_store.count(QuoteQuery()) == 1
    assert (await any_store.find_one(QuoteQuery())).id == b.id


async def test_count(any_store, add_quotes):
    assert await any_store.count(QuoteQuery()) == 0
    await add_quotes("a", "b")
    assert await any_store.count(QuoteQuery()) == 2
    assert await any_store.count(QuoteQuery(is_today=True)) == 0


# ── pinning ──────────────────────────────────────────────────


async def test_pin_sets_flag_and_date(any_store, add_quotes, today):
    (a,) = await add_quotes("a")
    pinned = await any_store.pin(a.id, today, keep_history=True)
    assert pinned.is_today
    assert pinned.selected_on == today


async def test_pin_clears_other_pins_keeping_history(any_store, add_quotes, today, pinned):
    a, b = await add_quotes("a", "b")
    yesterday = today - timedelta(days=1)
    await any_store.pin(a.id, yesterday, keep_history=True)

    await any_store.pin(b.id, today, keep_history=True)

    assert [q.id for q in await pinned()] == [b.id]
    a_now = await any_store.find_one(QuoteQuery(id=a.id))
    assert not a_now.is_today
    assert a_now.selected_on == yesterday


async def test_pin_clears_other_pins_and_dates(any_store, add_quotes, today, pinned):
    a, b = await add_quotes("a", "b")
    await any_store.pin(a.id, today, keep_history=True)

    await any_store.pin(b.id, today, keep_history=False)

    assert [q.id for q in await pinned()] == [b.id]
    a_now = await any_store.find_one(QuoteQuery(id=a.id))
    assert not a_now.is_today
    assert a_now.selected_on is None


async def test_pin_missing_id_changes_nothing(any_store, add_quotes, today, pinned):
    (a,) = await add_quotes("a")
    await any_store.pin(a.id, today, keep_history=True)

    assert await any_store.pin("nope", today, keep_history=False) is None
    assert [q.id for q in await pinned()] == [a.id]


async def test_repin_same_quote(any_store, add_quotes, today, pinned):
    (a,) = await add_quotes("a")
    await any_store.pin(a.id, today - timedelta(days=1), keep_history=True)
    again = await any_store.pin(a.id, today, keep_history=True)
    assert again.selected_on == today
    assert len(await pinned()) == 1


async def test_claim_day_returns_existing_holder(any_store, add_quotes, today, pinned):
    a, b = await add_quotes("a", "b")
    await any_store.pin(a.id, today, keep_history=True)

    holder = await any_store.claim_day(b.id, today)

    assert holder.id == a.id
    assert [q.id for q in await pinned()] == [a.id]


async def test_claim_day_replaces_stale_pin(any_store, add_quotes, today, pinned):
    a, b = await add_quotes("a", "b")
    yesterday = today - timedelta(days=1)
    await any_store.pin(a.id, yesterday, keep_history=True)

    holder = await any_store.claim_day(b.id, today)

    assert holder.id == b.id
    assert holder.selected_on == today
    assert [q.id for q in await pinned()] == [b.id]
    assert (await any_store.find_one(QuoteQuery(id=a.id))).selected_on == yesterday


async def test_claim_day_missing_id(any_store, today):
    assert await any_store.claim_day("nope", today) is None
