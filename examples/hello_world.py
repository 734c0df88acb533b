"""
daily_quote — Hello World

One quote per day, picked lazily on the first read, never repeated
within 30 days, and always overridable by an admin.
"""

import asyncio
from datetime import UTC, datetime, timedelta

from daily_quote import FixedClock, QuoteService
from daily_quote.stores import InMemoryStore

QUOTES = [
    {"text_primary": "The journey of a thousand miles begins with one step."},
    {"text_primary": "Well begun is half done.", "annotation": "Aristotle"},
    {"text_primary": "Patience is bitter, but its fruit is sweet."},
    {"text_primary": "What we think, we become."},
]


async def main():
    # ──────────────────────────────────────
    #  1. Build the service on a fake calendar
    # ──────────────────────────────────────
    day_one = datetime(2025, 3, 10, 8, 0, tzinfo=UTC)
    store = InMemoryStore()
    service = QuoteService(store, clock=FixedClock(day_one))

    imported = await service.admin_import(QUOTES)
    print(f"Imported {imported['data']['imported']} quotes\n")

    # ──────────────────────────────────────
    #  2. Reads on the same day agree
    # ──────────────────────────────────────
    print("=== Day one ===\n")
    first = (await service.get_today())["data"]
    again = (await service.get_today())["data"]
    print(f"  today:  {first['text_primary']}")
    print(f"  again:  {again['text_primary']}  (same={first['id'] == again['id']})\n")

    # ──────────────────────────────────────
    #  3. The next days never repeat within the window
    # ──────────────────────────────────────
    print("=== Following days ===\n")
    for offset in range(1, 4):
        later = QuoteService(store, clock=FixedClock(day_one + timedelta(days=offset)))
        quote = (await later.get_today())["data"]
        print(f"  {quote['selected_on']}: {quote['text_primary']}")

    # ──────────────────────────────────────
    #  4. Admin override
    # ──────────────────────────────────────
    print("\n=== Admin override ===\n")
    listed = await service.admin_list({"search": "patience"})
    target = listed["data"][0]
    pinned = (await service.admin_set_today(target["id"]))["data"]
    print(f"  pinned: {pinned['text_primary']} on {pinned['selected_on']}")
    print(f"  stats:  {(await service.admin_stats())['data']}")


if __name__ == "__main__":
    asyncio.run(main())
