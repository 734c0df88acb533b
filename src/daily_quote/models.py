"""Quote record and the storage-agnostic query/patch vocabulary."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

# Fields a caller may change through a patch.  ``id`` and the timestamps
# belong to the store.
MUTABLE_FIELDS = frozenset(
    {"text_primary", "text_secondary", "annotation", "is_today", "selected_on"}
)

TEXT_FIELDS = ("text_primary", "text_secondary", "annotation")


@dataclass(frozen=True)
class Quote:
    """Immutable snapshot of one stored quote.

    Attributes:
        id:             Opaque identifier assigned by the store.
        text_primary:   Main quote text.  Never empty.
        text_secondary: Optional second rendering (e.g. a translation).
        annotation:     Optional note shown with the quote (e.g. a source verse).
        is_today:       ``True`` while this quote is the pinned "today's quote".
        selected_on:    DateKey the quote was last picked for.  Always set
                        while ``is_today`` is ``True``.
        created_at:     Set by the store on insert.
        updated_at:     Refreshed by the store on every write.
    """

    id: str
    text_primary: str
    created_at: datetime
    updated_at: datetime
    text_secondary: str = ""
    annotation: str = ""
    is_today: bool = False
    selected_on: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text_primary": self.text_primary,
            "text_secondary": self.text_secondary,
            "annotation": self.annotation,
            "is_today": self.is_today,
            "selected_on": self.selected_on.isoformat() if self.selected_on else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class QuoteQuery:
    """Predicate over quotes.  Unset criteria match everything.

    Attributes:
        id:             Match a single id.
        exclude_ids:    Ids that never match.
        is_today:       Match on the pin flag.
        selected_on:    Match an exact DateKey.
        selected_since: Match ``selected_on >= selected_since`` (unset never matches).
        search:         Case-insensitive substring over the text fields.
    """

    id: str | None = None
    exclude_ids: frozenset[str] = field(default_factory=frozenset)
    is_today: bool | None = None
    selected_on: date | None = None
    selected_since: date | None = None
    search: str | None = None

    def matches(self, quote: Quote) -> bool:
        if self.id is not None and quote.id != self.id:
            return False
        if quote.id in self.exclude_ids:
            return False
        if self.is_today is not None and quote.is_today != self.is_today:
            return False
        if self.selected_on is not None and quote.selected_on != self.selected_on:
            return False
        if self.selected_since is not None and (
            quote.selected_on is None or quote.selected_on < self.selected_since
        ):
            return False
        if self.search:
            needle = self.search.casefold()
            if not any(needle in getattr(quote, f).casefold() for f in TEXT_FIELDS):
                return False
        return True


def check_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return *patch* as a dict, rejecting fields callers may not write."""
    unknown = set(patch) - MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot patch fields: {sorted(unknown)}")
    return dict(patch)


def pin_patch(day: date) -> dict[str, Any]:
    return {"is_today": True, "selected_on": day}


def unpin_patch(*, keep_history: bool) -> dict[str, Any]:
    """Patch that turns the pin off.

    With ``keep_history`` the quote keeps ``selected_on`` so it still counts
    against the exclusion window; otherwise the date is cleared too.
    """
    if keep_history:
        return {"is_today": False}
    return {"is_today": False, "selected_on": None}
