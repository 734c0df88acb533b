"""Input DTOs and response models for the quote operation surface.

Inputs are validated here, before anything touches the store.  pydantic
failures are re-raised as :class:`daily_quote.exceptions.ValidationError`
so callers only ever see the package's own error hierarchy.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Annotated, Any, TypeVar

from pydantic import AfterValidator, AliasChoices, BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from daily_quote.exceptions import ValidationError

if TYPE_CHECKING:
    from daily_quote.models import Quote

M = TypeVar("M", bound=BaseModel)


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("text_primary is required")
    return value


RequiredText = Annotated[str, Field(min_length=1), AfterValidator(_not_blank)]


def parse(model: type[M], data: Mapping[str, Any] | M | None) -> M:
    """Validate *data* into *model*, translating pydantic errors."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationError(field, first["msg"]) from exc


# ── inputs ───────────────────────────────────────────────────


class QuoteCreate(BaseModel):
    """Fields accepted when creating a quote.

    Attributes:
        text_primary:   Required, non-blank.
        text_secondary: Optional second rendering.
        annotation:     Optional note.
        is_today:       Pin the new quote as today's quote.  Also accepted
                        as ``is_today_override``.
    """

    text_primary: RequiredText
    text_secondary: str = ""
    annotation: str = ""
    is_today: bool = Field(
        default=False, validation_alias=AliasChoices("is_today", "is_today_override")
    )


class QuoteUpdate(BaseModel):
    """Partial update.  Only fields the caller actually sent are applied."""

    text_primary: RequiredText | None = None
    text_secondary: str | None = None
    annotation: str | None = None
    is_today: bool | None = Field(
        default=None, validation_alias=AliasChoices("is_today", "is_today_override")
    )

    @field_validator("text_primary", mode="before")
    @classmethod
    def _null_text_rejected(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("text_primary is required")
        return value

    def text_changes(self) -> dict[str, str]:
        """Text fields that were sent with a value."""
        return {
            name: getattr(self, name)
            for name in ("text_primary", "text_secondary", "annotation")
            if getattr(self, name) is not None
        }


class QuoteListParams(BaseModel):
    """Admin list filter and page request.

    ``is_today`` accepts ``true``/``false`` or ``"all"`` (no filter).
    ``page_size`` falls back to the configured default when omitted.
    """

    search: str | None = None
    is_today: bool | None = None
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, ge=1)

    @field_validator("is_today", mode="before")
    @classmethod
    def _all_means_unfiltered(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("", "all"):
            return None
        return value

    @field_validator("search")
    @classmethod
    def _blank_search_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class ImportRow(BaseModel):
    text_primary: str = ""
    text_secondary: str = ""
    annotation: str = ""

    @field_validator("text_primary", "text_secondary", "annotation", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if value is None:
            return ""
        return str(value).strip()


# ── outputs ──────────────────────────────────────────────────


class QuoteOut(BaseModel):
    id: str
    text_primary: str
    text_secondary: str = ""
    annotation: str = ""
    is_today: bool = False
    selected_on: date | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_quote(cls, quote: Quote) -> QuoteOut:
        return cls(
            id=quote.id,
            text_primary=quote.text_primary,
            text_secondary=quote.text_secondary,
            annotation=quote.annotation,
            is_today=quote.is_today,
            selected_on=quote.selected_on,
            created_at=quote.created_at,
            updated_at=quote.updated_at,
        )


class TodayQuoteOut(QuoteOut):
    today_quote: bool = True


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def compute(cls, page: int, page_size: int, total: int) -> Pagination:
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
            has_next=page * page_size < total,
            has_prev=page > 1,
        )


class QuoteStats(BaseModel):
    total: int
    today: int


class ImportReport(BaseModel):
    imported: int = 0
    skipped: int = 0
    ids: list[str] = Field(default_factory=list)
