"""Clock abstraction and DateKey normalization for day-scoped logic."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from daily_quote.exceptions import ConfigError


class Clock(Protocol):
    """Protocol for getting the current time.  Inject a fake in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Default clock backed by the real system time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass(frozen=True)
class FixedClock:
    """Clock that always returns the same instant."""

    moment: datetime

    def now(self) -> datetime:
        if self.moment.tzinfo is None:
            return self.moment.replace(tzinfo=UTC)
        return self.moment


def resolve_timezone(name: str) -> tzinfo:
    """Return the ``tzinfo`` for an IANA zone name (``"UTC"`` needs no tz database)."""
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError("timezone", f"unknown timezone {name!r}") from exc


class DateKeyPolicy:
    """Turns instants into DateKeys using one fixed timezone.

    A DateKey is the calendar date of an instant as observed in ``tz``.
    The zone is fixed for the lifetime of the policy so that every caller
    agrees on where one day ends and the next begins.

    Parameters:
        tz: Zone the calendar day is observed in.  Defaults to UTC.
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz or UTC

    @classmethod
    def from_name(cls, name: str) -> DateKeyPolicy:
        return cls(resolve_timezone(name))

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def date_key(self, moment: datetime) -> date:
        """Return the DateKey for *moment*.  Naive datetimes are taken as UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return moment.astimezone(self._tz).date()

    def today(self, clock: Clock) -> date:
        return self.date_key(clock.now())

    @staticmethod
    def window_start(day: date, days: int) -> date:
        """First DateKey still inside a trailing window of *days* ending at *day*."""
        return day - timedelta(days=days)
