"""Calendar helpers and date-window selection.

Windows are inclusive on both ends and compare calendar dates only.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, timedelta
from enum import StrEnum

from .models import DateRange, LedgerEntry, ReferenceMonth


class TimeRange(StrEnum):
    WEEK = "week"
    LAST_30_DAYS = "last_30_days"
    MONTH = "month"
    CUSTOM = "custom"


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``year``/``month`` (Gregorian rules, leap years included)."""

    return calendar.monthrange(year, month)[1]


def month_range(month: ReferenceMonth) -> DateRange:
    return DateRange(month.first_day, month.last_day)


def calculate_date_range(time_range: str | TimeRange, *, today: date) -> DateRange:
    """Resolve a named time range relative to ``today``.

    - ``week``: Sunday through Saturday of the current week.
    - ``last_30_days``: ``today - 30 days`` through ``today``.
    - ``month`` (and anything unrecognized, including ``custom``): first
      through last day of ``today``'s month. Custom windows are resolved by
      the caller, which owns the user-selected dates.
    """

    try:
        tr = TimeRange(time_range)
    except ValueError:
        tr = TimeRange.MONTH

    if tr is TimeRange.WEEK:
        # date.weekday(): Monday=0 .. Sunday=6
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return DateRange(start, start + timedelta(days=6))
    if tr is TimeRange.LAST_30_DAYS:
        return DateRange(today - timedelta(days=30), today)
    return month_range(ReferenceMonth.from_date(today))


def entries_in_range(entries: Iterable[LedgerEntry], window: DateRange) -> list[LedgerEntry]:
    return [e for e in entries if window.contains(e.reference_date)]


def entries_in_month(entries: Iterable[LedgerEntry], month: ReferenceMonth) -> list[LedgerEntry]:
    """Entries whose reference date falls in ``month`` (input order kept)."""

    return [e for e in entries if month.contains(e.reference_date)]


__all__ = [
    "TimeRange",
    "calculate_date_range",
    "days_in_month",
    "entries_in_month",
    "entries_in_range",
    "month_range",
]
