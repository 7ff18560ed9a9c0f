"""Period bucketing: ledger entries -> ordered :class:`PeriodBucket` sequences.

All functions here are pure and total. Each returns a fresh list whose
``cumulative_balance`` is the running sum of ``period_balance`` in order, so
the last bucket's cumulative balance is the net result of the whole window.

Daily buckets for a month are condensed into at most ``max_buckets`` chunks
of ``ceil(days_in_month / max_buckets)`` consecutive days, which keeps the
rendered resolution fixed regardless of month length.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .logging_setup import get_logger
from .models import (
    ZERO,
    DateRange,
    LedgerEntry,
    PaymentStatus,
    PeriodBucket,
    ReferenceMonth,
)

DEFAULT_MAX_BUCKETS = 10

PT_BR_MONTH_ABBR: tuple[str, ...] = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)  # fmt: skip

_logger = get_logger("vixus.bucketing")


@dataclass(slots=True)
class _Flow:
    """Mutable income/expense accumulator for one period."""

    income: Decimal = ZERO
    expense: Decimal = ZERO

    def add(self, entry: LedgerEntry) -> None:
        if entry.is_income:
            self.income += entry.paid_amount
        else:
            self.expense += entry.paid_amount


@dataclass(frozen=True, slots=True)
class _Period:
    label: str
    start: date
    end: date
    flow: _Flow


def _with_running_balance(periods: Iterable[_Period]) -> list[PeriodBucket]:
    running = ZERO
    out: list[PeriodBucket] = []
    for p in periods:
        balance = p.flow.income - p.flow.expense
        running += balance
        out.append(
            PeriodBucket(
                label=p.label,
                start=p.start,
                end=p.end,
                income=p.flow.income,
                expense=p.flow.expense,
                period_balance=balance,
                cumulative_balance=running,
            )
        )
    return out


def _condense(periods: list[_Period], *, step: int, month: int) -> list[_Period]:
    condensed: list[_Period] = []
    for i in range(0, len(periods), step):
        chunk = periods[i : i + step]
        flow = _Flow(
            income=sum((p.flow.income for p in chunk), ZERO),
            expense=sum((p.flow.expense for p in chunk), ZERO),
        )
        first, last = chunk[0].start, chunk[-1].end
        condensed.append(
            _Period(label=f"{first.day}-{last.day}/{month}", start=first, end=last, flow=flow)
        )
    return condensed


def bucket_by_day(
    entries: Iterable[LedgerEntry],
    month: ReferenceMonth | date,
    *,
    max_buckets: int | None = DEFAULT_MAX_BUCKETS,
) -> list[PeriodBucket]:
    """Bucket ``entries`` by calendar day of ``month``.

    One bucket per day is created up front (so days without entries still
    appear with zero values), labelled ``"{day}/{month}"``. Entries whose
    reference date falls outside the month are ignored.

    When the month has more days than ``max_buckets``, consecutive days are
    merged into chunks of ``ceil(days / max_buckets)`` labelled
    ``"{first}-{last}/{month}"``. ``max_buckets=None`` keeps daily buckets.

    Raises ``ValueError`` when ``max_buckets`` is not a positive integer.
    """

    if isinstance(month, date):
        month = ReferenceMonth.from_date(month)
    if max_buckets is not None and (isinstance(max_buckets, bool) or max_buckets < 1):
        raise ValueError(f"max_buckets must be a positive integer or None, got {max_buckets!r}")

    n_days = month.days_in_month
    by_day: dict[int, _Flow] = {day: _Flow() for day in range(1, n_days + 1)}

    outside = 0
    for entry in entries:
        if not month.contains(entry.reference_date):
            outside += 1
            continue
        by_day[entry.reference_date.day].add(entry)

    periods = [
        _Period(
            label=f"{day}/{month.month}",
            start=date(month.year, month.month, day),
            end=date(month.year, month.month, day),
            flow=flow,
        )
        for day, flow in sorted(by_day.items())
    ]

    if max_buckets is not None and n_days > max_buckets:
        step = math.ceil(n_days / max_buckets)
        periods = _condense(periods, step=step, month=month.month)
        _logger.debug(
            "bucket_by_day:condensed month=%s days=%d step=%d buckets=%d outside=%d",
            month,
            n_days,
            step,
            len(periods),
            outside,
        )

    return _with_running_balance(periods)


def bucket_by_month(entries: Iterable[LedgerEntry], year: int) -> list[PeriodBucket]:
    """Twelve monthly buckets for ``year`` labelled ``"jan/2024"`` .. ``"dez/2024"``."""

    by_month: dict[int, _Flow] = {m: _Flow() for m in range(1, 13)}
    for entry in entries:
        if entry.reference_date.year == year:
            by_month[entry.reference_date.month].add(entry)

    periods = []
    for m, flow in sorted(by_month.items()):
        ref = ReferenceMonth(year, m)
        periods.append(
            _Period(
                label=f"{PT_BR_MONTH_ABBR[m - 1]}/{year}",
                start=ref.first_day,
                end=ref.last_day,
                flow=flow,
            )
        )
    return _with_running_balance(periods)


def bucket_by_year(entries: Iterable[LedgerEntry], years: Iterable[int]) -> list[PeriodBucket]:
    """One bucket per requested year (ascending, duplicates collapsed)."""

    by_year: dict[int, _Flow] = {y: _Flow() for y in sorted(set(years))}
    for entry in entries:
        flow = by_year.get(entry.reference_date.year)
        if flow is not None:
            flow.add(entry)

    return _with_running_balance(
        _Period(label=str(y), start=date(y, 1, 1), end=date(y, 12, 31), flow=flow)
        for y, flow in by_year.items()
    )


def cash_flow_by_date(
    entries: Iterable[LedgerEntry],
    window: DateRange | None = None,
    *,
    paid_only: bool = True,
) -> list[PeriodBucket]:
    """Daily cash flow over the dates that actually have movements.

    Unlike :func:`bucket_by_day`, days without entries are omitted. Only
    settled (``pago``) entries count unless ``paid_only`` is False. Buckets
    are labelled with the ISO date and ordered ascending.
    """

    by_date: dict[date, _Flow] = {}
    for entry in entries:
        if paid_only and entry.payment_status is not PaymentStatus.PAGO:
            continue
        if window is not None and not window.contains(entry.reference_date):
            continue
        by_date.setdefault(entry.reference_date, _Flow()).add(entry)

    return _with_running_balance(
        _Period(label=d.isoformat(), start=d, end=d, flow=flow)
        for d, flow in sorted(by_date.items())
    )


__all__ = [
    "DEFAULT_MAX_BUCKETS",
    "PT_BR_MONTH_ABBR",
    "bucket_by_day",
    "bucket_by_month",
    "bucket_by_year",
    "cash_flow_by_date",
]
