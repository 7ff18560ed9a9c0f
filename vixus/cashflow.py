"""Cash-flow statement (DFC) summary by activity.

Business (PJ) categories carry a cash-flow type such as
``"operational_inflow"`` or ``"financing_outflow"``. The prefix names the
activity and the suffix the direction. Entries are attributed through their
top-level category; a subcategory's own activity type wins when it has one.

Personal categories (``"income"``/``"expense"``) and uncategorized entries
count as operational, with direction taken from the category type or, failing
that, from the entry's classification.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum

from .logging_setup import get_logger
from .lookups import CategoryIndex
from .models import ZERO, Category, DateRange, LedgerEntry, PaymentStatus

_logger = get_logger("vixus.cashflow")


class Activity(StrEnum):
    OPERATIONAL = "operational"
    INVESTMENT = "investment"
    FINANCING = "financing"


ACTIVITY_LABELS: dict[Activity, str] = {
    Activity.OPERATIONAL: "Atividades operacionais",
    Activity.INVESTMENT: "Atividades de investimento",
    Activity.FINANCING: "Atividades de financiamento",
}


def is_inflow(category_type: str) -> bool:
    """``"income"`` and any ``*_inflow`` type bring cash in."""

    return category_type == "income" or "_inflow" in category_type


def activity_of(category_type: str | None) -> Activity | None:
    """Return the activity a cash-flow type belongs to, ``None`` for other types."""

    if not category_type:
        return None
    for activity in Activity:
        if category_type.startswith(activity.value):
            return activity
    return None


@dataclass(frozen=True, slots=True)
class ActivityFlow:
    activity: Activity
    inflow: Decimal = ZERO
    outflow: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.inflow - self.outflow

    @property
    def label(self) -> str:
        return ACTIVITY_LABELS[self.activity]


@dataclass(frozen=True, slots=True)
class CashFlowSummary:
    """Per-activity flows plus opening and closing balance.

    Attributes
    ----------
    activities:
        One :class:`ActivityFlow` per :class:`Activity`, in declaration order,
        zero-filled when an activity has no movements.
    closing_balance:
        ``opening_balance`` plus the sum of every activity balance.
    """

    opening_balance: Decimal
    activities: tuple[ActivityFlow, ...] = field(default_factory=tuple)

    @property
    def net_change(self) -> Decimal:
        return sum((a.balance for a in self.activities), ZERO)

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.net_change

    def get(self, activity: Activity | str) -> ActivityFlow:
        key = Activity(activity)
        for flow in self.activities:
            if flow.activity is key:
                return flow
        return ActivityFlow(key)


def _classify(entry: LedgerEntry, index: CategoryIndex) -> tuple[Activity, bool]:
    cat: Category | None = index.resolve(entry)
    if cat is None:
        return Activity.OPERATIONAL, entry.is_income
    for candidate in (cat, index.top_level(cat)):
        activity = activity_of(candidate.type)
        if activity is not None:
            return activity, is_inflow(candidate.type)
    if cat.type in ("income", "expense"):
        return Activity.OPERATIONAL, is_inflow(cat.type)
    return Activity.OPERATIONAL, entry.is_income


def opening_balance_before(
    entries: Iterable[LedgerEntry], start: date, *, paid_only: bool = True
) -> Decimal:
    """Net of income minus expense for entries dated strictly before ``start``."""

    total = ZERO
    for entry in entries:
        if paid_only and entry.payment_status is not PaymentStatus.PAGO:
            continue
        if entry.reference_date < start:
            total += entry.signed_amount
    return total


def summarize_cash_flow_activities(
    entries: Iterable[LedgerEntry],
    categories: CategoryIndex | Iterable[Category] | None = None,
    *,
    opening_balance: Decimal = ZERO,
    window: DateRange | None = None,
    paid_only: bool = True,
) -> CashFlowSummary:
    """Sum inflows and outflows per cash-flow activity.

    Parameters
    ----------
    entries:
        Entries to summarize; consumed once.
    categories:
        Optional index used when an entry carries only ``category_id`` and to
        reach a subcategory's parent.
    opening_balance:
        Cash at the start of the window; the closing balance builds on it.
    window:
        Only entries whose reference date falls inside are counted.
    paid_only:
        Count only settled (``pago``) entries, as the rest of the cash flow does.
    """

    index = categories if isinstance(categories, CategoryIndex) else CategoryIndex(categories or ())

    inflow: dict[Activity, Decimal] = {a: ZERO for a in Activity}
    outflow: dict[Activity, Decimal] = {a: ZERO for a in Activity}
    counted = 0
    for entry in entries:
        if paid_only and entry.payment_status is not PaymentStatus.PAGO:
            continue
        if window is not None and not window.contains(entry.reference_date):
            continue
        activity, incoming = _classify(entry, index)
        if incoming:
            inflow[activity] += entry.paid_amount
        else:
            outflow[activity] += entry.paid_amount
        counted += 1

    summary = CashFlowSummary(
        opening_balance=opening_balance,
        activities=tuple(ActivityFlow(a, inflow[a], outflow[a]) for a in Activity),
    )
    _logger.debug(
        "summarize_cash_flow_activities entries=%d opening=%s closing=%s",
        counted,
        opening_balance,
        summary.closing_balance,
    )
    return summary


__all__ = [
    "ACTIVITY_LABELS",
    "Activity",
    "ActivityFlow",
    "CashFlowSummary",
    "activity_of",
    "is_inflow",
    "opening_balance_before",
    "summarize_cash_flow_activities",
]
