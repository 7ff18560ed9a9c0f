"""Explicit session state for a logged-in user.

:class:`FinanceContext` owns the loaded ledger, category tree, accounts and
display preferences. Create one per session, :meth:`~FinanceContext.load`
the backend rows after login, and :meth:`~FinanceContext.clear` it on
logout. Aggregations are recomputed from the loaded collections on every
call; nothing is cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any

from . import records
from .bucketing import DEFAULT_MAX_BUCKETS, bucket_by_day
from .filters import filter_entries
from .formatting import mask_if_hidden
from .logging_setup import get_logger
from .lookups import CategoryIndex
from .models import (
    Account,
    AccountScope,
    AccountTotals,
    Category,
    CategorySummary,
    Classification,
    DateRange,
    LedgerEntry,
    LedgerTotals,
    PeriodBucket,
    ReferenceMonth,
)
from .periods import TimeRange, calculate_date_range, entries_in_month
from .summaries import summarize_by_category
from .totals import adjust_balance, compute_account_totals, compute_totals

_logger = get_logger("vixus.context")


@dataclass(frozen=True, slots=True)
class Preferences:
    """User display preferences.

    ``custom_start``/``custom_end`` are used only when ``time_range`` is
    ``custom`` and both are set. ``account_scope=None`` shows PF and PJ.
    """

    hide_values: bool = False
    time_range: TimeRange = TimeRange.MONTH
    custom_start: date | None = None
    custom_end: date | None = None
    account_scope: AccountScope | None = None


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """Everything the dashboard renders for one month.

    ``display`` holds the formatted strings (masked when values are hidden);
    the numeric fields are never masked.
    """

    month: ReferenceMonth
    totals: LedgerTotals
    buckets: list[PeriodBucket]
    expense_categories: list[CategorySummary]
    income_categories: list[CategorySummary]
    account_totals: AccountTotals
    hidden: bool
    display: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LoadReport:
    entries: int
    categories: int
    accounts: int
    skipped_entries: int = 0
    skipped_categories: int = 0
    skipped_accounts: int = 0


class FinanceContext:
    """Per-session handle passed explicitly to whatever renders reports."""

    def __init__(
        self,
        *,
        preferences: Preferences | None = None,
        max_buckets: int | None = DEFAULT_MAX_BUCKETS,
    ) -> None:
        self.preferences = preferences or Preferences()
        self.max_buckets = max_buckets
        self._entries: list[LedgerEntry] = []
        self._categories = CategoryIndex()
        self._accounts: list[Account] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(
        self,
        entry_rows: Iterable[Any] = (),
        category_rows: Iterable[Any] = (),
        account_rows: Iterable[Any] = (),
    ) -> LoadReport:
        """Replace the session data with freshly validated backend rows."""

        entries = records.parse_entries(entry_rows)
        categories = records.parse_categories(category_rows)
        accounts = records.parse_accounts(account_rows)

        self._entries = entries.items
        self._categories = CategoryIndex(categories.items)
        self._accounts = accounts.items

        report = LoadReport(
            entries=len(entries.items),
            categories=len(categories.items),
            accounts=len(accounts.items),
            skipped_entries=entries.skipped,
            skipped_categories=categories.skipped,
            skipped_accounts=accounts.skipped,
        )
        _logger.info(
            "context:load entries=%d categories=%d accounts=%d skipped=%d",
            report.entries,
            report.categories,
            report.accounts,
            report.skipped_entries + report.skipped_categories + report.skipped_accounts,
        )
        return report

    def clear(self) -> None:
        """Drop all session data and reset preferences."""

        self._entries = []
        self._categories = CategoryIndex()
        self._accounts = []
        self.preferences = Preferences()
        _logger.debug("context:cleared")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        return tuple(self._entries)

    @property
    def categories(self) -> CategoryIndex:
        return self._categories

    @property
    def accounts(self) -> tuple[Account, ...]:
        return tuple(self._accounts)

    def scoped_entries(self) -> list[LedgerEntry]:
        return filter_entries(self._entries, scope=self.preferences.account_scope)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def toggle_hide_values(self) -> bool:
        self.preferences = replace(self.preferences, hide_values=not self.preferences.hide_values)
        return self.preferences.hide_values

    def active_window(self, today: date) -> DateRange:
        prefs = self.preferences
        if (
            prefs.time_range == TimeRange.CUSTOM
            and prefs.custom_start is not None
            and prefs.custom_end is not None
        ):
            return DateRange(prefs.custom_start, prefs.custom_end)
        return calculate_date_range(prefs.time_range, today=today)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def add_account(self, account: Account) -> None:
        if any(a.id == account.id for a in self._accounts):
            raise ValueError(f"account already exists: {account.id}")
        self._accounts.append(account)

    def adjust_account(self, account_id: str, amount: Decimal | int | str) -> Account:
        """Apply a deposit/withdrawal to one account. Ledger entries are untouched."""

        for i, acc in enumerate(self._accounts):
            if acc.id == account_id:
                updated = adjust_balance(acc, amount)
                self._accounts[i] = updated
                return updated
        raise KeyError(account_id)

    def add_category(self, category: Category) -> None:
        self._categories = CategoryIndex([*self._categories, category])

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def dashboard(self, month: ReferenceMonth | date) -> DashboardSnapshot:
        if isinstance(month, date):
            month = ReferenceMonth.from_date(month)

        month_entries = entries_in_month(self.scoped_entries(), month)
        totals = compute_totals(month_entries)
        account_totals = compute_account_totals(self._accounts)
        hidden = self.preferences.hide_values

        display = {
            "total_income": mask_if_hidden(totals.total_income, hidden),
            "total_expense": mask_if_hidden(totals.total_expense, hidden),
            "net_balance": mask_if_hidden(totals.net_balance, hidden),
            "total_checking": mask_if_hidden(account_totals.total_checking, hidden),
            "total_investments": mask_if_hidden(account_totals.total_investments, hidden),
            "total_credit_cards": mask_if_hidden(account_totals.total_credit_cards, hidden),
            "grand_total": mask_if_hidden(account_totals.grand_total, hidden),
        }

        return DashboardSnapshot(
            month=month,
            totals=totals,
            buckets=bucket_by_day(month_entries, month, max_buckets=self.max_buckets),
            expense_categories=summarize_by_category(
                month_entries, Classification.DESPESA, categories=self._categories
            ),
            income_categories=summarize_by_category(
                month_entries, Classification.RECEITA, categories=self._categories
            ),
            account_totals=account_totals,
            hidden=hidden,
            display=display,
        )


__all__ = ["DashboardSnapshot", "FinanceContext", "LoadReport", "Preferences"]
