"""Public interface for the ``vixus`` package.

Pure aggregation over a user's ledger entries, categories and accounts:
period buckets, category summaries, totals, the income statement and
Brazilian display formatting. Only symbol re-exports live here.
"""

from .api import (
    adjust_balance,
    bucket_by_day,
    bucket_by_month,
    bucket_by_year,
    build_income_statement,
    cash_flow_by_date,
    compute_account_totals,
    compute_totals,
    context_from_snapshot,
    filter_entries,
    format_currency,
    format_date_br,
    format_percentage,
    load_from_database,
    load_snapshot,
    mask_if_hidden,
    summarize_by_category,
    summarize_cash_flow_activities,
)
from .cashflow import CashFlowSummary
from .context import DashboardSnapshot, FinanceContext, Preferences
from .models import (
    Account,
    AccountScope,
    AccountTotals,
    AccountType,
    Category,
    CategorySummary,
    Classification,
    DateRange,
    EntryType,
    LedgerEntry,
    LedgerTotals,
    PaymentStatus,
    PeriodBucket,
    ReferenceMonth,
)
from .statement import IncomeStatement, StatementLine

__all__ = [
    # API
    "adjust_balance",
    "bucket_by_day",
    "bucket_by_month",
    "bucket_by_year",
    "build_income_statement",
    "cash_flow_by_date",
    "compute_account_totals",
    "compute_totals",
    "context_from_snapshot",
    "filter_entries",
    "format_currency",
    "format_date_br",
    "format_percentage",
    "load_from_database",
    "load_snapshot",
    "mask_if_hidden",
    "summarize_by_category",
    "summarize_cash_flow_activities",
    # Session
    "DashboardSnapshot",
    "FinanceContext",
    "Preferences",
    # Models / types
    "Account",
    "AccountScope",
    "AccountTotals",
    "AccountType",
    "CashFlowSummary",
    "Category",
    "CategorySummary",
    "Classification",
    "DateRange",
    "EntryType",
    "IncomeStatement",
    "LedgerEntry",
    "LedgerTotals",
    "PaymentStatus",
    "PeriodBucket",
    "ReferenceMonth",
    "StatementLine",
]
