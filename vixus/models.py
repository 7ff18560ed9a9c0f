"""Data models and type aliases for ``vixus``.

Records here are the validated, typed view of what the hosted backend returns
as loosely typed dictionaries (see :mod:`vixus.records` for the boundary).
Monetary values are always :class:`~decimal.Decimal`; dates are
:class:`~datetime.date`.

Enumeration values are the strings stored by the backend (Portuguese for the
ledger, display labels for account types). English aliases are accepted when
constructing members from raw strings, e.g. ``Classification("income")``.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import StrEnum

ZERO = Decimal("0")

# Sentinel used when an entry's category cannot be resolved.
UNCATEGORIZED_NAME = "Uncategorized"
DEFAULT_CATEGORY_COLOR = "#6B7280"


def _from_alias[E: StrEnum](cls: type[E], value: object, aliases: Mapping[str, str]) -> E | None:
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    for member in cls:
        if member.value.lower() == key:
            return member
    target = aliases.get(key)
    return cls(target) if target is not None else None


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Classification(StrEnum):
    """Income (receita) or expense (despesa). Drives sign semantics everywhere."""

    RECEITA = "receita"
    DESPESA = "despesa"

    @classmethod
    def _missing_(cls, value: object) -> Classification | None:
        return _from_alias(cls, value, _CLASSIFICATION_ALIASES)


class PaymentStatus(StrEnum):
    PAGO = "pago"
    A_PAGAR = "a_pagar"
    ATRASADO = "atrasado"

    @classmethod
    def _missing_(cls, value: object) -> PaymentStatus | None:
        return _from_alias(cls, value, _PAYMENT_STATUS_ALIASES)


class EntryType(StrEnum):
    PROJECAO = "projecao"
    EFETIVO = "efetivo"

    @classmethod
    def _missing_(cls, value: object) -> EntryType | None:
        return _from_alias(cls, value, _ENTRY_TYPE_ALIASES)


class AccountType(StrEnum):
    CHECKING = "Conta Corrente"
    INVESTMENT = "Investimento"
    CREDIT_CARD = "Cartão de Crédito"

    @classmethod
    def _missing_(cls, value: object) -> AccountType | None:
        return _from_alias(cls, value, _ACCOUNT_TYPE_ALIASES)


class AccountScope(StrEnum):
    """Pessoa Física (individual) or Pessoa Jurídica (business) ledger."""

    PF = "PF"
    PJ = "PJ"

    @classmethod
    def _missing_(cls, value: object) -> AccountScope | None:
        return _from_alias(cls, value, {})


_CLASSIFICATION_ALIASES = {"income": "receita", "expense": "despesa"}
_PAYMENT_STATUS_ALIASES = {
    "paid": "pago",
    "pending": "a_pagar",
    "to_pay": "a_pagar",
    "to-pay": "a_pagar",
    "overdue": "atrasado",
}
_ENTRY_TYPE_ALIASES = {"projected": "projecao", "actual": "efetivo"}
_ACCOUNT_TYPE_ALIASES = {
    "checking": "Conta Corrente",
    "conta_corrente": "Conta Corrente",
    "investment": "Investimento",
    "investments": "Investimento",
    "credit card": "Cartão de Crédito",
    "credit_card": "Cartão de Crédito",
    "cartao de credito": "Cartão de Crédito",
    "cartao_credito": "Cartão de Crédito",
}


# ---------------------------------------------------------------------------
# Reference records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Category:
    """A node of the two-level category tree.

    ``type`` is kept as the backend string: ``"income"``/``"expense"`` for
    personal ledgers, cash-flow activity types (``"operational_inflow"``...)
    for business ledgers. ``color`` is a display hint carried into summaries.
    """

    id: str
    name: str
    type: str
    color: str | None = None
    parent_id: str | None = None
    icon: str | None = None

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """A single financial movement (a *lançamento*).

    Attributes
    ----------
    reference_date:
        Date the movement is attributed to for reporting; distinct from
        ``due_date`` and ``payment_date``.
    paid_amount:
        Non-negative settled amount. ``classification`` gives it a sign.
    category / subcategory:
        Category records embedded by the backend's join query, when present.
        Lookups fall back to ``category_id`` against a category index.
    """

    id: str
    reference_date: date
    classification: Classification
    paid_amount: Decimal
    category_id: str | None = None
    subcategory_id: str | None = None
    supplier_id: str | None = None
    payment_method_id: str | None = None
    description: str | None = None
    due_date: date | None = None
    payment_date: date | None = None
    payment_status: PaymentStatus = PaymentStatus.A_PAGAR
    entry_type: EntryType = EntryType.EFETIVO
    original_amount: Decimal | None = None
    late_interest: Decimal | None = None
    account_scope: AccountScope = AccountScope.PF
    category: Category | None = None
    subcategory: Category | None = None

    @property
    def is_income(self) -> bool:
        return self.classification is Classification.RECEITA

    @property
    def signed_amount(self) -> Decimal:
        return self.paid_amount if self.is_income else -self.paid_amount


@dataclass(frozen=True, slots=True)
class Account:
    """A cash or credit holding, adjusted only through explicit balance operations."""

    id: str
    name: str
    type: AccountType
    value: Decimal


# ---------------------------------------------------------------------------
# Time windows
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class ReferenceMonth:
    """A calendar month (year + month) used to select and bucket entries."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if isinstance(self.year, bool) or not isinstance(self.year, int) or self.year < 1:
            raise ValueError(f"ReferenceMonth.year must be a positive integer, got {self.year!r}")
        if isinstance(self.month, bool) or not isinstance(self.month, int):
            raise ValueError(f"ReferenceMonth.month must be an integer, got {self.month!r}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"ReferenceMonth.month must be within 1..12, got {self.month}")

    @classmethod
    def from_date(cls, d: date) -> ReferenceMonth:
        return cls(d.year, d.month)

    @classmethod
    def parse(cls, text: str) -> ReferenceMonth:
        """Parse ``YYYY-MM`` (also accepts ``YYYY/MM``)."""

        s = text.strip().replace("/", "-")
        parts = s.split("-")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"invalid month (expected YYYY-MM): {text!r}")
        return cls(int(parts[0]), int(parts[1]))

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def previous(self) -> ReferenceMonth:
        if self.month == 1:
            return ReferenceMonth(self.year - 1, 12)
        return ReferenceMonth(self.year, self.month - 1)

    def next(self) -> ReferenceMonth:
        if self.month == 12:
            return ReferenceMonth(self.year + 1, 1)
        return ReferenceMonth(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True, slots=True)
class DateRange:
    """An inclusive ``[start, end]`` window of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


# ---------------------------------------------------------------------------
# Derived (view-model) records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PeriodBucket:
    """Income/expense aggregated over one period, with running balance.

    Created fresh on every aggregation call and never persisted.
    ``cumulative_balance`` is the running sum of ``period_balance`` over the
    sequence the bucket belongs to, in chronological order.
    """

    label: str
    start: date
    end: date
    income: Decimal = ZERO
    expense: Decimal = ZERO
    period_balance: Decimal = ZERO
    cumulative_balance: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class CategorySummary:
    category_name: str
    color: str
    total_amount: Decimal
    category_id: str | None = None


@dataclass(frozen=True, slots=True)
class LedgerTotals:
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    net_balance: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class AccountTotals:
    total_checking: Decimal = ZERO
    total_investments: Decimal = ZERO
    total_credit_cards: Decimal = ZERO
    grand_total: Decimal = ZERO


# Generic collections
type LedgerEntries = Iterable[LedgerEntry]
"""Any iterable of ledger entries. Aggregations consume it exactly once."""

type RawRecord = Mapping[str, object]
"""A loosely typed row as returned by the backend (column name -> value)."""


__all__ = [
    "DEFAULT_CATEGORY_COLOR",
    "UNCATEGORIZED_NAME",
    "ZERO",
    "Account",
    "AccountScope",
    "AccountTotals",
    "AccountType",
    "Category",
    "CategorySummary",
    "Classification",
    "DateRange",
    "EntryType",
    "LedgerEntries",
    "LedgerEntry",
    "LedgerTotals",
    "PaymentStatus",
    "PeriodBucket",
    "RawRecord",
    "ReferenceMonth",
]
