"""Boundary validation: backend rows -> typed records.

The hosted backend returns loosely typed dictionaries whose keys are the
Portuguese column names of its tables (``data_referencia``, ``classificacao``,
``valor_pago``...). This module validates them with Pydantic and converts
them into the frozen dataclasses of :mod:`vixus.models`.

Policy
------
- A row missing a required field (``id``, ``data_referencia``,
  ``classificacao``) or carrying a non-numeric/negative ``valor_pago`` is
  skipped, counted and logged. Parsing a sequence never raises.
- Optional fields that fail to parse are dropped to ``None`` (or their
  default) instead of rejecting the whole row.
- English field names are accepted as aliases so fixtures and exports can use
  either vocabulary.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .logging_setup import get_logger
from .models import (
    ZERO,
    Account,
    AccountScope,
    AccountType,
    Category,
    Classification,
    EntryType,
    LedgerEntry,
    PaymentStatus,
)

_logger = get_logger("vixus.records")


# ---------------------------------------------------------------------------
# Lenient scalar coercion (optional fields)
# ---------------------------------------------------------------------------


def coerce_date(value: Any) -> date | None:
    """Return a ``date`` from a date/datetime/ISO string, or ``None``.

    Accepts ``YYYY-MM-DD``, ``YYYY-MM-DDTHH:MM:SS[...]`` and
    ``YYYY-MM-DD HH:MM:SS``; only the calendar date is kept.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    first = s.split()[0].split("T", 1)[0]
    try:
        return date.fromisoformat(first)
    except ValueError:
        return None


def coerce_decimal(value: Any) -> Decimal | None:
    """Return a finite ``Decimal`` or ``None`` for anything non-numeric."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int | float):
        d = Decimal(str(value))
    elif isinstance(value, str):
        try:
            d = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return d if d.is_finite() else None


def _coerce_enum[E](enum_cls: Callable[[Any], E], value: Any) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _id_to_str(value: Any) -> Any:
    # Backends hand out UUID strings, but numeric ids show up in fixtures.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Row models
# ---------------------------------------------------------------------------


class CategoryRow(BaseModel):
    """A ``poupeja_categories`` row (or an embedded join of one)."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = "expense"
    color: str | None = None
    parent_id: str | None = Field(
        default=None, validation_alias=AliasChoices("parent_id", "parentId")
    )
    icon: str | None = None

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> Any:
        return _id_to_str(v)

    def to_category(self) -> Category:
        return Category(
            id=self.id,
            name=self.name,
            type=self.type,
            color=self.color or None,
            parent_id=self.parent_id or None,
            icon=self.icon,
        )


def _embedded_category(value: Any) -> CategoryRow | None:
    if not isinstance(value, Mapping):
        return None
    try:
        return CategoryRow.model_validate(dict(value))
    except ValidationError:
        return None


class LedgerEntryRow(BaseModel):
    """A ``poupeja_lancamentos`` row, optionally with joined categories."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str = Field(min_length=1)
    reference_date: date = Field(
        validation_alias=AliasChoices("data_referencia", "reference_date", "referenceDate")
    )
    classification: Classification = Field(
        validation_alias=AliasChoices("classificacao", "classification")
    )
    paid_amount: Decimal = Field(
        ge=0, validation_alias=AliasChoices("valor_pago", "paid_amount", "paidAmount")
    )
    original_amount: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("valor_original", "original_amount", "originalAmount"),
    )
    late_interest: Decimal | None = Field(
        default=None,
        validation_alias=AliasChoices("juros_atraso", "late_interest", "lateInterest"),
    )
    category_id: str | None = Field(
        default=None, validation_alias=AliasChoices("categoria_id", "category_id", "categoryId")
    )
    subcategory_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("subcategoria_id", "subcategory_id", "subcategoryId"),
    )
    supplier_id: str | None = Field(
        default=None, validation_alias=AliasChoices("fornecedor_id", "supplier_id", "supplierId")
    )
    payment_method_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "forma_pagamento_id", "payment_method_id", "paymentMethodId"
        ),
    )
    description: str | None = Field(
        default=None, validation_alias=AliasChoices("descricao", "description")
    )
    due_date: date | None = Field(
        default=None, validation_alias=AliasChoices("data_vencimento", "due_date", "dueDate")
    )
    payment_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("data_pagamento", "payment_date", "paymentDate"),
    )
    payment_status: PaymentStatus | None = Field(
        default=None,
        validation_alias=AliasChoices("status_pagamento", "payment_status", "paymentStatus"),
    )
    entry_type: EntryType | None = Field(
        default=None,
        validation_alias=AliasChoices("tipo_lancamento", "entry_type", "entryType"),
    )
    account_scope: AccountScope | None = Field(
        default=None, validation_alias=AliasChoices("account_type", "account_scope")
    )
    category: CategoryRow | None = Field(
        default=None, validation_alias=AliasChoices("categoria", "category")
    )
    subcategory: CategoryRow | None = Field(
        default=None, validation_alias=AliasChoices("subcategoria", "subcategory")
    )

    @field_validator(
        "id", "category_id", "subcategory_id", "supplier_id", "payment_method_id", mode="before"
    )
    @classmethod
    def _ids(cls, v: Any) -> Any:
        return _id_to_str(v)

    @field_validator("classification", mode="before")
    @classmethod
    def _classification(cls, v: Any) -> Any:
        # Resolve English aliases; unknown values fall through to enum validation.
        return _coerce_enum(Classification, v) or v

    @field_validator("reference_date", mode="before")
    @classmethod
    def _reference_date(cls, v: Any) -> Any:
        # Keep the raw value when it cannot be coerced so validation reports it.
        parsed = coerce_date(v)
        return parsed if parsed is not None else v

    @field_validator("due_date", "payment_date", mode="before")
    @classmethod
    def _optional_dates(cls, v: Any) -> date | None:
        return coerce_date(v)

    @field_validator("original_amount", "late_interest", mode="before")
    @classmethod
    def _optional_amounts(cls, v: Any) -> Decimal | None:
        return coerce_decimal(v)

    @field_validator("paid_amount", mode="before")
    @classmethod
    def _paid_amount(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("valor_pago must be numeric")
        return v

    @field_validator("payment_status", mode="before")
    @classmethod
    def _payment_status(cls, v: Any) -> PaymentStatus | None:
        return _coerce_enum(PaymentStatus, v)

    @field_validator("entry_type", mode="before")
    @classmethod
    def _entry_type(cls, v: Any) -> EntryType | None:
        return _coerce_enum(EntryType, v)

    @field_validator("account_scope", mode="before")
    @classmethod
    def _account_scope(cls, v: Any) -> AccountScope | None:
        return _coerce_enum(AccountScope, v)

    @field_validator("category", "subcategory", mode="before")
    @classmethod
    def _embedded(cls, v: Any) -> CategoryRow | None:
        return _embedded_category(v)

    @field_validator(
        "category_id", "subcategory_id", "supplier_id", "payment_method_id", "description"
    )
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        return v or None

    def to_entry(self) -> LedgerEntry:
        return LedgerEntry(
            id=self.id,
            reference_date=self.reference_date,
            classification=self.classification,
            paid_amount=self.paid_amount,
            category_id=self.category_id,
            subcategory_id=self.subcategory_id,
            supplier_id=self.supplier_id,
            payment_method_id=self.payment_method_id,
            description=self.description,
            due_date=self.due_date,
            payment_date=self.payment_date,
            payment_status=self.payment_status or PaymentStatus.A_PAGAR,
            entry_type=self.entry_type or EntryType.EFETIVO,
            original_amount=self.original_amount,
            late_interest=self.late_interest,
            account_scope=self.account_scope or AccountScope.PF,
            category=self.category.to_category() if self.category else None,
            subcategory=self.subcategory.to_category() if self.subcategory else None,
        )


class AccountRow(BaseModel):
    """A ``poupeja_accounts`` row. A missing balance counts as zero."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str = Field(min_length=1)
    name: str = ""
    type: AccountType
    value: Decimal = ZERO

    @field_validator("id", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> Any:
        return _id_to_str(v)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v: Any) -> Any:
        return _coerce_enum(AccountType, v) or v

    @field_validator("value", mode="before")
    @classmethod
    def _value(cls, v: Any) -> Decimal:
        d = coerce_decimal(v)
        return d if d is not None else ZERO

    def to_account(self) -> Account:
        return Account(id=self.id, name=self.name, type=self.type, value=self.value)


# ---------------------------------------------------------------------------
# Sequence parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Records that passed validation plus the input positions that did not."""

    items: list[T]
    skipped_positions: tuple[int, ...] = ()

    @property
    def skipped(self) -> int:
        return len(self.skipped_positions)


def _parse_rows[T](
    rows: Iterable[Any],
    *,
    kind: str,
    model: type[BaseModel],
    convert: Callable[[Any], T],
) -> ParseResult[T]:
    items: list[T] = []
    skipped: list[int] = []
    for pos, row in enumerate(rows):
        if not isinstance(row, Mapping):
            skipped.append(pos)
            _logger.warning("parse_%s:skipped pos=%d reason=not_a_mapping", kind, pos)
            continue
        try:
            parsed = model.model_validate(dict(row))
        except ValidationError as exc:
            skipped.append(pos)
            fields = ",".join(sorted({str(e["loc"][0]) for e in exc.errors() if e.get("loc")}))
            _logger.warning(
                "parse_%s:skipped pos=%d id=%r fields=%s", kind, pos, row.get("id"), fields
            )
            continue
        items.append(convert(parsed))

    if skipped:
        _logger.info("parse_%s:done parsed=%d skipped=%d", kind, len(items), len(skipped))
    return ParseResult(items=items, skipped_positions=tuple(skipped))


def parse_entries(rows: Iterable[Any]) -> ParseResult[LedgerEntry]:
    """Validate backend ledger rows; malformed rows are skipped and counted."""

    return _parse_rows(rows, kind="entries", model=LedgerEntryRow, convert=LedgerEntryRow.to_entry)


def parse_categories(rows: Iterable[Any]) -> ParseResult[Category]:
    return _parse_rows(
        rows, kind="categories", model=CategoryRow, convert=CategoryRow.to_category
    )


def parse_accounts(rows: Iterable[Any]) -> ParseResult[Account]:
    return _parse_rows(rows, kind="accounts", model=AccountRow, convert=AccountRow.to_account)


__all__ = [
    "AccountRow",
    "CategoryRow",
    "LedgerEntryRow",
    "ParseResult",
    "coerce_date",
    "coerce_decimal",
    "parse_accounts",
    "parse_categories",
    "parse_entries",
]
