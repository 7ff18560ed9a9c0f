"""Ledger totals and account rollups.

The two are independent aggregates: account balances move only through
:func:`adjust_balance`, never as a side effect of ledger entries.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal

from .logging_setup import get_logger
from .models import (
    ZERO,
    Account,
    AccountTotals,
    AccountType,
    LedgerEntry,
    LedgerTotals,
)

_logger = get_logger("vixus.totals")


def compute_totals(entries: Iterable[LedgerEntry]) -> LedgerTotals:
    """Income, expense and net over ``entries`` (already windowed by the caller)."""

    income = ZERO
    expense = ZERO
    for entry in entries:
        if entry.is_income:
            income += entry.paid_amount
        else:
            expense += entry.paid_amount
    return LedgerTotals(total_income=income, total_expense=expense, net_balance=income - expense)


def compute_account_totals(accounts: Iterable[Account]) -> AccountTotals:
    """Sum account values per type; ``grand_total`` is the sum of the three."""

    by_type: dict[AccountType, Decimal] = {t: ZERO for t in AccountType}
    for acc in accounts:
        by_type[acc.type] += acc.value

    checking = by_type[AccountType.CHECKING]
    investments = by_type[AccountType.INVESTMENT]
    credit_cards = by_type[AccountType.CREDIT_CARD]
    return AccountTotals(
        total_checking=checking,
        total_investments=investments,
        total_credit_cards=credit_cards,
        grand_total=checking + investments + credit_cards,
    )


def adjust_balance(account: Account, amount: Decimal | int | str) -> Account:
    """Return a copy of ``account`` with ``amount`` added to its value.

    Positive amounts are deposits, negative amounts withdrawals. Raises
    ``ValueError`` when ``amount`` is not a finite number.
    """

    try:
        delta = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except ArithmeticError as exc:
        raise ValueError(f"invalid amount: {amount!r}") from exc
    if not delta.is_finite():
        raise ValueError(f"invalid amount: {amount!r}")

    updated = replace(account, value=account.value + delta)
    _logger.debug("adjust_balance account=%s delta=%s value=%s", account.id, delta, updated.value)
    return updated


__all__ = ["adjust_balance", "compute_account_totals", "compute_totals"]
