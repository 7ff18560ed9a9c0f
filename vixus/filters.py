"""Ledger list filters (search, status, classification, window, PF/PJ scope)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import AccountScope, Classification, DateRange, LedgerEntry, PaymentStatus

ALL = "all"


def _criterion[E](value: E | str | None, parse: type[E]) -> E | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() == ALL:
        return None
    return parse(value)


def _matches_search(entry: LedgerEntry, needle: str, supplier_names: Mapping[str, str]) -> bool:
    if entry.description and needle in entry.description.casefold():
        return True
    if entry.supplier_id is not None:
        supplier = supplier_names.get(entry.supplier_id)
        if supplier and needle in supplier.casefold():
            return True
    return False


def filter_entries(
    entries: Iterable[LedgerEntry],
    *,
    search: str | None = None,
    status: PaymentStatus | str | None = None,
    classification: Classification | str | None = None,
    window: DateRange | None = None,
    scope: AccountScope | str | None = None,
    supplier_names: Mapping[str, str] | None = None,
) -> list[LedgerEntry]:
    """Return the entries matching every active criterion, in input order.

    ``None`` or ``"all"`` disables a criterion. ``search`` is matched
    case-insensitively against the description and, when ``supplier_names``
    maps supplier ids to names, against the supplier name. Unknown status,
    classification or scope strings raise ``ValueError``.
    """

    status_f = _criterion(status, PaymentStatus)
    class_f = _criterion(classification, Classification)
    scope_f = _criterion(scope, AccountScope)
    needle = search.strip().casefold() if search else ""
    suppliers = supplier_names or {}

    out: list[LedgerEntry] = []
    for entry in entries:
        if status_f is not None and entry.payment_status is not status_f:
            continue
        if class_f is not None and entry.classification is not class_f:
            continue
        if scope_f is not None and entry.account_scope is not scope_f:
            continue
        if window is not None and not window.contains(entry.reference_date):
            continue
        if needle and not _matches_search(entry, needle, suppliers):
            continue
        out.append(entry)
    return out


__all__ = ["ALL", "filter_entries"]
