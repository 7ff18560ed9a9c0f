"""Per-category totals for one classification."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .lookups import CategoryIndex
from .models import (
    DEFAULT_CATEGORY_COLOR,
    UNCATEGORIZED_NAME,
    ZERO,
    Category,
    CategorySummary,
    Classification,
    LedgerEntry,
)


def _resolve(
    entry: LedgerEntry, index: CategoryIndex, *, roll_up: bool
) -> Category | None:
    cat = index.resolve(entry)
    if cat is not None and roll_up:
        cat = index.top_level(cat)
    return cat


def summarize_by_category(
    entries: Iterable[LedgerEntry],
    classification: Classification | str,
    *,
    categories: CategoryIndex | Iterable[Category] | None = None,
    roll_up: bool = False,
) -> list[CategorySummary]:
    """Sum ``paid_amount`` per category for entries of ``classification``.

    Parameters
    ----------
    entries:
        Entries to summarize; consumed once. Entries of the other
        classification are ignored.
    classification:
        ``Classification`` member or any string it accepts
        (``"despesa"``, ``"expense"``...).
    categories:
        Optional index used when an entry carries only ``category_id``.
    roll_up:
        Attribute subcategories to their top-level parent.

    Notes
    -----
    Groups are keyed by display name, so two categories sharing a name merge.
    Unresolvable categories are reported under ``"Uncategorized"`` with the
    neutral default color. The result is sorted by ``total_amount``
    descending; the sort is stable, so ties keep first-seen order.
    """

    target = Classification(classification)
    index = categories if isinstance(categories, CategoryIndex) else CategoryIndex(categories or ())

    totals: dict[str, Decimal] = {}
    meta: dict[str, tuple[str, str | None]] = {}
    for entry in entries:
        if entry.classification is not target:
            continue
        cat = _resolve(entry, index, roll_up=roll_up)
        if cat is None:
            name, color, cat_id = UNCATEGORIZED_NAME, DEFAULT_CATEGORY_COLOR, None
        else:
            name, color, cat_id = cat.name, cat.color or DEFAULT_CATEGORY_COLOR, cat.id
        if name not in totals:
            totals[name] = ZERO
            meta[name] = (color, cat_id)
        totals[name] += entry.paid_amount

    summaries = [
        CategorySummary(
            category_name=name,
            color=meta[name][0],
            total_amount=total,
            category_id=meta[name][1],
        )
        for name, total in totals.items()
    ]
    summaries.sort(key=lambda s: s.total_amount, reverse=True)
    return summaries


__all__ = ["summarize_by_category"]
