"""Public API for the ``vixus`` package.

The aggregation functions are re-exported from their implementation modules.
This module adds the two ways of getting a populated
:class:`~vixus.context.FinanceContext`: from a JSON snapshot on disk, or from
the backend database.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .bucketing import (  # noqa: F401  (re-export)
    DEFAULT_MAX_BUCKETS,
    bucket_by_day,
    bucket_by_month,
    bucket_by_year,
    cash_flow_by_date,
)
from .cashflow import summarize_cash_flow_activities  # noqa: F401  (re-export)
from .context import FinanceContext, Preferences
from .filters import filter_entries  # noqa: F401  (re-export)
from .formatting import (  # noqa: F401  (re-export)
    format_currency,
    format_date_br,
    format_percentage,
    mask_if_hidden,
)
from .logging_setup import get_logger
from .models import AccountScope
from .statement import build_income_statement  # noqa: F401  (re-export)
from .summaries import summarize_by_category  # noqa: F401  (re-export)
from .totals import adjust_balance, compute_account_totals, compute_totals  # noqa: F401

# Database-backed loading imports ``vixus.sources`` lazily so snapshot users
# do not need a configured database.

SNAPSHOT_KEYS = ("lancamentos", "categories", "accounts")

_logger = get_logger("vixus.api")


def context_from_snapshot(
    snapshot: Mapping[str, Any],
    *,
    preferences: Preferences | None = None,
    max_buckets: int | None = DEFAULT_MAX_BUCKETS,
) -> FinanceContext:
    """Build a context from ``{"lancamentos": [...], "categories": [...], "accounts": [...]}``.

    Missing keys are treated as empty lists. Raises ``ValueError`` when a
    present key does not hold a list.
    """

    lists: dict[str, list[Any]] = {}
    for key in SNAPSHOT_KEYS:
        value = snapshot.get(key) or []
        if not isinstance(value, list):
            raise ValueError(f"snapshot key {key!r} must be a list, got {type(value).__name__}")
        lists[key] = value

    ctx = FinanceContext(preferences=preferences, max_buckets=max_buckets)
    ctx.load(lists["lancamentos"], lists["categories"], lists["accounts"])
    return ctx


def load_snapshot(
    path: str | Path,
    *,
    preferences: Preferences | None = None,
    max_buckets: int | None = DEFAULT_MAX_BUCKETS,
) -> FinanceContext:
    """Read a JSON snapshot file into a new context.

    Raises ``ValueError`` when the file is not a JSON object.
    """

    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON in {p}: {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise ValueError(f"snapshot {p} must contain a JSON object")
    _logger.debug("load_snapshot path=%s", p)
    return context_from_snapshot(data, preferences=preferences, max_buckets=max_buckets)


def load_from_database(
    *,
    user_id: str,
    scope: AccountScope | str | None = None,
    database_url: str | None = None,
    preferences: Preferences | None = None,
    max_buckets: int | None = DEFAULT_MAX_BUCKETS,
) -> FinanceContext:
    """Query the backend tables for ``user_id`` and load them into a new context."""

    from . import sources

    ctx = FinanceContext(preferences=preferences, max_buckets=max_buckets)
    ctx.load(
        sources.load_entry_rows(user_id=user_id, scope=scope, database_url=database_url),
        sources.load_category_rows(user_id=user_id, database_url=database_url),
        sources.load_account_rows(user_id=user_id, database_url=database_url),
    )
    return ctx


__all__ = [
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
]
