"""Read-only queries against the hosted backend's Postgres schema.

Rows come back as plain dictionaries shaped like the backend's REST
responses, so they go through :mod:`vixus.records` exactly like data loaded
from a JSON snapshot. SQLAlchemy errors propagate to the caller.
"""

from __future__ import annotations

from typing import Any

from db.client import session_scope
from db.models import PoupejaAccount, PoupejaCategory, PoupejaLancamento
from sqlalchemy import select

from .logging_setup import get_logger
from .models import AccountScope

_logger = get_logger("vixus.sources")


def _category_dict(row: PoupejaCategory | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {
        "id": row.id,
        "name": row.name,
        "type": row.type,
        "color": row.color,
        "icon": row.icon,
        "parent_id": row.parent_id,
    }


def _entry_dict(row: PoupejaLancamento) -> dict[str, Any]:
    return {
        "id": row.id,
        "data_referencia": row.data_referencia,
        "classificacao": row.classificacao,
        "valor_original": row.valor_original,
        "juros_atraso": row.juros_atraso,
        "valor_pago": row.valor_pago,
        "categoria_id": row.categoria_id,
        "subcategoria_id": row.subcategoria_id,
        "fornecedor_id": row.fornecedor_id,
        "forma_pagamento_id": row.forma_pagamento_id,
        "descricao": row.descricao,
        "tipo_lancamento": row.tipo_lancamento,
        "data_vencimento": row.data_vencimento,
        "data_pagamento": row.data_pagamento,
        "status_pagamento": row.status_pagamento,
        "account_type": row.account_type,
        "categoria": _category_dict(row.categoria),
        "subcategoria": _category_dict(row.subcategoria),
    }


def load_entry_rows(
    *,
    user_id: str,
    scope: AccountScope | str | None = None,
    database_url: str | None = None,
) -> list[dict[str, Any]]:
    """Return the user's ledger rows, newest reference date first.

    ``scope`` restricts to PF or PJ entries; ``None`` returns both. Joined
    ``categoria``/``subcategoria`` records are embedded as nested dicts.
    """

    stmt = select(PoupejaLancamento).where(PoupejaLancamento.user_id == user_id)
    if scope is not None:
        stmt = stmt.where(PoupejaLancamento.account_type == AccountScope(scope).value)
    stmt = stmt.order_by(PoupejaLancamento.data_referencia.desc(), PoupejaLancamento.id)

    with session_scope(database_url=database_url) as session:
        rows = [_entry_dict(r) for r in session.execute(stmt).scalars().all()]

    _logger.info("load_entry_rows user=%s scope=%s rows=%d", user_id, scope or "all", len(rows))
    return rows


def load_category_rows(*, user_id: str, database_url: str | None = None) -> list[dict[str, Any]]:
    """Return the user's categories ordered with top-level categories first, then by name."""

    stmt = (
        select(PoupejaCategory)
        .where(PoupejaCategory.user_id == user_id)
        .order_by(PoupejaCategory.parent_id.is_not(None), PoupejaCategory.name, PoupejaCategory.id)
    )
    with session_scope(database_url=database_url) as session:
        rows = [_category_dict(r) for r in session.execute(stmt).scalars().all()]

    _logger.info("load_category_rows user=%s rows=%d", user_id, len(rows))
    return [r for r in rows if r is not None]


def load_account_rows(*, user_id: str, database_url: str | None = None) -> list[dict[str, Any]]:
    stmt = (
        select(PoupejaAccount)
        .where(PoupejaAccount.user_id == user_id)
        .order_by(PoupejaAccount.created_at, PoupejaAccount.name)
    )
    with session_scope(database_url=database_url) as session:
        rows = [
            {"id": r.id, "name": r.name, "type": r.type, "value": r.value}
            for r in session.execute(stmt).scalars().all()
        ]

    _logger.info("load_account_rows user=%s rows=%d", user_id, len(rows))
    return rows


__all__ = ["load_account_rows", "load_category_rows", "load_entry_rows"]
