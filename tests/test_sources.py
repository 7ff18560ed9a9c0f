from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from tests.helpers.db import bootstrap_sqlite_db, seed_accounts, seed_categories, seed_entries
from vixus.api import load_from_database
from vixus.models import AccountScope, ReferenceMonth
from vixus.records import parse_entries
from vixus.sources import load_account_rows, load_category_rows, load_entry_rows


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    url = bootstrap_sqlite_db(tmp_path / "vixus.db")
    seed_categories(
        database_url=url,
        rows=[
            {"id": "c-home", "user_id": "u1", "name": "Moradia", "type": "expense", "color": "#3B82F6"},
            {"id": "c-rent", "user_id": "u1", "name": "Aluguel", "type": "expense", "parent_id": "c-home"},
            {"id": "c-sal", "user_id": "u1", "name": "Salário", "type": "income"},
            {"id": "c-other", "user_id": "u2", "name": "Outro", "type": "expense"},
        ],
    )
    seed_entries(
        database_url=url,
        rows=[
            {
                "id": "l1",
                "user_id": "u1",
                "account_type": "PF",
                "data_referencia": date(2024, 2, 1),
                "classificacao": "receita",
                "valor_pago": Decimal("1000.00"),
                "categoria_id": "c-sal",
                "status_pagamento": "pago",
                "tipo_lancamento": "efetivo",
            },
            {
                "id": "l2",
                "user_id": "u1",
                "account_type": "PF",
                "data_referencia": date(2024, 2, 5),
                "classificacao": "despesa",
                "valor_pago": Decimal("400.00"),
                "categoria_id": "c-home",
                "subcategoria_id": "c-rent",
                "descricao": "Aluguel fevereiro",
                "status_pagamento": "a_pagar",
                "tipo_lancamento": "efetivo",
            },
            {
                "id": "l3",
                "user_id": "u1",
                "account_type": "PJ",
                "data_referencia": date(2024, 1, 20),
                "classificacao": "despesa",
                "valor_pago": Decimal("75.00"),
                "status_pagamento": "pago",
                "tipo_lancamento": "projecao",
            },
            {
                "id": "l4",
                "user_id": "u2",
                "account_type": "PF",
                "data_referencia": date(2024, 2, 1),
                "classificacao": "despesa",
                "valor_pago": Decimal("1.00"),
                "status_pagamento": "pago",
                "tipo_lancamento": "efetivo",
            },
        ],
    )
    seed_accounts(
        database_url=url,
        rows=[
            {"id": "a1", "user_id": "u1", "name": "Nubank", "type": "Conta Corrente", "value": Decimal("500")},
            {"id": "a2", "user_id": "u1", "name": "Visa", "type": "Cartão de Crédito", "value": Decimal("-300")},
            {"id": "a3", "user_id": "u2", "name": "Outro", "type": "Investimento", "value": Decimal("9")},
        ],
    )
    return url


def test_entry_rows_are_scoped_to_user_and_newest_first(database_url: str) -> None:
    rows = load_entry_rows(user_id="u1", database_url=database_url)

    assert [r["id"] for r in rows] == ["l2", "l1", "l3"]
    rent = rows[0]
    assert rent["categoria"]["name"] == "Moradia"
    assert rent["subcategoria"]["parent_id"] == "c-home"
    assert rent["valor_pago"] == Decimal("400.00")
    assert rows[2]["categoria"] is None


def test_entry_rows_filter_by_scope(database_url: str) -> None:
    pj = load_entry_rows(user_id="u1", scope=AccountScope.PJ, database_url=database_url)
    pf = load_entry_rows(user_id="u1", scope="PF", database_url=database_url)

    assert [r["id"] for r in pj] == ["l3"]
    assert [r["id"] for r in pf] == ["l2", "l1"]


def test_rows_round_trip_through_record_parsing(database_url: str) -> None:
    result = parse_entries(load_entry_rows(user_id="u1", database_url=database_url))

    assert result.skipped == 0
    rent = result.items[0]
    assert rent.reference_date == date(2024, 2, 5)
    assert rent.category is not None and rent.category.color == "#3B82F6"
    assert rent.subcategory is not None and rent.subcategory.name == "Aluguel"
    assert result.items[2].account_scope is AccountScope.PJ


def test_category_rows_put_top_level_first(database_url: str) -> None:
    rows = load_category_rows(user_id="u1", database_url=database_url)

    assert [r["id"] for r in rows] == ["c-home", "c-sal", "c-rent"]


def test_account_rows(database_url: str) -> None:
    rows = load_account_rows(user_id="u1", database_url=database_url)

    assert {r["id"] for r in rows} == {"a1", "a2"}


def test_load_from_database_builds_context(database_url: str) -> None:
    ctx = load_from_database(user_id="u1", database_url=database_url)

    snap = ctx.dashboard(ReferenceMonth(2024, 2))

    assert snap.totals.total_income == Decimal("1000.00")
    assert snap.totals.total_expense == Decimal("400.00")
    assert snap.account_totals.grand_total == Decimal("200")
    assert [s.category_name for s in snap.expense_categories] == ["Moradia"]


def test_missing_database_url_is_reported() -> None:
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        load_entry_rows(user_id="u1")


def test_database_url_falls_back_to_env(database_url: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", database_url)

    assert len(load_account_rows(user_id="u2")) == 1
