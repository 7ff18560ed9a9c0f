from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tests.helpers.db import bootstrap_sqlite_db, seed_accounts, seed_entries
from vixus.cli import _resolve_max_buckets, app

runner = CliRunner()

SNAPSHOT = {
    "lancamentos": [
        {
            "id": "l1",
            "data_referencia": "2024-02-01",
            "classificacao": "receita",
            "valor_pago": 1000,
            "status_pagamento": "pago",
            "categoria": {"id": "c-sal", "name": "Salário", "type": "income"},
        },
        {
            "id": "l2",
            "data_referencia": "2024-02-01",
            "classificacao": "despesa",
            "valor_pago": 400,
            "status_pagamento": "pago",
            "categoria": {"id": "c-home", "name": "Moradia", "type": "expense"},
        },
        {
            "id": "l3",
            "data_referencia": "2024-02-15",
            "classificacao": "despesa",
            "valor_pago": 100,
            "status_pagamento": "a_pagar",
        },
    ],
    "categories": [],
    "accounts": [
        {"id": "a1", "name": "Nubank", "type": "Conta Corrente", "value": 500},
        {"id": "a2", "name": "Tesouro", "type": "Investimento", "value": 2000},
        {"id": "a3", "name": "Visa", "type": "Cartão de Crédito", "value": -300},
    ],
}


@pytest.fixture()
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT, ensure_ascii=False), encoding="utf-8")
    return path


def test_dashboard_from_snapshot(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["dashboard", "--input", str(snapshot_file), "--month", "2024-02"])

    assert result.exit_code == 0, result.output
    assert "R$ 1.000,00" in result.output
    assert "R$ 500,00" in result.output
    assert "R$ 2.200,00" in result.output
    assert "1-3/2" in result.output
    assert "28-29/2" in result.output
    assert "Moradia" in result.output


def test_dashboard_hide_values_masks_everything(snapshot_file: Path) -> None:
    result = runner.invoke(
        app, ["dashboard", "--input", str(snapshot_file), "--month", "2024-02", "--hide-values"]
    )

    assert result.exit_code == 0, result.output
    assert "••••••" in result.output
    assert "R$" not in result.output


def test_dashboard_max_buckets_from_option_and_env(
    snapshot_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    result = runner.invoke(
        app,
        ["dashboard", "--input", str(snapshot_file), "--month", "2024-02", "--max-buckets", "29"],
    )
    assert result.exit_code == 0, result.output
    assert "15/2" in result.output
    assert "13-15/2" not in result.output

    monkeypatch.setenv("VIXUS_MAX_BUCKETS", "2")
    result = runner.invoke(app, ["dashboard", "--input", str(snapshot_file), "--month", "2024-02"])
    assert result.exit_code == 0, result.output
    assert "1-15/2" in result.output
    assert "16-29/2" in result.output


def test_resolve_max_buckets(monkeypatch: pytest.MonkeyPatch) -> None:
    assert _resolve_max_buckets(None) == 10
    assert _resolve_max_buckets(4) == 4
    monkeypatch.setenv("VIXUS_MAX_BUCKETS", "7")
    assert _resolve_max_buckets(None) == 7
    monkeypatch.setenv("VIXUS_MAX_BUCKETS", "many")
    with pytest.raises(ValueError):
        _resolve_max_buckets(None)
    with pytest.raises(ValueError):
        _resolve_max_buckets(0)


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["dashboard", "--month", "2024-13"], "Error: failed to build dashboard"),
        (["dashboard", "--month", "2024-02", "--max-buckets", "0"], "positive integer"),
        (["dashboard", "--month", "2024-02", "--scope", "XX"], "Error"),
    ],
)
def test_dashboard_errors_exit_1(snapshot_file: Path, args, message) -> None:
    result = runner.invoke(app, [*args, "--input", str(snapshot_file)])

    assert result.exit_code == 1
    assert message in result.output


def test_missing_input_and_user_is_an_error() -> None:
    result = runner.invoke(app, ["accounts"])

    assert result.exit_code == 1
    assert "--user-id" in result.output


def test_missing_or_invalid_snapshot_file(tmp_path: Path) -> None:
    missing = runner.invoke(app, ["accounts", "--input", str(tmp_path / "nope.json")])
    assert missing.exit_code == 1

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2", encoding="utf-8")
    invalid = runner.invoke(app, ["accounts", "--input", str(bad)])
    assert invalid.exit_code == 1
    assert "invalid JSON" in invalid.output


def test_accounts_command(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["accounts", "--input", str(snapshot_file)])

    assert result.exit_code == 0, result.output
    assert "Nubank" in result.output
    assert "-R$ 300,00" in result.output
    assert "R$ 2.200,00" in result.output


def test_cash_flow_year_and_month(snapshot_file: Path) -> None:
    yearly = runner.invoke(app, ["cash-flow", "--input", str(snapshot_file), "--year", "2024"])
    assert yearly.exit_code == 0, yearly.output
    assert "fev/2024" in yearly.output
    assert "dez/2024" in yearly.output

    monthly = runner.invoke(
        app, ["cash-flow", "--input", str(snapshot_file), "--year", "2024", "--month", "2"]
    )
    assert monthly.exit_code == 0, monthly.output
    assert "2024-02-01" in monthly.output
    assert "2024-02-15" not in monthly.output

    with_unpaid = runner.invoke(
        app,
        [
            "cash-flow", "--input", str(snapshot_file),
            "--year", "2024", "--month", "2", "--include-unpaid",
        ],
    )
    assert "2024-02-15" in with_unpaid.output


def test_statement_command(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["statement", "--input", str(snapshot_file), "--year", "2024"])

    assert result.exit_code == 0, result.output
    assert "RECEITAS BRUTAS" in result.output
    assert "RESULTADO LÍQUIDO" in result.output
    assert "100.0%" in result.output


def test_dashboard_from_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    url = bootstrap_sqlite_db(tmp_path / "cli.db")
    seed_entries(
        database_url=url,
        rows=[
            {
                "id": "l1",
                "user_id": "u1",
                "account_type": "PF",
                "data_referencia": date(2024, 2, 3),
                "classificacao": "receita",
                "valor_pago": Decimal("321.00"),
                "status_pagamento": "pago",
                "tipo_lancamento": "efetivo",
            }
        ],
    )
    seed_accounts(
        database_url=url,
        rows=[
            {
                "id": "a1",
                "user_id": "u1",
                "name": "Nubank",
                "type": "Conta Corrente",
                "value": Decimal("10"),
            }
        ],
    )
    monkeypatch.setenv("DATABASE_URL", url)

    result = runner.invoke(app, ["dashboard", "--user-id", "u1", "--month", "2024-02"])

    assert result.exit_code == 0, result.output
    assert "R$ 321,00" in result.output
    assert "R$ 10,00" in result.output


def test_cash_flow_renders_activity_summary(tmp_path: Path) -> None:
    def row(rid, day, classification, amount, cat_id, name, cat_type):
        return {
            "id": rid,
            "data_referencia": day,
            "classificacao": classification,
            "valor_pago": amount,
            "status_pagamento": "pago",
            "categoria": {"id": cat_id, "name": name, "type": cat_type},
        }

    path = tmp_path / "pj.json"
    snapshot = {
        "lancamentos": [
            row("p1", "2023-12-20", "receita", 2000, "c-v", "Vendas", "operational_inflow"),
            row("p2", "2024-03-05", "receita", 5000, "c-e", "Empréstimo", "financing_inflow"),
            row("p3", "2024-03-10", "despesa", 1500, "c-m", "Máquinas", "investment_outflow"),
        ],
    }
    path.write_text(json.dumps(snapshot, ensure_ascii=False), encoding="utf-8")

    result = runner.invoke(app, ["cash-flow", "--input", str(path), "--year", "2024"])

    assert result.exit_code == 0, result.output
    assert "DFC 2024" in result.output
    assert "Atividades operacionais" in result.output
    assert "Atividades de investimento" in result.output
    assert "Atividades de financiamento" in result.output
    assert "R$ 2.000,00" in result.output
    assert "R$ 5.500,00" in result.output

    hidden = runner.invoke(
        app, ["cash-flow", "--input", str(path), "--year", "2024", "--hide-values"]
    )
    assert hidden.exit_code == 0, hidden.output
    assert "Saldo final" in hidden.output
    assert "R$" not in hidden.output
