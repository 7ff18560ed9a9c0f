from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from tests.helpers.ledger import category, entry
from vixus.cashflow import (
    Activity,
    activity_of,
    is_inflow,
    opening_balance_before,
    summarize_cash_flow_activities,
)
from vixus.lookups import CategoryIndex
from vixus.models import DateRange, PaymentStatus

SALES = category("c-sales", "Vendas", type="operational_inflow")
SUPPLIERS = category("c-sup", "Fornecedores", type="operational_outflow")
EQUIPMENT = category("c-eq", "Equipamentos", type="investment_outflow")
ASSET_SALE = category("c-as", "Venda de ativos", type="investment_inflow")
LOAN = category("c-loan", "Empréstimos", type="financing_inflow")
LOAN_PAYMENT = category("c-lp", "Amortização", type="financing_outflow")
# Subcategory without an activity type of its own
FREIGHT = category("c-fr", "Frete", type="", parent_id="c-sup")
INDEX = CategoryIndex([SALES, SUPPLIERS, EQUIPMENT, ASSET_SALE, LOAN, LOAN_PAYMENT, FREIGHT])

YEAR_2024 = DateRange(date(2024, 1, 1), date(2024, 12, 31))


@pytest.mark.parametrize(
    ("category_type", "inflow", "activity"),
    [
        ("operational_inflow", True, Activity.OPERATIONAL),
        ("operational_outflow", False, Activity.OPERATIONAL),
        ("investment_inflow", True, Activity.INVESTMENT),
        ("financing_outflow", False, Activity.FINANCING),
        ("income", True, None),
        ("expense", False, None),
    ],
)
def test_type_strings_map_to_activity_and_direction(category_type, inflow, activity) -> None:
    assert is_inflow(category_type) is inflow
    assert activity_of(category_type) is activity


def test_activities_split_inflows_and_outflows() -> None:
    entries = [
        entry("2024-03-01", "receita", "5000", category=SALES),
        entry("2024-03-02", "despesa", "1200", category=SUPPLIERS),
        entry("2024-03-03", "despesa", "80", category_id="c-fr"),
        entry("2024-04-01", "despesa", "2000", category_id="c-eq"),
        entry("2024-04-02", "receita", "300", category=ASSET_SALE),
        entry("2024-05-01", "receita", "10000", category=LOAN),
        entry("2024-06-01", "despesa", "1500", category=LOAN_PAYMENT),
    ]

    summary = summarize_cash_flow_activities(
        entries, INDEX, opening_balance=Decimal("1000"), window=YEAR_2024
    )

    operational = summary.get(Activity.OPERATIONAL)
    assert (operational.inflow, operational.outflow) == (Decimal("5000"), Decimal("1280"))
    assert operational.balance == Decimal("3720")

    investment = summary.get("investment")
    assert (investment.inflow, investment.outflow) == (Decimal("300"), Decimal("2000"))

    financing = summary.get(Activity.FINANCING)
    assert financing.balance == Decimal("8500")

    assert [a.activity for a in summary.activities] == list(Activity)
    assert summary.net_change == Decimal("3720") + Decimal("-1700") + Decimal("8500")
    assert summary.closing_balance == Decimal("1000") + summary.net_change


def test_closing_balance_equals_opening_plus_activity_balances() -> None:
    entries = [
        entry("2024-01-10", "receita", "10.10", category=SALES),
        entry("2024-01-11", "despesa", "3.05", category=EQUIPMENT),
        entry("2024-01-12", "despesa", "7.25", category=LOAN_PAYMENT),
    ]

    summary = summarize_cash_flow_activities(entries, INDEX, opening_balance=Decimal("-2.50"))

    assert summary.closing_balance == Decimal("-2.50") + sum(
        (a.balance for a in summary.activities), Decimal("0")
    )
    assert summary.closing_balance == Decimal("-2.70")


def test_personal_and_uncategorized_entries_count_as_operational() -> None:
    salary = category("c-sal", "Salário", type="income")
    groceries = category("c-gro", "Mercado", type="expense")
    entries = [
        entry("2024-02-01", "receita", "3000", category=salary),
        entry("2024-02-02", "despesa", "400", category=groceries),
        entry("2024-02-03", "despesa", "50"),
        entry("2024-02-04", "despesa", "60", category_id="missing"),
    ]

    summary = summarize_cash_flow_activities(entries)

    operational = summary.get(Activity.OPERATIONAL)
    assert operational.inflow == Decimal("3000")
    assert operational.outflow == Decimal("510")
    assert summary.get(Activity.INVESTMENT).balance == 0
    assert summary.get(Activity.FINANCING).balance == 0


def test_unpaid_and_out_of_window_entries_are_skipped() -> None:
    entries = [
        entry("2024-03-01", "receita", "100", category=SALES),
        entry("2024-03-02", "receita", "999", category=SALES, payment_status=PaymentStatus.A_PAGAR),
        entry("2023-12-31", "receita", "777", category=SALES),
    ]

    paid = summarize_cash_flow_activities(entries, INDEX, window=YEAR_2024)
    assert paid.get(Activity.OPERATIONAL).inflow == Decimal("100")

    everything = summarize_cash_flow_activities(entries, INDEX, window=YEAR_2024, paid_only=False)
    assert everything.get(Activity.OPERATIONAL).inflow == Decimal("1099")


def test_empty_ledger_keeps_opening_balance() -> None:
    summary = summarize_cash_flow_activities([], opening_balance=Decimal("42"))

    assert len(summary.activities) == 3
    assert summary.closing_balance == Decimal("42")


def test_opening_balance_is_net_of_earlier_paid_entries() -> None:
    entries = [
        entry("2023-11-01", "receita", "500"),
        entry("2023-12-31", "despesa", "120"),
        entry("2023-12-15", "despesa", "999", payment_status=PaymentStatus.ATRASADO),
        entry("2024-01-01", "receita", "10000"),
    ]

    assert opening_balance_before(entries, date(2024, 1, 1)) == Decimal("380")
    assert opening_balance_before(entries, date(2024, 1, 1), paid_only=False) == Decimal("-619")
    assert opening_balance_before(entries, date(2023, 1, 1)) == 0
