from __future__ import annotations

from decimal import Decimal

from tests.helpers.ledger import category, entry
from vixus.lookups import CategoryIndex
from vixus.models import DEFAULT_CATEGORY_COLOR, UNCATEGORIZED_NAME, Classification
from vixus.summaries import summarize_by_category

FOOD = category("c-food", "Alimentação", color="#EF4444")
HOUSING = category("c-home", "Moradia", color="#3B82F6")
MARKET = category("c-market", "Mercado", color="#F97316", parent_id="c-food")
SALARY = category("c-salary", "Salário", type="income", color="#10B981")


def test_groups_by_category_and_sorts_descending() -> None:
    entries = [
        entry("2024-02-01", "despesa", "50", category=FOOD),
        entry("2024-02-02", "despesa", "1200", category=HOUSING),
        entry("2024-02-03", "despesa", "75.50", category=FOOD),
        entry("2024-02-03", "receita", "5000", category=SALARY),
    ]

    result = summarize_by_category(entries, Classification.DESPESA)

    assert [(s.category_name, s.total_amount) for s in result] == [
        ("Moradia", Decimal("1200")),
        ("Alimentação", Decimal("125.50")),
    ]
    assert result[1].color == "#EF4444"
    assert result[1].category_id == "c-food"


def test_total_matches_filtered_classification_sum() -> None:
    entries = [
        entry("2024-02-01", "despesa", "10.10", category=FOOD),
        entry("2024-02-01", "despesa", "20.20", category_id="c-home"),
        entry("2024-02-01", "despesa", "30.30"),
        entry("2024-02-01", "receita", "99.99", category=SALARY),
    ]

    result = summarize_by_category(entries, "expense", categories=[FOOD, HOUSING])

    totals = [s.total_amount for s in result]
    assert totals == sorted(totals, reverse=True)
    assert sum(totals, Decimal("0")) == Decimal("60.60")


def test_unresolvable_category_falls_back_to_sentinel() -> None:
    entries = [
        entry("2024-02-01", "despesa", "40", category_id="missing"),
        entry("2024-02-01", "despesa", "60"),
    ]

    [only] = summarize_by_category(entries, "despesa")

    assert only.category_name == UNCATEGORIZED_NAME
    assert only.color == DEFAULT_CATEGORY_COLOR
    assert only.total_amount == Decimal("100")
    assert only.category_id is None


def test_category_without_color_gets_neutral_default() -> None:
    plain = category("c-x", "Diversos")

    [only] = summarize_by_category([entry("2024-02-01", "despesa", "5", category=plain)], "despesa")

    assert only.color == DEFAULT_CATEGORY_COLOR


def test_ties_keep_first_seen_order() -> None:
    entries = [
        entry("2024-02-01", "despesa", "10", category=HOUSING),
        entry("2024-02-01", "despesa", "10", category=FOOD),
        entry("2024-02-01", "despesa", "30", category_id="nope"),
    ]

    result = summarize_by_category(entries, "despesa")

    assert [s.category_name for s in result] == [UNCATEGORIZED_NAME, "Moradia", "Alimentação"]


def test_roll_up_attributes_subcategories_to_parent() -> None:
    index = CategoryIndex([FOOD, MARKET, HOUSING])
    entries = [
        entry("2024-02-01", "despesa", "80", category=MARKET),
        entry("2024-02-01", "despesa", "20", category_id="c-food"),
    ]

    flat = summarize_by_category(entries, "despesa", categories=index)
    rolled = summarize_by_category(entries, "despesa", categories=index, roll_up=True)

    assert [s.category_name for s in flat] == ["Mercado", "Alimentação"]
    assert [(s.category_name, s.total_amount) for s in rolled] == [("Alimentação", Decimal("100"))]


def test_empty_input_yields_empty_list() -> None:
    assert summarize_by_category([], "receita") == []
    assert summarize_by_category([entry("2024-02-01", "despesa", "1")], "receita") == []
