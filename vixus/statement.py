"""Income statement (DRE, *Demonstrativo de Resultado do Exercício*).

The statement is a fixed sequence of lines over one calendar year. Header
lines (level 0) hold subtotals; category lines (level 1) sit under the
revenue and variable-cost headers, one per top-level category in first-seen
order. Deductions and fixed costs are not modelled, so they stay at zero and
the contribution margin, operating result and net result coincide.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from .logging_setup import get_logger
from .lookups import CategoryIndex
from .models import UNCATEGORIZED_NAME, ZERO, Category, LedgerEntry

GROSS_REVENUE = "RECEITAS BRUTAS"
REVENUE_DEDUCTIONS = "DEDUÇÕES DA RECEITA BRUTA"
NET_REVENUE = "RECEITA LÍQUIDA"
VARIABLE_COSTS = "CUSTOS VARIÁVEIS"
CONTRIBUTION_MARGIN = "MARGEM DE CONTRIBUIÇÃO"
OPERATING_RESULT = "RESULTADO OPERACIONAL"
NET_RESULT = "RESULTADO LÍQUIDO"

MONTHS: tuple[int, ...] = tuple(range(1, 13))

_HUNDRED = Decimal(100)

_logger = get_logger("vixus.statement")


def _zero_months() -> dict[int, Decimal]:
    return {m: ZERO for m in MONTHS}


@dataclass(frozen=True, slots=True)
class StatementLine:
    """One DRE row.

    Attributes
    ----------
    values:
        Amount per month, keyed 1..12 (all twelve keys always present).
    level:
        0 for headers and subtotals, 1 for category lines.
    percentage:
        ``total`` as a percentage of gross revenue, ``None`` when gross
        revenue is zero.
    """

    label: str
    level: int
    values: Mapping[int, Decimal]
    total: Decimal
    percentage: Decimal | None = None
    category_id: str | None = None


@dataclass(frozen=True, slots=True)
class MonthlyResult:
    month: int
    income: Decimal = ZERO
    expense: Decimal = ZERO
    result: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class IncomeStatement:
    year: int
    lines: list[StatementLine] = field(default_factory=list)
    monthly: list[MonthlyResult] = field(default_factory=list)

    def line(self, label: str) -> StatementLine | None:
        for ln in self.lines:
            if ln.label == label:
                return ln
        return None


@dataclass(slots=True)
class _Group:
    category_id: str | None
    values: dict[int, Decimal] = field(default_factory=_zero_months)


def _group_key(entry: LedgerEntry, index: CategoryIndex) -> tuple[str, str | None]:
    cat: Category | None = index.resolve(entry)
    if cat is None:
        return UNCATEGORIZED_NAME, None
    top = index.top_level(cat)
    return top.name, top.id


def _sum_groups(groups: Iterable[_Group]) -> dict[int, Decimal]:
    out = _zero_months()
    for g in groups:
        for m, v in g.values.items():
            out[m] += v
    return out


def _diff(a: Mapping[int, Decimal], b: Mapping[int, Decimal]) -> dict[int, Decimal]:
    return {m: a[m] - b[m] for m in MONTHS}


def build_income_statement(
    entries: Iterable[LedgerEntry],
    year: int,
    *,
    categories: CategoryIndex | Iterable[Category] | None = None,
) -> IncomeStatement:
    """Build the DRE for ``year``. Entries from other years are ignored."""

    index = categories if isinstance(categories, CategoryIndex) else CategoryIndex(categories or ())

    income_groups: dict[str, _Group] = {}
    expense_groups: dict[str, _Group] = {}
    for entry in entries:
        if entry.reference_date.year != year:
            continue
        name, cat_id = _group_key(entry, index)
        groups = income_groups if entry.is_income else expense_groups
        group = groups.setdefault(name, _Group(category_id=cat_id))
        group.values[entry.reference_date.month] += entry.paid_amount

    gross = _sum_groups(income_groups.values())
    deductions = _zero_months()
    net_revenue = _diff(gross, deductions)
    variable_costs = _sum_groups(expense_groups.values())
    margin = _diff(net_revenue, variable_costs)

    rows: list[tuple[str, int, Mapping[int, Decimal], str | None]] = [
        (GROSS_REVENUE, 0, gross, None)
    ]
    rows += [(name, 1, g.values, g.category_id) for name, g in income_groups.items()]
    rows += [
        (REVENUE_DEDUCTIONS, 0, deductions, None),
        (NET_REVENUE, 0, net_revenue, None),
        (VARIABLE_COSTS, 0, variable_costs, None),
    ]
    rows += [(name, 1, g.values, g.category_id) for name, g in expense_groups.items()]
    rows += [
        (CONTRIBUTION_MARGIN, 0, margin, None),
        (OPERATING_RESULT, 0, dict(margin), None),
        (NET_RESULT, 0, dict(margin), None),
    ]

    gross_total = sum(gross.values(), ZERO)
    lines: list[StatementLine] = []
    for label, level, values, cat_id in rows:
        total = sum(values.values(), ZERO)
        pct = total / gross_total * _HUNDRED if gross_total > 0 else None
        lines.append(
            StatementLine(
                label=label,
                level=level,
                values=dict(values),
                total=total,
                percentage=pct,
                category_id=cat_id,
            )
        )

    monthly = [
        MonthlyResult(
            month=m,
            income=gross[m],
            expense=variable_costs[m],
            result=gross[m] - variable_costs[m],
        )
        for m in MONTHS
    ]

    _logger.debug(
        "build_income_statement year=%d income_categories=%d expense_categories=%d",
        year,
        len(income_groups),
        len(expense_groups),
    )
    return IncomeStatement(year=year, lines=lines, monthly=monthly)


__all__ = [
    "CONTRIBUTION_MARGIN",
    "GROSS_REVENUE",
    "NET_RESULT",
    "NET_REVENUE",
    "OPERATING_RESULT",
    "REVENUE_DEDUCTIONS",
    "VARIABLE_COSTS",
    "IncomeStatement",
    "MonthlyResult",
    "StatementLine",
    "build_income_statement",
]
