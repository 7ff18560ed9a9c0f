# ruff: noqa: I001
"""CLI for the ``vixus`` package.

Terminal reports over a user's ledger: the monthly dashboard, cash flow, the
income statement (DRE) and account balances. Data comes either from a JSON
snapshot (``--input``) or straight from the backend database
(``--database-url``/``DATABASE_URL`` plus ``--user-id``). Environment
variables are loaded from a local ``.env`` using ``python-dotenv`` before any
command runs. Aggregation lives in :mod:`vixus.api` and related modules; this
module only resolves options and renders ``rich`` tables.
"""

from __future__ import annotations

import os
import sys
from datetime import date
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .bucketing import DEFAULT_MAX_BUCKETS, bucket_by_month, cash_flow_by_date
from .cashflow import CashFlowSummary, opening_balance_before, summarize_cash_flow_activities
from .context import FinanceContext, Preferences
from .formatting import format_percentage, mask_if_hidden
from .logging_setup import configure_logging, get_logger
from .models import AccountScope, DateRange, PeriodBucket, ReferenceMonth
from .periods import month_range
from .statement import build_income_statement
from .totals import compute_account_totals

_logger = get_logger("vixus.cli")

console = Console()


# ---- Small module-level helpers used by CLI commands -------------------------


def _resolve_max_buckets(cli_value: int | None) -> int:
    """Resolve the bucket threshold: option, then ``VIXUS_MAX_BUCKETS``, then default.

    Raises ``ValueError`` when the resolved value is not a positive integer.
    """

    if cli_value is not None:
        value = cli_value
    else:
        raw = os.getenv("VIXUS_MAX_BUCKETS")
        if not raw:
            return DEFAULT_MAX_BUCKETS
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"VIXUS_MAX_BUCKETS must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"max buckets must be a positive integer, got {value}")
    return value


def _load_context(
    *,
    input_path: Path | None,
    database_url: str | None,
    user_id: str | None,
    scope: str | None,
    hide_values: bool = False,
    max_buckets: int | None = DEFAULT_MAX_BUCKETS,
) -> FinanceContext:
    from .api import load_from_database, load_snapshot

    prefs = Preferences(
        hide_values=hide_values,
        account_scope=AccountScope(scope) if scope else None,
    )
    if input_path is not None:
        return load_snapshot(input_path, preferences=prefs, max_buckets=max_buckets)
    if not user_id:
        raise ValueError("either --input or --user-id is required")
    return load_from_database(
        user_id=user_id,
        database_url=database_url,
        preferences=prefs,
        max_buckets=max_buckets,
    )


def _bucket_table(title: str, buckets: list[PeriodBucket], *, hidden: bool) -> Table:
    table = Table(title=title)
    table.add_column("Período")
    table.add_column("Receitas", justify="right")
    table.add_column("Despesas", justify="right")
    table.add_column("Saldo", justify="right")
    table.add_column("Acumulado", justify="right")
    for b in buckets:
        table.add_row(
            b.label,
            mask_if_hidden(b.income, hidden),
            mask_if_hidden(b.expense, hidden),
            mask_if_hidden(b.period_balance, hidden),
            mask_if_hidden(b.cumulative_balance, hidden),
        )
    return table


def _activity_table(title: str, summary: CashFlowSummary, *, hidden: bool) -> Table:
    table = Table(title=title)
    table.add_column("Atividade")
    table.add_column("Entradas", justify="right")
    table.add_column("Saídas", justify="right")
    table.add_column("Saldo", justify="right")
    table.add_row("Saldo inicial", "", "", mask_if_hidden(summary.opening_balance, hidden))
    for flow in summary.activities:
        table.add_row(
            flow.label,
            mask_if_hidden(flow.inflow, hidden),
            mask_if_hidden(flow.outflow, hidden),
            mask_if_hidden(flow.balance, hidden),
        )
    table.add_row("Saldo final", "", "", mask_if_hidden(summary.closing_balance, hidden))
    return table


# ---- Command handlers ---------------------------------------------------------


def cmd_dashboard(
    *,
    input_path: Path | None,
    database_url: str | None,
    user_id: str | None,
    scope: str | None,
    month: str | None,
    hide_values: bool,
    max_buckets: int | None,
) -> int:
    """Render the monthly dashboard. Returns a process exit code."""

    try:
        ref = ReferenceMonth.parse(month) if month else ReferenceMonth.from_date(date.today())
        ctx = _load_context(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=scope,
            hide_values=hide_values,
            max_buckets=_resolve_max_buckets(max_buckets),
        )
        snap = ctx.dashboard(ref)
    except Exception as e:
        print(f"Error: failed to build dashboard: {e}", file=sys.stderr)
        return 1

    summary = Table(title=f"Resumo {ref}")
    summary.add_column("Indicador")
    summary.add_column("Valor", justify="right")
    summary.add_row("Receitas", snap.display["total_income"])
    summary.add_row("Despesas", snap.display["total_expense"])
    summary.add_row("Saldo", snap.display["net_balance"])
    summary.add_row("Saldo em contas", snap.display["grand_total"])
    console.print(summary)

    console.print(_bucket_table(f"Movimentação {ref}", snap.buckets, hidden=snap.hidden))

    categories = Table(title="Despesas por categoria")
    categories.add_column("Categoria")
    categories.add_column("Total", justify="right")
    if not snap.expense_categories:
        categories.add_row("Nenhuma despesa no período", "")
    for s in snap.expense_categories:
        categories.add_row(s.category_name, mask_if_hidden(s.total_amount, snap.hidden))
    console.print(categories)
    return 0


def cmd_cash_flow(
    *,
    input_path: Path | None,
    database_url: str | None,
    user_id: str | None,
    scope: str | None,
    year: int,
    month: int | None,
    include_unpaid: bool,
    hide_values: bool,
) -> int:
    """Render cash flow for a year (monthly) or for one month (per movement date).

    Both views end with the activity summary (operational, investment,
    financing) whose opening balance is the net of earlier movements.
    """

    paid_only = not include_unpaid
    try:
        ctx = _load_context(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=scope,
            hide_values=hide_values,
        )
        entries = ctx.scoped_entries()
        if month is None:
            period = str(year)
            window = DateRange(date(year, 1, 1), date(year, 12, 31))
            buckets = bucket_by_month(entries, year)
        else:
            ref = ReferenceMonth(year, month)
            period = str(ref)
            window = month_range(ref)
            buckets = cash_flow_by_date(entries, window, paid_only=paid_only)
        activities = summarize_cash_flow_activities(
            entries,
            ctx.categories,
            opening_balance=opening_balance_before(entries, window.start, paid_only=paid_only),
            window=window,
            paid_only=paid_only,
        )
    except Exception as e:
        print(f"Error: failed to build cash flow: {e}", file=sys.stderr)
        return 1

    console.print(_bucket_table(f"Fluxo de caixa {period}", buckets, hidden=hide_values))
    if not buckets:
        console.print("Nenhuma movimentação no período.")
    console.print(_activity_table(f"DFC {period}", activities, hidden=hide_values))
    return 0


def cmd_statement(
    *,
    input_path: Path | None,
    database_url: str | None,
    user_id: str | None,
    scope: str | None,
    year: int,
    hide_values: bool,
) -> int:
    """Render the income statement (DRE) for ``year``."""

    try:
        ctx = _load_context(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=scope,
            hide_values=hide_values,
        )
        dre = build_income_statement(ctx.scoped_entries(), year, categories=ctx.categories)
    except Exception as e:
        print(f"Error: failed to build income statement: {e}", file=sys.stderr)
        return 1

    table = Table(title=f"DRE {year}")
    table.add_column("Conta")
    table.add_column("Total", justify="right")
    table.add_column("%", justify="right")
    for line in dre.lines:
        label = line.label if line.level == 0 else f"  {line.label}"
        pct = "-"
        if line.percentage is not None:
            pct = format_percentage(line.percentage, hidden=hide_values)
        table.add_row(label, mask_if_hidden(line.total, hide_values), pct)
    console.print(table)
    return 0


def cmd_accounts(
    *,
    input_path: Path | None,
    database_url: str | None,
    user_id: str | None,
    hide_values: bool,
) -> int:
    """Render account balances and per-type totals."""

    try:
        ctx = _load_context(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=None,
            hide_values=hide_values,
        )
        totals = compute_account_totals(ctx.accounts)
    except Exception as e:
        print(f"Error: failed to load accounts: {e}", file=sys.stderr)
        return 1

    table = Table(title="Contas")
    table.add_column("Conta")
    table.add_column("Tipo")
    table.add_column("Saldo", justify="right")
    for acc in ctx.accounts:
        table.add_row(acc.name, acc.type.value, mask_if_hidden(acc.value, hide_values))
    console.print(table)

    rollup = Table(title="Totais")
    rollup.add_column("Tipo")
    rollup.add_column("Total", justify="right")
    rollup.add_row("Conta Corrente", mask_if_hidden(totals.total_checking, hide_values))
    rollup.add_row("Investimentos", mask_if_hidden(totals.total_investments, hide_values))
    rollup.add_row("Cartões de Crédito", mask_if_hidden(totals.total_credit_cards, hide_values))
    rollup.add_row("Total geral", mask_if_hidden(totals.grand_total, hide_values))
    console.print(rollup)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Financial reports (dashboard, cash flow, DRE, accounts) from a JSON "
        "snapshot or the backend database. Loads DATABASE_URL from a local .env."
    ),
)


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Shared by every command that reads ledger data.
INPUT_OPTION: OptionInfo = typer.Option(
    None,
    "--input",
    help='JSON snapshot: {"lancamentos": [...], "categories": [...], "accounts": [...]}',
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
)
USER_ID_OPTION: OptionInfo = typer.Option(
    None, "--user-id", help="Backend user id (required without --input)."
)
SCOPE_OPTION: OptionInfo = typer.Option(
    None, "--scope", help="Restrict to PF (personal) or PJ (business) entries."
)
HIDE_VALUES_OPTION: OptionInfo = typer.Option(
    False, "--hide-values", help="Mask monetary values in the output."
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command("dashboard")
def dashboard_cmd(
    input_path: Path | None = INPUT_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    user_id: str | None = USER_ID_OPTION,
    scope: str | None = SCOPE_OPTION,
    hide_values: bool = HIDE_VALUES_OPTION,
    *,
    month: str | None = typer.Option(None, help="Reference month as YYYY-MM (default: current)."),
    max_buckets: int | None = typer.Option(
        None, help="Maximum chart buckets per month (falls back to VIXUS_MAX_BUCKETS, then 10)."
    ),
) -> None:
    """Monthly totals, condensed daily movement and expenses by category."""

    _exit(
        cmd_dashboard(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=scope,
            month=month,
            hide_values=hide_values,
            max_buckets=max_buckets,
        )
    )


@app.command("cash-flow")
def cash_flow_cmd(
    input_path: Path | None = INPUT_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    user_id: str | None = USER_ID_OPTION,
    scope: str | None = SCOPE_OPTION,
    hide_values: bool = HIDE_VALUES_OPTION,
    *,
    year: int = typer.Option(..., help="Calendar year."),
    month: int | None = typer.Option(None, min=1, max=12, help="Show one month by movement date."),
    include_unpaid: bool = typer.Option(
        False, help="Include entries not yet paid in the per-date view and the DFC summary."
    ),
) -> None:
    """Cash flow (DFC) for a year by month, or for one month by date."""

    _exit(
        cmd_cash_flow(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=scope,
            year=year,
            month=month,
            include_unpaid=include_unpaid,
            hide_values=hide_values,
        )
    )


@app.command("statement")
def statement_cmd(
    input_path: Path | None = INPUT_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    user_id: str | None = USER_ID_OPTION,
    scope: str | None = SCOPE_OPTION,
    hide_values: bool = HIDE_VALUES_OPTION,
    *,
    year: int = typer.Option(..., help="Calendar year."),
) -> None:
    """Income statement (DRE) for a year."""

    _exit(
        cmd_statement(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            scope=scope,
            year=year,
            hide_values=hide_values,
        )
    )


@app.command("accounts")
def accounts_cmd(
    input_path: Path | None = INPUT_OPTION,
    database_url: str | None = DATABASE_URL_OPTION,
    user_id: str | None = USER_ID_OPTION,
    hide_values: bool = HIDE_VALUES_OPTION,
) -> None:
    """Account balances and totals per account type."""

    _exit(
        cmd_accounts(
            input_path=input_path,
            database_url=database_url,
            user_id=user_id,
            hide_values=hide_values,
        )
    )


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps variables already set in the environment
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
