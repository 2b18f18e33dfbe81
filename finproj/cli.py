"""
Command-Line Interface for FinProj.

Purpose
-------
Runs the projection engine over JSON records files and prints the results
as tables, without writing Python code.

Commands
--------
- amortize: Level payment and amortization schedule of a loan
- irr: Per-period and annualized rate of return of a cash-flow series
- payoff: Multi-debt payoff plan under a strategy
- networth: Monthly net-worth history and current summary
- goals: Savings goal projections and analytics
- income: Monthly income, expenses and net cash flow projection

Example Usage
-------------
    # Amortize a 30-year mortgage
    $ finproj amortize 300000 6.5 30

    # Rate of return with two interim flows
    $ finproj irr 1000 1100 --flow 100 --flow 100

    # Avalanche payoff with $200 extra, saved to JSON
    $ finproj payoff --config records.json --strategy avalanche --extra 200 -o plan.json

    # Show version
    $ finproj --version

Logging is configured from FINPROJ_* environment variables (see
``finproj.config.AppSettings``).
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import AppSettings
from .exceptions import FinProjError
from .log import setup_logging
from .utils import format_currency

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _load(config: Path):
    """Load a records file, turning load failures into a clean exit."""
    from .serialization import load_records

    try:
        return load_records(config)
    except (FinProjError, OSError, json.JSONDecodeError) as e:
        _fail(f"could not load {config}: {e}")


def _save(result, output: Optional[Path], quiet: bool) -> None:
    if output is None:
        return
    from .serialization import save_result

    save_result(result, output)
    if not quiet:
        click.echo(f"Results saved to {output}")


def _summary_table(title: str, rows) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for name, value in rows:
        table.add_row(name, value)
    return table


@click.group()
@click.version_option(version=__version__, prog_name="finproj")
@click.option("--quiet", "-q", is_flag=True, help="Plain output without tables")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    FinProj - Personal Finance Projection & Analytics Engine.

    Amortization, rate of return, debt payoff planning, net-worth history,
    savings goals and income projections from JSON records.

    Use 'finproj COMMAND --help' for command-specific help.
    """
    settings = AppSettings()
    setup_logging(settings.effective_log_level, settings.log_file)

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()


# ---------------------------------------------------------------------------
# amortize
# ---------------------------------------------------------------------------

@main.command()
@click.argument("principal", type=float)
@click.argument("rate", type=float)
@click.argument("years", type=float)
@click.option(
    "--periods-per-year", "-p",
    type=int,
    default=12,
    help="Payments per year (default: 12)"
)
@click.option(
    "--limit", "-n",
    type=int,
    default=12,
    help="Schedule rows to display, 0 for all (default: 12)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save the full schedule as JSON"
)
@click.pass_context
def amortize(
    ctx: click.Context,
    principal: float,
    rate: float,
    years: float,
    periods_per_year: int,
    limit: int,
    output: Optional[Path],
) -> None:
    """
    Amortization schedule of a level-payment loan.

    RATE is the nominal annual rate in percent.

    Example:
        finproj amortize 25000 6.5 5 --limit 0
    """
    console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]

    from .timevalue import amortization_schedule, loan_payment

    try:
        payment = loan_payment(principal, rate, years, periods_per_year)
        schedule = amortization_schedule(principal, rate, years, periods_per_year)
    except FinProjError as e:
        _fail(str(e))

    total_interest = sum(r.interest for r in schedule)
    summary = [
        ("Payment", format_currency(payment)),
        ("Periods", f"{len(schedule)}"),
        ("Total interest", format_currency(total_interest)),
        ("Total paid", format_currency(principal + total_interest)),
    ]
    shown = schedule if limit <= 0 else schedule[:limit]

    if not quiet:
        console.print(_summary_table("Loan Summary", summary))
        table = Table(title="Amortization Schedule", show_header=True)
        for col in ("Period", "Payment", "Principal", "Interest", "Balance"):
            table.add_column(col, justify="right")
        for r in shown:
            table.add_row(
                str(r.period),
                format_currency(r.payment),
                format_currency(r.principal),
                format_currency(r.interest),
                format_currency(r.balance),
            )
        console.print(table)
    else:
        for name, value in summary:
            click.echo(f"{name}: {value}")

    _save(schedule, output, quiet)


# ---------------------------------------------------------------------------
# irr
# ---------------------------------------------------------------------------

@main.command()
@click.argument("outlay", type=float)
@click.argument("terminal", type=float)
@click.option(
    "--flow", "-f",
    "flows",
    type=float,
    multiple=True,
    help="Interim cash flow, repeat in period order"
)
@click.option(
    "--periods-per-year", "-p",
    type=int,
    default=12,
    help="Periods per year used to annualize (default: 12)"
)
@click.option("--guess", type=float, default=None, help="Initial rate guess per period")
@click.pass_context
def irr(
    ctx: click.Context,
    outlay: float,
    terminal: float,
    flows: Tuple[float, ...],
    periods_per_year: int,
    guess: Optional[float],
) -> None:
    """
    Rate of return of an investment.

    OUTLAY is paid at t=0; TERMINAL is received one period after the last
    interim flow.

    Example:
        finproj irr 1000 1100 --flow 100 --flow 100
    """
    console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]

    from .rates import annualize_rate, solve_rate

    try:
        rate = solve_rate(outlay, list(flows), terminal, guess=guess)
    except FinProjError as e:
        _fail(str(e))

    if rate is None:
        click.echo("Rate of return could not be determined (solver did not converge)")
        return

    annual = annualize_rate(rate, periods_per_year)
    summary = [
        ("Rate per period", f"{rate * 100:.4f}%"),
        ("Annualized", f"{annual * 100:.4f}%"),
    ]
    if not quiet:
        console.print(_summary_table("Rate of Return", summary))
    else:
        for name, value in summary:
            click.echo(f"{name}: {value}")


# ---------------------------------------------------------------------------
# payoff
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to records file (JSON)"
)
@click.option(
    "--strategy", "-s",
    type=click.Choice(["avalanche", "snowball", "minimum"]),
    default="avalanche",
    help="Payoff strategy (default: avalanche)"
)
@click.option(
    "--extra", "-e",
    type=float,
    default=0.0,
    help="Additional monthly payment applied to each debt (default: 0)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save the plan as JSON"
)
@click.pass_context
def payoff(
    ctx: click.Context,
    config: Path,
    strategy: str,
    extra: float,
    output: Optional[Path],
) -> None:
    """
    Debt payoff plan.

    Example:
        finproj payoff -c records.json -s snowball -e 150
    """
    console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]

    from .debt import plan_strategy

    records = _load(config)
    try:
        plan = plan_strategy(records.debts, strategy, extra)
    except FinProjError as e:
        _fail(str(e))

    summary = [
        ("Strategy", plan.strategy.value),
        ("Total debt", format_currency(plan.total_debt)),
        ("Monthly cost", format_currency(plan.monthly_cost)),
        ("Months to debt-free", f"{plan.total_months}"),
        ("Total interest", format_currency(plan.total_interest)),
    ]
    if not plan.converged:
        summary.append(("Warning", "some debts never pay off"))

    if not quiet:
        console.print(_summary_table("Payoff Plan", summary))
        table = Table(title="Schedule", show_header=True)
        table.add_column("Debt", style="cyan")
        table.add_column("Rate", justify="right")
        table.add_column("Balance", justify="right")
        table.add_column("Months", justify="right")
        table.add_column("Interest", justify="right")
        for e in plan.payoff_schedule:
            months = f"{e.months}" if e.converged else f">{e.months}"
            table.add_row(
                e.name or str(e.debt_id),
                f"{e.annual_rate_percent:.2f}%",
                format_currency(e.balance),
                months,
                format_currency(e.total_interest),
            )
        console.print(table)
    else:
        for name, value in summary:
            click.echo(f"{name}: {value}")

    _save(plan, output, quiet)


# ---------------------------------------------------------------------------
# networth
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to records file (JSON)"
)
@click.option("--start", type=_DATE, default=None, help="First month (YYYY-MM-DD)")
@click.option("--end", type=_DATE, default=None, help="Last month (YYYY-MM-DD, default: today)")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save the series as JSON"
)
@click.pass_context
def networth(
    ctx: click.Context,
    config: Path,
    start: Optional[datetime],
    end: Optional[datetime],
    output: Optional[Path],
) -> None:
    """
    Monthly net-worth history.

    Investments are valued at their current price for every month.

    Example:
        finproj networth -c records.json --start 2024-01-01 --end 2024-12-01
    """
    console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]

    from .networth import reconstruct

    records = _load(config)
    try:
        points = reconstruct(
            records.assets,
            records.liabilities,
            records.investments,
            records.debts,
            _as_date(start),
            _as_date(end),
        )
    except FinProjError as e:
        _fail(str(e))

    if not quiet:
        table = Table(title="Net Worth", show_header=True)
        table.add_column("Date", style="cyan")
        for col in ("Assets", "Investments", "Liabilities", "Debts", "Net worth"):
            table.add_column(col, justify="right")
        for p in points:
            table.add_row(
                p.date.isoformat(),
                format_currency(p.assets, 0),
                format_currency(p.investments, 0),
                format_currency(p.liabilities, 0),
                format_currency(p.debts, 0),
                format_currency(p.net_worth, 0),
            )
        console.print(table)
    else:
        for p in points:
            click.echo(f"{p.date.isoformat()}: {format_currency(p.net_worth)}")

    _save(points, output, quiet)


# ---------------------------------------------------------------------------
# goals
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to records file (JSON)"
)
@click.option("--today", type=_DATE, default=None, help="Reference date (YYYY-MM-DD)")
@click.pass_context
def goals(ctx: click.Context, config: Path, today: Optional[datetime]) -> None:
    """
    Savings goal progress and required contributions.

    Example:
        finproj goals -c records.json
    """
    console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]

    from .goals import goal_analytics, project_goal

    records = _load(config)
    ref = _as_date(today) or date.today()
    projections = [project_goal(g, today=ref) for g in records.goals]
    stats = goal_analytics(records.goals, today=ref)

    summary = [
        ("Total saved", format_currency(stats.total_saved)),
        ("Total target", format_currency(stats.total_target)),
        ("Average progress", f"{stats.average_progress:.1f}%"),
        ("Achieved", f"{stats.achieved_goals}"),
        ("On track", f"{stats.on_track_goals}"),
        ("At risk", f"{stats.at_risk_goals}"),
    ]

    if not quiet:
        table = Table(title="Goals", show_header=True)
        table.add_column("Goal", style="cyan")
        for col in ("Progress", "Remaining", "Months", "Required/mo", "On track"):
            table.add_column(col, justify="right")
        for p in projections:
            table.add_row(
                p.name or "-",
                f"{p.progress_percent:.1f}%",
                format_currency(p.remaining_amount),
                f"{p.months_remaining}",
                format_currency(p.required_monthly_contribution),
                "yes" if p.on_track else "no",
            )
        console.print(table)
        console.print(_summary_table("Goal Analytics", summary))
    else:
        for p in projections:
            click.echo(
                f"{p.name or '-'}: {p.progress_percent:.1f}% "
                f"(required {format_currency(p.required_monthly_contribution)}/mo)"
            )
        for name, value in summary:
            click.echo(f"{name}: {value}")


# ---------------------------------------------------------------------------
# income
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to records file (JSON)"
)
@click.option(
    "--months", "-m",
    type=int,
    default=12,
    help="Projection horizon in months (default: 12)"
)
@click.pass_context
def income(ctx: click.Context, config: Path, months: int) -> None:
    """
    Income, expenses and net cash flow projection.

    Example:
        finproj income -c records.json -m 6
    """
    console = ctx.obj["console"]
    quiet = ctx.obj["quiet"]

    from .income import project_net_cash_flow, projected_income

    records = _load(config)
    flows = project_net_cash_flow(records.incomes, records.expenses, months)
    recurring = projected_income(records.incomes, months)

    summary = [
        ("Recurring income/mo", format_currency(recurring.monthly_projection)),
        ("Recurring sources", f"{recurring.recurring_sources_count}"),
        ("Total income", format_currency(sum(f.income for f in flows))),
        ("Total expenses", format_currency(sum(f.expenses for f in flows))),
        ("Net cash flow", format_currency(sum(f.net for f in flows))),
    ]

    if not quiet:
        table = Table(title="Cash Flow Projection", show_header=True)
        table.add_column("Month", style="cyan", justify="right")
        for col in ("Income", "Expenses", "Net"):
            table.add_column(col, justify="right")
        for f in flows:
            table.add_row(
                str(f.month_index),
                format_currency(f.income),
                format_currency(f.expenses),
                format_currency(f.net),
            )
        console.print(table)
        console.print(_summary_table("Summary", summary))
    else:
        for f in flows:
            click.echo(f"Month {f.month_index}: {format_currency(f.net)}")
        for name, value in summary:
            click.echo(f"{name}: {value}")


if __name__ == "__main__":
    main()
