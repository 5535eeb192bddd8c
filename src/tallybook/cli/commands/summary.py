"""Summary commands."""

from datetime import date

import click

from tallybook.cli.date_filters import resolve_cli_window
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import (
    resolve_category_or_exit,
    resolve_client_or_exit,
    resolve_company_or_exit,
)
from tallybook.domain.entities import DateRange, GroupBy, Summary, TransactionFilter
from tallybook.domain.money import format_money_pair
from tallybook.domain.summary import SummaryService
from tallybook.utils.date_parser import PERIODS

GROUP_CHOICES = {
    "none": GroupBy.NONE,
    "company": GroupBy.COMPANY,
    "client": GroupBy.COUNTERPARTY,
    "month": GroupBy.MONTH,
}


def _display_rows(rows: list[tuple[str, Summary]], settings) -> None:
    click.echo("-" * 112)
    click.echo(
        f"{'':<20} {'Income':>14} {'Expense':>14} {'Bal. official':>16} "
        f"{'Bal. unofficial':>16} {'Balance':>16} {'Count':>7}"
    )
    click.echo("-" * 112)
    for label, summary in rows:
        income = format_money_pair(summary.income, settings.locale, settings.currency)
        expense = format_money_pair(summary.expense, settings.locale, settings.currency)
        balance = format_money_pair(summary.balance, settings.locale, settings.currency)
        click.echo(
            f"{label[:20]:<20} {income.total:>14} {expense.total:>14} {balance.official:>16} "
            f"{balance.unofficial:>16} {balance.total:>16} {summary.count:>7}"
        )


@click.command("summary")
@click.option(
    "--period",
    type=click.Choice(PERIODS, case_sensitive=False),
    help="Period preset (default: month when no dates are given)",
)
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--group-by",
    type=click.Choice(list(GROUP_CHOICES), case_sensitive=False),
    default="none",
    show_default=True,
    help="Grouping dimension",
)
@click.option("--year", type=int, help="Calendar year for --group-by month (default: current year)")
@click.option("--company", help="Company name or ID")
@click.option("--client", help="Client name or ID")
@click.option("--category", help="Category name or ID")
@click.pass_context
def summary(
    ctx,
    period: str | None,
    start_date: str | None,
    end_date: str | None,
    group_by: str,
    year: int | None,
    company: str | None,
    client: str | None,
    category: str | None,
):
    """Show income, expense and balance totals.

    Examples:
        tallybook summary --period year
        tallybook summary --group-by company --start-date 2024-01-01 --end-date 2024-06-30
        tallybook summary --group-by month --year 2024 --client "Acme"
    """
    settings = ctx.obj["settings"]
    dimension = GROUP_CHOICES[group_by.lower()]
    filters = TransactionFilter(
        company_id=resolve_company_or_exit(ctx, company),
        counterparty_id=resolve_client_or_exit(ctx, client),
        category_id=resolve_category_or_exit(ctx, category),
    )

    if dimension == GroupBy.MONTH:
        if period or start_date or end_date:
            click.echo("Error: --group-by month takes --year instead of a period or dates.", err=True)
            ctx.exit(1)
        year = year or date.today().year
        window = DateRange.for_year(year)
        heading = f"Summary for {year}"
    else:
        if year is not None:
            click.echo("Error: --year can only be used with --group-by month.", err=True)
            ctx.exit(1)
        if period is None and not start_date and not end_date:
            period = "month"
        window = resolve_cli_window(ctx, period=period, start_date=start_date, end_date=end_date)
        start = window.start if window and window.start else "beginning"
        end = window.end if window and window.end else "today"
        heading = f"Summary from {start} to {end}"

    service = SummaryService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        rows = service.labelled(dimension, window, filters)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\n{heading}:")
    _display_rows(rows, settings)


def register_commands(cli):
    """Register summary commands with CLI."""
    cli.add_command(summary)
