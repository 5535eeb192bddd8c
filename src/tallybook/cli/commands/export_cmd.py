"""CSV export command."""

from pathlib import Path

import click

from tallybook.cli.date_filters import resolve_cli_window
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import (
    resolve_category_or_exit,
    resolve_client_or_exit,
    resolve_company_or_exit,
)
from tallybook.domain.csv_export import CSVExportService
from tallybook.domain.entities import TransactionFilter, TransactionKind
from tallybook.utils.date_parser import PERIODS


@click.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: transacoes_<today>.csv)")
@click.option("--period", type=click.Choice(PERIODS, case_sensitive=False), help="Period preset")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--type", "kind", type=click.Choice(["income", "expense"], case_sensitive=False), help="Only income or only expenses")
@click.option("--company", help="Company name or ID")
@click.option("--client", help="Client name or ID")
@click.option("--category", help="Category name or ID")
@click.pass_context
def export_csv(
    ctx,
    output: str | None,
    period: str | None,
    start_date: str | None,
    end_date: str | None,
    kind: str | None,
    company: str | None,
    client: str | None,
    category: str | None,
):
    """Export transactions to a CSV file, oldest first."""
    window = resolve_cli_window(ctx, period=period, start_date=start_date, end_date=end_date)
    txn_kind = TransactionKind.parse(kind) if kind else None
    filters = TransactionFilter(
        company_id=resolve_company_or_exit(ctx, company),
        counterparty_id=resolve_client_or_exit(ctx, client),
        category_id=resolve_category_or_exit(ctx, category, txn_kind),
        kind=txn_kind,
    )

    service = CSVExportService(ctx.obj["db"], ctx.obj["owner_id"])
    try:
        export = service.export(window, filters)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    target = Path(output or export.filename)
    try:
        target.write_bytes(export.content)
    except OSError as e:
        click.echo(f"Error: Could not write {target}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {export.row_count} transaction(s) to {target}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_csv)
