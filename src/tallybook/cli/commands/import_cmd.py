"""CSV import command."""

import click

from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import resolve_company_or_exit
from tallybook.domain.csv_import import CSVImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--company", help="Company name or ID assigned to every row (ignores the empresa column)")
@click.pass_context
def import_csv(ctx, csv_file: str, company: str | None):
    """Import transactions from a CSV file.

    Columns: data,tipo,empresa,cliente,categoria,valor_oficial,valor_nao_oficial,descricao
    """
    company_id = resolve_company_or_exit(ctx, company)
    service = CSVImportService(ctx.obj["db"], ctx.obj["owner_id"])

    try:
        result = service.import_file(csv_file, default_company_id=company_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {len(result.created)} transactions")
    if result.rejected:
        click.echo(f"  Rejected: {len(result.rejected)} rows")
        for error in result.rejected:
            click.echo(f"    Row {error.row_number}: [{error.reason}] {error.message}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
