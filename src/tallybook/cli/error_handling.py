"""CLI error handling helpers."""

import click

from tallybook.domain.errors import DomainError, error_report
from tallybook.logging_setup import get_logger

logger = get_logger("tallybook.cli")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` on stderr and exit with status 1.

    The offending field is appended when the error names one.
    """
    report = error_report(error)
    logger.debug("Command %s failed with %s", ctx.info_name, report.kind)
    if report.field:
        click.echo(f"Error: {report.message} [{report.field}]", err=True)
    else:
        click.echo(f"Error: {report.message}", err=True)
    ctx.exit(1)
