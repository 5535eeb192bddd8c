"""CLI helpers for date range resolution."""

from datetime import date
from typing import Optional

import click

from tallybook.domain.entities import DateRange
from tallybook.domain.errors import ValidationError
from tallybook.utils.date_parser import parse_date, resolve_period


def _parse_or_exit(ctx, label: str, value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} date: {e}", err=True)
        ctx.exit(1)


def resolve_cli_window(
    ctx,
    *,
    period: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
) -> Optional[DateRange]:
    """Resolve a window from a period preset or explicit dates.

    Explicit dates without a period form an open or closed window; a period
    of ``custom`` needs both. No options at all means no window.
    """
    start = _parse_or_exit(ctx, "start", start_date)
    end = _parse_or_exit(ctx, "end", end_date)

    try:
        if period is None:
            if start is None and end is None:
                return None
            return DateRange(start, end)

        if period != "custom" and (start or end):
            click.echo(
                "Error: --start-date/--end-date can only be combined with --period custom.",
                err=True,
            )
            ctx.exit(1)

        return resolve_period(period, start, end)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
