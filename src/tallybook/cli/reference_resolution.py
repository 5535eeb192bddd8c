"""CLI helpers for resolving companies, clients and categories by name or ID."""

from __future__ import annotations

from typing import Optional

import click

from tallybook.domain.category import CategoryService
from tallybook.domain.company import CompanyService
from tallybook.domain.counterparty import CounterpartyService
from tallybook.domain.entities import TransactionKind
from tallybook.utils.reference_resolver import resolve_reference


def _or_exit(ctx: click.Context, resolve) -> int:
    try:
        return resolve()
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_company_or_exit(ctx: click.Context, value: Optional[str]) -> Optional[int]:
    """Resolve a company name or ID, or exit with a CLI error."""
    if value is None:
        return None
    service = CompanyService(ctx.obj["db"], ctx.obj["owner_id"])
    return _or_exit(
        ctx,
        lambda: resolve_reference("Company", value, service.get_company, service.list_companies),
    )


def resolve_client_or_exit(ctx: click.Context, value: Optional[str]) -> Optional[int]:
    """Resolve a client name or ID, or exit with a CLI error."""
    if value is None:
        return None
    service = CounterpartyService(ctx.obj["db"], ctx.obj["owner_id"])
    return _or_exit(
        ctx,
        lambda: resolve_reference(
            "Client", value, service.get_counterparty, service.list_counterparties
        ),
    )


def resolve_category_or_exit(
    ctx: click.Context, value: Optional[str], kind: Optional[TransactionKind] = None
) -> Optional[int]:
    """Resolve a category name or ID, or exit with a CLI error.

    Names are looked up among categories of ``kind`` when it is given.
    """
    if value is None:
        return None
    service = CategoryService(ctx.obj["db"], ctx.obj["owner_id"])
    return _or_exit(
        ctx,
        lambda: resolve_reference(
            "Category", value, service.get_category, lambda: service.list_categories(kind)
        ),
    )
