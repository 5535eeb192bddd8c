"""Transaction management commands."""

import mimetypes
from datetime import date
from pathlib import Path
from typing import Optional

import click

from tallybook.cli.date_filters import resolve_cli_window
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.reference_resolution import (
    resolve_category_or_exit,
    resolve_client_or_exit,
    resolve_company_or_exit,
)
from tallybook.domain.entities import ReceiptUpload, TransactionFilter, TransactionKind
from tallybook.domain.money import MoneyPair, format_amount
from tallybook.domain.transaction import TransactionService
from tallybook.utils.amount_parser import parse_amount
from tallybook.utils.date_parser import PERIODS, parse_date

KIND_CHOICE = click.Choice(["income", "expense", "receita", "despesa"], case_sensitive=False)


def _service(ctx) -> TransactionService:
    settings = ctx.obj["settings"]
    return TransactionService(
        ctx.obj["db"],
        ctx.obj["owner_id"],
        store=ctx.obj["store"],
        max_receipt_bytes=settings.max_receipt_bytes,
    )


def _money(settings, value) -> str:
    return format_amount(value, settings.locale, settings.currency)


def _parse_amount_or_exit(ctx, label: str, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} amount: {e}", err=True)
        ctx.exit(1)


def _parse_date_or_exit(ctx, value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _read_receipt(ctx, path: Optional[str]) -> Optional[ReceiptUpload]:
    if path is None:
        return None
    receipt_path = Path(path)
    try:
        data = receipt_path.read_bytes()
    except OSError as e:
        click.echo(f"Error: Could not read receipt file: {e}", err=True)
        ctx.exit(1)
    content_type = mimetypes.guess_type(receipt_path.name)[0] or "application/octet-stream"
    return ReceiptUpload(data=data, content_type=content_type, filename=receipt_path.name)


def _optional_reference(ctx, resolver, value: Optional[str], *args) -> Optional[int]:
    # An empty string clears the association
    if value is None or value == "":
        return None
    return resolver(ctx, value, *args)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--type", "kind", type=KIND_CHOICE, required=True, help="income or expense")
@click.option("--official", required=True, help="Official amount (e.g., 123.45)")
@click.option("--unofficial", default="0", show_default=True, help="Unofficial amount")
@click.option("--date", "date_str", default="today", help="Transaction date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--description", help="Transaction description")
@click.option("--company", help="Company name or ID")
@click.option("--client", help="Client name or ID")
@click.option("--category", help="Category name or ID (must match the type)")
@click.option("--receipt", type=click.Path(exists=True, dir_okay=False), help="Receipt image to attach")
@click.pass_context
def add_transaction(
    ctx,
    kind: str,
    official: str,
    unofficial: str,
    date_str: str,
    description: str | None,
    company: str | None,
    client: str | None,
    category: str | None,
    receipt: str | None,
):
    """Record a new income or expense.

    Examples:
        tallybook transaction add --type income --official 100 --unofficial 50 --company "Acme"
        tallybook transaction add --type despesa --official 12.30 --category Fuel --receipt fuel.jpg
    """
    txn_kind = TransactionKind.parse(kind)
    amount = MoneyPair(
        _parse_amount_or_exit(ctx, "official", official),
        _parse_amount_or_exit(ctx, "unofficial", unofficial),
    )
    occurred_on = _parse_date_or_exit(ctx, date_str)
    company_id = resolve_company_or_exit(ctx, company)
    client_id = resolve_client_or_exit(ctx, client)
    category_id = resolve_category_or_exit(ctx, category, txn_kind)
    upload = _read_receipt(ctx, receipt)

    try:
        txn = _service(ctx).create_transaction(
            kind=txn_kind,
            amount=amount,
            occurred_on=occurred_on,
            description=description,
            company_id=company_id,
            counterparty_id=client_id,
            category_id=category_id,
            receipt=upload,
        )
        click.echo(f"Created {txn.kind.value} transaction {txn.id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--period", type=click.Choice(PERIODS, case_sensitive=False), help="Period preset")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--type", "kind", type=KIND_CHOICE, help="Only income or only expenses")
@click.option("--company", help="Company name or ID")
@click.option("--client", help="Client name or ID")
@click.option("--category", help="Category name or ID")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--per-page", type=int, default=20, show_default=True, help="Transactions per page")
@click.pass_context
def list_transactions(
    ctx,
    period: str | None,
    start_date: str | None,
    end_date: str | None,
    kind: str | None,
    company: str | None,
    client: str | None,
    category: str | None,
    page: int,
    per_page: int,
):
    """List transactions, newest first."""
    settings = ctx.obj["settings"]
    window = resolve_cli_window(ctx, period=period, start_date=start_date, end_date=end_date)
    txn_kind = TransactionKind.parse(kind) if kind else None
    filters = TransactionFilter(
        company_id=resolve_company_or_exit(ctx, company),
        counterparty_id=resolve_client_or_exit(ctx, client),
        category_id=resolve_category_or_exit(ctx, category, txn_kind),
        kind=txn_kind,
    )

    try:
        result = _service(ctx).list_transactions(window, filters, page=page, per_page=per_page)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not result.items:
        click.echo("No transactions found.")
        return

    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    companies = {c.id: c.name for c in db.list_companies(owner_id)}
    clients = {c.id: c.name for c in db.list_counterparties(owner_id)}

    click.echo(f"\nFound {result.total} transaction(s), page {result.page} of {result.total_pages}:")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Type':<8} {'Official':>14} {'Unofficial':>14} "
        f"{'Company':<20} {'Client':<20} {'Receipt':<7}"
    )
    click.echo("-" * 110)
    for txn in result.items:
        click.echo(
            f"{txn.id:<6} {str(txn.occurred_on):<12} {txn.kind.value:<8} "
            f"{_money(settings, txn.amount.official):>14} "
            f"{_money(settings, txn.amount.unofficial):>14} "
            f"{companies.get(txn.company_id, '')[:20]:<20} "
            f"{clients.get(txn.counterparty_id, '')[:20]:<20} "
            f"{'yes' if txn.receipt_ref else '':<7}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show one transaction in detail."""
    settings = ctx.obj["settings"]
    service = _service(ctx)
    try:
        txn = service.require_transaction(transaction_id)
        receipt_url = service.receipt_url(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    db = ctx.obj["db"]
    owner_id = ctx.obj["owner_id"]
    company = db.get_company(owner_id, txn.company_id) if txn.company_id else None
    client = db.get_counterparty(owner_id, txn.counterparty_id) if txn.counterparty_id else None
    category = db.get_category(owner_id, txn.category_id) if txn.category_id else None

    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Date: {txn.occurred_on}")
    click.echo(f"  Type: {txn.kind.value}")
    click.echo(f"  Official: {_money(settings, txn.amount.official)}")
    click.echo(f"  Unofficial: {_money(settings, txn.amount.unofficial)}")
    click.echo(f"  Total: {_money(settings, txn.amount.total)}")
    if company:
        click.echo(f"  Company: {company.name} (ID: {company.id})")
    if client:
        click.echo(f"  Client: {client.name} (ID: {client.id})")
    if category:
        click.echo(f"  Category: {category.name} (ID: {category.id})")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if receipt_url:
        click.echo(f"  Receipt: {receipt_url}")
    click.echo(f"  Created: {txn.created_at}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "kind", type=KIND_CHOICE, help="income or expense")
@click.option("--official", help="Official amount")
@click.option("--unofficial", help="Unofficial amount")
@click.option("--date", "date_str", help="Transaction date")
@click.option("--description", help="Transaction description")
@click.option("--company", help="Company name or ID, or empty string to clear")
@click.option("--client", help="Client name or ID, or empty string to clear")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    kind: str | None,
    official: str | None,
    unofficial: str | None,
    date_str: str | None,
    description: str | None,
    company: str | None,
    client: str | None,
    category: str | None,
):
    """Update a transaction.

    Fields that are not given keep their current value.

    Examples:
        tallybook transaction update 1 --official 75.00
        tallybook transaction update 1 --client ""  # Clear client
    """
    service = _service(ctx)
    try:
        current = service.require_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    txn_kind = TransactionKind.parse(kind) if kind else current.kind
    amount = MoneyPair(
        _parse_amount_or_exit(ctx, "official", official)
        if official is not None
        else current.amount.official,
        _parse_amount_or_exit(ctx, "unofficial", unofficial)
        if unofficial is not None
        else current.amount.unofficial,
    )
    occurred_on = _parse_date_or_exit(ctx, date_str) if date_str else current.occurred_on

    company_id = current.company_id
    if company is not None:
        company_id = _optional_reference(ctx, resolve_company_or_exit, company)
    client_id = current.counterparty_id
    if client is not None:
        client_id = _optional_reference(ctx, resolve_client_or_exit, client)
    category_id = current.category_id
    if category is not None:
        category_id = _optional_reference(ctx, resolve_category_or_exit, category, txn_kind)

    try:
        service.update_transaction(
            transaction_id,
            kind=txn_kind,
            amount=amount,
            occurred_on=occurred_on,
            description=description if description is not None else current.description,
            company_id=company_id,
            counterparty_id=client_id,
            category_id=category_id,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("receipt")
@click.argument("transaction_id", type=int)
@click.argument("receipt", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def replace_receipt(ctx, transaction_id: int, receipt: str):
    """Attach a receipt image, replacing any previous one."""
    upload = _read_receipt(ctx, receipt)
    service = _service(ctx)
    try:
        service.replace_receipt(transaction_id, upload)
        click.echo(f"Attached receipt to transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int):
    """Delete a transaction and its receipt.

    Examples:
        tallybook transaction delete 1
    """
    try:
        _service(ctx).delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with CLI."""
    cli.add_command(transaction_group, name="transaction")
