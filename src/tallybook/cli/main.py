"""Main CLI entry point."""

import click

from tallybook.cli.error_handling import handle_domain_error
from tallybook.config import load_settings
from tallybook.database.factories import create_sqlite_database
from tallybook.logging_setup import configure_logging
from tallybook.storage.local import LocalObjectStore

# Import and register all commands at module level
from tallybook.cli.commands import (
    company,
    client,
    category,
    transaction,
    summary,
    export_cmd,
    import_cmd,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TALLYBOOK_DB_PATH environment variable)",
    envvar="TALLYBOOK_DB_PATH",
)
@click.option(
    "--user",
    "owner_id",
    help="User whose books are used (overrides TALLYBOOK_USER environment variable)",
    envvar="TALLYBOOK_USER",
)
@click.option(
    "--storage-dir",
    type=click.Path(file_okay=False),
    help="Directory for receipt images (overrides TALLYBOOK_STORAGE_DIR)",
    envvar="TALLYBOOK_STORAGE_DIR",
)
@click.option(
    "--log-level",
    help="Logging level (overrides TALLYBOOK_LOG_LEVEL)",
    envvar="TALLYBOOK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, owner_id: str | None, storage_dir: str | None, log_level: str | None):
    """Tallybook - bookkeeping for small businesses.

    Record income and expenses split into official and unofficial amounts
    per company, client and category, see summaries, and exchange
    transactions as CSV files.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings(
                db_path=db_path, owner_id=owner_id, storage_dir=storage_dir, log_level=log_level
            )
            configure_logging(settings.log_level)
            db = create_sqlite_database(database_path=settings.db_path)
            db.connect()
            db.initialize_schema()
        except ValueError as e:
            handle_domain_error(ctx, e)
            return
        ctx.call_on_close(db.disconnect)
        ctx.obj["settings"] = settings
        ctx.obj["db"] = db
        ctx.obj["owner_id"] = settings.owner_id
        ctx.obj["store"] = LocalObjectStore(settings.storage_dir, settings.storage_base_url)


# Register all commands
company.register_commands(cli)
client.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
export_cmd.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
