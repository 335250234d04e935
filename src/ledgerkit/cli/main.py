"""Main CLI entry point."""

import logging

import click

from ledgerkit.config import DB_PATH_ENV_VAR, DEFAULT_USER, USER_ENV_VAR
from ledgerkit.database.factories import create_sqlite_store

# Import and register all commands at module level
from ledgerkit.cli.commands import budget, report, split, tag, transfer


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV_VAR} environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option(
    "--user",
    "user_id",
    default=DEFAULT_USER,
    show_default=True,
    envvar=USER_ENV_VAR,
    help="User whose ledger to operate on",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, verbose: bool):
    """Ledgerkit - Transaction ledger analytics and reconciliation.

    Match transfers between accounts, split transactions across categories,
    report spending, and check budgets.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)

    # Open the store only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(store.disconnect)


# Register all commands
transfer.register_commands(cli)
split.register_commands(cli)
tag.register_commands(cli)
report.register_commands(cli)
budget.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
