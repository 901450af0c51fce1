"""Main CLI entry point."""

import logging

import click
from dmxmoney.database.factories import DB_PATH_ENV, create_sqlite_database
from dmxmoney.domain.errors import StartupError
from dmxmoney.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from dmxmoney.cli.commands import account, backup, invoke, serve

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="DMXMONEY_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """DMX Money - personal finance data store.

    Stores accounts, transactions, categories, scheduled transactions and
    settings in a local SQLite file and exposes them as named operations.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Open the store only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        db = None
        try:
            db = create_sqlite_database(database_path=db_path)
            db.connect()
            db.initialize_schema()
        except StartupError as e:
            if db is not None:
                db.disconnect()
            handle_domain_error(ctx, e)
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
backup.register_commands(cli)
invoke.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
