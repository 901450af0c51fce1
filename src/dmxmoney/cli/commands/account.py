"""Account listing command."""

import click
from dmxmoney.domain.account import AccountService


@click.command("accounts")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        click.echo(
            f"{acc.id:36s} | {acc.name:20s} | {acc.type:10s} | {acc.initial_balance:12.2f}"
        )


def register_commands(cli):
    """Register accounts command with main CLI."""
    cli.add_command(list_accounts)
