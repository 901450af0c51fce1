"""Single operation command."""

import json

import click
from dmxmoney.commands import CommandDispatcher


@click.command("invoke")
@click.argument("name", metavar="OPERATION", required=False)
@click.argument("payload", metavar="PAYLOAD_JSON", required=False)
@click.option("--list", "list_names", is_flag=True, help="List the available operations")
@click.pass_context
def invoke_command(ctx, name: str | None, payload: str | None, list_names: bool):
    """Run one named operation and print its result as JSON.

    Examples:
        dmxmoney invoke --list
        dmxmoney invoke list_accounts
        dmxmoney invoke delete_account '{"id": "acc-1"}'
    """
    dispatcher = CommandDispatcher(ctx.obj["db"])

    if list_names:
        for command_name in dispatcher.command_names():
            click.echo(command_name)
        return

    if name is None:
        click.echo("Error: Missing OPERATION (use --list to see them)", err=True)
        ctx.exit(1)

    arguments = None
    if payload:
        try:
            arguments = json.loads(payload)
        except json.JSONDecodeError as e:
            click.echo(f"Error: Payload is not valid JSON: {e}", err=True)
            ctx.exit(1)

    result = dispatcher.dispatch(name, arguments)
    click.echo(json.dumps(result.to_payload()))
    if not result.ok:
        ctx.exit(1)


def register_commands(cli):
    """Register invoke command with main CLI."""
    cli.add_command(invoke_command)
