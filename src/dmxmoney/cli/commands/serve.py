"""JSON-lines request loop used by the desktop shell."""

import json
import logging

import click
from dmxmoney.commands import CommandDispatcher

logger = logging.getLogger(__name__)


def handle_request(dispatcher: CommandDispatcher, line: str) -> dict:
    """Answer one request line.

    A request is ``{"id": ..., "command": ..., "payload": {...}}``; the
    response echoes ``id`` next to the ``CommandResult`` fields.
    """
    try:
        request = json.loads(line)
    except json.JSONDecodeError as e:
        return {"id": None, "ok": False, "data": None, "error": f"Invalid request: {e}"}
    if not isinstance(request, dict) or not isinstance(request.get("command"), str):
        return {
            "id": request.get("id") if isinstance(request, dict) else None,
            "ok": False,
            "data": None,
            "error": "Invalid request: 'command' must be a string",
        }

    result = dispatcher.dispatch(request["command"], request.get("payload"))
    return {"id": request.get("id"), **result.to_payload()}


@click.command("serve")
@click.pass_context
def serve(ctx):
    """Answer JSON-lines requests from stdin until it is closed."""
    dispatcher = CommandDispatcher(ctx.obj["db"])

    logger.info("Serving requests on stdin")
    with click.open_file("-") as stdin:
        for line in stdin:
            if not line.strip():
                continue
            click.echo(json.dumps(handle_request(dispatcher, line)))


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
