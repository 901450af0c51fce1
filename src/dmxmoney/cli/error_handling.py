"""CLI error handling helpers."""

import click

from dmxmoney.domain.errors import DomainError, StartupError


def handle_domain_error(ctx: click.Context, error: DomainError | StartupError) -> None:
    """Render a domain or startup error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
