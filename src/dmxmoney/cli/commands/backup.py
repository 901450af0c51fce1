"""Backup export and restore commands."""

from pathlib import Path

import click
from dmxmoney.domain.backup import BackupService
from dmxmoney.domain.errors import DomainError
from dmxmoney.cli.error_handling import handle_domain_error


@click.command("export")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export_backup(ctx, file: Path):
    """Write a backup of all data and settings to FILE.

    Examples:
        dmxmoney export backup.json
    """
    db = ctx.obj["db"]
    service = BackupService(db)

    try:
        service.write_backup(file)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Backup written to {file}")


@click.command("restore")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def restore_backup(ctx, file: Path):
    """Replace all data with the backup stored in FILE.

    Accounts, transactions, categories and scheduled transactions are
    replaced. From the backup's settings only the account grouping and
    ordering are restored.

    Examples:
        dmxmoney restore backup.json
    """
    db = ctx.obj["db"]
    service = BackupService(db)

    try:
        service.read_backup(file)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored backup from {file}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(export_backup)
    cli.add_command(restore_backup)
