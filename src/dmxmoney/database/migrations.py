"""Schema creation and additive column migrations.

There is no migration-version table: the live schema is the version
marker. Every migration adds one column and is skipped when the column is
already present, so running the whole list on every start is safe.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import inspect
from sqlalchemy.engine import Connection

from dmxmoney.database.models import Base

logger = logging.getLogger(__name__)


def column_exists(connection: Connection, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table.

    Args:
        connection: SQLAlchemy connection (inside the migration transaction)
        table_name: Name of the table
        column_name: Name of the column

    Returns:
        True if column exists, False otherwise
    """
    inspector = inspect(connection)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


@dataclass(frozen=True)
class ColumnMigration:
    """Adds ``column`` to ``table`` when it is missing."""

    name: str
    table: str
    column: str
    definition: str

    def is_applied(self, connection: Connection) -> bool:
        return column_exists(connection, self.table, self.column)

    def apply(self, connection: Connection) -> None:
        connection.exec_driver_sql(
            f'ALTER TABLE {self.table} ADD COLUMN "{self.column}" {self.definition}'
        )


# Order matters only for readability of the log; each step is independent.
MIGRATIONS: tuple[ColumnMigration, ...] = (
    ColumnMigration(
        "add_settings_display_style", "settings", "displayStyle", "TEXT NOT NULL DEFAULT 'modern'"
    ),
    ColumnMigration(
        "add_settings_component_spacing", "settings", "componentSpacing", "INTEGER NOT NULL DEFAULT 6"
    ),
    ColumnMigration(
        "add_settings_component_padding", "settings", "componentPadding", "INTEGER NOT NULL DEFAULT 6"
    ),
    ColumnMigration("add_settings_account_groups", "settings", "accountGroups", "TEXT DEFAULT NULL"),
    ColumnMigration("add_settings_custom_groups", "settings", "customGroups", "TEXT DEFAULT NULL"),
    ColumnMigration(
        "add_settings_custom_groups_order", "settings", "customGroupsOrder", "TEXT DEFAULT NULL"
    ),
    ColumnMigration("add_settings_accounts_order", "settings", "accountsOrder", "TEXT DEFAULT NULL"),
    ColumnMigration(
        "add_scheduled_to_account_id", "scheduled_transactions", "toAccountId", "TEXT DEFAULT NULL"
    ),
    ColumnMigration(
        "add_scheduled_include_in_forecast",
        "scheduled_transactions",
        "includeInForecast",
        "BOOLEAN DEFAULT 1",
    ),
    ColumnMigration("add_scheduled_end_date", "scheduled_transactions", "endDate", "TEXT DEFAULT NULL"),
    ColumnMigration(
        "add_settings_last_seen_version", "settings", "lastSeenVersion", "TEXT DEFAULT NULL"
    ),
)


def ensure_schema(connection: Connection) -> list[str]:
    """Create missing tables and apply pending column migrations.

    Must run inside a transaction owned by the caller; nothing here commits.

    Args:
        connection: SQLAlchemy connection with an open transaction

    Returns:
        Names of the migrations applied by this call (empty when the
        schema was already current)
    """
    Base.metadata.create_all(connection)

    applied = []
    for migration in MIGRATIONS:
        if migration.is_applied(connection):
            continue
        logger.info("Migrating %s table: adding %s column", migration.table, migration.column)
        migration.apply(connection)
        applied.append(migration.name)
    return applied
