"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from dmxmoney.database.sqlalchemy_db import SQLAlchemyDatabase
from dmxmoney.domain.errors import StartupError

DB_PATH_ENV = "DMXMONEY_DB_PATH"
DEFAULT_DB_DIR = ".dmxmoney"
DEFAULT_DB_NAME = "dmxmoney.db"


def _ensure_directory(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StartupError(f"Cannot create database directory {directory}: {e}") from e


def default_database_path() -> Path:
    """Return the per-user database location, creating its directory."""
    db_dir = Path.home() / DEFAULT_DB_DIR
    _ensure_directory(db_dir)
    return db_dir / DEFAULT_DB_NAME


def create_sqlite_database(
    database_path: Optional[str] = None, pool_size: int = 5
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks DMXMONEY_DB_PATH
            environment variable, then defaults to ~/.dmxmoney/dmxmoney.db
        pool_size: Size of the shared connection pool

    Returns:
        SQLAlchemyDatabase instance configured for SQLite

    Raises:
        StartupError: If the database directory cannot be created
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        path = default_database_path()
    else:
        path = Path(database_path)
        _ensure_directory(path.parent)

    return SQLAlchemyDatabase(f"sqlite:///{path}", pool_size=pool_size)
