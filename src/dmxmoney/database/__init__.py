"""Database layer for dmxmoney."""

from dmxmoney.database.base import Database
from dmxmoney.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
