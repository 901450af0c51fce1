"""Shared pytest fixtures for dmxmoney tests."""

import tempfile
import os
import pytest

from dmxmoney.database.factories import create_sqlite_database
from dmxmoney.domain.account import AccountService
from dmxmoney.domain.backup import BackupService
from dmxmoney.domain.category import CategoryService
from dmxmoney.domain.entities import Account, Category
from dmxmoney.domain.scheduled import ScheduledService
from dmxmoney.domain.settings import SettingsService
from dmxmoney.domain.transaction import TransactionService


@pytest.fixture
def temp_db_path():
    """Reserve a temporary database file path."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield db_path

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def temp_db(temp_db_path):
    """Create a temporary database for testing."""
    db = create_sqlite_database(database_path=temp_db_path)
    # Store the path for tests that need it
    db.database_path = temp_db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def scheduled_service(temp_db):
    """Create a ScheduledService with a temporary database."""
    return ScheduledService(temp_db)


@pytest.fixture
def settings_service(temp_db):
    """Create a SettingsService with a temporary database."""
    return SettingsService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account = Account(id="acc-1", name="Checking", type="checking", initial_balance=100.0)
    account_service.create_account(account)
    return account


@pytest.fixture
def second_account(account_service):
    """Create a second account for transfer tests."""
    account = Account(id="acc-2", name="Savings", type="savings", initial_balance=0.0)
    account_service.create_account(account)
    return account


@pytest.fixture
def sample_category(category_service):
    """Create a sample category for testing."""
    category = Category(id="cat-1", name="Groceries", icon="ShoppingCart", color="#22c55e")
    category_service.create_category(category)
    return category


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
