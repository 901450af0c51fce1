"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

from dmxmoney.domain.entities import (
    Account,
    AppData,
    Category,
    ScheduledRun,
    ScheduledTransaction,
    Settings,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for dmxmoney.

    Implementations raise ``dmxmoney.domain.errors.DomainError`` subclasses
    for per-call failures and ``StartupError`` from ``connect`` and
    ``initialize_schema``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> list[str]:
        """Create tables and apply pending migrations. Returns applied migration names."""
        pass

    # Account operations
    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def create_account(self, account: Account) -> None:
        """Insert an account; a duplicate id is silently ignored."""
        pass

    @abstractmethod
    def update_account(self, account: Account) -> None:
        """Overwrite the account with the same id, if any."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        """Delete an account with its transactions and scheduled transactions."""
        pass

    # Transaction operations
    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions, newest date first."""
        pass

    @abstractmethod
    def create_transaction(self, transaction: Transaction) -> None:
        """Insert a transaction; a duplicate id is an error."""
        pass

    @abstractmethod
    def create_transactions(self, transactions: list[Transaction]) -> None:
        """Insert several transactions in one transaction; all or none are stored."""
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> None:
        """Overwrite the transaction with the same id, if any."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction if it exists."""
        pass

    # Category operations
    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories."""
        pass

    @abstractmethod
    def create_category(self, category: Category) -> None:
        """Insert a category; a duplicate id is silently ignored."""
        pass

    @abstractmethod
    def update_category(self, category: Category) -> None:
        """Overwrite the category with the same id, if any."""
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Delete a category if it exists."""
        pass

    # Scheduled transaction operations
    @abstractmethod
    def list_scheduled(self) -> list[ScheduledTransaction]:
        """List all scheduled transactions."""
        pass

    @abstractmethod
    def create_scheduled(self, scheduled: ScheduledTransaction) -> None:
        """Insert a scheduled transaction; a duplicate id is an error."""
        pass

    @abstractmethod
    def update_scheduled(self, scheduled: ScheduledTransaction) -> None:
        """Overwrite the scheduled transaction with the same id, if any."""
        pass

    @abstractmethod
    def delete_scheduled(self, scheduled_id: str) -> None:
        """Delete a scheduled transaction if it exists."""
        pass

    @abstractmethod
    def apply_scheduled_run(self, run: ScheduledRun) -> None:
        """Store generated transactions and advance or remove their schedules atomically.

        Raises:
            ConflictError: If a touched scheduled transaction changed since it was read
        """
        pass

    # Bulk operations
    @abstractmethod
    def import_data(self, snapshot: AppData) -> None:
        """Replace every account, transaction, category and scheduled transaction."""
        pass

    @abstractmethod
    def export_data(self) -> AppData:
        """Read all four entity tables as one consistent snapshot."""
        pass

    # Settings operations
    @abstractmethod
    def get_settings(self) -> Optional[Settings]:
        """Get the stored settings, or None if they were never saved."""
        pass

    @abstractmethod
    def save_settings(self, settings: Settings) -> None:
        """Insert or overwrite the settings row."""
        pass
