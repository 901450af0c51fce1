"""Transaction domain service."""

import logging
import uuid
from typing import Optional

from dmxmoney.database.base import Database
from dmxmoney.domain.entities import Transaction
from dmxmoney.domain.errors import ValidationError

logger = logging.getLogger(__name__)

TRANSFER_CATEGORY = "transfer"


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_transactions(self) -> list[Transaction]:
        """List all transactions, most recent date first."""
        return self.db.list_transactions()

    def create_transaction(self, transaction: Transaction) -> None:
        """Create a transaction.

        Args:
            transaction: Transaction to store

        Raises:
            ConflictError: If a transaction with the same id already exists
            DependencyError: If the account does not exist
        """
        logger.debug("Creating transaction %s", transaction.id)
        self.db.create_transaction(transaction)

    def create_transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: float,
        date: str,
        description: Optional[str] = None,
        from_transaction_id: Optional[str] = None,
        to_transaction_id: Optional[str] = None,
    ) -> tuple[str, str]:
        """Create both legs of a transfer between two accounts.

        The expense leg on the source account and the income leg on the
        destination account reference each other through
        ``linked_transaction_id`` and are stored atomically.

        Args:
            from_account_id: Account the money leaves
            to_account_id: Account the money enters
            amount: Transferred amount
            date: ISO date of the transfer
            description: Optional description shared by both legs
            from_transaction_id: Optional id for the expense leg (generated if None)
            to_transaction_id: Optional id for the income leg (generated if None)

        Returns:
            Tuple of (expense leg id, income leg id)

        Raises:
            ValidationError: If both accounts are the same
        """
        if from_account_id == to_account_id:
            raise ValidationError("Cannot transfer to the same account")

        from_id = from_transaction_id or str(uuid.uuid4())
        to_id = to_transaction_id or str(uuid.uuid4())

        outgoing = Transaction(
            id=from_id,
            date=date,
            account_id=from_account_id,
            type="expense",
            amount=amount,
            category=TRANSFER_CATEGORY,
            description=description,
            is_transfer=True,
            linked_transaction_id=to_id,
        )
        incoming = Transaction(
            id=to_id,
            date=date,
            account_id=to_account_id,
            type="income",
            amount=amount,
            category=TRANSFER_CATEGORY,
            description=description,
            is_transfer=True,
            linked_transaction_id=from_id,
        )
        logger.debug("Creating transfer %s -> %s", from_id, to_id)
        self.db.create_transactions([outgoing, incoming])
        return from_id, to_id

    def update_transaction(self, transaction: Transaction) -> None:
        """Replace every field of the transaction with the same id.

        Args:
            transaction: New transaction values; an unknown id changes nothing
        """
        logger.debug("Updating transaction %s", transaction.id)
        self.db.update_transaction(transaction)

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        The linked leg of a transfer is not touched.

        Args:
            transaction_id: Transaction ID to delete
        """
        logger.debug("Deleting transaction %s", transaction_id)
        self.db.delete_transaction(transaction_id)
