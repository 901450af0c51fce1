"""Account domain service."""

import logging

from dmxmoney.database.base import Database
from dmxmoney.domain.entities import Account

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_accounts(self) -> list[Account]:
        """List all accounts.

        Returns:
            List of account entities, in storage order
        """
        return self.db.list_accounts()

    def create_account(self, account: Account) -> None:
        """Create an account.

        Creating an account whose id already exists is a no-op, so a front end
        retrying a create never duplicates or overwrites the first version.

        Args:
            account: Account to store
        """
        logger.debug("Creating account %s", account.id)
        self.db.create_account(account)

    def update_account(self, account: Account) -> None:
        """Replace every field of the account with the same id.

        Args:
            account: New account values; an unknown id changes nothing
        """
        logger.debug("Updating account %s", account.id)
        self.db.update_account(account)

    def delete_account(self, account_id: str) -> None:
        """Delete an account along with its transactions and scheduled transactions.

        The three deletes happen in one database transaction: either all of
        them are applied or none is.

        Args:
            account_id: Account ID to delete; an unknown id changes nothing
        """
        logger.debug("Deleting account %s", account_id)
        self.db.delete_account(account_id)
