"""SQLAlchemy database implementation."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dmxmoney.database.base import Database
from dmxmoney.database.migrations import ensure_schema
from dmxmoney.database.models import (
    Account,
    Category,
    ScheduledTransaction,
    Settings,
    Transaction,
    SETTINGS_ROW_ID,
    create_session_factory,
    create_sqlite_engine,
)
from dmxmoney.database.mappers import (
    account_to_domain,
    account_values,
    category_to_domain,
    category_values,
    scheduled_to_domain,
    scheduled_values,
    settings_to_domain,
    settings_values,
    transaction_to_domain,
    transaction_values,
)
from dmxmoney.domain import entities
from dmxmoney.domain.errors import (
    ConflictError,
    DependencyError,
    DomainError,
    StartupError,
    StorageError,
    ValidationError,
    already_exists,
    scheduled_changed,
    still_referenced,
    storage_failure,
    unstorable_value,
)

logger = logging.getLogger(__name__)


def classify_database_error(error: SQLAlchemyError, context: str) -> DomainError:
    """Turn a SQLAlchemy error into the domain error shown to the caller.

    Args:
        error: Error raised by SQLAlchemy or the driver
        context: What was being attempted, e.g. "adding the account"

    Returns:
        DependencyError for foreign-key violations, ConflictError for
        uniqueness violations, StorageError for everything else
    """
    raw = str(getattr(error, "orig", None) or error)
    logger.error("Database error while %s: %s", context, raw)

    if isinstance(error, IntegrityError):
        if "FOREIGN KEY constraint failed" in raw:
            return DependencyError(still_referenced())
        if "UNIQUE constraint failed" in raw:
            return ConflictError(already_exists())
    return StorageError(storage_failure(context))


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str, pool_size: int = 5):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
            pool_size: Number of pooled connections shared by all callers
        """
        self.database_url = database_url
        self.engine = create_sqlite_engine(database_url, pool_size=pool_size)
        self.session_factory = create_session_factory(self.engine)

    @contextmanager
    def _transaction(self, context: str) -> Iterator[Session]:
        """Run a unit of work in one transaction.

        Commits on success; any exception, including an interrupted call,
        rolls back everything done inside the block.
        """
        try:
            with self.session_factory.begin() as session:
                yield session
        except SQLAlchemyError as e:
            raise classify_database_error(e, context) from e
        except (OverflowError, UnicodeEncodeError) as e:
            # Raised by the driver while binding, before SQLAlchemy can wrap it
            raise ValidationError(unstorable_value(context)) from e

    def connect(self) -> None:
        """Check that the database file can be opened."""
        try:
            with self.engine.connect():
                pass
        except SQLAlchemyError as e:
            raise StartupError(f"Could not open database {self.database_url}: {e}") from e

    def disconnect(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()

    def initialize_schema(self) -> list[str]:
        """Create tables and apply pending migrations in one transaction."""
        try:
            with self.engine.begin() as connection:
                applied = ensure_schema(connection)
        except SQLAlchemyError as e:
            raise StartupError(f"Schema migration failed: {e}") from e
        if applied:
            logger.info("Applied %d schema migration(s)", len(applied))
        return applied

    # Account operations
    def list_accounts(self) -> list[entities.Account]:
        """List all accounts."""
        with self._transaction("loading accounts") as session:
            accounts = session.query(Account).all()
            return [account_to_domain(acc) for acc in accounts]

    def create_account(self, account: entities.Account) -> None:
        """Insert an account; a duplicate id is silently ignored."""
        stmt = (
            sqlite_insert(Account)
            .values(**account_values(account))
            .on_conflict_do_nothing(index_elements=["id"])
        )
        with self._transaction("adding the account") as session:
            session.execute(stmt)

    def update_account(self, account: entities.Account) -> None:
        """Overwrite the account with the same id, if any."""
        values = account_values(account)
        del values["id"]
        with self._transaction("updating the account") as session:
            session.query(Account).filter(Account.id == account.id).update(
                values, synchronize_session=False
            )

    def delete_account(self, account_id: str) -> None:
        """Delete an account together with everything that references it.

        Scheduled transfers pointing at the account through toAccountId are
        left in place.
        """
        with self._transaction("deleting the account") as session:
            session.query(Transaction).filter(Transaction.account_id == account_id).delete(
                synchronize_session=False
            )
            session.query(ScheduledTransaction).filter(
                ScheduledTransaction.account_id == account_id
            ).delete(synchronize_session=False)
            session.query(Account).filter(Account.id == account_id).delete(
                synchronize_session=False
            )

    # Transaction operations
    def list_transactions(self) -> list[entities.Transaction]:
        """List all transactions, newest date first."""
        with self._transaction("loading transactions") as session:
            transactions = session.query(Transaction).order_by(Transaction.date.desc()).all()
            return [transaction_to_domain(txn) for txn in transactions]

    def create_transaction(self, transaction: entities.Transaction) -> None:
        """Insert a transaction; a duplicate id is an error."""
        with self._transaction("adding the transaction") as session:
            session.execute(insert(Transaction).values(**transaction_values(transaction)))

    def create_transactions(self, transactions: list[entities.Transaction]) -> None:
        """Insert several transactions in one transaction; all or none are stored."""
        with self._transaction("adding the transactions") as session:
            for transaction in transactions:
                session.execute(insert(Transaction).values(**transaction_values(transaction)))

    def update_transaction(self, transaction: entities.Transaction) -> None:
        """Overwrite the transaction with the same id, if any."""
        values = transaction_values(transaction)
        del values["id"]
        with self._transaction("updating the transaction") as session:
            session.query(Transaction).filter(Transaction.id == transaction.id).update(
                values, synchronize_session=False
            )

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction if it exists."""
        with self._transaction("deleting the transaction") as session:
            session.query(Transaction).filter(Transaction.id == transaction_id).delete(
                synchronize_session=False
            )

    # Category operations
    def list_categories(self) -> list[entities.Category]:
        """List all categories."""
        with self._transaction("loading categories") as session:
            categories = session.query(Category).all()
            return [category_to_domain(cat) for cat in categories]

    def create_category(self, category: entities.Category) -> None:
        """Insert a category; a duplicate id is silently ignored."""
        stmt = (
            sqlite_insert(Category)
            .values(**category_values(category))
            .on_conflict_do_nothing(index_elements=["id"])
        )
        with self._transaction("adding the category") as session:
            session.execute(stmt)

    def update_category(self, category: entities.Category) -> None:
        """Overwrite the category with the same id, if any."""
        values = category_values(category)
        del values["id"]
        with self._transaction("updating the category") as session:
            session.query(Category).filter(Category.id == category.id).update(
                values, synchronize_session=False
            )

    def delete_category(self, category_id: str) -> None:
        """Delete a category if it exists."""
        with self._transaction("deleting the category") as session:
            session.query(Category).filter(Category.id == category_id).delete(
                synchronize_session=False
            )

    # Scheduled transaction operations
    def list_scheduled(self) -> list[entities.ScheduledTransaction]:
        """List all scheduled transactions."""
        with self._transaction("loading scheduled transactions") as session:
            scheduled = session.query(ScheduledTransaction).all()
            return [scheduled_to_domain(item) for item in scheduled]

    def create_scheduled(self, scheduled: entities.ScheduledTransaction) -> None:
        """Insert a scheduled transaction; a duplicate id is an error."""
        with self._transaction("adding the scheduled transaction") as session:
            session.execute(insert(ScheduledTransaction).values(**scheduled_values(scheduled)))

    def update_scheduled(self, scheduled: entities.ScheduledTransaction) -> None:
        """Overwrite the scheduled transaction with the same id, if any."""
        values = scheduled_values(scheduled)
        del values["id"]
        with self._transaction("updating the scheduled transaction") as session:
            session.query(ScheduledTransaction).filter(
                ScheduledTransaction.id == scheduled.id
            ).update(values, synchronize_session=False)

    def delete_scheduled(self, scheduled_id: str) -> None:
        """Delete a scheduled transaction if it exists."""
        with self._transaction("deleting the scheduled transaction") as session:
            session.query(ScheduledTransaction).filter(
                ScheduledTransaction.id == scheduled_id
            ).delete(synchronize_session=False)

    def apply_scheduled_run(self, run: entities.ScheduledRun) -> None:
        """Store a scheduled run in one transaction.

        Each advanced or finished schedule is matched on the ``next_date`` it
        had when read, so two overlapping runs cannot both generate the same
        occurrence.
        """
        with self._transaction("processing scheduled transactions") as session:
            for transaction in run.transactions:
                session.execute(insert(Transaction).values(**transaction_values(transaction)))

            for scheduled in run.advanced:
                values = scheduled_values(scheduled)
                del values["id"]
                matched = (
                    session.query(ScheduledTransaction)
                    .filter(
                        ScheduledTransaction.id == scheduled.id,
                        ScheduledTransaction.next_date == run.expected_next_dates[scheduled.id],
                    )
                    .update(values, synchronize_session=False)
                )
                if matched != 1:
                    raise ConflictError(scheduled_changed(scheduled.id))

            for scheduled_id in run.finished:
                matched = (
                    session.query(ScheduledTransaction)
                    .filter(
                        ScheduledTransaction.id == scheduled_id,
                        ScheduledTransaction.next_date == run.expected_next_dates[scheduled_id],
                    )
                    .delete(synchronize_session=False)
                )
                if matched != 1:
                    raise ConflictError(scheduled_changed(scheduled_id))

    # Bulk operations
    def import_data(self, snapshot: entities.AppData) -> None:
        """Replace the whole dataset with ``snapshot``.

        Children are cleared before parents and parents inserted before
        children so foreign keys hold at every step. Settings are untouched.
        """
        logger.info(
            "Importing %d accounts, %d categories, %d transactions, %d scheduled",
            len(snapshot.accounts),
            len(snapshot.categories),
            len(snapshot.transactions),
            len(snapshot.scheduled),
        )
        with self._transaction("importing data") as session:
            for model in (Transaction, ScheduledTransaction, Account, Category):
                session.query(model).delete(synchronize_session=False)

            batches = (
                (Account, [account_values(acc) for acc in snapshot.accounts]),
                (Category, [category_values(cat) for cat in snapshot.categories]),
                (Transaction, [transaction_values(txn) for txn in snapshot.transactions]),
                (ScheduledTransaction, [scheduled_values(item) for item in snapshot.scheduled]),
            )
            for model, rows in batches:
                for row in rows:
                    session.execute(insert(model).values(**row))

    def export_data(self) -> entities.AppData:
        """Read all four entity tables as one consistent snapshot."""
        with self._transaction("exporting data") as session:
            return entities.AppData(
                accounts=[account_to_domain(acc) for acc in session.query(Account).all()],
                transactions=[
                    transaction_to_domain(txn)
                    for txn in session.query(Transaction).order_by(Transaction.date.desc()).all()
                ],
                categories=[category_to_domain(cat) for cat in session.query(Category).all()],
                scheduled=[
                    scheduled_to_domain(item) for item in session.query(ScheduledTransaction).all()
                ],
            )

    # Settings operations
    def get_settings(self) -> Optional[entities.Settings]:
        """Get the stored settings, or None if they were never saved."""
        with self._transaction("loading settings") as session:
            row = session.get(Settings, SETTINGS_ROW_ID)
            if row is None:
                return None
            return settings_to_domain(row)

    def save_settings(self, settings: entities.Settings) -> None:
        """Insert or overwrite the settings row in a single statement."""
        values = settings_values(settings)
        stmt = (
            sqlite_insert(Settings)
            .values(id=SETTINGS_ROW_ID, **values)
            .on_conflict_do_update(index_elements=["id"], set_=values)
        )
        with self._transaction("saving settings") as session:
            session.execute(stmt)
