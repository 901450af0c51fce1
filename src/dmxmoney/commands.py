"""Named operations exposed to the desktop front end.

Every operation takes a JSON-compatible payload and produces a
``CommandResult``. Errors never escape ``dispatch`` as exceptions: they are
classified and reduced to a single message string.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from dmxmoney.database.base import Database
from dmxmoney.database.sqlalchemy_db import classify_database_error
from dmxmoney.domain.account import AccountService
from dmxmoney.domain.backup import BackupService
from dmxmoney.domain.category import CategoryService
from dmxmoney.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    invalid_field,
    missing_field,
    unknown_command,
)
from dmxmoney.domain.payload import (
    account_from_payload,
    account_to_payload,
    app_data_from_payload,
    app_data_to_payload,
    category_from_payload,
    category_to_payload,
    ensure_storable_text,
    process_date_from_payload,
    scheduled_from_payload,
    scheduled_run_to_payload,
    scheduled_to_payload,
    settings_from_payload,
    settings_to_payload,
    transaction_from_payload,
    transaction_to_payload,
    transfer_from_payload,
)
from dmxmoney.domain.scheduled import ScheduledService
from dmxmoney.domain.settings import SettingsService
from dmxmoney.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

# Names used by earlier front-end builds
ALIASES = {
    "get_accounts": "list_accounts",
    "add_account": "create_account",
    "get_transactions": "list_transactions",
    "add_transaction": "create_transaction",
    "get_categories": "list_categories",
    "add_category": "create_category",
    "get_scheduled": "list_scheduled",
    "add_scheduled": "create_scheduled",
}


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one operation."""

    ok: bool
    data: Any = None
    error: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {"ok": self.ok, "data": self.data, "error": self.error}


def _argument(payload: dict[str, Any], key: str) -> Any:
    if key not in payload:
        raise ValidationError(missing_field("command", key))
    return payload[key]


def _identifier(payload: dict[str, Any]) -> str:
    value = _argument(payload, "id")
    if not isinstance(value, str):
        raise ValidationError(invalid_field("command", "id", "a string"))
    return ensure_storable_text(value, "command", "id")


class CommandDispatcher:
    """Route operation names to the domain services."""

    def __init__(self, db: Database):
        """Initialize the dispatcher.

        Args:
            db: Database instance shared by every operation
        """
        self.accounts = AccountService(db)
        self.transactions = TransactionService(db)
        self.categories = CategoryService(db)
        self.scheduled = ScheduledService(db)
        self.settings = SettingsService(db)
        self.backup = BackupService(db)

        self._handlers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "list_accounts": lambda p: [
                account_to_payload(acc) for acc in self.accounts.list_accounts()
            ],
            "create_account": lambda p: self.accounts.create_account(
                account_from_payload(_argument(p, "account"))
            ),
            "update_account": lambda p: self.accounts.update_account(
                account_from_payload(_argument(p, "account"))
            ),
            "delete_account": lambda p: self.accounts.delete_account(_identifier(p)),
            "list_transactions": lambda p: [
                transaction_to_payload(txn) for txn in self.transactions.list_transactions()
            ],
            "create_transaction": lambda p: self.transactions.create_transaction(
                transaction_from_payload(_argument(p, "transaction"))
            ),
            "create_transfer": self._create_transfer,
            "update_transaction": lambda p: self.transactions.update_transaction(
                transaction_from_payload(_argument(p, "transaction"))
            ),
            "delete_transaction": lambda p: self.transactions.delete_transaction(_identifier(p)),
            "list_categories": lambda p: [
                category_to_payload(cat) for cat in self.categories.list_categories()
            ],
            "create_category": lambda p: self.categories.create_category(
                category_from_payload(_argument(p, "category"))
            ),
            "update_category": lambda p: self.categories.update_category(
                category_from_payload(_argument(p, "category"))
            ),
            "delete_category": lambda p: self.categories.delete_category(_identifier(p)),
            "list_scheduled": lambda p: [
                scheduled_to_payload(item) for item in self.scheduled.list_scheduled()
            ],
            "create_scheduled": lambda p: self.scheduled.create_scheduled(
                scheduled_from_payload(_argument(p, "scheduled"))
            ),
            "update_scheduled": lambda p: self.scheduled.update_scheduled(
                scheduled_from_payload(_argument(p, "scheduled"))
            ),
            "delete_scheduled": lambda p: self.scheduled.delete_scheduled(_identifier(p)),
            "process_scheduled": self._process_scheduled,
            "import_data": lambda p: self.backup.import_data(
                app_data_from_payload(_argument(p, "data"))
            ),
            "export_data": lambda p: app_data_to_payload(self.backup.export_data()),
            "get_settings": self._get_settings,
            "save_settings": lambda p: self.settings.save_settings(
                settings_from_payload(_argument(p, "settings"))
            ),
        }

    def command_names(self) -> list[str]:
        """Return the registered operation names, sorted."""
        return sorted(self._handlers)

    def dispatch(self, name: str, payload: Optional[dict[str, Any]] = None) -> CommandResult:
        """Run one operation.

        Args:
            name: Operation name (or one of its legacy aliases)
            payload: Operation arguments, e.g. ``{"account": {...}}`` or ``{"id": "..."}``

        Returns:
            CommandResult with ``data`` on success or ``error`` on failure
        """
        logger.debug("Invoked %s", name)
        handler = self._handlers.get(ALIASES.get(name, name))
        try:
            if handler is None:
                raise NotFoundError(unknown_command(name))
            if payload is None:
                payload = {}
            elif not isinstance(payload, dict):
                raise ValidationError("Command payload must be an object")
            data = handler(payload)
        except DomainError as e:
            logger.debug("%s failed: %s", name, e)
            return CommandResult(ok=False, error=str(e))
        except SQLAlchemyError as e:
            return CommandResult(ok=False, error=str(classify_database_error(e, name)))
        return CommandResult(ok=True, data=data)

    def _create_transfer(self, payload: dict[str, Any]) -> dict[str, str]:
        from_id, to_id = self.transactions.create_transfer(
            **transfer_from_payload(_argument(payload, "transfer"))
        )
        return {"fromTransactionId": from_id, "toTransactionId": to_id}

    def _process_scheduled(self, payload: dict[str, Any]) -> dict[str, Any]:
        today = process_date_from_payload(payload)
        self.categories.ensure_transfer_category()
        return scheduled_run_to_payload(self.scheduled.process_due(today))

    def _get_settings(self, payload: dict[str, Any]) -> Optional[dict[str, Any]]:
        settings = self.settings.get_settings()
        return settings_to_payload(settings) if settings is not None else None
