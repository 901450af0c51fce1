"""Tests for the named operation dispatcher."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from dmxmoney.commands import ALIASES, CommandDispatcher, CommandResult
from dmxmoney.database.sqlalchemy_db import classify_database_error
from dmxmoney.domain.errors import (
    ConflictError,
    DependencyError,
    StorageError,
    already_exists,
    still_referenced,
)

ACCOUNT = {"id": "acc-1", "name": "Checking", "type": "checking", "initialBalance": 10}
TRANSACTION = {
    "id": "txn-1",
    "date": "2024-01-15",
    "accountId": "acc-1",
    "type": "expense",
    "amount": 4.5,
    "category": "food",
}


@pytest.fixture
def dispatcher(temp_db):
    """Create a CommandDispatcher with a temporary database."""
    return CommandDispatcher(temp_db)


def test_list_accounts_empty(dispatcher):
    assert dispatcher.dispatch("list_accounts") == CommandResult(ok=True, data=[])


def test_create_then_list(dispatcher):
    assert dispatcher.dispatch("create_account", {"account": ACCOUNT}).ok

    result = dispatcher.dispatch("list_accounts")
    assert result.data == [
        {
            "id": "acc-1",
            "name": "Checking",
            "type": "checking",
            "initialBalance": 10.0,
            "color": "#3b82f6",
            "icon": "Wallet",
        }
    ]


@pytest.mark.parametrize("alias", sorted(ALIASES))
def test_aliases_are_registered(dispatcher, alias):
    assert ALIASES[alias] in dispatcher.command_names()


def test_alias_dispatch(dispatcher):
    dispatcher.dispatch("add_account", {"account": ACCOUNT})

    assert [acc["id"] for acc in dispatcher.dispatch("get_accounts").data] == ["acc-1"]


def test_unknown_command(dispatcher):
    result = dispatcher.dispatch("drop_everything")

    assert result.ok is False
    assert result.error == "Unknown command 'drop_everything'"


def test_missing_argument(dispatcher):
    result = dispatcher.dispatch("create_account", {})

    assert result.ok is False
    assert result.error == "Missing required field 'account' for command"


def test_payload_must_be_object(dispatcher):
    result = dispatcher.dispatch("delete_account", ["acc-1"])

    assert result.ok is False
    assert "must be an object" in result.error


def test_invalid_entity_payload(dispatcher):
    result = dispatcher.dispatch("create_account", {"account": {"id": "acc-1"}})

    assert result.error == "Missing required field 'name' for account"


def test_duplicate_transaction_message(dispatcher):
    dispatcher.dispatch("create_account", {"account": ACCOUNT})
    assert dispatcher.dispatch("create_transaction", {"transaction": TRANSACTION}).ok

    result = dispatcher.dispatch("add_transaction", {"transaction": TRANSACTION})

    assert result == CommandResult(ok=False, error=already_exists())


def test_missing_account_message(dispatcher):
    result = dispatcher.dispatch("create_transaction", {"transaction": TRANSACTION})

    assert result == CommandResult(ok=False, error=still_referenced())


def test_delete_account_cascades(dispatcher):
    dispatcher.dispatch("create_account", {"account": ACCOUNT})
    dispatcher.dispatch("create_transaction", {"transaction": TRANSACTION})

    assert dispatcher.dispatch("delete_account", {"id": "acc-1"}).ok
    assert dispatcher.dispatch("list_transactions").data == []


def test_create_transfer(dispatcher):
    dispatcher.dispatch("create_account", {"account": ACCOUNT})
    dispatcher.dispatch("create_account", {"account": dict(ACCOUNT, id="acc-2")})

    result = dispatcher.dispatch(
        "create_transfer",
        {
            "transfer": {
                "fromAccountId": "acc-1",
                "toAccountId": "acc-2",
                "amount": 25,
                "date": "2024-06-01",
                "fromTransactionId": "out",
                "toTransactionId": "in",
            }
        },
    )

    assert result.data == {"fromTransactionId": "out", "toTransactionId": "in"}
    legs = dispatcher.dispatch("list_transactions").data
    assert {leg["id"]: leg["linkedTransactionId"] for leg in legs} == {"out": "in", "in": "out"}


def test_settings(dispatcher):
    assert dispatcher.dispatch("get_settings") == CommandResult(ok=True, data=None)

    assert dispatcher.dispatch("save_settings", {"settings": {"theme": "dark"}}).ok

    data = dispatcher.dispatch("get_settings").data
    assert data["theme"] == "dark"
    assert data["primaryColor"] == "#6366f1"
    assert data["windowPosition"] is None


def test_import_and_export(dispatcher):
    dispatcher.dispatch("create_account", {"account": dict(ACCOUNT, id="old")})
    data = {
        "accounts": [ACCOUNT],
        "transactions": [TRANSACTION],
        "categories": [{"id": "food", "name": "Food", "icon": "Apple", "color": "#f00"}],
    }

    assert dispatcher.dispatch("import_data", {"data": data}).ok

    exported = dispatcher.dispatch("export_data").data
    assert [acc["id"] for acc in exported["accounts"]] == ["acc-1"]
    assert [txn["id"] for txn in exported["transactions"]] == ["txn-1"]
    assert exported["scheduled"] == []


def test_scheduled_operations(dispatcher):
    dispatcher.dispatch("create_account", {"account": ACCOUNT})
    scheduled = {
        "id": "sch-1",
        "description": "Rent",
        "amount": 900,
        "type": "expense",
        "frequency": "monthly",
        "accountId": "acc-1",
        "nextDate": "2024-02-01",
        "category": "housing",
    }

    assert dispatcher.dispatch("add_scheduled", {"scheduled": scheduled}).ok
    listed = dispatcher.dispatch("get_scheduled").data
    assert listed[0]["includeInForecast"] is True

    assert dispatcher.dispatch("delete_scheduled", {"id": "sch-1"}).ok
    assert dispatcher.dispatch("list_scheduled").data == []


def test_result_payload():
    assert CommandResult(ok=False, error="boom").to_payload() == {
        "ok": False,
        "data": None,
        "error": "boom",
    }


class TestClassifyDatabaseError:
    """Tests for mapping storage errors to domain errors."""

    def test_foreign_key(self):
        error = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
        classified = classify_database_error(error, "adding the transaction")
        assert isinstance(classified, DependencyError)
        assert str(classified) == still_referenced()

    def test_unique(self):
        error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: accounts.id"))
        assert isinstance(classify_database_error(error, "adding"), ConflictError)

    def test_other_failures_hide_driver_text(self):
        error = OperationalError("SELECT", {}, Exception("disk I/O error"))
        classified = classify_database_error(error, "loading accounts")
        assert isinstance(classified, StorageError)
        assert str(classified) == "Database error while loading accounts."


class TestUnstorableValues:
    """Values the store cannot hold come back as error results."""

    def test_oversized_integer(self, dispatcher):
        result = dispatcher.dispatch("save_settings", {"settings": {"componentSpacing": 2**70}})

        assert result.ok is False
        assert result.error == "Field 'componentSpacing' for settings must be a 64-bit integer"
        assert dispatcher.dispatch("get_settings").data is None

    def test_oversized_amount(self, dispatcher):
        dispatcher.dispatch("create_account", {"account": ACCOUNT})

        result = dispatcher.dispatch(
            "create_transaction", {"transaction": {**TRANSACTION, "amount": 10**400}}
        )

        assert result.ok is False
        assert dispatcher.dispatch("list_transactions").data == []

    def test_lone_surrogate_in_record(self, dispatcher):
        category = {"id": "\ud800", "name": "Food", "icon": "Utensils", "color": "#ef4444"}

        result = dispatcher.dispatch("create_category", {"category": category})

        assert result.ok is False
        assert "valid UTF-8 text" in result.error

    def test_lone_surrogate_in_identifier(self, dispatcher):
        result = dispatcher.dispatch("delete_account", {"id": "acc-\udc00"})

        assert result.ok is False
        assert "valid UTF-8 text" in result.error


class TestProcessScheduled:
    """Tests for the process_scheduled operation."""

    SCHEDULED = {
        "id": "sch-1",
        "description": "Savings",
        "amount": 50,
        "type": "transfer",
        "frequency": "monthly",
        "accountId": "acc-1",
        "toAccountId": "acc-2",
        "nextDate": "2024-01-10",
        "category": "transfer",
    }

    def _accounts(self, dispatcher):
        dispatcher.dispatch("create_account", {"account": ACCOUNT})
        dispatcher.dispatch(
            "create_account", {"account": {"id": "acc-2", "name": "Savings", "type": "savings"}}
        )

    def test_generates_transfer_legs_and_category(self, dispatcher):
        self._accounts(dispatcher)
        dispatcher.dispatch("create_scheduled", {"scheduled": self.SCHEDULED})

        result = dispatcher.dispatch("process_scheduled", {"today": "2024-02-15"})

        assert result.ok, result.error
        legs = result.data["transactions"]
        assert [(leg["date"], leg["accountId"], leg["type"]) for leg in legs] == [
            ("2024-01-10", "acc-1", "expense"),
            ("2024-01-10", "acc-2", "income"),
            ("2024-02-10", "acc-1", "expense"),
            ("2024-02-10", "acc-2", "income"),
        ]
        assert result.data["scheduled"][0]["nextDate"] == "2024-03-10"
        assert result.data["removedScheduledIds"] == []

        categories = [cat["id"] for cat in dispatcher.dispatch("list_categories").data]
        assert "transfer" in categories
        assert len(dispatcher.dispatch("list_transactions").data) == 4

    def test_nothing_due(self, dispatcher):
        self._accounts(dispatcher)
        dispatcher.dispatch("create_scheduled", {"scheduled": self.SCHEDULED})

        result = dispatcher.dispatch("process_scheduled", {"today": "2024-01-09"})

        assert result.data == {"transactions": [], "scheduled": [], "removedScheduledIds": []}
        assert dispatcher.dispatch("list_scheduled").data[0]["nextDate"] == "2024-01-10"

    def test_invalid_today(self, dispatcher):
        result = dispatcher.dispatch("process_scheduled", {"today": "soon"})

        assert result.ok is False
        assert result.error == "Field 'today' for process request must be an ISO date"
