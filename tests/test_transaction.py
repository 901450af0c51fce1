"""Tests for transaction storage and transfers."""

import pytest

from dmxmoney.domain.entities import Transaction
from dmxmoney.domain.errors import ConflictError, DependencyError, ValidationError
from dmxmoney.domain.transaction import TRANSFER_CATEGORY


def _transaction(txn_id="txn-1", account_id="acc-1", date="2024-01-15", **overrides):
    values = {
        "id": txn_id,
        "date": date,
        "account_id": account_id,
        "type": "expense",
        "amount": 42.5,
        "category": "food",
        "description": "Groceries",
    }
    values.update(overrides)
    return Transaction(**values)


def test_create_and_list(transaction_service, sample_account):
    transaction = _transaction(checked=True)
    transaction_service.create_transaction(transaction)

    assert transaction_service.list_transactions() == [transaction]


def test_list_newest_date_first(transaction_service, sample_account):
    for txn_id, date in [("a", "2024-01-10"), ("b", "2024-03-01"), ("c", "2023-12-31")]:
        transaction_service.create_transaction(_transaction(txn_id, date=date))

    dates = [txn.date for txn in transaction_service.list_transactions()]
    assert dates == ["2024-03-01", "2024-01-10", "2023-12-31"]


def test_duplicate_id_is_conflict(transaction_service, sample_account):
    transaction_service.create_transaction(_transaction())

    with pytest.raises(ConflictError, match="already exists"):
        transaction_service.create_transaction(_transaction(amount=1.0))

    assert transaction_service.list_transactions()[0].amount == 42.5


def test_unknown_account_is_dependency_error(transaction_service):
    with pytest.raises(DependencyError, match="still referenced"):
        transaction_service.create_transaction(_transaction(account_id="missing"))

    assert transaction_service.list_transactions() == []


def test_update_replaces_every_field(transaction_service, sample_account):
    transaction_service.create_transaction(_transaction())
    updated = _transaction(amount=7.0, category="travel", description=None, checked=True)

    transaction_service.update_transaction(updated)

    assert transaction_service.list_transactions() == [updated]


def test_update_to_unknown_account_fails(transaction_service, sample_account):
    transaction_service.create_transaction(_transaction())

    with pytest.raises(DependencyError):
        transaction_service.update_transaction(_transaction(account_id="missing"))


def test_update_unknown_id_changes_nothing(transaction_service, sample_account):
    transaction_service.update_transaction(_transaction("missing"))

    assert transaction_service.list_transactions() == []


def test_delete(transaction_service, sample_account):
    transaction_service.create_transaction(_transaction("txn-1"))
    transaction_service.create_transaction(_transaction("txn-2"))

    transaction_service.delete_transaction("txn-1")
    transaction_service.delete_transaction("missing")

    assert [txn.id for txn in transaction_service.list_transactions()] == ["txn-2"]


class TestTransfer:
    """Tests for two-leg transfers."""

    def test_creates_linked_legs(self, transaction_service, sample_account, second_account):
        from_id, to_id = transaction_service.create_transfer(
            from_account_id=sample_account.id,
            to_account_id=second_account.id,
            amount=200.0,
            date="2024-04-01",
            description="Savings",
        )

        legs = {txn.id: txn for txn in transaction_service.list_transactions()}
        assert set(legs) == {from_id, to_id}

        outgoing, incoming = legs[from_id], legs[to_id]
        assert outgoing.account_id == sample_account.id
        assert outgoing.type == "expense"
        assert incoming.account_id == second_account.id
        assert incoming.type == "income"
        for leg in (outgoing, incoming):
            assert leg.amount == 200.0
            assert leg.category == TRANSFER_CATEGORY
            assert leg.is_transfer is True
            assert leg.description == "Savings"
        assert outgoing.linked_transaction_id == to_id
        assert incoming.linked_transaction_id == from_id

    def test_uses_given_ids(self, transaction_service, sample_account, second_account):
        ids = transaction_service.create_transfer(
            sample_account.id, second_account.id, 5.0, "2024-04-01",
            from_transaction_id="out", to_transaction_id="in",
        )
        assert ids == ("out", "in")

    def test_same_account_rejected(self, transaction_service, sample_account):
        with pytest.raises(ValidationError, match="same account"):
            transaction_service.create_transfer(
                sample_account.id, sample_account.id, 5.0, "2024-04-01"
            )

    def test_unknown_destination_stores_neither_leg(self, transaction_service, sample_account):
        with pytest.raises(DependencyError):
            transaction_service.create_transfer(sample_account.id, "missing", 5.0, "2024-04-01")

        assert transaction_service.list_transactions() == []
