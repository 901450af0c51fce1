"""Conversion between domain entities and front-end payloads.

Payloads are the JSON objects exchanged with the desktop front end. They
use camelCase keys (``accountId``, ``initialBalance``) while the entities
use snake_case attributes; this module is the single place where the two
naming schemes meet.
"""

import math
from datetime import date
from typing import Any, Optional

from dmxmoney.domain.entities import (
    Account,
    AppData,
    Category,
    ScheduledRun,
    ScheduledTransaction,
    Settings,
    Transaction,
    WindowPosition,
    WindowSize,
    DEFAULT_ACCOUNT_COLOR,
    DEFAULT_ACCOUNT_ICON,
    DEFAULT_COMPONENT_PADDING,
    DEFAULT_COMPONENT_SPACING,
    DEFAULT_DISPLAY_STYLE,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_THEME,
)
from dmxmoney.domain.errors import ValidationError, invalid_field, missing_field

_REQUIRED = object()

# SQLite INTEGER is a signed 64-bit value
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


def _ensure_object(payload: Any, entity: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError(f"Payload for {entity} must be an object")
    return payload


def _value(payload: dict[str, Any], entity: str, key: str, default: Any) -> Any:
    if key not in payload:
        if default is _REQUIRED:
            raise ValidationError(missing_field(entity, key))
        return default
    return payload[key]


def ensure_storable_text(value: str, entity: str, key: str) -> str:
    """Reject strings SQLite cannot store, such as lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(invalid_field(entity, key, "valid UTF-8 text")) from e
    return value


def _text(payload: dict[str, Any], entity: str, key: str, default: Any = _REQUIRED) -> str:
    value = _value(payload, entity, key, default)
    if not isinstance(value, str):
        raise ValidationError(invalid_field(entity, key, "a string"))
    return ensure_storable_text(value, entity, key)


def _optional_text(payload: dict[str, Any], entity: str, key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(invalid_field(entity, key, "a string or null"))
    return ensure_storable_text(value, entity, key)


def _number(payload: dict[str, Any], entity: str, key: str, default: Any = _REQUIRED) -> float:
    value = _value(payload, entity, key, default)
    # bool is an int subclass; a checkbox value is never an amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(invalid_field(entity, key, "a number"))
    try:
        number = float(value)
    except OverflowError as e:
        raise ValidationError(invalid_field(entity, key, "a finite number")) from e
    if not math.isfinite(number):
        raise ValidationError(invalid_field(entity, key, "a finite number"))
    return number


def _integer(payload: dict[str, Any], entity: str, key: str, default: Any = _REQUIRED) -> int:
    value = _value(payload, entity, key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(invalid_field(entity, key, "an integer"))
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise ValidationError(invalid_field(entity, key, "a 64-bit integer"))
    return value


def _flag(payload: dict[str, Any], entity: str, key: str, default: bool) -> bool:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(invalid_field(entity, key, "a boolean"))
    return value


def account_from_payload(payload: Any) -> Account:
    """Build an Account from a front-end payload."""
    data = _ensure_object(payload, "account")
    return Account(
        id=_text(data, "account", "id"),
        name=_text(data, "account", "name"),
        type=_text(data, "account", "type"),
        initial_balance=_number(data, "account", "initialBalance", 0.0),
        color=_text(data, "account", "color", DEFAULT_ACCOUNT_COLOR),
        icon=_text(data, "account", "icon", DEFAULT_ACCOUNT_ICON),
    )


def account_to_payload(account: Account) -> dict[str, Any]:
    """Convert an Account to its front-end payload."""
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type,
        "initialBalance": account.initial_balance,
        "color": account.color,
        "icon": account.icon,
    }


def transaction_from_payload(payload: Any) -> Transaction:
    """Build a Transaction from a front-end payload."""
    data = _ensure_object(payload, "transaction")
    return Transaction(
        id=_text(data, "transaction", "id"),
        date=_text(data, "transaction", "date"),
        account_id=_text(data, "transaction", "accountId"),
        type=_text(data, "transaction", "type"),
        amount=_number(data, "transaction", "amount"),
        category=_text(data, "transaction", "category"),
        description=_optional_text(data, "transaction", "description"),
        checked=_flag(data, "transaction", "checked", False),
        is_transfer=_flag(data, "transaction", "isTransfer", False),
        linked_transaction_id=_optional_text(data, "transaction", "linkedTransactionId"),
    )


def transaction_to_payload(transaction: Transaction) -> dict[str, Any]:
    """Convert a Transaction to its front-end payload."""
    return {
        "id": transaction.id,
        "date": transaction.date,
        "accountId": transaction.account_id,
        "type": transaction.type,
        "amount": transaction.amount,
        "category": transaction.category,
        "description": transaction.description,
        "checked": transaction.checked,
        "isTransfer": transaction.is_transfer,
        "linkedTransactionId": transaction.linked_transaction_id,
    }


def category_from_payload(payload: Any) -> Category:
    """Build a Category from a front-end payload."""
    data = _ensure_object(payload, "category")
    return Category(
        id=_text(data, "category", "id"),
        name=_text(data, "category", "name"),
        icon=_text(data, "category", "icon"),
        color=_text(data, "category", "color"),
    )


def category_to_payload(category: Category) -> dict[str, Any]:
    """Convert a Category to its front-end payload."""
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
    }


def scheduled_from_payload(payload: Any) -> ScheduledTransaction:
    """Build a ScheduledTransaction from a front-end payload.

    ``includeInForecast`` defaults to True when absent; an explicit null is
    kept as None.
    """
    data = _ensure_object(payload, "scheduled transaction")
    include_in_forecast = data.get("includeInForecast", True)
    if include_in_forecast is not None and not isinstance(include_in_forecast, bool):
        raise ValidationError(
            invalid_field("scheduled transaction", "includeInForecast", "a boolean or null")
        )
    return ScheduledTransaction(
        id=_text(data, "scheduled transaction", "id"),
        description=_text(data, "scheduled transaction", "description"),
        amount=_number(data, "scheduled transaction", "amount"),
        type=_text(data, "scheduled transaction", "type"),
        frequency=_text(data, "scheduled transaction", "frequency"),
        account_id=_text(data, "scheduled transaction", "accountId"),
        next_date=_text(data, "scheduled transaction", "nextDate"),
        category=_text(data, "scheduled transaction", "category"),
        to_account_id=_optional_text(data, "scheduled transaction", "toAccountId"),
        include_in_forecast=include_in_forecast,
        end_date=_optional_text(data, "scheduled transaction", "endDate"),
    )


def scheduled_to_payload(scheduled: ScheduledTransaction) -> dict[str, Any]:
    """Convert a ScheduledTransaction to its front-end payload."""
    return {
        "id": scheduled.id,
        "description": scheduled.description,
        "amount": scheduled.amount,
        "type": scheduled.type,
        "frequency": scheduled.frequency,
        "accountId": scheduled.account_id,
        "nextDate": scheduled.next_date,
        "category": scheduled.category,
        "toAccountId": scheduled.to_account_id,
        "includeInForecast": scheduled.include_in_forecast,
        "endDate": scheduled.end_date,
    }


def _window_position(data: dict[str, Any]) -> Optional[WindowPosition]:
    value = data.get("windowPosition")
    if value is None:
        return None
    value = _ensure_object(value, "window position")
    return WindowPosition(
        x=_integer(value, "window position", "x"),
        y=_integer(value, "window position", "y"),
    )


def _window_size(data: dict[str, Any]) -> Optional[WindowSize]:
    value = data.get("windowSize")
    if value is None:
        return None
    value = _ensure_object(value, "window size")
    return WindowSize(
        width=_integer(value, "window size", "width"),
        height=_integer(value, "window size", "height"),
    )


def settings_from_payload(payload: Any) -> Settings:
    """Build Settings from a front-end payload, filling in defaults."""
    data = _ensure_object(payload, "settings")
    return Settings(
        theme=_text(data, "settings", "theme", DEFAULT_THEME),
        primary_color=_text(data, "settings", "primaryColor", DEFAULT_PRIMARY_COLOR),
        display_style=_text(data, "settings", "displayStyle", DEFAULT_DISPLAY_STYLE),
        window_position=_window_position(data),
        window_size=_window_size(data),
        account_groups=_optional_text(data, "settings", "accountGroups"),
        custom_groups=_optional_text(data, "settings", "customGroups"),
        custom_groups_order=_optional_text(data, "settings", "customGroupsOrder"),
        accounts_order=_optional_text(data, "settings", "accountsOrder"),
        last_seen_version=_optional_text(data, "settings", "lastSeenVersion"),
        component_spacing=_integer(data, "settings", "componentSpacing", DEFAULT_COMPONENT_SPACING),
        component_padding=_integer(data, "settings", "componentPadding", DEFAULT_COMPONENT_PADDING),
    )


def settings_to_payload(settings: Settings) -> dict[str, Any]:
    """Convert Settings to its front-end payload."""
    position = settings.window_position
    size = settings.window_size
    return {
        "theme": settings.theme,
        "primaryColor": settings.primary_color,
        "displayStyle": settings.display_style,
        "windowPosition": {"x": position.x, "y": position.y} if position else None,
        "windowSize": {"width": size.width, "height": size.height} if size else None,
        "accountGroups": settings.account_groups,
        "customGroups": settings.custom_groups,
        "customGroupsOrder": settings.custom_groups_order,
        "accountsOrder": settings.accounts_order,
        "lastSeenVersion": settings.last_seen_version,
        "componentSpacing": settings.component_spacing,
        "componentPadding": settings.component_padding,
    }


def _entity_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(invalid_field("import data", key, "a list"))
    return value


def app_data_from_payload(payload: Any) -> AppData:
    """Build an AppData snapshot; absent lists are treated as empty."""
    data = _ensure_object(payload, "import data")
    return AppData(
        accounts=[account_from_payload(item) for item in _entity_list(data, "accounts")],
        transactions=[
            transaction_from_payload(item) for item in _entity_list(data, "transactions")
        ],
        categories=[category_from_payload(item) for item in _entity_list(data, "categories")],
        scheduled=[scheduled_from_payload(item) for item in _entity_list(data, "scheduled")],
    )


def app_data_to_payload(snapshot: AppData) -> dict[str, Any]:
    """Convert an AppData snapshot to its front-end payload."""
    return {
        "accounts": [account_to_payload(acc) for acc in snapshot.accounts],
        "transactions": [transaction_to_payload(txn) for txn in snapshot.transactions],
        "categories": [category_to_payload(cat) for cat in snapshot.categories],
        "scheduled": [scheduled_to_payload(item) for item in snapshot.scheduled],
    }


def transfer_from_payload(payload: Any) -> dict[str, Any]:
    """Read a transfer request into keyword arguments for ``create_transfer``."""
    data = _ensure_object(payload, "transfer")
    return {
        "from_account_id": _text(data, "transfer", "fromAccountId"),
        "to_account_id": _text(data, "transfer", "toAccountId"),
        "amount": _number(data, "transfer", "amount"),
        "date": _text(data, "transfer", "date"),
        "description": _optional_text(data, "transfer", "description"),
        "from_transaction_id": _optional_text(data, "transfer", "fromTransactionId"),
        "to_transaction_id": _optional_text(data, "transfer", "toTransactionId"),
    }


def scheduled_run_to_payload(run: ScheduledRun) -> dict[str, Any]:
    """Convert a ScheduledRun to its front-end payload."""
    return {
        "transactions": [transaction_to_payload(txn) for txn in run.transactions],
        "scheduled": [scheduled_to_payload(item) for item in run.advanced],
        "removedScheduledIds": list(run.finished),
    }


def process_date_from_payload(payload: dict[str, Any]) -> Optional[date]:
    """Read the optional ``today`` ISO date of a process request."""
    value = _optional_text(payload, "process request", "today")
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(invalid_field("process request", "today", "an ISO date")) from e
