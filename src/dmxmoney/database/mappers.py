"""Mapper functions to convert between domain models and SQLAlchemy models.

The ``*_values`` functions produce column-value mappings keyed by model
attribute name, used for inserts, updates and upserts.
"""

from typing import Any

from dmxmoney.domain import entities as domain
from dmxmoney.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    ScheduledTransaction as ORMScheduledTransaction,
    Settings as ORMSettings,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity.

    Legacy rows may hold NULL color or icon; the domain defaults fill in.
    """
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=orm_account.type,
        initial_balance=orm_account.initial_balance,
        color=orm_account.color if orm_account.color is not None else domain.DEFAULT_ACCOUNT_COLOR,
        icon=orm_account.icon if orm_account.icon is not None else domain.DEFAULT_ACCOUNT_ICON,
    )


def account_values(account: domain.Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.type,
        "initial_balance": account.initial_balance,
        "color": account.color,
        "icon": account.icon,
    }


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        account_id=orm_transaction.account_id,
        type=orm_transaction.type,
        amount=orm_transaction.amount,
        category=orm_transaction.category,
        description=orm_transaction.description,
        checked=bool(orm_transaction.checked),
        is_transfer=bool(orm_transaction.is_transfer),
        linked_transaction_id=orm_transaction.linked_transaction_id,
    )


def transaction_values(transaction: domain.Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "date": transaction.date,
        "account_id": transaction.account_id,
        "type": transaction.type,
        "amount": transaction.amount,
        "category": transaction.category,
        "description": transaction.description,
        "checked": transaction.checked,
        "is_transfer": transaction.is_transfer,
        "linked_transaction_id": transaction.linked_transaction_id,
    }


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        icon=orm_category.icon,
        color=orm_category.color,
    )


def category_values(category: domain.Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
    }


def scheduled_to_domain(orm_scheduled: ORMScheduledTransaction) -> domain.ScheduledTransaction:
    """Convert SQLAlchemy ScheduledTransaction model to domain entity."""
    return domain.ScheduledTransaction(
        id=orm_scheduled.id,
        description=orm_scheduled.description,
        amount=orm_scheduled.amount,
        type=orm_scheduled.type,
        frequency=orm_scheduled.frequency,
        account_id=orm_scheduled.account_id,
        next_date=orm_scheduled.next_date,
        category=orm_scheduled.category,
        to_account_id=orm_scheduled.to_account_id,
        include_in_forecast=orm_scheduled.include_in_forecast,
        end_date=orm_scheduled.end_date,
    )


def scheduled_values(scheduled: domain.ScheduledTransaction) -> dict[str, Any]:
    return {
        "id": scheduled.id,
        "description": scheduled.description,
        "amount": scheduled.amount,
        "type": scheduled.type,
        "frequency": scheduled.frequency,
        "account_id": scheduled.account_id,
        "next_date": scheduled.next_date,
        "category": scheduled.category,
        "to_account_id": scheduled.to_account_id,
        "include_in_forecast": scheduled.include_in_forecast,
        "end_date": scheduled.end_date,
    }


def settings_to_domain(orm_settings: ORMSettings) -> domain.Settings:
    """Convert the settings row to domain Settings.

    A window position or size is only rebuilt when both of its halves are
    stored; a lone coordinate is treated as no saved value.
    """
    window_position = None
    if orm_settings.window_position_x is not None and orm_settings.window_position_y is not None:
        window_position = domain.WindowPosition(
            x=orm_settings.window_position_x, y=orm_settings.window_position_y
        )

    window_size = None
    if orm_settings.window_size_width is not None and orm_settings.window_size_height is not None:
        window_size = domain.WindowSize(
            width=orm_settings.window_size_width, height=orm_settings.window_size_height
        )

    return domain.Settings(
        theme=orm_settings.theme,
        primary_color=orm_settings.primary_color,
        display_style=orm_settings.display_style,
        window_position=window_position,
        window_size=window_size,
        account_groups=orm_settings.account_groups,
        custom_groups=orm_settings.custom_groups,
        custom_groups_order=orm_settings.custom_groups_order,
        accounts_order=orm_settings.accounts_order,
        last_seen_version=orm_settings.last_seen_version,
        component_spacing=orm_settings.component_spacing,
        component_padding=orm_settings.component_padding,
    )


def settings_values(settings: domain.Settings) -> dict[str, Any]:
    """Flatten domain Settings into settings-row values (without the id)."""
    position = settings.window_position
    size = settings.window_size
    return {
        "theme": settings.theme,
        "primary_color": settings.primary_color,
        "display_style": settings.display_style,
        "window_position_x": position.x if position else None,
        "window_position_y": position.y if position else None,
        "window_size_width": size.width if size else None,
        "window_size_height": size.height if size else None,
        "account_groups": settings.account_groups,
        "custom_groups": settings.custom_groups,
        "custom_groups_order": settings.custom_groups_order,
        "accounts_order": settings.accounts_order,
        "last_seen_version": settings.last_seen_version,
        "component_spacing": settings.component_spacing,
        "component_padding": settings.component_padding,
    }
