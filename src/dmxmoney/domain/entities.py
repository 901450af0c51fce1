"""Domain model entities for dmxmoney.

These are pure data classes representing the records the desktop front end
works with, independent of the database schema. Identifiers are assigned
by the caller (UUIDs in practice) and never generated here.
"""

from dataclasses import dataclass, field
from typing import Optional


DEFAULT_ACCOUNT_COLOR = "#3b82f6"
DEFAULT_ACCOUNT_ICON = "Wallet"

DEFAULT_THEME = "system"
DEFAULT_PRIMARY_COLOR = "#6366f1"
DEFAULT_DISPLAY_STYLE = "modern"
DEFAULT_COMPONENT_SPACING = 6
DEFAULT_COMPONENT_PADDING = 6


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: str
    name: str
    type: str
    initial_balance: float = 0.0
    color: str = DEFAULT_ACCOUNT_COLOR
    icon: str = DEFAULT_ACCOUNT_ICON


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    The two legs of a transfer point at each other through
    ``linked_transaction_id``; the link is advisory and not enforced.
    """

    id: str
    date: str
    account_id: str
    type: str
    amount: float
    category: str
    description: Optional[str] = None
    checked: bool = False
    is_transfer: bool = False
    linked_transaction_id: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    name: str
    icon: str
    color: str


@dataclass(frozen=True)
class ScheduledTransaction:
    """Recurring transaction domain entity."""

    id: str
    description: str
    amount: float
    type: str
    frequency: str
    account_id: str
    next_date: str
    category: str
    to_account_id: Optional[str] = None
    include_in_forecast: Optional[bool] = True
    end_date: Optional[str] = None


@dataclass(frozen=True)
class WindowPosition:
    """Saved main window position."""

    x: int
    y: int


@dataclass(frozen=True)
class WindowSize:
    """Saved main window size."""

    width: int
    height: int


@dataclass(frozen=True)
class Settings:
    """Application settings held in the singleton settings row.

    The grouping and ordering fields are JSON documents owned by the front
    end and stored verbatim as strings.
    """

    theme: str = DEFAULT_THEME
    primary_color: str = DEFAULT_PRIMARY_COLOR
    display_style: str = DEFAULT_DISPLAY_STYLE
    window_position: Optional[WindowPosition] = None
    window_size: Optional[WindowSize] = None
    account_groups: Optional[str] = None
    custom_groups: Optional[str] = None
    custom_groups_order: Optional[str] = None
    accounts_order: Optional[str] = None
    last_seen_version: Optional[str] = None
    component_spacing: int = DEFAULT_COMPONENT_SPACING
    component_padding: int = DEFAULT_COMPONENT_PADDING


@dataclass(frozen=True)
class AppData:
    """A full snapshot of the four entity tables."""

    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    scheduled: list[ScheduledTransaction] = field(default_factory=list)


@dataclass(frozen=True)
class ScheduledRun:
    """Changes produced by materialising due scheduled transactions.

    ``expected_next_dates`` maps each touched scheduled transaction id to the
    ``next_date`` it had when it was read; the run is only applied when
    those rows are still unchanged.
    """

    transactions: list[Transaction] = field(default_factory=list)
    advanced: list[ScheduledTransaction] = field(default_factory=list)
    finished: list[str] = field(default_factory=list)
    expected_next_dates: dict[str, str] = field(default_factory=dict)
