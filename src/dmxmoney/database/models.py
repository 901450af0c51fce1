"""SQLAlchemy models for the dmxmoney database.

Column names keep the camelCase spelling of the desktop application's
original schema so existing database files open unchanged.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()

SETTINGS_ROW_ID = 1


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column("type", String, nullable=False)
    initial_balance = Column("initialBalance", Float, key="initial_balance", nullable=False)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    date = Column(String, nullable=False)
    account_id = Column(
        "accountId", String, ForeignKey("accounts.id"), key="account_id", nullable=False
    )
    type = Column("type", String, nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=True)
    checked = Column(Boolean, default=False, server_default=text("0"))
    is_transfer = Column("isTransfer", Boolean, key="is_transfer", default=False, server_default=text("0"))
    # Soft link between the two legs of a transfer
    linked_transaction_id = Column("linkedTransactionId", String, key="linked_transaction_id", nullable=True)


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    color = Column(String, nullable=False)


class ScheduledTransaction(Base):
    """Scheduled (recurring) transaction model."""

    __tablename__ = "scheduled_transactions"

    id = Column(String, primary_key=True)
    description = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    type = Column("type", String, nullable=False)
    frequency = Column(String, nullable=False)
    account_id = Column(
        "accountId", String, ForeignKey("accounts.id"), key="account_id", nullable=False
    )
    next_date = Column("nextDate", String, key="next_date", nullable=False)
    category = Column(String, nullable=False)
    # No foreign key: databases upgraded in place gained this column through
    # ALTER TABLE without one, and fresh databases must behave the same.
    to_account_id = Column("toAccountId", String, key="to_account_id", nullable=True)
    include_in_forecast = Column("includeInForecast", Boolean, key="include_in_forecast", server_default=text("1"))
    end_date = Column("endDate", String, key="end_date", nullable=True)


class Settings(Base):
    """Singleton application settings row."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=False)
    theme = Column(String, nullable=False, server_default="system")
    primary_color = Column("primaryColor", String, key="primary_color", nullable=False, server_default="#6366f1")
    display_style = Column("displayStyle", String, key="display_style", nullable=False, server_default="modern")
    window_position_x = Column("windowPositionX", Integer, key="window_position_x", nullable=True)
    window_position_y = Column("windowPositionY", Integer, key="window_position_y", nullable=True)
    window_size_width = Column("windowSizeWidth", Integer, key="window_size_width", nullable=True)
    window_size_height = Column("windowSizeHeight", Integer, key="window_size_height", nullable=True)
    component_spacing = Column("componentSpacing", Integer, key="component_spacing", nullable=False, server_default=text("6"))
    component_padding = Column("componentPadding", Integer, key="component_padding", nullable=False, server_default=text("6"))
    account_groups = Column("accountGroups", String, key="account_groups", nullable=True)
    custom_groups = Column("customGroups", String, key="custom_groups", nullable=True)
    custom_groups_order = Column("customGroupsOrder", String, key="custom_groups_order", nullable=True)
    accounts_order = Column("accountsOrder", String, key="accounts_order", nullable=True)
    last_seen_version = Column("lastSeenVersion", String, key="last_seen_version", nullable=True)

    __table_args__ = (CheckConstraint(f"id = {SETTINGS_ROW_ID}", name="ck_settings_singleton"),)


def _configure_sqlite(engine: Engine) -> None:
    """Enforce foreign keys and let SQLAlchemy own BEGIN/COMMIT.

    pysqlite only opens a transaction implicitly before DML, which would
    make CREATE/ALTER statements autocommit. Disabling that and emitting
    BEGIN ourselves makes DDL part of the enclosing transaction.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_sqlite_engine(
    database_url: str, pool_size: int = 5, pool_timeout: float = 30
) -> Engine:
    """Create an engine backed by a bounded connection pool.

    Callers beyond ``pool_size`` block until a connection is returned, or
    raise ``sqlalchemy.exc.TimeoutError`` after ``pool_timeout`` seconds.
    """
    engine = create_engine(
        database_url,
        echo=False,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        connect_args={"check_same_thread": False},
    )
    _configure_sqlite(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory bound to ``engine``."""
    return sessionmaker(bind=engine, expire_on_commit=False)
