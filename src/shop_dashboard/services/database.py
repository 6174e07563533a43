"""
SQLite engine and session handling for the Shop Dashboard.

Services never build sessions themselves. They either receive one from the
caller or open one with session_scope(), which commits on success and rolls
back on failure. SQLAlchemy failures surface as DatabaseError so that the UI
and the report CLI can treat them like any other ServiceError.

Tests swap get_session_factory() for a factory bound to an in-memory engine.
"""

from typing import List, Optional
from contextlib import contextmanager
import logging
import sqlite3

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, close_all_sessions
from sqlalchemy.pool import StaticPool

from ..utils.config import get_config
from ..models.base import Base
from .exceptions import DatabaseError

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Foreign keys must be on for ON DELETE SET NULL on sales.product_id."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def _is_memory_url(database_url: str) -> bool:
    return ":memory:" in database_url or "mode=memory" in database_url


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build an engine for the configured SQLite file, or for the given URL.

    In-memory URLs share one connection (StaticPool) so every session sees
    the same tables. File databases wait up to 30 seconds on a lock, which
    covers a report CLI run while the dashboard is recording a sale.
    """
    if database_url is None:
        database_url = get_config().database_url

    logger.info(f"Creating database engine: {database_url}")

    if _is_memory_url(database_url):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": 30},
    )


def _model_table_names() -> List[str]:
    from .. import models  # noqa: F401

    return [table.name for table in Base.metadata.sorted_tables]


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing model tables (stores through announcements)."""
    if engine is None:
        engine = get_engine()

    tables = _model_table_names()
    Base.metadata.create_all(engine)
    logger.info(f"Database tables ready: {', '.join(tables)}")


def get_engine(force_recreate: bool = False) -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """Return the process-wide session factory."""
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope():
    """
    Open a session for one unit of work.

    Example:
        with session_scope() as session:
            session.add(Store(name="渋谷店", code="SBY"))

    Raises:
        DatabaseError: If SQLAlchemy fails; the transaction is rolled back
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database operation failed, rolled back: {e}")
        raise DatabaseError(str(e), original_error=e) from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def missing_tables(engine: Optional[Engine] = None) -> List[str]:
    """Names of model tables that the database does not have yet."""
    existing = set(inspect(engine or get_engine()).get_table_names())
    return [name for name in _model_table_names() if name not in existing]


def verify_database() -> bool:
    """True when every model table exists."""
    try:
        missing = missing_tables()
    except SQLAlchemyError as e:
        logger.error(f"Database verification failed: {e}")
        return False

    if missing:
        logger.warning(f"Database is missing tables: {', '.join(missing)}")
        return False
    return True


def reset_database(confirm: bool = False) -> None:
    """
    Drop and recreate every table. All stores, sales and contacts are lost.

    Raises:
        ValueError: If confirm is not True
    """
    if not confirm:
        raise ValueError("Must pass confirm=True to reset database. This will delete all data!")

    logger.warning("RESETTING DATABASE - ALL DATA WILL BE LOST")

    engine = get_engine()
    _model_table_names()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.info("Tables dropped and recreated")


def close_connections() -> None:
    """Close open sessions and dispose of the engine."""
    global _engine, _SessionFactory

    if _SessionFactory is not None:
        close_all_sessions()
        _SessionFactory = None

    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Create the database file and its tables on first run."""
    config = get_config()
    action = "Using existing" if config.database_exists() else "Creating new"
    logger.info(f"{action} database at: {config.database_path}")

    init_database(get_engine())

    if not verify_database():
        logger.warning("Database verification failed - tables may not exist")
