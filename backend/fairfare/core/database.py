"""
Database utilities and connection management.

WHAT: SQLAlchemy engine/session setup for the negotiation history store
WHY: Accepted plans are written to a relational store keyed by user
HOW: Sync SQLAlchemy engine (WAL mode for SQLite), explicit factories instead of module globals
"""

from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..utils.logger import get_logger

logger = get_logger(__name__)

# Base for models
Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine; SQLite URLs get WAL mode and their data directory.

    Args:
        database_url: SQLAlchemy URL
        echo: Log SQL statements
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {}

    if is_sqlite:
        connect_args["check_same_thread"] = False  # Allow multi-threaded access
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            Path(database_url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, connect_args=connect_args, echo=echo)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable WAL mode for better concurrency."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to engine."""
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False
    )


@contextmanager
def session_scope(session_factory: sessionmaker):
    """
    Context manager for a transactional database session.

    Usage:
        with session_scope(factory) as db:
            db.add(record)

    Yields:
        Session: SQLAlchemy session, committed on success, rolled back on error
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ping_database(engine: Engine) -> dict:
    """
    Check database connectivity.

    Returns:
        Dict with status and error
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return {"available": True, "error": None}
    except Exception as e:
        logger.error(f"Database ping failed: {e}")
        return {"available": False, "error": str(e)}


def init_db(engine: Engine):
    """Create all tables."""
    # Import models so they register on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized")


def close_db(engine: Engine):
    """Close database connections."""
    engine.dispose()
    logger.info("Database connections closed")
