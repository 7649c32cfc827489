"""
Database connection (PostgreSQL via psycopg2, SQLite for local development)

This module centralizes every way of reaching the database:
- SQLAlchemy engine and session factory
- session_scope() transaction boundary used by the services
- get_session_maker() FastAPI dependency
- check_database_connection() with retry, used by the health endpoint
"""
import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


# ============================================================================
# SQLAlchemy Configuration
# ============================================================================

def build_engine(database_url: str):
    """
    Create an engine for the given URL.

    Pool sizing only applies to server databases; SQLite connections are
    allowed to cross threads because FastAPI runs sync routes in a threadpool.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify the connection before handing it out
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


engine = build_engine(settings.DATABASE_URL)

# Session Factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

# Base for models
Base = declarative_base()

SessionMaker = Callable[[], Session]


@contextmanager
def session_scope(session_maker: Optional[SessionMaker] = None) -> Iterator[Session]:
    """
    Unit of work: one session, one transaction.

    Commits when the block exits normally, rolls back on any exception
    (including cancellation) and always releases the connection.

    Usage:
        with session_scope() as session:
            session.add(order)
    """
    session = (session_maker or SessionLocal)()
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


def get_session_maker() -> SessionMaker:
    """FastAPI dependency returning the session factory (overridden in tests)"""
    return SessionLocal


def init_db(bind=None) -> None:
    """Create all tables. Used for local development and tests."""
    # Import models so they are registered on Base.metadata
    from marketplace import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# ============================================================================
# Connection check with retry logic
# ============================================================================

def check_database_connection(max_retries: int = 3, retry_delay: float = 1.0, bind=None) -> float:
    """
    Run SELECT 1 with exponential backoff on connection failures

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        Query latency in milliseconds

    Raises:
        OperationalError: If all retry attempts fail
    """
    target = bind or engine
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            start = time.time()
            with target.connect() as conn:
                conn.execute(text("SELECT 1"))
            latency_ms = round((time.time() - start) * 1000, 2)
            logger.debug(f"Database connection successful on attempt {attempt}")
            return latency_ms

        except OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error
