from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager, suppress

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.config.settings import settings


def _is_postgresql(url: str) -> bool:
    return "postgresql" in url.lower() or "postgres" in url.lower()


def _validate_postgresql_driver() -> None:
    """Validate PostgreSQL driver is installed when using PostgreSQL.

    Must actually import psycopg2 (not just find it) because SQLAlchemy
    will try to import it when creating the engine.
    """
    if _is_postgresql(settings.database_url):
        try:
            import psycopg2  # noqa: F401

            logger.info("PostgreSQL driver (psycopg2) is available")
        except ImportError as e:
            logger.error("PostgreSQL driver (psycopg2) is not installed. Install it with: pip install psycopg2-binary")
            raise ImportError("PostgreSQL driver required. Install with: pip install psycopg2-binary") from e


def check_database_connection() -> None:
    """Run a trivial query against the configured database."""
    try:
        with _get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection test successful")
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        raise


# Lazy initialization to avoid import-time database connections
_engine = None
_SessionLocal = None


def _get_engine():
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")

        is_postgresql = _is_postgresql(settings.database_url)
        if is_postgresql:
            _validate_postgresql_driver()
            logger.info("Using PostgreSQL database")
        else:
            logger.warning("Using SQLite database (local development only)")

        connect_args = {}
        if "sqlite" in settings.database_url.lower():
            connect_args = {"check_same_thread": False}
        elif is_postgresql:
            connect_args = {
                "connect_timeout": 10,
                "application_name": "fitplan",
            }

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,  # Set to True for SQL query logging
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine():
    """Get or create the database engine (public API)."""
    return _get_engine()


def _get_session_local():
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def _handle_session_commit(session: Session) -> None:
    """Commit the open transaction, skipping the round trip when none was started.

    Bulk UPDATE/DELETE statements never show up in dirty/deleted, so the
    open transaction is what decides.
    """
    with suppress(Exception):
        logger.debug(f"Before commit: dirty={len(session.dirty)}, new={len(session.new)}, deleted={len(session.deleted)}")
    if session.in_transaction():
        session.commit()
        logger.debug("Database session committed successfully")
    else:
        logger.debug("No changes to commit, skipping commit")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Transactional session scope.

    Everything executed inside the block commits together on normal exit and
    rolls back together on any exception:
    - HTTPException and PlanError: rolled back and re-raised unchanged
      (expected outcomes, not database errors)
    - SQLAlchemyError: logged, rolled back, re-raised as StoreFailureError
    - anything else: logged, rolled back, re-raised unchanged
    """
    # Import here to avoid circular imports (app.plans imports this module)
    from app.plans.errors import PlanError, StoreFailureError

    logger.debug("Creating new database session")
    session = _get_session_local()()
    try:
        yield session
        _handle_session_commit(session)
    except (HTTPException, PlanError):
        logger.debug("Business error in session, rolling back")
        session.rollback()
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error, rolling back: {e}. Error type: {type(e).__name__}")
        session.rollback()
        raise StoreFailureError(str(e)) from e
    except Exception:
        logger.exception("Unexpected error in database session, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        logger.debug("Database session closed")
