"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db(). Every banking operation runs inside
unit_of_work().
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

from secure_banking.config import get_settings
from secure_banking.exceptions import ConflictOrTimeoutError

logger = logging.getLogger(__name__)

settings = get_settings()


def _connect_args(database_url: str) -> dict:
    # PostgreSQL aborts a statement that waits on a row lock for
    # longer than lock_timeout; that surfaces as OperationalError.
    if database_url.startswith("postgresql"):
        return {"options": f"-c lock_timeout={settings.LOCK_TIMEOUT_MS}"}
    if database_url.startswith("sqlite"):
        return {
            "check_same_thread": False,
            "timeout": settings.LOCK_TIMEOUT_MS / 1000,
        }
    return {}


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved. autoflush=False means SQL is only sent when we
# flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# lock_not_available (lock_timeout), deadlock_detected, serialization_failure
LOCK_FAILURE_PGCODES = frozenset({"55P03", "40P01", "40001"})


def is_lock_failure(exc: OperationalError) -> bool:
    """True when the store gave up on a lock rather than failing outright."""
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode is not None:
        return pgcode in LOCK_FAILURE_PGCODES
    message = str(exc.orig).lower()
    return "is locked" in message or "busy" in message


@contextmanager
def unit_of_work(db: Session):
    """
    Run a block as one all-or-nothing unit against the store.

    The outermost unit commits on success and rolls back on any
    exception. Units opened inside another unit on the same
    session join it, so an audit write made from inside
    create_customer is committed (or discarded) together with
    the customer row.

    Lock contention and lock-wait timeouts reported by the store
    are re-raised as ConflictOrTimeoutError, which is retryable.
    Any other OperationalError (missing table, lost connection)
    propagates unchanged.
    """
    depth = db.info.get("uow_depth", 0)
    db.info["uow_depth"] = depth + 1
    outermost = depth == 0
    try:
        yield db
        if outermost:
            db.commit()
    except OperationalError as e:
        if outermost:
            db.rollback()
        if not is_lock_failure(e):
            raise
        logger.warning("Store conflict or timeout", extra={"error": str(e.orig)})
        raise ConflictOrTimeoutError(
            f"Store lock conflict or timeout: {e.orig}"
        ) from e
    except Exception:
        if outermost:
            db.rollback()
        raise
    finally:
        db.info["uow_depth"] = depth
