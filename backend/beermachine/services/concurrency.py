# Overview: Unit-of-work and row-locking helpers shared by the balance-mutating services.

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from .errors import ConcurrencyConflictError


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; begin_write() covers it there.
    """
    return query.with_for_update()


def begin_write() -> None:
    """
    Take the database write lock up front on SQLite.

    SQLite has no row locks, so BEGIN IMMEDIATE serializes concurrent
    writers for the whole unit of work. Other dialects rely on
    lock_for_update().
    """
    if db.engine.dialect.name == "sqlite":
        db.session.execute(text("BEGIN IMMEDIATE"))


def _has_uncommitted_writes() -> bool:
    if db.engine.dialect.name != "sqlite":
        return False
    dbapi_connection = db.session.connection().connection.dbapi_connection
    return bool(getattr(dbapi_connection, "in_transaction", False))


def run_atomically(func):
    """
    Execute func as one unit of work: commit on success, roll back on any failure.

    Never retries. A sale replayed after an ambiguous failure could charge
    twice, so concurrency failures are rolled back and reported as
    ConcurrencyConflictError for the caller to decide.

    The session must not hold flushed but uncommitted writes on entry; those
    would be swept into this unit of work. Such a call is refused with
    RuntimeError and the caller's pending work is left untouched.
    """
    if _has_uncommitted_writes():
        raise RuntimeError(
            "run_atomically requires a session without uncommitted writes; commit or roll back first"
        )
    try:
        begin_write()
        result = func()
        db.session.commit()
        return result
    except (OperationalError, StaleDataError) as exc:
        db.session.rollback()
        raise ConcurrencyConflictError(
            "Concurrent update detected, nothing was changed",
            details={"reason": exc.__class__.__name__},
        ) from exc
    except Exception:
        db.session.rollback()
        raise
