# Overview: Unit-of-work helpers shared by the write services.

from __future__ import annotations

import time

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking before mutating a catalog record.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Run one unit of work: either everything it added is committed, or the
    session is rolled back and the exception propagates.

    Only storage-level failures are retried: OperationalError (locked
    database, deadlock) and StaleDataError (version_id conflict). Domain
    errors (ValidationError, NotFoundError, ...) are raised on first sight.
    """
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError):
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
        except Exception:
            db.session.rollback()
            raise
