"""
This is the canonical Unit of Work boundary for RadioCore. All transactional changes must go through this.

Entity state is owned by the external repository; the only writes RadioCore
makes are the auto-created default playlist, streamer deactivation windows
and live/current-streamer flags.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator

from sqlalchemy.orm import Session

from . import db as db_module


@contextlib.contextmanager
def session() -> Generator[Session, None, None]:
    """
    Database session context manager for CLI operations and batch jobs.

    Provides Unit of Work semantics:
    - Opens a DB session
    - Yields it for use
    - On success: commits the transaction
    - On exception: rolls back and re-raises the exception
    - Always closes the session

    Usage:
        with session() as db:
            write_station_config(db, station_id=1)
    """
    db = db_module.get_sessionmaker()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
