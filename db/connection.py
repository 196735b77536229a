"""Engine and session handling for the payment ledger."""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from config import get_settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None


def _sqlite_pragmas(dbapi_conn, connection_record) -> None:
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.execute("PRAGMA busy_timeout=30000")
    cur.close()


def get_engine() -> Engine:
    """Build the ledger engine on first use; later calls reuse it."""
    global _engine

    if _engine is None:
        db = get_settings().database
        if db.use_postgres:
            _engine = create_engine(db.url, pool_size=db.pool_size, pool_pre_ping=True)
        else:
            path: Path = db.sqlite_file
            path.parent.mkdir(parents=True, exist_ok=True)
            _engine = create_engine(db.url)
            event.listen(_engine, "connect", _sqlite_pragmas)
        logger.debug("Ledger: %s", db.db_info_for_logging())

    return _engine


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Read/write session; commits on success, rolls back on error."""
    session = Session(bind=get_engine(), autoflush=False, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose the cached engine so the next call re-reads settings."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
