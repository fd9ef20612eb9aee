import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from inventorypro.database.engine import engine

logger = logging.getLogger(__name__)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(db: Session | None = None) -> Iterator[Session]:
    """Yield ``db`` untouched, or a fresh session that is closed afterwards.

    Services that can run outside a request (CLI scripts, the alert job)
    accept an optional session and open their own through this.
    """
    if db is not None:
        yield db
        return
    owned = SessionLocal()
    try:
        yield owned
    finally:
        owned.close()


def store_is_reachable(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Store health check failed: %s", exc)
        return False
    return True


__all__ = ["SessionLocal", "get_db", "session_scope", "store_is_reachable"]
