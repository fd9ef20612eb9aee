import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from inventorypro.config import Settings, get_settings


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_sqlite_memory(url) -> bool:
    sqlite_db = url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def _set_sqlite_pragmas(dbapi_connection, _connection_record, *, memory=False):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
        if not memory:
            try:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
            except sqlite3.DatabaseError:
                logger.warning("Unable to enable WAL journal mode for SQLite database.")
    finally:
        cursor.close()


def build_engine(database_url: str):
    db_url = make_url(database_url)
    is_sqlite = db_url.get_backend_name() == "sqlite"

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    memory = False
    if is_sqlite:
        memory = _is_sqlite_memory(db_url)
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if memory:
            engine_kwargs.update(poolclass=StaticPool)

    new_engine = create_engine(
        database_url,
        connect_args=connect_args,
        **engine_kwargs,
    )

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            _set_sqlite_pragmas(dbapi_connection, connection_record, memory=memory)

    return new_engine


engine = build_engine(app_settings.DATABASE_URL)
