from inventorypro.database.base import Base
from inventorypro.database.engine import build_engine, engine
from inventorypro.database.session import SessionLocal, session_scope, store_is_reachable

__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "engine",
    "session_scope",
    "store_is_reachable",
]
