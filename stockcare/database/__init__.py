from stockcare.database.base import Base
from stockcare.database.engine import create_db_engine, engine, init_db
from stockcare.database.session import SessionLocal, get_db, make_session_factory, session_scope

__all__ = [
    "Base",
    "SessionLocal",
    "create_db_engine",
    "engine",
    "get_db",
    "init_db",
    "make_session_factory",
    "session_scope",
]
