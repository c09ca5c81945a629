"""
Persistence layer: engine, session factory and request dependency
"""
from airops.db.database import Base, engine, async_session_maker, get_db, session_scope, init_db, close_db

__all__ = ["Base", "engine", "async_session_maker", "get_db", "session_scope", "init_db", "close_db"]
