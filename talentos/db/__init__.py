"""
Database module - engine, sessions, ORM models and the unit of work.
"""
from talentos.db.database import Base, SessionLocal, get_db, get_db_session, init_db, ping_database
from talentos.db.repository import GenericRepository, UnitOfWork

__all__ = [
    "Base",
    "SessionLocal",
    "get_db",
    "get_db_session",
    "init_db",
    "ping_database",
    "GenericRepository",
    "UnitOfWork",
]
