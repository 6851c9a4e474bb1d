import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from talentos.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions/threads
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


engine = create_engine(
    settings.sqlalchemy_url,
    echo=settings.debug,  # Log SQL queries in debug mode
    **_engine_kwargs(settings.sqlalchemy_url)
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.query(Employee).count()
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db():
    """
    Dependency for FastAPI route injection.
    Usage:
        @app.get("/employees")
        def list_employees(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables (no-op for the ones that already exist)."""
    # Import models so they register on Base.metadata
    from talentos.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def ping_database() -> bool:
    """
    Check if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            row = db.execute(text("SELECT 1")).fetchone()
            return row[0] == 1
    except Exception:
        logger.exception("Database connection failed")
        return False
