from contextlib import contextmanager
from functools import lru_cache
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from supabase import create_client, Client

from quizdrill.config import settings
from quizdrill.errors import StorageFailure


def _connect_args(url: str) -> dict:
    # SQLite connections are shared with FastAPI's threadpool
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url), pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def get_db():
    """FastAPI dependency yielding one SQLAlchemy session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables"""
    import quizdrill.models  # noqa: F401  registers the mappers on Base
    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def storage_errors(action: str):
    """Convert driver errors into StorageFailure, logging the real cause"""
    try:
        yield
    except SQLAlchemyError as e:
        logging.error(f"{action} error: {e}")
        raise StorageFailure() from e


@contextmanager
def transaction(db, action: str):
    """All-or-nothing unit of work: commit on success, roll back on any error"""
    try:
        with storage_errors(action):
            yield db
            db.commit()
    except Exception:
        db.rollback()
        raise


# Supabase Client Setup
@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Get Supabase client for bearer-token identity resolution"""
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key.get_secret_value()
    )
