import logging
from contextlib import contextmanager

from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine

from .config import DATABASE_URL

# Registers users/tasks on SQLModel.metadata before create_all runs.
from .models import Task, User  # noqa: F401

logger = logging.getLogger(__name__)


def build_engine(url: str = DATABASE_URL):
    """Engine for ``url``. SQLite is shared across the server's worker threads;
    anything else is treated as a remote Postgres and not pooled locally."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, poolclass=NullPool)


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency: one session per request, closed after the response."""
    with session_scope() as db:
        yield db


@contextmanager
def session_scope():
    """Session for startup hooks and scripts such as ``taskly.seed``."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_tables(bind=None) -> None:
    """Create the users and tasks tables if they are missing."""
    bind = bind or engine
    SQLModel.metadata.create_all(bind=bind)
    logger.debug("Tables present on %s: %s", bind.url, ", ".join(inspect(bind).get_table_names()))
