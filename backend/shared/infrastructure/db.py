"""
SQLAlchemy engine and sessions.

PostgreSQL (psycopg) in deployments, SQLite for tests and quick local runs.
Services own their commits; sessions handed out here never commit on their
own.
"""

import os
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shared.config.settings import DATABASE_URL
from shared.config.logging import get_logger

logger = get_logger(__name__)


def build_engine(url: str) -> Engine:
    """
    Engine for ``url``.

    Server databases get a pre-pinged pool sized from the CPU count
    (2 * cores + 1, at most 20). SQLite connections may cross threads because
    the notifier and the test client run on worker threads.
    """
    options: dict[str, Any]
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
    else:
        options = {
            "pool_pre_ping": True,
            "pool_size": min((os.cpu_count() or 4) * 2 + 1, 20),
            "max_overflow": 15,
            "pool_timeout": 30,
            "pool_recycle": 1800,
            "connect_args": {"connect_timeout": 10},
        }
    return create_engine(url, **options)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session (FastAPI dependency)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Iterator[Session]:
    """Session for code running outside a request: startup, CLI."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """Commit, or roll back and re-raise the SQLAlchemy error."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error("Commit failed, transaction rolled back", exc_info=True)
        raise
