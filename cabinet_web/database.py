"""Database utilities for the cabinet web API."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """Return an engine for ``database_url``.

    SQLite connections are shared with the worker threads used for blocking
    writes, so the same-thread check is disabled for them.
    """

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=False, connect_args=connect_args)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    with Session(engine) as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_db(engine: Engine) -> None:
    """Initialise database tables."""

    # Import models lazily to avoid circular imports during module initialisation.
    from . import models  # noqa: F401  # pylint: disable=unused-import

    logger.info("Ensuring database tables are created")
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables confirmed")
