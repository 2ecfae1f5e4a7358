"""SQLAlchemy engine and session helpers.

The DSN comes from `records_api.config`; in-memory SQLite is the default so
tests and local runs need no server. Only connection lifecycle lives here.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from records_api.config import load_config

logger = logging.getLogger(__name__)

# Module-level cached Engine shared by all sessions
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def get_engine(url: str | None = None) -> Engine:
    """Return a cached Engine for `url` (or the configured DSN).

    In-memory SQLite uses a StaticPool so every session sees the same
    database.
    """
    global _ENGINE, _ENGINE_URL
    resolved_url = url or load_config().database.dsn

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        kwargs: dict = {"pool_pre_ping": True}
        if resolved_url.startswith("sqlite") and ":memory:" in resolved_url:
            kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url
        logger.info("db.engine.created", extra={"dialect": _ENGINE.dialect.name})

    return _ENGINE


def get_sessionmaker(engine: Engine | None = None) -> sessionmaker:
    engine = engine or get_engine()
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(engine: Engine | None = None) -> Generator[Session, None, None]:
    """Yield a session committed on success and rolled back on error."""
    session = get_sessionmaker(engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.error("DB session error; transaction rolled back", exc_info=True)
        raise
    finally:
        session.close()
