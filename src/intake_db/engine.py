"""Async SQLAlchemy engine and session factory for profile storage.

Nothing connects at import time: the engine and its session factory are
built on the first ``get_engine()`` / ``get_session_factory()`` call and
then shared by every persister in the process.  ``dispose_engine()`` closes
the pool; the next call builds a fresh one.

Pool sizing and SQL echo come from the environment:

    PG_POOL_SIZE      persistent connections (default 5)
    PG_MAX_OVERFLOW   burst connections above the pool size (default 10)
    PG_POOL_RECYCLE   seconds before a pooled connection is replaced (default 1800)
    PG_ECHO           "1" / "true" to log every statement
"""

import logging
import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from intake_db.config import get_async_url

logger = logging.getLogger(__name__)

_POOL_SIZE = int(os.getenv("PG_POOL_SIZE", "5"))
_MAX_OVERFLOW = int(os.getenv("PG_MAX_OVERFLOW", "10"))
_POOL_RECYCLE = int(os.getenv("PG_POOL_RECYCLE", "1800"))
_ECHO = os.getenv("PG_ECHO", "").lower() in ("1", "true", "yes")

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Shared async engine; built on first use."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            get_async_url(),
            echo=_ECHO,
            pool_size=_POOL_SIZE,
            max_overflow=_MAX_OVERFLOW,
            pool_recycle=_POOL_RECYCLE,
            pool_pre_ping=True,
        )
        logger.info(
            "Profile store engine created (pool_size=%d, max_overflow=%d)",
            _POOL_SIZE, _MAX_OVERFLOW,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to :func:`get_engine`.

    ``expire_on_commit`` is off so a row returned by the repository can
    still be read after the persister's transaction commits.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections; safe to call when no engine was built."""
    global _engine, _session_factory
    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Profile store engine disposed")
