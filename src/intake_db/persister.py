"""DatabaseProfilePersister: PostgreSQL-backed ProfilePersister.

Both writes of a completion share one ``AsyncSession``: ``transaction()``
opens it, ``persist_profile`` and ``mark_flow_complete`` flush into it, and
the block commits on normal exit or rolls back on any error.  The session
is tracked in a ``ContextVar`` so concurrent completions on one persister
(e.g. several requests in the HTTP shell) never see each other's session.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from intake_flow.interfaces import ProfilePersister
from intake_flow.models.profile import ProfileRecord

from intake_db.engine import get_session_factory
from intake_db.repository import ProfileRepository

logger = logging.getLogger(__name__)

_current_session: ContextVar[AsyncSession | None] = ContextVar(
    "intake_db_current_session", default=None
)


class DatabaseProfilePersister(ProfilePersister):
    """Stores profiles in ``intake_profiles``.

    Args:
        session_factory: factory for ``AsyncSession``; defaults to the
            process-wide factory from :mod:`intake_db.engine`, resolved
            lazily on first transaction
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        self._session_factory = session_factory
        self._repo = ProfileRepository()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        factory = self._session_factory or get_session_factory()
        async with factory() as db:
            token = _current_session.set(db)
            try:
                yield
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            finally:
                _current_session.reset(token)

    def _db(self) -> AsyncSession:
        db = _current_session.get()
        if db is None:
            raise RuntimeError(
                "DatabaseProfilePersister used outside of transaction()"
            )
        return db

    async def persist_profile(self, record: ProfileRecord) -> None:
        payload = record.model_dump(mode="json")
        await self._repo.save_profile(
            self._db(),
            user_id=record.user_id,
            flow_id=record.flow_id,
            answers=payload["answers"],
            compiled_at=record.compiled_at,
        )
        logger.debug("Profile row staged for flow %s", record.flow_id)

    async def mark_flow_complete(self, record: ProfileRecord) -> None:
        db = self._db()
        row = await self._repo.get_by_user_and_flow(db, record.user_id, record.flow_id)
        if row is None:
            raise ValueError(f"Profile not found: flow_id={record.flow_id}")
        await self._repo.mark_completed(db, row)
