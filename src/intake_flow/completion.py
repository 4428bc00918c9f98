"""CompletionHandler: turns the answer store into a stored profile.

Completion is all-or-nothing from the flow's point of view: the profile and
the completion marker are written inside the persister's transaction, and
any failure surfaces as :class:`PersistenceError` with nothing signalled to
the application shell.  No retries happen here; the caller may simply call
``advance()`` again with the answers still intact.
"""

from __future__ import annotations

import logging

from intake_flow.answers import AnswerStore
from intake_flow.errors import PersistenceError
from intake_flow.interfaces import ProfilePersister
from intake_flow.models.profile import ProfileRecord

logger = logging.getLogger(__name__)


class CompletionHandler:
    """Compiles and persists profile records.

    Args:
        persister: the external storage collaborator
    """

    def __init__(self, persister: ProfilePersister) -> None:
        self._persister = persister

    @staticmethod
    def compile_profile(
        answers: AnswerStore, *, flow_id: str, user_id: str | None = None
    ) -> ProfileRecord:
        """Build the immutable profile record from the current answers."""
        return ProfileRecord(
            flow_id=flow_id,
            user_id=user_id,
            answers=answers.snapshot(),
        )

    async def complete(
        self, answers: AnswerStore, *, flow_id: str, user_id: str | None = None
    ) -> ProfileRecord:
        """Persist the profile and the completion marker as one unit.

        Returns the stored record.

        Raises:
            PersistenceError: if the persister raised or returned ``False``
                at any point; the original exception is chained as
                ``__cause__``.  Either way the transaction is rolled back.
        """
        record = self.compile_profile(answers, flow_id=flow_id, user_id=user_id)
        try:
            async with self._persister.transaction():
                if await self._persister.persist_profile(record) is False:
                    raise RuntimeError("persist_profile reported failure")
                if await self._persister.mark_flow_complete(record) is False:
                    raise RuntimeError("mark_flow_complete reported failure")
        except Exception as exc:
            logger.error("Profile persistence failed for flow %s: %s", flow_id, exc)
            raise PersistenceError(
                f"Could not store profile for flow {flow_id}"
            ) from exc

        logger.info(
            "Profile stored for flow %s (%d answers)", flow_id, len(record.answers)
        )
        return record
