"""Abstract interface for the profile persistence collaborator.

The SDK ships no storage of its own.  ``intake_db`` provides a PostgreSQL
implementation; tests and scripts use in-memory fakes.

Typical integration flow::

    persister: ProfilePersister = DatabaseProfilePersister()
    handler = CompletionHandler(persister)
    flow = IntakeFlow(catalog, handler, user_id="u1")
    # ... drive the flow; the final advance() calls, in one transaction:
    #     await persister.persist_profile(record)
    #     await persister.mark_flow_complete(record)
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from intake_flow.models.profile import ProfileRecord


class ProfilePersister(ABC):
    """Interface for storing a completed intake profile.

    Both write methods return ``None`` (or ``True``) on success.  Failure
    is signalled by raising or by returning ``False``; the completion
    handler rolls the transaction back and reports either as
    :class:`~intake_flow.errors.PersistenceError`.
    """

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Group ``persist_profile`` and ``mark_flow_complete`` atomically.

        The default groups nothing.  Implementations backed by a
        transactional store should commit on normal exit and roll back
        when the block raises.
        """
        yield

    @abstractmethod
    async def persist_profile(self, record: ProfileRecord) -> Optional[bool]:
        """Store the compiled profile record.

        Parameters
        ----------
        record:
            Immutable profile produced by the completion handler.  The
            collaborator may serialise it however it wishes
            (``record.model_dump(mode="json")`` gives a JSON-safe dict).

        Returns
        -------
        ``None`` or ``True`` once stored; ``False`` if the write was refused.
        """
        ...

    @abstractmethod
    async def mark_flow_complete(self, record: ProfileRecord) -> Optional[bool]:
        """Record that onboarding finished for ``record.flow_id``.

        Returning ``False`` counts as a failure, the same as raising.
        """
        ...
