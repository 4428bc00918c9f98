"""In-memory stand-ins for the profile persistence collaborator.

MemoryPersister mimics a transactional store: writes made inside
``transaction()`` are staged and only become visible in ``stored`` /
``completed`` when the block exits cleanly.  Failures can be injected per
method so tests can exercise the retry path.
"""

import asyncio
from contextlib import asynccontextmanager

from intake_flow.interfaces import ProfilePersister
from intake_flow.models.profile import ProfileRecord


class MemoryPersister(ProfilePersister):
    """Transactional in-memory persister with failure injection.

    Args:
        fail_persist: number of upcoming ``persist_profile`` calls that raise
        fail_mark: number of upcoming ``mark_flow_complete`` calls that raise
    """

    def __init__(self, fail_persist: int = 0, fail_mark: int = 0):
        self.fail_persist = fail_persist
        self.fail_mark = fail_mark
        self.calls: list[str] = []
        self.stored: list[ProfileRecord] = []
        self.completed: list[str] = []
        self.rollbacks = 0
        self._staged: list[tuple[str, ProfileRecord]] | None = None

    @asynccontextmanager
    async def transaction(self):
        self._staged = []
        try:
            yield
        except Exception:
            self.rollbacks += 1
            raise
        else:
            for op, record in self._staged:
                if op == "persist":
                    self.stored.append(record)
                else:
                    self.completed.append(record.flow_id)
        finally:
            self._staged = None

    def _stage(self, op: str, record: ProfileRecord) -> None:
        if self._staged is not None:
            self._staged.append((op, record))
        elif op == "persist":
            # Outside a transaction: write through
            self.stored.append(record)
        else:
            self.completed.append(record.flow_id)

    async def persist_profile(self, record: ProfileRecord) -> None:
        self.calls.append("persist_profile")
        if self.fail_persist > 0:
            self.fail_persist -= 1
            raise ConnectionError("storage unavailable")
        self._stage("persist", record)

    async def mark_flow_complete(self, record: ProfileRecord) -> None:
        self.calls.append("mark_flow_complete")
        if self.fail_mark > 0:
            self.fail_mark -= 1
            raise ConnectionError("storage unavailable")
        self._stage("mark", record)


class GatedPersister(MemoryPersister):
    """Blocks inside ``persist_profile`` until ``release`` is set.

    ``started`` is set once the call is in flight, so a test can act on the
    flow while it is locked.
    """

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def persist_profile(self, record: ProfileRecord) -> None:
        self.started.set()
        await self.release.wait()
        await super().persist_profile(record)
