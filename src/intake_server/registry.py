"""FlowRegistry: in-memory home for live flow instances.

Flows are keyed by (user_id, flow_id).  Nothing here survives a restart;
cross-session recovery is the storage collaborator's business, not the
wizard's.  Completed flows stay registered so the client can re-read the
final step until it abandons the flow.

Flows idle for longer than ``ttl_seconds`` are purged on the next
``create()``.  When the cap is still reached, completed flows go first,
then the least recently touched in-progress flow.  A flow that is saving
its profile is never evicted.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from intake_flow.catalog import ScreenCatalog
from intake_flow.completion import CompletionHandler
from intake_flow.errors import FlowLockedError
from intake_flow.flow import FlowStatus, IntakeFlow

logger = logging.getLogger(__name__)

FlowKey = tuple[str, str]


class FlowRegistry:
    """Creates, looks up and drops :class:`IntakeFlow` instances.

    Args:
        catalog: shared screen catalog
        completion: completion handler shared by every flow
        next_stage: stage reported by completed flows
        max_active: cap on registered flows
        ttl_seconds: idle time after which a flow is purged; ``None`` keeps
            flows until they are evicted for room
        clock: monotonic time source, seconds
    """

    def __init__(
        self,
        catalog: ScreenCatalog,
        completion: CompletionHandler,
        *,
        next_stage: str,
        max_active: int = 10_000,
        ttl_seconds: Optional[float] = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._catalog = catalog
        self._completion = completion
        self._next_stage = next_stage
        self._max_active = max_active
        self._ttl = ttl_seconds
        self._clock = clock
        self._flows: dict[FlowKey, IntakeFlow] = {}
        self._touched: dict[FlowKey, float] = {}

    def __len__(self) -> int:
        return len(self._flows)

    def create(self, *, user_id: str, flow_id: str) -> IntakeFlow:
        """Register a fresh flow.

        Raises ValueError if the key is taken, or if the cap is reached and
        every registered flow is mid-completion.
        """
        key = (user_id, flow_id)
        self.purge_expired()
        if key in self._flows:
            raise ValueError(f"Flow already exists: user_id={user_id} flow_id={flow_id}")
        if len(self._flows) >= self._max_active:
            self._evict_completed()
        if len(self._flows) >= self._max_active:
            self._evict_least_recent()
        if len(self._flows) >= self._max_active:
            raise ValueError(f"Active flow limit reached ({self._max_active})")

        flow = IntakeFlow(
            self._catalog,
            self._completion,
            flow_id=flow_id,
            user_id=user_id,
            next_stage=self._next_stage,
        )
        self._flows[key] = flow
        self._touched[key] = self._clock()
        logger.info("Flow created: user_id=%s flow_id=%s", user_id, flow_id)
        return flow

    def get(self, *, user_id: str, flow_id: str) -> IntakeFlow:
        """Look up a flow and mark it as recently used; ValueError if unknown."""
        key = (user_id, flow_id)
        flow = self._flows.get(key)
        if flow is None:
            raise ValueError(f"Flow not found: user_id={user_id} flow_id={flow_id}")
        self._touched[key] = self._clock()
        return flow

    def discard(self, *, user_id: str, flow_id: str) -> None:
        """Abandon a flow; its answers are dropped with it.

        Raises FlowLockedError while the flow is saving its profile.
        """
        flow = self.get(user_id=user_id, flow_id=flow_id)
        if flow.status == FlowStatus.COMPLETING:
            raise FlowLockedError(
                f"Cannot discard: flow {flow_id} is locked while the profile is saved"
            )
        self._drop((user_id, flow_id))
        logger.info("Flow discarded: user_id=%s flow_id=%s", user_id, flow_id)

    def list_for_user(self, user_id: str) -> list[IntakeFlow]:
        return [f for (uid, _), f in self._flows.items() if uid == user_id]

    def purge_expired(self) -> int:
        """Drop flows idle for longer than the TTL; returns how many went."""
        if self._ttl is None:
            return 0
        cutoff = self._clock() - self._ttl
        stale = [
            k for k, f in self._flows.items()
            if self._touched[k] < cutoff and f.status != FlowStatus.COMPLETING
        ]
        for key in stale:
            self._drop(key)
        if stale:
            logger.info("Purged %d idle flows", len(stale))
        return len(stale)

    def _drop(self, key: FlowKey) -> None:
        del self._flows[key]
        self._touched.pop(key, None)

    def _evict_completed(self) -> None:
        done = [k for k, f in self._flows.items() if f.status == FlowStatus.COMPLETED]
        for key in done:
            self._drop(key)
        if done:
            logger.info("Evicted %d completed flows", len(done))

    def _evict_least_recent(self) -> None:
        candidates = [
            k for k, f in self._flows.items() if f.status != FlowStatus.COMPLETING
        ]
        if not candidates:
            return
        victim = min(candidates, key=self._touched.__getitem__)
        self._drop(victim)
        logger.warning(
            "Flow limit reached, evicted idle flow: user_id=%s flow_id=%s", *victim
        )
