"""IntakeFlow: one user's pass through the onboarding wizard.

A flow instance owns its answer store and navigation position; nothing is
shared between instances except the read-only catalog.  Callers construct a
flow, feed it input events, and call ``advance()`` / ``retreat()``; every
navigation call returns the step to render next.

    catalog = ScreenCatalog.from_yaml()
    flow = IntakeFlow(catalog, CompletionHandler(persister), user_id="u1")

    flow.set_field("fullName", "Ada")
    step = await flow.advance()          # ScreenStep for the next screen
    ...
    step = await flow.advance()          # BonusStep (quick tour)
    step = await flow.advance()          # CompletedStep, profile stored

Event handling is synchronous.  ``advance()`` is a coroutine only because
the final transition awaits the persistence collaborator; while that call
is in flight the flow is locked and every other operation raises
:class:`FlowLockedError`.
"""

from __future__ import annotations

import enum
import inspect
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Union

from intake_flow import validators
from intake_flow.answers import AnswerStore
from intake_flow.catalog import ScreenCatalog
from intake_flow.completion import CompletionHandler
from intake_flow.constants import DEFAULT_CONTINUE_LABEL, KIND_NAMES, NEXT_STAGE
from intake_flow.errors import FlowLockedError, FlowStateError
from intake_flow.models.profile import ProfileRecord
from intake_flow.models.screen import Screen
from intake_flow.models.step import (
    BonusStep,
    CompletedStep,
    FlowInfo,
    ScreenStep,
    StepResult,
)
from intake_flow.navigation import NavigationController, NavOutcome, NavState

logger = logging.getLogger(__name__)

# Hook fired exactly once after the profile is stored; may be sync or async.
CompletionCallback = Callable[[ProfileRecord], Union[Awaitable[None], None]]


class FlowStatus(str, enum.Enum):
    """Lifecycle of a flow instance.

    Transitions:
        in_progress -> completing  (terminal advance, awaiting persistence)
        completing -> in_progress  (persistence failed, retry allowed)
        completing -> completed    (profile stored, hand-off signalled)
    """

    IN_PROGRESS = "in_progress"
    COMPLETING = "completing"
    COMPLETED = "completed"


class IntakeFlow:
    """Drives one onboarding session over a :class:`ScreenCatalog`.

    Args:
        catalog: validated screen catalog (shared, read-only)
        completion: handler that stores the compiled profile
        flow_id: identifier for this instance; generated when omitted
        user_id: optional owner, copied into the profile record
        next_stage: application stage named in the ``CompletedStep``
        on_complete: optional hook called with the stored profile; exceptions
            it raises are logged and do not fail the advance
    """

    def __init__(
        self,
        catalog: ScreenCatalog,
        completion: CompletionHandler,
        *,
        flow_id: str | None = None,
        user_id: str | None = None,
        next_stage: str = NEXT_STAGE,
        on_complete: Optional[CompletionCallback] = None,
    ) -> None:
        self.flow_id = flow_id or uuid.uuid4().hex
        self.user_id = user_id
        self.created_at = datetime.now(timezone.utc)
        self._catalog = catalog
        self._completion = completion
        self._next_stage = next_stage
        self._on_complete = on_complete

        self._answers = AnswerStore()
        self._nav = NavigationController(catalog)
        self._locked = False
        self._blocked = False
        self._profile: ProfileRecord | None = None

    # ==================================================================
    # State
    # ==================================================================

    @property
    def status(self) -> FlowStatus:
        if self._nav.state == NavState.COMPLETED:
            return FlowStatus.COMPLETED
        if self._locked:
            return FlowStatus.COMPLETING
        return FlowStatus.IN_PROGRESS

    @property
    def cursor(self) -> int:
        return self._nav.cursor

    @property
    def nav_state(self) -> NavState:
        return self._nav.state

    @property
    def current_screen(self) -> Screen:
        return self._nav.current

    @property
    def answers(self) -> dict[str, Any]:
        """Plain-value copy of everything collected so far."""
        return self._answers.snapshot()

    @property
    def profile(self) -> ProfileRecord | None:
        """The stored profile once the flow has completed."""
        return self._profile

    def info(self) -> FlowInfo:
        return FlowInfo(
            flow_id=self.flow_id,
            user_id=self.user_id,
            status=self.status.value,
            nav_state=self._nav.state.value,
            cursor=self._nav.cursor,
            total=len(self._catalog),
            created_at=self.created_at,
        )

    # ==================================================================
    # Input events
    # ==================================================================

    def set_field(self, name: str, value: Union[str, int, float]) -> None:
        """Form field edit."""
        self._ensure_mutable("edit a field")
        self._answers.set_field(name, value)
        self._blocked = False

    def toggle_option(self, collection_key: str, option: str) -> None:
        """Multi-select option toggle."""
        self._ensure_mutable("toggle an option")
        self._answers.toggle_option(collection_key, option)
        self._blocked = False

    def select_single(self, question_key: str, option: str) -> None:
        """Single-choice option pick."""
        self._ensure_mutable("select an option")
        self._answers.select_single(question_key, option)
        self._blocked = False

    def select_frequency(self, option: int) -> None:
        """Training frequency pick."""
        self._ensure_mutable("select a frequency")
        self._answers.select_frequency(option)
        self._blocked = False

    # ==================================================================
    # Navigation
    # ==================================================================

    def can_advance(self) -> bool:
        """True if ``advance()`` would do more than re-show the screen."""
        state = self._nav.state
        if state == NavState.COMPLETED:
            return False
        if state == NavState.SHOWING_BONUS:
            return True
        return validators.can_advance(self._nav.current, self._answers)

    async def advance(self) -> StepResult:
        """Move forward, or complete the flow from the terminal position.

        A closed gate leaves the cursor and answers untouched and returns
        the same screen with ``blocked=True``.

        Raises:
            FlowLockedError: a completion call is already in flight.
            FlowStateError: the flow has already completed.
            PersistenceError: storing the profile failed; state is unchanged
                and the call may be retried.
        """
        self._ensure_unlocked("advance")
        if self._nav.state == NavState.COMPLETED:
            raise FlowStateError("Cannot advance: flow is already completed")

        if not self.can_advance():
            self._blocked = True
            logger.debug(
                "Advance blocked on screen %s for flow %s",
                self._nav.current.id, self.flow_id,
            )
            return self.current_step()

        self._blocked = False
        outcome = self._nav.advance()
        if outcome == NavOutcome.COMPLETE:
            await self._complete()
        return self.current_step()

    def retreat(self) -> StepResult:
        """Move back one screen (or close the bonus step); answers are kept."""
        self._ensure_unlocked("retreat")
        self._nav.retreat()
        self._blocked = False
        return self.current_step()

    async def _complete(self) -> None:
        self._locked = True
        try:
            record = await self._completion.complete(
                self._answers, flow_id=self.flow_id, user_id=self.user_id,
            )
        finally:
            self._locked = False

        self._profile = record
        self._nav.mark_completed()
        logger.info("Flow %s completed, next stage: %s", self.flow_id, self._next_stage)

        if self._on_complete is None:
            return
        # Profile is stored at this point; hook errors are logged, not raised
        try:
            result = self._on_complete(record)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("on_complete hook failed for flow %s", self.flow_id)

    # ==================================================================
    # Step rendering
    # ==================================================================

    def current_step(self) -> StepResult:
        """Return what the renderer should show right now (read-only)."""
        state = self._nav.state
        if state == NavState.COMPLETED:
            return CompletedStep(next_stage=self._next_stage, profile=self._profile)

        screen = self._nav.current
        total = len(self._catalog)

        if state == NavState.SHOWING_BONUS:
            extra = screen.extra_step
            return BonusStep(
                index=self._nav.cursor,
                total=total,
                title=extra.title,
                features=list(extra.features),
                continue_label=extra.button_text,
            )

        return ScreenStep(
            index=self._nav.cursor,
            total=total,
            kind_name=KIND_NAMES.get(screen.kind, screen.kind),
            screen=screen,
            answers=self._screen_answers(screen),
            continue_label=screen.button_text or DEFAULT_CONTINUE_LABEL,
            can_retreat=self._nav.can_retreat,
            can_advance=validators.can_advance(screen, self._answers),
            blocked=self._blocked,
        )

    def _screen_answers(self, screen: Screen) -> dict[str, Any]:
        values = self._answers.snapshot(screen.answer_keys)
        return {
            k: sorted(v) if isinstance(v, frozenset) else v
            for k, v in values.items()
        }

    # ==================================================================
    # Guards
    # ==================================================================

    def _ensure_unlocked(self, action: str) -> None:
        if self._locked:
            raise FlowLockedError(
                f"Cannot {action}: flow {self.flow_id} is locked while the profile is saved"
            )

    def _ensure_mutable(self, action: str) -> None:
        self._ensure_unlocked(action)
        if self._nav.state == NavState.COMPLETED:
            raise FlowStateError(f"Cannot {action}: flow {self.flow_id} is completed")
