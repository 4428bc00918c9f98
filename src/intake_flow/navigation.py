"""NavigationController: cursor and sub-state for one flow instance.

The controller is a small state machine over the catalog:

    normal ──advance at terminal (extra step)──► showing_bonus
      ▲                                              │
      └────────────────── retreat ───────────────────┘

    normal / showing_bonus ──mark_completed()──► completed

Linear progression moves the cursor; the bonus screen is a sub-state of
the terminal position, not an extra catalog entry.  ``advance()`` never
completes the flow on its own: it returns ``NavOutcome.COMPLETE`` and the
owner calls :meth:`mark_completed` once the profile is safely stored.

The controller assumes the caller already checked the screen gate.
"""

from __future__ import annotations

import enum
import logging

from intake_flow.catalog import ScreenCatalog
from intake_flow.errors import FlowStateError
from intake_flow.models.screen import Screen

logger = logging.getLogger(__name__)


class NavState(str, enum.Enum):
    """Sub-state of the navigation position."""

    NORMAL = "normal"
    SHOWING_BONUS = "showing_bonus"
    COMPLETED = "completed"


class NavOutcome(str, enum.Enum):
    """What an ``advance()``/``retreat()`` call did."""

    MOVED = "moved"
    BONUS_SHOWN = "bonus_shown"
    BONUS_CLOSED = "bonus_closed"
    COMPLETE = "complete"
    NOOP = "noop"


class NavigationController:
    """Tracks the cursor and bonus sub-state over a :class:`ScreenCatalog`."""

    def __init__(self, catalog: ScreenCatalog) -> None:
        self._catalog = catalog
        self._cursor = 0
        self._state = NavState.NORMAL

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def state(self) -> NavState:
        return self._state

    @property
    def current(self) -> Screen:
        return self._catalog[self._cursor]

    @property
    def at_terminal(self) -> bool:
        return self._cursor == self._catalog.last_index

    @property
    def can_retreat(self) -> bool:
        if self._state == NavState.SHOWING_BONUS:
            return True
        return self._state == NavState.NORMAL and self._cursor > 0

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self) -> NavOutcome:
        """Move forward one step.

        At the terminal screen the first call shows the bonus screen when
        the terminal carries an extra step; the next call (or the first,
        when there is no extra step) returns ``COMPLETE`` without changing
        state.  Elsewhere the cursor moves up by one, clamped at the end.
        """
        self._ensure_open("advance")

        if self.at_terminal:
            if self.current.has_extra_step and self._state == NavState.NORMAL:
                self._state = NavState.SHOWING_BONUS
                logger.debug("Showing bonus step on screen %s", self.current.id)
                return NavOutcome.BONUS_SHOWN
            return NavOutcome.COMPLETE

        self._cursor = min(self._cursor + 1, self._catalog.last_index)
        logger.debug("Advanced to cursor %d (screen %s)", self._cursor, self.current.id)
        return NavOutcome.MOVED

    def retreat(self) -> NavOutcome:
        """Move back one step; leaving the bonus screen keeps the cursor."""
        self._ensure_open("retreat")

        if self._state == NavState.SHOWING_BONUS:
            # Cleared so the next advance re-evaluates the bonus branch
            self._state = NavState.NORMAL
            logger.debug("Closed bonus step, back on screen %s", self.current.id)
            return NavOutcome.BONUS_CLOSED

        if self._cursor == 0:
            return NavOutcome.NOOP

        self._cursor -= 1
        logger.debug("Retreated to cursor %d (screen %s)", self._cursor, self.current.id)
        return NavOutcome.MOVED

    def mark_completed(self) -> None:
        """Enter the terminal ``completed`` state after a successful hand-off."""
        self._ensure_open("complete")
        if not self.at_terminal:
            raise FlowStateError(
                f"Cannot complete: cursor {self._cursor} is not the terminal screen"
            )
        self._state = NavState.COMPLETED

    def _ensure_open(self, action: str) -> None:
        if self._state == NavState.COMPLETED:
            raise FlowStateError(f"Cannot {action}: flow is already completed")
