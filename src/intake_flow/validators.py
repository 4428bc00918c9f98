"""Forward-progress gates, one per screen kind.

The flow asks :func:`can_advance` before handing ``advance()`` to the
navigation controller.  Only multi-select screens actually gate:

  - informational / motivational / conclusion: always pass
  - form: always pass (fields are advisory, never hard-required)
  - single_choice / frequency: always pass (missing picks are tolerated)
  - multi_select: at least ``min_selections`` options toggled on
"""

from __future__ import annotations

import logging
from typing import Callable

from intake_flow.answers import AnswerStore
from intake_flow.models.screen import MultiSelectScreen, Screen

logger = logging.getLogger(__name__)


def _always(screen: Screen, answers: AnswerStore) -> bool:
    return True


def _multi_select_gate(screen: MultiSelectScreen, answers: AnswerStore) -> bool:
    return len(answers.selection(screen.collection_key)) >= screen.min_selections


_GATES: dict[str, Callable[..., bool]] = {
    "informational": _always,
    "motivational": _always,
    "form": _always,
    "single_choice": _always,
    "frequency": _always,
    "multi_select": _multi_select_gate,
    "conclusion": _always,
}


def can_advance(screen: Screen, answers: AnswerStore) -> bool:
    """Return True if the user may move forward from ``screen``."""
    gate = _GATES.get(screen.kind)
    if gate is None:
        # Unknown kinds cannot come out of the catalog's discriminated union
        raise ValueError(f"No gate registered for screen kind: {screen.kind}")
    allowed = gate(screen, answers)
    if not allowed:
        logger.debug("Gate closed on screen %s (%s)", screen.id, screen.kind)
    return allowed
