"""Step models: the contract between the flow and its renderer.

These models define what the flow returns after every navigation call.
They are intentionally decoupled from the ORM models in ``intake_db`` so
that renderers never see storage internals.

Step types:
  - ScreenStep: show a catalog screen (with pre-filled answers)
  - BonusStep: show the extra "quick tour" step before completion
  - CompletedStep: profile saved, proceed to the next application stage

The ``StepResult`` union covers all three so callers can dispatch on ``type``.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

from intake_flow.models.profile import ProfileRecord
from intake_flow.models.screen import DemoFeature, Screen


class ScreenStep(BaseModel):
    """Flow step: render a catalog screen and wait for input."""

    type: Literal["screen"] = "screen"
    # Zero-based position and catalog length, for progress indicators
    index: int
    total: int
    kind_name: str
    screen: Screen
    # Current answers for this screen's keys, so a revisited screen pre-fills.
    # Multi-select collections are rendered as sorted lists.
    answers: dict[str, Any] = {}
    continue_label: str
    can_retreat: bool
    can_advance: bool
    # True when the last advance() was refused by the screen's gate
    blocked: bool = False


class BonusStep(BaseModel):
    """Flow step: the one-shot product tour before completion."""

    type: Literal["bonus"] = "bonus"
    index: int
    total: int
    title: str
    features: list[DemoFeature]
    continue_label: str
    can_retreat: bool = True


class CompletedStep(BaseModel):
    """Flow step: the profile was persisted and the flow is over."""

    type: Literal["completed"] = "completed"
    next_stage: str
    profile: ProfileRecord


# Callers can match on step.type to dispatch rendering logic.
StepResult = ScreenStep | BonusStep | CompletedStep


class FlowInfo(BaseModel):
    """Public view of a flow instance for API consumers."""

    flow_id: str
    user_id: str | None = None
    status: str
    nav_state: str
    cursor: int
    total: int
    created_at: datetime
