"""Input events accepted over HTTP and their checks against the current screen.

The flow itself never rejects an input; this module is the presentation
boundary that makes sure an event actually belongs to the screen the user
is looking at before it reaches the answer store.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from intake_flow.flow import IntakeFlow
from intake_flow.models.screen import (
    FormScreen,
    FrequencyScreen,
    MultiSelectScreen,
    SingleChoiceScreen,
)
from intake_flow.navigation import NavState


class FieldEvent(BaseModel):
    """Form field edit."""

    type: Literal["field"] = "field"
    name: str
    value: Union[str, int, float]


class ToggleEvent(BaseModel):
    """Multi-select toggle; ``collection`` defaults to the screen's key."""

    type: Literal["toggle"] = "toggle"
    option: str
    collection: Optional[str] = None


class SelectEvent(BaseModel):
    """Single-choice pick for one question."""

    type: Literal["select"] = "select"
    question: str
    option: str


class FrequencyEvent(BaseModel):
    """Weekly training frequency pick."""

    type: Literal["frequency"] = "frequency"
    option: int


InputEvent = Annotated[
    Union[FieldEvent, ToggleEvent, SelectEvent, FrequencyEvent],
    Field(discriminator="type"),
]


def apply_event(flow: IntakeFlow, event: InputEvent) -> None:
    """Validate ``event`` against the flow's current screen, then apply it.

    Raises:
        ValueError: the event does not fit the screen being shown.
    """
    if flow.nav_state != NavState.NORMAL:
        raise ValueError(f"No inputs accepted in state '{flow.nav_state.value}'")
    screen = flow.current_screen

    if isinstance(event, FieldEvent):
        if not isinstance(screen, FormScreen) or event.name not in screen.answer_keys:
            raise ValueError(f"Field '{event.name}' is not on screen {screen.id}")
        flow.set_field(event.name, event.value)

    elif isinstance(event, ToggleEvent):
        if not isinstance(screen, MultiSelectScreen):
            raise ValueError(f"Screen {screen.id} has no multi-select options")
        collection = event.collection or screen.collection_key
        if collection != screen.collection_key or event.option not in screen.options:
            raise ValueError(f"Option '{event.option}' is not offered on screen {screen.id}")
        flow.toggle_option(collection, event.option)

    elif isinstance(event, SelectEvent):
        if not isinstance(screen, SingleChoiceScreen):
            raise ValueError(f"Screen {screen.id} has no single-choice questions")
        try:
            options = screen.options_for(event.question)
        except KeyError:
            raise ValueError(f"Question '{event.question}' is not on screen {screen.id}")
        if event.option not in options:
            raise ValueError(f"Option '{event.option}' is not offered for '{event.question}'")
        flow.select_single(event.question, event.option)

    elif isinstance(event, FrequencyEvent):
        if not isinstance(screen, FrequencyScreen) or event.option not in screen.options:
            raise ValueError(f"Frequency {event.option} is not offered on screen {screen.id}")
        flow.select_frequency(event.option)
