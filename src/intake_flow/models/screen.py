"""Screen descriptor models for the onboarding sequence.

Each screen kind maps to a specific UI component and answer handling logic:

  Passive (no input, always advance):
    - informational: welcome / explanatory copy
    - motivational: encouragement between question blocks
    - conclusion: final screen, optionally carrying an extra "bonus" step

  Input-bearing:
    - form: ordered free-text / number / date fields, keyed by field name
    - single_choice: one or more questions, one option picked per question
    - multi_select: flat option list with toggle semantics
    - frequency: pick one of a few integer training frequencies

The discriminated ``Screen`` union uses ``kind`` as its discriminator so
Pydantic can deserialise YAML dicts directly into the correct type.  All
descriptors are frozen: a loaded catalog never changes at runtime.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from intake_flow.constants import FREQUENCY_KEY, GOALS_KEY


# --- Base screen type ---

class BaseScreen(BaseModel):
    """Fields shared by all screen kinds."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: Optional[str] = None
    # Overrides the default "Continue" label on the forward button
    button_text: Optional[str] = None

    @property
    def answer_keys(self) -> List[str]:
        """Answer store keys this screen writes to (empty for passive screens)."""
        return []

    @property
    def has_extra_step(self) -> bool:
        return False


# --- Shared field/question models ---

class FieldSpec(BaseModel):
    """A single input field on a form screen."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["text", "textarea", "number", "date"] = "text"
    label: str
    placeholder: Optional[str] = None
    # Advisory only; the form gate never blocks on it
    required: bool = False


class ChoiceQuestion(BaseModel):
    """A question with its options; the question text doubles as the answer key."""

    model_config = ConfigDict(frozen=True)

    question: str
    options: List[str]

    @model_validator(mode="after")
    def _chk(self):
        if not self.options:
            raise ValueError(f"question '{self.question}' has no options")
        return self


class DemoFeature(BaseModel):
    """One entry of the product tour shown on the bonus screen."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str


class ExtraStep(BaseModel):
    """Bonus screen inserted once before completion."""

    model_config = ConfigDict(frozen=True)

    title: str = "Quick Tour"
    features: List[DemoFeature] = []
    button_text: str = "Get Started"


# --- Screen kinds ---

class InfoScreen(BaseScreen):
    """Informational or motivational copy with no inputs."""

    kind: Literal["informational", "motivational"] = "informational"


class FormScreen(BaseScreen):
    """Ordered input fields; each field writes its own answer key."""

    kind: Literal["form"] = "form"
    fields: List[FieldSpec]
    # Renders an upload control the engine never reads
    has_upload: bool = False

    @model_validator(mode="after")
    def _chk(self):
        if not self.fields:
            raise ValueError(f"form screen {self.id} has no fields")
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"form screen {self.id} has duplicate field names")
        return self

    @property
    def answer_keys(self) -> List[str]:
        return [f.name for f in self.fields]


class SingleChoiceScreen(BaseScreen):
    """One option per question; answers are keyed by question text."""

    kind: Literal["single_choice"] = "single_choice"
    questions: List[ChoiceQuestion]

    @model_validator(mode="after")
    def _chk(self):
        if not self.questions:
            raise ValueError(f"single_choice screen {self.id} has no questions")
        return self

    @property
    def answer_keys(self) -> List[str]:
        return [q.question for q in self.questions]

    def options_for(self, question: str) -> List[str]:
        """Options offered for ``question``; raises KeyError if unknown."""
        for q in self.questions:
            if q.question == question:
                return list(q.options)
        raise KeyError(question)


class MultiSelectScreen(BaseScreen):
    """Flat option list with toggle semantics (e.g. fitness goals)."""

    kind: Literal["multi_select"] = "multi_select"
    question: str
    options: List[str]
    collection_key: str = GOALS_KEY
    # Forward progress needs at least this many selections
    min_selections: int = Field(default=1, ge=0)

    @model_validator(mode="after")
    def _chk(self):
        if not self.options:
            raise ValueError(f"multi_select screen {self.id} has no options")
        if self.min_selections > len(self.options):
            raise ValueError(
                f"multi_select screen {self.id}: min_selections "
                f"({self.min_selections}) exceeds option count ({len(self.options)})"
            )
        return self

    @property
    def answer_keys(self) -> List[str]:
        return [self.collection_key]


class FrequencyScreen(BaseScreen):
    """Pick one of a fixed set of integer weekly frequencies."""

    kind: Literal["frequency"] = "frequency"
    question: str
    options: List[int]

    @model_validator(mode="after")
    def _chk(self):
        if not self.options:
            raise ValueError(f"frequency screen {self.id} has no options")
        return self

    @property
    def answer_keys(self) -> List[str]:
        return [FREQUENCY_KEY]


class ConclusionScreen(BaseScreen):
    """Final screen; ``extra_step`` inserts the bonus screen before completion."""

    kind: Literal["conclusion"] = "conclusion"
    extra_step: Optional[ExtraStep] = None

    @property
    def has_extra_step(self) -> bool:
        return self.extra_step is not None


# Discriminated union: Pydantic picks the right type based on the "kind" field.
Screen = Annotated[
    Union[
        InfoScreen,
        FormScreen,
        SingleChoiceScreen,
        MultiSelectScreen,
        FrequencyScreen,
        ConclusionScreen,
    ],
    Field(discriminator="kind"),
]
