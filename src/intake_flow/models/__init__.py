"""Public model re-exports for intake_flow.

Consumers should import from ``intake_flow.models`` rather than reaching
into sub-modules directly.
"""

# --- Screens ---
from intake_flow.models.screen import (
    BaseScreen,
    ChoiceQuestion,
    ConclusionScreen,
    DemoFeature,
    ExtraStep,
    FieldSpec,
    FormScreen,
    FrequencyScreen,
    InfoScreen,
    MultiSelectScreen,
    Screen,
    SingleChoiceScreen,
)

# --- Answers ---
from intake_flow.models.answer import (
    AnswerValue,
    ChoiceAnswer,
    FieldAnswer,
    FrequencyAnswer,
    SelectionAnswer,
)

# --- Profile / step ---
from intake_flow.models.profile import ProfileRecord
from intake_flow.models.step import (
    BonusStep,
    CompletedStep,
    FlowInfo,
    ScreenStep,
    StepResult,
)

__all__ = [
    # Screens
    "BaseScreen",
    "ChoiceQuestion",
    "ConclusionScreen",
    "DemoFeature",
    "ExtraStep",
    "FieldSpec",
    "FormScreen",
    "FrequencyScreen",
    "InfoScreen",
    "MultiSelectScreen",
    "Screen",
    "SingleChoiceScreen",
    # Answers
    "AnswerValue",
    "ChoiceAnswer",
    "FieldAnswer",
    "FrequencyAnswer",
    "SelectionAnswer",
    # Profile / step
    "ProfileRecord",
    "BonusStep",
    "CompletedStep",
    "FlowInfo",
    "ScreenStep",
    "StepResult",
]
