"""Tagged answer values held by the answer store.

Each screen kind writes a different shape of value; tagging them keeps the
toggle/overwrite distinction explicit instead of relying on the runtime type
of a bare value:

  - FieldAnswer:     form field scalar (text, number, date string)
  - ChoiceAnswer:    option picked for a single-choice question
  - SelectionAnswer: set of toggled options for a multi-select screen
  - FrequencyAnswer: integer weekly training frequency
"""

from typing import Annotated, FrozenSet, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FieldAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    # Not type-coerced; whatever the input boundary passed through
    value: Union[str, int, float]


class ChoiceAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["choice"] = "choice"
    value: str


class SelectionAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["selection"] = "selection"
    value: FrozenSet[str] = frozenset()

    def toggled(self, option: str) -> "SelectionAnswer":
        """Return a copy with ``option`` removed if present, added otherwise."""
        if option in self.value:
            return SelectionAnswer(value=self.value - {option})
        return SelectionAnswer(value=self.value | {option})


class FrequencyAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["frequency"] = "frequency"
    value: int


AnswerValue = Annotated[
    Union[FieldAnswer, ChoiceAnswer, SelectionAnswer, FrequencyAnswer],
    Field(discriminator="kind"),
]
