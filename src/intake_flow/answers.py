"""AnswerStore: the cumulative answers collected by one flow instance.

Every input handler merges into the same mapping.  Writes are
last-write-wins, except multi-select collections which toggle membership.
Nothing is ever deleted: navigating back and forth leaves earlier answers
exactly as they were until the user changes them.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

from intake_flow.constants import FREQUENCY_KEY
from intake_flow.models.answer import (
    AnswerValue,
    ChoiceAnswer,
    FieldAnswer,
    FrequencyAnswer,
    SelectionAnswer,
)

logger = logging.getLogger(__name__)


class AnswerStore:
    """Mutable map from answer key to a tagged answer value."""

    def __init__(self) -> None:
        self._values: dict[str, AnswerValue] = {}

    # ------------------------------------------------------------------
    # Mutation protocol
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Union[str, int, float]) -> None:
        """Assign a form field scalar (last write wins)."""
        self._values[name] = FieldAnswer(value=value)

    def toggle_option(self, collection_key: str, option: str) -> None:
        """Remove ``option`` from the collection if present, otherwise add it."""
        current = self._values.get(collection_key)
        if not isinstance(current, SelectionAnswer):
            current = SelectionAnswer()
        self._values[collection_key] = current.toggled(option)
        logger.debug(
            "Toggled %r in %s -> %d selected",
            option, collection_key, len(self._values[collection_key].value),
        )

    def select_single(self, question_key: str, option: str) -> None:
        """Record the option picked for a single-choice question."""
        self._values[question_key] = ChoiceAnswer(value=option)

    def select_frequency(self, option: int) -> None:
        """Record the weekly training frequency under the reserved key."""
        self._values[FREQUENCY_KEY] = FrequencyAnswer(value=option)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str) -> AnswerValue | None:
        """Tagged value for ``key``, or None if never answered."""
        return self._values.get(key)

    def value(self, key: str, default: Any = None) -> Any:
        """Plain value for ``key`` (scalar, option, frozenset or int)."""
        entry = self._values.get(key)
        return default if entry is None else entry.value

    def selection(self, collection_key: str) -> frozenset[str]:
        """Members of a multi-select collection; empty if never toggled."""
        entry = self._values.get(collection_key)
        if isinstance(entry, SelectionAnswer):
            return entry.value
        return frozenset()

    def tagged(self) -> Mapping[str, AnswerValue]:
        """Read-only view of the tagged entries."""
        return MappingProxyType(self._values)

    def snapshot(self, keys: Iterable[str] | None = None) -> dict[str, Any]:
        """Plain-value copy of the store, optionally limited to ``keys``."""
        wanted = self._values.keys() if keys is None else keys
        return {k: self._values[k].value for k in wanted if k in self._values}
