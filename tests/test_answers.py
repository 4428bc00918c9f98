"""AnswerStore merge semantics."""

import pytest

from intake_flow.answers import AnswerStore
from intake_flow.models.answer import (
    ChoiceAnswer,
    FieldAnswer,
    FrequencyAnswer,
    SelectionAnswer,
)


@pytest.fixture
def store():
    return AnswerStore()


class TestFieldsAndChoices:
    def test_set_field_last_write_wins(self, store):
        store.set_field("weight", 80)
        store.set_field("weight", 78.5)
        assert store.value("weight") == 78.5
        assert isinstance(store.get("weight"), FieldAnswer)

    def test_field_values_are_not_coerced(self, store):
        store.set_field("height", "180")
        assert store.value("height") == "180"

    def test_select_single_overwrites(self, store):
        store.select_single("Job Type", "Moderate")
        store.select_single("Job Type", "Sedentary")
        assert store.value("Job Type") == "Sedentary"
        assert isinstance(store.get("Job Type"), ChoiceAnswer)

    def test_select_frequency_uses_reserved_key(self, store):
        store.select_frequency(3)
        assert store.value("frequency") == 3
        assert isinstance(store.get("frequency"), FrequencyAnswer)

    def test_writes_leave_unrelated_keys(self, store):
        store.set_field("fullName", "Ada")
        store.select_single("Lifestyle", "Active")
        store.toggle_option("selectedGoals", "Flexibility")
        store.select_frequency(4)
        store.set_field("fullName", "Grace")
        assert store.snapshot() == {
            "fullName": "Grace",
            "Lifestyle": "Active",
            "selectedGoals": frozenset({"Flexibility"}),
            "frequency": 4,
        }


class TestToggle:
    def test_first_toggle_creates_collection(self, store):
        store.toggle_option("selectedGoals", "Weight loss")
        assert store.selection("selectedGoals") == {"Weight loss"}
        assert isinstance(store.get("selectedGoals"), SelectionAnswer)

    def test_toggle_is_an_involution(self, store):
        store.toggle_option("selectedGoals", "A")
        before = store.selection("selectedGoals")
        store.toggle_option("selectedGoals", "B")
        store.toggle_option("selectedGoals", "B")
        assert store.selection("selectedGoals") == before

    def test_toggle_off_keeps_empty_collection(self, store):
        store.toggle_option("selectedGoals", "A")
        store.toggle_option("selectedGoals", "A")
        assert "selectedGoals" in store
        assert store.selection("selectedGoals") == frozenset()

    def test_toggle_replaces_non_selection_value(self, store):
        store.set_field("selectedGoals", "oops")
        store.toggle_option("selectedGoals", "A")
        assert store.selection("selectedGoals") == {"A"}


class TestReadAccess:
    def test_missing_key_defaults(self, store):
        assert store.get("nope") is None
        assert store.value("nope", default=0) == 0
        assert store.selection("nope") == frozenset()
        assert "nope" not in store
        assert len(store) == 0

    def test_snapshot_limited_to_keys(self, store):
        store.set_field("a", 1)
        store.set_field("b", 2)
        assert store.snapshot(["b", "missing"]) == {"b": 2}

    def test_snapshot_is_a_copy(self, store):
        store.set_field("a", 1)
        snap = store.snapshot()
        snap["a"] = 99
        assert store.value("a") == 1

    def test_tagged_view_is_read_only(self, store):
        store.set_field("a", 1)
        view = store.tagged()
        with pytest.raises(TypeError):
            view["a"] = FieldAnswer(value=2)
        assert view["a"].value == 1
