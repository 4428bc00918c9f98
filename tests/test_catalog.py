"""ScreenCatalog loading and structural validation."""

import pytest

from helpers.catalogs import SMALL_SCREENS
from intake_flow.catalog import ScreenCatalog, parse_screen
from intake_flow.errors import CatalogError
from intake_flow.models.screen import (
    ConclusionScreen,
    FormScreen,
    FrequencyScreen,
    InfoScreen,
    MultiSelectScreen,
    SingleChoiceScreen,
)


def _conclusion(screen_id, extra=True):
    raw = {"id": screen_id, "kind": "conclusion", "title": "Done"}
    if extra:
        raw["extra_step"] = {"features": []}
    return raw


# =====================================================================
# Bundled v1 catalog
# =====================================================================


class TestBundledCatalog:
    def test_loads_all_screens(self, catalog):
        assert len(catalog) == 11
        assert [s.id for s in catalog] == list(range(1, 12))

    def test_kinds_map_to_models(self, catalog):
        assert isinstance(catalog.get_by_id(1), InfoScreen)
        assert isinstance(catalog.get_by_id(2), FormScreen)
        assert isinstance(catalog.get_by_id(3), SingleChoiceScreen)
        assert catalog.get_by_id(4).kind == "motivational"
        assert isinstance(catalog.get_by_id(6), FrequencyScreen)
        assert isinstance(catalog.get_by_id(10), MultiSelectScreen)
        assert isinstance(catalog.get_by_id(11), ConclusionScreen)

    def test_terminal_carries_quick_tour(self, catalog):
        terminal = catalog.terminal
        assert terminal.has_extra_step
        assert terminal.extra_step.title == "Quick Tour"
        assert terminal.extra_step.button_text == "Get Started"
        assert len(terminal.extra_step.features) == 4

    def test_goals_screen_writes_selected_goals(self, catalog):
        goals = catalog.get_by_id(10)
        assert goals.answer_keys == ["selectedGoals"]
        assert goals.min_selections == 1
        assert "Weight loss" in goals.options

    def test_frequency_options(self, catalog):
        assert catalog.get_by_id(6).options == [2, 3, 4]

    def test_upload_flag_on_training_screen(self, catalog):
        assert catalog.get_by_id(5).has_upload is True
        assert catalog.get_by_id(2).has_upload is False

    def test_first_screen_button_label(self, catalog):
        assert catalog[0].button_text == "Let's Start!"


# =====================================================================
# Construction-time validation
# =====================================================================


class TestCatalogValidation:
    def test_screens_sorted_by_id(self):
        cat = ScreenCatalog.from_dicts(list(reversed(SMALL_SCREENS)))
        assert [s.id for s in cat] == [1, 2, 3]

    def test_empty_catalog_rejected(self):
        with pytest.raises(CatalogError, match="empty"):
            ScreenCatalog.from_dicts([])

    def test_duplicate_ids_rejected(self):
        screens = [
            {"id": 1, "kind": "informational", "title": "A"},
            {"id": 1, "kind": "motivational", "title": "B"},
            _conclusion(2),
        ]
        with pytest.raises(CatalogError, match="Duplicate screen ids"):
            ScreenCatalog.from_dicts(screens)

    def test_extra_step_not_on_last_screen_rejected(self):
        screens = [
            _conclusion(1),
            {"id": 2, "kind": "informational", "title": "After"},
        ]
        with pytest.raises(CatalogError, match="last screen"):
            ScreenCatalog.from_dicts(screens)

    def test_two_extra_steps_rejected(self):
        with pytest.raises(CatalogError, match="More than one"):
            ScreenCatalog.from_dicts([_conclusion(1), _conclusion(2)])

    def test_missing_extra_step_rejected_by_default(self):
        with pytest.raises(CatalogError, match="No screen carries"):
            ScreenCatalog.from_dicts([_conclusion(1, extra=False)])

    def test_missing_extra_step_allowed_when_not_required(self):
        cat = ScreenCatalog.from_dicts(
            [_conclusion(1, extra=False)], require_extra_step=False
        )
        assert not cat.terminal.has_extra_step

    def test_extra_step_still_last_only_when_not_required(self):
        screens = [_conclusion(1), {"id": 2, "kind": "informational", "title": "X"}]
        with pytest.raises(CatalogError):
            ScreenCatalog.from_dicts(screens, require_extra_step=False)

    def test_shared_answer_key_rejected(self):
        screens = [
            {"id": 1, "kind": "frequency", "title": "F1", "question": "?", "options": [2]},
            {"id": 2, "kind": "frequency", "title": "F2", "question": "?", "options": [3]},
            _conclusion(3),
        ]
        with pytest.raises(CatalogError, match="Answer key 'frequency'"):
            ScreenCatalog.from_dicts(screens)

    def test_unknown_kind_rejected(self):
        with pytest.raises(CatalogError, match="Invalid screen descriptor"):
            ScreenCatalog.from_dicts([{"id": 1, "kind": "carousel", "title": "?"}])

    def test_kind_specific_fields_enforced(self):
        # multi_select without options
        raw = {"id": 1, "kind": "multi_select", "title": "G", "question": "?", "options": []}
        with pytest.raises(CatalogError):
            ScreenCatalog.from_dicts([raw, _conclusion(2)])

    def test_min_selections_above_option_count_rejected(self):
        raw = {
            "id": 1, "kind": "multi_select", "title": "G", "question": "?",
            "options": ["A"], "min_selections": 2,
        }
        with pytest.raises(CatalogError):
            ScreenCatalog.from_dicts([raw, _conclusion(2)])

    def test_form_duplicate_field_names_rejected(self):
        raw = {
            "id": 1, "kind": "form", "title": "F",
            "fields": [{"name": "x", "label": "X"}, {"name": "x", "label": "Y"}],
        }
        with pytest.raises(CatalogError):
            ScreenCatalog.from_dicts([raw, _conclusion(2)])


# =====================================================================
# YAML loading & lookup
# =====================================================================


class TestCatalogLoading:
    def test_from_yaml_requires_screens_list(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- id: 1\n", encoding="utf-8")
        with pytest.raises(CatalogError, match="'screens' list"):
            ScreenCatalog.from_yaml(path)

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScreenCatalog.from_yaml(tmp_path / "nope.yaml")

    def test_from_yaml_custom_path(self, tmp_path):
        path = tmp_path / "screens.yaml"
        path.write_text(
            "screens:\n"
            "  - {id: 1, kind: informational, title: Hi}\n"
            "  - {id: 2, kind: conclusion, title: Bye}\n",
            encoding="utf-8",
        )
        cat = ScreenCatalog.from_yaml(path, require_extra_step=False)
        assert len(cat) == 2
        assert cat.last_index == 1

    def test_get_by_id_unknown(self, small_catalog):
        with pytest.raises(KeyError):
            small_catalog.get_by_id(42)

    def test_index_of(self, small_catalog):
        assert small_catalog.index_of(3) == 2
        with pytest.raises(KeyError):
            small_catalog.index_of(42)

    def test_parse_screen_defaults(self):
        screen = parse_screen({"id": 7, "kind": "multi_select", "title": "G",
                               "question": "?", "options": ["A"]})
        assert screen.collection_key == "selectedGoals"
        assert screen.button_text is None

    def test_single_choice_options_for(self, catalog):
        screen = catalog.get_by_id(3)
        assert screen.options_for("Job Type") == ["Very demanding", "Moderate", "Sedentary"]
        with pytest.raises(KeyError):
            screen.options_for("Favourite colour")
