"""Tests for medibot catalog loading and validation.

Tests cover:
- Validation order and exact error messages
- Skipping malformed patterns/responses
- Intent and Catalog value types
- JSON/YAML file loading and the bundled catalog
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from medibot.core.errors import ChatbotError, IntentLoadError
from medibot.core.intent import (
    BUNDLED_CATALOG_PATH,
    Catalog,
    Intent,
    bundled_catalog,
    load_catalog,
    load_catalog_file,
)

# ============================================================================
# Validation
# ============================================================================


class TestLoadCatalogValidation:
    """Tests for load_catalog failure modes, in validation order."""

    def test_missing_data(self) -> None:
        with pytest.raises(IntentLoadError, match="^Intent data is missing$"):
            load_catalog(None)

    def test_missing_intents_property(self) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog({})
        assert str(exc_info.value) == "Invalid intent data structure: missing intents property"

    def test_non_mapping_input(self) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog(lambda: None)
        assert str(exc_info.value) == "Invalid intent data structure: missing intents property"

    def test_intents_not_a_list(self) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog({"intents": "not an array"})
        assert str(exc_info.value) == "Invalid intent data structure: intents must be an array"

    @pytest.mark.parametrize("value", [False, 0, ""])
    def test_falsy_intents_treated_as_missing(self, value: Any) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog({"intents": value})
        assert str(exc_info.value) == "Invalid intent data structure: missing intents property"

    def test_empty_intents(self) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog({"intents": []})
        assert str(exc_info.value) == "Intent data is empty"

    @pytest.mark.parametrize(
        "entry",
        [
            {"tag": "Test"},
            {"patterns": ["p"], "responses": ["r"]},
            {"tag": "", "patterns": ["p"], "responses": ["r"]},
            {"tag": "Test", "patterns": [], "responses": ["r"]},
            {"tag": "Test", "patterns": ["p"], "responses": None},
            {"tag": 42, "patterns": ["p"], "responses": ["r"]},
            "not an entry",
        ],
    )
    def test_missing_required_properties(self, entry: Any) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog({"intents": [entry]})
        assert str(exc_info.value) == "Invalid intent structure: missing required properties"

    def test_patterns_must_be_list(self) -> None:
        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog({"intents": [{"tag": "T", "patterns": "abc", "responses": ["r"]}]})
        assert (
            str(exc_info.value)
            == "Invalid intent structure: patterns and responses must be arrays"
        )

    def test_responses_must_be_list(self) -> None:
        with pytest.raises(IntentLoadError, match="must be arrays"):
            load_catalog({"intents": [{"tag": "T", "patterns": ["p"], "responses": 5}]})

    def test_first_violation_wins(self) -> None:
        """A bad first entry is reported even when later entries are bad too."""
        data = {
            "intents": [
                {"tag": "A", "patterns": "x", "responses": ["r"]},
                {"tag": "B"},
            ]
        }
        with pytest.raises(IntentLoadError, match="must be arrays"):
            load_catalog(data)

    def test_unexpected_errors_are_wrapped(self) -> None:
        class BrokenMapping(dict):
            def get(self, key: str, default: Any = None) -> Any:
                raise RuntimeError("boom")

        with pytest.raises(IntentLoadError) as exc_info:
            load_catalog(BrokenMapping())
        assert str(exc_info.value) == "Failed to load intent data: boom"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_load_error_is_chatbot_error(self) -> None:
        with pytest.raises(ChatbotError):
            load_catalog(None)


# ============================================================================
# Malformed entries
# ============================================================================


class TestMalformedEntries:
    """Tests for skipping bad patterns and responses."""

    def test_invalid_patterns_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        data = {
            "intents": [
                {"tag": "Test", "patterns": [None, "valid pattern", 123, " "], "responses": ["r"]}
            ]
        }
        with caplog.at_level(logging.WARNING):
            catalog = load_catalog(data)

        assert catalog[0].patterns == ("valid pattern",)
        assert "Skipping 3 invalid pattern(s) in intent: Test" in caplog.text

    def test_no_valid_patterns_rejected(self) -> None:
        data = {"intents": [{"tag": "Test", "patterns": [None, 5], "responses": ["r"]}]}
        with pytest.raises(IntentLoadError, match="intent 'Test' has no valid patterns"):
            load_catalog(data)

    def test_no_valid_responses_rejected(self) -> None:
        data = {"intents": [{"tag": "Test", "patterns": ["test"], "responses": [None]}]}
        with pytest.raises(IntentLoadError, match="intent 'Test' has no valid responses"):
            load_catalog(data)

    def test_duplicate_tags_warned_not_rejected(self, caplog: pytest.LogCaptureFixture) -> None:
        entry = {"tag": "Twice", "patterns": ["p"], "responses": ["r"]}
        with caplog.at_level(logging.WARNING):
            catalog = load_catalog({"intents": [entry, dict(entry)]})

        assert len(catalog) == 2
        assert "Duplicate intent tag in catalog: Twice" in caplog.text


# ============================================================================
# Successful loads
# ============================================================================


class TestLoadCatalog:
    """Tests for the loaded Catalog and Intent values."""

    def test_loads_sample(self, intents_data: dict[str, Any]) -> None:
        catalog = load_catalog(intents_data)
        assert len(catalog) == 3
        assert catalog.tags == ["Cuts", "Fever", "Headache"]
        assert catalog[0].tag == "Cuts"

    def test_intent_fields(self, intents_data: dict[str, Any]) -> None:
        fever = load_catalog(intents_data).get("Fever")
        assert fever is not None
        assert fever.patterns[2] == "fever treatment"
        assert len(fever.responses) == 2
        assert fever.context_set == ""

    def test_extra_keys_kept_as_metadata(self) -> None:
        data = {
            "intents": [
                {"tag": "T", "patterns": ["p"], "responses": ["r"], "severity": "low"}
            ]
        }
        intent = load_catalog(data)[0]
        assert intent.metadata == {"severity": "low"}
        assert intent.to_dict()["severity"] == "low"

    def test_tuple_sequences_accepted(self) -> None:
        catalog = load_catalog({"intents": ({"tag": "T", "patterns": ("p",), "responses": ("r",)},)})
        assert catalog[0].patterns == ("p",)

    def test_catalog_does_not_alias_input(self, intents_data: dict[str, Any]) -> None:
        catalog = load_catalog(intents_data)
        intents_data["intents"][0]["patterns"].append("mutated later")
        assert "mutated later" not in catalog[0].patterns

    def test_intent_is_immutable(self) -> None:
        intent = Intent(tag="T", patterns=("p",), responses=("r",))
        with pytest.raises(AttributeError):
            intent.tag = "changed"  # type: ignore[misc]

    def test_metadata_is_read_only(self) -> None:
        data = {"intents": [{"tag": "T", "patterns": ["p"], "responses": ["r"], "severity": "low"}]}
        intent = load_catalog(data)[0]
        with pytest.raises(TypeError):
            intent.metadata["severity"] = "high"  # type: ignore[index]
        assert intent.metadata["severity"] == "low"

    def test_metadata_copied_on_construction(self) -> None:
        extra = {"severity": "low"}
        intent = Intent(tag="T", patterns=("p",), responses=("r",), metadata=extra)
        extra["severity"] = "high"
        assert intent.metadata == {"severity": "low"}

    def test_catalog_round_trip_shape(self, intents_data: dict[str, Any]) -> None:
        assert load_catalog(intents_data).to_dict() == intents_data

    def test_get_unknown_tag(self, intents_data: dict[str, Any]) -> None:
        assert load_catalog(intents_data).get("Nope") is None

    def test_valid_responses_filters(self) -> None:
        intent = Intent(tag="T", patterns=("p",), responses=("ok", "", None, "  "))  # type: ignore[arg-type]
        assert intent.valid_responses() == ["ok"]


# ============================================================================
# Files
# ============================================================================


class TestLoadCatalogFile:
    """Tests for reading catalogs from disk."""

    def test_json_file(self, tmp_path: Path, intents_data: dict[str, Any]) -> None:
        path = tmp_path / "intents.json"
        path.write_text(json.dumps(intents_data))

        catalog = load_catalog_file(path)
        assert catalog.tags == ["Cuts", "Fever", "Headache"]

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "intents.yaml"
        path.write_text(
            "intents:\n"
            "  - tag: Cuts\n"
            "    patterns:\n"
            "      - What to do if Cuts?\n"
            "    responses:\n"
            "      - Clean the cut.\n"
        )

        catalog = load_catalog_file(path)
        assert catalog[0].tag == "Cuts"
        assert catalog[0].patterns == ("What to do if Cuts?",)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(IntentLoadError, match="^Failed to load intent data"):
            load_catalog_file(path)

    @pytest.mark.parametrize("name", ["intents.json", "intents.yaml"])
    def test_invalid_utf8(self, tmp_path: Path, name: str) -> None:
        path = tmp_path / name
        path.write_bytes(b'{"intents": [{"tag": "\xff\xfe"}]}')

        with pytest.raises(IntentLoadError, match="^Failed to load intent data"):
            load_catalog_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(IntentLoadError, match="^Failed to load intent data"):
            load_catalog_file(tmp_path / "nope.json")

    def test_validation_applies_to_files(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text('{"intents": []}')

        with pytest.raises(IntentLoadError, match="^Intent data is empty$"):
            load_catalog_file(path)

    def test_bundled_catalog(self) -> None:
        assert BUNDLED_CATALOG_PATH.exists()
        catalog = bundled_catalog()
        assert isinstance(catalog, Catalog)
        assert {"Cuts", "Fever", "Headache"} <= set(catalog.tags)
