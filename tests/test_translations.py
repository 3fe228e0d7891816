"""
Tests for reference translation lookups.
"""

import json

import pytest

from translation_review.translations import (
    get_nested_value,
    load_reference_translations,
    serialize_value,
)


class TestGetNestedValue:
    """Test cases for get_nested_value."""

    def setup_method(self):
        """Set up test fixtures."""
        self.reference = {
            "starting_point": "Starting point",
            "charger.flat": "Flat dotted key",
            "charger": {
                "zero": "No charges",
                "plural": {"one": "{{count}} charge", "other": "{{count}} charges"},
            },
            "steps": ["First", "Second"],
            "nothing": None,
        }

    def test_absent_mapping(self):
        assert get_nested_value(None, "starting_point") is None

    def test_direct_key(self):
        assert get_nested_value(self.reference, "starting_point") == "Starting point"

    def test_direct_dotted_key_wins(self):
        """Test that a key containing dots is first tried as one flat key."""
        assert get_nested_value(self.reference, "charger.flat") == "Flat dotted key"

    def test_dotted_path(self):
        assert get_nested_value(self.reference, "charger.zero") == "No charges"

    def test_missing_segment(self):
        assert get_nested_value(self.reference, "charger.many") is None
        assert get_nested_value(self.reference, "unknown.zero") is None

    def test_descending_into_a_string(self):
        """Test that a string leaf cannot be traversed further."""
        assert get_nested_value(self.reference, "starting_point.more") is None

    def test_structured_value_is_serialized(self):
        """Test that a pluralization group comes back as round-trippable JSON."""
        value = get_nested_value(self.reference, "charger.plural")

        assert value == '{"one":"{{count}} charge","other":"{{count}} charges"}'
        assert json.loads(value) == self.reference["charger"]["plural"]

    def test_list_index_segment(self):
        assert get_nested_value(self.reference, "steps.1") == "Second"
        assert get_nested_value(self.reference, "steps.5") is None

    def test_null_is_present(self):
        assert get_nested_value(self.reference, "nothing") == "null"

    def test_empty_string_is_present(self):
        assert get_nested_value({"blank": ""}, "blank") == ""


class TestSerializeValue:
    """Test cases for serialize_value."""

    @pytest.mark.parametrize("value, expected", [
        ("text", "text"),
        (3, "3"),
        (True, "true"),
        (["a", "b"], '["a","b"]'),
        ({"ü": "ö"}, '{"ü":"ö"}'),
    ])
    def test_serialization(self, value, expected):
        assert serialize_value(value) == expected


class TestLoadReferenceTranslations:
    """Test cases for load_reference_translations."""

    def test_valid_object(self):
        assert load_reference_translations('{"a": {"b": "c"}}') == {"a": {"b": "c"}}

    @pytest.mark.parametrize("content", [None, "", "{not json", "[1, 2]", '"text"'])
    def test_unusable_content_gives_empty_mapping(self, content):
        assert load_reference_translations(content) == {}

    def test_invalid_json_is_logged(self, caplog):
        """Test that a parse failure is reported rather than raised."""
        with caplog.at_level("ERROR"):
            load_reference_translations("{not json", source="locales/en.json")

        assert "Failed to parse locales/en.json" in caplog.text
