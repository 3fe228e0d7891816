"""
Tests for diff section parsing and translation change extraction.
"""

import pytest

from translation_review.diff_filter import IgnorePolicy
from translation_review.diff_parser import (
    NO_ENGLISH_SOURCE,
    TranslationChange,
    get_touched_translation_files,
    is_translation_file,
    iter_diff_sections,
    parse_header_path,
    parse_translation_changes_from_diff,
)


class TestParseHeaderPath:
    """Test cases for header path parsing."""

    def test_unquoted(self):
        assert parse_header_path("diff --git a/src/i18n/de.json b/src/i18n/de.json") == "src/i18n/de.json"

    def test_quoted(self):
        assert parse_header_path('diff --git "a/zh-CN.json" "b/zh-CN.json"') == "zh-CN.json"

    def test_renamed_file_uses_destination(self):
        assert parse_header_path("diff --git a/old/de.json b/new/de.json") == "new/de.json"

    def test_malformed(self):
        assert parse_header_path("diff --git something-else") is None


class TestIterDiffSections:
    """Test cases for the section walker."""

    def test_empty(self):
        assert list(iter_diff_sections(None)) == []
        assert list(iter_diff_sections("")) == []

    def test_preamble_is_not_a_section(self):
        """Test that text before the first header is skipped."""
        diff = "preamble\n+  \"key\": \"value\",\ndiff --git a/de.json b/de.json\n+++ b/de.json"

        sections = list(iter_diff_sections(diff))

        assert len(sections) == 1
        assert sections[0].path == "de.json"
        assert sections[0].lines == ("diff --git a/de.json b/de.json", "+++ b/de.json")

    def test_sections_in_order(self, app_and_lockfile_diff):
        """Test that each header opens a section, in diff order."""
        sections = list(iter_diff_sections(app_and_lockfile_diff))

        assert [s.path for s in sections] == ["src/App.tsx", "yarn.lock"]
        assert sections[0].header == "diff --git a/src/App.tsx b/src/App.tsx"
        assert sections[0].text.endswith(" export default title;")

    def test_malformed_header_opens_section(self):
        """Test that lines after a malformed header do not leak into the previous file."""
        diff = (
            "diff --git a/de.json b/de.json\n"
            "+  \"a\": \"1\",\n"
            "diff --git broken\n"
            "+  \"b\": \"2\","
        )

        sections = list(iter_diff_sections(diff))

        assert [s.path for s in sections] == ["de.json", None]
        assert list(sections[0].added_lines()) == ['  "a": "1",']

    def test_added_lines_skip_banner(self, german_diff):
        """Test that the +++ banner is not an added line."""
        [german] = iter_diff_sections(german_diff)

        assert list(german.added_lines()) == ['  "starting_point": "Startpunkt",']

    def test_deleted_file(self):
        diff = "diff --git a/fr.json b/fr.json\ndeleted file mode 100644\n--- a/fr.json\n+++ /dev/null"

        [deleted] = iter_diff_sections(diff)

        assert deleted.is_deleted_file


class TestIsTranslationFile:
    """Test cases for translation file detection."""

    @pytest.mark.parametrize("path, expected", [
        ("de.json", True),
        ("src/i18n/zh-CN.json", True),
        ("en.json", False),
        ("src/App.tsx", False),
        ("de.json.bak", False),
        (None, False),
        ("", False),
    ])
    def test_detection(self, path, expected):
        assert is_translation_file(path) is expected

    def test_custom_source_file(self):
        assert is_translation_file("en.json", source_file="locales/en.json")
        assert not is_translation_file("locales/en.json", source_file="locales/en.json")


class TestParseTranslationChanges:
    """Test cases for parse_translation_changes_from_diff."""

    def test_german_scenario(self, german_diff):
        """Test a replaced line in de.json against the English source."""
        changes = parse_translation_changes_from_diff(german_diff, {"starting_point": "Starting point"})

        assert changes == [TranslationChange(
            file="de.json",
            key="starting_point",
            value="Startpunkt",
            english_value="Starting point",
            line='  "starting_point": "Startpunkt",',
        )]

    def test_wire_form(self, german_diff):
        """Test the camelCase wire form used in the prompt."""
        [change] = parse_translation_changes_from_diff(german_diff, {"starting_point": "Starting point"})

        assert change.to_dict() == {
            "file": "de.json",
            "key": "starting_point",
            "value": "Startpunkt",
            "englishValue": "Starting point",
            "line": '  "starting_point": "Startpunkt",',
        }

    def test_quoted_header_scenario(self, quoted_chinese_diff, english_translations):
        """Test that quoted header paths yield the unquoted file name."""
        [change] = parse_translation_changes_from_diff(quoted_chinese_diff, english_translations)

        assert change.file == "zh-CN.json"
        assert change.key == "destination"
        assert change.value == "目的地"
        assert change.english_value == "Destination"

    def test_source_file_never_reported(self, english_translations):
        """Test that added lines in the source-language file are skipped."""
        diff = (
            "diff --git a/en.json b/en.json\n"
            "--- a/en.json\n"
            "+++ b/en.json\n"
            "@@ -1,2 +1,3 @@\n"
            "+  \"new_key\": \"New value\","
        )

        assert parse_translation_changes_from_diff(diff, english_translations) == []

    def test_custom_source_file(self):
        """Test that a configured source file is skipped and en.json is not."""
        diff = (
            "diff --git a/locales/en.json b/locales/en.json\n"
            "+  \"a\": \"A\",\n"
            "diff --git a/en.json b/en.json\n"
            "+  \"a\": \"A2\","
        )

        changes = parse_translation_changes_from_diff(diff, {}, source_file="locales/en.json")

        assert [(c.file, c.value) for c in changes] == [("en.json", "A2")]

    def test_non_json_sections_skipped(self, app_and_lockfile_diff):
        """Test that code files never produce changes."""
        assert parse_translation_changes_from_diff(app_and_lockfile_diff, {}) == []

    def test_removed_and_context_lines_ignored(self):
        """Test that only added lines produce records."""
        diff = (
            "diff --git a/de.json b/de.json\n"
            "--- a/de.json\n"
            "+++ b/de.json\n"
            "@@ -1,3 +1,3 @@\n"
            "-  \"removed\": \"Entfernt\",\n"
            "   \"context\": \"Kontext\",\n"
            "+  \"added\": \"Hinzugefügt\","
        )

        changes = parse_translation_changes_from_diff(diff, {})

        assert [c.key for c in changes] == ["added"]

    def test_file_then_line_order(self):
        """Test ordering across several files and lines."""
        diff = (
            "diff --git a/fr.json b/fr.json\n"
            "+  \"b\": \"2\",\n"
            "+  \"a\": \"1\",\n"
            "diff --git a/de.json b/de.json\n"
            "+  \"c\": \"3\","
        )

        changes = parse_translation_changes_from_diff(diff, {})

        assert [(c.file, c.key) for c in changes] == [("fr.json", "b"), ("fr.json", "a"), ("de.json", "c")]

    def test_structural_lines_ignored(self):
        """Test that braces and nested-object openers produce no records."""
        diff = (
            "diff --git a/de.json b/de.json\n"
            "+  \"charger\": {\n"
            "+    \"zero\": \"Keine Ladevorgänge\",\n"
            "+  },\n"
            "+}"
        )

        changes = parse_translation_changes_from_diff(diff, {"zero": "No charges"})

        assert [(c.key, c.english_value) for c in changes] == [("zero", "No charges")]

    def test_sentinel_only_when_absent(self, english_translations):
        """Test the no-source sentinel for flat and dotted keys."""
        diff = (
            "diff --git a/de.json b/de.json\n"
            "+  \"charger.zero\": \"Keine\",\n"
            "+  \"charger.many\": \"Viele\",\n"
            "+  \"missing\": \"Fehlt\",\n"
            "+  \"destination\": \"Ziel\","
        )

        changes = parse_translation_changes_from_diff(diff, english_translations)

        assert [c.english_value for c in changes] == [
            "No charges",
            NO_ENGLISH_SOURCE,
            NO_ENGLISH_SOURCE,
            "Destination",
        ]

    def test_empty_reference_value_is_not_absent(self):
        """Test that an empty reference string is returned as is."""
        diff = "diff --git a/de.json b/de.json\n+  \"blank\": \"Leer\","

        [change] = parse_translation_changes_from_diff(diff, {"blank": ""})

        assert change.english_value == ""

    def test_no_reference(self):
        """Test that a missing reference mapping yields the sentinel."""
        diff = "diff --git a/de.json b/de.json\n+  \"key\": \"Wert\","

        [change] = parse_translation_changes_from_diff(diff, None)

        assert change.english_value == NO_ENGLISH_SOURCE

    def test_value_runs_to_last_quote(self):
        """Test that a value with colons and escaped quotes is captured to the last quote."""
        diff = 'diff --git a/de.json b/de.json\n+  "hint": "Tipp: \\"Laden\\" drücken",'

        [change] = parse_translation_changes_from_diff(diff, {})

        assert change.value == 'Tipp: \\"Laden\\" drücken'

    def test_malformed_json_does_not_abort(self):
        """Test that broken structure around a valid line is tolerated."""
        diff = "diff --git a/de.json b/de.json\n+{{{\n+  \"ok\": \"Gut\"\n+]]"

        [change] = parse_translation_changes_from_diff(diff, {})

        assert change.key == "ok"
        assert change.line == '  "ok": "Gut"'

    def test_empty_diff(self):
        assert parse_translation_changes_from_diff(None, {}) == []
        assert parse_translation_changes_from_diff("", {}) == []


class TestGetTouchedTranslationFiles:
    """Test cases for get_touched_translation_files."""

    def test_lists_json_files_once(self):
        diff = (
            "diff --git a/de.json b/de.json\n+x\n"
            "diff --git a/src/App.tsx b/src/App.tsx\n+y\n"
            "diff --git \"a/zh-CN.json\" \"b/zh-CN.json\"\n+z\n"
            "diff --git a/de.json b/de.json\n+w"
        )

        assert get_touched_translation_files(diff) == ["de.json", "zh-CN.json"]

    def test_skips_deleted_files(self):
        diff = (
            "diff --git a/fr.json b/fr.json\n"
            "deleted file mode 100644\n"
            "diff --git a/de.json b/de.json\n"
            "+x"
        )

        assert get_touched_translation_files(diff) == ["de.json"]

    def test_skips_ignored_and_source_files(self):
        diff = (
            "diff --git a/package.json b/package.json\n+x\n"
            "diff --git a/en.json b/en.json\n+x\n"
            "diff --git a/generated/de.json b/generated/de.json\n+x\n"
            "diff --git a/it.json b/it.json\n+x"
        )
        policy = IgnorePolicy.from_patterns(prefixes=["generated/"])

        assert get_touched_translation_files(diff, policy, source_file="en.json") == ["it.json"]
