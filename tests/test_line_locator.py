"""
Tests for the line locator.
"""

import pytest

from translation_review.line_locator import NOT_FOUND, get_line_number, locate_issue_lines
from translation_review.models import FileContent, ReviewIssue


GERMAN_FILE = """{
  "starting_point": "Startpunkt",
  "destination": "Ziel",
  "charger": {
    "zero": "Keine Ladevorgänge"
  }
}"""


class TestGetLineNumber:
    """Test cases for get_line_number."""

    @pytest.mark.parametrize("text, snippet", [
        (None, "x"),
        ("", "x"),
        ("x", None),
        ("x", ""),
    ])
    def test_empty_input(self, text, snippet):
        """Test that absent or empty input yields -1."""
        assert get_line_number(text, snippet) == NOT_FOUND

    def test_no_match(self):
        """Test that a missing snippet yields -1."""
        assert get_line_number(GERMAN_FILE, '"origin": "Herkunft"') == NOT_FOUND

    def test_single_line(self):
        """Test a single-line snippet in the middle of the file."""
        assert get_line_number(GERMAN_FILE, '"destination": "Ziel",') == 3

    def test_first_line(self):
        """Test a snippet on the very first line."""
        assert get_line_number(GERMAN_FILE, "{") == 1

    def test_last_line(self):
        """Test a snippet on the very last line."""
        assert get_line_number("a\nb\nlast line", "last line") == 3

    def test_whitespace_insensitive(self):
        """Test that indentation and spacing differences are tolerated."""
        assert get_line_number(GERMAN_FILE, '"starting_point":    "Startpunkt",') == 2
        assert get_line_number(GERMAN_FILE, '      "zero": "Keine Ladevorgänge"') == 5

    def test_multi_line_reports_last_line(self):
        """Test that a snippet spanning k lines from line n reports n + k - 1."""
        snippet = '"charger": {\n  "zero": "Keine Ladevorgänge"\n}'
        assert get_line_number(GERMAN_FILE, snippet) == 6

    def test_first_occurrence_wins(self):
        """Test that duplicate occurrences resolve to the first one."""
        text = "alpha\nduplicate\nbeta\nduplicate"
        assert get_line_number(text, "duplicate") == 2

    def test_special_characters(self):
        """Test snippets containing regex metacharacters."""
        text = "line one\nconst x = [a/b]*{c};\nline three"
        assert get_line_number(text, "const x = [a/b]*{c};") == 2

    def test_backslashes_stay_literal(self):
        """Test a JSON line with escaped quotes."""
        text = '{\n  "quote": "Er sagte \\"Hallo\\"",\n}'
        assert get_line_number(text, '"quote": "Er sagte \\"Hallo\\"",') == 2


class TestLocateIssueLines:
    """Test cases for locate_issue_lines."""

    def setup_method(self):
        """Set up test fixtures."""
        self.files = [FileContent(path="de.json", content=GERMAN_FILE)]

    def test_found_issue_gets_line(self):
        """Test that a located issue keeps its comment and gets a line."""
        issue = ReviewIssue(filePath="de.json", lineContent='"destination": "Ziel",', comment="Fine?")

        [located] = locate_issue_lines([issue], self.files)

        assert located.line_number == 3
        assert located.is_located
        assert located.comment == "Fine?"

    def test_missing_issue_quotes_line(self):
        """Test that an unlocated issue carries the quoted line in its comment."""
        issue = ReviewIssue(filePath="de.json", lineContent='"origin": "Herkunft",', comment="Typo")

        [located] = locate_issue_lines([issue], self.files)

        assert located.line_number == NOT_FOUND
        assert not located.is_located
        assert located.comment == 'Typo\nde.json:\n```\n"origin": "Herkunft",\n```'

    def test_unknown_file_is_not_located(self):
        """Test that an issue for a file without content falls back."""
        issue = ReviewIssue(filePath="fr.json", lineContent='"destination": "Ziel",', comment="Wrong file")

        [located] = locate_issue_lines([issue], self.files)

        assert located.line_number == NOT_FOUND
        assert "fr.json:" in located.comment

    def test_order_is_preserved(self):
        """Test that results follow the order of the issues."""
        issues = [
            ReviewIssue(filePath="de.json", lineContent="}", comment="b"),
            ReviewIssue(filePath="de.json", lineContent="{", comment="a"),
        ]

        located = locate_issue_lines(issues, self.files)

        assert [issue.comment for issue in located] == ["b", "a"]
        assert [issue.line_number for issue in located] == [6, 1]
