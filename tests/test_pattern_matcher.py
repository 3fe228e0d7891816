"""
Tests for the whitespace-tolerant snippet matcher.
"""

import re

import pytest

from translation_review.pattern_matcher import (
    FuzzyMatcher,
    SnippetMatch,
    compile_snippet,
    to_pattern,
)


class TestToPattern:
    """Test cases for snippet to pattern conversion."""

    def test_plain_text_is_unchanged(self):
        """Test that text without special characters stays as it is."""
        assert to_pattern("abc") == "abc"

    def test_whitespace_runs_become_flexible(self):
        """Test that each whitespace run turns into a single \\s+."""
        assert to_pattern("a  b\t\nc") == r"a\s+b\s+c"

    @pytest.mark.parametrize("char", list(".*+?^=!:${}()|[]/-\\"))
    def test_special_characters_are_escaped(self, char):
        """Test that every special character is matched literally."""
        pattern = re.compile(to_pattern(f"x{char}y"))
        assert pattern.fullmatch(f"x{char}y")

    def test_escaped_pattern_does_not_act_as_regex(self):
        """Test that a regex-looking snippet does not match other text."""
        pattern = re.compile(to_pattern("a.c"))
        assert pattern.search("abc") is None
        assert pattern.search("a.c") is not None

    def test_json_line_with_placeholders(self):
        """Test a realistic translation line with braces and colons."""
        snippet = '"charger.one": "{{count}} Ladung",'
        pattern = re.compile(to_pattern(snippet))
        assert pattern.search('  "charger.one": "{{count}} Ladung",')


class TestCompileSnippet:
    """Test cases for compiled matchers."""

    def test_returns_fuzzy_matcher(self):
        """Test that compiling yields a FuzzyMatcher for the snippet."""
        matcher = compile_snippet('"key": "value"')
        assert isinstance(matcher, FuzzyMatcher)
        assert matcher.snippet == '"key": "value"'

    def test_compiled_matchers_are_cached(self):
        """Test that the same snippet reuses the compiled matcher."""
        assert compile_snippet("same snippet") is compile_snippet("same snippet")

    def test_search_reports_position_and_text(self):
        """Test the match location of a re-indented snippet."""
        text = 'first\n    "key":\t"value",\nlast'
        match = compile_snippet('"key": "value",').search(text)

        assert match == SnippetMatch(start=10, end=25, text='"key":\t"value",')

    def test_whitespace_must_be_present(self):
        """Test that a whitespace run never matches an empty gap."""
        assert compile_snippet('"key": "value"').search('"key":"value"') is None

    def test_search_returns_none_without_match(self):
        """Test searching for an absent snippet."""
        assert compile_snippet("missing").search("nothing here") is None

    def test_search_from_offset(self):
        """Test that pos skips earlier occurrences."""
        matcher = compile_snippet("abc")
        assert matcher.search("abc abc", pos=1).start == 4
