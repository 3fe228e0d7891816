"""
Whitespace-tolerant literal matching.

Review issues quote a line (or several) from a changed file, but the
quoted text is frequently re-indented or re-wrapped compared to the file
itself. This module turns such a snippet into a matcher that anchors every
non-whitespace character literally, in order, while letting any run of
whitespace in the snippet match any non-empty run of whitespace in the
text.

Example:
    matcher = compile_snippet('"key":   "value",')
    match = matcher.search(file_content)
    if match:
        print(match.start, match.text)
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Pattern

# Characters that carry meaning in a regular expression. The backslash is
# included so that JSON escapes such as \" or \n in a snippet stay literal.
SPECIAL_CHARACTERS_PATTERN = re.compile(r'([\\.*+?^=!:${}()|\[\]/-])')
WHITESPACE_RUN_PATTERN = re.compile(r'\s+')
FLEXIBLE_WHITESPACE = r'\s+'

PATTERN_CACHE_SIZE = 256


@dataclass(frozen=True)
class SnippetMatch:
    """Location of a snippet inside a larger text."""
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class FuzzyMatcher:
    """
    Compiled whitespace-tolerant matcher for one snippet.

    Wraps the regular-expression engine so callers only ever see
    ``search`` and ``SnippetMatch``.
    """
    snippet: str
    pattern: Pattern[str]

    def search(self, text: str, pos: int = 0) -> Optional[SnippetMatch]:
        """
        Find the leftmost occurrence of the snippet in ``text``.

        Args:
            text: Text to search in
            pos: Offset to start searching from

        Returns:
            SnippetMatch for the first occurrence, or None
        """
        match = self.pattern.search(text, pos)
        if match is None:
            return None
        return SnippetMatch(start=match.start(), end=match.end(), text=match.group(0))


def to_pattern(snippet: str) -> str:
    """
    Convert a literal snippet into a regular-expression source string.

    Every special character is escaped, then every maximal whitespace run
    (spaces, tabs, newlines) becomes ``\\s+``.

    Args:
        snippet: Literal text, one or many lines

    Returns:
        Pattern source suitable for ``re.compile``
    """
    escaped = SPECIAL_CHARACTERS_PATTERN.sub(r'\\\1', snippet)
    return WHITESPACE_RUN_PATTERN.sub(lambda _: FLEXIBLE_WHITESPACE, escaped)


@lru_cache(maxsize=PATTERN_CACHE_SIZE)
def compile_snippet(snippet: str) -> FuzzyMatcher:
    """
    Compile a snippet into a FuzzyMatcher.

    Results are cached; a FuzzyMatcher is immutable so sharing one between
    callers (and threads) is safe.
    """
    return FuzzyMatcher(snippet=snippet, pattern=re.compile(to_pattern(snippet)))
