"""
Translation Review Bot.

Extracts added translation entries from a pull request diff, has them
reviewed by a completion model and anchors the findings to file lines.
"""

from .diff_filter import DEFAULT_IGNORE_POLICY, IgnorePolicy, filter_diff_by_ignored_files
from .diff_parser import TranslationChange, parse_translation_changes_from_diff
from .line_locator import get_line_number
from .pattern_matcher import to_pattern
from .translations import get_nested_value

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_IGNORE_POLICY",
    "IgnorePolicy",
    "filter_diff_by_ignored_files",
    "TranslationChange",
    "parse_translation_changes_from_diff",
    "get_line_number",
    "to_pattern",
    "get_nested_value",
]
