"""
Diff parser for translation changes.

Splits a unified diff into per-file sections and pulls every added
``"key": "value"`` line out of the translation files, pairing it with the
value from the source-language file.

The module provides:
- DiffSection for one file's slice of the diff
- TranslationChange for one added translation entry
- iter_diff_sections() to walk the sections in order
- parse_translation_changes_from_diff() to extract the changes
- get_touched_translation_files() to list the files worth fetching

Example:
    filtered = filter_diff_by_ignored_files(diff)
    changes = parse_translation_changes_from_diff(filtered, english)
    payload = [change.to_dict() for change in changes]
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .diff_filter import DEFAULT_IGNORE_POLICY, DIFF_HEADER_PATTERN, IgnorePolicy, unquote_path
from .translations import get_nested_value
from .utils.logger import get_logger

# Constants
DIFF_HEADER_PREFIX = "diff --git"
ADDED_LINE_MARKER = "+"
NEW_FILE_MARKER = "+++"
DELETED_FILE_MARKER = "deleted file mode"
TRANSLATION_FILE_SUFFIX = ".json"
DEFAULT_SOURCE_FILE = "en.json"
NO_ENGLISH_SOURCE = "(no English source found)"

# "key": "value" on a single line; the value runs to the last quote on the line
KEY_VALUE_PATTERN = re.compile(r'^\s*"([^"]+)":\s*"(.*)"')

logger = get_logger(__name__)


# ==============================
# Data Classes
# ==============================

@dataclass(frozen=True)
class DiffSection:
    """One file's part of a unified diff, from its header to the next header."""
    header: str
    path: Optional[str]
    lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_deleted_file(self) -> bool:
        return len(self.lines) > 1 and self.lines[1].startswith(DELETED_FILE_MARKER)

    def added_lines(self) -> Iterator[str]:
        """Yield added line contents without the leading marker; the +++ banner is skipped."""
        for line in self.lines[1:]:
            if line.startswith(ADDED_LINE_MARKER) and not line.startswith(NEW_FILE_MARKER):
                yield line[len(ADDED_LINE_MARKER):]


@dataclass(frozen=True)
class TranslationChange:
    """An added translation entry and its source-language value."""
    file: str
    key: str
    value: str
    english_value: str
    line: str

    def to_dict(self) -> Dict[str, str]:
        """Wire form used in the review prompt."""
        return {
            "file": self.file,
            "key": self.key,
            "value": self.value,
            "englishValue": self.english_value,
            "line": self.line,
        }


# ==============================
# Section parsing
# ==============================

def parse_header_path(header: str) -> Optional[str]:
    """
    Extract the destination path from a ``diff --git`` header line.

    Handles both ``diff --git a/x b/x`` and ``diff --git "a/x" "b/x"``.

    Returns:
        The unquoted destination path, or None if the line is not a
        well-formed header
    """
    match = DIFF_HEADER_PATTERN.match(header)
    if not match:
        return None
    path = unquote_path(match.group(2))
    return path or None


def iter_diff_sections(diff: Optional[str]) -> Iterator[DiffSection]:
    """
    Walk a unified diff one file section at a time.

    Text before the first header belongs to no section and is skipped.
    A header whose path cannot be parsed still opens a section (with
    ``path=None``) so its lines are never attributed to the previous file.
    """
    if not diff:
        return

    header: Optional[str] = None
    lines: List[str] = []

    for line in diff.split("\n"):
        if line.startswith(DIFF_HEADER_PREFIX):
            if header is not None:
                yield DiffSection(header=header, path=parse_header_path(header), lines=tuple(lines))
            header = line
            lines = [line]
        elif header is not None:
            lines.append(line)

    if header is not None:
        yield DiffSection(header=header, path=parse_header_path(header), lines=tuple(lines))


def is_translation_file(path: Optional[str], source_file: str = DEFAULT_SOURCE_FILE) -> bool:
    """A translation file is any .json file other than the source-language file."""
    return bool(path) and path.endswith(TRANSLATION_FILE_SUFFIX) and path != source_file


# ==============================
# Extraction
# ==============================

def parse_translation_changes_from_diff(
    diff: Optional[str],
    english_translations: Optional[Mapping[str, Any]],
    source_file: str = DEFAULT_SOURCE_FILE
) -> List[TranslationChange]:
    """
    Parse the diff to extract added translation entries.

    Args:
        diff: Unified diff text, usually already filtered
        english_translations: Parsed source-language file
        source_file: Path of the source-language file, never reported

    Returns:
        One TranslationChange per added key/value line, in file order and
        then line order
    """
    changes: List[TranslationChange] = []

    for section in iter_diff_sections(diff):
        if section.path is None:
            logger.debug("Skipping diff section with unparseable header", extra={"header": section.header})
            continue
        if not is_translation_file(section.path, source_file):
            continue

        for content in section.added_lines():
            match = KEY_VALUE_PATTERN.match(content)
            if not match:
                continue

            key, value = match.group(1), match.group(2)
            english_value = get_nested_value(english_translations, key)

            changes.append(TranslationChange(
                file=section.path,
                key=key,
                value=value,
                english_value=english_value if english_value is not None else NO_ENGLISH_SOURCE,
                line=content,
            ))

    return changes


def get_touched_translation_files(
    diff: Optional[str],
    policy: IgnorePolicy = DEFAULT_IGNORE_POLICY,
    source_file: Optional[str] = None
) -> List[str]:
    """
    List the JSON files the diff touches that still exist at the head.

    Deleted files, ignored paths and (when given) the source-language file
    are left out. Order follows the diff; each path appears once.
    """
    paths: List[str] = []

    for section in iter_diff_sections(diff):
        path = section.path
        if not path or section.is_deleted_file or policy.is_ignored(path):
            continue
        if not path.endswith(TRANSLATION_FILE_SUFFIX) or path == source_file:
            continue
        if path not in paths:
            paths.append(path)

    return paths
