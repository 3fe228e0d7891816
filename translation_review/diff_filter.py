"""
Path-based filtering of unified diffs.

Removes whole file sections (header included) for paths nobody wants
reviewed: dependency manifests and lock files, vendored dependencies,
generated native-binding code and binary assets. Text before the first
``diff --git`` header is kept verbatim, and kept sections stay in their
original order.

The ignore rules are an ``IgnorePolicy`` value, passed in by the caller,
so different runs and tests can use different rules side by side.
"""

import re
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .utils.logger import get_logger

# GitHub unified diff header: diff --git a/path b/path
# Paths are quoted when they contain special characters: diff --git "a/path" "b/path"
DIFF_HEADER_PATTERN = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$', re.MULTILINE)

DEFAULT_IGNORED_FILES: Tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
)

DEFAULT_IGNORED_PREFIXES: Tuple[str, ...] = (
    "node_modules/",
    "android/app/build/generated/",
    "ios/build/generated/",
)

DEFAULT_IGNORED_SUFFIXES: Tuple[str, ...] = (
    ".png",
    "Podfile.lock",
)

logger = get_logger(__name__)


def unquote_path(path: str) -> str:
    """Strip one pair of surrounding double quotes (and a stray CR) from a header path."""
    path = path.rstrip("\r")
    if path.startswith('"'):
        path = path[1:]
    if path.endswith('"'):
        path = path[:-1]
    return path


@dataclass(frozen=True)
class IgnorePolicy:
    """
    Rules deciding which diff sections are dropped.

    A path is ignored when it equals one of ``exact_names``, starts with
    one of ``prefixes`` or ends with one of ``suffixes``. Paths are
    repository relative and compared as-is.
    """
    exact_names: FrozenSet[str] = field(default_factory=lambda: frozenset(DEFAULT_IGNORED_FILES))
    prefixes: Tuple[str, ...] = DEFAULT_IGNORED_PREFIXES
    suffixes: Tuple[str, ...] = DEFAULT_IGNORED_SUFFIXES

    @classmethod
    def from_patterns(
        cls,
        exact_names: Optional[Iterable[str]] = None,
        prefixes: Optional[Iterable[str]] = None,
        suffixes: Optional[Iterable[str]] = None
    ) -> "IgnorePolicy":
        """
        Build a policy from plain iterables.

        Any argument left as None falls back to the default rule set for
        that kind; blank entries are dropped.
        """
        return cls(
            exact_names=frozenset(_clean(exact_names, DEFAULT_IGNORED_FILES)),
            prefixes=tuple(_clean(prefixes, DEFAULT_IGNORED_PREFIXES)),
            suffixes=tuple(_clean(suffixes, DEFAULT_IGNORED_SUFFIXES)),
        )

    def extend(
        self,
        exact_names: Iterable[str] = (),
        prefixes: Iterable[str] = (),
        suffixes: Iterable[str] = ()
    ) -> "IgnorePolicy":
        """Return a new policy with additional rules."""
        return replace(
            self,
            exact_names=self.exact_names | frozenset(exact_names),
            prefixes=self.prefixes + tuple(prefixes),
            suffixes=self.suffixes + tuple(suffixes),
        )

    def is_ignored(self, path: str) -> bool:
        """Check whether a diff section for ``path`` should be dropped."""
        if path in self.exact_names:
            return True
        if self.prefixes and path.startswith(self.prefixes):
            return True
        return bool(self.suffixes) and path.endswith(self.suffixes)


def _clean(values: Optional[Iterable[str]], default: Tuple[str, ...]) -> List[str]:
    if values is None:
        return list(default)
    return [value.strip() for value in values if value and value.strip()]


DEFAULT_IGNORE_POLICY = IgnorePolicy()


def filter_diff_by_ignored_files(
    diff: Optional[str],
    policy: IgnorePolicy = DEFAULT_IGNORE_POLICY
) -> Optional[str]:
    """
    Remove entire diff sections for files matching the ignore policy.

    Args:
        diff: Unified diff text (may be None or empty)
        policy: Rules deciding which paths are dropped

    Returns:
        The diff without ignored sections; the input itself when it is
        empty or contains no ``diff --git`` header
    """
    if not diff:
        return diff

    headers = list(DIFF_HEADER_PATTERN.finditer(diff))
    if not headers:
        return diff

    kept: List[str] = [diff[:headers[0].start()]]
    dropped: List[str] = []

    for index, header in enumerate(headers):
        start = header.start()
        end = headers[index + 1].start() if index + 1 < len(headers) else len(diff)
        path = unquote_path(header.group(2))

        if policy.is_ignored(path):
            dropped.append(path)
        else:
            kept.append(diff[start:end])

    if dropped:
        logger.debug(
            f"Dropped {len(dropped)} ignored file section(s) from diff",
            extra={"ignored_paths": dropped}
        )

    return "".join(kept)
