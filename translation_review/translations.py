"""
Reference (source-language) translation lookups.

The source-language file is a nested JSON object whose leaves are
strings, e.g. ``{"charger": {"zero": "No charges"}}``. Translation diffs
mention keys either flat (``"charger.zero"`` as one literal key) or as
the last segment inside a nested object, so lookups try the literal key
first and then walk the dotted path.
"""

import json
from typing import Any, Dict, Mapping, Optional, Sequence

from .utils.logger import get_logger

logger = get_logger(__name__)

KEY_SEPARATOR = "."


def serialize_value(value: Any) -> str:
    """
    Render a reference value as a single line of text.

    Strings are returned verbatim. Anything else (a pluralization group,
    a list, a number) is serialized as compact JSON, which is deterministic
    and parses back into the same structure.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _child(current: Any, segment: str) -> Any:
    """Step one segment down, or raise KeyError when there is no such child."""
    if isinstance(current, Mapping):
        return current[segment]
    if isinstance(current, Sequence) and not isinstance(current, str) and segment.isdigit():
        try:
            return current[int(segment)]
        except IndexError:
            raise KeyError(segment) from None
    raise KeyError(segment)


def get_nested_value(mapping: Optional[Mapping[str, Any]], key: str) -> Optional[str]:
    """
    Get a reference value using a direct key or a dot-separated path.

    Args:
        mapping: Parsed source-language translations (may be None)
        key: Translation key, e.g. ``starting_point`` or ``charger.zero``

    Returns:
        The string value, the JSON serialization of a non-string value,
        or None when the key cannot be resolved
    """
    if mapping is None:
        return None

    if key in mapping:
        return serialize_value(mapping[key])

    current: Any = mapping
    for segment in key.split(KEY_SEPARATOR):
        try:
            current = _child(current, segment)
        except KeyError:
            return None

    return serialize_value(current)


def load_reference_translations(content: Optional[str], source: str = "en.json") -> Dict[str, Any]:
    """
    Parse the source-language file.

    A missing, unparseable or non-object file yields an empty mapping, so
    extraction still runs and every change gets the "no source" sentinel.

    Args:
        content: Raw file text, or None if it could not be fetched
        source: File name, used in log messages

    Returns:
        Parsed translations, or an empty dict
    """
    if not content:
        logger.warning(f"Could not fetch {source} for reference")
        return {}

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(
            f"Failed to parse {source}",
            extra={"source_file": source, "error_message": str(e), "error_line": e.lineno}
        )
        return {}

    if not isinstance(parsed, dict):
        logger.warning(
            f"{source} is not a JSON object, ignoring it",
            extra={"source_file": source, "value_type": type(parsed).__name__}
        )
        return {}

    return parsed
