"""
Utility functions for the JSON Schema graph engine.
"""

import math
import re
from typing import Any

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

ROOT_POINTER = "#"


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize the first letter of each word and join them together."""
    return "".join(word[0].upper() + word[1:] for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "ReportID" -> "ReportID"
        "vehicle.json" -> "VehicleJson"

    Args:
        text: The text to convert

    Returns:
        PascalCase string (may start with a digit when the text does)
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def escape_pointer_segment(segment: str | int) -> str:
    """Escape one JSON pointer segment (``~`` -> ``~0``, ``/`` -> ``~1``)."""
    return str(segment).replace("~", "~0").replace("/", "~1")


def unescape_pointer_segment(segment: str) -> str:
    """Reverse ``escape_pointer_segment``."""
    return segment.replace("~1", "/").replace("~0", "~")


def join_pointer(pointer: str, *segments: str | int) -> str:
    """Append escaped segments to a ``#``-rooted JSON pointer."""
    return pointer + "".join("/" + escape_pointer_segment(s) for s in segments)


def split_pointer(pointer: str) -> list[str]:
    """Split a ``#``-rooted JSON pointer into unescaped segments."""
    body = pointer[1:] if pointer.startswith("#") else pointer
    if not body:
        return []
    return [unescape_pointer_segment(s) for s in body.split("/")[1:]]


def last_pointer_segment(pointer: str) -> str:
    """Return the last unescaped segment of a pointer, or an empty string for the root."""
    segments = split_pointer(pointer)
    return segments[-1] if segments else ""


def json_equal(left: Any, right: Any) -> bool:
    """Compare two JSON values with JSON semantics.

    Booleans never equal numbers (``True != 1``), numbers compare by value
    (``1 == 1.0``), objects compare regardless of key order.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[k], right[k]) for k in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))
    return type(left) is type(right) and left == right


def is_multiple_of(value: float, divisor: float) -> bool:
    """Check ``value`` is an integral multiple of ``divisor``, tolerating float rounding."""
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    quotient = value / divisor
    if math.isinf(quotient):
        return False
    return math.isclose(quotient, round(quotient), rel_tol=1e-9, abs_tol=1e-9)
