"""Finding data structures for the validation engine.

Findings are value objects: a validation run returns an ordered list of
them, never raises on a non-conforming instance.
"""

from __future__ import annotations

import builtins
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class ValidationErrorKind(str, Enum):
    """Taxonomy of validation findings."""

    NO_ADDITIONAL_PROPERTIES_ALLOWED = "NoAdditionalPropertiesAllowed"
    PROPERTY_REQUIRED = "PropertyRequired"
    TYPE_MISMATCH = "TypeMismatch"
    PATTERN_MISMATCH = "PatternMismatch"
    FORMAT_MISMATCH = "FormatMismatch"
    NOT_IN_ENUMERATION = "NotInEnumeration"
    NOT_CONSTANT = "NotConstant"
    TOO_MANY_ITEMS = "TooManyItems"
    TOO_FEW_ITEMS = "TooFewItems"
    ITEMS_NOT_UNIQUE = "ItemsNotUnique"
    ADDITIONAL_ITEMS_NOT_VALID = "AdditionalItemsNotValid"
    TOO_MANY_PROPERTIES = "TooManyProperties"
    TOO_FEW_PROPERTIES = "TooFewProperties"
    STRING_TOO_SHORT = "StringTooShort"
    STRING_TOO_LONG = "StringTooLong"
    NOT_ANY_OF = "NotAnyOf"
    NOT_ONE_OF = "NotOneOf"
    TOO_MANY_ONE_OF = "TooManyOneOf"
    NOT_SCHEMA = "NotSchema"
    NUMBER_TOO_LARGE = "NumberTooLarge"
    NUMBER_TOO_SMALL = "NumberTooSmall"
    NUMBER_NOT_MULTIPLE_OF = "NumberNotMultipleOf"
    RECURSION_LIMIT_EXCEEDED = "RecursionLimitExceeded"


_MESSAGES_FILE = Path(__file__).parent / "messages.json"


@dataclass(frozen=True)
class ValidationError:
    """One validation finding.

    ``path`` is the JSON pointer of the offending instance location (``#``
    for the document root), ``schema_path`` the pointer of the schema node
    that produced the finding. Aggregate combinator findings carry the
    findings of each failed branch in ``branch_errors``.
    """

    kind: ValidationErrorKind
    path: str
    property: str | None = None
    expected: Any = None
    schema_path: str = "#"
    branch_errors: tuple[tuple[ValidationError, ...], ...] = ()

    # Class-level cache for loaded message templates
    _messages = None

    @classmethod
    def _load_messages(cls) -> dict[str, str]:
        if cls._messages is None:
            with open(_MESSAGES_FILE, encoding="utf-8") as f:
                cls._messages = json.load(f)
        return cls._messages

    # The ``property`` field shadows the builtin in the class body
    @builtins.property
    def message(self) -> str:
        """Human readable description built from the kind's message template."""
        template = self._load_messages().get(self.kind.value, "{kind}")
        expected = self.expected
        if isinstance(expected, tuple):
            expected = ", ".join(json.dumps(value) if not isinstance(value, str) else value for value in expected)
        return template.format(kind=self.kind.value, property=self.property, expected=expected, path=self.path)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "path": self.path,
            "property": self.property,
            "expected": list(self.expected) if isinstance(self.expected, tuple) else self.expected,
            "schema_path": self.schema_path,
            "message": self.message,
        }
        if self.branch_errors:
            data["branch_errors"] = [[error.to_dict() for error in branch] for branch in self.branch_errors]
        return data

    def __str__(self) -> str:
        """Return a formatted string representation of the finding."""
        return f"{self.kind.value} at {self.path}: {self.message}"
