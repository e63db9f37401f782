"""
Validation module.

Validates JSON instances against resolved schema nodes and reports typed
findings.
"""

from __future__ import annotations

from .errors import ValidationError, ValidationErrorKind
from .formats import DEFAULT_FORMAT_CHECKERS, FormatChecker, FormatCheckerRegistry, default_format_checkers
from .validator import SchemaValidator, validate

__all__ = [
    "DEFAULT_FORMAT_CHECKERS",
    "FormatChecker",
    "FormatCheckerRegistry",
    "SchemaValidator",
    "ValidationError",
    "ValidationErrorKind",
    "default_format_checkers",
    "validate",
]
