"""
Keyword rule objects for scalar constraints.

Each rule represents one JSON Schema constraint keyword and knows how to
check a single instance value against it. Structural keywords (properties,
items, combinators) are walked by the validator itself.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from ..schema_ast.nodes import SchemaNode
from ..utils import is_multiple_of, json_equal
from .errors import ValidationError, ValidationErrorKind


class ValidationRule(ABC):
    """Base class for all keyword rules.

    Rules hold no per-call state; the module-level rule tuples are shared
    by every validation run.
    """

    kind: ValidationErrorKind
    keyword: str = ""

    def applies(self, node: SchemaNode) -> bool:
        """
        Whether the node carries this rule's keyword.
        Default: the constraint value is present.
        """
        return self.constraint(node) is not None

    @abstractmethod
    def constraint(self, node: SchemaNode) -> Any:
        """Return the keyword value from the node (None when absent)."""

    @abstractmethod
    def is_satisfied(self, value: Any, constraint: Any) -> bool:
        """Check an instance value against the keyword value."""

    def expected(self, constraint: Any) -> Any:
        """Value reported as ``expected`` in the finding."""
        return constraint

    def check(self, node: SchemaNode, value: Any, path: str) -> ValidationError | None:
        """
        Check one value.

        Args:
            node: Schema node carrying the keyword
            value: Instance value (already known to be of the rule's kind)
            path: JSON pointer of the value in the instance

        Returns:
            A finding, or None when the value satisfies the rule
        """
        if not self.applies(node):
            return None
        constraint = self.constraint(node)
        if self.is_satisfied(value, constraint):
            return None
        return ValidationError(
            kind=self.kind,
            path=path,
            expected=self.expected(constraint),
            schema_path=node.pointer,
        )


class MinLengthRule(ValidationRule):
    kind = ValidationErrorKind.STRING_TOO_SHORT
    keyword = "minLength"

    def constraint(self, node):
        return node.min_length

    def is_satisfied(self, value, constraint):
        return len(value) >= constraint


class MaxLengthRule(ValidationRule):
    kind = ValidationErrorKind.STRING_TOO_LONG
    keyword = "maxLength"

    def constraint(self, node):
        return node.max_length

    def is_satisfied(self, value, constraint):
        return len(value) <= constraint


class PatternRule(ValidationRule):
    """Unanchored regular expression search, as JSON Schema specifies."""

    kind = ValidationErrorKind.PATTERN_MISMATCH
    keyword = "pattern"

    def constraint(self, node):
        return node.pattern

    def is_satisfied(self, value, constraint):
        return re.search(constraint, value) is not None


class MinimumRule(ValidationRule):
    kind = ValidationErrorKind.NUMBER_TOO_SMALL
    keyword = "minimum"

    def constraint(self, node):
        return node.minimum

    def is_satisfied(self, value, constraint):
        return value >= constraint


class ExclusiveMinimumRule(ValidationRule):
    kind = ValidationErrorKind.NUMBER_TOO_SMALL
    keyword = "exclusiveMinimum"

    def constraint(self, node):
        return node.exclusive_minimum

    def is_satisfied(self, value, constraint):
        return value > constraint


class MaximumRule(ValidationRule):
    kind = ValidationErrorKind.NUMBER_TOO_LARGE
    keyword = "maximum"

    def constraint(self, node):
        return node.maximum

    def is_satisfied(self, value, constraint):
        return value <= constraint


class ExclusiveMaximumRule(ValidationRule):
    kind = ValidationErrorKind.NUMBER_TOO_LARGE
    keyword = "exclusiveMaximum"

    def constraint(self, node):
        return node.exclusive_maximum

    def is_satisfied(self, value, constraint):
        return value < constraint


class MultipleOfRule(ValidationRule):
    kind = ValidationErrorKind.NUMBER_NOT_MULTIPLE_OF
    keyword = "multipleOf"

    def constraint(self, node):
        return node.multiple_of

    def is_satisfied(self, value, constraint):
        return is_multiple_of(value, constraint)


class MinItemsRule(ValidationRule):
    kind = ValidationErrorKind.TOO_FEW_ITEMS
    keyword = "minItems"

    def constraint(self, node):
        return node.min_items

    def is_satisfied(self, value, constraint):
        return len(value) >= constraint


class MaxItemsRule(ValidationRule):
    kind = ValidationErrorKind.TOO_MANY_ITEMS
    keyword = "maxItems"

    def constraint(self, node):
        return node.max_items

    def is_satisfied(self, value, constraint):
        return len(value) <= constraint


class UniqueItemsRule(ValidationRule):
    kind = ValidationErrorKind.ITEMS_NOT_UNIQUE
    keyword = "uniqueItems"

    def applies(self, node):
        return node.unique_items

    def constraint(self, node):
        return node.unique_items

    def is_satisfied(self, value, constraint):
        for i, item in enumerate(value):
            for other in value[i + 1 :]:
                if json_equal(item, other):
                    return False
        return True


class MinPropertiesRule(ValidationRule):
    kind = ValidationErrorKind.TOO_FEW_PROPERTIES
    keyword = "minProperties"

    def constraint(self, node):
        return node.min_properties

    def is_satisfied(self, value, constraint):
        return len(value) >= constraint


class MaxPropertiesRule(ValidationRule):
    kind = ValidationErrorKind.TOO_MANY_PROPERTIES
    keyword = "maxProperties"

    def constraint(self, node):
        return node.max_properties

    def is_satisfied(self, value, constraint):
        return len(value) <= constraint


class ConstRule(ValidationRule):
    """``const`` may legitimately be null, so presence comes from ``has_const``."""

    kind = ValidationErrorKind.NOT_CONSTANT
    keyword = "const"

    def applies(self, node):
        return node.has_const

    def constraint(self, node):
        return node.const

    def is_satisfied(self, value, constraint):
        return json_equal(value, constraint)


class EnumRule(ValidationRule):
    kind = ValidationErrorKind.NOT_IN_ENUMERATION
    keyword = "enum"

    def constraint(self, node):
        return node.enum

    def is_satisfied(self, value, constraint):
        return any(json_equal(value, candidate) for candidate in constraint)

    def expected(self, constraint):
        return tuple(constraint)


STRING_RULES: tuple[ValidationRule, ...] = (MinLengthRule(), MaxLengthRule(), PatternRule())

NUMBER_RULES: tuple[ValidationRule, ...] = (
    MinimumRule(),
    ExclusiveMinimumRule(),
    MaximumRule(),
    ExclusiveMaximumRule(),
    MultipleOfRule(),
)

ARRAY_RULES: tuple[ValidationRule, ...] = (MinItemsRule(), MaxItemsRule(), UniqueItemsRule())

OBJECT_RULES: tuple[ValidationRule, ...] = (MinPropertiesRule(), MaxPropertiesRule())

VALUE_RULES: tuple[ValidationRule, ...] = (ConstRule(), EnumRule())
