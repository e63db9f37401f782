"""
Unit tests for validation rule objects.
"""

import unittest

from json_schema_graph.schema_ast.nodes import SchemaNode
from json_schema_graph.validation.errors import ValidationErrorKind
from json_schema_graph.validation.rules import (
    ConstRule,
    EnumRule,
    ExclusiveMaximumRule,
    ExclusiveMinimumRule,
    MaximumRule,
    MaxItemsRule,
    MaxLengthRule,
    MinimumRule,
    MinLengthRule,
    MinPropertiesRule,
    MultipleOfRule,
    PatternRule,
    UniqueItemsRule,
)


class TestStringRules(unittest.TestCase):
    """Test string keyword rules"""

    def test_min_length_rule(self):
        node = SchemaNode(min_length=3, pointer="#/properties/name")
        self.assertIsNone(MinLengthRule().check(node, "abc", "#/name"))
        error = MinLengthRule().check(node, "ab", "#/name")
        self.assertEqual(error.kind, ValidationErrorKind.STRING_TOO_SHORT)
        self.assertEqual(error.expected, 3)
        self.assertEqual(error.path, "#/name")
        self.assertEqual(error.schema_path, "#/properties/name")
        self.assertIn("at least 3 characters", error.message)

    def test_max_length_rule(self):
        node = SchemaNode(max_length=2)
        self.assertIsNone(MaxLengthRule().check(node, "ab", "#"))
        self.assertEqual(MaxLengthRule().check(node, "abc", "#").kind, ValidationErrorKind.STRING_TOO_LONG)

    def test_pattern_rule(self):
        node = SchemaNode(pattern="^[a-z]+@[a-z]+\\.[a-z]+$")
        self.assertIsNone(PatternRule().check(node, "me@example.com", "#"))
        error = PatternRule().check(node, "me@example", "#")
        self.assertEqual(error.kind, ValidationErrorKind.PATTERN_MISMATCH)
        self.assertIn("must match pattern", error.message)

    def test_rule_without_keyword_does_not_apply(self):
        node = SchemaNode()
        self.assertIsNone(MinLengthRule().check(node, "", "#"))
        self.assertIsNone(PatternRule().check(node, "anything", "#"))


class TestNumberRules(unittest.TestCase):
    """Test numeric keyword rules"""

    def test_minimum_and_maximum(self):
        node = SchemaNode(minimum=0, maximum=10)
        self.assertIsNone(MinimumRule().check(node, 0, "#"))
        self.assertIsNone(MaximumRule().check(node, 10, "#"))
        self.assertEqual(MinimumRule().check(node, -1, "#").kind, ValidationErrorKind.NUMBER_TOO_SMALL)
        self.assertEqual(MaximumRule().check(node, 11, "#").kind, ValidationErrorKind.NUMBER_TOO_LARGE)

    def test_exclusive_bounds(self):
        node = SchemaNode(exclusive_minimum=0, exclusive_maximum=10)
        self.assertEqual(ExclusiveMinimumRule().check(node, 0, "#").kind, ValidationErrorKind.NUMBER_TOO_SMALL)
        self.assertEqual(ExclusiveMaximumRule().check(node, 10, "#").kind, ValidationErrorKind.NUMBER_TOO_LARGE)
        self.assertIsNone(ExclusiveMinimumRule().check(node, 0.5, "#"))

    def test_zero_bound_applies(self):
        self.assertIsNotNone(MinimumRule().check(SchemaNode(minimum=0), -0.5, "#"))

    def test_multiple_of(self):
        self.assertIsNone(MultipleOfRule().check(SchemaNode(multiple_of=0.01), 19.99, "#"))
        self.assertIsNone(MultipleOfRule().check(SchemaNode(multiple_of=3), 9, "#"))
        error = MultipleOfRule().check(SchemaNode(multiple_of=3), 10, "#")
        self.assertEqual(error.kind, ValidationErrorKind.NUMBER_NOT_MULTIPLE_OF)


class TestCollectionRules(unittest.TestCase):
    def test_max_items(self):
        node = SchemaNode(max_items=1)
        self.assertEqual(MaxItemsRule().check(node, [1, 2], "#").expected, 1)

    def test_unique_items(self):
        node = SchemaNode(unique_items=True)
        self.assertIsNone(UniqueItemsRule().check(node, [{"a": 1}, {"a": 2}], "#"))
        self.assertIsNotNone(UniqueItemsRule().check(node, [{"a": 1, "b": 2}, {"b": 2, "a": 1}], "#"))
        self.assertIsNone(UniqueItemsRule().check(SchemaNode(), [1, 1], "#"))

    def test_min_properties(self):
        node = SchemaNode(min_properties=1)
        self.assertEqual(MinPropertiesRule().check(node, {}, "#").kind, ValidationErrorKind.TOO_FEW_PROPERTIES)


class TestValueRules(unittest.TestCase):
    def test_const_null(self):
        node = SchemaNode(const=None, has_const=True)
        self.assertIsNone(ConstRule().check(node, None, "#"))
        self.assertEqual(ConstRule().check(node, False, "#").kind, ValidationErrorKind.NOT_CONSTANT)

    def test_const_absent(self):
        self.assertIsNone(ConstRule().check(SchemaNode(), "anything", "#"))

    def test_enum(self):
        node = SchemaNode(enum=["red", "green", None])
        self.assertIsNone(EnumRule().check(node, None, "#"))
        error = EnumRule().check(node, "blue", "#")
        self.assertEqual(error.kind, ValidationErrorKind.NOT_IN_ENUMERATION)
        self.assertEqual(error.expected, ("red", "green", None))

    def test_enum_distinguishes_booleans(self):
        node = SchemaNode(enum=[0])
        self.assertIsNotNone(EnumRule().check(node, False, "#"))
        self.assertIsNone(EnumRule().check(node, 0.0, "#"))


if __name__ == "__main__":
    unittest.main()
