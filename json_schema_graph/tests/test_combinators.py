"""
Tests for the combinator evaluator functions.
"""

import unittest

import pytest

from json_schema_graph.analyzer.reference_resolver import resolve_schema
from json_schema_graph.combinators import (
    CombinatorKind,
    combinator_kinds,
    evaluate_all_of,
    evaluate_any_of,
    evaluate_not,
    evaluate_one_of,
    flatten_all_of,
    is_dictionary_shaped,
    is_object_shaped,
    json_kind,
    nullable_branch,
    type_matches,
)
from json_schema_graph.schema_ast.nodes import SchemaNode


class RecordingBranch:
    """Branch callback returning canned findings per member and recording calls."""

    def __init__(self, findings_by_member):
        self.findings_by_member = findings_by_member
        self.calls = []

    def __call__(self, member):
        self.calls.append(member)
        return list(self.findings_by_member[id(member)])


class TestJsonKind(unittest.TestCase):
    def test_kinds(self):
        self.assertEqual(json_kind(None), "null")
        self.assertEqual(json_kind(True), "boolean")
        self.assertEqual(json_kind(3), "integer")
        self.assertEqual(json_kind(3.0), "integer")
        self.assertEqual(json_kind(3.5), "number")
        self.assertEqual(json_kind("x"), "string")
        self.assertEqual(json_kind([1]), "array")
        self.assertEqual(json_kind({"a": 1}), "object")

    def test_non_json_value(self):
        with self.assertRaises(TypeError):
            json_kind(object())


class TestTypeMatching(unittest.TestCase):
    def test_unconstrained(self):
        node = SchemaNode()
        for kind in ("null", "boolean", "integer", "number", "string", "array", "object"):
            self.assertTrue(type_matches(node, kind))

    def test_union(self):
        node = SchemaNode(types={"string", "null"})
        self.assertTrue(type_matches(node, "null"))
        self.assertTrue(type_matches(node, "string"))
        self.assertFalse(type_matches(node, "integer"))

    def test_number_accepts_integer(self):
        self.assertTrue(type_matches(SchemaNode(types={"number"}), "integer"))
        self.assertFalse(type_matches(SchemaNode(types={"integer"}), "number"))


class TestShapes(unittest.TestCase):
    def test_combinator_kinds(self):
        self.assertEqual(combinator_kinds(SchemaNode()), [CombinatorKind.PLAIN])
        node = SchemaNode(all_of=[SchemaNode()], any_of=[SchemaNode()], not_=SchemaNode())
        self.assertEqual(combinator_kinds(node), [CombinatorKind.ALL_OF, CombinatorKind.ANY_OF, CombinatorKind.NOT])

    def test_object_shaped(self):
        self.assertTrue(is_object_shaped(SchemaNode(properties={"a": SchemaNode()})))
        self.assertTrue(is_object_shaped(SchemaNode(types={"object", "null"})))
        self.assertFalse(is_object_shaped(SchemaNode(types={"object", "string"})))
        self.assertFalse(is_object_shaped(SchemaNode(types={"string"})))
        self.assertFalse(is_object_shaped(SchemaNode(types={"object"}, enum=[{}])))
        base = SchemaNode(types={"object"})
        self.assertTrue(is_object_shaped(SchemaNode(all_of=[base])))

    def test_object_shape_of_cyclic_all_of(self):
        graph = resolve_schema({"allOf": [{"$ref": "#"}]})
        self.assertFalse(is_object_shaped(graph.root))

    def test_dictionary_shaped(self):
        self.assertTrue(is_dictionary_shaped(SchemaNode(types={"object"}, additional_properties=SchemaNode())))
        self.assertTrue(is_dictionary_shaped(SchemaNode(additional_properties=True)))
        self.assertFalse(is_dictionary_shaped(SchemaNode(additional_properties=False)))
        self.assertFalse(is_dictionary_shaped(SchemaNode(types={"object"})))
        self.assertFalse(
            is_dictionary_shaped(SchemaNode(properties={"a": SchemaNode()}, additional_properties=SchemaNode()))
        )

    def test_flatten_all_of(self):
        first = SchemaNode(properties={"a": SchemaNode()})
        text = SchemaNode(types={"string"})
        second = SchemaNode(types={"object"})
        node = SchemaNode(all_of=[first, text, second])
        self.assertEqual(flatten_all_of(node), [first, second])

    def test_flatten_all_of_is_transitive(self):
        inner = SchemaNode(properties={"b": SchemaNode()})
        middle = SchemaNode(properties={"a": SchemaNode()}, all_of=[inner])
        node = SchemaNode(all_of=[middle, inner])
        self.assertEqual(flatten_all_of(node), [middle, inner])

    def test_flatten_all_of_self_reference(self):
        node = SchemaNode(properties={"a": SchemaNode()})
        node.all_of.append(node)
        self.assertEqual(flatten_all_of(node), [])

    def test_nullable_branch(self):
        value = SchemaNode(types={"string"})
        null = SchemaNode(types={"null"})
        self.assertIs(nullable_branch([value, null]), value)
        self.assertIs(nullable_branch([null, value]), value)
        self.assertIsNone(nullable_branch([value, SchemaNode(types={"integer"})]))
        self.assertIsNone(nullable_branch([value, null, SchemaNode()]))


class TestCombinatorEvaluation(unittest.TestCase):
    def setUp(self):
        self.ok = SchemaNode(pointer="#/ok")
        self.ok2 = SchemaNode(pointer="#/ok2")
        self.ok3 = SchemaNode(pointer="#/ok3")
        self.bad = SchemaNode(pointer="#/bad")
        self.branch = RecordingBranch(
            {id(self.ok): [], id(self.ok2): [], id(self.ok3): [], id(self.bad): ["bad finding"]}
        )

    def test_all_of_concatenates(self):
        self.assertEqual(evaluate_all_of([self.bad, self.ok, self.bad], self.branch), ["bad finding", "bad finding"])
        self.assertEqual(evaluate_all_of([self.ok, self.ok2], self.branch), [])

    def test_any_of_stops_at_first_match(self):
        matched, failures = evaluate_any_of([self.bad, self.ok, self.ok2], self.branch)
        self.assertTrue(matched)
        self.assertEqual(failures, [["bad finding"]])
        self.assertEqual(self.branch.calls, [self.bad, self.ok])

    def test_any_of_without_match(self):
        matched, failures = evaluate_any_of([self.bad, self.bad], self.branch)
        self.assertFalse(matched)
        self.assertEqual(len(failures), 2)

    def test_one_of_exactly_one(self):
        matches, failures = evaluate_one_of([self.bad, self.ok], self.branch)
        self.assertEqual(matches, 1)
        self.assertEqual(failures, [["bad finding"]])

    def test_one_of_stops_at_second_match(self):
        matches, _ = evaluate_one_of([self.ok, self.ok2, self.ok3], self.branch)
        self.assertEqual(matches, 2)
        self.assertEqual(self.branch.calls, [self.ok, self.ok2])

    def test_one_of_without_match(self):
        matches, failures = evaluate_one_of([self.bad], self.branch)
        self.assertEqual(matches, 0)
        self.assertEqual(failures, [["bad finding"]])

    def test_not(self):
        self.assertTrue(evaluate_not(self.bad, self.branch))
        self.assertFalse(evaluate_not(self.ok, self.branch))


if __name__ == "__main__":
    pytest.main([__file__])
