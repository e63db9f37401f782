"""
JSON Schema keyword parser.

Fills one ``SchemaNode`` from a raw schema object. Nested schemas are not
parsed here: they are handed to a ``build_child`` callback supplied by the
reference resolver, which owns caching and ``$ref`` handling.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from ..exceptions import SchemaStructureError
from .nodes import PRIMITIVE_TYPES, SchemaNode

logger = logging.getLogger(__name__)

# build_child(raw_schema, *path_segments) -> node for that nested location
ChildBuilder = Callable[..., SchemaNode]


class SchemaParser:
    """Parses the keywords of one raw schema object into a SchemaNode."""

    def parse_into(self, node: SchemaNode, raw: Any, build_child: ChildBuilder) -> None:
        """
        Parse ``raw`` into ``node``.

        Args:
            node: The (empty) node to fill
            raw: The raw schema: a dict, or a boolean schema
            build_child: Callback building nested schemas
        """
        if raw is True:
            return
        if raw is False:
            # false accepts nothing: the negation of the empty schema
            node.not_ = build_child({}, "not")
            return
        if not isinstance(raw, dict):
            raise SchemaStructureError(node.pointer, "schema", f"expected an object or boolean, got {type(raw).__name__}")

        self._parse_metadata(node, raw)
        self._parse_type(node, raw)
        self._parse_object_keywords(node, raw, build_child)
        self._parse_array_keywords(node, raw, build_child)
        self._parse_combinators(node, raw, build_child)
        self._parse_value_constraints(node, raw)
        self._parse_string_constraints(node, raw)
        self._parse_numeric_constraints(node, raw)
        self._parse_discriminator(node, raw, build_child)
        self._parse_definitions(node, raw, build_child)

    def _parse_metadata(self, node: SchemaNode, raw: dict[str, Any]) -> None:
        """Extract documentation, naming hints and x-* extensions."""
        node.title = self._optional_string(node, raw, "title")
        node.description = self._optional_string(node, raw, "description")
        node.format = self._optional_string(node, raw, "format")
        node.type_name_hint = self._optional_string(node, raw, "typeName") or self._optional_string(node, raw, "x-typeName")
        if "default" in raw:
            node.default = raw["default"]
            node.has_default = True
        for key, value in raw.items():
            if key.startswith("x-"):
                node.extensions[key] = value

    def _parse_type(self, node: SchemaNode, raw: dict[str, Any]) -> None:
        """Parse ``type`` as a single tag or a list of tags."""
        if "type" not in raw:
            return
        type_value = raw["type"]
        type_names = type_value if isinstance(type_value, list) else [type_value]
        for type_name in type_names:
            if type_name not in PRIMITIVE_TYPES:
                raise SchemaStructureError(node.pointer, "type", f"unknown type {type_name!r}")
        node.types = set(type_names)

    def _parse_object_keywords(self, node: SchemaNode, raw: dict[str, Any], build_child: ChildBuilder) -> None:
        """Parse properties, required, additionalProperties and friends."""
        properties = raw.get("properties", {})
        if not isinstance(properties, dict):
            raise SchemaStructureError(node.pointer, "properties", "expected an object")
        for name, prop_schema in properties.items():
            node.properties[name] = build_child(prop_schema, "properties", name)

        required = raw.get("required", [])
        if isinstance(required, bool):
            # draft-3 style "required": true on a property; nothing to record at this level
            logger.debug("Ignoring boolean 'required' at %s", node.pointer)
        elif isinstance(required, list) and all(isinstance(r, str) for r in required):
            for name in required:
                if name not in node.required:
                    node.required.append(name)
        else:
            raise SchemaStructureError(node.pointer, "required", "expected a list of property names")

        if "additionalProperties" in raw:
            additional = raw["additionalProperties"]
            if isinstance(additional, bool):
                node.additional_properties = additional
            else:
                node.additional_properties = build_child(additional, "additionalProperties")

        pattern_properties = raw.get("patternProperties", {})
        if not isinstance(pattern_properties, dict):
            raise SchemaStructureError(node.pointer, "patternProperties", "expected an object")
        for pattern, prop_schema in pattern_properties.items():
            self._check_pattern(node, "patternProperties", pattern)
            node.pattern_properties[pattern] = build_child(prop_schema, "patternProperties", pattern)

        node.min_properties = self._optional_count(node, raw, "minProperties")
        node.max_properties = self._optional_count(node, raw, "maxProperties")

    def _parse_array_keywords(self, node: SchemaNode, raw: dict[str, Any], build_child: ChildBuilder) -> None:
        """Parse items (single schema or tuple form) and array constraints."""
        if "items" in raw:
            items = raw["items"]
            if isinstance(items, list):
                node.tuple_items = [build_child(item, "items", i) for i, item in enumerate(items)]
            else:
                node.items = build_child(items, "items")

        if "additionalItems" in raw:
            additional = raw["additionalItems"]
            if isinstance(additional, bool):
                node.additional_items = additional
            else:
                node.additional_items = build_child(additional, "additionalItems")

        node.min_items = self._optional_count(node, raw, "minItems")
        node.max_items = self._optional_count(node, raw, "maxItems")
        node.unique_items = bool(raw.get("uniqueItems", False))

    def _parse_combinators(self, node: SchemaNode, raw: dict[str, Any], build_child: ChildBuilder) -> None:
        """Parse allOf / oneOf / anyOf / not."""
        for keyword, target in (("allOf", node.all_of), ("oneOf", node.one_of), ("anyOf", node.any_of)):
            if keyword not in raw:
                continue
            members = raw[keyword]
            if not isinstance(members, list):
                raise SchemaStructureError(node.pointer, keyword, "expected a list of schemas")
            for index, member in enumerate(members):
                target.append(build_child(member, keyword, index))

        if "not" in raw:
            node.not_ = build_child(raw["not"], "not")

    def _parse_value_constraints(self, node: SchemaNode, raw: dict[str, Any]) -> None:
        """Parse enum and const."""
        if "enum" in raw:
            if not isinstance(raw["enum"], list):
                raise SchemaStructureError(node.pointer, "enum", "expected a list of values")
            node.enum = list(raw["enum"])
        if "const" in raw:
            node.const = raw["const"]
            node.has_const = True

    def _parse_string_constraints(self, node: SchemaNode, raw: dict[str, Any]) -> None:
        """Parse minLength, maxLength and pattern."""
        node.min_length = self._optional_count(node, raw, "minLength")
        node.max_length = self._optional_count(node, raw, "maxLength")
        pattern = self._optional_string(node, raw, "pattern")
        if pattern is not None:
            self._check_pattern(node, "pattern", pattern)
            node.pattern = pattern

    def _parse_numeric_constraints(self, node: SchemaNode, raw: dict[str, Any]) -> None:
        """Parse numeric bounds, normalizing draft-4 boolean exclusive bounds."""
        node.minimum = self._optional_number(node, raw, "minimum")
        node.maximum = self._optional_number(node, raw, "maximum")
        node.multiple_of = self._optional_number(node, raw, "multipleOf")
        if node.multiple_of is not None and node.multiple_of <= 0:
            raise SchemaStructureError(node.pointer, "multipleOf", "must be greater than 0")

        exclusive_minimum = raw.get("exclusiveMinimum")
        if isinstance(exclusive_minimum, bool):
            if exclusive_minimum and node.minimum is not None:
                node.exclusive_minimum, node.minimum = node.minimum, None
        else:
            node.exclusive_minimum = self._optional_number(node, raw, "exclusiveMinimum")

        exclusive_maximum = raw.get("exclusiveMaximum")
        if isinstance(exclusive_maximum, bool):
            if exclusive_maximum and node.maximum is not None:
                node.exclusive_maximum, node.maximum = node.maximum, None
        else:
            node.exclusive_maximum = self._optional_number(node, raw, "exclusiveMaximum")

    def _parse_discriminator(self, node: SchemaNode, raw: dict[str, Any], build_child: ChildBuilder) -> None:
        """Parse ``discriminator`` (string or OpenAPI object form) and ``x-discriminator``."""
        discriminator = raw.get("discriminator", raw.get("x-discriminator"))
        if discriminator is None:
            return
        if isinstance(discriminator, str):
            node.discriminator_property_name = discriminator
            return
        if not isinstance(discriminator, dict) or not isinstance(discriminator.get("propertyName"), str):
            raise SchemaStructureError(node.pointer, "discriminator", "expected a property name or an object with 'propertyName'")

        node.discriminator_property_name = discriminator["propertyName"]
        mapping = discriminator.get("mapping", {})
        if not isinstance(mapping, dict):
            raise SchemaStructureError(node.pointer, "discriminator", "'mapping' must be an object")
        for key, target in mapping.items():
            if not isinstance(target, str):
                raise SchemaStructureError(node.pointer, "discriminator", f"mapping for {key!r} must be a $ref string")
            node.discriminator_mapping[key] = build_child({"$ref": target}, "discriminator", "mapping", key)

    def _parse_definitions(self, node: SchemaNode, raw: dict[str, Any], build_child: ChildBuilder) -> None:
        """Parse ``definitions`` and ``$defs`` (document order, definitions first)."""
        for keyword in ("definitions", "$defs"):
            definitions = raw.get(keyword, {})
            if not isinstance(definitions, dict):
                raise SchemaStructureError(node.pointer, keyword, "expected an object")
            for name, def_schema in definitions.items():
                # Skip comment entries
                if isinstance(def_schema, str) or name.startswith("_comment"):
                    continue
                node.definitions[name] = build_child(def_schema, keyword, name)

    def _check_pattern(self, node: SchemaNode, keyword: str, pattern: str) -> None:
        try:
            re.compile(pattern)
        except re.error as e:
            raise SchemaStructureError(node.pointer, keyword, f"invalid regular expression {pattern!r}: {e}") from e

    def _optional_string(self, node: SchemaNode, raw: dict[str, Any], keyword: str) -> str | None:
        value = raw.get(keyword)
        if value is None:
            return None
        if not isinstance(value, str):
            raise SchemaStructureError(node.pointer, keyword, "expected a string")
        return value

    def _optional_count(self, node: SchemaNode, raw: dict[str, Any], keyword: str) -> int | None:
        value = raw.get(keyword)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0 or int(value) != value:
            raise SchemaStructureError(node.pointer, keyword, "expected a non-negative integer")
        return int(value)

    def _optional_number(self, node: SchemaNode, raw: dict[str, Any], keyword: str) -> float | None:
        value = raw.get(keyword)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaStructureError(node.pointer, keyword, "expected a number")
        return value
