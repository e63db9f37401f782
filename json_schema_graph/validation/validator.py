"""
Validation engine.

Walks a resolved schema node against a JSON instance and collects findings
depth-first, in keyword evaluation order:

type -> required -> additionalProperties -> min/maxProperties -> properties
-> patternProperties -> items -> min/maxItems, uniqueItems -> allOf ->
oneOf -> anyOf -> not -> minLength, maxLength, pattern -> format ->
numeric bounds -> const -> enum

The graph is never mutated and all mutable state lives in a per-call
context, so one validator may serve concurrent calls.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from ..analyzer.reference_resolver import ResolvedGraph
from ..combinators import (
    evaluate_all_of,
    evaluate_any_of,
    evaluate_not,
    evaluate_one_of,
    json_kind,
    type_matches,
)
from ..config import ValidationConfig
from ..schema_ast.nodes import PRIMITIVE_TYPES, SchemaNode
from ..utils import ROOT_POINTER, join_pointer
from .errors import ValidationError, ValidationErrorKind
from .formats import FormatCheckerRegistry, default_format_checkers
from .rules import ARRAY_RULES, NUMBER_RULES, OBJECT_RULES, STRING_RULES, VALUE_RULES

logger = logging.getLogger(__name__)


@dataclass
class _ValidationContext:
    """Mutable state of one validate() call."""

    max_depth: int
    # (schema node identity, instance path) pairs currently being evaluated
    active: set[tuple[int, str]] = field(default_factory=set)


class SchemaValidator:
    """Validates JSON instances against resolved schema nodes."""

    def __init__(
        self,
        config: ValidationConfig | None = None,
        format_checkers: FormatCheckerRegistry | None = None,
    ):
        """
        Initialize the validator.

        Args:
            config: Validation configuration
            format_checkers: Registry used for the "format" keyword (defaults to the built-ins)
        """
        self.config = config or ValidationConfig()
        self.format_checkers = format_checkers if format_checkers is not None else default_format_checkers()

    def validate(self, schema: SchemaNode | ResolvedGraph, instance: Any) -> list[ValidationError]:
        """
        Validate an instance.

        Args:
            schema: A resolved schema node, or a graph (its root is used)
            instance: The decoded JSON instance

        Returns:
            Ordered findings; empty when the instance is valid
        """
        node = schema.root if isinstance(schema, ResolvedGraph) else schema
        context = _ValidationContext(max_depth=self.config.max_depth)
        return self._validate_node(node, instance, ROOT_POINTER, context, 0)

    def is_valid(self, schema: SchemaNode | ResolvedGraph, instance: Any) -> bool:
        return not self.validate(schema, instance)

    def _validate_node(
        self,
        node: SchemaNode,
        instance: Any,
        path: str,
        context: _ValidationContext,
        depth: int,
    ) -> list[ValidationError]:
        """Validate one instance location against one schema node."""
        if depth > context.max_depth:
            return [self._recursion_error(node, path, context.max_depth)]

        guard = (id(node), path)
        if guard in context.active:
            # Same schema re-entered at the same location: the schema loops without consuming input
            logger.debug("Schema %s re-entered at %s", node.pointer, path)
            return [self._recursion_error(node, path, node.pointer)]

        context.active.add(guard)
        try:
            return self._validate_keywords(node, instance, path, context, depth)
        finally:
            context.active.discard(guard)

    def _validate_keywords(
        self,
        node: SchemaNode,
        instance: Any,
        path: str,
        context: _ValidationContext,
        depth: int,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        kind = json_kind(instance)

        if not type_matches(node, kind):
            errors.append(
                ValidationError(
                    kind=ValidationErrorKind.TYPE_MISMATCH,
                    path=path,
                    expected=tuple(t for t in PRIMITIVE_TYPES if t in node.types),
                    schema_path=node.pointer,
                )
            )

        if kind == "object":
            self._validate_object(node, instance, path, context, depth, errors)
        elif kind == "array":
            self._validate_array(node, instance, path, context, depth, errors)

        self._validate_combinators(node, instance, path, context, depth, errors)

        if kind == "string":
            self._apply_rules(STRING_RULES, node, instance, path, errors)
            self._validate_format(node, instance, path, errors)
        elif kind in ("integer", "number"):
            self._apply_rules(NUMBER_RULES, node, instance, path, errors)

        self._apply_rules(VALUE_RULES, node, instance, path, errors)
        return errors

    def _validate_object(
        self,
        node: SchemaNode,
        instance: dict[str, Any],
        path: str,
        context: _ValidationContext,
        depth: int,
        errors: list[ValidationError],
    ) -> None:
        """Validate required, additionalProperties and per-property schemas."""
        for name in node.required:
            if name not in instance:
                errors.append(
                    ValidationError(
                        kind=ValidationErrorKind.PROPERTY_REQUIRED,
                        path=join_pointer(path, name),
                        property=name,
                        schema_path=node.pointer,
                    )
                )

        extra_keys = [key for key in instance if key not in node.properties and not self._matches_pattern_property(node, key)]
        if node.additional_properties is False:
            for key in extra_keys:
                errors.append(
                    ValidationError(
                        kind=ValidationErrorKind.NO_ADDITIONAL_PROPERTIES_ALLOWED,
                        path=path,
                        property=key,
                        schema_path=node.pointer,
                    )
                )
        elif isinstance(node.additional_properties, SchemaNode):
            for key in extra_keys:
                errors.extend(self._validate_node(node.additional_properties, instance[key], join_pointer(path, key), context, depth + 1))

        self._apply_rules(OBJECT_RULES, node, instance, path, errors)

        for name, prop_node in node.properties.items():
            if name in instance:
                errors.extend(self._validate_node(prop_node, instance[name], join_pointer(path, name), context, depth + 1))

        for pattern, prop_node in node.pattern_properties.items():
            for key in instance:
                if re.search(pattern, key):
                    errors.extend(self._validate_node(prop_node, instance[key], join_pointer(path, key), context, depth + 1))

    def _matches_pattern_property(self, node: SchemaNode, key: str) -> bool:
        return any(re.search(pattern, key) for pattern in node.pattern_properties)

    def _validate_array(
        self,
        node: SchemaNode,
        instance: list[Any],
        path: str,
        context: _ValidationContext,
        depth: int,
        errors: list[ValidationError],
    ) -> None:
        """Validate items (single schema or tuple form) and array constraints."""
        if node.items is not None:
            for index, item in enumerate(instance):
                errors.extend(self._validate_node(node.items, item, join_pointer(path, index), context, depth + 1))
        elif node.tuple_items:
            for index, (item, item_node) in enumerate(zip(instance, node.tuple_items)):
                errors.extend(self._validate_node(item_node, item, join_pointer(path, index), context, depth + 1))
            extra = instance[len(node.tuple_items) :]
            if extra and node.additional_items is False:
                errors.append(
                    ValidationError(
                        kind=ValidationErrorKind.ADDITIONAL_ITEMS_NOT_VALID,
                        path=path,
                        expected=len(node.tuple_items),
                        schema_path=node.pointer,
                    )
                )
            elif extra and isinstance(node.additional_items, SchemaNode):
                offset = len(node.tuple_items)
                for index, item in enumerate(extra, start=offset):
                    errors.extend(self._validate_node(node.additional_items, item, join_pointer(path, index), context, depth + 1))

        self._apply_rules(ARRAY_RULES, node, instance, path, errors)

    def _validate_combinators(
        self,
        node: SchemaNode,
        instance: Any,
        path: str,
        context: _ValidationContext,
        depth: int,
        errors: list[ValidationError],
    ) -> None:
        """Validate allOf / oneOf / anyOf / not, each branch with a fresh accumulator."""

        def branch(member: SchemaNode) -> list[ValidationError]:
            return self._validate_node(member, instance, path, context, depth + 1)

        if node.all_of:
            errors.extend(evaluate_all_of(node.all_of, branch))

        if node.one_of:
            matches, failures = evaluate_one_of(node.one_of, branch)
            if matches == 0:
                errors.append(self._aggregate_error(ValidationErrorKind.NOT_ONE_OF, node, path, failures))
            elif matches > 1:
                errors.append(
                    ValidationError(
                        kind=ValidationErrorKind.TOO_MANY_ONE_OF,
                        path=path,
                        expected=1,
                        schema_path=node.pointer,
                    )
                )

        if node.any_of:
            matched, failures = evaluate_any_of(node.any_of, branch)
            if not matched:
                errors.append(self._aggregate_error(ValidationErrorKind.NOT_ANY_OF, node, path, failures))

        if node.not_ is not None and not evaluate_not(node.not_, branch):
            errors.append(
                ValidationError(
                    kind=ValidationErrorKind.NOT_SCHEMA,
                    path=path,
                    schema_path=node.pointer,
                )
            )

    def _validate_format(self, node: SchemaNode, value: str, path: str, errors: list[ValidationError]) -> None:
        """Run the registered checker for ``format``; unknown names are skipped."""
        if node.format is None or not self.config.check_formats or node.format in self.config.ignored_formats:
            return
        if self.format_checkers.check(node.format, value) is False:
            errors.append(
                ValidationError(
                    kind=ValidationErrorKind.FORMAT_MISMATCH,
                    path=path,
                    expected=node.format,
                    schema_path=node.pointer,
                )
            )

    def _apply_rules(self, rules, node: SchemaNode, value: Any, path: str, errors: list[ValidationError]) -> None:
        for rule in rules:
            error = rule.check(node, value, path)
            if error is not None:
                errors.append(error)

    def _aggregate_error(
        self,
        kind: ValidationErrorKind,
        node: SchemaNode,
        path: str,
        failures: list[list[ValidationError]],
    ) -> ValidationError:
        return ValidationError(
            kind=kind,
            path=path,
            schema_path=node.pointer,
            branch_errors=tuple(tuple(branch) for branch in failures),
        )

    def _recursion_error(self, node: SchemaNode, path: str, expected: Any) -> ValidationError:
        return ValidationError(
            kind=ValidationErrorKind.RECURSION_LIMIT_EXCEEDED,
            path=path,
            expected=expected,
            schema_path=node.pointer,
        )


def validate(
    schema: SchemaNode | ResolvedGraph,
    instance: Any,
    format_checkers: FormatCheckerRegistry | None = None,
    config: ValidationConfig | None = None,
) -> list[ValidationError]:
    """Validate an instance against a resolved schema node or graph."""
    return SchemaValidator(config, format_checkers).validate(schema, instance)
