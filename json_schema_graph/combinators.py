"""
Combinator evaluator.

Pure, stateless functions shared by validation and type projection:
runtime kind detection, type matching, shape classification and the
allOf / oneOf / anyOf / not evaluation rules. Branch evaluation itself is
supplied by the caller as a callback returning a list of findings (an
empty list means the branch matched).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any, TypeVar

from .schema_ast.nodes import SchemaNode

Finding = TypeVar("Finding")
Branch = Callable[[SchemaNode], list[Finding]]


class CombinatorKind(str, Enum):
    """Kind of composition carried by a schema node."""

    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    NOT = "not"
    PLAIN = "plain"


def json_kind(value: Any) -> str:
    """
    Return the primitive type tag of a JSON value.

    ``bool`` is never an integer; a float with an integral value is one.

    Raises:
        TypeError: If the value is not part of the JSON value model
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "integer" if value.is_integer() else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def type_matches(node: SchemaNode, kind: str) -> bool:
    """True if a value of ``kind`` is accepted by the node's ``type`` set (empty = unconstrained)."""
    if not node.types or kind in node.types:
        return True
    return kind == "integer" and "number" in node.types


def combinator_kinds(node: SchemaNode) -> list[CombinatorKind]:
    """Combinators present on a node, in evaluation order; ``[PLAIN]`` when none."""
    kinds = []
    if node.all_of:
        kinds.append(CombinatorKind.ALL_OF)
    if node.one_of:
        kinds.append(CombinatorKind.ONE_OF)
    if node.any_of:
        kinds.append(CombinatorKind.ANY_OF)
    if node.not_ is not None:
        kinds.append(CombinatorKind.NOT)
    return kinds or [CombinatorKind.PLAIN]


def is_object_shaped(node: SchemaNode) -> bool:
    """True if the node describes JSON objects (directly or through ``allOf``)."""
    return _is_object_shaped(node, set())


def _is_object_shaped(node: SchemaNode, seen: set[int]) -> bool:
    if id(node) in seen:
        return False
    seen.add(id(node))
    if node.enum is not None:
        return False
    if node.properties or node.pattern_properties:
        return True
    if node.types:
        return "object" in node.types and node.types <= {"object", "null"}
    if node.additional_properties is not None:
        return True
    return any(_is_object_shaped(member, seen) for member in node.all_of)


def is_dictionary_shaped(node: SchemaNode) -> bool:
    """True for a homogeneous map: no declared properties, explicit ``additionalProperties`` schema or ``true``."""
    if node.properties or node.pattern_properties or node.all_of or node.enum is not None:
        return False
    if node.additional_properties is None or node.additional_properties is False:
        return False
    return not node.types or node.types <= {"object", "null"}


def flatten_all_of(node: SchemaNode) -> list[SchemaNode]:
    """
    The object-shaped schemas combined by ``allOf``, in order.

    Members are expanded depth-first through their own ``allOf``; each schema
    appears once and ``node`` itself is never included.
    """
    ordered: list[SchemaNode] = []
    seen = {id(node)}

    def visit(current: SchemaNode) -> None:
        for member in current.all_of:
            if id(member) in seen or not is_object_shaped(member):
                continue
            seen.add(id(member))
            ordered.append(member)
            visit(member)

    visit(node)
    return ordered


def nullable_branch(members: Sequence[SchemaNode]) -> SchemaNode | None:
    """For ``[X, {"type": "null"}]`` (either order) return X, else None."""
    if len(members) != 2:
        return None
    first, second = members
    if second.is_null_only and not first.is_null_only:
        return first
    if first.is_null_only and not second.is_null_only:
        return second
    return None


def evaluate_all_of(members: Sequence[SchemaNode], branch: Branch) -> list[Finding]:
    """Every member must match; findings of all members are concatenated in order."""
    findings: list[Finding] = []
    for member in members:
        findings.extend(branch(member))
    return findings


def evaluate_any_of(members: Sequence[SchemaNode], branch: Branch) -> tuple[bool, list[list[Finding]]]:
    """
    At least one member must match.

    Returns:
        (matched, findings of the members that failed before the first match)
    """
    failures: list[list[Finding]] = []
    for member in members:
        findings = branch(member)
        if not findings:
            return True, failures
        failures.append(findings)
    return False, failures


def evaluate_one_of(members: Sequence[SchemaNode], branch: Branch) -> tuple[int, list[list[Finding]]]:
    """
    Exactly one member must match.

    Evaluation stops at the second match, so the count is capped at 2.

    Returns:
        (number of matches, findings of the members that failed)
    """
    matches = 0
    failures: list[list[Finding]] = []
    for member in members:
        findings = branch(member)
        if findings:
            failures.append(findings)
            continue
        matches += 1
        if matches > 1:
            break
    return matches, failures


def evaluate_not(member: SchemaNode, branch: Branch) -> bool:
    """True when the negation holds, i.e. the nested schema fails."""
    return bool(branch(member))
