"""
Schema node model.

A ``SchemaNode`` is one schema fragment. Nodes are built by the reference
resolver, which replaces every ``$ref`` by a direct link to the target node;
``ref_slots`` remembers which slots were references.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ..utils import join_pointer

# Primitive type tags, in the order used whenever a set of them is reported
PRIMITIVE_TYPES = ("null", "boolean", "integer", "number", "string", "array", "object")


@dataclass(eq=False, repr=False)
class SchemaNode:
    """One schema fragment.

    Nodes compare and hash by identity: two references to the same pointer
    resolve to the same instance, and graphs may be cyclic.
    """

    # Canonical location ("#", "#/definitions/Pet", ...) and owning document
    pointer: str = "#"
    document_uri: str = ""

    # Accepted primitive types; empty means unconstrained
    types: set[str] = field(default_factory=set)
    format: str | None = None

    # Documentation and naming
    title: str | None = None
    description: str | None = None
    type_name_hint: str | None = None

    # Object keywords
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool | SchemaNode | None = None  # None: keyword absent
    pattern_properties: dict[str, SchemaNode] = field(default_factory=dict)
    min_properties: int | None = None
    max_properties: int | None = None

    # Array keywords
    items: SchemaNode | None = None
    tuple_items: list[SchemaNode] = field(default_factory=list)
    additional_items: bool | SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False

    # Combinators
    all_of: list[SchemaNode] = field(default_factory=list)
    one_of: list[SchemaNode] = field(default_factory=list)
    any_of: list[SchemaNode] = field(default_factory=list)
    not_: SchemaNode | None = None

    # Value constraints
    enum: list[Any] | None = None
    const: Any = None
    has_const: bool = False
    default: Any = None
    has_default: bool = False

    # String constraints
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    # Numeric constraints (exclusive bounds normalized to the numeric form)
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: float | None = None
    exclusive_maximum: float | None = None
    multiple_of: float | None = None

    # Polymorphism
    discriminator_property_name: str | None = None
    discriminator_mapping: dict[str, SchemaNode] = field(default_factory=dict)

    # Reusable schemas, reachable through references only
    definitions: dict[str, SchemaNode] = field(default_factory=dict)

    # Slot key ("allOf/0", "properties/dog", "items", ...) -> pointer of the $ref that filled it
    ref_slots: dict[str, str] = field(default_factory=dict)

    # Raw x-* extension keywords
    extensions: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        types = ", ".join(t for t in PRIMITIVE_TYPES if t in self.types)
        return f"SchemaNode(pointer={self.pointer!r}, types=[{types}])"

    def is_reference_slot(self, keyword: str, key: str | int | None = None) -> bool:
        """Return True when the given slot was filled through a ``$ref``."""
        return slot_key(keyword, key) in self.ref_slots

    @property
    def has_combinators(self) -> bool:
        return bool(self.all_of or self.one_of or self.any_of or self.not_ is not None)

    @property
    def is_nullable(self) -> bool:
        return "null" in self.types

    @property
    def is_null_only(self) -> bool:
        """True for ``{"type": "null"}`` with nothing else attached."""
        return self.types == {"null"} and not self.has_combinators and self.enum is None

    def subschemas(self) -> Iterator[tuple[str, SchemaNode]]:
        """Yield ``(slot_key, node)`` for every directly nested schema, in keyword order."""
        for name, node in self.definitions.items():
            yield slot_key("definitions", name), node
        for name, node in self.properties.items():
            yield slot_key("properties", name), node
        if isinstance(self.additional_properties, SchemaNode):
            yield "additionalProperties", self.additional_properties
        for pattern, node in self.pattern_properties.items():
            yield slot_key("patternProperties", pattern), node
        if self.items is not None:
            yield "items", self.items
        for index, node in enumerate(self.tuple_items):
            yield slot_key("items", index), node
        if isinstance(self.additional_items, SchemaNode):
            yield "additionalItems", self.additional_items
        for keyword, members in (("allOf", self.all_of), ("oneOf", self.one_of), ("anyOf", self.any_of)):
            for index, node in enumerate(members):
                yield slot_key(keyword, index), node
        if self.not_ is not None:
            yield "not", self.not_
        for key, node in self.discriminator_mapping.items():
            yield slot_key("discriminator/mapping", key), node


def slot_key(keyword: str, key: str | int | None = None) -> str:
    """Build the ``ref_slots`` key for a keyword slot (pointer-escaped, without the leading ``#``)."""
    if key is None:
        return keyword
    return join_pointer(keyword, key)
