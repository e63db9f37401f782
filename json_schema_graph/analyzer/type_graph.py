"""
Type graph definitions.

The type graph is the language-neutral model produced by type projection:
entities (classes/records), their properties, inheritance edges,
discriminator maps, dictionaries and enums. Emitters read it; nothing
mutates it once the projector has frozen it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..schema_ast.nodes import SchemaNode


class TypeKind(Enum):
    """Kind of type in the type graph."""

    PRIMITIVE = "primitive"  # null, boolean, integer, number, string
    ENTITY = "entity"  # A projected entity
    ARRAY = "array"  # list[T]
    DICTIONARY = "dictionary"  # dict[str, T]
    ENUM = "enum"  # Enum type
    UNION = "union"  # T | U | ...
    ANY = "any"  # Any JSON value


@dataclass(frozen=True)
class TypeRef:
    """A projected type reference."""

    kind: TypeKind = TypeKind.ANY
    name: str = ""  # Primitive tag, entity name or enum name

    # For primitives
    format: str | None = None

    # For entities and enums
    entity: Entity | None = None
    enum: EnumDef | None = None

    # For containers: array element / dictionary value (keys are always strings)
    item: TypeRef | None = None
    value: TypeRef | None = None

    # For unions
    variants: tuple[TypeRef, ...] = ()

    is_nullable: bool = False

    def nullable(self) -> TypeRef:
        """Return the same type, accepting null."""
        return self if self.is_nullable else replace(self, is_nullable=True)

    def describe(self) -> str:
        """Short human readable form, e.g. ``array[Pet]`` or ``dict[string, string]?``."""
        if self.kind in (TypeKind.PRIMITIVE, TypeKind.ENTITY, TypeKind.ENUM):
            text = self.name
            if self.format:
                text = f"{text}<{self.format}>"
        elif self.kind == TypeKind.ARRAY:
            text = f"array[{self.item.describe() if self.item else 'any'}]"
        elif self.kind == TypeKind.DICTIONARY:
            text = f"dict[string, {self.value.describe() if self.value else 'any'}]"
        elif self.kind == TypeKind.UNION:
            text = " | ".join(variant.describe() for variant in self.variants)
            if self.is_nullable:
                text = f"({text})"
        else:
            text = "any"
        return f"{text}?" if self.is_nullable else text

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data (entities by name)."""
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.name:
            data["name"] = self.name
        if self.format:
            data["format"] = self.format
        if self.item is not None:
            data["item"] = self.item.to_dict()
        if self.value is not None:
            data["value"] = self.value.to_dict()
        if self.variants:
            data["variants"] = [variant.to_dict() for variant in self.variants]
        data["nullable"] = self.is_nullable
        return data

    def __repr__(self) -> str:
        return f"TypeRef({self.describe()})"


@dataclass(frozen=True)
class Property:
    """A property of an entity."""

    name: str = ""  # JSON property name
    type_ref: TypeRef = field(default_factory=TypeRef)
    is_required: bool = False
    is_nullable: bool = False
    description: str | None = None
    default: Any = None
    has_default: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = {
            "name": self.name,
            "type": self.type_ref.to_dict(),
            "required": self.is_required,
            "nullable": self.is_nullable,
        }
        if self.description:
            data["description"] = self.description
        if self.has_default:
            data["default"] = self.default
        return data


@dataclass(frozen=True, repr=False)
class EnumDef:
    """An enum definition."""

    name: str = ""
    value_type: str = "string"  # "string", "integer", "number", "boolean" or "any"
    values: tuple[Any, ...] = ()
    description: str | None = None
    schema: SchemaNode | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        data = {"name": self.name, "value_type": self.value_type, "values": list(self.values)}
        if self.description:
            data["description"] = self.description
        return data

    def __repr__(self) -> str:
        return f"EnumDef(name={self.name!r}, values={list(self.values)!r})"


@dataclass(eq=False, repr=False)
class Entity:
    """A projected entity (class/record).

    Entities are built in two passes by the projector and frozen afterwards;
    assigning to a frozen entity raises ``AttributeError``.
    """

    name: str = ""
    schema: SchemaNode | None = None
    description: str | None = None

    # Locally declared properties, in declaration order (base properties are not repeated)
    properties: tuple[Property, ...] = ()

    # Inheritance
    base_entity: Entity | None = None

    # Homogeneous map: no members, values of dictionary_value type
    is_dictionary: bool = False
    dictionary_value: TypeRef | None = None

    # Polymorphism: present only on entities declaring a discriminator
    discriminator_property: str | None = None
    discriminator_map: Mapping[str, Entity] | None = None

    # From the x-abstract extension
    is_abstract: bool = False

    _frozen: bool = field(default=False, init=False, repr=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise AttributeError(f"Entity {self.name!r} is read-only")
        object.__setattr__(self, name, value)

    def freeze(self) -> None:
        """Make the entity read-only."""
        if self._frozen:
            return
        self.properties = tuple(self.properties)
        if self.discriminator_map is not None:
            self.discriminator_map = MappingProxyType(dict(self.discriminator_map))
        object.__setattr__(self, "_frozen", True)

    def inheritance_chain(self) -> tuple[Entity, ...]:
        """Entities from the top-most base down to this one."""
        chain: list[Entity] = []
        current: Entity | None = self
        while current is not None and current not in chain:
            chain.append(current)
            current = current.base_entity
        return tuple(reversed(chain))

    def all_properties(self) -> tuple[Property, ...]:
        """Inherited and local properties, base first; a redeclared property keeps the base position."""
        merged: dict[str, Property] = {}
        for entity in self.inheritance_chain():
            for prop in entity.properties:
                merged[prop.name] = prop
        return tuple(merged.values())

    def constructor_properties(self, sort_required_first: bool = True) -> tuple[Property, ...]:
        """
        Properties in initializer order.

        Base levels come first. Within each level required properties precede
        optional ones when ``sort_required_first`` is set; declared order is
        kept inside each group.
        """
        seen: set[str] = set()
        ordered: list[Property] = []
        for entity in self.inheritance_chain():
            level = [prop for prop in entity.properties if prop.name not in seen]
            if sort_required_first:
                level = [p for p in level if p.is_required] + [p for p in level if not p.is_required]
            for prop in level:
                seen.add(prop.name)
                ordered.append(prop)
        return tuple(ordered)

    def to_dict(self, sort_required_first: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "base": self.base_entity.name if self.base_entity else None,
            "abstract": self.is_abstract,
            "properties": [prop.to_dict() for prop in self.properties],
            "constructor": [prop.name for prop in self.constructor_properties(sort_required_first)],
        }
        if self.description:
            data["description"] = self.description
        if self.is_dictionary:
            data["dictionary_value"] = self.dictionary_value.to_dict() if self.dictionary_value else None
        if self.discriminator_property is not None:
            data["discriminator"] = {
                "property": self.discriminator_property,
                "mapping": {key: entity.name for key, entity in (self.discriminator_map or {}).items()},
            }
        return data

    def __repr__(self) -> str:
        base = f", base={self.base_entity.name!r}" if self.base_entity else ""
        return f"Entity(name={self.name!r}{base}, properties={[p.name for p in self.properties]!r})"


@dataclass(frozen=True, eq=False)
class TypeGraph:
    """The complete projected type model."""

    # All entities, in projection order (definitions, then root, then inline)
    entities: tuple[Entity, ...] = ()

    # All named enums, in projection order
    enums: tuple[EnumDef, ...] = ()

    # Type of the root schema
    root_type: TypeRef = field(default_factory=TypeRef)

    # Definition key -> projected type
    definition_types: Mapping[str, TypeRef] = field(default_factory=lambda: MappingProxyType({}))

    # Default constructor ordering used by to_dict()
    sort_constructor_parameters: bool = True

    # id(schema node) -> entity
    _by_node: Mapping[int, Entity] = field(default_factory=lambda: MappingProxyType({}), repr=False)

    def entity(self, name: str) -> Entity:
        """Return the entity with the given name (KeyError when absent)."""
        for entity in self.entities:
            if entity.name == name:
                return entity
        raise KeyError(name)

    def entity_for(self, node: SchemaNode) -> Entity | None:
        """Return the entity projected from a schema node, if any."""
        return self._by_node.get(id(node))

    def enum(self, name: str) -> EnumDef:
        for enum_def in self.enums:
            if enum_def.name == name:
                return enum_def
        raise KeyError(name)

    def derived_entities(self, entity: Entity) -> tuple[Entity, ...]:
        """Entities whose direct base is ``entity``."""
        return tuple(e for e in self.entities if e.base_entity is entity)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        return {
            "root": self.root_type.to_dict(),
            "definitions": {key: type_ref.to_dict() for key, type_ref in self.definition_types.items()},
            "entities": [entity.to_dict(self.sort_constructor_parameters) for entity in self.entities],
            "enums": [enum_def.to_dict() for enum_def in self.enums],
        }
