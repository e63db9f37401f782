"""
Type projector that transforms a resolved schema graph into a type graph.

Pass one walks the definitions (document order) and then the root, creating
entities, enums and inheritance links. Pass two closes every discriminator
map over the finished entity set and freezes the result, so readers never
observe a partially populated map.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

from ..combinators import (
    CombinatorKind,
    combinator_kinds,
    flatten_all_of,
    is_dictionary_shaped,
    is_object_shaped,
    json_kind,
    nullable_branch,
)
from ..config import ProjectionConfig
from ..exceptions import ProjectionError
from ..schema_ast.nodes import PRIMITIVE_TYPES, SchemaNode
from ..utils import split_pointer
from .name_resolver import NameResolver
from .reference_resolver import ResolvedGraph
from .type_graph import EnumDef, Entity, Property, TypeGraph, TypeKind, TypeRef

logger = logging.getLogger(__name__)

_ANY = TypeRef(kind=TypeKind.ANY)

_DEFINITION_KEYWORDS = ("definitions", "$defs")


class TypeProjector:
    """Projects resolved schema graphs into type graphs.

    A projector keeps per-build state and must not be shared between
    threads while ``project`` runs.
    """

    def __init__(self, config: ProjectionConfig | None = None):
        """
        Initialize the projector.

        Args:
            config: Projection configuration
        """
        self.config = config or ProjectionConfig()
        self._reset(None)

    def _reset(self, graph: ResolvedGraph | None) -> None:
        self.graph = graph
        self.names = NameResolver(
            root_name=self.config.root_name,
            document_uri=graph.document_uri if graph else "",
            suffix_start=self.config.name_suffix_start,
        )
        # id(node) -> entity / enum, plus creation order
        self._entities: dict[int, Entity] = {}
        self._entity_order: list[Entity] = []
        self._enums: dict[int, EnumDef] = {}
        self._enum_order: list[EnumDef] = []
        # Entities whose members are already projected
        self._filled: set[int] = set()
        # Non-entity nodes being typed (cycles through arrays/unions)
        self._typing: set[int] = set()
        # Nodes that own a name regardless of shape (definitions, root)
        self._named: set[int] = set()

    def project(self, graph: ResolvedGraph) -> TypeGraph:
        """
        Project a resolved graph.

        Args:
            graph: The resolved schema graph

        Returns:
            The frozen type graph

        Raises:
            ProjectionError: On circular inheritance or clashing discriminator values
        """
        self._reset(graph)
        try:
            definitions = [
                (key, node) for key, node in graph.definitions.items() if key not in self.config.ignore_definitions
            ]
            self._named.update(id(node) for _, node in definitions)
            self._named.add(id(graph.root))

            # Pass one: reserve names in document order, then build members
            for _, node in definitions:
                self._declare(node)
            self._declare(graph.root)

            definition_types = {key: self._type_of(node) for key, node in definitions}
            root_type = self._type_of(graph.root)

            # Pass two: discriminator maps over the complete entity set
            self._close_discriminator_maps()

            for entity in self._entity_order:
                entity.freeze()

            return TypeGraph(
                entities=tuple(self._entity_order),
                enums=tuple(self._enum_order),
                root_type=root_type,
                definition_types=MappingProxyType(definition_types),
                sort_constructor_parameters=self.config.sort_constructor_parameters,
                _by_node=MappingProxyType(dict(self._entities)),
            )
        finally:
            self._reset(None)

    def _declare(self, node: SchemaNode) -> None:
        """Reserve the name of a named entity or enum without building its members."""
        if node.enum is not None:
            self._enum_for(node, None)
        elif self._projects_to_entity(node):
            self._entity_shell(node, None)

    def _is_named(self, node: SchemaNode) -> bool:
        if id(node) in self._named:
            return True
        segments = split_pointer(node.pointer)
        if len(segments) >= 2 and segments[-2] in _DEFINITION_KEYWORDS:
            return True
        return not segments and node.document_uri != self.graph.document_uri

    def _projects_to_entity(self, node: SchemaNode) -> bool:
        """Whether a node becomes an Entity (as opposed to a structural type reference)."""
        if node.enum is not None:
            return False
        if not node.properties and self._nullable_target(node) is not None:
            return False
        named = self._is_named(node)
        if is_dictionary_shaped(node):
            # Only named dictionaries get an entity; inline ones stay map types
            return named and id(node) != id(self.graph.root)
        if not is_object_shaped(node):
            return False
        if named:
            return True
        if self._is_wrapper(node):
            return False
        return bool(node.properties or node.all_of or node.discriminator_property_name)

    def _is_wrapper(self, node: SchemaNode) -> bool:
        """An inline ``allOf`` with one member and nothing else stands for that member."""
        return (
            len(node.all_of) == 1
            and not node.properties
            and not node.pattern_properties
            and not node.one_of
            and not node.any_of
            and node.not_ is None
            and node.discriminator_property_name is None
        )

    # Types

    def _type_of(self, node: SchemaNode, context: str | None = None) -> TypeRef:
        """Project the type of a node; ``context`` names inline entities and enums."""
        if node.enum is not None:
            enum_def = self._enum_for(node, context)
            nullable = node.is_nullable or any(value is None for value in node.enum)
            return TypeRef(kind=TypeKind.ENUM, name=enum_def.name, enum=enum_def, is_nullable=nullable)

        nullable_target = self._nullable_target(node)
        if nullable_target is not None and not node.properties:
            return self._guarded(nullable_target, context).nullable()

        if is_dictionary_shaped(node):
            # Named dictionaries also carry their (member-less) entity for emitters that name map types
            entity = self._entity_for(node, context) if self._projects_to_entity(node) else None
            return TypeRef(
                kind=TypeKind.DICTIONARY,
                name=entity.name if entity else "",
                entity=entity,
                value=entity.dictionary_value if entity else self._dictionary_value(node, context),
                is_nullable=node.is_nullable,
            )

        if self._projects_to_entity(node):
            entity = self._entity_for(node, context)
            return TypeRef(kind=TypeKind.ENTITY, name=entity.name, entity=entity, is_nullable=node.is_nullable)

        if node.all_of and self._is_wrapper(node):
            member_type = self._guarded(node.all_of[0], context)
            return member_type.nullable() if node.is_nullable else member_type

        if node.one_of or node.any_of:
            members = node.one_of or node.any_of
            variants = tuple(
                self._guarded(member, f"{context}Option{index}" if context else None)
                for index, member in enumerate(members, start=1)
            )
            return TypeRef(kind=TypeKind.UNION, variants=variants, is_nullable=node.is_nullable)

        if "array" in node.types or node.items is not None or node.tuple_items:
            return TypeRef(kind=TypeKind.ARRAY, item=self._item_type(node, context), is_nullable=node.is_nullable)

        return self._primitive_type(node)

    def _nullable_target(self, node: SchemaNode) -> SchemaNode | None:
        """For ``oneOf``/``anyOf`` of ``[X, {"type": "null"}]`` return X."""
        return nullable_branch(node.one_of) or nullable_branch(node.any_of)

    def _guarded(self, node: SchemaNode, context: str | None) -> TypeRef:
        """Type a nested node, answering ANY when a non-entity cycle re-enters it."""
        if id(node) in self._typing:
            logger.debug("Cyclic non-entity schema %s projected as any", node.pointer)
            return _ANY
        self._typing.add(id(node))
        try:
            return self._type_of(node, context)
        finally:
            self._typing.discard(id(node))

    def _item_type(self, node: SchemaNode, context: str | None) -> TypeRef:
        item_context = f"{context}Item" if context else None
        if node.items is not None:
            return self._guarded(node.items, item_context)
        if node.tuple_items:
            variants = tuple(self._guarded(item, item_context) for item in node.tuple_items)
            if len(variants) == 1:
                return variants[0]
            return TypeRef(kind=TypeKind.UNION, variants=variants)
        return _ANY

    def _dictionary_value(self, node: SchemaNode, context: str | None) -> TypeRef:
        if isinstance(node.additional_properties, SchemaNode):
            return self._guarded(node.additional_properties, f"{context}Value" if context else None)
        return _ANY

    def _primitive_type(self, node: SchemaNode) -> TypeRef:
        types = [t for t in PRIMITIVE_TYPES if t in node.types and t != "null"]
        if not types and node.has_const and node.const is not None:
            types = [json_kind(node.const)]
        if node.is_nullable and not types:
            return TypeRef(kind=TypeKind.PRIMITIVE, name="null", is_nullable=True)
        if not types or types == ["object"]:
            # Unconstrained values and member-less inline objects
            return TypeRef(kind=TypeKind.ANY, is_nullable=node.is_nullable)
        if "integer" in types and "number" in types:
            types.remove("integer")
        if len(types) == 1:
            return TypeRef(kind=TypeKind.PRIMITIVE, name=types[0], format=node.format, is_nullable=node.is_nullable)
        variants = tuple(TypeRef(kind=TypeKind.PRIMITIVE, name=t) for t in types)
        return TypeRef(kind=TypeKind.UNION, variants=variants, is_nullable=node.is_nullable)

    # Enums

    def _enum_for(self, node: SchemaNode, context: str | None) -> EnumDef:
        existing = self._enums.get(id(node))
        if existing is not None:
            return existing
        values = tuple(value for value in node.enum if value is not None)
        enum_def = EnumDef(
            name=self.names.reserve(self.names.candidate_name(node, context)),
            value_type=self._enum_value_type(values),
            values=values,
            description=node.description,
            schema=node,
        )
        self._enums[id(node)] = enum_def
        self._enum_order.append(enum_def)
        return enum_def

    def _enum_value_type(self, values: tuple[Any, ...]) -> str:
        kinds = {json_kind(value) for value in values}
        if kinds == {"integer", "number"}:
            return "number"
        if len(kinds) == 1:
            return kinds.pop()
        return "any"

    # Entities

    def _entity_shell(self, node: SchemaNode, context: str | None) -> Entity:
        """Create (or fetch) an entity with its name reserved and no members yet."""
        existing = self._entities.get(id(node))
        if existing is not None:
            return existing
        entity = Entity(
            name=self.names.reserve(self.names.candidate_name(node, context)),
            schema=node,
            description=node.description,
            is_abstract=bool(node.extensions.get("x-abstract", False)),
        )
        self._entities[id(node)] = entity
        self._entity_order.append(entity)
        return entity

    def _entity_for(self, node: SchemaNode, context: str | None) -> Entity:
        """Return the entity of a node, building its members on first use."""
        entity = self._entity_shell(node, context)
        if id(node) not in self._filled:
            # Mark before filling so property cycles land on this entity
            self._filled.add(id(node))
            self._fill_entity(entity, node)
        return entity

    def _fill_entity(self, entity: Entity, node: SchemaNode) -> None:
        if is_dictionary_shaped(node):
            entity.is_dictionary = True
            entity.dictionary_value = self._dictionary_value(node, entity.name)
            return

        base_node, local_blocks = self._inheritance(node)
        if base_node is not None:
            entity.base_entity = self._base_entity(node, base_node)
            sources = [node, *local_blocks]
            required = self._required_names(sources)
        else:
            sources = [node, *flatten_all_of(node)]
            # Required-only allOf blocks are not object-shaped but still apply
            required = self._required_names([node], transitive=True)

        entity.properties = self._properties(entity, sources, required)

        discriminator_sources = [node] if base_node is None else [node, *local_blocks]
        for source in discriminator_sources:
            if source.discriminator_property_name is not None:
                entity.discriminator_property = source.discriminator_property_name
                entity.discriminator_map = {}
                for target in source.discriminator_mapping.values():
                    if self._projects_to_entity(target):
                        self._entity_for(target, None)
                break

    def _inheritance(self, node: SchemaNode) -> tuple[SchemaNode | None, list[SchemaNode]]:
        """
        Decide between inheritance and flattening for a node's ``allOf``.

        Returns:
            (base node, local blocks) for single inheritance, (None, []) otherwise
        """
        if not node.all_of:
            return None, []

        references = [m for i, m in enumerate(node.all_of) if node.is_reference_slot("allOf", i)]
        local_blocks = [m for i, m in enumerate(node.all_of) if not node.is_reference_slot("allOf", i)]

        if len(references) != 1 or not is_object_shaped(references[0]):
            logger.debug("Flattening allOf of %s (%d references)", node.pointer, len(references))
            return None, []
        if any(combinator_kinds(block) != [CombinatorKind.PLAIN] for block in local_blocks):
            logger.debug("Flattening allOf of %s (nested combinators in local blocks)", node.pointer)
            return None, []
        if not self._projects_to_entity(references[0]):
            return None, []

        logger.debug("Schema %s inherits from %s", node.pointer, references[0].pointer)
        return references[0], local_blocks

    def _base_entity(self, node: SchemaNode, base_node: SchemaNode) -> Entity:
        """Entity of the base node, after checking the base chain does not lead back to ``node``."""
        current: SchemaNode | None = base_node
        seen: set[int] = set()
        while current is not None and id(current) not in seen:
            if current is node:
                raise ProjectionError(f"Circular inheritance involving {node.pointer} and {base_node.pointer}")
            seen.add(id(current))
            current = self._inheritance(current)[0]
        return self._entity_for(base_node, None)

    @staticmethod
    def _required_names(sources: list[SchemaNode], transitive: bool = False) -> set[str]:
        """Required property names declared by the sources (and their ``allOf`` members when transitive)."""
        required: set[str] = set()
        seen: set[int] = set()
        pending = list(sources)
        while pending:
            source = pending.pop()
            if id(source) in seen:
                continue
            seen.add(id(source))
            required.update(source.required)
            if transitive:
                pending.extend(source.all_of)
        return required

    def _properties(self, entity: Entity, sources: list[SchemaNode], required: set[str]) -> list[Property]:
        """Project the properties of the given schema blocks (first occurrence of a name wins)."""
        properties: list[Property] = []
        seen: set[str] = set()
        for source in sources:
            for name, prop_node in source.properties.items():
                if name in seen:
                    continue
                seen.add(name)
                type_ref = self._guarded(prop_node, self.names.inline_context(entity.name, name))
                properties.append(
                    Property(
                        name=name,
                        type_ref=type_ref,
                        is_required=name in required,
                        is_nullable=type_ref.is_nullable,
                        description=prop_node.description,
                        default=prop_node.default,
                        has_default=prop_node.has_default,
                    )
                )
        return properties

    # Discriminators

    def _close_discriminator_maps(self) -> None:
        """Register every transitive descendant into its polymorphic base's map."""
        children: dict[int, list[Entity]] = {}
        for entity in self._entity_order:
            if entity.base_entity is not None:
                children.setdefault(id(entity.base_entity), []).append(entity)

        for base in self._entity_order:
            if base.discriminator_property is None:
                continue
            explicit_mapping = base.schema.discriminator_mapping
            explicit_keys = {id(target): key for key, target in explicit_mapping.items()}
            mapping: dict[str, Entity] = {}

            for derived in self._descendants(base, children):
                self._register(mapping, base, explicit_keys.get(id(derived.schema), derived.name), derived)
            for key, target in explicit_mapping.items():
                derived = self._entities.get(id(target))
                if derived is not None and derived is not base and derived not in mapping.values():
                    self._register(mapping, base, key, derived)

            base.discriminator_map = mapping
            logger.debug("Discriminator map of %s: %s", base.name, sorted(mapping))

    def _register(self, mapping: dict[str, Entity], base: Entity, key: str, derived: Entity) -> None:
        current = mapping.get(key)
        if current is not None and current is not derived:
            raise ProjectionError(
                f"Discriminator value {key!r} of {base.name} maps to both {current.name} and {derived.name}"
            )
        mapping[key] = derived

    def _descendants(self, base: Entity, children: dict[int, list[Entity]]) -> list[Entity]:
        ordered: list[Entity] = []
        pending = list(children.get(id(base), []))
        while pending:
            entity = pending.pop(0)
            if entity in ordered:
                continue
            ordered.append(entity)
            pending.extend(children.get(id(entity), []))
        return ordered


def project(graph: ResolvedGraph, config: ProjectionConfig | None = None) -> TypeGraph:
    """Project a resolved schema graph into a type graph."""
    return TypeProjector(config).project(graph)
