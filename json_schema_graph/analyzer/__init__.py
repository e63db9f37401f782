"""
Analyzer module.

Resolves references into a schema graph and projects the graph into a
language-neutral type graph.
"""

from __future__ import annotations

from .name_resolver import NameResolver
from .projector import TypeProjector, project
from .reference_resolver import DocumentLoader, ReferenceResolver, ResolvedGraph, normalize_reference, resolve_schema
from .type_graph import Entity, EnumDef, Property, TypeGraph, TypeKind, TypeRef

__all__ = [
    "DocumentLoader",
    "Entity",
    "EnumDef",
    "NameResolver",
    "Property",
    "ReferenceResolver",
    "ResolvedGraph",
    "TypeGraph",
    "TypeKind",
    "TypeProjector",
    "TypeRef",
    "normalize_reference",
    "project",
    "resolve_schema",
]
