"""JSON Schema Graph

A JSON Schema engine: resolves schema documents into a cycle-safe node
graph, validates JSON instances against it and projects it into a
language-neutral type model for code generators.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .analyzer import (
    Entity,
    EnumDef,
    Property,
    ReferenceResolver,
    ResolvedGraph,
    TypeGraph,
    TypeKind,
    TypeProjector,
    TypeRef,
    project,
    resolve_schema,
)
from .config import ProjectionConfig, ResolverConfig, SchemaEngineConfig, ValidationConfig
from .exceptions import ProjectionError, ReferenceResolutionError, SchemaGraphError, SchemaStructureError
from .loaders import JsonFileLoader, MappingLoader
from .pipeline import SchemaPipeline
from .schema_ast import SchemaNode
from .validation import (
    FormatCheckerRegistry,
    SchemaValidator,
    ValidationError,
    ValidationErrorKind,
    default_format_checkers,
    validate,
)

__all__ = [
    "SchemaPipeline",
    "SchemaEngineConfig",
    "ResolverConfig",
    "ValidationConfig",
    "ProjectionConfig",
    "SchemaNode",
    "ReferenceResolver",
    "ResolvedGraph",
    "resolve_schema",
    "SchemaValidator",
    "ValidationError",
    "ValidationErrorKind",
    "FormatCheckerRegistry",
    "default_format_checkers",
    "validate",
    "TypeProjector",
    "TypeGraph",
    "Entity",
    "EnumDef",
    "Property",
    "TypeRef",
    "TypeKind",
    "project",
    "JsonFileLoader",
    "MappingLoader",
    "SchemaGraphError",
    "ReferenceResolutionError",
    "SchemaStructureError",
    "ProjectionError",
]
