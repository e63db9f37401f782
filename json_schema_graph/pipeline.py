"""
Schema pipeline.

Ties the stages together: raw schema -> resolved graph -> {validation |
type graph}. The resolved graph is built once and shared by both stages.
"""

from __future__ import annotations

import logging
from typing import Any

from .analyzer.projector import TypeProjector
from .analyzer.reference_resolver import DocumentLoader, ReferenceResolver, ResolvedGraph
from .analyzer.type_graph import TypeGraph
from .config import SchemaEngineConfig
from .validation.errors import ValidationError
from .validation.formats import FormatCheckerRegistry
from .validation.validator import SchemaValidator

logger = logging.getLogger(__name__)


class SchemaPipeline:
    """Resolves a schema once and serves validation and projection from it."""

    def __init__(
        self,
        schema: Any,
        config: SchemaEngineConfig | None = None,
        loader: DocumentLoader | None = None,
        format_checkers: FormatCheckerRegistry | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            schema: The decoded root schema document
            config: Engine configuration
            loader: Loader for external documents (optional)
            format_checkers: Registry for the "format" keyword (defaults to the built-ins)
        """
        self.schema = schema
        self.config = config or SchemaEngineConfig()
        self.loader = loader
        self.validator = SchemaValidator(self.config.validation, format_checkers)
        self._graph: ResolvedGraph | None = None
        self._type_graph: TypeGraph | None = None

    @property
    def graph(self) -> ResolvedGraph:
        """The resolved schema graph (built on first access)."""
        if self._graph is None:
            resolver = ReferenceResolver(self.loader, self.config.resolver.document_uri)
            self._graph = resolver.resolve(self.schema)
            logger.debug("Resolved schema graph with %d nodes", len(self._graph.nodes))
        return self._graph

    def validate(self, instance: Any) -> list[ValidationError]:
        """Validate an instance against the root schema."""
        return self.validator.validate(self.graph, instance)

    def project(self) -> TypeGraph:
        """The projected type graph (built on first call)."""
        if self._type_graph is None:
            self._type_graph = TypeProjector(self.config.projection).project(self.graph)
            logger.debug("Projected %d entities", len(self._type_graph.entities))
        return self._type_graph
