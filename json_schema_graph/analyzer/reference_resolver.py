"""
Reference resolver for $ref resolution.

Walks a raw schema document depth-first and builds the SchemaNode graph.
Every node is cached under its normalized (document URI, JSON pointer)
location before its children are parsed, so repeated references share one
node instance and self references terminate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote, urldefrag, urljoin

from ..exceptions import ReferenceResolutionError, SchemaGraphError, SchemaStructureError
from ..schema_ast.nodes import SchemaNode
from ..schema_ast.parser import SchemaParser
from ..utils import ROOT_POINTER, escape_pointer_segment, join_pointer, split_pointer

logger = logging.getLogger(__name__)

# load(document_uri) -> raw schema document
DocumentLoader = Callable[[str], Any]

Location = tuple[str, str]  # (document_uri, canonical pointer)


def normalize_reference(base_uri: str, ref: str) -> Location:
    """
    Normalize a ``$ref`` against the URI of the document containing it.

    Args:
        base_uri: URI of the referencing document ("" for an anonymous root)
        ref: The raw ``$ref`` value

    Returns:
        (document_uri, canonical pointer) where the pointer starts with ``#``
    """
    absolute = urljoin(base_uri, ref) if base_uri else ref
    document_uri, fragment = urldefrag(absolute)
    if not document_uri:
        document_uri = base_uri
    fragment = unquote(fragment)
    if fragment and not fragment.startswith("/"):
        raise ReferenceResolutionError(ref, document_uri, "unsupported anchor reference")
    # Round-trip through the segments so escapes come out canonical
    return document_uri, join_pointer(ROOT_POINTER, *split_pointer(ROOT_POINTER + fragment))


@dataclass(eq=False)
class ResolvedGraph:
    """A fully resolved schema graph.

    Owns the root node plus every node reachable from it (through
    properties, combinators, definitions and references, including nodes of
    external documents).
    """

    root: SchemaNode
    document_uri: str = ""

    # Every built node, in build order
    nodes: list[SchemaNode] = field(default_factory=list)

    # Raw documents by URI (the root document included)
    documents: dict[str, Any] = field(default_factory=dict)

    # Normalized location -> node (references alias their target's entry)
    index: dict[Location, SchemaNode] = field(default_factory=dict)

    @property
    def definitions(self) -> dict[str, SchemaNode]:
        """Root definitions in document order."""
        return self.root.definitions

    def resolve(self, pointer: str) -> SchemaNode:
        """
        Look up a node by reference string, relative to the root document.

        Raises:
            ReferenceResolutionError: If nothing was built at that location
        """
        location = normalize_reference(self.document_uri, pointer)
        node = self.index.get(location)
        if node is None:
            raise ReferenceResolutionError(pointer, location[0], "no schema at pointer")
        return node

    def __contains__(self, node: SchemaNode) -> bool:
        return any(n is node for n in self.nodes)


class ReferenceResolver:
    """Builds a ResolvedGraph from a raw schema document.

    A resolver instance keeps per-build state and must not be shared
    between threads while ``resolve`` runs.
    """

    def __init__(self, loader: DocumentLoader | None = None, document_uri: str = ""):
        """
        Initialize the resolver.

        Args:
            loader: Callable loading external documents by URI (optional)
            document_uri: URI of the root document, base for relative references
        """
        self.loader = loader
        self.document_uri = urldefrag(document_uri)[0] if document_uri else ""
        self.parser = SchemaParser()
        self._reset()

    def _reset(self) -> None:
        self._cache: dict[Location, SchemaNode] = {}
        self._documents: dict[str, Any] = {}
        self._nodes: list[SchemaNode] = []
        self._following: set[Location] = set()

    def resolve(self, raw_schema: Any) -> ResolvedGraph:
        """
        Resolve a root schema document.

        Args:
            raw_schema: The decoded root document (dict or boolean)

        Returns:
            The resolved graph

        Raises:
            ReferenceResolutionError: If any reference cannot be resolved
            SchemaStructureError: If a keyword is malformed
        """
        self._reset()
        self._documents[self.document_uri] = raw_schema
        try:
            root = self._build(self.document_uri, ROOT_POINTER, raw_schema)
            return ResolvedGraph(
                root=root,
                document_uri=self.document_uri,
                nodes=list(self._nodes),
                documents=dict(self._documents),
                index=dict(self._cache),
            )
        finally:
            # No partially built graph stays reachable from the resolver
            self._reset()

    def _build(self, document_uri: str, pointer: str, raw: Any) -> SchemaNode:
        """Build (or fetch from cache) the node living at a location."""
        location = (document_uri, pointer)
        cached = self._cache.get(location)
        if cached is not None:
            return cached

        if isinstance(raw, dict) and "$ref" in raw:
            target = self._follow_reference(document_uri, pointer, raw)
            self._cache[location] = target
            return target

        node = SchemaNode(pointer=pointer, document_uri=document_uri)
        # Occupy the cache slot before children so cycles land on this node
        self._cache[location] = node
        self._nodes.append(node)

        def build_child(child_raw: Any, *segments: str | int) -> SchemaNode:
            return self._build_child(node, child_raw, segments)

        self.parser.parse_into(node, raw, build_child)
        return node

    def _build_child(self, parent: SchemaNode, raw: Any, segments: tuple[str | int, ...]) -> SchemaNode:
        """Build a nested schema, recording the slot when it is a reference."""
        child_pointer = join_pointer(parent.pointer, *segments)
        child = self._build(parent.document_uri, child_pointer, raw)
        if isinstance(raw, dict) and "$ref" in raw:
            slot = "/".join(escape_pointer_segment(s) for s in segments)
            parent.ref_slots[slot] = self._canonical_reference(child)
        return child

    def _follow_reference(self, document_uri: str, pointer: str, raw: dict[str, Any]) -> SchemaNode:
        """Resolve the ``$ref`` found at a location to its target node."""
        ref = raw["$ref"]
        if not isinstance(ref, str):
            raise SchemaStructureError(pointer, "$ref", "expected a string")
        siblings = [k for k in raw if k != "$ref"]
        if siblings:
            logger.debug("Ignoring keywords %s next to $ref at %s", siblings, pointer)

        target_location = normalize_reference(document_uri, ref)
        cached = self._cache.get(target_location)
        if cached is not None:
            logger.debug("Reference %s resolved from cache", ref)
            return cached
        if target_location in self._following:
            raise ReferenceResolutionError(ref, target_location[0], "circular reference chain")

        self._following.add(target_location)
        try:
            target_uri, target_pointer = target_location
            document = self._load_document(target_uri, ref)
            target_raw = self._lookup(document, target_uri, target_pointer, ref)
            return self._build(target_uri, target_pointer, target_raw)
        finally:
            self._following.discard(target_location)

    def _load_document(self, document_uri: str, ref: str) -> Any:
        """Return a document by URI, loading it at most once."""
        if document_uri in self._documents:
            return self._documents[document_uri]
        if self.loader is None:
            raise ReferenceResolutionError(ref, document_uri, "no document loader for external reference")

        logger.debug("Loading external schema document %s", document_uri)
        try:
            document = self.loader(document_uri)
        except SchemaGraphError:
            raise
        except Exception as e:
            raise ReferenceResolutionError(ref, document_uri, f"failed to load document ({e})") from e
        self._documents[document_uri] = document
        return document

    def _lookup(self, document: Any, document_uri: str, pointer: str, ref: str) -> Any:
        """Walk a JSON pointer through a raw document."""
        target = document
        for segment in split_pointer(pointer):
            if isinstance(target, dict) and segment in target:
                target = target[segment]
            elif isinstance(target, list) and segment.isdigit() and int(segment) < len(target):
                target = target[int(segment)]
            else:
                raise ReferenceResolutionError(ref, document_uri, "missing fragment")
        if not isinstance(target, (dict, bool)):
            raise ReferenceResolutionError(ref, document_uri, "reference does not point at a schema")
        return target

    def _canonical_reference(self, node: SchemaNode) -> str:
        """Render a node location as a reference string relative to the root document."""
        if node.document_uri == self.document_uri:
            return node.pointer
        return f"{node.document_uri}{node.pointer}"


def resolve_schema(raw_schema: Any, loader: DocumentLoader | None = None, document_uri: str = "") -> ResolvedGraph:
    """Resolve a raw schema document into a ResolvedGraph."""
    return ReferenceResolver(loader, document_uri).resolve(raw_schema)
