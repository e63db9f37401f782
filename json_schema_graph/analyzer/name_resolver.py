"""
Name resolver for projected types.

Derives entity and enum names from schema nodes and resolves collisions
across the whole type graph by appending a numeric suffix in first-seen
order.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from urllib.parse import urlparse

from ..schema_ast.nodes import SchemaNode
from ..utils import snake_to_pascal_case, split_pointer

# Titles used as names must look like identifiers (possibly with separators)
_IDENTIFIER_TITLE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\- ]*$")

_DEFINITION_KEYWORDS = ("definitions", "$defs")


class NameResolver:
    """Resolves type names and handles collisions."""

    def __init__(self, root_name: str = "Root", document_uri: str = "", suffix_start: int = 2):
        """
        Initialize the resolver.

        Args:
            root_name: Name of the root type when the root schema carries no hint
            document_uri: URI of the root document (other documents are named after their file)
            suffix_start: First numeric suffix used on collision
        """
        self.root_name = root_name
        self.document_uri = document_uri
        self.suffix_start = suffix_start
        self._used: set[str] = set()

    def reserve(self, name: str) -> str:
        """Claim ``name``, or the first free ``name<N>``, and return the claimed name."""
        candidate = name or "Type"
        suffix = self.suffix_start
        while candidate in self._used:
            candidate = f"{name}{suffix}"
            suffix += 1
        self._used.add(candidate)
        return candidate

    def is_reserved(self, name: str) -> bool:
        return name in self._used

    def candidate_name(self, node: SchemaNode, context: str | None = None) -> str:
        """
        Derive the preferred (not yet de-duplicated) name of a node.

        Precedence: typeName hint, identifier-like title, definition key,
        external document name, inline context, last pointer segment.
        """
        if node.type_name_hint:
            return self.to_type_name(node.type_name_hint)

        if node.title and _IDENTIFIER_TITLE.match(node.title):
            return self.to_type_name(node.title)

        segments = split_pointer(node.pointer)
        if len(segments) >= 2 and segments[-2] in _DEFINITION_KEYWORDS:
            return self.to_type_name(segments[-1])

        if not segments and node.document_uri != self.document_uri:
            stem = self._document_stem(node.document_uri)
            if stem:
                return self.to_type_name(stem)

        if context:
            return self.to_type_name(context)

        if not segments:
            return self.root_name
        return self.to_type_name(segments[-1])

    def inline_context(self, parent_name: str, property_name: str, suffix: str = "") -> str:
        """Context name of an inline schema: parent name + property name (+ suffix)."""
        return f"{parent_name}{self.to_type_name(property_name)}{suffix}"

    def to_type_name(self, text: str) -> str:
        """Convert text to a PascalCase type name."""
        name = snake_to_pascal_case(text)
        if not name:
            return "Type"
        if name[0].isdigit():
            return f"T{name}"
        return name

    def _document_stem(self, document_uri: str) -> str:
        path = urlparse(document_uri).path
        return PurePosixPath(path).stem if path else ""
