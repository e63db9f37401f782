"""
Structural errors raised by the schema engine.

These abort the current operation (resolution, projection). Validation
findings on instances are data, see ``validation.errors``.
"""

from __future__ import annotations


class SchemaGraphError(Exception):
    """Base class for all structural schema engine errors."""

    pass


class ReferenceResolutionError(SchemaGraphError):
    """Raised when a ``$ref`` cannot be resolved.

    This can happen when:
    - The fragment pointer does not exist in the target document
    - The external document cannot be loaded (or no loader was given)
    - References form a chain that never reaches a schema
    """

    def __init__(self, pointer: str, document_uri: str = "", reason: str = "unresolvable reference"):
        self.pointer = pointer
        self.document_uri = document_uri
        self.reason = reason
        location = f" in document '{document_uri}'" if document_uri else ""
        super().__init__(f"{reason}: '{pointer}'{location}")


class SchemaStructureError(SchemaGraphError):
    """Raised when a schema keyword has a malformed value (e.g. ``allOf`` is not a list)."""

    def __init__(self, pointer: str, keyword: str, reason: str):
        self.pointer = pointer
        self.keyword = keyword
        self.reason = reason
        super().__init__(f"Invalid '{keyword}' at {pointer}: {reason}")


class ProjectionError(SchemaGraphError):
    """Raised when the type graph cannot be built (circular inheritance, clashing discriminators)."""

    pass
