"""
Schema AST module.

Contains the schema node model and the keyword parser.
"""

from __future__ import annotations

from .nodes import PRIMITIVE_TYPES, SchemaNode, slot_key
from .parser import SchemaParser

__all__ = [
    "PRIMITIVE_TYPES",
    "SchemaNode",
    "SchemaParser",
    "slot_key",
]
