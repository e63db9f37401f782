"""
Document loaders for external ``$ref`` targets.

A loader is any callable ``load(document_uri) -> raw schema``. The resolver
calls it at most once per distinct document URI and wraps any failure into
a ``ReferenceResolutionError``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)


class JsonFileLoader:
    """Loads schema documents from JSON files on disk.

    Relative URIs are resolved against ``base_path``; ``file://`` URIs are
    read from their path.
    """

    def __init__(self, base_path: str | Path = "."):
        self.base_path = Path(base_path)

    def path_for(self, document_uri: str) -> Path:
        """Map a document URI to a file path."""
        parsed = urlparse(document_uri)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        if parsed.scheme and len(parsed.scheme) > 1:
            raise ValueError(f"Unsupported URI scheme '{parsed.scheme}' for {document_uri}")
        path = Path(unquote(document_uri))
        return path if path.is_absolute() else self.base_path / path

    def __call__(self, document_uri: str) -> Any:
        path = self.path_for(document_uri)
        logger.debug("Reading schema document %s", path)
        with open(path, encoding="utf-8") as f:
            return json.load(f)


class MappingLoader:
    """Serves schema documents from an in-memory mapping of URI -> raw document."""

    def __init__(self, documents: Mapping[str, Any]):
        self.documents = dict(documents)
        # Number of times each URI was requested
        self.calls: dict[str, int] = {}

    def __call__(self, document_uri: str) -> Any:
        self.calls[document_uri] = self.calls.get(document_uri, 0) + 1
        if document_uri not in self.documents:
            raise KeyError(f"Unknown schema document: {document_uri}")
        return self.documents[document_uri]
