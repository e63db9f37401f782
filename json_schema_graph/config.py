"""
Configuration for the schema engine.

Each stage (resolution, validation, projection) has its own dataclass;
``SchemaEngineConfig`` groups them and can be loaded from a JSON file.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ResolverConfig:
    """Configuration for reference resolution."""

    # URI of the root document, used as the base for relative external $refs
    document_uri: str = ""

    # Directory the CLI file loader resolves relative document URIs against
    base_path: str = ""


@dataclass
class ValidationConfig:
    """Configuration for instance validation."""

    # Maximum nesting of schema evaluations before RecursionLimitExceeded is reported
    max_depth: int = 200

    # Whether "format" keywords are checked at all
    check_formats: bool = True

    # Format names skipped even when a checker is registered
    ignored_formats: list[str] = field(default_factory=list)


@dataclass
class ProjectionConfig:
    """Configuration for type projection."""

    # Name of the root entity when the schema has no typeName or title
    root_name: str = "Root"

    # Definitions (by key) that are not projected
    ignore_definitions: list[str] = field(default_factory=list)

    # Required properties before optional ones in constructor ordering
    sort_constructor_parameters: bool = True

    # First numeric suffix used when two entities want the same name
    name_suffix_start: int = 2


@dataclass
class SchemaEngineConfig:
    """Configuration options for the whole engine."""

    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)

    # Add a "generated by" header to rendered reports
    add_generation_comment: bool = True

    @staticmethod
    def from_dict(d: dict) -> SchemaEngineConfig:
        """Create a config from a dictionary."""
        config = SchemaEngineConfig()
        for k, v in d.items():
            if k == "resolver" and isinstance(v, dict):
                config.resolver = ResolverConfig(**v)
            elif k == "validation" and isinstance(v, dict):
                config.validation = ValidationConfig(**v)
            elif k == "projection" and isinstance(v, dict):
                config.projection = ProjectionConfig(**v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "resolver": {
                "document_uri": self.resolver.document_uri,
                "base_path": self.resolver.base_path,
            },
            "validation": {
                "max_depth": self.validation.max_depth,
                "check_formats": self.validation.check_formats,
                "ignored_formats": list(self.validation.ignored_formats),
            },
            "projection": {
                "root_name": self.projection.root_name,
                "ignore_definitions": list(self.projection.ignore_definitions),
                "sort_constructor_parameters": self.projection.sort_constructor_parameters,
                "name_suffix_start": self.projection.name_suffix_start,
            },
            "add_generation_comment": self.add_generation_comment,
        }
