"""
Tests for SchemaPipeline and the document loaders.
"""

import json
import unittest

import pytest

from json_schema_graph import (
    JsonFileLoader,
    MappingLoader,
    ReferenceResolutionError,
    SchemaEngineConfig,
    SchemaPipeline,
    ValidationErrorKind,
    default_format_checkers,
)


class TestSchemaPipeline(unittest.TestCase):
    def setUp(self):
        self.schema = {
            "type": "object",
            "properties": {"owner": {"$ref": "people.json#/definitions/Person"}},
            "required": ["owner"],
        }
        self.loader = MappingLoader(
            {
                "people.json": {
                    "definitions": {
                        "Person": {"type": "object", "properties": {"email": {"type": "string", "format": "email"}}}
                    }
                }
            }
        )

    def test_graph_is_built_once(self):
        pipeline = SchemaPipeline(self.schema, loader=self.loader)
        self.assertIs(pipeline.graph, pipeline.graph)
        pipeline.validate({"owner": {}})
        pipeline.project()
        self.assertEqual(self.loader.calls, {"people.json": 1})

    def test_validate(self):
        pipeline = SchemaPipeline(self.schema, loader=self.loader)
        self.assertEqual(pipeline.validate({"owner": {"email": "a@b.io"}}), [])
        findings = pipeline.validate({"owner": {"email": "nope"}})
        self.assertEqual([(f.kind, f.path) for f in findings], [(ValidationErrorKind.FORMAT_MISMATCH, "#/owner/email")])

    def test_project_is_cached(self):
        pipeline = SchemaPipeline(self.schema, loader=self.loader)
        type_graph = pipeline.project()
        self.assertIs(pipeline.project(), type_graph)
        self.assertEqual([e.name for e in type_graph.entities], ["Root", "Person"])

    def test_config_is_applied(self):
        config = SchemaEngineConfig.from_dict({"validation": {"check_formats": False}, "projection": {"root_name": "Pet"}})
        pipeline = SchemaPipeline(self.schema, config=config, loader=self.loader)
        self.assertEqual(pipeline.validate({"owner": {"email": "nope"}}), [])
        self.assertEqual(pipeline.project().root_type.name, "Pet")

    def test_custom_format_checkers(self):
        checkers = default_format_checkers()
        checkers.register("email", lambda value: value.endswith("@example.com"))
        pipeline = SchemaPipeline(self.schema, loader=self.loader, format_checkers=checkers)
        self.assertEqual(len(pipeline.validate({"owner": {"email": "a@b.io"}})), 1)

    def test_missing_loader(self):
        pipeline = SchemaPipeline(self.schema)
        with self.assertRaises(ReferenceResolutionError):
            pipeline.validate({})


class TestJsonFileLoader:
    def test_relative_document(self, tmp_path):
        (tmp_path / "pet.json").write_text(json.dumps({"type": "object"}))
        loader = JsonFileLoader(tmp_path)
        assert loader("pet.json") == {"type": "object"}

    def test_file_uri(self, tmp_path):
        path = tmp_path / "with space.json"
        path.write_text(json.dumps({"type": "string"}))
        assert JsonFileLoader()(path.as_uri()) == {"type": "string"}

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError):
            JsonFileLoader().path_for("https://example.com/schema.json")

    def test_resolution_through_files(self, tmp_path):
        (tmp_path / "root.json").write_text(json.dumps({"properties": {"pet": {"$ref": "pet.json"}}}))
        (tmp_path / "pet.json").write_text(json.dumps({"type": "object", "required": ["name"]}))
        config = SchemaEngineConfig()
        config.resolver.document_uri = (tmp_path / "root.json").as_uri()
        schema = json.loads((tmp_path / "root.json").read_text())
        pipeline = SchemaPipeline(schema, config=config, loader=JsonFileLoader(tmp_path))
        findings = pipeline.validate({"pet": {}})
        assert [(f.kind, f.path) for f in findings] == [(ValidationErrorKind.PROPERTY_REQUIRED, "#/pet/name")]

    def test_missing_file_is_wrapped(self, tmp_path):
        pipeline = SchemaPipeline({"$ref": "absent.json"}, loader=JsonFileLoader(tmp_path))
        with pytest.raises(ReferenceResolutionError) as excinfo:
            pipeline.validate({})
        assert isinstance(excinfo.value.__cause__, FileNotFoundError)


if __name__ == "__main__":
    pytest.main([__file__])
