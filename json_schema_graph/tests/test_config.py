"""
Tests for SchemaEngineConfig loading.
"""

import unittest

import pytest

from json_schema_graph.config import ProjectionConfig, SchemaEngineConfig, ValidationConfig


class TestSchemaEngineConfig(unittest.TestCase):
    def test_defaults(self):
        config = SchemaEngineConfig()
        self.assertEqual(config.validation.max_depth, 200)
        self.assertTrue(config.validation.check_formats)
        self.assertEqual(config.projection.root_name, "Root")
        self.assertTrue(config.projection.sort_constructor_parameters)
        self.assertEqual(config.projection.name_suffix_start, 2)
        self.assertTrue(config.add_generation_comment)

    def test_from_dict(self):
        config = SchemaEngineConfig.from_dict(
            {
                "resolver": {"base_path": "schemas"},
                "validation": {"max_depth": 10, "ignored_formats": ["email"]},
                "projection": {"root_name": "Report", "ignore_definitions": ["Internal"]},
                "add_generation_comment": False,
                "unknown_option": 1,
            }
        )
        self.assertEqual(config.resolver.base_path, "schemas")
        self.assertEqual(config.validation, ValidationConfig(max_depth=10, ignored_formats=["email"]))
        self.assertEqual(config.projection, ProjectionConfig(root_name="Report", ignore_definitions=["Internal"]))
        self.assertFalse(config.add_generation_comment)
        self.assertFalse(hasattr(config, "unknown_option"))

    def test_unknown_stage_option_raises(self):
        with self.assertRaises(TypeError):
            SchemaEngineConfig.from_dict({"validation": {"max_dept": 10}})

    def test_round_trip(self):
        data = {
            "resolver": {"document_uri": "file:///s/root.json", "base_path": "s"},
            "validation": {"max_depth": 50, "check_formats": False, "ignored_formats": []},
            "projection": {
                "root_name": "Doc",
                "ignore_definitions": ["X"],
                "sort_constructor_parameters": False,
                "name_suffix_start": 1,
            },
            "add_generation_comment": True,
        }
        self.assertEqual(SchemaEngineConfig.from_dict(data).to_dict(), data)


if __name__ == "__main__":
    pytest.main([__file__])
