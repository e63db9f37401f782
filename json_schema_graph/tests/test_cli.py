"""
Tests for the json_schema_graph command line.
"""

import json

import pytest
from click.testing import CliRunner

from json_schema_graph.json_schema_graph import json_schema_graph

REPORT_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["ReportID"],
    "properties": {"ReportID": {"type": "string"}, "pet": {"$ref": "pet.json"}},
}

PET_SCHEMA = {"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]}


@pytest.fixture
def schema_dir(tmp_path):
    (tmp_path / "report.json").write_text(json.dumps(REPORT_SCHEMA))
    (tmp_path / "pet.json").write_text(json.dumps(PET_SCHEMA))
    (tmp_path / "valid.json").write_text(json.dumps({"ReportID": "r1", "pet": {"name": "Rex"}}))
    (tmp_path / "invalid.json").write_text(json.dumps({"Key": "Value", "pet": {}}))
    return tmp_path


def invoke(*args):
    return CliRunner().invoke(json_schema_graph, [str(arg) for arg in args])


class TestValidateCommand:
    def test_valid_instance(self, schema_dir):
        result = invoke("validate", schema_dir / "report.json", schema_dir / "valid.json")
        assert result.exit_code == 0, result.output
        assert "valid.json: valid against report.json" in result.output
        assert result.output.startswith("# Generated by json_schema_graph v")

    def test_invalid_instance(self, schema_dir):
        result = invoke("validate", schema_dir / "report.json", schema_dir / "invalid.json")
        assert result.exit_code == 1
        assert "invalid.json: 3 findings against report.json" in result.output
        assert "#/ReportID [PropertyRequired]" in result.output
        assert "# [NoAdditionalPropertiesAllowed] property 'Key' is not allowed" in result.output
        # External document resolved next to the schema file
        assert "#/pet/name [PropertyRequired]" in result.output

    def test_json_output(self, schema_dir):
        result = invoke("validate", "-f", "json", schema_dir / "report.json", schema_dir / "invalid.json")
        data = json.loads(result.output)
        assert data["valid"] is False
        assert [f["kind"] for f in data["findings"]] == [
            "PropertyRequired",
            "NoAdditionalPropertiesAllowed",
            "PropertyRequired",
        ]

    def test_config_disables_generation_comment(self, schema_dir):
        config_path = schema_dir / "config.json"
        config_path.write_text(json.dumps({"add_generation_comment": False}))
        result = invoke("validate", "-c", config_path, schema_dir / "report.json", schema_dir / "valid.json")
        assert not result.output.startswith("#")

    def test_unresolvable_reference(self, schema_dir):
        (schema_dir / "broken.json").write_text(json.dumps({"$ref": "#/definitions/Missing"}))
        result = invoke("validate", schema_dir / "broken.json", schema_dir / "valid.json")
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "#/definitions/Missing" in result.output


class TestProjectCommand:
    def test_project_to_stdout(self, schema_dir):
        result = invoke("project", schema_dir / "report.json")
        assert result.exit_code == 0, result.output
        assert "# Report: Report" in result.output
        assert "entity Report" in result.output
        assert "  ReportID?: string" not in result.output
        assert "  ReportID: string" in result.output
        assert "entity Pet" in result.output

    def test_project_to_file_with_name(self, schema_dir):
        output = schema_dir / "types.txt"
        result = invoke("project", "--name", "Document", schema_dir / "report.json", output)
        assert result.exit_code == 0, result.output
        text = output.read_text()
        assert "entity Document" in text
        assert "constructor(ReportID, pet)" in text
        assert "json_schema_graph project report.json" in text
        assert "--name Document" in text

    def test_project_json(self, schema_dir):
        result = invoke("project", "-f", "json", schema_dir / "report.json")
        data = json.loads(result.output)
        assert data["name"] == "Report"
        assert [entity["name"] for entity in data["entities"]] == ["Report", "Pet"]

    def test_verbose_flag(self, schema_dir):
        result = invoke("--verbose", "project", schema_dir / "report.json")
        assert result.exit_code == 0

    def test_version(self):
        result = invoke("--version")
        assert result.exit_code == 0
        assert "json_schema_graph" in result.output


if __name__ == "__main__":
    pytest.main([__file__])
