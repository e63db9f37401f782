"""
Text and JSON reports for the command line.

Text reports are rendered with Jinja2 templates from the package's
``templates`` directory.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import jinja2

from . import __version__
from .analyzer.type_graph import TypeGraph
from .cli_utils import PROGRAM_NAME
from .validation.errors import ValidationError

TEMPLATE_DIR = Path(__file__).parent / "templates"


class ReportRenderer:
    """Renders validation findings and type graphs."""

    def __init__(self, add_generation_comment: bool = True, command_line: str = PROGRAM_NAME):
        """
        Initialize the renderer.

        Args:
            add_generation_comment: Start text reports with a "generated by" line
            command_line: Command line shown in the generation comment
        """
        self.add_generation_comment = add_generation_comment
        self.command_line = command_line
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.findings_template = self.jinja_env.get_template("findings.txt.jinja2")
        self.type_graph_template = self.jinja_env.get_template("type_graph.txt.jinja2")

    def generation_comment(self) -> str:
        if not self.add_generation_comment:
            return ""
        return f"Generated by {PROGRAM_NAME} v{__version__} : {self.command_line}"

    def render_findings(
        self,
        findings: list[ValidationError],
        instance_name: str,
        schema_name: str,
        output_format: str = "text",
    ) -> str:
        """Render the findings of one validation run."""
        if output_format == "json":
            data = {
                "instance": instance_name,
                "schema": schema_name,
                "valid": not findings,
                "findings": [finding.to_dict() for finding in findings],
            }
            return json.dumps(data, indent=2) + "\n"
        return self.findings_template.render(
            generation_comment=self.generation_comment(),
            instance=instance_name,
            schema=schema_name,
            count=len(findings),
            rows=list(_finding_rows(findings, 0)),
        )

    def render_type_graph(self, type_graph: TypeGraph, name: str, output_format: str = "text") -> str:
        """Render a projected type graph."""
        if output_format == "json":
            data: dict[str, Any] = {"name": name, **type_graph.to_dict()}
            return json.dumps(data, indent=2) + "\n"
        return self.type_graph_template.render(
            generation_comment=self.generation_comment(),
            name=name,
            graph=type_graph,
            sort_required_first=type_graph.sort_constructor_parameters,
        )


def _finding_rows(findings: list[ValidationError], depth: int) -> Iterator[dict[str, Any]]:
    """Flatten findings and their branch findings into indented report rows."""
    for finding in findings:
        yield {"depth": depth, "text": f"{finding.path} [{finding.kind.value}] {finding.message}"}
        for index, branch in enumerate(finding.branch_errors, start=1):
            yield {"depth": depth + 1, "text": f"branch {index}:"}
            yield from _finding_rows(list(branch), depth + 2)
