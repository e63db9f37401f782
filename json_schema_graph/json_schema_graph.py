import json
import logging
from pathlib import Path

import click

from . import __version__
from .cli_utils import reconstruct_command_line
from .config import SchemaEngineConfig
from .exceptions import SchemaGraphError
from .loaders import JsonFileLoader
from .pipeline import SchemaPipeline
from .reports import ReportRenderer
from .utils import snake_to_pascal_case


def _load_config(config_path: str | None) -> SchemaEngineConfig:
    if config_path is None:
        return SchemaEngineConfig()
    with open(config_path) as f:
        return SchemaEngineConfig.from_dict(json.load(f))


def _build_pipeline(schema_path: str, config: SchemaEngineConfig) -> SchemaPipeline:
    with open(schema_path) as f:
        schema = json.load(f)

    if not config.resolver.document_uri:
        config.resolver.document_uri = Path(schema_path).as_uri()
    base_path = config.resolver.base_path or str(Path(schema_path).parent)

    return SchemaPipeline(schema, config, loader=JsonFileLoader(base_path))


def _renderer(config: SchemaEngineConfig) -> ReportRenderer:
    ctx = click.get_current_context()
    return ReportRenderer(config.add_generation_comment, reconstruct_command_line(ctx.command))


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log resolution and projection details")
@click.version_option(__version__, prog_name="json_schema_graph")
def json_schema_graph(verbose):
    """Resolve, validate and project JSON Schema documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@json_schema_graph.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output-format", "-f", default="text", type=click.Choice(["text", "json"]))
@click.argument("schema_path", type=click.Path(exists=True, resolve_path=True))
@click.argument("instance_path", type=click.Path(exists=True, resolve_path=True))
def validate(config, output_format, schema_path, instance_path):
    """Validate INSTANCE_PATH against SCHEMA_PATH; exits with status 1 on findings."""
    engine_config = _load_config(config)
    pipeline = _build_pipeline(schema_path, engine_config)

    with open(instance_path) as f:
        instance = json.load(f)

    try:
        findings = pipeline.validate(instance)
    except SchemaGraphError as e:
        raise click.ClickException(str(e)) from e

    report = _renderer(engine_config).render_findings(
        findings, Path(instance_path).name, Path(schema_path).name, output_format
    )
    click.echo(report, nl=False)
    if findings:
        raise SystemExit(1)


@json_schema_graph.command()
@click.option("--name", "-n", default=None, type=str)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output-format", "-f", default="text", type=click.Choice(["text", "json"]))
@click.argument("schema_path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(resolve_path=True))
def project(name, config, output_format, schema_path, output):
    """Project SCHEMA_PATH into a type graph, written to OUTPUT or stdout."""
    engine_config = _load_config(config)

    if name is None:
        name = snake_to_pascal_case(Path(schema_path).stem) or engine_config.projection.root_name
    engine_config.projection.root_name = name

    pipeline = _build_pipeline(schema_path, engine_config)
    try:
        type_graph = pipeline.project()
    except SchemaGraphError as e:
        raise click.ClickException(str(e)) from e

    out = _renderer(engine_config).render_type_graph(type_graph, name, output_format)
    if output is None:
        click.echo(out, nl=False)
    else:
        with open(output, "w") as f:
            f.write(out)
