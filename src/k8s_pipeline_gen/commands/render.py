"""Render command: print a single artifact to stdout."""

import typer

from ..generator import PipelineGenerator
from ..helpers.error_handler import handle_error, validate_artifact_exists
from ..helpers.utils import dump_yaml
from ..renderers import registry


def render_command(artifact: str, config_file: str) -> None:
    """Render one registered artifact from a pipeline definition."""
    validate_artifact_exists(artifact, registry)

    try:
        generator = PipelineGenerator.from_file(config_file)
        rendered = generator.render(artifact)
    except ValueError as e:
        handle_error(str(e))

    if not isinstance(rendered, str):
        rendered = dump_yaml(rendered)
    typer.echo(rendered, nl=False)
