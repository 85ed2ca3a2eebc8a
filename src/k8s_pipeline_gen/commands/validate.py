"""Validate command: check a pipeline definition and describe it."""

import json

import typer

from ..generator import PipelineGenerator
from ..helpers.error_handler import handle_error


def validate_command(config_file: str, output: str = "TEXT") -> None:
    """Validate a pipeline definition file and print a summary."""
    try:
        generator = PipelineGenerator.from_file(config_file)
        # Stages the Jenkinsfile cannot represent fail here rather than at generate time
        generator.generate_jenkinsfile()
    except ValueError as e:
        if output.upper() == "JSON":
            typer.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
            raise typer.Exit(1)
        handle_error(str(e))

    config = generator.config
    stages = [
        {
            "name": stage.name,
            "steps": [step.name for step in stage.steps],
            "runAfter": stage.run_after,
        }
        for stage in generator.stages
    ]

    if output.upper() == "JSON":
        output_data = {
            "valid": True,
            "project": config.name,
            "repository": config.repo_url,
            "branch": config.branch,
            "namespace": config.namespace,
            "image": config.image_uri,
            "environments": list(config.environments),
            "stages": stages,
        }
        typer.echo(json.dumps(output_data, indent=2))
        return

    typer.echo(f"Project: {config.name}")
    typer.echo(f"Repository: {config.repo_url or '(none)'} ({config.branch})")
    typer.echo(f"Namespace: {config.namespace}")
    typer.echo(f"Image: {config.image_uri}")
    typer.echo(f"Environments: {', '.join(config.environments)}")
    typer.echo("\nStages:")
    if not stages:
        typer.echo("  (none)")
    for stage in stages:
        typer.echo(f"  - {stage['name']}: {', '.join(stage['steps'])}")
