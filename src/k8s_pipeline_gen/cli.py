#!/usr/bin/env python3
"""
k8s-pipeline-gen - Generate Jenkins, AWS CodePipeline and Kubernetes configuration
"""

import os

import typer
from rich.console import Console

from . import __version__
from .commands.generate import generate_command
from .commands.init import init_command
from .commands.render import render_command
from .commands.validate import validate_command
from .helpers.logger import LOG_LEVEL_ENV_VAR, PACKAGE_LOGGER, setup_logger

console = Console(stderr=True)


def configure_logging(output_format: str = "TEXT", log_level: str = None):
    """Configure logging based on output format and log level."""
    # Set log level: CLI option > environment > default
    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")

    # Keep stdout clean for JSON and rendered artifacts
    json_output = output_format.upper() == "JSON"

    setup_logger(PACKAGE_LOGGER, log_level.upper(), json_output)


def show_help_suggestion():
    """Show helpful suggestions for common mistakes."""
    console.print("\n[yellow]💡 Common usage patterns:[/yellow]")
    console.print("   [cyan]k8s-pipeline-gen init --output pipeline.yaml --name my-app[/cyan]")
    console.print("   [cyan]k8s-pipeline-gen validate --config pipeline.yaml[/cyan]")
    console.print("   [cyan]k8s-pipeline-gen render jenkinsfile --config pipeline.yaml[/cyan]")
    console.print(
        "   [cyan]k8s-pipeline-gen generate --config pipeline.yaml --output-dir ./pipeline[/cyan]"
    )

    console.print("\n[yellow]📖 For detailed help:[/yellow]")
    console.print("   [cyan]k8s-pipeline-gen --help[/cyan]")
    console.print("   [cyan]k8s-pipeline-gen <command> --help[/cyan]")


app = typer.Typer(
    help="k8s-pipeline-gen - Generate CI/CD pipeline configuration for Kubernetes projects",
    no_args_is_help=True,
    add_completion=False,
    epilog="💡 Use 'k8s-pipeline-gen <command> --help' for command-specific help",
)


# Global log level option
LOG_LEVEL = None


def _version_callback(value: bool):
    if value:
        typer.echo(f"k8s-pipeline-gen {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        case_sensitive=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """k8s-pipeline-gen - Generate CI/CD pipeline configuration for Kubernetes projects."""
    global LOG_LEVEL
    LOG_LEVEL = log_level


@app.command(
    "init",
    help="1. Create a starter pipeline definition. Example: k8s-pipeline-gen init --output pipeline.yaml --name my-app",
    rich_help_panel="Pipeline Commands",
)
def init(
    output: str = typer.Option(
        "pipeline.yaml",
        "--output",
        "-o",
        help="Output file path for the pipeline definition",
    ),
    name: str = typer.Option(
        "k8s-app", "--name", "-n", help="Project name (defaults to 'k8s-app')"
    ),
    repo_url: str = typer.Option(
        None,
        "--repo-url",
        help="Git repository URL (defaults to https://github.com/myorg/<name>)",
    ),
    environments: str = typer.Option(
        "dev,staging,prod",
        "--environments",
        help="Comma-separated list of environments to deploy to",
    ),
    region: str = typer.Option("us-east-1", "--region", help="AWS region"),
):
    """Create a starter pipeline definition file."""
    configure_logging("TEXT", LOG_LEVEL)

    if not repo_url:
        repo_url = f"https://github.com/myorg/{name}"

    environments_list = [env.strip() for env in environments.split(",") if env.strip()]
    init_command(output, name, repo_url, environments_list, region)


@app.command(
    "validate",
    help="2. Validate and describe a pipeline definition. Example: k8s-pipeline-gen validate --config pipeline.yaml",
    rich_help_panel="Pipeline Commands",
)
def validate(
    config_file: str = typer.Option(
        "pipeline.yaml", "--config", "-c", help="Path to pipeline definition file"
    ),
    output: str = typer.Option(
        "TEXT", "--output", "-o", help="Output format: TEXT (default) or JSON"
    ),
):
    """Validate and describe a pipeline definition file."""
    configure_logging(output, LOG_LEVEL)
    validate_command(config_file, output)


@app.command(
    "render",
    help="3. Print one artifact to stdout. Example: k8s-pipeline-gen render jenkinsfile --config pipeline.yaml",
    rich_help_panel="Pipeline Commands",
)
def render(
    artifact: str = typer.Argument(
        ...,
        help="Artifact to render: jenkinsfile, codepipeline, buildspec or deploy-buildspec",
    ),
    config_file: str = typer.Option(
        "pipeline.yaml", "--config", "-c", help="Path to pipeline definition file"
    ),
):
    """Render a single artifact to stdout."""
    configure_logging("JSON", LOG_LEVEL)
    render_command(artifact, config_file)


@app.command(
    "generate",
    help="4. Write all artifacts to a directory. Example: k8s-pipeline-gen generate --config pipeline.yaml --output-dir ./pipeline",
    rich_help_panel="Pipeline Commands",
)
def generate(
    config_file: str = typer.Option(
        "pipeline.yaml", "--config", "-c", help="Path to pipeline definition file"
    ),
    output_dir: str = typer.Option(
        "./pipeline", "--output-dir", "-d", help="Output directory for generated files"
    ),
    output: str = typer.Option(
        "TEXT", "--output", "-o", help="Output format: TEXT (default) or JSON"
    ),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Render stages the Jenkinsfile cannot fully represent instead of failing",
    ),
):
    """Render all artifacts and save them to the output directory."""
    configure_logging(output, LOG_LEVEL)
    generate_command(config_file, output_dir, output, lenient)


def cli_error_handler():
    """Handle CLI errors and provide helpful suggestions."""
    try:
        app()
    except typer.Exit as e:
        if e.exit_code != 0:
            console.print(f"[dim]k8s-pipeline-gen v{__version__}[/dim]")
            show_help_suggestion()
        raise
    except Exception as e:
        console.print(f"[dim]k8s-pipeline-gen v{__version__}[/dim]")
        console.print(f"\n[red]❌ Error: {e}[/red]")
        show_help_suggestion()
        raise typer.Exit(1)


if __name__ == "__main__":
    cli_error_handler()
