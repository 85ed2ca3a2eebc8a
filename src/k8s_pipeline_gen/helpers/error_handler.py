"""Error handling utilities for the pipeline generator CLI."""

import typer


def handle_error(message: str, exit_code: int = 1) -> None:
    """Handle errors consistently across the CLI."""
    typer.echo(f"❌ Error: {message}", err=True)
    raise typer.Exit(exit_code)


def handle_success(message: str) -> None:
    """Handle success messages consistently across the CLI."""
    typer.echo(f"✅ {message}")


def validate_artifact_exists(artifact_name: str, registry) -> None:
    """Validate that a renderer is registered for the requested artifact."""
    if artifact_name not in registry.names():
        handle_error(
            f"Artifact '{artifact_name}' is not a registered renderer. "
            f"Available artifacts: {', '.join(registry.names())}"
        )
