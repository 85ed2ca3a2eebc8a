"""Generate command: write every artifact to an output directory."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.tree import Tree

from ..generator import PipelineGenerator
from ..helpers.error_handler import handle_error, handle_success
from ..helpers.logger import get_logger


def display_output_tree(output_dir: str, paths) -> None:
    """Print written files as a tree relative to the output directory."""
    console = Console()
    root = Path(output_dir)
    tree = Tree(f"📁 {root}")
    branches = {}

    for path in paths:
        relative = Path(path).relative_to(root)
        node = tree
        for i, part in enumerate(relative.parts[:-1]):
            key = relative.parts[: i + 1]
            if key not in branches:
                branches[key] = node.add(f"📁 {part}")
            node = branches[key]
        node.add(f"📄 {relative.name}")

    console.print(tree)


def generate_command(
    config_file: str, output_dir: str, output: str = "TEXT", lenient: bool = False
) -> None:
    """Render all artifacts from a pipeline definition and save them."""
    logger = get_logger("generate")

    try:
        generator = PipelineGenerator.from_file(config_file, strict=not lenient)
        paths = generator.save_to_files(output_dir)
    except ValueError as e:
        handle_error(str(e))
    except OSError as e:
        logger.debug(f"Write to {output_dir} failed", exc_info=True)
        handle_error(f"Failed to write pipeline files to {output_dir}: {e}")

    if output.upper() == "JSON":
        output_data = {
            "project": generator.config.name,
            "outputDir": str(output_dir),
            "files": [str(path) for path in paths],
        }
        typer.echo(json.dumps(output_data, indent=2))
        return

    handle_success(
        f"Generated {len(paths)} files for {generator.config.name} in {output_dir}"
    )
    display_output_tree(output_dir, paths)
