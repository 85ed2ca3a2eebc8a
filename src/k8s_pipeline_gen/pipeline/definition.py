"""Pipeline definition file loading."""

from typing import Any, Dict, List, Tuple

from ..helpers.logger import get_logger
from .project_config import ProjectConfig
from .validation import validate_definition_file


def parse_definition(
    data: Dict[str, Any],
) -> Tuple[ProjectConfig, List[Dict[str, Any]]]:
    """
    Split parsed definition data into a project config and stage items.

    Returns:
        Tuple of (project_config, stage_items)
    """
    options = {key: value for key, value in data.items() if key != "stages"}
    return ProjectConfig.from_dict(options), list(data.get("stages") or [])


def load_definition(
    definition_file: str,
) -> Tuple[ProjectConfig, List[Dict[str, Any]]]:
    """
    Load and validate a pipeline definition YAML file.

    Raises:
        ValueError: If the file is missing, is not valid YAML, or fails
            schema validation. All schema errors are listed in the message.
    """
    logger = get_logger("definition")

    is_valid, errors, definition_data = validate_definition_file(definition_file)
    if not is_valid:
        error_msg = (
            f"Pipeline definition validation failed for {definition_file}:\n"
            + "\n".join(f"  - {error}" for error in errors)
        )
        raise ValueError(error_msg)

    config, stages = parse_definition(definition_data)
    logger.debug(
        f"Loaded definition for {config.name} with {len(stages)} stages "
        f"from {definition_file}"
    )
    return config, stages
