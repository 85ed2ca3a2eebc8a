"""
Validation utilities for pipeline definition files.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

import jsonschema

from ..helpers.utils import load_yaml
from .project_config import DEFAULT_ENVIRONMENTS

SCHEMA_FILE = "pipeline-definition-schema.yaml"


def load_schema() -> Dict[str, Any]:
    """Load the pipeline definition schema shipped with the package."""
    schema_path = Path(__file__).parent / SCHEMA_FILE
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    return load_yaml(str(schema_path))


def _format_path(path: Iterable[Any]) -> str:
    parts = [str(p) for p in path]
    return " -> ".join(parts) if parts else "root"


def validate_yaml_syntax(definition_path: str) -> Tuple[bool, str, Dict[str, Any]]:
    """
    Validate YAML syntax of a definition file.

    Returns:
        Tuple of (is_valid, error_message, parsed_data)
    """
    try:
        data = load_yaml(definition_path)
    except FileNotFoundError:
        return False, f"File not found: {definition_path}", {}
    except Exception as e:
        return False, f"YAML syntax error: {e}", {}

    if data is None:
        return False, f"Pipeline definition is empty: {definition_path}", {}
    return True, "", data


def validate_definition_schema(
    definition_data: Dict[str, Any], schema: Dict[str, Any] = None
) -> Tuple[bool, List[str]]:
    """
    Validate definition data against the schema.

    Every violation is reported, ordered by its location in the document.

    Returns:
        Tuple of (is_valid, list_of_error_messages)
    """
    if schema is None:
        schema = load_schema()

    validator = jsonschema.Draft7Validator(schema)
    errors = sorted(
        validator.iter_errors(definition_data),
        key=lambda e: [str(p) for p in e.absolute_path],
    )

    error_messages = [
        f"Path '{_format_path(error.absolute_path)}': {error.message}"
        for error in errors
    ]
    return not error_messages, error_messages


def validate_stage_environments(definition_data: Dict[str, Any]) -> List[str]:
    """
    Check that every deploy stage targets a declared environment.

    The schema cannot relate ``stages[].environment`` to ``environments``,
    so this runs after schema validation succeeds.
    """
    environments = definition_data.get("environments") or list(DEFAULT_ENVIRONMENTS)

    errors = []
    for index, stage in enumerate(definition_data.get("stages") or []):
        if stage.get("type") != "deploy":
            continue
        environment = stage.get("environment")
        if environment not in environments:
            errors.append(
                f"Path '{_format_path(['stages', index, 'environment'])}': "
                f"Environment {environment} is not valid. "
                f"Use one of: {', '.join(environments)}"
            )
    return errors


def validate_definition_file(
    definition_path: str,
) -> Tuple[bool, List[str], Dict[str, Any]]:
    """
    Validate a definition file completely (YAML syntax, schema, environments).

    Returns:
        Tuple of (is_valid, list_of_error_messages, parsed_data)
    """
    yaml_valid, yaml_error, definition_data = validate_yaml_syntax(definition_path)
    if not yaml_valid:
        return False, [yaml_error], {}

    schema_valid, schema_errors = validate_definition_schema(definition_data)
    if not schema_valid:
        return False, schema_errors, definition_data

    environment_errors = validate_stage_environments(definition_data)
    if environment_errors:
        return False, environment_errors, definition_data

    return True, [], definition_data
