"""Utility functions for YAML handling and variable substitution."""

import os
import re
from typing import Any, Dict, List, Union

import yaml

from .logger import get_logger

# ${VAR} or ${VAR:default}; a leading extra "$" escapes the reference
_VAR_PATTERN = re.compile(r"\$(\$)?\{([^}:]+)(?::([^}]*))?\}")
# ${VAR:offset} and ${VAR:offset:length} are shell substrings, not defaults
_SUBSTRING_PATTERN = re.compile(r"^\d+(:\d+)?$")


def substitute_env_vars(data: Union[Dict, List, str]) -> Union[Dict, List, str]:
    """
    Recursively substitute environment variables in YAML data.

    Supports ${VAR_NAME} and ${VAR_NAME:default_value} syntax. Variables that
    are unset and have no default are left untouched so that references meant
    for the pipeline runtime (for example ${ENVIRONMENT}) survive. Shell
    substring references such as ${GIT_COMMIT:0:7} are always left untouched.
    Write $${VAR} to emit a literal ${VAR}.

    Args:
        data: YAML data (dict, list, or string)

    Returns:
        Data with environment variables substituted
    """
    if isinstance(data, dict):
        return {key: substitute_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [substitute_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replace_var(match):
            if match.group(1):
                return match.group(0)[1:]

            var_name = match.group(2)
            default_value = match.group(3)

            if default_value is not None and _SUBSTRING_PATTERN.match(default_value):
                return match.group(0)

            value = os.getenv(var_name)
            if value is not None:
                return value
            if default_value is not None:
                return default_value

            get_logger("utils").debug(
                f"Variable {var_name} is not set, leaving reference in place"
            )
            return match.group(0)

        return _VAR_PATTERN.sub(replace_var, data)
    else:
        return data


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    Load and parse YAML file.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file contains invalid YAML
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(
            f"Pipeline definition file not found: {file_path}\n"
            f"Please create one with 'k8s-pipeline-gen init' or specify the correct path using --config/-c option."
        )

    try:
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)
            return substitute_env_vars(data)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML syntax in {file_path}: {e}")


class _BlockStyleDumper(yaml.SafeDumper):
    """Safe dumper that writes multi-line strings as literal blocks."""


def _represent_str(dumper, value):
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_BlockStyleDumper.add_representer(str, _represent_str)


def dump_yaml(data: Any) -> str:
    """
    Serialize a mapping or sequence to a YAML document.

    Key order is preserved and long command strings are never folded, so the
    same input always produces the same text.
    """
    return yaml.dump(
        data,
        Dumper=_BlockStyleDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=4096,
    )
