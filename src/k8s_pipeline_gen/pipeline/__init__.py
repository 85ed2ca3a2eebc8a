"""
Pipeline module for the Kubernetes pipeline generator.

Contains the project configuration, the stage model and definition file
validation.
"""

from .definition import load_definition, parse_definition
from .project_config import DeploymentConfig, ProjectConfig, RegistryConfig
from .stages import EnvVar, Stage, StageModel, Step, shell_step
from .validation import (
    validate_definition_file,
    validate_definition_schema,
    validate_stage_environments,
    validate_yaml_syntax,
)

__all__ = [
    "DeploymentConfig",
    "EnvVar",
    "ProjectConfig",
    "RegistryConfig",
    "Stage",
    "StageModel",
    "Step",
    "load_definition",
    "parse_definition",
    "shell_step",
    "validate_definition_file",
    "validate_definition_schema",
    "validate_stage_environments",
    "validate_yaml_syntax",
]
