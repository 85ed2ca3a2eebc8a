"""Generate Jenkins, AWS CodePipeline and Kubernetes configuration for a project."""

__version__ = "1.0.0"

from .generator import PipelineGenerator
from .pipeline import (
    DeploymentConfig,
    EnvVar,
    ProjectConfig,
    RegistryConfig,
    Stage,
    StageModel,
    Step,
)
from .renderers import registry

__all__ = [
    "DeploymentConfig",
    "EnvVar",
    "PipelineGenerator",
    "ProjectConfig",
    "RegistryConfig",
    "Stage",
    "StageModel",
    "Step",
    "registry",
]
