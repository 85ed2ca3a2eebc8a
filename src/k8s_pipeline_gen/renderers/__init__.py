"""Renderers projecting the project configuration and stage model into artifacts."""

from .buildspec import IMAGE_PLACEHOLDER, render_build_spec, render_deploy_build_spec
from .codepipeline import derive_repository_id, render_cloud_pipeline
from .jenkins import JenkinsRenderError, render_jenkinsfile
from .manifests import render_deployment, render_service
from .registry import RendererRegistry, registry

# Register built-in renderers
registry.register("jenkinsfile", render_jenkinsfile)
registry.register("codepipeline", render_cloud_pipeline)
registry.register("buildspec", lambda config, stages: render_build_spec(config))
registry.register(
    "deploy-buildspec", lambda config, stages: render_deploy_build_spec(config)
)

__all__ = [
    "IMAGE_PLACEHOLDER",
    "JenkinsRenderError",
    "RendererRegistry",
    "derive_repository_id",
    "registry",
    "render_build_spec",
    "render_cloud_pipeline",
    "render_deploy_build_spec",
    "render_deployment",
    "render_jenkinsfile",
    "render_service",
]
