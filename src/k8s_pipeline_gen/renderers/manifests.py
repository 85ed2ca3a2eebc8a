"""Kubernetes Deployment and Service manifests."""

from typing import Any, Dict, Optional

from ..pipeline.project_config import SERVICE_TYPES, ProjectConfig
from .buildspec import IMAGE_PLACEHOLDER


def _labels(config: ProjectConfig) -> Dict[str, str]:
    return {"app": config.name}


def render_deployment(
    config: ProjectConfig,
    image_name: str,
    tag: str = "latest",
    resources: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Render a Deployment for the project.

    The container image is always IMAGE_PLACEHOLDER; the deploy build spec
    replaces it with the pushed image URI. ``image_name`` and ``tag`` are
    accepted for API parity and do not appear in the manifest.
    """
    if resources is None:
        resources = config.deployment.resource_requests

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": config.name,
            "namespace": config.namespace,
            "labels": _labels(config),
        },
        "spec": {
            "replicas": config.deployment.replicas,
            "selector": {"matchLabels": _labels(config)},
            "template": {
                "metadata": {"labels": _labels(config)},
                "spec": {
                    "containers": [
                        {
                            "name": config.name,
                            "image": IMAGE_PLACEHOLDER,
                            "imagePullPolicy": "Always",
                            "ports": [
                                {"containerPort": config.deployment.container_port}
                            ],
                            "resources": {"requests": dict(resources)},
                        }
                    ]
                },
            },
        },
    }


def render_service(
    config: ProjectConfig,
    port: Optional[int] = None,
    target_port: Optional[int] = None,
    service_type: Optional[str] = None,
) -> Dict[str, Any]:
    """Render a Service selecting the project's pods."""
    port = config.deployment.service_port if port is None else port
    if target_port is None:
        target_port = config.deployment.container_port
    service_type = service_type or config.deployment.service_type

    if service_type not in SERVICE_TYPES:
        raise ValueError(
            f"Service type {service_type} is not valid. "
            f"Use one of: {', '.join(SERVICE_TYPES)}"
        )

    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": config.name,
            "namespace": config.namespace,
            "labels": _labels(config),
        },
        "spec": {
            "type": service_type,
            "ports": [{"port": port, "targetPort": target_port, "protocol": "TCP"}],
            "selector": _labels(config),
        },
    }
