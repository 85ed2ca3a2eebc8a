"""Unit tests for Kubernetes manifest rendering."""

import pytest

from k8s_pipeline_gen import PipelineGenerator
from k8s_pipeline_gen.renderers.manifests import render_deployment, render_service


def test_deployment_uses_placeholder_and_resources(project_config):
    """Test the image is the placeholder and requests match the arguments."""
    deployment = render_deployment(
        project_config, "svc", "v2", {"cpu": "100m", "memory": "128Mi"}
    )
    container = deployment["spec"]["template"]["spec"]["containers"][0]

    assert container["image"] == "IMAGE_PLACEHOLDER"
    assert container["image"] != "svc:v2"
    assert container["resources"]["requests"] == {"cpu": "100m", "memory": "128Mi"}


def test_deployment_identity(project_config):
    deployment = render_deployment(project_config, "svc")

    assert deployment["kind"] == "Deployment"
    assert deployment["metadata"] == {
        "name": "my-nodejs-app",
        "namespace": "production",
        "labels": {"app": "my-nodejs-app"},
    }
    assert deployment["spec"]["replicas"] == 1
    assert deployment["spec"]["selector"] == {"matchLabels": {"app": "my-nodejs-app"}}
    assert deployment["spec"]["template"]["spec"]["containers"][0]["ports"] == [
        {"containerPort": 8080}
    ]


def test_deployment_default_resources(project_config):
    container = render_deployment(project_config, "svc")["spec"]["template"]["spec"][
        "containers"
    ][0]
    assert container["resources"]["requests"] == {"cpu": "100m", "memory": "128Mi"}


def test_service_defaults(project_config):
    service = render_service(project_config)

    assert service["kind"] == "Service"
    assert service["spec"]["type"] == "ClusterIP"
    assert service["spec"]["ports"] == [
        {"port": 80, "targetPort": 8080, "protocol": "TCP"}
    ]
    assert service["spec"]["selector"] == {"app": "my-nodejs-app"}


def test_service_arguments(project_config):
    service = PipelineGenerator(project_config).generate_service(8080, 3000, "LoadBalancer")

    assert service["spec"]["type"] == "LoadBalancer"
    assert service["spec"]["ports"][0]["port"] == 8080
    assert service["spec"]["ports"][0]["targetPort"] == 3000


def test_service_unknown_type(project_config):
    with pytest.raises(ValueError, match="Service type Bogus is not valid"):
        render_service(project_config, service_type="Bogus")
