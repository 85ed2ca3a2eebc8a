import logging
import textwrap

import pytest

from k8s_pipeline_gen import PipelineGenerator, ProjectConfig


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI invocations so tests stay independent."""
    yield
    logger = logging.getLogger("k8s_pipeline_gen")
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def project_config():
    """Project configuration used across renderer tests."""
    return ProjectConfig.from_dict(
        {
            "projectName": "my-nodejs-app",
            "repoUrl": "https://github.com/myorg/my-nodejs-app",
            "branch": "main",
            "namespace": "production",
            "dockerRegistry": "myorg",
            "dockerfilePath": "./Dockerfile",
            "registry": {
                "aws": {
                    "region": "us-west-2",
                    "accountId": "123456789012",
                    "ecrRepository": "my-nodejs-app",
                }
            },
        }
    )


@pytest.fixture
def generator(project_config):
    """Generator with the standard test/build/docker/deploy stages."""
    return (
        PipelineGenerator(project_config)
        .add_test_stage("npm test", "node:16")
        .add_build_stage("npm ci && npm run build", "node:16")
        .add_docker_build_stage("my-nodejs-app", "v1")
        .add_deploy_stage("dev")
    )


@pytest.fixture
def definition_file(tmp_path):
    """Write a valid pipeline definition file and return its path."""
    path = tmp_path / "pipeline.yaml"
    path.write_text(
        textwrap.dedent(
            """
            projectName: my-nodejs-app
            repoUrl: https://github.com/myorg/my-nodejs-app
            namespace: production
            dockerRegistry: myorg
            registry:
              aws:
                region: us-west-2
                accountId: "123456789012"
                ecrRepository: my-nodejs-app
            stages:
              - type: test
                command: npm test
                image: node:16
              - type: build
                command: npm ci && npm run build
                image: node:16
              - type: docker-build
                imageName: my-nodejs-app
                tag: v1
              - type: deploy
                environment: dev
            """
        )
    )
    return str(path)
