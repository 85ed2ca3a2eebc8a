"""Unit tests for the stage model."""

import pytest

from k8s_pipeline_gen.pipeline.stages import EnvVar, Stage, StageModel, Step


@pytest.fixture
def model():
    return StageModel(
        environments=("dev", "staging", "prod"),
        docker_registry="myorg",
        dockerfile_path="./Dockerfile",
    )


class TestStep:
    """Test Step helpers."""

    def test_container_name_strips_tag(self):
        step = Step(name="s", image="node:16", command=["sh", "-c", "npm test"])
        assert step.container_name == "node"

    def test_container_name_keeps_repository_path(self):
        """Test only the segment before the first colon is used."""
        step = Step(name="s", image="bitnami/kubectl:latest")
        assert step.container_name == "bitnami/kubectl"

    def test_script_requires_three_tokens(self):
        assert Step(name="s", image="alpine", command=["make"]).script is None
        assert Step(name="s", image="alpine", command=["sh", "-c", "ls"]).script == "ls"

    def test_from_dict(self):
        step = Step.from_dict(
            {
                "name": "lint",
                "image": "python:3.12",
                "command": ["sh", "-c", "flake8"],
                "env": [{"name": "CI", "value": "true"}],
            }
        )
        assert step.command == ("sh", "-c", "flake8")
        assert step.env == (EnvVar("CI", "true"),)


class TestStageModelAdd:
    """Test the chainable add operations."""

    def test_add_operations_chain(self, model):
        """Test every add operation returns the model itself."""
        result = (
            model.add_test_stage()
            .add_build_stage()
            .add_docker_build_stage("app")
            .add_deploy_stage("dev")
            .add_stage(Stage(name="custom"))
        )
        assert result is model
        assert [stage.name for stage in model] == [
            "test",
            "build",
            "docker-build",
            "deploy-to-dev",
            "custom",
        ]

    def test_add_test_stage_defaults(self, model):
        model.add_test_stage()
        step = model.stages[0].steps[0]

        assert model.stages[0].name == "test"
        assert step.name == "run-tests"
        assert step.image == "node:14"
        assert step.command == ("sh", "-c", "npm test")

    def test_add_build_stage(self, model):
        model.add_build_stage("make all", "gcc:13")
        stage = model.stages[0]

        assert stage.name == "build"
        assert stage.steps[0].name == "build-app"
        assert stage.steps[0].image == "gcc:13"
        assert stage.steps[0].command == ("sh", "-c", "make all")

    def test_add_docker_build_stage_image_reference(self, model):
        """Test the registry-qualified reference is built and pushed."""
        model.add_docker_build_stage("app", "v1")
        step = model.stages[0].steps[0]

        assert model.stages[0].name == "docker-build"
        assert step.name == "build-and-push"
        assert step.image == "docker:20.10.12-dind"
        assert step.script == (
            "docker build -t myorg/app:v1 -f ./Dockerfile . && docker push myorg/app:v1"
        )
        assert step.script.count("myorg/app:v1") == 2
        assert step.env == (EnvVar("DOCKER_HOST", "tcp://localhost:2375"),)

    def test_add_docker_build_stage_default_tag(self, model):
        model.add_docker_build_stage("app")
        assert "myorg/app:latest" in model.stages[0].steps[0].script

    def test_add_deploy_stage(self, model):
        model.add_deploy_stage("staging")
        stage = model.stages[0]
        step = stage.steps[0]

        assert stage.name == "deploy-to-staging"
        assert step.name == "kubectl-apply"
        assert step.image == "bitnami/kubectl:latest"
        assert step.script == "kubectl apply -f /workspace/k8s/${ENVIRONMENT}/"
        assert step.env == (EnvVar("ENVIRONMENT", "staging"),)

    def test_add_deploy_stage_unknown_environment(self, model):
        """Test an unknown environment fails and appends nothing."""
        model.add_test_stage()

        with pytest.raises(ValueError) as exc_info:
            model.add_deploy_stage("qa")

        assert "dev, staging, prod" in str(exc_info.value)
        assert len(model) == 1

    def test_add_deploy_stage_custom_environments(self):
        model = StageModel(environments=("qa",))
        model.add_deploy_stage("qa")

        with pytest.raises(ValueError, match="Use one of: qa"):
            model.add_deploy_stage("dev")
        assert len(model) == 1

    def test_add_stage_accepts_mapping(self, model):
        model.add_stage(
            {
                "name": "integration",
                "runAfter": "build",
                "parallel": True,
                "steps": [
                    {"name": "a", "image": "alpine:3", "command": ["sh", "-c", "true"]},
                    {"name": "b", "image": "alpine:3", "command": ["sh", "-c", "false"]},
                ],
            }
        )
        stage = model.stages[0]

        assert stage.run_after == "build"
        assert stage.parallel is True
        assert len(stage.steps) == 2

    def test_duplicate_stages_allowed(self, model):
        """Test identical stages are appended each time."""
        model.add_test_stage().add_test_stage()
        assert [stage.name for stage in model] == ["test", "test"]

    def test_stages_snapshot_is_immutable(self, model):
        """Test callers cannot mutate the model through the stages view."""
        model.add_test_stage()
        snapshot = model.stages
        model.add_build_stage()

        assert len(snapshot) == 1
        assert len(model.stages) == 2
