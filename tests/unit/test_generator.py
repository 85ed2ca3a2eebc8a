"""Unit tests for PipelineGenerator."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from k8s_pipeline_gen import PipelineGenerator, ProjectConfig, Stage, Step

EXPECTED_FILES = {
    "Jenkinsfile",
    "aws-codepipeline.yaml",
    "buildspec.yml",
    "deploy-buildspec.yml",
    "k8s/dev/deployment.yaml",
    "k8s/dev/service.yaml",
    "k8s/staging/deployment.yaml",
    "k8s/staging/service.yaml",
    "k8s/prod/deployment.yaml",
    "k8s/prod/service.yaml",
}


def _tree(root: Path):
    return {
        path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()
    }


class TestConstruction:
    """Test generator construction."""

    def test_options_build_config(self):
        generator = PipelineGenerator(projectName="svc", dockerRegistry="acme")

        assert generator.config.name == "svc"
        assert generator.config.docker_registry == "acme"
        assert len(generator.stage_model) == 0

    def test_config_and_options_conflict(self, project_config):
        with pytest.raises(ValueError, match="not both"):
            PipelineGenerator(project_config, projectName="other")

    def test_add_operations_return_generator(self, project_config):
        generator = PipelineGenerator(project_config)
        assert generator.add_test_stage() is generator
        assert generator.add_stage(Stage("x", (Step("s", "alpine", ("sh", "-c", "true")),))) is generator

    def test_failed_deploy_stage_leaves_model_unchanged(self, generator):
        count = len(generator.stages)

        with pytest.raises(ValueError, match="Environment qa is not valid"):
            generator.add_deploy_stage("qa")

        assert len(generator.stages) == count


class TestStageSpecs:
    """Test stages described by definition items."""

    def test_typed_specs(self, project_config):
        generator = PipelineGenerator(project_config)
        generator.add_stage_from_spec({"type": "test"})
        generator.add_stage_from_spec({"type": "build", "command": "make"})
        generator.add_stage_from_spec({"type": "docker-build", "tag": "v3"})
        generator.add_stage_from_spec({"type": "deploy", "environment": "prod"})

        names = [stage.name for stage in generator.stages]
        assert names == ["test", "build", "docker-build", "deploy-to-prod"]
        assert generator.stages[1].steps[0].script == "make"
        assert "myorg/my-nodejs-app:v3" in generator.stages[2].steps[0].script

    def test_custom_spec(self, project_config):
        generator = PipelineGenerator(project_config)
        generator.add_stage_from_spec(
            {
                "type": "custom",
                "name": "lint",
                "steps": [{"name": "ruff", "image": "python:3.12", "command": ["sh", "-c", "ruff ."]}],
            }
        )
        assert generator.stages[0].name == "lint"

    def test_unknown_type(self, project_config):
        with pytest.raises(ValueError, match="Unknown stage type: helm"):
            PipelineGenerator(project_config).add_stage_from_spec({"type": "helm"})


class TestDeterminism:
    """Test repeated renders are byte-identical."""

    def test_render_all_twice(self, generator):
        assert generator.render_all() == generator.render_all()

    def test_two_sessions_same_input(self, project_config):
        def build():
            return (
                PipelineGenerator(project_config)
                .add_test_stage()
                .add_docker_build_stage("app", "v1")
                .add_deploy_stage("staging")
                .render_all()
            )

        assert build() == build()


class TestSaveToFiles:
    """Test saving artifacts."""

    def test_exact_file_set(self, generator, tmp_path):
        output_dir = tmp_path / "out"
        paths = generator.save_to_files(output_dir)

        assert _tree(output_dir) == EXPECTED_FILES
        assert {p.relative_to(output_dir).as_posix() for p in paths} == EXPECTED_FILES

    def test_creates_missing_parents(self, generator, tmp_path):
        output_dir = tmp_path / "a" / "b" / "c"
        generator.save_to_files(str(output_dir))
        assert (output_dir / "k8s" / "prod" / "service.yaml").is_file()

    def test_custom_environments(self, tmp_path):
        generator = PipelineGenerator(ProjectConfig(name="svc", environments=("qa",)))
        generator.save_to_files(tmp_path)

        assert _tree(tmp_path) == {
            "Jenkinsfile",
            "aws-codepipeline.yaml",
            "buildspec.yml",
            "deploy-buildspec.yml",
            "k8s/qa/deployment.yaml",
            "k8s/qa/service.yaml",
        }

    def test_file_contents(self, generator, tmp_path):
        generator.save_to_files(tmp_path)

        assert (tmp_path / "Jenkinsfile").read_text() == generator.generate_jenkinsfile()
        template = yaml.safe_load((tmp_path / "aws-codepipeline.yaml").read_text())
        assert template == generator.generate_cloud_pipeline()
        buildspec = yaml.safe_load((tmp_path / "buildspec.yml").read_text())
        assert buildspec == generator.generate_build_spec()
        deployment = yaml.safe_load((tmp_path / "k8s/dev/deployment.yaml").read_text())
        assert deployment["spec"]["template"]["spec"]["containers"][0]["image"] == "IMAGE_PLACEHOLDER"

    def test_render_error_writes_nothing(self, project_config, tmp_path):
        generator = PipelineGenerator(project_config).add_stage(Stage("empty"))

        with pytest.raises(ValueError):
            generator.save_to_files(tmp_path / "out")

        assert not (tmp_path / "out").exists()

    def test_lenient_generator_saves(self, project_config, tmp_path):
        generator = PipelineGenerator(project_config, strict=False).add_stage(Stage("empty"))
        generator.save_to_files(tmp_path)
        assert "stage('empty')" in (tmp_path / "Jenkinsfile").read_text()

    def test_write_error_propagates(self, generator, tmp_path):
        with patch(
            "k8s_pipeline_gen.helpers.output_writer.open",
            side_effect=PermissionError("denied"),
            create=True,
        ):
            with pytest.raises(PermissionError):
                generator.save_to_files(tmp_path)


class TestFromFile:
    """Test loading a generator from a definition file."""

    def test_from_file(self, definition_file):
        generator = PipelineGenerator.from_file(definition_file)

        assert generator.config.name == "my-nodejs-app"
        assert generator.config.registry.region == "us-west-2"
        assert [stage.name for stage in generator.stages] == [
            "test",
            "build",
            "docker-build",
            "deploy-to-dev",
        ]

    def test_commit_substring_tag_kept_for_runtime(self, tmp_path):
        """Test a shell substring tag reaches the docker command unchanged."""
        path = tmp_path / "pipeline.yaml"
        path.write_text(
            "projectName: app\n"
            "dockerRegistry: myorg\n"
            "stages:\n"
            "  - type: docker-build\n"
            "    imageName: app\n"
            "    tag: ${GIT_COMMIT:0:7}\n"
        )

        with patch.dict(os.environ, {}, clear=True):
            generator = PipelineGenerator.from_file(str(path))

        script = generator.stages[0].steps[0].script
        assert script == (
            "docker build -t myorg/app:${GIT_COMMIT:0:7} -f ./Dockerfile . "
            "&& docker push myorg/app:${GIT_COMMIT:0:7}"
        )

    def test_from_file_matches_api(self, definition_file, generator):
        """Test a definition file and the equivalent API calls render identically."""
        loaded = PipelineGenerator.from_file(definition_file)
        assert loaded.render_all() == generator.render_all()
