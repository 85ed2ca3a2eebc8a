"""Generation session: project configuration, stage model and artifact output."""

from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .helpers.logger import get_logger
from .helpers.output_writer import write_artifacts
from .helpers.utils import dump_yaml
from .pipeline.project_config import ProjectConfig
from .pipeline.stages import Stage, StageModel
from .renderers import (
    registry,
    render_build_spec,
    render_cloud_pipeline,
    render_deploy_build_spec,
    render_deployment,
    render_jenkinsfile,
    render_service,
)


class PipelineGenerator:
    """
    Builds pipeline artifacts for one project.

    Stages are appended through chainable add_* methods; generate_* methods
    are pure and may be called any number of times.

    Example:
        generator = PipelineGenerator(projectName="my-app", dockerRegistry="myorg")
        generator.add_test_stage().add_build_stage().add_deploy_stage("dev")
        generator.save_to_files("./pipeline")
    """

    def __init__(
        self,
        config: Optional[ProjectConfig] = None,
        strict: bool = True,
        **options: Any,
    ):
        """
        Args:
            config: Project configuration; built from ``options`` when omitted
            strict: Reject stages the Jenkinsfile cannot represent fully
            **options: camelCase options accepted by ProjectConfig.from_dict
        """
        if config is None:
            config = ProjectConfig.from_dict(options)
        elif options:
            raise ValueError("Pass either a ProjectConfig or options, not both")

        self.config = config
        self.strict = strict
        self.stage_model = StageModel(
            environments=config.environments,
            docker_registry=config.docker_registry,
            dockerfile_path=config.dockerfile_path,
        )

    @classmethod
    def from_file(cls, definition_file: str, strict: bool = True) -> "PipelineGenerator":
        """Create a generator from a pipeline definition YAML file."""
        from .pipeline.definition import load_definition

        config, stage_specs = load_definition(definition_file)
        generator = cls(config, strict=strict)
        for spec in stage_specs:
            generator.add_stage_from_spec(spec)
        return generator

    @property
    def stages(self):
        return self.stage_model.stages

    # Stage model mutators

    def add_stage(self, stage: Union[Stage, Dict[str, Any]]) -> "PipelineGenerator":
        self.stage_model.add_stage(stage)
        return self

    def add_test_stage(self, *args, **kwargs) -> "PipelineGenerator":
        self.stage_model.add_test_stage(*args, **kwargs)
        return self

    def add_build_stage(self, *args, **kwargs) -> "PipelineGenerator":
        self.stage_model.add_build_stage(*args, **kwargs)
        return self

    def add_docker_build_stage(self, *args, **kwargs) -> "PipelineGenerator":
        self.stage_model.add_docker_build_stage(*args, **kwargs)
        return self

    def add_deploy_stage(self, *args, **kwargs) -> "PipelineGenerator":
        self.stage_model.add_deploy_stage(*args, **kwargs)
        return self

    def add_stage_from_spec(self, spec: Dict[str, Any]) -> "PipelineGenerator":
        """Append a stage described by a pipeline definition ``stages`` item."""
        stage_type = spec.get("type", "custom")

        if stage_type == "test":
            return self.add_test_stage(**_present(spec, command="command", image="image"))
        if stage_type == "build":
            return self.add_build_stage(**_present(spec, command="command", image="image"))
        if stage_type == "docker-build":
            return self.add_docker_build_stage(
                spec.get("imageName", self.config.name),
                **_present(spec, tag="tag"),
            )
        if stage_type == "deploy":
            return self.add_deploy_stage(
                spec.get("environment", "dev"), spec.get("resources")
            )
        if stage_type == "custom":
            return self.add_stage(spec)

        raise ValueError(
            f"Unknown stage type: {stage_type}. "
            f"Use one of: test, build, docker-build, deploy, custom"
        )

    # Renderers

    def generate_jenkinsfile(self) -> str:
        return render_jenkinsfile(self.config, self.stages, strict=self.strict)

    def generate_cloud_pipeline(self) -> Dict[str, Any]:
        return render_cloud_pipeline(self.config)

    def generate_build_spec(self) -> Dict[str, Any]:
        return render_build_spec(self.config)

    def generate_deploy_build_spec(self) -> Dict[str, Any]:
        return render_deploy_build_spec(self.config)

    def generate_deployment(
        self,
        image_name: str,
        tag: str = "latest",
        resources: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return render_deployment(self.config, image_name, tag, resources)

    def generate_service(
        self,
        port: Optional[int] = None,
        target_port: Optional[int] = None,
        service_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        return render_service(self.config, port, target_port, service_type)

    def render(self, artifact_name: str) -> Any:
        """
        Render any registered artifact, including externally registered ones.

        The built-in Jenkinsfile renderer follows this session's ``strict``
        setting, so ``render("jenkinsfile")`` matches ``generate_jenkinsfile()``.
        """
        renderer = registry.get_renderer(artifact_name)
        if renderer is render_jenkinsfile:
            renderer = partial(render_jenkinsfile, strict=self.strict)
        return renderer(self.config, self.stages)

    def render_all(self) -> Dict[str, str]:
        """
        Render every saved artifact as text.

        Returns:
            Mapping of relative output path -> file content
        """
        artifacts = {
            "Jenkinsfile": self.generate_jenkinsfile(),
            "aws-codepipeline.yaml": dump_yaml(self.generate_cloud_pipeline()),
            "buildspec.yml": dump_yaml(self.generate_build_spec()),
            "deploy-buildspec.yml": dump_yaml(self.generate_deploy_build_spec()),
        }

        service = dump_yaml(self.generate_service())
        for env in self.config.environments:
            artifacts[f"k8s/{env}/deployment.yaml"] = dump_yaml(
                self.generate_deployment(f"{self.config.name}-{env}")
            )
            artifacts[f"k8s/{env}/service.yaml"] = service

        return artifacts

    def save_to_files(self, output_dir: Union[str, Path] = "./pipeline") -> List[Path]:
        """
        Write all artifacts below ``output_dir``.

        Everything is rendered before the first write, so a rendering error
        leaves the output directory untouched. Write errors propagate and may
        leave a partially populated tree.

        Returns:
            Paths of the files written
        """
        logger = get_logger("generator")
        artifacts = self.render_all()
        logger.info(
            f"Saving {len(artifacts)} artifacts for {self.config.name} to {output_dir}"
        )
        return write_artifacts(output_dir, artifacts)


def _present(spec: Dict[str, Any], **keys: str) -> Dict[str, Any]:
    """Map spec keys to keyword arguments, skipping keys that are absent."""
    return {arg: spec[key] for arg, key in keys.items() if key in spec}
