"""Stage model: an ordered, append-only sequence of pipeline stages."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

DOCKER_BUILD_IMAGE = "docker:20.10.12-dind"
KUBECTL_IMAGE = "bitnami/kubectl:latest"
DEFAULT_RUNTIME_IMAGE = "node:14"
DEPLOY_COMMAND = "kubectl apply -f /workspace/k8s/${ENVIRONMENT}/"


@dataclass(frozen=True)
class EnvVar:
    """Environment variable passed to a step's container."""

    name: str
    value: str


@dataclass(frozen=True)
class Step:
    """A single containerized unit of execution within a stage."""

    name: str
    image: str
    command: Tuple[str, ...] = ()
    env: Tuple[EnvVar, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "command", tuple(self.command))
        object.__setattr__(self, "env", tuple(self.env))

    @property
    def container_name(self) -> str:
        """Image reference up to the first colon."""
        return self.image.split(":", 1)[0]

    @property
    def script(self) -> Optional[str]:
        """Third command token, the script of an ``sh -c <script>`` command."""
        if len(self.command) < 3:
            return None
        return self.command[2]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        return cls(
            name=data.get("name", ""),
            image=data.get("image", ""),
            command=tuple(str(token) for token in data.get("command", [])),
            env=tuple(
                EnvVar(name=item["name"], value=str(item.get("value", "")))
                for item in data.get("env", [])
            ),
        )


def shell_step(
    name: str, image: str, script: str, env: Sequence[EnvVar] = ()
) -> Step:
    """Create a step running ``sh -c <script>``."""
    return Step(name=name, image=image, command=("sh", "-c", script), env=tuple(env))


@dataclass(frozen=True)
class Stage:
    """
    A named unit of pipeline work.

    Stage names need not be unique. ``run_after`` and ``parallel`` are
    informational; no renderer reorders or parallelises stages.
    """

    name: str
    steps: Tuple[Step, ...] = ()
    run_after: Optional[str] = None
    parallel: bool = False

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stage":
        """Create a stage from a mapping with name, steps, runAfter, parallel."""
        return cls(
            name=data.get("name", ""),
            steps=tuple(Step.from_dict(step) for step in data.get("steps", [])),
            run_after=data.get("runAfter", data.get("run_after")),
            parallel=bool(data.get("parallel", False)),
        )


@dataclass
class StageModel:
    """
    Ordered stage collection owned by a single generation session.

    Every add operation appends and returns the model so calls can be chained.
    Renderers only read the model.
    """

    environments: Tuple[str, ...]
    docker_registry: str = ""
    dockerfile_path: str = "./Dockerfile"
    _stages: List[Stage] = field(default_factory=list, init=False, repr=False)

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return tuple(self._stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(tuple(self._stages))

    def __len__(self) -> int:
        return len(self._stages)

    def add_stage(self, stage) -> "StageModel":
        """Append any stage descriptor (a Stage or an equivalent mapping)."""
        if isinstance(stage, dict):
            stage = Stage.from_dict(stage)
        self._stages.append(stage)
        return self

    def add_test_stage(
        self, command: str = "npm test", image: str = DEFAULT_RUNTIME_IMAGE
    ) -> "StageModel":
        return self.add_stage(
            Stage(name="test", steps=(shell_step("run-tests", image, command),))
        )

    def add_build_stage(
        self, command: str = "npm run build", image: str = DEFAULT_RUNTIME_IMAGE
    ) -> "StageModel":
        return self.add_stage(
            Stage(name="build", steps=(shell_step("build-app", image, command),))
        )

    def add_docker_build_stage(
        self, image_name: str, tag: str = "latest"
    ) -> "StageModel":
        """Build and push <registry>/<image_name>:<tag> through the dind sidecar."""
        image_ref = f"{self.docker_registry}/{image_name}:{tag}"
        script = (
            f"docker build -t {image_ref} -f {self.dockerfile_path} . "
            f"&& docker push {image_ref}"
        )
        return self.add_stage(
            Stage(
                name="docker-build",
                steps=(
                    shell_step(
                        "build-and-push",
                        DOCKER_BUILD_IMAGE,
                        script,
                        env=(EnvVar("DOCKER_HOST", "tcp://localhost:2375"),),
                    ),
                ),
            )
        )

    def add_deploy_stage(
        self, environment: str = "dev", resources: Optional[Dict[str, Any]] = None
    ) -> "StageModel":
        """
        Append a kubectl-apply stage for one known environment.

        Args:
            environment: Target environment; must be one of the known environments
            resources: Accepted for API parity; not used by any renderer

        Raises:
            ValueError: If environment is unknown. Nothing is appended.
        """
        if environment not in self.environments:
            raise ValueError(
                f"Environment {environment} is not valid. "
                f"Use one of: {', '.join(self.environments)}"
            )

        return self.add_stage(
            Stage(
                name=f"deploy-to-{environment}",
                steps=(
                    shell_step(
                        "kubectl-apply",
                        KUBECTL_IMAGE,
                        DEPLOY_COMMAND,
                        env=(EnvVar("ENVIRONMENT", environment),),
                    ),
                ),
            )
        )
