"""Project identity and registry configuration shared by every renderer."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

DEFAULT_PROJECT_NAME = "k8s-app"
DEFAULT_ENVIRONMENTS = ("dev", "staging", "prod")
DEFAULT_CONNECTION_ARN = "{{CONNECTION_ARN}}"
SERVICE_TYPES = ("ClusterIP", "NodePort", "LoadBalancer", "ExternalName")


@dataclass(frozen=True)
class RegistryConfig:
    """AWS ECR registry descriptor."""

    region: str = "us-east-1"
    account_id: str = "123456789012"
    ecr_repository: Optional[str] = None

    @property
    def endpoint(self) -> str:
        """Registry host, e.g. 123456789012.dkr.ecr.us-east-1.amazonaws.com."""
        return f"{self.account_id}.dkr.ecr.{self.region}.amazonaws.com"


@dataclass(frozen=True)
class DeploymentConfig:
    """
    Kubernetes deployment and service defaults.

    ``resources`` may be given as a mapping; it is stored as a tuple of
    ``(name, quantity)`` pairs so the config stays read-only and hashable.
    """

    replicas: int = 1
    container_port: int = 8080
    resources: Tuple[Tuple[str, str], ...] = (("cpu", "100m"), ("memory", "128Mi"))
    service_port: int = 80
    service_type: str = "ClusterIP"

    def __post_init__(self):
        pairs = (
            self.resources.items()
            if isinstance(self.resources, Mapping)
            else self.resources
        )
        object.__setattr__(
            self, "resources", tuple((str(k), str(v)) for k, v in pairs)
        )

    @property
    def resource_requests(self) -> Dict[str, str]:
        """Resource requests as a fresh dict."""
        return dict(self.resources)


@dataclass(frozen=True)
class ProjectConfig:
    """
    Parameter store for one generation session.

    Instances are immutable; every field is validated once in __post_init__.
    """

    name: str = DEFAULT_PROJECT_NAME
    repo_url: str = ""
    branch: str = "main"
    namespace: str = "default"
    docker_registry: str = ""
    dockerfile_path: str = "./Dockerfile"
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    environments: Tuple[str, ...] = DEFAULT_ENVIRONMENTS
    connection_arn: str = DEFAULT_CONNECTION_ARN
    deployment: DeploymentConfig = field(default_factory=DeploymentConfig)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Project name is required and cannot be empty")

        # frozen dataclass: normalise through object.__setattr__
        environments = tuple(self.environments)
        object.__setattr__(self, "environments", environments)

        if not environments:
            raise ValueError("At least one environment must be defined")
        for env in environments:
            if not isinstance(env, str) or not env.strip():
                raise ValueError(f"Environment names cannot be empty, got: {env!r}")
        duplicates = sorted({env for env in environments if environments.count(env) > 1})
        if duplicates:
            raise ValueError(f"Duplicate environment names: {', '.join(duplicates)}")

        if self.registry.ecr_repository is None:
            object.__setattr__(
                self,
                "registry",
                RegistryConfig(
                    region=self.registry.region,
                    account_id=self.registry.account_id,
                    ecr_repository=f"{self.name}-repo",
                ),
            )

        if self.deployment.service_type not in SERVICE_TYPES:
            raise ValueError(
                f"Service type {self.deployment.service_type} is not valid. "
                f"Use one of: {', '.join(SERVICE_TYPES)}"
            )

    @property
    def image_uri(self) -> str:
        """ECR image URI without tag."""
        return f"{self.registry.endpoint}/{self.registry.ecr_repository}"

    @property
    def pipeline_name(self) -> str:
        return f"{self.name}-pipeline"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "ProjectConfig":
        """Create project configuration from the camelCase options mapping."""
        data = data or {}

        aws_data = (data.get("registry") or {}).get("aws") or {}
        registry = RegistryConfig(
            region=aws_data.get("region", "us-east-1"),
            account_id=str(aws_data.get("accountId", "123456789012")),
            ecr_repository=aws_data.get("ecrRepository"),
        )

        deployment_data = data.get("deployment") or {}
        defaults = DeploymentConfig()
        deployment = DeploymentConfig(
            replicas=deployment_data.get("replicas", defaults.replicas),
            container_port=deployment_data.get(
                "containerPort", defaults.container_port
            ),
            resources=deployment_data.get("resources", defaults.resources),
            service_port=deployment_data.get("servicePort", defaults.service_port),
            service_type=deployment_data.get("serviceType", defaults.service_type),
        )

        return cls(
            name=data.get("projectName") or DEFAULT_PROJECT_NAME,
            repo_url=data.get("repoUrl") or "",
            branch=data.get("branch") or "main",
            namespace=data.get("namespace") or "default",
            docker_registry=data.get("dockerRegistry") or "",
            dockerfile_path=data.get("dockerfilePath") or "./Dockerfile",
            registry=registry,
            environments=tuple(data.get("environments") or DEFAULT_ENVIRONMENTS),
            connection_arn=data.get("connectionArn") or DEFAULT_CONNECTION_ARN,
            deployment=deployment,
        )
