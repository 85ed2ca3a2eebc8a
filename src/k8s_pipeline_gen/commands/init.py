"""Init command: write a starter pipeline definition file."""

from pathlib import Path
from typing import List

import typer


def init_command(
    output_file: str,
    project_name: str,
    repo_url: str,
    environments: List[str],
    region: str = "us-east-1",
) -> None:
    """
    Create a starter pipeline definition with the common stages.

    Args:
        output_file: Output file path for the definition
        project_name: Project name
        repo_url: Git repository URL
        environments: Environments to deploy to, in order
        region: AWS region for the ECR registry
    """
    content = _generate_definition_content(project_name, repo_url, environments, region)
    output_path = _write_definition_file(output_file, content)
    _display_creation_summary(project_name, output_path, environments)


def _write_definition_file(output_file: str, content: str) -> Path:
    """
    Write definition content to the output path, creating parent directories.

    Raises:
        typer.Exit: If the file already exists or cannot be written
    """
    output_path = Path(output_file)
    if output_path.exists():
        typer.echo(f"❌ Error: {output_path} already exists", err=True)
        raise typer.Exit(1)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(content)
    except OSError as e:
        typer.echo(f"❌ Error creating pipeline definition: {str(e)}", err=True)
        raise typer.Exit(1)

    return output_path


def _generate_definition_content(
    project_name: str, repo_url: str, environments: List[str], region: str
) -> str:
    environments_section = "\n".join(f"  - {env}" for env in environments)
    deploy_stages = "\n".join(
        f"  - type: deploy\n    environment: {env}" for env in environments
    )

    return f"""# Kubernetes pipeline definition
# Values support ${{VAR}} and ${{VAR:default}} substitution from the environment.
# Use $${{VAR}} to keep a literal ${{VAR}} for the pipeline runtime.

projectName: {project_name}
repoUrl: "{repo_url}"
branch: main
namespace: default
dockerRegistry: ${{DOCKER_REGISTRY:myorg}}
dockerfilePath: ./Dockerfile

registry:
  aws:
    region: {region}
    accountId: "${{AWS_ACCOUNT_ID:123456789012}}"
    ecrRepository: {project_name}-repo

environments:
{environments_section}

# deployment:
#   replicas: 1
#   containerPort: 8080
#   servicePort: 80
#   serviceType: ClusterIP
#   resources:
#     cpu: 100m
#     memory: 128Mi

stages:
  - type: test
    command: npm test
    image: node:16
  - type: build
    command: npm ci && npm run build
    image: node:16
  - type: docker-build
    imageName: {project_name}
    tag: latest
{deploy_stages}
"""


def _display_creation_summary(
    project_name: str, output_path: Path, environments: List[str]
) -> None:
    typer.echo(f"✅ Pipeline definition created: {output_path}")
    typer.echo(f"📝 Project name: {project_name}")
    typer.echo(f"🎯 Environments: {', '.join(environments)}")
    typer.echo()
    typer.echo("📋 Next steps:")
    typer.echo("1. Review the registry and stage settings")
    typer.echo(f"2. Validate with: k8s-pipeline-gen validate --config {output_path}")
    typer.echo(f"3. Generate with: k8s-pipeline-gen generate --config {output_path}")
