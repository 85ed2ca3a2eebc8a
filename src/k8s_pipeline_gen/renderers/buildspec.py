"""CodeBuild build specifications for the image build and cluster deploy projects."""

from typing import Any, Dict

from ..pipeline.project_config import ProjectConfig

BUILDSPEC_VERSION = "0.2"
IMAGE_PLACEHOLDER = "IMAGE_PLACEHOLDER"
IMAGE_DEFINITION_FILE = "imageDefinition.json"
KUBECTL_DOWNLOAD_URL = (
    "https://amazon-eks.s3.us-west-2.amazonaws.com/1.21.2/2021-07-05/bin/linux/amd64/kubectl"
)


def render_build_spec(config: ProjectConfig) -> Dict[str, Any]:
    """
    Build spec that builds the image, pushes it to ECR and stages manifests.

    The image is tagged with the first 7 characters of the resolved source
    version (or "latest") and with "latest"; the tagged URI is recorded in
    imageDefinition.json for the deploy project.
    """
    region = config.registry.region
    registry_endpoint = config.registry.endpoint
    ecr_repo = config.registry.ecr_repository
    tagged_image = f"{config.image_uri}:$IMAGE_TAG"
    latest_image = f"{config.image_uri}:latest"

    return {
        "version": BUILDSPEC_VERSION,
        "phases": {
            "pre_build": {
                "commands": [
                    "echo Logging in to Amazon ECR...",
                    f"aws ecr get-login-password --region {region} | docker login --username AWS --password-stdin {registry_endpoint}",
                    "echo Checking if repository exists...",
                    f"aws ecr describe-repositories --repository-names {ecr_repo} || aws ecr create-repository --repository-name {ecr_repo}",
                    "COMMIT_HASH=$(echo $CODEBUILD_RESOLVED_SOURCE_VERSION | cut -c 1-7)",
                    "IMAGE_TAG=${COMMIT_HASH:=latest}",
                ]
            },
            "build": {
                "commands": [
                    "echo Build started on `date`",
                    f"echo Building the Docker image: {tagged_image}",
                    f"docker build -t {tagged_image} -f {config.dockerfile_path} .",
                    f"docker tag {tagged_image} {latest_image}",
                ]
            },
            "post_build": {
                "commands": [
                    "echo Build completed on `date`",
                    "echo Pushing the Docker image...",
                    f"docker push {tagged_image}",
                    f"docker push {latest_image}",
                    "echo Writing artifact files...",
                    f'echo "{{\\"ImageURI\\":\\"{tagged_image}\\"}}" > {IMAGE_DEFINITION_FILE}',
                    "echo Generating Kubernetes manifests...",
                    "mkdir -p kubernetes/",
                    "envsubst < k8s/deployment.yaml > kubernetes/deployment.yaml",
                    "envsubst < k8s/service.yaml > kubernetes/service.yaml",
                ]
            },
        },
        "artifacts": {
            "files": [
                IMAGE_DEFINITION_FILE,
                "appspec.yaml",
                "kubernetes/**/*",
                "k8s/**/*",
            ]
        },
    }


def render_deploy_build_spec(config: ProjectConfig) -> Dict[str, Any]:
    """
    Build spec that applies the staged manifests to an EKS cluster.

    EKS_CLUSTER_NAME and AWS_REGION come from the build environment. The
    closing pod and service listing is informational only.
    """
    namespace = config.namespace

    return {
        "version": BUILDSPEC_VERSION,
        "phases": {
            "install": {
                "commands": [
                    "echo Installing kubectl...",
                    f"curl -o kubectl {KUBECTL_DOWNLOAD_URL}",
                    "chmod +x ./kubectl",
                    "mv ./kubectl /usr/local/bin/kubectl",
                ]
            },
            "pre_build": {
                "commands": [
                    "echo Configuring kubectl...",
                    "aws eks update-kubeconfig --name ${EKS_CLUSTER_NAME} --region ${AWS_REGION}",
                ]
            },
            "build": {
                "commands": [
                    "echo Deployment started on `date`",
                    "echo Updating image in Kubernetes manifests...",
                    f"IMAGE_URI=$(cat {IMAGE_DEFINITION_FILE} | jq -r '.ImageURI')",
                    f'sed -i "s|{IMAGE_PLACEHOLDER}|$IMAGE_URI|g" kubernetes/deployment.yaml',
                    "echo Applying Kubernetes manifests...",
                    f"kubectl apply -f kubernetes/deployment.yaml -n {namespace}",
                    f"kubectl apply -f kubernetes/service.yaml -n {namespace}",
                ]
            },
            "post_build": {
                "commands": [
                    "echo Deployment completed on `date`",
                    f"kubectl get pods -n {namespace}",
                    f"kubectl get services -n {namespace}",
                ]
            },
        },
    }
