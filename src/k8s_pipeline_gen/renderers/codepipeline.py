"""Render the AWS CodePipeline CloudFormation template."""

import re
from typing import Any, Dict, Iterable, Optional

from ..helpers.logger import get_logger
from ..helpers.utils import dump_yaml
from ..pipeline.project_config import ProjectConfig
from ..pipeline.stages import Stage
from .buildspec import render_build_spec, render_deploy_build_spec

CODEBUILD_IMAGE = "aws/codebuild/amazonlinux2-x86_64-standard:3.0"
SOURCE_ARTIFACT = "SourceCode"
BUILD_ARTIFACT = "BuildOutput"

_REPOSITORY_PREFIX = re.compile(r"^.*github\.com/")


def derive_repository_id(repo_url: str) -> str:
    """
    Derive the ``owner/repo`` identifier from a GitHub repository URL.

    URLs that do not contain ``github.com/`` are returned unchanged; an empty
    URL (no repository configured) yields an empty identifier.
    """
    if not repo_url:
        return ""
    if not _REPOSITORY_PREFIX.match(repo_url):
        get_logger("codepipeline").warning(
            f"Repository URL '{repo_url}' is not a github.com URL; "
            f"using it unchanged as the repository identifier"
        )
        return repo_url
    return _REPOSITORY_PREFIX.sub("", repo_url, count=1)


def _service_role(service: str, managed_policies) -> Dict[str, Any]:
    return {
        "Type": "AWS::IAM::Role",
        "Properties": {
            "AssumeRolePolicyDocument": {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Principal": {"Service": service},
                        "Action": "sts:AssumeRole",
                    }
                ],
            },
            "ManagedPolicyArns": list(managed_policies),
        },
    }


def _codebuild_project(
    name: str, build_spec: Dict[str, Any], privileged: bool = False
) -> Dict[str, Any]:
    environment = {
        "Type": "LINUX_CONTAINER",
        "ComputeType": "BUILD_GENERAL1_SMALL",
        "Image": CODEBUILD_IMAGE,
    }
    if privileged:
        environment["PrivilegedMode"] = True

    return {
        "Type": "AWS::CodeBuild::Project",
        "Properties": {
            "Name": name,
            "ServiceRole": {"Fn::GetAtt": ["CodeBuildServiceRole", "Arn"]},
            "Artifacts": {"Type": "CODEPIPELINE"},
            "Environment": environment,
            "Source": {"Type": "CODEPIPELINE", "BuildSpec": dump_yaml(build_spec)},
        },
    }


def _codebuild_action(
    name: str, project_ref: str, input_artifact: str, output_artifact: Optional[str]
) -> Dict[str, Any]:
    action = {
        "Name": name,
        "ActionTypeId": {
            "Category": "Build",
            "Owner": "AWS",
            "Provider": "CodeBuild",
            "Version": "1",
        },
        "Configuration": {"ProjectName": {"Ref": project_ref}},
        "InputArtifacts": [{"Name": input_artifact}],
    }
    if output_artifact:
        action["OutputArtifacts"] = [{"Name": output_artifact}]
    return action


def _pipeline_stages(config: ProjectConfig):
    return [
        {
            "Name": "Source",
            "Actions": [
                {
                    "Name": "Source",
                    "ActionTypeId": {
                        "Category": "Source",
                        "Owner": "AWS",
                        "Provider": "CodeStarSourceConnection",
                        "Version": "1",
                    },
                    "Configuration": {
                        "ConnectionArn": config.connection_arn,
                        "FullRepositoryId": derive_repository_id(config.repo_url),
                        "BranchName": config.branch,
                    },
                    "OutputArtifacts": [{"Name": SOURCE_ARTIFACT}],
                }
            ],
        },
        {
            "Name": "Build",
            "Actions": [
                _codebuild_action(
                    "BuildAndPushDockerImage",
                    "DockerBuildProject",
                    SOURCE_ARTIFACT,
                    BUILD_ARTIFACT,
                )
            ],
        },
        {
            "Name": "Deploy",
            "Actions": [
                _codebuild_action(
                    "DeployToKubernetes",
                    "KubernetesDeployProject",
                    BUILD_ARTIFACT,
                    None,
                )
            ],
        },
    ]


def render_cloud_pipeline(
    config: ProjectConfig, stages: Optional[Iterable[Stage]] = None
) -> Dict[str, Any]:
    """
    Render the CloudFormation template for a Source/Build/Deploy pipeline.

    The pipeline stages are fixed and do not depend on the stage model;
    ``stages`` is accepted so the renderer fits the registry signature.

    Args:
        config: Project configuration
        stages: Ignored

    Returns:
        CloudFormation template as a mapping
    """
    pipeline_name = config.pipeline_name

    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Description": f"AWS CodePipeline for {config.name} Kubernetes deployment",
        "Resources": {
            "ArtifactBucket": {
                "Type": "AWS::S3::Bucket",
                "Properties": {"VersioningConfiguration": {"Status": "Enabled"}},
            },
            "CodeBuildServiceRole": _service_role(
                "codebuild.amazonaws.com",
                [
                    "arn:aws:iam::aws:policy/AmazonECR-FullAccess",
                    "arn:aws:iam::aws:policy/AmazonS3FullAccess",
                ],
            ),
            "CodePipelineServiceRole": _service_role(
                "codepipeline.amazonaws.com",
                [
                    "arn:aws:iam::aws:policy/AWSCodeBuildAdminAccess",
                    "arn:aws:iam::aws:policy/AmazonS3FullAccess",
                    "arn:aws:iam::aws:policy/AmazonECR-FullAccess",
                ],
            ),
            "DockerBuildProject": _codebuild_project(
                f"{config.name}-docker-build",
                render_build_spec(config),
                privileged=True,
            ),
            "KubernetesDeployProject": _codebuild_project(
                f"{config.name}-k8s-deploy", render_deploy_build_spec(config)
            ),
            "Pipeline": {
                "Type": "AWS::CodePipeline::Pipeline",
                "Properties": {
                    "Name": pipeline_name,
                    "RoleArn": {"Fn::GetAtt": ["CodePipelineServiceRole", "Arn"]},
                    "ArtifactStore": {
                        "Type": "S3",
                        "Location": {"Ref": "ArtifactBucket"},
                    },
                    "Stages": _pipeline_stages(config),
                },
            },
        },
        "Outputs": {
            "PipelineUrl": {
                "Description": "URL to the AWS CodePipeline console",
                "Value": {
                    "Fn::Sub": (
                        "https://${AWS::Region}.console.aws.amazon.com/codepipeline/home"
                        f"?region=${{AWS::Region}}#/view/{pipeline_name}"
                    )
                },
            }
        },
    }
