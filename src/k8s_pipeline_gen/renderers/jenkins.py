"""Render the stage model as a declarative Jenkins pipeline script."""

from typing import Iterable

from ..helpers.logger import get_logger
from ..pipeline.project_config import ProjectConfig
from ..pipeline.stages import Stage

GROOVY_TRIPLE_QUOTE = '"""'


class JenkinsRenderError(ValueError):
    """A stage cannot be expressed as a Jenkins ``sh`` block."""


def _preamble(config: ProjectConfig) -> str:
    return f"""
pipeline {{
  agent {{
    kubernetes {{
      yaml '''
apiVersion: v1
kind: Pod
metadata:
  labels:
    app: {config.pipeline_name}
spec:
  containers:
  - name: jnlp
    image: jenkins/inbound-agent:4.11.2-4
  - name: docker
    image: docker:20.10.12-dind
    securityContext:
      privileged: true
    volumeMounts:
    - name: docker-socket
      mountPath: /var/run/docker.sock
  - name: kubectl
    image: bitnami/kubectl:latest
    command:
    - cat
    tty: true
  volumes:
  - name: docker-socket
    hostPath:
      path: /var/run/docker.sock
      type: Socket
'''
    }}
  }}

  environment {{
    PROJECT_NAME = "{config.name}"
    DOCKER_REGISTRY = "{config.docker_registry}"
    NAMESPACE = "{config.namespace}"
    GIT_BRANCH = "{config.branch}"
  }}

  stages {{
"""


CHECKOUT_STAGE = """
    stage('Checkout') {
      steps {
        checkout scm
      }
    }
"""

POST_BLOCK = """
  }

  post {
    always {
      cleanWs()
    }
    success {
      echo 'Pipeline completed successfully!'
    }
    failure {
      echo 'Pipeline failed!'
    }
  }
}
"""


def check_stage(stage: Stage) -> None:
    """
    Check that a stage has the single ``sh -c <script>`` step Jenkins can render.

    Raises:
        JenkinsRenderError: If the stage would be rendered incompletely
    """
    if not stage.steps:
        raise JenkinsRenderError(f"Stage '{stage.name}' has no steps")
    if len(stage.steps) > 1:
        raise JenkinsRenderError(
            f"Stage '{stage.name}' has {len(stage.steps)} steps; "
            f"only single-step stages can be rendered to a Jenkinsfile"
        )

    step = stage.steps[0]
    if len(step.command) != 3 or tuple(step.command[:2]) != ("sh", "-c"):
        raise JenkinsRenderError(
            f"Stage '{stage.name}' step '{step.name}' command must be "
            f"['sh', '-c', <script>], got: {list(step.command)}"
        )
    if GROOVY_TRIPLE_QUOTE in step.script:
        raise JenkinsRenderError(
            f"Stage '{stage.name}' step '{step.name}' script contains {GROOVY_TRIPLE_QUOTE}, "
            f"which would terminate the sh block"
        )


def _stage_block(stage: Stage, strict: bool) -> str:
    if strict:
        check_stage(stage)
    else:
        try:
            check_stage(stage)
        except JenkinsRenderError as e:
            get_logger("jenkins").warning(f"Rendering stage incompletely: {e}")

    if stage.steps:
        container = stage.steps[0].container_name
        script = stage.steps[0].script or ""
    else:
        container, script = "", ""

    return f"""
    stage('{stage.name}') {{
      steps {{
        container('{container}') {{
          sh \"\"\"
            {script}
          \"\"\"
        }}
      }}
    }}
"""


def render_jenkinsfile(
    config: ProjectConfig, stages: Iterable[Stage], strict: bool = True
) -> str:
    """
    Render a Jenkinsfile running every stage in a Kubernetes agent pod.

    Only the first step of each stage is rendered: its image name before the
    first colon selects the pod container and the third command token is
    embedded in an ``sh`` block.

    Args:
        config: Project configuration
        stages: Stages in the order they should run
        strict: Raise JenkinsRenderError for stages that would lose steps or
            commands; when False such stages are rendered partially and a
            warning is logged

    Returns:
        Jenkinsfile content
    """
    content = _preamble(config)
    content += CHECKOUT_STAGE

    for stage in stages:
        content += _stage_block(stage, strict)

    content += POST_BLOCK
    return content
