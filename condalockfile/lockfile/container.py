"""
Cross-platform resolution inside a disposable container.

Used when the lockfile targets a different platform than the host (macOS host,
Linux target). A small resolver image is built from a structured BuildSpec,
the spec is staged into a scratch directory mounted into a fresh container,
the container runs 'conda env create' and 'conda env export' against it, and
the exported document is harvested from the scratch directory. The container
is removed and the scratch directory deleted on every exit path.
"""

import json
import shlex
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from condalockfile.cl_logging import setup_logging
from condalockfile.config import (
    CONTAINER_WORKDIR,
    DEFAULT_DEPFILE,
    DEPLOYED_LOCKFILE_NAME,
    DOCKER_PLATFORMS,
    PLATFORM,
    SUPPORTED_CROSS_PLATFORMS,
    LockfileConfig,
)
from condalockfile.dependency_check import check_docker_available
from condalockfile.environment import current_platform, normalize_platform
from condalockfile.error_messages import format_error
from condalockfile.errors import ErrorCode, ProcessError, UnsupportedPlatformError
from condalockfile.lockfile.generator import conda_create_command, conda_export_command, parse_export
from condalockfile.lockfile.models import EnvironmentSpec, prepare_resolved_document
from condalockfile.lockfile.session import FreezeSession, freeze_session
from condalockfile.progress import create_stage_progress
from condalockfile.utils import CommandExecutor, format_command

# conda inside the resolver image
CONTAINER_CONDA = "conda"


@dataclass
class BuildSpec:
    """
    Structured description of the resolver image.

    Attributes:
        base_image: Image providing conda.
        tag: Tag the image is built under; rebuilding the same tag is idempotent.
        platform: Docker platform string, e.g. 'linux/amd64'.
        workdir: Mount point of the scratch directory inside the container.
        labels: OCI labels attached to the image.
        entrypoint: Exec-form entrypoint; the container command is appended to it.
    """
    base_image: str
    tag: str
    platform: str
    workdir: str = CONTAINER_WORKDIR
    labels: Dict[str, str] = field(default_factory=lambda: {
        "org.opencontainers.image.title": "conda-lockfile resolver",
    })
    entrypoint: List[str] = field(default_factory=lambda: ["/bin/sh", "-ec"])


class DockerfileBuilder:
    """Render a BuildSpec as Dockerfile text."""

    def render(self, spec: BuildSpec) -> str:
        lines = [f"FROM --platform={spec.platform} {spec.base_image}"]
        for key, value in sorted(spec.labels.items()):
            lines.append(f"LABEL {key}={json.dumps(value)}")
        lines.append(f"WORKDIR {spec.workdir}")
        lines.append(f"ENTRYPOINT {json.dumps(spec.entrypoint)}")
        return "\n".join(lines) + "\n"


def resolve_steps(env_name: str, workdir: str = CONTAINER_WORKDIR) -> List[List[str]]:
    """The commands run inside the container, as argv lists."""
    return [
        conda_create_command(CONTAINER_CONDA, env_name, f"{workdir}/{DEFAULT_DEPFILE}"),
        conda_export_command(CONTAINER_CONDA, env_name, f"{workdir}/{DEPLOYED_LOCKFILE_NAME}"),
    ]


def join_steps(steps: List[List[str]]) -> str:
    """Join argv lists into one shell command, quoting every argument."""
    return " && ".join(shlex.join(step) for step in steps)


def check_platform_pair(host: PLATFORM, target: PLATFORM) -> None:
    """
    Raises:
        UnsupportedPlatformError: If ``target`` cannot be frozen from ``host``.
    """
    if (host, target) in SUPPORTED_CROSS_PLATFORMS:
        return
    supported = ", ".join(f"{h.value} -> {t.value}" for h, t in sorted(SUPPORTED_CROSS_PLATFORMS))
    raise UnsupportedPlatformError(
        format_error('UNSUPPORTED_PLATFORM_PAIR', host=host.value, target=target.value,
                     supported=supported),
        host=host.value,
        target=target.value,
    )


class ContainerFreezer:
    """
    Resolve specs for another platform in a disposable container.

    Args:
        config: Explicit configuration (docker executable, images, timeout).
        executor: Command runner; tests pass a mock.
        logger: Logger with the custom status/verbose levels.
        host_platform: Override of the detected host platform.
    """

    STAGES = ["Building resolver image", "Resolving in container", "Harvesting resolved environment"]

    def __init__(self, config: LockfileConfig, executor: Optional[CommandExecutor] = None, logger=None,
                 host_platform: Optional[PLATFORM] = None):
        self.config = config
        if logger:
            self.logger = logger
        else:
            self.logger = setup_logging(name="condalockfile.container")
        self.executor = executor or CommandExecutor(logger=self.logger, timeout=config.timeout)
        self.host_platform = host_platform or current_platform()
        self.dockerfile_builder = DockerfileBuilder()

    def build_spec(self, target: PLATFORM) -> BuildSpec:
        return BuildSpec(
            base_image=self.config.base_image,
            tag=self.config.builder_image,
            platform=DOCKER_PLATFORMS[target],
        )

    def freeze(self, spec: EnvironmentSpec, target_platform) -> Dict[str, Any]:
        """
        Resolve ``spec`` for ``target_platform`` and return the pinned document.

        Raises:
            UnsupportedPlatformError: If the host/target pair is not supported.
            DependencyError: If docker cannot be found.
            ProcessError: If the image build or the container run fails, or
                the container produces no usable environment.
        """
        target = normalize_platform(target_platform)
        check_platform_pair(self.host_platform, target)
        docker = check_docker_available(self.config)
        self.logger.verbose(f"Using container runtime at: {docker}")

        build_spec = self.build_spec(target)
        with create_stage_progress(self.STAGES, logger=self.logger) as advance_stage:
            self.build_image(docker, build_spec)
            advance_stage()

            with freeze_session(self.logger) as session:
                session.stage_spec(spec.raw_bytes)
                with self.disposable_container(docker, session):
                    self.run_container(docker, build_spec, session, spec.name)
                    advance_stage()
                    exported = self.harvest(session)

        return prepare_resolved_document(exported, spec.name)

    def build_image(self, docker: str, build_spec: BuildSpec) -> None:
        dockerfile = self.dockerfile_builder.render(build_spec)
        self.logger.debug(f"Resolver image build description:\n{dockerfile}")
        command = [docker, "build", "--platform", build_spec.platform, "--tag", build_spec.tag, "-"]
        self.executor.check_output(command, "build the resolver image", input_text=dockerfile)
        self.logger.verbose(f"Resolver image ready: {build_spec.tag}")

    def run_command(self, docker: str, build_spec: BuildSpec, session: FreezeSession, env_name: str) -> List[str]:
        script = join_steps(resolve_steps(env_name, build_spec.workdir))
        return [
            docker, "run",
            "--name", session.name,
            "--platform", build_spec.platform,
            "--volume", f"{session.scratch_dir}:{build_spec.workdir}",
            build_spec.tag,
            script,
        ]

    def run_container(self, docker: str, build_spec: BuildSpec, session: FreezeSession, env_name: str) -> None:
        command = self.run_command(docker, build_spec, session, env_name)
        stdout, stderr, return_code = self.executor.execute(command)
        self.logger.debug(f"Container {session.name} exited with {return_code}")
        if return_code != 0:
            raise ProcessError(
                f"Resolution failed inside container {session.name}",
                command=format_command(command),
                exit_code=return_code,
                stderr=stderr.strip() or stdout.strip(),
            )

    def harvest(self, session: FreezeSession) -> Dict[str, Any]:
        """
        Read the environment exported into the scratch directory.

        Raises:
            ProcessError: If the file is missing or not an environment document.
        """
        resolved_path: Path = session.resolved_path
        try:
            output = resolved_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ProcessError(
                f"Container {session.name} did not produce a resolved environment",
                stderr=str(e),
                code=ErrorCode.PROCESS_BAD_OUTPUT,
            ) from e
        return parse_export(output, f"harvest {resolved_path}")

    @contextmanager
    def disposable_container(self, docker: str, session: FreezeSession) -> Iterator[str]:
        """Remove the session's container on exit, whether or not it ran."""
        try:
            yield session.name
        finally:
            command = [docker, "rm", "--force", session.name]
            try:
                _, stderr, return_code = self.executor.execute(command)
            except ProcessError as e:
                self.logger.warning(f"Failed to remove container {session.name}: {e.message}")
            else:
                if return_code != 0:
                    self.logger.warning(f"Failed to remove container {session.name}: {stderr.strip()}")
                else:
                    self.logger.debug(f"Removed container {session.name}")
