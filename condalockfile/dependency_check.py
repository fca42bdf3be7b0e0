"""
External tool discovery for conda-lockfile.

Fail-fast checks for the conda and docker executables, run before any
ephemeral resource is created so that a missing tool never leaves a
half-built freeze behind.

Public exports:
    check_executable_available: Find an executable on PATH or at a configured path
    check_conda_available: Resolve the conda executable with install hints
    check_docker_available: Resolve the container runtime with install hints
"""

import os
import shutil
from typing import Optional

from condalockfile.config import LockfileConfig
from condalockfile.environment import detect_os, get_install_instruction
from condalockfile.error_messages import format_error
from condalockfile.errors import DependencyError


def check_executable_available(
    executable: str,
    friendly_name: str,
    install_suggestion: str,
    configured_path: Optional[str] = None,
) -> str:
    """
    Check if an executable is available.

    A configured path wins when it points at an executable file; otherwise
    the name (or the configured value, if it is a bare name) is looked up on PATH.

    Returns:
        Full path to the executable.

    Raises:
        DependencyError: If the executable is not found.
    """
    if configured_path:
        if os.path.isfile(configured_path) and os.access(configured_path, os.X_OK):
            return configured_path
        path = shutil.which(configured_path)
        if path:
            return path

    path = shutil.which(executable)
    if path:
        return path

    raise DependencyError(
        message=f"{friendly_name} not found",
        dependency=configured_path or executable,
        suggestion=install_suggestion
    )


def check_conda_available(config: LockfileConfig) -> str:
    """
    Resolve the conda executable from the configuration or PATH.

    Raises:
        DependencyError: If conda is not found, with an OS-specific install command.
    """
    try:
        return check_executable_available(
            executable="conda",
            friendly_name="conda",
            install_suggestion="",
            configured_path=config.conda_exe,
        )
    except DependencyError:
        install_cmd = get_install_instruction("conda", detect_os())
        raise DependencyError(
            message=format_error('DEPENDENCY_CONDA_MISSING', install_cmd=install_cmd),
            dependency=config.conda_exe or "conda",
            install_cmd=install_cmd,
            suggestion=install_cmd,
        ) from None


def check_docker_available(config: LockfileConfig) -> str:
    """
    Resolve the container runtime executable from the configuration or PATH.

    Raises:
        DependencyError: If docker is not found, with an OS-specific install command.
    """
    try:
        return check_executable_available(
            executable="docker",
            friendly_name="docker",
            install_suggestion="",
            configured_path=config.docker_exe,
        )
    except DependencyError:
        install_cmd = get_install_instruction("docker", detect_os())
        raise DependencyError(
            message=format_error('DEPENDENCY_DOCKER_MISSING', install_cmd=install_cmd),
            dependency=config.docker_exe,
            install_cmd=install_cmd,
            suggestion=install_cmd,
        ) from None
