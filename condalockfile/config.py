"""
Constants and runtime configuration for conda-lockfile.

Environment variables are read once by load_config() and the resulting
LockfileConfig is passed explicitly to every component that needs it.
"""

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from condalockfile.errors import ConfigurationError


def check_env(setting, default_value=None, environ: Optional[Mapping[str, str]] = None):
    """
    Return an environment variable if set, otherwise the default.

    String values "true"/"false" (any case) are converted to booleans.
    """
    environ = os.environ if environ is None else environ
    value = environ.get(setting)
    if value is None:
        return default_value
    if isinstance(value, str) and value.lower() == "true":
        return True
    if isinstance(value, str) and value.lower() == "false":
        return False
    return value


CL_DEBUG = check_env("CONDA_LOCKFILE_DEBUG", False)

# Lockfile format
SIGIL = "# ENVHASH:"

# File naming conventions
DEFAULT_DEPFILE = "deps.yml"
DEPLOYED_LOCKFILE_NAME = "deps.yml.lock"
LOCKFILE_GLOB = "{depfile}.*.lock"
LOCKFILE_TEMPLATE = "{depfile}.{platform}.lock"

# Ephemeral resource naming
EPHEMERAL_PREFIX = "conda-lockfile"

# Container build defaults
DEFAULT_BASE_IMAGE = "continuumio/miniconda3"
DEFAULT_BUILDER_IMAGE = "conda-lockfile-builder:latest"
CONTAINER_WORKDIR = "/work"

# Environment variable names
ENV_CONDA_ROOT = "CONDA_ROOT"
ENV_CONDA_EXE_VARS = ("CONDA_LOCKFILE_CONDA_EXE", "CONDA_EXE")
ENV_DOCKER_EXE = "CONDA_LOCKFILE_DOCKER_EXE"
ENV_TIMEOUT = "CONDA_LOCKFILE_TIMEOUT"
ENV_BASE_IMAGE = "CONDA_LOCKFILE_BASE_IMAGE"
ENV_BUILDER_IMAGE = "CONDA_LOCKFILE_BUILDER_IMAGE"


class PLATFORM(str, enum.Enum):
    LINUX = "Linux"
    MACOS = "Darwin"
    WINDOWS = "Windows"


PLATFORM_ALIASES = {
    "linux": PLATFORM.LINUX,
    "darwin": PLATFORM.MACOS,
    "macos": PLATFORM.MACOS,
    "osx": PLATFORM.MACOS,
    "windows": PLATFORM.WINDOWS,
    "win": PLATFORM.WINDOWS,
}

# (host, target) pairs that can be frozen inside a container
SUPPORTED_CROSS_PLATFORMS = frozenset({
    (PLATFORM.MACOS, PLATFORM.LINUX),
})

# Docker --platform value used for each container target
DOCKER_PLATFORMS = {
    PLATFORM.LINUX: "linux/amd64",
}


class EXIT_CODE(enum.IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_ARGUMENTS = 2
    FILE_NOT_FOUND = 3
    FAILURE = 4
    INTERRUPTED = 5
    CONFIG_ERROR = 6
    HASH_MISMATCH = 7
    VALIDATION_FAILED = 8
    PROCESS_FAILED = 9
    UNSUPPORTED_PLATFORM = 10

    def __str__(self):
        return f"{self.name} ({self.value})"


@dataclass
class LockfileConfig:
    """
    Explicit configuration for conda-lockfile components.

    Attributes:
        conda_root: Root of the conda installation; deployed environments
            live in <conda_root>/envs/<name>.
        conda_exe: Path to the conda executable. None means look it up on PATH.
        docker_exe: Container runtime executable (name or path).
        timeout: Seconds to wait for any single external command. None waits forever.
        base_image: Image the resolver container is built from.
        builder_image: Tag of the resolver image.
    """
    conda_root: Optional[Path] = None
    conda_exe: Optional[str] = None
    docker_exe: str = "docker"
    timeout: Optional[float] = None
    base_image: str = DEFAULT_BASE_IMAGE
    builder_image: str = DEFAULT_BUILDER_IMAGE


def _first_set(environ: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def load_config(environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> LockfileConfig:
    """
    Build a LockfileConfig from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ).
        **overrides: Field values that take precedence over the environment.

    Returns:
        LockfileConfig populated from the environment and overrides.

    Raises:
        ConfigurationError: If CONDA_LOCKFILE_TIMEOUT is not a positive number.
    """
    environ = os.environ if environ is None else environ

    conda_root = environ.get(ENV_CONDA_ROOT)
    timeout_value = environ.get(ENV_TIMEOUT)
    timeout = None
    if timeout_value:
        try:
            timeout = float(timeout_value)
        except ValueError:
            timeout = -1.0
        if timeout <= 0:
            raise ConfigurationError(
                f"Invalid value for {ENV_TIMEOUT}: {timeout_value}",
                parameter=ENV_TIMEOUT,
                expected="a positive number of seconds",
                actual=timeout_value,
            )

    config = LockfileConfig(
        conda_root=Path(conda_root) if conda_root else None,
        conda_exe=_first_set(environ, ENV_CONDA_EXE_VARS),
        docker_exe=environ.get(ENV_DOCKER_EXE) or "docker",
        timeout=timeout,
        base_image=environ.get(ENV_BASE_IMAGE) or DEFAULT_BASE_IMAGE,
        builder_image=environ.get(ENV_BUILDER_IMAGE) or DEFAULT_BUILDER_IMAGE,
    )
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config
