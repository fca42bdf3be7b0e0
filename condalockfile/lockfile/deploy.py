"""
Creating an environment from a lockfile.

The environment is installed at <conda_root>/envs/<name> and the lockfile is
copied into it as deps.yml.lock, where checkenv looks for it.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from condalockfile.cl_logging import setup_logging
from condalockfile.config import DEFAULT_DEPFILE, DEPLOYED_LOCKFILE_NAME, ENV_CONDA_ROOT, PLATFORM, LockfileConfig, load_config
from condalockfile.dependency_check import check_conda_available
from condalockfile.environment import current_platform, normalize_platform
from condalockfile.error_messages import format_error
from condalockfile.errors import ConfigurationError, ErrorCode, FileSystemError, UnsupportedPlatformError
from condalockfile.lockfile.freeze import default_lockfile_path
from condalockfile.lockfile.models import document_name
from condalockfile.lockfile.session import freeze_session
from condalockfile.lockfile.store import load_lockfile
from condalockfile.progress import progress_context
from condalockfile.utils import CommandExecutor


@dataclass
class CreateResult:
    env_name: str
    prefix: Path
    deployed_lockfile: Path
    content_hash: str


def environment_prefix(config: LockfileConfig, env_name: str) -> Path:
    """
    Install prefix of a named environment.

    Raises:
        ConfigurationError: If CONDA_ROOT is not configured.
    """
    if config.conda_root is None:
        raise ConfigurationError(
            format_error('CONFIG_CONDA_ROOT_MISSING', env_name=env_name),
            parameter=ENV_CONDA_ROOT,
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
        )
    return Path(config.conda_root) / "envs" / env_name


def deployed_lockfile_path(config: LockfileConfig, env_name: str) -> Path:
    return environment_prefix(config, env_name) / DEPLOYED_LOCKFILE_NAME


def create_environment(
    lock_path: Optional[Union[str, Path]] = None,
    target_platform: Optional[Union[str, PLATFORM]] = None,
    config: Optional[LockfileConfig] = None,
    logger=None,
    executor: Optional[CommandExecutor] = None,
    host_platform: Optional[PLATFORM] = None,
) -> CreateResult:
    """
    Install the environment pinned by ``lock_path``.

    Without ``lock_path`` the lockfile is deps.yml.<Platform>.lock in the
    current directory, for the target platform.

    Raises:
        UnsupportedPlatformError: If the lockfile targets another platform.
        FileSystemError, MissingHashError, ParseError: If the lockfile is unusable.
        ConfigurationError: If CONDA_ROOT is not configured.
        DependencyError, ProcessError: If conda is missing or fails.
    """
    if logger is None:
        logger = setup_logging(name="condalockfile.create")
    config = config or load_config()
    executor = executor or CommandExecutor(logger=logger, timeout=config.timeout)
    host = normalize_platform(host_platform) if host_platform else current_platform()
    target = normalize_platform(target_platform) if target_platform else host
    if target != host:
        raise UnsupportedPlatformError(
            f"Cannot create a {target.value} environment on {host.value}",
            host=host.value,
            target=target.value,
            suggestion=f"Run 'conda-lockfile create' on a {target.value} machine",
        )

    if lock_path is None:
        lock_path = default_lockfile_path(DEFAULT_DEPFILE, target)
        logger.verbose(f"Using default lockfile: {lock_path}")

    lockfile = load_lockfile(lock_path)
    env_name = document_name(lockfile.document, source=str(lock_path))
    prefix = environment_prefix(config, env_name)
    conda = check_conda_available(config)

    with freeze_session(logger) as session:
        # conda only accepts .yml/.yaml environment files
        session.stage_spec(Path(lock_path).read_bytes())
        command = [conda, "env", "create", "--yes", "--prefix", str(prefix), "--file", str(session.spec_path)]
        with progress_context(f"Creating environment '{env_name}'", logger=logger):
            executor.check_output(command, f"create environment '{env_name}'")

    deployed = prefix / DEPLOYED_LOCKFILE_NAME
    try:
        shutil.copyfile(lock_path, deployed)
    except OSError as e:
        raise FileSystemError(
            f"Cannot copy lockfile into the environment: {e}",
            path=str(deployed),
            operation="copy",
            code=ErrorCode.FS_WRITE_FAILED,
        ) from e
    logger.status(f"Created environment '{env_name}' at {prefix}")

    return CreateResult(
        env_name=env_name,
        prefix=prefix,
        deployed_lockfile=deployed,
        content_hash=lockfile.content_hash,
    )
