"""
Same-platform resolution of a spec with conda.

The spec is installed into a temporary environment with a unique name, the
environment is exported with exact versions and builds, and the temporary
environment is removed again whether or not the export succeeded.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from condalockfile.cl_logging import setup_logging
from condalockfile.config import LockfileConfig
from condalockfile.dependency_check import check_conda_available
from condalockfile.errors import ErrorCode, ParseError, ProcessError
from condalockfile.lockfile.models import EnvironmentSpec, load_document, prepare_resolved_document
from condalockfile.lockfile.session import FreezeSession, freeze_session
from condalockfile.progress import progress_context
from condalockfile.utils import CommandExecutor, format_command


def conda_create_command(conda: str, env_name: str, spec_path: str) -> List[str]:
    """argv creating (or overwriting) ``env_name`` from a spec file."""
    return [conda, "env", "create", "--yes", "--quiet", "--name", env_name, "--file", str(spec_path)]


def conda_export_command(conda: str, env_name: str, output_path: Optional[str] = None) -> List[str]:
    """argv exporting ``env_name`` as YAML, to stdout or to ``output_path``."""
    command = [conda, "env", "export", "--name", env_name]
    if output_path:
        command.extend(["--file", str(output_path)])
    return command


def conda_remove_command(conda: str, env_name: str) -> List[str]:
    return [conda, "env", "remove", "--yes", "--quiet", "--name", env_name]


def parse_export(output: str, command: str) -> Dict[str, Any]:
    """
    Parse the YAML written by 'conda env export'.

    Raises:
        ProcessError: If the output is not an environment document.
    """
    try:
        return load_document(output, source="conda env export")
    except ParseError as e:
        raise ProcessError(
            "conda env export returned unusable output",
            command=command,
            stderr=e.message,
            code=ErrorCode.PROCESS_BAD_OUTPUT,
        ) from e


class LocalFreezer:
    """
    Resolve specs for the platform this process runs on.

    Args:
        config: Explicit configuration (conda executable, timeout).
        executor: Command runner; tests pass a mock.
        logger: Logger with the custom status/verbose levels.
    """

    def __init__(self, config: LockfileConfig, executor: Optional[CommandExecutor] = None, logger=None):
        self.config = config
        if logger:
            self.logger = logger
        else:
            self.logger = setup_logging(name="condalockfile.freeze")
        self.executor = executor or CommandExecutor(logger=self.logger, timeout=config.timeout)

    def freeze(self, spec: EnvironmentSpec) -> Dict[str, Any]:
        """
        Resolve ``spec`` and return the pinned environment document.

        The returned document carries the spec's name and no 'prefix'.

        Raises:
            DependencyError: If conda cannot be found.
            ProcessError: If conda fails or its export is unusable.
        """
        conda = check_conda_available(self.config)
        self.logger.verbose(f"Using conda at: {conda}")

        with freeze_session(self.logger) as session:
            session.stage_spec(spec.raw_bytes)
            with self.ephemeral_environment(conda, session, spec.name):
                command = conda_export_command(conda, session.name)
                with progress_context(f"Exporting resolved environment '{spec.name}'", logger=self.logger):
                    output = self.executor.check_output(command, "export the resolved environment")
                exported = parse_export(output, format_command(command))

        return prepare_resolved_document(exported, spec.name)

    @contextmanager
    def ephemeral_environment(self, conda: str, session: FreezeSession, display_name: str) -> Iterator[str]:
        """
        Create the temporary environment for ``session`` and remove it on exit.

        Removal runs even when creation fails part way, since conda may leave a
        partial environment behind. Removal failures are logged, not raised.
        """
        try:
            self.logger.verbose(f"Creating temporary environment {session.name} for '{display_name}'")
            with progress_context(f"Resolving '{display_name}' with conda", logger=self.logger):
                self.executor.check_output(
                    conda_create_command(conda, session.name, str(session.spec_path)),
                    "create the temporary environment",
                )
            yield session.name
        finally:
            self._remove_environment(conda, session.name)

    def _remove_environment(self, conda: str, env_name: str) -> None:
        command = conda_remove_command(conda, env_name)
        try:
            _, stderr, return_code = self.executor.execute(command)
        except ProcessError as e:
            self.logger.warning(f"Failed to remove temporary environment {env_name}: {e.message}")
            return
        if return_code != 0:
            self.logger.warning(
                f"Failed to remove temporary environment {env_name} (exit code {return_code}): "
                f"{stderr.strip()}"
            )
        else:
            self.logger.debug(f"Removed temporary environment {env_name}")
