"""
Utility functions for conda-lockfile.

Classes:
    CommandExecutor: Run external commands synchronously with captured output.

Functions:
    format_command: Render an argv list for logs and error messages.
    ephemeral_name: Per-invocation unique name for temporary resources.
"""

import logging
import shlex
import subprocess
import uuid
from typing import List, Optional, Sequence, Tuple

from condalockfile.config import EPHEMERAL_PREFIX
from condalockfile.errors import ErrorCode, ProcessError


def format_command(command: Sequence[str]) -> str:
    """Render an argv list as a copy-pasteable shell command.

    Example:
        >>> format_command(["conda", "env", "export", "-n", "my env"])
        "conda env export -n 'my env'"
    """
    return shlex.join([str(part) for part in command])


def ephemeral_name(prefix: str = EPHEMERAL_PREFIX) -> str:
    """Return a name unique to this invocation, e.g. 'conda-lockfile-3f2a9c1b7d4e'.

    Used for temporary conda environments and containers so that concurrent
    freezes of the same spec never share state.
    """
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class CommandExecutor:
    """
    Execute external commands and return their buffered output.

    Every call blocks until the subprocess exits; stdout and stderr are held
    in memory in full. An optional timeout turns a hung tool into a
    ProcessError instead of hanging the whole operation.
    """

    def __init__(self, logger: logging.Logger, timeout: Optional[float] = None):
        self.logger = logger
        self.timeout = timeout

    def execute(self,
                command: List[str],
                input_text: Optional[str] = None,
                timeout: Optional[float] = None,
                cwd: Optional[str] = None) -> Tuple[str, str, int]:
        """
        Execute a command and return its stdout, stderr, and return code.

        Args:
            command: argv list. Never run through a shell.
            input_text: Text written to the process's stdin.
            timeout: Seconds to wait; defaults to the executor timeout.
            cwd: Working directory for the process.

        Returns:
            Tuple of (stdout_content, stderr_content, return_code)

        Raises:
            ProcessError: If the executable cannot be started or times out.
        """
        timeout = self.timeout if timeout is None else timeout
        self.logger.debug(f"Executing command: {format_command(command)}")

        try:
            result = subprocess.run(
                [str(part) for part in command],
                input=input_text,
                capture_output=True,
                text=True,
                # conda and docker may emit bytes that are not valid UTF-8
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                cwd=cwd,
            )
        except FileNotFoundError as e:
            raise ProcessError(
                f"Executable not found: {command[0]}",
                command=format_command(command),
                exit_code=127,
                stderr=str(e),
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ProcessError(
                f"Command timed out after {timeout} seconds",
                command=format_command(command),
                stderr=e.stderr if isinstance(e.stderr, str) else None,
                code=ErrorCode.PROCESS_TIMEOUT,
            ) from e

        self.logger.ridiculous(f"Command returned {result.returncode}")
        return result.stdout, result.stderr, result.returncode

    def check_output(self, command: List[str], description: str, **kwargs) -> str:
        """
        Execute a command and return stdout, raising ProcessError on a non-zero exit.

        Args:
            command: argv list.
            description: What the command does, used in the error message.
            **kwargs: Passed through to execute().
        """
        stdout, stderr, return_code = self.execute(command, **kwargs)
        if return_code != 0:
            raise ProcessError(
                f"Failed to {description}",
                command=format_command(command),
                exit_code=return_code,
                stderr=stderr.strip() or stdout.strip(),
            )
        return stdout
