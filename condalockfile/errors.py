"""
Custom exceptions for conda-lockfile.

This module provides custom exception classes with user-friendly messaging
that include:
- Clear error descriptions
- Technical details for debugging
- Actionable suggestions for resolution

All exceptions follow a consistent pattern of providing both machine-readable
error codes and human-readable messages with suggestions.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Any
from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes for conda-lockfile errors."""
    # Configuration errors (1xx)
    CONFIG_MISSING_REQUIRED = "E101"
    CONFIG_INVALID_VALUE = "E102"

    # Document errors (2xx)
    PARSE_INVALID_YAML = "E201"
    PARSE_MISSING_NAME = "E202"
    PARSE_INVALID_FIELD = "E203"

    # Hash errors (3xx)
    HASH_MISSING = "E301"
    HASH_MISMATCH = "E302"

    # Resolution errors (4xx)
    PROCESS_FAILED = "E401"
    PROCESS_TIMEOUT = "E402"
    PROCESS_BAD_OUTPUT = "E403"
    DEPENDENCY_MISSING = "E404"
    VALIDATION_MISSING_PACKAGES = "E405"

    # Platform errors (5xx)
    PLATFORM_UNSUPPORTED_HOST = "E501"
    PLATFORM_UNSUPPORTED_PAIR = "E502"

    # File system errors (6xx)
    FS_PATH_NOT_FOUND = "E601"
    FS_PERMISSION_DENIED = "E602"
    FS_WRITE_FAILED = "E603"

    # Internal errors (9xx)
    INTERNAL_ERROR = "E901"


@dataclass
class LockfileError:
    """
    Structured error information for conda-lockfile.

    Attributes:
        code: Machine-readable error code.
        message: User-facing error message.
        details: Technical details for debugging.
        suggestion: How to fix the issue.
        context: Additional context information.
    """
    code: ErrorCode
    message: str
    details: str = ""
    suggestion: str = ""
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        lines = [f"[{self.code.value}] {self.message}"]
        if self.details:
            lines.append(f"  Details: {self.details}")
        if self.suggestion:
            lines.append(f"  Suggestion: {self.suggestion}")
        return "\n".join(lines)


class CondaLockfileException(Exception):
    """
    Base exception class for conda-lockfile.

    All custom exceptions inherit from this class and provide
    structured error information.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR,
                 details: str = "", suggestion: str = "", **context):
        self.error = LockfileError(
            code=code,
            message=message,
            details=details,
            suggestion=suggestion,
            context=context
        )
        super().__init__(str(self.error))

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def suggestion(self) -> str:
        return self.error.suggestion

    @property
    def context(self) -> dict:
        return self.error.context


class ConfigurationError(CondaLockfileException):
    """
    Raised when configuration is invalid or missing.

    Examples:
        - CONDA_ROOT is not set but a deployed environment must be located
        - A timeout value is not a number
    """

    def __init__(self, message: str, parameter: str = None,
                 expected: Any = None, actual: Any = None,
                 suggestion: str = None,
                 code: ErrorCode = ErrorCode.CONFIG_INVALID_VALUE):
        details_parts = []
        if parameter:
            details_parts.append(f"Parameter: {parameter}")
        if expected is not None:
            details_parts.append(f"Expected: {expected}")
        if actual is not None:
            details_parts.append(f"Actual: {actual}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code),
            parameter=parameter,
            expected=expected,
            actual=actual
        )

    @staticmethod
    def _default_suggestion(code: ErrorCode) -> str:
        suggestions = {
            ErrorCode.CONFIG_MISSING_REQUIRED: "Set the required environment variable and try again",
            ErrorCode.CONFIG_INVALID_VALUE: "Check the value and correct it",
        }
        return suggestions.get(code, "Check the configuration and try again")


class FileSystemError(CondaLockfileException):
    """
    Raised when a spec or lockfile cannot be opened, read or written.
    """

    def __init__(self, message: str, path: str = None,
                 operation: str = None, suggestion: str = None,
                 code: ErrorCode = ErrorCode.FS_PATH_NOT_FOUND):
        details_parts = []
        if path:
            details_parts.append(f"Path: {path}")
        if operation:
            details_parts.append(f"Operation: {operation}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code),
            path=path,
            operation=operation
        )

    @property
    def path(self) -> Optional[str]:
        return self.context.get("path")

    @staticmethod
    def _default_suggestion(code: ErrorCode) -> str:
        suggestions = {
            ErrorCode.FS_PATH_NOT_FOUND: "Verify the path exists and is accessible",
            ErrorCode.FS_PERMISSION_DENIED: "Check file/directory permissions",
            ErrorCode.FS_WRITE_FAILED: "Check free space and permissions of the target directory",
        }
        return suggestions.get(code, "Check file system and try again")


class ParseError(CondaLockfileException):
    """
    Raised when a spec or resolved document is malformed.

    Examples:
        - Invalid YAML
        - Missing or non-string 'name'
        - 'dependencies' present but not a list
    """

    def __init__(self, message: str, source: str = None, field_name: str = None,
                 suggestion: str = None,
                 code: ErrorCode = ErrorCode.PARSE_INVALID_YAML):
        details_parts = []
        if source:
            details_parts.append(f"Source: {source}")
        if field_name:
            details_parts.append(f"Field: {field_name}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code),
            source=source,
            field_name=field_name
        )

    @staticmethod
    def _default_suggestion(code: ErrorCode) -> str:
        suggestions = {
            ErrorCode.PARSE_INVALID_YAML: "Check the file syntax (YAML format expected)",
            ErrorCode.PARSE_MISSING_NAME: "Add a top-level 'name: <environment name>' entry",
            ErrorCode.PARSE_INVALID_FIELD: "Check the field against the conda environment file format",
        }
        return suggestions.get(code, "Check the document and try again")


class MissingHashError(CondaLockfileException):
    """Raised when a lockfile has no '# ENVHASH:' line."""

    def __init__(self, message: str = "No hash found in lockfile", path: str = None,
                 suggestion: str = None):
        super().__init__(
            message=message,
            code=ErrorCode.HASH_MISSING,
            details=f"Path: {path}" if path else "",
            suggestion=suggestion or "Regenerate the lockfile with: conda-lockfile freeze",
            path=path
        )

    @property
    def path(self) -> Optional[str]:
        return self.context.get("path")


@dataclass
class HashMismatch:
    """One lockfile whose stored hash differs from the spec hash."""
    spec_path: str
    lock_path: str
    expected: str
    found: Optional[str]

    def __str__(self) -> str:
        found = self.found if self.found is not None else "(no hash)"
        return (f"Hashes do not match {self.spec_path}, {self.lock_path}\n"
                f"  lock    hash: {found}\n"
                f"  depfile hash: {self.expected}")


class HashMismatchError(CondaLockfileException):
    """
    Raised when a computed spec hash differs from the hash stored in one or
    more lockfiles. Every mismatch found is carried in ``mismatches``.
    """

    def __init__(self, message: str, mismatches: List[HashMismatch] = None,
                 suggestion: str = None):
        mismatches = list(mismatches or [])
        details = "\n".join(str(m) for m in mismatches)

        super().__init__(
            message=message,
            code=ErrorCode.HASH_MISMATCH,
            details=details,
            suggestion=suggestion or "Re-run 'conda-lockfile freeze' and redeploy the environment",
            mismatches=mismatches
        )

    @property
    def mismatches(self) -> List[HashMismatch]:
        return self.context["mismatches"]


class UnsupportedPlatformError(CondaLockfileException):
    """Raised for an unknown host OS or an unsupported host/target pair."""

    def __init__(self, message: str, host: str = None, target: str = None,
                 suggestion: str = None,
                 code: ErrorCode = ErrorCode.PLATFORM_UNSUPPORTED_PAIR):
        details_parts = []
        if host:
            details_parts.append(f"Host: {host}")
        if target:
            details_parts.append(f"Target: {target}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or "Run the freeze on a machine of the target platform",
            host=host,
            target=target
        )


class ProcessError(CondaLockfileException):
    """
    Raised when an external tool (conda, docker) fails or returns unusable output.
    """

    def __init__(self, message: str, command: str = None,
                 exit_code: int = None, stderr: str = None,
                 suggestion: str = None,
                 code: ErrorCode = ErrorCode.PROCESS_FAILED):
        details_parts = []
        if command:
            cmd_display = command[:200] + "..." if len(command) > 200 else command
            details_parts.append(f"Command: {cmd_display}")
        if exit_code is not None:
            details_parts.append(f"Exit code: {exit_code}")
        if stderr:
            stderr_display = stderr[:500] + "..." if len(stderr) > 500 else stderr
            details_parts.append(f"Error output: {stderr_display}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code, exit_code),
            command=command,
            exit_code=exit_code,
            stderr=stderr
        )

    @property
    def stderr(self) -> Optional[str]:
        return self.context.get("stderr")

    @property
    def exit_code(self) -> Optional[int]:
        return self.context.get("exit_code")

    @staticmethod
    def _default_suggestion(code: ErrorCode, exit_code: int = None) -> str:
        suggestions = {
            ErrorCode.PROCESS_FAILED: "Check the command output for specific errors",
            ErrorCode.PROCESS_TIMEOUT: "Increase CONDA_LOCKFILE_TIMEOUT or check network access",
            ErrorCode.PROCESS_BAD_OUTPUT: "Check the conda version; 'conda env export' must emit YAML",
        }
        suggestion = suggestions.get(code, "Check the command output for details")

        if exit_code == 127:
            suggestion = "Command not found - check that conda/docker is installed and in PATH"
        elif exit_code == 137:
            suggestion = "Process killed (possibly OOM) - check available memory"

        return suggestion


class ValidationError(CondaLockfileException):
    """
    Raised when a resolved environment drops packages requested by the spec.
    """

    def __init__(self, message: str, missing_native: List[str] = None,
                 missing_sub: List[str] = None, suggestion: str = None,
                 code: ErrorCode = ErrorCode.VALIDATION_MISSING_PACKAGES):
        missing_native = sorted(missing_native or [])
        missing_sub = sorted(missing_sub or [])
        details_parts = []
        if missing_native:
            details_parts.append(f"Missing conda packages: {', '.join(missing_native)}")
        if missing_sub:
            details_parts.append(f"Missing pip packages: {', '.join(missing_sub)}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or "Check channels and package names in the spec",
            missing_native=missing_native,
            missing_sub=missing_sub
        )


class DependencyError(CondaLockfileException):
    """
    Raised when a required external tool is missing.

    Examples:
        - conda not installed
        - docker not installed (cross-platform freeze)
    """

    def __init__(self, message: str, dependency: str = None,
                 install_cmd: str = None, suggestion: str = None,
                 code: ErrorCode = ErrorCode.DEPENDENCY_MISSING):
        details_parts = []
        if dependency:
            details_parts.append(f"Missing: {dependency}")
        if install_cmd:
            details_parts.append(f"Install with: {install_cmd}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or f"Install the required dependency: {dependency}",
            dependency=dependency,
            install_cmd=install_cmd
        )
