"""
Centralized error message templates for conda-lockfile.

Usage:
    from condalockfile.error_messages import format_error

    msg = format_error('DEPENDENCY_CONDA_MISSING', install_cmd='brew install miniconda')
"""

from typing import Dict, Optional


ERROR_MESSAGES: Dict[str, str] = {
    'CONFIG_CONDA_ROOT_MISSING': (
        "CONDA_ROOT is not set.\n"
        "The deployed lockfile is looked up under $CONDA_ROOT/envs/{env_name}/.\n"
        "Export CONDA_ROOT (e.g. 'export CONDA_ROOT=$(conda info --base)') and retry."
    ),

    'SPEC_NOT_FOUND': (
        "Environment spec not found: {path}\n"
        "Pass the spec path explicitly, e.g. 'conda-lockfile freeze environment.yml'."
    ),

    'LOCKFILE_NOT_FOUND': (
        "Lockfile not found: {path}\n"
        "Generate one with: conda-lockfile freeze <depfile> {path}"
    ),

    'DEPLOYED_LOCKFILE_NOT_FOUND': (
        "No deployed lockfile for environment '{env_name}': {path}\n"
        "Create the environment with: conda-lockfile create <lockfile>"
    ),

    'NO_LOCKFILES_FOUND': (
        "No lockfiles matched '{pattern}' in {directory}.\n"
        "Pass lockfile paths explicitly or run 'conda-lockfile freeze' first."
    ),

    'DEPENDENCY_CONDA_MISSING': (
        "conda is required to resolve environments but was not found.\n"
        "Install with: {install_cmd}\n"
        "Or point CONDA_LOCKFILE_CONDA_EXE / CONDA_EXE at the conda executable."
    ),

    'DEPENDENCY_DOCKER_MISSING': (
        "docker is required for cross-platform freezing but was not found.\n"
        "Install with: {install_cmd}\n"
        "Or point CONDA_LOCKFILE_DOCKER_EXE at the container runtime."
    ),

    'UNSUPPORTED_PLATFORM_PAIR': (
        "Cannot freeze for {target} on {host}.\n"
        "Supported cross-platform pairs: {supported}"
    ),

    'UNKNOWN_PLATFORM': (
        "Unknown platform '{platform}'.\n"
        "Valid platforms: {valid}"
    ),

    'INTERNAL_ERROR': (
        "An internal error occurred: {error}\n"
        "This is likely a bug in conda-lockfile.\n"
        "Include the full error message and stack trace when reporting it."
    ),
}


def format_error(error_key: str, **kwargs) -> str:
    """
    Format an error message with the given parameters.

    Args:
        error_key: Key for the error message template.
        **kwargs: Parameters to substitute in the template.

    Returns:
        Formatted error message string.
    """
    template = ERROR_MESSAGES.get(error_key)
    if template is None:
        return f"Unknown error: {error_key}\nContext: {kwargs}"

    try:
        return template.format(**kwargs)
    except KeyError as e:
        return f"{template}\n(Missing format parameter: {e})"


def get_error_template(error_key: str) -> Optional[str]:
    return ERROR_MESSAGES.get(error_key)
