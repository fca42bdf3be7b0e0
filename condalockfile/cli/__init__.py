"""
CLI argument builders for conda-lockfile.

Modules:
    - common_args: Shared help messages and universal arguments
    - lockfile_args: freeze, create, checkenv and checklocks arguments
"""

from condalockfile.cli.common_args import (
    HELP_MESSAGES,
    PROGRAM_DESCRIPTIONS,
    add_universal_arguments,
)

from condalockfile.cli.lockfile_args import (
    add_freeze_arguments,
    add_create_arguments,
    add_checkenv_arguments,
    add_checklocks_arguments,
)

__all__ = [
    # Common
    'HELP_MESSAGES',
    'PROGRAM_DESCRIPTIONS',
    'add_universal_arguments',
    # Command argument builders
    'add_freeze_arguments',
    'add_create_arguments',
    'add_checkenv_arguments',
    'add_checklocks_arguments',
]
