"""
CLI argument parsing for conda-lockfile.

This module provides the main argument parsing entry point,
using modular argument builders from the cli package.
"""

import argparse
import sys

from condalockfile import VERSION
from condalockfile.config import EXIT_CODE, PLATFORM, PLATFORM_ALIASES

from condalockfile.cli import (
    HELP_MESSAGES,
    PROGRAM_DESCRIPTIONS,
    add_universal_arguments,
    add_freeze_arguments,
    add_create_arguments,
    add_checkenv_arguments,
    add_checklocks_arguments,
)

COMMAND_BUILDERS = {
    'freeze': add_freeze_arguments,
    'create': add_create_arguments,
    'checkenv': add_checkenv_arguments,
    'checklocks': add_checklocks_arguments,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="conda-lockfile",
        description="Freeze conda environment specs into hash-tagged lockfiles and check them for drift.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    add_universal_arguments(parser)

    commands = parser.add_subparsers(dest="command", help=HELP_MESSAGES['sub_commands'])
    commands.required = True

    for name, add_arguments in COMMAND_BUILDERS.items():
        command_parser = commands.add_parser(
            name,
            description=PROGRAM_DESCRIPTIONS[name],
            help=PROGRAM_DESCRIPTIONS[name].split(". ")[0],
        )
        add_arguments(command_parser)

    return parser


def parse_arguments(argv=None):
    """Parse command-line arguments for conda-lockfile.

    Args:
        argv: Argument list (default: sys.argv[1:]).

    Returns:
        argparse.Namespace: Parsed and validated arguments.
    """
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        parser.print_help(sys.stderr)
        sys.exit(EXIT_CODE.INVALID_ARGUMENTS)

    parsed_args = parser.parse_args(argv)
    validate_args(parsed_args)
    return parsed_args


def validate_args(args):
    error_messages = []

    platform = getattr(args, "platform", None)
    if platform is not None:
        valid = {p.value.lower() for p in PLATFORM} | set(PLATFORM_ALIASES)
        if platform.lower() not in valid:
            error_messages.append(
                "Invalid platform '{}'. Supported platforms are: {}".format(
                    platform, ", ".join(p.value for p in PLATFORM))
            )

    if error_messages:
        for msg in error_messages:
            print(msg, file=sys.stderr)

        sys.exit(EXIT_CODE.INVALID_ARGUMENTS)
