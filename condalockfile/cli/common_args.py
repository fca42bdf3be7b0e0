"""
Common CLI arguments and help messages shared across commands.

This module contains:
- Help message definitions
- Program descriptions
- Universal argument functions
"""

import argparse

from condalockfile.config import DEFAULT_DEPFILE, PLATFORM


# Help messages dictionary - shared across all argument builders
HELP_MESSAGES = {
    'sub_commands': "Select a command.",
    'depfile': f"Environment spec to read (default: {DEFAULT_DEPFILE}).",
    'freeze_lockfile': (
        "Lockfile to write. Defaults to '<depfile>.<platform>.lock' next to the depfile, "
        f"e.g. '{DEFAULT_DEPFILE}.Linux.lock'."
    ),
    'create_lockfile': f"Lockfile to create the environment from (default: {DEFAULT_DEPFILE}.<Platform>.lock).",
    'checklocks_lockfiles': (
        "Lockfiles to check. Defaults to every '<depfile>.*.lock' next to the depfile."
    ),
    'platform': (
        "Platform the lockfile is for. Defaults to the host platform. "
        f"One of: {', '.join(p.value for p in PLATFORM)}. "
        "A macOS host can freeze Linux lockfiles in a container."
    ),
    'verbose': "Increase output verbosity (-v for verbose, -vv for debug).",
    'debug': "Enable debug mode with detailed log formatting.",
    'stream_log_level': "Explicit log level for console output (e.g. INFO, DEBUG).",
}

PROGRAM_DESCRIPTIONS = {
    'freeze': (
        "Resolve the depfile into a fully pinned lockfile. The lockfile is tagged with the hash of "
        "the depfile so later checks can tell whether it is stale."
    ),
    'create': (
        "Create the environment pinned by a lockfile under $CONDA_ROOT/envs/<name> and keep a copy "
        "of the lockfile inside it."
    ),
    'checkenv': (
        "Check that the deployed environment named in the depfile was created from the current "
        "depfile. Requires CONDA_ROOT."
    ),
    'checklocks': (
        "Check that every lockfile was frozen from the current depfile. Every mismatch is reported."
    ),
}


def add_universal_arguments(parser, suppress_defaults=False):
    """Add output control arguments accepted by every command.

    The top-level parser and every command parser carry these, so they may be
    given before or after the command name.

    Args:
        parser: Argparse parser to add arguments to.
        suppress_defaults: Leave unset options out of the namespace so a
            command parser does not overwrite values from the top-level parser.
    """
    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    output_control = parser.add_argument_group("Output Control")
    output_control.add_argument(
        "-v", "--verbose",
        action="count",
        default=default(0),
        help=HELP_MESSAGES["verbose"]
    )
    output_control.add_argument(
        "--debug",
        action="store_true",
        default=default(False),
        help=HELP_MESSAGES["debug"]
    )
    output_control.add_argument(
        "--stream-log-level",
        type=str,
        default=default(None),
        help=HELP_MESSAGES["stream_log_level"]
    )
