"""
CLI argument builders for the lockfile commands.

Provides arguments for:
- conda-lockfile freeze: Resolve a depfile into a lockfile
- conda-lockfile create: Create an environment from a lockfile
- conda-lockfile checkenv: Compare a deployed environment with its depfile
- conda-lockfile checklocks: Compare lockfiles with their depfile
"""

from condalockfile.cli.common_args import HELP_MESSAGES, add_universal_arguments
from condalockfile.config import DEFAULT_DEPFILE


def add_freeze_arguments(parser):
    """Add freeze arguments to the parser.

    Args:
        parser: The freeze subparser from argparse.
    """
    parser.add_argument(
        "depfile",
        nargs="?",
        default=DEFAULT_DEPFILE,
        help=HELP_MESSAGES['depfile'],
    )
    parser.add_argument(
        "lockfile",
        nargs="?",
        default=None,
        help=HELP_MESSAGES['freeze_lockfile'],
    )
    parser.add_argument(
        "platform",
        nargs="?",
        default=None,
        help=HELP_MESSAGES['platform'],
    )
    add_universal_arguments(parser, suppress_defaults=True)
    return parser


def add_create_arguments(parser):
    """Add create arguments to the parser.

    Args:
        parser: The create subparser from argparse.
    """
    parser.add_argument(
        "lockfile",
        nargs="?",
        default=None,
        help=HELP_MESSAGES['create_lockfile'],
    )
    parser.add_argument(
        "platform",
        nargs="?",
        default=None,
        help=HELP_MESSAGES['platform'],
    )
    add_universal_arguments(parser, suppress_defaults=True)
    return parser


def add_checkenv_arguments(parser):
    parser.add_argument(
        "depfile",
        nargs="?",
        default=DEFAULT_DEPFILE,
        help=HELP_MESSAGES['depfile'],
    )
    add_universal_arguments(parser, suppress_defaults=True)
    return parser


def add_checklocks_arguments(parser):
    parser.add_argument(
        "depfile",
        nargs="?",
        default=DEFAULT_DEPFILE,
        help=HELP_MESSAGES['depfile'],
    )
    parser.add_argument(
        "lockfiles",
        nargs="*",
        help=HELP_MESSAGES['checklocks_lockfiles'],
    )
    add_universal_arguments(parser, suppress_defaults=True)
    return parser
