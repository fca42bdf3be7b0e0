#!/usr/bin/env python3
"""
conda-lockfile - Main Entry Point

This module provides the command-line entry point for conda-lockfile, mapping
each command to its operation and every failure to a distinct exit code.
"""

import signal
import sys
import traceback

from condalockfile.checks import checkenv, checklocks
from condalockfile.cli_parser import parse_arguments
from condalockfile.cl_logging import setup_logging, apply_logging_options
from condalockfile.config import CL_DEBUG, EXIT_CODE
from condalockfile.errors import (
    CondaLockfileException,
    ConfigurationError,
    DependencyError,
    FileSystemError,
    HashMismatchError,
    MissingHashError,
    ParseError,
    ProcessError,
    UnsupportedPlatformError,
    ValidationError,
)
from condalockfile.error_messages import format_error
from condalockfile.lockfile import create_environment, freeze

logger = setup_logging("conda-lockfile")


def signal_handler(sig, frame):
    """Handle SIGINT and SIGTERM."""
    signal_name = signal.Signals(sig).name
    logger.warning(f"Received signal {signal_name} ({sig})")
    logger.info("Exiting due to signal")
    sys.exit(EXIT_CODE.INTERRUPTED)


def handle_freeze_command(args) -> int:
    result = freeze(
        args.depfile,
        lock_path=args.lockfile,
        target_platform=args.platform,
        logger=logger,
    )
    logger.result(f"{result.lock_path} ({result.platform.value}) {result.content_hash}")
    return EXIT_CODE.SUCCESS


def handle_create_command(args) -> int:
    result = create_environment(args.lockfile, target_platform=args.platform, logger=logger)
    logger.result(f"Environment '{result.env_name}' created at {result.prefix}")
    return EXIT_CODE.SUCCESS


def handle_checkenv_command(args) -> int:
    report = checkenv(args.depfile, logger=logger)
    logger.result(f"{report.checked[0]} matches {report.spec_path} ({report.expected_hash})")
    return EXIT_CODE.SUCCESS


def handle_checklocks_command(args) -> int:
    report = checklocks(args.depfile, lock_paths=args.lockfiles, logger=logger)
    for lock_path in report.checked:
        logger.result(f"{lock_path} matches {report.spec_path}")
    return EXIT_CODE.SUCCESS


COMMAND_HANDLERS = {
    'freeze': handle_freeze_command,
    'create': handle_create_command,
    'checkenv': handle_checkenv_command,
    'checklocks': handle_checklocks_command,
}


def _main_impl(argv=None):
    """
    Main implementation.

    Separated from main() so that main() can wrap it with exception handling.
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    args = parse_arguments(argv)
    apply_logging_options(logger, args)

    return COMMAND_HANDLERS[args.command](args)


def _report(e: CondaLockfileException) -> None:
    # str(e) carries the code, details and suggestion
    logger.error(str(e))


def main(argv=None):
    """
    Main entry point with error handling.

    Wraps _main_impl() and turns every failure into a logged message and a
    non-zero exit code.
    """
    try:
        return _main_impl(argv)

    except ConfigurationError as e:
        _report(e)
        return EXIT_CODE.CONFIG_ERROR

    except FileSystemError as e:
        _report(e)
        return EXIT_CODE.FILE_NOT_FOUND

    except HashMismatchError as e:
        # each mismatch was already logged as it was found
        logger.error(f"[{e.code.value}] {e.message}")
        logger.info(f"Suggestion: {e.suggestion}")
        return EXIT_CODE.HASH_MISMATCH

    except ValidationError as e:
        _report(e)
        return EXIT_CODE.VALIDATION_FAILED

    except UnsupportedPlatformError as e:
        _report(e)
        return EXIT_CODE.UNSUPPORTED_PLATFORM

    except (ProcessError, DependencyError) as e:
        _report(e)
        if isinstance(e, ProcessError) and e.stderr:
            logger.debug(f"stderr: {e.stderr}")
        return EXIT_CODE.PROCESS_FAILED

    except (ParseError, MissingHashError) as e:
        _report(e)
        return EXIT_CODE.FAILURE

    except CondaLockfileException as e:
        # Catch-all for any other custom exceptions
        _report(e)
        return EXIT_CODE.FAILURE

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_CODE.INTERRUPTED

    except SystemExit:
        raise

    except Exception as e:
        logger.error(format_error('INTERNAL_ERROR', error=str(e)))

        if CL_DEBUG:
            logger.debug("Stack trace:")
            traceback.print_exc()
        else:
            logger.info("Set CONDA_LOCKFILE_DEBUG=true for a full stack trace")

        return EXIT_CODE.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
