"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the minic CLI.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for the CLI."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Source has syntax errors, or a stage failed
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for CLI commands.

    Prints a message for the error and exits with the matching exit code:

    - CompilationError: the collected report, as is
    - StageError: the failing stage and the exception it raised
    - FrontEndError: the located diagnostic (it carries its own prefix)
    - unreadable source (missing, not permitted, not UTF-8): INVALID_ARGS
    - anything else: INTERNAL_ERROR, with a traceback in verbose mode

    Raises:
        SystemExit: Always
    """
    from minic.errors import CompilationError, FrontEndError, MiniCError, StageError

    if isinstance(error, CompilationError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, StageError):
        cause = type(error.cause).__name__
        click.echo(f"Error: stage '{error.stage}' failed ({cause}): {error.cause}", err=True)
        if verbose:
            traceback.print_exception(type(error.cause), error.cause, error.cause.__traceback__)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, FrontEndError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, MiniCError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: source is not valid UTF-8 (byte {error.start})", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
