"""
CLI Error Handling
==================

Maps exceptions to messages on stderr and process exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes for the atomc command."""
    SUCCESS = 0
    SOURCE_ERROR = 1     # Lexical or syntax error in the checked source
    INVALID_ARGS = 2     # Invalid arguments, missing or unreadable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, add the file name and source line to frontend
            errors and print the full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from atomc.errors import AtomCError
    from atomc.frontend.errors import FrontendError

    if isinstance(error, FrontendError):
        # str() is the one-line "error in line N: ..." form
        click.echo(error.report() if verbose else str(error), err=True)
        sys.exit(ExitCode.SOURCE_ERROR)

    elif isinstance(error, AtomCError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.SOURCE_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        # Missing, unreadable or permission-denied input
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
