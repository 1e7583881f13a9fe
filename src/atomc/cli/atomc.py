"""
atomc - AtomC Checker Command-Line Interface
============================================

This module implements the command-line interface for the AtomC front
end. It tokenizes and recognizes one source file and reports either
success or the first lexical or syntax error.

Usage Examples
--------------
Check a file:
    $ atomc prog.c

Print the token table only:
    $ atomc --tokens prog.c

Print the productions recognized:
    $ atomc --trace prog.c

Verbose mode:
    $ atomc -v prog.c
"""

import logging
from pathlib import Path

import click

from atomc import __version__
from atomc.cli.errors import handle_cli_exception
from atomc.frontend.driver import (
    AtomCFrontend,
    FrontendOptions,
    format_token_table,
    format_trace,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-t", "--tokens",
    "show_tokens",
    is_flag=True,
    help="Print the token table and exit",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Print the productions recognized",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Print nothing on success",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="atomc")
def main(
    input_file: Path,
    show_tokens: bool,
    trace: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Check an AtomC source file for lexical and syntax errors.

    INPUT_FILE is the AtomC source file to check.

    Processing stops at the first error, which is printed as
    "error in line N: message".

    \b
    Examples:
        atomc prog.c                 # Prints "prog.c: OK"
        atomc -t prog.c              # Token table
        atomc --trace prog.c         # Productions, innermost first

    \b
    Environment:
        ATOMC_TRACE      Same as --trace when set to 1/true/yes/on
        ATOMC_ENCODING   Encoding of identifiers and strings (utf-8)
    """
    setup_logging(verbose)

    options = FrontendOptions.from_env()
    options.filename = str(input_file)
    if trace:
        options.trace = True

    try:
        logger.debug("Checking %s (encoding %s)", input_file, options.encoding)
        frontend = AtomCFrontend(options)

        if show_tokens:
            tokens, error = frontend.list_tokens(
                input_file.read_bytes(), str(input_file)
            )
            click.echo(format_token_table(tokens))
            if error is not None:
                raise error
            return

        result = frontend.check_file(input_file)
        logger.debug("Tokenized: %d tokens", result.token_count)

        if options.trace:
            click.echo(format_trace(result))

        if not quiet:
            click.echo(f"{input_file}: OK")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
