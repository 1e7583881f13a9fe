"""
AtomC Front End Driver
======================

This module ties the tokenizer and the recognizer together:

    Source bytes → Lex → Recognize → verdict

Usage
-----
Command line:
    $ atomc prog.c

Programmatic:
    >>> from atomc.frontend import check_source
    >>> check_source("int x; void main() { x = 1; }").success
    True

Error Handling
--------------
Processing stops at the first lexical or syntax error. By default the
error propagates as an exception; with ``raise_errors=False`` it is
returned in ``FrontendResult.error`` instead.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from atomc.frontend.cursor import Reduction
from atomc.frontend.errors import FrontendError, LexicalError
from atomc.frontend.lexer import Lexer
from atomc.frontend.parser import Parser
from atomc.frontend.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class FrontendOptions:
    """
    Front end configuration options.

    Attributes:
        filename: Name used in diagnostics when none is given
        raise_errors: Raise the first error instead of returning it
        trace: Record the production trace while recognizing
        encoding: Used to decode identifier and string payloads
    """
    filename: str = "<input>"
    raise_errors: bool = True
    trace: bool = False
    encoding: str = "utf-8"

    def __post_init__(self):
        if not self.encoding:
            self.encoding = "utf-8"

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create options from environment variables.

        Environment variables (all optional):
            ATOMC_TRACE: Enable the production trace ("1", "true", "yes", "on")
            ATOMC_ENCODING: Source encoding for identifiers and strings

        Returns:
            FrontendOptions with values from environment variables
        """
        options = cls()

        if trace := os.environ.get("ATOMC_TRACE"):
            options.trace = trace.strip().lower() in _TRUE_VALUES

        if encoding := os.environ.get("ATOMC_ENCODING"):
            options.encoding = encoding.strip()

        return options


@dataclass
class FrontendResult:
    """
    Result of checking one source.

    Attributes:
        filename: Source filename
        success: True if the source is a well-formed unit
        source: The source as bytes
        tokens: Token list (empty if tokenizing failed)
        token_count: Number of tokens lexed
        reductions: Production trace (empty unless tracing)
        error: The first error (only when errors are not raised)
    """
    filename: str = ""
    success: bool = False
    source: bytes = b""
    tokens: list[Token] = field(default_factory=list)
    token_count: int = 0
    reductions: list[Reduction] = field(default_factory=list)
    error: Optional[FrontendError] = None


class AtomCFrontend:
    """
    Lexer and recognizer for AtomC sources.

    Example:
        frontend = AtomCFrontend(FrontendOptions(trace=True))
        result = frontend.check_file("prog.c")
        print(format_trace(result))

    Attributes:
        options: Front end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        """
        Initialize the front end.

        Args:
            options: Configuration (uses defaults if None)
        """
        self.options = options or FrontendOptions()

    def tokenize_source(
        self,
        source: Union[str, bytes],
        filename: Optional[str] = None,
    ) -> list[Token]:
        """
        Tokenize source without recognizing it.

        Raises:
            LexicalError: Always raised, whatever ``raise_errors`` says
        """
        lexer = Lexer(source, filename or self.options.filename, self.options.encoding)
        tokens = lexer.tokenize()
        logger.debug("%s: %d tokens", lexer.filename, len(tokens))
        return tokens

    def list_tokens(
        self,
        source: Union[str, bytes],
        filename: Optional[str] = None,
    ) -> tuple[list[Token], Optional[LexicalError]]:
        """
        Tokenize source for a listing, keeping tokens read before an error.

        Returns:
            The tokens up to and including END or the ERROR token, and the
            LexicalError for that ERROR token (None when lexing succeeded)
        """
        lexer = Lexer(source, filename or self.options.filename, self.options.encoding)
        tokens = list(lexer.tokens())
        logger.debug("%s: %d tokens", lexer.filename, len(tokens))
        last = tokens[-1]
        if last.kind == TokenKind.ERROR:
            return tokens, lexer.error_for(last)
        return tokens, None

    def check_source(
        self,
        source: Union[str, bytes],
        filename: Optional[str] = None,
    ) -> FrontendResult:
        """
        Tokenize and recognize AtomC source.

        Args:
            source: AtomC source code
            filename: Source filename for error messages

        Returns:
            FrontendResult with the verdict and what was produced

        Raises:
            FrontendError: On the first error, if ``raise_errors`` is set
        """
        filename = filename or self.options.filename
        lexer = Lexer(source, filename, self.options.encoding)
        result = FrontendResult(filename=filename, source=lexer.source)

        try:
            tokens = lexer.tokenize()
            result.tokens = tokens
            result.token_count = len(tokens)
            logger.debug("%s: %d tokens", filename, len(tokens))

            parser = Parser(
                tokens, filename, lexer.source_lines(), trace=self.options.trace
            )
            parser.parse()
            result.reductions = parser.reductions
            result.success = True
            logger.debug("%s: accepted", filename)

        except FrontendError as e:
            logger.debug("%s: rejected: %s", filename, e)
            if self.options.raise_errors:
                raise
            result.error = e

        return result

    def check_file(self, filepath: Union[str, Path]) -> FrontendResult:
        """
        Tokenize and recognize an AtomC source file.

        Raises:
            FrontendError: On the first error, if ``raise_errors`` is set
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        return self.check_source(path.read_bytes(), str(filepath))


# =============================================================================
# Listings
# =============================================================================

def format_token_table(tokens: list[Token]) -> str:
    """
    Render tokens as a three-column table.

    Example output:
        line       token      	 value
        ------------------------------
        1          Int
        1          Id        	 x
    """
    rows = [
        f"{'line':<10} {'token':<10} \t {'value':<10}".rstrip(),
        "-" * 30,
    ]
    for token in tokens:
        name = token.kind.display_name
        if token.value is None:
            rows.append(f"{token.line:<10d} {name}")
        else:
            rows.append(f"{token.line:<10d} {name:<10}\t {token.text_value()}")
    return "\n".join(rows)


def format_trace(result: FrontendResult) -> str:
    """
    Render the production trace, one reduction per line with its text.

    Example output:
        exprAdd[2:5]         a - b
        exprAdd[2:7]         a - b - c
    """
    rows = []
    for reduction in result.reductions:
        text = ""
        if reduction.end > reduction.start:
            first = result.tokens[reduction.start]
            last = result.tokens[reduction.end - 1]
            raw = result.source[first.start:last.end].decode("utf-8", errors="replace")
            text = " ".join(raw.split())
        rows.append(f"{str(reduction):<20} {text}".rstrip())
    return "\n".join(rows)


# =============================================================================
# Convenience Functions
# =============================================================================

def check_source(
    source: Union[str, bytes],
    filename: str = "<input>",
    trace: bool = False,
) -> FrontendResult:
    """
    Check AtomC source, raising on the first error.

    Raises:
        FrontendError: On the first lexical or syntax error
    """
    frontend = AtomCFrontend(FrontendOptions(filename=filename, trace=trace))
    return frontend.check_source(source)
