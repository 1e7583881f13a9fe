"""
AtomC - Front End for the AtomC Teaching Language
=================================================

This package provides the lexical and syntactic analysis stages of a
compiler for AtomC, a small subset of C used in compiler courses.

Main Components
---------------
- **frontend**: Lexer, recognizer and driver
    Tokenizes AtomC source and checks it against the grammar

- **cli**: Command-line tool (atomc)
    Checks a source file, optionally listing tokens or the production trace

Quick Start
-----------
Check a program:
    >>> from atomc import check_source
    >>> check_source("int x; void main() { return; }").success
    True

List the tokens of a file:
    $ atomc --tokens prog.c

Version History
---------------
1.0.0 - Initial release with lexer, recognizer and command-line checker
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from atomc.errors import AtomCError, SourceLocation
from atomc.frontend import (
    Token,
    TokenKind,
    Lexer,
    tokenize,
    Parser,
    parse_source,
    FrontendError,
    LexicalError,
    AtomCSyntaxError,
    MissingTokenError,
    UnexpectedTokenError,
    AtomCFrontend,
    FrontendOptions,
    FrontendResult,
    check_source,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "AtomCError",
    "SourceLocation",
    "FrontendError",
    "LexicalError",
    "AtomCSyntaxError",
    "MissingTokenError",
    "UnexpectedTokenError",
    # Lexer and recognizer
    "Token",
    "TokenKind",
    "Lexer",
    "tokenize",
    "Parser",
    "parse_source",
    # Driver
    "AtomCFrontend",
    "FrontendOptions",
    "FrontendResult",
    "check_source",
]
