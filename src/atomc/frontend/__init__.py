"""
AtomC Front End
===============

This package implements the front end of an AtomC compiler. AtomC is a
small C-like teaching language with int, double and char base types,
structs, one-dimensional arrays, functions and the usual statements.

- A lexer: a hand-written automaton turning source bytes into tokens
- A recognizer: backtracking recursive descent over the token list
- A driver tying both together, plus token and trace listings

Pipeline
--------
    AtomC Source → Lexer → Token list → Recognizer → accept / first error

There is no tree, no symbol table and no code generation; the
recognizer only decides whether the source is a well-formed unit.

Usage
-----
>>> from atomc.frontend import tokenize, Parser
>>> Parser(tokenize("void main() { }")).parse()
True
"""

from atomc.frontend.tokens import Token, TokenKind, KEYWORDS
from atomc.frontend.lexer import Lexer, next_token, tokenize
from atomc.frontend.cursor import Mark, Reduction, TokenCursor
from atomc.frontend.parser import Parser, parse_source
from atomc.frontend.errors import (
    FrontendError,
    LexicalError,
    AtomCSyntaxError,
    MissingTokenError,
    UnexpectedTokenError,
)
from atomc.frontend.driver import (
    AtomCFrontend,
    FrontendOptions,
    FrontendResult,
    check_source,
    format_token_table,
    format_trace,
)

__all__ = [
    # Tokens
    "Token",
    "TokenKind",
    "KEYWORDS",
    # Lexer
    "Lexer",
    "next_token",
    "tokenize",
    # Recognizer
    "Mark",
    "Reduction",
    "TokenCursor",
    "Parser",
    "parse_source",
    # Errors
    "FrontendError",
    "LexicalError",
    "AtomCSyntaxError",
    "MissingTokenError",
    "UnexpectedTokenError",
    # Driver
    "AtomCFrontend",
    "FrontendOptions",
    "FrontendResult",
    "check_source",
    "format_token_table",
    "format_trace",
]
