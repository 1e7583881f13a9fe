"""
AtomC Error Hierarchy
=====================

This module defines the base of the exception hierarchy for the AtomC
front end. All exceptions inherit from AtomCError, allowing callers to
catch every toolchain error with a single except clause.

Exception Hierarchy
-------------------
AtomCError (base)
└── FrontendError (see atomc.frontend.errors)
    ├── LexicalError - the tokenizer produced an Error token
    └── AtomCSyntaxError - a committed grammar rule is missing a token
        ├── MissingTokenError
        └── UnexpectedTokenError

Error Message Format
--------------------
Diagnostics use the classic one-line AtomC form:

    error in line 3: expected ';', found "abc"

The long form (``report()``) adds the file name and the source text:

    prog.c:3: error in line 3: expected ';', found "abc"
        int x "abc"
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class AtomCError(Exception):
    """
    Base exception for all AtomC errors.

        try:
            check_source(text)
        except AtomCError as e:
            print(e)
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Tokens only record the line they were emitted on, so locations are
    line-granular.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' for error messages."""
        return f"{self.filename}:{self.line}"
