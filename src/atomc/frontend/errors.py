"""
AtomC Front End Error Hierarchy
===============================

This module defines the exceptions raised by the tokenizer driver and
the recognizer. All of them inherit from FrontendError, which itself
inherits from the base AtomCError.

Exception Hierarchy
-------------------
FrontendError (base for all front end errors)
├── LexicalError - an Error token reached the driver
└── AtomCSyntaxError - committed grammar rule found a token it cannot accept
    ├── MissingTokenError - a required token is missing
    └── UnexpectedTokenError - no alternative matched where one must

Both kinds are fatal at the point of detection: the lexer driver stops
at the first Error token and the parser stops at its first committed
mismatch. Nothing is collected or recovered.

Error Message Format
--------------------
    error in line <N>: <message>[, found <value>]

``found`` is only present when the offending token carries a value.
"""

from typing import Optional

from atomc.errors import AtomCError, SourceLocation
from atomc.frontend.tokens import Token


# =============================================================================
# Base Front End Exception
# =============================================================================

class FrontendError(AtomCError):
    """
    Base exception for lexical and syntax errors.

    Attributes:
        message: The expectation message ("expected ';'")
        token: The offending token (None when no token exists)
        location: Where in the source the error occurred
        source_line: The source text of the offending line
    """

    def __init__(
        self,
        message: str,
        token: Optional[Token] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.token = token
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> int:
        if self.location is not None:
            return self.location.line
        if self.token is not None:
            return self.token.line
        return 0

    def _format_message(self) -> str:
        """
        Format the one-line diagnostic.

        Example output:
            error in line 4: expected ')' after the arguments, found "y"
        """
        text = f"error in line {self.line}: {self.message}"
        if self.token is not None and self.token.has_value:
            text += f", found {self.token.quoted_value()}"
        return text

    def report(self) -> str:
        """
        Long form with file name and source context.

            prog.c:4: error in line 4: expected ')', found "y"
                f(x y);
        """
        parts = []
        if self.location is not None:
            parts.append(f"{self.location.filename}:{self.line}: {self}")
        else:
            parts.append(str(self))
        if self.source_line is not None:
            parts.append(f"    {self.source_line}")
        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(FrontendError):
    """
    The tokenizer emitted an Error token.

    Examples:
        - Unterminated string, character literal or block comment
        - Invalid escape sequence
        - Missing digits after '0x', '.' or an exponent
        - Lone '&' or '|', or a byte no token starts with
    """

    def __init__(
        self,
        token: Token,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        # The reason travels in the Error token's payload
        super().__init__(
            token.value or "invalid token",
            token=None,
            location=location or SourceLocation("<input>", token.line),
            source_line=source_line,
        )
        self.token = token


# =============================================================================
# Syntax Errors
# =============================================================================

class AtomCSyntaxError(FrontendError):
    """
    Syntax error in AtomC source.

    Raised by a grammar rule after it has committed to an alternative
    (consumed the token that identifies it) and a required follow-token
    is absent.
    """
    pass


class MissingTokenError(AtomCSyntaxError):
    """
    Required token is missing.

    Raised when a specific token (like ';' or ')') is not found where
    the committed rule requires it.
    """

    def __init__(
        self,
        expected: str,
        token: Token,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        context: Optional[str] = None,
    ):
        self.expected = expected
        message = f"expected {expected}"
        if context:
            message += f" {context}"
        super().__init__(message, token, location, source_line)


class UnexpectedTokenError(AtomCSyntaxError):
    """
    No alternative accepts the current token.

    Raised when a committed rule needs a whole construct (an expression,
    a statement, a type name) and none starts at the current token.
    """

    def __init__(
        self,
        expected: str,
        token: Token,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(f"expected {expected}", token, location, source_line)
