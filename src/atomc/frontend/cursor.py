"""
Token Cursor
============

The recognizer's only mutable state: the token list, an index into it
and, optionally, the production trace recorded so far.

Backtracking is done exclusively with ``mark()`` / ``reset(mark)``. A
mark captures the index and the trace length together, so resetting
also forgets productions recorded by the abandoned alternative.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

from atomc.frontend.tokens import Token, TokenKind


class Mark(NamedTuple):
    """Saved cursor state."""
    position: int
    trace_size: int


@dataclass(frozen=True)
class Reduction:
    """
    One completed production.

    Attributes:
        rule: Grammar rule name ("exprAdd", "declVar", ...)
        start: Index of the first token matched
        end: Index just past the last token matched
    """
    rule: str
    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.rule}[{self.start}:{self.end}]"


class TokenCursor:
    """
    Movable position over a materialized token list.

    The list must end with an END token; peeking past it keeps
    returning that END token.
    """

    def __init__(self, tokens: list[Token], trace: bool = False):
        if not tokens or tokens[-1].kind != TokenKind.END:
            raise ValueError("token list must end with an END token")
        self.tokens = tokens
        self.position = 0
        self.trace: Optional[list[Reduction]] = [] if trace else None

    # =========================================================================
    # Token Access
    # =========================================================================

    def peek(self, offset: int = 0) -> Token:
        """Look at the token at current position + offset."""
        index = self.position + offset
        if index >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[index]

    def check(self, *kinds: TokenKind) -> bool:
        """Check if the current token is one of the given kinds."""
        return self.peek().kind in kinds

    def advance(self) -> Token:
        """Consume and return the current token (END is never passed)."""
        token = self.peek()
        if token.kind != TokenKind.END:
            self.position += 1
        return token

    def consume(self, *kinds: TokenKind) -> Optional[Token]:
        """
        Consume the current token if it is one of the given kinds.

        Returns:
            The consumed token, or None if no match
        """
        if self.check(*kinds):
            token = self.tokens[self.position]
            self.position += 1
            return token
        return None

    def at_end(self) -> bool:
        return self.peek().kind == TokenKind.END

    # =========================================================================
    # Backtracking
    # =========================================================================

    def mark(self) -> Mark:
        size = len(self.trace) if self.trace is not None else 0
        return Mark(self.position, size)

    def reset(self, mark: Mark) -> None:
        self.position = mark.position
        if self.trace is not None:
            del self.trace[mark.trace_size:]

    # =========================================================================
    # Production Trace
    # =========================================================================

    def reduce(self, rule: str, start: int) -> None:
        """Record that ``rule`` matched tokens[start:position]."""
        if self.trace is not None:
            self.trace.append(Reduction(rule, start, self.position))
