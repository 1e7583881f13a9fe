"""
AtomC Lexer (Tokenizer)
=======================

This module implements the tokenizer for AtomC as a deterministic
finite automaton over raw bytes. It converts source text into a list of
tokens for the recognizer.

Token Categories
----------------
- Keywords: break char double else for if int return struct void while
- Identifiers: letters, digits and '_', not starting with a digit
- Integers: decimal, hexadecimal (0x/0X), octal (leading 0)
- Reals: 1.5, 0.5e-3, 2E10, 017.5 (decimal despite the leading zero)
- Characters: 'a', '\\n'
- Strings: "double quoted", no raw newlines
- Operators: + - * / . && || ! != == = < <= > >=
- Delimiters: , ; ( ) [ ] { }

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (must be closed)

Escape Sequences
----------------
\\a \\b \\t \\n \\v \\f \\r \\0 \\? \\" \\' \\\\

The Automaton
-------------
``next_token`` runs the automaton from its start state and returns one
token together with the updated position and line counter. Accumulating
states (identifiers, numbers, single-character operators that might be
doubled) read one byte of lookahead and push it back before returning,
so the next call starts on the right byte. A NUL byte, or the end of the
buffer, is end of input.

Invalid input produces a single ERROR token whose payload is the reason.
Its position never moves past the offending byte, except for a raw
newline inside a string: that newline is consumed and counted.

Example Usage
-------------
>>> from atomc.frontend.lexer import Lexer
>>> for token in Lexer("int x = 0x1A;").tokenize():
...     print(token)
Token(INT, line 1)
Token(ID, 'x', line 1)
Token(ASSIGN, line 1)
Token(CT_INT, 26, line 1)
Token(SEMICOLON, line 1)
Token(END, line 1)
"""

from enum import IntEnum, auto
from typing import Iterator, Optional, Union

from atomc.errors import SourceLocation
from atomc.frontend.errors import LexicalError
from atomc.frontend.tokens import (
    INT64_MAX,
    KEYWORDS,
    Token,
    TokenKind,
)


# =============================================================================
# Character Classes
# =============================================================================

IDENT_START = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
IDENT_CHARS = IDENT_START | frozenset(b"0123456789")
DIGITS = frozenset(b"0123456789")
OCTAL_DIGITS = frozenset(b"01234567")
HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
WHITESPACE = frozenset(b" \t\r\n")
EXPONENT_MARKS = frozenset(b"eE")

NUL = 0
NEWLINE = ord("\n")

# Escape letter -> byte value, shared by character and string literals
ESCAPE_SEQUENCES: dict[int, int] = {
    ord("a"): 0x07,     # Bell/alert
    ord("b"): 0x08,     # Backspace
    ord("t"): 0x09,     # Tab
    ord("n"): 0x0A,     # Newline
    ord("v"): 0x0B,     # Vertical tab
    ord("f"): 0x0C,     # Form feed
    ord("r"): 0x0D,     # Carriage return
    ord("0"): 0x00,     # Null
    ord("?"): ord("?"),
    ord('"'): ord('"'),
    ord("'"): ord("'"),
    ord("\\"): ord("\\"),
}

# Tokens emitted as soon as their byte is read
SINGLE_TOKENS: dict[int, TokenKind] = {
    ord("+"): TokenKind.ADD,
    ord("-"): TokenKind.SUB,
    ord("*"): TokenKind.MUL,
    ord("."): TokenKind.DOT,
    ord(","): TokenKind.COMMA,
    ord(";"): TokenKind.SEMICOLON,
    ord("("): TokenKind.LPAR,
    ord(")"): TokenKind.RPAR,
    ord("["): TokenKind.LBRACKET,
    ord("]"): TokenKind.RBRACKET,
    ord("{"): TokenKind.LACC,
    ord("}"): TokenKind.RACC,
}

# '!' '=' '<' '>': (single form, doubled-with-'=' form)
EQ_PAIRS: dict[int, tuple[TokenKind, TokenKind]] = {
    ord("!"): (TokenKind.NOT, TokenKind.NOT_EQ),
    ord("="): (TokenKind.ASSIGN, TokenKind.EQUAL),
    ord("<"): (TokenKind.LESS, TokenKind.LESS_EQ),
    ord(">"): (TokenKind.GREATER, TokenKind.GREATER_EQ),
}

# '&' and '|' are only valid doubled
DOUBLED: dict[int, TokenKind] = {
    ord("&"): TokenKind.AND,
    ord("|"): TokenKind.OR,
}


# =============================================================================
# Automaton States
# =============================================================================

class _State(IntEnum):
    START = auto()
    IDENT = auto()
    ZERO = auto()               # read '0'
    DECIMAL = auto()
    OCTAL = auto()
    BAD_OCTAL = auto()          # '0' followed by an 8 or 9 somewhere
    HEX_PREFIX = auto()         # read '0x', need a hex digit
    HEX = auto()
    FRACTION_START = auto()     # read '.', need a digit
    FRACTION = auto()
    EXPONENT_START = auto()     # read 'e', need sign or digit
    EXPONENT_SIGN = auto()      # read sign, need a digit
    EXPONENT = auto()
    SLASH = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    BLOCK_COMMENT_STAR = auto()
    EQ_PAIR = auto()            # read one of ! = < >
    DOUBLED = auto()            # read & or |
    CHAR_START = auto()
    CHAR_ESCAPE = auto()
    CHAR_END = auto()
    STRING = auto()
    STRING_ESCAPE = auto()


# =============================================================================
# The Automaton
# =============================================================================

def _describe_byte(c: int) -> str:
    if 0x20 < c < 0x7F:
        return f"'{chr(c)}' (0x{c:02X})"
    return f"0x{c:02X}"


def next_token(
    buffer: bytes,
    pos: int,
    line: int,
    encoding: str = "utf-8",
) -> tuple[Token, int, int]:
    """
    Scan one token starting at ``pos``.

    Args:
        buffer: The whole source as bytes
        pos: Offset to start scanning from
        line: Line counter at ``pos`` (1-indexed)
        encoding: Used to decode identifier and string payloads

    Returns:
        (token, new position, new line counter)
    """
    size = len(buffer)
    state = _State.START
    start = pos
    text = bytearray()
    pair_byte = NUL
    char_value = NUL

    def finish(kind: TokenKind, value=None, token_line: Optional[int] = None):
        return Token(kind, value, token_line or line, start, min(pos, size)), min(pos, size), line

    while True:
        # Past the end reads as NUL, so every state sees a terminator
        c = buffer[pos] if pos < size else NUL
        pos += 1

        if state == _State.START:
            start = pos - 1
            if c in WHITESPACE:
                if c == NEWLINE:
                    line += 1
            elif c in IDENT_START:
                text.append(c)
                state = _State.IDENT
            elif c == NUL:
                pos -= 1
                return finish(TokenKind.END)
            elif c in SINGLE_TOKENS:
                return finish(SINGLE_TOKENS[c])
            elif c in EQ_PAIRS:
                pair_byte = c
                state = _State.EQ_PAIR
            elif c in DOUBLED:
                pair_byte = c
                state = _State.DOUBLED
            elif c == ord("/"):
                state = _State.SLASH
            elif c == ord("0"):
                text.append(c)
                state = _State.ZERO
            elif c in DIGITS:
                text.append(c)
                state = _State.DECIMAL
            elif c == ord("'"):
                state = _State.CHAR_START
            elif c == ord('"'):
                state = _State.STRING
            else:
                pos -= 1
                return finish(TokenKind.ERROR, f"invalid character {_describe_byte(c)}")

        # --- identifiers and keywords ---
        elif state == _State.IDENT:
            if c in IDENT_CHARS:
                text.append(c)
            else:
                pos -= 1
                name = text.decode("ascii")
                if name in KEYWORDS:
                    return finish(KEYWORDS[name])
                return finish(TokenKind.ID, name)

        # --- numbers ---
        elif state == _State.ZERO:
            if c in (ord("x"), ord("X")):
                text.append(c)
                state = _State.HEX_PREFIX
            elif c in OCTAL_DIGITS:
                text.append(c)
                state = _State.OCTAL
            elif c in DIGITS:
                text.append(c)
                state = _State.BAD_OCTAL
            elif c == ord("."):
                text.append(c)
                state = _State.FRACTION_START
            elif c in EXPONENT_MARKS:
                text.append(c)
                state = _State.EXPONENT_START
            else:
                pos -= 1
                return finish(TokenKind.CT_INT, 0)

        elif state == _State.DECIMAL:
            if c in DIGITS:
                text.append(c)
            elif c == ord("."):
                text.append(c)
                state = _State.FRACTION_START
            elif c in EXPONENT_MARKS:
                text.append(c)
                state = _State.EXPONENT_START
            else:
                pos -= 1
                return _integer(text, 10, start, pos, line)

        elif state == _State.OCTAL:
            if c in OCTAL_DIGITS:
                text.append(c)
            elif c in DIGITS:
                text.append(c)
                state = _State.BAD_OCTAL
            elif c == ord("."):
                text.append(c)
                state = _State.FRACTION_START
            elif c in EXPONENT_MARKS:
                text.append(c)
                state = _State.EXPONENT_START
            else:
                pos -= 1
                return _integer(text, 8, start, pos, line)

        elif state == _State.BAD_OCTAL:
            # Only a real constant can rescue digits 8/9 after a leading 0
            if c in DIGITS:
                text.append(c)
            elif c == ord("."):
                text.append(c)
                state = _State.FRACTION_START
            elif c in EXPONENT_MARKS:
                text.append(c)
                state = _State.EXPONENT_START
            else:
                pos -= 1
                return finish(
                    TokenKind.ERROR,
                    f"invalid digit in octal constant '{text.decode('ascii')}'",
                )

        elif state == _State.HEX_PREFIX:
            if c in HEX_DIGITS:
                text.append(c)
                state = _State.HEX
            else:
                pos -= 1
                return finish(TokenKind.ERROR, "expected hexadecimal digits after '0x'")

        elif state == _State.HEX:
            if c in HEX_DIGITS:
                text.append(c)
            else:
                pos -= 1
                return _integer(text[2:], 16, start, pos, line)

        elif state == _State.FRACTION_START:
            if c in DIGITS:
                text.append(c)
                state = _State.FRACTION
            else:
                pos -= 1
                return finish(TokenKind.ERROR, "expected digits after '.'")

        elif state == _State.FRACTION:
            if c in DIGITS:
                text.append(c)
            elif c in EXPONENT_MARKS:
                text.append(c)
                state = _State.EXPONENT_START
            else:
                pos -= 1
                return finish(TokenKind.CT_REAL, float(text.decode("ascii")))

        elif state == _State.EXPONENT_START:
            if c in (ord("+"), ord("-")):
                text.append(c)
                state = _State.EXPONENT_SIGN
            elif c in DIGITS:
                text.append(c)
                state = _State.EXPONENT
            else:
                pos -= 1
                return finish(TokenKind.ERROR, "expected digits in exponent")

        elif state == _State.EXPONENT_SIGN:
            if c in DIGITS:
                text.append(c)
                state = _State.EXPONENT
            else:
                pos -= 1
                return finish(TokenKind.ERROR, "expected digits in exponent")

        elif state == _State.EXPONENT:
            if c in DIGITS:
                text.append(c)
            else:
                pos -= 1
                return finish(TokenKind.CT_REAL, float(text.decode("ascii")))

        # --- division and comments ---
        elif state == _State.SLASH:
            if c == ord("/"):
                state = _State.LINE_COMMENT
            elif c == ord("*"):
                state = _State.BLOCK_COMMENT
            else:
                pos -= 1
                return finish(TokenKind.DIV)

        elif state == _State.LINE_COMMENT:
            # The terminator is left for START so newlines are counted there
            if c in (NEWLINE, ord("\r"), NUL):
                pos -= 1
                state = _State.START

        elif state == _State.BLOCK_COMMENT:
            if c == ord("*"):
                state = _State.BLOCK_COMMENT_STAR
            elif c == NEWLINE:
                line += 1
            elif c == NUL:
                pos -= 1
                return finish(TokenKind.ERROR, "unterminated comment")

        elif state == _State.BLOCK_COMMENT_STAR:
            if c == ord("/"):
                state = _State.START
            elif c == ord("*"):
                pass
            elif c == NEWLINE:
                line += 1
                state = _State.BLOCK_COMMENT
            elif c == NUL:
                pos -= 1
                return finish(TokenKind.ERROR, "unterminated comment")
            else:
                state = _State.BLOCK_COMMENT

        # --- two-byte operators ---
        elif state == _State.EQ_PAIR:
            single, double = EQ_PAIRS[pair_byte]
            if c == ord("="):
                return finish(double)
            pos -= 1
            return finish(single)

        elif state == _State.DOUBLED:
            if c == pair_byte:
                return finish(DOUBLED[pair_byte])
            pos -= 1
            op = chr(pair_byte)
            return finish(TokenKind.ERROR, f"expected '{op}{op}', found a lone '{op}'")

        # --- character literals ---
        elif state == _State.CHAR_START:
            if c == ord("\\"):
                state = _State.CHAR_ESCAPE
            elif c in (ord("'"), NEWLINE, NUL):
                pos -= 1
                return finish(TokenKind.ERROR, "empty or unterminated character literal")
            else:
                char_value = c
                state = _State.CHAR_END

        elif state == _State.CHAR_ESCAPE:
            if c in ESCAPE_SEQUENCES:
                char_value = ESCAPE_SEQUENCES[c]
                state = _State.CHAR_END
            else:
                pos -= 1
                return finish(TokenKind.ERROR, f"invalid escape sequence '\\{chr(c)}'")

        elif state == _State.CHAR_END:
            if c == ord("'"):
                return finish(TokenKind.CT_CHAR, char_value)
            pos -= 1
            return finish(TokenKind.ERROR, "expected ' to close the character literal")

        # --- string literals ---
        elif state == _State.STRING:
            if c == ord('"'):
                return finish(
                    TokenKind.CT_STRING,
                    text.decode(encoding, errors="surrogateescape"),
                )
            elif c == ord("\\"):
                state = _State.STRING_ESCAPE
            elif c == NEWLINE:
                # Consumed and counted; reported on the line it belongs to
                line += 1
                return finish(TokenKind.ERROR, "newline in string literal", line - 1)
            elif c == NUL:
                pos -= 1
                return finish(TokenKind.ERROR, "unterminated string literal")
            else:
                text.append(c)

        elif state == _State.STRING_ESCAPE:
            if c in ESCAPE_SEQUENCES:
                text.append(ESCAPE_SEQUENCES[c])
                state = _State.STRING
            else:
                pos -= 1
                return finish(TokenKind.ERROR, f"invalid escape sequence '\\{chr(c)}'")


def _integer(
    digits: bytearray,
    base: int,
    start: int,
    pos: int,
    line: int,
) -> tuple[Token, int, int]:
    """Build an integer token, or an ERROR token if it overflows 64 bits."""
    value = int(digits.decode("ascii"), base)
    if value > INT64_MAX:
        token = Token(TokenKind.ERROR, "integer constant out of range", line, start, pos)
    else:
        token = Token(TokenKind.CT_INT, value, line, start, pos)
    return token, pos, line


# =============================================================================
# Lexer Driver
# =============================================================================

class Lexer:
    """
    Tokenizes AtomC source code.

    Runs the automaton to exhaustion up front and materializes the whole
    token list; the recognizer never pulls tokens lazily.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = lexer.tokenize()

    Attributes:
        source: The source as bytes
        filename: Name of the source file (for error reporting)
        encoding: Encoding used to decode identifier and string payloads
    """

    def __init__(
        self,
        source: Union[str, bytes],
        filename: str = "<input>",
        encoding: str = "utf-8",
    ):
        if isinstance(source, str):
            source = source.encode(encoding, errors="surrogateescape")
        self.source = bytes(source)
        self.filename = filename
        self.encoding = encoding

    def tokens(self) -> Iterator[Token]:
        """
        Generate tokens until END or the first ERROR token.

        The ERROR token is yielded as the last item; nothing follows it,
        since its position does not advance and rescanning would repeat it.
        """
        pos = 0
        line = 1
        while True:
            token, pos, line = next_token(self.source, pos, line, self.encoding)
            yield token
            if token.kind in (TokenKind.END, TokenKind.ERROR):
                return

    def tokenize(self) -> list[Token]:
        """
        Tokenize the whole source.

        Returns:
            The token list, ending with exactly one END token

        Raises:
            LexicalError: If the source contains a lexically invalid sequence
        """
        tokens = list(self.tokens())
        last = tokens[-1]
        if last.kind == TokenKind.ERROR:
            raise self.error_for(last)
        return tokens

    def error_for(self, token: Token) -> LexicalError:
        """Build the LexicalError for an ERROR token of this source."""
        return LexicalError(
            token,
            SourceLocation(self.filename, token.line),
            self.source_line(token.line),
        )

    def source_lines(self) -> list[str]:
        """
        Split the source into lines the way the automaton counts them.

        Only LF ends a line; a trailing CR is dropped.
        """
        return [
            line.rstrip(b"\r").decode(self.encoding, errors="replace")
            for line in self.source.split(b"\n")
        ]

    def source_line(self, line: int) -> Optional[str]:
        """Get the text of a 1-indexed source line for error reporting."""
        lines = self.source_lines()
        if 0 < line <= len(lines):
            return lines[line - 1]
        return None


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: Union[str, bytes], filename: str = "<input>") -> list[Token]:
    """
    Tokenize AtomC source.

    Raises:
        LexicalError: If the source contains a lexically invalid sequence
    """
    return Lexer(source, filename).tokenize()
