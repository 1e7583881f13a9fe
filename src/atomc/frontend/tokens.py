"""
AtomC Tokens
============

Token kinds, the keyword table and the Token record shared by the
lexer and the parser.

Token Payloads
--------------
Only literal kinds carry a value, and each kind has exactly one payload
type:

| Kind        | Payload | Example source | Value          |
|-------------|---------|----------------|----------------|
| CT_INT      | int     | 0x1A           | 26             |
| CT_REAL     | float   | 3.14e-2        | 0.0314         |
| CT_CHAR     | int     | '\\n'          | 10             |
| CT_STRING   | str     | "a\\tb"        | 'a\\tb'        |
| ID          | str     | main           | 'main'         |
| ERROR       | str     | 0x;            | reason text    |

Every other kind (punctuation, keywords, END) has ``value is None``.
The Token constructor enforces this, so a mismatched payload fails at
the point the token is built instead of somewhere in the parser.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the AtomC language.

    The enum value is the display name used in token listings.
    """

    # === Literals and Identifiers ===
    CT_INT = "CtInt"
    CT_REAL = "CtReal"
    CT_CHAR = "CtChar"
    CT_STRING = "CtString"
    ID = "Id"

    # === Structural ===
    END = "End"
    ERROR = "Error"

    # === Arithmetic Operators ===
    ADD = "Add"             # +
    SUB = "Sub"             # -
    MUL = "Mul"             # *
    DIV = "Div"             # /

    # === Member Access ===
    DOT = "Dot"             # .

    # === Logical Operators ===
    AND = "And"             # &&
    OR = "Or"               # ||
    NOT = "Not"             # !

    # === Comparison Operators ===
    NOT_EQ = "NotEq"        # !=
    EQUAL = "Equal"         # ==
    LESS = "Less"           # <
    LESS_EQ = "LessEq"      # <=
    GREATER = "Greater"     # >
    GREATER_EQ = "GreaterEq"  # >=

    # === Assignment ===
    ASSIGN = "Assign"       # =

    # === Delimiters ===
    COMMA = "Comma"         # ,
    SEMICOLON = "Semicolon"  # ;
    LPAR = "Lpar"           # (
    RPAR = "Rpar"           # )
    LBRACKET = "Lbracket"   # [
    RBRACKET = "Rbracket"   # ]
    LACC = "Lacc"           # {
    RACC = "Racc"           # }

    # === Keywords ===
    BREAK = "Break"
    CHAR = "Char"
    DOUBLE = "Double"
    ELSE = "Else"
    FOR = "For"
    IF = "If"
    INT = "Int"
    RETURN = "Return"
    STRUCT = "Struct"
    VOID = "Void"
    WHILE = "While"

    @property
    def display_name(self) -> str:
        return self.value


# =============================================================================
# Keyword Mapping
# =============================================================================

# Exact, case-sensitive
KEYWORDS: dict[str, TokenKind] = {
    "break": TokenKind.BREAK,
    "char": TokenKind.CHAR,
    "double": TokenKind.DOUBLE,
    "else": TokenKind.ELSE,
    "for": TokenKind.FOR,
    "if": TokenKind.IF,
    "int": TokenKind.INT,
    "return": TokenKind.RETURN,
    "struct": TokenKind.STRUCT,
    "void": TokenKind.VOID,
    "while": TokenKind.WHILE,
}

# Spelling of fixed tokens, used by diagnostics ("expected ';'")
SPELLINGS: dict[TokenKind, str] = {
    TokenKind.ADD: "+",
    TokenKind.SUB: "-",
    TokenKind.MUL: "*",
    TokenKind.DIV: "/",
    TokenKind.DOT: ".",
    TokenKind.AND: "&&",
    TokenKind.OR: "||",
    TokenKind.NOT: "!",
    TokenKind.NOT_EQ: "!=",
    TokenKind.EQUAL: "==",
    TokenKind.LESS: "<",
    TokenKind.LESS_EQ: "<=",
    TokenKind.GREATER: ">",
    TokenKind.GREATER_EQ: ">=",
    TokenKind.ASSIGN: "=",
    TokenKind.COMMA: ",",
    TokenKind.SEMICOLON: ";",
    TokenKind.LPAR: "(",
    TokenKind.RPAR: ")",
    TokenKind.LBRACKET: "[",
    TokenKind.RBRACKET: "]",
    TokenKind.LACC: "{",
    TokenKind.RACC: "}",
}
SPELLINGS.update({kind: word for word, kind in KEYWORDS.items()})

# The only kinds that carry a payload, and the payload type of each
PAYLOAD_TYPES: dict[TokenKind, type] = {
    TokenKind.CT_INT: int,
    TokenKind.CT_REAL: float,
    TokenKind.CT_CHAR: int,
    TokenKind.CT_STRING: str,
    TokenKind.ID: str,
    TokenKind.ERROR: str,
}

TYPE_KEYWORDS = frozenset({
    TokenKind.INT,
    TokenKind.DOUBLE,
    TokenKind.CHAR,
    TokenKind.STRUCT,
})

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

TokenValue = Union[int, float, str, None]

# Inverse of the escape table, for quoting values in diagnostics
_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\v": "\\v",
    "\f": "\\f",
    "\r": "\\r",
    "\0": "\\0",
    "\\": "\\\\",
}


def _quote(text: str, quote: str) -> str:
    escaped = "".join(
        "\\" + ch if ch == quote else _QUOTE_ESCAPES.get(ch, ch)
        for ch in text
    )
    return f"{quote}{escaped}{quote}"


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of AtomC source.

    Attributes:
        kind: The TokenKind classification
        value: Literal payload (see module docstring), None for the rest
        line: Line number in source (1-indexed) at emission time
        start: Byte offset where the token's text starts
        end: Byte offset just past the token's text
    """
    kind: TokenKind
    value: TokenValue = None
    line: int = 1
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        expected = PAYLOAD_TYPES.get(self.kind)
        if expected is None:
            if self.value is not None:
                raise ValueError(f"{self.kind.display_name} tokens carry no value")
            return

        # bool is an int subclass, but never a valid payload
        if isinstance(self.value, bool) or not isinstance(self.value, expected):
            raise ValueError(
                f"{self.kind.display_name} token needs a {expected.__name__} value, "
                f"got {self.value!r}"
            )
        if self.kind == TokenKind.CT_CHAR and not 0 <= self.value <= 0xFF:
            raise ValueError(f"character value out of range: {self.value}")
        if self.kind == TokenKind.CT_INT and not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"integer value out of 64-bit range: {self.value}")

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.kind.name}, {self.value!r}, line {self.line})"
        return f"Token({self.kind.name}, line {self.line})"

    @property
    def has_value(self) -> bool:
        return self.value is not None

    def is_type_keyword(self) -> bool:
        """Return True if this token can start a base type."""
        return self.kind in TYPE_KEYWORDS

    def text_value(self) -> Optional[str]:
        """
        Render the value the way token listings show it.

        Characters are shown as the character itself, every other
        literal in its natural textual form. Returns None for tokens
        without a value.
        """
        if self.value is None:
            return None
        if self.kind == TokenKind.CT_CHAR:
            return chr(self.value)
        return str(self.value)

    def quoted_value(self) -> Optional[str]:
        """Render the value as it appears after 'found' in diagnostics."""
        if self.value is None:
            return None
        if self.kind == TokenKind.CT_CHAR:
            return _quote(chr(self.value), "'")
        if self.kind in (TokenKind.CT_STRING, TokenKind.ID, TokenKind.ERROR):
            return _quote(self.value, '"')
        return str(self.value)

    def describe(self) -> str:
        """Short human description: spelling, value or kind name."""
        if self.kind in SPELLINGS:
            return f"'{SPELLINGS[self.kind]}'"
        if self.kind == TokenKind.END:
            return "end of input"
        return self.quoted_value() or self.kind.display_name
