# =============================================================================
# test_lexer.py - AtomC Lexer Unit Tests
# =============================================================================
# Tests for the AtomC tokenizer automaton and its driver.
#
# Test coverage includes:
#   - Number formats: decimal, octal, hexadecimal, reals with exponents
#   - Character and string literals with escape sequences
#   - Keywords, identifiers, operators and delimiters
#   - Comments and line counting
#   - Token spans and the END token
#   - Error tokens and LexicalError
# =============================================================================

import pytest

from atomc.frontend.errors import LexicalError
from atomc.frontend.lexer import Lexer, next_token, tokenize
from atomc.frontend.tokens import Token, TokenKind


# =============================================================================
# Helper Functions
# =============================================================================

def lex(source) -> list:
    """Tokenize and drop the trailing END token."""
    tokens = tokenize(source)
    assert tokens[-1].kind == TokenKind.END
    return tokens[:-1]


def kinds(source) -> list:
    return [t.kind for t in lex(source)]


def error_token(source) -> Token:
    """Run the automaton to its ERROR token and return it."""
    tokens = list(Lexer(source).tokens())
    assert tokens[-1].kind == TokenKind.ERROR
    return tokens[-1]


# =============================================================================
# Keywords and Identifiers
# =============================================================================

class TestKeywordsAndIdentifiers:
    """Test keyword lookup and identifier scanning."""

    def test_all_keywords(self):
        source = "break char double else for if int return struct void while"
        assert kinds(source) == [
            TokenKind.BREAK, TokenKind.CHAR, TokenKind.DOUBLE, TokenKind.ELSE,
            TokenKind.FOR, TokenKind.IF, TokenKind.INT, TokenKind.RETURN,
            TokenKind.STRUCT, TokenKind.VOID, TokenKind.WHILE,
        ]

    def test_keywords_carry_no_value(self):
        tokens = lex("int while")
        assert all(t.value is None for t in tokens)

    def test_keywords_are_case_sensitive(self):
        """Only the lowercase spelling is a keyword."""
        tokens = lex("Int WHILE")
        assert [t.kind for t in tokens] == [TokenKind.ID, TokenKind.ID]
        assert [t.value for t in tokens] == ["Int", "WHILE"]

    def test_identifier_with_digits_and_underscores(self):
        tokens = lex("_tmp1 point_2d")
        assert [t.value for t in tokens] == ["_tmp1", "point_2d"]

    def test_keyword_prefix_is_identifier(self):
        tokens = lex("integer iffy")
        assert [t.kind for t in tokens] == [TokenKind.ID, TokenKind.ID]

    def test_identifier_stops_at_operator(self):
        assert kinds("a+b") == [TokenKind.ID, TokenKind.ADD, TokenKind.ID]


# =============================================================================
# Numeric Constants
# =============================================================================

class TestNumbers:
    """Test integer and real constants."""

    @pytest.mark.parametrize("source,value", [
        ("42", 42),
        ("0", 0),
        ("017", 15),
        ("0x1A", 26),
        ("0XfF", 255),
        ("9223372036854775807", 9223372036854775807),
    ])
    def test_integers(self, source, value):
        tokens = lex(source)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.CT_INT
        assert tokens[0].value == value

    @pytest.mark.parametrize("source,value", [
        ("3.14e-2", 0.0314),
        ("1.5", 1.5),
        ("2E10", 2e10),
        ("0.5e+3", 500.0),
        ("0.25", 0.25),
        ("017.5", 17.5),
        ("09.5", 9.5),
        ("08e1", 80.0),
    ])
    def test_reals(self, source, value):
        tokens = lex(source)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.CT_REAL
        assert tokens[0].value == pytest.approx(value)

    def test_number_at_end_of_input(self):
        """A constant running into the end of the buffer is still emitted."""
        tokens = tokenize("42")
        assert tokens == [
            Token(TokenKind.CT_INT, 42, 1),
            Token(TokenKind.END, None, 1),
        ]

    def test_number_followed_by_delimiter(self):
        assert kinds("x[10];") == [
            TokenKind.ID, TokenKind.LBRACKET, TokenKind.CT_INT,
            TokenKind.RBRACKET, TokenKind.SEMICOLON,
        ]

    def test_invalid_octal_digit(self):
        token = error_token("09")
        assert token.value == "invalid digit in octal constant '09'"

    def test_hex_prefix_without_digits(self):
        token = error_token("int 0x;")
        assert token.value == "expected hexadecimal digits after '0x'"

    def test_dot_without_fraction_digits(self):
        token = error_token("1.;")
        assert token.value == "expected digits after '.'"

    @pytest.mark.parametrize("source", ["1e", "1e+", "2.5E-x"])
    def test_exponent_without_digits(self, source):
        assert error_token(source).value == "expected digits in exponent"

    def test_integer_overflow(self):
        token = error_token("9223372036854775808")
        assert token.value == "integer constant out of range"

    def test_hex_overflow(self):
        token = error_token("0x10000000000000000")
        assert token.value == "integer constant out of range"


# =============================================================================
# Character and String Literals
# =============================================================================

class TestLiterals:
    """Test character and string literals with escapes."""

    def test_plain_character(self):
        tokens = lex("'a'")
        assert tokens == [Token(TokenKind.CT_CHAR, 97, 1)]

    @pytest.mark.parametrize("source,value", [
        (r"'\n'", 0x0A),
        (r"'\t'", 0x09),
        (r"'\0'", 0x00),
        (r"'\a'", 0x07),
        (r"'\\'", ord("\\")),
        (r"'\''", ord("'")),
        (r"'\"'", ord('"')),
        (r"'\?'", ord("?")),
    ])
    def test_character_escapes(self, source, value):
        tokens = lex(source)
        assert tokens[0].kind == TokenKind.CT_CHAR
        assert tokens[0].value == value

    def test_string(self):
        tokens = lex('"hello"')
        assert tokens == [Token(TokenKind.CT_STRING, "hello", 1)]

    def test_empty_string(self):
        assert lex('""') == [Token(TokenKind.CT_STRING, "", 1)]

    def test_string_escapes(self):
        tokens = lex(r'"a\nb\t\"q\"\\"')
        assert tokens[0].value == 'a\nb\t"q"\\'

    def test_string_keeps_non_ascii_text(self):
        tokens = lex('"café"')
        assert tokens[0].value == "café"

    def test_empty_character_literal(self):
        assert error_token("''").value == "empty or unterminated character literal"

    def test_unclosed_character_literal(self):
        token = error_token("'ab'")
        assert token.value == "expected ' to close the character literal"

    def test_invalid_escape(self):
        assert error_token(r"'\q'").value == "invalid escape sequence '\\q'"
        assert error_token(r'"\q"').value == "invalid escape sequence '\\q'"

    def test_unterminated_string(self):
        assert error_token('"abc').value == "unterminated string literal"

    def test_newline_in_string(self):
        """The raw newline is reported on the line the string started on."""
        token = error_token('x = "ab\ncd";')
        assert token.value == "newline in string literal"
        assert token.line == 1


# =============================================================================
# Operators and Delimiters
# =============================================================================

class TestOperators:
    """Test operator and delimiter recognition."""

    def test_single_character_tokens(self):
        assert kinds("+ - * / . , ; ( ) [ ] { }") == [
            TokenKind.ADD, TokenKind.SUB, TokenKind.MUL, TokenKind.DIV,
            TokenKind.DOT, TokenKind.COMMA, TokenKind.SEMICOLON,
            TokenKind.LPAR, TokenKind.RPAR, TokenKind.LBRACKET,
            TokenKind.RBRACKET, TokenKind.LACC, TokenKind.RACC,
        ]

    def test_two_character_operators(self):
        assert kinds("== != <= >= && ||") == [
            TokenKind.EQUAL, TokenKind.NOT_EQ, TokenKind.LESS_EQ,
            TokenKind.GREATER_EQ, TokenKind.AND, TokenKind.OR,
        ]

    def test_single_forms_of_pairs(self):
        assert kinds("= ! < >") == [
            TokenKind.ASSIGN, TokenKind.NOT, TokenKind.LESS, TokenKind.GREATER,
        ]

    def test_operators_without_spaces(self):
        assert kinds("a<=b==!c") == [
            TokenKind.ID, TokenKind.LESS_EQ, TokenKind.ID,
            TokenKind.EQUAL, TokenKind.NOT, TokenKind.ID,
        ]

    def test_assign_then_negative(self):
        assert kinds("x=-1") == [
            TokenKind.ID, TokenKind.ASSIGN, TokenKind.SUB, TokenKind.CT_INT,
        ]

    def test_lone_ampersand(self):
        assert error_token("a & b").value == "expected '&&', found a lone '&'"

    def test_lone_pipe(self):
        assert error_token("a | b").value == "expected '||', found a lone '|'"

    def test_invalid_character(self):
        token = error_token("int @")
        assert token.value == "invalid character '@' (0x40)"


# =============================================================================
# Comments and Line Counting
# =============================================================================

class TestCommentsAndLines:
    """Test comment skipping and line numbers."""

    def test_line_numbers(self):
        tokens = tokenize("int\nx\n\ny")
        assert [t.line for t in tokens] == [1, 2, 4, 4]

    def test_line_comment(self):
        tokens = lex("// a comment\nint")
        assert tokens == [Token(TokenKind.INT, None, 2)]

    def test_line_comment_at_end_of_input(self):
        tokens = tokenize("x // trailing")
        assert [t.kind for t in tokens] == [TokenKind.ID, TokenKind.END]

    def test_line_comment_counts_its_newline(self):
        tokens = lex("a // one\n// two\nb")
        assert [t.line for t in tokens] == [1, 3]

    def test_block_comment_counts_lines(self):
        tokens = lex("/* a\nb\n */ x")
        assert tokens == [Token(TokenKind.ID, "x", 3)]

    def test_block_comment_with_stars(self):
        assert kinds("/***/x/** a * b **/") == [TokenKind.ID]

    def test_empty_block_comment(self):
        assert kinds("a/**/b") == [TokenKind.ID, TokenKind.ID]

    def test_division_is_not_a_comment(self):
        assert kinds("a/b") == [TokenKind.ID, TokenKind.DIV, TokenKind.ID]

    def test_unterminated_block_comment(self):
        token = error_token("x /* never\nclosed")
        assert token.value == "unterminated comment"
        assert token.line == 2

    def test_windows_line_endings(self):
        tokens = tokenize("int\r\nx;\r\n")
        assert [t.line for t in tokens] == [1, 2, 2, 3]


# =============================================================================
# Spans and End of Input
# =============================================================================

class TestSpansAndEnd:
    """Test token spans and the END token."""

    def test_exactly_one_end_token(self):
        tokens = tokenize("int main() { return 0; }")
        ends = [t for t in tokens if t.kind == TokenKind.END]
        assert len(ends) == 1
        assert tokens[-1] is ends[0]

    def test_empty_source(self):
        assert tokenize("") == [Token(TokenKind.END, None, 1)]

    def test_spans_cover_token_text(self):
        source = "int x = 42; // c\ny = 'a' + \"s\";"
        tokens = tokenize(source)
        texts = [source[t.start:t.end] for t in tokens[:-1]]
        assert texts == ["int", "x", "=", "42", ";", "y", "=", "'a'", "+", '"s"', ";"]

    def test_gaps_are_whitespace_or_comments(self):
        source = "a /* c */ + b // d\n;"
        tokens = tokenize(source)
        previous = 0
        for token in tokens:
            gap = source[previous:token.start].strip()
            assert gap == "" or gap.startswith(("/*", "//"))
            previous = token.end

    def test_nul_byte_ends_input(self):
        tokens = tokenize(b"int\x00 garbage @")
        assert [t.kind for t in tokens] == [TokenKind.INT, TokenKind.END]

    def test_bytes_and_str_sources_agree(self):
        assert tokenize(b"int x;") == tokenize("int x;")


# =============================================================================
# Automaton and Driver
# =============================================================================

class TestDriver:
    """Test next_token and the Lexer driver."""

    def test_next_token_returns_position_and_line(self):
        token, pos, line = next_token(b"  \nx+", 0, 1)
        assert token == Token(TokenKind.ID, "x", 2)
        assert pos == 4
        assert line == 2

    def test_next_token_pushes_back_lookahead(self):
        buffer = b"<=<x"
        token, pos, line = next_token(buffer, 0, 1)
        assert token.kind == TokenKind.LESS_EQ
        token, pos, line = next_token(buffer, pos, line)
        assert token.kind == TokenKind.LESS
        assert pos == 3

    def test_generator_stops_at_error(self):
        tokens = list(Lexer("int x = 1 & 2;").tokens())
        assert [t.kind for t in tokens] == [
            TokenKind.INT, TokenKind.ID, TokenKind.ASSIGN,
            TokenKind.CT_INT, TokenKind.ERROR,
        ]

    def test_tokenize_raises_lexical_error(self):
        with pytest.raises(LexicalError) as exc_info:
            Lexer("int x;\nint 0x;", "prog.c").tokenize()
        error = exc_info.value
        assert str(error) == "error in line 2: expected hexadecimal digits after '0x'"
        assert error.line == 2
        assert error.location.filename == "prog.c"
        assert error.token.kind == TokenKind.ERROR

    def test_lexical_error_report_includes_source_line(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("int a;\nchar c = '';", "prog.c")
        report = exc_info.value.report()
        assert report.startswith("prog.c:2: error in line 2:")
        assert report.endswith("    char c = '';")

    def test_source_lines_split_on_newline_only(self):
        lexer = Lexer(b'a\r\n"\x0c\x0b"\nb')
        assert lexer.source_lines() == ["a", '"\x0c\x0b"', "b"]
        assert lexer.source_line(3) == "b"
        assert lexer.source_line(4) is None


# =============================================================================
# Token Payloads
# =============================================================================

class TestTokenPayloads:
    """Test payload validation and rendering on Token."""

    @pytest.mark.parametrize("kind,value", [
        (TokenKind.CT_INT, "12"),
        (TokenKind.CT_INT, True),
        (TokenKind.CT_INT, 1 << 63),
        (TokenKind.CT_REAL, 1),
        (TokenKind.CT_CHAR, 300),
        (TokenKind.ID, None),
        (TokenKind.SEMICOLON, ";"),
        (TokenKind.END, 0),
    ])
    def test_invalid_payload_rejected(self, kind, value):
        with pytest.raises(ValueError):
            Token(kind, value, 1)

    def test_quoted_values(self):
        assert Token(TokenKind.ID, "x").quoted_value() == '"x"'
        assert Token(TokenKind.CT_STRING, 'a"b\n').quoted_value() == '"a\\"b\\n"'
        assert Token(TokenKind.CT_CHAR, 10).quoted_value() == "'\\n'"
        assert Token(TokenKind.CT_INT, 26).quoted_value() == "26"
        assert Token(TokenKind.SEMICOLON).quoted_value() is None

    def test_text_value_renders_char_as_character(self):
        assert Token(TokenKind.CT_CHAR, 97).text_value() == "a"
        assert Token(TokenKind.CT_REAL, 1.5).text_value() == "1.5"

    def test_describe(self):
        assert Token(TokenKind.SEMICOLON).describe() == "';'"
        assert Token(TokenKind.WHILE).describe() == "'while'"
        assert Token(TokenKind.END).describe() == "end of input"
        assert Token(TokenKind.ID, "main").describe() == '"main"'

    def test_spans_do_not_affect_equality(self):
        assert Token(TokenKind.ID, "x", 1, 0, 1) == Token(TokenKind.ID, "x", 1, 5, 6)

    def test_display_names(self):
        assert TokenKind.CT_INT.display_name == "CtInt"
        assert TokenKind.SEMICOLON.display_name == "Semicolon"
