"""
AtomC Recursive Descent Recognizer
==================================

This module implements a backtracking recursive descent recognizer for
AtomC. It takes the token list from the lexer and decides whether it is
a well-formed compilation unit. No tree is built; every production that
completes can be recorded as a Reduction (see ``cursor.py``), which is
where a tree builder would hook in.

Grammar (EBNF)
--------------
unit        ::= (declStruct | declFunc | declVar)* END
declStruct  ::= 'struct' ID '{' declVar* '}' ';'
declVar     ::= typeBase ID arrayDecl? (',' ID arrayDecl?)* ';'
typeBase    ::= 'int' | 'double' | 'char' | 'struct' ID
arrayDecl   ::= '[' expr? ']'
typeName    ::= typeBase arrayDecl?
declFunc    ::= (typeBase '*'? | 'void') ID '(' (funcArg (',' funcArg)*)? ')' stmCompound
funcArg     ::= typeBase ID arrayDecl?
stmCompound ::= '{' (declVar | stm)* '}'
stm         ::= stmCompound
              | 'if' '(' expr ')' stm ('else' stm)?
              | 'while' '(' expr ')' stm
              | 'for' '(' expr? ';' expr? ';' expr? ')' stm
              | 'break' ';'
              | 'return' expr? ';'
              | expr ';'
              | ';'

Expression Precedence (lowest to highest)
-----------------------------------------
1. assignment     =          (right-associative)
2. logical_or     ||
3. logical_and    &&
4. equality       == !=
5. relational     < <= > >=
6. additive       + -
7. multiplicative * /
8. cast           (typeName) expr
9. unary          - !
10. postfix       [expr]  .ID
11. primary       ID, ID(args), literals, (expr)

Levels 2-7 are left-associative and parsed with a loop: one operand,
then operator/operand pairs. A rule never calls itself before it has
consumed a token, so there is no left recursion.

Commit Policy
-------------
Every rule either matches and advances the cursor, fails and leaves the
cursor where it was, or raises. It raises only after it has consumed a
token that singles out its alternative ('if', 'struct ID {', an
operator, ...) and then finds a required token missing. Until that
point failure is silent, so the caller can try its next alternative.

Example Usage
-------------
>>> from atomc.frontend.lexer import tokenize
>>> from atomc.frontend.parser import Parser
>>> Parser(tokenize("int x; void main() { x = 1; }")).parse()
True
"""

from typing import Callable, Optional, Union

from atomc.errors import SourceLocation
from atomc.frontend.cursor import Reduction, TokenCursor
from atomc.frontend.errors import (
    AtomCSyntaxError,
    MissingTokenError,
    UnexpectedTokenError,
)
from atomc.frontend.lexer import Lexer
from atomc.frontend.tokens import SPELLINGS, Token, TokenKind


class Parser:
    """
    Recognizer for AtomC compilation units.

    One instance per token list. Rules share a TokenCursor and backtrack
    with its mark/reset pair.

    Attributes:
        tokens: Token list from the lexer, ending with END
        filename: Source filename for error reporting
        cursor: Position over ``tokens`` (plus the optional trace)
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        trace: bool = False,
    ):
        """
        Initialize the recognizer.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for error messages
            source_lines: Source text lines for error context
            trace: Record a Reduction for every completed production
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []
        self.cursor = TokenCursor(tokens, trace=trace)

        # exprUnary outcomes by start position: (matched, end, reductions).
        # exprAssign parses a unary expression and, when no '=' follows,
        # starts over with exprOr at the same position.
        self._unary_memo: dict[int, tuple[bool, int, tuple[Reduction, ...]]] = {}

        # Where the last declaration loop of unit() stopped
        self._stopped_at = 0

    @property
    def reductions(self) -> list[Reduction]:
        """Productions recorded so far (empty unless tracing)."""
        return list(self.cursor.trace or [])

    def parse(self) -> bool:
        """
        Recognize the whole token list as a compilation unit.

        Returns:
            True (failure is always an exception)

        Raises:
            AtomCSyntaxError: At the first committed mismatch, when the
                unit stops at something that is not a declaration, or
                when nesting exhausts the interpreter's recursion limit
        """
        try:
            matched = self.unit()
        except RecursionError:
            token = self.cursor.peek()
            raise AtomCSyntaxError(
                "expression nested too deeply",
                token,
                self._location(token),
                self._get_source_line(token.line),
            ) from None
        if matched:
            return True

        token = self.tokens[self._stopped_at]
        raise UnexpectedTokenError(
            "declaration or end of input",
            token,
            SourceLocation(self.filename, token.line),
            self._get_source_line(token.line),
        )

    # =========================================================================
    # Error Helpers
    # =========================================================================

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _location(self, token: Token) -> SourceLocation:
        return SourceLocation(self.filename, token.line)

    def _expect(self, kind: TokenKind, context: Optional[str] = None) -> Token:
        """
        Consume a token the committed rule cannot do without.

        Raises:
            MissingTokenError: If the current token is of another kind
        """
        token = self.cursor.consume(kind)
        if token is not None:
            return token

        current = self.cursor.peek()
        expected = f"'{SPELLINGS[kind]}'" if kind in SPELLINGS else "identifier"
        raise MissingTokenError(
            expected,
            current,
            self._location(current),
            self._get_source_line(current.line),
            context=context,
        )

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        """Build the error for a missing construct at the current token."""
        current = self.cursor.peek()
        return UnexpectedTokenError(
            expected,
            current,
            self._location(current),
            self._get_source_line(current.line),
        )

    # =========================================================================
    # Declarations
    # =========================================================================

    def unit(self) -> bool:
        """
        unit ::= (declStruct | declFunc | declVar)* END

        Fails without a diagnostic when the declarations stop at
        anything but END; the cursor is then back at the first token.
        """
        mark = self.cursor.mark()
        while self._decl_struct() or self._decl_func() or self._decl_var():
            pass

        if self.cursor.check(TokenKind.END):
            self.cursor.reduce("unit", mark.position)
            return True

        self._stopped_at = self.cursor.position
        self.cursor.reset(mark)
        return False

    def _decl_struct(self) -> bool:
        """
        declStruct ::= 'struct' ID '{' declVar* '}' ';'

        'struct ID' not followed by '{' is a type use, left to the
        function and variable declarations.
        """
        mark = self.cursor.mark()
        if not self.cursor.consume(TokenKind.STRUCT):
            return False
        self._expect(TokenKind.ID)
        if not self.cursor.consume(TokenKind.LACC):
            self.cursor.reset(mark)
            return False

        while self._decl_var():
            pass

        self._expect(TokenKind.RACC, "at the end of the struct")
        self._expect(TokenKind.SEMICOLON, "at the end of the struct")
        self.cursor.reduce("declStruct", mark.position)
        return True

    def _decl_var(self) -> bool:
        """
        declVar ::= typeBase ID arrayDecl? (',' ID arrayDecl?)* ';'

        Commits on the base type: no statement starts with one, and at
        top level the function alternative has been ruled out already.
        """
        start = self.cursor.position
        if not self._type_base():
            return False

        self._expect(TokenKind.ID)
        self._array_decl()
        while self.cursor.consume(TokenKind.COMMA):
            self._expect(TokenKind.ID, "after ','")
            self._array_decl()

        self._expect(TokenKind.SEMICOLON)
        self.cursor.reduce("declVar", start)
        return True

    def _type_base(self) -> bool:
        """typeBase ::= 'int' | 'double' | 'char' | 'struct' ID"""
        start = self.cursor.position
        if self.cursor.consume(TokenKind.INT, TokenKind.DOUBLE, TokenKind.CHAR):
            self.cursor.reduce("typeBase", start)
            return True
        if self.cursor.consume(TokenKind.STRUCT):
            self._expect(TokenKind.ID, "after struct")
            self.cursor.reduce("typeBase", start)
            return True
        return False

    def _array_decl(self) -> bool:
        """arrayDecl ::= '[' expr? ']'"""
        start = self.cursor.position
        if not self.cursor.consume(TokenKind.LBRACKET):
            return False
        self._expr()
        self._expect(TokenKind.RBRACKET)
        self.cursor.reduce("arrayDecl", start)
        return True

    def _type_name(self) -> bool:
        """typeName ::= typeBase arrayDecl?"""
        start = self.cursor.position
        if not self._type_base():
            return False
        self._array_decl()
        self.cursor.reduce("typeName", start)
        return True

    def _decl_func(self) -> bool:
        """
        declFunc ::= (typeBase '*'? | 'void') ID '(' (funcArg (',' funcArg)*)? ')' stmCompound

        'void' and 'typeBase *' can only start a function. After a plain
        base type, 'ID (' is what tells a function from a variable.
        """
        mark = self.cursor.mark()
        if self.cursor.consume(TokenKind.VOID):
            self._expect(TokenKind.ID, "after void")
            self._expect(TokenKind.LPAR, "after the function name")
        elif self._type_base():
            if self.cursor.consume(TokenKind.MUL):
                self._expect(TokenKind.ID, "after '*'")
                self._expect(TokenKind.LPAR, "after the function name")
            elif not (self.cursor.consume(TokenKind.ID) and self.cursor.consume(TokenKind.LPAR)):
                self.cursor.reset(mark)
                return False
        else:
            return False

        if self._func_arg():
            while self.cursor.consume(TokenKind.COMMA):
                if not self._func_arg():
                    raise self._unexpected("argument after ','")

        self._expect(TokenKind.RPAR, "at the end of the argument list")
        if not self._stm_compound():
            raise self._unexpected("'{' to open the function body")

        self.cursor.reduce("declFunc", mark.position)
        return True

    def _func_arg(self) -> bool:
        """funcArg ::= typeBase ID arrayDecl?"""
        start = self.cursor.position
        if not self._type_base():
            return False
        self._expect(TokenKind.ID)
        self._array_decl()
        self.cursor.reduce("funcArg", start)
        return True

    # =========================================================================
    # Statements
    # =========================================================================

    def _stm_compound(self) -> bool:
        """stmCompound ::= '{' (declVar | stm)* '}'"""
        start = self.cursor.position
        if not self.cursor.consume(TokenKind.LACC):
            return False

        while self._decl_var() or self._stm():
            pass

        self._expect(TokenKind.RACC, "at the end of the block")
        self.cursor.reduce("stmCompound", start)
        return True

    def _stm(self) -> bool:
        """Parse any statement."""
        start = self.cursor.position

        if self._stm_compound():
            return True

        if self.cursor.consume(TokenKind.IF):
            self._expect(TokenKind.LPAR, "after if")
            if not self._expr():
                raise self._unexpected("expression inside if")
            self._expect(TokenKind.RPAR, "at the end of the if condition")
            if not self._stm():
                raise self._unexpected("statement inside if")
            if self.cursor.consume(TokenKind.ELSE):
                if not self._stm():
                    raise self._unexpected("statement inside else")
            self.cursor.reduce("stmIf", start)
            return True

        if self.cursor.consume(TokenKind.WHILE):
            self._expect(TokenKind.LPAR, "after while")
            if not self._expr():
                raise self._unexpected("expression inside while")
            self._expect(TokenKind.RPAR, "at the end of the while condition")
            if not self._stm():
                raise self._unexpected("statement inside while")
            self.cursor.reduce("stmWhile", start)
            return True

        if self.cursor.consume(TokenKind.FOR):
            self._expect(TokenKind.LPAR, "after for")
            self._expr()
            self._expect(TokenKind.SEMICOLON, "after the first expression")
            self._expr()
            self._expect(TokenKind.SEMICOLON, "after the second expression")
            self._expr()
            self._expect(TokenKind.RPAR, "at the end of the for header")
            if not self._stm():
                raise self._unexpected("statement inside for")
            self.cursor.reduce("stmFor", start)
            return True

        if self.cursor.consume(TokenKind.BREAK):
            self._expect(TokenKind.SEMICOLON, "after break")
            self.cursor.reduce("stmBreak", start)
            return True

        if self.cursor.consume(TokenKind.RETURN):
            self._expr()
            self._expect(TokenKind.SEMICOLON, "after return")
            self.cursor.reduce("stmReturn", start)
            return True

        if self._expr():
            self._expect(TokenKind.SEMICOLON, "after expression")
            self.cursor.reduce("stmExpr", start)
            return True

        if self.cursor.consume(TokenKind.SEMICOLON):
            self.cursor.reduce("stmEmpty", start)
            return True

        return False

    # =========================================================================
    # Expressions (Operator Precedence)
    # =========================================================================

    def _expr(self) -> bool:
        """expr ::= exprAssign"""
        return self._expr_assign()

    def _expr_assign(self) -> bool:
        """
        exprAssign ::= exprUnary '=' exprAssign | exprOr

        The unary form is tried first. Without a following '=' the
        cursor goes all the way back and exprOr starts over.
        """
        mark = self.cursor.mark()
        if self._expr_unary() and self.cursor.consume(TokenKind.ASSIGN):
            if not self._expr_assign():
                raise self._unexpected("expression after '='")
            self.cursor.reduce("exprAssign", mark.position)
            return True

        self.cursor.reset(mark)
        return self._expr_or()

    def _expr_or(self) -> bool:
        """exprOr ::= exprAnd ('||' exprAnd)*"""
        return self._binary("exprOr", self._expr_and, (TokenKind.OR,))

    def _expr_and(self) -> bool:
        """exprAnd ::= exprEq ('&&' exprEq)*"""
        return self._binary("exprAnd", self._expr_eq, (TokenKind.AND,))

    def _expr_eq(self) -> bool:
        """exprEq ::= exprRel (('==' | '!=') exprRel)*"""
        return self._binary(
            "exprEq",
            self._expr_rel,
            (TokenKind.EQUAL, TokenKind.NOT_EQ),
        )

    def _expr_rel(self) -> bool:
        """exprRel ::= exprAdd (('<' | '<=' | '>' | '>=') exprAdd)*"""
        return self._binary(
            "exprRel",
            self._expr_add,
            (TokenKind.LESS, TokenKind.LESS_EQ, TokenKind.GREATER, TokenKind.GREATER_EQ),
        )

    def _expr_add(self) -> bool:
        """exprAdd ::= exprMul (('+' | '-') exprMul)*"""
        return self._binary("exprAdd", self._expr_mul, (TokenKind.ADD, TokenKind.SUB))

    def _expr_mul(self) -> bool:
        """exprMul ::= exprCast (('*' | '/') exprCast)*"""
        return self._binary("exprMul", self._expr_cast, (TokenKind.MUL, TokenKind.DIV))

    def _binary(
        self,
        rule: str,
        operand: Callable[[], bool],
        operators: tuple[TokenKind, ...],
    ) -> bool:
        """
        Generic left-associative binary layer.

        Each operator/operand pair extends the expression matched so far,
        and is recorded as a reduction spanning from the first operand:
        for ``a - b - c`` the spans are ``a - b`` then ``a - b - c``.

        Args:
            rule: Name recorded in the trace
            operand: Rule for the next-tighter level
            operators: Token kinds of this level
        """
        start = self.cursor.position
        if not operand():
            return False

        while True:
            op = self.cursor.consume(*operators)
            if op is None:
                return True
            if not operand():
                raise self._unexpected(f"expression after '{SPELLINGS[op.kind]}'")
            self.cursor.reduce(rule, start)

    def _expr_cast(self) -> bool:
        """
        exprCast ::= '(' typeName ')' exprCast | exprUnary

        Only a base type after '(' makes this a cast; a parenthesized
        expression is left to exprPrimary.
        """
        mark = self.cursor.mark()
        if self.cursor.consume(TokenKind.LPAR):
            if self._type_name():
                self._expect(TokenKind.RPAR, "after the type name")
                if not self._expr_cast():
                    raise self._unexpected("expression after the cast")
                self.cursor.reduce("exprCast", mark.position)
                return True
            self.cursor.reset(mark)

        return self._expr_unary()

    def _expr_unary(self) -> bool:
        """exprUnary ::= ('-' | '!') exprUnary | exprPostfix"""
        start = self.cursor.position
        trace = self.cursor.trace

        cached = self._unary_memo.get(start)
        if cached is not None:
            matched, end, reductions = cached
            if matched:
                self.cursor.position = end
                if trace is not None:
                    trace.extend(reductions)
            return matched

        trace_size = len(trace) if trace is not None else 0
        matched = self._parse_unary()
        recorded = tuple(trace[trace_size:]) if trace is not None else ()
        self._unary_memo[start] = (matched, self.cursor.position, recorded)
        return matched

    def _parse_unary(self) -> bool:
        start = self.cursor.position
        op = self.cursor.consume(TokenKind.SUB, TokenKind.NOT)
        if op is not None:
            if not self._expr_unary():
                raise self._unexpected(f"expression after '{SPELLINGS[op.kind]}'")
            self.cursor.reduce("exprUnary", start)
            return True

        return self._expr_postfix()

    def _expr_postfix(self) -> bool:
        """exprPostfix ::= exprPrimary ('[' expr ']' | '.' ID)*"""
        start = self.cursor.position
        if not self._expr_primary():
            return False

        while True:
            # Array subscript
            if self.cursor.consume(TokenKind.LBRACKET):
                if not self._expr():
                    raise self._unexpected("expression after '['")
                self._expect(TokenKind.RBRACKET, "after the index")
                self.cursor.reduce("exprPostfix", start)

            # Member access: struct.field
            elif self.cursor.consume(TokenKind.DOT):
                self._expect(TokenKind.ID, "after '.'")
                self.cursor.reduce("exprPostfix", start)

            else:
                return True

    def _expr_primary(self) -> bool:
        """
        exprPrimary ::= ID ('(' (expr (',' expr)*)? ')')?
                      | CT_INT | CT_REAL | CT_CHAR | CT_STRING
                      | '(' expr ')'
        """
        start = self.cursor.position

        # Identifier or function call
        if self.cursor.consume(TokenKind.ID):
            if self.cursor.consume(TokenKind.LPAR):
                if self._expr():
                    while self.cursor.consume(TokenKind.COMMA):
                        if not self._expr():
                            raise self._unexpected("expression after ','")
                self._expect(TokenKind.RPAR, "after the arguments")
                self.cursor.reduce("exprCall", start)
                return True
            self.cursor.reduce("exprPrimary", start)
            return True

        # Literals
        if self.cursor.consume(
            TokenKind.CT_INT,
            TokenKind.CT_REAL,
            TokenKind.CT_CHAR,
            TokenKind.CT_STRING,
        ):
            self.cursor.reduce("exprPrimary", start)
            return True

        # Parenthesized expression; '(' before a type is a cast
        if self.cursor.check(TokenKind.LPAR) and not self.cursor.peek(1).is_type_keyword():
            self.cursor.advance()
            if not self._expr():
                raise self._unexpected("expression after '('")
            self._expect(TokenKind.RPAR, "to close the parenthesized expression")
            self.cursor.reduce("exprPrimary", start)
            return True

        return False


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: Union[str, bytes], filename: str = "<input>") -> bool:
    """
    Tokenize and recognize AtomC source.

    Returns:
        True when the source is a well-formed unit

    Raises:
        LexicalError: If tokenizing fails
        AtomCSyntaxError: If recognition fails
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()
    parser = Parser(tokens, filename, lexer.source_lines())
    return parser.parse()
