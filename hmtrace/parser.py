"""hmtrace Parser — recursive-descent parser.

Four layers, cheapest first:

    atom        NUM | BOOL | IDENT | '(' expr ')' | list literal
    application atom atom ...          (left-associative)
    binary      app (OP app)*          (one level, folded to the right)
    expression  let / fun / if, else binary

Every binary operator shares a single precedence level, so `1 - 2 - 3`
parses as `1 - (2 - 3)` and `*` does not bind tighter than `+`. List
literals hold at most two explicit elements.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from hmtrace.lexer import Token, TokenType, tokenize
from hmtrace.ast_nodes import (
    Expr, IntLit, BoolLit, Var, BinOp, If, Fun, Let, App, EmptyList, Cons,
)
from hmtrace.errors import ParseError, SourceLocation

logger = logging.getLogger(__name__)

_ATOM_START = (TokenType.NUM, TokenType.BOOL, TokenType.IDENT)


class Parser:
    """Recursive-descent parser for hmtrace expressions."""

    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            last = tokens[-1].location if tokens else SourceLocation(1, 1)
            tokens = [*tokens, Token(TokenType.EOF, None, last)]
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _peek(self) -> TokenType:
        return self._current().type

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _check(self, tt: TokenType, value: Any = None) -> bool:
        tok = self._current()
        return tok.type == tt and (value is None or tok.value == value)

    def _match(self, tt: TokenType, value: Any = None) -> Optional[Token]:
        if self._check(tt, value):
            return self._advance()
        return None

    def _expect(self, tt: TokenType, value: Any = None) -> Token:
        if not self._check(tt, value):
            expected = f"'{value}'" if value is not None else tt.name
            self._fail(expected)
        return self._advance()

    def _fail(self, expected: str) -> None:
        tok = self._current()
        found = tok.text if tok.type == TokenType.EOF else f"'{tok.text}'"
        raise ParseError(expected, found, tok.location)

    def _starts_atom(self) -> bool:
        return (
            self._peek() in _ATOM_START
            or self._check(TokenType.PUNCT, "(")
            or self._check(TokenType.PUNCT, "[")
        )

    # -------------------------------------------------------------------
    # Top-level
    # -------------------------------------------------------------------

    def parse(self) -> Expr:
        expr = self.parse_expression()
        if self._peek() != TokenType.EOF:
            self._fail("end of input")
        return expr

    # -------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------

    def parse_expression(self) -> Expr:
        if self._match(TokenType.KEYWORD, "let"):
            return self._parse_let()
        if self._match(TokenType.KEYWORD, "fun"):
            return self._parse_fun()
        if self._match(TokenType.KEYWORD, "if"):
            return self._parse_if()
        return self._parse_binary()

    def _parse_let(self) -> Let:
        name = self._expect(TokenType.IDENT).value
        self._expect(TokenType.OP, "=")
        value = self.parse_expression()
        self._expect(TokenType.KEYWORD, "in")
        body = self.parse_expression()
        return Let(name=name, value=value, body=body)

    def _parse_fun(self) -> Fun:
        param = self._expect(TokenType.IDENT).value
        self._expect(TokenType.ARROW)
        body = self.parse_expression()
        return Fun(param=param, body=body)

    def _parse_if(self) -> If:
        cond = self.parse_expression()
        self._expect(TokenType.KEYWORD, "then")
        then = self.parse_expression()
        self._expect(TokenType.KEYWORD, "else")
        else_ = self.parse_expression()
        return If(cond=cond, then=then, else_=else_)

    def _parse_binary(self) -> Expr:
        operands = [self._parse_application()]
        ops: list[str] = []
        # "=" only appears inside let.
        while self._peek() == TokenType.OP and self._current().value != "=":
            ops.append(self._advance().value)
            operands.append(self._parse_application())

        # Fold from the right: a op (b op (c ...)).
        expr = operands.pop()
        while ops:
            expr = BinOp(op=ops.pop(), left=operands.pop(), right=expr)
        return expr

    def _parse_application(self) -> Expr:
        expr = self._parse_atom()
        while self._starts_atom():
            expr = App(func=expr, arg=self._parse_atom())
        return expr

    # -------------------------------------------------------------------
    # Atoms
    # -------------------------------------------------------------------

    def _parse_atom(self) -> Expr:
        tt = self._peek()

        if tt == TokenType.NUM:
            return IntLit(value=self._advance().value)

        if tt == TokenType.BOOL:
            return BoolLit(value=self._advance().value)

        if tt == TokenType.IDENT:
            return Var(name=self._advance().value)

        if self._match(TokenType.PUNCT, "("):
            expr = self.parse_expression()
            self._expect(TokenType.PUNCT, ")")
            return expr

        if self._match(TokenType.PUNCT, "["):
            return self._parse_list_literal()

        self._fail("an expression")

    def _parse_list_literal(self) -> Expr:
        if self._match(TokenType.PUNCT, "]"):
            return EmptyList()
        head = self.parse_expression()
        tail: Expr = EmptyList()
        if self._match(TokenType.PUNCT, ","):
            second = self.parse_expression()
            tail = Cons(head=second, tail=EmptyList())
        self._expect(TokenType.PUNCT, "]")
        return Cons(head=head, tail=tail)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_tokens(tokens: list[Token]) -> Expr:
    return Parser(tokens).parse()


def parse(source: str, filename: str = "<input>", strict: bool = False) -> Expr:
    """Parse hmtrace source text into an AST."""
    tokens = tokenize(source, filename, strict=strict)
    logger.debug("parsing %d tokens from %s", len(tokens), filename)
    return Parser(tokens).parse()
