"""hmtrace Lexer — Tokenizer with line/column tracking.

Produces the token stream for the expression language. Whitespace carries
no token. Characters outside every token pattern are dropped, or rejected
with a LexError when the lexer is strict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from hmtrace.errors import SourceLocation, LexError, LiteralTooLargeError

logger = logging.getLogger(__name__)


class TokenType(Enum):
    NUM = auto()
    BOOL = auto()
    KEYWORD = auto()
    ARROW = auto()
    OP = auto()
    IDENT = auto()
    PUNCT = auto()
    EOF = auto()


KEYWORDS = frozenset({"let", "in", "if", "then", "else", "fun"})

BOOLEANS: dict[str, bool] = {"true": True, "false": False}

# Longest first, so "==" wins over "=" and "<=" over "<".
OPERATORS: tuple[str, ...] = (
    "==", "!=", "<=", ">=", "::",
    "+", "-", "*", "/", "<", ">", "=",
)

PUNCTUATION = frozenset("()[],")


@dataclass
class Token:
    type: TokenType
    value: Any
    location: SourceLocation

    @property
    def text(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.BOOL:
            return "true" if self.value else "false"
        return str(self.value)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.location})"


class Lexer:
    """Tokenizer for hmtrace source text."""

    def __init__(self, source: str, filename: str = "<input>", strict: bool = False):
        self.source = source
        self.filename = filename
        self.strict = strict
        self.pos = 0
        self.line = 1
        self.column = 1

    def _loc(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.filename)

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return None

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()

    def _read_number(self) -> Token:
        loc = self._loc()
        value = ""
        while self.pos < len(self.source) and self.source[self.pos] in "0123456789":
            value += self._advance()
        try:
            number = int(value)
        except ValueError:
            raise LiteralTooLargeError(len(value), loc) from None
        return Token(TokenType.NUM, number, loc)

    def _read_identifier(self) -> Token:
        loc = self._loc()
        value = ""
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            value += self._advance()
        if value in KEYWORDS:
            return Token(TokenType.KEYWORD, value, loc)
        if value in BOOLEANS:
            return Token(TokenType.BOOL, BOOLEANS[value], loc)
        return Token(TokenType.IDENT, value, loc)

    def _read_operator(self) -> Optional[Token]:
        loc = self._loc()
        if self.source.startswith("->", self.pos):
            self._advance()
            self._advance()
            return Token(TokenType.ARROW, "->", loc)
        for op in OPERATORS:
            if self.source.startswith(op, self.pos):
                for _ in op:
                    self._advance()
                return Token(TokenType.OP, op, loc)
        return None

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while self.pos < len(self.source):
            self._skip_whitespace()
            if self.pos >= len(self.source):
                break

            ch = self._peek()
            loc = self._loc()

            if ch in "0123456789":
                tokens.append(self._read_number())
            elif _is_ident_start(ch):
                tokens.append(self._read_identifier())
            elif ch in PUNCTUATION:
                self._advance()
                tokens.append(Token(TokenType.PUNCT, ch, loc))
            else:
                tok = self._read_operator()
                if tok is not None:
                    tokens.append(tok)
                    continue
                if self.strict:
                    raise LexError(ch, loc)
                logger.debug("dropping unrecognized character %r at %s", ch, loc)
                self._advance()

        tokens.append(Token(TokenType.EOF, None, self._loc()))
        return tokens


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or ch in "0123456789"


def tokenize(source: str, filename: str = "<input>", strict: bool = False) -> list[Token]:
    """Convenience function to tokenize hmtrace source text."""
    return Lexer(source, filename, strict=strict).tokenize()
