"""Structured error objects for the hmtrace inference engine.

Every failure is machine-readable: an ErrorKind, a message, an optional
source location or AST node id, and kind-specific details. The first error
of a run aborts it, so each exception wraps exactly one HMError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    LEX_ERROR = "LexError"
    SYNTAX_ERROR = "SyntaxError"
    UNDEFINED_VARIABLE = "UndefinedVariableError"
    TYPE_MISMATCH = "TypeMismatchError"
    INFINITE_TYPE = "InfiniteTypeError"
    UNKNOWN_EXPRESSION = "UnknownExpressionError"
    NESTING_TOO_DEEP = "NestingTooDeepError"


@dataclass
class SourceLocation:
    line: int
    column: int
    file: str = "<input>"

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass
class HMError:
    kind: ErrorKind
    message: str
    location: Optional[SourceLocation] = None
    node_id: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.location:
            d["location"] = {
                "file": self.location.file,
                "line": self.location.line,
                "column": self.location.column,
            }
        if self.node_id:
            d["node_id"] = self.node_id
        if self.details:
            d["details"] = self.details
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        loc = f" at {self.location}" if self.location else ""
        return f"[{self.kind.value}]{loc}: {self.message}"


class InferenceError(Exception):
    """Exception wrapping the single HMError that aborted a run."""

    def __init__(self, error: HMError):
        self.error = error
        super().__init__(str(error))

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def to_json(self, indent: int = 2) -> str:
        return self.error.to_json(indent=indent)


class LexError(InferenceError):
    """Unrecognized character, raised only by a strict lexer."""

    def __init__(self, char: str, location: Optional[SourceLocation] = None):
        super().__init__(HMError(
            kind=ErrorKind.LEX_ERROR,
            message=f"Unexpected character {char!r}",
            location=location,
            details={"char": char},
        ))


class LiteralTooLargeError(LexError):
    """Integer literal with more digits than int() will convert."""

    def __init__(self, digits: int, location: Optional[SourceLocation] = None):
        InferenceError.__init__(self, HMError(
            kind=ErrorKind.LEX_ERROR,
            message=f"Integer literal too large ({digits} digits)",
            location=location,
            details={"digits": digits},
        ))


class ParseError(InferenceError):
    """Unexpected token or premature end of input."""

    def __init__(self, expected: str, found: str,
                 location: Optional[SourceLocation] = None):
        super().__init__(HMError(
            kind=ErrorKind.SYNTAX_ERROR,
            message=f"Expected {expected}, found {found}",
            location=location,
            details={"expected": expected, "found": found},
        ))


class UndefinedVariableError(InferenceError):
    def __init__(self, name: str, node_id: Optional[str] = None):
        super().__init__(HMError(
            kind=ErrorKind.UNDEFINED_VARIABLE,
            message=f"Variable '{name}' is not defined",
            node_id=node_id,
            details={"name": name},
        ))


class TypeMismatchError(InferenceError):
    def __init__(self, left: str, right: str, reason: str = "",
                 node_id: Optional[str] = None):
        message = f"Cannot unify {left} with {right}"
        if reason:
            message += f" ({reason})"
        super().__init__(HMError(
            kind=ErrorKind.TYPE_MISMATCH,
            message=message,
            node_id=node_id,
            details={"left": left, "right": right, "reason": reason},
        ))


class InfiniteTypeError(InferenceError):
    """Occurs check failure: a variable would contain itself."""

    def __init__(self, variable: str, type_str: str,
                 node_id: Optional[str] = None):
        super().__init__(HMError(
            kind=ErrorKind.INFINITE_TYPE,
            message=f"Occurs check: {variable} occurs in {type_str}",
            node_id=node_id,
            details={"variable": variable, "type": type_str},
        ))


class UnknownExpressionError(InferenceError):
    """The analyzer met an AST node kind it does not handle (internal bug)."""

    def __init__(self, node_type: str, node_id: Optional[str] = None):
        super().__init__(HMError(
            kind=ErrorKind.UNKNOWN_EXPRESSION,
            message=f"Unknown expression node '{node_type}'",
            node_id=node_id,
            details={"node_type": node_type},
        ))


class NestingTooDeepError(InferenceError):
    """Expression nested deeper than the interpreter's recursion limit."""

    def __init__(self, stage: str, node_id: Optional[str] = None):
        super().__init__(HMError(
            kind=ErrorKind.NESTING_TOO_DEEP,
            message=f"Expression nested too deeply to {stage}",
            node_id=node_id,
            details={"stage": stage},
        ))
