"""hmtrace AST Node definitions.

Expressions only: literals, variables, binary operators, if, single-param
lambdas, non-generalizing let, application and list construction.

Every node carries an opaque node_id assigned at construction. It exists
for external highlighting only and never takes part in equality.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


def _new_node_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Expr:
    node_id: str = field(default_factory=_new_node_id, compare=False, kw_only=True)

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def label(self) -> str:
        return self.kind

    def children(self) -> list[Expr]:
        return []

    def _payload(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.node_id,
            "kind": self.kind,
            "label": self.label,
        }
        d.update(self._payload())
        d["children"] = [c.to_dict() for c in self.children()]
        return d

    def walk(self):
        """Yield this node and all descendants, pre-order."""
        yield self
        for child in self.children():
            yield from child.walk()


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IntLit(Expr):
    value: int = 0

    @property
    def label(self) -> str:
        return f"Int({self.value})"

    def _payload(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class BoolLit(Expr):
    value: bool = False

    @property
    def label(self) -> str:
        return f"Bool({'true' if self.value else 'false'})"

    def _payload(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class Var(Expr):
    name: str = ""

    @property
    def label(self) -> str:
        return f"Var({self.name})"

    def _payload(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class EmptyList(Expr):

    @property
    def label(self) -> str:
        return "[]"


# ---------------------------------------------------------------------------
# Compound expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BinOp(Expr):
    op: str = ""
    left: Expr = field(default_factory=Expr)
    right: Expr = field(default_factory=Expr)

    @property
    def label(self) -> str:
        return f"Op({self.op})"

    def children(self) -> list[Expr]:
        return [self.left, self.right]

    def _payload(self) -> dict[str, Any]:
        return {"op": self.op}


@dataclass(frozen=True)
class If(Expr):
    cond: Expr = field(default_factory=Expr)
    then: Expr = field(default_factory=Expr)
    else_: Expr = field(default_factory=Expr)

    def children(self) -> list[Expr]:
        return [self.cond, self.then, self.else_]


@dataclass(frozen=True)
class Fun(Expr):
    """Single-parameter lambda:  fun x -> body"""
    param: str = ""
    body: Expr = field(default_factory=Expr)

    @property
    def label(self) -> str:
        return f"Fun({self.param})"

    def children(self) -> list[Expr]:
        return [self.body]

    def _payload(self) -> dict[str, Any]:
        return {"param": self.param}


@dataclass(frozen=True)
class Let(Expr):
    """let name = value in body  (monomorphic, no generalization)"""
    name: str = ""
    value: Expr = field(default_factory=Expr)
    body: Expr = field(default_factory=Expr)

    @property
    def label(self) -> str:
        return f"Let({self.name})"

    def children(self) -> list[Expr]:
        return [self.value, self.body]

    def _payload(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass(frozen=True)
class App(Expr):
    func: Expr = field(default_factory=Expr)
    arg: Expr = field(default_factory=Expr)

    def children(self) -> list[Expr]:
        return [self.func, self.arg]


@dataclass(frozen=True)
class Cons(Expr):
    head: Expr = field(default_factory=Expr)
    tail: Expr = field(default_factory=EmptyList)

    @property
    def label(self) -> str:
        return "List"

    def children(self) -> list[Expr]:
        return [self.head, self.tail]
