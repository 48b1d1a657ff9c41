"""hmtrace Type System.

Atomic types: Int, Bool
Constructed types: A -> B, [A]
Type variables: single-assignment placeholders owned by a TypeRegistry.
Type environment with lexical scoping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional


# ---------------------------------------------------------------------------
# Type Representations
# ---------------------------------------------------------------------------

class HMType:
    """Base type."""

    def __str__(self) -> str:
        return "Unknown"


@dataclass(frozen=True)
class IntType(HMType):
    def __str__(self) -> str:
        return "Int"


@dataclass(frozen=True)
class BoolType(HMType):
    def __str__(self) -> str:
        return "Bool"


@dataclass(eq=False)
class TypeVariable(HMType):
    """A placeholder resolved by unification.

    `instance` starts empty and is written at most once, through bind().
    Path compression in prune() may later shorten the link, but only to the
    type the original link already resolved to.
    """
    name: str
    instance: Optional[HMType] = None

    @property
    def is_bound(self) -> bool:
        return self.instance is not None

    def bind(self, t: HMType) -> None:
        if self.instance is not None:
            raise RuntimeError(f"type variable {self.name} is already bound to {self.instance}")
        self.instance = t

    def __str__(self) -> str:
        if self.instance is not None:
            return str(self.instance)
        return self.name

    def __repr__(self) -> str:
        return f"TypeVariable({self.name!r}, bound={self.instance is not None})"


@dataclass(frozen=True)
class ArrowType(HMType):
    param: HMType = field(default_factory=HMType)
    ret: HMType = field(default_factory=HMType)

    def __str__(self) -> str:
        p = str(self.param)
        if isinstance(resolve(self.param), ArrowType):
            p = f"({p})"
        return f"{p} -> {self.ret}"


@dataclass(frozen=True)
class ListType(HMType):
    elem: HMType = field(default_factory=HMType)

    def __str__(self) -> str:
        return f"[{self.elem}]"


# ---------------------------------------------------------------------------
# Built-in Types
# ---------------------------------------------------------------------------

INT = IntType()
BOOL = BoolType()


def resolve(t: HMType) -> HMType:
    """Follow instance links without rewriting them."""
    while isinstance(t, TypeVariable) and t.instance is not None:
        t = t.instance
    return t


def free_type_variables(t: HMType) -> list[TypeVariable]:
    """Unbound variables reachable from t, in first-occurrence order."""
    found: list[TypeVariable] = []

    def visit(t: HMType) -> None:
        t = resolve(t)
        if isinstance(t, TypeVariable):
            if not any(v is t for v in found):
                found.append(t)
        elif isinstance(t, ArrowType):
            visit(t.param)
            visit(t.ret)
        elif isinstance(t, ListType):
            visit(t.elem)

    visit(t)
    return found


# ---------------------------------------------------------------------------
# Type Variable Registry
# ---------------------------------------------------------------------------

class TypeRegistry:
    """Allocates the type variables of one inference run.

    Names run T0, T1, ... and restart with every registry, so nothing leaks
    between runs.
    """

    def __init__(self, prefix: str = "T"):
        self.prefix = prefix
        self._variables: list[TypeVariable] = []

    def fresh_var(self) -> TypeVariable:
        tv = TypeVariable(f"{self.prefix}{len(self._variables)}")
        self._variables.append(tv)
        return tv

    def snapshot(self, placeholder: str = "?") -> list[tuple[str, str]]:
        """(name, resolved type or placeholder) for every variable, in allocation order."""
        return [
            (tv.name, str(resolve(tv)) if tv.is_bound else placeholder)
            for tv in self._variables
        ]

    def __iter__(self) -> Iterator[TypeVariable]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)


# ---------------------------------------------------------------------------
# Type Environment
# ---------------------------------------------------------------------------

class TypeEnv:
    """Immutable scoped environment mapping variable names to types.

    extend() returns a child scope; the receiver is never modified.
    """

    def __init__(self, parent: Optional[TypeEnv] = None,
                 bindings: Optional[dict[str, HMType]] = None):
        self.parent = parent
        self._bindings: dict[str, HMType] = dict(bindings or {})

    def lookup(self, name: str) -> Optional[HMType]:
        if name in self._bindings:
            return self._bindings[name]
        if self.parent:
            return self.parent.lookup(name)
        return None

    def extend(self, name: str, typ: HMType) -> TypeEnv:
        return TypeEnv(parent=self, bindings={name: typ})

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def names(self) -> set[str]:
        names = self.parent.names() if self.parent else set()
        return names | set(self._bindings)
