"""hmtrace Unification — Robinson unification over mutable type variables.

Unification binds type variables in place instead of building substitution
maps:

    unify(a, T)          = bind a := T           if a does not occur in T
    unify(A -> B, C -> D) = unify(A, C); unify(B, D)
    unify([A], [B])      = unify(A, B)
    unify(K, K)          = ok for K in {Int, Bool}
    otherwise            = TypeMismatchError

The occurs check rejects a := T when a appears inside T, which would
otherwise describe an infinite type such as a = a -> b.
"""

from __future__ import annotations

import logging
from typing import Optional

from hmtrace.types import HMType, IntType, BoolType, TypeVariable, ArrowType, ListType
from hmtrace.trace import TraceLog
from hmtrace.errors import TypeMismatchError, InfiniteTypeError

logger = logging.getLogger(__name__)


def prune(t: HMType) -> HMType:
    """Resolve a bound variable to its representative, compressing the chain."""
    if isinstance(t, TypeVariable) and t.instance is not None:
        t.instance = prune(t.instance)
        return t.instance
    return t


def occurs_in(v: TypeVariable, t: HMType) -> bool:
    t = prune(t)
    if t is v:
        return True
    if isinstance(t, ArrowType):
        return occurs_in(v, t.param) or occurs_in(v, t.ret)
    if isinstance(t, ListType):
        return occurs_in(v, t.elem)
    return False


class Unifier:
    """Unifies types in place, recording every binding to a TraceLog."""

    def __init__(self, trace: TraceLog) -> None:
        self.trace = trace

    def unify(self, a: HMType, b: HMType, reason: str,
              node_id: Optional[str] = None) -> None:
        a = prune(a)
        b = prune(b)

        if a is b:
            return
        if isinstance(a, IntType) and isinstance(b, IntType):
            return
        if isinstance(a, BoolType) and isinstance(b, BoolType):
            return

        if isinstance(a, TypeVariable):
            self._bind(a, b, reason, node_id)
            return
        if isinstance(b, TypeVariable):
            self.unify(b, a, reason, node_id)
            return

        if isinstance(a, ArrowType) and isinstance(b, ArrowType):
            self.unify(a.param, b.param, "function parameter", node_id)
            self.unify(a.ret, b.ret, "function return", node_id)
            return

        if isinstance(a, ListType) and isinstance(b, ListType):
            self.unify(a.elem, b.elem, "list element", node_id)
            return

        raise TypeMismatchError(str(a), str(b), reason, node_id)

    def _bind(self, var: TypeVariable, t: HMType, reason: str,
              node_id: Optional[str]) -> None:
        if occurs_in(var, t):
            raise InfiniteTypeError(var.name, str(t), node_id)
        var.bind(t)
        logger.debug("bound %s := %s (%s)", var.name, t, reason)
        self.trace.success(f"unify: {var.name} := {t} ({reason})", node_id)
