"""hmtrace Analyzer — Algorithm W without let-generalization.

    W(env, n)                = Int | Bool
    W(env, x)                = env(x)
    W(env, [])               = [a]                        a fresh
    W(env, Cons(h, t))       = unify(W(t), [W(h)]); [W(h)]
    W(env, l op r)           = arithmetic: Int, both sides Int
                               comparison: Bool, both sides equal
    W(env, if c then t else e) = unify(W(c), Bool); unify(W(t), W(e)); W(t)
    W(env, fun x -> e)       = a -> W(env[x:a], e)        a fresh
    W(env, f e)              = unify(W(f), W(e) -> r); r  r fresh
    W(env, let x = v in e)   = W(env[x:W(v)], e)

`let` bindings are monomorphic: the value's type is used as-is at every
use site instead of being generalized into a scheme and re-instantiated.
"""

from __future__ import annotations

from typing import Optional

from hmtrace.ast_nodes import (
    Expr, IntLit, BoolLit, Var, BinOp, If, Fun, Let, App, EmptyList, Cons,
)
from hmtrace.types import (
    HMType, ArrowType, ListType, INT, BOOL, TypeEnv, TypeRegistry,
)
from hmtrace.trace import TraceLog
from hmtrace.unify import Unifier
from hmtrace.errors import UndefinedVariableError, UnknownExpressionError

ARITHMETIC_OPS = frozenset({"+", "-", "*", "/"})


class Analyzer:
    """Walks an AST, generating and eagerly solving type equations."""

    def __init__(self, registry: TypeRegistry, trace: TraceLog) -> None:
        self.registry = registry
        self.trace = trace
        self.unifier = Unifier(trace)

    def analyze(self, expr: Expr, env: TypeEnv) -> HMType:
        self.trace.ast(f"AST: analyzing {expr.label}", expr.node_id)

        if isinstance(expr, IntLit):
            return INT
        if isinstance(expr, BoolLit):
            return BOOL
        if isinstance(expr, Var):
            return self._analyze_var(expr, env)
        if isinstance(expr, EmptyList):
            return ListType(self.registry.fresh_var())
        if isinstance(expr, Cons):
            return self._analyze_cons(expr, env)
        if isinstance(expr, BinOp):
            return self._analyze_binop(expr, env)
        if isinstance(expr, If):
            return self._analyze_if(expr, env)
        if isinstance(expr, Fun):
            return self._analyze_fun(expr, env)
        if isinstance(expr, App):
            return self._analyze_app(expr, env)
        if isinstance(expr, Let):
            return self._analyze_let(expr, env)
        raise UnknownExpressionError(type(expr).__name__, expr.node_id)

    def _analyze_var(self, expr: Var, env: TypeEnv) -> HMType:
        t = env.lookup(expr.name)
        if t is None:
            raise UndefinedVariableError(expr.name, expr.node_id)
        return t

    def _analyze_cons(self, expr: Cons, env: TypeEnv) -> HMType:
        head = self.analyze(expr.head, env)
        tail = self.analyze(expr.tail, env)
        self.unifier.unify(tail, ListType(head), "list must be homogeneous", expr.node_id)
        return ListType(head)

    def _analyze_binop(self, expr: BinOp, env: TypeEnv) -> HMType:
        left = self.analyze(expr.left, env)
        right = self.analyze(expr.right, env)
        op = expr.op
        if op in ARITHMETIC_OPS:
            self.trace.info(f"constraint: '{op}' requires Int operands", expr.node_id)
            self.unifier.unify(left, INT, f"left operand of '{op}'", expr.node_id)
            self.unifier.unify(right, INT, f"right operand of '{op}'", expr.node_id)
            return INT
        self.trace.info(f"constraint: '{op}' requires operands of the same type", expr.node_id)
        self.unifier.unify(left, right, f"operands of '{op}'", expr.node_id)
        return BOOL

    def _analyze_if(self, expr: If, env: TypeEnv) -> HMType:
        cond = self.analyze(expr.cond, env)
        self.unifier.unify(cond, BOOL, "if condition", expr.node_id)
        then = self.analyze(expr.then, env)
        else_ = self.analyze(expr.else_, env)
        self.unifier.unify(then, else_, "then/else branches", expr.node_id)
        return then

    def _analyze_fun(self, expr: Fun, env: TypeEnv) -> HMType:
        param = self.registry.fresh_var()
        self.trace.warn(f"scope: {expr.param} : {param.name}", expr.node_id)
        body = self.analyze(expr.body, env.extend(expr.param, param))
        return ArrowType(param, body)

    def _analyze_app(self, expr: App, env: TypeEnv) -> HMType:
        func = self.analyze(expr.func, env)
        arg = self.analyze(expr.arg, env)
        result = self.registry.fresh_var()
        self.unifier.unify(func, ArrowType(arg, result), "function application", expr.node_id)
        return result

    def _analyze_let(self, expr: Let, env: TypeEnv) -> HMType:
        value = self.analyze(expr.value, env)
        self.trace.warn(f"scope: {expr.name} : {value}", expr.node_id)
        return self.analyze(expr.body, env.extend(expr.name, value))


def infer_expr(expr: Expr, registry: TypeRegistry, trace: TraceLog,
               env: Optional[TypeEnv] = None) -> HMType:
    """Infer the type of an already-parsed expression."""
    return Analyzer(registry, trace).analyze(expr, env or TypeEnv())
