"""Type model and unifier tests — prune, occurs check, single assignment."""

import pytest

from hmtrace.types import (
    INT, BOOL, IntType, BoolType, ArrowType, ListType, TypeRegistry, TypeEnv,
    free_type_variables,
)
from hmtrace.trace import TraceCategory, TraceLog
from hmtrace.unify import Unifier, prune, occurs_in
from hmtrace.errors import ErrorKind, InfiniteTypeError, TypeMismatchError


@pytest.fixture
def registry():
    return TypeRegistry()


@pytest.fixture
def trace(registry):
    return TraceLog(registry)


@pytest.fixture
def unifier(trace):
    return Unifier(trace)


class TestTypeModel:

    def test_atomic_equality(self):
        assert IntType() == INT
        assert BoolType() == BOOL
        assert INT != BOOL

    def test_fresh_names_are_sequential(self, registry):
        names = [registry.fresh_var().name for _ in range(3)]
        assert names == ["T0", "T1", "T2"]

    def test_registries_are_independent(self):
        a, b = TypeRegistry(), TypeRegistry()
        a.fresh_var()
        a.fresh_var()
        assert b.fresh_var().name == "T0"

    def test_variables_compare_by_identity(self, registry):
        v, w = registry.fresh_var(), registry.fresh_var()
        assert v == v
        assert v != w

    def test_single_assignment(self, registry):
        v = registry.fresh_var()
        v.bind(INT)
        with pytest.raises(RuntimeError):
            v.bind(BOOL)

    def test_str(self, registry):
        a, b = registry.fresh_var(), registry.fresh_var()
        assert str(ArrowType(a, ArrowType(b, INT))) == "T0 -> T1 -> Int"
        assert str(ArrowType(ArrowType(a, b), INT)) == "(T0 -> T1) -> Int"
        assert str(ListType(ListType(BOOL))) == "[[Bool]]"

    def test_str_parenthesizes_variable_bound_to_arrow(self, registry):
        f, x = registry.fresh_var(), registry.fresh_var()
        f.bind(ArrowType(x, INT))
        assert str(ArrowType(f, BOOL)) == "(T1 -> Int) -> Bool"

    def test_snapshot_placeholder(self, registry):
        a, b = registry.fresh_var(), registry.fresh_var()
        a.bind(ListType(b))
        assert registry.snapshot() == [("T0", "[T1]"), ("T1", "?")]

    def test_free_type_variables(self, registry):
        a, b, c = registry.fresh_var(), registry.fresh_var(), registry.fresh_var()
        c.bind(a)
        assert free_type_variables(ArrowType(a, ListType(ArrowType(b, c)))) == [a, b]


class TestEnvironment:

    def test_extend_does_not_mutate(self):
        env = TypeEnv()
        child = env.extend("x", INT)
        assert env.lookup("x") is None
        assert child.lookup("x") == INT

    def test_shadowing(self):
        env = TypeEnv().extend("x", INT).extend("x", BOOL)
        assert env.lookup("x") == BOOL
        assert env.names() == {"x"}


class TestPrune:

    def test_non_variable_unchanged(self):
        assert prune(INT) is INT

    def test_unbound_variable_unchanged(self, registry):
        v = registry.fresh_var()
        assert prune(v) is v

    def test_path_compression(self, registry):
        a, b, c = registry.fresh_var(), registry.fresh_var(), registry.fresh_var()
        a.bind(b)
        b.bind(c)
        c.bind(INT)
        assert prune(a) == INT
        assert a.instance == INT
        assert b.instance == INT

    def test_idempotent(self, registry):
        a, b = registry.fresh_var(), registry.fresh_var()
        a.bind(ArrowType(b, INT))
        assert str(prune(a)) == str(prune(prune(a)))


class TestOccursCheck:

    def test_variable_occurs_in_itself(self, registry):
        v = registry.fresh_var()
        assert occurs_in(v, v)

    def test_occurs_in_structure(self, registry):
        v, w = registry.fresh_var(), registry.fresh_var()
        assert occurs_in(v, ArrowType(INT, ListType(v)))
        assert not occurs_in(v, ArrowType(w, INT))

    def test_occurs_through_binding(self, registry):
        v, w = registry.fresh_var(), registry.fresh_var()
        w.bind(ListType(v))
        assert occurs_in(v, ArrowType(w, INT))


class TestUnify:

    def test_same_atomic(self, unifier, trace):
        unifier.unify(INT, INT, "test")
        unifier.unify(BOOL, BOOL, "test")
        assert len(trace) == 0

    def test_identical_type_is_noop(self, registry, unifier, trace):
        t = ArrowType(registry.fresh_var(), ListType(INT))
        unifier.unify(t, t, "test")
        assert len(trace) == 0

    def test_binds_variable_and_records(self, registry, unifier, trace):
        v = registry.fresh_var()
        unifier.unify(v, INT, "because", node_id="n1")
        assert prune(v) == INT
        event = trace[0]
        assert event.category == TraceCategory.SUCCESS
        assert event.message == "unify: T0 := Int (because)"
        assert event.related_node_id == "n1"
        assert event.type_snapshot == (("T0", "Int"),)

    def test_variable_on_right(self, registry, unifier):
        v = registry.fresh_var()
        unifier.unify(BOOL, v, "test")
        assert prune(v) == BOOL

    def test_arrow_pairwise(self, registry, unifier, trace):
        a, b = registry.fresh_var(), registry.fresh_var()
        unifier.unify(ArrowType(a, b), ArrowType(INT, BOOL), "app")
        assert (prune(a), prune(b)) == (INT, BOOL)
        assert [e.message for e in trace] == [
            "unify: T0 := Int (function parameter)",
            "unify: T1 := Bool (function return)",
        ]

    def test_param_mismatch_reported_first(self, registry, unifier):
        r = registry.fresh_var()
        with pytest.raises(TypeMismatchError) as exc:
            unifier.unify(ArrowType(INT, r), ArrowType(BOOL, INT), "app")
        assert exc.value.error.details["reason"] == "function parameter"
        assert not r.is_bound

    def test_list_elements(self, registry, unifier):
        v = registry.fresh_var()
        unifier.unify(ListType(v), ListType(ListType(INT)), "test")
        assert str(prune(v)) == "[Int]"

    def test_mismatch(self, unifier):
        with pytest.raises(TypeMismatchError) as exc:
            unifier.unify(BOOL, INT, "left operand of '+'", node_id="n2")
        err = exc.value.error
        assert err.kind == ErrorKind.TYPE_MISMATCH
        assert err.details["left"] == "Bool"
        assert err.details["right"] == "Int"
        assert err.node_id == "n2"

    def test_arrow_vs_list_mismatch(self, unifier):
        with pytest.raises(TypeMismatchError):
            unifier.unify(ArrowType(INT, INT), ListType(INT), "test")

    def test_infinite_type(self, registry, unifier):
        v = registry.fresh_var()
        with pytest.raises(InfiniteTypeError) as exc:
            unifier.unify(v, ArrowType(v, INT), "test")
        assert exc.value.error.details == {"variable": "T0", "type": "T0 -> Int"}
        assert not v.is_bound

    def test_two_variables(self, registry, unifier):
        a, b = registry.fresh_var(), registry.fresh_var()
        unifier.unify(a, b, "test")
        unifier.unify(b, INT, "test")
        assert prune(a) == INT

    def test_unifier_state_is_only_the_trace(self, trace, unifier, registry):
        unifier.unify(registry.fresh_var(), INT, "test")
        assert vars(unifier) == {"trace": trace}
