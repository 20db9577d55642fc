import pytest

from keccak_circuit.ast import (
    AdviceQuery, Constant, FixedQuery, InstanceQuery, Mul, Neg, SelectorQuery,
    add, const, degree, evaluate, mul, neg, product, queried_selectors, scale, sub,
)
from keccak_circuit.defs import FIELD_MODULUS
from keccak_circuit.plonk import Column, ColumnKind, Selector
from keccak_circuit.printer import fmt

Q = SelectorQuery(Selector(0))
A0 = AdviceQuery(Column(ColumnKind.ADVICE, 0))
A1 = AdviceQuery(Column(ColumnKind.ADVICE, 1))
A2 = AdviceQuery(Column(ColumnKind.ADVICE, 2))
F0 = FixedQuery(Column(ColumnKind.FIXED, 0))
I0 = InstanceQuery(Column(ColumnKind.INSTANCE, 0), 3)


def resolver(values):
    return lambda q: values[q]


def test_helpers_lift_ints():
    assert add(A0, 1) == add(A0, Constant(1))
    assert const(4) == Constant(4)
    assert neg(2) == Neg(Constant(2))
    assert scale(1, A0) is A0
    assert scale(-1, A0) == Neg(A0)
    assert scale(13, A0) == Mul(Constant(13), A0)


def test_degree():
    assert degree(Constant(5)) == 0
    assert degree(A0) == 1
    assert degree(mul(Q, sub(AdviceQuery(A1.column, 1), A1))) == 2
    assert degree(mul(Q, A0, sub(A1, A2))) == 3
    assert degree(product(sub(A0, k) for k in range(13))) == 13
    with pytest.raises(TypeError):
        degree("a0")


def test_queried_selectors():
    assert queried_selectors(mul(Q, neg(A0))) == {Selector(0)}
    assert queried_selectors(add(A0, A1)) == set()


def test_evaluate_reduces_mod_p():
    values = {Q: 1, A0: 3, A1: 5, A2: 7, F0: 11, I0: 0}
    assert evaluate(sub(A0, A1), resolver(values)) == FIELD_MODULUS - 2
    assert evaluate(mul(Q, add(A0, scale(13, A1))), resolver(values)) == 68
    assert evaluate(add(Constant(FIELD_MODULUS + 1), A0), resolver(values)) == 4
    assert evaluate(product(sub(A2, k) for k in range(8)), resolver(values)) == 0


def test_evaluate_skips_right_side_when_left_is_zero():
    def resolve(q):
        if q == A0:
            raise AssertionError("right side evaluated")
        return 0

    assert evaluate(mul(Q, A0), resolve) == 0


def test_render():
    next_a1 = AdviceQuery(A1.column, 1)
    assert fmt(mul(Q, sub(next_a1, A1))) == "q0 · (a1[+1] - a1)"
    assert fmt(sub(A0, A1, A2)) == "a0 - a1 - a2"
    assert fmt(sub(A0, add(A1, A2))) == "a0 - (a1 + a2)"
    assert fmt(mul(F0, I0)) == "f0 · i0[+3]"
    assert fmt(neg(add(A0, A1))) == "-(a0 + a1)"
    assert fmt(AdviceQuery(A0.column, -1)) == "a0[-1]"


def test_render_constants():
    assert fmt(Constant(13**64)) == "13^64"
    assert fmt(Constant(9**4)) == "9^4"
    assert fmt(Constant(169)) == "169"
    assert fmt(Constant(0)) == "0"
    assert fmt(scale(2, A0)) == "2 · a0"
