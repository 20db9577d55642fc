"""
Expression AST for gate and lookup polynomials.

A gate is a set of polynomial identities that must vanish on every row
where its selector is enabled:

    q(ω^i) · P(cells around row i)  =  0

where P is built from cell queries and arithmetic.  This module defines
an AST that can represent any such P, compute its degree, and evaluate
it against an assignment.


The tree has two kinds of nodes:

  LEAVES — cell queries and constants.  Every query names a column and
  a row rotation relative to the row the identity is checked on.

  INTERNAL NODES — arithmetic combinators (Add, Mul, Neg).  They
  combine sub-expressions into larger ones.


Leaf taxonomy
─────────────

  Constant        A field element, stored as a Python int.

  AdviceQuery     A prover-witnessed cell: advice[column][row + rotation].
  FixedQuery      A cell fixed at setup: fixed[column][row + rotation].
  InstanceQuery   A public-input cell.
  SelectorQuery   The 0/1 value of a selector on the current row.

Every leaf has degree 1 except Constant (degree 0), so the degree of a
gate is the largest number of queries multiplied together in any term.
The rotation of a query never changes its degree.


Helper constructors
───────────────────

Use the helpers at the bottom of this file:

  const(5)               →  Constant(5)
  add(a, b, c)           →  Add(Add(a, b), c)
  sub(a, b, c)           →  a + (-b) + (-c)
  mul(a, b, c)           →  Mul(Mul(a, b), c)
  scale(13, expr)        →  Mul(Constant(13), expr)
  product(es)            →  mul(*es) over an iterable

Plain ints are accepted wherever an expression is expected and wrapped
in Constant.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Union, TYPE_CHECKING

from .defs import FIELD_MODULUS

if TYPE_CHECKING:
    from .plonk.constraint_system import Column, Selector


# ═══════════════════════════════════════════════════════════════════
# Leaf nodes — the terminals of the expression tree
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Constant:
    """A field constant, reduced when evaluated."""
    value: int


@dataclass(frozen=True)
class AdviceQuery:
    """A witnessed cell relative to the current row.

    Examples:
        AdviceQuery(state[0], 0)   — lane 0 on this row
        AdviceQuery(state[0], 1)   — lane 0 on the next row
        AdviceQuery(acc, -1)       — accumulator on the previous row
    """
    column: Column
    rotation: int = 0


@dataclass(frozen=True)
class FixedQuery:
    """A setup-time constant cell relative to the current row."""
    column: Column
    rotation: int = 0


@dataclass(frozen=True)
class InstanceQuery:
    """A public-input cell relative to the current row."""
    column: Column
    rotation: int = 0


@dataclass(frozen=True)
class SelectorQuery:
    """1 on rows where the selector is enabled, 0 elsewhere."""
    selector: Selector


# ═══════════════════════════════════════════════════════════════════
# Internal nodes — arithmetic over sub-expressions
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Add:
    """Sum of two expressions: left + right.

    For n-ary sums, chain:  Add(Add(a, b), c)
    or use the helper:      add(a, b, c)
    """
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Mul:
    """Product of two expressions: left · right."""
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Neg:
    """Additive negation: −expr.

    Subtraction a - b is represented as Add(a, Neg(b)).
    The pretty-printer detects this pattern and prints "a - b".
    """
    expr: Expr


Query = Union[AdviceQuery, FixedQuery, InstanceQuery, SelectorQuery]

# The union of all expression node types.
Expr = Union[Constant, AdviceQuery, FixedQuery, InstanceQuery, SelectorQuery, Add, Mul, Neg]

_QUERY_TYPES = (AdviceQuery, FixedQuery, InstanceQuery, SelectorQuery)


# ═══════════════════════════════════════════════════════════════════
# Analysis
# ═══════════════════════════════════════════════════════════════════

def degree(expr: Expr) -> int:
    """Degree of a gate polynomial.

        Constant       → 0
        any query      → 1
        Add(a, b)      → max(deg(a), deg(b))
        Mul(a, b)      → deg(a) + deg(b)
        Neg(a)         → deg(a)

    Examples:
        degree(q · (next - cur))                     →  2
        degree(q · flag · (next - prev - 2·cur))     →  3
    """
    if isinstance(expr, Constant):
        return 0
    if isinstance(expr, _QUERY_TYPES):
        return 1
    if isinstance(expr, Add):
        return max(degree(expr.left), degree(expr.right))
    if isinstance(expr, Mul):
        return degree(expr.left) + degree(expr.right)
    if isinstance(expr, Neg):
        return degree(expr.expr)
    raise TypeError(f"Unknown expression type: {type(expr)}")


def queried_selectors(expr: Expr) -> set[Selector]:
    """Every selector the expression reads."""
    if isinstance(expr, SelectorQuery):
        return {expr.selector}
    if isinstance(expr, (Add, Mul)):
        return queried_selectors(expr.left) | queried_selectors(expr.right)
    if isinstance(expr, Neg):
        return queried_selectors(expr.expr)
    return set()


def evaluate(expr: Expr, resolve: Callable[[Query], int]) -> int:
    """Evaluate expr in the field, reading leaves through resolve."""
    if isinstance(expr, Constant):
        return expr.value % FIELD_MODULUS
    if isinstance(expr, _QUERY_TYPES):
        return resolve(expr) % FIELD_MODULUS
    if isinstance(expr, Add):
        return (evaluate(expr.left, resolve) + evaluate(expr.right, resolve)) % FIELD_MODULUS
    if isinstance(expr, Mul):
        left = evaluate(expr.left, resolve)
        if left == 0:
            return 0
        return left * evaluate(expr.right, resolve) % FIELD_MODULUS
    if isinstance(expr, Neg):
        return -evaluate(expr.expr, resolve) % FIELD_MODULUS
    raise TypeError(f"Unknown expression type: {type(expr)}")


# ═══════════════════════════════════════════════════════════════════
# Helper constructors — shortcuts for building expression trees
# ═══════════════════════════════════════════════════════════════════

def _lift(e: Expr | int) -> Expr:
    return Constant(e) if isinstance(e, int) else e


def const(value: int) -> Constant:
    return Constant(value)


def add(*terms: Expr | int) -> Expr:
    """Left-associative sum: a + b + c + ...

    Example:
        add(a, b, c)  →  Add(Add(a, b), c)
    """
    result = _lift(terms[0])
    for t in terms[1:]:
        result = Add(result, _lift(t))
    return result


def sub(a: Expr | int, *rest: Expr | int) -> Expr:
    """Subtraction chain: a - b - c - ...

    Represented as Add(Add(a, Neg(b)), Neg(c)).
    The pretty-printer renders this as "a - b - c".
    """
    result = _lift(a)
    for t in rest:
        result = Add(result, Neg(_lift(t)))
    return result


def mul(*factors: Expr | int) -> Expr:
    """Left-associative product: a · b · c · ...

    Selectors are conventionally passed first so that evaluation
    short-circuits on rows where they are off.
    """
    result = _lift(factors[0])
    for f in factors[1:]:
        result = Mul(result, _lift(f))
    return result


def neg(expr: Expr | int) -> Expr:
    return Neg(_lift(expr))


def scale(coeff: int, expr: Expr) -> Expr:
    """Scalar multiplication: coeff · expr.

    Smart shortcuts:
        scale(1, e)   →  e        (identity)
        scale(-1, e)  →  Neg(e)   (negation)
        scale(k, e)   →  Mul(Constant(k), e)  (general case)
    """
    if coeff == 1:
        return expr
    if coeff == -1:
        return Neg(expr)
    return Mul(Constant(coeff), expr)


def product(factors) -> Expr:
    """mul() over an iterable.

    Example:
        product(sub(acc, k) for k in range(13))
        # (acc - 0) · (acc - 1) · ... · (acc - 12)
    """
    return mul(*factors)
