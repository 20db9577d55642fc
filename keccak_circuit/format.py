"""
Per-node expression formatting system.

Each AST node type has a corresponding method on the Format class.
Implement a Format subclass to produce a new output format.

Built-in formats:
    TextFormat   — plain-text (terminal) rendering

Usage:
    from keccak_circuit.format import render, TextFormat

    text = render(expr, TextFormat())    # "q3 · (a4[+1] - a4 - 2 · a26)"

Queries print as a column letter and index with the rotation in
brackets when it is not zero: a = advice, f = fixed, i = instance,
q = selector.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .ast import (
    Expr,
    Constant, AdviceQuery, FixedQuery, InstanceQuery, SelectorQuery,
    Add, Mul, Neg,
)


# ═══════════════════════════════════════════════════════════════════
# Format protocol — one method per node type
# ═══════════════════════════════════════════════════════════════════

class Format(ABC):
    """Base class for per-node expression formatters.

    Subclass this and implement every abstract method to create a new
    output format.  Then call  render(expr, your_format)  to produce
    a string.
    """

    # ── Leaves ──

    @abstractmethod
    def fmt_const(self, value: int) -> str: ...

    @abstractmethod
    def fmt_query(self, prefix: str, index: int, rotation: int) -> str: ...

    @abstractmethod
    def fmt_selector(self, index: int) -> str: ...

    # ── Arithmetic ──

    @abstractmethod
    def fmt_add(self, left: str, right: str) -> str: ...

    @abstractmethod
    def fmt_sub(self, left: str, right: str) -> str: ...

    @abstractmethod
    def fmt_mul(self, left: str, right: str) -> str: ...

    @abstractmethod
    def fmt_neg(self, inner: str) -> str: ...

    # ── Wrapping ──

    @abstractmethod
    def fmt_parens(self, s: str) -> str: ...


# ═══════════════════════════════════════════════════════════════════
# Tree walker — dispatches to format methods
# ═══════════════════════════════════════════════════════════════════

_PREFIX = {AdviceQuery: "a", FixedQuery: "f", InstanceQuery: "i"}


def render(expr: Expr, fmt: Format) -> str:
    """Walk the AST and dispatch rendering to the format, per-node.

    Handles operator precedence (parenthesization) and subtraction
    detection (Add + Neg → sub) generically — formats only define
    *how* each node looks, not *when* to wrap.
    """

    def _r(e: Expr) -> str:
        # ── Leaves ──
        if isinstance(e, Constant):
            return fmt.fmt_const(e.value)
        if isinstance(e, (AdviceQuery, FixedQuery, InstanceQuery)):
            return fmt.fmt_query(_PREFIX[type(e)], e.column.index, e.rotation)
        if isinstance(e, SelectorQuery):
            return fmt.fmt_selector(e.selector.index)

        # ── Add / Sub ──
        if isinstance(e, Add):
            if isinstance(e.right, Neg):
                return fmt.fmt_sub(_r(e.left), _wrap(e.right.expr, "Sub"))
            return fmt.fmt_add(_r(e.left), _r(e.right))

        # ── Mul ──
        if isinstance(e, Mul):
            return fmt.fmt_mul(_wrap(e.left, "Mul"), _wrap(e.right, "Mul"))

        # ── Neg ──
        if isinstance(e, Neg):
            inner = _r(e.expr)
            if isinstance(e.expr, (Add, Neg)):
                inner = fmt.fmt_parens(inner)
            return fmt.fmt_neg(inner)

        return repr(e)

    def _wrap(e: Expr, parent_op: str) -> str:
        """Render e, adding parens if needed inside parent_op."""
        s = _r(e)
        if isinstance(e, (Add, Neg)) and parent_op in ("Mul", "Sub"):
            return fmt.fmt_parens(s)
        return s

    return _r(expr)


# ═══════════════════════════════════════════════════════════════════
# TextFormat — plain-text (terminal) output
# ═══════════════════════════════════════════════════════════════════

class TextFormat(Format):
    """Plain-text rendering used by the printer and the CLI."""

    def fmt_const(self, value):
        # Powers of the bases get unwieldy past a few digits.
        for base in (13, 9):
            exp, rest = 0, value
            while rest > 1 and rest % base == 0:
                rest //= base
                exp += 1
            if rest == 1 and exp > 2:
                return f"{base}^{exp}"
        return str(value)

    def fmt_query(self, prefix, index, rotation):
        if rotation:
            return f"{prefix}{index}[{rotation:+d}]"
        return f"{prefix}{index}"

    def fmt_selector(self, index):
        return f"q{index}"

    def fmt_add(self, left, right):
        return f"{left} + {right}"

    def fmt_sub(self, left, right):
        return f"{left} - {right}"

    def fmt_mul(self, left, right):
        return f"{left} · {right}"

    def fmt_neg(self, inner):
        return f"-{inner}"

    def fmt_parens(self, s):
        return f"({s})"
