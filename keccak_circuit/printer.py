"""
Pretty-printer for expressions and registered constraints.

Entry points:

    fmt(expr)              →  str
        Render an expression tree as a single-line string.
        Delegates to the per-node TextFormat via format.render().

    print_gate(gate)       →  None
    print_gates(meta)      →  None
    print_lookups(meta)    →  None
        Print what a ConstraintSystem holds to stdout.

See format.py for the per-node formatting system.
"""

from __future__ import annotations

from .ast import Expr, degree
from .format import render, TextFormat
from .plonk import ConstraintSystem, Gate, Lookup

_TEXT = TextFormat()

# Polynomials longer than this are summarized instead of printed.
_MAX_POLY_WIDTH = 160


def fmt(expr: Expr) -> str:
    """Render an expression tree as a single-line string."""
    return render(expr, _TEXT)


def _short(expr: Expr) -> str:
    s = fmt(expr)
    if len(s) > _MAX_POLY_WIDTH:
        return s[:_MAX_POLY_WIDTH - 5] + " ..."
    return s


# ═══════════════════════════════════════════════════════════════════
# Gates
# ═══════════════════════════════════════════════════════════════════

def print_gate(gate: Gate) -> None:
    """Pretty-print one gate.

    Output format:
        ============================================================
          iota b13
        ============================================================
          Degree    : 4
          Selectors : q12

          mixing
            q12 · a60 · (a0[+1] - a0 - a27)
    """
    w = 60
    print("=" * w)
    print(f"  {gate.name}")
    print("=" * w)
    print(f"  Degree    : {gate.inferred_degree}")
    print(f"  Selectors : {', '.join(f'q{s.index}' for s in sorted(gate.selectors, key=lambda s: s.index))}")
    print()
    for name, poly in gate.polys:
        print(f"  {name}")
        print(f"    {_short(poly)}")
    print()


def print_gates(meta: ConstraintSystem) -> None:
    for gate in meta.gates:
        print_gate(gate)


def _print_lookup(lookup: Lookup) -> None:
    print(f"  {lookup.name}  (degree {lookup.inferred_degree})")
    for expr, column in zip(lookup.inputs, lookup.table):
        print(f"    {fmt(expr):<40} ∈ t{column.index}")


def print_lookups(meta: ConstraintSystem) -> None:
    w = 60
    print("=" * w)
    print(f"  LOOKUPS")
    print("=" * w)
    for lookup in meta.lookups:
        _print_lookup(lookup)
        print()


def print_summary(meta: ConstraintSystem) -> None:
    """One line per gate: name, polynomial count, degree."""
    name_w = max(len(g.name) for g in meta.gates)
    print(f"  {'gate':<{name_w}}  polys  degree")
    print(f"  {'─' * name_w}  {'─' * 5}  {'─' * 6}")
    for gate in meta.gates:
        print(f"  {gate.name:<{name_w}}  {len(gate.polys):>5}  {max(degree(p) for _, p in gate.polys):>6}")
    print()
