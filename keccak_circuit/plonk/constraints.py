"""
Registered constraints — wraps the expression AST with metadata.

An AST expression (ast.py) describes *what* must vanish.  A registered
constraint adds the surrounding context: its name, which selectors gate
it, and (for lookups) which table it reads.

This module defines the two constraint types a ConstraintSystem holds:


Gate — one or more selector-gated polynomial identities
───────────────────────────────────────────────────────
    q(row) · P_k(cells near row)  =  0     for every row, every k

The selector factor is part of each polynomial, so a gate is inert on
rows where none of its selectors is enabled.

Fields:
  name        — human label, e.g. "theta"
  polys       — [(poly_name, Expr)], one entry per identity
  selectors   — every selector the polynomials read


Lookup — a tuple of expressions that must be a row of a fixed table
───────────────────────────────────────────────────────────────────
    (e_1(row), ..., e_n(row))  ∈  {(t_1[j], ..., t_n[j]) : j}

Each input expression is multiplied by a complex selector, so on
disabled rows the tuple collapses to all zeros, which every table
contains as its first row.

Fields:
  name        — human label, e.g. "base 13 -> base 9"
  inputs      — the witnessed expressions, in table-column order
  table       — the TableColumns they are matched against
  selectors   — every selector the inputs read
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..ast import Expr, degree

if TYPE_CHECKING:
    from .constraint_system import Selector, TableColumn


# ═══════════════════════════════════════════════════════════════════
# Gates
# ═══════════════════════════════════════════════════════════════════

@dataclass
class Gate:
    """A named set of selector-gated identities.

    The degree is inferred from the polynomials, so a gate can be
    checked against what a backend supports:
        assert gate.inferred_degree <= max_degree
    """
    name: str
    polys: list[tuple[str, Expr]]
    selectors: set[Selector] = field(default_factory=set)

    @property
    def inferred_degree(self) -> int:
        return max(degree(p) for _, p in self.polys)


# ═══════════════════════════════════════════════════════════════════
# Lookups
# ═══════════════════════════════════════════════════════════════════

@dataclass
class Lookup:
    """A witnessed tuple matched against the rows of a table."""
    name: str
    inputs: list[Expr]
    table: list[TableColumn]
    selectors: set[Selector] = field(default_factory=set)

    @property
    def inferred_degree(self) -> int:
        return max(degree(e) for e in self.inputs)
