"""
Column allocation and constraint registration.

A circuit declares its shape once, at configuration time, on a
ConstraintSystem:

    meta = ConstraintSystem()
    state = [meta.advice_column() for _ in range(25)]
    for column in state:
        meta.enable_equality(column)
    q = meta.selector()

    meta.create_gate("theta", lambda vc: [
        ("lane 0", mul(vc.query_selector(q), sub(vc.query_advice(state[0], 1), ...))),
    ])

Column kinds
────────────

  ADVICE    witnessed by the prover, per proof
  FIXED     set at configuration time (powers of a base, ...)
  INSTANCE  public inputs (the round constants)

plus selectors (0/1 per row, simple or complex) and lookup table
columns.  Only columns with equality enabled can take part in copy
constraints; a simple selector may only gate polynomial identities,
a complex one may also gate lookups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable

from ..ast import (
    AdviceQuery, Expr, FixedQuery, InstanceQuery, SelectorQuery,
    queried_selectors,
)
from .constraints import Gate, Lookup
from .errors import ConfigurationError

_logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Handles
# ═══════════════════════════════════════════════════════════════════

class ColumnKind(Enum):
    ADVICE = auto()
    FIXED = auto()
    INSTANCE = auto()


@dataclass(frozen=True)
class Column:
    """Opaque handle to one column, unique within its kind."""
    kind: ColumnKind
    index: int


@dataclass(frozen=True)
class Selector:
    index: int
    complex: bool = False


@dataclass(frozen=True)
class TableColumn:
    index: int


# ═══════════════════════════════════════════════════════════════════
# Query builder handed to gate / lookup bodies
# ═══════════════════════════════════════════════════════════════════

class VirtualCells:
    """Builds leaf queries relative to the row a constraint is checked on."""

    def __init__(self, meta: ConstraintSystem):
        self._meta = meta

    def _check(self, column: Column, kind: ColumnKind) -> None:
        if column.kind is not kind:
            raise ConfigurationError(f"{column} queried as {kind.name.lower()}")
        if column.index >= self._meta.num_columns(kind):
            raise ConfigurationError(f"{column} was never allocated")

    def query_advice(self, column: Column, rotation: int = 0) -> AdviceQuery:
        self._check(column, ColumnKind.ADVICE)
        return AdviceQuery(column, rotation)

    def query_fixed(self, column: Column, rotation: int = 0) -> FixedQuery:
        self._check(column, ColumnKind.FIXED)
        return FixedQuery(column, rotation)

    def query_instance(self, column: Column, rotation: int = 0) -> InstanceQuery:
        self._check(column, ColumnKind.INSTANCE)
        return InstanceQuery(column, rotation)

    def query_selector(self, selector: Selector) -> SelectorQuery:
        if selector.index >= len(self._meta.selectors):
            raise ConfigurationError(f"{selector} was never allocated")
        return SelectorQuery(selector)


# ═══════════════════════════════════════════════════════════════════
# Constraint system
# ═══════════════════════════════════════════════════════════════════

GateBody = Callable[[VirtualCells], Iterable[tuple[str, Expr]]]
LookupBody = Callable[[VirtualCells], Iterable[tuple[Expr, TableColumn]]]


class ConstraintSystem:
    """The static shape of a circuit: columns, gates, lookups, equality."""

    def __init__(self):
        self._columns: dict[ColumnKind, list[Column]] = {kind: [] for kind in ColumnKind}
        self.selectors: list[Selector] = []
        self.table_columns: list[TableColumn] = []
        self.equality: set[Column] = set()
        self.gates: list[Gate] = []
        self.lookups: list[Lookup] = []

    # ── Allocation ──

    def _column(self, kind: ColumnKind) -> Column:
        column = Column(kind, len(self._columns[kind]))
        self._columns[kind].append(column)
        return column

    def advice_column(self) -> Column:
        return self._column(ColumnKind.ADVICE)

    def fixed_column(self) -> Column:
        return self._column(ColumnKind.FIXED)

    def instance_column(self) -> Column:
        return self._column(ColumnKind.INSTANCE)

    def num_columns(self, kind: ColumnKind) -> int:
        return len(self._columns[kind])

    def selector(self) -> Selector:
        selector = Selector(len(self.selectors))
        self.selectors.append(selector)
        return selector

    def complex_selector(self) -> Selector:
        selector = Selector(len(self.selectors), complex=True)
        self.selectors.append(selector)
        return selector

    def lookup_table_column(self) -> TableColumn:
        column = TableColumn(len(self.table_columns))
        self.table_columns.append(column)
        return column

    def enable_equality(self, column: Column) -> None:
        if column.index >= self.num_columns(column.kind):
            raise ConfigurationError(f"{column} was never allocated")
        self.equality.add(column)

    # ── Constraints ──

    def create_gate(self, name: str, body: GateBody) -> Gate:
        """Register a gate.  Every polynomial must read a selector."""
        polys = list(body(VirtualCells(self)))
        if not polys:
            raise ConfigurationError(f"gate {name!r} has no polynomials")
        selectors: set[Selector] = set()
        for poly_name, poly in polys:
            used = queried_selectors(poly)
            if not used:
                raise ConfigurationError(
                    f"polynomial {poly_name!r} of gate {name!r} is not gated by a selector"
                )
            selectors |= used
        gate = Gate(name, polys, selectors)
        self.gates.append(gate)
        _logger.debug("gate %r: %d polynomials, degree %d", name, len(polys), gate.inferred_degree)
        return gate

    def lookup(self, name: str, body: LookupBody) -> Lookup:
        """Register a lookup.  Inputs must be gated by complex selectors."""
        pairs = list(body(VirtualCells(self)))
        if not pairs:
            raise ConfigurationError(f"lookup {name!r} has no inputs")
        inputs = [expr for expr, _ in pairs]
        table = [column for _, column in pairs]
        if len(set(table)) != len(table):
            raise ConfigurationError(f"lookup {name!r} reads a table column twice")
        selectors: set[Selector] = set()
        for expr in inputs:
            used = queried_selectors(expr)
            if not used:
                raise ConfigurationError(f"an input of lookup {name!r} is not gated by a selector")
            simple = [s for s in used if not s.complex]
            if simple:
                raise ConfigurationError(
                    f"lookup {name!r} is gated by simple selector {simple[0].index}"
                )
            selectors |= used
        lookup = Lookup(name, inputs, table, selectors)
        self.lookups.append(lookup)
        return lookup
