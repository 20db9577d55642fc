"""
Mock prover: check an assignment against a constraint system, row by row.

A real backend would compile the gates, lookups and copy constraints
into a succinct proof.  The mock prover instead evaluates them directly
on the recorded witness and reports every violation:

    prover = MockProver.run(circuit, instance)
    failures = prover.verify()          # [] when satisfied
    prover.assert_satisfied()           # raises VerificationError

The four failure kinds mirror the four constraint kinds:

  CONSTRAINT_NOT_SATISFIED   a gate polynomial is non-zero on an
                             enabled row
  LOOKUP                     an enabled lookup tuple is not a table row
  PERMUTATION                two copy-constrained cells differ
  CONSTANT                   a cell differs from the constant it is
                             pinned to
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from ..ast import (
    AdviceQuery, FixedQuery, InstanceQuery, Query, SelectorQuery, evaluate,
)
from .constraint_system import ColumnKind, ConstraintSystem, TableColumn
from .errors import ConfigurationError, VerificationError
from .layouter import Assignment, Layouter

_logger = logging.getLogger(__name__)


class Circuit(ABC):
    """A circuit: a static shape plus a way to witness it.

    configure() runs once on a fresh ConstraintSystem and returns the
    circuit's config (its column and selector handles); synthesize()
    writes the witness through a Layouter using that config.
    """

    @classmethod
    @abstractmethod
    def configure(cls, meta: ConstraintSystem) -> Any: ...

    @abstractmethod
    def synthesize(self, config: Any, layouter: Layouter) -> None: ...


class FailureKind(Enum):
    CONSTRAINT_NOT_SATISFIED = auto()
    LOOKUP = auto()
    PERMUTATION = auto()
    CONSTANT = auto()


@dataclass(frozen=True)
class VerifyFailure:
    """One violated constraint.

    Fields:
        kind    — which constraint kind failed
        name    — "gate: polynomial", lookup name, or "copy" / "constant"
        row     — absolute row of the violation
        region  — name of the region owning that row
    """
    kind: FailureKind
    name: str
    row: int
    region: str

    def __str__(self) -> str:
        return f"{self.kind.name} {self.name!r} at row {self.row} ({self.region})"


class MockProver:
    def __init__(self, meta: ConstraintSystem, assignment: Assignment):
        self.meta = meta
        self.assignment = assignment

    @classmethod
    def run(cls, circuit: Circuit, instance: list[list[int]]) -> MockProver:
        meta = ConstraintSystem()
        config = circuit.configure(meta)
        declared = meta.num_columns(ColumnKind.INSTANCE)
        if len(instance) != declared:
            raise ConfigurationError(
                f"circuit declares {declared} instance columns, "
                f"got {len(instance)}"
            )
        layouter = Layouter(meta, instance)
        circuit.synthesize(config, layouter)
        _logger.debug(
            "synthesized %s: %d rows in %d regions",
            type(circuit).__name__, layouter.assignment.num_rows,
            len(layouter.assignment.regions),
        )
        return cls(meta, layouter.assignment)

    # ── Evaluation ──

    def _resolver(self, row: int):
        a = self.assignment

        def resolve(q: Query) -> int:
            if isinstance(q, SelectorQuery):
                return 1 if row in a.enabled.get(q.selector, ()) else 0
            if isinstance(q, (AdviceQuery, FixedQuery, InstanceQuery)):
                return a.value(q.column, row + q.rotation)
            raise TypeError(f"Unknown query type: {type(q)}")

        return resolve

    def _enabled_rows(self, selectors) -> list[int]:
        rows: set[int] = set()
        for s in selectors:
            rows |= self.assignment.enabled.get(s, set())
        return sorted(rows)

    def _table_rows(self, columns: list[TableColumn], name: str) -> set[tuple[int, ...]]:
        tables = self.assignment.tables
        missing = [c.index for c in columns if c not in tables]
        if missing:
            raise ConfigurationError(f"lookup {name!r} reads unloaded table columns {missing}")
        lengths = {len(tables[c]) for c in columns}
        if len(lengths) != 1:
            raise ConfigurationError(f"lookup {name!r} reads table columns of unequal length")
        return set(zip(*(tables[c] for c in columns)))

    # ── Verification ──

    def verify(self) -> list[VerifyFailure]:
        a = self.assignment
        failures: list[VerifyFailure] = []

        for gate in self.meta.gates:
            for row in self._enabled_rows(gate.selectors):
                resolve = self._resolver(row)
                for poly_name, poly in gate.polys:
                    if evaluate(poly, resolve) != 0:
                        failures.append(VerifyFailure(
                            FailureKind.CONSTRAINT_NOT_SATISFIED,
                            f"{gate.name}: {poly_name}", row, a.region_at(row),
                        ))

        tables: dict[tuple[TableColumn, ...], set[tuple[int, ...]]] = {}
        for lookup in self.meta.lookups:
            enabled = self._enabled_rows(lookup.selectors)
            if not enabled:
                continue
            key = tuple(lookup.table)
            if key not in tables:
                tables[key] = self._table_rows(lookup.table, lookup.name)
            rows = tables[key]
            for row in enabled:
                resolve = self._resolver(row)
                values = tuple(evaluate(e, resolve) for e in lookup.inputs)
                if values not in rows:
                    failures.append(VerifyFailure(
                        FailureKind.LOOKUP, lookup.name, row, a.region_at(row),
                    ))

        for left, right in a.copies:
            if a.value(left.column, left.row) != a.value(right.column, right.row):
                failures.append(VerifyFailure(
                    FailureKind.PERMUTATION, "copy", right.row, a.region_at(right.row),
                ))

        for cell, constant in a.constants:
            if a.value(cell.column, cell.row) != constant:
                failures.append(VerifyFailure(
                    FailureKind.CONSTANT, "constant", cell.row, a.region_at(cell.row),
                ))

        if failures:
            _logger.warning("verification failed: %d violated constraints", len(failures))
        else:
            _logger.info(
                "verification passed: %d gates, %d lookups, %d copies over %d rows",
                len(self.meta.gates), len(self.meta.lookups), len(a.copies), a.num_rows,
            )
        return failures

    def assert_satisfied(self) -> None:
        failures = self.verify()
        if failures:
            shown = "\n  ".join(str(f) for f in failures[:10])
            more = f"\n  ... and {len(failures) - 10} more" if len(failures) > 10 else ""
            raise VerificationError(
                f"{len(failures)} constraints not satisfied:\n  {shown}{more}",
                failures=failures,
            )
