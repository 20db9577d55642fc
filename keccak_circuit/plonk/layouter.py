"""
Witness sink: regions, cells and the recorded assignment.

At proving time a circuit writes its witness through a Layouter.  Each
call to assign_region opens a fresh Region, a block of consecutive rows
that the region addresses by offset from its first row:

    def body(region: Region) -> list[AssignedCell]:
        region.enable_selector(q, 0)
        a = region.copy_advice("lane in", lane, state[0], 0)
        return [region.assign_advice("lane out", state[0], 1, value)]

    out = layouter.assign_region("theta", body)

Regions are laid out one after another, so a gate enabled inside a
region only ever sees that region's rows as long as its rotations stay
within the rows the region assigned.

Everything written ends up in an Assignment: cell values, enabled
selectors, copy and constant constraints, and the lookup tables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from ..defs import FIELD_MODULUS
from .constraint_system import Column, ColumnKind, ConstraintSystem, Selector, TableColumn
from .errors import ConfigurationError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


# ═══════════════════════════════════════════════════════════════════
# Cells
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Cell:
    """An absolute position: column and row."""
    column: Column
    row: int


@dataclass(frozen=True)
class AssignedCell:
    """A cell together with the value written into it.

    The value is what the witness generator computes with; the cell is
    what copy constraints refer to.
    """
    cell: Cell
    value: int


@dataclass
class RegionInfo:
    name: str
    start: int
    end: int = 0


@dataclass
class Assignment:
    """Everything a synthesis pass writes."""
    instance: list[list[int]]
    values: dict[tuple[Column, int], int] = field(default_factory=dict)
    enabled: dict[Selector, set[int]] = field(default_factory=dict)
    tables: dict[TableColumn, list[int]] = field(default_factory=dict)
    copies: list[tuple[Cell, Cell]] = field(default_factory=list)
    constants: list[tuple[Cell, int]] = field(default_factory=list)
    regions: list[RegionInfo] = field(default_factory=list)

    @property
    def num_rows(self) -> int:
        return self.regions[-1].end if self.regions else 0

    def value(self, column: Column, row: int) -> int:
        """Value of a cell; unassigned cells read as zero."""
        if column.kind is ColumnKind.INSTANCE:
            values = self.instance[column.index] if column.index < len(self.instance) else []
            return values[row] if 0 <= row < len(values) else 0
        return self.values.get((column, row), 0)

    def region_at(self, row: int) -> str:
        for info in self.regions:
            if info.start <= row < info.end:
                return info.name
        return "<outside any region>"


# ═══════════════════════════════════════════════════════════════════
# Region
# ═══════════════════════════════════════════════════════════════════

class Region:
    """Relative-offset view of a block of rows."""

    def __init__(self, meta: ConstraintSystem, assignment: Assignment, info: RegionInfo):
        self._meta = meta
        self._assignment = assignment
        self._info = info
        self.height = 0

    def _row(self, offset: int) -> int:
        if offset < 0:
            raise ConfigurationError(f"negative offset {offset} in region {self._info.name!r}")
        self.height = max(self.height, offset + 1)
        return self._info.start + offset

    def _write(self, annotation: str, column: Column, offset: int, value: int) -> AssignedCell:
        row = self._row(offset)
        key = (column, row)
        if key in self._assignment.values:
            raise ConfigurationError(
                f"{annotation!r}: cell {column} row {row} in region "
                f"{self._info.name!r} assigned twice"
            )
        value %= FIELD_MODULUS
        self._assignment.values[key] = value
        return AssignedCell(Cell(column, row), value)

    def _require_equality(self, column: Column) -> None:
        if column not in self._meta.equality:
            raise ConfigurationError(f"equality is not enabled on {column}")

    # ── Assignment ──

    def assign_advice(self, annotation: str, column: Column, offset: int, value: int) -> AssignedCell:
        if column.kind is not ColumnKind.ADVICE:
            raise ConfigurationError(f"{annotation!r}: {column} is not an advice column")
        return self._write(annotation, column, offset, value)

    def assign_fixed(self, annotation: str, column: Column, offset: int, value: int) -> AssignedCell:
        if column.kind is not ColumnKind.FIXED:
            raise ConfigurationError(f"{annotation!r}: {column} is not a fixed column")
        return self._write(annotation, column, offset, value)

    def copy_advice(
        self, annotation: str, source: AssignedCell, column: Column, offset: int,
    ) -> AssignedCell:
        """Assign source's value and constrain the two cells equal."""
        cell = self.assign_advice(annotation, column, offset, source.value)
        self.constrain_equal(source.cell, cell.cell)
        return cell

    def assign_advice_from_constant(
        self, annotation: str, column: Column, offset: int, value: int,
    ) -> AssignedCell:
        cell = self.assign_advice(annotation, column, offset, value)
        self.constrain_constant(cell.cell, value)
        return cell

    def assign_advice_from_instance(
        self, annotation: str, instance: Column, row: int, column: Column, offset: int,
    ) -> AssignedCell:
        """Copy public input instance[row] into an advice cell."""
        if instance.kind is not ColumnKind.INSTANCE:
            raise ConfigurationError(f"{annotation!r}: {instance} is not an instance column")
        value = self._assignment.value(instance, row)
        cell = self.assign_advice(annotation, column, offset, value)
        self.constrain_equal(Cell(instance, row), cell.cell)
        return cell

    # ── Constraints ──

    def enable_selector(self, selector: Selector, offset: int) -> None:
        self._assignment.enabled.setdefault(selector, set()).add(self._row(offset))

    def constrain_equal(self, a: Cell, b: Cell) -> None:
        self._require_equality(a.column)
        self._require_equality(b.column)
        self._assignment.copies.append((a, b))

    def constrain_constant(self, cell: Cell, value: int) -> None:
        self._require_equality(cell.column)
        self._assignment.constants.append((cell, value % FIELD_MODULUS))


class Table:
    """Write access to lookup table columns."""

    def __init__(self, assignment: Assignment):
        self._assignment = assignment

    def assign_cell(self, annotation: str, column: TableColumn, offset: int, value: int) -> None:
        values = self._assignment.tables.setdefault(column, [])
        if offset != len(values):
            raise ConfigurationError(
                f"{annotation!r}: table column {column.index} filled out of order at {offset}"
            )
        values.append(value % FIELD_MODULUS)

    def assign_column(self, annotation: str, column: TableColumn, values: list[int]) -> None:
        for offset, value in enumerate(values):
            self.assign_cell(annotation, column, offset, value)


# ═══════════════════════════════════════════════════════════════════
# Layouter
# ═══════════════════════════════════════════════════════════════════

class Layouter:
    """Stacks regions one after another."""

    def __init__(self, meta: ConstraintSystem, instance: list[list[int]]):
        self._meta = meta
        self.assignment = Assignment([[v % FIELD_MODULUS for v in col] for col in instance])
        self._next_row = 0

    def assign_region(self, name: str, body: Callable[[Region], T]) -> T:
        info = RegionInfo(name, self._next_row)
        region = Region(self._meta, self.assignment, info)
        result = body(region)
        info.end = info.start + region.height
        self.assignment.regions.append(info)
        self._next_row = info.end
        return result

    def assign_table(self, name: str, body: Callable[[Table], None]) -> None:
        table = Table(self.assignment)
        body(table)
        _logger.debug("loaded table %r", name)
