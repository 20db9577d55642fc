"""
Lookup tables shared by every round and every lane.

    Base13toBase9TableConfig   (base13, base9, block_count)     13^4 rows
    SpecialChunkTableConfig    (last_chunk, output_coef)        91 rows
    FromBase9TableConfig       (base9, base13)                  9^4 rows

Rows are computed once per process and loaded read-only into every
circuit that configures the table.  Each table's first row is all
zeros, so a lookup whose selector is off always matches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from itertools import product

from ..arith_helpers import convert_b9_coef, convert_b13_coef, from_radix_le
from ..defs import B9, B13, BASE_NUM_OF_CHUNKS, LANE_SIZE, OVERFLOW_TRANSFORM
from ..plonk import ConstraintSystem, Layouter, Table, TableColumn

_logger = logging.getLogger(__name__)


def get_block_count(digits: list[int]) -> int:
    """Overflow indicator of a chunk: OVERFLOW_TRANSFORM[width].

    The width is the position of the highest non-zero digit plus one, so
    an honest chunk of step s never scores more than OVERFLOW_TRANSFORM[s].
    """
    width = max((i + 1 for i, d in enumerate(digits) if d), default=0)
    return OVERFLOW_TRANSFORM[width]


def _little_endian_chunks(base: int):
    # product() varies the last position fastest; reversing gives
    # ascending values, starting from the all-zero chunk.
    for digits in product(range(base), repeat=BASE_NUM_OF_CHUNKS):
        yield list(reversed(digits))


# ═══════════════════════════════════════════════════════════════════
# Row generators
# ═══════════════════════════════════════════════════════════════════

@lru_cache(maxsize=None)
def base13_to_base9_rows() -> tuple[tuple[int, int, int], ...]:
    return tuple(
        (
            from_radix_le(digits, B13),
            from_radix_le([convert_b13_coef(d) for d in digits], B9),
            get_block_count(digits),
        )
        for digits in _little_endian_chunks(B13)
    )


@lru_cache(maxsize=None)
def special_chunk_rows() -> tuple[tuple[int, int], ...]:
    """Remainder low + high·13^64 of a 65-digit Theta lane → merged output digit.

    Theta bounds low + high by 12, so only pairs below 13 are listed.
    """
    return tuple(
        (low + high * B13**LANE_SIZE, convert_b13_coef(low + high))
        for high in range(B13)
        for low in range(B13)
        if low + high < B13
    )


@lru_cache(maxsize=None)
def from_base9_rows() -> tuple[tuple[int, int], ...]:
    return tuple(
        (
            from_radix_le(digits, B9),
            from_radix_le([convert_b9_coef(d) for d in digits], B13),
        )
        for digits in _little_endian_chunks(B9)
    )


def _load(layouter: Layouter, name: str, columns: list[TableColumn], rows) -> None:
    def body(table: Table) -> None:
        for column, values in zip(columns, zip(*rows)):
            table.assign_column(name, column, list(values))

    layouter.assign_table(name, body)
    _logger.debug("table %r: %d rows", name, len(rows))


# ═══════════════════════════════════════════════════════════════════
# Table configs
# ═══════════════════════════════════════════════════════════════════

@dataclass
class Base13toBase9TableConfig:
    base13: TableColumn
    base9: TableColumn
    block_count: TableColumn

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> Base13toBase9TableConfig:
        return cls(meta.lookup_table_column(), meta.lookup_table_column(), meta.lookup_table_column())

    def load(self, layouter: Layouter) -> None:
        _load(layouter, "13 -> 9", [self.base13, self.base9, self.block_count],
              base13_to_base9_rows())


@dataclass
class SpecialChunkTableConfig:
    last_chunk: TableColumn
    output_coef: TableColumn

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> SpecialChunkTableConfig:
        return cls(meta.lookup_table_column(), meta.lookup_table_column())

    def load(self, layouter: Layouter) -> None:
        _load(layouter, "special chunk", [self.last_chunk, self.output_coef],
              special_chunk_rows())


@dataclass
class FromBase9TableConfig:
    base9: TableColumn
    base13: TableColumn

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> FromBase9TableConfig:
        return cls(meta.lookup_table_column(), meta.lookup_table_column())

    def load(self, layouter: Layouter) -> None:
        _load(layouter, "9 -> 13", [self.base9, self.base13], from_base9_rows())
