"""
Pi: a pure permutation of lane positions.

    out[x][y] = a[(x + 3y) % 5][x]

No arithmetic and no selector; the permutation is carried entirely by
copy constraints into a fresh row of the state columns.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region


def pi_source(x: int, y: int) -> int:
    """Flat index of the lane that Pi moves to (x, y)."""
    return 5 * ((x + 3 * y) % 5) + x


@dataclass
class PiConfig:
    state: list[Column]

    @classmethod
    def configure(cls, meta: ConstraintSystem, state: list[Column]) -> PiConfig:
        for column in state:
            meta.enable_equality(column)
        return cls(state)

    def assign_state(self, layouter: Layouter, state: list[AssignedCell]) -> list[AssignedCell]:
        def body(region: Region) -> list[AssignedCell]:
            return [
                region.copy_advice(
                    f"pi lane ({x}, {y})", state[pi_source(x, y)], self.state[5 * x + y], 0,
                )
                for x in range(5)
                for y in range(5)
            ]

        return layouter.assign_region("pi", body)
