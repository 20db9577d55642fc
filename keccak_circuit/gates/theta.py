"""
Theta: XOR every lane with the parities of its two neighbouring columns.

Bitwise, Theta is

    a[x][y] ^= C[x-1] ^ rol(C[x+1], 1),     C[x] = ⊕_y a[x][y]

In base 13 XOR becomes plain addition and the 1-bit rotation becomes a
multiplication by 13, so one linear identity per lane suffices:

    out[x][y] = a[x][y] + C[x-1] + 13·C[x+1],     C[x] = Σ_y a[x][y]

No digit can reach 13, but multiplying by 13 pushes the top digit of
C[x+1] into a 65th position.  That digit belongs to bit 0; Rho merges
it back through the special-chunk table.

Layout: input lanes on row 0, output lanes on row 1 of the state columns.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ast import add, mul, scale, sub
from ..defs import B13
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector


@dataclass
class ThetaConfig:
    q_enable: Selector
    state: list[Column]

    @classmethod
    def configure(cls, meta: ConstraintSystem, state: list[Column]) -> ThetaConfig:
        for column in state:
            meta.enable_equality(column)
        q_enable = meta.selector()

        def gate(vc):
            q = vc.query_selector(q_enable)
            column_sum = [
                add(*(vc.query_advice(state[5 * x + y]) for y in range(5)))
                for x in range(5)
            ]
            polys = []
            for x in range(5):
                for y in range(5):
                    lane = vc.query_advice(state[5 * x + y])
                    next_lane = vc.query_advice(state[5 * x + y], 1)
                    expected = add(lane, column_sum[(x + 4) % 5], scale(B13, column_sum[(x + 1) % 5]))
                    polys.append((f"lane ({x}, {y})", mul(q, sub(next_lane, expected))))
            return polys

        meta.create_gate("theta", gate)
        return cls(q_enable, state)

    def assign_state(
        self, layouter: Layouter, state: list[AssignedCell], out_state: list[int],
    ) -> list[AssignedCell]:
        def body(region: Region) -> list[AssignedCell]:
            region.enable_selector(self.q_enable, 0)
            for idx, lane in enumerate(state):
                region.copy_advice(f"theta in {idx}", lane, self.state[idx], 0)
            return [
                region.assign_advice(f"theta out {idx}", self.state[idx], 1, value)
                for idx, value in enumerate(out_state)
            ]

        return layouter.assign_region("theta", body)
