"""
Xi: the χ step in base 9.

    out[x][y] = 2·a[x][y] + a[x+1][y] + 3·a[x+2][y]

For bits a, b, c the digit 2a + b + 3c is in [0, 6], and B9_BIT_TABLE
maps it to a ^ (~b & c).  The reduction itself happens later, when the
state is converted out of base 9.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ast import add, mul, scale, sub
from ..defs import A1, A2, A3
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector


@dataclass
class XiConfig:
    q_enable: Selector
    state: list[Column]

    @classmethod
    def configure(cls, meta: ConstraintSystem, state: list[Column]) -> XiConfig:
        for column in state:
            meta.enable_equality(column)
        q_enable = meta.selector()

        def gate(vc):
            q = vc.query_selector(q_enable)
            polys = []
            for x in range(5):
                for y in range(5):
                    a = vc.query_advice(state[5 * x + y])
                    b = vc.query_advice(state[5 * ((x + 1) % 5) + y])
                    c = vc.query_advice(state[5 * ((x + 2) % 5) + y])
                    next_lane = vc.query_advice(state[5 * x + y], 1)
                    expected = add(scale(A1, a), scale(A2, b), scale(A3, c))
                    polys.append((f"lane ({x}, {y})", mul(q, sub(next_lane, expected))))
            return polys

        meta.create_gate("xi", gate)
        return cls(q_enable, state)

    def assign_state(
        self, layouter: Layouter, state: list[AssignedCell], out_state: list[int],
    ) -> list[AssignedCell]:
        def body(region: Region) -> list[AssignedCell]:
            region.enable_selector(self.q_enable, 0)
            for idx, lane in enumerate(state):
                region.copy_advice(f"xi in {idx}", lane, self.state[idx], 0)
            return [
                region.assign_advice(f"xi out {idx}", self.state[idx], 1, value)
                for idx, value in enumerate(out_state)
            ]

        return layouter.assign_region("xi", body)
