"""
Absorb: XOR the next input block into the rate lanes, in base 9.

    row 0   state (Xi output)
    row 1   next input (base 9) in the rate lanes, flag
    row 2   absorbed state

    q_mixing · flag · (out - in - 2·next)      for each of the 17 rate lanes

The next input arrives as 17 64-bit words in sponge order (word i goes
to lane (i % 5, i // 5)) and is re-encoded in base 9 while witnessing.
The state is laid out flat at 5·x + y, so the rate lanes are the
ABSORB_LANES positions rather than the first 17 flat indices.  Capacity
lanes pass through.  With flag = 0 the gate is inert and the absorbed
state is unconstrained; Mixing then discards it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..arith_helpers import convert_b2_to_b9
from ..ast import mul, scale, sub
from ..defs import A4, ABSORB_LANES, NEXT_INPUTS_LANES
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector


@dataclass
class AbsorbConfig:
    q_mixing: Selector
    state: list[Column]
    flag: Column

    @classmethod
    def configure(cls, meta: ConstraintSystem, state: list[Column]) -> AbsorbConfig:
        q_mixing = meta.selector()
        flag = meta.advice_column()
        meta.enable_equality(flag)
        for column in state:
            meta.enable_equality(column)

        def gate(vc):
            q = vc.query_selector(q_mixing)
            f = vc.query_advice(flag)
            polys = []
            for i, idx in enumerate(ABSORB_LANES):
                prev = vc.query_advice(state[idx], -1)
                cur = vc.query_advice(state[idx])
                nxt = vc.query_advice(state[idx], 1)
                polys.append((f"rate lane {i}", mul(q, f, sub(nxt, prev, scale(A4, cur)))))
            return polys

        meta.create_gate("absorb", gate)
        return cls(q_mixing, state, flag)

    def assign_state(
        self,
        layouter: Layouter,
        state: list[AssignedCell],
        next_input: list[int],
        flag: AssignedCell,
    ) -> list[AssignedCell]:
        if len(next_input) != NEXT_INPUTS_LANES:
            raise ValueError(
                f"next input has {NEXT_INPUTS_LANES} words, got {len(next_input)}"
            )
        next_b9 = [convert_b2_to_b9(word) for word in next_input]

        def body(region: Region) -> list[AssignedCell]:
            region.enable_selector(self.q_mixing, 1)
            region.copy_advice("flag", flag, self.flag, 1)
            out = list(state)
            for i, idx in enumerate(ABSORB_LANES):
                lane = region.copy_advice(f"absorb in {idx}", state[idx], self.state[idx], 0)
                region.assign_advice(f"next input {i}", self.state[idx], 1, next_b9[i])
                out[idx] = region.assign_advice(
                    f"absorb out {idx}", self.state[idx], 2, lane.value + A4 * next_b9[i],
                )
            return out

        return layouter.assign_region("absorb", body)
