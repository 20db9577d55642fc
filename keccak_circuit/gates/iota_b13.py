"""
Iota in base 13, the last step of the absorb branch of Mixing.

After the base-9 → base-13 conversion every digit is a bit, so adding
RC_bit keeps digits at most 2 and parity gives the XOR.

    q_mixing · flag · (lane0' - lane0 - rc)
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ast import mul, sub
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector


@dataclass
class IotaB13Config:
    q_mixing: Selector
    state: list[Column]
    round_ctant_b13: Column
    round_constants_b13: Column
    flag: Column

    @classmethod
    def configure(
        cls,
        meta: ConstraintSystem,
        state: list[Column],
        round_ctant_b13: Column,
        round_constants_b13: Column,
    ) -> IotaB13Config:
        q_mixing = meta.selector()
        flag = meta.advice_column()
        for column in (state[0], round_ctant_b13, round_constants_b13, flag):
            meta.enable_equality(column)

        meta.create_gate("iota b13", lambda vc: [
            ("mixing", mul(
                vc.query_selector(q_mixing),
                vc.query_advice(flag),
                sub(
                    vc.query_advice(state[0], 1),
                    vc.query_advice(state[0]),
                    vc.query_advice(round_ctant_b13),
                ),
            )),
        ])
        return cls(q_mixing, state, round_ctant_b13, round_constants_b13, flag)

    def assign_round_ctant_b13(
        self,
        layouter: Layouter,
        state: list[AssignedCell],
        round: int,
        flag: AssignedCell,
    ) -> list[AssignedCell]:
        def body(region: Region) -> AssignedCell:
            region.enable_selector(self.q_mixing, 0)
            region.copy_advice("flag", flag, self.flag, 0)
            lane = region.copy_advice("lane 0", state[0], self.state[0], 0)
            rc = region.assign_advice_from_instance(
                "round constant b13", self.round_constants_b13, round, self.round_ctant_b13, 0,
            )
            return region.assign_advice("lane 0 out", self.state[0], 1, lane.value + rc.value)

        lane0 = layouter.assign_region("iota b13", body)
        return [lane0] + list(state[1:])
