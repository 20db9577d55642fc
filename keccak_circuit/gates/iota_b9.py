"""
Iota in base 9: add the round constant to lane (0, 0).

On the Xi output a digit is 2a + b + 3c; adding 2·RC_bit keeps it below
9 and B9_BIT_TABLE turns the sum into a ^ (~b & c) ^ RC_bit.

    not last round   q_not_last · (lane0' - lane0 - 2·rc)
    last round       q_last · ¬flag · (lane0' - lane0 - 2·rc)

On the last round this is the finalize branch of Mixing, active only
when the negated mixing flag is 1.  The round constant is copied from
the base-9 instance column at the row of the round number.  Lanes other
than (0, 0) pass through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ast import mul, scale, sub
from ..defs import A4
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector


@dataclass
class IotaB9Config:
    q_not_last: Selector
    q_last: Selector
    state: list[Column]
    round_ctant_b9: Column
    round_constants_b9: Column
    negated_flag: Column

    @classmethod
    def configure(
        cls,
        meta: ConstraintSystem,
        state: list[Column],
        round_ctant_b9: Column,
        round_constants_b9: Column,
    ) -> IotaB9Config:
        q_not_last = meta.selector()
        q_last = meta.selector()
        negated_flag = meta.advice_column()
        for column in (state[0], round_ctant_b9, round_constants_b9, negated_flag):
            meta.enable_equality(column)

        def gate(vc):
            lane = vc.query_advice(state[0])
            next_lane = vc.query_advice(state[0], 1)
            rc = vc.query_advice(round_ctant_b9)
            poly = sub(next_lane, lane, scale(A4, rc))
            return [
                ("not last round", mul(vc.query_selector(q_not_last), poly)),
                ("last round", mul(
                    vc.query_selector(q_last), vc.query_advice(negated_flag), poly,
                )),
            ]

        meta.create_gate("iota b9", gate)
        return cls(q_not_last, q_last, state, round_ctant_b9, round_constants_b9, negated_flag)

    def _assign(
        self,
        layouter: Layouter,
        state: list[AssignedCell],
        round: int,
        negated_flag: AssignedCell | None,
    ) -> list[AssignedCell]:
        def body(region: Region) -> AssignedCell:
            if negated_flag is None:
                region.enable_selector(self.q_not_last, 0)
            else:
                region.enable_selector(self.q_last, 0)
                region.copy_advice("negated flag", negated_flag, self.negated_flag, 0)
            lane = region.copy_advice("lane 0", state[0], self.state[0], 0)
            rc = region.assign_advice_from_instance(
                "round constant b9", self.round_constants_b9, round, self.round_ctant_b9, 0,
            )
            return region.assign_advice("lane 0 out", self.state[0], 1, lane.value + A4 * rc.value)

        name = "iota b9" if negated_flag is None else "iota b9 last round"
        lane0 = layouter.assign_region(name, body)
        return [lane0] + list(state[1:])

    def not_last_round(
        self, layouter: Layouter, state: list[AssignedCell], round: int,
    ) -> list[AssignedCell]:
        return self._assign(layouter, state, round, None)

    def last_round(
        self,
        layouter: Layouter,
        state: list[AssignedCell],
        round: int,
        negated_flag: AssignedCell,
    ) -> list[AssignedCell]:
        return self._assign(layouter, state, round, negated_flag)
