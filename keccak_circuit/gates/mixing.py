"""
Mixing: the last-round tail, either finalize or absorb the next block.

Both branches are always witnessed so the circuit shape never depends
on the flag:

    non-mixing   IotaB9 (gated by ¬flag)                       → base 9
    mixing       Absorb → base 9 → 13 conversion → IotaB13     → base 13
                 (all gated by flag)

and the result is selected lane by lane:

    row 0   flag      non_mixing[0..25]   out[0..25]
    row 1   ¬flag     mixing[0..25]

    q_out_copy · (out - non_mixing·¬flag - mixing·flag)

The flag and its negation are witnessed in their own region and tied
by three separate identities, so neither can be anything but a bit and
exactly one of them is 1:

    q_flag · (flag + ¬flag - 1)
    q_flag · (1 - flag) · flag
    q_flag · (1 - ¬flag) · ¬flag
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..ast import add, mul, sub
from ..defs import FIELD_MODULUS, NEXT_INPUTS_LANES, PERMUTATION
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector
from .absorb import AbsorbConfig
from .base_conversion import StateBaseConversion
from .iota_b9 import IotaB9Config
from .iota_b13 import IotaB13Config

_logger = logging.getLogger(__name__)


@dataclass
class MixingConfig:
    iota_b9: IotaB9Config
    absorb: AbsorbConfig
    base_conversion: StateBaseConversion
    iota_b13: IotaB13Config
    state: list[Column]
    flag: Column
    out_mixing: list[Column]
    q_flag: Selector
    q_out_copy: Selector

    @classmethod
    def configure(
        cls,
        meta: ConstraintSystem,
        state: list[Column],
        iota_b9: IotaB9Config,
        base_conversion: StateBaseConversion,
        round_ctant_b13: Column,
        round_constants_b13: Column,
    ) -> MixingConfig:
        q_flag = meta.selector()
        q_out_copy = meta.selector()
        flag = meta.advice_column()
        meta.enable_equality(flag)

        def flag_consistency(vc):
            q = vc.query_selector(q_flag)
            f = vc.query_advice(flag)
            negated = vc.query_advice(flag, 1)
            return [
                ("flag + negated flag = 1", mul(q, sub(add(f, negated), 1))),
                ("flag is boolean", mul(q, sub(1, f), f)),
                ("negated flag is boolean", mul(q, sub(1, negated), negated)),
            ]

        meta.create_gate("mixing flag consistency", flag_consistency)

        absorb = AbsorbConfig.configure(meta, state)
        iota_b13 = IotaB13Config.configure(meta, state, round_ctant_b13, round_constants_b13)

        out_mixing = [meta.advice_column() for _ in range(25)]
        for column in out_mixing:
            meta.enable_equality(column)

        def selection(vc):
            q = vc.query_selector(q_out_copy)
            f = vc.query_advice(flag)
            negated = vc.query_advice(flag, 1)
            polys = []
            for idx in range(25):
                out = vc.query_advice(state[idx])
                non_mixing = vc.query_advice(out_mixing[idx])
                mixing = vc.query_advice(out_mixing[idx], 1)
                polys.append((f"lane {idx}", mul(
                    q, sub(out, mul(non_mixing, negated), mul(mixing, f)),
                )))
            return polys

        meta.create_gate("mixing result selection", selection)

        return cls(
            iota_b9, absorb, base_conversion, iota_b13,
            state, flag, out_mixing, q_flag, q_out_copy,
        )

    def enforce_flag_consistency(
        self, layouter: Layouter, flag: int, negated_flag: int,
    ) -> tuple[AssignedCell, AssignedCell]:
        """Witness the flag pair.  Takes raw values so any pair can be tried."""
        def body(region: Region) -> tuple[AssignedCell, AssignedCell]:
            region.enable_selector(self.q_flag, 0)
            return (
                region.assign_advice("flag", self.flag, 0, flag),
                region.assign_advice("negated flag", self.flag, 1, negated_flag),
            )

        return layouter.assign_region("mixing flag", body)

    def assign_out_mixing_states(
        self,
        layouter: Layouter,
        flag: AssignedCell,
        negated_flag: AssignedCell,
        non_mixing: list[AssignedCell],
        mixing: list[AssignedCell],
    ) -> list[AssignedCell]:
        def body(region: Region) -> list[AssignedCell]:
            region.enable_selector(self.q_out_copy, 0)
            region.copy_advice("flag", flag, self.flag, 0)
            region.copy_advice("negated flag", negated_flag, self.flag, 1)
            out = []
            for idx in range(25):
                region.copy_advice("non mixing", non_mixing[idx], self.out_mixing[idx], 0)
                region.copy_advice("mixing", mixing[idx], self.out_mixing[idx], 1)
                value = (
                    non_mixing[idx].value * negated_flag.value
                    + mixing[idx].value * flag.value
                ) % FIELD_MODULUS
                out.append(region.assign_advice(f"out lane {idx}", self.state[idx], 0, value))
            return out

        return layouter.assign_region("mixing result", body)

    def assign_state(
        self,
        layouter: Layouter,
        state: list[AssignedCell],
        flag: bool,
        next_input: list[int] | None,
    ) -> list[AssignedCell]:
        """Run both branches on the Xi output of the last round and select one."""
        last = PERMUTATION - 1
        flag_cell, negated_cell = self.enforce_flag_consistency(layouter, int(flag), int(not flag))
        if next_input is None:
            next_input = [0] * NEXT_INPUTS_LANES

        non_mixing = self.iota_b9.last_round(layouter, state, last, negated_cell)
        absorbed = self.absorb.assign_state(layouter, state, next_input, flag_cell)
        converted = self.base_conversion.assign_region(layouter, absorbed, flag_cell)
        mixing = self.iota_b13.assign_round_ctant_b13(layouter, converted, last, flag_cell)
        _logger.debug("mixing branch selected: %s", bool(flag))
        return self.assign_out_mixing_states(layouter, flag_cell, negated_cell, non_mixing, mixing)
