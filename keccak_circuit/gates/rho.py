"""
Rho: rotate every lane and convert it from base 13 to base 9.

Runs LaneRotateConversionConfig on all 25 lanes, then accounts for
overflow in two passes:

  1. per lane, SumConfig adds up the block counts of the lane's step-2
     chunks and, separately, of its step-3 chunks;
  2. SumConfig adds the 25 per-lane totals of each class, and
     BlockCountFinalConfig range-checks the two grand totals.

An honest state has 12 step-2 and 13 step-3 chunks, each scoring at
most 1 and 13 respectively, so the totals stay within 12 and 169.  A
chunk that hides a digit beyond its step scores 13 or 170 on its own
and pushes its class past the bound.  Step-1 chunks are pinned to zero
directly, row by row.

The final check needs every lane's totals, so it is the one point where
the lanes join.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..defs import ROTATION_CONSTANTS, lane_position
from ..plonk import AssignedCell, ConstraintSystem, Layouter
from .rho_checks import BlockCountFinalConfig, LaneRotateConversionConfig, SumConfig
from .tables import Base13toBase9TableConfig, SpecialChunkTableConfig


@dataclass
class RhoConfig:
    lane_config: LaneRotateConversionConfig
    sum_config: SumConfig
    final_block_count: BlockCountFinalConfig

    @classmethod
    def configure(
        cls,
        meta: ConstraintSystem,
        base13_to_9: Base13toBase9TableConfig,
        special_chunk: SpecialChunkTableConfig,
    ) -> RhoConfig:
        return cls(
            LaneRotateConversionConfig.configure(meta, base13_to_9, special_chunk),
            SumConfig.configure(meta),
            BlockCountFinalConfig.configure(meta),
        )

    def assign_rotation_checks(
        self, layouter: Layouter, state: list[AssignedCell],
    ) -> list[AssignedCell]:
        next_state = []
        step2_totals = []
        step3_totals = []
        for idx, lane in enumerate(state):
            x, y = lane_position(idx)
            out, step2_od, step3_od = self.lane_config.assign_region(
                layouter, lane, ROTATION_CONSTANTS[x][y],
            )
            step2_totals.append(self.sum_config.assign_region(layouter, step2_od))
            step3_totals.append(self.sum_config.assign_region(layouter, step3_od))
            next_state.append(out)

        step2 = self.sum_config.assign_region(layouter, step2_totals)
        step3 = self.sum_config.assign_region(layouter, step3_totals)
        self.final_block_count.assign_region(layouter, step2, step3)
        return next_state
