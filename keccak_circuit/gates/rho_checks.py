"""
Constraints of the Rho conversion gadget.

LaneRotateConversionConfig — one lane, one region
─────────────────────────────────────────────────
Rows 0 .. n-1 hold the normal chunks, row n the special chunk and row
n+1 the converted lane:

    input_coef  input_pob  input_acc  output_coef  output_pob  output_acc  overflow
    c_0         13^i_0     lane       o_0          9^j_0       0           bc_0
    ...
    c_{n-1}     ...        ...        o_{n-1}      ...         ...         bc_{n-1}
                           low+high·13^64  o_s     9^r         ...
                                                               result

  running down   q_normal · (input_acc' - input_acc + input_coef · input_pob)
  running up     (q_normal + q_special) · (output_acc' - output_acc - output_coef · output_pob)
  step 1         q_step1 · overflow
  lookups        q_normal:  (input_coef, output_coef, overflow) ∈ 13 -> 9
                 q_special: (input_acc, output_coef) ∈ special chunk

The first input_acc is a copy of the lane; the first output_acc is the
constant 0.  Because the special chunk table only holds remainders
low + high·13^64 with low + high < 13, the running-down sum is forced to
consume exactly the digits 1 .. 63.


SumConfig — running sum of block counts
───────────────────────────────────────
    x      sum
    x_0    0          (constant)
    x_1    x_0
    ...
           Σ x_i      (result)

    q · (sum' - sum - x)


BlockCountFinalConfig — the range check
───────────────────────────────────────
    q · Π_{k=0}^{12}  (step2_acc - k)
    q · Π_{k=0}^{169} (step3_acc - k)

Each product vanishes exactly when its accumulator is in range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..ast import add, mul, product, sub
from ..defs import STEP2_RANGE, STEP3_RANGE
from ..plonk import (
    AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector,
)
from .rho_helpers import RhoLane
from .tables import Base13toBase9TableConfig, SpecialChunkTableConfig

_logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Per-lane rotation and conversion
# ═══════════════════════════════════════════════════════════════════

@dataclass
class LaneRotateConversionConfig:
    q_normal: Selector
    q_special: Selector
    q_step1: Selector
    input_coef: Column
    input_pob: Column
    input_acc: Column
    output_coef: Column
    output_pob: Column
    output_acc: Column
    overflow_detector: Column

    @classmethod
    def configure(
        cls,
        meta: ConstraintSystem,
        base13_to_9: Base13toBase9TableConfig,
        special_chunk: SpecialChunkTableConfig,
    ) -> LaneRotateConversionConfig:
        q_normal = meta.complex_selector()
        q_special = meta.complex_selector()
        q_step1 = meta.selector()
        input_coef = meta.advice_column()
        input_pob = meta.fixed_column()
        input_acc = meta.advice_column()
        output_coef = meta.advice_column()
        output_pob = meta.fixed_column()
        output_acc = meta.advice_column()
        overflow_detector = meta.advice_column()
        for column in (input_acc, output_acc, overflow_detector):
            meta.enable_equality(column)

        meta.create_gate("rho running down input", lambda vc: [
            ("input accumulator", mul(
                vc.query_selector(q_normal),
                add(
                    sub(vc.query_advice(input_acc, 1), vc.query_advice(input_acc)),
                    mul(vc.query_advice(input_coef), vc.query_fixed(input_pob)),
                ),
            )),
        ])

        def running_up(vc):
            delta = sub(
                vc.query_advice(output_acc, 1),
                vc.query_advice(output_acc),
                mul(vc.query_advice(output_coef), vc.query_fixed(output_pob)),
            )
            return [
                ("normal chunk", mul(vc.query_selector(q_normal), delta)),
                ("special chunk", mul(vc.query_selector(q_special), delta)),
            ]

        meta.create_gate("rho running up output", running_up)

        meta.create_gate("rho block count step 1", lambda vc: [
            ("step 1 chunk has no overflow",
             mul(vc.query_selector(q_step1), vc.query_advice(overflow_detector))),
        ])

        def chunk_lookup(vc):
            q = vc.query_selector(q_normal)
            return [
                (mul(q, vc.query_advice(input_coef)), base13_to_9.base13),
                (mul(q, vc.query_advice(output_coef)), base13_to_9.base9),
                (mul(q, vc.query_advice(overflow_detector)), base13_to_9.block_count),
            ]

        meta.lookup("rho 13 -> 9", chunk_lookup)

        def special_lookup(vc):
            q = vc.query_selector(q_special)
            return [
                (mul(q, vc.query_advice(input_acc)), special_chunk.last_chunk),
                (mul(q, vc.query_advice(output_coef)), special_chunk.output_coef),
            ]

        meta.lookup("rho special chunk", special_lookup)

        return cls(
            q_normal, q_special, q_step1,
            input_coef, input_pob, input_acc,
            output_coef, output_pob, output_acc,
            overflow_detector,
        )

    def assign_region(
        self, layouter: Layouter, lane: AssignedCell, rotation: int,
    ) -> tuple[AssignedCell, list[AssignedCell], list[AssignedCell]]:
        """Witness one lane.

        Returns the converted lane and the overflow detector cells of the
        lane's step-2 and step-3 chunks.
        """
        conversions, special = RhoLane(lane.value, rotation).get_full_witness()

        def body(region: Region):
            step2_od, step3_od = [], []
            for offset, conv in enumerate(conversions):
                region.enable_selector(self.q_normal, offset)
                if conv.step == 1:
                    region.enable_selector(self.q_step1, offset)
                region.assign_advice("input coef", self.input_coef, offset, conv.input_coef)
                region.assign_fixed("input pob", self.input_pob, offset, conv.input_power_of_base)
                acc = region.assign_advice("input acc", self.input_acc, offset, conv.input_acc)
                if offset == 0:
                    region.constrain_equal(lane.cell, acc.cell)
                region.assign_advice("output coef", self.output_coef, offset, conv.output_coef)
                region.assign_fixed("output pob", self.output_pob, offset, conv.output_power_of_base)
                out_acc = region.assign_advice("output acc", self.output_acc, offset, conv.output_acc)
                if offset == 0:
                    region.constrain_constant(out_acc.cell, 0)
                od = region.assign_advice("overflow", self.overflow_detector, offset, conv.block_count)
                if conv.step == 2:
                    step2_od.append(od)
                elif conv.step == 3:
                    step3_od.append(od)

            offset = len(conversions)
            region.enable_selector(self.q_special, offset)
            region.assign_advice("special input acc", self.input_acc, offset, special.input_acc)
            region.assign_advice("special output coef", self.output_coef, offset, special.output_coef)
            region.assign_fixed("special output pob", self.output_pob, offset, special.output_power_of_base)
            region.assign_advice("special output acc", self.output_acc, offset, special.output_acc)
            result = region.assign_advice("rho out", self.output_acc, offset + 1, special.output_acc_post)
            return result, step2_od, step3_od

        return layouter.assign_region(f"rho lane rotation {rotation}", body)


# ═══════════════════════════════════════════════════════════════════
# Block count accounting
# ═══════════════════════════════════════════════════════════════════

@dataclass
class SumConfig:
    q_enable: Selector
    x: Column
    sum: Column

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> SumConfig:
        q_enable = meta.selector()
        x = meta.advice_column()
        total = meta.advice_column()
        meta.enable_equality(x)
        meta.enable_equality(total)

        meta.create_gate("running sum", lambda vc: [
            ("sum' = sum + x", mul(
                vc.query_selector(q_enable),
                sub(vc.query_advice(total, 1), vc.query_advice(total), vc.query_advice(x)),
            )),
        ])
        return cls(q_enable, x, total)

    def assign_region(self, layouter: Layouter, xs: list[AssignedCell]) -> AssignedCell:
        def body(region: Region) -> AssignedCell:
            acc = 0
            for offset, x in enumerate(xs):
                region.enable_selector(self.q_enable, offset)
                region.copy_advice("x", x, self.x, offset)
                cell = region.assign_advice("sum", self.sum, offset, acc)
                if offset == 0:
                    region.constrain_constant(cell.cell, 0)
                acc += x.value
            last = region.assign_advice("sum", self.sum, len(xs), acc)
            if not xs:
                region.constrain_constant(last.cell, 0)
            return last

        return layouter.assign_region("running sum", body)


@dataclass
class BlockCountFinalConfig:
    q_enable: Selector
    step2_acc: Column
    step3_acc: Column

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> BlockCountFinalConfig:
        q_enable = meta.selector()
        step2_acc = meta.advice_column()
        step3_acc = meta.advice_column()
        meta.enable_equality(step2_acc)
        meta.enable_equality(step3_acc)

        def gate(vc):
            q = vc.query_selector(q_enable)
            step2 = vc.query_advice(step2_acc)
            step3 = vc.query_advice(step3_acc)
            return [
                ("step 2 block count in range",
                 mul(q, product(sub(step2, k) for k in range(STEP2_RANGE + 1)))),
                ("step 3 block count in range",
                 mul(q, product(sub(step3, k) for k in range(STEP3_RANGE + 1)))),
            ]

        meta.create_gate("rho block count final", gate)
        return cls(q_enable, step2_acc, step3_acc)

    def assign_region(self, layouter: Layouter, step2: AssignedCell, step3: AssignedCell) -> None:
        def body(region: Region) -> None:
            region.enable_selector(self.q_enable, 0)
            region.copy_advice("step 2 total", step2, self.step2_acc, 0)
            region.copy_advice("step 3 total", step3, self.step3_acc, 0)

        layouter.assign_region("rho block count final", body)
        _logger.debug("block count totals: step 2 = %d, step 3 = %d", step2.value, step3.value)
