"""
Base conversion of a whole state from base 9 back to base 13.

Every round ends in base 9 (Xi, Iota) while the next Theta needs base
13, so each lane is re-encoded through the χ table.  A lane is split
into 16 chunks of 4 base-9 digits, most significant first:

    input_coef  input_acc              output_coef  output_acc              flag
    c_15        c_15                   o_15         o_15                    f
    c_14        acc·9^4 + c_14         o_14         acc·13^4 + o_14         f
    ...
    c_0         lane                   o_0          result                  f

  first row     q_first · f · (input_acc - input_coef)       (same for output)
  running sum   q_running · f · (input_acc' - input_acc·9^4 - input_coef')
                q_running · f · (output_acc' - output_acc·13^4 - output_coef')
  lookup        q_lookup: (f·input_coef, f·output_coef) ∈ 9 -> 13

The last input accumulator is a copy of the lane, and every input chunk
is a table row, so the chunks are the lane's unique base-9 digits.  The
activation flag f is the Mixing flag on the last round and a constant 1
on every other round.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..arith_helpers import convert_b9_coef, from_radix_le, to_radix_le
from ..ast import mul, scale, sub
from ..defs import B9, B13, BASE_NUM_OF_CHUNKS, LANE_SIZE
from ..plonk import AssignedCell, Column, ConstraintSystem, Layouter, Region, Selector
from .tables import FromBase9TableConfig

NUM_CHUNKS = LANE_SIZE // BASE_NUM_OF_CHUNKS


def base9_chunks(lane: int) -> list[int]:
    """The lane's 4-digit base-9 chunks, most significant first.

    Digits beyond the 64th are dropped, so an out-of-range lane yields
    chunks that do not add back up to it.
    """
    digits = to_radix_le(lane, B9)[:LANE_SIZE]
    digits += [0] * (LANE_SIZE - len(digits))
    chunks = [
        digits[k * BASE_NUM_OF_CHUNKS:(k + 1) * BASE_NUM_OF_CHUNKS]
        for k in range(NUM_CHUNKS)
    ]
    return [from_radix_le(chunk, B9) for chunk in reversed(chunks)]


def convert_chunk(chunk: int) -> int:
    digits = to_radix_le(chunk, B9, BASE_NUM_OF_CHUNKS)
    return from_radix_le([convert_b9_coef(d) for d in digits], B13)


@dataclass
class BaseConversionConfig:
    q_first: Selector
    q_running: Selector
    q_lookup: Selector
    input_coef: Column
    input_acc: Column
    output_coef: Column
    output_acc: Column
    flag: Column

    @classmethod
    def configure(cls, meta: ConstraintSystem, table: FromBase9TableConfig) -> BaseConversionConfig:
        q_first = meta.selector()
        q_running = meta.selector()
        q_lookup = meta.complex_selector()
        input_coef = meta.advice_column()
        input_acc = meta.advice_column()
        output_coef = meta.advice_column()
        output_acc = meta.advice_column()
        flag = meta.advice_column()
        for column in (input_acc, output_acc, flag):
            meta.enable_equality(column)

        def first_row(vc):
            q = vc.query_selector(q_first)
            f = vc.query_advice(flag)
            return [
                ("input", mul(q, f, sub(vc.query_advice(input_acc), vc.query_advice(input_coef)))),
                ("output", mul(q, f, sub(vc.query_advice(output_acc), vc.query_advice(output_coef)))),
            ]

        def running_sum(vc):
            q = vc.query_selector(q_running)
            f = vc.query_advice(flag)
            return [
                ("input", mul(q, f, sub(
                    vc.query_advice(input_acc, 1),
                    scale(B9**BASE_NUM_OF_CHUNKS, vc.query_advice(input_acc)),
                    vc.query_advice(input_coef, 1),
                ))),
                ("output", mul(q, f, sub(
                    vc.query_advice(output_acc, 1),
                    scale(B13**BASE_NUM_OF_CHUNKS, vc.query_advice(output_acc)),
                    vc.query_advice(output_coef, 1),
                ))),
            ]

        meta.create_gate("base conversion first row", first_row)
        meta.create_gate("base conversion running sum", running_sum)

        def lookup(vc):
            q = vc.query_selector(q_lookup)
            f = vc.query_advice(flag)
            return [
                (mul(q, f, vc.query_advice(input_coef)), table.base9),
                (mul(q, f, vc.query_advice(output_coef)), table.base13),
            ]

        meta.lookup("base conversion 9 -> 13", lookup)
        return cls(q_first, q_running, q_lookup, input_coef, input_acc, output_coef, output_acc, flag)

    def assign_region(self, layouter: Layouter, lane: AssignedCell, flag: AssignedCell) -> AssignedCell:
        input_coefs = base9_chunks(lane.value)
        output_coefs = [convert_chunk(c) for c in input_coefs]

        def body(region: Region) -> AssignedCell:
            input_acc = output_acc = 0
            for offset, (input_coef, output_coef) in enumerate(zip(input_coefs, output_coefs)):
                region.enable_selector(self.q_lookup, offset)
                if offset == 0:
                    region.enable_selector(self.q_first, offset)
                if offset < NUM_CHUNKS - 1:
                    region.enable_selector(self.q_running, offset)
                region.copy_advice("flag", flag, self.flag, offset)

                input_acc = input_acc * B9**BASE_NUM_OF_CHUNKS + input_coef
                output_acc = output_acc * B13**BASE_NUM_OF_CHUNKS + output_coef
                region.assign_advice("input coef", self.input_coef, offset, input_coef)
                in_cell = region.assign_advice("input acc", self.input_acc, offset, input_acc)
                region.assign_advice("output coef", self.output_coef, offset, output_coef)
                out_cell = region.assign_advice("output acc", self.output_acc, offset, output_acc)
            region.constrain_equal(lane.cell, in_cell.cell)
            return out_cell

        return layouter.assign_region("base conversion", body)


@dataclass
class StateBaseConversion:
    lane_config: BaseConversionConfig

    @classmethod
    def configure(cls, meta: ConstraintSystem, table: FromBase9TableConfig) -> StateBaseConversion:
        return cls(BaseConversionConfig.configure(meta, table))

    def assign_activation_flag(self, layouter: Layouter) -> AssignedCell:
        """A constant 1 flag, for rounds where the conversion always runs."""
        return layouter.assign_region(
            "base conversion activation",
            lambda region: region.assign_advice_from_constant(
                "activation flag", self.lane_config.flag, 0, 1,
            ),
        )

    def assign_region(
        self, layouter: Layouter, state: list[AssignedCell], flag: AssignedCell,
    ) -> list[AssignedCell]:
        return [self.lane_config.assign_region(layouter, lane, flag) for lane in state]
