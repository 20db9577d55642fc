"""
Chunk slicing and witness generation for the Rho conversion gadget.

A Theta output lane has 65 base-13 digits d_0 .. d_64.  Rho converts it
to base 9 and rotates it left by r = ROTATION_CONSTANTS[x][y] in one
pass, chunk by chunk:

    digits 1 .. 63    cut into chunks of up to 4 digits; a chunk at
                      input position i lands at output position
                      (i + r) mod 64
    digits 0 and 64   the "special chunk": whatever remains of the input
                      accumulator after the normal chunks, low + high·13^64,
                      whose merged bit lands at output position r


Chunk boundaries
────────────────

A chunk must land on consecutive output positions, so it may not span
input position 64 - r (which lands on output position 0).  Chunks are
therefore cut at 64 - r as well as at 64.  The shorter chunks left at
those two boundaries are the step-1, step-2 and step-3 chunks whose
block counts the range checks watch.


The witness
───────────

RhoLane(lane, rotation).get_full_witness() returns one Conversion per
normal chunk plus the SpecialChunk.  Nothing here validates the lane:
a malformed lane yields a witness that fails the gadget's constraints.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..arith_helpers import convert_b13_coef, from_radix_le, to_radix_le
from ..defs import B9, B13, BASE_NUM_OF_CHUNKS, LANE_SIZE
from .tables import get_block_count


def get_step_size(chunk_idx: int, rotation: int) -> int:
    """Width of the chunk starting at input digit chunk_idx."""
    wrap = (LANE_SIZE - rotation) % LANE_SIZE
    if chunk_idx < wrap < chunk_idx + BASE_NUM_OF_CHUNKS:
        return wrap - chunk_idx
    return min(BASE_NUM_OF_CHUNKS, LANE_SIZE - chunk_idx)


def slice_lane(rotation: int) -> list[tuple[int, int]]:
    """[(chunk_idx, step)] covering input digits 1 .. 63."""
    slices = []
    chunk_idx = 1
    while chunk_idx < LANE_SIZE:
        step = get_step_size(chunk_idx, rotation)
        slices.append((chunk_idx, step))
        chunk_idx += step
    return slices


@dataclass
class Conversion:
    """Witness of one normal chunk row.

    The accumulators are the values *before* this chunk is applied.
    """
    chunk_idx: int
    step: int
    input_coef: int
    input_power_of_base: int
    input_acc: int
    output_coef: int
    output_power_of_base: int
    output_acc: int
    block_count: int


@dataclass
class SpecialChunk:
    input_acc: int
    output_coef: int
    output_power_of_base: int
    output_acc: int
    output_acc_post: int


class RhoLane:
    """Honest chunk decomposition of one lane."""

    def __init__(self, lane: int, rotation: int):
        self.lane = lane
        self.rotation = rotation
        digits = to_radix_le(lane, B13)
        self.digits = digits + [0] * max(0, LANE_SIZE + 1 - len(digits))

    def chunk_digits(self, chunk_idx: int, step: int) -> list[int]:
        """Little-endian digits witnessed for the chunk at chunk_idx."""
        return self.digits[chunk_idx:chunk_idx + step]

    def get_full_witness(self) -> tuple[list[Conversion], SpecialChunk]:
        input_acc = self.lane
        output_acc = 0
        conversions = []
        for chunk_idx, step in slice_lane(self.rotation):
            digits = self.chunk_digits(chunk_idx, step)
            input_coef = from_radix_le(digits, B13)
            output_coef = from_radix_le([convert_b13_coef(d) for d in digits], B9)
            input_pob = B13**chunk_idx
            output_pob = B9**((chunk_idx + self.rotation) % LANE_SIZE)
            conversions.append(Conversion(
                chunk_idx, step,
                input_coef, input_pob, input_acc,
                output_coef, output_pob, output_acc,
                get_block_count(digits),
            ))
            input_acc -= input_coef * input_pob
            output_acc += output_coef * output_pob

        output_coef = convert_b13_coef(self.digits[0] + self.digits[LANE_SIZE])
        output_pob = B9**self.rotation
        special = SpecialChunk(
            input_acc, output_coef, output_pob, output_acc,
            output_acc + output_coef * output_pob,
        )
        return conversions, special
