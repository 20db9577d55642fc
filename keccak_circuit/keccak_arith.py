"""
Witness model: Keccak-f computed directly on alternate-base lanes.

Every function here mirrors one gate of the circuit and computes the
exact values that gate witnesses, using plain integer arithmetic on
the mixed-radix lanes rather than bit operations:

    theta        base 13 → base 13 (65 digits)   a + C[x-1] + 13·C[x+1]
    rho          base 13 → base 9                parity, rotate, re-encode
    pi           lane permutation
    xi           base 9                          2·a + b + 3·c
    iota_b9      base 9                          lane 0 + 2·RC
    base_conversion  base 9 → base 13            χ table, re-encode
    iota_b13     base 13                         lane 0 + RC
    absorb       base 9                          rate lanes + 2·next

The orchestrator uses these to fill the cells; tests compare them to
the bitwise reference in reference.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .arith_helpers import (
    convert_b2_to_b9, convert_b2_to_b13,
    convert_b13_lane_to_b9, convert_b9_lane_to_b13,
)
from .defs import (
    A1, A2, A3, A4, B13, ABSORB_LANES, NEXT_INPUTS_LANES, PERMUTATION,
    ROTATION_CONSTANTS, ROUND_CONSTANTS,
)


@dataclass
class StateBigInt:
    """25 lanes as big unsigned integers, flat index 5·x + y.

    Indexable either by flat index or by (x, y):
        s[7] is s[1, 2]
    """
    lanes: list[int] = field(default_factory=lambda: [0] * 25)

    def __post_init__(self):
        if len(self.lanes) != 25:
            raise ValueError(f"a state has 25 lanes, got {len(self.lanes)}")
        self.lanes = list(self.lanes)

    def __getitem__(self, key: int | tuple[int, int]) -> int:
        if isinstance(key, tuple):
            x, y = key
            return self.lanes[5 * x + y]
        return self.lanes[key]

    def __setitem__(self, key: int | tuple[int, int], value: int) -> None:
        if isinstance(key, tuple):
            x, y = key
            key = 5 * x + y
        self.lanes[key] = value

    def __iter__(self):
        return iter(self.lanes)

    def copy(self) -> StateBigInt:
        return StateBigInt(self.lanes)


def round_constant_b9(round: int) -> int:
    return convert_b2_to_b9(ROUND_CONSTANTS[round])


def round_constant_b13(round: int) -> int:
    return convert_b2_to_b13(ROUND_CONSTANTS[round])


# ═══════════════════════════════════════════════════════════════════
# Round steps
# ═══════════════════════════════════════════════════════════════════

def theta(a: StateBigInt) -> StateBigInt:
    c = [sum(a[x, y] for y in range(5)) for x in range(5)]
    out = StateBigInt()
    for x in range(5):
        for y in range(5):
            out[x, y] = a[x, y] + c[(x + 4) % 5] + B13 * c[(x + 1) % 5]
    return out


def rho(a: StateBigInt) -> StateBigInt:
    out = StateBigInt()
    for x in range(5):
        for y in range(5):
            out[x, y] = convert_b13_lane_to_b9(a[x, y], ROTATION_CONSTANTS[x][y])
    return out


def pi(a: StateBigInt) -> StateBigInt:
    out = StateBigInt()
    for x in range(5):
        for y in range(5):
            out[x, y] = a[(x + 3 * y) % 5, x]
    return out


def xi(a: StateBigInt) -> StateBigInt:
    out = StateBigInt()
    for x in range(5):
        for y in range(5):
            out[x, y] = (
                A1 * a[x, y]
                + A2 * a[(x + 1) % 5, y]
                + A3 * a[(x + 2) % 5, y]
            )
    return out


def iota_b9(a: StateBigInt, rc_b9: int) -> StateBigInt:
    out = a.copy()
    out[0, 0] += A4 * rc_b9
    return out


def iota_b13(a: StateBigInt, rc_b13: int) -> StateBigInt:
    out = a.copy()
    out[0, 0] += rc_b13
    return out


def absorb(a: StateBigInt, next_input: list[int]) -> StateBigInt:
    """XOR a block of 17 base-2 words into the rate lanes of a base-9 state."""
    if len(next_input) != NEXT_INPUTS_LANES:
        raise ValueError(
            f"next input has {NEXT_INPUTS_LANES} words, got {len(next_input)}"
        )
    out = a.copy()
    for idx, word in zip(ABSORB_LANES, next_input):
        out[idx] += A4 * convert_b2_to_b9(word)
    return out


def base_conversion(a: StateBigInt) -> StateBigInt:
    return StateBigInt([convert_b9_lane_to_b13(lane) for lane in a])


# ═══════════════════════════════════════════════════════════════════
# Whole permutation
# ═══════════════════════════════════════════════════════════════════

def round_b13(a: StateBigInt, round: int) -> StateBigInt:
    """One full non-final round: base 13 in, base 13 out."""
    s = xi(pi(rho(theta(a))))
    s = iota_b9(s, round_constant_b9(round))
    return base_conversion(s)


def mixing(a: StateBigInt, next_input: list[int] | None) -> StateBigInt:
    """Last-round tail applied to the Xi output.

    Without a next input the state is finalized in base 9; with one, the
    block is absorbed and the state is returned in base 13.
    """
    last = PERMUTATION - 1
    if next_input is None:
        return iota_b9(a, round_constant_b9(last))
    s = base_conversion(absorb(a, next_input))
    return iota_b13(s, round_constant_b13(last))


def permute_and_absorb(a: StateBigInt, next_input: list[int] | None) -> StateBigInt:
    for round in range(PERMUTATION - 1):
        a = round_b13(a, round)
    a = xi(pi(rho(theta(a))))
    return mixing(a, next_input)
