"""
Arithmetic encoding layer: lanes as mixed-radix field elements.

A 64-bit lane with bits b_0 .. b_63 is carried through the circuit as
the single field element

    Σ_i  d_i · B^i

for a base B ∈ {2, 9, 13}.  Freshly encoded lanes have d_i = b_i; after
Theta or Xi the digits are small sums of bits, and the bit is recovered
digit by digit through a reduction table:

    base 13   parity          d & 1              (Theta is XOR)
    base 9    B9_BIT_TABLE    2a + b + 3c → a ^ (~b & c)

Well-formedness
───────────────

A value is well-formed in base B iff every digit is < B.  Only then is
the digit vector unique and the encoding a bijection with 64-bit words.
Feeding a value with an out-of-range digit is outside that domain; the
helpers here refuse it with ValueError, and inside the circuit it is
exactly what the Rho block-count machinery rejects.
"""

from __future__ import annotations

from .defs import (
    B2, B9, B13, B9_BIT_TABLE, FIELD_MODULUS, LANE_SIZE,
)

# A State is a 5×5 grid of 64-bit words, indexed state[x][y].
State = list[list[int]]

_WORD_MASK = (1 << LANE_SIZE) - 1


# ═══════════════════════════════════════════════════════════════════
# Digit vectors
# ═══════════════════════════════════════════════════════════════════

def to_radix_le(value: int, base: int, width: int | None = None) -> list[int]:
    """Little-endian digits of value in the given base.

    With width set, pads with zeros up to width digits and raises
    ValueError if the value needs more.
    """
    if value < 0:
        raise ValueError(f"cannot expand negative value {value}")
    digits = []
    rest = value
    while rest:
        rest, d = divmod(rest, base)
        digits.append(d)
    if width is not None:
        if len(digits) > width:
            raise ValueError(f"{value} needs more than {width} base-{base} digits")
        digits.extend([0] * (width - len(digits)))
    return digits


def from_radix_le(digits: list[int], base: int) -> int:
    acc = 0
    for d in reversed(digits):
        acc = acc * base + d
    return acc


def is_well_formed(digits: list[int], base: int) -> bool:
    """True iff every digit lies in [0, base)."""
    return all(0 <= d < base for d in digits)


# ═══════════════════════════════════════════════════════════════════
# Single-digit reductions
# ═══════════════════════════════════════════════════════════════════

def convert_b13_coef(x: int) -> int:
    """Bit carried by a base-13 digit: its parity."""
    return x & 1


def convert_b9_coef(x: int) -> int:
    """Bit carried by a base-9 digit of 2a + b + 3c (+ 2d)."""
    if not 0 <= x < B9:
        raise ValueError(f"{x} is not a base-9 digit")
    return B9_BIT_TABLE[x]


# ═══════════════════════════════════════════════════════════════════
# Bits ↔ digits
# ═══════════════════════════════════════════════════════════════════

def bits_to_digits(word: int, base: int) -> int:
    """Encode a 64-bit word with one base-`base` digit per bit."""
    if not 0 <= word <= _WORD_MASK:
        raise ValueError(f"{word:#x} is not a 64-bit word")
    return from_radix_le(to_radix_le(word, B2, LANE_SIZE), base)


def digits_to_bits(lane: int, base: int) -> int:
    """Inverse of bits_to_digits.

    Raises ValueError if any digit is not 0 or 1, or if the lane does
    not fit in 64 digits.
    """
    digits = to_radix_le(lane, base, LANE_SIZE)
    if not is_well_formed(digits, B2):
        raise ValueError(f"base-{base} lane {lane} has a non-binary digit")
    return from_radix_le(digits, B2)


def convert_b2_to_b13(word: int) -> int:
    return bits_to_digits(word, B13)


def convert_b2_to_b9(word: int) -> int:
    return bits_to_digits(word, B9)


# ── Reductions of whole lanes ──

def convert_b13_lane_to_b9(lane: int, rotation: int) -> int:
    """Reduce a 65-digit Theta output to bits, rotate left, re-encode in base 9.

    Digit 64 is the carry-out of 13·C[x+1]; it belongs to bit 0, so it is
    merged with digit 0 before the parity is taken.
    """
    digits = to_radix_le(lane, B13, LANE_SIZE + 1)
    digits[0] += digits.pop()
    bits = [convert_b13_coef(d) for d in digits]
    rotated = bits[-rotation:] + bits[:-rotation] if rotation else bits
    return from_radix_le(rotated, B9)


def convert_b9_lane_to_b13(lane: int) -> int:
    """Reduce a base-9 lane through the χ table and re-encode in base 13."""
    digits = to_radix_le(lane, B9, LANE_SIZE)
    return from_radix_le([convert_b9_coef(d) for d in digits], B13)


def convert_b9_lane_to_b2(lane: int) -> int:
    digits = to_radix_le(lane, B9, LANE_SIZE)
    return from_radix_le([convert_b9_coef(d) for d in digits], B2)


def convert_b13_lane_to_b2(lane: int) -> int:
    """Parity-decode a base-13 lane of up to 65 digits."""
    digits = to_radix_le(lane, B13, LANE_SIZE + 1)
    digits[0] += digits.pop()
    return from_radix_le([convert_b13_coef(d) for d in digits], B2)


# ═══════════════════════════════════════════════════════════════════
# Field ↔ big unsigned
# ═══════════════════════════════════════════════════════════════════

def biguint_to_f(value: int) -> int:
    if value < 0:
        raise ValueError(f"{value} is not an unsigned integer")
    return value % FIELD_MODULUS


def f_to_biguint(f: int) -> int:
    if not 0 <= f < FIELD_MODULUS:
        raise ValueError(f"{f} is not a canonical field element")
    return f


# ═══════════════════════════════════════════════════════════════════
# States
# ═══════════════════════════════════════════════════════════════════

def state_to_lanes(state: State, base: int = B13) -> list[int]:
    """5×5 words → 25 flat lanes (index 5·x + y) encoded in `base`."""
    return [bits_to_digits(state[x][y], base) for x in range(5) for y in range(5)]


def lanes_to_state(lanes: list[int], base: int = B13) -> State:
    """Decode 25 flat lanes back to words.

    Base 13 lanes are parity-decoded, base 9 lanes go through the χ
    table and base 2 lanes must already be plain words.
    """
    decode = {
        B2: lambda lane: digits_to_bits(lane, B2),
        B9: convert_b9_lane_to_b2,
        B13: convert_b13_lane_to_b2,
    }[base]
    return [[decode(lanes[5 * x + y]) for y in range(5)] for x in range(5)]


def words_to_state(words: list[int]) -> State:
    """Sponge-ordered words (i = x + 5·y) → state[x][y], zero-padded."""
    if len(words) > 25:
        raise ValueError(f"a state holds 25 words, got {len(words)}")
    state = [[0] * 5 for _ in range(5)]
    for i, word in enumerate(words):
        state[i % 5][i // 5] = word
    return state


def state_to_words(state: State) -> list[int]:
    return [state[i % 5][i // 5] for i in range(25)]
