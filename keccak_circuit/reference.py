"""
Bitwise Keccak-f[1600] and Keccak-256, on plain 64-bit words.

This is the ground truth the alternate-base arithmetization is checked
against.  The round steps are exposed individually so that each gate can
be compared with its bitwise counterpart:

    theta(a)   a[x][y] ^= C[x-1] ^ rol(C[x+1], 1)
    rho(a)     a[x][y] = rol(a[x][y], ROTATION_CONSTANTS[x][y])
    pi(a)      out[x][y] = a[(x + 3y) % 5][x]
    chi(a)     a[x][y] ^= ~a[x+1][y] & a[x+2][y]
    iota(a, r) a[0][0] ^= ROUND_CONSTANTS[r]

keccak256 is the Ethereum variant (pad byte 0x01, not the NIST 0x06).
"""

from __future__ import annotations

from functools import reduce
from operator import xor

from .arith_helpers import State, state_to_words, words_to_state
from .defs import (
    LANE_SIZE, NEXT_INPUTS_LANES, PERMUTATION, ROTATION_CONSTANTS,
    ROUND_CONSTANTS,
)

RATE_BYTES = NEXT_INPUTS_LANES * 8

_MASK = (1 << LANE_SIZE) - 1


def rol(value: int, left: int) -> int:
    left %= LANE_SIZE
    return ((value << left) | (value >> (LANE_SIZE - left))) & _MASK


def zero_state() -> State:
    return [[0] * 5 for _ in range(5)]


# ═══════════════════════════════════════════════════════════════════
# Round steps
# ═══════════════════════════════════════════════════════════════════

def theta(a: State) -> State:
    c = [reduce(xor, a[x]) for x in range(5)]
    d = [c[(x - 1) % 5] ^ rol(c[(x + 1) % 5], 1) for x in range(5)]
    return [[a[x][y] ^ d[x] for y in range(5)] for x in range(5)]


def rho(a: State) -> State:
    return [[rol(a[x][y], ROTATION_CONSTANTS[x][y]) for y in range(5)] for x in range(5)]


def pi(a: State) -> State:
    return [[a[(x + 3 * y) % 5][x] for y in range(5)] for x in range(5)]


def chi(a: State) -> State:
    return [
        [a[x][y] ^ (~a[(x + 1) % 5][y] & a[(x + 2) % 5][y] & _MASK) for y in range(5)]
        for x in range(5)
    ]


def iota(a: State, round: int) -> State:
    out = [row[:] for row in a]
    out[0][0] ^= ROUND_CONSTANTS[round]
    return out


def keccak_round(a: State, round: int) -> State:
    return iota(chi(pi(rho(theta(a)))), round)


def keccak_f(a: State) -> State:
    for round in range(PERMUTATION):
        a = keccak_round(a, round)
    return a


# ═══════════════════════════════════════════════════════════════════
# Sponge
# ═══════════════════════════════════════════════════════════════════

def absorb_block(a: State, block: list[int]) -> State:
    """XOR 17 sponge-ordered words into the rate."""
    if len(block) != NEXT_INPUTS_LANES:
        raise ValueError(f"a block has {NEXT_INPUTS_LANES} words, got {len(block)}")
    words = state_to_words(a)
    for i, word in enumerate(block):
        words[i] ^= word
    return words_to_state(words)


def pad_block(data: bytes) -> list[int]:
    """Keccak multi-rate padding of a final (short) chunk into 17 words."""
    if len(data) >= RATE_BYTES:
        raise ValueError(f"a final chunk is shorter than {RATE_BYTES} bytes")
    padded = bytearray(data)
    padded.append(0x01)
    padded.extend(b"\x00" * (RATE_BYTES - len(padded)))
    padded[-1] |= 0x80
    return bytes_to_words(bytes(padded))


def bytes_to_words(data: bytes) -> list[int]:
    return [int.from_bytes(data[i:i + 8], "little") for i in range(0, len(data), 8)]


def words_to_bytes(words: list[int]) -> bytes:
    return b"".join(w.to_bytes(8, "little") for w in words)


def keccak256(data: bytes) -> bytes:
    a = zero_state()
    full = len(data) - len(data) % RATE_BYTES
    for offset in range(0, full, RATE_BYTES):
        a = keccak_f(absorb_block(a, bytes_to_words(data[offset:offset + RATE_BYTES])))
    a = keccak_f(absorb_block(a, pad_block(data[full:])))
    return words_to_bytes(state_to_words(a)[:4])
