"""
Core constants and type definitions for the Keccak-f[1600] circuit.

This module contains the parameters shared by the encoding layer, the
witness model and every gate:

  FIELD_MODULUS      — the BN254 scalar field prime
  B2, B9, B13        — the three numeral bases a lane travels through
  A1..A4             — digit weights of the Xi / Absorb linear forms
  ROUND_CONSTANTS    — the 24 Keccak round constants (base 2)
  ROTATION_CONSTANTS — the Rho offset table, indexed [x][y]
  ABSORB_LANES       — state positions written by the sponge rate
  ParamDef           — one documented system parameter


State layout
────────────

A state is 25 lanes.  Flat arrays index lane (x, y) at 5·x + y; nested
5×5 lists index it as state[x][y].  The sponge's rate words are numbered
i = x + 5·y, which is why ABSORB_LANES is not simply range(17).


Bases
─────

  base 2   the bit representation, one digit per bit
  base 13  after Theta a digit is  a + C[x-1] + C[x+1]; with lane (0, 0)
           carrying digits up to 2 from the base-13 Iota this is ≤ 12
  base 9   after Xi and Absorb a digit is  2a + b + 3c + 2d  ≤ 8
"""

from __future__ import annotations

from dataclasses import dataclass


# ═══════════════════════════════════════════════════════════════════
# Field
# ═══════════════════════════════════════════════════════════════════

FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617


# ═══════════════════════════════════════════════════════════════════
# Bases and digit weights
# ═══════════════════════════════════════════════════════════════════

B2 = 2
B9 = 9
B13 = 13

# Xi:     2·a + 1·b + 3·c
# Absorb: + 2·d
A1 = 2
A2 = 1
A3 = 3
A4 = 2

# Digit of 2a + b + 3c (+ 2d) → bit of a ^ (~b & c) (^ d)
B9_BIT_TABLE = (0, 0, 1, 1, 0, 0, 1, 1, 0)


# ═══════════════════════════════════════════════════════════════════
# Permutation shape
# ═══════════════════════════════════════════════════════════════════

LANE_SIZE = 64
PERMUTATION = 24
NEXT_INPUTS_LANES = 17

ABSORB_LANES: tuple[int, ...] = tuple(
    5 * (i % 5) + i // 5 for i in range(NEXT_INPUTS_LANES)
)


# ── Rho chunking ──

BASE_NUM_OF_CHUNKS = 4

# Block count returned for a chunk whose highest non-zero digit sits at
# index width-1.  Indexed by width.
OVERFLOW_TRANSFORM = (0, 0, 1, 13, 170)

STEP2_RANGE = 12
STEP3_RANGE = 169


# ── Keccak constants ──

ROUND_CONSTANTS: tuple[int, ...] = (
    0x0000000000000001, 0x0000000000008082, 0x800000000000808A,
    0x8000000080008000, 0x000000000000808B, 0x0000000080000001,
    0x8000000080008081, 0x8000000000008009, 0x000000000000008A,
    0x0000000000000088, 0x0000000080008009, 0x000000008000000A,
    0x000000008000808B, 0x800000000000008B, 0x8000000000008089,
    0x8000000000008003, 0x8000000000008002, 0x8000000000000080,
    0x000000000000800A, 0x800000008000000A, 0x8000000080008081,
    0x8000000000008080, 0x0000000080000001, 0x8000000080008008,
)

ROTATION_CONSTANTS: tuple[tuple[int, ...], ...] = (
    (0, 36, 3, 41, 18),
    (1, 44, 10, 45, 2),
    (62, 6, 43, 15, 61),
    (28, 55, 25, 21, 56),
    (27, 20, 39, 8, 14),
)


def lane_position(idx: int) -> tuple[int, int]:
    """Inverse of the flat layout: idx → (x, y)."""
    return divmod(idx, 5)


# ═══════════════════════════════════════════════════════════════════
# Parameter definition
# ═══════════════════════════════════════════════════════════════════


@dataclass
class ParamDef:
    """One system parameter.

    Fields:
        symbol      — short symbol, e.g. "B13", "N_rate"
        name        — code-level name, e.g. "B13", "NEXT_INPUTS_LANES"
        description — one-line description
        formula     — value or derivation, or "" if primitive
    """
    symbol: str
    name: str
    description: str
    formula: str = ""
