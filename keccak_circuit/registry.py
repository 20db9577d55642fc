"""
Parameter registry for the Keccak circuit.

A structured catalog of every constant the arithmetization depends on,
intended as the single place the CLI and documentation read them from.
Each entry names the constant in defs.py that holds the value.
"""

from __future__ import annotations

from . import defs
from .defs import ParamDef


# ═══════════════════════════════════════════════════════════════════
# Parameters
# ═══════════════════════════════════════════════════════════════════

PARAMS: list[ParamDef] = [
    ParamDef(
        "p",
        "FIELD_MODULUS",
        "BN254 scalar field prime; every cell is an element of F_p",
    ),
    ParamDef(
        "B2",
        "B2",
        "Base of freshly encoded lanes and of the next input block",
        formula="2",
    ),
    ParamDef(
        "B13",
        "B13",
        "Base of Theta's input and output; digit ≤ 12",
        formula="13",
    ),
    ParamDef(
        "B9",
        "B9",
        "Base of Rho's output, Xi, Iota and Absorb; digit ≤ 8",
        formula="9",
    ),
    ParamDef(
        "A1, A2, A3",
        "A1, A2, A3",
        "Xi weights: out = A1·a + A2·b + A3·c",
        formula="2, 1, 3",
    ),
    ParamDef(
        "A4",
        "A4",
        "Weight of the round constant (base 9) and of the absorbed block",
        formula="2",
    ),
    ParamDef(
        "w",
        "LANE_SIZE",
        "Bits per lane",
        formula="64",
    ),
    ParamDef(
        "n_r",
        "PERMUTATION",
        "Rounds per permutation; the last one ends in Mixing",
        formula="24",
    ),
    ParamDef(
        "N_rate",
        "NEXT_INPUTS_LANES",
        "Lanes of the sponge rate written by Absorb",
        formula="17",
    ),
    ParamDef(
        "s",
        "BASE_NUM_OF_CHUNKS",
        "Digits per Rho chunk and per base-conversion chunk",
        formula="4",
    ),
    ParamDef(
        "bc(w)",
        "OVERFLOW_TRANSFORM",
        "Block count of a chunk whose highest non-zero digit is at w-1",
        formula="(0, 0, 1, 13, 170)",
    ),
    ParamDef(
        "R2",
        "STEP2_RANGE",
        "Bound on the summed block counts of all step-2 chunks",
        formula="12 step-2 chunks · bc(2)",
    ),
    ParamDef(
        "R3",
        "STEP3_RANGE",
        "Bound on the summed block counts of all step-3 chunks",
        formula="13 step-3 chunks · bc(3)",
    ),
    ParamDef(
        "RC_r",
        "ROUND_CONSTANTS",
        "Keccak round constants; public inputs in base 9 and base 13",
    ),
    ParamDef(
        "r[x][y]",
        "ROTATION_CONSTANTS",
        "Rho rotation offsets",
    ),
]


def param_value(p: ParamDef) -> list[object]:
    """Current values of the defs.py constants an entry names."""
    return [getattr(defs, name.strip()) for name in p.name.split(",")]


def print_registry() -> None:
    """Pretty-print the parameter registry."""
    _DIM = "\033[2m"
    _RST = "\033[0m"

    print()
    print(f"{'=' * 60}")
    print(f"  PARAMETERS")
    print(f"{'=' * 60}")
    for p in PARAMS:
        formula = f" = {p.formula}" if p.formula else ""
        code = f" ({p.name})" if p.name else ""
        print(f"    {p.symbol}{code}{formula}")
        print(f"      {_DIM}{p.description}{_RST}")
    print()
