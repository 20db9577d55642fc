"""
Entry point for:  python3 -m keccak_circuit

Usage:
    python3 -m keccak_circuit                   # gate summary + every gate
    python3 -m keccak_circuit gates             # every gate with its polynomials
    python3 -m keccak_circuit lookups           # every lookup argument
    python3 -m keccak_circuit params            # parameter registry
    python3 -m keccak_circuit prove             # finalize the all-zero state
    python3 -m keccak_circuit prove --absorb    # absorb an all-zero block instead
    python3 -m keccak_circuit ... --verbose     # log at DEBUG level
"""

import logging
import sys

from .arith_helpers import lanes_to_state, state_to_lanes
from .circuit import KeccakFConfig, permute
from .defs import B9, B13, NEXT_INPUTS_LANES
from .plonk import ConstraintSystem, VerificationError
from .printer import print_gates, print_lookups, print_summary
from .reference import zero_state
from .registry import print_registry


def _box(title: str) -> None:
    print()
    print("╔══════════════════════════════════════════════════════════════╗")
    print(f"║  {title:<58} ║")
    print("╚══════════════════════════════════════════════════════════════╝")
    print()


def _configured() -> ConstraintSystem:
    meta = ConstraintSystem()
    KeccakFConfig.configure(meta)
    return meta


def _prove(absorb: bool) -> int:
    next_input = [0] * NEXT_INPUTS_LANES if absorb else None
    _box("KECCAK-F — ABSORB" if absorb else "KECCAK-F — FINALIZE")
    try:
        out = permute(state_to_lanes(zero_state()), next_input)
    except VerificationError as e:
        print(f"  rejected: {e}")
        return 1
    words = lanes_to_state(out, B13 if absorb else B9)
    print("  all constraints satisfied")
    print()
    for y in range(5):
        print("  " + "  ".join(f"{words[x][y]:016X}" for x in range(5)))
    print()
    return 0


# ── Dispatch ──

args = [a for a in sys.argv[1:] if a not in ("--verbose", "-v")]
if len(args) != len(sys.argv) - 1:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

cmd = args[0] if args else None

if cmd == "gates":
    print_gates(_configured())

elif cmd == "lookups":
    print_lookups(_configured())

elif cmd == "params":
    print_registry()

elif cmd == "prove":
    sys.exit(_prove("--absorb" in args[1:]))

else:
    # Default: summary, then every gate
    meta = _configured()
    _box("KECCAK-F[1600] GATES")
    print_summary(meta)
    print_gates(meta)
