"""
Keccak-f[1600] arithmetization over the BN254 scalar field.

Modules:
    defs          — constants: bases, weights, round and rotation constants
    arith_helpers — lanes as base-2/9/13 field elements, decoders
    keccak_arith  — witness model: every round step on alternate-base lanes
    reference     — bitwise Keccak-f and Keccak-256
    ast           — expression tree nodes and helper builders
    printer       — fmt(), print_gates(), print_lookups()
    registry      — parameter catalog
    plonk         — constraint system, layouter, mock prover
    gates         — tables, Theta, Rho, Pi, Xi, Iota, Absorb, Mixing
    circuit       — KeccakFConfig, KeccakCircuit, permute / absorb / finalize
"""

from .defs import (
    FIELD_MODULUS, B2, B9, B13, A1, A2, A3, A4,
    LANE_SIZE, PERMUTATION, NEXT_INPUTS_LANES,
    ROUND_CONSTANTS, ROTATION_CONSTANTS, ParamDef,
)
from .ast import (
    Constant, AdviceQuery, FixedQuery, InstanceQuery, SelectorQuery,
    Add, Mul, Neg, Expr,
    degree, evaluate, const, add, sub, mul, neg, scale, product,
)
from .arith_helpers import (
    bits_to_digits, digits_to_bits, biguint_to_f, f_to_biguint,
    state_to_lanes, lanes_to_state,
)
from .keccak_arith import StateBigInt
from .printer import fmt, print_gates, print_lookups
from .format import Format, render, TextFormat
from .registry import PARAMS, print_registry
from .plonk import ConfigurationError, VerificationError, MockProver, VerifyFailure
from .circuit import KeccakCircuit, KeccakFConfig, permute, absorb, finalize
