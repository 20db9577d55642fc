"""
The Keccak-f[1600] circuit: 24 rounds plus the Mixing tail.

Round pipeline
──────────────

The input state is 25 base-13 lanes.  Rounds 0 .. 22 run

    Theta (b13) → Rho (b13 → b9) → Pi → Xi (b9) → IotaB9 → base conversion (b9 → b13)

and round 23 runs Theta → Rho → Pi → Xi followed by Mixing, which ends
either in base 9 (finalize) or in base 13 (absorb; ready to be the next
permutation's input).  The selected state is finally constrained equal
to the claimed output state.

Public inputs are two instance columns, positionally indexed by round:

    instance[0][r]   round constant r in base 9
    instance[1][r]   round constant r in base 13


Entry points
────────────

    permute(in_state, next_input=None)   → 25 output lanes
    absorb(in_state, next_input)         → base-13 lanes
    finalize(in_state)                   → base-9 lanes

Each builds the full circuit, checks it with the mock prover and raises
VerificationError if any constraint fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import keccak_arith
from .ast import mul, sub
from .defs import PERMUTATION
from .gates.base_conversion import StateBaseConversion
from .gates.iota_b9 import IotaB9Config
from .gates.mixing import MixingConfig
from .gates.pi import PiConfig
from .gates.rho import RhoConfig
from .gates.tables import (
    Base13toBase9TableConfig, FromBase9TableConfig, SpecialChunkTableConfig,
)
from .gates.theta import ThetaConfig
from .gates.xi import XiConfig
from .keccak_arith import StateBigInt, round_constant_b9, round_constant_b13
from .plonk import (
    AssignedCell, Circuit, Column, ConstraintSystem, Layouter, MockProver, Region, Selector,
)

_logger = logging.getLogger(__name__)


def round_constants_instance() -> list[list[int]]:
    return [
        [round_constant_b9(r) for r in range(PERMUTATION)],
        [round_constant_b13(r) for r in range(PERMUTATION)],
    ]


# ═══════════════════════════════════════════════════════════════════
# Config
# ═══════════════════════════════════════════════════════════════════

@dataclass
class KeccakFConfig:
    state: list[Column]
    base13_to_9: Base13toBase9TableConfig
    special_chunk: SpecialChunkTableConfig
    from_base9: FromBase9TableConfig
    theta: ThetaConfig
    rho: RhoConfig
    pi: PiConfig
    xi: XiConfig
    iota_b9: IotaB9Config
    base_conversion: StateBaseConversion
    mixing: MixingConfig
    q_out: Selector

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> KeccakFConfig:
        state = [meta.advice_column() for _ in range(25)]
        for column in state:
            meta.enable_equality(column)

        base13_to_9 = Base13toBase9TableConfig.configure(meta)
        special_chunk = SpecialChunkTableConfig.configure(meta)
        from_base9 = FromBase9TableConfig.configure(meta)

        round_ctant_b9 = meta.advice_column()
        round_ctant_b13 = meta.advice_column()
        round_constants_b9 = meta.instance_column()
        round_constants_b13 = meta.instance_column()

        theta = ThetaConfig.configure(meta, state)
        rho = RhoConfig.configure(meta, base13_to_9, special_chunk)
        pi = PiConfig.configure(meta, state)
        xi = XiConfig.configure(meta, state)
        iota_b9 = IotaB9Config.configure(meta, state, round_ctant_b9, round_constants_b9)
        base_conversion = StateBaseConversion.configure(meta, from_base9)
        mixing = MixingConfig.configure(
            meta, state, iota_b9, base_conversion, round_ctant_b13, round_constants_b13,
        )

        q_out = meta.selector()
        meta.create_gate("out state correctness", lambda vc: [
            (f"lane {idx}", mul(
                vc.query_selector(q_out),
                sub(vc.query_advice(state[idx]), vc.query_advice(state[idx], 1)),
            ))
            for idx in range(25)
        ])

        return cls(
            state, base13_to_9, special_chunk, from_base9,
            theta, rho, pi, xi, iota_b9, base_conversion, mixing, q_out,
        )

    def load(self, layouter: Layouter) -> None:
        self.base13_to_9.load(layouter)
        self.special_chunk.load(layouter)
        self.from_base9.load(layouter)

    # ── Witness ──

    def assign_in_state(self, layouter: Layouter, in_state: list[int]) -> list[AssignedCell]:
        def body(region: Region) -> list[AssignedCell]:
            return [
                region.assign_advice(f"in lane {idx}", self.state[idx], 0, value)
                for idx, value in enumerate(in_state)
            ]

        return layouter.assign_region("keccak input state", body)

    def assign_all(
        self,
        layouter: Layouter,
        in_state: list[AssignedCell],
        out_state: list[int],
        flag: bool,
        next_input: list[int] | None,
    ) -> list[AssignedCell]:
        state = in_state
        for round in range(PERMUTATION):
            state = self.assign_round_prefix(layouter, state)
            if round < PERMUTATION - 1:
                state = self.iota_b9.not_last_round(layouter, state, round)
                activation = self.base_conversion.assign_activation_flag(layouter)
                state = self.base_conversion.assign_region(layouter, state, activation)
            _logger.debug("round %d assigned", round)

        state = self.mixing.assign_state(layouter, state, flag, next_input)
        self.constrain_out_state(layouter, state, out_state)
        return state

    def assign_round_prefix(self, layouter: Layouter, state: list[AssignedCell]) -> list[AssignedCell]:
        """Theta → Rho → Pi → Xi."""
        values = StateBigInt([lane.value for lane in state])
        theta_values = keccak_arith.theta(values)
        state = self.theta.assign_state(layouter, state, theta_values.lanes)
        state = self.rho.assign_rotation_checks(layouter, state)
        state = self.pi.assign_state(layouter, state)
        xi_values = keccak_arith.xi(StateBigInt([lane.value for lane in state]))
        return self.xi.assign_state(layouter, state, xi_values.lanes)

    def constrain_out_state(
        self, layouter: Layouter, state: list[AssignedCell], out_state: list[int],
    ) -> None:
        def body(region: Region) -> None:
            region.enable_selector(self.q_out, 0)
            for idx in range(25):
                region.copy_advice(f"result lane {idx}", state[idx], self.state[idx], 0)
                region.assign_advice(f"claimed lane {idx}", self.state[idx], 1, out_state[idx])

        layouter.assign_region("out state correctness", body)


# ═══════════════════════════════════════════════════════════════════
# Circuit
# ═══════════════════════════════════════════════════════════════════

@dataclass
class KeccakCircuit(Circuit):
    """One permutation with a claimed output.

    in_state and out_state are 25 field lanes (flat index 5·x + y);
    next_input holds 17 64-bit words in sponge order and is only
    absorbed when is_mixing is set.
    """
    in_state: list[int]
    out_state: list[int]
    next_input: list[int] | None = None
    is_mixing: bool = False

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> KeccakFConfig:
        return KeccakFConfig.configure(meta)

    def synthesize(self, config: KeccakFConfig, layouter: Layouter) -> None:
        config.load(layouter)
        in_state = config.assign_in_state(layouter, self.in_state)
        config.assign_all(layouter, in_state, self.out_state, self.is_mixing, self.next_input)


# ═══════════════════════════════════════════════════════════════════
# Entry points
# ═══════════════════════════════════════════════════════════════════

def _check_lanes(in_state: list[int]) -> None:
    if len(in_state) != 25:
        raise ValueError(f"a state has 25 lanes, got {len(in_state)}")


def permute(in_state: list[int], next_input: list[int] | None = None) -> list[int]:
    """Permute a base-13 state, absorbing next_input if given.

    Returns the 25 output lanes: base 13 after an absorb, base 9 after a
    finalize.
    """
    _check_lanes(in_state)
    out_state = keccak_arith.permute_and_absorb(StateBigInt(in_state), next_input).lanes
    circuit = KeccakCircuit(
        list(in_state), out_state, next_input, is_mixing=next_input is not None,
    )
    MockProver.run(circuit, round_constants_instance()).assert_satisfied()
    return out_state


def absorb(in_state: list[int], next_input: list[int]) -> list[int]:
    return permute(in_state, next_input)


def finalize(in_state: list[int]) -> list[int]:
    return permute(in_state, None)
