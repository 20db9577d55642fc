import random

import pytest

from circuits import (
    AbsorbCircuit, BaseConversionCircuit, IotaB9Circuit, IotaB13Circuit,
    PiCircuit, ThetaCircuit, XiCircuit,
)
from keccak_circuit import keccak_arith as arith
from keccak_circuit.arith_helpers import convert_b9_lane_to_b13, state_to_lanes
from keccak_circuit.defs import B9, FIELD_MODULUS, PERMUTATION
from keccak_circuit.gates.base_conversion import base9_chunks, convert_chunk
from keccak_circuit.plonk import FailureKind, MockProver

RC_B9 = [[arith.round_constant_b9(r) for r in range(PERMUTATION)]]
RC_B13 = [[arith.round_constant_b13(r) for r in range(PERMUTATION)]]


@pytest.fixture
def b13_state():
    rng = random.Random(25)
    state = [[rng.getrandbits(64) for _ in range(5)] for _ in range(5)]
    return arith.StateBigInt(state_to_lanes(state))


@pytest.fixture
def xi_state(b13_state):
    return arith.xi(arith.pi(arith.rho(arith.theta(b13_state))))


def failed(failures):
    return {(f.kind, f.name) for f in failures}


def poke(prover, cell, value):
    prover.assignment.values[(cell.cell.column, cell.cell.row)] = value % FIELD_MODULUS


# ═══════════════════════════════════════════════════════════════════
# Theta / Xi
# ═══════════════════════════════════════════════════════════════════

def test_theta(b13_state):
    out = arith.theta(b13_state).lanes
    assert MockProver.run(ThetaCircuit(b13_state.lanes, out), []).verify() == []


def test_theta_rejects_wrong_output(b13_state):
    out = arith.theta(b13_state).lanes
    out[3] += 1
    failures = MockProver.run(ThetaCircuit(b13_state.lanes, out), []).verify()
    assert failed(failures) == {(FailureKind.CONSTRAINT_NOT_SATISFIED, "theta: lane (0, 3)")}


def test_xi(b13_state):
    lanes = arith.pi(arith.rho(arith.theta(b13_state)))
    out = arith.xi(lanes).lanes
    assert MockProver.run(XiCircuit(lanes.lanes, out), []).verify() == []

    out[10] = 0
    failures = MockProver.run(XiCircuit(lanes.lanes, out), []).verify()
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED, "xi: lane (2, 0)") in failed(failures)


# ═══════════════════════════════════════════════════════════════════
# Pi
# ═══════════════════════════════════════════════════════════════════

def test_pi(b13_state):
    circuit = PiCircuit(b13_state.lanes)
    prover = MockProver.run(circuit, [])
    assert prover.verify() == []
    assert [cell.value for cell in circuit.result] == arith.pi(b13_state).lanes


def test_pi_is_enforced_by_copies(b13_state):
    circuit = PiCircuit(b13_state.lanes)
    prover = MockProver.run(circuit, [])
    poke(prover, circuit.result[1], circuit.result[1].value + 1)
    assert failed(prover.verify()) == {(FailureKind.PERMUTATION, "copy")}


# ═══════════════════════════════════════════════════════════════════
# Iota
# ═══════════════════════════════════════════════════════════════════

def test_iota_b9_not_last_round(xi_state):
    circuit = IotaB9Circuit(xi_state.lanes, 4)
    prover = MockProver.run(circuit, RC_B9)
    assert prover.verify() == []
    out = [cell.value for cell in circuit.result]
    assert out == arith.iota_b9(xi_state, arith.round_constant_b9(4)).lanes

    poke(prover, circuit.result[0], out[0] + 2)
    assert failed(prover.verify()) == {(FailureKind.CONSTRAINT_NOT_SATISFIED, "iota b9: not last round")}


def test_iota_b9_last_round_is_gated_by_negated_flag(xi_state):
    active = IotaB9Circuit(xi_state.lanes, PERMUTATION - 1, negated_flag=1)
    prover = MockProver.run(active, RC_B9)
    assert prover.verify() == []
    poke(prover, active.result[0], 0)
    assert failed(prover.verify()) == {(FailureKind.CONSTRAINT_NOT_SATISFIED, "iota b9: last round")}

    inactive = IotaB9Circuit(xi_state.lanes, PERMUTATION - 1, negated_flag=0)
    prover = MockProver.run(inactive, RC_B9)
    poke(prover, inactive.result[0], 0)
    assert prover.verify() == []


def test_iota_b9_reads_public_round_constant(xi_state):
    wrong = [list(RC_B9[0])]
    wrong[0][4] += 1
    circuit = IotaB9Circuit(xi_state.lanes, 4)
    MockProver.run(circuit, wrong).assert_satisfied()
    assert circuit.result[0].value == xi_state[0] + 2 * wrong[0][4]


def test_iota_b13(b13_state):
    circuit = IotaB13Circuit(b13_state.lanes, PERMUTATION - 1, flag=1)
    prover = MockProver.run(circuit, RC_B13)
    assert prover.verify() == []
    assert circuit.result[0].value == b13_state[0] + arith.round_constant_b13(PERMUTATION - 1)
    assert [cell.value for cell in circuit.result[1:]] == b13_state.lanes[1:]

    poke(prover, circuit.result[0], 1)
    assert failed(prover.verify()) == {(FailureKind.CONSTRAINT_NOT_SATISFIED, "iota b13: mixing")}

    inactive = IotaB13Circuit(b13_state.lanes, PERMUTATION - 1, flag=0)
    prover = MockProver.run(inactive, RC_B13)
    poke(prover, inactive.result[0], 1)
    assert prover.verify() == []


# ═══════════════════════════════════════════════════════════════════
# Absorb
# ═══════════════════════════════════════════════════════════════════

def test_absorb(xi_state):
    block = list(range(100, 117))
    circuit = AbsorbCircuit(xi_state.lanes, block, flag=1)
    prover = MockProver.run(circuit, [])
    assert prover.verify() == []
    assert [cell.value for cell in circuit.result] == arith.absorb(xi_state, block).lanes

    # Rate lane 16 is (1, 3); capacity lane (4, 4) is untouched.
    poke(prover, circuit.result[8], 0)
    assert failed(prover.verify()) == {(FailureKind.CONSTRAINT_NOT_SATISFIED, "absorb: rate lane 16")}
    assert circuit.result[24].value == xi_state[24]


@pytest.mark.parametrize("word, flat", [(1, 5), (5, 1), (16, 8)])
def test_absorb_word_lands_in_sponge_position(xi_state, word, flat):
    block = [0] * 17
    block[word] = 1
    circuit = AbsorbCircuit(xi_state.lanes, block, flag=1)
    MockProver.run(circuit, []).assert_satisfied()
    changed = [i for i, cell in enumerate(circuit.result) if cell.value != xi_state[i]]
    assert changed == [flat]


def test_absorb_inert_without_flag(xi_state):
    circuit = AbsorbCircuit(xi_state.lanes, [1] * 17, flag=0)
    prover = MockProver.run(circuit, [])
    poke(prover, circuit.result[0], 5)
    assert prover.verify() == []


def test_absorb_rejects_short_block(xi_state):
    with pytest.raises(ValueError):
        MockProver.run(AbsorbCircuit(xi_state.lanes, [0] * 16, flag=1), [])


# ═══════════════════════════════════════════════════════════════════
# Base conversion
# ═══════════════════════════════════════════════════════════════════

def test_base9_chunks():
    lane = 5 + 7 * 9**4 + 8 * 9**63
    chunks = base9_chunks(lane)
    assert len(chunks) == 16
    assert chunks[-1] == 5
    assert chunks[-2] == 7
    assert chunks[0] == 8 * 9**3
    assert convert_chunk(8 * 9**3 + 2) == 1
    assert base9_chunks(9**64) == [0] * 16


def test_base_conversion(xi_state):
    lanes = arith.iota_b9(xi_state, arith.round_constant_b9(0)).lanes
    circuit = BaseConversionCircuit(lanes)
    prover = MockProver.run(circuit, [])
    assert prover.verify() == []
    assert [cell.value for cell in circuit.result] == [convert_b9_lane_to_b13(lane) for lane in lanes]


def test_base_conversion_rejects_out_of_range_lane(xi_state):
    lanes = list(xi_state.lanes)
    lanes[6] = B9**64
    failures = MockProver.run(BaseConversionCircuit(lanes), []).verify()
    assert failed(failures) == {(FailureKind.PERMUTATION, "copy")}


def test_base_conversion_rejects_wrong_chunk(xi_state):
    circuit = BaseConversionCircuit(xi_state.lanes)
    prover = MockProver.run(circuit, [])
    poke(prover, circuit.result[2], circuit.result[2].value + 1)
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED, "base conversion running sum: output") in failed(prover.verify())


def test_base_conversion_inert_without_flag(xi_state):
    circuit = BaseConversionCircuit(xi_state.lanes, flag=0)
    prover = MockProver.run(circuit, [])
    poke(prover, circuit.result[2], circuit.result[2].value + 1)
    assert prover.verify() == []
