import random

import pytest

from circuits import RhoCircuit
from keccak_circuit import keccak_arith as arith
from keccak_circuit.arith_helpers import (
    convert_b13_lane_to_b9, from_radix_le, state_to_lanes,
)
from keccak_circuit.defs import B13, LANE_SIZE, ROTATION_CONSTANTS, lane_position
from keccak_circuit.gates import rho_checks
from keccak_circuit.gates.rho_helpers import RhoLane, get_step_size, slice_lane
from keccak_circuit.plonk import FailureKind, MockProver

ALL_ONES = from_radix_le([1] * LANE_SIZE, B13)

# Every digit at the largest value Theta can produce; the special chunk
# splits its 12 between digits 0 and 64.
ALL_TWELVES = from_radix_le([6] + [12] * (LANE_SIZE - 1) + [6], B13)


def rotation(idx):
    x, y = lane_position(idx)
    return ROTATION_CONSTANTS[x][y]


def prove(lanes):
    circuit = RhoCircuit(lanes)
    prover = MockProver.run(circuit, [])
    return circuit, prover.verify()


# ═══════════════════════════════════════════════════════════════════
# Chunking
# ═══════════════════════════════════════════════════════════════════

def test_chunks_cover_digits_1_to_63():
    for row in ROTATION_CONSTANTS:
        for r in row:
            slices = slice_lane(r)
            assert slices[0][0] == 1
            assert sum(step for _, step in slices) == LANE_SIZE - 1
            starts = {idx for idx, _ in slices}
            if r:
                assert LANE_SIZE - r in starts


def test_step_size():
    assert get_step_size(1, 0) == 4
    assert get_step_size(61, 0) == 3
    # Rotation 36 wraps at input digit 28.
    assert get_step_size(25, 36) == 3
    assert get_step_size(28, 36) == 4


def test_witness_matches_conversion():
    lane = arith.theta(arith.StateBigInt(state_to_lanes([[0x1234_5678_9ABC_DEF0] * 5] * 5)))[7]
    conversions, special = RhoLane(lane, 10).get_full_witness()
    assert conversions[0].input_acc == lane
    assert special.output_acc_post == convert_b13_lane_to_b9(lane, 10)
    assert special.input_acc == lane % B13 + (lane // B13**LANE_SIZE) * B13**LANE_SIZE


# ═══════════════════════════════════════════════════════════════════
# Honest lanes
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("lanes", [
    [0] * 25,
    [ALL_TWELVES] * 25,
    [from_radix_le([11] * LANE_SIZE + [1], B13)] * 25,
], ids=["zero", "digit bound", "elevens"])
def test_boundary_lanes(lanes):
    circuit, failures = prove(lanes)
    assert failures == []
    assert [cell.value for cell in circuit.result] == [
        convert_b13_lane_to_b9(lane, rotation(idx)) for idx, lane in enumerate(lanes)
    ]


def test_theta_output():
    rng = random.Random(13)
    state = [[rng.getrandbits(64) for _ in range(5)] for _ in range(5)]
    lanes = arith.theta(arith.StateBigInt(state_to_lanes(state))).lanes
    circuit, failures = prove(lanes)
    assert failures == []
    assert [cell.value for cell in circuit.result] == arith.rho(arith.StateBigInt(lanes)).lanes


# ═══════════════════════════════════════════════════════════════════
# Overflowing chunks
# ═══════════════════════════════════════════════════════════════════

def overflowing(target_rotation, target_idx, target_step):
    """RhoLane that pulls one extra digit into the chunk at target_idx."""

    class Overflowing(RhoLane):
        def chunk_digits(self, chunk_idx, step):
            digits = super().chunk_digits(chunk_idx, step)
            if self.rotation != target_rotation:
                return digits
            if chunk_idx == target_idx:
                return digits + [self.digits[chunk_idx + step]]
            if chunk_idx == target_idx + target_step:
                return [0] + digits[1:]
            return digits

    return Overflowing


def first_chunk_of_step(wanted):
    for row in ROTATION_CONSTANTS:
        for r in row:
            for chunk_idx, step in slice_lane(r):
                if step == wanted and chunk_idx + step < LANE_SIZE:
                    return r, chunk_idx, step
    raise LookupError(wanted)


def test_step1_overflow_rejected(monkeypatch):
    monkeypatch.setattr(rho_checks, "RhoLane", overflowing(*first_chunk_of_step(1)))
    _, failures = prove([ALL_ONES] * 25)
    names = {(f.kind, f.name) for f in failures}
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED,
            "rho block count step 1: step 1 chunk has no overflow") in names


def test_step2_overflow_rejected(monkeypatch):
    monkeypatch.setattr(rho_checks, "RhoLane", overflowing(*first_chunk_of_step(2)))
    _, failures = prove([ALL_ONES] * 25)
    names = {(f.kind, f.name) for f in failures}
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED,
            "rho block count final: step 2 block count in range") in names
    assert all(f.kind is not FailureKind.LOOKUP for f in failures)


def test_step3_overflow_rejected(monkeypatch):
    monkeypatch.setattr(rho_checks, "RhoLane", overflowing(*first_chunk_of_step(3)))
    _, failures = prove([ALL_ONES] * 25)
    names = {(f.kind, f.name) for f in failures}
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED,
            "rho block count final: step 3 block count in range") in names
    assert all(f.kind is not FailureKind.LOOKUP for f in failures)


def test_tampered_special_chunk_rejected(monkeypatch):
    class SkipsDigit(RhoLane):
        def chunk_digits(self, chunk_idx, step):
            digits = super().chunk_digits(chunk_idx, step)
            if chunk_idx == 1:
                return [0] + digits[1:]
            return digits

    monkeypatch.setattr(rho_checks, "RhoLane", SkipsDigit)
    _, failures = prove([ALL_ONES] * 25)
    assert {f.name for f in failures if f.kind is FailureKind.LOOKUP} == {"rho special chunk"}
