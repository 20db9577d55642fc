import pytest

from keccak_circuit.ast import mul, sub
from keccak_circuit.defs import FIELD_MODULUS
from keccak_circuit.plonk import (
    Circuit, ColumnKind, ConfigurationError, ConstraintSystem, FailureKind,
    Layouter, MockProver, VerificationError,
)


class CounterCircuit(Circuit):
    """Counts up by the public step: a' = a + i, with a lookup and copies."""

    def __init__(self, start, steps, table=(0, 1, 2, 3, 4, 5)):
        self.start = start
        self.steps = steps
        self.table = table
        self.cells = None

    @classmethod
    def configure(cls, meta):
        q = meta.selector()
        q_lookup = meta.complex_selector()
        a = meta.advice_column()
        b = meta.advice_column()
        step = meta.instance_column()
        t = meta.lookup_table_column()
        meta.enable_equality(a)
        meta.enable_equality(b)
        meta.enable_equality(step)
        meta.create_gate("count", lambda vc: [
            ("a' = a + b", mul(vc.query_selector(q), sub(
                vc.query_advice(a, 1), vc.query_advice(a), vc.query_advice(b),
            ))),
        ])
        meta.lookup("small step", lambda vc: [
            (mul(vc.query_selector(q_lookup), vc.query_advice(b)), t),
        ])
        return q, q_lookup, a, b, step, t

    def synthesize(self, config, layouter):
        q, q_lookup, a, b, step, t = config
        layouter.assign_table("small", lambda table: table.assign_column("small", t, list(self.table)))

        def body(region):
            cells = [region.assign_advice_from_constant("start", a, 0, self.start)]
            for offset in range(len(self.steps)):
                region.enable_selector(q, offset)
                region.enable_selector(q_lookup, offset)
                region.assign_advice_from_instance("step", step, offset, b, offset)
                cells.append(region.assign_advice("a", a, offset + 1, cells[-1].value + self.steps[offset]))
            return cells

        self.cells = layouter.assign_region("counter", body)

        def copy(region):
            region.copy_advice("last", self.cells[-1], b, 0)

        layouter.assign_region("copy out", copy)


def run(start=1, steps=(1, 2, 3)):
    circuit = CounterCircuit(start, list(steps))
    return circuit, MockProver.run(circuit, [list(steps)])


def poke(prover, cell, value):
    prover.assignment.values[(cell.cell.column, cell.cell.row)] = value % FIELD_MODULUS


# ═══════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════

def test_gate_requires_selector():
    meta = ConstraintSystem()
    a = meta.advice_column()
    with pytest.raises(ConfigurationError):
        meta.create_gate("ungated", lambda vc: [("a", vc.query_advice(a))])


def test_gate_requires_polynomials():
    with pytest.raises(ConfigurationError):
        ConstraintSystem().create_gate("empty", lambda vc: [])


def test_lookup_requires_complex_selector():
    meta = ConstraintSystem()
    q = meta.selector()
    a = meta.advice_column()
    t = meta.lookup_table_column()
    with pytest.raises(ConfigurationError):
        meta.lookup("simple", lambda vc: [(mul(vc.query_selector(q), vc.query_advice(a)), t)])
    with pytest.raises(ConfigurationError):
        meta.lookup("ungated", lambda vc: [(vc.query_advice(a), t)])


def test_lookup_reads_each_table_column_once():
    meta = ConstraintSystem()
    q = meta.complex_selector()
    a = meta.advice_column()
    t = meta.lookup_table_column()
    with pytest.raises(ConfigurationError):
        meta.lookup("twice", lambda vc: [
            (mul(vc.query_selector(q), vc.query_advice(a)), t),
            (mul(vc.query_selector(q), vc.query_advice(a)), t),
        ])
    with pytest.raises(ConfigurationError):
        meta.lookup("empty", lambda vc: [])


def test_queries_check_column_kind():
    meta = ConstraintSystem()
    fixed = meta.fixed_column()
    with pytest.raises(ConfigurationError):
        meta.create_gate("bad", lambda vc: [("a", vc.query_advice(fixed))])
    with pytest.raises(ConfigurationError):
        meta.create_gate("bad", lambda vc: [("i", vc.query_instance(fixed))])
    assert meta.num_columns(ColumnKind.FIXED) == 1
    assert meta.num_columns(ColumnKind.ADVICE) == 0


def test_instance_count_mismatch():
    with pytest.raises(ConfigurationError):
        MockProver.run(CounterCircuit(1, [1]), [])


# ═══════════════════════════════════════════════════════════════════
# Layout
# ═══════════════════════════════════════════════════════════════════

def test_cell_assigned_twice():
    meta = ConstraintSystem()
    a = meta.advice_column()
    layouter = Layouter(meta, [])

    def body(region):
        region.assign_advice("x", a, 0, 1)
        region.assign_advice("x", a, 0, 2)

    with pytest.raises(ConfigurationError):
        layouter.assign_region("twice", body)


def test_copy_requires_equality():
    meta = ConstraintSystem()
    a = meta.advice_column()
    b = meta.advice_column()
    meta.enable_equality(a)
    layouter = Layouter(meta, [])
    cell = layouter.assign_region("src", lambda region: region.assign_advice("x", a, 0, 1))
    with pytest.raises(ConfigurationError):
        layouter.assign_region("dst", lambda region: region.copy_advice("x", cell, b, 0))


def test_regions_are_stacked():
    meta = ConstraintSystem()
    a = meta.advice_column()
    layouter = Layouter(meta, [])
    layouter.assign_region("first", lambda region: region.assign_advice("x", a, 2, 1))
    cell = layouter.assign_region("second", lambda region: region.assign_advice("x", a, 0, 1))
    assert cell.cell.row == 3
    assert layouter.assignment.num_rows == 4
    assert layouter.assignment.region_at(3) == "second"
    assert layouter.assignment.value(a, 1) == 0


def test_table_filled_in_order():
    meta = ConstraintSystem()
    t = meta.lookup_table_column()
    layouter = Layouter(meta, [])
    with pytest.raises(ConfigurationError):
        layouter.assign_table("gap", lambda table: table.assign_cell("t", t, 1, 5))


def test_unloaded_table():
    class NoTable(CounterCircuit):
        def synthesize(self, config, layouter):
            q, q_lookup, a, b, step, t = config
            layouter.assign_region(
                "lookup only", lambda region: region.enable_selector(q_lookup, 0),
            )

    prover = MockProver.run(NoTable(0, []), [[]])
    with pytest.raises(ConfigurationError):
        prover.verify()


# ═══════════════════════════════════════════════════════════════════
# Verification
# ═══════════════════════════════════════════════════════════════════

def test_satisfied():
    circuit, prover = run()
    assert prover.verify() == []
    prover.assert_satisfied()
    assert circuit.cells[-1].value == 7


def test_gate_failure():
    circuit, prover = run()
    poke(prover, circuit.cells[2], 100)
    kinds = {(f.kind, f.name) for f in prover.verify()}
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED, "count: a' = a + b") in kinds


def test_lookup_failure():
    circuit, prover = run(steps=(1, 9))
    failures = prover.verify()
    assert [(f.kind, f.name, f.row, f.region) for f in failures] == [
        (FailureKind.LOOKUP, "small step", 1, "counter"),
    ]


def test_permutation_failure():
    circuit, prover = run()
    poke(prover, circuit.cells[-1], 0)
    kinds = {f.kind for f in prover.verify()}
    assert FailureKind.PERMUTATION in kinds


def test_constant_failure():
    circuit, prover = run()
    poke(prover, circuit.cells[0], 2)
    kinds = {f.kind for f in prover.verify()}
    assert FailureKind.CONSTANT in kinds


def test_assert_satisfied_raises_with_failures():
    circuit, prover = run()
    poke(prover, circuit.cells[1], 5)
    with pytest.raises(VerificationError) as excinfo:
        prover.assert_satisfied()
    assert excinfo.value.failures
    assert "constraints not satisfied" in str(excinfo.value)
