from keccak_circuit.gates.tables import (
    base13_to_base9_rows, from_base9_rows, get_block_count, special_chunk_rows,
)


def test_block_count():
    assert get_block_count([]) == 0
    assert get_block_count([1, 0, 0, 0]) == 0
    assert get_block_count([0, 5]) == 1
    assert get_block_count([0, 0, 1]) == 13
    assert get_block_count([0, 0, 0, 12]) == 170


def test_base13_to_base9():
    rows = base13_to_base9_rows()
    assert len(rows) == 13**4
    assert rows[0] == (0, 0, 0)
    assert all(row[0] == value for value, row in enumerate(rows))
    assert rows[12] == (12, 0, 0)
    assert rows[13] == (13, 9, 1)
    assert rows[13**3] == (13**3, 9**3, 170)
    assert rows[1 + 3 * 13**2] == (1 + 3 * 13**2, 1 + 81, 13)
    assert rows[-1] == (13**4 - 1, 0, 170)


def test_special_chunk():
    rows = special_chunk_rows()
    assert len(rows) == 91
    assert rows[0] == (0, 0)
    table = dict(rows)
    assert table[1] == 1
    assert table[13**64] == 1
    assert table[1 + 13**64] == 0
    assert table[6 + 6 * 13**64] == 0
    assert table[12] == 0
    assert 7 + 6 * 13**64 not in table
    assert 13 not in table


def test_from_base9():
    rows = from_base9_rows()
    assert len(rows) == 9**4
    assert rows[0] == (0, 0)
    assert rows[2] == (2, 1)
    assert rows[4] == (4, 0)
    assert rows[3 * 9] == (27, 13)
    assert rows[6 * 9**3 + 8] == (6 * 9**3 + 8, 13**3)
