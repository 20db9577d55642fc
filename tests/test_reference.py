import pytest

from keccak_circuit.reference import (
    RATE_BYTES, absorb_block, bytes_to_words, keccak256, keccak_f, pad_block,
    rol, words_to_bytes, zero_state,
)

KECCAK_F_ZERO = [
    0xF1258F7940E1DDE7, 0x84D5CCF933C0478A, 0xD598261EA65AA9EE, 0xBD1547306F80494D,
    0x8B284E056253D057, 0xFF97A42D7F8E6FD4, 0x90FEE5A0A44647C4, 0x8C5BDA0CD6192E76,
    0xAD30A6F71B19059C, 0x30935AB7D08FFC64, 0xEB5AA93F2317D635, 0xA9A6E6260D712103,
    0x81A57C16DBCF555F, 0x43B831CD0347C826, 0x01F22F1A11A5569F, 0x05E5635A21D9AE61,
    0x64BEFEF28CC970F2, 0x613670957BC46611, 0xB87C5A554FD00ECB, 0x8C3EE88A1CCF32C8,
    0x940C7922AE3A2614, 0x1841F924A2C509E4, 0x16F53526E70465C2, 0x75F644E97F30A13B,
    0xEAF1FF7B5CECA249,
]


def test_rol():
    assert rol(1, 63) == 1 << 63
    assert rol(1 << 63, 1) == 1
    assert rol(0xDEADBEEF, 64) == 0xDEADBEEF


def test_keccak_f_of_zero_state():
    out = keccak_f(zero_state())
    assert [out[i % 5][i // 5] for i in range(25)] == KECCAK_F_ZERO


@pytest.mark.parametrize("data, digest", [
    (b"", "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"),
    (b"abc", "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"),
    (bytes(range(200)), "bfb0aa97863e797943cf7c33bb7e880bb4543f3d2703c0923c6901c2af57b890"),
    (b"\xab" * 136, "302db73a4c8cc8ecc9004fec3a6525d9d6a2dd4b098b1bf62d1b897acff18c9d"),
])
def test_keccak256(data, digest):
    assert keccak256(data).hex() == digest


def test_pad_block():
    words = pad_block(b"")
    assert len(words) == 17
    assert words[0] == 0x01
    assert words[16] == 0x80 << 56
    assert all(w == 0 for w in words[1:16])
    # The two pad bytes collapse into one when a single byte is free.
    assert pad_block(b"\x00" * (RATE_BYTES - 1))[16] == 0x81 << 56
    with pytest.raises(ValueError):
        pad_block(b"\x00" * RATE_BYTES)


def test_absorb_block_xors_rate():
    block = list(range(1, 18))
    state = absorb_block(zero_state(), block)
    assert state[1][0] == 2
    assert state[0][1] == 6
    assert state[1][3] == 17
    assert state[2][3] == 0
    assert absorb_block(state, block) == zero_state()
    with pytest.raises(ValueError):
        absorb_block(zero_state(), block[:16])


def test_byte_word_conversion():
    data = bytes(range(16))
    assert bytes_to_words(data) == [0x0706050403020100, 0x0F0E0D0C0B0A0908]
    assert words_to_bytes(bytes_to_words(data)) == data
