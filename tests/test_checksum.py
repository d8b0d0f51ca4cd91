import os

from hypothesis import given
from hypothesis import strategies as st

from singtun.checksum import checksum, set_ipv4, sum_bytes, sum_compat

CHUNK_SIZE = 9000
CHUNK_COUNT = 10


def test_sum_bytes_matches_compat_for_all_chunk_sizes():
    for size in range(0, CHUNK_SIZE + 1, 97):
        for _ in range(CHUNK_COUNT):
            data = os.urandom(size)
            assert sum_bytes(data) == sum_compat(data), size


@given(st.binary(max_size=CHUNK_SIZE))
def test_sum_bytes_matches_compat(data):
    assert sum_bytes(data) == sum_compat(data)


def test_sum_compat_empty():
    assert sum_compat(b"") == 0


def test_sum_compat_single_word():
    assert sum_compat(b"\x01\x02") == 0x0102


def test_sum_compat_odd_byte_is_high_byte():
    assert sum_compat(b"\x01") == 0x0100


@given(st.binary(max_size=200).filter(lambda b: len(b) % 2 == 0), st.binary(max_size=200))
def test_sum_is_additive_over_even_prefix(prefix, rest):
    assert sum_compat(prefix + rest) == sum_compat(prefix) + sum_compat(rest)


def test_checksum_ipv4_header_example():
    header = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")
    assert checksum(0, header) == bytes.fromhex("b861")


@given(st.binary(min_size=2, max_size=400).filter(lambda b: len(b) % 2 == 0))
def test_checksum_of_data_with_its_checksum_is_zero(data):
    zeroed = bytearray(data)
    zeroed[0:2] = b"\x00\x00"
    zeroed[0:2] = checksum(0, zeroed)
    assert checksum(0, zeroed) == b"\x00\x00"


@given(st.integers(min_value=0, max_value=0xFFFF), st.binary(max_size=100))
def test_initial_sum_equals_prepended_word(initial, data):
    assert checksum(initial, data) == checksum(0, initial.to_bytes(2, "big") + data)


def test_checksum_is_two_bytes():
    result = checksum(0xFFFFFFFF, os.urandom(CHUNK_SIZE))
    assert len(result) == 2


def test_checksum_of_all_ones_is_zero():
    assert checksum(0, b"\xff" * CHUNK_SIZE) == b"\x00\x00"


def test_set_ipv4_keeps_header_length():
    packet = bytearray([0x65, 0x00])
    set_ipv4(packet)
    assert packet[0] == 0x45
    assert packet[1] == 0x00


def test_set_ipv4_on_memoryview():
    buffer = bytearray([0x05])
    set_ipv4(memoryview(buffer))
    assert buffer[0] >> 4 == 4
    assert buffer[0] & 0x0F == 0x05