"""Internet checksum helpers (RFC 1071) for IP, TCP, UDP and ICMP headers."""

from __future__ import annotations

_UINT32_MASK = 0xFFFFFFFF


def sum_compat(data: bytes | bytearray | memoryview) -> int:
    """Add up ``data`` as big-endian 16-bit words into a 32-bit accumulator.

    An odd trailing byte counts as the high byte of a final word.
    """
    raw = bytes(data)
    length = len(raw)
    total = 0
    if length & 1:
        length -= 1
        total += raw[length] << 8
    even = raw[:length]
    total += (sum(even[0::2]) << 8) + sum(even[1::2])
    return total & _UINT32_MASK


def sum_bytes(data: bytes | bytearray | memoryview) -> int:
    """Return the 32-bit word sum of ``data``; the sum the checksums build on."""
    return sum_compat(data)


def checksum(initial: int, data: bytes | bytearray | memoryview) -> bytes:
    """Fold ``initial`` plus the word sum of ``data`` into a two-byte checksum."""
    total = (initial + sum_bytes(data)) & _UINT32_MASK
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    folded = ~total & 0xFFFF
    return folded.to_bytes(2, "big")


def set_ipv4(packet: bytearray | memoryview) -> None:
    """Set the version nibble of ``packet`` to 4, keeping the header length."""
    packet[0] = (packet[0] & 0x0F) | (4 << 4)