"""Views over raw TCP and UDP segments that read and edit header fields in place."""

from __future__ import annotations

import enum
import ipaddress

from singtun.checksum import checksum as _checksum
from singtun.checksum import sum_bytes
from singtun.ip import InvalidChecksumError, IPProtocol

_UINT16_MASK = 0xFFFF
_UINT32_MASK = 0xFFFFFFFF

TCP_HEADER_SIZE = 20
UDP_HEADER_SIZE = 8

_TCP_CHECKSUM_OFFSET = 16
_UDP_CHECKSUM_OFFSET = 6


class TCPFlag(enum.IntFlag):
    """Control bits of a TCP header."""

    FIN = 1 << 0
    SYN = 1 << 1
    RST = 1 << 2
    PSH = 1 << 3
    ACK = 1 << 4
    URG = 1 << 5
    ECE = 1 << 6
    CWR = 1 << 7
    NS = 1 << 8


def _as_buffer(data) -> bytearray | memoryview:
    if isinstance(data, (bytearray, memoryview)):
        return data
    return bytearray(data)


def _read16(data, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], "big")


def _write16(data, offset: int, value: int) -> None:
    data[offset : offset + 2] = (value & _UINT16_MASK).to_bytes(2, "big")


def _write_checksum(data, offset: int, value: bytes | int) -> None:
    if isinstance(value, int):
        _write16(data, offset, value)
    else:
        data[offset : offset + 2] = bytes(value[:2])


def _address_bytes(address) -> bytes:
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return address.packed
    return bytes(address)


class TCPPacket:
    """A TCP segment; a bytearray or writable memoryview is edited in place."""

    def __init__(self, data) -> None:
        self.data = _as_buffer(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @property
    def source_port(self) -> int:
        return _read16(self.data, 0)

    @source_port.setter
    def source_port(self, port: int) -> None:
        _write16(self.data, 0, port)

    @property
    def destination_port(self) -> int:
        return _read16(self.data, 2)

    @destination_port.setter
    def destination_port(self, port: int) -> None:
        _write16(self.data, 2, port)

    @property
    def flags(self) -> TCPFlag:
        return TCPFlag(self.data[13] | (self.data[12] & 0x1))

    @property
    def checksum(self) -> int:
        return _read16(self.data, _TCP_CHECKSUM_OFFSET)

    @checksum.setter
    def checksum(self, value: bytes | int) -> None:
        _write_checksum(self.data, _TCP_CHECKSUM_OFFSET, value)

    def reset_checksum(self, pseudo_sum: int) -> None:
        """Recompute the checksum from the pseudo header sum and the segment."""
        offset = _TCP_CHECKSUM_OFFSET
        self.data[offset : offset + 2] = b"\x00\x00"
        self.data[offset : offset + 2] = _checksum(pseudo_sum, self.data)

    def valid(self) -> bool:
        return len(self.data) >= TCP_HEADER_SIZE

    def verify(self, source_address, target_address) -> None:
        """Raise InvalidChecksumError if the checksum does not match the addresses."""
        scratch = bytearray(self.data)
        offset = _TCP_CHECKSUM_OFFSET
        stored = bytes(scratch[offset : offset + 2])
        scratch[offset : offset + 2] = b"\x00\x00"
        total = (
            sum_bytes(_address_bytes(source_address))
            + sum_bytes(_address_bytes(target_address))
            + IPProtocol.TCP
            + len(scratch)
        ) & _UINT32_MASK
        if _checksum(total, scratch) != stored:
            raise InvalidChecksumError()


class UDPPacket:
    """A UDP datagram; a bytearray or writable memoryview is edited in place."""

    def __init__(self, data) -> None:
        self.data = _as_buffer(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @property
    def length(self) -> int:
        return _read16(self.data, 4)

    @length.setter
    def length(self, length: int) -> None:
        _write16(self.data, 4, length)

    @property
    def source_port(self) -> int:
        return _read16(self.data, 0)

    @source_port.setter
    def source_port(self, port: int) -> None:
        _write16(self.data, 0, port)

    @property
    def destination_port(self) -> int:
        return _read16(self.data, 2)

    @destination_port.setter
    def destination_port(self, port: int) -> None:
        _write16(self.data, 2, port)

    @property
    def payload(self) -> memoryview:
        """The bytes after the header up to the length field, shared with the packet."""
        return memoryview(self.data)[UDP_HEADER_SIZE : self.length]

    @property
    def checksum(self) -> int:
        return _read16(self.data, _UDP_CHECKSUM_OFFSET)

    @checksum.setter
    def checksum(self, value: bytes | int) -> None:
        _write_checksum(self.data, _UDP_CHECKSUM_OFFSET, value)

    def reset_checksum(self, pseudo_sum: int) -> None:
        """Recompute the checksum from the pseudo header sum and the datagram."""
        offset = _UDP_CHECKSUM_OFFSET
        self.data[offset : offset + 2] = b"\x00\x00"
        self.data[offset : offset + 2] = _checksum(pseudo_sum, self.data)

    def valid(self) -> bool:
        return (
            len(self.data) >= UDP_HEADER_SIZE
            and (len(self.data) & _UINT16_MASK) >= self.length
        )