"""Views over raw ICMP and ICMPv6 messages that read and edit fields in place."""

from __future__ import annotations

import enum

from singtun.checksum import checksum as _checksum

_UINT16_MASK = 0xFFFF
_UINT32_MASK = 0xFFFFFFFF

ICMPV6_HEADER_SIZE = 4
ICMPV6_MINIMUM_SIZE = 8
ICMPV6_PAYLOAD_OFFSET = 8
ICMPV6_ECHO_MINIMUM_SIZE = 8
ICMPV6_ERROR_HEADER_SIZE = 8
ICMPV6_DST_UNREACHABLE_MINIMUM_SIZE = ICMPV6_MINIMUM_SIZE
ICMPV6_PACKET_TOO_BIG_MINIMUM_SIZE = ICMPV6_MINIMUM_SIZE
ICMPV6_CHECKSUM_OFFSET = 2
NDP_HOP_LIMIT = 255

_ICMPV6_POINTER_OFFSET = 4
_ICMPV6_MTU_OFFSET = 4
_ICMPV6_IDENT_OFFSET = 4
_ICMPV6_SEQUENCE_OFFSET = 6


def _as_buffer(data) -> bytearray | memoryview:
    if isinstance(data, (bytearray, memoryview)):
        return data
    return bytearray(data)


def _read16(data, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], "big")


def _write16(data, offset: int, value: int) -> None:
    data[offset : offset + 2] = (value & _UINT16_MASK).to_bytes(2, "big")


def _read32(data, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 4], "big")


def _write32(data, offset: int, value: int) -> None:
    data[offset : offset + 4] = (value & _UINT32_MASK).to_bytes(4, "big")


def _write_checksum(data, offset: int, value: bytes | int) -> None:
    if isinstance(value, int):
        _write16(data, offset, value)
    else:
        data[offset : offset + 2] = bytes(value[:2])


def _byte_member(cls, value):
    """Make a nameless member for a byte value that has no name of its own."""
    if isinstance(value, int) and 0 <= value <= 0xFF:
        member = int.__new__(cls, value)
        member._name_ = f"UNKNOWN_{value}"
        member._value_ = value
        return member
    return None


class ICMPType(enum.IntEnum):
    """ICMP message types for echo."""

    PING_REQUEST = 0x8
    PING_RESPONSE = 0x0

    @classmethod
    def _missing_(cls, value):
        return _byte_member(cls, value)


class ICMPPacket:
    """An ICMP message; a bytearray or writable memoryview is edited in place."""

    def __init__(self, data) -> None:
        self.data = _as_buffer(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @property
    def type(self) -> ICMPType:
        return ICMPType(self.data[0])

    @type.setter
    def type(self, value: int) -> None:
        self.data[0] = int(value) & 0xFF

    @property
    def code(self) -> int:
        return self.data[1]

    @property
    def checksum(self) -> int:
        return _read16(self.data, 2)

    @checksum.setter
    def checksum(self, value: bytes | int) -> None:
        _write_checksum(self.data, 2, value)

    def reset_checksum(self) -> None:
        """Recompute the checksum over the whole message."""
        self.data[2:4] = b"\x00\x00"
        self.data[2:4] = _checksum(0, self.data)


class ICMPv6Type(enum.IntEnum):
    """ICMPv6 message types."""

    DST_UNREACHABLE = 1
    PACKET_TOO_BIG = 2
    TIME_EXCEEDED = 3
    PARAM_PROBLEM = 4
    ECHO_REQUEST = 128
    ECHO_REPLY = 129
    MULTICAST_LISTENER_QUERY = 130
    MULTICAST_LISTENER_REPORT = 131
    MULTICAST_LISTENER_DONE = 132
    ROUTER_SOLICIT = 133
    ROUTER_ADVERT = 134
    NEIGHBOR_SOLICIT = 135
    NEIGHBOR_ADVERT = 136
    REDIRECT_MSG = 137

    @classmethod
    def _missing_(cls, value):
        return _byte_member(cls, value)

    def is_error_type(self) -> bool:
        """Error messages are those with the high bit of the type clear."""
        return int(self) & 0x80 == 0


class ICMPv6Code(enum.IntEnum):
    """ICMPv6 codes; the same value means different things for different types."""

    NETWORK_UNREACHABLE = 0
    PROHIBITED = 1
    BEYOND_SCOPE = 2
    ADDRESS_UNREACHABLE = 3
    PORT_UNREACHABLE = 4
    POLICY = 5
    REJECT_ROUTE = 6

    HOP_LIMIT_EXCEEDED = 0
    REASSEMBLY_TIMEOUT = 1

    ERRONEOUS_HEADER = 0
    UNKNOWN_HEADER = 1
    UNKNOWN_OPTION = 2

    UNUSED_CODE = 0

    @classmethod
    def _missing_(cls, value):
        return _byte_member(cls, value)


class ICMPv6Packet:
    """An ICMPv6 message; a bytearray or writable memoryview is edited in place."""

    def __init__(self, data) -> None:
        self.data = _as_buffer(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @property
    def type(self) -> ICMPv6Type:
        return ICMPv6Type(self.data[0])

    @type.setter
    def type(self, value: int) -> None:
        self.data[0] = int(value) & 0xFF

    @property
    def code(self) -> ICMPv6Code:
        return ICMPv6Code(self.data[1])

    @code.setter
    def code(self, value: int) -> None:
        self.data[1] = int(value) & 0xFF

    @property
    def type_specific(self) -> int:
        return _read32(self.data, _ICMPV6_POINTER_OFFSET)

    @type_specific.setter
    def type_specific(self, value: int) -> None:
        _write32(self.data, _ICMPV6_POINTER_OFFSET, value)

    @property
    def checksum(self) -> int:
        return _read16(self.data, ICMPV6_CHECKSUM_OFFSET)

    @checksum.setter
    def checksum(self, value: bytes | int) -> None:
        _write_checksum(self.data, ICMPV6_CHECKSUM_OFFSET, value)

    @property
    def source_port(self) -> int:
        """Always 0: ICMPv6 has no ports. Writes are ignored."""
        return 0

    @source_port.setter
    def source_port(self, port: int) -> None:
        pass

    @property
    def destination_port(self) -> int:
        """Always 0: ICMPv6 has no ports. Writes are ignored."""
        return 0

    @destination_port.setter
    def destination_port(self, port: int) -> None:
        pass

    @property
    def mtu(self) -> int:
        return _read32(self.data, _ICMPV6_MTU_OFFSET)

    @mtu.setter
    def mtu(self, value: int) -> None:
        _write32(self.data, _ICMPV6_MTU_OFFSET, value)

    @property
    def ident(self) -> int:
        return _read16(self.data, _ICMPV6_IDENT_OFFSET)

    @ident.setter
    def ident(self, value: int) -> None:
        _write16(self.data, _ICMPV6_IDENT_OFFSET, value)

    @property
    def sequence(self) -> int:
        return _read16(self.data, _ICMPV6_SEQUENCE_OFFSET)

    @sequence.setter
    def sequence(self, value: int) -> None:
        _write16(self.data, _ICMPV6_SEQUENCE_OFFSET, value)

    @property
    def message_body(self) -> memoryview:
        """Everything after the four-byte header, shared with the packet."""
        return memoryview(self.data)[ICMPV6_HEADER_SIZE:]

    @property
    def payload(self) -> memoryview:
        """Everything after the eight-byte header, shared with the packet."""
        return memoryview(self.data)[ICMPV6_PAYLOAD_OFFSET:]

    def reset_checksum(self, pseudo_sum: int) -> None:
        """Recompute the checksum from the pseudo header sum and the message."""
        offset = ICMPV6_CHECKSUM_OFFSET
        self.data[offset : offset + 2] = b"\x00\x00"
        self.data[offset : offset + 2] = _checksum(pseudo_sum, self.data)