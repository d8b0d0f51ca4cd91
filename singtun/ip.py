"""Views over raw IPv4 and IPv6 packets that read and edit header fields in place."""

from __future__ import annotations

import enum
import ipaddress

from singtun.checksum import checksum as _checksum
from singtun.checksum import sum_bytes

_UINT16_MASK = 0xFFFF
_UINT32_MASK = 0xFFFFFFFF

FLAG_DONT_FRAGMENT = 1 << 1
FLAG_MORE_FRAGMENT = 1 << 2

IPV4_HEADER_SIZE = 20
IPV4_VERSION = 4
IPV4_OPTIONS_OFFSET = 20
IPV4_PACKET_MIN_LENGTH = IPV4_OPTIONS_OFFSET
IPV4_IHL_STRIDE = 4

IPV6_ADDRESS_SIZE = 16
IPV6_PAYLOAD_LEN_OFFSET = 4
IPV6_NEXT_HEADER_OFFSET = 6
_IPV6_HOP_LIMIT_OFFSET = 7
_IPV6_SRC_ADDR = 8
_IPV6_DST_ADDR = _IPV6_SRC_ADDR + IPV6_ADDRESS_SIZE
IPV6_FIXED_HEADER_SIZE = _IPV6_DST_ADDR + IPV6_ADDRESS_SIZE
IPV6_MINIMUM_SIZE = IPV6_FIXED_HEADER_SIZE
IPV6_VERSION = 6
IPV6_MINIMUM_MTU = 1280


class PacketError(ValueError):
    """Base class for malformed packets."""


class InvalidLengthError(PacketError):
    """The packet is shorter than its headers say."""

    def __init__(self, message: str = "invalid packet length") -> None:
        super().__init__(message)


class InvalidIPVersionError(PacketError):
    """The version field does not match the packet type."""

    def __init__(self, message: str = "invalid ip version") -> None:
        super().__init__(message)


class InvalidChecksumError(PacketError):
    """The stored checksum does not match the computed one."""

    def __init__(self, message: str = "invalid checksum") -> None:
        super().__init__(message)


class IPProtocol(enum.IntEnum):
    """Transport protocol numbers carried in IP headers."""

    ICMP = 0x01
    TCP = 0x06
    UDP = 0x11
    ICMPV6 = 0x3A


def _as_buffer(data) -> bytearray | memoryview:
    if isinstance(data, (bytearray, memoryview)):
        return data
    return bytearray(data)


def _read16(data, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], "big")


def _write16(data, offset: int, value: int) -> None:
    data[offset : offset + 2] = (value & _UINT16_MASK).to_bytes(2, "big")


class IPv4Packet:
    """An IPv4 packet; a bytearray or writable memoryview is edited in place."""

    def __init__(self, data) -> None:
        self.data = _as_buffer(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @property
    def total_length(self) -> int:
        return _read16(self.data, 2)

    @total_length.setter
    def total_length(self, length: int) -> None:
        _write16(self.data, 2, length)

    @property
    def header_length(self) -> int:
        return (self.data[0] & 0x0F) * 4

    @header_length.setter
    def header_length(self, length: int) -> None:
        self.data[0] = (self.data[0] & 0xF0) | ((length // 4) & 0x0F)

    @property
    def type_of_service(self) -> int:
        return self.data[1]

    @type_of_service.setter
    def type_of_service(self, tos: int) -> None:
        self.data[1] = tos & 0xFF

    @property
    def identification(self) -> int:
        return _read16(self.data, 4)

    @identification.setter
    def identification(self, ident: int) -> None:
        _write16(self.data, 4, ident)

    @property
    def flags(self) -> int:
        return self.data[6] >> 5

    @flags.setter
    def flags(self, flags: int) -> None:
        self.data[6] = (self.data[6] & 0x1F) | ((flags << 5) & 0xFF)

    @property
    def fragment_offset(self) -> int:
        return (((self.data[6] & 0x7) << 8) | self.data[7]) * 8

    @fragment_offset.setter
    def fragment_offset(self, offset: int) -> None:
        flags = self.flags
        _write16(self.data, 6, offset // 8)
        self.flags = flags

    @property
    def data_length(self) -> int:
        return (self.total_length - self.header_length) & _UINT16_MASK

    @property
    def payload(self) -> memoryview:
        """The bytes between the header and the total length, shared with the packet."""
        return memoryview(self.data)[self.header_length : self.total_length]

    @property
    def protocol(self) -> int:
        return self.data[9]

    @protocol.setter
    def protocol(self, protocol: int) -> None:
        self.data[9] = protocol & 0xFF

    @property
    def source_ip(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(bytes(self.data[12:16]))

    @source_ip.setter
    def source_ip(self, address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> None:
        # Addresses of the other family are ignored.
        if isinstance(address, ipaddress.IPv4Address):
            self.data[12:16] = address.packed

    @property
    def destination_ip(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(bytes(self.data[16:20]))

    @destination_ip.setter
    def destination_ip(self, address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> None:
        if isinstance(address, ipaddress.IPv4Address):
            self.data[16:20] = address.packed

    @property
    def checksum(self) -> int:
        return _read16(self.data, 10)

    @checksum.setter
    def checksum(self, value: bytes | int) -> None:
        if isinstance(value, int):
            _write16(self.data, 10, value)
        else:
            self.data[10:12] = bytes(value[:2])

    @property
    def time_to_live(self) -> int:
        return self.data[8]

    @time_to_live.setter
    def time_to_live(self, ttl: int) -> None:
        self.data[8] = ttl & 0xFF

    def dec_time_to_live(self) -> None:
        """Decrease the TTL by one, wrapping at zero."""
        self.data[8] = (self.data[8] - 1) & 0xFF

    def reset_checksum(self) -> None:
        """Recompute the header checksum."""
        self.data[10:12] = b"\x00\x00"
        self.data[10:12] = _checksum(0, self.data[: self.header_length])

    def pseudo_sum(self) -> int:
        """Word sum of the pseudo header used by TCP and UDP checksums."""
        total = sum_bytes(self.data[12:20]) + self.protocol + self.data_length
        return total & _UINT32_MASK

    def valid(self) -> bool:
        return (
            len(self.data) >= IPV4_HEADER_SIZE
            and self.total_length >= self.header_length
            and (len(self.data) & _UINT16_MASK) >= self.total_length
        )

    def verify(self) -> None:
        """Raise a PacketError if the length, version or checksum is wrong."""
        if len(self.data) < IPV4_PACKET_MIN_LENGTH:
            raise InvalidLengthError()
        header_length = (self.data[0] & 0x0F) * 4
        packet_length = _read16(self.data, 2)
        if self.data[0] >> 4 != IPV4_VERSION:
            raise InvalidIPVersionError()
        if (len(self.data) & _UINT16_MASK) < packet_length or packet_length < header_length:
            raise InvalidLengthError()
        scratch = bytearray(self.data[: max(header_length, 12)])
        stored = bytes(scratch[10:12])
        scratch[10:12] = b"\x00\x00"
        if _checksum(0, scratch[:header_length]) != stored:
            raise InvalidChecksumError()


class IPv6Packet:
    """An IPv6 packet; a bytearray or writable memoryview is edited in place."""

    def __init__(self, data) -> None:
        self.data = _as_buffer(data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @property
    def payload_length(self) -> int:
        return _read16(self.data, IPV6_PAYLOAD_LEN_OFFSET)

    @payload_length.setter
    def payload_length(self, length: int) -> None:
        _write16(self.data, IPV6_PAYLOAD_LEN_OFFSET, length)

    @property
    def hop_limit(self) -> int:
        return self.data[_IPV6_HOP_LIMIT_OFFSET]

    @hop_limit.setter
    def hop_limit(self, value: int) -> None:
        self.data[_IPV6_HOP_LIMIT_OFFSET] = value & 0xFF

    @property
    def next_header(self) -> int:
        return self.data[IPV6_NEXT_HEADER_OFFSET]

    @next_header.setter
    def next_header(self, value: int) -> None:
        self.data[IPV6_NEXT_HEADER_OFFSET] = value & 0xFF

    @property
    def protocol(self) -> int:
        return self.next_header

    @protocol.setter
    def protocol(self, value: int) -> None:
        self.next_header = value

    @property
    def payload(self) -> memoryview:
        """The payload after the fixed header, shared with the packet."""
        start = IPV6_MINIMUM_SIZE
        return memoryview(self.data)[start : start + self.payload_length]

    @property
    def source_ip(self) -> ipaddress.IPv6Address:
        return ipaddress.IPv6Address(bytes(self.data[_IPV6_SRC_ADDR:_IPV6_DST_ADDR]))

    @source_ip.setter
    def source_ip(self, address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> None:
        # Addresses of the other family are ignored.
        if isinstance(address, ipaddress.IPv6Address):
            self.data[_IPV6_SRC_ADDR:_IPV6_DST_ADDR] = address.packed

    @property
    def destination_ip(self) -> ipaddress.IPv6Address:
        return ipaddress.IPv6Address(bytes(self.data[_IPV6_DST_ADDR:IPV6_FIXED_HEADER_SIZE]))

    @destination_ip.setter
    def destination_ip(self, address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> None:
        if isinstance(address, ipaddress.IPv6Address):
            self.data[_IPV6_DST_ADDR:IPV6_FIXED_HEADER_SIZE] = address.packed

    @property
    def checksum(self) -> int:
        """Always 0: the IPv6 header carries no checksum."""
        return 0

    @property
    def tos(self) -> tuple[int, int]:
        """The traffic class and the flow label."""
        word = int.from_bytes(self.data[0:4], "big")
        return (word >> 20) & 0xFF, word & 0xFFFFF

    def set_tos(self, traffic_class: int, flow_label: int) -> None:
        """Write version 6, the traffic class and the flow label."""
        word = (6 << 28) | ((traffic_class & 0xFF) << 20) | (flow_label & 0xFFFFF)
        self.data[0:4] = (word & _UINT32_MASK).to_bytes(4, "big")

    def dec_time_to_live(self) -> None:
        """Decrease the hop limit by one, wrapping at zero."""
        offset = _IPV6_HOP_LIMIT_OFFSET
        self.data[offset] = (self.data[offset] - 1) & 0xFF

    def reset_checksum(self) -> int:
        """Leave the packet unchanged, as IPv6 has no header checksum, and return it (0)."""
        return self.checksum

    def pseudo_sum(self) -> int:
        """Word sum of the pseudo header used by upper-layer checksums."""
        total = (
            sum_bytes(self.data[_IPV6_SRC_ADDR:IPV6_FIXED_HEADER_SIZE])
            + self.protocol
            + self.payload_length
        )
        return total & _UINT32_MASK

    def valid(self) -> bool:
        return (
            len(self.data) >= IPV6_MINIMUM_SIZE
            and len(self.data) >= self.payload_length + IPV6_MINIMUM_SIZE
        )


def ip_version(data: bytes | bytearray | memoryview) -> int:
    """Return the IP version nibble of ``data``, or -1 if it is empty."""
    if len(data) < 1:
        return -1
    return data[0] >> 4