"""Socket addresses and address prefixes in the layout the IP helper tables use."""

from __future__ import annotations

import enum
import ipaddress
import struct
from dataclasses import dataclass, field

RAW_SOCKADDR_INET_SIZE = 28
RAW_SOCKADDR_INET_DATA_SIZE = RAW_SOCKADDR_INET_SIZE - 2
IP_ADDRESS_PREFIX_SIZE = 32
IP_ADDRESS_PREFIX_LENGTH_OFFSET = 28

_IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
_IPInterface = ipaddress.IPv4Interface | ipaddress.IPv6Interface


class AddressFamily(enum.IntEnum):
    """Protocol family of a socket address."""

    UNSPEC = 0
    INET = 2
    INET6 = 23


def _parse_address(address) -> _IPAddress:
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return address
    if isinstance(address, str):
        return ipaddress.ip_address(address)
    raise ValueError(f"invalid parameter: {address!r} is not an IP address")


def _zone_to_scope(zone: str | None) -> int:
    if zone and zone.isascii() and zone.isdigit():
        value = int(zone)
        if value <= 0xFFFFFFFF:
            return value
    return 0


def _family_from_int(value: int) -> int:
    try:
        return AddressFamily(value)
    except ValueError:
        return value


@dataclass
class RawSockaddrInet:
    """An IPv4 or IPv6 socket address: a family and 26 bytes of address data."""

    family: int = AddressFamily.UNSPEC
    data: bytearray = field(default_factory=lambda: bytearray(RAW_SOCKADDR_INET_DATA_SIZE))

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)
        if len(self.data) != RAW_SOCKADDR_INET_DATA_SIZE:
            raise ValueError(
                f"address data must be {RAW_SOCKADDR_INET_DATA_SIZE} bytes, got {len(self.data)}"
            )

    def set_addr_port(self, address, port: int) -> None:
        """Store an IPv4 or IPv6 address and a port; the other fields become zero."""
        ip = _parse_address(address)
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"invalid port {port}")
        port_bytes = struct.pack(">H", port)
        if isinstance(ip, ipaddress.IPv4Address):
            self.family = AddressFamily.INET
            self.data[0:14] = port_bytes + ip.packed + bytes(8)
        else:
            scope = _zone_to_scope(ip.scope_id)
            self.family = AddressFamily.INET6
            self.data[0:26] = (
                port_bytes + struct.pack("<I", 0) + ip.packed + struct.pack("<I", scope)
            )

    def set_addr(self, address) -> None:
        """Store an IPv4 or IPv6 address with port 0."""
        self.set_addr_port(address, 0)

    def addr_port(self) -> tuple[_IPAddress | None, int]:
        """The address and the port."""
        return self.addr(), self.port()

    def addr(self) -> _IPAddress | None:
        """The stored address, or None if the family is neither IPv4 nor IPv6."""
        if self.family == AddressFamily.INET:
            return ipaddress.IPv4Address(bytes(self.data[2:6]))
        if self.family == AddressFamily.INET6:
            address = ipaddress.IPv6Address(bytes(self.data[6:22]))
            (scope,) = struct.unpack("<I", self.data[22:26])
            if scope:
                address = ipaddress.IPv6Address(f"{address}%{scope}")
            return address
        return None

    def port(self) -> int:
        """The stored port, or 0 if the family is neither IPv4 nor IPv6."""
        if self.family in (AddressFamily.INET, AddressFamily.INET6):
            return struct.unpack(">H", self.data[0:2])[0]
        return 0

    def to_bytes(self) -> bytes:
        """The 28-byte wire layout."""
        return struct.pack("<H", int(self.family)) + bytes(self.data)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> RawSockaddrInet:
        """Read the 28-byte wire layout."""
        raw = bytes(data)
        if len(raw) != RAW_SOCKADDR_INET_SIZE:
            raise ValueError(f"socket address must be {RAW_SOCKADDR_INET_SIZE} bytes, got {len(raw)}")
        (family,) = struct.unpack("<H", raw[0:2])
        return cls(family=_family_from_int(family), data=bytearray(raw[2:]))


@dataclass
class IPAddressPrefix:
    """An address prefix: a socket address and a prefix length."""

    raw_prefix: RawSockaddrInet = field(default_factory=RawSockaddrInet)
    prefix_length: int = 0

    def set_prefix(self, network) -> None:
        """Store a prefix given as a string, an interface or a network."""
        if isinstance(network, str):
            interface = ipaddress.ip_interface(network)
            address, length = interface.ip, interface.network.prefixlen
        elif isinstance(network, (ipaddress.IPv4Interface, ipaddress.IPv6Interface)):
            address, length = network.ip, network.network.prefixlen
        elif isinstance(network, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
            address, length = network.network_address, network.prefixlen
        else:
            raise ValueError(f"invalid parameter: {network!r} is not an IP prefix")
        self.raw_prefix.set_addr(address)
        self.prefix_length = length & 0xFF

    def prefix(self) -> _IPInterface | None:
        """The stored prefix with its address as given, or None if it is not valid."""
        data = self.raw_prefix.data
        if self.raw_prefix.family == AddressFamily.INET:
            if self.prefix_length > 32:
                return None
            return ipaddress.IPv4Interface(
                (ipaddress.IPv4Address(bytes(data[2:6])), self.prefix_length)
            )
        if self.raw_prefix.family == AddressFamily.INET6:
            if self.prefix_length > 128:
                return None
            return ipaddress.IPv6Interface(
                (ipaddress.IPv6Address(bytes(data[6:22])), self.prefix_length)
            )
        return None

    def to_bytes(self) -> bytes:
        """The 32-byte wire layout."""
        return self.raw_prefix.to_bytes() + bytes([self.prefix_length & 0xFF]) + bytes(3)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> IPAddressPrefix:
        """Read the 32-byte wire layout."""
        raw = bytes(data)
        if len(raw) != IP_ADDRESS_PREFIX_SIZE:
            raise ValueError(f"address prefix must be {IP_ADDRESS_PREFIX_SIZE} bytes, got {len(raw)}")
        return cls(
            raw_prefix=RawSockaddrInet.from_bytes(raw[:RAW_SOCKADDR_INET_SIZE]),
            prefix_length=raw[IP_ADDRESS_PREFIX_LENGTH_OFFSET],
        )


@dataclass
class RouteData:
    """A route to add: destination prefix, next hop and metric."""

    destination: object
    next_hop: object
    metric: int = 0

    def __str__(self) -> str:
        return f"{{Destination:{self.destination} NextHop:{self.next_hop} Metric:{self.metric}}}"