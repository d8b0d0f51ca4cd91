import ipaddress

import pytest
from hypothesis import given
from hypothesis import strategies as st

from singtun.winipcfg.sockaddr import (
    AddressFamily,
    IPAddressPrefix,
    RawSockaddrInet,
    RouteData,
)

RAW_SOCKADDR_INET_SIZE = 28
RAW_SOCKADDR_INET_DATA_OFFSET = 2
IP_ADDRESS_PREFIX_SIZE = 32
IP_ADDRESS_PREFIX_PREFIX_LENGTH_OFFSET = 28


def test_raw_sockaddr_inet_size_and_data_offset():
    sockaddr = RawSockaddrInet()
    sockaddr.set_addr_port("1.2.3.4", 0x0102)
    raw = sockaddr.to_bytes()
    assert len(raw) == RAW_SOCKADDR_INET_SIZE
    assert raw[RAW_SOCKADDR_INET_DATA_OFFSET : RAW_SOCKADDR_INET_DATA_OFFSET + 2] == b"\x01\x02"


def test_ip_address_prefix_size_and_length_offset():
    prefix = IPAddressPrefix()
    prefix.set_prefix("10.0.0.0/8")
    raw = prefix.to_bytes()
    assert len(raw) == IP_ADDRESS_PREFIX_SIZE
    assert raw[IP_ADDRESS_PREFIX_PREFIX_LENGTH_OFFSET] == 8


def test_ipv4_wire_layout():
    sockaddr = RawSockaddrInet()
    sockaddr.set_addr_port(ipaddress.IPv4Address("127.0.0.1"), 80)
    assert sockaddr.to_bytes()[:16] == b"\x02\x00\x00\x50\x7f\x00\x00\x01" + bytes(8)


def test_ipv6_scope_is_stored():
    sockaddr = RawSockaddrInet()
    sockaddr.set_addr_port("fe80::1%3", 53)
    raw = sockaddr.to_bytes()
    assert raw[0:2] == b"\x17\x00"
    assert raw[24:28] == b"\x03\x00\x00\x00"
    assert sockaddr.addr() == ipaddress.IPv6Address("fe80::1%3")
    assert sockaddr.port() == 53


def test_non_numeric_zone_gives_zero_scope():
    sockaddr = RawSockaddrInet()
    sockaddr.set_addr("fe80::1%eth0")
    assert sockaddr.addr() == ipaddress.IPv6Address("fe80::1")


@given(st.ip_addresses(), st.integers(min_value=0, max_value=0xFFFF))
def test_addr_port_round_trip(address, port):
    sockaddr = RawSockaddrInet()
    sockaddr.set_addr_port(address, port)
    assert sockaddr.addr_port() == (address, port)
    again = RawSockaddrInet.from_bytes(sockaddr.to_bytes())
    assert again.addr_port() == (address, port)
    assert again.family == sockaddr.family


def test_set_addr_resets_port():
    sockaddr = RawSockaddrInet()
    sockaddr.set_addr_port("10.1.2.3", 443)
    sockaddr.set_addr("10.1.2.3")
    assert sockaddr.port() == 0
    assert sockaddr.family == AddressFamily.INET


def test_unspecified_family_has_no_address():
    sockaddr = RawSockaddrInet()
    assert sockaddr.addr() is None
    assert sockaddr.port() == 0


@pytest.mark.parametrize("address", ["not an address", 12345, None])
def test_invalid_address_raises(address):
    with pytest.raises(ValueError):
        RawSockaddrInet().set_addr(address)


def test_invalid_port_raises():
    with pytest.raises(ValueError):
        RawSockaddrInet().set_addr_port("1.1.1.1", 70000)


def test_from_bytes_wrong_length_raises():
    with pytest.raises(ValueError):
        RawSockaddrInet.from_bytes(bytes(27))
    with pytest.raises(ValueError):
        IPAddressPrefix.from_bytes(bytes(28))


def test_prefix_keeps_host_bits():
    prefix = IPAddressPrefix()
    prefix.set_prefix("fe80::1/64")
    assert prefix.prefix() == ipaddress.IPv6Interface("fe80::1/64")
    assert prefix.prefix_length == 64


@pytest.mark.parametrize(
    "network",
    [
        ipaddress.ip_network("192.168.0.0/16"),
        ipaddress.ip_interface("192.168.4.5/16"),
        ipaddress.ip_network("2001:db8::/32"),
    ],
)
def test_prefix_round_trip(network):
    prefix = IPAddressPrefix()
    prefix.set_prefix(network)
    again = IPAddressPrefix.from_bytes(prefix.to_bytes())
    assert again.prefix() == prefix.prefix()
    assert again.prefix_length == network.network.prefixlen if hasattr(network, "ip") else network.prefixlen


def test_prefix_unspecified_is_none():
    assert IPAddressPrefix().prefix() is None


def test_prefix_length_too_long_is_none():
    prefix = IPAddressPrefix()
    prefix.set_prefix("10.0.0.0/8")
    prefix.prefix_length = 40
    assert prefix.prefix() is None


def test_route_data_string():
    route = RouteData(
        ipaddress.ip_network("10.0.0.0/8"), ipaddress.ip_address("10.0.0.1"), 5
    )
    assert str(route) == "{Destination:10.0.0.0/8 NextHop:10.0.0.1 Metric:5}"