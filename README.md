# singtun

Packet-level building blocks for handling TUN traffic in user space. The package is pure Python and has no runtime dependencies.

## Modules

- `singtun.checksum` provides the Internet checksum helpers.
  - `sum_compat` and `sum_bytes` return the 32-bit sum of big-endian 16-bit words.
  - `checksum(initial, data)` folds that sum into a two-byte checksum.
  - `set_ipv4` sets the version nibble of a packet to 4.
- `singtun.ip` provides the `IPv4Packet` and `IPv6Packet` views, the `IPProtocol` numbers and `ip_version(data)`.
  - Header fields are properties that can be read and, where it makes sense, written, such as `total_length`, `header_length`, `source_ip` and `hop_limit`.
  - Methods include `reset_checksum()`, `pseudo_sum()`, `dec_time_to_live()` and `valid()`.
  - `IPv4Packet.verify()` raises `InvalidLengthError`, `InvalidIPVersionError` or `InvalidChecksumError`. All three subclass `PacketError`, which is a `ValueError`.
- `singtun.transport` provides the `TCPPacket` and `UDPPacket` views and the `TCPFlag` flags.
  - Both views have `reset_checksum(pseudo_sum)`.
  - `TCPPacket.verify(source_address, target_address)` raises `InvalidChecksumError` when the checksum does not match.
- `singtun.icmp` provides the `ICMPPacket` and `ICMPv6Packet` views together with `ICMPType`, `ICMPv6Type` and `ICMPv6Code`.
  - `ICMPv6Type.is_error_type()` reports whether a type is an error message.
  - Type and code values that have no name of their own come back as `UNKNOWN_<n>` members.
- `singtun.winipcfg.enums` provides the IP Helper enumerations and flags, for example `IfType`, `GAAFlags`, `RouteProtocol` and `DnsInterfaceSettingsFlag`.
- `singtun.winipcfg.sockaddr` provides `AddressFamily`, `RawSockaddrInet` (28 bytes), `IPAddressPrefix` (32 bytes) and `RouteData`.
  - The two structures convert to and from their binary layout with `to_bytes()` and `from_bytes()`.
- `singtun.stack` provides the network-stack error helpers.
  - `wrap_error(error)` turns an `OSError` that reports a closed or aborted endpoint into `StackClosedError`.
  - `new_gvisor(options)` always raises `GVisorNotIncludedError`.
  - `WITH_GVISOR` is `False`.

The packet classes are views over the buffer you give them. If that buffer is a `bytearray` or a writable `memoryview`, every change the view makes goes straight into it. If you pass `bytes`, the view works on its own copy.

## Example

This example builds an IPv4 header, writes a valid checksum into it and then verifies it.

```python
from singtun.ip import IPv4Packet, IPProtocol, ip_version

raw = bytearray(20)
raw[0] = 0x45          # version 4, header length 20
raw[3] = 20            # total length
raw[9] = IPProtocol.TCP
raw[12:16] = bytes([10, 0, 0, 1])
raw[16:20] = bytes([10, 0, 0, 2])

packet = IPv4Packet(raw)
packet.reset_checksum()
packet.verify()        # raises a PacketError on a bad packet
assert ip_version(raw) == 4
print(packet.source_ip, "->", packet.destination_ip, hex(packet.checksum))
```

## What it does not do

This package only reads and edits packets and describes data layouts. The following are outside it:

- It does not open or configure TUN devices.
- It does not set addresses, routes or DNS servers on any operating system.
- It does not run a user-space TCP/IP stack, so `new_gvisor` always raises `GVisorNotIncludedError`.

## Installing

```
pip install .
```

## Tests

```
pip install ".[test]"
pytest
```