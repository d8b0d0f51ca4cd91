"""Packet views, Internet checksums and network-stack error helpers for TUN handling."""

__version__ = "0.1.0"