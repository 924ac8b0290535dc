"""Tulip - peer-to-peer WireGuard mesh networks."""

__version__ = "0.1.0"
