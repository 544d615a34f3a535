"""Networking exercises: link-state routing, leaky-bucket shaping, ARQ simulations, and TCP/UDP socket tools."""

__version__ = "0.1.0"