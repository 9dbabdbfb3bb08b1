"""Carrier-agnostic shipping rate quotes backed by the UPS Rating API."""

__version__ = "0.1.0"
