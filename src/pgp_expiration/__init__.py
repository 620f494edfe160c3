"""Munin plugin reporting days until OpenPGP key expiration."""

__version__ = "1.0.0"
