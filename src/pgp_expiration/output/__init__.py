"""Munin protocol output."""

from pgp_expiration.output.munin import FAILED_SENTINEL, MuninFormatter, field_name

__all__ = ["FAILED_SENTINEL", "MuninFormatter", "field_name"]
