"""Allows running the plugin with `python -m pgp_expiration`."""

from pgp_expiration.cli import main

main(prog_name="pgp_expiration")
