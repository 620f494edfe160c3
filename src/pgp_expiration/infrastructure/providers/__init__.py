"""Credential lookup and parsing providers."""
