"""
Infrastructure layer.

This module provides the concrete collaborators of the plugin:
- Snapshot storage (local state file)
- Credential lookup (Web Key Directory)
- Credential parsing (PGPy)

Implementations are selected by InfrastructureFactory.
"""

from pgp_expiration.infrastructure.factory import InfrastructureFactory

__all__ = ["InfrastructureFactory"]
