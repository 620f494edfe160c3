"""Abstract repository interfaces for infrastructure operations."""

from pgp_expiration.infrastructure.repositories.snapshot_repository import (
    SnapshotRepository,
)

__all__ = ["SnapshotRepository"]
