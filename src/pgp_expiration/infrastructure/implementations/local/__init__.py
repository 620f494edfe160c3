"""Local file-based infrastructure implementations."""

from pgp_expiration.infrastructure.implementations.local.snapshot_repository import (
    LocalSnapshotRepository,
)

__all__ = ["LocalSnapshotRepository"]
