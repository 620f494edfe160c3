"""
Abstract interface for snapshot storage.

The snapshot is the only persisted artifact: the outcomes of the latest
resolution batch, stored whole and replaced whole.
"""

from abc import ABC, abstractmethod

from pgp_expiration.models.outcome import Snapshot


class SnapshotRepository(ABC):
    """
    Abstract interface for snapshot storage operations.

    Implementations must provide:
    - Loading the stored snapshot (absent is not an error)
    - Saving a snapshot over any previous one
    """

    @abstractmethod
    async def load(self) -> Snapshot | None:
        """
        Load the stored snapshot.

        Returns:
            Snapshot if one has been saved, None otherwise

        Raises:
            SnapshotStoreError: If a stored snapshot exists but cannot be read
        """
        pass

    @abstractmethod
    async def save(self, snapshot: Snapshot) -> None:
        """
        Store a snapshot, replacing the previous one.

        Args:
            snapshot: Snapshot to store

        Raises:
            SnapshotStoreError: If the snapshot cannot be written
        """
        pass
