"""
Local file-based snapshot repository implementation.

Stores the snapshot as a JSON document in a single file:
    {state_dir}/
        pgp_expiration

Saving truncates and rewrites the file. There is no lock and no
rename-based replacement: concurrent writers race, last writer wins.
"""

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from pgp_expiration.config import STATE_FILE_NAME
from pgp_expiration.infrastructure.repositories.snapshot_repository import (
    SnapshotRepository,
)
from pgp_expiration.models.errors import SnapshotStoreError
from pgp_expiration.models.outcome import Snapshot


class LocalSnapshotRepository(SnapshotRepository):
    """
    File-based snapshot storage in the Munin plugin state directory.
    """

    def __init__(self, state_dir: str, file_name: str = STATE_FILE_NAME):
        """
        Initialize local snapshot repository.

        Args:
            state_dir: Directory holding the state file (MUNIN_PLUGSTATE)
            file_name: State file name
        """
        self.state_dir = Path(state_dir)
        self.state_file = self.state_dir / file_name

        logger.debug(f"Initialized LocalSnapshotRepository at {self.state_file}")

    async def load(self) -> Snapshot | None:
        """Load snapshot from the state file."""
        try:
            content = self.state_file.read_bytes()
        except FileNotFoundError:
            logger.info(f"No state file at {self.state_file}")
            return None
        except OSError as e:
            raise SnapshotStoreError(
                f"Failed to read state file {self.state_file}: {e}"
            ) from e

        try:
            snapshot = Snapshot.model_validate_json(content)
        except ValidationError as e:
            raise SnapshotStoreError(
                f"Failed to read state file {self.state_file}: {e}"
            ) from e

        logger.debug(f"Loaded snapshot with {len(snapshot.outcomes)} outcomes")
        return snapshot

    async def save(self, snapshot: Snapshot) -> None:
        """Write snapshot to the state file."""
        content = snapshot.model_dump_json(indent=2)

        try:
            self.state_file.write_text(content, encoding="utf-8")
        except OSError as e:
            raise SnapshotStoreError(
                f"Failed to write state file {self.state_file}: {e}"
            ) from e

        logger.info(
            f"Saved snapshot with {len(snapshot.outcomes)} outcomes to {self.state_file}"
        )
