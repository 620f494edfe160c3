"""
Munin plugin service.

Ties the batch runner, the snapshot store and the formatter to the three
plugin verbs: config, cron and fetch (default).
"""

from collections.abc import Sequence

from loguru import logger

from pgp_expiration.infrastructure.repositories import SnapshotRepository
from pgp_expiration.models.outcome import Snapshot
from pgp_expiration.output.munin import MuninFormatter
from pgp_expiration.services.batch_runner import ResolutionBatchRunner


class ExpirationPlugin:
    """
    OpenPGP expiration plugin.

    Values come from the stored snapshot; the network is only used by the
    cron verb, or on demand when no snapshot has been stored yet.
    """

    def __init__(
        self,
        runner: ResolutionBatchRunner,
        repository: SnapshotRepository,
        identities: Sequence[str],
        formatter: MuninFormatter | None = None,
        dirty_config_supported: bool = False,
    ):
        """
        Initialize the plugin.

        Args:
            runner: Resolution batch runner
            repository: Snapshot storage
            identities: Email addresses to monitor, in output order
            formatter: Munin formatter (default thresholds if omitted)
            dirty_config_supported: Whether munin-node accepts values after config
        """
        self.runner = runner
        self.repository = repository
        self.identities = list(identities)
        self.formatter = formatter or MuninFormatter()
        self.dirty_config_supported = dirty_config_supported

    async def refresh(self) -> Snapshot:
        """
        Resolve every identity and replace the stored snapshot.

        Returns:
            The new snapshot
        """
        snapshot = await self.runner.run(self.identities)
        await self.repository.save(snapshot)
        return snapshot

    async def get_snapshot(self) -> Snapshot:
        """
        Get the stored snapshot, resolving once if none is stored.

        Returns:
            Snapshot

        Raises:
            SnapshotStoreError: If the stored snapshot is unreadable
        """
        snapshot = await self.repository.load()
        if snapshot is None:
            logger.info("No stored snapshot, resolving now")
            snapshot = await self.refresh()
        return snapshot

    async def config(self) -> list[str]:
        """Config verb: graph configuration, then values if supported."""
        snapshot = await self.get_snapshot()
        lines = self.formatter.render_config(snapshot)
        if self.dirty_config_supported:
            lines.extend(self.formatter.render_values(snapshot))
        return lines

    async def cron(self) -> list[str]:
        """Cron verb: refresh the snapshot, print nothing."""
        await self.refresh()
        return []

    async def fetch(self) -> list[str]:
        """Default verb: current values."""
        snapshot = await self.get_snapshot()
        return self.formatter.render_values(snapshot)

    async def dispatch(self, verb: str | None) -> list[str]:
        """
        Run a plugin verb.

        Args:
            verb: "config", "cron", anything else (or None) fetches values

        Returns:
            Lines to print on stdout
        """
        if verb == "config":
            return await self.config()
        if verb == "cron":
            return await self.cron()
        return await self.fetch()
