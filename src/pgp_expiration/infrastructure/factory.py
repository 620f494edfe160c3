"""
Infrastructure factory.

Builds the implementations used by the plugin from configuration:
- Snapshot storage: local state file
- Credential lookup: Web Key Directory over httpx
- Credential parsing: PGPy

Usage:
    from pgp_expiration.infrastructure import InfrastructureFactory
    from pgp_expiration.config import load_settings

    settings = load_settings()
    factory = InfrastructureFactory.from_settings(settings)

    snapshot_repo = factory.get_snapshot_repository()
    async with factory.create_http_client() as client:
        resolver = factory.get_credential_resolver(client)
"""

from typing import TYPE_CHECKING

import httpx
from loguru import logger

from pgp_expiration import __version__
from pgp_expiration.domain.services import CredentialParser, CredentialResolver
from pgp_expiration.infrastructure.repositories import SnapshotRepository

if TYPE_CHECKING:
    from pgp_expiration.config import Settings

USER_AGENT = f"munin-pgp-expiration/{__version__}"


class InfrastructureFactory:
    """
    Factory for creating infrastructure instances.

    Provides dependency injection for the plugin services.
    """

    def __init__(self, **config):
        """
        Initialize infrastructure factory.

        Args:
            **config: Configuration options
                      (state_dir, wkd_variant, request_timeout)
        """
        self.config = config

        logger.debug(f"Initialized InfrastructureFactory with config: {config}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InfrastructureFactory":
        """
        Create factory from Settings object.

        Args:
            settings: Plugin settings from config.py

        Returns:
            InfrastructureFactory configured from settings
        """
        config = {
            "state_dir": settings.state_dir,
            "wkd_variant": settings.wkd_variant,
            "request_timeout": settings.request_timeout,
        }

        return cls(**config)

    def get_snapshot_repository(self) -> SnapshotRepository:
        """
        Get snapshot repository for the state directory.

        Returns:
            SnapshotRepository implementation
        """
        from pgp_expiration.infrastructure.implementations.local import (
            LocalSnapshotRepository,
        )

        return LocalSnapshotRepository(state_dir=self.config.get("state_dir", "."))

    def create_http_client(self) -> httpx.AsyncClient:
        """
        Create the HTTP client shared by all lookups of one run.

        The caller owns the client and must close it
        (use it as an async context manager).

        Returns:
            Configured httpx.AsyncClient
        """
        timeout = self.config.get("request_timeout", 30.0)
        return httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    def get_credential_resolver(self, client: httpx.AsyncClient) -> CredentialResolver:
        """
        Get credential resolver bound to an HTTP client.

        Args:
            client: HTTP client from create_http_client()

        Returns:
            CredentialResolver implementation
        """
        from pgp_expiration.infrastructure.providers.wkd import WKDResolver

        return WKDResolver(client, variant=self.config.get("wkd_variant", "advanced"))

    def get_credential_parser(self) -> CredentialParser:
        """
        Get credential parser.

        Returns:
            CredentialParser implementation
        """
        from pgp_expiration.infrastructure.providers.pgpy_parser import (
            PGPyCredentialParser,
        )

        return PGPyCredentialParser()
