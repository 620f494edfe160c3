"""
Plugin factory.

Builds the plugin services from settings, the way the process entry point
needs them: one HTTP client per run, shared by every lookup.
"""

import httpx

from pgp_expiration.config import Settings
from pgp_expiration.core.logging import logger
from pgp_expiration.domain.policy import KeyPolicy
from pgp_expiration.infrastructure import InfrastructureFactory
from pgp_expiration.output.munin import MuninFormatter
from pgp_expiration.services.batch_runner import ResolutionBatchRunner
from pgp_expiration.services.expiration_evaluator import ExpirationEvaluator
from pgp_expiration.services.plugin import ExpirationPlugin


def create_plugin(
    settings: Settings,
    factory: InfrastructureFactory,
    client: httpx.AsyncClient,
) -> ExpirationPlugin:
    """
    Create and wire the plugin services.

    Args:
        settings: Plugin settings
        factory: Infrastructure factory
        client: HTTP client for this run

    Returns:
        Configured ExpirationPlugin instance
    """
    evaluator = ExpirationEvaluator(
        resolver=factory.get_credential_resolver(client),
        parser=factory.get_credential_parser(),
        policy=KeyPolicy(),
    )
    runner = ResolutionBatchRunner(
        evaluator, identity_timeout=settings.identity_timeout
    )

    identities = settings.get_identities()
    logger.debug(f"Monitoring {len(identities)} identities")

    return ExpirationPlugin(
        runner=runner,
        repository=factory.get_snapshot_repository(),
        identities=identities,
        formatter=MuninFormatter(warning=settings.warning, critical=settings.critical),
        dirty_config_supported=settings.dirty_config_supported,
    )


async def run_plugin(settings: Settings, verb: str | None) -> list[str]:
    """
    Run one plugin verb.

    Args:
        settings: Plugin settings
        verb: Plugin verb (config, cron, or anything else to fetch)

    Returns:
        Lines to print on stdout

    Raises:
        PluginError: If the snapshot store fails
    """
    factory = InfrastructureFactory.from_settings(settings)
    async with factory.create_http_client() as client:
        plugin = create_plugin(settings, factory, client)
        return await plugin.dispatch(verb)
