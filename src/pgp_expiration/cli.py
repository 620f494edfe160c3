"""
Command line entry point.

Munin runs the plugin as:
    pgp_expiration            print values
    pgp_expiration config     print graph configuration
    pgp_expiration cron       refresh the cached values (run from cron)
"""

import asyncio

import click

from pgp_expiration.application import run_plugin
from pgp_expiration.config import load_settings
from pgp_expiration.core.logging import (
    configure_logger,
    intercept_standard_logging,
    logger,
)
from pgp_expiration.models.errors import PluginError


# Every argument is a plugin verb, "--help" included
@click.command(
    context_settings={"ignore_unknown_options": True}, add_help_option=False
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(args: tuple[str, ...]) -> None:
    """Report days until OpenPGP key expiration to Munin."""
    # Only a single argument selects a verb
    verb = args[0] if len(args) == 1 else None

    try:
        settings = load_settings()
    except PluginError as e:
        raise click.ClickException(str(e)) from e

    configure_logger(settings)
    intercept_standard_logging()

    try:
        lines = asyncio.run(run_plugin(settings, verb))
    except PluginError as e:
        logger.error(str(e))
        raise click.ClickException(str(e)) from e

    for line in lines:
        click.echo(line)


if __name__ == "__main__":
    main()
