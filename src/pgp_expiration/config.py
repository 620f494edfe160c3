"""
Plugin configuration and environment variables.

This module unifies configuration using pydantic-settings.
Munin hands every setting to the plugin through the environment:
1. Plugin configuration (`env.emails`, `env.warning`, ... in plugin-conf.d)
2. Variables exported by munin-node itself (MUNIN_PLUGSTATE, MUNIN_CAP_*)
3. Default values

Naming convention:
- In Python code: snake_case (state_dir)
- In the environment: the names Munin uses (MUNIN_PLUGSTATE, emails)
- Aliases map between both; lookups are case-insensitive
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pgp_expiration.core.logging import DEFAULT_LOG_FORMAT
from pgp_expiration.models.errors import ConfigurationError

STATE_FILE_NAME = "pgp_expiration"


class Settings(BaseSettings):
    """
    Unified plugin configuration.

    Example plugin-conf.d entry:
        [pgp_expiration]
        env.emails alice@example.org bob@example.net
        env.warning 30:
        env.LOG_LEVEL DEBUG
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,  # Allows using uppercase or lowercase
        extra="ignore",  # Ignores unrelated variables
        populate_by_name=True,  # Allows Settings(state_dir=...) in code and tests
    )

    # ============================================================================
    # MONITORED IDENTITIES
    # ============================================================================
    emails: str = Field(
        validation_alias="emails",
        description="Space-separated list of email addresses to monitor",
    )

    # ============================================================================
    # MUNIN NODE SETTINGS
    # ============================================================================
    state_dir: str = Field(
        validation_alias="MUNIN_PLUGSTATE",
        description="Directory where the plugin keeps its state file",
    )
    cap_dirtyconfig: str = Field(
        default="",
        validation_alias="MUNIN_CAP_DIRTYCONFIG",
        description="Set to 1 by munin-node when values may follow config output",
    )
    warning: str = Field(
        default="14:", validation_alias="warning", description="Warning range"
    )
    critical: str = Field(
        default="7:", validation_alias="critical", description="Critical range"
    )

    # ============================================================================
    # LOOKUP SETTINGS
    # ============================================================================
    wkd_variant: Literal["advanced", "direct"] = Field(
        default="advanced",
        description="Web Key Directory lookup method (advanced, direct)",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for each HTTP operation",
    )
    identity_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout in seconds for a whole identity evaluation (unset: none)",
    )

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default=DEFAULT_LOG_FORMAT,
        description="Log format",
    )

    # ============================================================================
    # HELPER METHODS
    # ============================================================================

    def get_identities(self) -> list[str]:
        """
        Get the monitored email addresses.

        Order and duplicates are preserved; every entry is evaluated on its own.

        Returns:
            list[str]: Email addresses in configuration order.
        """
        return self.emails.split()

    def get_state_file(self) -> Path:
        """
        Get the location of the snapshot file.

        Returns:
            Path: `<MUNIN_PLUGSTATE>/pgp_expiration`
        """
        return Path(self.state_dir) / STATE_FILE_NAME

    @property
    def dirty_config_supported(self) -> bool:
        """Whether values may be printed right after the config output."""
        return self.cap_dirtyconfig == "1"


@lru_cache
def get_settings() -> Settings:
    """
    Get plugin settings (LRU cached).

    This function is cached, so the environment is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Plugin configuration instance.

    Raises:
        ValidationError: If a required variable is missing or invalid.
    """
    return Settings()


def load_settings() -> Settings:
    """
    Read the settings at process entry.

    Returns:
        Settings: Plugin configuration instance.

    Raises:
        ConfigurationError: If a required variable is missing or invalid.
    """
    try:
        return get_settings()
    except ValidationError as e:
        problems = []
        for error in e.errors():
            name = ".".join(str(part) for part in error["loc"])
            if error["type"] == "missing":
                problems.append(f"Failed to get env {name}")
            else:
                problems.append(f"Invalid env {name}: {error['msg']}")
        raise ConfigurationError("; ".join(problems)) from e
