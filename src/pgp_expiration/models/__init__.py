"""
Models package.

Contains the outcome models persisted in the snapshot and the plugin errors.
"""

from pgp_expiration.models.errors import (
    AddressParseError,
    ConfigurationError,
    CredentialParseError,
    KeyEnumerationError,
    LookupUrlError,
    PluginError,
    RequestFailedError,
    ResolutionError,
    ResponseBodyError,
    ServerStatusError,
    SnapshotStoreError,
)
from pgp_expiration.models.outcome import (
    Days,
    ExpirationOutcome,
    ExpirationResult,
    Failed,
    NoExpiration,
    Snapshot,
)

__all__ = [
    # Outcomes
    "Days",
    "ExpirationOutcome",
    "ExpirationResult",
    "Failed",
    "NoExpiration",
    "Snapshot",
    # Errors
    "AddressParseError",
    "ConfigurationError",
    "CredentialParseError",
    "KeyEnumerationError",
    "LookupUrlError",
    "PluginError",
    "RequestFailedError",
    "ResolutionError",
    "ResponseBodyError",
    "ServerStatusError",
    "SnapshotStoreError",
]
