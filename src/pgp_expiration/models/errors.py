"""
Plugin error hierarchy.

Errors fall into two groups:
- Fatal errors (configuration, snapshot store) propagate to the CLI and
  end the process with a non-zero exit code.
- Resolution errors concern a single identity. The evaluator turns them into
  a `Failed` outcome so they never abort a batch.
"""


class PluginError(Exception):
    """Base class for all plugin errors."""


class ConfigurationError(PluginError):
    """A required environment variable is missing or invalid."""


class SnapshotStoreError(PluginError):
    """The snapshot file exists but cannot be read, parsed or written."""


class ResolutionError(PluginError):
    """
    Resolving one identity's credential failed.

    The message names the failing step, followed by the underlying cause:
        "Failed to send GET request: <cause>"
    """

    step = "Failed to resolve certificate"

    def __init__(self, cause: object | None = None):
        self.cause = cause
        if cause is None:
            message = self.step
        else:
            # Some network errors carry an empty message
            message = f"{self.step}: {str(cause) or type(cause).__name__}"
        super().__init__(message)


class AddressParseError(ResolutionError):
    """The identity is not a usable email address."""

    step = "Failed to parse email address"


class LookupUrlError(ResolutionError):
    """No lookup URL can be built for the address."""

    step = "Failed to build wkd url"


class RequestFailedError(ResolutionError):
    """The HTTP request could not be sent or completed."""

    step = "Failed to send GET request"


class ServerStatusError(ResolutionError):
    """The directory server answered with a non-2xx status."""

    step = "WKD server returned error"


class ResponseBodyError(ResolutionError):
    """The response body could not be read."""

    step = "Failed to get response"


class CredentialParseError(ResolutionError):
    """The response body is not an OpenPGP certificate."""

    step = "Failed to parse certificate"


class KeyEnumerationError(ResolutionError):
    """Listing the certificate's keys under the policy failed."""

    step = "Failed to enumerate keys"
