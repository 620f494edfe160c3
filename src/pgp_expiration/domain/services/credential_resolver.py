"""
Abstract base class for credential resolvers.
"""

from abc import ABC, abstractmethod


class CredentialResolver(ABC):
    """Base class for services that locate an identity's public key."""

    @abstractmethod
    def build_url(self, email: str) -> str:
        """
        Derives the lookup URL for an email address.

        Args:
            email: Email address

        Returns:
            Lookup URL

        Raises:
            AddressParseError: If the address cannot be parsed
            LookupUrlError: If no URL can be built for the address
        """
        pass

    @abstractmethod
    async def fetch(self, email: str) -> bytes:
        """
        Retrieves the raw credential bytes for an email address.

        Args:
            email: Email address

        Returns:
            Raw credential bytes (binary or ASCII-armored)

        Raises:
            ResolutionError: If any step of the lookup fails
        """
        pass

    @property
    @abstractmethod
    def method_name(self) -> str:
        """Lookup method name (wkd-advanced, wkd-direct, etc.)."""
        pass
