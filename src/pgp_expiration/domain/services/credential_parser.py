"""
Abstract base class for credential parsers.
"""

from abc import ABC, abstractmethod

from pgp_expiration.domain.credential import Credential


class CredentialParser(ABC):
    """Base class for services that turn raw bytes into a Credential."""

    @abstractmethod
    def parse(self, data: bytes) -> Credential:
        """
        Parses an OpenPGP certificate.

        Args:
            data: Raw certificate bytes (binary or ASCII-armored)

        Returns:
            Credential with primary key and subkeys metadata

        Raises:
            CredentialParseError: If the data is not a usable certificate
        """
        pass
