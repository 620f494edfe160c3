"""Abstract domain services."""

from pgp_expiration.domain.services.credential_parser import CredentialParser
from pgp_expiration.domain.services.credential_resolver import CredentialResolver

__all__ = ["CredentialParser", "CredentialResolver"]
