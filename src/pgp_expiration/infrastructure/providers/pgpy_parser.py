"""
OpenPGP certificate parser built on PGPy.
"""

from datetime import UTC, datetime

import pgpy
from cryptography.hazmat.primitives import hashes
from loguru import logger
from pgpy.constants import SignatureType

from pgp_expiration.domain.credential import Credential, KeyInfo, SelfSignature
from pgp_expiration.domain.services.credential_parser import CredentialParser
from pgp_expiration.models.errors import CredentialParseError, KeyEnumerationError

CERTIFICATION_TYPES = frozenset(
    {
        SignatureType.Generic_Cert,
        SignatureType.Persona_Cert,
        SignatureType.Casual_Cert,
        SignatureType.Positive_Cert,
    }
)


def _as_utc(value: datetime) -> datetime:
    """Normalize PGPy timestamps (naive UTC in older releases) to aware UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _verifies(primary: pgpy.PGPKey, subject, signature: pgpy.PGPSignature) -> bool:
    """
    Checks a self-signature against the primary key material.

    PGPKey.verify() refuses every signature of an expired key, and expired
    keys still have to be reported, so the key material is used directly.

    Args:
        primary: Primary key that issued the signature
        subject: Signed User ID or key
        signature: Signature to check

    Returns:
        True if the signature is cryptographically valid
    """
    try:
        verified = primary._key.verify(
            signature.hashdata(subject),
            signature.__sig__,
            getattr(hashes, signature.hash_algorithm.name)(),
        )
    except Exception as e:
        logger.debug(f"Self-signature could not be verified: {e!r}")
        return False

    return verified is True


class PGPyCredentialParser(CredentialParser):
    """
    Parses binary or ASCII-armored certificates with PGPy.

    Each key carries the self-signatures binding it, checked against the
    primary key. A revoked primary key revokes the whole certificate, so its
    subkeys are reported as revoked as well.
    """

    def parse(self, data: bytes) -> Credential:
        """
        Parses a certificate and extracts its keys metadata.

        Args:
            data: Raw certificate bytes

        Returns:
            Credential with primary key first, then subkeys

        Raises:
            CredentialParseError: If the data is not an OpenPGP certificate
            KeyEnumerationError: If keys metadata cannot be read
        """
        if not data:
            raise CredentialParseError("empty response body")

        try:
            primary, _ = pgpy.PGPKey.from_blob(data)
        except Exception as e:
            logger.debug(f"PGPy rejected certificate data: {e!r}")
            raise CredentialParseError(e) from e

        try:
            primary_info = self._key_info(primary, self._primary_signatures(primary))
            keys = [primary_info]
            for subkey in primary.subkeys.values():
                signatures = self._binding_signatures(primary, subkey)
                keys.append(
                    self._key_info(
                        subkey, signatures, parent_revoked=primary_info.revoked
                    )
                )
        except Exception as e:
            raise KeyEnumerationError(e) from e

        return Credential(fingerprint=primary_info.fingerprint, keys=keys)

    def _primary_signatures(self, primary: pgpy.PGPKey) -> tuple[SelfSignature, ...]:
        """
        Collects the self-signatures binding the primary key.

        These are the self-certifications of the primary User ID (of every
        User ID when none is flagged primary) and direct-key signatures.
        """
        keyid = primary.fingerprint.keyid
        userids = [uid for uid in primary.userids if uid.is_primary] or primary.userids

        signatures = []
        for uid in userids:
            for sig in uid.__sig__:
                if sig.type in CERTIFICATION_TYPES and sig.signer == keyid:
                    signatures.append(
                        self._self_signature(primary, primary, uid, sig, "user_id")
                    )

        for sig in primary.__sig__:
            if sig.type == SignatureType.DirectlyOnKey and sig.signer == keyid:
                signatures.append(
                    self._self_signature(primary, primary, primary, sig, "direct")
                )

        return tuple(signatures)

    def _binding_signatures(
        self, primary: pgpy.PGPKey, subkey: pgpy.PGPKey
    ) -> tuple[SelfSignature, ...]:
        """Collects the binding signatures of a subkey."""
        keyid = primary.fingerprint.keyid
        return tuple(
            self._self_signature(primary, subkey, subkey, sig, "subkey_binding")
            for sig in subkey.__sig__
            if sig.type == SignatureType.Subkey_Binding and sig.signer == keyid
        )

    def _self_signature(
        self,
        primary: pgpy.PGPKey,
        key: pgpy.PGPKey,
        subject,
        sig: pgpy.PGPSignature,
        kind: str,
    ) -> SelfSignature:
        """
        Converts a PGPy self-signature into SelfSignature.

        Args:
            primary: Primary key of the certificate
            key: Key the signature sets the expiration of
            subject: Signed User ID or key
            sig: Signature packet
            kind: Signature kind

        Returns:
            SelfSignature metadata
        """
        # A zero key expiration time means the key never expires
        key_expiration = sig.key_expiration
        key_expires_at = None
        if key_expiration:
            key_expires_at = _as_utc(key.created + key_expiration)

        expires_at = sig.expires_at
        if expires_at is not None and expires_at == sig.created:
            expires_at = None

        return SelfSignature(
            kind=kind,
            created_at=_as_utc(sig.created),
            hash_algorithm=sig.hash_algorithm.name,
            verified=_verifies(primary, subject, sig),
            key_expires_at=key_expires_at,
            expires_at=_as_utc(expires_at) if expires_at is not None else None,
        )

    def _key_info(
        self,
        key: pgpy.PGPKey,
        signatures: tuple[SelfSignature, ...],
        parent_revoked: bool = False,
    ) -> KeyInfo:
        """
        Converts a PGPy key into KeyInfo.

        Args:
            key: Primary key or subkey
            signatures: Self-signatures binding the key
            parent_revoked: Whether the primary key of a subkey is revoked

        Returns:
            KeyInfo metadata
        """
        revoked = parent_revoked or any(True for _ in key.revocation_signatures)

        key_size = key.key_size

        return KeyInfo(
            fingerprint=str(key.fingerprint).replace(" ", ""),
            created_at=_as_utc(key.created),
            signatures=signatures,
            revoked=revoked,
            algorithm=key.key_algorithm.name,
            # Curve keys report their curve OID instead of a bit size
            key_size=key_size if isinstance(key_size, int) else None,
            is_primary=key.is_primary,
        )
