"""
OpenPGP credential metadata.

A credential (certificate) bundles a primary key and its subkeys. Only the
metadata needed to compute expirations is kept; key material stays with the
parsing library.

A key's expiration is not a property of the key packet: it is set by the
self-signature binding the key to the certificate (a User ID
self-certification or direct-key signature for the primary key, a subkey
binding signature for subkeys). Which of those signatures is in force
depends on the reference time, so keys carry all of them.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pgp_expiration.domain.policy import KeyPolicy

SignatureKind = Literal["user_id", "direct", "subkey_binding"]


@dataclass(frozen=True)
class SelfSignature:
    """
    Self-signature binding a key to its certificate.

    Attributes:
        kind: "user_id", "direct" or "subkey_binding"
        created_at: Signature creation timestamp (UTC)
        hash_algorithm: Hash algorithm name (e.g. "SHA256")
        verified: Whether the signature verifies against the primary key
        key_expires_at: Key expiration set by this signature, None if never
        expires_at: Expiration of the signature itself, None if never
    """

    kind: SignatureKind
    created_at: datetime
    hash_algorithm: str
    verified: bool
    key_expires_at: datetime | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class KeyInfo:
    """
    Metadata of a single key (primary key or subkey).

    Attributes:
        fingerprint: Key fingerprint (hex string)
        created_at: Key creation timestamp (UTC)
        signatures: Self-signatures binding the key, in certificate order
        revoked: Whether a revocation signature applies to this key
        algorithm: Public key algorithm name (e.g. "RSAEncryptOrSign", "EdDSA")
        key_size: Key size in bits for RSA/DSA/ElGamal keys, None for curves
        is_primary: Whether this is the certificate's primary key
    """

    fingerprint: str
    created_at: datetime
    signatures: tuple[SelfSignature, ...] = ()
    revoked: bool = False
    algorithm: str = ""
    key_size: int | None = None
    is_primary: bool = False


@dataclass(frozen=True)
class ValidKey:
    """A key accepted by the policy, with the self-signature in force."""

    key: KeyInfo
    binding: SelfSignature

    @property
    def expires_at(self) -> datetime | None:
        """Key expiration according to the binding signature."""
        return self.binding.key_expires_at


@dataclass(frozen=True)
class Credential:
    """
    Parsed OpenPGP certificate.

    Attributes:
        fingerprint: Primary key fingerprint
        keys: Primary key first, then subkeys in certificate order
    """

    fingerprint: str
    keys: list[KeyInfo] = field(default_factory=list)

    def valid_keys(self, policy: "KeyPolicy", at: datetime) -> Iterator[ValidKey]:
        """
        Yield the keys the policy accepts at the given time.

        Keys are produced lazily, one at a time.

        Args:
            policy: Verification policy
            at: Reference time

        Yields:
            ValidKey: Policy-eligible keys with their binding signature
        """
        for key in self.keys:
            binding = policy.binding_signature(key, at)
            if binding is not None and policy.accepts(key, at):
                yield ValidKey(key=key, binding=binding)
