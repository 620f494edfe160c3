"""
Key verification policy.

Decides whether a key takes part in the expiration computation at a given
reference time. Expired keys are still eligible: an expired key is exactly
what the plugin has to report.
"""

from dataclasses import dataclass, field
from datetime import datetime

from pgp_expiration.domain.credential import KeyInfo, SelfSignature

# Algorithms that must not be relied upon at all
REJECTED_ALGORITHMS = frozenset(
    {
        "FormerlyElGamalEncryptOrSign",
        "DiffieHellman",
        "Invalid",
        "Unknown",
    }
)

# Hash algorithms without collision resistance
REJECTED_HASH_ALGORITHMS = frozenset({"MD5", "SHA1", "RIPEMD160"})

# Minimum key sizes (bits) for algorithms with a variable modulus size
MINIMUM_KEY_SIZES = {
    "RSAEncryptOrSign": 2048,
    "RSAEncrypt": 2048,
    "RSASign": 2048,
    "DSA": 2048,
    "ElGamal": 2048,
}


@dataclass(frozen=True)
class KeyPolicy:
    """
    Standard key policy.

    A key is accepted when:
    - it already exists at the reference time
    - its algorithm is not rejected
    - its size reaches the minimum for its algorithm (when known)
    - a self-signature binds it at the reference time (see binding_signature)

    Attributes:
        rejected_algorithms: Algorithm names never accepted
        rejected_hash_algorithms: Hash algorithm names never accepted in signatures
        minimum_key_sizes: Minimum key size in bits per algorithm name
    """

    rejected_algorithms: frozenset[str] = REJECTED_ALGORITHMS
    rejected_hash_algorithms: frozenset[str] = REJECTED_HASH_ALGORITHMS
    minimum_key_sizes: dict[str, int] = field(
        default_factory=lambda: dict(MINIMUM_KEY_SIZES)
    )

    def accepts_signature(self, signature: SelfSignature, at: datetime) -> bool:
        """
        Check whether a self-signature is valid at the given time.

        Args:
            signature: Self-signature metadata
            at: Reference time

        Returns:
            True if the signature verifies, exists and is alive at `at`,
            and uses an accepted hash algorithm
        """
        if not signature.verified:
            return False

        if signature.created_at > at:
            return False

        if signature.expires_at is not None and signature.expires_at <= at:
            return False

        return signature.hash_algorithm not in self.rejected_hash_algorithms

    def binding_signature(self, key: KeyInfo, at: datetime) -> SelfSignature | None:
        """
        Select the self-signature in force at the given time.

        The newest valid signature wins. For a primary key, User ID
        self-signatures take precedence over direct-key signatures.

        Args:
            key: Key metadata
            at: Reference time

        Returns:
            Binding signature, or None if no valid signature binds the key
        """
        candidates = [s for s in key.signatures if self.accepts_signature(s, at)]
        preferred = [s for s in candidates if s.kind != "direct"] or candidates
        return max(preferred, key=lambda s: s.created_at, default=None)

    def accepts(self, key: KeyInfo, at: datetime) -> bool:
        """
        Check whether a key is eligible at the given time.

        Args:
            key: Key metadata
            at: Reference time

        Returns:
            True if the key is eligible, False otherwise
        """
        if key.created_at > at:
            return False

        if key.algorithm in self.rejected_algorithms:
            return False

        minimum = self.minimum_key_sizes.get(key.algorithm)
        if minimum is not None and key.key_size is not None and key.key_size < minimum:
            return False

        return self.binding_signature(key, at) is not None
