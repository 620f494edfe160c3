"""
Expiration evaluation service.

Resolves one identity's certificate and reduces its keys to the number of
whole days until the soonest expiration.
"""

from datetime import datetime

from loguru import logger

from pgp_expiration.domain.credential import Credential
from pgp_expiration.domain.policy import KeyPolicy
from pgp_expiration.domain.services import CredentialParser, CredentialResolver
from pgp_expiration.models.errors import KeyEnumerationError, ResolutionError
from pgp_expiration.models.outcome import Days, ExpirationResult, Failed, NoExpiration


def days_until(expires_at: datetime, reference_time: datetime) -> int:
    """
    Whole days from reference_time to expires_at, truncated toward zero.

    Args:
        expires_at: Expiration timestamp
        reference_time: Reference timestamp

    Returns:
        Day count, negative when expires_at is in the past
    """
    delta = expires_at - reference_time
    if delta.days >= 0:
        return delta.days
    return -((-delta).days)


class ExpirationEvaluator:
    """
    Computes days to expiration for a single identity.

    Every failure is reported as a `Failed` result; evaluate() never raises
    for resolution problems.
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        parser: CredentialParser,
        policy: KeyPolicy | None = None,
    ):
        """
        Initialize the evaluator.

        Args:
            resolver: Locates and downloads certificates
            parser: Parses downloaded certificates
            policy: Key verification policy (standard policy if omitted)
        """
        self.resolver = resolver
        self.parser = parser
        self.policy = policy or KeyPolicy()

    async def get_credential(self, identity: str) -> Credential:
        """
        Download and parse the certificate of an identity.

        Args:
            identity: Email address

        Returns:
            Parsed credential

        Raises:
            ResolutionError: If any lookup or parsing step fails
        """
        data = await self.resolver.fetch(identity)
        return self.parser.parse(data)

    def soonest_expiration(
        self, credential: Credential, reference_time: datetime
    ) -> int | None:
        """
        Minimum days to expiration across the eligible keys.

        Eligible keys are accepted by the policy at reference_time and are
        not revoked. A key expires as set by its binding signature; keys
        without an expiration are ignored.

        Args:
            credential: Parsed credential
            reference_time: Reference time of the batch

        Returns:
            Minimum day count, or None if no eligible key expires
        """
        return min(
            (
                days_until(valid.expires_at, reference_time)
                for valid in credential.valid_keys(self.policy, reference_time)
                if not valid.key.revoked and valid.expires_at is not None
            ),
            default=None,
        )

    async def evaluate(self, identity: str, reference_time: datetime) -> ExpirationResult:
        """
        Evaluate one identity.

        Args:
            identity: Email address
            reference_time: Reference time of the batch

        Returns:
            Days, NoExpiration or Failed
        """
        try:
            credential = await self.get_credential(identity)
        except ResolutionError as e:
            logger.warning(f"Failed to get certificate: {e}")
            return Failed(message=f"Error: Failed to get certificate: {e}")

        try:
            days = self.soonest_expiration(credential, reference_time)
        except Exception as e:
            error = KeyEnumerationError(e)
            logger.warning(str(error))
            return Failed(message=f"Error: {error}")

        if days is None:
            logger.debug(f"No expiring key in certificate {credential.fingerprint}")
            return NoExpiration()

        return Days(days=days)
