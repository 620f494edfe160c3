"""
Resolution batch service.

Evaluates every configured identity concurrently and collects the outcomes
into a Snapshot, in configuration order.
"""

import asyncio
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from loguru import logger

from pgp_expiration.core.identity_context import identity_context
from pgp_expiration.models.outcome import (
    Days,
    ExpirationOutcome,
    ExpirationResult,
    Failed,
    Snapshot,
)
from pgp_expiration.services.expiration_evaluator import ExpirationEvaluator


def utc_now() -> datetime:
    """Current time (UTC)."""
    return datetime.now(UTC)


class ResolutionBatchRunner:
    """
    Fans the evaluator out over all identities.

    One identity failing never affects the others: every outcome, successful
    or not, ends up in the snapshot. There are no retries; the next scheduled
    refresh is the retry.
    """

    def __init__(
        self,
        evaluator: ExpirationEvaluator,
        clock: Callable[[], datetime] = utc_now,
        identity_timeout: float | None = None,
    ):
        """
        Initialize the batch runner.

        Args:
            evaluator: Per-identity evaluator
            clock: Source of the batch reference time
            identity_timeout: Seconds allowed for one identity (None: unbounded)
        """
        self.evaluator = evaluator
        self.clock = clock
        self.identity_timeout = identity_timeout

    async def run(self, identities: Sequence[str]) -> Snapshot:
        """
        Resolve all identities.

        Args:
            identities: Email addresses, in configuration order

        Returns:
            Snapshot with one outcome per identity, in the same order
        """
        reference_time = self.clock()
        logger.info(
            f"Resolving {len(identities)} identities "
            f"(reference time {reference_time.isoformat()})"
        )

        # gather() keeps argument order whatever the completion order
        outcomes = await asyncio.gather(
            *(self._resolve(identity, reference_time) for identity in identities)
        )

        failed = sum(1 for outcome in outcomes if isinstance(outcome.result, Failed))
        logger.info(
            f"Resolved {len(outcomes)} identities: "
            f"{len(outcomes) - failed} succeeded, {failed} failed"
        )

        return Snapshot(reference_time=reference_time, outcomes=list(outcomes))

    async def _resolve(self, identity: str, reference_time: datetime) -> ExpirationOutcome:
        """
        Evaluate one identity, turning any error into a Failed result.

        Runs in its own task, so the identity context is local to it.
        """
        identity_context.set(identity)

        result: ExpirationResult
        try:
            if self.identity_timeout is None:
                result = await self.evaluator.evaluate(identity, reference_time)
            else:
                result = await asyncio.wait_for(
                    self.evaluator.evaluate(identity, reference_time),
                    timeout=self.identity_timeout,
                )
        except TimeoutError:
            logger.warning(f"Evaluation timed out after {self.identity_timeout}s")
            result = Failed(
                message=f"Error: Timed out after {self.identity_timeout:g} seconds"
            )
        except Exception as e:
            logger.error(f"Unexpected error: {type(e).__name__}: {e}")
            result = Failed(message=f"Error: {type(e).__name__}: {e}")

        self._log_result(result)
        return ExpirationOutcome(identity=identity, result=result)

    def _log_result(self, result: ExpirationResult) -> None:
        """Log the outcome of one identity."""
        if isinstance(result, Days):
            if result.days < 0:
                logger.warning(f"Key expired {abs(result.days)} days ago")
            else:
                logger.info(f"Key expires in {result.days} days")
        elif isinstance(result, Failed):
            logger.info(f"Resolution failed: {result.message}")
        else:
            logger.info("No expiring key")
