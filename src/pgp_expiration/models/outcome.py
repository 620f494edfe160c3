"""
Resolution outcome models.

One `ExpirationOutcome` per configured identity. Its `result` is a closed
tagged variant, discriminated by `kind`, so that "no expiration" and
"resolution failed" stay distinct wherever outcomes are consumed.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class Days(BaseModel):
    """Whole days until the soonest expiration (negative when already expired)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["days"] = "days"
    days: int = Field(..., description="Days to the soonest expiration")


class NoExpiration(BaseModel):
    """The certificate resolved but none of its eligible keys expires."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["no_expiration"] = "no_expiration"


class Failed(BaseModel):
    """Resolution failed; `message` is a diagnostic for humans, never parsed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    message: str = Field(..., description="Human-readable failure cause")


ExpirationResult = Annotated[Days | NoExpiration | Failed, Field(discriminator="kind")]


class ExpirationOutcome(BaseModel):
    """Result of resolving a single identity."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., description="Monitored email address")
    result: ExpirationResult


class Snapshot(BaseModel):
    """
    Outcomes of one resolution batch.

    Attributes:
        reference_time: Instant every day count in this batch is relative to.
        outcomes: One entry per configured identity, in configuration order.
    """

    reference_time: datetime = Field(..., description="Batch reference time (UTC)")
    outcomes: list[ExpirationOutcome] = Field(default_factory=list)
