"""Tests for the expiration evaluator."""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fakes import REFERENCE_TIME, FakeParser, FakeResolver, make_credential, make_key
from pgpy.constants import HashAlgorithm

from pgp_expiration.infrastructure.providers.pgpy_parser import PGPyCredentialParser
from pgp_expiration.models.errors import (
    RequestFailedError,
    ServerStatusError,
)
from pgp_expiration.models.outcome import Days, Failed, NoExpiration
from pgp_expiration.services.expiration_evaluator import ExpirationEvaluator, days_until

IDENTITY = "alice@example.org"


def make_evaluator(*keys, failures=None) -> ExpirationEvaluator:
    """Evaluator resolving IDENTITY to a credential made of keys."""
    return ExpirationEvaluator(
        resolver=FakeResolver(failures=failures),
        parser=FakeParser({IDENTITY: make_credential(*keys)}),
    )


class TestDaysUntil:
    """Tests for whole-day computation."""

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(days=10), 10),
            (timedelta(days=10, hours=23), 10),
            (timedelta(hours=23), 0),
            (timedelta(0), 0),
            (timedelta(hours=-23), 0),
            (timedelta(days=-1), -1),
            (timedelta(days=-3, hours=-12), -3),
        ],
    )
    def test_truncates_toward_zero(self, delta, expected):
        """Test partial days are dropped in both directions."""
        assert days_until(REFERENCE_TIME + delta, REFERENCE_TIME) == expected


class TestEvaluate:
    """Tests for ExpirationEvaluator.evaluate."""

    @pytest.mark.asyncio
    async def test_single_key(self):
        """Test days to the expiration of a single key."""
        evaluator = make_evaluator(make_key(days=10, is_primary=True))

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Days(days=10)

    @pytest.mark.asyncio
    async def test_soonest_key_wins(self):
        """Test the minimum over all eligible keys is reported."""
        evaluator = make_evaluator(
            make_key(days=300, is_primary=True),
            make_key(days=12),
            make_key(days=40),
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Days(days=12)

    @pytest.mark.asyncio
    async def test_expired_key_is_negative(self):
        """Test an expired key yields a negative day count."""
        evaluator = make_evaluator(
            make_key(days=100, is_primary=True),
            make_key(days=-5),
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Days(days=-5)

    @pytest.mark.asyncio
    async def test_keys_without_expiration_ignored(self):
        """Test non-expiring keys do not mask an expiring one."""
        evaluator = make_evaluator(
            make_key(days=None, is_primary=True),
            make_key(days=8),
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Days(days=8)

    @pytest.mark.asyncio
    async def test_no_expiring_key(self):
        """Test a certificate without any expiration."""
        evaluator = make_evaluator(make_key(days=None, is_primary=True))

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == NoExpiration()

    @pytest.mark.asyncio
    async def test_revoked_key_ignored(self):
        """Test revoked keys do not contribute."""
        evaluator = make_evaluator(
            make_key(days=50, is_primary=True),
            make_key(days=2, revoked=True),
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Days(days=50)

    @pytest.mark.asyncio
    async def test_only_ineligible_keys(self):
        """Test a certificate whose expiring keys are all rejected."""
        evaluator = make_evaluator(
            make_key(days=None, is_primary=True),
            make_key(days=3, algorithm="RSAEncryptOrSign", key_size=1024),
            make_key(days=4, created_at=REFERENCE_TIME + timedelta(days=1)),
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == NoExpiration()

    @pytest.mark.asyncio
    async def test_reference_time_is_used(self):
        """Test the result depends on the given reference time only."""
        evaluator = make_evaluator(make_key(days=10, is_primary=True))
        later = REFERENCE_TIME + timedelta(days=4, hours=1)

        result = await evaluator.evaluate(IDENTITY, later)

        assert result == Days(days=5)

    @pytest.mark.asyncio
    async def test_request_failure(self):
        """Test resolution errors become a Failed result."""
        evaluator = make_evaluator(
            make_key(days=10),
            failures={
                IDENTITY: RequestFailedError(httpx.ConnectError("connection refused"))
            },
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Failed(
            message=(
                "Error: Failed to get certificate: "
                "Failed to send GET request: connection refused"
            )
        )

    @pytest.mark.asyncio
    async def test_server_status_failure(self):
        """Test a directory error status becomes a Failed result."""
        evaluator = make_evaluator(
            make_key(days=10),
            failures={IDENTITY: ServerStatusError("HTTP status 404")},
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert isinstance(result, Failed)
        assert "WKD server returned error: HTTP status 404" in result.message

    @pytest.mark.asyncio
    async def test_parse_failure(self):
        """Test unparsable certificates become a Failed result."""
        evaluator = ExpirationEvaluator(resolver=FakeResolver(), parser=FakeParser())

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Failed(
            message=(
                "Error: Failed to get certificate: "
                "Failed to parse certificate: unknown certificate"
            )
        )

    @pytest.mark.asyncio
    async def test_enumeration_failure(self):
        """Test policy errors become a Failed result."""
        policy = MagicMock()
        policy.accepts.side_effect = TypeError("broken key")
        evaluator = ExpirationEvaluator(
            resolver=FakeResolver(),
            parser=FakeParser({IDENTITY: make_credential(make_key(days=10))}),
            policy=policy,
        )

        result = await evaluator.evaluate(IDENTITY, REFERENCE_TIME)

        assert result == Failed(message="Error: Failed to enumerate keys: broken key")

    @pytest.mark.asyncio
    async def test_naive_reference_time_fails_cleanly(self):
        """Test comparing against a naive reference time is reported, not raised."""
        evaluator = make_evaluator(make_key(days=10))

        result = await evaluator.evaluate(IDENTITY, datetime(2026, 1, 1))

        assert isinstance(result, Failed)
        assert result.message.startswith("Error: Failed to enumerate keys")

    @pytest.mark.asyncio
    async def test_reference_time_other_zone(self):
        """Test an aware reference time in another zone gives the same answer."""
        evaluator = make_evaluator(make_key(days=10))
        shifted = REFERENCE_TIME.astimezone(timezone(timedelta(hours=5)))

        assert await evaluator.evaluate(IDENTITY, shifted) == Days(days=10)


class TestEvaluateCertificates:
    """Tests evaluating real certificates end to end through PGPy."""

    @staticmethod
    def certificate_evaluator(data: bytes) -> ExpirationEvaluator:
        resolver = MagicMock()
        resolver.fetch = AsyncMock(return_value=data)
        return ExpirationEvaluator(resolver=resolver, parser=PGPyCredentialParser())

    @pytest.mark.asyncio
    async def test_subkey_expires_first(self, make_certificate):
        """Test a subkey expiring before the primary key sets the day count."""
        _, data = make_certificate(
            key_expiration=timedelta(days=30), subkey_expiration=timedelta(days=10)
        )

        result = await self.certificate_evaluator(data).evaluate(
            IDENTITY, datetime.now(UTC)
        )

        assert result == Days(days=9)

    @pytest.mark.asyncio
    async def test_only_subkey_expires(self, make_certificate):
        """Test a subkey expiration counts when the primary key never expires."""
        _, data = make_certificate(subkey_expiration=timedelta(days=10))

        result = await self.certificate_evaluator(data).evaluate(
            IDENTITY, datetime.now(UTC)
        )

        assert result == Days(days=9)

    @pytest.mark.asyncio
    async def test_primary_expires_first(self, make_certificate):
        """Test the primary key count wins when the subkey lives longer."""
        _, data = make_certificate(
            key_expiration=timedelta(days=30), subkey_expiration=timedelta(days=90)
        )

        result = await self.certificate_evaluator(data).evaluate(
            IDENTITY, datetime.now(UTC)
        )

        assert result == Days(days=29)

    @pytest.mark.asyncio
    async def test_sha1_bound_subkey_ignored(self, make_certificate):
        """Test a subkey bound only by SHA-1 signatures does not contribute."""
        _, data = make_certificate(
            key_expiration=timedelta(days=30),
            subkey_expiration=timedelta(days=10),
            binding_hash=HashAlgorithm.SHA1,
        )

        result = await self.certificate_evaluator(data).evaluate(
            IDENTITY, datetime.now(UTC)
        )

        assert result == Days(days=29)

    @pytest.mark.asyncio
    async def test_forged_binding_ignored(self, make_certificate):
        """Test a binding signed by another key does not set the expiration."""
        _, data = make_certificate(
            subkey_expiration=timedelta(days=10), forge_binding=True
        )

        result = await self.certificate_evaluator(data).evaluate(
            IDENTITY, datetime.now(UTC)
        )

        assert result == NoExpiration()

    @pytest.mark.asyncio
    async def test_binding_after_reference_time_ignored(self, make_certificate):
        """Test a binding created after the reference time is not in force yet."""
        _, data = make_certificate(subkey_expiration=timedelta(days=10))

        result = await self.certificate_evaluator(data).evaluate(
            IDENTITY, datetime.now(UTC) - timedelta(minutes=10)
        )

        assert result == NoExpiration()
