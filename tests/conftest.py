"""Global pytest configuration and fixtures for all tests."""

from datetime import timedelta

import pytest
from loguru import logger

from pgp_expiration.config import Settings, get_settings

# Environment variables read by Settings; cleared so the host environment
# never leaks into a test
PLUGIN_ENV_VARS = [
    "emails",
    "MUNIN_PLUGSTATE",
    "MUNIN_CAP_DIRTYCONFIG",
    "warning",
    "critical",
    "WKD_VARIANT",
    "REQUEST_TIMEOUT",
    "IDENTITY_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove plugin variables from the environment and reset cached settings."""
    for name in PLUGIN_ENV_VARS:
        monkeypatch.delenv(name.upper(), raising=False)
        monkeypatch.delenv(name.lower(), raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added during a test (they may point to closed streams)."""
    yield
    logger.remove()


@pytest.fixture
def plugin_env(monkeypatch, tmp_path):
    """Minimal Munin environment: two identities and a state directory."""
    monkeypatch.setenv("emails", "alice@example.org bob@example.net")
    monkeypatch.setenv("MUNIN_PLUGSTATE", str(tmp_path))
    return tmp_path


@pytest.fixture
def settings(tmp_path):
    """Settings built in code, independent from the environment."""
    return Settings(emails="alice@example.org", state_dir=str(tmp_path))


@pytest.fixture
def make_certificate():
    """
    Factory generating real OpenPGP certificates with PGPy.

    Returns the secret key and its ASCII-armored public certificate. RSA keys
    are used so the generated certificates satisfy the default key policy.
    Keys are created one hour in the past; the subkey is first bound half an
    hour later, so a binding added by `subkey_expiration` is the newest one.
    """
    from datetime import UTC, datetime

    import pgpy
    from pgpy.constants import (
        CompressionAlgorithm,
        HashAlgorithm,
        KeyFlags,
        PubKeyAlgorithm,
        SignatureType,
        SymmetricKeyAlgorithm,
    )

    def _make(
        email: str = "alice@example.org",
        key_expiration: timedelta | None = None,
        with_subkey: bool = True,
        revoke_subkey: bool = False,
        revoke_primary: bool = False,
        subkey_expiration: timedelta | None = None,
        binding_hash: HashAlgorithm = HashAlgorithm.SHA256,
        forge_binding: bool = False,
    ):
        now = datetime.now(UTC)
        created = now - timedelta(hours=1)
        key = pgpy.PGPKey.new(PubKeyAlgorithm.RSAEncryptOrSign, 2048, created=created)
        uid = pgpy.PGPUID.new("Test User", email=email)

        prefs = {
            "usage": {KeyFlags.Sign, KeyFlags.Certify},
            "hashes": [HashAlgorithm.SHA256],
            "ciphers": [SymmetricKeyAlgorithm.AES256],
            "compression": [CompressionAlgorithm.Uncompressed],
        }
        if key_expiration is not None:
            prefs["key_expiration"] = key_expiration
        key.add_uid(uid, **prefs)

        if with_subkey:
            usage = {KeyFlags.EncryptCommunications, KeyFlags.EncryptStorage}
            subkey = pgpy.PGPKey.new(
                PubKeyAlgorithm.RSAEncryptOrSign, 2048, created=created
            )
            key.add_subkey(
                subkey,
                usage=usage,
                hash=binding_hash,
                created=created + timedelta(minutes=30),
            )

            if subkey_expiration is not None:
                # PGPy's bind() cannot set a key expiration time
                binding = pgpy.PGPSignature.new(
                    SignatureType.Subkey_Binding,
                    key.key_algorithm,
                    binding_hash,
                    key.fingerprint.keyid,
                    created=now,
                )
                binding._signature.subpackets.addnew(
                    "KeyFlags", hashed=True, flags=usage
                )
                binding._signature.subpackets.addnew(
                    "KeyExpirationTime", hashed=True, expires=subkey_expiration
                )
                signer = key
                if forge_binding:
                    signer = pgpy.PGPKey.new(PubKeyAlgorithm.RSAEncryptOrSign, 2048)
                subkey |= signer._sign(
                    subkey, binding, include_issuer_fingerprint=False
                )

            if revoke_subkey:
                subkey |= key.revoke(subkey)

        if revoke_primary:
            key |= key.revoke(key)

        return key, str(key.pubkey).encode()

    return _make

