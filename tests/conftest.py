"""Shared test fixtures for the Pulse bank-token service."""

from collections.abc import AsyncIterator

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from httpx import ASGITransport, AsyncClient

from pulse.core.app import create_app
from pulse.crypto.keys import generate_rsa_keypair
from pulse.crypto.types import IssuerConfig, KeyPair

BASE_URL = "https://pulse.example.com"
KEY_ID = "pulse-test-key"


def _private_pem(key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def keypair() -> KeyPair:
    """One RSA-2048 keypair shared across the test session."""
    return generate_rsa_keypair(KEY_ID)


@pytest.fixture(scope="session")
def weak_private_pem() -> str:
    """PEM of a 1024-bit RSA key."""
    return _private_pem(rsa.generate_private_key(public_exponent=65537, key_size=1024))


@pytest.fixture(scope="session")
def ec_private_pem() -> str:
    """PEM of a P-256 EC key."""
    return _private_pem(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def issuer_config(keypair: KeyPair) -> IssuerConfig:
    return IssuerConfig(
        private_key_pem=keypair.private_key_pem,
        key_id=keypair.kid,
        issuer=BASE_URL,
    )


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch, keypair: KeyPair) -> None:
    """Set environment variables for test settings."""
    monkeypatch.setenv("JWT_PRIVATE_KEY", keypair.private_key_pem)
    monkeypatch.setenv("JWT_KEY_ID", keypair.kid)
    monkeypatch.delenv("JWT_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("JWT_EXPIRES_IN", raising=False)
    monkeypatch.delenv("JWT_AUDIENCE", raising=False)
    monkeypatch.setenv("PULSE_BASE_URL", BASE_URL)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Create an httpx test client bound to a fresh app."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
