"""RSA signing key generation, parsing, and JWK conversion."""

import base64
import binascii
import time
from collections.abc import Mapping
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from pulse.crypto.errors import KeyFormatError, KeySizeError, UnsupportedKeyTypeError
from pulse.crypto.types import KeyPair, RSAPublicJWK

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
MIN_MODULUS_BYTES = RSA_KEY_SIZE // 8
KID_PREFIX = "pulse-key"


def generate_rsa_keypair(kid: str | None = None) -> KeyPair:
    """Generate a new RSA-2048 keypair for RS256 signing.

    The key id defaults to ``pulse-key-<epoch millis>``; a caller-supplied
    ``kid`` is used as is. Nothing is written anywhere.
    """
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    if kid is None:
        kid = f"{KID_PREFIX}-{int(time.time() * 1000)}"
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    return KeyPair(
        kid=kid,
        private_key_pem=private_pem,
        public_key_pem=_public_pem(private_key),
        jwk=public_jwk_from_key(private_key, kid),
        key_size=private_key.key_size,
    )


def load_private_key(private_key_pem: str) -> RSAPrivateKey:
    """Parse an unencrypted PKCS#1 or PKCS#8 PEM private key."""
    try:
        loaded = serialization.load_pem_private_key(
            private_key_pem.encode(), password=None
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError("Private key is not a valid PEM-encoded key") from exc
    if not isinstance(loaded, RSAPrivateKey):
        raise UnsupportedKeyTypeError(
            f"Expected an RSA private key, got {type(loaded).__name__}"
        )
    return loaded


def load_public_key(public_key_pem: str) -> RSAPublicKey:
    """Parse a SubjectPublicKeyInfo or PKCS#1 PEM public key."""
    try:
        loaded = serialization.load_pem_public_key(public_key_pem.encode())
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError("Public key is not a valid PEM-encoded key") from exc
    if not isinstance(loaded, RSAPublicKey):
        raise UnsupportedKeyTypeError(
            f"Expected an RSA public key, got {type(loaded).__name__}"
        )
    return loaded


def _public_pem(private_key: RSAPrivateKey) -> str:
    return (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )


def public_key_pem(private_key_pem: str) -> str:
    """Return the SubjectPublicKeyInfo PEM matching a private key."""
    return _public_pem(load_private_key(private_key_pem))


def _int_to_base64url(value: int) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _base64url_decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode())


def public_jwk_from_key(private_key: RSAPrivateKey, kid: str) -> RSAPublicJWK:
    """Build the public JWK from an already parsed private key."""
    # Only the public numbers are read; d, p, q and the CRT values never leave here.
    numbers = private_key.public_key().public_numbers()
    return RSAPublicJWK(
        kid=kid,
        n=_int_to_base64url(numbers.n),
        e=_int_to_base64url(numbers.e),
    )


def derive_public_jwk(private_key_pem: str, kid: str) -> RSAPublicJWK:
    """Convert a PEM private key to its public JWK tagged with ``kid``."""
    return public_jwk_from_key(load_private_key(private_key_pem), kid)


def _jwk_fields(jwk: RSAPublicJWK | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(jwk, RSAPublicJWK):
        return jwk.model_dump()
    return jwk


def modulus_bits(jwk: RSAPublicJWK | Mapping[str, Any]) -> int:
    """Length of the decoded modulus in bits; 0 when it cannot be decoded."""
    n = _jwk_fields(jwk).get("n")
    if not isinstance(n, str):
        return 0
    try:
        return len(_base64url_decode(n)) * 8
    except (binascii.Error, ValueError):
        return 0


def validate_key_size(jwk: RSAPublicJWK | Mapping[str, Any]) -> bool:
    """Return True only for an RSA JWK with a modulus of at least 2048 bits."""
    if _jwk_fields(jwk).get("kty") != "RSA":
        return False
    return modulus_bits(jwk) >= MIN_MODULUS_BYTES * 8


def ensure_key_size(jwk: RSAPublicJWK) -> None:
    """Raise KeySizeError unless the key passes ``validate_key_size``."""
    if not validate_key_size(jwk):
        raise KeySizeError(
            f"RSA key {jwk.kid!r} has a {modulus_bits(jwk)}-bit modulus; "
            f"at least {RSA_KEY_SIZE} bits are required"
        )
