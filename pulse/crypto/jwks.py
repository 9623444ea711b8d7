"""JWKS document assembly for the bank's signature verification."""

import logging

from pulse.crypto.errors import ConfigurationError, MissingPrivateKeyError
from pulse.crypto.keys import derive_public_jwk, ensure_key_size, modulus_bits
from pulse.crypto.types import JWKSDocument, JWKSKey

logger = logging.getLogger(__name__)


def publish_jwks(private_key_pem: str | None, kid: str, self_url: str) -> JWKSDocument:
    """Build the single-key JWKS document for the configured private key.

    The key set is derived from the private key on every call and carries only
    the public modulus and exponent. Keys below 2048 bits raise KeySizeError
    instead of being published.
    """
    if not private_key_pem:
        raise MissingPrivateKeyError("No JWT private key is configured")
    if not kid:
        raise ConfigurationError("No JWT key id is configured")

    jwk = derive_public_jwk(private_key_pem, kid)
    ensure_key_size(jwk)

    entry = JWKSKey(**jwk.model_dump(), x5u=self_url)
    logger.info("Published JWKS kid=%s size=%d bits", kid, modulus_bits(jwk))
    return JWKSDocument(keys=[entry])
