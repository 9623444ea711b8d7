"""RS256-only token verification and unverified debug decoding."""

from collections.abc import Mapping
from typing import Any

import jwt
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from jwt.types import Options
from pydantic import ValidationError

from pulse.crypto.errors import (
    ExpiredTokenError,
    MalformedTokenError,
    TokenNotYetValidError,
    VerificationError,
)
from pulse.crypto.keys import load_public_key, validate_key_size
from pulse.crypto.types import ALGORITHM, JWKSDocument, TokenClaims

REQUIRED_CLAIMS = ["exp", "iat", "nbf", "jti", "iss", "aud", "sub"]


def decode_header(token: str) -> dict[str, Any]:
    """Return the JOSE header without verifying anything."""
    try:
        return jwt.get_unverified_header(token)
    except jwt.InvalidTokenError as exc:
        raise MalformedTokenError("Token header cannot be decoded") from exc


def decode_payload(token: str) -> dict[str, Any]:
    """Return the claim set without verifying anything. Debugging only."""
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as exc:
        raise MalformedTokenError("Token payload cannot be decoded") from exc


def _select_jwk(keys: Mapping[str, Any], kid: str | None) -> Mapping[str, Any]:
    """Pick the key set entry matching the token's kid."""
    entries = keys.get("keys")
    if not isinstance(entries, list) or not entries:
        raise VerificationError("Key set contains no keys")
    if kid is None:
        if len(entries) == 1 and isinstance(entries[0], Mapping):
            return entries[0]
        raise VerificationError("Token has no kid and no single usable key")
    for entry in entries:
        if isinstance(entry, Mapping) and entry.get("kid") == kid:
            return entry
    raise VerificationError(f"No key in the key set matches kid {kid!r}")


class TokenValidator:
    """Verifies RS256 bank tokens against a public key or a JWKS document."""

    def __init__(
        self,
        audience: str | None = None,
        issuer: str | None = None,
        leeway: int = 0,
    ) -> None:
        self._audience = audience
        self._issuer = issuer
        self._leeway = leeway

    def _resolve_key(
        self,
        key: str | JWKSDocument | Mapping[str, Any],
        header: Mapping[str, Any],
    ) -> RSAPublicKey:
        if isinstance(key, str):
            return load_public_key(key)
        keys = key.model_dump() if isinstance(key, JWKSDocument) else key
        entry = _select_jwk(keys, header.get("kid"))
        if not validate_key_size(entry):
            raise VerificationError("Key set entry is not an RSA key of 2048+ bits")
        try:
            resolved = jwt.PyJWK(dict(entry), algorithm=ALGORITHM).key
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise VerificationError("Key set entry cannot be used") from exc
        if not isinstance(resolved, RSAPublicKey):
            raise VerificationError("Key set entry is not an RSA public key")
        return resolved

    def verify(
        self,
        token: str,
        key: str | JWKSDocument | Mapping[str, Any],
    ) -> TokenClaims:
        """Verify signature, algorithm, and time claims; return the claims."""
        header = decode_header(token)
        if header.get("alg") != ALGORITHM:
            raise VerificationError(
                f"Algorithm {header.get('alg')!r} is not allowed; expected {ALGORITHM}"
            )
        public_key = self._resolve_key(key, header)

        opts: Options = {"require": REQUIRED_CLAIMS}
        if self._audience is None:
            opts["verify_aud"] = False
        try:
            raw = jwt.decode(
                token,
                public_key,
                algorithms=[ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                leeway=self._leeway,
                options=opts,
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except jwt.ImmatureSignatureError as exc:
            raise TokenNotYetValidError("Token is not valid yet") from exc
        except jwt.InvalidSignatureError as exc:
            raise VerificationError("Signature verification failed") from exc
        except jwt.DecodeError as exc:
            raise MalformedTokenError("Token cannot be decoded") from exc
        except jwt.PyJWTError as exc:
            raise VerificationError(f"Token rejected: {exc}") from exc

        try:
            return TokenClaims.model_validate(raw)
        except ValidationError as exc:
            raise MalformedTokenError("Token claims do not match the expected shape") from exc
