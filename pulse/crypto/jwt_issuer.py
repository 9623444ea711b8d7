"""RS256 bank-token issuance."""

import logging
import re
import time
from collections.abc import Callable
from datetime import UTC, datetime

import jwt
import uuid_utils

from pulse.crypto.errors import (
    ConfigurationError,
    KeyFormatError,
    MissingPrivateKeyError,
    SigningError,
    UnsupportedKeyTypeError,
)
from pulse.crypto.keys import ensure_key_size, load_private_key, public_jwk_from_key
from pulse.crypto.types import (
    ALGORITHM,
    ClaimsInput,
    IssuerConfig,
    TokenClaims,
    TokenOptions,
)

logger = logging.getLogger(__name__)

DEFAULT_LIFETIME = 3600
_DURATION_PATTERN = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def resolve_lifetime(expires_in: str | int | float | None) -> int:
    """Turn an ``expires_in`` value into a token lifetime in seconds.

    ``"30m"``-style strings use the s/m/h/d units and bare numbers are
    seconds, truncated to whole seconds. Anything else falls back to one hour.
    """
    if isinstance(expires_in, bool) or expires_in is None:
        lifetime = DEFAULT_LIFETIME
    elif isinstance(expires_in, int | float):
        lifetime = int(expires_in)
    else:
        match = _DURATION_PATTERN.match(expires_in)
        if match is None:
            logger.warning(
                "Unrecognised expires_in %r, defaulting to %ds",
                expires_in,
                DEFAULT_LIFETIME,
            )
            lifetime = DEFAULT_LIFETIME
        else:
            amount, unit = match.groups()
            lifetime = int(amount) * _UNIT_SECONDS[unit]
    if lifetime <= 0:
        raise ConfigurationError(f"Token lifetime must be positive, got {lifetime}s")
    return lifetime


class TokenIssuer:
    """Builds claim sets and signs them with the configured RSA key."""

    def __init__(
        self,
        config: IssuerConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._clock = clock

    @property
    def key_id(self) -> str:
        return self._config.key_id

    def build_claims(
        self,
        claims: ClaimsInput | None = None,
        options: TokenOptions | None = None,
    ) -> TokenClaims:
        """Assemble the full claim set with fresh iat/nbf/exp/jti."""
        claims = claims or ClaimsInput()
        options = options or TokenOptions()
        cfg = self._config

        now = int(self._clock())
        expires_in = (
            options.expires_in if options.expires_in is not None else cfg.expires_in
        )
        lifetime = resolve_lifetime(expires_in)

        return TokenClaims(
            iss=claims.iss or options.issuer or cfg.issuer,
            aud=claims.aud or options.audience or cfg.audience,
            sub=claims.sub or cfg.subject,
            exp=now + lifetime,
            iat=now,
            nbf=now,
            jti=str(uuid_utils.uuid4()),
            company_id=claims.company_id,
            company_name=claims.company_name or cfg.company_name,
            api_version=claims.api_version or cfg.api_version,
            scope=claims.scope,
            app_version=claims.app_version or cfg.app_version,
            environment=claims.environment or cfg.environment,
        )

    def issue(
        self,
        claims: ClaimsInput | None = None,
        options: TokenOptions | None = None,
    ) -> str:
        """Create a signed RS256 bank token."""
        if self._config.private_key_pem is None:
            raise MissingPrivateKeyError("No JWT private key is configured")
        if not self._config.key_id:
            raise ConfigurationError("No JWT key id is configured")

        try:
            private_key = load_private_key(
                self._config.private_key_pem.get_secret_value()
            )
        except (KeyFormatError, UnsupportedKeyTypeError) as exc:
            raise SigningError(f"Cannot sign with configured key: {exc}") from exc
        ensure_key_size(public_jwk_from_key(private_key, self._config.key_id))

        full = self.build_claims(claims, options)
        try:
            token = jwt.encode(
                full.to_payload(),
                private_key,
                algorithm=ALGORITHM,
                headers={"typ": "JWT", "kid": self._config.key_id},
            )
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise SigningError("RS256 signing failed") from exc

        logger.info(
            "Issued token jti=%s kid=%s aud=%s exp=%s",
            full.jti,
            self._config.key_id,
            full.aud,
            datetime.fromtimestamp(full.exp, UTC).isoformat(),
        )
        return token
