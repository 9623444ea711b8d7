"""Type definitions for key material, JWKS documents, and token claims."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr

ALGORITHM = "RS256"


def to_camel(name: str) -> str:
    """Convert snake_case to camelCase for claim names on the wire."""
    parts = name.split("_")
    return parts[0] + "".join(p.capitalize() for p in parts[1:])


class RSAPublicJWK(BaseModel):
    """Public half of an RSA signing key in JWK form."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kty: Literal["RSA"] = "RSA"
    kid: str
    use: Literal["sig"] = "sig"
    alg: Literal["RS256"] = "RS256"
    n: str
    e: str


class JWKSKey(RSAPublicJWK):
    """JWK entry as published in the key set."""

    key_ops: list[Literal["verify"]] = Field(default_factory=lambda: ["verify"])
    ext: bool = True
    x5u: str


class JWKSDocument(BaseModel):
    """JSON Web Key Set response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    keys: list[JWKSKey]


class KeyPair(BaseModel):
    """A freshly generated RSA keypair in every representation callers need."""

    model_config = ConfigDict(frozen=True)

    kid: str
    private_key_pem: str = Field(repr=False)
    public_key_pem: str
    jwk: RSAPublicJWK
    alg: Literal["RS256"] = "RS256"
    key_size: int


class ClaimsInput(BaseModel):
    """Caller-supplied claims; anything left unset is filled at issuance."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    iss: str | None = None
    aud: str | None = None
    sub: str | None = None
    company_id: str | None = None
    company_name: str | None = None
    api_version: str | None = None
    scope: list[str] | None = None
    app_version: str | None = None
    environment: str | None = None


class TokenClaims(BaseModel):
    """Complete payload of a signed bank token."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    iss: str
    aud: str
    sub: str
    exp: int
    iat: int
    nbf: int
    jti: str
    company_id: str | None = None
    company_name: str
    api_version: str
    scope: list[str] | None = None
    app_version: str
    environment: str

    def to_payload(self) -> dict[str, object]:
        """Serialize to the JSON claim set with camelCase names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TokenOptions(BaseModel):
    """Per-call overrides for expiry, audience, and issuer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    expires_in: str | int | float | None = None
    audience: str | None = None
    issuer: str | None = None


class IssuerConfig(BaseModel):
    """Static signing configuration, built once and shared read-only."""

    model_config = ConfigDict(frozen=True)

    private_key_pem: SecretStr | None = None
    key_id: str
    issuer: str
    audience: str = "banco-api"
    subject: str = "biotissue-pulse-app"
    company_name: str = "BioTissue Colombia"
    api_version: str = "1.0"
    app_version: str = "0.1.0"
    environment: str = "production"
    expires_in: str | int | float = "1h"
