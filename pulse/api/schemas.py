"""Response schemas for the JWT self-test endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pulse.crypto.types import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SelfTestConfig(_CamelModel):
    """Where the bank should look for our keys."""

    key_id: str
    private_key_configured: bool
    jwks_endpoint_standard: str
    jwks_endpoint_alternative: str
    app_url: str


class TokenPreview(_CamelModel):
    """Header and a safe subset of claims; never the token itself."""

    header: dict[str, Any]
    claims: dict[str, Any]


class SelfTestResult(_CamelModel):
    token_generated: bool
    verified: bool
    token_preview: TokenPreview


class SelfTestReport(_CamelModel):
    """GET /api/jwt/test response."""

    success: bool
    message: str
    config: SelfTestConfig
    test: SelfTestResult
    next_steps: list[str] = Field(default_factory=list)


class ErrorBody(BaseModel):
    """Error envelope returned for every signing-core failure."""

    error: str
    message: str
