"""FastAPI dependency injection for settings and the token issuer."""

from typing import Annotated

from fastapi import Depends

from pulse.core.settings import AppSettings, SigningSettings, build_issuer_config
from pulse.crypto.jwt_issuer import TokenIssuer
from pulse.crypto.types import IssuerConfig


def load_signing_settings() -> SigningSettings:
    return SigningSettings()


def load_app_settings() -> AppSettings:
    return AppSettings()


def get_issuer_config(
    signing: Annotated[SigningSettings, Depends(load_signing_settings)],
    app: Annotated[AppSettings, Depends(load_app_settings)],
) -> IssuerConfig:
    """Build the read-only issuer configuration for this request."""
    return build_issuer_config(signing, app)


def get_token_issuer(
    config: Annotated[IssuerConfig, Depends(get_issuer_config)],
) -> TokenIssuer:
    """Token issuer for handlers that call the bank API."""
    return TokenIssuer(config)
