"""Application settings loaded from environment variables."""

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pulse.crypto.types import IssuerConfig

DEFAULT_KEY_ID = "pulse-main-key"
DEFAULT_BASE_URL = "https://pulse-app.vercel.app"


class SigningSettings(BaseSettings):
    """JWT signing key and token defaults."""

    model_config = SettingsConfigDict(env_prefix="JWT_", env_file=".env", extra="ignore")

    private_key: SecretStr | None = None
    key_id: str = DEFAULT_KEY_ID
    public_key: str | None = None
    expires_in: str | int = "1h"
    audience: str = "banco-api"

    @field_validator("private_key", mode="before")
    @classmethod
    def _unescape_newlines(cls, value: object) -> object:
        # Hosting dashboards often store multi-line PEMs with literal "\n".
        if isinstance(value, str):
            return value.replace("\\n", "\n").strip() or None
        return value

    @field_validator("public_key", mode="before")
    @classmethod
    def _unescape_public(cls, value: object) -> object:
        if isinstance(value, str):
            return value.replace("\\n", "\n").strip() or None
        return value

    @field_validator("expires_in", mode="before")
    @classmethod
    def _numeric_seconds(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value


class AppSettings(BaseSettings):
    """Application identity used for issuer URLs and default claims."""

    model_config = SettingsConfigDict(env_prefix="PULSE_", env_file=".env", extra="ignore")

    base_url: str = DEFAULT_BASE_URL
    subject: str = "biotissue-pulse-app"
    company_name: str = "BioTissue Colombia"
    api_version: str = "1.0"
    app_version: str = "0.1.0"
    environment: str = "production"
    log_level: str = "INFO"

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


def build_issuer_config(signing: SigningSettings, app: AppSettings) -> IssuerConfig:
    """Freeze settings into the explicit config passed to the issuer."""
    return IssuerConfig(
        private_key_pem=signing.private_key,
        key_id=signing.key_id,
        issuer=app.base_url,
        audience=signing.audience,
        subject=app.subject,
        company_name=app.company_name,
        api_version=app.api_version,
        app_version=app.app_version,
        environment=app.environment,
        expires_in=signing.expires_in,
    )
