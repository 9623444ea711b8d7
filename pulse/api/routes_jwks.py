"""JWKS endpoints polled by the bank."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from starlette.responses import JSONResponse

from pulse.api.deps import load_app_settings, load_signing_settings
from pulse.core.settings import AppSettings, SigningSettings
from pulse.crypto.jwks import publish_jwks

router = APIRouter()

JWKS_PATH = "/.well-known/jwks.json"
ALT_JWKS_PATH = "/api/jwks"

JWKS_HEADERS = {
    "Cache-Control": "public, max-age=3600, s-maxage=3600",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET",
    "Access-Control-Allow-Headers": "Content-Type",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}
PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}


def _jwks_response(
    request: Request,
    signing: SigningSettings,
    app: AppSettings,
    extra_headers: dict[str, str] | None = None,
) -> JSONResponse:
    private_pem = (
        signing.private_key.get_secret_value() if signing.private_key else None
    )
    document = publish_jwks(
        private_pem, signing.key_id, f"{app.base_url}{request.url.path}"
    )
    return JSONResponse(
        document.model_dump(),
        headers={**JWKS_HEADERS, **(extra_headers or {})},
    )


@router.get(JWKS_PATH, response_model=None)
async def jwks(
    request: Request,
    signing: Annotated[SigningSettings, Depends(load_signing_settings)],
    app: Annotated[AppSettings, Depends(load_app_settings)],
) -> JSONResponse:
    """JSON Web Key Set for verifying our bank tokens."""
    return _jwks_response(request, signing, app)


@router.get(ALT_JWKS_PATH, response_model=None)
async def jwks_alternative(
    request: Request,
    signing: Annotated[SigningSettings, Depends(load_signing_settings)],
    app: Annotated[AppSettings, Depends(load_app_settings)],
) -> JSONResponse:
    """Same key set under a path that works where dot-directories do not."""
    return _jwks_response(
        request, signing, app, {"X-JWKS-Source": "alternative-endpoint"}
    )


@router.options(JWKS_PATH)
@router.options(ALT_JWKS_PATH)
async def jwks_preflight() -> Response:
    """CORS preflight."""
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)
