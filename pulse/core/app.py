"""FastAPI application factory for the Pulse bank-token service."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from pulse.api.routes_jwks import router as jwks_router
from pulse.api.routes_jwt_test import router as jwt_test_router
from pulse.api.schemas import ErrorBody
from pulse.core.log_config import configure_logging
from pulse.core.settings import AppSettings, SigningSettings
from pulse.crypto.errors import PulseAuthError

logger = logging.getLogger(__name__)


async def _auth_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Map signing-core errors to ``{error, message}`` responses."""
    assert isinstance(exc, PulseAuthError)
    logger.error("%s: %s", exc.code, exc.message)
    body = ErrorBody(error=exc.code, message=exc.message)
    return JSONResponse(body.model_dump(), status_code=exc.status_code)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = AppSettings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        signing = SigningSettings()
        if signing.private_key is None:
            logger.warning("JWT_PRIVATE_KEY is not set; JWKS and issuance will fail")
        else:
            logger.info("Signing with kid=%s", signing.key_id)
        yield

    app = FastAPI(
        title="Pulse bank-token issuer",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(PulseAuthError, _auth_error_handler)

    app.include_router(jwks_router)
    app.include_router(jwt_test_router)

    return app
