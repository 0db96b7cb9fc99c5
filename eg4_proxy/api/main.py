"""
FastAPI application factory for the EG4 session proxy.

Builds the app, registers the routers under the configured prefix, and maps
errors to ``{"error": message}`` bodies:

- HTTPException (missing input, auth gate) -> its own status code
- malformed request -> 400
- AuthError (upstream rejected the login) -> 401
- UpstreamError (network failure, unexpected upstream body) -> 500

The SessionContext and the Eg4Client are created in the lifespan and stored
on app.state for the route dependencies.

CHANGELOG:
- 2026-10-15: Serve GET / and GET /health from the status router
- 2026-10-15: Register realtime router
- 2026-10-14: Register inverter router
- 2026-10-13: Add exception handlers for upstream errors
- 2026-10-12: Initial creation
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eg4_proxy.api.inverter import router as inverter_router
from eg4_proxy.api.realtime import router as realtime_router
from eg4_proxy.api.session import router as session_router
from eg4_proxy.api.status import router as status_router
from eg4_proxy.auth.session import SessionContext
from eg4_proxy.client import AuthError, Eg4Client, UpstreamError
from eg4_proxy.config import ProxySettings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: build session state and upstream client.

    Startup:
        - Creates the process-wide SessionContext.
        - Creates the Eg4Client for the configured base URL.

    Shutdown:
        - Logs that the proxy is shutting down.
    """
    settings: ProxySettings = app.state.settings
    app.state.session = SessionContext(
        timeout=timedelta(seconds=settings.session_timeout_s)
    )
    app.state.eg4_client = Eg4Client(settings.eg4_base_url)
    logger.info("EG4 proxy ready, upstream %s", settings.eg4_base_url)
    yield
    logger.info("EG4 proxy shutting down")


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    logger.warning("Authentication error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=401, content={"error": str(exc)})


async def _upstream_error_handler(
    request: Request, exc: UpstreamError
) -> JSONResponse:
    logger.error("Upstream error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_app(settings: ProxySettings | None = None) -> FastAPI:
    """Create and configure the proxy application.

    Args:
        settings: Configuration to use; loaded from the environment when None.

    Returns:
        FastAPI: The configured application.
    """
    if settings is None:
        settings = ProxySettings()

    app = FastAPI(
        title="EG4 Session Proxy",
        description="Session-relaying proxy for the EG4 inverter monitoring API.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(AuthError, _auth_error_handler)
    app.add_exception_handler(UpstreamError, _upstream_error_handler)

    app.include_router(status_router)
    app.include_router(session_router, prefix=settings.api_prefix)
    app.include_router(inverter_router, prefix=settings.api_prefix)
    app.include_router(realtime_router, prefix=settings.api_prefix)

    return app
