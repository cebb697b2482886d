"""
Main entrypoint for the Market Admin API.

This module assembles the FastAPI application: logging, CORS, error
handlers and the versioned routers.  ``create_app`` takes the settings
object and, optionally, a backend gateway; both are stored on
``app.state`` and handed to request handlers through dependencies.
The module‑level ``app`` is built from the environment so that an ASGI
server can discover it, e.g.::

    uvicorn market_admin_api.app.main:app --reload
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.backend import SupabaseBackend
from .core.config import Settings
from .core.errors import AccountError, InternalError
from .core.logging_config import setup_logging
from .core.security import authorize_request


logger = logging.getLogger(__name__)

# Headers the browser client sends along with function invocations.
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def _cors_headers(settings: Settings) -> Dict[str, str]:
    origins = settings.cors_origins or ("*",)
    return {
        "Access-Control-Allow-Origin": "*" if "*" in origins else origins[0],
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def _error_response(exc: AccountError) -> JSONResponse:
    return JSONResponse(content=exc.to_body(), status_code=exc.status_code, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Turn every failure into a JSON body of the form ``{"error": ...}``."""

    @app.exception_handler(AccountError)
    async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Bodies are decoded before route dependencies run; an unparsable
        # body must still be answered with 401/403 for unauthorised callers.
        try:
            await run_in_threadpool(authorize_request, request)
        except AccountError as auth_error:
            return _error_response(auth_error)
        return JSONResponse(
            content={"error": "Invalid request body", "details": _validation_details(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            error = InternalError(f"Server error: {exc}")
            return JSONResponse(content=error.to_body(), status_code=error.status_code)


def create_app(settings: Optional[Settings] = None, backend: Optional[SupabaseBackend] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Read from the environment when omitted.
    backend : Optional[SupabaseBackend]
        Gateway to the credential service and record store.  Built from
        ``settings`` when omitted; tests pass an in‑memory stand‑in.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or Settings()
    # Initialise logging before anything else so that the configuration
    # check below is reported.
    setup_logging(settings.log_level, settings.log_file or None, secrets=(settings.service_role_key,))
    for problem in settings.validate():
        logger.warning("Configuration problem: %s", problem)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.backend = backend if backend is not None else SupabaseBackend(settings)

    register_exception_handlers(app)
    # Added last so it wraps every other layer, error responses included.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins) or ["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    # Function routes live under the same prefix the hosted platform
    # uses, so existing clients keep their URLs.
    app.include_router(v1_router, prefix="/functions/v1")

    preflight_headers = _cors_headers(settings)

    @app.options("/{full_path:path}", include_in_schema=False)
    def preflight(full_path: str) -> Response:
        """Answer bare OPTIONS requests with an empty body.

        Browser preflights (with ``Origin`` and
        ``Access-Control-Request-Method``) are answered by the CORS
        middleware before they reach this route.
        """
        return Response(status_code=status.HTTP_200_OK, headers=preflight_headers)

    @app.get("/health", tags=["health"])
    def health() -> Dict[str, Any]:
        return {"status": "ok", "configured": settings.is_configured}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
