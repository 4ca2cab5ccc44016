"""FastAPI application factory for mlcli.

Usage::

    from mlcli.api.app import create_app

    app = create_app(
        store=VersionStore.open(config.store.jobs_dir),
        gate=AccessGate(CredentialStore(config.store.auth_file)),
        settings_store=SettingsStore(config.store.settings_file),
    )

The factory is used by both ``mlcli serve`` and the tests.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mlcli.api.routes import router
from mlcli.api.schemas import ErrorResponse
from mlcli.auth.gate import AccessGate
from mlcli.errors import (
    AuthError,
    ConfigError,
    InputError,
    MlcliError,
    NotFoundError,
    StateError,
    VersionNotFoundError,
)
from mlcli.ledger.version_store import VersionStore
from mlcli.persistence.state import SettingsStore
from mlcli.search.index import DEFAULT_THRESHOLD

_log = structlog.get_logger(component="api.app")

# Checked in order; the first matching base class wins. An unresolvable
# version is a bad request, an unknown job is 404.
_STATUS_BY_ERROR: tuple[tuple[type[MlcliError], int], ...] = (
    (VersionNotFoundError, 400),
    (InputError, 400),
    (StateError, 400),
    (NotFoundError, 404),
    (AuthError, 403),
    (ConfigError, 500),
)


def _status_for(exc: MlcliError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(
    store: VersionStore,
    gate: AccessGate,
    settings_store: SettingsStore,
    search_threshold: float = DEFAULT_THRESHOLD,
) -> FastAPI:
    """Create and configure the read-only mlcli FastAPI application.

    Args:
        store:            VersionStore serving the job history.
        gate:             AccessGate validating the ``x-api-key`` header.
        settings_store:   Source of the column selection for CSV/Markdown export.
        search_threshold: Fuzzy threshold for ``GET /jobs?query=``.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from mlcli import __version__

    app = FastAPI(
        title="mlcli",
        summary="Versioned ML job configuration API",
        version=__version__,
        # Every route requires an API key, so the unauthenticated docs are off.
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.store = store
    app.state.gate = gate
    app.state.settings_store = settings_store
    app.state.search_threshold = search_threshold

    app.include_router(router)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(MlcliError)
    async def domain_exception_handler(request: Request, exc: MlcliError) -> JSONResponse:
        status = _status_for(exc)
        log = _log.error if status >= 500 else _log.info
        log("request_failed", path=str(request.url.path), status=status, error=exc.code)
        return JSONResponse(
            status_code=status,
            content=ErrorResponse(error=exc.code, detail=str(exc)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Map query-parameter validation errors (e.g. non-integer versions) to 400."""
        errors = exc.errors()
        detail = ""
        if errors:
            locs = errors[0].get("loc", ())
            field = str(locs[-1]) if locs else ""
            detail = f"{field}: {errors[0].get('msg', '')}" if field else str(errors[0].get("msg", ""))
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REQUEST", detail=detail).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
