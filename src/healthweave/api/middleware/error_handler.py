"""Global exception handlers mapping domain exceptions to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from healthweave.exceptions import (
    AllProvidersFailedError,
    HealthWeaveError,
    LocalModelUnreachableError,
    PersistenceError,
    ProviderRejectedError,
    ProviderTimeoutError,
    ReportNotFoundError,
)

log = logging.getLogger(__name__)


def _error(status_code: int, exc: Exception, kind: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": kind})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception-to-HTTP-status mappings."""

    @app.exception_handler(ProviderRejectedError)
    async def handle_rejected(request: Request, exc: ProviderRejectedError) -> JSONResponse:
        return _error(502, exc, "request_rejected")

    @app.exception_handler(AllProvidersFailedError)
    async def handle_no_provider(request: Request, exc: AllProvidersFailedError) -> JSONResponse:
        return _error(503, exc, "no_provider_reachable")

    @app.exception_handler(LocalModelUnreachableError)
    async def handle_local_unreachable(request: Request, exc: LocalModelUnreachableError) -> JSONResponse:
        return _error(503, exc, "local_model_unreachable")

    @app.exception_handler(ProviderTimeoutError)
    async def handle_timeout(request: Request, exc: ProviderTimeoutError) -> JSONResponse:
        return _error(504, exc, "timed_out")

    @app.exception_handler(ReportNotFoundError)
    async def handle_not_found(request: Request, exc: ReportNotFoundError) -> JSONResponse:
        return _error(404, exc, "not_found")

    @app.exception_handler(PersistenceError)
    async def handle_persistence(request: Request, exc: PersistenceError) -> JSONResponse:
        log.error("Persistence failure on %s: %s", request.url.path, exc)
        return _error(500, exc, "persistence_error")

    @app.exception_handler(HealthWeaveError)
    async def handle_generic_error(request: Request, exc: HealthWeaveError) -> JSONResponse:
        return _error(500, exc, "healthweave_error")

    @app.exception_handler(ValueError)
    async def handle_bad_input(request: Request, exc: ValueError) -> JSONResponse:
        return _error(400, exc, "bad_request")
