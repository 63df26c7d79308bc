"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response

from healthweave.api.middleware.error_handler import register_error_handlers
from healthweave.api.routes import analysis, health, reports
from healthweave.core.config import APIConfig, AppSettings
from healthweave.core.startup_checks import validate_settings
from healthweave.extraction.report_parser import ReportParser
from healthweave.formatters.pdf_formatter import PDFFormatter
from healthweave.hooks import AuditHook, bind_request_context, clear_request_context, setup_logging
from healthweave.persistence import create_backends
from healthweave.providers.factory import create_provider_chain
from healthweave.services.analysis_service import AnalysisService
from healthweave.services.report_service import ReportService
from healthweave.services.report_store import ReportStore


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("healthweave")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


def build_services(settings: AppSettings) -> tuple[AnalysisService, ReportService]:
    """Wire providers, persistence, audit and formatters from settings."""
    report_backend, audit_backend = create_backends(settings.persistence)
    store = ReportStore(report_backend)
    audit = AuditHook(backend=audit_backend)
    analysis_service = AnalysisService(
        create_provider_chain(settings),
        ReportParser(settings.extraction),
        store=store,
        audit=audit,
    )
    report_service = ReportService(store, PDFFormatter(settings.pdf), audit=audit)
    return analysis_service, report_service


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    analysis_service: Optional[AnalysisService] = None,
    report_service: Optional[ReportService] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build the application; services are created at startup unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app_settings = settings or AppSettings()
        validate_settings(app_settings)
        if configure_logging:
            setup_logging(app_settings.observability)

        services = (analysis_service, report_service)
        if analysis_service is None or report_service is None:
            built = build_services(app_settings)
            services = (analysis_service or built[0], report_service or built[1])
        app.state.settings = app_settings
        app.state.analysis_service, app.state.report_service = services
        yield

    api_config = settings.api if settings else APIConfig()
    app = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def request_context(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        bind_request_context(
            request_id=request_id,
            requester_id=request.headers.get("x-requester-id") or "anonymous",
        )
        try:
            response = await call_next(request)
        finally:
            clear_request_context("request_id", "requester_id")
        response.headers["X-Request-Id"] = request_id
        return response

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(analysis.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")
    return app


app = create_app()
