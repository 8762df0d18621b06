"""FastAPI application exposing the resume generation function."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resume_builder import __version__
from resume_builder.config import AppConfig, get_api_key, load_config
from resume_builder.exceptions import (
    ArchiveWriteError,
    EmptyCompletion,
    EmptyJobDescription,
    InvalidRequest,
    MisconfiguredService,
    ProfileStoreError,
    ProviderError,
    ResumeBuilderError,
    ResumeNotFound,
    ResumeSaveError,
    Unauthenticated,
    UnknownTemplate,
)
from resume_builder.pipeline.orchestrator import ResumeBuilder
from resume_builder.server import routes

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

STATUS_BY_ERROR: dict[type[ResumeBuilderError], int] = {
    Unauthenticated: 401,
    EmptyJobDescription: 400,
    UnknownTemplate: 400,
    InvalidRequest: 400,
    ResumeNotFound: 404,
    MisconfiguredService: 500,
    ArchiveWriteError: 500,
    ProfileStoreError: 500,
    ResumeSaveError: 500,
    ProviderError: 502,
    EmptyCompletion: 502,
}


def status_for(error: ResumeBuilderError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def create_app(
    config: AppConfig | None = None,
    builder: ResumeBuilder | None = None,
) -> FastAPI:
    """Build the application.

    A missing provider key is detected here, once. The app still starts so
    that health checks respond, but every request that needs the builder
    fails with ``MisconfiguredService``.
    """
    config = config or load_config()
    startup_error: MisconfiguredService | None = None
    if builder is None:
        try:
            builder = ResumeBuilder.from_config(config, get_api_key())
        except MisconfiguredService as e:
            logger.error("Service misconfigured: %s", e.message)
            startup_error = e

    app = FastAPI(title="AI Resume Builder", version=__version__)
    app.state.config = config
    app.state.builder = builder
    app.state.startup_error = startup_error

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.exception_handler(ResumeBuilderError)
    async def _handle_service_error(request: Request, exc: ResumeBuilderError) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.error("%s on %s: %s", exc.kind, request.url.path, exc.message)
        else:
            logger.info("%s on %s: %s", exc.kind, request.url.path, exc.message)
        return JSONResponse(status_code=status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return await _handle_service_error(request, InvalidRequest(_validation_message(exc)))

    app.include_router(routes.router)
    return app


def _validation_message(exc: RequestValidationError) -> str:
    """Failed fields as ``loc: msg``, joined by ``; ``."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value"))
    return "; ".join(parts) or "Invalid request"
