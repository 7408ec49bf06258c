"""Application assembly: the pipeline built from settings, and the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from fastapi_middleware_pipeline.config import AppSettings, load_settings
from fastapi_middleware_pipeline.logs import configure_logging, get_logger
from fastapi_middleware_pipeline.middleware import PipelineMiddleware
from fastapi_middleware_pipeline.pages import IndexPage, render_index
from fastapi_middleware_pipeline.pipeline import Pipeline
from fastapi_middleware_pipeline.stages import (
    ExceptionHandler,
    ProcessingTime,
    RequestLogging,
    SecurityHeaders,
)

_logger = get_logger(__name__)


def build_pipeline(settings: AppSettings) -> Pipeline:
    """Assemble the request pipeline in registration order."""
    pipeline = Pipeline(debug=settings.features.show_debug_info)

    if not settings.is_development:
        pipeline.add(ExceptionHandler())

    pipeline.add(SecurityHeaders())

    if settings.features.enable_logging:
        pipeline.add(RequestLogging())

    pipeline.add(ProcessingTime())
    return pipeline


def create_app(settings: AppSettings | None = None) -> FastAPI:
    if settings is None:
        settings = load_settings()

    configure_logging(settings.log_level, json=settings.log_json)

    app = FastAPI(title="fastapi-middleware-pipeline")
    app.state.settings = settings

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return render_index(IndexPage(settings).on_get())

    pipeline = build_pipeline(settings)
    app.add_middleware(PipelineMiddleware, pipeline=pipeline)

    _logger.info(
        "app_created",
        environment=settings.environment,
        stages=[stage.name for stage in pipeline.resolve().stages],
    )
    return app
