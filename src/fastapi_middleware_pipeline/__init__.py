"""FastAPI Middleware Pipeline - explicit, ordered request pipelines for FastAPI."""

from fastapi_middleware_pipeline.app import build_pipeline, create_app
from fastapi_middleware_pipeline.config import (
    AppSettings,
    FeatureFlags,
    load_settings,
    read_settings_file,
)
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.exceptions import (
    ConfigurationError,
    DuplicateHeader,
    NextCalledTwice,
    PipelineException,
    ResponseAlreadyStarted,
    StageAbort,
)
from fastapi_middleware_pipeline.logs import configure_logging, get_logger
from fastapi_middleware_pipeline.middleware import PipelineMiddleware
from fastapi_middleware_pipeline.pages import IndexPage, render_index
from fastapi_middleware_pipeline.pipeline import Pipeline, ResolvedPipeline
from fastapi_middleware_pipeline.stage import FunctionStage, PipelineStage
from fastapi_middleware_pipeline.stages.errors import ExceptionHandler
from fastapi_middleware_pipeline.stages.request_logging import RequestLogging
from fastapi_middleware_pipeline.stages.security_headers import SecurityHeaders
from fastapi_middleware_pipeline.stages.timing import ELAPSED_TIME_HEADER, ProcessingTime
from fastapi_middleware_pipeline.trace import PipelineTrace, TraceEntry

__all__ = [
    "ELAPSED_TIME_HEADER",
    "AppSettings",
    "ConfigurationError",
    "DuplicateHeader",
    "ExceptionHandler",
    "FeatureFlags",
    "FunctionStage",
    "IndexPage",
    "NextCalledTwice",
    "Pipeline",
    "PipelineException",
    "PipelineMiddleware",
    "PipelineStage",
    "PipelineTrace",
    "ProcessingTime",
    "RequestContext",
    "RequestLogging",
    "ResolvedPipeline",
    "ResponseAlreadyStarted",
    "SecurityHeaders",
    "StageAbort",
    "TraceEntry",
    "build_pipeline",
    "configure_logging",
    "create_app",
    "get_logger",
    "load_settings",
    "read_settings_file",
    "render_index",
]
