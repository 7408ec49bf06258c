"""Built-in pipeline stages."""

from fastapi_middleware_pipeline.stages.errors import ExceptionHandler
from fastapi_middleware_pipeline.stages.request_logging import RequestLogging
from fastapi_middleware_pipeline.stages.security_headers import SecurityHeaders
from fastapi_middleware_pipeline.stages.timing import ProcessingTime

__all__ = [
    "ExceptionHandler",
    "ProcessingTime",
    "RequestLogging",
    "SecurityHeaders",
]
