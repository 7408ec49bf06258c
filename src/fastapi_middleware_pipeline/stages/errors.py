"""Exception handling stage: maps downstream failures to an error status."""

from __future__ import annotations

from typing import Any

from fastapi_middleware_pipeline._types import NextStage
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.exceptions import StageAbort
from fastapi_middleware_pipeline.logs import get_logger
from fastapi_middleware_pipeline.stage import PipelineStage

_logger = get_logger(__name__)

GENERIC_ERROR_DETAIL = "An error occurred while processing your request."


class ExceptionHandler(PipelineStage):
    """Outermost stage turning failures into an error response.

    ``StageAbort`` keeps its status and detail. Anything else is logged
    with its traceback and becomes a 500 with a generic detail. The error
    is stored in ``ctx.state["error"]`` for the host adapter to render.
    """

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger if logger is not None else _logger

    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        try:
            await call_next(ctx)
        except StageAbort as exc:
            self._logger.info(
                "request_aborted",
                path=ctx.path,
                status_code=exc.status_code,
                detail=exc.detail,
            )
            ctx.set_status(exc.status_code)
            ctx.state["error"] = {"status_code": exc.status_code, "detail": exc.detail}
        except Exception:
            self._logger.exception("unhandled_exception", method=ctx.method, path=ctx.path)
            ctx.set_status(500)
            ctx.state["error"] = {"status_code": 500, "detail": GENERIC_ERROR_DETAIL}
