"""PipelineMiddleware runs a Pipeline around a Starlette/FastAPI application."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.exceptions import StageAbort
from fastapi_middleware_pipeline.logs import get_logger
from fastapi_middleware_pipeline.pipeline import Pipeline, ResolvedPipeline

_logger = get_logger(__name__)


class PipelineMiddleware(BaseHTTPMiddleware):
    """Host adapter between Starlette's middleware stack and a Pipeline.

    The innermost step awaits the wrapped application and copies its status
    onto the context. Context headers are applied to the outgoing response
    once the pipeline has finished, before anything is sent; a header the
    endpoint already set is left alone. A ``StageAbort`` that no stage
    handled is rendered as a JSON error with its own status.
    """

    def __init__(self, app: ASGIApp, pipeline: Pipeline | ResolvedPipeline) -> None:
        super().__init__(app)
        if isinstance(pipeline, Pipeline):
            pipeline = pipeline.resolve()
        self._resolved = pipeline

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        ctx = RequestContext(request=request)
        downstream: Response | None = None

        async def endpoint(ctx: RequestContext) -> None:
            nonlocal downstream
            downstream = await call_next(ctx.request)
            ctx.set_status(downstream.status_code)

        try:
            await self._resolved.run(ctx, endpoint)
        except StageAbort as exc:
            _logger.info(
                "request_aborted",
                path=ctx.path,
                status_code=exc.status_code,
                detail=exc.detail,
            )
            ctx.set_status(exc.status_code)
            ctx.state["error"] = {"status_code": exc.status_code, "detail": exc.detail}
            ctx.start_response()

        if "error" in ctx.state or downstream is None:
            response = self._short_circuit_response(ctx)
            for name, value in ctx.response_headers.items():
                response.headers[name] = value
        else:
            response = downstream
            response.status_code = ctx.status_code
            # Headers set by the endpoint itself take precedence
            for name, value in ctx.response_headers.items():
                if name not in response.headers:
                    response.headers[name] = value

        trace = ctx.state.get("trace")
        if trace is not None:
            _logger.debug(
                "pipeline_trace",
                path=ctx.path,
                total_duration_ms=trace.total_duration_ms,
                stages=[(e.stage_name, e.duration_ms, e.outcome) for e in trace.entries],
            )

        return response

    @staticmethod
    def _short_circuit_response(ctx: RequestContext) -> Response:
        error = ctx.state.get("error")
        if error is not None:
            return JSONResponse({"detail": error["detail"]}, status_code=ctx.status_code)
        return Response(status_code=ctx.status_code)
