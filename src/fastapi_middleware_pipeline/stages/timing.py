"""Processing-time stage with request/response logging and the X-ElapsedTime header."""

from __future__ import annotations

import time
from typing import Any

from fastapi_middleware_pipeline._types import Clock, NextStage
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.exceptions import StageAbort
from fastapi_middleware_pipeline.logs import get_logger
from fastapi_middleware_pipeline.stage import PipelineStage

ELAPSED_TIME_HEADER = "X-ElapsedTime"
UNKNOWN_CLIENT = "unknown"

_logger = get_logger(__name__)


def format_elapsed(elapsed_ms: float) -> str:
    """Milliseconds as a plain decimal string, no unit suffix."""
    return f"{max(elapsed_ms, 0.0):.3f}"


class ProcessingTime(PipelineStage):
    """Times the downstream chain and reports it in a response header.

    The duration is taken after ``call_next`` returns, so it covers every
    stage registered after this one plus the endpoint. On a downstream
    failure the header and the response line are still written, with the
    status an outer handler will answer with, and the exception is
    re-raised as is.
    """

    def __init__(
        self,
        logger: Any = None,
        clock: Clock = time.perf_counter,
        header_name: str = ELAPSED_TIME_HEADER,
    ) -> None:
        self._logger = logger if logger is not None else _logger
        self._clock = clock
        self._header_name = header_name

    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        client = ctx.client_host or UNKNOWN_CLIENT
        self._logger.info(
            f"Request: {ctx.method} {ctx.path} from {client}",
            method=ctx.method,
            path=ctx.path,
            client=client,
        )

        start = self._clock()
        try:
            await call_next(ctx)
        except Exception as exc:
            # Status an outer handler will answer with; ctx still holds the pre-failure one
            status_code = exc.status_code if isinstance(exc, StageAbort) else 500
            self._finish(ctx, start, status_code, failed=True)
            raise
        self._finish(ctx, start, ctx.status_code, failed=False)

    def _finish(
        self, ctx: RequestContext, start: float, status_code: int, *, failed: bool
    ) -> None:
        elapsed_ms = (self._clock() - start) * 1000
        elapsed = format_elapsed(elapsed_ms)

        if failed:
            # Never mask the downstream exception with a header conflict
            if not ctx.response_started and not ctx.has_header(self._header_name):
                ctx.add_header(self._header_name, elapsed)
            log = self._logger.warning
        else:
            ctx.add_header(self._header_name, elapsed)
            log = self._logger.info

        log(
            f"Response: {status_code} in {elapsed}ms",
            status_code=status_code,
            elapsed_ms=elapsed_ms,
            failed=failed,
        )
