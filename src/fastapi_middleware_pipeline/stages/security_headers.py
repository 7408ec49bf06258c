"""Security headers stage."""

from __future__ import annotations

from collections.abc import Mapping

from fastapi_middleware_pipeline._types import NextStage
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.stage import PipelineStage

DEFAULT_SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeaders(PipelineStage):
    """Adds browser security headers before the rest of the chain runs.

    Headers are in place even when a downstream stage fails. Downstream code
    that needs a different value must replace it with ``set_header``.
    """

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self._headers = dict(DEFAULT_SECURITY_HEADERS if headers is None else headers)

    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        for name, value in self._headers.items():
            ctx.add_header(name, value)
        await call_next(ctx)
