"""PipelineStage abstract base class and FunctionStage adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fastapi_middleware_pipeline._types import NextStage, StageCallback
from fastapi_middleware_pipeline.context import RequestContext


class PipelineStage(ABC):
    """Base abstraction for a unit of request processing.

    A stage receives the context and the remainder of the chain. It may
    inspect the request, then awaits ``call_next(ctx)`` at most once, then
    may inspect or amend the response. Not calling ``call_next`` ends the
    chain at this stage.
    """

    @abstractmethod
    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None: ...

    @property
    def name(self) -> str:
        return type(self).__name__


class FunctionStage(PipelineStage):
    """Wraps a plain ``async def fn(ctx, call_next)`` as a stage."""

    def __init__(self, fn: StageCallback, *, name: str | None = None) -> None:
        self._fn = fn
        self._name = name or getattr(fn, "__name__", type(self).__name__)

    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        await self._fn(ctx, call_next)

    @property
    def name(self) -> str:
        return self._name
