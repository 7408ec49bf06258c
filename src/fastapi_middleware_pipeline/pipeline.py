"""Pipeline class — ordered container and execution engine for PipelineStages."""

from __future__ import annotations

import time
from dataclasses import dataclass

from fastapi_middleware_pipeline._types import Endpoint, NextStage
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.exceptions import NextCalledTwice
from fastapi_middleware_pipeline.stage import PipelineStage
from fastapi_middleware_pipeline.trace import PipelineTrace, TraceEntry


@dataclass(frozen=True)
class ResolvedPipeline:
    """Immutable, pre-computed execution plan."""

    stages: tuple[PipelineStage, ...]
    debug: bool = False

    async def run(self, ctx: RequestContext, endpoint: Endpoint) -> None:
        """Run every stage around ``endpoint`` and finalize the response.

        Stages pre-process in registration order and post-process in
        reverse. Failures propagate unchanged.
        """
        trace = PipelineTrace() if self.debug else None
        pipeline_start = time.perf_counter()

        try:
            await self._chain(endpoint, trace)(ctx)
        except Exception as exc:
            if trace is not None:
                trace.total_duration_ms = (time.perf_counter() - pipeline_start) * 1000
                trace.outcome = "ERROR"
                trace.error = exc
                ctx.state["trace"] = trace
            raise

        if trace is not None:
            trace.total_duration_ms = (time.perf_counter() - pipeline_start) * 1000
            ctx.state["trace"] = trace

        ctx.start_response()

    def _chain(self, endpoint: Endpoint, trace: PipelineTrace | None) -> NextStage:
        downstream: NextStage = endpoint
        for stage in reversed(self.stages):
            downstream = self._wrap(stage, downstream, trace)
        return downstream

    def _wrap(
        self,
        stage: PipelineStage,
        downstream: NextStage,
        trace: PipelineTrace | None,
    ) -> NextStage:
        async def invoke(ctx: RequestContext) -> None:
            called = False

            async def call_next(next_ctx: RequestContext) -> None:
                nonlocal called
                if called:
                    raise NextCalledTwice(stage.name)
                called = True
                await downstream(next_ctx)

            stage_start = time.perf_counter()
            try:
                await stage.handle(ctx, call_next)
            except Exception as exc:
                if trace is not None:
                    trace.entries.append(
                        TraceEntry(
                            stage_name=stage.name,
                            duration_ms=(time.perf_counter() - stage_start) * 1000,
                            outcome="FAILED",
                            reason=str(exc),
                        )
                    )
                raise

            if trace is not None:
                trace.entries.append(
                    TraceEntry(
                        stage_name=stage.name,
                        duration_ms=(time.perf_counter() - stage_start) * 1000,
                        outcome="OK",
                    )
                )

        return invoke


class Pipeline:
    """Ordered container of PipelineStage instances.

    Registration order is execution order. Nested pipelines are flattened
    in place. A pipeline may not contain itself, directly or indirectly.
    """

    def __init__(self, *stages: PipelineStage | Pipeline, debug: bool = False) -> None:
        self._items: list[PipelineStage | Pipeline] = list(stages)
        self._debug = debug
        self._resolved: ResolvedPipeline | None = None

    def add(self, *stages: PipelineStage | Pipeline) -> Pipeline:
        self._items.extend(stages)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedPipeline:
        if self._resolved is not None:
            return self._resolved

        flat: list[PipelineStage] = []
        self._flatten(self, flat, ())

        self._resolved = ResolvedPipeline(
            stages=tuple(flat),
            debug=self._debug,
        )
        return self._resolved

    @staticmethod
    def _flatten(
        pipeline: Pipeline,
        out: list[PipelineStage],
        enclosing: tuple[int, ...],
    ) -> None:
        if id(pipeline) in enclosing:
            raise ValueError("Pipeline contains itself")
        enclosing = (*enclosing, id(pipeline))
        for item in pipeline._items:
            if isinstance(item, Pipeline):
                Pipeline._flatten(item, out, enclosing)
            elif isinstance(item, PipelineStage):
                out.append(item)
            else:
                raise TypeError(
                    f"Expected PipelineStage or Pipeline, got {type(item).__name__}"
                )
