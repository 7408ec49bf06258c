"""Tests for PipelineTrace, TraceEntry, and debug integration."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from fastapi_middleware_pipeline._types import NextStage
from fastapi_middleware_pipeline.context import RequestContext
from fastapi_middleware_pipeline.exceptions import StageAbort
from fastapi_middleware_pipeline.pipeline import Pipeline
from fastapi_middleware_pipeline.stage import PipelineStage
from fastapi_middleware_pipeline.trace import PipelineTrace, TraceEntry


class _Outer(PipelineStage):
    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        await call_next(ctx)


class _Inner(PipelineStage):
    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        await call_next(ctx)


class _Failing(PipelineStage):
    async def handle(self, ctx: RequestContext, call_next: NextStage) -> None:
        raise StageAbort("denied", status_code=403)


async def _endpoint(ctx: RequestContext) -> None:
    await asyncio.sleep(0.01)


class TestTraceEntry:
    def test_construction(self) -> None:
        entry = TraceEntry(stage_name="ProcessingTime", duration_ms=1.5, outcome="OK")
        assert entry.stage_name == "ProcessingTime"
        assert entry.duration_ms == 1.5
        assert entry.outcome == "OK"
        assert entry.reason is None

    def test_frozen(self) -> None:
        entry = TraceEntry(stage_name="ProcessingTime", duration_ms=1.5, outcome="OK")
        with pytest.raises(AttributeError):
            entry.stage_name = "other"  # type: ignore[misc]


class TestPipelineTrace:
    def test_defaults(self) -> None:
        trace = PipelineTrace()
        assert trace.entries == []
        assert trace.total_duration_ms == 0.0
        assert trace.outcome == "OK"
        assert trace.error is None


class TestDebugIntegration:
    async def test_debug_true_produces_trace(self, make_context: Any) -> None:
        ctx = make_context()
        await Pipeline(_Outer(), _Inner(), debug=True).resolve().run(ctx, _endpoint)
        trace = ctx.state["trace"]
        assert isinstance(trace, PipelineTrace)
        assert trace.outcome == "OK"
        assert [e.stage_name for e in trace.entries] == ["_Inner", "_Outer"]

    async def test_durations_are_inclusive(self, make_context: Any) -> None:
        ctx = make_context()
        await Pipeline(_Outer(), _Inner(), debug=True).resolve().run(ctx, _endpoint)
        inner, outer = ctx.state["trace"].entries
        assert inner.duration_ms >= 9
        assert outer.duration_ms >= inner.duration_ms
        assert ctx.state["trace"].total_duration_ms >= outer.duration_ms

    async def test_debug_false_no_trace(self, make_context: Any) -> None:
        ctx = make_context()
        await Pipeline(_Outer()).resolve().run(ctx, _endpoint)
        assert "trace" not in ctx.state

    async def test_failure_recorded(self, make_context: Any) -> None:
        ctx = make_context()
        with pytest.raises(StageAbort):
            await Pipeline(_Outer(), _Failing(), debug=True).resolve().run(
                ctx, _endpoint
            )
        trace = ctx.state["trace"]
        assert trace.outcome == "ERROR"
        assert isinstance(trace.error, StageAbort)
        assert [(e.stage_name, e.outcome) for e in trace.entries] == [
            ("_Failing", "FAILED"),
            ("_Outer", "FAILED"),
        ]
        assert trace.entries[0].reason == "denied"
