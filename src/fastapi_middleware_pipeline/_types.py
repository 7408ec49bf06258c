"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi_middleware_pipeline.context import RequestContext

# The remainder of the chain as seen by a stage
NextStage = Callable[["RequestContext"], Awaitable[None]]
# Innermost handler the pipeline wraps
Endpoint = Callable[["RequestContext"], Awaitable[None]]
StageCallback = Callable[["RequestContext", NextStage], Awaitable[None]]
# Monotonic clock returning seconds
Clock = Callable[[], float]
