"""PipelineTrace and TraceEntry — debug execution recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class TraceEntry:
    """Single stage execution record.

    ``duration_ms`` is inclusive: it covers the downstream chain the stage
    wraps.
    """

    stage_name: str
    duration_ms: float
    outcome: Literal["OK", "FAILED"]
    reason: str | None = None


@dataclass
class PipelineTrace:
    """Structured record of a single pipeline execution."""

    entries: list[TraceEntry] = field(default_factory=list)
    total_duration_ms: float = 0.0
    outcome: Literal["OK", "ERROR"] = "OK"
    error: BaseException | None = None
