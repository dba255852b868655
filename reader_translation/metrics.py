"""
Per-page timing metrics.

A ``PipelineMetrics`` is filled stage by stage while a page is processed
and exposed as a plain dict afterwards (``OverlayPipeline.last_metrics``).
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional


class Timer:
    """Context manager measuring wall time in milliseconds."""

    def __init__(self):
        self.start_time: float = 0.0
        self.duration_ms: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self.duration_ms = self.elapsed_ms()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000


@dataclass
class StageMetrics:
    """Timing and counters of one stage."""
    name: str
    duration_ms: float = 0.0
    items_processed: int = 0
    sub_metrics: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
            "items_processed": self.items_processed,
            "sub_metrics": dict(self.sub_metrics),
        }


@dataclass
class PipelineMetrics:
    """Stages of one page run, in execution order."""
    total_duration_ms: float = 0.0
    stages: list[StageMetrics] = field(default_factory=list)

    def add_stage(self, stage: StageMetrics) -> StageMetrics:
        self.stages.append(stage)
        return stage

    @contextmanager
    def stage(self, name: str) -> Iterator[StageMetrics]:
        """Time the enclosed block as stage ``name``; the stage is recorded even on error."""
        stage = StageMetrics(name=name)
        with Timer() as timer:
            try:
                yield stage
            finally:
                stage.duration_ms = timer.elapsed_ms()
                self.add_stage(stage)

    def get_stage(self, name: str) -> Optional[StageMetrics]:
        return next((s for s in self.stages if s.name == name), None)

    def summary(self) -> str:
        total = self.total_duration_ms
        lines = [f"page metrics: total {total:.0f}ms"]
        for s in self.stages:
            share = s.duration_ms / total * 100 if total > 0 else 0.0
            lines.append(f"  {s.name}: {s.duration_ms:.0f}ms ({share:.1f}%)")
            lines.extend(f"    - {k}: {v}" for k, v in s.sub_metrics.items())
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "total_duration_ms": round(self.total_duration_ms, 2),
            "stages": [s.to_dict() for s in self.stages],
        }
