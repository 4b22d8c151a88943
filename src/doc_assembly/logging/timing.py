"""
Timing utilities for step logging.

Logs start at DEBUG and end at INFO with ``duration_ms``. Errors are logged
as ``<event>.error`` and re-raised.
"""

import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from doc_assembly.logging.context import get_context, get_logger, push_context


def _generate_span_id() -> str:
    """Generate a short span ID (8 hex chars)."""
    return uuid.uuid4().hex[:8]


@dataclass
class TimingResult:
    """Result of a timed step."""

    step: str
    span_id: str = field(default_factory=_generate_span_id)
    parent_span_id: str | None = None
    started_at: float = field(default_factory=time.perf_counter)
    ended_at: float | None = None
    metrics: dict[str, Any] = field(default_factory=dict)

    def stop(self) -> "TimingResult":
        self.ended_at = time.perf_counter()
        return self

    @property
    def duration_ms(self) -> float:
        end = self.ended_at if self.ended_at is not None else time.perf_counter()
        return (end - self.started_at) * 1000

    def add_metric(self, key: str, value: Any) -> "TimingResult":
        """Add a metric to include in the end log."""
        self.metrics[key] = value
        return self

    def to_log_dict(self) -> dict[str, Any]:
        result = {
            "duration_ms": round(self.duration_ms, 2),
            "span_id": self.span_id,
        }
        if self.parent_span_id:
            result["parent_span_id"] = self.parent_span_id
        result.update(self.metrics)
        return result


@contextmanager
def log_step(event: str, level: str = "info", **extra: Any) -> Iterator[TimingResult]:
    """
    Log a step's start and end with timing.

    Context keys in ``extra`` (module, stage, category) are pushed into the
    log context for nested entries; everything else is reported as a metric.

    Usage:
        with log_step("helper.extract", module="Appium") as timer:
            markdown = await extractor.render_markdown([path])
            timer.add_metric("bytes", len(markdown))
    """
    log = get_logger("doc_assembly.timing")
    parent_span = get_context().span_id

    context_keys = {"module", "stage", "category", "run_id"}
    ctx_fields = {k: v for k, v in extra.items() if k in context_keys}
    metrics = {k: v for k, v in extra.items() if k not in context_keys}

    timer = TimingResult(step=event, parent_span_id=parent_span, metrics=metrics)
    token = push_context(span_id=timer.span_id, parent_span_id=parent_span, **ctx_fields)

    try:
        log.debug(f"{event}.start", span_id=timer.span_id)
        yield timer
        timer.stop()
        getattr(log, level)(f"{event}.end", **timer.to_log_dict())
    except Exception as e:
        timer.stop()
        log.error(f"{event}.error", error_type=type(e).__name__, error=str(e), **timer.to_log_dict())
        raise
    finally:
        token.restore()
