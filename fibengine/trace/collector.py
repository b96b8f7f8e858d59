"""Trace collector for aggregating device session spans and events."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from fibengine.trace.models import EventType, TraceEvent, TraceSpan

logger = logging.getLogger(__name__)


class TraceCollector:
    """Collects spans and events for one engine run.

    Each device session gets its own span; seeks, reads (with their
    computation latency) and strategy selections are recorded as events
    within it. Events that belong to no session, such as a rejected open,
    go into a single-event span of their own that is closed immediately,
    so they never mix with the session that holds the device.
    """

    def __init__(self, trace_id: str, log_dir: str | Path | None = None) -> None:
        self.trace_id = trace_id
        self.log_dir = Path(log_dir) if log_dir else None
        self.spans: list[TraceSpan] = []
        self._active_span: TraceSpan | None = None
        self._lock = threading.Lock()

    def start_span(self, name: str, **metadata: Any) -> TraceSpan:
        """Start a new trace span and make it active."""
        span = TraceSpan(name=name, metadata=metadata)
        with self._lock:
            self.spans.append(span)
            self._active_span = span
        logger.debug("Started span: %s (%s)", name, span.span_id)
        return span

    def end_span(self, span: TraceSpan | None = None) -> None:
        """Close a span. Defaults to the active span."""
        with self._lock:
            target = span or self._active_span
            if not target:
                return
            target.close()
            if target is self._active_span:
                self._active_span = None
        logger.debug("Closed span: %s (%.1fms)", target.name, target.duration_ms or 0)

    def record(
        self,
        event_type: EventType,
        data: dict[str, Any] | None = None,
        *,
        index: int | None = None,
        strategy: str | None = None,
        elapsed_ns: int | None = None,
    ) -> TraceEvent:
        """Record an event in the active span.

        With no active span the event is recorded detached, in a closed
        span named "orphan".
        """
        event = TraceEvent(
            event_type=event_type,
            index=index,
            strategy=strategy,
            elapsed_ns=elapsed_ns,
            data=data or {},
        )
        with self._lock:
            span = self._active_span
            if span is not None:
                span.add_event(event)
                return event
        self._add_detached("orphan", event)
        return event

    def record_detached(self, name: str, event_type: EventType, data: dict[str, Any] | None = None) -> TraceEvent:
        """Record an event in its own closed span, leaving the active span untouched."""
        event = TraceEvent(event_type=event_type, data=data or {})
        self._add_detached(name, event)
        return event

    def _add_detached(self, name: str, event: TraceEvent) -> None:
        span = TraceSpan(name=name)
        span.add_event(event)
        span.close()
        with self._lock:
            self.spans.append(span)
        logger.debug("Recorded %s in detached span %s", event.event_type.value, name)

    @property
    def active_span(self) -> TraceSpan | None:
        return self._active_span

    @property
    def event_count(self) -> int:
        return sum(len(s.events) for s in self.spans)

    def get_events_by_type(self, event_type: EventType) -> list[TraceEvent]:
        """Retrieve all events of a specific type across spans."""
        return [e for s in self.spans for e in s.events if e.event_type == event_type]

    def spans_named(self, name: str) -> list[TraceSpan]:
        return [s for s in self.spans if s.name == name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "trace_id": self.trace_id,
            "spans": [s.to_dict() for s in self.spans],
            "total_events": self.event_count,
        }

    def save(self) -> Path | None:
        """Persist trace to disk as JSON.

        Returns:
            Path to the saved trace file, or None if no log_dir configured.
        """
        if not self.log_dir:
            return None

        self.log_dir.mkdir(parents=True, exist_ok=True)
        path = self.log_dir / f"trace_{self.trace_id}.json"

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info("Saved trace to %s (%d events)", path, self.event_count)
        return path
