"""Trace event and span models for device sessions."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    """Device operations that can appear in a trace."""

    SESSION_OPEN = "session_open"
    SESSION_CLOSE = "session_close"
    SESSION_BUSY = "session_busy"
    SEEK = "seek"
    READ = "read"
    STRATEGY_SELECT = "strategy_select"
    ERROR = "error"


@dataclass
class TraceEvent:
    """One device operation.

    ``index`` is the Fibonacci index involved (the new position for SEEK,
    the computed index for READ and ERROR), ``strategy`` the algorithm name,
    and ``elapsed_ns`` the computation latency of a READ. Anything else the
    caller wants to keep goes into ``data``.
    """

    event_type: EventType
    index: int | None = None
    strategy: str | None = None
    elapsed_ns: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "index": self.index,
            "strategy": self.strategy,
            "elapsed_ns": self.elapsed_ns,
            "data": self.data,
            "timestamp": self.timestamp,
        }


@dataclass
class TraceSpan:
    """Events grouped under one name, normally a device session from open to close."""

    name: str
    span_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    events: list[TraceEvent] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_event(self, event: TraceEvent) -> None:
        self.events.append(event)

    def close(self) -> None:
        self.end_time = time.time()

    @property
    def closed(self) -> bool:
        return self.end_time is not None

    @property
    def duration_ms(self) -> float | None:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time) * 1000

    @property
    def reads(self) -> list[TraceEvent]:
        return [e for e in self.events if e.event_type == EventType.READ]

    @property
    def compute_ns(self) -> int:
        """Total computation latency of the reads in this span."""
        return sum(e.elapsed_ns or 0 for e in self.reads)

    @property
    def indices_read(self) -> list[int]:
        return [e.index for e in self.reads if e.index is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "span_id": self.span_id,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_ms": self.duration_ms,
            "compute_ns": self.compute_ns,
            "indices_read": self.indices_read,
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }
