"""Sequential-access device exposing the Fibonacci engine to callers.

A caller opens a session, seeks to a Fibonacci index, and reads the decimal
digits of F(index) together with how long the computation took. Writing a
single selector byte switches the active strategy. Only one session may be
open at a time.
"""

from __future__ import annotations

import logging
import threading
from enum import IntEnum

from pydantic import BaseModel, Field

from fibengine.selector import StrategySelector
from fibengine.strategies.base import Strategy
from fibengine.trace.collector import TraceCollector
from fibengine.trace.models import EventType

logger = logging.getLogger(__name__)

DEFAULT_MAX_INDEX = 150


class SessionBusyError(RuntimeError):
    """Raised when the device is opened while another session holds it."""

    def __init__(self) -> None:
        super().__init__("Fibonacci device is in use")


class SeekOrigin(IntEnum):
    """Reference point for ``DeviceSession.seek``."""

    SET = 0
    CUR = 1
    END = 2


class ReadResult(BaseModel):
    """Outcome of a device read.

    ``elapsed_ns`` is the computation latency; it is not a byte count.
    """

    index: int
    strategy: Strategy
    digits: str
    elapsed_ns: int = Field(ge=0)
    truncated: bool = False


class FibonacciDevice:
    """Single-session gateway to a StrategySelector.

    The position of a session is the Fibonacci index computed by the next
    read, clamped into ``[0, max_index]``.
    """

    def __init__(
        self,
        selector: StrategySelector,
        max_index: int = DEFAULT_MAX_INDEX,
        trace_collector: TraceCollector | None = None,
    ) -> None:
        if max_index < 0:
            raise ValueError(f"max_index must be non-negative, got {max_index}")
        self.selector = selector
        self.max_index = max_index
        self.trace = trace_collector
        self._in_use = threading.Lock()

    def open(self) -> DeviceSession:
        """Open a session.

        Raises:
            SessionBusyError: If another session is already open. The call
                never waits for it to close.
        """
        if not self._in_use.acquire(blocking=False):
            logger.warning("Fibonacci device is in use, rejecting open")
            if self.trace:
                self.trace.record_detached("busy", EventType.SESSION_BUSY, {"max_index": self.max_index})
            raise SessionBusyError()

        if self.trace:
            self.trace.start_span("session", strategy=self.selector.current.name)
            self.trace.record(EventType.SESSION_OPEN, {"max_index": self.max_index})
        return DeviceSession(self)

    @property
    def in_use(self) -> bool:
        return self._in_use.locked()

    def clamp(self, position: int) -> int:
        return max(0, min(position, self.max_index))

    def _release(self) -> None:
        if self.trace:
            self.trace.record(EventType.SESSION_CLOSE, {})
            self.trace.end_span()
        self._in_use.release()


class DeviceSession:
    """An open handle on a FibonacciDevice.

    Use as a context manager, or call ``close()`` explicitly.
    """

    def __init__(self, device: FibonacciDevice) -> None:
        self.device = device
        self.position = 0
        self._closed = False

    def __enter__(self) -> DeviceSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the device. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self.device._release()

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed device session")

    def seek(self, offset: int, whence: int = SeekOrigin.SET) -> int:
        """Move to a new Fibonacci index.

        ``END`` counts backwards from ``max_index``: the new position is
        ``max_index - offset``. Unknown origins resolve to 0. The result is
        always clamped into ``[0, max_index]``.

        Returns:
            The new position.
        """
        self._check_open()
        if whence == SeekOrigin.SET:
            target = offset
        elif whence == SeekOrigin.CUR:
            target = self.position + offset
        elif whence == SeekOrigin.END:
            target = self.device.max_index - offset
        else:
            target = 0

        self.position = self.device.clamp(target)
        if self.device.trace:
            self.device.trace.record(
                EventType.SEEK,
                {"offset": offset, "whence": int(whence)},
                index=self.position,
            )
        return self.position

    def tell(self) -> int:
        return self.position

    def read(self, size: int | None = None) -> ReadResult:
        """Compute F(position) with the active strategy.

        Args:
            size: Optional cap on the number of digit characters returned.

        Returns:
            ReadResult with the digits (most significant first) and the
            computation latency in nanoseconds.
        """
        self._check_open()
        try:
            result = self.device.selector.compute(self.position)
        except Exception as e:
            if self.device.trace:
                self.device.trace.record(
                    EventType.ERROR,
                    {"error": str(e)},
                    index=self.position,
                    strategy=self.device.selector.current.name,
                )
            raise

        digits = result.digits
        truncated = size is not None and len(digits) > size
        if truncated:
            digits = digits[: max(size, 0)]

        if self.device.trace:
            self.device.trace.record(
                EventType.READ,
                {"num_digits": result.value.num_digits},
                index=result.index,
                strategy=result.strategy.name,
                elapsed_ns=result.elapsed_ns,
            )
        return ReadResult(
            index=result.index,
            strategy=result.strategy,
            digits=digits,
            elapsed_ns=result.elapsed_ns,
            truncated=truncated,
        )

    def write(self, data: bytes) -> int:
        """Select a strategy from the first byte of ``data``.

        ``0`` selects LINEAR_SCAN, ``1`` FAST_DOUBLING and ``2``
        FAST_DOUBLING_OPTIMIZED. Any other byte, or empty data, leaves the
        selection unchanged.

        Returns:
            Always 1, however many bytes were supplied.
        """
        self._check_open()
        strategy = Strategy.from_selector_byte(data[0]) if data else None
        if strategy is None:
            logger.warning("Ignoring selector byte %r", data[:1])
        else:
            self.device.selector.select(strategy)
            if self.device.trace:
                self.device.trace.record(EventType.STRATEGY_SELECT, strategy=strategy.name)
        return 1
