"""Base strategy class and shared result types for Fibonacci computation."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from fibengine.bignum.decimal import BigDecimal

logger = logging.getLogger(__name__)


class Strategy(IntEnum):
    """Available Fibonacci algorithms, valued by their selector byte."""

    LINEAR_SCAN = 0
    FAST_DOUBLING = 1
    FAST_DOUBLING_OPTIMIZED = 2

    @classmethod
    def from_selector_byte(cls, value: int) -> Strategy | None:
        """Map a selector byte to a strategy, or None if it selects nothing."""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: str) -> Strategy:
        """Resolve a strategy from a CLI/config spelling.

        Accepts enum names (``FAST_DOUBLING``), short aliases
        (``doubling-opt``) or a selector byte as text (``"2"``).
        """
        key = name.strip().lower().replace("-", "_")
        if key.isdigit():
            strategy = cls.from_selector_byte(int(key))
            if strategy is None:
                raise ValueError(f"Unknown strategy selector: {name}")
            return strategy
        if key in STRATEGY_ALIASES:
            return STRATEGY_ALIASES[key]
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown strategy: {name}") from None


STRATEGY_ALIASES = {
    "linear": Strategy.LINEAR_SCAN,
    "dp": Strategy.LINEAR_SCAN,
    "doubling": Strategy.FAST_DOUBLING,
    "doubling_opt": Strategy.FAST_DOUBLING_OPTIMIZED,
    "clz": Strategy.FAST_DOUBLING_OPTIMIZED,
}


@dataclass(frozen=True)
class FibonacciResult:
    """Outcome of one F(k) computation."""

    index: int
    strategy: Strategy
    value: BigDecimal
    elapsed_ns: int

    @property
    def digits(self) -> str:
        return str(self.value)


class BaseStrategy(ABC):
    """Abstract base class for Fibonacci algorithms.

    Subclasses set ``strategy`` and ``description`` and implement
    ``compute``, which must return F(k) as a BigDecimal built only from the
    arithmetic engine. ``timed_compute`` wraps it with a monotonic
    nanosecond clock.

    Example:
        class Naive(BaseStrategy):
            strategy = Strategy.LINEAR_SCAN
            description = "Recursive definition"

            def compute(self, k: int) -> BigDecimal:
                ...
    """

    strategy: ClassVar[Strategy]
    description: ClassVar[str]

    @abstractmethod
    def compute(self, k: int) -> BigDecimal:
        """Compute F(k).

        Args:
            k: Non-negative Fibonacci index.

        Returns:
            F(k) as a BigDecimal.
        """

    def timed_compute(self, k: int) -> FibonacciResult:
        """Run ``compute`` and measure its wall-clock time in nanoseconds."""
        start = time.perf_counter_ns()
        value = self.compute(k)
        elapsed = time.perf_counter_ns() - start
        logger.debug("%s F(%d) took %dns (%d digits)", self.strategy.name, k, elapsed, value.num_digits)
        return FibonacciResult(index=k, strategy=self.strategy, value=value, elapsed_ns=elapsed)

    @property
    def name(self) -> str:
        return self.strategy.name


def validate_index(k: int) -> None:
    """Reject indices that are not non-negative integers."""
    if isinstance(k, bool) or not isinstance(k, int):
        raise TypeError(f"Fibonacci index must be an int, got {type(k).__name__}")
    if k < 0:
        raise ValueError(f"Fibonacci index must be non-negative, got {k}")
