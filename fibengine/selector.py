"""Thread-safe holder of the active Fibonacci strategy."""

from __future__ import annotations

import logging
import threading

from fibengine.config import EngineConfig
from fibengine.strategies.base import FibonacciResult, Strategy
from fibengine.strategies.registry import StrategyRegistry

logger = logging.getLogger(__name__)


class StrategySelector:
    """Holds which strategy is active and dispatches computations to it.

    Selection is last-writer-wins. ``compute`` reads the variant once under
    the lock, so a concurrent ``select`` never changes the algorithm in the
    middle of a computation. The computation itself runs outside the lock.
    """

    def __init__(
        self,
        registry: StrategyRegistry | None = None,
        default: Strategy = Strategy.FAST_DOUBLING_OPTIMIZED,
    ) -> None:
        self.registry = registry if registry is not None else StrategyRegistry.from_config()
        if default not in self.registry:
            raise KeyError(f"Default strategy {default.name} is not registered")
        self._current = default
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: EngineConfig) -> StrategySelector:
        """Build a selector and registry from engine settings."""
        return cls(
            registry=StrategyRegistry.from_config(config),
            default=config.default_strategy,
        )

    @property
    def current(self) -> Strategy:
        """The currently selected strategy."""
        with self._lock:
            return self._current

    def select(self, strategy: Strategy) -> Strategy:
        """Make ``strategy`` the active one.

        Returns:
            The previously active strategy.

        Raises:
            KeyError: If no implementation is registered for it.
        """
        self.registry.get(strategy)
        with self._lock:
            previous, self._current = self._current, strategy
        logger.info("Choosing %s (was %s)", strategy.name, previous.name)
        return previous

    def compute(self, k: int) -> FibonacciResult:
        """Compute F(k) with the strategy active at call time."""
        with self._lock:
            active = self._current
        return self.registry.get(active).timed_compute(k)
