"""Strategy registry for managing and looking up Fibonacci algorithms."""

from __future__ import annotations

import logging

from fibengine.config import EngineConfig
from fibengine.strategies.base import BaseStrategy, Strategy
from fibengine.strategies.doubling import FastDoubling, FastDoublingOptimized
from fibengine.strategies.linear import LinearScan

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Registry mapping each Strategy variant to one implementation instance."""

    def __init__(self) -> None:
        self._strategies: dict[Strategy, BaseStrategy] = {}

    @classmethod
    def from_config(cls, config: EngineConfig | None = None) -> StrategyRegistry:
        """Build a registry holding all three built-in strategies.

        Args:
            config: Engine limits. Uses defaults if not provided.

        Returns:
            A populated StrategyRegistry.
        """
        config = config or EngineConfig()
        registry = cls()
        registry.register(LinearScan(history_limit=config.linear_history_limit))
        registry.register(FastDoubling(bit_width=config.doubling_bit_width))
        registry.register(FastDoublingOptimized())
        return registry

    def register(self, strategy: BaseStrategy) -> None:
        """Register a strategy instance.

        Raises:
            ValueError: If the variant is already registered.
        """
        if strategy.strategy in self._strategies:
            raise ValueError(f"Strategy '{strategy.name}' is already registered")
        self._strategies[strategy.strategy] = strategy
        logger.debug("Registered strategy: %s", strategy.name)

    def get(self, strategy: Strategy) -> BaseStrategy:
        """Look up the implementation for a variant.

        Raises:
            KeyError: If nothing is registered for it.
        """
        try:
            return self._strategies[strategy]
        except KeyError:
            raise KeyError(f"No implementation registered for {Strategy(strategy).name}") from None

    @property
    def strategies(self) -> list[Strategy]:
        """Registered variants in selector-byte order."""
        return sorted(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, strategy: Strategy) -> bool:
        return strategy in self._strategies
