"""Linear dynamic-programming sweep over the full Fibonacci history."""

from __future__ import annotations

import logging

from fibengine.bignum.arithmetic import add
from fibengine.bignum.decimal import ONE, ZERO, BigDecimal
from fibengine.strategies.base import BaseStrategy, Strategy, validate_index

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10_000


class HistoryLimitExceededError(MemoryError):
    """Raised when the dense history for F(k) would exceed its entry limit."""

    def __init__(self, requested: int, limit: int) -> None:
        self.requested = requested
        self.limit = limit
        super().__init__(f"History of {requested} entries exceeds limit of {limit}")


class LinearScan(BaseStrategy):
    """Fills ``f[0..k]`` with ``f[i] = f[i-1] + f[i-2]`` and returns ``f[k]``.

    The history is allocated up front, so its size is checked against
    ``history_limit`` before any work is done.
    """

    strategy = Strategy.LINEAR_SCAN
    description = "Dynamic-programming sweep keeping every F(i) up to k"

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if history_limit < 2:
            raise ValueError(f"history_limit must be at least 2, got {history_limit}")
        self.history_limit = history_limit

    def compute(self, k: int) -> BigDecimal:
        validate_index(k)
        entries = max(k + 1, 2)
        if entries > self.history_limit:
            logger.error("LinearScan F(%d) needs %d entries, limit is %d", k, entries, self.history_limit)
            raise HistoryLimitExceededError(requested=entries, limit=self.history_limit)

        f: list[BigDecimal] = [ZERO] * entries
        f[1] = ONE
        for i in range(2, k + 1):
            f[i] = add(f[i - 1], f[i - 2])
        return f[k]
