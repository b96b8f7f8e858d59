"""Fast doubling Fibonacci strategies.

Both variants walk the bits of k from the top, maintaining the pair
``(a, b) = (F(m), F(m+1))`` and applying

    F(2m)   = F(m) * (2*F(m+1) - F(m))
    F(2m+1) = F(m)^2 + F(m+1)^2

at every bit, then stepping to ``(F(2m+1), F(2m+2))`` when the bit is set.
"""

from __future__ import annotations

import logging

from fibengine.bignum.arithmetic import add, double, multiply, subtract
from fibengine.bignum.decimal import ONE, ZERO, BigDecimal
from fibengine.strategies.base import BaseStrategy, Strategy, validate_index

logger = logging.getLogger(__name__)

DEFAULT_BIT_WIDTH = 32


def doubling_step(a: BigDecimal, b: BigDecimal, bit_set: bool) -> tuple[BigDecimal, BigDecimal]:
    """Advance ``(F(m), F(m+1))`` to ``(F(2m), F(2m+1))``, plus one if ``bit_set``."""
    # 2*F(m+1) >= F(m) for every m, so the subtraction cannot underflow.
    even = multiply(a, subtract(double(b), a))
    odd = add(multiply(a, a), multiply(b, b))
    if bit_set:
        return odd, add(even, odd)
    return even, odd


def run_doubling(k: int, top_bit: int) -> BigDecimal:
    """Process bits ``top_bit`` down to 0 of k and return F(k)."""
    a, b = ZERO, ONE
    for i in range(top_bit, -1, -1):
        a, b = doubling_step(a, b, bool(k & (1 << i)))
    return a


class FastDoubling(BaseStrategy):
    """Fast doubling over a fixed number of bit positions.

    Always executes ``bit_width`` rounds; the leading rounds for a small k
    double ``(0, 1)`` into itself and change nothing.
    """

    strategy = Strategy.FAST_DOUBLING
    description = "Fast doubling over a fixed-width index"

    def __init__(self, bit_width: int = DEFAULT_BIT_WIDTH) -> None:
        if bit_width < 1:
            raise ValueError(f"bit_width must be positive, got {bit_width}")
        self.bit_width = bit_width

    def compute(self, k: int) -> BigDecimal:
        validate_index(k)
        if k.bit_length() > self.bit_width:
            raise ValueError(f"Index {k} does not fit in {self.bit_width} bits")
        if k == 0:
            return ZERO
        if k == 1:
            return ONE
        return run_doubling(k, self.bit_width - 1)


class FastDoublingOptimized(BaseStrategy):
    """Fast doubling starting from the highest set bit of k."""

    strategy = Strategy.FAST_DOUBLING_OPTIMIZED
    description = "Fast doubling skipping leading zero bits"

    def compute(self, k: int) -> BigDecimal:
        validate_index(k)
        if k == 0:
            return ZERO
        if k == 1:
            return ONE
        return run_doubling(k, k.bit_length() - 1)
