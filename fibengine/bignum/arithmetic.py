"""Schoolbook arithmetic over BigDecimal values.

Every function here is pure: operands are read-only and a freshly built
BigDecimal is returned. Only non-negative values exist, so ``subtract``
requires its first operand to be at least as large as the second.
"""

from __future__ import annotations

import logging

from fibengine.bignum.decimal import ZERO, BigDecimal, trim

logger = logging.getLogger(__name__)


class NegativeResultError(ValueError):
    """Raised when a subtraction would produce a negative value."""

    def __init__(self, minuend: BigDecimal, subtrahend: BigDecimal) -> None:
        self.minuend = minuend
        self.subtrahend = subtrahend
        super().__init__(f"Cannot subtract {subtrahend} from smaller value {minuend}")


def add(a: BigDecimal, b: BigDecimal) -> BigDecimal:
    """Digit-wise addition with carry.

    Runs over ``max(len(a), len(b)) + 1`` positions; the extra top position
    survives only if the final carry overflows into it.
    """
    width = max(a.num_digits, b.num_digits) + 1
    result = []
    carry = 0
    for i in range(width):
        total = carry
        if i < a.num_digits:
            total += a.digits[i]
        if i < b.num_digits:
            total += b.digits[i]
        result.append(total % 10)
        carry = total // 10

    if result[-1] == 0:
        result.pop()
    return BigDecimal(tuple(result))


def double(a: BigDecimal) -> BigDecimal:
    """Return ``a + a``."""
    return add(a, a)


def subtract(a: BigDecimal, b: BigDecimal) -> BigDecimal:
    """Digit-wise subtraction with borrow.

    Args:
        a: Minuend.
        b: Subtrahend, must not exceed ``a``.

    Returns:
        ``a - b`` in minimal form.

    Raises:
        NegativeResultError: If ``b > a``.
    """
    if a < b:
        logger.error("Subtraction underflow: %s - %s", a, b)
        raise NegativeResultError(a, b)

    result = []
    borrow = 0
    for i in range(a.num_digits):
        diff = a.digits[i] - borrow
        if i < b.num_digits:
            diff -= b.digits[i]
        if diff < 0:
            diff += 10
            borrow = 1
        else:
            borrow = 0
        result.append(diff)

    return BigDecimal(trim(result))


def multiply(a: BigDecimal, b: BigDecimal) -> BigDecimal:
    """Schoolbook O(len(a) * len(b)) multiplication.

    Partial products are accumulated per output position and carries are
    resolved in a single pass afterwards.
    """
    if a.is_zero or b.is_zero:
        return ZERO

    acc = [0] * (a.num_digits + b.num_digits)
    for i, x in enumerate(a.digits):
        if x == 0:
            continue
        for j, y in enumerate(b.digits):
            acc[i + j] += x * y

    carry = 0
    for pos in range(len(acc)):
        total = acc[pos] + carry
        acc[pos] = total % 10
        carry = total // 10

    return BigDecimal(trim(acc))
