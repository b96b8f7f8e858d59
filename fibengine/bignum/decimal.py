"""Arbitrary-precision non-negative decimal integers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class BigDecimal:
    """An immutable non-negative integer stored as base-10 digits.

    Digits are kept least-significant first, so ``digits[0]`` is the ones
    place. The representation is always minimal: no leading zero digits,
    and zero itself is exactly ``(0,)``.

    Example:
        >>> BigDecimal.from_int(1024).digits
        (4, 2, 0, 1)
        >>> str(BigDecimal.parse("007"))
        '7'
    """

    digits: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.digits:
            raise ValueError("BigDecimal needs at least one digit")
        for d in self.digits:
            if not isinstance(d, int) or not 0 <= d <= 9:
                raise ValueError(f"Invalid decimal digit: {d!r}")
        if len(self.digits) > 1 and self.digits[-1] == 0:
            raise ValueError("BigDecimal digits must not have leading zeros")

    @classmethod
    def from_small_value(cls, value: int) -> BigDecimal:
        """Build the one-digit value 0 or 1."""
        if value not in (0, 1):
            raise ValueError(f"from_small_value accepts 0 or 1, got {value}")
        return cls((value,))

    @classmethod
    def from_int(cls, value: int) -> BigDecimal:
        """Build a BigDecimal from any non-negative native integer.

        Args:
            value: Non-negative int of any size.

        Returns:
            The equivalent BigDecimal.

        Raises:
            ValueError: If value is negative.
        """
        if value < 0:
            raise ValueError(f"BigDecimal cannot represent negative values, got {value}")
        # str() yields most-significant first; storage is the reverse.
        return cls(tuple(int(ch) for ch in reversed(str(value))))

    @classmethod
    def parse(cls, text: str) -> BigDecimal:
        """Parse decimal text (most-significant digit first).

        Leading zeros are accepted and stripped. Anything other than ASCII
        digits raises ValueError.
        """
        text = text.strip()
        if not text or not all("0" <= ch <= "9" for ch in text):
            raise ValueError(f"Not a non-negative decimal integer: {text!r}")
        return cls(trim(int(ch) for ch in reversed(text)))

    @property
    def num_digits(self) -> int:
        return len(self.digits)

    @property
    def is_zero(self) -> bool:
        return self.digits == (0,)

    def __str__(self) -> str:
        return "".join(str(d) for d in reversed(self.digits))

    def __int__(self) -> int:
        return int(str(self))

    def __repr__(self) -> str:
        return f"BigDecimal({self})"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BigDecimal):
            return NotImplemented
        if self.num_digits != other.num_digits:
            return self.num_digits < other.num_digits
        # Same length: the first differing digit from the top decides.
        for mine, theirs in zip(reversed(self.digits), reversed(other.digits)):
            if mine != theirs:
                return mine < theirs
        return False


def trim(digits) -> tuple[int, ...]:
    """Drop leading (most-significant) zeros from an LSB-first digit sequence."""
    result = list(digits)
    while len(result) > 1 and result[-1] == 0:
        result.pop()
    return tuple(result) if result else (0,)


ZERO = BigDecimal.from_small_value(0)
ONE = BigDecimal.from_small_value(1)
