"""18-decimal fixed point.

Pool join math runs on integers scaled by 10^18 with an explicit rounding
direction on every product and quotient, the way the on-chain FixedPoint
library does. Only what stable joins need is here: no powers, no logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

ONE_18 = 10**18

# Amplification parameters are stored pre-multiplied by this precision
AMP_PRECISION = 1000


def mul_div_down(a: int, b: int, c: int) -> int:
    """floor(a * b / c), computed on the full product.

    Raises:
        ZeroDivisionError: If c is zero
    """
    if c == 0:
        raise ZeroDivisionError("mul_div_down by zero")
    return a * b // c


@dataclass(frozen=True, order=True)
class Bfp:
    """Non-negative fixed-point value; `value` holds the 10^18-scaled integer.

    Products and quotients round down. `sub` and `complement` clamp at zero
    instead of going negative.
    """

    value: int

    @classmethod
    def from_decimal(cls, d: Decimal) -> Bfp:
        """Scale a Decimal, truncating anything below 1 wei."""
        if d < 0:
            raise ValueError(f"Bfp.from_decimal requires non-negative input, got {d}")
        return cls(int((d * ONE_18).to_integral_value(rounding=ROUND_DOWN)))

    def to_decimal(self) -> Decimal:
        return Decimal(self.value) / ONE_18

    def mul_down(self, other: Bfp) -> Bfp:
        return Bfp(mul_div_down(self.value, other.value, ONE_18))

    def div_down(self, other: Bfp) -> Bfp:
        if other.value == 0:
            raise ZeroDivisionError("Bfp division by zero")
        return Bfp(mul_div_down(self.value, ONE_18, other.value))

    def add(self, other: Bfp) -> Bfp:
        return Bfp(self.value + other.value)

    def sub(self, other: Bfp) -> Bfp:
        return Bfp(max(0, self.value - other.value))

    def complement(self) -> Bfp:
        """1 - self, or 0 when self exceeds one."""
        return Bfp(max(0, ONE_18 - self.value))

    def __str__(self) -> str:
        return str(self.to_decimal())
