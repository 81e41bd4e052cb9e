"""Tests for 18-decimal fixed point."""

from decimal import Decimal

import pytest

from zapper.math.fixed_point import ONE_18, Bfp, mul_div_down


class TestBfp:
    """Products and quotients round down; subtraction clamps at zero."""

    def test_mul_down(self):
        a = Bfp(ONE_18 + 1)
        # (10^18 + 1)^2 / 10^18 = 10^18 + 2 + 1/10^18
        assert a.mul_down(a) == Bfp(ONE_18 + 2)

    def test_div_down(self):
        assert Bfp(ONE_18).div_down(Bfp(3 * ONE_18)).value == 333_333_333_333_333_333

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            Bfp(ONE_18).div_down(Bfp(0))

    def test_complement(self):
        assert Bfp(3 * 10**17).complement() == Bfp(7 * 10**17)
        assert Bfp(2 * ONE_18).complement() == Bfp(0)

    def test_sub_clamps(self):
        assert Bfp(5).sub(Bfp(7)) == Bfp(0)
        assert Bfp(7).sub(Bfp(5)) == Bfp(2)

    def test_ordering(self):
        assert Bfp(1) < Bfp(2)
        assert Bfp(2) >= Bfp(2)
        assert max(Bfp(3), Bfp(9)) == Bfp(9)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Bfp(1).value = 2  # type: ignore[misc]


class TestBfpDecimal:
    def test_from_decimal_truncates(self):
        assert Bfp.from_decimal(Decimal("0.98")).value == 98 * 10**16
        assert Bfp.from_decimal(Decimal("0.0000000000000000019")).value == 1

    def test_from_decimal_rejects_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            Bfp.from_decimal(Decimal("-1"))

    def test_to_decimal(self):
        assert Bfp(15 * 10**17).to_decimal() == Decimal("1.5")
        assert str(Bfp(25 * 10**16)) == "0.25"


class TestMulDivDown:
    def test_full_precision_product(self):
        # 10^39 / 98e16 keeps every digit before flooring
        assert mul_div_down(10**21, ONE_18, 98 * 10**16) == 1_020_408_163_265_306_122_448

    def test_zero_divisor(self):
        with pytest.raises(ZeroDivisionError):
            mul_div_down(1, 1, 0)
