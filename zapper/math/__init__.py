"""Fixed-point helpers shared by the split, the simulator and pool math."""

from zapper.math.fixed_point import AMP_PRECISION, ONE_18, Bfp, mul_div_down

__all__ = ["AMP_PRECISION", "Bfp", "ONE_18", "mul_div_down"]
