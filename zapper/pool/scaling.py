"""Decimal scaling helpers.

Functions for converting token amounts between native decimals and the
18-decimal normalized space all pool math runs in. Conversions back to
native decimals used for mints and transfers always round down.
"""

from zapper.errors import InvalidDecimals, InvalidScalingFactor

# Normalized amounts carry 18 decimals regardless of the token
NORMALIZED_DECIMALS = 18


def scaling_factor(decimals: int) -> int:
    """Factor that lifts a token's native amounts to 18 decimals.

    Args:
        decimals: Token decimals (e.g., 6 for USDC)

    Returns:
        10^(18 - decimals)

    Raises:
        InvalidDecimals: If decimals is negative or greater than 18
    """
    if decimals < 0 or decimals > NORMALIZED_DECIMALS:
        raise InvalidDecimals(f"Token decimals must be in [0, 18], got {decimals}")
    return 10 ** (NORMALIZED_DECIMALS - decimals)


def _check_factor(factor: int) -> None:
    if factor <= 0:
        raise InvalidScalingFactor(f"Scaling factor must be positive, got {factor}")


def upscale(amount: int, factor: int) -> int:
    """Scale a native amount to 18 decimals.

    Raises:
        InvalidScalingFactor: If factor <= 0
    """
    _check_factor(factor)
    return amount * factor


def downscale_down(amount: int, factor: int) -> int:
    """Scale an 18-decimal amount back to native decimals, rounding down.

    Raises:
        InvalidScalingFactor: If factor <= 0
    """
    _check_factor(factor)
    return amount // factor


def downscale_up(amount: int, factor: int) -> int:
    """Scale an 18-decimal amount back to native decimals, rounding up.

    Only used where the pool must collect at least a given amount.

    Raises:
        InvalidScalingFactor: If factor <= 0
    """
    _check_factor(factor)
    if amount == 0:
        return 0
    return (amount - 1) // factor + 1
