"""Zapper error classes.

Every failure is categorical and aborts the whole deposit or query.
Nothing here is retried or recovered internally.
"""


class ZapError(Exception):
    """Base error for zapper operations."""

    pass


# =============================================================================
# Input validation
# =============================================================================


class InvalidAmount(ZapError):
    """Deposit amount must be positive."""

    pass


class InvalidRecipient(ZapError):
    """Recipient is the zero address, the zapper itself, or the pool."""

    pass


class Unauthorized(ZapError):
    """Caller is not allowed to use this entry point."""

    pass


# =============================================================================
# Scaling and split math
# =============================================================================


class InvalidDecimals(ZapError):
    """Token decimals must be in [0, 18]."""

    pass


class InvalidScalingFactor(ZapError):
    """Scaling factor must be positive."""

    pass


class RateOutOfRange(ZapError):
    """Mint rate must be in (0, 1e18]."""

    pass


class AssetNotInPool(ZapError):
    """An expected asset is missing from the pool composition."""

    pass


class EmptyPool(ZapError):
    """Pool has no balance to split a deposit against."""

    pass


class UnsupportedPool(ZapError):
    """Pool does not hold exactly the three expected non-share assets."""

    pass


# =============================================================================
# External collaborators
# =============================================================================


class SlippageExceeded(ZapError):
    """Join produced less LP than the caller's minimum."""

    pass


class ExternalCallFailure(ZapError):
    """A collaborator call failed. The original exception is chained."""

    def __init__(self, call: str, reason: str) -> None:
        super().__init__(f"{call} failed: {reason}")
        self.call = call
        self.reason = reason


# =============================================================================
# Price oracle
# =============================================================================


class OracleError(ZapError):
    """Base error for TWAP oracle operations."""

    pass


class InvalidPrice(OracleError):
    """Price must be in (0, 2^224)."""

    pass


class TooSoon(OracleError):
    """Observation arrives before the minimum spacing has elapsed."""

    pass


class InsufficientObservations(OracleError):
    """TWAP needs at least two observations."""

    pass


class NoElapsedWindow(OracleError):
    """Observations in the window span zero seconds."""

    pass
