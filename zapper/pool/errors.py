"""Reference environment error classes.

These stand in for reverts raised by the token, pool and minting contracts.
They are deliberately not ZapErrors: the zap core wraps them into
ExternalCallFailure when they escape a collaborator call.
"""


class BalancerError(Exception):
    """Base error for pool operations."""

    pass


class ZeroBalanceError(BalancerError):
    """Token balance must be positive."""

    pass


class StableInvariantDidNotConverge(BalancerError):
    """Newton-Raphson iteration for stable invariant D did not converge."""

    pass


class UnknownPoolError(BalancerError):
    """Pool id is not registered."""

    pass


class LedgerError(Exception):
    """Token transfer failed."""

    pass


class InsufficientBalance(LedgerError):
    """Holder does not have enough tokens."""

    pass


class MintError(Exception):
    """Minting facility rejected the request."""

    pass
