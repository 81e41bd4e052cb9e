"""Pool-side building blocks.

- Decimal scaling between native and 18-decimal amounts
- PoolComposition, the per-operation view of the pool
- Stable pool join math

The in-memory reference pool lives in `zapper.pool.reference` and is not
imported here.
"""

from .composition import PoolComposition, composition_from_pool_tokens
from .errors import (
    BalancerError,
    InsufficientBalance,
    LedgerError,
    MintError,
    StableInvariantDidNotConverge,
    UnknownPoolError,
    ZeroBalanceError,
)
from .scaling import downscale_down, downscale_up, scaling_factor, upscale
from .stable_math import calc_bpt_out_given_exact_tokens_in, calculate_invariant

__all__ = [
    # Composition
    "PoolComposition",
    "composition_from_pool_tokens",
    # Scaling
    "scaling_factor",
    "upscale",
    "downscale_down",
    "downscale_up",
    # Stable math
    "calculate_invariant",
    "calc_bpt_out_given_exact_tokens_in",
    # Errors
    "BalancerError",
    "ZeroBalanceError",
    "StableInvariantDidNotConverge",
    "UnknownPoolError",
    "LedgerError",
    "InsufficientBalance",
    "MintError",
]
