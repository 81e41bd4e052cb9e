"""Collaborator protocols for the zap core.

Everything outside the split/mint/join arithmetic is reached through these
protocols: token custody, the pool, the two minting facilities and the
authorization predicate. The caller identity that a contract would read
from msg.sender is passed explicitly as `sender` or `payer`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from zapper.models.types import MintMode
from zapper.pool.composition import PoolComposition

__all__ = [
    "Authorization",
    "BondMint",
    "FactoryMint",
    "MintMode",
    "PoolInfo",
    "PoolJoin",
    "TokenCustody",
]


@runtime_checkable
class TokenCustody(Protocol):
    """Moves the deposit asset and reports balances."""

    def pull(self, asset: str, owner: str, recipient: str, amount: int) -> None:
        """Transfer `amount` of `asset` from `owner` (pre-authorized) to `recipient`."""
        ...

    def balance_of(self, asset: str, holder: str) -> int: ...


@runtime_checkable
class PoolInfo(Protocol):
    def get_composition(self, pool_id: str) -> PoolComposition: ...


@runtime_checkable
class BondMint(Protocol):
    """PSM / bond proxy minting its asset at par from the deposit asset."""

    def deposit(self, sender: str, amount: int, recipient: str) -> int:
        """Spend `amount` of deposit asset held by `sender`; return units minted."""
        ...


@runtime_checkable
class FactoryMint(Protocol):
    """Factory minting an asset at a rate <= 1 from the deposit asset."""

    def mint(self, sender: str, asset: str, amount: int, recipient: str, mode: MintMode) -> int:
        """Spend deposit asset held by `sender`; return units of `asset` minted."""
        ...

    def mint_rate(self, asset: str) -> int:
        """Minted units per deposited unit, 18-decimal fixed point."""
        ...


@runtime_checkable
class PoolJoin(Protocol):
    def join(
        self,
        pool_id: str,
        payer: str,
        recipient: str,
        amounts: Sequence[int],
        min_out: int,
    ) -> int:
        """Join with exact `amounts` (aligned with the composition); return LP out.

        Must raise SlippageExceeded when the LP out is below `min_out`.
        """
        ...

    def query_join(
        self,
        pool_id: str,
        sender: str,
        recipient: str,
        amounts: Sequence[int],
    ) -> tuple[int, list[int]]:
        """Read-only join estimate: (LP out, amounts the pool would take)."""
        ...


@runtime_checkable
class Authorization(Protocol):
    def is_authorized(self, caller: str) -> bool: ...
