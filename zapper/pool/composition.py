"""Pool composition snapshot.

A PoolComposition is read fresh from the pool on every deposit or query and
never cached. It mirrors what Balancer's Vault.getPoolTokens returns plus
the scaling factors and BPT index exposed by a composable stable pool.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from zapper.errors import AssetNotInPool
from zapper.models.types import normalize_address

from .scaling import upscale


@dataclass(frozen=True)
class PoolComposition:
    """Ordered view of a pool's assets.

    Attributes:
        assets: Token addresses in pool order (BPT included)
        balances: Raw balances in each token's native decimals
        scaling_factors: Per-token factor lifting native amounts to 18 decimals
        share_index: Position of the pool-share token (BPT) in `assets`
    """

    assets: tuple[str, ...]
    balances: tuple[int, ...]
    scaling_factors: tuple[int, ...]
    share_index: int

    def __post_init__(self) -> None:
        n = len(self.assets)
        if len(self.balances) != n or len(self.scaling_factors) != n:
            raise ValueError(
                f"Composition arrays differ in length: {n} assets, "
                f"{len(self.balances)} balances, {len(self.scaling_factors)} scaling factors"
            )
        if not 0 <= self.share_index < n:
            raise ValueError(f"share_index {self.share_index} out of range for {n} assets")

    @property
    def share_asset(self) -> str:
        return self.assets[self.share_index]

    @property
    def non_share_indices(self) -> tuple[int, ...]:
        """Indices of the assets that take part in split math."""
        return tuple(i for i in range(len(self.assets)) if i != self.share_index)

    def index_of(self, asset: str) -> int:
        """Position of `asset` in the composition.

        Raises:
            AssetNotInPool: If the asset is not part of the pool
        """
        target = normalize_address(asset)
        for i, token in enumerate(self.assets):
            if normalize_address(token) == target:
                return i
        raise AssetNotInPool(f"Asset {asset} not found in pool")

    def normalized_balances(self) -> list[int]:
        """Balances in 18-decimal space, aligned with `assets`."""
        return [upscale(b, sf) for b, sf in zip(self.balances, self.scaling_factors, strict=True)]


def composition_from_pool_tokens(
    tokens: Sequence[str],
    balances: Sequence[int],
    share_index: int,
    scaling_factors: Sequence[int],
) -> PoolComposition:
    """Build a PoolComposition from the raw tuple a pool query returns.

    Args:
        tokens: Token addresses in pool order
        balances: Raw balances, aligned with tokens
        share_index: BPT position
        scaling_factors: Scaling factors, aligned with tokens

    Returns:
        Typed composition with normalized addresses
    """
    return PoolComposition(
        assets=tuple(normalize_address(t) for t in tokens),
        balances=tuple(int(b) for b in balances),
        scaling_factors=tuple(int(sf) for sf in scaling_factors),
        share_index=int(share_index),
    )
