"""Proportional split of a single-asset deposit across the pool's assets.

Each non-share asset i gets a weighted balance

    w_i = balance_i * SCALE / rate_i

and a normalized target

    t_i = deposit * w_i / sum(w)

where rate_i is the mint rate of that asset relative to the deposit asset
(SCALE for par assets). Dividing by the rate inflates the share routed to an
asset that mints below par, so that after minting every asset grows by the
same fraction of its balance and the pool keeps its composition.

The formula is only derived for one non-par asset among three.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from zapper.constants import PAR_RATE, POOL_ASSET_COUNT, SCALE
from zapper.errors import EmptyPool, RateOutOfRange, UnsupportedPool
from zapper.math.fixed_point import mul_div_down
from zapper.pool.composition import PoolComposition
from zapper.pool.scaling import downscale_down, upscale

logger = structlog.get_logger()


def validate_rate(rate: int) -> int:
    """Check a mint rate lies in (0, SCALE].

    Raises:
        RateOutOfRange: If the rate is zero, negative or above par
    """
    if rate <= 0 or rate > SCALE:
        raise RateOutOfRange(f"Mint rate must be in (0, {SCALE}], got {rate}")
    return rate


@dataclass(frozen=True)
class SplitResult:
    """How a deposit is routed to each pool asset.

    Arrays are aligned with the composition's asset list; the share entry
    is always 0.

    Attributes:
        amounts: Deposit-asset units to route to each asset. The deposit
            asset's own entry is indicative only: the pipeline joins with
            whatever remains after both mints.
        normalized_targets: t_i in 18-decimal space
        rates: Mint rate used for each asset
        deposit_index: Position of the deposit asset
        psm_index: Position of the PSM-minted asset
        factory_index: Position of the factory-minted asset
    """

    amounts: tuple[int, ...]
    normalized_targets: tuple[int, ...]
    rates: tuple[int, ...]
    deposit_index: int
    psm_index: int
    factory_index: int

    @property
    def psm_amount(self) -> int:
        return self.amounts[self.psm_index]

    @property
    def factory_amount(self) -> int:
        return self.amounts[self.factory_index]

    @property
    def factory_rate(self) -> int:
        return self.rates[self.factory_index]


def weighted_balances(balances: list[int], rates: list[int]) -> list[int]:
    """w_i = balance_i * SCALE // rate_i for normalized balances."""
    return [
        mul_div_down(b, SCALE, validate_rate(r)) for b, r in zip(balances, rates, strict=True)
    ]


def proportional_targets(deposit: int, weights: list[int]) -> list[int]:
    """t_i = deposit * w_i // sum(w), each rounded down.

    Raises:
        EmptyPool: If every weight is zero
    """
    total = sum(weights)
    if total == 0:
        raise EmptyPool("Pool holds no balance to split against")
    return [mul_div_down(deposit, w, total) for w in weights]


def split_deposit(
    composition: PoolComposition,
    deposit_asset: str,
    psm_asset: str,
    factory_asset: str,
    factory_rate: int,
    amount: int,
) -> SplitResult:
    """Split `amount` of the deposit asset in proportion to the pool.

    Args:
        composition: Live pool composition
        deposit_asset: Asset being deposited (par)
        psm_asset: Asset minted at par by the PSM
        factory_asset: Asset minted by the factory at `factory_rate`
        factory_rate: Factory mint rate in SCALE units
        amount: Deposit in the deposit asset's native decimals

    Returns:
        SplitResult with the mint legs downscaled to deposit-asset units

    Raises:
        AssetNotInPool: If one of the three assets is not in the pool
        UnsupportedPool: If the pool does not hold exactly three non-share assets
        RateOutOfRange: If the factory rate is outside (0, SCALE]
        EmptyPool: If all non-share balances are zero
    """
    indices = composition.non_share_indices
    if len(indices) != POOL_ASSET_COUNT:
        raise UnsupportedPool(
            f"Split is defined for {POOL_ASSET_COUNT} non-share assets, pool has {len(indices)}"
        )

    deposit_index = composition.index_of(deposit_asset)
    psm_index = composition.index_of(psm_asset)
    factory_index = composition.index_of(factory_asset)
    if len({deposit_index, psm_index, factory_index, composition.share_index}) != 4:
        raise UnsupportedPool("Deposit, PSM and factory assets must be distinct non-share assets")

    rates = [0] * len(composition.assets)
    rates[deposit_index] = PAR_RATE
    rates[psm_index] = PAR_RATE
    rates[factory_index] = validate_rate(factory_rate)

    normalized = composition.normalized_balances()
    weights = weighted_balances([normalized[i] for i in indices], [rates[i] for i in indices])

    deposit_factor = composition.scaling_factors[deposit_index]
    targets = proportional_targets(upscale(amount, deposit_factor), weights)

    normalized_targets = [0] * len(composition.assets)
    amounts = [0] * len(composition.assets)
    for i, target in zip(indices, targets, strict=True):
        normalized_targets[i] = target
        # Mint calls spend deposit-asset units, so every leg uses its decimals
        amounts[i] = downscale_down(target, deposit_factor)

    logger.debug(
        "deposit_split",
        amount=amount,
        weights=weights,
        normalized_targets=normalized_targets,
        amounts=amounts,
    )

    return SplitResult(
        amounts=tuple(amounts),
        normalized_targets=tuple(normalized_targets),
        rates=tuple(rates),
        deposit_index=deposit_index,
        psm_index=psm_index,
        factory_index=factory_index,
    )
