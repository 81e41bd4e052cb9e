"""Deposit estimation path.

Mirrors the pipeline's validation and split without touching state: mint
outcomes are projected from the current rates instead of being executed,
and the LP estimate comes from the pool's read-only join query. The
estimate is then reduced by a small margin so that, with the pool
unchanged, it never exceeds what the real deposit delivers.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from zapper.config import ZapConfig
from zapper.constants import SCALE
from zapper.math.fixed_point import mul_div_down
from zapper.pool.scaling import downscale_down, upscale

from .calls import external_call
from .interfaces import FactoryMint, PoolInfo, PoolJoin
from .splitter import split_deposit
from .validation import validate_deposit

logger = structlog.get_logger()


def project_mint(spent: int, rate: int, deposit_factor: int, minted_factor: int) -> int:
    """Units a facility mints for `spent` deposit-asset units at `rate`, rounded down."""
    return downscale_down(mul_div_down(upscale(spent, deposit_factor), rate, SCALE), minted_factor)


def apply_margin(estimate: int, margin: int) -> int:
    """estimate * (1 - margin), rounded down. `margin` is in SCALE units."""
    return mul_div_down(estimate, SCALE - margin, SCALE)


@dataclass(frozen=True)
class SimulationResult:
    """Projected outcome of a deposit.

    Attributes:
        amount: Simulated deposit (native units)
        join_amounts: Projected join amounts, aligned with the pool composition
        estimate: LP out reported by the pool query
        margined_estimate: `estimate` after the simulation margin
    """

    amount: int
    join_amounts: tuple[int, ...]
    estimate: int
    margined_estimate: int


class DepositSimulator:
    """Read-only LP estimates for deposits.

    Args:
        config: Zapper configuration (margin included)
        pool: Pool composition source
        factory: Factory, queried for its mint rate only
        pool_join: Pool, queried through `query_join` only
    """

    def __init__(
        self,
        config: ZapConfig,
        pool: PoolInfo,
        factory: FactoryMint,
        pool_join: PoolJoin,
    ) -> None:
        self.config = config
        self.pool = pool
        self.factory = factory
        self.pool_join = pool_join

    def simulate(self, amount: int, recipient: str) -> SimulationResult:
        """Estimate the LP a deposit of `amount` would deliver to `recipient`.

        Raises:
            InvalidAmount: If amount <= 0
            InvalidRecipient: If the recipient is rejected
            ExternalCallFailure: If a collaborator query fails
        """
        cfg = self.config
        recipient = validate_deposit(amount, recipient, cfg.zapper_address, cfg.pool_address)

        composition = external_call("pool.get_composition", self.pool.get_composition, cfg.pool_id)
        rate = external_call("factory.mint_rate", self.factory.mint_rate, cfg.factory_asset)
        split = split_deposit(
            composition,
            cfg.deposit_asset,
            cfg.psm_asset,
            cfg.factory_asset,
            rate,
            amount,
        )

        deposit_factor = composition.scaling_factors[split.deposit_index]
        join_amounts = [0] * len(composition.assets)
        join_amounts[split.psm_index] = project_mint(
            split.psm_amount,
            split.rates[split.psm_index],
            deposit_factor,
            composition.scaling_factors[split.psm_index],
        )
        join_amounts[split.factory_index] = project_mint(
            split.factory_amount,
            split.factory_rate,
            deposit_factor,
            composition.scaling_factors[split.factory_index],
        )
        join_amounts[split.deposit_index] = amount - split.psm_amount - split.factory_amount

        estimate, _ = external_call(
            "pool.query_join",
            self.pool_join.query_join,
            cfg.pool_id,
            cfg.zapper_address,
            recipient,
            join_amounts,
        )
        margined = apply_margin(estimate, cfg.simulation_margin)

        logger.debug(
            "deposit_simulated",
            amount=amount,
            join_amounts=join_amounts,
            estimate=estimate,
            margined_estimate=margined,
        )

        return SimulationResult(
            amount=amount,
            join_amounts=tuple(join_amounts),
            estimate=estimate,
            margined_estimate=margined,
        )
