"""Zapper facade.

The Zapper is the entry point for deposits, estimates and the LP price
oracle. It checks the configured pool once at construction, gates every
entry point with an injected authorization predicate, and wires the mint
pipeline, the simulator, the oracle and its keeper together.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from contextlib import AbstractContextManager

import structlog

from zapper.auth import require_authorized
from zapper.config import ZapConfig
from zapper.constants import POOL_ASSET_COUNT, SCALE
from zapper.errors import UnsupportedPool
from zapper.models.types import normalize_address
from zapper.oracle.keeper import OracleKeeper
from zapper.oracle.twap import Observation, PriceOracle
from zapper.pool.composition import PoolComposition
from zapper.zap.calls import external_call
from zapper.zap.interfaces import (
    Authorization,
    BondMint,
    FactoryMint,
    PoolInfo,
    PoolJoin,
    TokenCustody,
)
from zapper.zap.pipeline import DepositReceipt, MintPipeline
from zapper.zap.simulator import DepositSimulator, SimulationResult

logger = structlog.get_logger()

# Keeper probes need a recipient the validation accepts; LP is never minted to it
PROBE_RECIPIENT = "0x000000000000000000000000000000000000dead"


def check_pool_assets(config: ZapConfig, composition: PoolComposition) -> None:
    """Require the pool to hold exactly deposit, PSM and factory assets plus its BPT.

    Raises:
        UnsupportedPool: If the asset set differs
    """
    if normalize_address(composition.share_asset) != config.pool_address:
        raise UnsupportedPool(
            f"Pool share token {composition.share_asset} is not the pool {config.pool_address}"
        )
    non_share = {normalize_address(composition.assets[i]) for i in composition.non_share_indices}
    expected = {config.deposit_asset, config.psm_asset, config.factory_asset}
    if len(composition.non_share_indices) != POOL_ASSET_COUNT or non_share != expected:
        raise UnsupportedPool(
            f"Pool assets {sorted(non_share)} do not match expected {sorted(expected)}"
        )


class Zapper:
    """Single-asset zap into a three-asset stable pool.

    Args:
        config: Immutable configuration
        custody: Deposit-asset custody and balances
        pool: Pool composition source
        bond_mint: PSM / bond proxy
        factory: Factory minter
        pool_join: Pool join and join query
        authorization: Gates `deposit` and `simulate`
        keeper_authorization: Gates `record_price`. Defaults to `authorization`.
        transaction: Context factory making each deposit atomic
        clock: Unix time source for the oracle
    """

    def __init__(
        self,
        config: ZapConfig,
        custody: TokenCustody,
        pool: PoolInfo,
        bond_mint: BondMint,
        factory: FactoryMint,
        pool_join: PoolJoin,
        authorization: Authorization,
        keeper_authorization: Authorization | None = None,
        transaction: Callable[[], AbstractContextManager[object]] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        composition = external_call("pool.get_composition", pool.get_composition, config.pool_id)
        check_pool_assets(config, composition)

        self.config = config
        self.authorization = authorization
        self.keeper_authorization = keeper_authorization or authorization

        self.pipeline = MintPipeline(
            config, custody, pool, bond_mint, factory, pool_join, transaction=transaction
        )
        self.simulator = DepositSimulator(config, pool, factory, pool_join)

        deposit_factor = composition.scaling_factors[composition.index_of(config.deposit_asset)]
        self.oracle = PriceOracle(
            config.twap_period,
            config.twap_granularity,
            deposit_scaling_factor=deposit_factor,
            clock=clock,
        )
        # Default probe is one whole deposit-asset token
        probe_amount = config.keeper_probe_amount or SCALE // deposit_factor
        self.keeper = OracleKeeper(self.simulator, self.oracle, probe_amount, PROBE_RECIPIENT)
        self._oracle_lock = threading.Lock()

        logger.info(
            "zapper_initialized",
            pool_id=config.pool_id,
            deposit_asset=config.deposit_asset,
            psm_asset=config.psm_asset,
            factory_asset=config.factory_asset,
            factory=config.factory,
            bond_proxy=config.bond_proxy,
            twap_period=config.twap_period,
            twap_granularity=config.twap_granularity,
        )

    def deposit(self, caller: str, amount: int, recipient: str, min_out: int = 0) -> DepositReceipt:
        """Deposit and join; see MintPipeline.deposit.

        Raises:
            Unauthorized: If the caller is not authorized
        """
        require_authorized(self.authorization, caller, "deposit")
        return self.pipeline.deposit(caller, amount, recipient, min_out)

    def simulate(self, caller: str, amount: int, recipient: str) -> SimulationResult:
        """Estimate a deposit; see DepositSimulator.simulate.

        Raises:
            Unauthorized: If the caller is not authorized
        """
        require_authorized(self.authorization, caller, "simulate")
        return self.simulator.simulate(amount, recipient)

    def record_price(self, caller: str, now: int | None = None) -> Observation | None:
        """Let the keeper sample a price into the oracle.

        Returns:
            The recorded observation, or None if it is too soon

        Raises:
            Unauthorized: If the caller is not the keeper
        """
        require_authorized(self.keeper_authorization, caller, "record prices")
        with self._oracle_lock:
            return self.keeper.poke(now)

    def consult(self, amount: int) -> int:
        """LP expected for `amount` at the oracle's TWAP."""
        return self.oracle.consult(amount)
