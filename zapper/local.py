"""Local in-memory deployment.

Builds a Zapper over the reference ledger, pool, PSM and factory, seeded
with a balanced pool. Used as the HTTP API's default backend and for dry
runs without a chain.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from zapper.auth import AllowListAuthorization
from zapper.config import ZapConfig
from zapper.constants import SCALE
from zapper.pool.reference import (
    InMemoryLedger,
    ReferenceFactory,
    ReferencePsm,
    ReferenceStablePool,
)
from zapper.zapper import Zapper

# Synthetic addresses for the local deployment
LOCAL_DEPOSIT_ASSET = "0x1000000000000000000000000000000000000001"
LOCAL_PSM_ASSET = "0x1000000000000000000000000000000000000002"
LOCAL_FACTORY_ASSET = "0x1000000000000000000000000000000000000003"
LOCAL_POOL = "0x2000000000000000000000000000000000000001"
LOCAL_POOL_ID = LOCAL_POOL + "0" * 24
LOCAL_FACTORY = "0x3000000000000000000000000000000000000001"
LOCAL_BOND_PROXY = "0x3000000000000000000000000000000000000002"
LOCAL_ZAPPER = "0x4000000000000000000000000000000000000001"
LOCAL_OWNER = "0x5000000000000000000000000000000000000001"

DEPOSIT_DECIMALS = 6
PSM_DECIMALS = 18
FACTORY_DECIMALS = 18


@dataclass(frozen=True)
class LocalEnvironment:
    """Everything a local Zapper runs against."""

    ledger: InMemoryLedger
    pool: ReferenceStablePool
    psm: ReferencePsm
    factory: ReferenceFactory
    zapper: Zapper
    owner: str


def build_local_environment(
    seed_per_asset: int = 1_000_000,
    deposit_decimals: int = DEPOSIT_DECIMALS,
    factory_rate: int = 98 * SCALE // 100,
    amplification_parameter: int = 200,
    fee: Decimal = Decimal("0.0004"),
    config: ZapConfig | None = None,
    clock: Callable[[], float] | None = None,
) -> LocalEnvironment:
    """Deploy ledger, pool, PSM, factory and zapper in memory.

    Args:
        seed_per_asset: Whole tokens of each pool asset seeded by the owner
        deposit_decimals: Decimals of the deposit asset
        factory_rate: Factory mint rate for its asset (SCALE units)
        amplification_parameter: Pool A
        fee: Pool swap fee
        config: Zapper configuration; defaults to the local addresses
        clock: Oracle time source; defaults to time.time

    Returns:
        LocalEnvironment with the owner holding the seed BPT
    """
    ledger = InMemoryLedger()
    ledger.register(LOCAL_DEPOSIT_ASSET, deposit_decimals)
    ledger.register(LOCAL_PSM_ASSET, PSM_DECIMALS)
    ledger.register(LOCAL_FACTORY_ASSET, FACTORY_DECIMALS)

    pool = ReferenceStablePool(
        ledger,
        pool_id=LOCAL_POOL_ID,
        address=LOCAL_POOL,
        tokens=[LOCAL_DEPOSIT_ASSET, LOCAL_PSM_ASSET, LOCAL_FACTORY_ASSET],
        amplification_parameter=amplification_parameter,
        fee=fee,
    )
    seed = [
        seed_per_asset * 10**deposit_decimals,
        seed_per_asset * 10**PSM_DECIMALS,
        seed_per_asset * 10**FACTORY_DECIMALS,
    ]
    for token, amount in zip(
        [LOCAL_DEPOSIT_ASSET, LOCAL_PSM_ASSET, LOCAL_FACTORY_ASSET], seed, strict=True
    ):
        ledger.mint(token, LOCAL_OWNER, amount)
    pool.initialize(LOCAL_OWNER, seed)

    psm = ReferencePsm(ledger, LOCAL_BOND_PROXY, LOCAL_DEPOSIT_ASSET, LOCAL_PSM_ASSET)
    factory = ReferenceFactory(ledger, LOCAL_FACTORY, LOCAL_DEPOSIT_ASSET)
    factory.set_rate(LOCAL_FACTORY_ASSET, factory_rate)

    config = config or ZapConfig(
        deposit_asset=LOCAL_DEPOSIT_ASSET,
        psm_asset=LOCAL_PSM_ASSET,
        factory_asset=LOCAL_FACTORY_ASSET,
        pool_id=LOCAL_POOL_ID,
        pool_address=LOCAL_POOL,
        factory=LOCAL_FACTORY,
        bond_proxy=LOCAL_BOND_PROXY,
        zapper_address=LOCAL_ZAPPER,
    )
    zapper = Zapper(
        config,
        custody=ledger,
        pool=pool,
        bond_mint=psm,
        factory=factory,
        pool_join=pool,
        authorization=AllowListAuthorization(LOCAL_OWNER),
        transaction=ledger.atomic,
        clock=clock,
    )
    return LocalEnvironment(
        ledger=ledger,
        pool=pool,
        psm=psm,
        factory=factory,
        zapper=zapper,
        owner=LOCAL_OWNER,
    )


_default_environment: LocalEnvironment | None = None


def get_default_zapper() -> Zapper:
    """Lazily built local Zapper shared by the API process."""
    global _default_environment
    if _default_environment is None:
        _default_environment = build_local_environment()
    return _default_environment.zapper
