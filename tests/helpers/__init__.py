"""Test helpers module for shared test utilities.

- constants: Addresses, users and rates
- factories: Config, composition and environment factories
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    BOND_PROXY,
    DEPOSIT_ASSET,
    FACTORY,
    FACTORY_ASSET,
    KEEPER,
    OWNER,
    PAR,
    POOL,
    POOL_ID,
    PSM_ASSET,
    RATE_98,
    ZAPPER,
    ZERO,
)
from tests.helpers.factories import FakeClock, make_composition, make_config, make_environment

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "KEEPER",
    "OWNER",
    "ZERO",
    "DEPOSIT_ASSET",
    "PSM_ASSET",
    "FACTORY_ASSET",
    "POOL",
    "POOL_ID",
    "FACTORY",
    "BOND_PROXY",
    "ZAPPER",
    "PAR",
    "RATE_98",
    # Factories
    "FakeClock",
    "make_composition",
    "make_config",
    "make_environment",
]
