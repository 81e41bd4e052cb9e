"""Zapper configuration.

Trusted addresses and policy values are fixed once at construction in an
immutable, validated ZapConfig.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from zapper.constants import (
    DEFAULT_SIMULATION_MARGIN,
    DEFAULT_TWAP_GRANULARITY,
    DEFAULT_TWAP_PERIOD,
    SCALE,
)
from zapper.models.types import ZERO_ADDRESS, Address, MintMode, PoolId

ENV_PREFIX = "ZAPPER_"


class ZapConfig(BaseModel):
    """Immutable zapper configuration.

    Attributes:
        deposit_asset: Token users deposit (e.g. a stablecoin)
        psm_asset: Pool asset minted at par by the bond proxy
        factory_asset: Pool asset minted by the factory at its mint rate
        pool_id: 32-byte pool id used for joins and composition queries
        pool_address: Pool (and BPT) address
        factory: Factory contract address
        bond_proxy: Bond proxy / PSM contract address
        zapper_address: The zapper's own identity; holds funds mid-deposit
        twap_period: Oracle look-back in seconds
        twap_granularity: Oracle window capacity
        simulation_margin: Haircut applied to simulator estimates (SCALE units)
        mint_mode: Mode passed to the factory on mint
        keeper_probe_amount: Deposit size the keeper simulates per sample,
            in deposit-asset native units. None means one whole token.
    """

    model_config = ConfigDict(frozen=True)

    deposit_asset: Address
    psm_asset: Address
    factory_asset: Address
    pool_id: PoolId
    pool_address: Address
    factory: Address
    bond_proxy: Address
    zapper_address: Address
    twap_period: int = Field(default=DEFAULT_TWAP_PERIOD, gt=0)
    twap_granularity: int = Field(default=DEFAULT_TWAP_GRANULARITY, gt=1)
    simulation_margin: int = Field(default=DEFAULT_SIMULATION_MARGIN, ge=0, lt=SCALE)
    mint_mode: MintMode = MintMode.EXACT_INPUT
    keeper_probe_amount: int | None = Field(default=None, gt=0)

    @field_validator("mint_mode", mode="before")
    @classmethod
    def _parse_mint_mode(cls, value: object) -> object:
        if isinstance(value, str) and value.isdigit():
            return int(value)
        return value

    @model_validator(mode="after")
    def _check_addresses(self) -> ZapConfig:
        assets = {self.deposit_asset, self.psm_asset, self.factory_asset}
        if len(assets) != 3:
            raise ValueError("deposit_asset, psm_asset and factory_asset must be distinct")
        if self.pool_address in assets:
            raise ValueError("pool_address cannot be one of the pool's underlying assets")
        if ZERO_ADDRESS in assets | {self.pool_address, self.zapper_address}:
            raise ValueError("Configured addresses cannot be the zero address")
        return self

    @property
    def min_observation_spacing(self) -> int:
        """Seconds required between oracle samples once the window is seeded."""
        return self.twap_period // self.twap_granularity

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ZapConfig:
        """Read configuration from ZAPPER_* environment variables.

        Field names map to upper-case variables, e.g. ZAPPER_DEPOSIT_ASSET,
        ZAPPER_TWAP_PERIOD. Unset optional fields keep their defaults.

        Raises:
            pydantic.ValidationError: If a required variable is missing or invalid
        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in env:
                values[name] = env[key]
        return cls.model_validate(values)
