"""Tests for ZapConfig."""

import pytest
from pydantic import ValidationError

from zapper.config import ZapConfig
from zapper.constants import DEFAULT_SIMULATION_MARGIN, SCALE
from zapper.models.types import MintMode
from tests.helpers import (
    BOND_PROXY,
    DEPOSIT_ASSET,
    FACTORY,
    FACTORY_ASSET,
    POOL,
    POOL_ID,
    PSM_ASSET,
    ZAPPER,
    ZERO,
    make_config,
)


def env_vars(**extra: str) -> dict[str, str]:
    values = {
        "ZAPPER_DEPOSIT_ASSET": DEPOSIT_ASSET,
        "ZAPPER_PSM_ASSET": PSM_ASSET,
        "ZAPPER_FACTORY_ASSET": FACTORY_ASSET,
        "ZAPPER_POOL_ID": POOL_ID,
        "ZAPPER_POOL_ADDRESS": POOL,
        "ZAPPER_FACTORY": FACTORY,
        "ZAPPER_BOND_PROXY": BOND_PROXY,
        "ZAPPER_ZAPPER_ADDRESS": ZAPPER,
    }
    values.update(extra)
    return values


class TestZapConfig:
    def test_defaults(self):
        config = make_config()
        assert config.twap_period == 86_400
        assert config.twap_granularity == 144
        assert config.min_observation_spacing == 600
        assert config.simulation_margin == DEFAULT_SIMULATION_MARGIN
        assert config.mint_mode == MintMode.EXACT_INPUT
        assert config.keeper_probe_amount is None

    def test_addresses_normalized(self):
        config = make_config(
            zapper_address="0xABCDEF0000000000000000000000000000000001",
            pool_id=POOL_ID.upper().replace("0X", "0x"),
        )
        assert config.zapper_address == "0xabcdef0000000000000000000000000000000001"
        assert config.pool_id == POOL_ID

    def test_frozen(self):
        config = make_config()
        with pytest.raises(ValidationError):
            config.twap_period = 1  # type: ignore[misc]

    def test_assets_must_be_distinct(self):
        with pytest.raises(ValidationError, match="distinct"):
            make_config(factory_asset=PSM_ASSET)

    def test_pool_cannot_be_an_asset(self):
        with pytest.raises(ValidationError, match="pool_address"):
            make_config(pool_address=DEPOSIT_ASSET)

    def test_zero_address_rejected(self):
        with pytest.raises(ValidationError, match="zero address"):
            make_config(zapper_address=ZERO)

    def test_malformed_address(self):
        with pytest.raises(ValidationError):
            make_config(deposit_asset="0x1234")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("twap_period", 0),
            ("twap_granularity", 1),
            ("simulation_margin", -1),
            ("simulation_margin", SCALE),
            ("keeper_probe_amount", 0),
        ],
    )
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            make_config(**{field: value})


class TestFromEnv:
    def test_required_fields(self):
        config = ZapConfig.from_env(env_vars())
        assert config.deposit_asset == DEPOSIT_ASSET
        assert config.pool_id == POOL_ID

    def test_optional_fields(self):
        config = ZapConfig.from_env(
            env_vars(
                ZAPPER_TWAP_PERIOD="3600",
                ZAPPER_TWAP_GRANULARITY="12",
                ZAPPER_SIMULATION_MARGIN=str(10**15),
                ZAPPER_MINT_MODE="1",
            )
        )
        assert config.twap_period == 3600
        assert config.min_observation_spacing == 300
        assert config.simulation_margin == 10**15
        assert config.mint_mode == MintMode.EXACT_OUTPUT

    def test_missing_variable(self):
        values = env_vars()
        del values["ZAPPER_POOL_ID"]
        with pytest.raises(ValidationError):
            ZapConfig.from_env(values)

    def test_reads_os_environ(self, monkeypatch):
        for key, value in env_vars().items():
            monkeypatch.setenv(key, value)
        assert ZapConfig.from_env().zapper_address == ZAPPER
