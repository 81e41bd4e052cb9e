"""Tests for the in-memory ledger, pool, PSM and factory."""

from decimal import Decimal

import pytest

from zapper.errors import SlippageExceeded
from zapper.models.types import MintMode
from zapper.pool.errors import InsufficientBalance, LedgerError, MintError, UnknownPoolError
from zapper.pool.reference import PREMINTED_BPT, InMemoryLedger
from tests.helpers import (
    ALICE,
    BOB,
    BOND_PROXY,
    DEPOSIT_ASSET,
    FACTORY,
    FACTORY_ASSET,
    OWNER,
    POOL,
    POOL_ID,
    PSM_ASSET,
    RATE_98,
    ZAPPER,
)


class TestInMemoryLedger:
    def setup_method(self):
        self.ledger = InMemoryLedger()
        self.ledger.register(DEPOSIT_ASSET, 6)

    def test_mint_and_transfer(self):
        self.ledger.mint(DEPOSIT_ASSET, ALICE, 100)
        self.ledger.transfer(DEPOSIT_ASSET, ALICE, BOB, 40)
        assert self.ledger.balance_of(DEPOSIT_ASSET, ALICE) == 60
        assert self.ledger.balance_of(DEPOSIT_ASSET, BOB) == 40

    def test_insufficient_balance(self):
        self.ledger.mint(DEPOSIT_ASSET, ALICE, 10)
        with pytest.raises(InsufficientBalance):
            self.ledger.transfer(DEPOSIT_ASSET, ALICE, BOB, 11)

    def test_unknown_token(self):
        with pytest.raises(LedgerError, match="Unknown token"):
            self.ledger.mint(PSM_ASSET, ALICE, 1)

    def test_scaling_factor(self):
        assert self.ledger.scaling_factor(DEPOSIT_ASSET) == 10**12

    def test_atomic_rolls_back(self):
        self.ledger.mint(DEPOSIT_ASSET, ALICE, 100)
        with pytest.raises(InsufficientBalance), self.ledger.atomic():
            self.ledger.transfer(DEPOSIT_ASSET, ALICE, BOB, 50)
            self.ledger.transfer(DEPOSIT_ASSET, ALICE, BOB, 80)
        assert self.ledger.balance_of(DEPOSIT_ASSET, ALICE) == 100
        assert self.ledger.balance_of(DEPOSIT_ASSET, BOB) == 0

    def test_atomic_keeps_successful_block(self):
        self.ledger.mint(DEPOSIT_ASSET, ALICE, 100)
        with self.ledger.atomic():
            self.ledger.transfer(DEPOSIT_ASSET, ALICE, BOB, 50)
        assert self.ledger.balance_of(DEPOSIT_ASSET, BOB) == 50


class TestReferenceStablePool:
    def test_seeded_composition(self, env):
        composition = env.pool.get_composition(POOL_ID)
        assert composition.assets == (POOL, DEPOSIT_ASSET, PSM_ASSET, FACTORY_ASSET)
        assert composition.share_index == 0
        assert composition.balances[1:] == (10**12, 10**24, 10**24)
        assert composition.scaling_factors == (1, 10**12, 1, 1)

    def test_initial_supply_equals_invariant(self, env):
        assert env.pool.bpt_supply == 3 * 10**24
        assert env.ledger.balance_of(POOL, OWNER) == 3 * 10**24
        composition = env.pool.get_composition(POOL_ID)
        assert composition.balances[0] == PREMINTED_BPT - 3 * 10**24

    def test_unknown_pool(self, env):
        with pytest.raises(UnknownPoolError):
            env.pool.get_composition("0x" + "ab" * 32)

    def test_query_join_does_not_mutate(self, env):
        before = env.pool.get_composition(POOL_ID)
        out, amounts = env.pool.query_join(POOL_ID, ALICE, ALICE, [0, 10**6, 10**18, 10**18])
        assert out > 0
        assert amounts == [0, 10**6, 10**18, 10**18]
        assert env.pool.get_composition(POOL_ID) == before

    def test_join_matches_query(self, env):
        env.ledger.mint(PSM_ASSET, ALICE, 10**18)
        env.ledger.mint(FACTORY_ASSET, ALICE, 10**18)
        amounts = [0, 10**6, 10**18, 10**18]
        quoted, _ = env.pool.query_join(POOL_ID, ALICE, BOB, amounts)

        out = env.pool.join(POOL_ID, ALICE, BOB, amounts, min_out=quoted)

        assert out == quoted
        assert env.ledger.balance_of(POOL, BOB) == out
        assert env.ledger.balance_of(PSM_ASSET, ALICE) == 0
        assert env.pool.bpt_supply == 3 * 10**24 + out

    def test_join_below_min_out(self, env):
        amounts = [0, 10**6, 0, 0]
        quoted, _ = env.pool.query_join(POOL_ID, ALICE, BOB, amounts)
        with pytest.raises(SlippageExceeded):
            env.pool.join(POOL_ID, ALICE, BOB, amounts, min_out=quoted + 1)
        assert env.ledger.balance_of(DEPOSIT_ASSET, ALICE) == 100_000 * 10**6

    def test_join_with_bpt_rejected(self, env):
        with pytest.raises(ValueError, match="BPT"):
            env.pool.query_join(POOL_ID, ALICE, BOB, [1, 0, 0, 0])

    def test_join_wrong_length(self, env):
        with pytest.raises(ValueError, match="Expected 4 amounts"):
            env.pool.query_join(POOL_ID, ALICE, BOB, [0, 1])

    def test_initialize_twice(self, env):
        with pytest.raises(LedgerError, match="already initialized"):
            env.pool.initialize(OWNER, [1, 1, 1])

    def test_fee_truncated_to_wei(self, env):
        assert env.pool.fee.value == 4 * 10**14
        assert env.pool.fee.to_decimal() == Decimal("0.0004")


class TestReferencePsm:
    def test_par_mint_converts_decimals(self, env):
        """1 USDC (6 decimals) mints 1e18 of the 18-decimal PSM asset."""
        minted = env.psm.deposit(ALICE, 1_000_000, ZAPPER)
        assert minted == 10**18
        assert env.ledger.balance_of(PSM_ASSET, ZAPPER) == 10**18
        assert env.ledger.balance_of(DEPOSIT_ASSET, BOND_PROXY) == 1_000_000

    def test_non_positive_amount(self, env):
        with pytest.raises(MintError):
            env.psm.deposit(ALICE, 0, ZAPPER)


class TestReferenceFactory:
    def test_mint_at_rate(self, env):
        minted = env.factory.mint(ALICE, FACTORY_ASSET, 1_000_000, ZAPPER, MintMode.EXACT_INPUT)
        assert minted == RATE_98
        assert env.ledger.balance_of(FACTORY_ASSET, ZAPPER) == RATE_98
        assert env.ledger.balance_of(DEPOSIT_ASSET, FACTORY) == 1_000_000

    def test_mint_rate(self, env):
        assert env.factory.mint_rate(FACTORY_ASSET) == RATE_98

    def test_unknown_asset(self, env):
        with pytest.raises(MintError, match="cannot mint"):
            env.factory.mint_rate(PSM_ASSET)

    def test_exact_output_unsupported(self, env):
        with pytest.raises(MintError, match="mint mode"):
            env.factory.mint(ALICE, FACTORY_ASSET, 1_000_000, ZAPPER, MintMode.EXACT_OUTPUT)

    def test_cannot_mint_deposit_asset(self, env):
        with pytest.raises(MintError, match="deposit asset"):
            env.factory.mint(ALICE, DEPOSIT_ASSET, 1_000_000, ZAPPER, MintMode.EXACT_INPUT)
