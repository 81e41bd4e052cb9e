"""End-to-end checks of deposits, estimates and the price oracle.

These run full deployments of the in-memory ledger, pool, PSM and factory
and exercise the zapper the way an integrator would: estimate, deposit
with the margined estimate as min-out, sample prices over time.
"""

from decimal import Decimal

import pytest

from zapper.constants import SCALE
from tests.helpers import ALICE, BOB, OWNER, POOL, POOL_ID, FakeClock, make_environment


@pytest.mark.parametrize("deposit_decimals", [6, 8, 18])
@pytest.mark.parametrize("factory_rate", [SCALE, 98 * SCALE // 100, SCALE // 2])
def test_margined_estimate_is_a_safe_min_out(deposit_decimals, factory_rate):
    env = make_environment(deposit_decimals=deposit_decimals, factory_rate=factory_rate)
    unit = 10**deposit_decimals

    for whole in (1, 250, 10_000):
        amount = whole * unit
        estimate = env.zapper.simulate(ALICE, amount, BOB)
        receipt = env.zapper.deposit(ALICE, amount, BOB, min_out=estimate.margined_estimate)

        assert receipt.lp_out == estimate.estimate
        assert estimate.margined_estimate <= receipt.lp_out


def test_sequence_of_deposits_into_imbalanced_pool():
    """Estimates stay exact as each deposit changes the pool."""
    env = make_environment(fee=Decimal("0.001"))
    # Skew the pool by joining a large single-sided deposit-asset amount
    env.ledger.mint(env.pool.tokens[1], OWNER, 400_000 * 10**6)
    env.pool.join(POOL_ID, OWNER, OWNER, [0, 400_000 * 10**6, 0, 0], 0)

    total_lp = 0
    for amount in (7 * 10**6, 1_234_567_891, 3, 42_000 * 10**6):
        estimate = env.zapper.simulate(ALICE, amount, BOB)
        receipt = env.zapper.deposit(ALICE, amount, BOB)
        assert receipt.lp_out == estimate.estimate
        total_lp += receipt.lp_out

    assert env.ledger.balance_of(POOL, BOB) == total_lp


def test_margined_min_out_survives_intervening_deposit():
    """A near-proportional deposit landing first stays within the margin."""
    env = make_environment()
    estimate = env.zapper.simulate(ALICE, 1_000 * 10**6, BOB)

    # The intervening join keeps the pool composition, so LP per unit barely moves
    env.zapper.deposit(ALICE, 20_000 * 10**6, ALICE)
    receipt = env.zapper.deposit(ALICE, 1_000 * 10**6, BOB, min_out=estimate.margined_estimate)
    assert receipt.lp_out >= estimate.margined_estimate


def test_oracle_sampled_every_five_minutes():
    clock = FakeClock()
    env = make_environment(clock=clock)

    recorded = []
    for _ in range(200):
        observation = env.zapper.record_price(OWNER)
        if observation is not None:
            recorded.append(observation)
        clock.advance(300)

    oracle = env.zapper.oracle
    # Two seed samples, then one every other 300s step
    assert len(recorded) == 101
    assert oracle.observations() == tuple(recorded)
    assert all(
        b.timestamp - a.timestamp >= oracle.min_spacing
        for a, b in zip(oracle.observations()[1:], oracle.observations()[2:], strict=False)
    )

    # A static pool yields a flat price
    prices = {o.price for o in recorded}
    assert len(prices) == 1
    assert env.zapper.consult(10**6) == prices.pop()

    # A one-token deposit lands within 0.1% of the oracle's quote
    quote = env.zapper.consult(10**6)
    receipt = env.zapper.deposit(ALICE, 10**6, BOB)
    assert abs(receipt.lp_out - quote) * 1000 < SCALE
