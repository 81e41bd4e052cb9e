"""Oracle keeper.

Feeds the TWAP oracle from the deposit simulator: each poke simulates a
probe deposit and records the margined LP estimate per deposited unit.
"""

from __future__ import annotations

import structlog

from zapper.constants import SCALE
from zapper.pool.scaling import upscale
from zapper.zap.simulator import DepositSimulator

from .twap import Observation, PriceOracle

logger = structlog.get_logger()


class OracleKeeper:
    """Samples LP prices into a PriceOracle.

    Args:
        simulator: Source of LP estimates
        oracle: Oracle receiving samples
        probe_amount: Simulated deposit size, deposit-asset native units
        probe_recipient: Recipient passed to the simulator
    """

    def __init__(
        self,
        simulator: DepositSimulator,
        oracle: PriceOracle,
        probe_amount: int,
        probe_recipient: str,
    ) -> None:
        if probe_amount <= 0:
            raise ValueError(f"probe_amount must be positive, got {probe_amount}")
        self.simulator = simulator
        self.oracle = oracle
        self.probe_amount = probe_amount
        self.probe_recipient = probe_recipient

    def sample_price(self) -> int:
        """Margined LP out per deposited unit, SCALE fixed point."""
        result = self.simulator.simulate(self.probe_amount, self.probe_recipient)
        normalized = upscale(self.probe_amount, self.oracle.deposit_scaling_factor)
        return result.margined_estimate * SCALE // normalized

    def poke(self, now: int | None = None) -> Observation | None:
        """Record a fresh sample if the oracle accepts one at `now`.

        Returns:
            The recorded observation, or None when it is too soon

        Raises:
            ZapError: Simulator or oracle failures other than spacing
        """
        if not self.oracle.can_record(now):
            logger.debug("keeper_poke_skipped", now=now, latest=self.oracle.latest)
            return None
        return self.oracle.record_observation(self.sample_price(), now)
