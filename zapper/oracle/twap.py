"""Time-weighted average LP price oracle.

Samples are LP-out per unit deposited (SCALE fixed point), pushed by a
single keeper. The window holds at most `granularity` samples spaced at
least `period // granularity` seconds apart, so a full window spans about
one `period`.

States:
    EMPTY   - no samples
    SEEDING - one sample; consult is not possible yet
    READY   - two or more samples
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from zapper.constants import MAX_PRICE, SCALE
from zapper.errors import InsufficientObservations, InvalidPrice, NoElapsedWindow, TooSoon
from zapper.math.fixed_point import mul_div_down
from zapper.pool.scaling import upscale

logger = structlog.get_logger()


class OracleState(str, Enum):
    EMPTY = "empty"
    SEEDING = "seeding"
    READY = "ready"


@dataclass(frozen=True)
class Observation:
    """A price sample.

    Attributes:
        timestamp: Unix seconds
        price: LP out per deposited unit, SCALE fixed point, in (0, 2^224)
    """

    timestamp: int
    price: int


def validate_price(price: int) -> int:
    """Raises InvalidPrice unless 0 < price < 2^224."""
    if price <= 0 or price >= MAX_PRICE:
        raise InvalidPrice(f"Price must be in (0, 2^224), got {price}")
    return price


class ObservationWindow:
    """Capacity-bounded, time-ordered sample buffer.

    Appending beyond capacity evicts the oldest sample. Samples are never
    modified in place.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 2:
            raise ValueError(f"Window capacity must be at least 2, got {capacity}")
        self.capacity = capacity
        self._samples: deque[Observation] = deque()

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def latest(self) -> Observation | None:
        return self._samples[-1] if self._samples else None

    def append(self, observation: Observation) -> Observation | None:
        """Append a sample; return the evicted one, if any."""
        latest = self.latest
        if latest is not None and observation.timestamp < latest.timestamp:
            raise ValueError(
                f"Observation at {observation.timestamp} precedes latest at {latest.timestamp}"
            )
        self._samples.append(observation)
        if len(self._samples) > self.capacity:
            return self._samples.popleft()
        return None

    def snapshot(self) -> tuple[Observation, ...]:
        """Immutable copy, oldest first."""
        return tuple(self._samples)


class PriceOracle:
    """TWAP over a bounded observation window.

    Args:
        period: Look-back in seconds (> 0)
        granularity: Window capacity (> 1)
        deposit_scaling_factor: Lifts deposit-asset amounts to 18 decimals
            for `consult`
        clock: Returns the current unix time; defaults to time.time
    """

    def __init__(
        self,
        period: int,
        granularity: int,
        deposit_scaling_factor: int = 1,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        if granularity <= 1:
            raise ValueError(f"granularity must be greater than 1, got {granularity}")
        self.period = period
        self.granularity = granularity
        self.deposit_scaling_factor = deposit_scaling_factor
        self._clock = clock or time.time
        self._window = ObservationWindow(granularity)

    @property
    def min_spacing(self) -> int:
        """Seconds required between samples once two are recorded."""
        return self.period // self.granularity

    @property
    def state(self) -> OracleState:
        n = len(self._window)
        if n == 0:
            return OracleState.EMPTY
        if n == 1:
            return OracleState.SEEDING
        return OracleState.READY

    @property
    def latest(self) -> Observation | None:
        return self._window.latest

    def observations(self) -> tuple[Observation, ...]:
        return self._window.snapshot()

    def _now(self) -> int:
        return int(self._clock())

    def _check_spacing(self, timestamp: int) -> None:
        latest = self._window.latest
        if latest is None:
            return
        if timestamp < latest.timestamp:
            raise TooSoon(f"Timestamp {timestamp} precedes latest sample at {latest.timestamp}")
        # The first two samples seed the window regardless of spacing
        if len(self._window) >= 2 and timestamp - latest.timestamp < self.min_spacing:
            raise TooSoon(
                f"Only {timestamp - latest.timestamp}s since last sample, "
                f"need {self.min_spacing}s"
            )

    def can_record(self, timestamp: int | None = None) -> bool:
        """Whether a sample at `timestamp` (default: now) would be accepted."""
        try:
            self._check_spacing(self._now() if timestamp is None else timestamp)
        except TooSoon:
            return False
        return True

    def record_observation(self, price: int, timestamp: int | None = None) -> Observation:
        """Append a sample.

        Args:
            price: LP out per deposited unit, SCALE fixed point
            timestamp: Sample time; defaults to the clock

        Raises:
            InvalidPrice: If price is 0 or >= 2^224
            TooSoon: If the minimum spacing has not elapsed
        """
        validate_price(price)
        timestamp = self._now() if timestamp is None else timestamp
        self._check_spacing(timestamp)

        observation = Observation(timestamp=timestamp, price=price)
        evicted = self._window.append(observation)

        logger.info(
            "observation_recorded",
            timestamp=timestamp,
            price=price,
            samples=len(self._window),
            evicted=evicted.timestamp if evicted else None,
        )
        return observation

    def twap(self) -> int:
        """Time-weighted average price over the trailing period.

        Walks consecutive pairs newest to oldest, weighting each pair's newer
        price by the seconds between the two samples. The walk stops after
        the first pair that reaches back past `newest - period`.

        Raises:
            InsufficientObservations: If fewer than two samples exist
            NoElapsedWindow: If the samples span zero seconds
        """
        samples = self._window.snapshot()
        if len(samples) < 2:
            raise InsufficientObservations(f"Need 2 observations, have {len(samples)}")

        window_start = samples[-1].timestamp - self.period
        weighted = 0
        elapsed = 0
        for i in range(len(samples) - 1, 0, -1):
            newer, older = samples[i], samples[i - 1]
            dt = newer.timestamp - older.timestamp
            weighted += newer.price * dt
            elapsed += dt
            if older.timestamp < window_start:
                break

        if elapsed == 0:
            raise NoElapsedWindow("Observations span no time")
        return weighted // elapsed

    def consult(self, amount: int) -> int:
        """LP expected for `amount` of deposit asset at the TWAP price.

        Args:
            amount: Deposit in native decimals

        Returns:
            twap * normalized(amount) // SCALE

        Raises:
            InsufficientObservations: If fewer than two samples exist
            NoElapsedWindow: If the samples span zero seconds
        """
        return mul_div_down(self.twap(), upscale(amount, self.deposit_scaling_factor), SCALE)
