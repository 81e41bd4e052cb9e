"""LP price oracle: bounded observation window, TWAP and keeper."""

from .keeper import OracleKeeper
from .twap import Observation, ObservationWindow, OracleState, PriceOracle, validate_price

__all__ = [
    "Observation",
    "ObservationWindow",
    "OracleKeeper",
    "OracleState",
    "PriceOracle",
    "validate_price",
]
