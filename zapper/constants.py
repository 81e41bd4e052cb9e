"""Protocol constants for the zapper.

Centralizes fixed-point scale, oracle bounds and default policy values.
"""

from zapper.math.fixed_point import ONE_18

# Fixed-point scale for rates, prices and normalized amounts
SCALE = ONE_18

# Par rate: the deposit asset itself and PSM-minted assets
PAR_RATE = SCALE

# Oracle prices must fit in 224 bits
MAX_PRICE = 2**224

# Simulator haircut in SCALE units: 1e14 = 0.01%
DEFAULT_SIMULATION_MARGIN = 10**14

# Slippage callers are advised to take on top of the simulator estimate: 0.5%
RECOMMENDED_CALLER_SLIPPAGE = 5 * 10**15

# TWAP defaults: one day, sampled every ten minutes
DEFAULT_TWAP_PERIOD = 86_400
DEFAULT_TWAP_GRANULARITY = 144

# Number of non-share assets the split is defined for
POOL_ASSET_COUNT = 3
