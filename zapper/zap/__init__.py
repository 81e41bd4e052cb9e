"""Deposit split, execution and estimation.

- ProportionalSplitter: split_deposit / SplitResult
- MintPipeline: the real deposit
- DepositSimulator: the read-only estimate
"""

from .interfaces import (
    Authorization,
    BondMint,
    FactoryMint,
    MintMode,
    PoolInfo,
    PoolJoin,
    TokenCustody,
)
from .pipeline import DepositReceipt, MintPipeline
from .simulator import DepositSimulator, SimulationResult, apply_margin, project_mint
from .splitter import SplitResult, split_deposit, validate_rate

__all__ = [
    # Protocols
    "Authorization",
    "BondMint",
    "FactoryMint",
    "MintMode",
    "PoolInfo",
    "PoolJoin",
    "TokenCustody",
    # Split
    "SplitResult",
    "split_deposit",
    "validate_rate",
    # Execution
    "DepositReceipt",
    "MintPipeline",
    # Estimation
    "DepositSimulator",
    "SimulationResult",
    "apply_margin",
    "project_mint",
]
