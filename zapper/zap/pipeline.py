"""Deposit execution path.

Turns a single-asset deposit into a three-asset pool join:

    1. validate amount and recipient
    2. pull the deposit into the zapper
    3. read the pool and the factory rate, split the deposit
    4. mint the PSM leg (minted amount returned by the PSM is authoritative)
    5. mint the factory leg (likewise)
    6. take the zapper's whole remaining deposit-asset balance as the last leg
    7. join with exact amounts; LP goes straight to the recipient

Step 6 is what keeps the zapper free of dust: whatever the mints did not
consume is joined, so nothing is left to refund.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass

import structlog

from zapper.config import ZapConfig
from zapper.errors import InvalidAmount

from .calls import external_call
from .interfaces import BondMint, FactoryMint, PoolInfo, PoolJoin, TokenCustody
from .splitter import split_deposit
from .validation import validate_deposit

logger = structlog.get_logger()


@dataclass(frozen=True)
class DepositReceipt:
    """Outcome of a completed deposit.

    Attributes:
        amount: Deposit pulled from the caller (native units)
        recipient: LP recipient
        psm_spent: Deposit-asset units sent to the PSM
        factory_spent: Deposit-asset units sent to the factory
        psm_minted: PSM asset received
        factory_minted: Factory asset received
        join_amounts: Exact amounts joined, aligned with the pool composition
        lp_out: LP delivered to the recipient
    """

    amount: int
    recipient: str
    psm_spent: int
    factory_spent: int
    psm_minted: int
    factory_minted: int
    join_amounts: tuple[int, ...]
    lp_out: int


class MintPipeline:
    """Executes deposits against live collaborators.

    Args:
        config: Zapper configuration
        custody: Token custody (pull + balances)
        pool: Pool composition source
        bond_mint: PSM / bond proxy
        factory: Factory minter
        pool_join: Pool join entry point
        transaction: Factory for the context that makes one deposit atomic.
            On chain this is the transaction itself; defaults to no-op.
    """

    def __init__(
        self,
        config: ZapConfig,
        custody: TokenCustody,
        pool: PoolInfo,
        bond_mint: BondMint,
        factory: FactoryMint,
        pool_join: PoolJoin,
        transaction: Callable[[], AbstractContextManager[object]] | None = None,
    ) -> None:
        self.config = config
        self.custody = custody
        self.pool = pool
        self.bond_mint = bond_mint
        self.factory = factory
        self.pool_join = pool_join
        self._transaction = transaction or contextlib.nullcontext

    def deposit(self, caller: str, amount: int, recipient: str, min_out: int = 0) -> DepositReceipt:
        """Deposit `amount` of the deposit asset from `caller` and join the pool.

        Args:
            caller: Holder of the deposit; must have pre-authorized the pull
            amount: Deposit in native units
            recipient: LP recipient
            min_out: Minimum LP accepted from the join

        Returns:
            DepositReceipt describing every leg

        Raises:
            InvalidAmount: If amount <= 0 or min_out < 0
            InvalidRecipient: If the recipient is rejected
            SlippageExceeded: If the join yields less than min_out
            ExternalCallFailure: If any collaborator call fails
        """
        cfg = self.config
        recipient = validate_deposit(amount, recipient, cfg.zapper_address, cfg.pool_address)
        if min_out < 0:
            raise InvalidAmount(f"min_out cannot be negative, got {min_out}")

        with self._transaction():
            external_call(
                "custody.pull",
                self.custody.pull,
                cfg.deposit_asset,
                caller,
                cfg.zapper_address,
                amount,
            )

            composition = external_call(
                "pool.get_composition", self.pool.get_composition, cfg.pool_id
            )
            rate = external_call("factory.mint_rate", self.factory.mint_rate, cfg.factory_asset)
            split = split_deposit(
                composition,
                cfg.deposit_asset,
                cfg.psm_asset,
                cfg.factory_asset,
                rate,
                amount,
            )

            # A leg that rounds to zero is not minted at all
            psm_minted = 0
            if split.psm_amount > 0:
                psm_minted = external_call(
                    "bond_proxy.deposit",
                    self.bond_mint.deposit,
                    cfg.zapper_address,
                    split.psm_amount,
                    cfg.zapper_address,
                )

            factory_minted = 0
            if split.factory_amount > 0:
                factory_minted = external_call(
                    "factory.mint",
                    self.factory.mint,
                    cfg.zapper_address,
                    cfg.factory_asset,
                    split.factory_amount,
                    cfg.zapper_address,
                    cfg.mint_mode,
                )

            remaining = external_call(
                "custody.balance_of",
                self.custody.balance_of,
                cfg.deposit_asset,
                cfg.zapper_address,
            )

            join_amounts = [0] * len(composition.assets)
            join_amounts[split.deposit_index] = remaining
            join_amounts[split.psm_index] = psm_minted
            join_amounts[split.factory_index] = factory_minted

            lp_out = external_call(
                "pool.join",
                self.pool_join.join,
                cfg.pool_id,
                cfg.zapper_address,
                recipient,
                join_amounts,
                min_out,
            )

        logger.info(
            "deposit_completed",
            caller=caller,
            recipient=recipient,
            amount=amount,
            psm_minted=psm_minted,
            factory_minted=factory_minted,
            deposit_leg=remaining,
            lp_out=lp_out,
        )

        return DepositReceipt(
            amount=amount,
            recipient=recipient,
            psm_spent=split.psm_amount,
            factory_spent=split.factory_amount,
            psm_minted=psm_minted,
            factory_minted=factory_minted,
            join_amounts=tuple(join_amounts),
            lp_out=lp_out,
        )
