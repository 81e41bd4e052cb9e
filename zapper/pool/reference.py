"""In-memory reference environment.

A token ledger, a composable stable pool, a par PSM and a rate-based
factory implementing the zap collaborator protocols. The ledger provides
the all-or-nothing semantics a chain gives a transaction through
`InMemoryLedger.atomic()`.
"""

from __future__ import annotations

import contextlib
import copy
from collections.abc import Iterator, Sequence
from decimal import Decimal

import structlog

from zapper.errors import SlippageExceeded
from zapper.math.fixed_point import AMP_PRECISION, ONE_18, Bfp
from zapper.models.types import MintMode, normalize_address, same_address

from .composition import PoolComposition
from .errors import InsufficientBalance, LedgerError, MintError, UnknownPoolError
from .scaling import downscale_down, scaling_factor, upscale
from .stable_math import calc_bpt_out_given_exact_tokens_in, calculate_invariant

logger = structlog.get_logger()

# Composable stable pools pre-mint BPT into the vault; only the rest circulates
PREMINTED_BPT = 2**111


class InMemoryLedger:
    """Balances of every token, keyed by (token, holder)."""

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = {}
        self._decimals: dict[str, int] = {}

    def register(self, token: str, decimals: int) -> None:
        scaling_factor(decimals)
        self._decimals[normalize_address(token)] = decimals

    def decimals(self, token: str) -> int:
        try:
            return self._decimals[normalize_address(token)]
        except KeyError as err:
            raise LedgerError(f"Unknown token {token}") from err

    def scaling_factor(self, token: str) -> int:
        return scaling_factor(self.decimals(token))

    def balance_of(self, token: str, holder: str) -> int:
        return self._balances.get((normalize_address(token), normalize_address(holder)), 0)

    def mint(self, token: str, to: str, amount: int) -> None:
        self.decimals(token)
        if amount < 0:
            raise LedgerError(f"Cannot mint negative amount {amount}")
        key = (normalize_address(token), normalize_address(to))
        self._balances[key] = self._balances.get(key, 0) + amount

    def burn(self, token: str, holder: str, amount: int) -> None:
        key = (normalize_address(token), normalize_address(holder))
        balance = self._balances.get(key, 0)
        if amount > balance:
            raise InsufficientBalance(f"{holder} holds {balance} of {token}, cannot burn {amount}")
        self._balances[key] = balance - amount

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise LedgerError(f"Cannot transfer negative amount {amount}")
        self.burn(token, sender, amount)
        self.mint(token, recipient, amount)

    def pull(self, asset: str, owner: str, recipient: str, amount: int) -> None:
        """TokenCustody: move a pre-authorized deposit into `recipient`."""
        self.transfer(asset, owner, recipient, amount)

    @contextlib.contextmanager
    def atomic(self) -> Iterator[None]:
        """Roll every balance back if the block raises."""
        snapshot = copy.copy(self._balances)
        try:
            yield
        except BaseException:
            self._balances = snapshot
            logger.debug("ledger_rolled_back", entries=len(snapshot))
            raise


class ReferenceStablePool:
    """Composable stable pool holding its tokens directly in the ledger.

    Attributes:
        pool_id: 32-byte pool id
        address: Pool address, which is also the BPT token address
        tokens: Token addresses in pool order, BPT at `share_index`
        amplification_parameter: Raw A (e.g. 200); scaled by AMP_PRECISION internally
        fee: Swap fee charged on the non-proportional part of a join
    """

    def __init__(
        self,
        ledger: InMemoryLedger,
        pool_id: str,
        address: str,
        tokens: Sequence[str],
        amplification_parameter: int,
        fee: Decimal,
        share_index: int = 0,
    ) -> None:
        self.ledger = ledger
        self.pool_id = pool_id.lower()
        self.address = normalize_address(address)
        tokens = [normalize_address(t) for t in tokens]
        tokens.insert(share_index, self.address)
        self.tokens = tuple(tokens)
        self.share_index = share_index
        self.amp = amplification_parameter * AMP_PRECISION
        self.fee = Bfp.from_decimal(fee)
        self.bpt_supply = 0
        ledger.register(self.address, 18)

    def _check_pool(self, pool_id: str) -> None:
        if pool_id.lower() != self.pool_id:
            raise UnknownPoolError(f"Unknown pool {pool_id}")

    def _scaled_balances(self) -> list[Bfp]:
        composition = self.get_composition(self.pool_id)
        normalized = composition.normalized_balances()
        return [Bfp(normalized[i]) for i in composition.non_share_indices]

    def get_composition(self, pool_id: str) -> PoolComposition:
        self._check_pool(pool_id)
        balances = []
        for i, token in enumerate(self.tokens):
            if i == self.share_index:
                balances.append(PREMINTED_BPT - self.bpt_supply)
            else:
                balances.append(self.ledger.balance_of(token, self.address))
        return PoolComposition(
            assets=self.tokens,
            balances=tuple(balances),
            scaling_factors=tuple(self.ledger.scaling_factor(t) for t in self.tokens),
            share_index=self.share_index,
        )

    def initialize(self, provider: str, amounts: Sequence[int]) -> int:
        """Seed the pool; the first depositor receives BPT equal to the invariant.

        Args:
            provider: Holder funding the seed
            amounts: Raw amounts for the non-share tokens, in pool order
        """
        if self.bpt_supply != 0:
            raise LedgerError("Pool already initialized")
        tokens = [t for i, t in enumerate(self.tokens) if i != self.share_index]
        for token, amount in zip(tokens, amounts, strict=True):
            self.ledger.transfer(token, provider, self.address, amount)
        invariant = calculate_invariant(self.amp, self._scaled_balances())
        self.bpt_supply = invariant.value
        self.ledger.mint(self.address, provider, invariant.value)
        return invariant.value

    def _bpt_out(self, amounts: Sequence[int]) -> tuple[int, list[int]]:
        composition = self.get_composition(self.pool_id)
        if len(amounts) != len(composition.assets):
            raise ValueError(f"Expected {len(composition.assets)} amounts, got {len(amounts)}")
        if amounts[self.share_index] != 0:
            raise ValueError("BPT cannot be joined with")

        indices = composition.non_share_indices
        balances = self._scaled_balances()
        scaled_in = [Bfp(upscale(amounts[i], composition.scaling_factors[i])) for i in indices]
        invariant = calculate_invariant(self.amp, balances)
        bpt_out = calc_bpt_out_given_exact_tokens_in(
            self.amp, balances, scaled_in, self.bpt_supply, invariant, self.fee
        )
        return bpt_out, list(amounts)

    def query_join(
        self,
        pool_id: str,
        sender: str,
        recipient: str,
        amounts: Sequence[int],
    ) -> tuple[int, list[int]]:
        self._check_pool(pool_id)
        return self._bpt_out(amounts)

    def join(
        self,
        pool_id: str,
        payer: str,
        recipient: str,
        amounts: Sequence[int],
        min_out: int,
    ) -> int:
        self._check_pool(pool_id)
        bpt_out, required = self._bpt_out(amounts)
        if bpt_out < min_out:
            raise SlippageExceeded(f"Join yields {bpt_out} BPT, below minimum {min_out}")

        for token, amount in zip(self.tokens, required, strict=True):
            if amount:
                self.ledger.transfer(token, payer, self.address, amount)
        self.bpt_supply += bpt_out
        self.ledger.mint(self.address, recipient, bpt_out)

        logger.debug("pool_joined", pool_id=self.pool_id, payer=payer, bpt_out=bpt_out)
        return bpt_out


class ReferencePsm:
    """Bond proxy minting `asset` 1:1 (after decimal conversion) from the deposit asset."""

    def __init__(
        self, ledger: InMemoryLedger, address: str, deposit_asset: str, asset: str
    ) -> None:
        self.ledger = ledger
        self.address = normalize_address(address)
        self.deposit_asset = normalize_address(deposit_asset)
        self.asset = normalize_address(asset)

    def deposit(self, sender: str, amount: int, recipient: str) -> int:
        if amount <= 0:
            raise MintError(f"PSM deposit amount must be positive, got {amount}")
        self.ledger.transfer(self.deposit_asset, sender, self.address, amount)
        normalized = upscale(amount, self.ledger.scaling_factor(self.deposit_asset))
        minted = downscale_down(normalized, self.ledger.scaling_factor(self.asset))
        self.ledger.mint(self.asset, recipient, minted)
        return minted


class ReferenceFactory:
    """Mints registered assets from the deposit asset at a per-asset rate."""

    def __init__(self, ledger: InMemoryLedger, address: str, deposit_asset: str) -> None:
        self.ledger = ledger
        self.address = normalize_address(address)
        self.deposit_asset = normalize_address(deposit_asset)
        self._rates: dict[str, int] = {}

    def set_rate(self, asset: str, rate: int) -> None:
        self._rates[normalize_address(asset)] = rate

    def mint_rate(self, asset: str) -> int:
        try:
            return self._rates[normalize_address(asset)]
        except KeyError as err:
            raise MintError(f"Factory cannot mint {asset}") from err

    def mint(self, sender: str, asset: str, amount: int, recipient: str, mode: MintMode) -> int:
        if mode != MintMode.EXACT_INPUT:
            raise MintError(f"Unsupported mint mode {mode!r}")
        if amount <= 0:
            raise MintError(f"Factory mint amount must be positive, got {amount}")
        if same_address(asset, self.deposit_asset):
            raise MintError("Factory cannot mint the deposit asset")

        rate = self.mint_rate(asset)
        self.ledger.transfer(self.deposit_asset, sender, self.address, amount)
        normalized = upscale(amount, self.ledger.scaling_factor(self.deposit_asset))
        minted = downscale_down(normalized * rate // ONE_18, self.ledger.scaling_factor(asset))
        self.ledger.mint(asset, recipient, minted)
        return minted
