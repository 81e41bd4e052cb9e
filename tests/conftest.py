"""Pytest configuration and fixtures."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from zapper.local import LocalEnvironment
from zapper.models.types import MintMode
from tests.helpers import FakeClock, make_environment

# =============================================================================
# Environments
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def env(clock: FakeClock) -> LocalEnvironment:
    """Balanced 1M/1M/1M pool, 6-decimal deposit asset, factory rate 0.98."""
    return make_environment(clock=clock)


# =============================================================================
# Mock classes for dependency injection
# =============================================================================


@dataclass
class RecordingCollaborator:
    """Records calls and fails on demand.

    Attributes:
        fail_with: Exception raised by every call when set
        calls: (method, args) tuples in call order
    """

    fail_with: Exception | None = None
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    def _record(self, method: str, *args: object) -> None:
        self.calls.append((method, args))
        if self.fail_with is not None:
            raise self.fail_with


class FailingFactory(RecordingCollaborator):
    """Factory that reports a rate but fails to mint."""

    def __init__(self, rate: int, fail_with: Exception) -> None:
        super().__init__(fail_with=None)
        self.rate = rate
        self.mint_error = fail_with

    def mint_rate(self, asset: str) -> int:
        return self.rate

    def mint(self, sender: str, asset: str, amount: int, recipient: str, mode: MintMode) -> int:
        self.calls.append(("mint", (sender, asset, amount, recipient, mode)))
        raise self.mint_error


class FailingJoin(RecordingCollaborator):
    """Pool join that always fails."""

    def join(
        self,
        pool_id: str,
        payer: str,
        recipient: str,
        amounts: Sequence[int],
        min_out: int,
    ) -> int:
        self._record("join", pool_id, payer, recipient, tuple(amounts), min_out)
        return 0

    def query_join(
        self,
        pool_id: str,
        sender: str,
        recipient: str,
        amounts: Sequence[int],
    ) -> tuple[int, list[int]]:
        self._record("query_join", pool_id, sender, recipient, tuple(amounts))
        return 0, list(amounts)
