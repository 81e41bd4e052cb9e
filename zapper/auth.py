"""Authorization predicates gating zapper entry points."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from zapper.errors import Unauthorized
from zapper.models.types import normalize_address
from zapper.zap.interfaces import Authorization

logger = structlog.get_logger()


class AllowListAuthorization:
    """Owner-managed allow-list.

    The owner is always authorized and is the only account that can change
    the list.
    """

    def __init__(self, owner: str, allowed: Iterable[str] = ()) -> None:
        self.owner = normalize_address(owner)
        self._allowed = {normalize_address(a) for a in allowed}

    def is_authorized(self, caller: str) -> bool:
        caller = normalize_address(caller)
        return caller == self.owner or caller in self._allowed

    def _require_owner(self, caller: str) -> None:
        if normalize_address(caller) != self.owner:
            raise Unauthorized(f"{caller} is not the allow-list owner")

    def add(self, caller: str, account: str) -> None:
        self._require_owner(caller)
        self._allowed.add(normalize_address(account))
        logger.info("allow_list_added", account=account)

    def remove(self, caller: str, account: str) -> None:
        self._require_owner(caller)
        self._allowed.discard(normalize_address(account))
        logger.info("allow_list_removed", account=account)


def require_authorized(authorization: Authorization, caller: str, action: str) -> None:
    """Raise Unauthorized unless `authorization.is_authorized(caller)`."""
    if not authorization.is_authorized(caller):
        logger.warning("unauthorized_call", caller=caller, action=action)
        raise Unauthorized(f"{caller} is not authorized to {action}")
