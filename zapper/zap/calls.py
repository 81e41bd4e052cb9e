"""Collaborator call wrapper.

Collaborator failures are forwarded, never retried. Errors that already
belong to the zap taxonomy (e.g. SlippageExceeded raised by a join) pass
through untouched; anything else becomes ExternalCallFailure with the
original chained.
"""

from collections.abc import Callable
from typing import ParamSpec, TypeVar

import structlog

from zapper.errors import ExternalCallFailure, ZapError

logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def external_call(call: str, fn: Callable[P, R], *args: P.args, **kwargs: P.kwargs) -> R:
    """Invoke a collaborator, translating foreign exceptions.

    Args:
        call: Name used in logs and in the ExternalCallFailure message
        fn: Collaborator method

    Raises:
        ZapError: Re-raised as-is
        ExternalCallFailure: For any other exception
    """
    try:
        return fn(*args, **kwargs)
    except ZapError:
        raise
    except Exception as err:
        logger.warning(
            "external_call_failed",
            call=call,
            error=str(err),
            error_type=type(err).__name__,
        )
        raise ExternalCallFailure(call, str(err) or type(err).__name__) from err
