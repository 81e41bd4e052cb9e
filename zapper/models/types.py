"""Address, pool id and amount types shared by config, collaborators and the API.

Addresses are compared lowercase everywhere; the pydantic types below
normalize on validation so models never carry mixed-case addresses.
"""

import re
from enum import IntEnum
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field, StringConstraints

UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = "0x" + "00" * 20

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(address: str) -> str:
    """Lowercase with a 0x prefix. Does not validate."""
    address = address.lower()
    return address if address.startswith("0x") else "0x" + address


def is_valid_address(address: object) -> bool:
    """Whether `address` is a 0x-prefixed 20-byte hex string."""
    return isinstance(address, str) and _ADDRESS_RE.match(address) is not None


def same_address(a: str, b: str) -> bool:
    return normalize_address(a) == normalize_address(b)


def validate_uint256(value: Any) -> str:
    """Accept an int or decimal string in [0, 2^256) and return it as a string.

    Raises:
        ValueError: For bools, non-integers, negatives and overflow
    """
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    try:
        number = int(value)
    except ValueError as err:
        raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not 0 <= number <= UINT256_MAX:
        raise ValueError(f"Uint256 out of range: {value}")
    return str(number)


Address = Annotated[
    str,
    StringConstraints(pattern=_ADDRESS_RE.pattern),
    AfterValidator(normalize_address),
]

# 32-byte pool id, lowercased
PoolId = Annotated[
    str,
    StringConstraints(pattern=r"^0x[0-9a-fA-F]{64}$"),
    AfterValidator(str.lower),
]

Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


class MintMode(IntEnum):
    """How the factory interprets a mint amount."""

    # Amount is deposit-asset spent; output is whatever the rate yields
    EXACT_INPUT = 0
    # Amount is the minted output wanted
    EXACT_OUTPUT = 1
