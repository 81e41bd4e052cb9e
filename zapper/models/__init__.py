"""Typed models shared by configuration, collaborators and the API."""

from zapper.models.types import (
    UINT256_MAX,
    ZERO_ADDRESS,
    Address,
    MintMode,
    PoolId,
    Uint256,
    is_valid_address,
    normalize_address,
    same_address,
)

__all__ = [
    "Address",
    "PoolId",
    "Uint256",
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "MintMode",
    "is_valid_address",
    "normalize_address",
    "same_address",
]
