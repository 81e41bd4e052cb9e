"""Input checks shared by the deposit and simulate paths."""

from zapper.errors import InvalidAmount, InvalidRecipient
from zapper.models.types import ZERO_ADDRESS, is_valid_address, normalize_address


def validate_deposit(amount: int, recipient: str, zapper_address: str, pool_address: str) -> str:
    """Check a deposit request and return the normalized recipient.

    Raises:
        InvalidAmount: If amount is not positive
        InvalidRecipient: If recipient is malformed, the zero address,
            the zapper itself, or the pool
    """
    if amount <= 0:
        raise InvalidAmount(f"Deposit amount must be positive, got {amount}")

    if not is_valid_address(recipient):
        raise InvalidRecipient(f"Recipient is not an address: {recipient!r}")
    normalized = normalize_address(recipient)
    if normalized == ZERO_ADDRESS:
        raise InvalidRecipient("Recipient cannot be the zero address")
    if normalized == normalize_address(zapper_address):
        raise InvalidRecipient("Recipient cannot be the zapper")
    if normalized == normalize_address(pool_address):
        raise InvalidRecipient("Recipient cannot be the pool")
    return normalized
