"""
Input validation utilities for the Stellar XLM Blink service.

Provides reusable validators for Stellar account IDs and memo text.
"""
from fastapi import Path
from stellar_sdk import StrKey

from domain.constants import ACCOUNT_ID_LENGTH, ACCOUNT_ID_PREFIX, MEMO_TEXT_MAX_BYTES
from domain.errors import InvalidAddressError, InvalidInputError


def is_valid_stellar_address(address: object) -> bool:
    """
    Check that a value is a well-formed Stellar account ID.

    Shape check (56 chars, leading 'G') followed by a strkey decode, which
    verifies the version byte and the CRC16 checksum. Existence on the
    ledger is not checked. Never raises.
    """
    if not isinstance(address, str):
        return False

    if len(address) != ACCOUNT_ID_LENGTH or not address.startswith(ACCOUNT_ID_PREFIX):
        return False

    return StrKey.is_valid_ed25519_public_key(address)


def validate_stellar_address(address: object, field: str) -> str:
    """
    Validate a Stellar account ID.

    Args:
        address: Candidate account ID
        field: Which account this is ('source' or 'destination'), reported back to the caller

    Returns:
        The validated address (unchanged)

    Raises:
        InvalidAddressError if the address is invalid
    """
    if not is_valid_stellar_address(address):
        raise InvalidAddressError(field, address)
    return address


def validate_memo(memo: str | None) -> str | None:
    """Return the memo text to attach, or None when there is none."""
    if not memo:
        return None
    if len(memo.encode("utf-8")) > MEMO_TEXT_MAX_BYTES:
        raise InvalidInputError(
            f"Memo must be at most {MEMO_TEXT_MAX_BYTES} bytes",
            field="memo",
        )
    return memo


def validated_account(account_id: str = Path(..., description="Stellar account ID")) -> str:
    """FastAPI dependency for validating account path parameters."""
    return validate_stellar_address(account_id, "account")
