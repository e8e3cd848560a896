"""
Input Validation - Sanitization of values crossing the call boundary.

Provides validation for all external inputs to prevent:
- Malformed account identities
- Negative or overflowing amounts
- Oversized proposal strings
"""

import re
from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_ADDRESS_SIZE = 20
MAX_PROPOSAL_LENGTH = 1024

# Native balances are 128-bit unsigned
MIN_AMOUNT = 0
MAX_AMOUNT = 2**128 - 1

HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate an account address."""
    return validate_bytes(address, name, expected_length=MAX_ADDRESS_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a native-asset amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_string(
    value: Any,
    name: str,
    max_length: int = MAX_PROPOSAL_LENGTH,
    pattern: Optional[str] = None,
) -> Tuple[bool, str]:
    """
    Validate string input.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length
        pattern: Optional regex pattern

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    if pattern and not re.match(pattern, value):
        return False, f"{name} does not match required pattern"

    return True, ""


def validate_proposal(
    proposal: Any,
    max_length: int = MAX_PROPOSAL_LENGTH,
) -> Tuple[bool, str]:
    """Validate a proposal (opaque document reference)."""
    is_valid, err = validate_string(proposal, "proposal", max_length=max_length)
    if not is_valid:
        return is_valid, err

    # Lone surrogates (e.g. from undecodable argv) cannot be stored
    try:
        proposal.encode("utf-8")
    except UnicodeEncodeError:
        return False, "proposal is not valid UTF-8"

    return True, ""


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).

    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value.startswith(("0x", "0X")) else value

    # bytes.fromhex skips whitespace; require bare hex digits
    if not HEX_PATTERN.fullmatch(hex_str):
        return False, f"{name} contains invalid hex characters"

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_integer",
    "validate_amount",
    "validate_string",
    "validate_proposal",
    "validate_hex_string",
    "MAX_ADDRESS_SIZE",
    "MAX_PROPOSAL_LENGTH",
    "MAX_AMOUNT",
]
