"""
Hex String and Field Formatting Utilities

This module converts field elements to and from the hex and decimal strings
used in JSON files, proof documents and console output.
"""

from typing import Optional, Union

from ..constants import FIELD_BYTES
from ..errors import InvalidFieldElementError
from ..field import from_bytes, to_bytes, to_field


def normalize_hex(hex_str: str, expected_bytes: Optional[int] = None) -> str:
    """
    Normalize a hex string to ensure proper formatting.

    Args:
        hex_str: The hex string to normalize (should start with '0x')
        expected_bytes: Optional expected byte length for validation

    Returns:
        Normalized lowercase hex string padded to an even length

    Raises:
        ValueError: If the hex string contains invalid characters or has the
            wrong length

    Examples:
        >>> normalize_hex("0x123")
        "0x0123"
        >>> normalize_hex("0xABCD")
        "0xabcd"
    """
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        raise ValueError(f"Hex string must start with '0x': {hex_str!r}")

    hex_part = hex_str[2:]

    # Validate hex characters
    if not hex_part or not all(c in "0123456789abcdefABCDEF" for c in hex_part):
        raise ValueError(f"Invalid hex string: {hex_str}")

    # Pad to even length
    if len(hex_part) % 2 == 1:
        hex_part = "0" + hex_part

    normalized = "0x" + hex_part.lower()

    if expected_bytes is not None:
        actual_bytes = len(hex_part) // 2
        if actual_bytes != expected_bytes:
            raise ValueError(f"Expected {expected_bytes} bytes, got {actual_bytes} bytes")

    return normalized


def field_to_hex(value: int) -> str:
    """
    Encode a field element as a 0x-prefixed 32-byte hex string.

    Examples:
        >>> field_to_hex(255)
        "0x00000000000000000000000000000000000000000000000000000000000000ff"
    """
    return "0x" + to_bytes(value).hex()


def hex_to_field(hex_str: str) -> int:
    """
    Decode a 0x-prefixed hex string (up to 32 bytes) into a field element.

    Raises:
        InvalidFieldElementError: If the string is not valid hex or the value
            is not below the field modulus
    """
    try:
        normalized = normalize_hex(hex_str)
    except ValueError as e:
        raise InvalidFieldElementError(hex_str, str(e)) from e
    data = bytes.fromhex(normalized[2:])
    if len(data) > FIELD_BYTES:
        raise InvalidFieldElementError(hex_str, f"more than {FIELD_BYTES} bytes")
    return from_bytes(data.rjust(FIELD_BYTES, b"\x00"))


def parse_field(value: Union[int, str]) -> int:
    """
    Parse an int, a decimal string or a 0x hex string into a field element.

    Integers and decimal strings are reduced modulo the field prime; hex
    strings must already be in range.

    Examples:
        >>> parse_field("0x10")
        16
        >>> parse_field("42")
        42
    """
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            return hex_to_field("0x" + text[2:])
        try:
            return to_field(int(text, 10))
        except ValueError:
            raise InvalidFieldElementError(value, "not a decimal or 0x hex string") from None
    return to_field(value)


def short_value(value: int, keep: int = 5) -> str:
    """
    Shorten the decimal form of a field element for display.

    Examples:
        >>> short_value(1234567890123)
        "12345..90123"
        >>> short_value(100)
        "100"
    """
    text = str(value)
    if len(text) > 2 * keep:
        return f"{text[:keep]}..{text[-keep:]}"
    return text
