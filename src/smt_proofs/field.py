"""
Field Element Helpers

Field elements are plain Python integers in the range [0, FIELD_MODULUS).
This module provides construction, validation and the little-endian bit
decomposition used to turn a path into a root-to-leaf route.
"""

from typing import Iterable, List

from .constants import FIELD_BITS, FIELD_BYTES, FIELD_MODULUS, ZERO
from .errors import InvalidFieldElementError


def is_field_element(value) -> bool:
    """Return True if `value` is an int already reduced into the field."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < FIELD_MODULUS


def to_field(value: int) -> int:
    """
    Build a field element from an arbitrary-precision integer.

    Args:
        value: Any Python integer; it is reduced modulo the field prime

    Returns:
        The canonical representative in [0, FIELD_MODULUS)

    Raises:
        InvalidFieldElementError: If value is not an integer

    Examples:
        >>> to_field(5)
        5
        >>> to_field(-1) == FIELD_MODULUS - 1
        True
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidFieldElementError(value, f"expected int, got {type(value).__name__}")
    return value % FIELD_MODULUS


def is_zero(value: int) -> bool:
    return value == ZERO


def to_bits_le(value: int, length: int = FIELD_BITS) -> List[bool]:
    """
    Decompose a field element into `length` little-endian bits.

    Bit 0 is the least significant bit. Bits above `length` are dropped, so
    callers that care about truncation must check `value >> length` first.

    Examples:
        >>> to_bits_le(3, 3)
        [True, True, False]
    """
    if not is_field_element(value):
        raise InvalidFieldElementError(value)
    if length < 0 or length > FIELD_BITS:
        raise ValueError(f"Bit length must be between 0 and {FIELD_BITS}, got {length}")
    return [bool((value >> i) & 1) for i in range(length)]


def from_bits_le(bits: Iterable) -> int:
    """
    Compose little-endian bits into a field element.

    Args:
        bits: Sequence of bools (or 0/1 ints), least significant first

    Returns:
        The composed field element

    Raises:
        InvalidFieldElementError: If more than FIELD_BITS bits are given, a bit
            is not 0/1, or the result is not below the modulus

    Examples:
        >>> from_bits_le([True, False, True])
        5
    """
    result = 0
    count = 0
    for position, bit in enumerate(bits):
        if bit not in (0, 1):
            raise InvalidFieldElementError(bit, f"bit {position} is not 0 or 1")
        if bit:
            result |= 1 << position
        count += 1
    if count > FIELD_BITS:
        raise InvalidFieldElementError(result, f"{count} bits exceed the field width of {FIELD_BITS}")
    if result >= FIELD_MODULUS:
        raise InvalidFieldElementError(result, "value is not below the field modulus")
    return result


def to_bytes(value: int) -> bytes:
    """Encode a field element as 32 big-endian bytes."""
    if not is_field_element(value):
        raise InvalidFieldElementError(value)
    return value.to_bytes(FIELD_BYTES, "big")


def from_bytes(data: bytes) -> int:
    """Decode 32 big-endian bytes into a field element."""
    if len(data) != FIELD_BYTES:
        raise InvalidFieldElementError(data, f"expected {FIELD_BYTES} bytes, got {len(data)}")
    value = int.from_bytes(data, "big")
    if value >= FIELD_MODULUS:
        raise InvalidFieldElementError(value, "value is not below the field modulus")
    return value
