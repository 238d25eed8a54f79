"""
Utility Functions

Helpers for converting field elements to and from hex/decimal strings.
"""

from .hex_helpers import (
    field_to_hex,
    hex_to_field,
    normalize_hex,
    parse_field,
    short_value,
)

__all__ = [
    "field_to_hex",
    "hex_to_field",
    "normalize_hex",
    "parse_field",
    "short_value",
]
