"""
Sparse Merkle Tree Errors

Every failure raised by the library derives from SparseMerkleError and
carries the values needed to diagnose it without re-deriving tree state.
"""

from typing import Any, Optional, Sequence


class SparseMerkleError(Exception):
    """Base class for all sparse merkle tree errors."""
    pass


class InvalidDepthError(SparseMerkleError):
    """Raised when a tree depth is zero, negative or wider than the field."""

    def __init__(self, depth: Any, max_depth: int):
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(f"Invalid tree depth {depth!r}: must be between 1 and {max_depth}")


class PathLengthMismatchError(SparseMerkleError):
    """Raised when a bit sequence does not have exactly `depth` bits."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Path has {actual} bits, expected {expected}")


class PathOutOfRangeError(SparseMerkleError):
    """Raised when a path has non-zero bits beyond the tree depth."""

    def __init__(self, path: Any, depth: int):
        self.path = path
        self.depth = depth
        super().__init__(f"Path {path!r} does not fit in a tree of depth {depth}")


class PathNotFoundError(SparseMerkleError):
    """Raised when an operation needs a node that was never materialized."""

    def __init__(self, path: int, level: int):
        self.path = path
        self.level = level
        super().__init__(f"No node at level {level} on path {path}")


class SiblingCountMismatchError(SparseMerkleError):
    """Raised when a proof's siblings and path bits disagree with its depth."""

    def __init__(self, expected: int, siblings: int, path_bits: int):
        self.expected = expected
        self.siblings = siblings
        self.path_bits = path_bits
        super().__init__(
            f"Proof has {siblings} siblings and {path_bits} path bits, expected {expected} of each"
        )


class HashComputationError(SparseMerkleError):
    """Raised when the hash primitive fails or returns a non-field value."""

    def __init__(self, hasher: str, left: int, right: int, reason: Optional[str] = None):
        self.hasher = hasher
        self.left = left
        self.right = right
        message = f"Hasher {hasher!r} failed to compress ({left}, {right})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidFieldElementError(SparseMerkleError, ValueError):
    """Raised when a value cannot be interpreted as a field element."""

    def __init__(self, value: Any, reason: str = "not a field element"):
        self.value = value
        super().__init__(f"Invalid field element {value!r}: {reason}")


class InvalidNodeTypeError(SparseMerkleError):
    """Raised when the node graph holds a leaf where an inner node belongs, or vice versa."""

    def __init__(self, level: int, expected: str):
        self.level = level
        self.expected = expected
        super().__init__(f"Expected {expected} node at level {level}")


class UnknownHasherError(SparseMerkleError, KeyError):
    """Raised when a hasher name is not registered."""

    def __init__(self, name: str, available: Sequence[str]):
        self.name = name
        self.available = tuple(available)
        super().__init__(f"Unknown hasher {name!r} (available: {', '.join(available)})")

    def __str__(self) -> str:
        return self.args[0]
