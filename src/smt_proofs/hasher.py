"""
Two-to-One Hash Primitives

A hasher compresses two field elements into one. The tree, its nodes and
detached proofs all go through `hash_pair`, so a hasher failure surfaces the
same way everywhere.
"""

import hashlib
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, List, Type

import poseidon

from .constants import (
    FIELD_MODULUS,
    POSEIDON_ALPHA,
    POSEIDON_FULL_ROUNDS,
    POSEIDON_PARTIAL_ROUNDS,
    POSEIDON_RATE,
    POSEIDON_SECURITY_LEVEL,
    POSEIDON_WIDTH,
)
from .errors import HashComputationError, UnknownHasherError
from .field import is_field_element, to_bytes


class Hasher(ABC):
    """
    Base class for two-input, one-output compression functions over the field.

    Implementations must be pure and deterministic. Instances are cheap to
    construct so a proof can be verified with a fresh one, away from the tree
    that produced it.
    """

    name: str = "abstract"

    @abstractmethod
    def compress(self, left: int, right: int) -> int:
        """Combine two field elements into one."""

    def clone(self) -> "Hasher":
        return type(self)()

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class _DigestHasher(Hasher):
    """Hashes the 32-byte big-endian encodings of both inputs and reduces the digest into the field."""

    @abstractmethod
    def _digest(self, data: bytes) -> bytes:
        """Digest the concatenated 64-byte input."""

    def compress(self, left: int, right: int) -> int:
        digest = self._digest(to_bytes(left) + to_bytes(right))
        return int.from_bytes(digest, "big") % FIELD_MODULUS


class Sha256Hasher(_DigestHasher):
    name = "sha256"

    def _digest(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class Sha3Hasher(_DigestHasher):
    name = "sha3_256"

    def _digest(self, data: bytes) -> bytes:
        return hashlib.sha3_256(data).digest()


@lru_cache(maxsize=None)
def _poseidon_permutation() -> poseidon.Poseidon:
    # Round constants and MDS matrix are generated on construction
    return poseidon.Poseidon(
        FIELD_MODULUS,
        POSEIDON_SECURITY_LEVEL,
        POSEIDON_ALPHA,
        POSEIDON_RATE,
        POSEIDON_WIDTH,
        full_round=POSEIDON_FULL_ROUNDS,
        partial_round=POSEIDON_PARTIAL_ROUNDS,
    )


class PoseidonHasher(Hasher):
    """
    Poseidon over the BN254 scalar field, width 3.

    The state is laid out as [capacity, left, right] with a zero capacity
    element. The permutation parameters are built once per process and
    shared by every instance.
    """

    name = "poseidon"

    def compress(self, left: int, right: int) -> int:
        return int(_poseidon_permutation().run_hash([0, left, right])) % FIELD_MODULUS


_HASHERS: Dict[str, Type[Hasher]] = {
    Sha256Hasher.name: Sha256Hasher,
    Sha3Hasher.name: Sha3Hasher,
    PoseidonHasher.name: PoseidonHasher,
}


def available_hashers() -> List[str]:
    return sorted(_HASHERS)


def get_hasher(name: str) -> Hasher:
    """
    Build a hasher by registry name.

    Raises:
        UnknownHasherError: If no hasher is registered under `name`

    Examples:
        >>> get_hasher("sha256")
        Sha256Hasher()
    """
    try:
        hasher_cls = _HASHERS[name]
    except KeyError:
        raise UnknownHasherError(name, available_hashers()) from None
    return hasher_cls()


def hash_pair(hasher: Hasher, left: int, right: int) -> int:
    """
    Compress `left` and `right` with `hasher`.

    Raises:
        HashComputationError: If the hasher raises, or returns something that
            is not a field element
    """
    try:
        result = hasher.compress(left, right)
    except Exception as e:
        raise HashComputationError(getattr(hasher, "name", repr(hasher)), left, right, str(e)) from e
    if not is_field_element(result):
        raise HashComputationError(
            getattr(hasher, "name", repr(hasher)), left, right, f"result {result!r} is not a field element"
        )
    return result
