"""
Merkle Proof Generation Records and Verification

A MerkleProof is a detached snapshot of one leaf: its value, the sibling hash
at every level and the path bits telling which side each sibling sits on.
It holds no reference to the tree and can be verified with any hasher
instance of the same kind.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..errors import InvalidFieldElementError, SiblingCountMismatchError
from ..field import from_bits_le, is_field_element
from ..hasher import Hasher, hash_pair

logger = logging.getLogger(__name__)


def compute_root_from_proof(
    value: int, path_bits: Sequence[bool], siblings: Sequence[int], hasher: Hasher
) -> int:
    """
    Rebuild the root hash from a raw leaf value and its sibling hashes.

    Args:
        value: Raw leaf value (not hashed)
        path_bits: Route bits, index 0 taken at the root
        siblings: Sibling hash per level, index-aligned with path_bits

    Returns:
        The reconstructed root hash

    Examples:
        >>> hasher = Sha256Hasher()
        >>> compute_root_from_proof(5, [True], [7], hasher) == hasher.compress(7, 5)
        True
    """
    current = value
    for level in reversed(range(len(siblings))):
        sibling = siblings[level]
        if path_bits[level]:
            # Our node was on the right, sibling is on the left
            current = hash_pair(hasher, sibling, current)
        else:
            # Our node was on the left, sibling is on the right
            current = hash_pair(hasher, current, sibling)
    return current


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion (or, for a zero value, exclusion) claim for one path.

    Attributes:
        root_hash: Tree root at the time the proof was generated
        value: Leaf value the proof attests to
        siblings: Sibling hash per level; siblings[0] is at the root's
            children level and siblings[-1] at the leaf level
        path_bits: Route bits, little-endian, aligned with siblings
    """
    root_hash: int
    value: int
    siblings: Tuple[int, ...]
    path_bits: Tuple[bool, ...]

    def __post_init__(self):
        object.__setattr__(self, "siblings", tuple(self.siblings))
        object.__setattr__(self, "path_bits", tuple(bool(bit) for bit in self.path_bits))

    @property
    def depth(self) -> int:
        return len(self.path_bits)

    @property
    def path(self) -> int:
        return from_bits_le(self.path_bits)

    def _check_lengths(self, depth: Optional[int]) -> None:
        expected = len(self.path_bits) if depth is None else depth
        if len(self.siblings) != len(self.path_bits) or len(self.siblings) != expected:
            raise SiblingCountMismatchError(expected, len(self.siblings), len(self.path_bits))

    def _out_of_field(self) -> Optional[int]:
        for operand in (self.root_hash, self.value) + self.siblings:
            if not is_field_element(operand):
                return operand
        return None

    def compute_root(self, hasher: Hasher, depth: Optional[int] = None) -> int:
        """
        Reconstruct the root implied by this proof.

        Raises:
            SiblingCountMismatchError: If the lengths do not match `depth`
            InvalidFieldElementError: If the value or a sibling is not a
                field element
        """
        self._check_lengths(depth)
        for operand in (self.value,) + self.siblings:
            if not is_field_element(operand):
                raise InvalidFieldElementError(operand, "proof operand is not a field element")
        return compute_root_from_proof(self.value, self.path_bits, self.siblings, hasher)

    def verify_proof(self, hasher: Hasher, depth: Optional[int] = None) -> bool:
        """
        Check that the proof reconstructs its own root hash.

        Args:
            hasher: Hasher of the same kind the tree used
            depth: Expected tree depth; defaults to the number of path bits

        Returns:
            True if the reconstruction equals root_hash; False as well when
            any operand lies outside the field

        Raises:
            SiblingCountMismatchError: If siblings and path bits differ in
                length from each other or from `depth`
        """
        self._check_lengths(depth)
        bad = self._out_of_field()
        if bad is not None:
            logger.debug(f"Rejecting proof with out-of-field operand {bad}")
            return False
        return self.compute_root(hasher, depth) == self.root_hash
