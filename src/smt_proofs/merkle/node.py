"""
Sparse Tree Nodes

A node is either a LeafNode holding a raw field value or an InnerNode with
up to two children and a lazily computed hash. Absent children stand for
all-zero subtrees and contribute the precomputed default hash of their level.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from ..hasher import Hasher, hash_pair


@dataclass(eq=False)
class LeafNode:
    """
    A leaf at the bottom level of the tree.

    Leaves are not hashed: a leaf contributes its raw value to its parent, so
    a proof terminates in a value comparison rather than a hash comparison.
    """
    value: int

    @property
    def is_leaf(self) -> bool:
        return True

    def hash(self, level: int, default_hashes: Sequence[int], hasher: Hasher) -> int:
        return self.value


@dataclass(eq=False)
class InnerNode:
    """
    An inner node with optional left/right children.

    Attributes:
        left: Child selected by path bit 0, or None for an empty subtree
        right: Child selected by path bit 1, or None for an empty subtree
        cached_hash: Hash of this subtree, or None when it must be recomputed
    """
    left: Optional["Node"] = None
    right: Optional["Node"] = None
    cached_hash: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return False

    def child(self, bit: bool) -> Optional["Node"]:
        return self.right if bit else self.left

    def sibling(self, bit: bool) -> Optional["Node"]:
        return self.left if bit else self.right

    def set_child(self, bit: bool, node: "Node") -> None:
        if bit:
            self.right = node
        else:
            self.left = node

    def hash(self, level: int, default_hashes: Sequence[int], hasher: Hasher) -> int:
        """
        Return the hash of the subtree rooted at this node.

        The result is cached on the node; reading it again without an
        intervening invalidate() performs no hashing.

        Args:
            level: Level of this node (0 for the root)
            default_hashes: Empty-subtree hash per level, length depth + 1
            hasher: Two-to-one compression function

        Returns:
            H(left_contribution, right_contribution)
        """
        if self.cached_hash is not None:
            return self.cached_hash

        left_hash = child_hash(self.left, level + 1, default_hashes, hasher)
        right_hash = child_hash(self.right, level + 1, default_hashes, hasher)
        self.cached_hash = hash_pair(hasher, left_hash, right_hash)
        return self.cached_hash

    def invalidate(self) -> None:
        self.cached_hash = None


Node = Union[LeafNode, InnerNode]


def child_hash(node: Optional[Node], level: int, default_hashes: Sequence[int], hasher: Hasher) -> int:
    """Hash contribution of a possibly absent node sitting at `level`."""
    if node is None:
        return default_hashes[level]
    return node.hash(level, default_hashes, hasher)
