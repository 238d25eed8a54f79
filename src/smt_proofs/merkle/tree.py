"""
Sparse Merkle Tree

A fixed-depth binary tree over 2^depth leaves in which only the routes that
were written to are materialized. Every other subtree is implied by the
precomputed default hash of its level, so the root hash matches that of the
fully materialized tree.

Paths are field elements read little-endian: bit 0 picks the branch at the
root, bit depth-1 picks the leaf. A 0 bit goes left, a 1 bit goes right.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from ..config import get_settings
from ..constants import MAX_DEPTH, ZERO
from ..errors import (
    InvalidDepthError,
    InvalidNodeTypeError,
    PathLengthMismatchError,
    PathNotFoundError,
    PathOutOfRangeError,
)
from ..field import from_bits_le, is_field_element, to_bits_le, to_field
from ..hasher import Hasher, get_hasher, hash_pair
from .node import InnerNode, LeafNode, Node, child_hash
from .proof import MerkleProof
from .traversal import NodeHandle, NodeIterator, TraversalMode

logger = logging.getLogger(__name__)


def compute_default_hashes(depth: int, hasher: Hasher) -> Tuple[int, ...]:
    """
    Precompute the hash of an empty subtree at every level.

    Each level i contains: H(defaults[i+1], defaults[i+1]), with the leaf
    level holding ZERO.

    Args:
        depth: Tree depth
        hasher: Two-to-one compression function

    Returns:
        Tuple of length depth + 1, indexed by level (0 is the root)
    """
    defaults = [ZERO] * (depth + 1)
    for level in range(depth - 1, -1, -1):
        defaults[level] = hash_pair(hasher, defaults[level + 1], defaults[level + 1])
    return tuple(defaults)


class SparseMerkleTree:
    """
    Sparse merkle tree keyed by field-element paths.

    The tree assumes a single writer: mutation and hash-cache invalidation
    are not atomic, so concurrent access must be serialized by the caller.

    Args:
        depth: Number of levels below the root. Defaults to SMT_DEFAULT_DEPTH.
        hasher: Compression function. Defaults to the SMT_HASHER hasher.

    Raises:
        InvalidDepthError: If depth is not between 1 and MAX_DEPTH
    """

    def __init__(self, depth: Optional[int] = None, hasher: Optional[Hasher] = None):
        if depth is None or hasher is None:
            settings = get_settings()
            if depth is None:
                depth = settings.depth
            if hasher is None:
                hasher = get_hasher(settings.hasher)

        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1 or depth > MAX_DEPTH:
            raise InvalidDepthError(depth, MAX_DEPTH)

        self._depth = depth
        self._hasher = hasher
        self._default_hashes = compute_default_hashes(depth, hasher)
        self._root = InnerNode()

        logger.info(f"Initialized SparseMerkleTree with depth={depth}, hasher={hasher.name}")

    # ====================
    # Properties
    # ====================

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def root(self) -> InnerNode:
        return self._root

    @property
    def default_hashes(self) -> Tuple[int, ...]:
        return self._default_hashes

    # ====================
    # Paths
    # ====================

    def get_merkle_path(self, bits: Sequence[bool]) -> int:
        """
        Compose a route into a path.

        Args:
            bits: Exactly `depth` bits; bits[0] is the branch taken at the root

        Returns:
            The path as a field element

        Raises:
            PathLengthMismatchError: If len(bits) != depth

        Examples:
            >>> SparseMerkleTree(3).get_merkle_path([True, True, False])
            3
        """
        if len(bits) != self._depth:
            raise PathLengthMismatchError(self._depth, len(bits))
        return from_bits_le(bits)

    @staticmethod
    def get_path_bit(path: int, position: int) -> bool:
        """Return bit `position` (little-endian) of `path`."""
        return bool((path >> position) & 1)

    def path_bits(self, path: int) -> List[bool]:
        """
        Decode `path` into exactly `depth` route bits.

        Raises:
            PathOutOfRangeError: If path is not a field element or has
                non-zero bits at or above `depth`
        """
        if not is_field_element(path) or path >> self._depth:
            raise PathOutOfRangeError(path, self._depth)
        return to_bits_le(path, self._depth)

    # ====================
    # Walking
    # ====================

    def _check_inner(self, node: Node, level: int) -> InnerNode:
        if not isinstance(node, InnerNode):
            raise InvalidNodeTypeError(level, "inner")
        return node

    def _check_leaf(self, node: Node, level: int) -> LeafNode:
        if not isinstance(node, LeafNode):
            raise InvalidNodeTypeError(level, "leaf")
        return node

    def _invalidate(self, visited: List[InnerNode]) -> None:
        # Leaf's parent first, root last
        for node in reversed(visited):
            node.invalidate()

    def _walk_existing(self, path: int) -> Tuple[Optional[LeafNode], List[InnerNode], int]:
        """
        Follow `path` without creating nodes.

        Returns:
            (leaf or None, inner nodes visited from the root, level where the
            walk stopped)
        """
        bits = self.path_bits(path)
        node: InnerNode = self._root
        visited = [node]
        for level, bit in enumerate(bits):
            child = node.child(bit)
            if child is None:
                return None, visited, level + 1
            if level == self._depth - 1:
                return self._check_leaf(child, level + 1), visited, level + 1
            node = self._check_inner(child, level + 1)
            visited.append(node)
        # depth >= 1, so the loop always returns
        raise InvalidNodeTypeError(self._depth, "leaf")

    # ====================
    # Mutation
    # ====================

    def insert_at_path(self, path: int, value: int) -> None:
        """
        Set the leaf at `path` to `value`, creating the route if needed.

        Args:
            path: Field element whose low `depth` bits select the leaf
            value: Leaf value; reduced into the field

        Raises:
            PathOutOfRangeError: If path does not fit in `depth` bits
            InvalidFieldElementError: If value is not an integer
        """
        bits = self.path_bits(path)
        value = to_field(value)

        node: InnerNode = self._root
        visited = [node]
        for level, bit in enumerate(bits[:-1]):
            child = node.child(bit)
            if child is None:
                child = InnerNode()
                node.set_child(bit, child)
            node = self._check_inner(child, level + 1)
            visited.append(node)

        leaf = node.child(bits[-1])
        if leaf is None:
            node.set_child(bits[-1], LeafNode(value))
        else:
            self._check_leaf(leaf, self._depth).value = value

        self._invalidate(visited)
        logger.debug(f"Inserted value {value} at path {path}")

    def delete_at_path(self, path: int) -> None:
        """
        Zero the leaf at `path`.

        Inner nodes along the route are kept even if their subtree becomes
        empty; their hash then equals the default hash of their level.

        Raises:
            PathOutOfRangeError: If path does not fit in `depth` bits
            PathNotFoundError: If no value was ever inserted at `path`
        """
        leaf, visited, level = self._walk_existing(path)
        if leaf is None:
            raise PathNotFoundError(path, level)

        leaf.value = ZERO
        self._invalidate(visited)
        logger.debug(f"Deleted value at path {path}")

    def clear(self) -> None:
        """Drop every node and return to the empty tree."""
        self._root = InnerNode()
        logger.debug("Cleared tree")

    # ====================
    # Reads
    # ====================

    def get_value(self, path: int) -> int:
        """
        Return the leaf value at `path`, or ZERO if the route is absent.

        Raises:
            PathOutOfRangeError: If path does not fit in `depth` bits
        """
        leaf, _, _ = self._walk_existing(path)
        return ZERO if leaf is None else leaf.value

    def get_root_hash(self) -> int:
        return self._root.hash(0, self._default_hashes, self._hasher)

    def is_empty(self) -> bool:
        return self.get_root_hash() == self._default_hashes[0]

    # ====================
    # Proofs
    # ====================

    def generate_proof(self, path: int) -> MerkleProof:
        """
        Build a proof for the leaf at `path`.

        At every level the hash of the child on the side not taken is
        recorded (the default hash of that level when it is absent). If the
        route runs into an absent subtree the result is an exclusion proof
        whose value is ZERO.

        Args:
            path: Field element whose low `depth` bits select the leaf

        Returns:
            MerkleProof detached from this tree

        Raises:
            PathOutOfRangeError: If path does not fit in `depth` bits
        """
        bits = self.path_bits(path)
        root_hash = self.get_root_hash()

        siblings: List[int] = []
        node: Optional[Node] = self._root
        for level, bit in enumerate(bits):
            if node is None:
                siblings.append(self._default_hashes[level + 1])
                continue
            inner = self._check_inner(node, level)
            siblings.append(
                child_hash(inner.sibling(bit), level + 1, self._default_hashes, self._hasher)
            )
            node = inner.child(bit)

        value = ZERO if node is None else self._check_leaf(node, self._depth).value

        logger.debug(f"Generated proof for path {path} with {len(siblings)} siblings")
        return MerkleProof(
            root_hash=root_hash,
            value=value,
            siblings=tuple(siblings),
            path_bits=tuple(bits),
        )

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Verify `proof` with this tree's hasher and depth, against the current root."""
        return proof.root_hash == self.get_root_hash() and proof.verify_proof(
            self._hasher, self._depth
        )

    # ====================
    # Traversal
    # ====================

    def __iter__(self) -> Iterator[NodeHandle]:
        """Shared read-only pre-order traversal over materialized nodes."""
        return self.iter_nodes()

    def iter_nodes(self) -> NodeIterator:
        return NodeIterator(self._root, TraversalMode.SHARED)

    def take_nodes(self) -> NodeIterator:
        """
        Exclusive traversal that takes ownership of the node graph.

        The tree is left empty; the returned iterator is the only holder of
        the previous nodes.
        """
        root, self._root = self._root, InnerNode()
        return NodeIterator(root, TraversalMode.EXCLUSIVE)

    def leaves(self) -> Iterator[Tuple[int, int]]:
        """Yield (path, value) for every materialized leaf, in traversal order."""
        for handle in self.iter_nodes():
            if handle.is_leaf:
                yield handle.prefix, handle.value

    def __repr__(self) -> str:
        return f"SparseMerkleTree(depth={self._depth}, hasher={self._hasher!r})"
