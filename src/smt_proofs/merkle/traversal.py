"""
Depth-First Traversal over Materialized Nodes

Walks the sparse node graph in pre-order (node before children, left before
right). Absent subtrees yield nothing, so the sequence covers only nodes that
were created by insertions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .node import LeafNode, Node


class TraversalMode(Enum):
    """How a traversal holds the node graph it walks."""
    SHARED = "shared"          # read-only view of a live tree
    EXCLUSIVE = "exclusive"    # graph detached from its tree and owned by the iterator


@dataclass(frozen=True)
class NodeHandle:
    """
    Snapshot of one visited node.

    Attributes:
        level: Distance from the root (root is 0, leaves are at `depth`)
        prefix: Path bits chosen from the root to reach this node, composed
            little-endian; for a leaf this is the full path
        is_leaf: Whether the node is a leaf
        value: Leaf value (None for inner nodes)
        cached_hash: Inner node hash if already computed, else None
    """
    level: int
    prefix: int
    is_leaf: bool
    value: Optional[int] = None
    cached_hash: Optional[int] = None

    @property
    def hash(self) -> Optional[int]:
        return self.value if self.is_leaf else self.cached_hash


class NodeIterator:
    """
    Lazy, finite, non-restartable pre-order iterator.

    Args:
        root: Node to start from (usually the tree root)
        mode: TraversalMode describing how the graph is held
    """

    def __init__(self, root: Optional[Node], mode: TraversalMode = TraversalMode.SHARED):
        self.mode = mode
        self._stack: List[Tuple[Node, int, int]] = []
        if root is not None:
            self._stack.append((root, 0, 0))

    def __iter__(self) -> Iterator[NodeHandle]:
        return self

    def __next__(self) -> NodeHandle:
        if not self._stack:
            raise StopIteration

        node, level, prefix = self._stack.pop()
        if isinstance(node, LeafNode):
            return NodeHandle(level=level, prefix=prefix, is_leaf=True, value=node.value)

        # Right pushed first so the left child is visited first
        if node.right is not None:
            self._stack.append((node.right, level + 1, prefix | (1 << level)))
        if node.left is not None:
            self._stack.append((node.left, level + 1, prefix))
        return NodeHandle(level=level, prefix=prefix, is_leaf=False, cached_hash=node.cached_hash)

    def __repr__(self) -> str:
        return f"NodeIterator(mode={self.mode.value}, pending={len(self._stack)})"
