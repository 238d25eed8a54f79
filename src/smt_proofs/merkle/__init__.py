"""
Sparse Merkle Tree Operations

This package provides the sparse tree, its nodes, detached proofs and
depth-first traversal.

The module is organized into four components:
- node: Leaf and inner nodes with lazy hash caching
- tree: Path-keyed insertion, deletion, lookup and proof generation
- proof: Detached proofs and bottom-up verification
- traversal: Pre-order iteration over materialized nodes
"""

from .node import InnerNode, LeafNode, Node, child_hash
from .tree import SparseMerkleTree, compute_default_hashes
from .proof import MerkleProof, compute_root_from_proof
from .traversal import NodeHandle, NodeIterator, TraversalMode

__all__ = [
    # Nodes
    "InnerNode",
    "LeafNode",
    "Node",
    "child_hash",
    # Tree
    "SparseMerkleTree",
    "compute_default_hashes",
    # Proofs
    "MerkleProof",
    "compute_root_from_proof",
    # Traversal
    "NodeHandle",
    "NodeIterator",
    "TraversalMode",
]
