"""
Sparse Merkle Tree Library

A fixed-depth sparse merkle tree over the BN254 scalar field. Only written
routes are materialized; empty subtrees are represented by precomputed
default hashes, and every leaf can be proven with a detached O(depth) proof.

Key features:
- Path-keyed insertion, deletion (zeroing) and lookup
- Lazy, cached subtree hashing with path-scoped invalidation
- Inclusion and exclusion proofs verifiable without the tree
- Pre-order traversal and rich tree visualization
- Pluggable two-to-one hashers

Modules:
- constants: Field parameters and tree limits
- field: Field element construction and bit decomposition
- hasher: Two-to-one hash primitives
- merkle: Nodes, tree, proofs and traversal
- models: Pydantic models for proof documents
- visualize: Tree rendering
"""

__version__ = "0.1.0"

from .constants import DEFAULT_DEPTH, FIELD_BITS, FIELD_MODULUS, MAX_DEPTH, ZERO
from .errors import (
    HashComputationError,
    InvalidDepthError,
    InvalidFieldElementError,
    InvalidNodeTypeError,
    PathLengthMismatchError,
    PathNotFoundError,
    PathOutOfRangeError,
    SiblingCountMismatchError,
    SparseMerkleError,
    UnknownHasherError,
)
from .field import from_bits_le, is_field_element, is_zero, to_bits_le, to_field
from .hasher import (
    Hasher,
    PoseidonHasher,
    Sha256Hasher,
    Sha3Hasher,
    available_hashers,
    get_hasher,
    hash_pair,
)
from .merkle import (
    InnerNode,
    LeafNode,
    MerkleProof,
    NodeHandle,
    NodeIterator,
    SparseMerkleTree,
    TraversalMode,
    compute_root_from_proof,
)

__all__ = [
    # Constants
    "DEFAULT_DEPTH",
    "FIELD_BITS",
    "FIELD_MODULUS",
    "MAX_DEPTH",
    "ZERO",
    # Errors
    "HashComputationError",
    "InvalidDepthError",
    "InvalidFieldElementError",
    "InvalidNodeTypeError",
    "PathLengthMismatchError",
    "PathNotFoundError",
    "PathOutOfRangeError",
    "SiblingCountMismatchError",
    "SparseMerkleError",
    "UnknownHasherError",
    # Field
    "from_bits_le",
    "is_field_element",
    "is_zero",
    "to_bits_le",
    "to_field",
    # Hashers
    "Hasher",
    "PoseidonHasher",
    "Sha256Hasher",
    "Sha3Hasher",
    "available_hashers",
    "get_hasher",
    "hash_pair",
    # Tree
    "InnerNode",
    "LeafNode",
    "MerkleProof",
    "NodeHandle",
    "NodeIterator",
    "SparseMerkleTree",
    "TraversalMode",
    "compute_root_from_proof",
]
