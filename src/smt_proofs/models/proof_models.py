"""
Proof Models

This module defines Pydantic models for serializing proofs and tree summaries
to JSON and validating them when they are read back.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import MAX_DEPTH
from ..errors import InvalidFieldElementError
from ..merkle.proof import MerkleProof
from ..merkle.tree import SparseMerkleTree
from ..utils.hex_helpers import field_to_hex, hex_to_field, normalize_hex


def _validate_field_hex(v: str) -> str:
    try:
        normalized = normalize_hex(v, expected_bytes=32)
        hex_to_field(normalized)
    except (ValueError, InvalidFieldElementError) as e:
        raise ValueError(f"Must be a 32-byte field element hex string starting with '0x': {e}")
    return normalized


class ProofModel(BaseModel):
    """
    Serialized form of a MerkleProof.

    Attributes:
        depth: Tree depth the proof was generated for
        hasher: Registry name of the hasher the tree used
        root_hash: Root hash as hex string
        value: Leaf value as hex string
        siblings: Sibling hashes as hex strings, root level first
        path_bits: Route bits, root level first
    """
    model_config = ConfigDict(frozen=True)

    depth: int = Field(..., ge=1, le=MAX_DEPTH, description="Tree depth")
    hasher: str = Field(..., description="Hasher registry name")
    root_hash: str = Field(..., description="Root hash as hex string")
    value: str = Field(..., description="Leaf value as hex string")
    siblings: List[str] = Field(..., description="Sibling hashes as hex strings, root level first")
    path_bits: List[bool] = Field(..., description="Route bits, root level first")

    @field_validator("root_hash", "value")
    @classmethod
    def validate_hex_format(cls, v):
        """Validate hex string format and field range."""
        return _validate_field_hex(v)

    @field_validator("siblings")
    @classmethod
    def validate_siblings_format(cls, v):
        """Validate sibling hashes are field element hex strings."""
        return [_validate_field_hex(step) for step in v]

    @model_validator(mode="after")
    def validate_lengths(self):
        """Validate siblings and path bits both match the depth."""
        if len(self.siblings) != self.depth or len(self.path_bits) != self.depth:
            raise ValueError(
                f"Expected {self.depth} siblings and path bits, "
                f"got {len(self.siblings)} and {len(self.path_bits)}"
            )
        return self

    @classmethod
    def from_proof(cls, proof: MerkleProof, hasher: str) -> "ProofModel":
        return cls(
            depth=proof.depth,
            hasher=hasher,
            root_hash=field_to_hex(proof.root_hash),
            value=field_to_hex(proof.value),
            siblings=[field_to_hex(s) for s in proof.siblings],
            path_bits=list(proof.path_bits),
        )

    def to_proof(self) -> MerkleProof:
        return MerkleProof(
            root_hash=hex_to_field(self.root_hash),
            value=hex_to_field(self.value),
            siblings=tuple(hex_to_field(s) for s in self.siblings),
            path_bits=tuple(self.path_bits),
        )


class TreeSummaryModel(BaseModel):
    """
    Summary of a tree's state.

    Attributes:
        depth: Tree depth
        hasher: Hasher registry name
        root_hash: Root hash as hex string
        is_empty: Whether the root equals the empty-tree hash
        leaf_count: Number of materialized leaves
    """
    depth: int = Field(..., description="Tree depth")
    hasher: str = Field(..., description="Hasher registry name")
    root_hash: str = Field(..., description="Root hash as hex string")
    is_empty: bool = Field(..., description="Whether the tree commits to no non-zero value")
    leaf_count: int = Field(default=0, ge=0, description="Number of materialized leaves")

    @field_validator("root_hash")
    @classmethod
    def validate_hex_format(cls, v):
        return _validate_field_hex(v)

    @classmethod
    def from_tree(cls, tree: SparseMerkleTree) -> "TreeSummaryModel":
        return cls(
            depth=tree.depth,
            hasher=tree.hasher.name,
            root_hash=field_to_hex(tree.get_root_hash()),
            is_empty=tree.is_empty(),
            leaf_count=sum(1 for _ in tree.leaves()),
        )
