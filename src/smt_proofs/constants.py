"""
Sparse Merkle Tree Constants

This module contains the field parameters and tree limits shared by the
field helpers, the hashers and the tree implementation.

References:
- BN254 scalar field: https://hackmd.io/@jpw/bn254
"""

# ====================
# Field Parameters
# ====================

# BN254 scalar field modulus (the "Fr" field used by circom/Groth16 circuits)
FIELD_MODULUS = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

# Number of bits needed to represent any field element
FIELD_BITS = FIELD_MODULUS.bit_length()  # 254

# Size of the big-endian byte encoding of a field element
FIELD_BYTES = 32

# Canonical empty value
ZERO = 0

# ====================
# Tree Limits
# ====================

# A path is a field element, so a tree cannot be deeper than the field is wide
MAX_DEPTH = FIELD_BITS

# Depth used when none is configured
DEFAULT_DEPTH = 20

# ====================
# Hashing
# ====================

DEFAULT_HASHER = "sha256"

# Poseidon over BN254 with two inputs: state width 3 (one capacity element),
# x^5 S-box, round counts as used by circom's Poseidon(2)
POSEIDON_WIDTH = 3
POSEIDON_RATE = 2
POSEIDON_ALPHA = 5
POSEIDON_SECURITY_LEVEL = 128
POSEIDON_FULL_ROUNDS = 8
POSEIDON_PARTIAL_ROUNDS = 57
