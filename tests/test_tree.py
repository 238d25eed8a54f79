"""
Sparse Merkle Tree Tests

Unit tests for tree construction, path decoding, insertion, deletion,
lookup and hash caching.
"""

import unittest
import sys
import os
from unittest import mock

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from smt_proofs.constants import FIELD_MODULUS, MAX_DEPTH, ZERO
from smt_proofs.errors import (
    HashComputationError,
    InvalidDepthError,
    InvalidFieldElementError,
    PathLengthMismatchError,
    PathNotFoundError,
    PathOutOfRangeError,
)
from smt_proofs.hasher import Sha256Hasher, Sha3Hasher
from smt_proofs.merkle import InnerNode, LeafNode, SparseMerkleTree

DEPTH = 2
TEST_PATH = [True, False]


class CountingHasher(Sha256Hasher):
    """Sha256Hasher that counts compress calls."""

    def __init__(self):
        self.calls = 0

    def compress(self, left, right):
        self.calls += 1
        return super().compress(left, right)


class SwitchableHasher(Sha256Hasher):
    """Sha256Hasher that fails once `fail` is set."""

    def __init__(self):
        self.fail = False

    def compress(self, left, right):
        if self.fail:
            raise RuntimeError("round constants unavailable")
        return super().compress(left, right)


def setup_tree(depth=DEPTH):
    """Setup a new tree (depth 2 unless given) with the sha256 hasher"""
    return SparseMerkleTree(depth, Sha256Hasher())


class TestTreeConstruction(unittest.TestCase):
    """Tree construction and default hashes."""

    def test_new_tree(self):
        tree = setup_tree()
        self.assertEqual(tree.depth, 2)
        self.assertTrue(tree.is_empty())
        self.assertIsInstance(tree.root, InnerNode)

    def test_invalid_depth(self):
        for depth in (0, -1, MAX_DEPTH + 1):
            with self.subTest(depth=depth):
                with self.assertRaises(InvalidDepthError) as ctx:
                    SparseMerkleTree(depth, Sha256Hasher())
                self.assertEqual(ctx.exception.depth, depth)
                self.assertEqual(ctx.exception.max_depth, MAX_DEPTH)

    def test_non_integer_depth(self):
        with self.assertRaises(InvalidDepthError):
            SparseMerkleTree("3", Sha256Hasher())

    def test_max_depth(self):
        tree = SparseMerkleTree(MAX_DEPTH, Sha256Hasher())
        self.assertEqual(len(tree.default_hashes), MAX_DEPTH + 1)

    def test_default_hashes(self):
        """defaults[depth] is ZERO and each level hashes two copies of the level below"""
        hasher = Sha256Hasher()
        tree = SparseMerkleTree(4, hasher)
        defaults = tree.default_hashes
        self.assertEqual(len(defaults), 5)
        self.assertEqual(defaults[4], ZERO)
        for level in range(4):
            self.assertEqual(defaults[level], hasher.compress(defaults[level + 1], defaults[level + 1]))

    def test_empty_tree_hash(self):
        tree = setup_tree(3)
        self.assertEqual(tree.get_root_hash(), tree.default_hashes[0])
        self.assertTrue(tree.is_empty())

    def test_default_depth(self):
        with mock.patch.dict(os.environ):
            os.environ.pop("SMT_DEFAULT_DEPTH", None)
            os.environ.pop("SMT_HASHER", None)
            tree = SparseMerkleTree()
        self.assertEqual(tree.depth, 20)
        self.assertIsInstance(tree.hasher, Sha256Hasher)
        self.assertTrue(tree.is_empty())

    def test_depth_from_environment(self):
        with mock.patch.dict(os.environ, {"SMT_DEFAULT_DEPTH": "8", "SMT_HASHER": "sha3_256"}):
            tree = SparseMerkleTree()
        self.assertEqual(tree.depth, 8)
        self.assertIsInstance(tree.hasher, Sha3Hasher)

    def test_hasher_failure_during_construction(self):
        hasher = SwitchableHasher()
        hasher.fail = True
        with self.assertRaises(HashComputationError):
            SparseMerkleTree(3, hasher)


class TestPaths(unittest.TestCase):
    """Path composition and decoding."""

    def test_path_bit_extraction(self):
        merkle_path = 1  # bits [1, 0]
        self.assertTrue(SparseMerkleTree.get_path_bit(merkle_path, 0))
        self.assertFalse(SparseMerkleTree.get_path_bit(merkle_path, 1))

    def test_get_merkle_path(self):
        tree = setup_tree()
        merkle_path = tree.get_merkle_path(TEST_PATH)
        self.assertEqual(merkle_path, 1)
        self.assertEqual(SparseMerkleTree.get_path_bit(merkle_path, 0), TEST_PATH[0])
        self.assertEqual(SparseMerkleTree.get_path_bit(merkle_path, 1), TEST_PATH[1])

    def test_get_merkle_path_depth_three(self):
        tree = setup_tree(3)
        self.assertEqual(tree.get_merkle_path([True, True, False]), 3)
        self.assertEqual(tree.get_merkle_path([True, False, True]), 5)

    def test_get_merkle_path_length_mismatch(self):
        tree = setup_tree(3)
        with self.assertRaises(PathLengthMismatchError) as ctx:
            tree.get_merkle_path([True, False])
        self.assertEqual(ctx.exception.expected, 3)
        self.assertEqual(ctx.exception.actual, 2)

    def test_path_bits(self):
        tree = setup_tree(3)
        self.assertEqual(tree.path_bits(3), [True, True, False])
        self.assertEqual(tree.path_bits(0), [False, False, False])

    def test_path_out_of_range(self):
        tree = setup_tree(3)
        for path in (8, 9, -1, FIELD_MODULUS, 2**254):
            with self.subTest(path=path):
                with self.assertRaises(PathOutOfRangeError) as ctx:
                    tree.path_bits(path)
                self.assertEqual(ctx.exception.depth, 3)


class TestInsertAndGet(unittest.TestCase):
    """Insertion and lookup."""

    def test_insert_and_get(self):
        tree = setup_tree()
        merkle_path = tree.get_merkle_path(TEST_PATH)
        tree.insert_at_path(merkle_path, 123)
        self.assertEqual(tree.get_value(merkle_path), 123)
        self.assertFalse(tree.is_empty())

    def test_insert_round_trip_every_leaf(self):
        tree = setup_tree(3)
        for path in range(8):
            tree.insert_at_path(path, 1000 + path)
        for path in range(8):
            self.assertEqual(tree.get_value(path), 1000 + path)

    def test_insert_hash(self):
        """The leaf's parent hashes the raw leaf value with the empty sibling"""
        hasher = Sha256Hasher()
        tree = setup_tree()
        merkle_path = tree.get_merkle_path(TEST_PATH)
        tree.insert_at_path(merkle_path, 100)
        tree.get_root_hash()

        # bit 0 = 1 -> right child of the root; bit 1 = 0 -> left leaf
        parent = tree.root.right
        self.assertIsInstance(parent, InnerNode)
        self.assertIsInstance(parent.left, LeafNode)
        self.assertIsNone(parent.right)
        self.assertEqual(parent.cached_hash, hasher.compress(100, ZERO))
        self.assertEqual(
            tree.get_root_hash(), hasher.compress(tree.default_hashes[1], parent.cached_hash)
        )

    def test_overwrite_value(self):
        tree = setup_tree(3)
        tree.insert_at_path(4, 1)
        first_root = tree.get_root_hash()
        tree.insert_at_path(4, 2)
        self.assertEqual(tree.get_value(4), 2)
        self.assertNotEqual(tree.get_root_hash(), first_root)

    def test_value_is_reduced_into_field(self):
        tree = setup_tree(3)
        tree.insert_at_path(2, FIELD_MODULUS + 9)
        self.assertEqual(tree.get_value(2), 9)

    def test_insert_rejects_non_integer_value(self):
        tree = setup_tree(3)
        with self.assertRaises(InvalidFieldElementError):
            tree.insert_at_path(2, "nine")
        self.assertTrue(tree.is_empty())

    def test_insert_zero_keeps_tree_empty(self):
        tree = setup_tree(3)
        tree.insert_at_path(6, 0)
        self.assertTrue(tree.is_empty())
        self.assertIsNotNone(tree.root.left)

    def test_get_absent_value(self):
        tree = setup_tree(3)
        tree.insert_at_path(3, 100)
        self.assertEqual(tree.get_value(0), ZERO)
        self.assertEqual(tree.get_value(7), ZERO)

    def test_insert_out_of_range(self):
        tree = setup_tree(3)
        with self.assertRaises(PathOutOfRangeError):
            tree.insert_at_path(8, 1)
        with self.assertRaises(PathOutOfRangeError):
            tree.get_value(8)

    def test_only_route_is_materialized(self):
        tree = setup_tree(4)
        tree.insert_at_path(0, 5)
        node = tree.root
        for _ in range(3):
            self.assertIsNone(node.right)
            node = node.left
        self.assertIsInstance(node.left, LeafNode)
        self.assertIsNone(node.right)

    def test_deep_tree(self):
        tree = SparseMerkleTree(MAX_DEPTH, Sha256Hasher())
        path = FIELD_MODULUS - 1
        tree.insert_at_path(path, 42)
        self.assertEqual(tree.get_value(path), 42)
        self.assertFalse(tree.is_empty())

    def test_determinism(self):
        first = setup_tree(8)
        second = setup_tree(8)
        first.insert_at_path(77, 12345)
        second.insert_at_path(77, 12345)
        self.assertEqual(first.get_root_hash(), second.get_root_hash())

    def test_insertion_order_does_not_matter(self):
        first = setup_tree(4)
        second = setup_tree(4)
        for path, value in [(1, 10), (9, 90), (14, 140)]:
            first.insert_at_path(path, value)
        for path, value in [(14, 140), (1, 10), (9, 90)]:
            second.insert_at_path(path, value)
        self.assertEqual(first.get_root_hash(), second.get_root_hash())

    def test_hasher_changes_root(self):
        first = SparseMerkleTree(3, Sha256Hasher())
        second = SparseMerkleTree(3, Sha3Hasher())
        first.insert_at_path(1, 1)
        second.insert_at_path(1, 1)
        self.assertNotEqual(first.get_root_hash(), second.get_root_hash())


class TestDelete(unittest.TestCase):
    """Deletion writes ZERO and never prunes."""

    def test_delete(self):
        tree = setup_tree()
        merkle_path = tree.get_merkle_path(TEST_PATH)
        tree.insert_at_path(merkle_path, 123)
        tree.delete_at_path(merkle_path)
        self.assertEqual(tree.get_value(merkle_path), ZERO)

    def test_delete_last_leaf_in_subtree(self):
        """Deleting the only value restores the empty-tree hash"""
        tree = setup_tree(3)
        tree.insert_at_path(3, 100)
        tree.delete_at_path(3)
        self.assertEqual(tree.get_root_hash(), tree.default_hashes[0])
        self.assertEqual(tree.get_root_hash(), setup_tree(3).get_root_hash())
        self.assertTrue(tree.is_empty())

    def test_delete_with_sibling_leaf_still_set(self):
        """Ancestors keep a non-default hash while the sibling leaf holds a value"""
        tree = setup_tree(3)
        tree.insert_at_path(3, 100)  # bits [1, 1, 0]
        tree.insert_at_path(7, 200)  # bits [1, 1, 1], same parent as path 3
        tree.delete_at_path(3)

        reference = setup_tree(3)
        reference.insert_at_path(7, 200)

        self.assertEqual(tree.get_value(3), ZERO)
        self.assertEqual(tree.get_value(7), 200)
        self.assertNotEqual(tree.get_root_hash(), tree.default_hashes[0])
        self.assertEqual(tree.get_root_hash(), reference.get_root_hash())
        self.assertFalse(tree.is_empty())

    def test_delete_keeps_inner_nodes(self):
        tree = setup_tree(3)
        tree.insert_at_path(3, 100)
        tree.delete_at_path(3)
        parent = tree.root.right.right
        self.assertIsInstance(parent, InnerNode)
        self.assertIsInstance(parent.left, LeafNode)
        self.assertEqual(parent.left.value, ZERO)

    def test_delete_not_found(self):
        tree = setup_tree(3)
        with self.assertRaises(PathNotFoundError) as ctx:
            tree.delete_at_path(5)
        self.assertEqual(ctx.exception.path, 5)
        self.assertEqual(ctx.exception.level, 1)

    def test_delete_missing_leaf_under_existing_parent(self):
        tree = setup_tree(3)
        tree.insert_at_path(3, 100)
        with self.assertRaises(PathNotFoundError) as ctx:
            tree.delete_at_path(7)
        self.assertEqual(ctx.exception.level, 3)

    def test_delete_twice(self):
        tree = setup_tree(3)
        tree.insert_at_path(3, 100)
        tree.delete_at_path(3)
        tree.delete_at_path(3)
        self.assertEqual(tree.get_value(3), ZERO)

    def test_delete_out_of_range(self):
        tree = setup_tree(3)
        with self.assertRaises(PathOutOfRangeError):
            tree.delete_at_path(8)

    def test_clear(self):
        tree = setup_tree()
        merkle_path = tree.get_merkle_path(TEST_PATH)
        tree.insert_at_path(merkle_path, 123)
        tree.clear()
        self.assertTrue(tree.is_empty())
        self.assertIsNone(tree.root.left)
        self.assertIsNone(tree.root.right)
        self.assertEqual(tree.get_value(merkle_path), ZERO)


class TestHashCaching(unittest.TestCase):
    """Lazy hashing, caching and path-scoped invalidation."""

    def setUp(self):
        self.hasher = CountingHasher()
        self.tree = SparseMerkleTree(3, self.hasher)
        self.tree.insert_at_path(3, 100)  # bits [1, 1, 0]
        self.tree.insert_at_path(5, 200)  # bits [1, 0, 1]
        self.hasher.calls = 0

    def test_mutation_defers_hashing(self):
        self.assertIsNone(self.tree.root.cached_hash)
        self.assertEqual(self.hasher.calls, 0)

    def test_root_hash_is_cached(self):
        first = self.tree.get_root_hash()
        # root, the level 1 node and two level 2 nodes
        self.assertEqual(self.hasher.calls, 4)
        self.assertEqual(self.tree.root.cached_hash, first)

        self.hasher.calls = 0
        self.assertEqual(self.tree.get_root_hash(), first)
        self.assertEqual(self.hasher.calls, 0)

    def test_insert_invalidates_only_its_path(self):
        self.tree.get_root_hash()
        level_one = self.tree.root.right
        path3_parent = level_one.right
        path5_parent = level_one.left

        self.tree.insert_at_path(3, 101)
        self.assertIsNone(self.tree.root.cached_hash)
        self.assertIsNone(level_one.cached_hash)
        self.assertIsNone(path3_parent.cached_hash)
        self.assertIsNotNone(path5_parent.cached_hash)

        self.hasher.calls = 0
        self.tree.get_root_hash()
        self.assertEqual(self.hasher.calls, 3)

    def test_delete_invalidates_path(self):
        self.tree.get_root_hash()
        self.tree.delete_at_path(5)
        self.assertIsNone(self.tree.root.cached_hash)
        self.assertIsNone(self.tree.root.right.left.cached_hash)
        self.assertIsNotNone(self.tree.root.right.right.cached_hash)

    def test_cached_hash_matches_fresh_tree(self):
        self.tree.get_root_hash()
        self.tree.insert_at_path(0, 7)
        fresh = SparseMerkleTree(3, Sha256Hasher())
        for path, value in [(3, 100), (5, 200), (0, 7)]:
            fresh.insert_at_path(path, value)
        self.assertEqual(self.tree.get_root_hash(), fresh.get_root_hash())

    def test_hash_failure_propagates(self):
        hasher = SwitchableHasher()
        tree = SparseMerkleTree(3, hasher)
        tree.insert_at_path(1, 5)
        hasher.fail = True
        with self.assertRaises(HashComputationError) as ctx:
            tree.get_root_hash()
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

        # A failed computation leaves the cache dirty
        self.assertIsNone(tree.root.cached_hash)
        hasher.fail = False
        self.assertFalse(tree.is_empty())


class TestConcreteScenario(unittest.TestCase):
    """Depth 3 tree holding 100 at path 3 and 200 at path 5."""

    def test_scenario(self):
        tree = setup_tree(3)
        tree.insert_at_path(tree.get_merkle_path([True, True, False]), 100)
        tree.insert_at_path(tree.get_merkle_path([True, False, True]), 200)

        self.assertEqual(tree.get_value(3), 100)
        self.assertEqual(tree.get_value(5), 200)
        self.assertEqual(tree.get_value(0), 0)

        proof = tree.generate_proof(3)
        self.assertTrue(proof.verify_proof(Sha256Hasher()))

        root_before = tree.get_root_hash()
        tree.delete_at_path(3)
        self.assertEqual(tree.get_value(3), 0)
        self.assertNotEqual(tree.get_root_hash(), root_before)
        self.assertEqual(tree.get_value(5), 200)


if __name__ == "__main__":
    unittest.main(verbosity=2)
