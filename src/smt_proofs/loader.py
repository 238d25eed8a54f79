"""
Entry Loading Utilities

This module reads (path, value) entries from JSON files and builds trees
from them. Two layouts are accepted:

    {"entries": [{"path": 3, "value": 100}, {"path": "0x5", "value": "200"}]}
    {"3": 100, "0x5": "200"}

Paths and values may be ints, decimal strings or 0x hex strings.
"""

import json
import logging
from typing import Any, Iterable, List, Optional, Tuple

from .hasher import Hasher
from .merkle.tree import SparseMerkleTree
from .utils.hex_helpers import parse_field

logger = logging.getLogger(__name__)


def parse_entries(data: Any) -> List[Tuple[int, int]]:
    """
    Convert decoded JSON into (path, value) pairs.

    Raises:
        ValueError: If the document matches neither accepted layout
    """
    if isinstance(data, dict) and "entries" in data:
        entries = data["entries"]
        if not isinstance(entries, list):
            raise ValueError("'entries' must be a list")
        result = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict) or "path" not in entry or "value" not in entry:
                raise ValueError(f"Entry {i} must be an object with 'path' and 'value'")
            result.append((parse_field(entry["path"]), parse_field(entry["value"])))
        return result

    if isinstance(data, dict):
        return [(parse_field(path), parse_field(value)) for path, value in data.items()]

    raise ValueError("Entries file must be a JSON object")


def load_entries(entries_file: str) -> List[Tuple[int, int]]:
    """Load (path, value) pairs from a JSON file."""
    with open(entries_file, "r") as f:
        data = json.load(f)
    entries = parse_entries(data)
    logger.info(f"Loaded {len(entries)} entries from {entries_file}")
    return entries


def build_tree(
    entries: Iterable[Tuple[int, int]],
    depth: Optional[int] = None,
    hasher: Optional[Hasher] = None,
) -> SparseMerkleTree:
    """
    Insert `entries` into a fresh tree, in order.

    Later entries for the same path overwrite earlier ones.
    """
    tree = SparseMerkleTree(depth, hasher)
    for path, value in entries:
        tree.insert_at_path(path, value)
    return tree
