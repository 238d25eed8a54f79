"""
Sparse Merkle Tree Visualization Module

Renders a tree as rich tree-art: one line per node with its level, path
prefix and truncated hash or value. Absent subtrees are drawn as single
"Empty" placeholders. Rendering only reads the tree (root hash, emptiness
and a shared traversal); it never mutates it.
"""

from typing import Dict, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from .merkle.traversal import NodeHandle
from .merkle.tree import SparseMerkleTree
from .utils.hex_helpers import short_value


def _label(handle: NodeHandle) -> str:
    if handle.is_leaf:
        return f"{handle.level}:{handle.prefix} (Leaf Value: {short_value(handle.value)})"
    cached = "pending" if handle.cached_hash is None else short_value(handle.cached_hash)
    kind = "Root Node" if handle.level == 0 else "Inner Node"
    return f"{handle.level}:{handle.prefix} ({kind}: {cached})"


def _add_children(
    branch: Tree,
    nodes: Dict[Tuple[int, int], NodeHandle],
    level: int,
    prefix: int,
    depth: int,
) -> None:
    child_level = level + 1
    for bit in (0, 1):
        child_prefix = prefix | (bit << level)
        handle = nodes.get((child_level, child_prefix))
        if handle is None:
            # If leaf level, instead of empty, print the value 0
            if child_level == depth:
                branch.add(f"{child_level}:{child_prefix} (Leaf Value: 0)", style="dim")
            else:
                branch.add(f"{child_level}:{child_prefix} (Empty)", style="dim")
        elif handle.is_leaf:
            branch.add(_label(handle), style="green")
        else:
            sub_branch = branch.add(_label(handle), style="cyan")
            _add_children(sub_branch, nodes, child_level, child_prefix, depth)


def render_tree(tree: SparseMerkleTree) -> Tree:
    """
    Build a rich Tree describing every materialized node of `tree`.

    Args:
        tree: Tree to render

    Returns:
        rich.tree.Tree ready to print
    """
    # Hash first so every inner node handle carries its cached hash
    root_hash = tree.get_root_hash()
    nodes = {(handle.level, handle.prefix): handle for handle in tree.iter_nodes()}

    rendered = Tree(f"0:0 (Root Node: {short_value(root_hash)})", style="bold")
    _add_children(rendered, nodes, 0, 0, tree.depth)
    return rendered


def visualize_tree(tree: SparseMerkleTree, console: Optional[Console] = None) -> None:
    """Print the tree structure to the console."""
    console = console or Console()
    console.print(
        Panel(
            f"Depth: {tree.depth}\nHasher: {tree.hasher.name}\nRoot: {short_value(tree.get_root_hash())}",
            title="Sparse Merkle Tree Visualization",
            border_style="blue",
        )
    )

    if tree.is_empty():
        console.print("[yellow]Empty tree[/yellow]")
        return

    console.print(render_tree(tree))
