#!/usr/bin/env python3
"""
Sparse Merkle Tree CLI

Command-line interface for building sparse merkle trees from JSON entry files,
generating and verifying proofs, and inspecting tree structure.
"""

import sys
import logging
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .errors import SparseMerkleError
from .hasher import available_hashers, get_hasher
from .loader import build_tree, load_entries
from .merkle.tree import SparseMerkleTree
from .models import ProofModel, TreeSummaryModel
from .utils.hex_helpers import field_to_hex, parse_field
from .visualize import visualize_tree

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _tree_from_file(ctx, entries_file: str) -> SparseMerkleTree:
    hasher_name = ctx.obj.get("hasher")
    hasher = get_hasher(hasher_name) if hasher_name else None
    return build_tree(load_entries(entries_file), ctx.obj.get("depth"), hasher)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--depth", "-d", type=int, envvar="SMT_DEFAULT_DEPTH", help="Tree depth")
@click.option(
    "--hasher",
    type=click.Choice(available_hashers()),
    envvar="SMT_HASHER",
    help="Two-to-one hash function",
)
@click.pass_context
def cli(ctx, verbose: bool, depth: Optional[int], hasher: Optional[str]):
    """
    Sparse Merkle Tree CLI - commit to key/value entries and prove them.

    ENTRIES files are JSON objects, either {"entries": [{"path": .., "value": ..}]}
    or a plain {path: value} mapping. Paths and values may be integers,
    decimal strings or 0x hex strings.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["depth"] = depth
    ctx.obj["hasher"] = hasher


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True))
@click.option(
    "--format",
    "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def root(ctx, entries_file: str, format_output: str):
    """Compute the root hash of the tree built from ENTRIES_FILE."""
    try:
        tree = _tree_from_file(ctx, entries_file)
        summary = TreeSummaryModel.from_tree(tree)
    except (SparseMerkleError, ValueError, OSError) as e:
        logger.error(f"Error building tree: {e}")
        raise click.ClickException(str(e))

    if format_output == "json":
        click.echo(summary.model_dump_json(indent=2))
        return

    table = Table(title="Sparse Merkle Tree")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Depth", str(summary.depth))
    table.add_row("Hasher", summary.hasher)
    table.add_row("Leaves", str(summary.leaf_count))
    table.add_row("Empty", str(summary.is_empty))
    console.print(table)
    click.echo(summary.root_hash)


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True))
@click.argument("path", type=str)
@click.pass_context
def get(ctx, entries_file: str, path: str):
    """Print the value stored at PATH."""
    try:
        tree = _tree_from_file(ctx, entries_file)
        value = tree.get_value(parse_field(path))
    except (SparseMerkleError, ValueError, OSError) as e:
        logger.error(f"Error reading value: {e}")
        raise click.ClickException(str(e))
    click.echo(str(value))


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True))
@click.argument("path", type=str)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the proof to this file")
@click.pass_context
def prove(ctx, entries_file: str, path: str, output: Optional[str]):
    """
    Generate a proof for PATH.

    A path that holds no value yields an exclusion proof with value 0.
    """
    try:
        tree = _tree_from_file(ctx, entries_file)
        proof = tree.generate_proof(parse_field(path))
        document = ProofModel.from_proof(proof, tree.hasher.name).model_dump_json(indent=2)
    except (SparseMerkleError, ValueError, OSError) as e:
        logger.error(f"Error generating proof: {e}")
        raise click.ClickException(str(e))

    if output:
        with open(output, "w") as f:
            f.write(document)
        console.print(f"[green]Proof written to {output}[/green]")
    else:
        click.echo(document)


@cli.command()
@click.argument("proof_file", type=click.Path(exists=True))
@click.pass_context
def verify(ctx, proof_file: str):
    """Verify a proof document produced by `prove`."""
    try:
        with open(proof_file, "r") as f:
            model = ProofModel.model_validate_json(f.read())
        hasher = get_hasher(model.hasher)
        valid = model.to_proof().verify_proof(hasher, model.depth)
    except (SparseMerkleError, ValueError, OSError) as e:
        logger.error(f"Error verifying proof: {e}")
        raise click.ClickException(str(e))

    if valid:
        console.print("[green]Proof is valid[/green]")
    else:
        console.print("[red]Proof is invalid[/red]")
        sys.exit(1)


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True))
@click.pass_context
def visualize(ctx, entries_file: str):
    """Visualize the tree built from ENTRIES_FILE."""
    try:
        tree = _tree_from_file(ctx, entries_file)
    except (SparseMerkleError, ValueError, OSError) as e:
        logger.error(f"Error building tree: {e}")
        raise click.ClickException(str(e))
    visualize_tree(tree, console)


@cli.command()
@click.pass_context
def defaults(ctx):
    """Show the empty-subtree hash for every level."""
    try:
        hasher_name = ctx.obj.get("hasher")
        tree = SparseMerkleTree(ctx.obj.get("depth"), get_hasher(hasher_name) if hasher_name else None)
    except SparseMerkleError as e:
        raise click.ClickException(str(e))

    table = Table(title=f"Default Hashes (depth {tree.depth}, {tree.hasher.name})")
    table.add_column("Level", style="cyan")
    table.add_column("Hash", style="green")
    for level, value in enumerate(tree.default_hashes):
        table.add_row(str(level), field_to_hex(value))
    console.print(table)


if __name__ == "__main__":
    cli()
