# Author: PB
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# btrfs-tree-clone/src/btrfs_tree_clone/cli.py

"""Command line interface for btrfs-tree-clone."""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .btrfs import BtrfsCommand
from .errors import BtrfsTreeError
from .hierarchy import compare_nodes, open_hierarchy, read_hierarchy, replicate
from .types import SUBVOLUME, Hierarchy

app = typer.Typer(
    help="Copy the layout of nested btrfs subvolumes to a new root"
)
console = Console()
err_console = Console(stderr=True)

FORMATS = ("table", "json", "summary")


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )


def _check_format(output_format: str) -> None:
    if output_format not in FORMATS:
        typer.echo(f"Unknown format: {output_format}", err=True)
        raise typer.Exit(1)


@app.command()
def show(
    source: Path = typer.Argument(..., help="Root subvolume to inspect"),
    output_format: str = typer.Option("table", "--format", "-f",
                                      help="Output format: table, json, summary"),
    sudo: bool = typer.Option(False, "--sudo", help="Run btrfs through sudo"),
    btrfs_bin: str = typer.Option("btrfs", "--btrfs", help="btrfs binary"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait for each btrfs call"),
    verbose: bool = typer.Option(False, "--verbose", "-v",
                                 help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Print the directories and subvolumes nested below SOURCE."""
    _check_format(output_format)
    _configure_logging(verbose, debug)
    btrfs = BtrfsCommand(binary=btrfs_bin, sudo=sudo, timeout=timeout)
    try:
        hierarchy = open_hierarchy(source, btrfs)
        read_hierarchy(hierarchy, btrfs)
    except BtrfsTreeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _print_hierarchy(hierarchy, output_format)


@app.command()
def clone(
    source: Path = typer.Argument(..., help="Root subvolume to copy from"),
    dest: Path = typer.Argument(..., help="Subvolume to build the copy in"),
    output_format: str = typer.Option("table", "--format", "-f",
                                      help="Output format: table, json, summary"),
    verify: bool = typer.Option(True, "--verify/--no-verify",
                                help="Re-read DEST and compare with SOURCE"),
    sudo: bool = typer.Option(False, "--sudo", help="Run btrfs through sudo"),
    btrfs_bin: str = typer.Option("btrfs", "--btrfs", help="btrfs binary"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait for each btrfs call"),
    verbose: bool = typer.Option(False, "--verbose", "-v",
                                 help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Recreate the subvolume layout of SOURCE inside DEST.

    Only directories and subvolumes are created; file contents are not
    copied. Existing parts of DEST are reused.
    """
    _check_format(output_format)
    _configure_logging(verbose, debug)
    btrfs = BtrfsCommand(binary=btrfs_bin, sudo=sudo, timeout=timeout)
    try:
        source_hierarchy = open_hierarchy(source, btrfs)
        nodes = read_hierarchy(source_hierarchy, btrfs)
        if verbose or debug:
            console.print(f"[blue]Source:[/blue] {source_hierarchy.abs_path} "
                          f"({len(nodes)} nodes)")

        dest_hierarchy = replicate(dest, nodes, btrfs)
        if verify:
            read_hierarchy(dest_hierarchy, btrfs)
    except BtrfsTreeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not verify:
        console.print(f"[green]Replicated {len(nodes)} nodes into "
                      f"{dest_hierarchy.abs_path}[/green]")
        return

    _print_hierarchy(dest_hierarchy, output_format)

    missing, unexpected = compare_nodes(nodes, dest_hierarchy.nodes)
    if missing or unexpected:
        for node in missing:
            typer.echo(f"Missing in destination: {node.path} ({node.kind})",
                       err=True)
        for node in unexpected:
            typer.echo(f"Not in source: {node.path} ({node.kind})", err=True)
        raise typer.Exit(1)


def _print_hierarchy(hierarchy: Hierarchy, output_format: str) -> None:
    if output_format == "json":
        typer.echo(json.dumps(hierarchy.to_dict(), indent=2))
    elif output_format == "summary":
        _print_summary(hierarchy)
    else:
        _print_table(hierarchy)


def _print_summary(hierarchy: Hierarchy) -> None:
    """Print counts of nodes by kind."""
    by_kind = Counter(n.kind for n in hierarchy.nodes)
    depth = max((n.path.count("/") + 1 for n in hierarchy.nodes), default=0)

    console.print(f"\n[bold]{hierarchy.abs_path}[/bold] "
                  f"({hierarchy.local_path})")
    console.print(f"  Subvolumes: {by_kind.get('subvolume', 0)}")
    console.print(f"  Directories: {by_kind.get('directory', 0)}")
    console.print(f"  Depth: {depth}")


def _print_table(hierarchy: Hierarchy) -> None:
    table = Table(title=f"{hierarchy.abs_path} ({hierarchy.local_path})")
    table.add_column("Kind", style="cyan")
    table.add_column("Path", style="green")

    for node in hierarchy.nodes:
        style = "bold" if node.kind == SUBVOLUME else None
        table.add_row(node.kind, node.path, style=style)

    if not hierarchy.nodes:
        table.add_row("", "(no nested subvolumes)")

    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
