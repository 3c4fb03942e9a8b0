# Author: PB
# Maintainer: PB
# Original date: 2026.10.18
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# btrfs-tree-clone/src/btrfs_tree_clone/hierarchy.py

"""Discover a nested subvolume hierarchy and replicate it elsewhere."""

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from .btrfs import BtrfsCommand
from .errors import (
    DirectoryCreationFailed,
    NotASubvolume,
    ReplicationVerificationFailed,
)
from .types import DIRECTORY, SUBVOLUME, Hierarchy, HierarchyNode, NodeMap

log = logging.getLogger(__name__)


def resolve(path: Path | str, btrfs: BtrfsCommand) -> str:
    """Absolute path of the subvolume at ``path``; raises NotASubvolume."""
    return btrfs.show_abs_path(path)


def open_hierarchy(path: Path | str, btrfs: BtrfsCommand) -> Hierarchy:
    """Resolve ``path`` into a Hierarchy whose nodes are not yet read."""
    path = Path(path)
    return Hierarchy(local_path=path, abs_path=resolve(path, btrfs))


def _is_below(abs_path: str, root: str) -> bool:
    prefix = root.rstrip("/") + "/"
    return abs_path != root and abs_path.startswith(prefix)


def _relative_to(abs_path: str, root: str) -> str:
    return abs_path[len(root):].lstrip("/")


def _build_node_map(local_path: Path, abs_path: str, btrfs: BtrfsCommand,
                    visited: set[str]) -> NodeMap:
    """Map every subvolume below ``abs_path`` and the directories leading
    to it.

    Each discovered subvolume is listed again as a root of its own, since
    not every btrfs-progs version reports nested subvolumes from the
    outer listing.
    """
    visited.add(abs_path)
    node_map = NodeMap()

    for child_abs_path in btrfs.list_children(local_path):
        if not _is_below(child_abs_path, abs_path):
            log.warning("skipping %s: not below %s", child_abs_path, abs_path)
            continue

        node_map.record(child_abs_path, SUBVOLUME)
        for ancestor in PurePosixPath(child_abs_path).parents:
            ancestor = str(ancestor)
            if ancestor == abs_path:
                break
            node_map.record(ancestor, DIRECTORY)

        if child_abs_path in visited:
            continue
        child_local_path = local_path / _relative_to(child_abs_path, abs_path)
        log.debug("descending into %s (%s)", child_local_path, child_abs_path)
        node_map.merge(
            _build_node_map(child_local_path, child_abs_path, btrfs, visited)
        )

    return node_map


def discover(local_path: Path | str, abs_path: str,
             btrfs: BtrfsCommand) -> tuple[HierarchyNode, ...]:
    """Return the nodes below a root subvolume, parents before children.

    Paths are relative to ``abs_path``. Sorting by path length puts every
    ancestor before its descendants because an ancestor is always a
    strict prefix of them.
    """
    node_map = _build_node_map(Path(local_path), abs_path, btrfs, set())

    nodes = [
        HierarchyNode(path=_relative_to(path, abs_path), kind=kind)
        for path, kind in node_map.items()
    ]
    for node in nodes:
        assert node.path, f"root {abs_path} listed as its own node"
        assert not node.path.startswith("/"), f"absolute node {node.path}"

    nodes.sort(key=lambda n: (len(n.path), n.path))
    log.debug("discovered %d nodes below %s", len(nodes), abs_path)
    return tuple(nodes)


def read_hierarchy(hierarchy: Hierarchy,
                   btrfs: BtrfsCommand) -> tuple[HierarchyNode, ...]:
    """Populate ``hierarchy.nodes`` on first call and return them."""
    if hierarchy.nodes is None:
        hierarchy.nodes = discover(hierarchy.local_path, hierarchy.abs_path,
                                   btrfs)
    return hierarchy.nodes


def _make_directory(path: Path) -> bool:
    try:
        path.mkdir()
    except FileExistsError:
        return False
    except OSError as e:
        raise DirectoryCreationFailed(path, e.strerror or str(e)) from e
    return True


def _make_subvolume(path: Path, btrfs: BtrfsCommand) -> bool:
    if btrfs.is_subvolume(path):
        return False
    btrfs.create_subvolume(path)
    return True


def replicate(dest_path: Path | str, nodes: Iterable[HierarchyNode],
              btrfs: BtrfsCommand) -> Hierarchy:
    """Create ``dest_path`` as a subvolume and rebuild ``nodes`` inside it.

    Nodes must be ordered parents first, as returned by discover().
    Anything that already exists is left alone, so a failed run can be
    repeated. Nothing is rolled back on failure.
    """
    dest_path = Path(dest_path)

    if _make_subvolume(dest_path, btrfs):
        log.info("created subvolume %s", dest_path)
    else:
        log.debug("reusing subvolume %s", dest_path)

    try:
        abs_path = resolve(dest_path, btrfs)
    except NotASubvolume as e:
        raise ReplicationVerificationFailed(dest_path, e.diagnostic) from e

    created = total = 0
    for node in nodes:
        total += 1
        child_path = dest_path / node.path
        if node.kind == DIRECTORY:
            made = _make_directory(child_path)
        else:
            made = _make_subvolume(child_path, btrfs)
        if made:
            created += 1
            log.info("created %s %s", node.kind, child_path)
        else:
            log.debug("%s %s already exists", node.kind, child_path)

    log.info("replicated %d nodes into %s (%d new)", total, dest_path, created)
    return Hierarchy(local_path=dest_path, abs_path=abs_path)


def compare_nodes(expected: Iterable[HierarchyNode],
                  actual: Iterable[HierarchyNode]
                  ) -> tuple[list[HierarchyNode], list[HierarchyNode]]:
    """Return (missing, unexpected) nodes, each sorted by path."""
    expected, actual = set(expected), set(actual)
    missing = sorted(expected - actual, key=lambda n: n.path)
    unexpected = sorted(actual - expected, key=lambda n: n.path)
    return missing, unexpected
