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
# btrfs-tree-clone/src/btrfs_tree_clone/__init__.py

"""Discover nested btrfs subvolume hierarchies and replicate their layout."""

from .btrfs import BtrfsCommand
from .errors import (
    BtrfsTreeError,
    ChildListingFailed,
    DirectoryCreationFailed,
    ExternalToolTimeout,
    ExternalToolUnavailable,
    NotASubvolume,
    ReplicationVerificationFailed,
    SubvolumeCreationFailed,
)
from .hierarchy import (
    compare_nodes,
    discover,
    open_hierarchy,
    read_hierarchy,
    replicate,
    resolve,
)
from .types import DIRECTORY, SUBVOLUME, Hierarchy, HierarchyNode, NodeKind, NodeMap

__version__ = "0.1.0"

__all__ = [
    "BtrfsCommand",
    "resolve",
    "open_hierarchy",
    "discover",
    "read_hierarchy",
    "replicate",
    "compare_nodes",
    "Hierarchy",
    "HierarchyNode",
    "NodeKind",
    "NodeMap",
    "DIRECTORY",
    "SUBVOLUME",
    "BtrfsTreeError",
    "NotASubvolume",
    "ExternalToolUnavailable",
    "ExternalToolTimeout",
    "ChildListingFailed",
    "DirectoryCreationFailed",
    "SubvolumeCreationFailed",
    "ReplicationVerificationFailed",
]
