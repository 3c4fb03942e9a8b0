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
# btrfs-tree-clone/src/btrfs_tree_clone/types.py

"""Type definitions for subvolume hierarchies."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Literal


NodeKind = Literal["directory", "subvolume"]

DIRECTORY: Final = "directory"
SUBVOLUME: Final = "subvolume"


@dataclass(frozen=True)
class HierarchyNode:
    """A directory or subvolume, relative to the hierarchy root."""
    path: str
    kind: NodeKind

    def to_dict(self) -> dict:
        return {'path': self.path, 'kind': self.kind}


class NodeMap:
    """Absolute path -> kind, where a subvolume is never demoted.

    Recording ``subvolume`` over ``directory`` replaces it; recording
    ``directory`` over ``subvolume`` is ignored. The result therefore does
    not depend on the order in which paths are recorded or merged.
    """

    def __init__(self):
        self._kinds: dict[str, NodeKind] = {}

    def record(self, abs_path: str, kind: NodeKind) -> None:
        if self._kinds.get(abs_path) == SUBVOLUME:
            return
        self._kinds[abs_path] = kind

    def merge(self, other: "NodeMap") -> None:
        for abs_path, kind in other.items():
            self.record(abs_path, kind)

    def items(self):
        return self._kinds.items()

    def get(self, abs_path: str) -> NodeKind | None:
        return self._kinds.get(abs_path)

    def __contains__(self, abs_path: str) -> bool:
        return abs_path in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)


@dataclass
class Hierarchy:
    """A resolved root subvolume and, once discovered, its node list."""
    local_path: Path
    abs_path: str
    nodes: tuple[HierarchyNode, ...] | None = field(default=None)

    def to_dict(self) -> dict:
        return {
            'local_path': str(self.local_path),
            'abs_path': self.abs_path,
            'nodes': None if self.nodes is None
                     else [n.to_dict() for n in self.nodes],
        }
