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
# btrfs-tree-clone/src/btrfs_tree_clone/btrfs.py

"""Thin wrapper around the btrfs command line tool."""

import logging
import subprocess
from pathlib import Path

from .errors import (
    ChildListingFailed,
    ExternalToolTimeout,
    ExternalToolUnavailable,
    NotASubvolume,
    SubvolumeCreationFailed,
)

log = logging.getLogger(__name__)

# `btrfs subvolume list -t` prints a column header and a dashed rule
LIST_HEADER_LINES = 2


class BtrfsCommand:
    """Run `btrfs subvolume` queries, one subprocess per call."""

    def __init__(self, binary: str = "btrfs", sudo: bool = False,
                 timeout: float | None = None):
        self.binary = binary
        self.sudo = sudo
        self.timeout = timeout

    def _run(self, path: Path | str, *args: str) -> subprocess.CompletedProcess:
        cmd = ["sudo"] if self.sudo else []
        cmd += [self.binary, *args, str(path)]
        log.debug("running %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, capture_output=True,
                                  timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ExternalToolTimeout(
                path, f"{' '.join(cmd)} timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise ExternalToolUnavailable(
                path, f"cannot run {self.binary}: {e}"
            ) from e

    @staticmethod
    def _stderr(result: subprocess.CompletedProcess) -> str:
        text = result.stderr.decode("utf-8", errors="replace")
        return text or f"exit status {result.returncode}"

    def show_abs_path(self, path: Path | str) -> str:
        """Return the subvolume's path relative to the filesystem top level.

        The returned path always starts with ``/``. Raises NotASubvolume
        if btrfs does not recognise ``path`` as a subvolume.
        """
        result = self._run(path, "subvolume", "show")
        if result.returncode != 0:
            raise NotASubvolume(path, self._stderr(result))
        lines = result.stdout.decode("utf-8", errors="replace").splitlines()
        if not lines or not lines[0].strip():
            raise NotASubvolume(path, "btrfs subvolume show printed nothing")
        # older btrfs-progs print the path without its leading slash
        return "/" + lines[0].strip().strip("/")

    def is_subvolume(self, path: Path | str) -> bool:
        try:
            self.show_abs_path(path)
        except NotASubvolume:
            return False
        return True

    def list_children(self, path: Path | str) -> list[str]:
        """Absolute paths of the subvolumes below ``path``, sorted by path."""
        result = self._run(path, "subvolume", "list", "-ot", "--sort=path")
        if result.returncode != 0:
            raise ChildListingFailed(path, self._stderr(result))
        output = result.stdout.decode("utf-8", errors="replace")
        children = []
        for line in output.splitlines()[LIST_HEADER_LINES:]:
            fields = line.split()
            if not fields:
                continue
            child = fields[-1]
            children.append(child if child.startswith("/") else "/" + child)
        return children

    def create_subvolume(self, path: Path | str) -> None:
        result = self._run(path, "subvolume", "create")
        if result.returncode != 0:
            raise SubvolumeCreationFailed(path, self._stderr(result))
