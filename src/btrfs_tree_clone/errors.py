# Author: PB
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# btrfs-tree-clone/src/btrfs_tree_clone/errors.py

"""Errors raised while resolving, discovering or replicating hierarchies."""

from pathlib import Path


class BtrfsTreeError(RuntimeError):
    """Base error; ``diagnostic`` is the text reported to the user."""

    def __init__(self, path: Path | str, diagnostic: str):
        self.path = str(path)
        self.diagnostic = diagnostic.strip()
        super().__init__(f"{self.path}: {self.diagnostic}")


class NotASubvolume(BtrfsTreeError):
    """`btrfs subvolume show` refused the path."""


class ExternalToolUnavailable(BtrfsTreeError):
    """The btrfs binary could not be launched."""


class ExternalToolTimeout(ExternalToolUnavailable):
    """The btrfs binary did not exit within the configured timeout."""


class ChildListingFailed(BtrfsTreeError):
    """`btrfs subvolume list` returned non-zero."""


class DirectoryCreationFailed(BtrfsTreeError):
    pass


class SubvolumeCreationFailed(BtrfsTreeError):
    pass


class ReplicationVerificationFailed(BtrfsTreeError):
    """The destination root does not resolve after being created."""
