# Author: PB
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_replicate.py

"""Unit tests for replicating a hierarchy into a destination root."""

from unittest.mock import Mock

import pytest

from btrfs_tree_clone.btrfs import BtrfsCommand
from btrfs_tree_clone.errors import (
    DirectoryCreationFailed,
    NotASubvolume,
    ReplicationVerificationFailed,
    SubvolumeCreationFailed,
)
from btrfs_tree_clone.hierarchy import discover, replicate
from btrfs_tree_clone.types import DIRECTORY, SUBVOLUME, HierarchyNode
from tests.fixtures.fake_btrfs import FakeBtrfs


SOURCE_LAYOUT = [
    "/vol/src",
    "/vol/src/a/b",
    "/vol/src/a/b/c",
    "/vol/src/g",
    "/vol/src/g/h/i",
]


@pytest.fixture
def fake(tmp_path):
    fake = FakeBtrfs(tmp_path)
    for abs_path in SOURCE_LAYOUT:
        fake.add_subvolume(abs_path)
    return fake


@pytest.fixture
def source_nodes(fake):
    return discover(fake.local_path("/vol/src"), "/vol/src", fake)


def snapshot_state(fake, root):
    dirs = sorted(p.relative_to(root).as_posix()
                  for p in root.rglob("*") if p.is_dir())
    return dirs, sorted(fake.subvolumes)


class TestReplicate:

    def test_creates_destination_and_nodes(self, fake, source_nodes, tmp_path):
        dest = tmp_path / "vol" / "dst"
        hierarchy = replicate(dest, source_nodes, fake)

        assert hierarchy.abs_path == "/vol/dst"
        assert hierarchy.local_path == dest
        assert hierarchy.nodes is None
        assert (dest / "a").is_dir()
        assert "/vol/dst/a" not in fake.subvolumes
        assert {"/vol/dst", "/vol/dst/a/b", "/vol/dst/a/b/c", "/vol/dst/g",
                "/vol/dst/g/h/i"} <= fake.subvolumes

    def test_round_trip(self, fake, source_nodes, tmp_path):
        dest = tmp_path / "vol" / "dst"
        replicate(dest, source_nodes, fake)

        copied = discover(dest, "/vol/dst", fake)
        assert set(copied) == set(source_nodes)

    def test_second_run_changes_nothing(self, fake, source_nodes, tmp_path):
        dest = tmp_path / "vol" / "dst"
        replicate(dest, source_nodes, fake)
        before = snapshot_state(fake, tmp_path)
        creates = fake.count("create")

        replicate(dest, source_nodes, fake)

        assert snapshot_state(fake, tmp_path) == before
        assert fake.count("create") == creates

    def test_existing_destination_and_directory(self, fake, tmp_path):
        dest = fake.add_subvolume("/vol/dst")
        (dest / "x").mkdir()

        hierarchy = replicate(dest, [HierarchyNode("x", DIRECTORY)], fake)

        assert hierarchy.abs_path == "/vol/dst"
        assert (dest / "x").is_dir()
        assert fake.count("create") == 0

    def test_empty_node_list(self, fake, tmp_path):
        dest = tmp_path / "vol" / "empty"
        hierarchy = replicate(dest, [], fake)

        assert hierarchy.abs_path == "/vol/empty"
        assert list(dest.iterdir()) == []


class TestReplicateFailures:
    """Failures stop replication and leave earlier nodes in place."""

    def test_directory_error_aborts(self, fake, tmp_path):
        dest = tmp_path / "vol" / "dst"
        nodes = [
            HierarchyNode("a", DIRECTORY),
            HierarchyNode("x/y", DIRECTORY),
            HierarchyNode("z", DIRECTORY),
        ]
        with pytest.raises(DirectoryCreationFailed) as exc_info:
            replicate(dest, nodes, fake)

        assert exc_info.value.path == str(dest / "x" / "y")
        assert (dest / "a").is_dir()
        assert not (dest / "z").exists()

    def test_subvolume_error_aborts(self, fake, tmp_path):
        dest = tmp_path / "vol" / "dst"
        fake.fail_create.add("/vol/dst/b")
        nodes = [
            HierarchyNode("a", SUBVOLUME),
            HierarchyNode("b", SUBVOLUME),
            HierarchyNode("c", SUBVOLUME),
        ]
        with pytest.raises(SubvolumeCreationFailed, match="Read-only"):
            replicate(dest, nodes, fake)

        assert "/vol/dst/a" in fake.subvolumes
        assert not (dest / "c").exists()

    def test_destination_creation_error(self, fake, tmp_path):
        dest = tmp_path / "missing" / "parent" / "dst"
        with pytest.raises(SubvolumeCreationFailed):
            replicate(dest, [], fake)

    def test_plain_directory_destination_is_refused(self, fake, tmp_path):
        dest = tmp_path / "vol" / "plain"
        dest.mkdir()
        with pytest.raises(SubvolumeCreationFailed, match="already exists"):
            replicate(dest, [], fake)

    def test_unverifiable_destination(self, tmp_path):
        btrfs = Mock(spec=BtrfsCommand)
        btrfs.is_subvolume.return_value = False
        btrfs.show_abs_path.side_effect = NotASubvolume(
            tmp_path / "dst", "ERROR: Not a Btrfs subvolume\n")

        with pytest.raises(ReplicationVerificationFailed,
                           match="Not a Btrfs subvolume"):
            replicate(tmp_path / "dst", [HierarchyNode("a", DIRECTORY)], btrfs)

        btrfs.create_subvolume.assert_called_once_with(tmp_path / "dst")
        assert not (tmp_path / "dst" / "a").exists()
