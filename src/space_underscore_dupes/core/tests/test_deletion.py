"""Tests for the deletion policy."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from ..deletion import DeletionPolicy
from ..models import DeleteMode, DuplicateCluster, FileEntry, MatchReason
from ..normalizer import normalize


class TestDeletionPolicy:
    """Test cases for DeletionPolicy."""

    @pytest.fixture(autouse=True)
    def _directory(self, tmp_path: Path) -> None:
        self.directory = tmp_path

    def create_cluster(self, sizes: dict[str, int]) -> DuplicateCluster:
        """Create a cluster backed by real files, members sorted by path."""
        files = []
        for filename, size in sorted(sizes.items()):
            file_path = self.directory / filename
            file_path.write_bytes(b"x" * size)
            files.append(
                FileEntry(
                    file_path=file_path,
                    filename=filename,
                    size_bytes=size,
                    normalized_key=normalize(filename),
                    is_media=True,
                )
            )
        return DuplicateCluster(
            normalized_key=files[0].normalized_key,
            min_size=min(sizes.values()),
            max_size=max(sizes.values()),
            match_reason=MatchReason.SIZE,
            files=files,
        )

    def names(self, paths: list[Path]) -> list[str]:
        return [path.name for path in paths]

    def test_select_underscores(self) -> None:
        """Test that underscore-only spellings are selected."""
        cluster = self.create_cluster(
            {"my song.mp3": 1, "my_song.mp3": 1, "my_song two.mp3": 1, "mysong.mp3": 1}
        )

        selected = DeletionPolicy().select(cluster, DeleteMode.UNDERSCORES)

        assert self.names(selected) == ["my_song.mp3"]

    def test_select_spaces(self) -> None:
        """Test that any spelling with a space is selected."""
        cluster = self.create_cluster(
            {"my song.mp3": 1, "my_song.mp3": 1, "my_song two.mp3": 1, "mysong.mp3": 1}
        )

        selected = DeletionPolicy().select(cluster, DeleteMode.SPACES)

        assert sorted(self.names(selected)) == ["my song.mp3", "my_song two.mp3"]

    def test_select_smaller_keeps_largest(self) -> None:
        """Test that smaller mode keeps only the largest member."""
        cluster = self.create_cluster({"a b.mp3": 20, "a_b.mp3": 30, "a-b.mp3": 10})

        selected = DeletionPolicy().select(cluster, DeleteMode.SMALLER)

        assert self.names(selected) == ["a-b.mp3", "a b.mp3"]

    def test_select_larger_keeps_smallest(self) -> None:
        """Test that larger mode keeps only the smallest member."""
        cluster = self.create_cluster({"a b.mp3": 20, "a_b.mp3": 30, "a-b.mp3": 10})

        selected = DeletionPolicy().select(cluster, DeleteMode.LARGER)

        assert self.names(selected) == ["a b.mp3", "a_b.mp3"]

    def test_select_ties_are_deterministic(self) -> None:
        """Test that exactly one member survives a size tie, chosen by path order."""
        cluster = self.create_cluster({"a b.mp3": 10, "a_b.mp3": 10, "a-b.mp3": 10})
        policy = DeletionPolicy()

        smaller = policy.select(cluster, DeleteMode.SMALLER)
        larger = policy.select(cluster, DeleteMode.LARGER)

        assert self.names(smaller) == ["a b.mp3", "a-b.mp3"]
        assert self.names(larger) == ["a-b.mp3", "a_b.mp3"]
        assert policy.select(cluster, DeleteMode.SMALLER) == smaller

    def test_apply_with_assume_yes(self) -> None:
        """Test that assume_yes deletes without asking."""
        cluster = self.create_cluster({"a b.mp3": 20, "a_b.mp3": 30, "a-b.mp3": 10})
        confirm = Mock(return_value=False)

        outcome = DeletionPolicy(assume_yes=True).apply(cluster, DeleteMode.SMALLER, confirm)

        confirm.assert_not_called()
        assert self.names(outcome.deleted) == ["a-b.mp3", "a b.mp3"]
        assert not (self.directory / "a b.mp3").exists()
        assert not (self.directory / "a-b.mp3").exists()
        assert (self.directory / "a_b.mp3").exists()

    def test_apply_asks_per_file(self) -> None:
        """Test that each selected file passes through the confirm gate."""
        cluster = self.create_cluster({"a b.mp3": 20, "a_b.mp3": 30, "a-b.mp3": 10})
        confirm = Mock(side_effect=lambda path: path.name == "a b.mp3")

        outcome = DeletionPolicy().apply(cluster, DeleteMode.SMALLER, confirm)

        assert confirm.call_count == 2
        assert self.names(outcome.deleted) == ["a b.mp3"]
        assert self.names(outcome.skipped) == ["a-b.mp3"]
        assert (self.directory / "a-b.mp3").exists()

    def test_apply_without_gate_deletes_nothing(self) -> None:
        """Test that no confirm gate and no assume_yes means nothing is removed."""
        cluster = self.create_cluster({"a b.mp3": 1, "a_b.mp3": 1})

        outcome = DeletionPolicy().apply(cluster, DeleteMode.UNDERSCORES)

        assert outcome.deleted == []
        assert self.names(outcome.skipped) == ["a_b.mp3"]

    def test_apply_failure_does_not_stop_others(self) -> None:
        """Test that a failed removal is reported and the rest continue."""
        cluster = self.create_cluster({"a b.mp3": 20, "a_b.mp3": 30, "a-b.mp3": 10})
        (self.directory / "a-b.mp3").unlink()

        outcome = DeletionPolicy(assume_yes=True).apply(cluster, DeleteMode.SMALLER)

        assert self.names(outcome.deleted) == ["a b.mp3"]
        assert len(outcome.failed) == 1
        assert outcome.failed[0].path.name == "a-b.mp3"
        assert "Failed to delete" in str(outcome.failed[0])

    @patch("space_underscore_dupes.core.deletion.os.remove")
    def test_apply_permission_denied(self, mock_remove: Mock) -> None:
        """Test that permission errors are recorded per file."""
        mock_remove.side_effect = PermissionError(13, "Permission denied")
        cluster = self.create_cluster({"a b.mp3": 1, "a_b.mp3": 1})

        outcome = DeletionPolicy(assume_yes=True).apply(cluster, DeleteMode.SPACES)

        assert outcome.deleted == []
        assert outcome.failed[0].reason == "Permission denied"
