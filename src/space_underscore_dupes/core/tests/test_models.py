"""Tests for Pydantic models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ..models import (
    ApplicationConfig,
    AudioHashMode,
    DeleteMode,
    DuplicateCluster,
    FileEntry,
    MatchReason,
    ProbeSignature,
    ScanResult,
)


def make_entry(name: str, size: int, key: str = "key") -> FileEntry:
    return FileEntry(
        file_path=Path(f"/test/{name}"),
        filename=name,
        size_bytes=size,
        normalized_key=key,
        is_media=True,
    )


class TestFileEntry:
    """Test cases for FileEntry model."""

    def test_entry_is_frozen(self) -> None:
        """Test that entries cannot be modified after creation."""
        entry = make_entry("a.mp3", 100)
        with pytest.raises(ValidationError):
            entry.size_bytes = 5

    def test_negative_size_rejected(self) -> None:
        """Test that sizes must be non-negative."""
        with pytest.raises(ValidationError):
            make_entry("a.mp3", -1)


class TestProbeSignature:
    """Test cases for ProbeSignature model."""

    def test_equal_signatures_hash_equal(self) -> None:
        """Test that signatures can be counted as dictionary keys."""
        sig1 = ProbeSignature(sample_rate="44100", channels="2", bit_rate="", duration_ms=1000)
        sig2 = ProbeSignature(sample_rate="44100", channels="2", bit_rate="", duration_ms=1000)
        assert sig1 == sig2
        assert len({sig1, sig2}) == 1

    def test_str(self) -> None:
        """Test the pipe-separated rendering."""
        sig = ProbeSignature(sample_rate="48000", channels="1", bit_rate="96000", duration_ms=5)
        assert str(sig) == "48000|1|96000|5"


class TestDuplicateCluster:
    """Test cases for DuplicateCluster model."""

    def test_derived_properties(self) -> None:
        """Test size difference, paths and distinct filenames."""
        files = [make_entry("a b.mp3", 100), make_entry("a_b.mp3", 150)]
        cluster = DuplicateCluster(
            normalized_key="abmp3",
            min_size=100,
            max_size=150,
            match_reason=MatchReason.SIZE,
            files=files,
        )

        assert cluster.size_diff == 50
        assert cluster.file_count == 2
        assert cluster.paths == [Path("/test/a b.mp3"), Path("/test/a_b.mp3")]
        assert cluster.filenames == ["a b.mp3", "a_b.mp3"]

    def test_match_reason_labels(self) -> None:
        """Test report labels for every match reason."""
        assert MatchReason.SIZE.label == "size"
        assert MatchReason.AUDIO_PROBE.label == "audio probe"
        assert MatchReason.AUDIO_STREAM.label == "audio hash (stream)"
        assert MatchReason.AUDIO_SAMPLES.label == "audio hash (samples)"


class TestScanResult:
    """Test cases for ScanResult model."""

    def test_duplicate_files_count(self) -> None:
        """Test counting files across clusters."""
        cluster = DuplicateCluster(
            normalized_key="k",
            min_size=1,
            max_size=1,
            match_reason=MatchReason.SIZE,
            files=[make_entry("a b", 1), make_entry("a_b", 1), make_entry("a-b", 1)],
        )
        result = ScanResult(
            scan_path=Path("/test"),
            total_files_found=5,
            media_files_found=3,
            clusters=[cluster],
            scan_duration_seconds=0.1,
        )
        assert result.duplicate_files_count == 3


class TestApplicationConfig:
    """Test cases for ApplicationConfig model."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Test default settings."""
        config = ApplicationConfig(directory=tmp_path)

        assert config.tolerance_bytes == 0
        assert config.recursive is False
        assert config.approx_non_media is False
        assert config.delete_mode is None
        assert config.audio_hash_mode == AudioHashMode.PROBE
        assert config.assume_yes is False

    def test_tolerance_from_digit_string(self, tmp_path: Path) -> None:
        """Test that tolerance accepts plain digit strings."""
        config = ApplicationConfig(directory=tmp_path, tolerance_bytes="1024")
        assert config.tolerance_bytes == 1024

    @pytest.mark.parametrize("value", ["-1", "1.5", "10k", "", " 5", -3])
    def test_invalid_tolerance(self, tmp_path: Path, value: object) -> None:
        """Test that tolerance must be a non-negative integer."""
        with pytest.raises(ValidationError):
            ApplicationConfig(directory=tmp_path, tolerance_bytes=value)

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that the directory must exist."""
        with pytest.raises(ValidationError, match="Directory not found"):
            ApplicationConfig(directory=tmp_path / "missing")

    def test_invalid_delete_mode(self, tmp_path: Path) -> None:
        """Test that unknown delete modes are rejected."""
        with pytest.raises(ValidationError, match="Invalid --delete mode: everything"):
            ApplicationConfig(directory=tmp_path, delete_mode="everything")

    def test_invalid_audio_hash_mode(self, tmp_path: Path) -> None:
        """Test that unknown audio hash modes are rejected."""
        with pytest.raises(ValidationError, match="Invalid --audio-hash mode: fast"):
            ApplicationConfig(directory=tmp_path, audio_hash_mode="fast")

    def test_modes_from_strings(self, tmp_path: Path) -> None:
        """Test that modes are parsed into enums."""
        config = ApplicationConfig(
            directory=tmp_path, delete_mode="smaller", audio_hash_mode="samples"
        )
        assert config.delete_mode == DeleteMode.SMALLER
        assert config.audio_hash_mode == AudioHashMode.SAMPLES

    def test_log_level_normalized(self, tmp_path: Path) -> None:
        """Test that log level names are upper-cased."""
        assert ApplicationConfig(directory=tmp_path, log_level="debug").log_level == "DEBUG"
