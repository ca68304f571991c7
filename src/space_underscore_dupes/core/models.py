"""Pydantic models for the space/underscore duplicate finder."""

import re
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchReason(str, Enum):
    """Evidence that confirmed a duplicate cluster."""

    SIZE = "size"
    AUDIO_PROBE = "audio-probe"
    AUDIO_STREAM = "audio-stream"
    AUDIO_SAMPLES = "audio-samples"

    @property
    def label(self) -> str:
        """Human-readable label used in the text report."""
        return {
            MatchReason.SIZE: "size",
            MatchReason.AUDIO_PROBE: "audio probe",
            MatchReason.AUDIO_STREAM: "audio hash (stream)",
            MatchReason.AUDIO_SAMPLES: "audio hash (samples)",
        }[self]


class AudioHashMode(str, Enum):
    """Audio fallback used when sizes do not match."""

    PROBE = "probe"
    STREAM = "stream"
    SAMPLES = "samples"
    OFF = "off"


class DeleteMode(str, Enum):
    """Which side of a duplicate cluster gets removed."""

    UNDERSCORES = "underscores"
    SPACES = "spaces"
    SMALLER = "smaller"
    LARGER = "larger"


class FileEntry(BaseModel):
    """A single file discovered during the scan."""

    model_config = ConfigDict(frozen=True)

    file_path: Path = Field(..., description="Path to the file as enumerated")
    filename: str = Field(..., description="Just the filename")
    size_bytes: int = Field(..., ge=0, description="File size in bytes")
    normalized_key: str = Field(..., description="Spelling-insensitive comparison key")
    is_media: bool = Field(default=False, description="Extension is audio, video or image")

    def __str__(self) -> str:
        return f"{self.filename} ({self.size_bytes} bytes)"


class ProbeSignature(BaseModel):
    """Coarse audio fingerprint taken from ffprobe."""

    model_config = ConfigDict(frozen=True)

    sample_rate: str = Field(default="", description="Sample rate of the first audio stream")
    channels: str = Field(default="", description="Channel count of the first audio stream")
    bit_rate: str = Field(default="", description="First non-empty reported bit rate")
    duration_ms: int = Field(..., ge=0, description="Container duration rounded to milliseconds")

    def __str__(self) -> str:
        return f"{self.sample_rate}|{self.channels}|{self.bit_rate}|{self.duration_ms}"


class DuplicateCluster(BaseModel):
    """Files sharing one normalized key that were confirmed as duplicates."""

    normalized_key: str = Field(..., description="Common normalized key")
    min_size: int = Field(..., ge=0, description="Smallest member size in bytes")
    max_size: int = Field(..., ge=0, description="Largest member size in bytes")
    match_reason: MatchReason = Field(..., description="Evidence that confirmed duplication")
    files: list[FileEntry] = Field(default_factory=list, description="Members sorted by path")

    @property
    def size_diff(self) -> int:
        """Absolute byte difference between the largest and smallest member."""
        return self.max_size - self.min_size

    @property
    def paths(self) -> list[Path]:
        """Member paths in report order."""
        return [entry.file_path for entry in self.files]

    @property
    def filenames(self) -> list[str]:
        """Distinct member basenames, sorted."""
        return sorted({entry.filename for entry in self.files})

    @property
    def file_count(self) -> int:
        """Number of files in this cluster."""
        return len(self.files)

    def __str__(self) -> str:
        return (
            f"Duplicate cluster '{self.normalized_key}' "
            f"({self.file_count} files, match: {self.match_reason.value})"
        )


class ScanResult(BaseModel):
    """Results from one scan of a directory."""

    scan_path: Path = Field(..., description="Directory that was scanned")
    recursive: bool = Field(default=False, description="Whether subdirectories were scanned")
    tolerance_bytes: int = Field(default=0, ge=0, description="Size tolerance used")
    total_files_found: int = Field(..., ge=0, description="Files measured successfully")
    media_files_found: int = Field(..., ge=0, description="Media files among them")
    stale_files: int = Field(default=0, ge=0, description="Files dropped because they vanished")
    clusters: list[DuplicateCluster] = Field(
        default_factory=list, description="Confirmed duplicate clusters, sorted by key"
    )
    scan_duration_seconds: float = Field(..., ge=0, description="Time taken to scan")
    scan_timestamp: datetime = Field(
        default_factory=datetime.now, description="When the scan was performed"
    )

    @property
    def duplicate_files_count(self) -> int:
        """Total number of files that belong to a duplicate cluster."""
        return sum(cluster.file_count for cluster in self.clusters)

    def __str__(self) -> str:
        return (
            f"Scan of {self.scan_path}: {self.total_files_found} files, "
            f"{len(self.clusters)} duplicate clusters"
        )


_DIGITS = re.compile(r"^[0-9]+$")


class ApplicationConfig(BaseModel):
    """Configuration settings for one run."""

    directory: Path = Field(default=Path("."), description="Directory to scan")
    tolerance_bytes: int = Field(default=0, ge=0, description="Maximum size difference in bytes")
    recursive: bool = Field(default=False, description="Scan the full subtree")
    approx_non_media: bool = Field(
        default=False, description="Apply the size tolerance to non-media files too"
    )
    delete_mode: DeleteMode | None = Field(default=None, description="Deletion mode, if any")
    audio_hash_mode: AudioHashMode = Field(
        default=AudioHashMode.PROBE, description="Audio fallback when sizes do not match"
    )
    assume_yes: bool = Field(default=False, description="Skip deletion prompts")
    output_format: str = Field(default="text", description="Report format (text, json)")
    log_level: str = Field(default="WARNING", description="Logging level")
    ffmpeg_path: Path | None = Field(default=None, description="Explicit ffmpeg executable")
    ffprobe_path: Path | None = Field(default=None, description="Explicit ffprobe executable")
    tool_timeout_seconds: float = Field(
        default=300.0, gt=0, description="Timeout for each external tool invocation"
    )

    @field_validator("tolerance_bytes", mode="before")
    @classmethod
    def validate_tolerance(cls, v: object) -> object:
        """Accept only non-negative integers written as plain digits."""
        if isinstance(v, bool):
            raise ValueError(f"Tolerance must be a non-negative integer (bytes): {v}")
        if isinstance(v, str):
            if not _DIGITS.match(v):
                raise ValueError(f"Tolerance must be a non-negative integer (bytes): {v}")
            return int(v)
        return v

    @field_validator("delete_mode", mode="before")
    @classmethod
    def validate_delete_mode(cls, v: object) -> object:
        """Reject unknown deletion modes with a readable message."""
        if isinstance(v, str) and v not in {mode.value for mode in DeleteMode}:
            raise ValueError(f"Invalid --delete mode: {v} (use underscores|spaces|smaller|larger)")
        return v

    @field_validator("audio_hash_mode", mode="before")
    @classmethod
    def validate_audio_hash_mode(cls, v: object) -> object:
        """Reject unknown audio hash modes with a readable message."""
        if isinstance(v, str) and v not in {mode.value for mode in AudioHashMode}:
            raise ValueError(f"Invalid --audio-hash mode: {v} (use probe|stream|samples|off)")
        return v

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: Path) -> Path:
        """Ensure the directory exists."""
        if not v.is_dir():
            raise ValueError(f"Directory not found: {v}")
        return v

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Ensure the output format is known."""
        if v not in ("text", "json"):
            raise ValueError(f"Invalid output format: {v} (use text|json)")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Invalid log level: {v}")
        return level
