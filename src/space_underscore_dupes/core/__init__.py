"""Core functionality for the space/underscore duplicate finder."""

from .audio import AudioSignatureProvider, FFmpegSignatureProvider, NullSignatureProvider
from .classifier import is_media_file, media_type
from .deletion import DeletionOutcome, DeletionPolicy
from .errors import (
    ConfigError,
    DeleteFailure,
    DupeFinderError,
    ParseError,
    StaleFileError,
    ToolUnavailable,
)
from .grouper import DuplicateGrouper
from .models import (
    ApplicationConfig,
    AudioHashMode,
    DeleteMode,
    DuplicateCluster,
    FileEntry,
    MatchReason,
    ProbeSignature,
    ScanResult,
)
from .normalizer import NameNormalizer, normalize
from .scanner import FileScanner, get_file_size

__all__ = [
    "ApplicationConfig",
    "AudioHashMode",
    "AudioSignatureProvider",
    "ConfigError",
    "DeleteFailure",
    "DeleteMode",
    "DeletionOutcome",
    "DeletionPolicy",
    "DupeFinderError",
    "DuplicateCluster",
    "DuplicateGrouper",
    "FFmpegSignatureProvider",
    "FileEntry",
    "FileScanner",
    "MatchReason",
    "NameNormalizer",
    "NullSignatureProvider",
    "ParseError",
    "ProbeSignature",
    "ScanResult",
    "StaleFileError",
    "ToolUnavailable",
    "get_file_size",
    "is_media_file",
    "media_type",
    "normalize",
]
