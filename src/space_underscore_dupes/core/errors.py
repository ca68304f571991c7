"""Error kinds raised and reported by the duplicate finder."""

from dataclasses import dataclass
from pathlib import Path


class DupeFinderError(Exception):
    """Base class for all duplicate finder errors."""


class ConfigError(DupeFinderError):
    """Invalid command-line value or configuration. Fatal before scanning."""


class ToolUnavailable(DupeFinderError):
    """The external audio tool could not be located."""

    def __init__(self, tool: str):
        super().__init__(f"{tool} not found (preferred install path or PATH)")
        self.tool = tool


class StaleFileError(DupeFinderError):
    """A file vanished or became unreadable between enumeration and query."""

    def __init__(self, path: Path, reason: str = ""):
        message = f"File vanished or is unreadable: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class ParseError(DupeFinderError):
    """External tool output could not be parsed."""


@dataclass
class DeleteFailure:
    """A file that could not be removed."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Failed to delete {self.path}: {self.reason}"
