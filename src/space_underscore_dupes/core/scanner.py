"""File scanning module for building the in-memory file index."""

import logging
import os
import time
from collections.abc import Generator
from pathlib import Path

from .classifier import is_media_file
from .errors import StaleFileError
from .models import FileEntry
from .normalizer import NameNormalizer

logger = logging.getLogger(__name__)


def get_file_size(file_path: Path) -> int:
    """
    Get the size of a file in bytes.

    Raises:
        OSError: If the file vanished or cannot be read
    """
    return os.stat(file_path).st_size


class FileScanner:
    """Enumerates a directory and builds FileEntry objects."""

    def __init__(self, normalizer: NameNormalizer | None = None):
        self.normalizer = normalizer or NameNormalizer()
        self.stale_files = 0

    def build_entry(self, file_path: Path) -> FileEntry:
        """
        Build the index entry for a single file.

        Args:
            file_path: Path to the file

        Returns:
            FileEntry with size, normalized key and media flag

        Raises:
            StaleFileError: If the file vanished before it could be measured
        """
        try:
            size = get_file_size(file_path)
        except OSError as e:
            raise StaleFileError(file_path, e.strerror or str(e)) from e

        return FileEntry(
            file_path=file_path,
            filename=file_path.name,
            size_bytes=size,
            normalized_key=self.normalizer.normalize(file_path.name),
            is_media=is_media_file(file_path.name),
        )

    def discover_files(self, directory: Path, recursive: bool = False) -> Generator[Path, None, None]:
        """
        Discover regular files in a directory.

        Symbolic links are skipped, even when they point at a regular file,
        so a link is never reported as a copy of its own target.

        Args:
            directory: Directory to scan
            recursive: Whether to scan subdirectories recursively

        Yields:
            Path objects for discovered files, in sorted order

        Raises:
            OSError: If the directory cannot be accessed
        """
        if not directory.is_dir():
            raise OSError(f"Path is not a directory: {directory}")

        logger.info(f"Starting file discovery in: {directory}")
        files_found = 0

        file_iterator = directory.rglob("*") if recursive else directory.glob("*")

        for file_path in sorted(file_iterator):
            if file_path.is_symlink():
                logger.debug(f"Skipping symbolic link: {file_path}")
                continue
            if file_path.is_file():
                files_found += 1
                yield file_path

        logger.info(f"File discovery complete. Found {files_found} total files.")

    def scan_directory(self, directory: Path, recursive: bool = False) -> list[FileEntry]:
        """
        Scan a directory and return entries for every file that could be measured.

        Files that vanish between enumeration and measurement are dropped and
        counted in ``stale_files``; the scan carries on.
        """
        start_time = time.time()
        entries = []
        self.stale_files = 0

        for file_path in self.discover_files(directory, recursive):
            try:
                entries.append(self.build_entry(file_path))
            except StaleFileError as e:
                self.stale_files += 1
                logger.warning(str(e))

        scan_duration = time.time() - start_time
        logger.info(
            f"Scan complete: {len(entries)} files indexed, {self.stale_files} dropped "
            f"in {scan_duration:.2f} seconds"
        )
        return entries
