"""Grouping engine and match decision for spelling-variant duplicates."""

import logging
from collections import defaultdict
from collections.abc import Hashable

from .audio import AudioSignatureProvider, NullSignatureProvider
from .models import (
    ApplicationConfig,
    AudioHashMode,
    DuplicateCluster,
    FileEntry,
    MatchReason,
)

logger = logging.getLogger(__name__)


class DuplicateGrouper:
    """Groups files by normalized name and decides which groups are duplicates."""

    def __init__(
        self,
        config: ApplicationConfig | None = None,
        provider: AudioSignatureProvider | None = None,
    ):
        """
        Initialize the grouper.

        Args:
            config: Tolerance, non-media and audio fallback settings
            provider: Source of audio evidence, defaults to no evidence
        """
        self.config = config or ApplicationConfig()
        self.provider = provider or NullSignatureProvider()

    def group_by_normalized_key(self, files: list[FileEntry]) -> dict[str, list[FileEntry]]:
        """
        Partition files by normalized key. Every file lands in exactly one group.

        Example:
            >>> groups = grouper.group_by_normalized_key([song_a, song_b])
            >>> groups["mysongmp3"]  # [song_a, song_b]
        """
        groups: dict[str, list[FileEntry]] = defaultdict(list)
        for file in files:
            groups[file.normalized_key].append(file)

        logger.info(f"Grouped {len(files)} files into {len(groups)} normalized name groups")
        return groups

    def group_by_size(self, files: list[FileEntry]) -> dict[tuple[str, int], list[FileEntry]]:
        """Bucket files by (normalized key, exact size)."""
        groups: dict[tuple[str, int], list[FileEntry]] = defaultdict(list)
        for file in files:
            groups[(file.normalized_key, file.size_bytes)].append(file)
        return groups

    def sizes_match(self, files: list[FileEntry]) -> bool:
        """
        Check whether two differently named members have matching sizes.

        All-media groups, or any group when approximation for non-media is
        enabled, match within the tolerance. Other groups need two members of
        exactly the same size. Copies that share a basename never confirm each
        other.
        """
        all_media = all(file.is_media for file in files)
        if all_media or self.config.approx_non_media:
            limit = self.config.tolerance_bytes
        else:
            limit = 0

        buckets = sorted(
            (
                (size, {file.filename for file in members})
                for (_, size), members in self.group_by_size(files).items()
            ),
            key=lambda bucket: bucket[0],
        )

        for index, (size, names) in enumerate(buckets):
            if len(names) > 1:
                return True
            for other_size, other_names in buckets[index + 1 :]:
                if other_size - size > limit:
                    break
                if other_names != names:
                    return True
        return False

    def _has_collision(self, signatures: list[tuple[Hashable | None, str]]) -> bool:
        names_by_signature: dict[Hashable, set[str]] = defaultdict(set)
        for signature, filename in signatures:
            if signature is not None:
                names_by_signature[signature].add(filename)
        return any(len(names) > 1 for names in names_by_signature.values())

    def audio_match(self, files: list[FileEntry]) -> MatchReason | None:
        """
        Fall back to audio evidence for an all-media group.

        Members that vanished or yield no signature contribute no evidence,
        and only members with different basenames can confirm each other.

        Returns:
            The audio match reason, or None if no two members share a signature
        """
        mode = self.config.audio_hash_mode
        if mode == AudioHashMode.OFF:
            return None

        present = [file for file in files if file.file_path.is_file()]
        if len({file.filename for file in present}) < 2:
            return None

        if mode == AudioHashMode.PROBE:
            signatures = [(self.provider.probe(file.file_path), file.filename) for file in present]
            reason = MatchReason.AUDIO_PROBE
        else:
            signatures = [
                (self.provider.content_hash(file.file_path, mode.value), file.filename)
                for file in present
            ]
            reason = MatchReason(f"audio-{mode.value}")

        if self._has_collision(signatures):
            return reason
        return None

    def match_group(self, files: list[FileEntry]) -> MatchReason | None:
        """
        Decide whether a normalized name group holds duplicates.

        Returns:
            Why the group matched, or None if it did not
        """
        if len(files) < 2:
            return None

        if self.sizes_match(files):
            return MatchReason.SIZE

        if all(file.is_media for file in files):
            return self.audio_match(files)
        return None

    def create_cluster(
        self, normalized_key: str, files: list[FileEntry], reason: MatchReason
    ) -> DuplicateCluster | None:
        """
        Build the reported cluster for a matched group.

        Groups whose members all share one basename are not spelling variants
        and produce no cluster.
        """
        unique: dict[str, FileEntry] = {}
        for file in files:
            unique.setdefault(str(file.file_path), file)
        members = [unique[path] for path in sorted(unique)]

        if len({file.filename for file in members}) < 2:
            logger.debug(f"Skipping {normalized_key}: only one distinct filename")
            return None

        sizes = [file.size_bytes for file in members]
        return DuplicateCluster(
            normalized_key=normalized_key,
            min_size=min(sizes),
            max_size=max(sizes),
            match_reason=reason,
            files=members,
        )

    def find_duplicates(self, files: list[FileEntry]) -> list[DuplicateCluster]:
        """
        Find every confirmed duplicate cluster among the scanned files.

        Args:
            files: All entries from one directory scan

        Returns:
            Duplicate clusters sorted by normalized key
        """
        clusters = []
        for normalized_key, members in sorted(self.group_by_normalized_key(files).items()):
            reason = self.match_group(members)
            if reason is None:
                continue

            cluster = self.create_cluster(normalized_key, members, reason)
            if cluster is not None:
                clusters.append(cluster)
                logger.debug(f"Confirmed {cluster}")

        logger.info(f"Found {len(clusters)} duplicate clusters")
        return clusters
