"""Deletion policy for confirmed duplicate clusters."""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import DeleteFailure
from .models import DeleteMode, DuplicateCluster

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[Path], bool]


@dataclass
class DeletionOutcome:
    """Result of applying a delete mode to one cluster."""

    cluster: DuplicateCluster
    selected: list[Path] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: list[DeleteFailure] = field(default_factory=list)


class DeletionPolicy:
    """Selects and removes one side of each duplicate cluster."""

    def __init__(self, assume_yes: bool = False):
        """
        Initialize the policy.

        Args:
            assume_yes: Approve every deletion without calling the confirm gate
        """
        self.assume_yes = assume_yes

    def select(self, cluster: DuplicateCluster, mode: DeleteMode) -> list[Path]:
        """
        Select the members of a cluster to delete.

        Args:
            cluster: Confirmed duplicate cluster
            mode: Which side to remove

        Returns:
            Paths to delete, in cluster order for name modes and by size for size modes
        """
        if mode == DeleteMode.UNDERSCORES:
            return [
                f.file_path for f in cluster.files if "_" in f.filename and " " not in f.filename
            ]

        if mode == DeleteMode.SPACES:
            return [f.file_path for f in cluster.files if " " in f.filename]

        # Stable sort keeps path order among equal sizes
        by_size = sorted(cluster.files, key=lambda f: f.size_bytes)
        if mode == DeleteMode.SMALLER:
            return [f.file_path for f in by_size[:-1]]
        return [f.file_path for f in by_size[1:]]

    def apply(
        self,
        cluster: DuplicateCluster,
        mode: DeleteMode,
        confirm: ConfirmCallback | None = None,
    ) -> DeletionOutcome:
        """
        Delete the selected members of a cluster, asking for confirmation per file.

        Failures are recorded and do not stop the remaining deletions.
        """
        outcome = DeletionOutcome(cluster=cluster, selected=self.select(cluster, mode))

        for file_path in outcome.selected:
            approved = self.assume_yes or (confirm is not None and confirm(file_path))
            if not approved:
                logger.info(f"Kept (not confirmed): {file_path}")
                outcome.skipped.append(file_path)
                continue

            try:
                os.remove(file_path)
                outcome.deleted.append(file_path)
                logger.info(f"Deleted: {file_path}")
            except OSError as e:
                failure = DeleteFailure(file_path, e.strerror or str(e))
                outcome.failed.append(failure)
                logger.error(str(failure))

        return outcome
