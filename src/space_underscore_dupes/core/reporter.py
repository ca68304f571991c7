"""Report formatting for scan results."""

import json

from .deletion import DeletionOutcome
from .models import DuplicateCluster, ScanResult

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_size(size_bytes: int) -> str:
    """
    Format a byte count with base-1024 units and two fractional digits.

    The fraction is truncated, not rounded, and bytes are shown without one.

    Example:
        >>> format_size(1536)
        '1.50KB'
    """
    whole = size_bytes
    frac = 0
    unit = 0
    while whole >= 1024 and unit < len(SIZE_UNITS) - 1:
        frac = (whole % 1024) * 100 // 1024
        whole //= 1024
        unit += 1

    if unit == 0:
        return f"{whole}{SIZE_UNITS[unit]}"
    return f"{whole}.{frac:02d}{SIZE_UNITS[unit]}"


def format_cluster(cluster: DuplicateCluster, recursive: bool = False) -> list[str]:
    """
    Format one duplicate cluster as report lines.

    Members are listed by full path for recursive scans and by filename otherwise.
    """
    lines = [
        "---",
        f"Normalized: {cluster.normalized_key} | "
        f"Sizes: {format_size(cluster.min_size)}..{format_size(cluster.max_size)} "
        f"(diff {cluster.size_diff} bytes) | Match: {cluster.match_reason.label}",
    ]
    members = [str(path) for path in cluster.paths] if recursive else cluster.filenames
    lines.extend(f"  - {member}" for member in members)
    return lines


def format_summary(scan_result: ScanResult) -> str:
    """Line printed when no duplicates were found."""
    return (
        f"No space/underscore duplicates within {scan_result.tolerance_bytes} bytes "
        f'found in "{scan_result.scan_path}".'
    )


def format_report(scan_result: ScanResult) -> str:
    """Format the full text report for a scan."""
    if not scan_result.clusters:
        return format_summary(scan_result)

    lines: list[str] = []
    for cluster in scan_result.clusters:
        lines.extend(format_cluster(cluster, scan_result.recursive))
    return "\n".join(lines)


def format_json(scan_result: ScanResult) -> str:
    """Format the scan result as JSON."""
    return json.dumps(
        {
            "scan_path": str(scan_result.scan_path),
            "recursive": scan_result.recursive,
            "tolerance_bytes": scan_result.tolerance_bytes,
            "total_files_found": scan_result.total_files_found,
            "media_files_found": scan_result.media_files_found,
            "stale_files": scan_result.stale_files,
            "scan_duration_seconds": scan_result.scan_duration_seconds,
            "clusters": [
                {
                    "normalized_key": cluster.normalized_key,
                    "min_size": cluster.min_size,
                    "max_size": cluster.max_size,
                    "size_diff": cluster.size_diff,
                    "match_reason": cluster.match_reason.value,
                    "files": [str(path) for path in cluster.paths],
                }
                for cluster in scan_result.clusters
            ],
        },
        indent=2,
    )


def format_deletion(outcome: DeletionOutcome) -> list[str]:
    """Per-file lines describing what a deletion pass did."""
    lines = [f"  Deleted: {path}" for path in outcome.deleted]
    lines.extend(f"  {failure}" for failure in outcome.failed)
    return lines
