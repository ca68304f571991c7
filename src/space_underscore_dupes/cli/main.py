"""CLI entry point for the space/underscore duplicate finder."""

import argparse
import logging
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from .. import __version__
from ..core import (
    ApplicationConfig,
    AudioHashMode,
    AudioSignatureProvider,
    ConfigError,
    DeletionPolicy,
    DuplicateGrouper,
    FFmpegSignatureProvider,
    FileScanner,
    NullSignatureProvider,
    ScanResult,
)
from ..core.reporter import format_cluster, format_deletion, format_json, format_summary

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_ENVIRONMENT = 2


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports bad arguments as ConfigError."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ConfigError(message)


def setup_logging(level: str = "WARNING") -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = _ArgumentParser(
        prog="space-underscore-dupes",
        description=(
            "Find files whose names only differ by spaces vs underscores and punctuation "
            "(case-insensitive), and whose sizes match within a tolerance or whose audio "
            "streams are identical."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Notes:
  - Reports matches if sizes are within tolerance OR audio streams are identical.
  - For non-media files, size must match exactly unless --approx-even-for-non-media is set.
  - --audio-hash=probe uses ffprobe audio params (fast, heuristic).
  - --audio-hash=stream hashes the compressed audio stream (slow for long files).
  - --audio-hash=samples hashes decoded audio samples (slowest, strict).
  - --audio-hash=off disables audio hashing.
  - --delete removes duplicates after printing; use --yes to skip prompts.

Examples:
  space-underscore-dupes ~/Music 4096
  space-underscore-dupes --dir ~/Music --recursive --audio-hash=samples
  space-underscore-dupes --dir=. --delete=smaller --yes
        """,
    )

    parser.add_argument(
        "positionals",
        nargs="*",
        metavar="ARG",
        help="[dir] [tolerance_bytes]: directory to scan (default: .) and size tolerance in bytes (default: 0)",
    )
    parser.add_argument("--dir", dest="dir_option", metavar="DIR", help="Directory to scan")
    parser.add_argument(
        "--tolerance", dest="tolerance_option", metavar="BYTES", help="Size tolerance in bytes"
    )
    parser.add_argument(
        "--recursive", action="store_true", help="Scan subdirectories and match across the subtree"
    )
    parser.add_argument(
        "--approx-even-for-non-media",
        dest="approx_non_media",
        action="store_true",
        help="Apply the size tolerance to non-media files too",
    )
    parser.add_argument(
        "--delete",
        nargs="?",
        const="underscores",
        default=None,
        metavar="MODE",
        help="Delete one side of each cluster: underscores, spaces, smaller or larger (default: underscores)",
    )
    parser.add_argument(
        "--audio-hash",
        default="probe",
        metavar="MODE",
        help="Audio fallback when sizes do not match: probe, stream, samples or off (default: probe)",
    )
    parser.add_argument("--yes", action="store_true", help="Skip deletion prompts")

    parser.add_argument(
        "--output-format",
        choices=["text", "json"],
        default="text",
        help="Output format for results (default: text)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument("--ffmpeg", type=Path, metavar="PATH", help="ffmpeg executable to use")
    parser.add_argument("--ffprobe", type=Path, metavar="PATH", help="ffprobe executable to use")
    parser.add_argument(
        "--tool-timeout",
        type=float,
        default=300.0,
        metavar="SECONDS",
        help="Timeout for each ffmpeg/ffprobe invocation (default: 300)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def build_config(args: argparse.Namespace) -> ApplicationConfig:
    """
    Turn parsed arguments into a validated configuration.

    Positionals fill the directory and then the tolerance, skipping whichever
    was given by name.

    Raises:
        ConfigError: If any value is invalid
    """
    positionals = list(args.positionals)
    directory = args.dir_option
    tolerance = args.tolerance_option

    if directory is None and positionals:
        directory = positionals.pop(0)
    if tolerance is None and positionals:
        tolerance = positionals.pop(0)
    if positionals:
        raise ConfigError(f"Unknown argument: {positionals[0]}")

    try:
        return ApplicationConfig(
            directory=Path(directory if directory is not None else "."),
            tolerance_bytes=tolerance if tolerance is not None else 0,
            recursive=args.recursive,
            approx_non_media=args.approx_non_media,
            delete_mode=args.delete,
            audio_hash_mode=args.audio_hash,
            assume_yes=args.yes,
            output_format=args.output_format,
            log_level=args.log_level,
            ffmpeg_path=args.ffmpeg,
            ffprobe_path=args.ffprobe,
            tool_timeout_seconds=args.tool_timeout,
        )
    except ValidationError as e:
        error = e.errors()[0]
        message = str(error["msg"]).removeprefix("Value error, ")
        if error["type"] != "value_error":
            field = ".".join(str(part) for part in error["loc"])
            message = f"{field}: {message}"
        raise ConfigError(message) from e


def create_provider(config: ApplicationConfig) -> AudioSignatureProvider:
    """Create the audio signature provider for the configured mode."""
    if config.audio_hash_mode == AudioHashMode.OFF:
        return NullSignatureProvider()
    return FFmpegSignatureProvider(
        ffmpeg_path=config.ffmpeg_path,
        ffprobe_path=config.ffprobe_path,
        timeout=config.tool_timeout_seconds,
    )


def run_scan(
    config: ApplicationConfig, provider: AudioSignatureProvider | None = None
) -> ScanResult:
    """
    Scan the configured directory and find duplicate clusters.

    Args:
        config: Validated configuration
        provider: Audio evidence source, defaults to one built from config

    Returns:
        ScanResult with clusters sorted by normalized key
    """
    logger = logging.getLogger(__name__)
    start_time = time.time()

    scanner = FileScanner()
    entries = scanner.scan_directory(config.directory, recursive=config.recursive)

    grouper = DuplicateGrouper(config, provider or create_provider(config))
    clusters = grouper.find_duplicates(entries)

    scan_result = ScanResult(
        scan_path=config.directory,
        recursive=config.recursive,
        tolerance_bytes=config.tolerance_bytes,
        total_files_found=len(entries),
        media_files_found=sum(1 for entry in entries if entry.is_media),
        stale_files=scanner.stale_files,
        clusters=clusters,
        scan_duration_seconds=time.time() - start_time,
    )

    logger.info(str(scan_result))
    return scan_result


def prompt_confirm(file_path: Path) -> bool:
    """Ask on the terminal whether to delete a file."""
    try:
        reply = input(f'Delete "{file_path}"? [y/N] ')
    except EOFError:
        return False
    return reply.strip() in ("y", "Y")


def print_results(scan_result: ScanResult, config: ApplicationConfig) -> None:
    """
    Print the report and apply the delete mode cluster by cluster.

    In JSON mode the report goes to stdout in one piece and deletion
    messages go to stderr.
    """
    policy = DeletionPolicy(assume_yes=config.assume_yes)
    as_json = config.output_format == "json"

    if as_json:
        print(format_json(scan_result))
    elif not scan_result.clusters:
        print(format_summary(scan_result))

    for cluster in scan_result.clusters:
        if not as_json:
            print("\n".join(format_cluster(cluster, scan_result.recursive)))

        if config.delete_mode is None:
            continue

        outcome = policy.apply(cluster, config.delete_mode, confirm=prompt_confirm)
        for line in format_deletion(outcome):
            print(line, file=sys.stderr if as_json else sys.stdout)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for invalid arguments, 2 for an unusable environment)
    """
    parser = create_parser()

    try:
        args = parser.parse_intermixed_args(argv)
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    if config.delete_mode is not None and not config.assume_yes and not sys.stdin.isatty():
        print(
            "Error: --delete needs an interactive terminal for confirmation; use --yes to skip prompts",
            file=sys.stderr,
        )
        return EXIT_ENVIRONMENT

    try:
        scan_result = run_scan(config)
        print_results(scan_result, config)
        return EXIT_OK

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"Error during scan: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Unexpected error occurred")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
