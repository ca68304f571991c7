"""Audio signatures from ffprobe/ffmpeg used as duplicate evidence."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from .errors import ParseError, ToolUnavailable
from .models import ProbeSignature

logger = logging.getLogger(__name__)

PREFERRED_TOOL_DIR = Path.home() / "bin"


class AudioSignatureProvider(Protocol):
    """Source of audio evidence for the match decision."""

    def probe(self, file_path: Path) -> ProbeSignature | None:
        """Return the coarse probe signature, or None if unavailable."""
        ...

    def content_hash(self, file_path: Path, mode: str) -> str | None:
        """Return a hash of the audio for mode "stream" or "samples", or None."""
        ...


class NullSignatureProvider:
    """Provider that never has evidence. Used when audio hashing is off."""

    def probe(self, file_path: Path) -> ProbeSignature | None:
        return None

    def content_hash(self, file_path: Path, mode: str) -> str | None:
        return None


class _ProbeStream(BaseModel):
    sample_rate: int | str | None = None
    channels: int | str | None = None
    bit_rate: int | str | None = None


class _ProbeFormat(BaseModel):
    duration: float | str | None = None


class _ProbeOutput(BaseModel):
    streams: list[_ProbeStream] = []
    format: _ProbeFormat | None = None


def parse_probe_output(output: str) -> ProbeSignature:
    """
    Parse ``ffprobe -of json`` output into a probe signature.

    Sample rate and channels come from the first stream, the bit rate is the
    first non-empty value across streams and the container duration is
    rounded to the nearest millisecond.

    Raises:
        ParseError: If the output is malformed or has no audio stream or duration
    """
    try:
        probe = _ProbeOutput.model_validate_json(output)
    except ValidationError as e:
        raise ParseError(f"Malformed ffprobe output: {e.error_count()} errors") from e

    if not probe.streams:
        raise ParseError("No audio stream reported")
    if probe.format is None or probe.format.duration in (None, ""):
        raise ParseError("No duration reported")

    try:
        duration = float(probe.format.duration)
    except ValueError as e:
        raise ParseError(f"Invalid duration: {probe.format.duration}") from e
    if duration < 0:
        raise ParseError(f"Invalid duration: {probe.format.duration}")

    first = probe.streams[0]
    bit_rate = next((str(s.bit_rate) for s in probe.streams if s.bit_rate not in (None, "")), "")

    return ProbeSignature(
        sample_rate="" if first.sample_rate is None else str(first.sample_rate),
        channels="" if first.channels is None else str(first.channels),
        bit_rate=bit_rate,
        duration_ms=int(duration * 1000 + 0.5),
    )


def parse_md5_output(output: str) -> str:
    """
    Parse the ``MD5=<hex>`` line written by ffmpeg's md5 muxer.

    Raises:
        ParseError: If no hash line is present
    """
    for line in output.splitlines():
        name, sep, value = line.strip().partition("=")
        if sep and name == "MD5" and value:
            return value
    raise ParseError("No MD5 line in ffmpeg output")


def locate_tool(name: str, explicit: Path | None = None) -> Path:
    """
    Find an external tool, preferring a fixed install location over PATH.

    Args:
        name: Executable name, e.g. "ffprobe"
        explicit: Path configured by the user, checked first

    Returns:
        Path to the executable

    Raises:
        ToolUnavailable: If the tool cannot be found
    """
    for candidate in (explicit, PREFERRED_TOOL_DIR / name):
        if candidate is not None and candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate

    found = shutil.which(name)
    if found:
        return Path(found)
    raise ToolUnavailable(name)


class FFmpegSignatureProvider:
    """Computes audio signatures by running ffprobe and ffmpeg."""

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        ffprobe_path: Path | None = None,
        timeout: float = 300.0,
    ):
        """
        Initialize the provider.

        Args:
            ffmpeg_path: Explicit ffmpeg executable, else located on demand
            ffprobe_path: Explicit ffprobe executable, else located on demand
            timeout: Seconds allowed for each tool invocation
        """
        self.timeout = timeout
        self._explicit = {"ffmpeg": ffmpeg_path, "ffprobe": ffprobe_path}
        self._tools: dict[str, Path | None] = {}

    def _tool(self, name: str) -> Path | None:
        if name not in self._tools:
            try:
                self._tools[name] = locate_tool(name, self._explicit[name])
                logger.debug(f"Using {name}: {self._tools[name]}")
            except ToolUnavailable as e:
                logger.info(f"{e}; audio evidence from {name} disabled")
                self._tools[name] = None
        return self._tools[name]

    def _run(self, cmd: list[str]) -> str | None:
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Timed out after {self.timeout:.0f}s: {' '.join(cmd)}")
            return None
        except OSError as e:
            logger.warning(f"Could not run {cmd[0]}: {e}")
            return None

        if proc.returncode != 0:
            logger.debug(f"{cmd[0]} exited with {proc.returncode}: {proc.stderr.strip()}")
            return None
        return proc.stdout

    def probe(self, file_path: Path) -> ProbeSignature | None:
        """Probe sample rate, channels, bit rate and duration of the first audio stream."""
        ffprobe = self._tool("ffprobe")
        if ffprobe is None:
            return None

        output = self._run(
            [
                str(ffprobe),
                "-v", "error",
                "-select_streams", "a:0",
                "-show_entries", "stream=sample_rate,channels,bit_rate",
                "-show_entries", "format=duration",
                "-of", "json",
                str(file_path),
            ]
        )
        if output is None:
            return None

        try:
            signature = parse_probe_output(output)
        except ParseError as e:
            logger.debug(f"No probe signature for {file_path}: {e}")
            return None

        logger.debug(f"Probe signature for {file_path}: {signature}")
        return signature

    def content_hash(self, file_path: Path, mode: str) -> str | None:
        """
        Hash the first audio stream.

        Mode "stream" hashes the compressed packets (remuxed with ``-c copy``),
        mode "samples" hashes the decoded samples.
        """
        if mode not in ("stream", "samples"):
            raise ValueError(f"Unsupported hash mode: {mode}")

        ffmpeg = self._tool("ffmpeg")
        if ffmpeg is None:
            return None

        cmd = [str(ffmpeg), "-v", "error", "-i", str(file_path), "-map", "0:a:0"]
        if mode == "stream":
            cmd += ["-c", "copy"]
        cmd += ["-f", "md5", "-"]

        output = self._run(cmd)
        if output is None:
            return None

        try:
            digest = parse_md5_output(output)
        except ParseError as e:
            logger.debug(f"No {mode} hash for {file_path}: {e}")
            return None

        logger.debug(f"Audio {mode} hash for {file_path}: {digest}")
        return digest
