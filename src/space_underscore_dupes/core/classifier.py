"""Extension-based media classification."""

from pathlib import PurePath

AUDIO_EXTENSIONS = frozenset(
    {"mp3", "m4a", "m4b", "flac", "wav", "ogg", "opus", "aac", "aax", "aaxc", "aa", "wma", "alac"}
)
VIDEO_EXTENSIONS = frozenset(
    {"mp4", "mkv", "mov", "avi", "m4v", "wmv", "webm", "flv", "mpeg", "mpg", "3gp"}
)
IMAGE_EXTENSIONS = frozenset(
    {"jpg", "jpeg", "png", "gif", "webp", "bmp", "tiff", "tif", "heic", "heif"}
)


def _extension(filename: str) -> str:
    return PurePath(filename).suffix.lower().lstrip(".")


def media_type(filename: str) -> str | None:
    """
    Get the media type of a file from its extension.

    Args:
        filename: Filename or path to classify

    Returns:
        "audio", "video", "image", or None for non-media files
    """
    extension = _extension(filename)
    if extension in AUDIO_EXTENSIONS:
        return "audio"
    if extension in VIDEO_EXTENSIONS:
        return "video"
    if extension in IMAGE_EXTENSIONS:
        return "image"
    return None


def is_media_file(filename: str) -> bool:
    """Check if a file is audio, video or image content based on extension."""
    return media_type(filename) is not None
