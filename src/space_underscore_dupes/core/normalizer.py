"""Filename normalization for detecting space/underscore spelling variants."""

import re
import string


class NameNormalizer:
    """Maps filenames to spelling-insensitive comparison keys.

    Normalization is ASCII-only. Only ``A-Z`` is folded to lower case, so
    characters such as the Kelvin sign are never turned into ASCII letters.
    Every character outside ``[a-z0-9]`` is then removed, including
    non-ASCII letters and digits. Each pass only maps or deletes single
    characters, so the passes commute and the result is idempotent.
    """

    ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

    # Separators and punctuation that commonly differ between spellings
    SEPARATOR_PATTERN = re.compile(r"[ _.,:\-\\/]")

    # Anything left that is not an ASCII letter or digit
    NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]")

    def normalize(self, filename: str) -> str:
        """
        Normalize a filename into a comparison key.

        Args:
            filename: The basename to normalize

        Returns:
            Lower-case key containing only ASCII letters and digits

        Example:
            >>> NameNormalizer().normalize("My Song - Live.MP3")
            'mysonglivemp3'
        """
        if not filename:
            return ""

        key = filename.translate(self.ASCII_LOWER)
        key = self.SEPARATOR_PATTERN.sub("", key)
        return self.NON_ALNUM_PATTERN.sub("", key)

    def are_spelling_variants(self, filename1: str, filename2: str) -> bool:
        """
        Check if two filenames differ only by spacing, punctuation or case.

        Example:
            >>> NameNormalizer().are_spelling_variants("My Song.mp3", "my_song.mp3")
            True
        """
        return self.normalize(filename1) == self.normalize(filename2)


_default_normalizer = NameNormalizer()


def normalize(filename: str) -> str:
    """Normalize a filename with the default normalizer."""
    return _default_normalizer.normalize(filename)
