"""Find files whose names differ only by spaces, underscores and punctuation."""

__version__ = "0.1.0"
