"""Utilities: source format detection and output naming."""

from .detection import UnsupportedFormatError, default_filename, detect_format, output_filename

__all__ = ["UnsupportedFormatError", "default_filename", "detect_format", "output_filename"]
