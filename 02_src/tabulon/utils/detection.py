"""Source format detection and output naming."""

from pathlib import Path
from typing import Optional, Union

from ..schemas.common import PROFILES

_EXTENSION_MAP = {
    ".csv": "csv",
    ".json": "json",
    ".xml": "xml",
}


class UnsupportedFormatError(ValueError):
    """Raised when a file extension is not .csv, .json or .xml."""


def detect_format(path: Union[str, Path]) -> str:
    """Return "csv", "json" or "xml" from the file extension (case-insensitive).

    Raises:
        UnsupportedFormatError: For any other extension
    """
    suffix = Path(path).suffix.lower()
    try:
        return _EXTENSION_MAP[suffix]
    except KeyError:
        raise UnsupportedFormatError(
            f"Unsupported file format '{suffix or Path(path).name}'. Please use CSV, JSON, or XML."
        ) from None


def default_filename(source_format: str) -> str:
    """Output filename used when no source name is known."""
    return PROFILES[source_format].default_filename


def output_filename(source_format: str, source_path: Optional[Union[str, Path]] = None) -> str:
    """Output filename: the source stem with a .pdf suffix, or the format default."""
    if source_path is None:
        return default_filename(source_format)
    return Path(source_path).with_suffix(".pdf").name
