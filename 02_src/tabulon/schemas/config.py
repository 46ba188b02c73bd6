"""Configuration schemas for rendering and conversion."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

PAGE_SIZES = {
    "a4": (210.0, 297.0),
    "letter": (215.9, 279.4),
}
ORIENTATIONS = ("portrait", "landscape")
LAYOUT_MODES = ("auto", "table", "structured")


@dataclass(frozen=True)
class FontSizes:
    """Point sizes fixed by one font-size tier."""
    body: int
    header: int
    title: int


FONT_SIZE_TIERS = {
    "small": FontSizes(body=8, header=9, title=14),
    "medium": FontSizes(body=10, header=11, title=16),
    "large": FontSizes(body=12, header=13, title=18),
}


@dataclass(frozen=True)
class PageGeometry:
    """Page dimensions in millimetres."""
    width: float
    height: float

    @classmethod
    def from_options(cls, page_size: str, orientation: str) -> "PageGeometry":
        """Build geometry from a page-size preset and an orientation.

        Raises:
            ValueError: If the preset or orientation is unknown
        """
        try:
            short, long = PAGE_SIZES[page_size.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown page size '{page_size}' (expected one of {sorted(PAGE_SIZES)})"
            ) from None
        if orientation.lower() == "landscape":
            return cls(width=long, height=short)
        if orientation.lower() == "portrait":
            return cls(width=short, height=long)
        raise ValueError(f"Unknown orientation '{orientation}'")


@dataclass
class Decorations:
    """Optional page decorations.

    Attributes:
        title: Custom title (format default when None)
        logo: Logo image as bytes, file path or ``data:`` URI
        header_text: Right-aligned running header
        footer_text: Right-aligned custom footer
        watermark: Diagonal watermark text
    """
    title: Optional[str] = None
    logo: Optional[Union[bytes, str, Path]] = None
    header_text: Optional[str] = None
    footer_text: Optional[str] = None
    watermark: Optional[str] = None


@dataclass
class RenderOptions:
    """Options controlling page geometry, typography and layout.

    Attributes:
        page_size: "a4" or "letter"
        orientation: "portrait" or "landscape"
        font_size: "small", "medium" or "large"
        layout: "auto", "table" or "structured"
        show_row_numbers: Prepend a "#" column in table mode
        show_metadata: Draw the generation timestamp and counts block
        filename: Output filename override
        decorations: Title, logo, header/footer text and watermark
    """
    page_size: str = "a4"
    orientation: str = "portrait"
    font_size: str = "medium"
    layout: str = "auto"
    show_row_numbers: bool = True
    show_metadata: bool = True
    filename: Optional[str] = None
    decorations: Decorations = field(default_factory=Decorations)

    def __post_init__(self):
        """Normalise case and validate enumerated values."""
        for name in ("page_size", "orientation", "font_size", "layout"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"Invalid {name} {value!r}, expected a string")
            setattr(self, name, value.lower())

        if self.page_size not in PAGE_SIZES:
            raise ValueError(f"Invalid page_size '{self.page_size}'")
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"Invalid orientation '{self.orientation}'")
        if self.font_size not in FONT_SIZE_TIERS:
            raise ValueError(f"Invalid font_size '{self.font_size}'")
        if self.layout not in LAYOUT_MODES:
            raise ValueError(f"Invalid layout '{self.layout}'")

    @property
    def sizes(self) -> FontSizes:
        return FONT_SIZE_TIERS[self.font_size]

    @property
    def geometry(self) -> PageGeometry:
        return PageGeometry.from_options(self.page_size, self.orientation)

    @property
    def max_line_chars(self) -> int:
        """Character budget for one structured-mode line."""
        return 120 if self.orientation == "landscape" else 80

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderOptions":
        """Build options from a plain mapping (e.g. a parsed YAML file).

        Decoration keys may be given at top level or under ``decorations``.
        Unknown keys are ignored with a warning.
        """
        option_names = {f.name for f in fields(cls)} - {"decorations"}
        decoration_names = {f.name for f in fields(Decorations)}

        kwargs: Dict[str, Any] = {}
        deco: Dict[str, Any] = dict(data.get("decorations") or {})

        for key, value in data.items():
            if key == "decorations":
                continue
            if key in option_names:
                kwargs[key] = value
            elif key in decoration_names:
                deco[key] = value
            else:
                logger.warning(f"Ignoring unknown render option '{key}'")

        unknown = set(deco) - decoration_names
        for key in sorted(unknown):
            logger.warning(f"Ignoring unknown decoration '{key}'")
            deco.pop(key)

        return cls(decorations=Decorations(**deco), **kwargs)


def load_options_file(path: Path) -> RenderOptions:
    """Load render options from a YAML file.

    Args:
        path: Path to YAML file with a mapping at top level

    Returns:
        RenderOptions built from the file

    Raises:
        ValueError: If the file does not contain a mapping
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Options file {path} must contain a mapping, got {type(data).__name__}")

    logger.info(f"Loaded render options from {path}")
    return RenderOptions.from_mapping(data)


@dataclass
class ConverterConfig:
    """Configuration for DocumentConverter.

    Attributes:
        output_dir: Directory for generated PDFs (env TABULON_OUTPUT_DIR, default cwd)
        log_level: Logging level (env TABULON_LOG_LEVEL, default INFO)
    """
    output_dir: Optional[Path] = None
    log_level: Optional[str] = None

    def __post_init__(self):
        """Fill unset values from the environment."""
        if self.output_dir is None:
            self.output_dir = Path(os.getenv("TABULON_OUTPUT_DIR", "."))
        else:
            self.output_dir = Path(self.output_dir)
        if self.log_level is None:
            self.log_level = os.getenv("TABULON_LOG_LEVEL", "INFO")
        self.log_level = self.log_level.upper()
