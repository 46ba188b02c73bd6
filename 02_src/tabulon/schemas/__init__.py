"""Data schemas for Tabulon."""

from .document import (
    DocumentLine,
    LineKind,
    Record,
    RecordGroup,
    Representation,
    TableProjection,
)
from .common import FormatProfile, LayoutPlan, Masthead, Page, PlacedLine, PlacedRow, PROFILES
from .config import (
    ConverterConfig,
    Decorations,
    FontSizes,
    PageGeometry,
    RenderOptions,
    load_options_file,
)

__all__ = [
    "DocumentLine",
    "LineKind",
    "Record",
    "RecordGroup",
    "Representation",
    "TableProjection",
    "FormatProfile",
    "LayoutPlan",
    "Masthead",
    "Page",
    "PlacedLine",
    "PlacedRow",
    "PROFILES",
    "ConverterConfig",
    "Decorations",
    "FontSizes",
    "PageGeometry",
    "RenderOptions",
    "load_options_file",
]
