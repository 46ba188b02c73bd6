"""Common layout schemas: format profiles, pages and layout plans."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import PageGeometry
from .document import DocumentLine, Representation

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class FormatProfile:
    """Per-format parameters of the document composer.

    Attributes:
        source_format: "csv", "json" or "xml"
        table_title: Default title in table mode
        structured_title: Default title in structured mode
        accent: Table header fill colour
        alternate_fill: Background of every other table row
        default_filename: Output filename when none is supplied
    """
    source_format: str
    table_title: str
    structured_title: str
    accent: RGB
    alternate_fill: RGB
    default_filename: str

    def title_for(self, mode: str) -> str:
        return self.table_title if mode == "table" else self.structured_title


PROFILES = {
    "csv": FormatProfile(
        source_format="csv",
        table_title="Data Export",
        structured_title="Data Export",
        accent=(13, 148, 136),
        alternate_fill=(248, 250, 252),
        default_filename="export.pdf",
    ),
    "json": FormatProfile(
        source_format="json",
        table_title="JSON Data Export",
        structured_title="JSON Document",
        accent=(217, 119, 6),
        alternate_fill=(255, 251, 235),
        default_filename="json-export.pdf",
    ),
    "xml": FormatProfile(
        source_format="xml",
        table_title="XML Data Export",
        structured_title="XML Document",
        accent=(37, 99, 235),
        alternate_fill=(239, 246, 255),
        default_filename="xml-export.pdf",
    ),
}


@dataclass(frozen=True)
class PlacedRow:
    """A table row positioned on a page.

    Attributes:
        cells: Wrapped lines per cell
        y: Top edge of the row
        height: Row height
        index: 0-based data row index, None for the header row
    """
    cells: List[List[str]]
    y: float
    height: float
    index: Optional[int] = None

    @property
    def is_header(self) -> bool:
        return self.index is None


@dataclass(frozen=True)
class PlacedLine:
    """A structured-mode line positioned on a page.

    Attributes:
        number: 1-based source line number
        line: The document line
        text: Display text (indented, truncated to the line budget)
        y: Baseline position
    """
    number: int
    line: DocumentLine
    text: str
    y: float


@dataclass
class Page:
    """Content of one page, revisitable by index after layout.

    Attributes:
        number: Page number (1-based)
        top: Content origin of this page
        continued: True for continuation pages that carry a "(continued)" marker
        rows: Placed table rows (table mode)
        lines: Placed lines (structured mode)
    """
    number: int
    top: float
    continued: bool = False
    rows: List[PlacedRow] = field(default_factory=list)
    lines: List[PlacedLine] = field(default_factory=list)

    @property
    def body_rows(self) -> List[PlacedRow]:
        return [row for row in self.rows if not row.is_header]


@dataclass(frozen=True)
class Masthead:
    """Positions of the first-page header block.

    Attributes:
        logo_y: Top of the logo box, None when no logo
        title_y: Title baseline
        metadata_y: Baselines of the metadata lines (empty when hidden)
        content_top: Where page content starts on the first page
    """
    logo_y: Optional[float]
    title_y: float
    metadata_y: Tuple[float, ...]
    content_top: float


@dataclass
class LayoutPlan:
    """Complete layout of one document, ready for composition.

    Attributes:
        representation: What is being laid out
        geometry: Page size
        profile: Format profile (titles, colours)
        masthead: First-page header block
        columns: Column widths in table mode (row-number column included)
        line_height: Height of one text line
        pages: Laid out pages in order
    """
    representation: Representation
    geometry: PageGeometry
    profile: FormatProfile
    masthead: Masthead
    columns: List[float] = field(default_factory=list)
    line_height: float = 5.0
    pages: List[Page] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)
