"""Layout planner: column sizing, cell wrapping and page breaks.

All lengths are millimetres. The planner only decides where things go;
drawing happens in :mod:`tabulon.core.composer`.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..schemas.common import PROFILES, FormatProfile, LayoutPlan, Masthead, Page, PlacedLine, PlacedRow
from ..schemas.config import FontSizes, PageGeometry, RenderOptions
from ..schemas.document import TABLE, Representation, Row, TableProjection

logger = logging.getLogger(__name__)

# (text, family, size, bold) -> width
Measure = Callable[[str, str, float, bool], float]

SIDE_MARGIN = 14.0
TOP_MARGIN = 20.0
BOTTOM_MARGIN = 20.0

LOGO_WIDTH = 30.0
LOGO_HEIGHT = 15.0
LOGO_ADVANCE = 20.0
TITLE_ADVANCE = 8.0
METADATA_LINE_ADVANCE = 6.0
METADATA_GAP_TABLE = 8.0
METADATA_GAP_STRUCTURED = 10.0
STRUCTURED_GAP = 4.0

ROW_NUMBER_WIDTH = 12.0
CELL_PADDING = 1.5
LINE_HEIGHT_FACTOR = 0.5  # mm of line height per point of font size

ELLIPSIS = "..."


def line_height(size: float) -> float:
    return size * LINE_HEIGHT_FACTOR


def truncate(text: str, budget: int) -> str:
    """Cut text to budget characters, marking the cut with an ellipsis."""
    if len(text) <= budget:
        return text
    return text[:budget] + ELLIPSIS


def _break_word(word: str, width: float, measure: Callable[[str], float]) -> List[str]:
    pieces: List[str] = []
    chunk = ""
    for char in word:
        if chunk and measure(chunk + char) > width:
            pieces.append(chunk)
            chunk = char
        else:
            chunk += char
    pieces.append(chunk)
    return pieces


def wrap_text(text: str, width: float, measure: Callable[[str], float]) -> List[str]:
    """Greedy word wrap to a measured width.

    Words wider than the width are broken between characters. Explicit
    newlines are kept as line breaks.

    Returns:
        At least one line (an empty string for empty text)
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            if measure(word) <= width:
                current = word
            else:
                pieces = _break_word(word, width, measure)
                lines.extend(pieces[:-1])
                current = pieces[-1]
        lines.append(current)
    return lines or [""]


def compute_column_widths(
    natural: Sequence[float],
    available: float,
    fixed: Optional[Dict[int, float]] = None,
) -> List[float]:
    """Distribute the available width over columns.

    Fixed columns keep their width. When the natural widths of the other
    columns fit, they grow proportionally to fill the width; otherwise
    columns narrower than an equal share keep their natural width and the
    rest split what remains equally.

    Args:
        natural: Natural (unwrapped) width of every column
        available: Total table width
        fixed: Column index -> fixed width

    Returns:
        Width per column, in column order
    """
    fixed = fixed or {}
    widths: Dict[int, float] = dict(fixed)
    flexible = [i for i in range(len(natural)) if i not in fixed]
    if not flexible:
        return [widths[i] for i in range(len(natural))]

    space = max(available - sum(fixed.values()), 0.0)
    total = sum(natural[i] for i in flexible)

    if total <= space:
        for i in flexible:
            widths[i] = natural[i] * space / total if total else space / len(flexible)
        return [widths[i] for i in range(len(natural))]

    pending = list(flexible)
    remaining = space
    while pending:
        share = remaining / len(pending)
        narrow = [i for i in pending if natural[i] <= share]
        if not narrow:
            for i in pending:
                widths[i] = share
            break
        for i in narrow:
            widths[i] = natural[i]
            remaining -= natural[i]
            pending.remove(i)

    return [widths[i] for i in range(len(natural))]


def plan_masthead(options: RenderOptions, mode: str, has_logo: bool) -> Masthead:
    """Positions of logo, title and metadata on the first page."""
    y = TOP_MARGIN
    logo_y = None
    if has_logo:
        logo_y = y
        y += LOGO_ADVANCE

    title_y = y
    y += TITLE_ADVANCE

    metadata_y: tuple = ()
    if options.show_metadata:
        metadata_y = (y, y + METADATA_LINE_ADVANCE)
        y += METADATA_LINE_ADVANCE
        y += METADATA_GAP_TABLE if mode == TABLE else METADATA_GAP_STRUCTURED
    elif mode != TABLE:
        y += STRUCTURED_GAP

    return Masthead(logo_y=logo_y, title_y=title_y, metadata_y=metadata_y, content_top=y)


class LayoutPlanner:
    """Lays a representation out onto fixed-size pages."""

    def __init__(self, options: RenderOptions, measure: Measure):
        """Initialize planner.

        Args:
            options: Render options (geometry, font tier, row numbers)
            measure: Font metrics, usually ``surface.text_width``
        """
        self.options = options
        self.measure = measure
        self.sizes: FontSizes = options.sizes

    def plan(
        self,
        representation: Representation,
        geometry: Optional[PageGeometry] = None,
        profile: Optional[FormatProfile] = None,
        has_logo: bool = False,
    ) -> LayoutPlan:
        """Compute pages for a representation.

        Args:
            representation: Table or structured representation
            geometry: Page size (derived from options when None)
            profile: Format profile (derived from the source format when None)
            has_logo: Reserve space for a logo on the first page

        Returns:
            LayoutPlan with at least one page
        """
        geometry = geometry or self.options.geometry
        profile = profile or PROFILES[representation.source_format]
        masthead = plan_masthead(self.options, representation.mode, has_logo)

        plan = LayoutPlan(
            representation=representation,
            geometry=geometry,
            profile=profile,
            masthead=masthead,
            line_height=line_height(self.sizes.body),
        )

        if representation.is_table:
            self._plan_table(plan, representation.table or TableProjection())
        else:
            self._plan_structured(plan)

        logger.info(
            f"Planned {plan.page_count} page(s) in {representation.mode} mode "
            f"({geometry.width:.0f}x{geometry.height:.0f} mm)"
        )
        return plan

    def _measure_body(self, text: str) -> float:
        return self.measure(text, "helvetica", self.sizes.body, False)

    def _measure_header(self, text: str) -> float:
        return self.measure(text, "helvetica", self.sizes.header, True)

    def display_table(self, table: TableProjection) -> TableProjection:
        """Table as drawn, with the row-number column when enabled."""
        if not self.options.show_row_numbers or table.is_empty:
            return table
        return TableProjection(
            headers=["#"] + table.headers,
            rows=[[str(i + 1)] + row for i, row in enumerate(table.rows)],
        )

    def _column_widths(self, table: TableProjection, available: float) -> List[float]:
        natural = []
        for i, header in enumerate(table.headers):
            widest = self._measure_header(header)
            for row in table.rows:
                widest = max(widest, self._measure_body(row[i]))
            natural.append(widest + 2 * CELL_PADDING)

        fixed = {0: ROW_NUMBER_WIDTH} if self.options.show_row_numbers else None
        return compute_column_widths(natural, available, fixed)

    def _wrap_row(self, row: Row, columns: List[float], measure: Callable[[str], float]) -> List[List[str]]:
        return [
            wrap_text(cell, max(width - 2 * CELL_PADDING, 1.0), measure)
            for cell, width in zip(row, columns)
        ]

    def _plan_table(self, plan: LayoutPlan, table: TableProjection) -> None:
        geometry = plan.geometry
        limit = geometry.height - BOTTOM_MARGIN
        page = Page(number=1, top=plan.masthead.content_top)
        plan.pages.append(page)

        display = self.display_table(table)
        if display.is_empty:
            return

        plan.columns = self._column_widths(display, geometry.width - 2 * SIDE_MARGIN)

        header_cells = self._wrap_row(display.headers, plan.columns, self._measure_header)
        header_height = self._row_height(header_cells, line_height(self.sizes.header))
        body_lh = line_height(self.sizes.body)
        fresh_capacity = limit - TOP_MARGIN - header_height

        y = page.top
        page.rows.append(PlacedRow(cells=header_cells, y=y, height=header_height))
        y += header_height

        for index, row in enumerate(display.rows):
            cells = self._wrap_row(row, plan.columns, self._measure_body)
            height = self._row_height(cells, body_lh)

            if y + height > limit and (page.body_rows or height <= fresh_capacity):
                if not page.body_rows:
                    page.rows.clear()
                page = Page(number=len(plan.pages) + 1, top=TOP_MARGIN)
                plan.pages.append(page)
                y = page.top
                page.rows.append(PlacedRow(cells=header_cells, y=y, height=header_height))
                y += header_height
                logger.debug(f"Table page break before row {index + 1}")

            page.rows.append(PlacedRow(cells=cells, y=y, height=height, index=index))
            y += height

    @staticmethod
    def _row_height(cells: List[List[str]], lh: float) -> float:
        lines = max((len(cell) for cell in cells), default=1)
        return max(lines, 1) * lh + 2 * CELL_PADDING

    def _plan_structured(self, plan: LayoutPlan) -> None:
        limit = plan.geometry.height - BOTTOM_MARGIN
        budget = self.options.max_line_chars
        page = Page(number=1, top=plan.masthead.content_top)
        plan.pages.append(page)

        y = page.top
        for number, line in enumerate(plan.representation.lines, start=1):
            if y > limit:
                page = Page(number=len(plan.pages) + 1, top=TOP_MARGIN, continued=True)
                plan.pages.append(page)
                y = page.top
                logger.debug(f"Structured page break before line {number}")

            text = truncate(line.rendered, budget)
            page.lines.append(PlacedLine(number=number, line=line, text=text, y=y))
            y += plan.line_height
