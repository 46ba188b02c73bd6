"""Document composer: draws planned pages and their decorations.

Composition is two-pass. The first pass creates every page and draws its
content; the second revisits each page by index to stamp page numbers,
footers and the watermark, because the total page count is only known once
all pages exist.
"""

import base64
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from ..schemas.common import RGB, LayoutPlan, Page
from ..schemas.config import RenderOptions
from ..schemas.document import LineKind, Representation
from .planner import (
    CELL_PADDING,
    LOGO_HEIGHT,
    LOGO_WIDTH,
    SIDE_MARGIN,
    line_height,
)
from .surface import DrawingSurface

logger = logging.getLogger(__name__)

ATTRIBUTION = "Generated by Tabulon"

TEXT_COLOR: RGB = (30, 41, 59)
MUTED_COLOR: RGB = (100, 116, 139)
LINE_NUMBER_COLOR: RGB = (150, 150, 150)
GRID_COLOR: RGB = (226, 232, 240)
HEADER_TEXT_COLOR: RGB = (255, 255, 255)
WATERMARK_COLOR: RGB = (200, 200, 200)

SYNTAX_COLORS = {
    LineKind.DECLARATION: MUTED_COLOR,
    LineKind.OPEN_TAG: (37, 99, 235),
    LineKind.CLOSE_TAG: (37, 99, 235),
    LineKind.SELF_CLOSING: (37, 99, 235),
    LineKind.TEXT: TEXT_COLOR,
    LineKind.KEY: (13, 148, 136),
    LineKind.STRING_VALUE: (22, 163, 74),
    LineKind.NUMBER_VALUE: (217, 119, 6),
    LineKind.BOOLEAN_VALUE: (37, 99, 235),
    LineKind.NULL_VALUE: MUTED_COLOR,
    LineKind.PUNCTUATION: TEXT_COLOR,
}

DECORATION_FONT_SIZE = 8
WATERMARK_FONT_SIZE = 60
WATERMARK_ANGLE = 45.0
HEADER_TEXT_Y = 10.0
CONTINUED_MARKER_Y = 12.0
FOOTER_OFFSET = 10.0
LINE_NUMBER_X = 14.0
LINE_TEXT_X = 28.0
GRID_LINE_WIDTH = 0.1

# Image modes Pillow can write as PNG without conversion
PNG_MODES = ("RGB", "RGBA", "L", "LA", "P", "1")

# Baseline offset below the top of a text line, as a fraction of the point size in mm
_ASCENT = 0.8
_MM_PER_PT = 25.4 / 72


def load_logo(source: Union[bytes, str, Path, None]) -> Optional[bytes]:
    """Load and validate a logo image, re-encoded as PNG.

    Args:
        source: Image bytes, a ``data:`` URI or a file path

    Returns:
        PNG bytes, or None when there is no logo or it cannot be decoded
    """
    if source is None:
        return None

    try:
        if isinstance(source, bytes):
            data = source
        elif isinstance(source, str) and source.startswith("data:"):
            data = base64.b64decode(source.split(",", 1)[1])
        else:
            data = Path(source).read_bytes()

        img = Image.open(io.BytesIO(data))
        if img.mode not in PNG_MODES:
            img = img.convert("RGB")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    except (OSError, ValueError, IndexError) as e:
        logger.warning(f"Failed to load logo, skipping it: {e}")
        return None


def metadata_label(representation: Representation) -> str:
    """Counts line of the metadata block."""
    if representation.is_table:
        table = representation.table
        return f"Rows: {table.row_count} | Columns: {table.column_count}"
    return f"Lines: {len(representation.lines)}"


class DocumentComposer:
    """Draws a LayoutPlan onto a drawing surface."""

    def __init__(
        self,
        surface: DrawingSurface,
        options: RenderOptions,
        generated_at: Optional[datetime] = None,
    ):
        """Initialize composer.

        Args:
            surface: Drawing backend
            options: Render options (fonts, decorations, metadata flag)
            generated_at: Timestamp shown in the metadata block (now when None)
        """
        self.surface = surface
        self.options = options
        self.sizes = options.sizes
        self.decorations = options.decorations
        self.generated_at = generated_at or datetime.now()

    def compose(self, plan: LayoutPlan, logo: Optional[bytes] = None) -> int:
        """Draw all pages of the plan.

        Args:
            plan: Planned pages
            logo: Validated logo bytes (see :func:`load_logo`)

        Returns:
            Number of pages drawn
        """
        title = self.decorations.title or plan.profile.title_for(plan.representation.mode)

        for page in plan.pages:
            self.surface.add_page(plan.geometry.width, plan.geometry.height)
            if page.number == 1:
                self._draw_logo(plan, logo)
            self._draw_header_text()
            if page.number == 1:
                self._draw_masthead(plan, title)
            if page.continued:
                self._draw_continued(title)

            if plan.representation.is_table:
                self._draw_table(plan, page)
            else:
                self._draw_lines(page)

        total = plan.page_count
        for index in range(total):
            self.surface.select_page(index)
            self._draw_footer(index + 1, total, plan)
            if self.decorations.watermark:
                self._draw_watermark(plan)

        logger.info(f"Composed {total} page(s)")
        return total

    def _draw_logo(self, plan: LayoutPlan, logo: Optional[bytes]) -> None:
        if logo is None or plan.masthead.logo_y is None:
            return
        try:
            self.surface.image(logo, SIDE_MARGIN, plan.masthead.logo_y, LOGO_WIDTH, LOGO_HEIGHT)
        except Exception as e:
            logger.warning(f"Failed to add logo: {e}")

    def _draw_header_text(self) -> None:
        if not self.decorations.header_text:
            return
        width, _ = self.surface.page_size()
        self.surface.set_font("helvetica", DECORATION_FONT_SIZE)
        self.surface.set_text_color(MUTED_COLOR)
        self.surface.text(self.decorations.header_text, width - SIDE_MARGIN, HEADER_TEXT_Y, align="right")

    def _draw_masthead(self, plan: LayoutPlan, title: str) -> None:
        masthead = plan.masthead
        self.surface.set_font("helvetica", self.sizes.title)
        self.surface.set_text_color(TEXT_COLOR)
        self.surface.text(title, SIDE_MARGIN, masthead.title_y)

        if not masthead.metadata_y:
            return
        self.surface.set_font("helvetica", self.sizes.body)
        self.surface.set_text_color(MUTED_COLOR)
        generated = self.generated_at.strftime("%Y-%m-%d %H:%M:%S")
        self.surface.text(f"Generated: {generated}", SIDE_MARGIN, masthead.metadata_y[0])
        self.surface.text(metadata_label(plan.representation), SIDE_MARGIN, masthead.metadata_y[1])

    def _draw_continued(self, title: str) -> None:
        self.surface.set_font("helvetica", DECORATION_FONT_SIZE)
        self.surface.set_text_color(MUTED_COLOR)
        self.surface.text(f"{title} (continued)", SIDE_MARGIN, CONTINUED_MARKER_Y)

    def _draw_table(self, plan: LayoutPlan, page: Page) -> None:
        numbered = self.options.show_row_numbers

        for row in page.rows:
            if row.is_header:
                fill = plan.profile.accent
                size, bold, color = self.sizes.header, True, HEADER_TEXT_COLOR
            else:
                fill = plan.profile.alternate_fill if row.index % 2 == 1 else None
                size, bold, color = self.sizes.body, False, TEXT_COLOR

            lh = line_height(size)
            x = SIDE_MARGIN
            for column, (width, lines) in enumerate(zip(plan.columns, row.cells)):
                self.surface.rect(
                    x, row.y, width, row.height,
                    fill=fill, stroke=GRID_COLOR, line_width=GRID_LINE_WIDTH,
                )

                number_column = numbered and column == 0
                self.surface.set_font("helvetica", size, bold=bold)
                self.surface.set_text_color(MUTED_COLOR if number_column and not row.is_header else color)
                for k, text in enumerate(lines):
                    baseline = row.y + CELL_PADDING + k * lh + size * _MM_PER_PT * _ASCENT
                    if number_column:
                        self.surface.text(text, x + width / 2, baseline, align="center")
                    else:
                        self.surface.text(text, x + CELL_PADDING, baseline)
                x += width

    def _draw_lines(self, page: Page) -> None:
        self.surface.set_font("courier", self.sizes.body)
        for placed in page.lines:
            self.surface.set_text_color(LINE_NUMBER_COLOR)
            self.surface.text(str(placed.number).rjust(4), LINE_NUMBER_X, placed.y)
            self.surface.set_text_color(SYNTAX_COLORS[placed.line.kind])
            self.surface.text(placed.text, LINE_TEXT_X, placed.y)

    def _draw_footer(self, number: int, total: int, plan: LayoutPlan) -> None:
        width, height = plan.geometry.width, plan.geometry.height
        y = height - FOOTER_OFFSET

        self.surface.set_font("helvetica", DECORATION_FONT_SIZE)
        self.surface.set_text_color(MUTED_COLOR)
        self.surface.text(f"Page {number} of {total}", width / 2, y, align="center")
        if self.decorations.footer_text:
            self.surface.text(self.decorations.footer_text, width - SIDE_MARGIN, y, align="right")
        self.surface.text(ATTRIBUTION, SIDE_MARGIN, y)

    def _draw_watermark(self, plan: LayoutPlan) -> None:
        self.surface.set_font("helvetica", WATERMARK_FONT_SIZE, bold=True)
        self.surface.set_text_color(WATERMARK_COLOR)
        self.surface.text(
            self.decorations.watermark,
            plan.geometry.width / 2,
            plan.geometry.height / 2,
            align="center",
            angle=WATERMARK_ANGLE,
        )
