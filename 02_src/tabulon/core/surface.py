"""Page-drawing surfaces: the primitives the composer draws with.

All coordinates are millimetres from the top-left corner of the page, and
``y`` of a text call is the baseline.
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

import fitz  # pymupdf
import yaml
from PIL import Image

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

PT_PER_MM = 72 / 25.4

_BASE14_FONTS = {
    ("helvetica", False): "helv",
    ("helvetica", True): "hebo",
    ("courier", False): "cour",
    ("courier", True): "cobo",
}


class DrawingSurface(Protocol):
    """Protocol for page-drawing backends."""

    def add_page(self, width: float, height: float) -> int:
        """Append a page and make it current.

        Returns:
            0-based index of the new page
        """
        ...

    def select_page(self, index: int) -> None:
        """Make an existing page (0-based) current."""
        ...

    def set_font(self, family: str, size: float, bold: bool = False) -> None:
        """Set font family ("helvetica" or "courier"), point size and weight."""
        ...

    def set_text_color(self, rgb: RGB) -> None:
        """Set text colour as 0-255 components."""
        ...

    def text(self, text: str, x: float, y: float, align: str = "left", angle: float = 0.0) -> None:
        """Place text with its baseline at y.

        Args:
            align: "left", "center" or "right", relative to x
            angle: Counter-clockwise rotation in degrees about (x, y)
        """
        ...

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        """Place an image in the given box. Raises on undecodable data."""
        ...

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[RGB] = None,
        stroke: Optional[RGB] = None,
        line_width: float = 0.1,
    ) -> None:
        """Draw a filled and/or stroked rectangle."""
        ...

    def text_width(self, text: str, family: str, size: float, bold: bool = False) -> float:
        """Width of text in millimetres for the given font."""
        ...

    def page_size(self) -> Tuple[float, float]:
        """(width, height) of the current page."""
        ...

    def page_count(self) -> int:
        ...

    def save(self, path: Path) -> None:
        ...

    def to_bytes(self) -> bytes:
        ...

    def close(self) -> None:
        """Release backend resources. The surface is unusable afterwards."""
        ...


def _font_key(family: str, bold: bool) -> Tuple[str, bool]:
    family = family.lower()
    if family not in ("helvetica", "courier"):
        raise ValueError(f"Unsupported font family '{family}'")
    return family, bold


def _unit_color(rgb: Optional[RGB]) -> Optional[Tuple[float, float, float]]:
    if rgb is None:
        return None
    return tuple(component / 255 for component in rgb)


class PyMuPDFSurface:
    """PDF surface backed by pymupdf (fitz) with base-14 fonts."""

    def __init__(self) -> None:
        """Create an empty PDF document."""
        self._doc = fitz.open()
        self._page: Optional[Any] = None
        self._font = ("helvetica", False)
        self._size = 10.0
        self._color: RGB = (0, 0, 0)
        logger.debug("Initialized PyMuPDFSurface")

    def _current(self) -> Any:
        if self._page is None:
            raise RuntimeError("No current page, call add_page() first")
        return self._page

    def add_page(self, width: float, height: float) -> int:
        self._page = self._doc.new_page(width=width * PT_PER_MM, height=height * PT_PER_MM)
        return self._doc.page_count - 1

    def select_page(self, index: int) -> None:
        if index < 0 or index >= self._doc.page_count:
            raise ValueError(
                f"Invalid page index {index} (document has {self._doc.page_count} pages)"
            )
        self._page = self._doc.load_page(index)

    def set_font(self, family: str, size: float, bold: bool = False) -> None:
        self._font = _font_key(family, bold)
        self._size = size

    def set_text_color(self, rgb: RGB) -> None:
        self._color = rgb

    def text(self, text: str, x: float, y: float, align: str = "left", angle: float = 0.0) -> None:
        if not text:
            return
        page = self._current()
        fontname = _BASE14_FONTS[self._font]
        width = fitz.get_text_length(text, fontname=fontname, fontsize=self._size)
        offset = {"left": 0.0, "center": width / 2, "right": width}[align]

        anchor = fitz.Point(x * PT_PER_MM, y * PT_PER_MM)
        start = fitz.Point(anchor.x - offset, anchor.y)
        kwargs: Dict[str, Any] = {
            "fontsize": self._size,
            "fontname": fontname,
            "color": _unit_color(self._color),
        }
        if angle:
            # y grows downwards, so a counter-clockwise turn is a negative angle
            kwargs["morph"] = (anchor, fitz.Matrix(-angle))
        page.insert_text(start, text, **kwargs)

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        rect = fitz.Rect(
            x * PT_PER_MM,
            y * PT_PER_MM,
            (x + width) * PT_PER_MM,
            (y + height) * PT_PER_MM,
        )
        self._current().insert_image(rect, stream=data, keep_proportion=True)

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[RGB] = None,
        stroke: Optional[RGB] = None,
        line_width: float = 0.1,
    ) -> None:
        if fill is None and stroke is None:
            return
        box = fitz.Rect(
            x * PT_PER_MM,
            y * PT_PER_MM,
            (x + width) * PT_PER_MM,
            (y + height) * PT_PER_MM,
        )
        self._current().draw_rect(
            box,
            color=_unit_color(stroke),
            fill=_unit_color(fill),
            width=line_width * PT_PER_MM if stroke is not None else 0,
        )

    def text_width(self, text: str, family: str, size: float, bold: bool = False) -> float:
        fontname = _BASE14_FONTS[_font_key(family, bold)]
        return fitz.get_text_length(text, fontname=fontname, fontsize=size) / PT_PER_MM

    def page_size(self) -> Tuple[float, float]:
        rect = self._current().rect
        return rect.width / PT_PER_MM, rect.height / PT_PER_MM

    def page_count(self) -> int:
        return self._doc.page_count

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._doc.save(str(path))
        logger.info(f"Saved PDF ({self._doc.page_count} pages) to {path}")

    def to_bytes(self) -> bytes:
        return self._doc.tobytes()

    def close(self) -> None:
        self._doc.close()


# Average glyph advance as a fraction of the point size
_AVERAGE_ADVANCE = {"helvetica": 0.5, "courier": 0.6}


class MemorySurface:
    """In-memory surface that records drawing calls, for tests and dry runs."""

    def __init__(self) -> None:
        """Initialize an empty recording."""
        self.pages: List[Dict[str, Any]] = []
        self._index: Optional[int] = None
        self._font = ("helvetica", False)
        self._size = 10.0
        self._color: RGB = (0, 0, 0)
        logger.debug("Initialized MemorySurface")

    def _ops(self) -> List[Dict[str, Any]]:
        if self._index is None:
            raise RuntimeError("No current page, call add_page() first")
        return self.pages[self._index]["ops"]

    def add_page(self, width: float, height: float) -> int:
        self.pages.append({"width": width, "height": height, "ops": []})
        self._index = len(self.pages) - 1
        return self._index

    def select_page(self, index: int) -> None:
        if index < 0 or index >= len(self.pages):
            raise ValueError(f"Invalid page index {index} (document has {len(self.pages)} pages)")
        self._index = index

    def set_font(self, family: str, size: float, bold: bool = False) -> None:
        self._font = _font_key(family, bold)
        self._size = size

    def set_text_color(self, rgb: RGB) -> None:
        self._color = rgb

    def text(self, text: str, x: float, y: float, align: str = "left", angle: float = 0.0) -> None:
        self._ops().append({
            "op": "text",
            "text": text,
            "x": x,
            "y": y,
            "align": align,
            "angle": angle,
            "font": self._font[0],
            "bold": self._font[1],
            "size": self._size,
            "color": list(self._color),
        })

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            image_format = img.format
        self._ops().append({
            "op": "image",
            "format": image_format,
            "x": x,
            "y": y,
            "width": width,
            "height": height,
        })

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[RGB] = None,
        stroke: Optional[RGB] = None,
        line_width: float = 0.1,
    ) -> None:
        self._ops().append({
            "op": "rect",
            "x": x,
            "y": y,
            "width": width,
            "height": height,
            "fill": list(fill) if fill else None,
            "stroke": list(stroke) if stroke else None,
        })

    def text_width(self, text: str, family: str, size: float, bold: bool = False) -> float:
        family, _ = _font_key(family, bold)
        return len(text) * size * _AVERAGE_ADVANCE[family] / PT_PER_MM

    def page_size(self) -> Tuple[float, float]:
        if self._index is None:
            raise RuntimeError("No current page, call add_page() first")
        page = self.pages[self._index]
        return page["width"], page["height"]

    def page_count(self) -> int:
        return len(self.pages)

    def texts(self, index: int) -> List[str]:
        """All text placed on one page, in drawing order."""
        return [op["text"] for op in self.pages[index]["ops"] if op["op"] == "text"]

    def to_bytes(self) -> bytes:
        return yaml.safe_dump({"pages": self.pages}, allow_unicode=True, sort_keys=False).encode("utf-8")

    def save(self, path: Path) -> None:
        """Write the recorded drawing calls as YAML."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        logger.info(f"Saved drawing transcript ({len(self.pages)} pages) to {path}")

    def close(self) -> None:
        """Nothing to release; the recording stays readable."""
