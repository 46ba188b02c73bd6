"""DocumentConverter - main entry point for data-to-PDF conversion."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from ..schemas.config import ConverterConfig, RenderOptions
from ..utils.detection import default_filename, detect_format, output_filename
from .composer import DocumentComposer, load_logo
from .dispatch import choose_representation
from .planner import LayoutPlanner
from .surface import DrawingSurface, PyMuPDFSurface

logger = logging.getLogger(__name__)


class ConversionError(RuntimeError):
    """Raised when the drawing surface fails while rendering or saving."""


@dataclass
class ConversionResult:
    """Result of one conversion.

    Attributes:
        source_format: "csv", "json" or "xml"
        mode: Representation used ("table" or "structured")
        page_count: Number of pages produced
        filename: Output filename
        surface: Surface holding the finished document (closed after convert_file)
        output_path: Where the document was saved (None when not saved)
    """
    source_format: str
    mode: str
    page_count: int
    filename: str
    surface: DrawingSurface
    output_path: Optional[Path] = None


class DocumentConverter:
    """Converts CSV, JSON and XML content into paginated documents.

    Each call builds its own representation, plan and surface; nothing is
    shared between conversions.
    """

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        config: Optional[ConverterConfig] = None,
        surface_factory: Callable[[], DrawingSurface] = PyMuPDFSurface,
        generated_at: Optional[datetime] = None,
    ):
        """Initialize converter.

        Args:
            options: Render options (defaults when None)
            config: Converter configuration (output directory, log level)
            surface_factory: Creates the drawing surface for each conversion
            generated_at: Fixed metadata timestamp (current time when None)
        """
        self.options = options or RenderOptions()
        self.config = config or ConverterConfig()
        self.surface_factory = surface_factory
        self.generated_at = generated_at

    def convert(self, content: str, source_format: str) -> ConversionResult:
        """Convert content held in memory.

        Args:
            content: Raw file text
            source_format: "csv", "json" or "xml"

        Returns:
            ConversionResult with the finished (unsaved) surface

        Raises:
            ValueError: If source_format is not supported
            ConversionError: If the drawing surface fails
        """
        source_format = source_format.lower()
        representation = choose_representation(content, source_format, self.options.layout)
        logo = load_logo(self.options.decorations.logo)

        surface = self.surface_factory()
        try:
            planner = LayoutPlanner(self.options, surface.text_width)
            plan = planner.plan(representation, has_logo=logo is not None)
            composer = DocumentComposer(surface, self.options, generated_at=self.generated_at)
            page_count = composer.compose(plan, logo=logo)
        except Exception as e:
            logger.error(f"Rendering {source_format} document failed: {e}")
            raise ConversionError(f"Failed to render {source_format} document: {e}") from e

        return ConversionResult(
            source_format=source_format,
            mode=representation.mode,
            page_count=page_count,
            filename=self.options.filename or default_filename(source_format),
            surface=surface,
        )

    def convert_file(
        self,
        source_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
    ) -> ConversionResult:
        """Convert a file and save the result.

        Args:
            source_path: .csv, .json or .xml file
            output_path: Destination (config.output_dir / <source stem>.pdf when None)

        Returns:
            ConversionResult with output_path set and the surface closed

        Raises:
            UnsupportedFormatError: If the extension is not supported
            ConversionError: If rendering or saving fails
        """
        source_path = Path(source_path)
        source_format = detect_format(source_path)
        logger.info(f"Converting {source_path} ({source_format})")

        content = source_path.read_text(encoding="utf-8-sig")
        result = self.convert(content, source_format)

        if output_path is None:
            result.filename = self.options.filename or output_filename(source_format, source_path)
            output_path = self.config.output_dir / result.filename
        output_path = Path(output_path)

        try:
            result.surface.save(output_path)
        except Exception as e:
            logger.error(f"Saving {output_path} failed: {e}")
            raise ConversionError(f"Failed to save {output_path}: {e}") from e
        finally:
            result.surface.close()

        result.output_path = output_path
        result.filename = output_path.name
        logger.info(f"Wrote {result.page_count} page(s) to {output_path}")
        return result
