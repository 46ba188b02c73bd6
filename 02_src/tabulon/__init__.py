"""
Tabulon - turn CSV, JSON and XML data into paginated, styled PDF documents.

This package provides:
- DocumentConverter: one-call conversion of a file or string
- choose_representation: table vs. structured layout decision
- LayoutPlanner / DocumentComposer: pagination and page decoration
- PyMuPDFSurface / MemorySurface: drawing backends
"""

__version__ = "0.1.0"

# Core classes
from .core.converter import ConversionError, ConversionResult, DocumentConverter
from .core.dispatch import choose_representation
from .core.planner import LayoutPlanner
from .core.composer import DocumentComposer
from .core.surface import DrawingSurface, MemorySurface, PyMuPDFSurface

# Schemas
from .schemas.config import ConverterConfig, Decorations, PageGeometry, RenderOptions
from .schemas.document import DocumentLine, LineKind, RecordGroup, Representation, TableProjection
from .schemas.common import FormatProfile, LayoutPlan, Page

# Utilities
from .utils.detection import UnsupportedFormatError, detect_format

__all__ = [
    # Version
    "__version__",

    # Core classes
    "DocumentConverter",
    "ConversionResult",
    "ConversionError",
    "choose_representation",
    "LayoutPlanner",
    "DocumentComposer",
    "DrawingSurface",
    "MemorySurface",
    "PyMuPDFSurface",

    # Schemas - Config
    "ConverterConfig",
    "Decorations",
    "PageGeometry",
    "RenderOptions",

    # Schemas - Document
    "DocumentLine",
    "LineKind",
    "RecordGroup",
    "Representation",
    "TableProjection",

    # Schemas - Layout
    "FormatProfile",
    "LayoutPlan",
    "Page",

    # Utilities
    "UnsupportedFormatError",
    "detect_format",
]
