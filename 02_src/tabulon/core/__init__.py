"""Core components: dispatch, layout planning, composition and drawing surfaces."""

from .surface import DrawingSurface, MemorySurface, PyMuPDFSurface
from .dispatch import choose_representation
from .planner import LayoutPlanner, compute_column_widths, plan_masthead, wrap_text
from .composer import DocumentComposer, load_logo
from .converter import ConversionError, ConversionResult, DocumentConverter

__all__ = [
    # Surfaces
    "DrawingSurface",
    "MemorySurface",
    "PyMuPDFSurface",
    # Pipeline
    "choose_representation",
    "LayoutPlanner",
    "compute_column_widths",
    "plan_masthead",
    "wrap_text",
    "DocumentComposer",
    "load_logo",
    # Facade
    "ConversionError",
    "ConversionResult",
    "DocumentConverter",
]
