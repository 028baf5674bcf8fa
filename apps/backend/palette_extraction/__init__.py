"""Brand color palette extraction from rendered web pages."""

from .config import ExtractionConfig
from .exceptions import PaletteExtractionError, PageHandleError
from .models import ColorCandidate, ColorPalette, PaletteSource, SourceCategory, StageResult
from .page_handle import PageHandle, PlaywrightPageHandle
from .perceptual_extractor import extract_colors_from_screenshot
from .pipeline import ColorExtractionService, extract_color_palette, log_color_palette
from .structural_extractor import extract_colors_from_dom

__all__ = [
    "ExtractionConfig",
    "PaletteExtractionError",
    "PageHandleError",
    "ColorCandidate",
    "ColorPalette",
    "PaletteSource",
    "SourceCategory",
    "StageResult",
    "PageHandle",
    "PlaywrightPageHandle",
    "ColorExtractionService",
    "extract_color_palette",
    "log_color_palette",
    "extract_colors_from_dom",
    "extract_colors_from_screenshot"
]
