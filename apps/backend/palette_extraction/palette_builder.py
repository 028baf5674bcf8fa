"""
Combine filtered candidate pools into the final palette.

Structural colors always rank ahead of perceptual ones; perceptual colors
only fill the remaining slots.
"""

from typing import List, Sequence

from palette_extraction.config import MAX_PALETTE_COLORS
from palette_extraction.models import ColorCandidate, ColorPalette, PaletteSource


def determine_source(structural: Sequence[ColorCandidate], perceptual: Sequence[ColorCandidate]) -> PaletteSource:
    if structural and perceptual:
        return PaletteSource.HYBRID
    if perceptual:
        return PaletteSource.PERCEPTUAL
    return PaletteSource.STRUCTURAL


def merge_candidates(
    structural: Sequence[ColorCandidate],
    perceptual: Sequence[ColorCandidate],
    max_colors: int = MAX_PALETTE_COLORS
) -> List[str]:
    """Ordered, case-insensitively unique hex list capped at ``max_colors``."""
    ordered: List[str] = []
    seen = set()

    # sorted() is stable, so equal weights keep extraction order
    for candidate in sorted(structural, key=lambda c: c.weight, reverse=True):
        key = candidate.hex.lower()
        if key not in seen and len(ordered) < max_colors:
            ordered.append(candidate.hex)
            seen.add(key)

    for candidate in perceptual:
        key = candidate.hex.lower()
        if key not in seen and len(ordered) < max_colors:
            ordered.append(candidate.hex)
            seen.add(key)

    return ordered


def calculate_confidence(candidates: Sequence[ColorCandidate]) -> int:
    """
    Score extraction quality from 0 to 100.

    Based on:
    1. Number of colors (up to 60 points for 6 colors)
    2. Source diversity (10 points per distinct source category)
    3. Average weight (3 points per weight unit)
    """
    if not candidates:
        return 0

    color_count = min(len(candidates), MAX_PALETTE_COLORS)
    sources = {c.source for c in candidates}
    avg_weight = sum(c.weight for c in candidates) / len(candidates)

    confidence = color_count * 10 + len(sources) * 10 + avg_weight * 3
    return int(round(min(confidence, 100)))


def fallback_palette() -> ColorPalette:
    """Constant palette used when nothing survives extraction and filtering."""
    return ColorPalette.fallback()


def build_palette(
    structural: Sequence[ColorCandidate],
    perceptual: Sequence[ColorCandidate],
    max_colors: int = MAX_PALETTE_COLORS
) -> ColorPalette:
    """Merge both filtered pools, score them, and fall back only when the merge is empty."""
    ordered = merge_candidates(structural, perceptual, max_colors)
    if not ordered:
        return fallback_palette()

    confidence = calculate_confidence(list(structural) + list(perceptual))
    return ColorPalette.from_ordered(ordered, confidence, determine_source(structural, perceptual))
