"""
Noise filter - drops candidates that are unlikely to be brand colors.

Rules are evaluated in order and the first match rejects the candidate:
exact duplicate, near-black, near-white, gray, skin tone, near-duplicate.
"""

from typing import Callable, Iterable, List, Optional

from palette_extraction.colors import color_distance, hex_to_rgb, saturation
from palette_extraction.models import ColorCandidate

NEAR_BLACK_BRIGHTNESS = 15
NEAR_WHITE_BRIGHTNESS = 245
GRAY_MAX_SATURATION = 0.1
GRAY_BRIGHTNESS_RANGE = (50, 200)
NEAR_DUPLICATE_DISTANCE = 20

# Called with each rejected candidate and the rule that rejected it
RejectionReporter = Callable[[ColorCandidate, str], None]


def is_skin_tone(hex_color: str) -> bool:
    """Beige/tan range typical of photographed skin.

    Warm brand oranges and tans fall inside this range too.
    """
    r, g, b = hex_to_rgb(hex_color)
    return (
        150 < r < 255 and
        100 < g < 200 and
        50 < b < 180 and
        r > g > b
    )


def is_gray(candidate: ColorCandidate) -> bool:
    low, high = GRAY_BRIGHTNESS_RANGE
    return (
        saturation(candidate.hex) < GRAY_MAX_SATURATION and
        low <= candidate.brightness <= high
    )


def rejection_reason(candidate: ColorCandidate, retained: List[ColorCandidate]) -> Optional[str]:
    """Name of the first rule that rejects ``candidate``, or None to keep it."""
    hex_lower = candidate.hex.lower()
    if any(kept.hex.lower() == hex_lower for kept in retained):
        return "duplicate"
    if candidate.brightness < NEAR_BLACK_BRIGHTNESS:
        return "near-black"
    if candidate.brightness > NEAR_WHITE_BRIGHTNESS:
        return "near-white"
    if is_gray(candidate):
        return "gray"
    if is_skin_tone(candidate.hex):
        return "skin-tone"
    if any(color_distance(candidate.hex, kept.hex) < NEAR_DUPLICATE_DISTANCE for kept in retained):
        return "near-duplicate"
    return None


def filter_brand_colors(
    candidates: Iterable[ColorCandidate],
    reporter: Optional[RejectionReporter] = None
) -> List[ColorCandidate]:
    """Filter neutrals, photo colors and near-duplicates, preserving input order."""
    retained: List[ColorCandidate] = []

    for candidate in candidates:
        reason = rejection_reason(candidate, retained)
        if reason is None:
            retained.append(candidate)
        elif reporter is not None:
            reporter(candidate, reason)

    return retained
