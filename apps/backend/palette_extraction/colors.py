"""Color normalization and RGB-space helpers used throughout extraction."""

import re
from typing import Optional, Tuple

_HEX_SHORT = re.compile(r"#([0-9a-f])([0-9a-f])([0-9a-f])")
_HEX_LONG = re.compile(r"#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})")
_RGB = re.compile(
    r"rgba?\(\s*([0-9.]+)\s*[,\s]\s*([0-9.]+)\s*[,\s]\s*([0-9.]+)"
    r"(?:\s*[,/]\s*([0-9.]+%?))?\s*\)"
)


def _channel(value: str) -> int:
    return max(0, min(255, int(round(float(value)))))


def _alpha(value: Optional[str]) -> float:
    if value is None:
        return 1.0
    if value.endswith('%'):
        return float(value[:-1]) / 100.0
    return float(value)


def normalize_color(raw: Optional[str]) -> Optional[str]:
    """
    Canonicalize a CSS color string into a lowercase 6-digit hex.

    Accepts rgb()/rgba() (comma or space separated), #rgb and #rrggbb.
    Returns None for "transparent", a zero alpha, and anything else.
    """
    if not raw:
        return None

    value = raw.strip().lower()
    if not value or value == 'transparent':
        return None

    if value.startswith('#'):
        match = _HEX_LONG.fullmatch(value)
        if match:
            return value
        match = _HEX_SHORT.fullmatch(value)
        if match:
            return '#' + ''.join(c * 2 for c in match.groups())
        return None

    if value.startswith('rgb'):
        match = _RGB.fullmatch(value)
        if not match:
            return None
        try:
            if _alpha(match.group(4)) <= 0:
                return None
            return rgb_to_hex(tuple(_channel(match.group(i)) for i in (1, 2, 3)))
        except ValueError:
            return None

    return None


def rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    """Convert RGB to hex color."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert a 6-digit hex color to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))


def color_brightness(hex_color: str) -> float:
    """Perceived brightness (0-255) using the YIQ luma weights."""
    r, g, b = hex_to_rgb(hex_color)
    return (r * 299 + g * 587 + b * 114) / 1000


def saturation(hex_color: str) -> float:
    """HSV-style saturation (0.0 to 1.0); 0 for black."""
    rgb = hex_to_rgb(hex_color)
    max_val = max(rgb)
    if max_val == 0:
        return 0.0
    return (max_val - min(rgb)) / max_val


def color_distance(color1: str, color2: str) -> float:
    """Euclidean distance between two hex colors in RGB space."""
    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    return sum((c1 - c2) ** 2 for c1, c2 in zip(rgb1, rgb2)) ** 0.5
