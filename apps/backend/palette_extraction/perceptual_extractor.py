"""Perceptual color extraction from a viewport capture of the rendered page."""

import asyncio
import colorsys
import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from PIL import Image

from palette_extraction.colors import rgb_to_hex
from palette_extraction.config import ExtractionConfig
from palette_extraction.exceptions import CaptureTimeoutError, PerceptualExtractionError, QuantizationError
from palette_extraction.logging_config import get_logger
from palette_extraction.models import ColorCandidate, SourceCategory, StageResult

module_logger = get_logger(__name__)

STAGE = "perceptual"

QUANTIZE_COLORS = 64
THUMBNAIL_SIZE = (200, 200)

# Swatch target windows (HSL lightness and saturation)
TARGET_DARK_LUMA = 0.26
MAX_DARK_LUMA = 0.45
MIN_LIGHT_LUMA = 0.55
TARGET_LIGHT_LUMA = 0.74
MIN_NORMAL_LUMA = 0.3
TARGET_NORMAL_LUMA = 0.5
MAX_NORMAL_LUMA = 0.7
TARGET_MUTES_SAT = 0.3
MAX_MUTES_SAT = 0.4
TARGET_VIBRANT_SAT = 1.0
MIN_VIBRANT_SAT = 0.35

WEIGHT_SAT = 3.0
WEIGHT_LUMA = 6.5
WEIGHT_POPULATION = 0.5


class SwatchName(str, Enum):
    VIBRANT = "vibrant"
    DARK_VIBRANT = "dark-vibrant"
    MUTED = "muted"
    LIGHT_VIBRANT = "light-vibrant"
    LIGHT_MUTED = "light-muted"
    DARK_MUTED = "dark-muted"


# Candidate order and weight for each swatch
SWATCH_WEIGHTS: Tuple[Tuple[SwatchName, int], ...] = (
    (SwatchName.VIBRANT, 5),
    (SwatchName.DARK_VIBRANT, 4),
    (SwatchName.MUTED, 3),
    (SwatchName.LIGHT_VIBRANT, 2),
    (SwatchName.LIGHT_MUTED, 1),
    (SwatchName.DARK_MUTED, 1),
)


@dataclass(frozen=True)
class SwatchTarget:
    name: SwatchName
    target_luma: float
    min_luma: float
    max_luma: float
    target_sat: float
    min_sat: float
    max_sat: float


# Selection order matters: a color claimed by an earlier swatch is not reused
SWATCH_TARGETS: Tuple[SwatchTarget, ...] = (
    SwatchTarget(SwatchName.VIBRANT, TARGET_NORMAL_LUMA, MIN_NORMAL_LUMA, MAX_NORMAL_LUMA,
                 TARGET_VIBRANT_SAT, MIN_VIBRANT_SAT, 1.0),
    SwatchTarget(SwatchName.LIGHT_VIBRANT, TARGET_LIGHT_LUMA, MIN_LIGHT_LUMA, 1.0,
                 TARGET_VIBRANT_SAT, MIN_VIBRANT_SAT, 1.0),
    SwatchTarget(SwatchName.DARK_VIBRANT, TARGET_DARK_LUMA, 0.0, MAX_DARK_LUMA,
                 TARGET_VIBRANT_SAT, MIN_VIBRANT_SAT, 1.0),
    SwatchTarget(SwatchName.MUTED, TARGET_NORMAL_LUMA, MIN_NORMAL_LUMA, MAX_NORMAL_LUMA,
                 TARGET_MUTES_SAT, 0.0, MAX_MUTES_SAT),
    SwatchTarget(SwatchName.LIGHT_MUTED, TARGET_LIGHT_LUMA, MIN_LIGHT_LUMA, 1.0,
                 TARGET_MUTES_SAT, 0.0, MAX_MUTES_SAT),
    SwatchTarget(SwatchName.DARK_MUTED, TARGET_DARK_LUMA, 0.0, MAX_DARK_LUMA,
                 TARGET_MUTES_SAT, 0.0, MAX_MUTES_SAT),
)


@dataclass(frozen=True)
class QuantizedColor:
    rgb: Tuple[int, int, int]
    population: int

    @property
    def hsl(self) -> Tuple[float, float, float]:
        r, g, b = (c / 255.0 for c in self.rgb)
        h, l, s = colorsys.rgb_to_hls(r, g, b)
        return h, s, l

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)


def _weighted_mean(*pairs: Tuple[float, float]) -> float:
    total = sum(value * weight for value, weight in pairs)
    weights = sum(weight for _, weight in pairs)
    return total / weights


def _invert_diff(value: float, target: float) -> float:
    return 1 - abs(value - target)


def load_image(image_data: bytes) -> Image.Image:
    """Decode a capture into a small RGB image."""
    try:
        image = Image.open(io.BytesIO(image_data))
        image.load()
    except Exception as e:
        raise QuantizationError("Viewport capture could not be decoded", cause=e)

    if image.mode != 'RGB':
        if image.mode in ('RGBA', 'LA') or 'transparency' in image.info:
            image = image.convert('RGBA')
            background = Image.new('RGB', image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        else:
            image = image.convert('RGB')

    image.thumbnail(THUMBNAIL_SIZE)
    return image


def quantize_image(image: Image.Image, num_colors: int = QUANTIZE_COLORS) -> List[QuantizedColor]:
    """Median-cut quantization, most populous colors first, near-white dropped."""
    quantized = image.quantize(colors=num_colors, method=Image.Quantize.MEDIANCUT)
    palette = quantized.getpalette()
    counts = quantized.getcolors()
    if not palette or not counts:
        raise QuantizationError("Quantization produced no colors")

    colors = []
    for count, index in sorted(counts, reverse=True):
        rgb = tuple(palette[index * 3:index * 3 + 3])
        if all(c > 250 for c in rgb):
            continue
        colors.append(QuantizedColor(rgb=rgb, population=count))
    return colors


def select_swatches(colors: List[QuantizedColor]) -> Dict[SwatchName, QuantizedColor]:
    """Pick the best quantized color for each canonical swatch; missing swatches stay absent."""
    if not colors:
        return {}

    max_population = max(color.population for color in colors)
    selected: Dict[SwatchName, QuantizedColor] = {}

    for target in SWATCH_TARGETS:
        best: Optional[QuantizedColor] = None
        best_value = 0.0
        for color in colors:
            _, sat, luma = color.hsl
            if not (target.min_sat <= sat <= target.max_sat):
                continue
            if not (target.min_luma <= luma <= target.max_luma):
                continue
            if color in selected.values():
                continue
            value = _weighted_mean(
                (_invert_diff(sat, target.target_sat), WEIGHT_SAT),
                (_invert_diff(luma, target.target_luma), WEIGHT_LUMA),
                (color.population / max_population, WEIGHT_POPULATION),
            )
            if best is None or value > best_value:
                best = color
                best_value = value
        if best is not None:
            selected[target.name] = best

    return selected


def swatches_from_image(image_data: bytes) -> Dict[SwatchName, str]:
    """Decode, quantize and classify a capture into swatch hex colors."""
    image = load_image(image_data)
    return {name: color.hex for name, color in select_swatches(quantize_image(image)).items()}


def candidates_from_swatches(swatches: Dict[SwatchName, str]) -> List[ColorCandidate]:
    candidates = []
    for name, weight in SWATCH_WEIGHTS:
        hex_color = swatches.get(name)
        if not hex_color:
            continue
        candidate = ColorCandidate.from_hex(hex_color, SourceCategory.SCREENSHOT, weight)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


class PerceptualExtractor:
    """Extracts swatch candidates from a bounded viewport capture."""

    def __init__(self, config: Optional[ExtractionConfig] = None, logger: Optional[logging.Logger] = None):
        self.config = config or ExtractionConfig()
        self.logger = logger or module_logger

    async def run(self, page) -> StageResult:
        """Capture and quantize within the timeout; failures become a failed result."""
        timeout_ms = self.config.screenshot_timeout_ms
        try:
            candidates = await asyncio.wait_for(
                self._capture_and_quantize(page, timeout_ms),
                timeout=self.config.screenshot_timeout_seconds
            )
        except asyncio.TimeoutError as e:
            error = CaptureTimeoutError(timeout_ms, cause=e)
            self.logger.warning(f"[ColorExtraction] Screenshot extraction failed: {error}")
            return StageResult.failed(STAGE, str(error), error)
        except Exception as e:
            error = e if isinstance(e, PerceptualExtractionError) else PerceptualExtractionError(
                "Screenshot extraction failed", cause=e
            )
            self.logger.warning(f"[ColorExtraction] Screenshot extraction failed: {error}")
            return StageResult.failed(STAGE, str(error), error)

        if self.config.verbose:
            self.logger.info(
                f"[ColorExtract] Screenshot extracted {len(candidates)} colors: "
                f"{[c.describe() for c in candidates]}"
            )
        return StageResult.succeeded(STAGE, candidates)

    async def extract(self, page) -> List[ColorCandidate]:
        """Swatch candidates, or an empty list when capture or quantization fails."""
        result = await self.run(page)
        return result.candidates

    async def _capture_and_quantize(self, page, timeout_ms: int) -> List[ColorCandidate]:
        image_data = await page.capture_viewport(timeout_ms)
        if not image_data:
            raise PerceptualExtractionError("Viewport capture returned no data")
        swatches = await asyncio.to_thread(swatches_from_image, image_data)
        return candidates_from_swatches(swatches)


async def extract_colors_from_screenshot(
    page,
    config: Optional[ExtractionConfig] = None
) -> List[ColorCandidate]:
    """Convenience wrapper around PerceptualExtractor."""
    return await PerceptualExtractor(config=config).extract(page)
