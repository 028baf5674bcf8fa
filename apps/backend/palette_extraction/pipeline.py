#!/usr/bin/env python3
"""
Color Extraction Service - derives a brand palette from a rendered page.

Strategy:
1. Structural extraction from computed styles, then noise filtering
2. Only if fewer than ``min_colors`` survive, perceptual extraction from a
   viewport capture, then noise filtering
3. Merge, rank and score; the constant fallback palette is used only when
   nothing survives

The run is strictly sequential. The page handle is only observed, and the
service keeps no state between calls, so one instance may serve many pages.
Callers must serialize concurrent runs against the same page.
"""

import logging
from typing import Any, List, Optional

from palette_extraction.config import ExtractionConfig
from palette_extraction.exceptions import PageHandleError, StructuralExtractionError
from palette_extraction.logging_config import get_logger
from palette_extraction.models import ColorCandidate, ColorPalette, StageResult
from palette_extraction.noise_filter import filter_brand_colors
from palette_extraction.page_handle import PageHandle, ensure_page_handle
from palette_extraction.palette_builder import build_palette
from palette_extraction.perceptual_extractor import PerceptualExtractor
from palette_extraction.structural_extractor import StructuralExtractor

module_logger = get_logger(__name__)


class ColorExtractionService:
    """Runs the two-stage extraction with filtering, ranking and fallback."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        logger: Optional[logging.Logger] = None,
        structural_extractor: Optional[StructuralExtractor] = None,
        perceptual_extractor: Optional[PerceptualExtractor] = None
    ):
        self.config = (config or ExtractionConfig()).validate()
        self.logger = logger or module_logger
        self.structural_extractor = structural_extractor or StructuralExtractor(
            config=self.config, logger=self.logger
        )
        self.perceptual_extractor = perceptual_extractor or PerceptualExtractor(
            config=self.config, logger=self.logger
        )

    async def extract_palette(self, page: Any) -> ColorPalette:
        """
        Extract a bounded, scored brand palette from ``page``.

        Args:
            page: PageHandle for an already-rendered page

        Returns:
            A valid ColorPalette; ``source == fallback`` with zero confidence
            signals that the result needs human review

        Raises:
            PageHandleError: if ``page`` cannot be used at all
        """
        page = ensure_page_handle(page)

        structural = await self._run_structural(page)

        if structural.count >= self.config.min_colors:
            perceptual = StageResult.skipped(
                "perceptual", f"structural stage yielded {structural.count} colors"
            )
        else:
            perceptual = await self._run_perceptual(page)

        palette = build_palette(structural.candidates, perceptual.candidates, self.config.max_colors)

        if palette.needs_review:
            self.logger.warning("[ColorExtraction] No colors extracted, using fallback palette")

        log_color_palette(palette, logger=self.logger, verbose=self.config.verbose)
        return palette

    async def _run_structural(self, page: PageHandle) -> StageResult:
        try:
            raw = await self.structural_extractor.extract(page)
        except PageHandleError:
            raise
        except Exception as e:
            error = StructuralExtractionError("DOM extraction failed", cause=e)
            self.logger.warning(f"[ColorExtraction] {error}")
            return StageResult.failed("structural", str(error), error)

        filtered = self._filter("structural", raw)
        if self.config.verbose:
            self.logger.info(
                f"[ColorExtract] DOM kept {len(filtered)} colors: "
                f"{[c.describe() for c in filtered]}"
            )
        return StageResult.succeeded("structural", filtered)

    async def _run_perceptual(self, page: PageHandle) -> StageResult:
        try:
            result = await self.perceptual_extractor.run(page)
        except Exception as e:
            self.logger.warning(f"[ColorExtraction] Screenshot extraction failed: {e}")
            return StageResult.failed("perceptual", str(e), e)

        if not result.ok:
            return result

        filtered = self._filter("perceptual", result.candidates)
        if self.config.verbose:
            self.logger.info(
                f"[ColorExtract] Screenshot kept {len(filtered)} colors: "
                f"{[c.hex for c in filtered]}"
            )
        return StageResult.succeeded("perceptual", filtered)

    def _filter(self, stage: str, candidates: List[ColorCandidate]) -> List[ColorCandidate]:
        reporter = None
        if self.config.verbose:
            def reporter(candidate: ColorCandidate, reason: str) -> None:
                self.logger.info(
                    f"[ColorExtract] {stage}: filtered {reason} {candidate.hex} "
                    f"(source: {candidate.source.value}, weight: {candidate.weight})"
                )
        return filter_brand_colors(candidates, reporter)


def log_color_palette(
    palette: ColorPalette,
    context: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
    verbose: bool = False
) -> None:
    """Debug helper to log extraction results"""
    if not verbose:
        return

    logger = logger or module_logger
    logger.info(
        f"[ColorExtract] {context or 'Palette'} "
        f"(source: {palette.source.value}, confidence: {palette.confidence})"
    )
    logger.info(f"  Primary: {', '.join(palette.primary_colors)}")
    logger.info(f"  Secondary: {', '.join(palette.secondary_colors)}")


async def extract_color_palette(
    page: Any,
    screenshot_timeout: Optional[int] = None,
    min_colors: Optional[int] = None,
    logger: Optional[logging.Logger] = None
) -> ColorPalette:
    """
    Main color extraction function with fallback.

    Args:
        page: PageHandle for an already-rendered page
        screenshot_timeout: Viewport capture timeout in ms (default 10000)
        min_colors: Structural colors needed to skip the capture (default 3)
        logger: Optional logger for diagnostics

    Returns:
        ColorPalette, never empty
    """
    config = ExtractionConfig.from_options(
        screenshot_timeout=screenshot_timeout,
        min_colors=min_colors
    )
    return await ColorExtractionService(config=config, logger=logger).extract_palette(page)
