#!/usr/bin/env python3
"""
Extract a brand palette from a live web page.

Usage:
    extract-palette https://example.com --verbose
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional, Tuple

from playwright.async_api import async_playwright

from palette_extraction.config import ExtractionConfig
from palette_extraction.exceptions import PaletteExtractionError
from palette_extraction.logging_config import apply_logging_config, get_logger, get_logging_config
from palette_extraction.models import ColorPalette
from palette_extraction.page_handle import PlaywrightPageHandle
from palette_extraction.pipeline import ColorExtractionService

logger = get_logger(__name__)


def parse_viewport(value: str) -> Tuple[int, int]:
    try:
        width, height = (int(part) for part in value.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Viewport must look like 1280x800, got {value!r}")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract brand colors from a rendered web page")
    parser.add_argument("url")
    parser.add_argument("--timeout-ms", type=int, default=None, help="Viewport capture timeout")
    parser.add_argument("--min-colors", type=int, default=None,
                        help="Structural colors needed to skip the viewport capture")
    parser.add_argument("--viewport", type=parse_viewport, default=(1280, 800))
    parser.add_argument("--navigation-timeout-ms", type=int, default=30000)
    parser.add_argument("--verbose", action="store_true")
    return parser


async def extract_from_url(
    url: str,
    config: ExtractionConfig,
    viewport: Tuple[int, int] = (1280, 800),
    navigation_timeout_ms: int = 30000
) -> ColorPalette:
    """Render ``url`` in headless Chromium and extract its palette."""
    service = ColorExtractionService(config=config)
    width, height = viewport

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True)
        try:
            page = await browser.new_page(viewport={'width': width, 'height': height})
            await page.goto(url, wait_until="networkidle", timeout=navigation_timeout_ms)
            return await service.extract_palette(PlaywrightPageHandle(page))
        finally:
            await browser.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging_config = get_logging_config()
    if args.verbose:
        logging_config["default_level"] = "INFO"
    apply_logging_config(logging_config)

    try:
        config = ExtractionConfig.from_options(
            screenshot_timeout=args.timeout_ms,
            min_colors=args.min_colors,
            verbose=True if args.verbose else None
        )
    except PaletteExtractionError as e:
        logger.error(str(e))
        return 2

    try:
        palette = asyncio.run(extract_from_url(
            args.url,
            config,
            viewport=args.viewport,
            navigation_timeout_ms=args.navigation_timeout_ms
        ))
    except Exception as e:
        logger.error(f"Could not extract palette from {args.url}: {e}")
        return 1

    print(json.dumps(palette.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
