#!/usr/bin/env python3
"""
Structural Extractor - reads brand colors from the computed styles of an
already-rendered page.

Categories are scanned in priority order:
1. CSS custom properties (--primary, --brand-*, ...)
2. Header/nav background, text and logo container
3. Buttons and CTAs
4. Hero section text, background and gradient stops
5. Accent badges/tags
6. Footer
7. A sample of plain links

Each category is fault-tolerant on its own: a failing category contributes
no candidates and the scan continues.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from palette_extraction.config import ExtractionConfig
from palette_extraction.logging_config import get_logger
from palette_extraction.models import ColorCandidate, SourceCategory
from palette_extraction.page_handle import PageHandle

module_logger = get_logger(__name__)

BRAND_CSS_VARIABLES: Tuple[str, ...] = (
    "--primary", "--secondary", "--accent",
    "--brand-primary", "--brand-secondary", "--brand-accent",
    "--color-primary", "--color-secondary", "--color-accent",
    "--main-color", "--accent-color", "--highlight-color",
    "--theme-color", "--brand-color",
)

_GRADIENT_STOP = re.compile(r"rgba?\([^)]+\)")


def single_value(value: str) -> List[str]:
    return [value] if value else []


def gradient_stops(value: str) -> List[str]:
    """Color stops of a gradient background-image, empty for anything else."""
    if not value or 'gradient' not in value:
        return []
    return _GRADIENT_STOP.findall(value)


@dataclass(frozen=True)
class StyleRule:
    """One computed property read from each matched element."""
    property: str
    weight: int
    extract: Callable[[str], List[str]] = single_value


@dataclass(frozen=True)
class StyleQuery:
    selector: str
    rules: Tuple[StyleRule, ...]
    scope: Optional[str] = None
    limit: Optional[int] = None

    @property
    def properties(self) -> List[str]:
        return list(dict.fromkeys(rule.property for rule in self.rules))


@dataclass(frozen=True)
class StyleCategory:
    """A weighted group of related page elements."""
    name: str
    source: SourceCategory
    queries: Tuple[StyleQuery, ...]


HEADER_SELECTOR = "header, nav, .header, .navbar, .site-header, .main-header"

STYLE_CATEGORIES: Tuple[StyleCategory, ...] = (
    StyleCategory(
        name="css_variables",
        source=SourceCategory.CSS_VAR,
        queries=(
            StyleQuery(
                selector=":root",
                rules=tuple(StyleRule(var, 10) for var in BRAND_CSS_VARIABLES),
                limit=1
            ),
        )
    ),
    StyleCategory(
        name="header",
        source=SourceCategory.HEADER,
        queries=(
            StyleQuery(
                selector=HEADER_SELECTOR,
                rules=(StyleRule("backgroundColor", 8), StyleRule("color", 6))
            ),
            StyleQuery(
                selector=".logo, [class*='logo'], .brand, .site-title",
                scope=HEADER_SELECTOR,
                rules=(StyleRule("backgroundColor", 7), StyleRule("color", 7))
            ),
        )
    ),
    StyleCategory(
        name="buttons",
        source=SourceCategory.BUTTON,
        queries=(
            StyleQuery(
                selector=(
                    "button, .btn, .button, [class*='cta'], [class*='button'], "
                    "a[class*='btn'], .primary-button, .secondary-button"
                ),
                rules=(
                    StyleRule("backgroundColor", 7),
                    StyleRule("color", 5),
                    StyleRule("borderColor", 4),
                )
            ),
        )
    ),
    StyleCategory(
        name="hero",
        source=SourceCategory.HERO,
        queries=(
            StyleQuery(
                selector=(
                    ".hero, .banner, .masthead, [class*='hero'], [class*='banner'], "
                    ".jumbotron, .intro, .above-fold, section:first-of-type"
                ),
                rules=(
                    StyleRule("color", 6),
                    StyleRule("backgroundColor", 5),
                    StyleRule("backgroundImage", 4, gradient_stops),
                )
            ),
        )
    ),
    StyleCategory(
        name="accents",
        source=SourceCategory.ACCENT,
        queries=(
            StyleQuery(
                selector=(
                    ".badge, .tag, .chip, [class*='badge'], [class*='tag'], [class*='pill'], "
                    ".highlight, .accent, [class*='accent'], .featured"
                ),
                rules=(StyleRule("backgroundColor", 5), StyleRule("color", 3))
            ),
        )
    ),
    StyleCategory(
        name="footer",
        source=SourceCategory.FOOTER,
        queries=(
            StyleQuery(
                selector="footer, .footer, .site-footer",
                rules=(StyleRule("backgroundColor", 3), StyleRule("color", 2))
            ),
        )
    ),
    StyleCategory(
        name="links",
        source=SourceCategory.ACCENT,
        queries=(
            StyleQuery(
                selector="a:not([class*='btn']):not([class*='button'])",
                rules=(StyleRule("color", 2),),
                limit=20
            ),
        )
    ),
)


class CandidateCollector:
    """Stage-wide dedup: one entry per hex, keeping the highest weight seen."""

    def __init__(self):
        self._by_hex: Dict[str, ColorCandidate] = {}

    def add(self, raw: str, source: SourceCategory, weight: int) -> None:
        candidate = ColorCandidate.from_hex(raw, source, weight)
        if candidate is None:
            return
        existing = self._by_hex.get(candidate.hex)
        if existing is None:
            self._by_hex[candidate.hex] = candidate
        elif weight > existing.weight:
            # First observed source stays attached to the color
            self._by_hex[candidate.hex] = ColorCandidate(
                hex=existing.hex,
                source=existing.source,
                weight=weight,
                brightness=existing.brightness
            )

    @property
    def candidates(self) -> List[ColorCandidate]:
        return list(self._by_hex.values())


class StructuralExtractor:
    """Extracts weighted color candidates from computed page styles."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        categories: Tuple[StyleCategory, ...] = STYLE_CATEGORIES,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config or ExtractionConfig()
        self.categories = categories
        self.logger = logger or module_logger

    async def extract(self, page: PageHandle) -> List[ColorCandidate]:
        """Scan every category and return deduplicated, unordered candidates."""
        collector = CandidateCollector()

        for category in self.categories:
            try:
                await self.scan_category(page, category, collector)
            except Exception as e:
                self.logger.warning(f"[ColorExtraction] {category.name} scan failed: {e}")

        candidates = collector.candidates
        if self.config.verbose:
            self.logger.info(
                f"[ColorExtract] Structural scan found {len(candidates)} colors: "
                f"{[c.describe() for c in candidates]}"
            )
        return candidates

    async def scan_category(
        self,
        page: PageHandle,
        category: StyleCategory,
        collector: CandidateCollector
    ) -> None:
        """Read one category into the collector.

        Rows are gathered for every query before any color is added, so a
        failing query leaves the collector untouched for this category.
        """
        observed: List[Tuple[str, int]] = []
        for query in category.queries:
            rows = await page.query_computed_styles(
                query.selector,
                query.properties,
                scope=query.scope,
                limit=query.limit
            )
            for row in rows:
                for rule in query.rules:
                    for value in rule.extract((row.get(rule.property) or '').strip()):
                        observed.append((value, rule.weight))

        for value, weight in observed:
            collector.add(value, category.source, weight)


async def extract_colors_from_dom(
    page: PageHandle,
    config: Optional[ExtractionConfig] = None
) -> List[ColorCandidate]:
    """Convenience wrapper around StructuralExtractor."""
    return await StructuralExtractor(config=config).extract(page)
