"""Shared pytest fixtures for palette extraction tests."""

from __future__ import annotations

import asyncio
import io
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest
from PIL import Image

from palette_extraction.config import ExtractionConfig
from palette_extraction.page_handle import PageHandle
from palette_extraction.structural_extractor import STYLE_CATEGORIES, StyleQuery

RED = (220, 40, 40)
NAVY = (20, 40, 120)

StyleRows = Union[List[Dict[str, str]], Exception]


class FakePageHandle(PageHandle):
    """In-memory page serving canned computed styles and a canned capture."""

    def __init__(
        self,
        styles: Optional[Dict[Tuple[str, Optional[str]], StyleRows]] = None,
        capture: Union[bytes, Exception, None] = None,
        capture_delay: float = 0.0,
        closed: bool = False
    ):
        self.styles = styles or {}
        self.capture = capture
        self.capture_delay = capture_delay
        self.closed = closed
        self.style_calls: List[Tuple[str, Optional[str], Optional[int]]] = []
        self.capture_calls = 0

    def is_closed(self) -> bool:
        return self.closed

    async def query_computed_styles(
        self,
        selector: str,
        properties: Sequence[str],
        *,
        scope: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, str]]:
        self.style_calls.append((selector, scope, limit))
        rows = self.styles.get((selector, scope), [])
        if isinstance(rows, Exception):
            raise rows
        if limit is not None:
            rows = rows[:limit]
        return [{p: row.get(p, '') for p in properties} for row in rows]

    async def capture_viewport(self, timeout_ms: int) -> bytes:
        self.capture_calls += 1
        if self.capture_delay:
            await asyncio.sleep(self.capture_delay)
        if isinstance(self.capture, Exception):
            raise self.capture
        return self.capture


def style_query(category_name: str, index: int = 0) -> StyleQuery:
    for category in STYLE_CATEGORIES:
        if category.name == category_name:
            return category.queries[index]
    raise KeyError(category_name)


def style_key(category_name: str, index: int = 0) -> Tuple[str, Optional[str]]:
    query = style_query(category_name, index)
    return query.selector, query.scope


def make_png(blocks: Sequence[Tuple[int, int, int]], size: Tuple[int, int] = (120, 60),
             background: Tuple[int, int, int] = (255, 255, 255)) -> bytes:
    """PNG with a white background and one solid vertical band per color."""
    image = Image.new('RGB', size, background)
    band = size[0] // (len(blocks) + 1)
    for i, color in enumerate(blocks):
        image.paste(color, (i * band, 0, (i + 1) * band, size[1]))
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def config() -> ExtractionConfig:
    return ExtractionConfig(screenshot_timeout_ms=10000, min_colors=3, verbose=False)


@pytest.fixture
def verbose_config() -> ExtractionConfig:
    return ExtractionConfig(screenshot_timeout_ms=10000, min_colors=3, verbose=True)


@pytest.fixture
def brand_png() -> bytes:
    """Viewport with one vibrant red and one dark navy band."""
    return make_png([RED, NAVY])


@pytest.fixture
def blank_png() -> bytes:
    return make_png([])


@pytest.fixture
def empty_page() -> FakePageHandle:
    return FakePageHandle()
