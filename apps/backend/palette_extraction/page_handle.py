"""
Read-only view of an already-rendered page.

The pipeline only observes the page: it queries computed styles and takes
one viewport capture. It never navigates, mutates or closes the page.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import Page

from palette_extraction.exceptions import PageHandleError


class PageHandle(ABC):
    """Capability the rendering layer hands to the extraction pipeline."""

    @abstractmethod
    def is_closed(self) -> bool:
        """Whether the underlying page can no longer be queried."""
        pass

    @abstractmethod
    async def query_computed_styles(
        self,
        selector: str,
        properties: Sequence[str],
        *,
        scope: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, str]]:
        """
        Return computed style values for elements matching ``selector``.

        Args:
            selector: CSS selector of the elements to read
            properties: CSS property names (custom properties included)
            scope: When set, each element matching ``scope`` contributes its
                first descendant matching ``selector``
            limit: Keep only the first N matched elements

        Returns:
            One dict per element, mapping property name to computed value
        """
        pass

    @abstractmethod
    async def capture_viewport(self, timeout_ms: int) -> bytes:
        """Capture the visible viewport (not the full page) as PNG bytes."""
        pass


_COMPUTED_STYLES_SCRIPT = """
({selector, properties, scope, limit}) => {
    let elements;
    if (scope) {
        elements = [];
        document.querySelectorAll(scope).forEach(container => {
            const found = container.querySelector(selector);
            if (found) elements.push(found);
        });
    } else {
        elements = Array.from(document.querySelectorAll(selector));
    }
    if (limit !== null && limit !== undefined) {
        elements = elements.slice(0, limit);
    }
    return elements.map(el => {
        const style = getComputedStyle(el);
        const values = {};
        for (const prop of properties) {
            values[prop] = prop.startsWith('--')
                ? style.getPropertyValue(prop).trim()
                : style.getPropertyValue(prop);
        }
        return values;
    });
}
"""

# Computed-style names the browser expects in kebab case
_CSS_PROPERTY_NAMES = {
    'backgroundColor': 'background-color',
    'backgroundImage': 'background-image',
    'borderColor': 'border-color',
    'color': 'color',
}


class PlaywrightPageHandle(PageHandle):
    """PageHandle backed by a ``playwright.async_api.Page``."""

    def __init__(self, page: Any):
        self.page = page

    def is_closed(self) -> bool:
        return self.page.is_closed()

    async def query_computed_styles(
        self,
        selector: str,
        properties: Sequence[str],
        *,
        scope: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, str]]:
        css_names = [_CSS_PROPERTY_NAMES.get(p, p) for p in properties]
        rows = await self.page.evaluate(
            _COMPUTED_STYLES_SCRIPT,
            {'selector': selector, 'properties': css_names, 'scope': scope, 'limit': limit}
        )
        # Hand values back under the names the caller asked for
        return [
            {prop: row.get(css_name, '') for prop, css_name in zip(properties, css_names)}
            for row in rows
        ]

    async def capture_viewport(self, timeout_ms: int) -> bytes:
        return await self.page.screenshot(full_page=False, timeout=timeout_ms, type='png')


def ensure_page_handle(page: Any) -> PageHandle:
    """Validate the caller-supplied handle; the only failure allowed to propagate.

    A bare Playwright ``Page`` is wrapped in a PlaywrightPageHandle.
    """
    if page is None:
        raise PageHandleError("No page handle supplied")
    if isinstance(page, Page):
        page = PlaywrightPageHandle(page)
    if not isinstance(page, PageHandle):
        raise PageHandleError(
            "Unsupported page handle",
            context={'type': type(page).__name__}
        )
    try:
        closed = page.is_closed()
    except Exception as e:
        raise PageHandleError("Page handle state could not be read", cause=e)
    if closed:
        raise PageHandleError("Page handle is closed")
    return page
