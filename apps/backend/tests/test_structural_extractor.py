"""Tests for computed-style color extraction."""

import pytest

from palette_extraction.models import SourceCategory
from palette_extraction.structural_extractor import (
    BRAND_CSS_VARIABLES,
    STYLE_CATEGORIES,
    StructuralExtractor,
    extract_colors_from_dom,
    gradient_stops,
)

from conftest import FakePageHandle, style_key, style_query


def by_hex(candidates):
    return {c.hex: c for c in candidates}


def test_categories_are_scanned_in_priority_order():
    assert [c.name for c in STYLE_CATEGORIES] == [
        "css_variables", "header", "buttons", "hero", "accents", "footer", "links"
    ]


@pytest.mark.asyncio
async def test_css_variables(config):
    page = FakePageHandle(styles={
        style_key("css_variables"): [{"--primary": " #1D4ED8 ", "--brand-accent": "rgb(22, 163, 74)"}],
    })

    result = by_hex(await StructuralExtractor(config).extract(page))

    assert set(result) == {"#1d4ed8", "#16a34a"}
    assert all(c.source == SourceCategory.CSS_VAR and c.weight == 10 for c in result.values())
    assert set(style_query("css_variables").properties) == set(BRAND_CSS_VARIABLES)


@pytest.mark.asyncio
async def test_header_and_logo_weights(config):
    page = FakePageHandle(styles={
        style_key("header", 0): [{"backgroundColor": "rgb(10, 20, 200)", "color": "rgb(200, 20, 10)"}],
        style_key("header", 1): [{"backgroundColor": "rgba(0, 0, 0, 0)", "color": "#0f7"}],
    })

    result = by_hex(await StructuralExtractor(config).extract(page))

    assert result["#0a14c8"].weight == 8
    assert result["#c8140a"].weight == 6
    assert result["#00ff77"].weight == 7
    assert len(result) == 3
    assert style_key("header", 1)[1] == style_key("header", 0)[0]


@pytest.mark.asyncio
async def test_button_weights(config):
    page = FakePageHandle(styles={
        style_key("buttons"): [
            {"backgroundColor": "#2563eb", "color": "#fef08a", "borderColor": "#7c3aed"},
        ],
    })

    result = by_hex(await StructuralExtractor(config).extract(page))

    assert (result["#2563eb"].weight, result["#fef08a"].weight, result["#7c3aed"].weight) == (7, 5, 4)
    assert all(c.source == SourceCategory.BUTTON for c in result.values())


@pytest.mark.asyncio
async def test_hero_gradient_stops(config):
    page = FakePageHandle(styles={
        style_key("hero"): [{
            "color": "#0e7490",
            "backgroundColor": "transparent",
            "backgroundImage": "linear-gradient(90deg, rgb(236, 72, 153) 0%, rgb(99, 102, 241) 100%)",
        }],
    })

    result = by_hex(await StructuralExtractor(config).extract(page))

    assert result["#0e7490"].weight == 6
    assert result["#ec4899"].weight == 4
    assert result["#6366f1"].weight == 4


def test_gradient_stops_ignores_images():
    assert gradient_stops('url("hero.png")') == []
    assert gradient_stops("none") == []
    assert gradient_stops("radial-gradient(rgba(1, 2, 3, 0.5), rgb(4, 5, 6))") == [
        "rgba(1, 2, 3, 0.5)", "rgb(4, 5, 6)"
    ]


@pytest.mark.asyncio
async def test_accent_footer_and_links(config):
    page = FakePageHandle(styles={
        style_key("accents"): [{"backgroundColor": "#f59e0b", "color": "#7c2d12"}],
        style_key("footer"): [{"backgroundColor": "#1e3a8a", "color": "#bfdbfe"}],
        style_key("links"): [{"color": "#0369a1"}],
    })

    result = by_hex(await StructuralExtractor(config).extract(page))

    assert (result["#f59e0b"].weight, result["#f59e0b"].source) == (5, SourceCategory.ACCENT)
    assert result["#7c2d12"].weight == 3
    assert (result["#1e3a8a"].weight, result["#1e3a8a"].source) == (3, SourceCategory.FOOTER)
    assert result["#bfdbfe"].weight == 2
    assert (result["#0369a1"].weight, result["#0369a1"].source) == (2, SourceCategory.ACCENT)


@pytest.mark.asyncio
async def test_links_are_sampled(config):
    rows = [{"color": f"#0000{i:02x}"} for i in range(40)]
    page = FakePageHandle(styles={style_key("links"): rows})

    result = await StructuralExtractor(config).extract(page)

    assert len(result) == 20
    selector, _ = style_key("links")
    assert (selector, None, 20) in page.style_calls


@pytest.mark.asyncio
async def test_recurring_hex_keeps_max_weight_and_first_source(config):
    page = FakePageHandle(styles={
        style_key("footer"): [{"backgroundColor": "#2563eb", "color": ""}],
        style_key("buttons"): [{"backgroundColor": "#2563EB", "color": "", "borderColor": ""}],
        style_key("links"): [{"color": "rgb(37, 99, 235)"}],
    })

    result = await StructuralExtractor(config).extract(page)

    assert len(result) == 1
    assert result[0].hex == "#2563eb"
    assert result[0].weight == 7
    assert result[0].source == SourceCategory.BUTTON


@pytest.mark.asyncio
async def test_failing_category_does_not_abort_scan(config, caplog):
    page = FakePageHandle(styles={
        style_key("css_variables"): RuntimeError("detached frame"),
        style_key("header", 0): [{"backgroundColor": "#2563eb", "color": ""}],
        style_key("header", 1): RuntimeError("selector blew up"),
        style_key("footer"): [{"backgroundColor": "#16a34a", "color": ""}],
    })

    result = by_hex(await StructuralExtractor(config).extract(page))

    # The whole header group is dropped, other categories survive
    assert set(result) == {"#16a34a"}
    assert "css_variables scan failed" in caplog.text
    assert "header scan failed" in caplog.text


@pytest.mark.asyncio
async def test_empty_page_yields_nothing(config, empty_page):
    assert await StructuralExtractor(config).extract(empty_page) == []
    assert len(empty_page.style_calls) == sum(len(c.queries) for c in STYLE_CATEGORIES)


@pytest.mark.asyncio
async def test_extract_colors_from_dom(config):
    page = FakePageHandle(styles={
        style_key("css_variables"): [{"--primary": "rgb(29, 78, 216)"}],
        style_key("footer"): [{"backgroundColor": "#111827", "color": ""}],
    })

    candidates = by_hex(await extract_colors_from_dom(page, config))

    assert candidates["#1d4ed8"].source == SourceCategory.CSS_VAR
    assert candidates["#1d4ed8"].weight == 10
    assert candidates["#111827"].source == SourceCategory.FOOTER
    assert candidates["#111827"].weight == 3
