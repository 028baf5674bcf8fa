"""Tests for extraction configuration."""

import pytest

from palette_extraction.config import ExtractionConfig
from palette_extraction.exceptions import InvalidConfigError


def test_defaults(monkeypatch):
    for name in ("COLOR_EXTRACT_SCREENSHOT_TIMEOUT_MS", "COLOR_EXTRACT_MIN_COLORS", "DEBUG_COLOR_EXTRACT"):
        monkeypatch.delenv(name, raising=False)

    config = ExtractionConfig()

    assert config.screenshot_timeout_ms == 10000
    assert config.min_colors == 3
    assert config.verbose is False
    assert config.max_colors == 6
    assert config.screenshot_timeout_seconds == 10.0


def test_environment_is_read_at_construction(monkeypatch):
    monkeypatch.setenv("COLOR_EXTRACT_SCREENSHOT_TIMEOUT_MS", "2500")
    monkeypatch.setenv("COLOR_EXTRACT_MIN_COLORS", "4")
    monkeypatch.setenv("DEBUG_COLOR_EXTRACT", "true")

    config = ExtractionConfig()
    monkeypatch.setenv("DEBUG_COLOR_EXTRACT", "false")

    assert config.to_dict() == {
        "screenshot_timeout_ms": 2500,
        "min_colors": 4,
        "verbose": True,
        "max_colors": 6,
    }


def test_caller_options_override_environment(monkeypatch):
    monkeypatch.setenv("COLOR_EXTRACT_MIN_COLORS", "5")

    config = ExtractionConfig.from_options(screenshot_timeout=3000, min_colors=2, verbose=True)

    assert (config.screenshot_timeout_ms, config.min_colors, config.verbose) == (3000, 2, True)


@pytest.mark.parametrize("kwargs,field_name", [
    (dict(screenshot_timeout=0), "screenshot_timeout_ms"),
    (dict(min_colors=-1), "min_colors"),
])
def test_invalid_options(kwargs, field_name):
    with pytest.raises(InvalidConfigError) as exc_info:
        ExtractionConfig.from_options(**kwargs)

    assert exc_info.value.field_name == field_name
    assert field_name in str(exc_info.value)


def test_min_colors_may_exceed_palette_size():
    config = ExtractionConfig.from_options(min_colors=8)

    assert config.min_colors == 8
    assert config.max_colors == 6


@pytest.mark.parametrize("name,field_name,default", [
    ("COLOR_EXTRACT_MIN_COLORS", "min_colors", 3),
    ("COLOR_EXTRACT_SCREENSHOT_TIMEOUT_MS", "screenshot_timeout_ms", 10000),
])
def test_malformed_environment_uses_default(monkeypatch, caplog, name, field_name, default):
    monkeypatch.setenv(name, "three")

    config = ExtractionConfig()

    assert getattr(config, field_name) == default
    assert f"Ignoring {name}='three'" in caplog.text
