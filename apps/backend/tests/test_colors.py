"""Tests for color normalization and RGB helpers."""

import pytest

from palette_extraction.colors import (
    color_brightness,
    color_distance,
    hex_to_rgb,
    normalize_color,
    saturation,
)


@pytest.mark.parametrize("raw,expected", [
    ("rgb(255, 0, 0)", "#ff0000"),
    ("rgba(0, 128, 255, 0.5)", "#0080ff"),
    ("rgb(51 102 153)", "#336699"),
    ("rgb(51 102 153 / 40%)", "#336699"),
    ("#abc", "#aabbcc"),
    ("#ABCDEF", "#abcdef"),
    ("  #336699  ", "#336699"),
    ("rgb(300, 0, 12)", "#ff000c"),
])
def test_normalize_supported_formats(raw, expected):
    assert normalize_color(raw) == expected


@pytest.mark.parametrize("raw", [
    None,
    "",
    "transparent",
    "TRANSPARENT",
    "rgba(0, 0, 0, 0)",
    "rgba(10, 20, 30, 0%)",
    "#12345",
    "#ggg",
    "red",
    "hsl(0, 100%, 50%)",
    "var(--primary)",
])
def test_normalize_rejects_unusable_values(raw):
    assert normalize_color(raw) is None


def test_normalize_hex_is_idempotent():
    once = normalize_color("#3A7BD5")
    assert once == "#3a7bd5"
    assert normalize_color(once) == once


def test_brightness_uses_luma_weights():
    assert color_brightness("#000000") == 0
    assert color_brightness("#ffffff") == 255
    assert color_brightness("#336699") == pytest.approx((51 * 299 + 102 * 587 + 153 * 114) / 1000)


def test_saturation_is_zero_for_black_and_grays():
    assert saturation("#000000") == 0.0
    assert saturation("#808080") == 0.0
    assert saturation("#ff0000") == 1.0


def test_distance_is_euclidean():
    assert color_distance("#000000", "#030404") == pytest.approx(41 ** 0.5)
    assert color_distance("#336699", "#33669a") == pytest.approx(1.0)
    assert hex_to_rgb("#336699") == (51, 102, 153)
