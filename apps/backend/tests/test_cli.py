"""Tests for the extract-palette command line."""

import argparse
import json
from unittest.mock import AsyncMock, patch

import pytest

from palette_extraction import cli
from palette_extraction.models import ColorPalette, PaletteSource


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    monkeypatch.setattr(cli, "apply_logging_config", lambda config=None: config)


def test_parse_viewport():
    assert cli.parse_viewport("1440x900") == (1440, 900)
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_viewport("wide")


def test_parser_defaults():
    args = cli.build_parser().parse_args(["https://example.com"])

    assert args.timeout_ms is None
    assert args.min_colors is None
    assert args.viewport == (1280, 800)
    assert args.verbose is False


def test_main_prints_palette_json(capsys):
    palette = ColorPalette.from_ordered(["#1d4ed8", "#16a34a"], 55, PaletteSource.STRUCTURAL)

    with patch.object(cli, "extract_from_url", AsyncMock(return_value=palette)) as extract:
        code = cli.main(["https://example.com", "--min-colors", "2"])

    assert code == 0
    config = extract.await_args.args[1]
    assert config.min_colors == 2
    assert json.loads(capsys.readouterr().out)["allColors"] == ["#1d4ed8", "#16a34a"]


def test_main_reports_navigation_failure():
    with patch.object(cli, "extract_from_url", AsyncMock(side_effect=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))):
        assert cli.main(["https://nowhere.invalid"]) == 1


def test_main_rejects_invalid_options():
    assert cli.main(["https://example.com", "--timeout-ms", "0"]) == 2
