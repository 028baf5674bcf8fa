"""
Configuration for palette extraction.

Values default from the environment (after loading a local .env) and are
read once, when the config object is built. The pipeline receives the
config at construction and never consults the environment itself.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from palette_extraction.exceptions import InvalidConfigError
from palette_extraction.logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()

DEFAULT_SCREENSHOT_TIMEOUT_MS = 10000
DEFAULT_MIN_COLORS = 3
MAX_PALETTE_COLORS = 6


def _env_int(name: str, default: int) -> int:
    """Integer environment value; malformed values fall back to the default."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default


@dataclass(frozen=True)
class ExtractionConfig:
    """Options for a palette extraction run."""

    # Upper bound for viewport capture plus quantization
    screenshot_timeout_ms: int = field(
        default_factory=lambda: _env_int('COLOR_EXTRACT_SCREENSHOT_TIMEOUT_MS', DEFAULT_SCREENSHOT_TIMEOUT_MS)
    )
    # Structural colors needed to skip the viewport capture; compared before
    # the palette cap, so values above max_colors are meaningful
    min_colors: int = field(
        default_factory=lambda: _env_int('COLOR_EXTRACT_MIN_COLORS', DEFAULT_MIN_COLORS)
    )
    verbose: bool = field(
        default_factory=lambda: os.getenv('DEBUG_COLOR_EXTRACT', 'false').lower() == 'true'
    )
    max_colors: int = MAX_PALETTE_COLORS

    @classmethod
    def from_options(
        cls,
        screenshot_timeout: Optional[int] = None,
        min_colors: Optional[int] = None,
        verbose: Optional[bool] = None,
    ) -> 'ExtractionConfig':
        """Build a config from the environment, overridden by caller options."""
        config = cls()
        overrides: Dict[str, Any] = {}
        if screenshot_timeout is not None:
            overrides['screenshot_timeout_ms'] = screenshot_timeout
        if min_colors is not None:
            overrides['min_colors'] = min_colors
        if verbose is not None:
            overrides['verbose'] = verbose
        if overrides:
            config = replace(config, **overrides)
        return config.validate()

    def validate(self) -> 'ExtractionConfig':
        if self.screenshot_timeout_ms <= 0:
            raise InvalidConfigError(
                'screenshot_timeout_ms', self.screenshot_timeout_ms,
                "Screenshot timeout must be positive"
            )
        if self.min_colors < 0:
            raise InvalidConfigError(
                'min_colors', self.min_colors,
                "min_colors must not be negative"
            )
        return self

    @property
    def screenshot_timeout_seconds(self) -> float:
        return self.screenshot_timeout_ms / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for diagnostics"""
        return {
            'screenshot_timeout_ms': self.screenshot_timeout_ms,
            'min_colors': self.min_colors,
            'verbose': self.verbose,
            'max_colors': self.max_colors
        }
