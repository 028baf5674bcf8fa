"""
Value types for palette extraction.

Candidates live only inside one pipeline run; the palette is the
one value handed back to the onboarding workflow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from palette_extraction.colors import color_brightness, normalize_color

FALLBACK_COLORS: Tuple[str, str, str] = ("#312e81", "#6366f1", "#8b5cf6")


class SourceCategory(str, Enum):
    """Where a candidate color was observed."""
    CSS_VAR = "css-var"
    HEADER = "header"
    BUTTON = "button"
    HERO = "hero"
    ACCENT = "accent"
    FOOTER = "footer"
    SCREENSHOT = "screenshot"


class PaletteSource(str, Enum):
    """Which extraction stages produced the final palette."""
    STRUCTURAL = "structural"
    PERCEPTUAL = "screenshot"
    HYBRID = "hybrid"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ColorCandidate:
    """A single extracted, not-yet-filtered color observation."""
    hex: str
    source: SourceCategory
    weight: int
    brightness: float

    @classmethod
    def from_hex(cls, raw: str, source: SourceCategory, weight: int) -> Optional['ColorCandidate']:
        """Build a candidate from any supported color text, or None if it is not a usable color."""
        normalized = normalize_color(raw)
        if normalized is None:
            return None
        return cls(
            hex=normalized,
            source=source,
            weight=weight,
            brightness=color_brightness(normalized)
        )

    def describe(self) -> Dict[str, Any]:
        return {'hex': self.hex, 'source': self.source.value, 'weight': self.weight}


@dataclass
class StageResult:
    """Outcome of one extraction stage.

    A failed stage still carries an (empty) candidate list so callers
    can treat both outcomes the same way when merging.
    """
    stage: str
    ok: bool
    candidates: List[ColorCandidate] = field(default_factory=list)
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def succeeded(cls, stage: str, candidates: List[ColorCandidate]) -> 'StageResult':
        return cls(stage=stage, ok=True, candidates=list(candidates))

    @classmethod
    def failed(cls, stage: str, reason: str, error: Optional[Exception] = None) -> 'StageResult':
        return cls(stage=stage, ok=False, candidates=[], reason=reason, error=error)

    @classmethod
    def skipped(cls, stage: str, reason: str) -> 'StageResult':
        return cls(stage=stage, ok=True, candidates=[], reason=reason)

    @property
    def count(self) -> int:
        return len(self.candidates)


class ColorPalette(BaseModel):
    """Final brand palette, serialised with camelCase keys."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=False)

    primary: Optional[str] = Field(default=None, description="Position 0 of the ordered palette")
    secondary: Optional[str] = Field(default=None, description="Position 1 of the ordered palette")
    accent: Optional[str] = Field(default=None, description="Position 2 of the ordered palette")
    primary_colors: List[str] = Field(default_factory=list, alias="primaryColors", max_length=3)
    secondary_colors: List[str] = Field(default_factory=list, alias="secondaryColors", max_length=3)
    all_colors: List[str] = Field(default_factory=list, alias="allColors", max_length=6)
    confidence: int = Field(ge=0, le=100, description="Extraction breadth/diversity/strength score")
    source: PaletteSource

    @model_validator(mode='after')
    def _check_invariants(self) -> 'ColorPalette':
        if self.all_colors != self.primary_colors + self.secondary_colors:
            raise ValueError("allColors must be primaryColors followed by secondaryColors")
        lowered = [c.lower() for c in self.all_colors]
        if len(set(lowered)) != len(lowered):
            raise ValueError("allColors must not contain duplicates")
        if self.source == PaletteSource.FALLBACK:
            if self.confidence != 0 or tuple(lowered) != FALLBACK_COLORS:
                raise ValueError("fallback palette must be the constant triple with zero confidence")
        positions = (self.primary, self.secondary, self.accent)
        for index, value in enumerate(positions):
            expected = self.all_colors[index] if index < len(self.all_colors) else None
            if value != expected:
                raise ValueError(f"position {index} does not match allColors")
        return self

    @classmethod
    def from_ordered(cls, colors: List[str], confidence: int, source: PaletteSource) -> 'ColorPalette':
        """Split an ordered, deduplicated color list into the palette layout."""
        ordered = list(colors[:6])
        return cls(
            primary=ordered[0] if len(ordered) > 0 else None,
            secondary=ordered[1] if len(ordered) > 1 else None,
            accent=ordered[2] if len(ordered) > 2 else None,
            primary_colors=ordered[:3],
            secondary_colors=ordered[3:6],
            all_colors=ordered,
            confidence=confidence,
            source=source
        )

    @classmethod
    def fallback(cls) -> 'ColorPalette':
        return cls.from_ordered(list(FALLBACK_COLORS), confidence=0, source=PaletteSource.FALLBACK)

    @property
    def needs_review(self) -> bool:
        return self.source == PaletteSource.FALLBACK

    def to_brand_colors(self) -> Dict[str, Any]:
        """Fields persisted into a brand's visual profile."""
        return {
            'primary': self.primary,
            'secondary': self.secondary,
            'accent': self.accent,
            'confidence': self.confidence,
            'colors': list(self.all_colors)
        }

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')
