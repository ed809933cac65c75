"""Caption input records and style tokens."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from panelforge.models.effects import EffectSpec

CaptionKind = Literal["speech", "thought", "narration", "sfx", "whisper"]

CAPTION_KINDS: tuple[str, ...] = ("speech", "thought", "narration", "sfx", "whisper")


class CaptionPosition(BaseModel):
    """Point expressed as a percentage of the panel's width and height."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., ge=0.0, le=100.0)
    y: float = Field(..., ge=0.0, le=100.0)


class CaptionStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_family: str
    font_size: float = Field(..., gt=0)
    font_color: str
    font_weight: str = "normal"
    background_color: str
    border_color: str
    border_width: float = Field(default=1.0, ge=0)
    border_style: Literal["solid", "dashed"] = "solid"
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    padding: float = Field(default=10.0, ge=0)
    # Percentage of the panel's pixel width
    max_width: float = Field(default=40.0, gt=0.0, le=100.0)


class StyleOverride(BaseModel):
    """Partial CaptionStyle; only fields the caller sets take effect."""

    model_config = ConfigDict(frozen=True)

    font_family: str | None = None
    font_size: float | None = Field(default=None, gt=0)
    font_color: str | None = None
    font_weight: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    border_width: float | None = Field(default=None, ge=0)
    border_style: Literal["solid", "dashed"] | None = None
    opacity: float | None = Field(default=None, ge=0.0, le=1.0)
    padding: float | None = Field(default=None, ge=0)
    max_width: float | None = Field(default=None, gt=0.0, le=100.0)


class CaptionRecord(BaseModel):
    """One caption to draw onto a panel. Never mutated by the engine."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    # Any str; unknown kinds raise UnknownCaptionKind at render time
    kind: str
    text: str
    position: CaptionPosition
    tail_direction: CaptionPosition | None = None
    style: StyleOverride = Field(default_factory=StyleOverride)
    z_index: int = 0
    effects: list[EffectSpec] | None = None
    effect_preset: str | None = None


class CaptionBounds(BaseModel):
    """Pixel placement of a rendered caption relative to its panel."""

    x: float
    y: float
    width: float
    height: float
