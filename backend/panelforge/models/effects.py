"""Caption effect specifications: a closed union discriminated on ``type``."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Effect(BaseModel):
    model_config = ConfigDict(frozen=True)


class SpeedLinesEffect(_Effect):
    type: Literal["speed_lines"] = "speed_lines"
    direction: Literal["left", "right", "radial"] = "radial"
    density: int = Field(default=5, ge=1, le=10)
    color: str = "#000000"
    opacity: float = Field(default=0.3, ge=0.0, le=1.0)


class ExplosionEffect(_Effect):
    type: Literal["explosion"] = "explosion"
    spikes: int = Field(default=12, ge=3)
    inner_radius: float = Field(default=0.5, gt=0.0, le=1.0)
    color: str = "#FFFF00"
    secondary_color: str = "#FF6600"


class GradientEffect(_Effect):
    type: Literal["gradient"] = "gradient"
    style: Literal["linear", "radial"] = "linear"
    colors: list[str] = Field(..., min_length=2)
    angle: float = 0.0


class WobbleEffect(_Effect):
    type: Literal["wobble"] = "wobble"
    intensity: float = Field(default=3.0, ge=1.0, le=10.0)
    seed: int | None = None


class GlowEffect(_Effect):
    type: Literal["glow"] = "glow"
    color: str = "#FFFFFF"
    blur: float = Field(default=5.0, gt=0.0)
    spread: float = 1.0


class JaggedEffect(_Effect):
    type: Literal["jagged"] = "jagged"
    spikes: int = Field(default=12, ge=1)
    depth: float = Field(default=5.0, ge=0.0)
    color: str = "#000000"
    fill: str = "#FFFFFF"


class ElectricEffect(_Effect):
    type: Literal["electric"] = "electric"
    bolts: int = Field(default=4, ge=1)
    color: str = "#00FFFF"


class MangaEmphasisEffect(_Effect):
    type: Literal["manga_emphasis"] = "manga_emphasis"
    style: Literal["impact", "surprise", "dramatic", "comedy"] = "impact"
    color: str = "#000000"


class ScreentoneEffect(_Effect):
    type: Literal["screentone"] = "screentone"
    pattern: Literal["dots", "lines", "crosshatch"] = "dots"
    density: float = Field(default=5.0, gt=0.0, le=10.0)
    color: str = "#000000"


EffectSpec = Annotated[
    Union[
        SpeedLinesEffect,
        ExplosionEffect,
        GradientEffect,
        WobbleEffect,
        GlowEffect,
        JaggedEffect,
        ElectricEffect,
        MangaEmphasisEffect,
        ScreentoneEffect,
    ],
    Field(discriminator="type"),
]

EFFECT_TYPES: tuple[str, ...] = (
    "speed_lines",
    "explosion",
    "gradient",
    "wobble",
    "glow",
    "jagged",
    "electric",
    "manga_emphasis",
    "screentone",
)
