"""Named effect bundles."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from panelforge.models.effects import (
    EffectSpec,
    ElectricEffect,
    ExplosionEffect,
    GlowEffect,
    GradientEffect,
    JaggedEffect,
    MangaEmphasisEffect,
    ScreentoneEffect,
    SpeedLinesEffect,
    WobbleEffect,
)

PresetTable = Mapping[str, tuple[EffectSpec, ...]]

EFFECT_PRESETS: PresetTable = MappingProxyType({
    "action_impact": (
        ExplosionEffect(spikes=12),
        SpeedLinesEffect(direction="radial", density=5, color="#000000"),
    ),
    "dramatic": (
        GlowEffect(color="#FFFFFF", blur=10, spread=0.8),
        MangaEmphasisEffect(style="dramatic"),
    ),
    "comedy_surprise": (
        MangaEmphasisEffect(style="surprise"),
        WobbleEffect(intensity=3),
    ),
    "electric_shock": (
        ElectricEffect(bolts=4, color="#00FFFF"),
        GlowEffect(color="#00FFFF", blur=5),
        JaggedEffect(spikes=16, depth=5),
    ),
    "soft_thought": (
        GradientEffect(style="radial", colors=["#FFFFFF", "#E0E0E0"]),
        WobbleEffect(intensity=2),
    ),
    "whisper_soft": (
        GradientEffect(style="linear", colors=["#F8F8F8", "#E8E8E8"], angle=90),
        GlowEffect(color="#FFFFFF", blur=3, spread=0.5),
    ),
    "retro_manga": (
        ScreentoneEffect(pattern="dots", density=6),
    ),
    "neon": (
        GlowEffect(color="#FF00FF", blur=8, spread=1.2),
        GradientEffect(style="linear", colors=["#FF00FF", "#00FFFF"], angle=45),
    ),
    "hand_drawn": (
        WobbleEffect(intensity=4),
    ),
})


def get_effect_preset(name: str, presets: PresetTable = EFFECT_PRESETS) -> list[EffectSpec]:
    """Effects of a named preset; an unknown name yields an empty list."""
    return list(presets.get(name, ()))


def list_effect_presets(presets: PresetTable = EFFECT_PRESETS) -> list[str]:
    return list(presets)
