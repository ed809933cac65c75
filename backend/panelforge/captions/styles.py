"""Per-kind default caption styles and style resolution."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from panelforge.errors import UnknownCaptionKind
from panelforge.models.caption import CaptionStyle, StyleOverride

StyleTable = Mapping[str, CaptionStyle]

DEFAULT_STYLES: StyleTable = MappingProxyType({
    "speech": CaptionStyle(
        font_family="Comic Sans MS, cursive",
        font_size=16,
        font_color="#000000",
        font_weight="normal",
        background_color="#FFFFFF",
        border_color="#000000",
        border_width=2,
        border_style="solid",
        opacity=1,
        padding=12,
        max_width=40,
    ),
    "thought": CaptionStyle(
        font_family="Comic Sans MS, cursive",
        font_size=14,
        font_color="#444444",
        font_weight="normal",
        background_color="#F0F0F0",
        border_color="#888888",
        border_width=1,
        border_style="solid",
        opacity=0.95,
        padding=12,
        max_width=35,
    ),
    "narration": CaptionStyle(
        font_family="Georgia, serif",
        font_size=14,
        font_color="#333333",
        font_weight="normal",
        background_color="#FFFACD",
        border_color="#8B4513",
        border_width=2,
        border_style="solid",
        opacity=1,
        padding=10,
        max_width=80,
    ),
    "sfx": CaptionStyle(
        font_family="Impact, sans-serif",
        font_size=32,
        font_color="#FF0000",
        font_weight="bold",
        background_color="transparent",
        border_color="#000000",
        border_width=3,
        border_style="solid",
        opacity=1,
        padding=0,
        max_width=50,
    ),
    "whisper": CaptionStyle(
        font_family="Comic Sans MS, cursive",
        font_size=12,
        font_color="#666666",
        font_weight="normal",
        background_color="#FFFFFF",
        border_color="#999999",
        border_width=1,
        border_style="dashed",
        opacity=0.9,
        padding=10,
        max_width=30,
    ),
})


def merge_style(
    kind: str,
    override: StyleOverride | None = None,
    styles: StyleTable = DEFAULT_STYLES,
) -> CaptionStyle:
    """Type default with every explicitly set override field applied."""
    try:
        base = styles[kind]
    except KeyError:
        raise UnknownCaptionKind(kind) from None
    if override is None:
        return base
    updates = override.model_dump(exclude_none=True)
    if not updates:
        return base
    return base.model_copy(update=updates)
