"""Caption shapes, effects, and rasterization."""

from panelforge.captions.effects import EffectCompositor
from panelforge.captions.presets import EFFECT_PRESETS, get_effect_preset, list_effect_presets
from panelforge.captions.rasterizer import CaptionRasterizer, RenderedCaption
from panelforge.captions.shapes import CaptionShape, ShapeGenerator
from panelforge.captions.styles import DEFAULT_STYLES, merge_style
from panelforge.captions.text_layout import TextBlock, estimate_text_block

__all__ = [
    "EffectCompositor",
    "EFFECT_PRESETS",
    "get_effect_preset",
    "list_effect_presets",
    "CaptionRasterizer",
    "RenderedCaption",
    "CaptionShape",
    "ShapeGenerator",
    "DEFAULT_STYLES",
    "merge_style",
    "TextBlock",
    "estimate_text_block",
]
