"""Caption layout constants for the approximate text and shape model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CaptionConfig:
    """Controls text estimation and caption canvas sizing."""

    # Character width as a fraction of font size
    char_width_ratio: float = 0.55
    mono_char_width_ratio: float = 0.6
    line_height_factor: float = 1.3

    # Speech / whisper
    tail_size: float = 20.0
    bubble_margin: float = 10.0
    # Default tail tip jitter as a fraction of bubble width (cosmetic only)
    tail_jitter_ratio: float = 0.05

    # Thought
    bump_spacing: float = 30.0
    bump_min_radius: float = 15.0
    bump_radius_jitter: float = 5.0
    thought_extra_width: float = 30.0
    thought_extra_height: float = 40.0

    # Narration
    narration_radius: float = 4.0
    narration_margin: float = 10.0

    # SFX: no container, sized from the raw character count
    sfx_char_width_ratio: float = 0.7
    sfx_height_factor: float = 1.2
    sfx_margin: float = 20.0

    # Max text width (px) when no panel width is known
    fallback_max_width: float = 200.0


DEFAULT_CAPTION_CONFIG = CaptionConfig()
