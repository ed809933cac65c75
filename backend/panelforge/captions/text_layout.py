"""Approximate text block measurement and greedy word wrap.

No glyph metrics: every character is ``font_size × ratio`` wide.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from panelforge.captions.config import DEFAULT_CAPTION_CONFIG, CaptionConfig


@dataclass
class TextBlock:
    lines: list[str] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0
    line_height: float = 0.0


def char_width(font_size: float, font_family: str, config: CaptionConfig = DEFAULT_CAPTION_CONFIG) -> float:
    ratio = config.mono_char_width_ratio if "mono" in font_family.lower() else config.char_width_ratio
    return font_size * ratio


def wrap_words(words: list[str], max_width: float, cw: float) -> list[str]:
    """Greedy wrap. A word wider than the limit stays whole on its own line."""
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if current and len(candidate) * cw > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def estimate_text_block(
    text: str,
    font_size: float,
    max_width: float,
    font_family: str,
    config: CaptionConfig = DEFAULT_CAPTION_CONFIG,
) -> TextBlock:
    """Wrap ``text`` to ``max_width`` pixels and size the resulting block."""
    cw = char_width(font_size, font_family, config)
    line_height = font_size * config.line_height_factor

    words = text.split()
    if not words:
        return TextBlock(lines=[], width=0.0, height=0.0, line_height=line_height)

    lines = wrap_words(words, max_width, cw)
    longest = max(len(line) for line in lines)
    return TextBlock(
        lines=lines,
        width=min(longest * cw, max_width),
        height=len(lines) * line_height,
        line_height=line_height,
    )
