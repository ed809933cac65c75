"""Base caption shapes: one SVG generator per caption kind.

Every generator measures text with the approximate layout model and returns
the document plus its canvas size. The random source only perturbs drawn
cosmetics (bump radii, default tail tip); sizes never depend on it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from panelforge.captions.config import DEFAULT_CAPTION_CONFIG, CaptionConfig
from panelforge.captions.text_layout import TextBlock, estimate_text_block
from panelforge.errors import UnknownCaptionKind
from panelforge.models.caption import CaptionRecord, CaptionStyle
from panelforge.svg.document import SvgDocument, element, group, points_attr

logger = logging.getLogger(__name__)

_SHADOW_ID = "shadow"
_SFX_GLOW_ID = "sfx-glow"


@dataclass
class CaptionShape:
    document: SvgDocument
    width: float
    height: float


class ShapeGenerator:
    """Dispatches a caption record to its kind's generator."""

    def __init__(
        self,
        config: CaptionConfig = DEFAULT_CAPTION_CONFIG,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self._generators: dict[str, Callable[..., CaptionShape]] = {
            "speech": self.speech,
            "thought": self.thought,
            "narration": self.narration,
            "sfx": self.sfx,
            "whisper": self.whisper,
        }

    def generate(
        self,
        record: CaptionRecord,
        style: CaptionStyle,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> CaptionShape:
        generator = self._generators.get(record.kind)
        if generator is None:
            raise UnknownCaptionKind(record.kind)
        return generator(record, style, panel_width, panel_height)

    # ── Shared helpers ──

    def _measure(self, text: str, style: CaptionStyle, panel_width: float | None) -> TextBlock:
        max_px = (style.max_width / 100.0) * panel_width if panel_width else self.config.fallback_max_width
        return estimate_text_block(text, style.font_size, max_px, style.font_family, self.config)

    def _text(
        self,
        block: TextBlock,
        style: CaptionStyle,
        x: float,
        y: float,
        anchor: str | None = "middle",
        italic: bool = False,
    ):
        text_el = element(
            "text",
            x=x,
            y=y,
            font_family=style.font_family,
            font_size=style.font_size,
            font_weight=style.font_weight,
            fill=style.font_color,
            text_anchor=anchor,
            font_style="italic" if italic else None,
        )
        for i, line in enumerate(block.lines):
            text_el.append(element("tspan", text=line, x=x, dy=0 if i == 0 else block.line_height))
        return text_el

    def _shadow_filter(self, spread: float, blur: float, opacity: float):
        shadow = element(
            "filter", id=_SHADOW_ID, x=f"-{spread}%", y=f"-{spread}%",
            width=f"{100 + 2 * spread}%", height=f"{100 + 2 * spread}%",
        )
        shadow.append(element("feDropShadow", dx=blur, dy=blur, stdDeviation=blur, flood_opacity=opacity))
        return shadow

    # ── Generators ──

    def speech(
        self,
        record: CaptionRecord,
        style: CaptionStyle,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> CaptionShape:
        cfg = self.config
        block = self._measure(record.text, style, panel_width)
        pad = style.padding
        bw = block.width + pad * 2
        bh = block.height + pad * 2
        tail = cfg.tail_size

        side = _tail_side(record, panel_width, panel_height)
        if side in ("left", "right"):
            width, height = bw + tail + cfg.bubble_margin, bh + cfg.bubble_margin
        else:
            width, height = bw + cfg.bubble_margin, bh + tail + cfg.bubble_margin
        ox = tail if side == "left" else 0.0
        oy = tail if side == "up" else 0.0

        if side == "right":
            tail_pts = [(ox + bw - 5, oy + bh * 0.4), (ox + bw - 5, oy + bh * 0.6), (ox + bw + tail, oy + bh / 2)]
            seal = (ox + bw / 2, oy + bh * 0.4, bw / 2, bh * 0.2)
        elif side == "left":
            tail_pts = [(ox + 5, oy + bh * 0.4), (ox + 5, oy + bh * 0.6), (0.0, oy + bh / 2)]
            seal = (ox, oy + bh * 0.4, bw / 2, bh * 0.2)
        elif side == "up":
            tail_pts = [(ox + bw * 0.3, oy + 5), (ox + bw * 0.5, oy + 5), (ox + bw * 0.4, 0.0)]
            seal = (ox + bw * 0.3, oy, bw * 0.2, bh / 2)
        else:
            tip_x = bw * 0.4
            if record.tail_direction is None:
                jitter = bw * cfg.tail_jitter_ratio
                tip_x += float(self.rng.uniform(-jitter, jitter))
            tail_pts = [(bw * 0.3, bh - 5), (bw * 0.5, bh - 5), (tip_x, bh + tail)]
            seal = (bw * 0.3, bh / 2, bw * 0.2, bh / 2)

        doc = SvgDocument(width, height)
        doc.defs.append(self._shadow_filter(20, 2, 0.3))

        dash = "5,5" if style.border_style == "dashed" else None
        body = element(
            "ellipse", cx=ox + bw / 2, cy=oy + bh / 2, rx=bw / 2, ry=bh / 2,
            fill=style.background_color, stroke=style.border_color,
            stroke_width=style.border_width, stroke_dasharray=dash,
        )
        tail_el = element(
            "polygon", points=points_attr(tail_pts), fill=style.background_color,
            stroke=style.border_color, stroke_width=style.border_width, stroke_dasharray=dash,
        )
        sx, sy, sw, sh = seal
        seal_el = element("rect", x=sx, y=sy, width=sw, height=sh, fill=style.background_color)

        doc.content.append(group([body, tail_el, seal_el], filter=f"url(#{_SHADOW_ID})", opacity=style.opacity))
        doc.content.append(self._text(block, style, ox + bw / 2, oy + pad + style.font_size))
        doc.body = [body, tail_el, seal_el]
        return CaptionShape(doc, width, height)

    def whisper(
        self,
        record: CaptionRecord,
        style: CaptionStyle,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> CaptionShape:
        dashed = style.model_copy(update={"border_style": "dashed"})
        return self.speech(record, dashed, panel_width, panel_height)

    def thought(
        self,
        record: CaptionRecord,
        style: CaptionStyle,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> CaptionShape:
        cfg = self.config
        block = self._measure(record.text, style, panel_width)
        pad = style.padding
        bw = block.width + pad * 2
        bh = block.height + pad * 2
        width = bw + cfg.thought_extra_width
        height = bh + cfg.thought_extra_height

        stroke = {"stroke": style.border_color, "stroke_width": style.border_width}
        n_bumps = max(1, math.ceil(bw / cfg.bump_spacing))
        bumps = []
        for cy in (5.0, bh - 5):
            for i in range(n_bumps):
                r = cfg.bump_min_radius + float(self.rng.random()) * cfg.bump_radius_jitter
                bumps.append(element(
                    "circle", cx=(bw / n_bumps) * (i + 0.5), cy=cy, r=r,
                    fill=style.background_color, **stroke,
                ))

        main = element(
            "ellipse", cx=bw / 2, cy=bh / 2,
            rx=max(bw / 2 - 10, 1.0), ry=max(bh / 2 - 5, 1.0),
            fill=style.background_color,
        )
        # Trail toward the thinker, shrinking
        trail = [
            element("circle", cx=bw * fx, cy=bh + dy, r=r, fill=style.background_color, **stroke)
            for fx, dy, r in ((0.4, 15, 8), (0.35, 28, 5), (0.32, 38, 3))
        ]

        doc = SvgDocument(width, height)
        doc.content.append(group([*bumps, main, *trail], opacity=style.opacity))
        doc.content.append(self._text(block, style, bw / 2, pad + style.font_size, italic=True))
        doc.body = [*bumps, main, *trail]
        return CaptionShape(doc, width, height)

    def narration(
        self,
        record: CaptionRecord,
        style: CaptionStyle,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> CaptionShape:
        cfg = self.config
        block = self._measure(record.text, style, panel_width)
        pad = style.padding
        box_w = block.width + pad * 2
        box_h = block.height + pad * 2
        width = box_w + cfg.narration_margin
        height = box_h + cfg.narration_margin

        doc = SvgDocument(width, height)
        doc.defs.append(self._shadow_filter(10, 1, 0.2))
        box = element(
            "rect", x=2, y=2, width=box_w, height=box_h,
            rx=cfg.narration_radius, ry=cfg.narration_radius,
            fill=style.background_color, stroke=style.border_color,
            stroke_width=style.border_width,
            stroke_dasharray="5,5" if style.border_style == "dashed" else None,
        )
        doc.content.append(group([box], filter=f"url(#{_SHADOW_ID})", opacity=style.opacity))
        # Left-aligned: no text-anchor
        doc.content.append(self._text(block, style, pad + 2, pad + style.font_size, anchor=None))
        doc.body = [box]
        return CaptionShape(doc, width, height)

    def sfx(
        self,
        record: CaptionRecord,
        style: CaptionStyle,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> CaptionShape:
        cfg = self.config
        size = style.font_size
        width = len(record.text) * cfg.sfx_char_width_ratio * size + cfg.sfx_margin
        height = size * cfg.sfx_height_factor + cfg.sfx_margin

        doc = SvgDocument(width, height)
        glow = element("filter", id=_SFX_GLOW_ID, x="-50%", y="-50%", width="200%", height="200%")
        glow.append(element("feGaussianBlur", stdDeviation=2, result="blur"))
        merge = element("feMerge")
        merge.append(element("feMergeNode", in_="blur"))
        merge.append(element("feMergeNode", in_="SourceGraphic"))
        glow.append(merge)
        doc.defs.append(glow)

        text_el = element(
            "text",
            text=record.text.upper(),
            x=width / 2,
            y=height / 2 + size / 3,
            font_family=style.font_family,
            font_size=size,
            font_weight=style.font_weight,
            fill=style.font_color,
            stroke=style.border_color,
            stroke_width=style.border_width,
            text_anchor="middle",
            filter=f"url(#{_SFX_GLOW_ID})",
            opacity=style.opacity,
        )
        doc.content.append(text_el)
        doc.body = [text_el]
        return CaptionShape(doc, width, height)


def _tail_side(
    record: CaptionRecord,
    panel_width: float | None,
    panel_height: float | None,
) -> str:
    """Which side of the bubble the tail leaves from: left/right/up/down."""
    tail = record.tail_direction
    if tail is None or not panel_width or not panel_height:
        return "down"
    dx = (tail.x - record.position.x) / 100.0 * panel_width
    dy = (tail.y - record.position.y) / 100.0 * panel_height
    if abs(dx) > abs(dy):
        return "right" if dx > 0 else "left"
    return "down" if dy >= 0 else "up"
