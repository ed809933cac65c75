"""Caption rendering: style → shape → effects → cairosvg → RGBA image.

Rasterization runs in the default executor so several captions of one panel
render concurrently without blocking the event loop.
"""

from __future__ import annotations

import asyncio
import hashlib
import io
import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import cairosvg
import numpy as np
from PIL import Image

from panelforge.captions.config import DEFAULT_CAPTION_CONFIG, CaptionConfig
from panelforge.captions.effects import EffectCompositor
from panelforge.captions.presets import EFFECT_PRESETS, PresetTable, get_effect_preset
from panelforge.captions.shapes import ShapeGenerator
from panelforge.captions.styles import DEFAULT_STYLES, StyleTable, merge_style
from panelforge.config import settings
from panelforge.errors import RenderError
from panelforge.models.caption import CaptionBounds, CaptionRecord, CaptionStyle
from panelforge.models.effects import EffectSpec
from panelforge.utils.imaging import format_for_path, load_image, write_image_atomic

logger = logging.getLogger(__name__)


@dataclass
class RenderedCaption:
    record: CaptionRecord
    bounds: CaptionBounds
    svg: str
    buffer: bytes
    image: Image.Image


def caption_id(record: CaptionRecord) -> str:
    """Record id, or a stable id derived from the record's content."""
    if record.id:
        return record.id
    digest = hashlib.sha1(record.model_dump_json().encode("utf-8")).hexdigest()
    return f"caption-{digest[:10]}"


def compute_bounds(
    record: CaptionRecord,
    width: float,
    height: float,
    panel_width: float,
    panel_height: float,
) -> CaptionBounds:
    """Center the caption on its anchor; each axis is clamped to ≥ 0 only."""
    anchor_x = record.position.x / 100.0 * panel_width
    anchor_y = record.position.y / 100.0 * panel_height
    return CaptionBounds(
        x=max(0.0, anchor_x - width / 2),
        y=max(0.0, anchor_y - height / 2),
        width=width,
        height=height,
    )


def svg_to_png(svg: str, width: int, height: int) -> tuple[bytes, Image.Image]:
    """Rasterize SVG text with cairosvg; returns the PNG bytes and decoded RGBA image."""
    try:
        buffer = cairosvg.svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=width,
            output_height=height,
        )
        image = Image.open(io.BytesIO(buffer)).convert("RGBA")
    except Exception as e:
        raise RenderError(f"SVG rasterization failed: {e}") from e
    return buffer, image


class CaptionRasterizer:
    """Renders caption records into positioned RGBA images."""

    def __init__(
        self,
        styles: StyleTable = DEFAULT_STYLES,
        presets: PresetTable = EFFECT_PRESETS,
        config: CaptionConfig = DEFAULT_CAPTION_CONFIG,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.styles = styles
        self.presets = presets
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(settings.random_seed)
        self.shapes = ShapeGenerator(config, self.rng)
        self.effects = EffectCompositor(self.rng)

    def resolve_style(self, record: CaptionRecord) -> CaptionStyle:
        return merge_style(record.kind, record.style, self.styles)

    def resolve_effects(self, record: CaptionRecord) -> list[EffectSpec]:
        """Explicit effect list first, then the named preset, else nothing."""
        if record.effects is not None:
            return list(record.effects)
        if record.effect_preset:
            return get_effect_preset(record.effect_preset, self.presets)
        return []

    def build_svg(
        self,
        record: CaptionRecord,
        panel_width: float | None = None,
        panel_height: float | None = None,
    ) -> tuple[str, float, float]:
        """Caption markup and canvas size, before rasterization."""
        style = self.resolve_style(record)
        shape = self.shapes.generate(record, style, panel_width, panel_height)
        document = shape.document
        effects = self.resolve_effects(record)
        if effects:
            document = self.effects.apply(document, effects, shape.width, shape.height, caption_id(record))
        return document.to_svg(), shape.width, shape.height

    async def render(
        self,
        record: CaptionRecord,
        panel_width: float,
        panel_height: float,
    ) -> RenderedCaption:
        start = time.perf_counter()
        svg, width, height = self.build_svg(record, panel_width, panel_height)
        px_w = max(1, math.ceil(width))
        px_h = max(1, math.ceil(height))

        loop = asyncio.get_running_loop()
        buffer, image = await loop.run_in_executor(None, partial(svg_to_png, svg, px_w, px_h))

        bounds = compute_bounds(record, image.width, image.height, panel_width, panel_height)
        logger.debug(
            "Rendered %s caption %s (%dx%d) in %.1fms",
            record.kind, caption_id(record), image.width, image.height,
            (time.perf_counter() - start) * 1000,
        )
        return RenderedCaption(record=record, bounds=bounds, svg=svg, buffer=buffer, image=image)

    async def render_preview(self, record: CaptionRecord) -> RenderedCaption:
        """Render one caption outside any page, on a square fallback panel."""
        side = settings.caption_fallback_panel_width
        return await self.render(record, side, side)

    async def render_many(
        self,
        records: Sequence[CaptionRecord],
        panel_width: float,
        panel_height: float,
    ) -> list[RenderedCaption]:
        """Render concurrently; results follow a stable sort on z_index."""
        ordered = sorted(records, key=lambda r: r.z_index)
        return list(await asyncio.gather(
            *(self.render(r, panel_width, panel_height) for r in ordered)
        ))

    async def composite_captions(
        self,
        image_path: str | Path,
        records: Sequence[CaptionRecord],
        output_path: str | Path | None = None,
    ) -> Image.Image:
        """Draw captions onto a single image; a missing image raises ResourceError."""
        loop = asyncio.get_running_loop()
        base = await loop.run_in_executor(None, load_image, image_path)
        rendered = await self.render_many(records, base.width, base.height)
        for caption in rendered:
            base.alpha_composite(caption.image, dest=(int(caption.bounds.x), int(caption.bounds.y)))

        if output_path is not None:
            fmt = format_for_path(output_path)
            await loop.run_in_executor(
                None, partial(write_image_atomic, base, output_path, fmt, settings.default_quality)
            )
            logger.info("Wrote %d captions onto %s", len(rendered), output_path)
        return base
