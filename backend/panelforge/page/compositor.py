"""Page composition: panel images and their captions onto a template canvas.

Panels are processed in slot z-order. Every panel layer (shadow, bordered
panel with captions) is collected first and flushed onto the canvas in one
pass; the output file is written once, at the end of a successful render.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from PIL import Image, ImageFilter, ImageOps

from panelforge.captions.rasterizer import CaptionRasterizer
from panelforge.config import settings
from panelforge.errors import ResourceError, UnknownTemplate
from panelforge.models.page import (
    BorderSpec,
    FitMode,
    PageTemplate,
    PanelPlacement,
    PanelSlot,
    RenderOptions,
    RenderResult,
    ShadowSpec,
)
from panelforge.page.templates import BUILTIN_TEMPLATES, TemplateTable, resolve_page_size
from panelforge.utils.imaging import format_for_path, load_image, parse_color, write_image_atomic

logger = logging.getLogger(__name__)


@dataclass
class SlotBounds:
    x: int
    y: int
    width: int
    height: int


@dataclass
class Layer:
    """An RGBA image waiting to be composited at a canvas position."""

    image: Image.Image
    x: int
    y: int


def slot_bounds(slot: PanelSlot, page_width: int, page_height: int) -> SlotBounds:
    """Slot percentages → rounded pixel box (at least 1px per side)."""
    return SlotBounds(
        x=round(slot.x / 100 * page_width),
        y=round(slot.y / 100 * page_height),
        width=max(1, round(slot.width / 100 * page_width)),
        height=max(1, round(slot.height / 100 * page_height)),
    )


def fit_image(image: Image.Image, width: int, height: int, fit: FitMode = "cover") -> Image.Image:
    """Resize to exactly ``width`` x ``height``.

    cover crops around the center, contain letterboxes on transparency,
    fill stretches.
    """
    size = (width, height)
    if fit == "fill":
        return image.resize(size, Image.Resampling.LANCZOS)
    if fit == "contain":
        return ImageOps.pad(image, size, Image.Resampling.LANCZOS, color=(0, 0, 0, 0), centering=(0.5, 0.5))
    return ImageOps.fit(image, size, Image.Resampling.LANCZOS, centering=(0.5, 0.5))


def composite_at(canvas: Image.Image, layer: Image.Image, x: int, y: int) -> None:
    """Alpha-composite ``layer`` with its top-left at (x, y), clipping at the canvas."""
    left = max(0, -x)
    top = max(0, -y)
    if left >= layer.width or top >= layer.height:
        return
    if left or top:
        layer = layer.crop((left, top, layer.width, layer.height))
    canvas.alpha_composite(layer, dest=(x + left, y + top))


def drop_shadow(width: int, height: int, shadow: ShadowSpec) -> tuple[Image.Image, int]:
    """Blurred shadow for a ``width`` x ``height`` box, and its blur margin."""
    margin = int(shadow.blur * 2)
    layer = Image.new("RGBA", (width + margin * 2, height + margin * 2), (0, 0, 0, 0))
    box = Image.new("RGBA", (width, height), parse_color(shadow.color))
    layer.paste(box, (margin, margin))
    if shadow.blur > 0:
        layer = layer.filter(ImageFilter.GaussianBlur(shadow.blur))
    return layer, margin


class PageCompositor:
    """Renders panel placements onto one page using a slot template."""

    def __init__(
        self,
        template: str | PageTemplate,
        options: RenderOptions | None = None,
        rasterizer: CaptionRasterizer | None = None,
        templates: TemplateTable = BUILTIN_TEMPLATES,
    ) -> None:
        if isinstance(template, str):
            found = templates.get(template)
            if found is None:
                raise UnknownTemplate(template)
            template = found
        self.template = template
        self.options = options or RenderOptions()
        self._rasterizer = rasterizer

    @property
    def rasterizer(self) -> CaptionRasterizer:
        if self._rasterizer is None:
            self._rasterizer = CaptionRasterizer()
        return self._rasterizer

    def _slot_z(self, placement: PanelPlacement) -> int:
        slot = self.template.get_slot(placement.slot_id)
        if slot is None or slot.z_index is None:
            return 0
        return slot.z_index

    async def render(
        self,
        placements: Sequence[PanelPlacement],
        output_path: str | Path,
    ) -> RenderResult:
        """Compose and write the page. Failures become an unsuccessful result."""
        start = time.perf_counter()
        warnings: list[str] = []
        try:
            width, height = resolve_page_size(self.options.page_size)
            background = self.options.background_color or settings.default_background_color
            canvas = Image.new("RGBA", (width, height), parse_color(background))

            layers: list[Layer] = []
            attempted = 0
            loaded = 0
            for placement in sorted(placements, key=self._slot_z):
                slot = self.template.get_slot(placement.slot_id)
                if slot is None:
                    msg = f"Slot not found: {placement.slot_id}"
                    logger.warning(msg)
                    warnings.append(msg)
                    continue
                attempted += 1
                try:
                    panel_layers = await self._render_panel(placement, slot, width, height)
                except ResourceError as e:
                    logger.warning("Skipping panel %s: %s", placement.slot_id, e)
                    warnings.append(str(e))
                    continue
                loaded += 1
                layers.extend(panel_layers)

            if attempted and not loaded:
                raise ResourceError("No panel images could be loaded")

            for layer in layers:
                composite_at(canvas, layer.image, layer.x, layer.y)

            fmt = format_for_path(output_path)
            quality = self.options.quality or settings.default_quality
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                None, partial(write_image_atomic, canvas, output_path, fmt, quality)
            )
        except Exception as e:
            logger.error("Page render failed (%s): %s", self.template.id, e)
            return RenderResult(success=False, error=str(e), warnings=warnings)

        logger.info(
            "Rendered %s: %d/%d panels, %dx%d %s in %.1fms",
            self.template.id, loaded, len(placements), width, height, fmt,
            (time.perf_counter() - start) * 1000,
        )
        return RenderResult(
            success=True,
            output_path=str(output_path),
            width=width,
            height=height,
            format=fmt,
            warnings=warnings,
        )

    async def _render_panel(
        self,
        placement: PanelPlacement,
        slot: PanelSlot,
        page_width: int,
        page_height: int,
    ) -> list[Layer]:
        """Shadow and panel layers for one placement, in paint order."""
        start = time.perf_counter()
        bounds = slot_bounds(slot, page_width, page_height)
        border = placement.border or self.options.panel_border or BorderSpec()
        bw = border.width

        loop = asyncio.get_running_loop()
        source = await loop.run_in_executor(None, load_image, placement.path)
        panel = fit_image(source, bounds.width, bounds.height, placement.fit)
        if bw > 0:
            panel = ImageOps.expand(panel, border=bw, fill=parse_color(border.color))

        if placement.captions:
            captions = await self.rasterizer.render_many(placement.captions, bounds.width, bounds.height)
            for caption in captions:
                # Caption bounds are relative to the slot box, inside the border
                composite_at(panel, caption.image, int(caption.bounds.x) + bw, int(caption.bounds.y) + bw)

        layers: list[Layer] = []
        shadow = self.options.panel_shadow
        if shadow is not None:
            shadow_image, margin = drop_shadow(panel.width, panel.height, shadow)
            layers.append(Layer(
                shadow_image,
                bounds.x - bw - margin + shadow.offset_x,
                bounds.y - bw - margin + shadow.offset_y,
            ))
        layers.append(Layer(panel, bounds.x - bw, bounds.y - bw))
        logger.debug(
            "Panel %s (%d captions) in %.1fms",
            placement.slot_id, len(placement.captions), (time.perf_counter() - start) * 1000,
        )
        return layers
