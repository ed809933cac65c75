"""Convenience entry points on top of PageCompositor."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Sequence
from functools import partial
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from panelforge.config import settings
from panelforge.errors import PanelforgeError, ResourceError
from panelforge.models.page import (
    PageSize,
    PageTemplate,
    PanelPlacement,
    PanelSlot,
    PixelSize,
    RenderOptions,
    RenderResult,
)
from panelforge.page.compositor import PageCompositor, composite_at, fit_image
from panelforge.page.templates import BUILTIN_TEMPLATES, TemplateTable
from panelforge.utils.imaging import load_image, parse_color, write_image_atomic

logger = logging.getLogger(__name__)

GRID_TEMPLATE_ID = "auto-grid"
# Label strip drawn over the bottom of a contact-sheet thumbnail
_LABEL_STRIP_COLOR = (0, 0, 0, 160)
_LABEL_TEXT_COLOR = (255, 255, 255, 255)
_LABEL_PAD = 4


def build_grid_template(
    count: int,
    columns: int = 2,
    gutter: float = 2.0,
    margin: float = 2.0,
) -> PageTemplate:
    """Uniform grid for ``count`` panels; the last row may be partial."""
    if count < 1:
        raise ValueError("Grid needs at least one panel")
    if columns < 1:
        raise ValueError("Grid needs at least one column")
    rows = math.ceil(count / columns)
    slot_w = (100 - margin * 2 - gutter * (columns - 1)) / columns
    slot_h = (100 - margin * 2 - gutter * (rows - 1)) / rows

    slots = [
        PanelSlot(
            id=f"cell-{i}",
            x=margin + (i % columns) * (slot_w + gutter),
            y=margin + (i // columns) * (slot_h + gutter),
            width=slot_w,
            height=slot_h,
        )
        for i in range(count)
    ]
    return PageTemplate(
        id=GRID_TEMPLATE_ID,
        name="Auto Grid",
        description=f"{columns}x{rows} auto-generated grid",
        slots=slots,
        gutter=gutter,
        margin=margin,
    )


async def render_grid(
    image_paths: Sequence[str | Path],
    output_path: str | Path,
    columns: int = 2,
    page_size: str | PageSize | PixelSize | None = None,
    gutter: float = 2.0,
    background_color: str | None = None,
) -> RenderResult:
    try:
        template = build_grid_template(len(image_paths), columns=columns, gutter=gutter)
    except ValueError as e:
        return RenderResult(success=False, error=str(e))
    placements = [
        PanelPlacement(path=str(path), slot_id=f"cell-{i}") for i, path in enumerate(image_paths)
    ]
    options = RenderOptions(page_size=page_size, background_color=background_color)
    return await PageCompositor(template, options).render(placements, output_path)


async def render_page(
    template_id: str,
    placements: Sequence[PanelPlacement],
    output_path: str | Path,
    options: RenderOptions | None = None,
    templates: TemplateTable = BUILTIN_TEMPLATES,
) -> RenderResult:
    """Render with a named template; an unknown id is an unsuccessful result."""
    try:
        compositor = PageCompositor(template_id, options, templates=templates)
    except PanelforgeError as e:
        logger.warning("Cannot render page: %s", e)
        return RenderResult(success=False, error=str(e))
    return await compositor.render(placements, output_path)


def _draw_label(thumb: Image.Image, label: str) -> None:
    draw = ImageDraw.Draw(thumb)
    font = ImageFont.load_default()
    left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
    strip_h = (bottom - top) + _LABEL_PAD * 2
    draw.rectangle((0, thumb.height - strip_h, thumb.width, thumb.height), fill=_LABEL_STRIP_COLOR)
    draw.text(
        (_LABEL_PAD, thumb.height - strip_h + _LABEL_PAD - top),
        label,
        font=font,
        fill=_LABEL_TEXT_COLOR,
    )


async def render_contact_sheet(
    image_paths: Sequence[str | Path],
    output_path: str | Path,
    columns: int = 4,
    thumbnail_size: int = 256,
    padding: int = 10,
    background_color: str | None = None,
    labels: Sequence[str] | None = None,
) -> RenderResult:
    """Fixed-size cover thumbnails in a grid, written as PNG."""
    warnings: list[str] = []
    try:
        if not image_paths:
            raise ValueError("Contact sheet needs at least one image")
        rows = math.ceil(len(image_paths) / columns)
        width = columns * thumbnail_size + (columns + 1) * padding
        height = rows * thumbnail_size + (rows + 1) * padding
        background = background_color or settings.default_background_color
        sheet = Image.new("RGBA", (width, height), parse_color(background))

        loop = asyncio.get_running_loop()
        loaded = 0
        for i, path in enumerate(image_paths):
            try:
                source = await loop.run_in_executor(None, load_image, path)
            except ResourceError as e:
                logger.warning("Skipping contact sheet image: %s", e)
                warnings.append(str(e))
                continue
            thumb = fit_image(source, thumbnail_size, thumbnail_size, "cover")
            if labels and i < len(labels) and labels[i]:
                _draw_label(thumb, labels[i])
            x = padding + (i % columns) * (thumbnail_size + padding)
            y = padding + (i // columns) * (thumbnail_size + padding)
            composite_at(sheet, thumb, x, y)
            loaded += 1

        if not loaded:
            raise ResourceError("No contact sheet images could be loaded")
        await loop.run_in_executor(None, partial(write_image_atomic, sheet, output_path, "png"))
    except Exception as e:
        logger.error("Contact sheet failed: %s", e)
        return RenderResult(success=False, error=str(e), warnings=warnings)

    logger.info("Contact sheet: %d images, %dx%d", loaded, width, height)
    return RenderResult(
        success=True,
        output_path=str(output_path),
        width=width,
        height=height,
        format="png",
        warnings=warnings,
    )
