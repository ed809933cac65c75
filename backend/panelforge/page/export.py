"""Export rendered pages: format conversion, print bleed, trim marks, PDF.

Every entry point reports failures through ``ExportResult`` rather than
raising, like the page renderers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from functools import partial
from pathlib import Path

from PIL import Image, ImageDraw, ImageOps

from panelforge.models.export import ExportOptions, ExportResult, PdfPage
from panelforge.models.page import PageSize
from panelforge.utils.imaging import load_image, write_image_atomic

logger = logging.getLogger(__name__)

BLEED_COLOR = (255, 255, 255, 255)
TRIM_MARK_COLOR = (0, 0, 0, 255)
TRIM_MARK_MAX_LENGTH = 30
# Distance of a trim mark from the page edge
TRIM_MARK_OFFSET = 5

_FILE_EXTENSIONS = {"png": "png", "jpeg": "jpg", "webp": "webp", "tiff": "tiff", "pdf": "pdf"}


def add_bleed(image: Image.Image, bleed: int) -> Image.Image:
    if bleed <= 0:
        return image
    return ImageOps.expand(image, border=bleed, fill=BLEED_COLOR)


def draw_trim_marks(image: Image.Image, bleed: int) -> Image.Image:
    """Corner crop marks in the bleed area, aligned with the trim box."""
    length = min(bleed - 10, TRIM_MARK_MAX_LENGTH)
    if length <= 0:
        logger.warning("Bleed of %dpx is too small for trim marks", bleed)
        return image
    marked = image.copy()
    draw = ImageDraw.Draw(marked)
    w, h = marked.size
    o = TRIM_MARK_OFFSET
    for x_edge, x_sign in ((bleed, 1), (w - bleed, -1)):
        for y_edge, y_sign in ((bleed, 1), (h - bleed, -1)):
            outer_x = o if x_sign > 0 else w - o
            outer_y = o if y_sign > 0 else h - o
            # Vertical mark above/below the corner, horizontal mark beside it
            draw.line([(x_edge, outer_y), (x_edge, outer_y + y_sign * length)], fill=TRIM_MARK_COLOR, width=1)
            draw.line([(outer_x, y_edge), (outer_x + x_sign * length, y_edge)], fill=TRIM_MARK_COLOR, width=1)
    return marked


def _export_sync(input_path: str | Path, output_path: str | Path, options: ExportOptions) -> int:
    image = add_bleed(load_image(input_path), options.bleed)
    if options.trim_marks and options.bleed > 0:
        image = draw_trim_marks(image, options.bleed)
    if options.format == "pdf":
        return _write_pdf([image], output_path, options.dpi)
    return write_image_atomic(
        image, output_path, options.format, options.quality, dpi=(options.dpi, options.dpi)
    )


def _write_pdf(
    pages: Sequence[Image.Image],
    output_path: str | Path,
    dpi: int,
    title: str | None = None,
    author: str | None = None,
) -> int:
    rgb = [page.convert("RGB") for page in pages]
    extra = {k: v for k, v in (("title", title), ("author", author)) if v}
    return write_image_atomic(
        rgb[0], output_path, "pdf", save_all=True, append_images=rgb[1:], resolution=float(dpi), **extra,
    )


async def export_page(
    input_path: str | Path,
    output_path: str | Path,
    options: ExportOptions | None = None,
) -> ExportResult:
    """Convert a rendered page to another format, optionally with bleed."""
    options = options or ExportOptions()
    loop = asyncio.get_running_loop()
    try:
        size = await loop.run_in_executor(None, _export_sync, input_path, output_path, options)
    except Exception as e:
        logger.error("Export of %s failed: %s", input_path, e)
        return ExportResult(success=False, error=str(e))
    logger.info("Exported %s → %s (%s, %d bytes)", input_path, output_path, options.format, size)
    return ExportResult(success=True, output_path=str(output_path), format=options.format, file_size=size)


def _pdf_sync(
    pages: Sequence[PdfPage],
    output_path: str | Path,
    dpi: int,
    page_size: PageSize | None,
    title: str | None,
    author: str | None,
) -> int:
    images = []
    for page in sorted(pages, key=lambda p: p.page_number):
        image = load_image(page.path)
        if page_size is not None:
            image = ImageOps.pad(
                image, (page_size.width, page_size.height), Image.Resampling.LANCZOS, color=BLEED_COLOR,
            )
        images.append(image)
    return _write_pdf(images, output_path, dpi, title, author)


async def export_to_pdf(
    pages: Sequence[PdfPage | str | Path],
    output_path: str | Path,
    dpi: int = 300,
    page_size: PageSize | None = None,
    title: str | None = None,
    author: str | None = None,
) -> ExportResult:
    """One multi-page PDF, ordered by page number.

    Plain paths are numbered in the order given. With ``page_size`` every page
    is letterboxed on white to that size.
    """
    numbered = [
        p if isinstance(p, PdfPage) else PdfPage(path=str(p), page_number=i + 1)
        for i, p in enumerate(pages)
    ]
    if not numbered:
        return ExportResult(success=False, error="No pages to export")
    loop = asyncio.get_running_loop()
    try:
        size = await loop.run_in_executor(
            None, partial(_pdf_sync, numbered, output_path, dpi, page_size, title, author)
        )
    except Exception as e:
        logger.error("PDF export failed: %s", e)
        return ExportResult(success=False, error=str(e))
    logger.info("Wrote %d-page PDF %s", len(numbered), output_path)
    return ExportResult(
        success=True, output_path=str(output_path), format="pdf", file_size=size, page_count=len(numbered),
    )


async def export_batch(
    input_paths: Sequence[str | Path],
    output_dir: str | Path,
    options: ExportOptions | None = None,
) -> list[ExportResult]:
    """Export each input to ``output_dir/<stem>.<ext>``, one result per input."""
    options = options or ExportOptions()
    out_dir = Path(output_dir)
    ext = _FILE_EXTENSIONS[options.format]
    results = []
    for path in input_paths:
        target = out_dir / f"{Path(path).stem}.{ext}"
        results.append(await export_page(path, target, options))
    return results


async def prepare_for_print(
    input_path: str | Path,
    output_path: str | Path,
    bleed: int = 36,
    trim_marks: bool = True,
    dpi: int = 300,
) -> ExportResult:
    """White bleed and optional trim marks, written as LZW TIFF."""
    try:
        options = ExportOptions(format="tiff", dpi=dpi, bleed=bleed, trim_marks=trim_marks)
    except ValueError as e:
        logger.error("Invalid print options for %s: %s", input_path, e)
        return ExportResult(success=False, error=str(e))
    return await export_page(input_path, output_path, options)
