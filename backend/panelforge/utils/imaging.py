"""Pillow helpers shared by the caption and page renderers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from PIL import Image, ImageColor, UnidentifiedImageError

from panelforge.errors import ResourceError

# Output path extension → Pillow format name
_EXTENSION_FORMATS = {
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".webp": "webp",
}


def parse_color(color: str) -> tuple[int, int, int, int]:
    """CSS-style color string → RGBA tuple. ``transparent`` is fully clear."""
    if color.strip().lower() in ("transparent", "none"):
        return (0, 0, 0, 0)
    try:
        return ImageColor.getcolor(color, "RGBA")
    except ValueError as e:
        raise ValueError(f"Invalid color: {color!r}") from e


def load_image(path: str | os.PathLike[str]) -> Image.Image:
    """Open an image as RGBA; missing or unreadable files raise ResourceError."""
    p = Path(path)
    if not p.is_file():
        raise ResourceError(f"Image not found: {p}")
    try:
        with Image.open(p) as im:
            im.load()
            if not im.width or not im.height:
                raise ResourceError(f"Image has no dimensions: {p}")
            return im.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise ResourceError(f"Unreadable image {p}: {e}") from e


def format_for_path(path: str | os.PathLike[str]) -> str:
    """Output format from the file extension; anything unknown is PNG."""
    return _EXTENSION_FORMATS.get(Path(path).suffix.lower(), "png")


def encode_image(image: Image.Image, fmt: str, quality: int) -> tuple[Image.Image, dict]:
    """Convert ``image`` for ``fmt`` and return it with Pillow save kwargs."""
    if fmt == "jpeg":
        return image.convert("RGB"), {"format": "JPEG", "quality": quality}
    if fmt == "webp":
        return image, {"format": "WEBP", "quality": quality}
    if fmt == "tiff":
        return image, {"format": "TIFF", "compression": "tiff_lzw"}
    if fmt == "pdf":
        return image.convert("RGB"), {"format": "PDF"}
    return image, {"format": "PNG"}


def write_image_atomic(
    image: Image.Image,
    path: str | os.PathLike[str],
    fmt: str,
    quality: int = 90,
    **save_kwargs,
) -> int:
    """Encode to a temp file beside ``path`` then rename over it.

    Readers never observe a partially written file. Returns the file size.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    encoded, kwargs = encode_image(image, fmt, quality)
    kwargs.update(save_kwargs)
    fd, tmp_name = tempfile.mkstemp(dir=out.parent, prefix=f".{out.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            encoded.save(fh, **kwargs)
        os.replace(tmp_name, out)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return out.stat().st_size
