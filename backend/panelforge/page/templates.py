"""Built-in page templates and page sizes.

Slot geometry is in percentages of the page so templates are resolution
independent; ``resolve_page_size`` turns render options into pixels.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from panelforge.config import settings
from panelforge.models.page import PageSize, PageTemplate, PanelSlot, PixelSize

PAGE_SIZES: Mapping[str, PageSize] = MappingProxyType({
    # US comic at 300 DPI
    "comic_standard": PageSize(name="US Comic (6.625 x 10.25 in)", width=1988, height=3075),
    "comic_digest": PageSize(name="Digest (5.5 x 8.5 in)", width=1650, height=2550),
    # Manga
    "manga_b6": PageSize(name="Manga B6 (5 x 7 in)", width=1500, height=2100),
    "manga_tankoubon": PageSize(name="Tankoubon (5.04 x 7.17 in)", width=1512, height=2151),
    # Screen
    "web_hd": PageSize(name="Web HD (1080 x 1920)", width=1080, height=1920, dpi=72),
    "web_4k": PageSize(name="Web 4K (2160 x 3840)", width=2160, height=3840, dpi=72),
    # Two pages side by side
    "spread_comic": PageSize(name="Comic Spread (13.25 x 10.25 in)", width=3975, height=3075),
})


def _slot(slot_id: str, x: float, y: float, w: float, h: float, z: int | None = None) -> PanelSlot:
    return PanelSlot(id=slot_id, x=x, y=y, width=w, height=h, z_index=z)


def _template(
    template_id: str,
    name: str,
    description: str,
    slots: Sequence[PanelSlot],
    gutter: float = 2.0,
    margin: float = 2.0,
) -> PageTemplate:
    return PageTemplate(
        id=template_id, name=name, description=description,
        slots=list(slots), gutter=gutter, margin=margin,
    )


_BUILTINS = (
    _template("full-page", "Full Page", "Single panel filling the entire page", [
        _slot("main", 2, 2, 96, 96),
    ], gutter=0),
    _template("two-vertical", "Two Vertical", "Two panels stacked vertically (50/50 split)", [
        _slot("top", 2, 2, 96, 47),
        _slot("bottom", 2, 51, 96, 47),
    ]),
    _template("two-horizontal", "Two Horizontal", "Two panels side by side", [
        _slot("left", 2, 2, 47, 96),
        _slot("right", 51, 2, 47, 96),
    ]),
    _template("three-top-heavy", "Three (Top Heavy)", "Large panel on top, two smaller panels below", [
        _slot("top", 2, 2, 96, 60),
        _slot("bottom-left", 2, 64, 47, 34),
        _slot("bottom-right", 51, 64, 47, 34),
    ]),
    _template("three-bottom-heavy", "Three (Bottom Heavy)", "Two smaller panels on top, large panel below", [
        _slot("top-left", 2, 2, 47, 34),
        _slot("top-right", 51, 2, 47, 34),
        _slot("bottom", 2, 38, 96, 60),
    ]),
    _template("four-grid", "Four Grid", "Four equal panels in a 2x2 grid", [
        _slot("top-left", 2, 2, 47, 47),
        _slot("top-right", 51, 2, 47, 47),
        _slot("bottom-left", 2, 51, 47, 47),
        _slot("bottom-right", 51, 51, 47, 47),
    ]),
    _template("six-grid", "Six Grid", "Six panels in a classic 2x3 comic grid", [
        _slot("row1-left", 2, 2, 47, 30),
        _slot("row1-right", 51, 2, 47, 30),
        _slot("row2-left", 2, 34, 47, 30),
        _slot("row2-right", 51, 34, 47, 30),
        _slot("row3-left", 2, 66, 47, 32),
        _slot("row3-right", 51, 66, 47, 32),
    ]),
    _template("nine-grid", "Nine Grid", "Nine panels in a 3x3 grid", [
        _slot("r1c1", 2, 2, 30.67, 30.67),
        _slot("r1c2", 34.17, 2, 30.67, 30.67),
        _slot("r1c3", 66.33, 2, 31.67, 30.67),
        _slot("r2c1", 2, 34.17, 30.67, 30.67),
        _slot("r2c2", 34.17, 34.17, 30.67, 30.67),
        _slot("r2c3", 66.33, 34.17, 31.67, 30.67),
        _slot("r3c1", 2, 66.33, 30.67, 31.67),
        _slot("r3c2", 34.17, 66.33, 30.67, 31.67),
        _slot("r3c3", 66.33, 66.33, 31.67, 31.67),
    ], gutter=1.5),
    _template("cinematic", "Cinematic", "Three widescreen panels for cinematic storytelling", [
        _slot("top", 2, 2, 96, 30),
        _slot("middle", 2, 34, 96, 30),
        _slot("bottom", 2, 66, 96, 32),
    ]),
    _template("action", "Action", "Dynamic asymmetric layout for action sequences", [
        _slot("hero", 2, 2, 60, 55),
        _slot("top-right", 63.5, 2, 34.5, 26.5),
        _slot("mid-right", 63.5, 30, 34.5, 27),
        _slot("bottom-left", 2, 58.5, 47, 39.5),
        _slot("bottom-right", 50.5, 58.5, 47.5, 39.5),
    ], gutter=1.5),
    _template("splash-insets", "Splash with Insets", "Large splash panel with small inset panels", [
        _slot("splash", 0, 0, 100, 100, z=0),
        _slot("inset-1", 3, 3, 25, 20, z=1),
        _slot("inset-2", 72, 3, 25, 20, z=1),
        _slot("inset-3", 3, 77, 35, 20, z=1),
    ], gutter=0, margin=0),
)

TemplateTable = Mapping[str, PageTemplate]

BUILTIN_TEMPLATES: TemplateTable = MappingProxyType({t.id: t for t in _BUILTINS})


def get_template(template_id: str, templates: TemplateTable = BUILTIN_TEMPLATES) -> PageTemplate | None:
    return templates.get(template_id)


def list_templates(templates: TemplateTable = BUILTIN_TEMPLATES) -> list[PageTemplate]:
    return list(templates.values())


def create_custom_template(
    template_id: str,
    name: str,
    slots: Sequence[PanelSlot],
    description: str = "Custom template",
    gutter: float = 2.0,
    margin: float = 2.0,
    aspect_ratio: float = 0.65,
) -> PageTemplate:
    return PageTemplate(
        id=template_id,
        name=name,
        description=description,
        slots=list(slots),
        gutter=gutter,
        margin=margin,
        aspect_ratio=aspect_ratio,
    )


def resolve_page_size(page_size: str | PageSize | PixelSize | None) -> tuple[int, int]:
    """Pixel dimensions for a preset name or explicit size.

    ``None`` uses the configured default preset. An unknown preset name
    raises ``ValueError``.
    """
    if page_size is None:
        page_size = settings.default_page_size
    if isinstance(page_size, str):
        preset = PAGE_SIZES.get(page_size)
        if preset is None:
            raise ValueError(f"Unknown page size: {page_size}")
        return preset.width, preset.height
    return page_size.width, page_size.height
