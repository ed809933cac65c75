"""panelforge: comic caption rendering and page composition."""

from panelforge.captions import CaptionRasterizer, RenderedCaption
from panelforge.page import PageCompositor, render_contact_sheet, render_grid, render_page

__all__ = [
    "CaptionRasterizer",
    "RenderedCaption",
    "PageCompositor",
    "render_page",
    "render_grid",
    "render_contact_sheet",
]
