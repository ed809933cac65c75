"""Page templates, composition, and export."""

from panelforge.page.builders import build_grid_template, render_contact_sheet, render_grid, render_page
from panelforge.page.compositor import PageCompositor
from panelforge.page.templates import (
    BUILTIN_TEMPLATES,
    PAGE_SIZES,
    create_custom_template,
    get_template,
    list_templates,
)

__all__ = [
    "build_grid_template",
    "render_contact_sheet",
    "render_grid",
    "render_page",
    "PageCompositor",
    "BUILTIN_TEMPLATES",
    "PAGE_SIZES",
    "create_custom_template",
    "get_template",
    "list_templates",
]
