"""Exception taxonomy for caption rendering and page composition."""

from __future__ import annotations


class PanelforgeError(Exception):
    """Base class for all panelforge failures."""


class ValidationError(PanelforgeError, ValueError):
    """Input names something the engine does not know about."""


class UnknownCaptionKind(ValidationError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown caption kind: {kind}")
        self.kind = kind


class UnknownTemplate(ValidationError):
    def __init__(self, template_id: str) -> None:
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class ResourceError(PanelforgeError):
    """A source image is missing, unreadable, or has no dimensions."""


class RenderError(PanelforgeError):
    """SVG to raster conversion failed."""
