"""Page layout, placement, and render option models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from panelforge.models.caption import CaptionRecord

FitMode = Literal["cover", "contain", "fill"]


class PanelSlot(BaseModel):
    """Rectangular page region in percentages of the page size."""

    model_config = ConfigDict(frozen=True)

    id: str
    x: float = Field(..., ge=0.0, le=100.0)
    y: float = Field(..., ge=0.0, le=100.0)
    width: float = Field(..., ge=0.0, le=100.0)
    height: float = Field(..., ge=0.0, le=100.0)
    z_index: int | None = None


class PageTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    slots: list[PanelSlot] = Field(default_factory=list)
    gutter: float = Field(default=2.0, ge=0.0, le=100.0)
    margin: float = Field(default=2.0, ge=0.0, le=100.0)
    # width / height
    aspect_ratio: float = 0.65

    @property
    def panel_count(self) -> int:
        return len(self.slots)

    def get_slot(self, slot_id: str) -> PanelSlot | None:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


class PageSize(BaseModel):
    """Named print or screen size in pixels."""

    model_config = ConfigDict(frozen=True)

    name: str
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    dpi: int = 300


class PixelSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class BorderSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(default=0, ge=0)
    color: str = "#000000"


class ShadowSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    blur: float = Field(default=8.0, ge=0.0)
    offset_x: int = 6
    offset_y: int = 6
    color: str = "#00000080"


class PanelPlacement(BaseModel):
    """A panel image assigned to a template slot, with optional captions."""

    path: str
    slot_id: str
    fit: FitMode = "cover"
    border: BorderSpec | None = None
    captions: list[CaptionRecord] = Field(default_factory=list)


class RenderOptions(BaseModel):
    page_size: str | PageSize | PixelSize | None = None
    background_color: str | None = None
    panel_border: BorderSpec | None = None
    panel_shadow: ShadowSpec | None = None
    quality: int | None = Field(default=None, ge=1, le=100)


class RenderResult(BaseModel):
    success: bool
    output_path: str | None = None
    width: int | None = None
    height: int | None = None
    format: str | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
