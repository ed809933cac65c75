"""Caption placement suggestion models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from panelforge.models.caption import CaptionPosition

Region = Literal[
    "top-left",
    "top-center",
    "top-right",
    "center-left",
    "center",
    "center-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
]

PreferredRegion = Literal["top", "bottom", "left", "right", "center", "any"]


class PlacementSuggestion(BaseModel):
    position: CaptionPosition
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    region: Region


class CalmRegion(BaseModel):
    """Grid cell with low edge density, in panel percentages."""

    x: float
    y: float
    width: float
    height: float
    # 1 - edge density
    score: float


class ImageAnalysis(BaseModel):
    width: int
    height: int
    # Row-major [grid_y][grid_x], values in [0, 1]
    edge_density: list[list[float]]
    calm_regions: list[CalmRegion] = Field(default_factory=list)
    grid_size: int
