"""Export option and result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ExportFormat = Literal["png", "jpeg", "webp", "tiff", "pdf"]


class ExportOptions(BaseModel):
    format: ExportFormat = "png"
    quality: int = Field(default=90, ge=1, le=100)
    dpi: int = Field(default=300, gt=0)
    # White margin added on every side, in pixels
    bleed: int = Field(default=0, ge=0)
    trim_marks: bool = False


class PdfPage(BaseModel):
    path: str
    page_number: int


class ExportResult(BaseModel):
    success: bool
    output_path: str | None = None
    format: str | None = None
    file_size: int | None = None
    page_count: int | None = None
    error: str | None = None
