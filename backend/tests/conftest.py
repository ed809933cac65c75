"""Shared test fixtures."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from panelforge.captions.rasterizer import CaptionRasterizer
from panelforge.models.caption import CaptionPosition, CaptionRecord, StyleOverride
from panelforge.svg.document import SVG_NS, local_name

SEED = 1234

HELLO_TEXT = "Hello there!"
LONG_TEXT = (
    "It was a dark and stormy night, and the rain fell in torrents except at "
    "occasional intervals when it was checked by a violent gust of wind"
)

# Existing caption markup with its own defs block
BUBBLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="120" height="80" viewBox="0 0 120 80">
  <defs>
    <filter id="shadow"><feDropShadow dx="2" dy="2" stdDeviation="2"/></filter>
  </defs>
  <ellipse cx="60" cy="40" rx="55" ry="35" fill="#FFFFFF" stroke="#000000"/>
  <text x="60" y="45" text-anchor="middle">Hi</text>
</svg>'''

PANEL_W = 800
PANEL_H = 600

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)


def make_record(
    kind: str = "speech",
    text: str = HELLO_TEXT,
    x: float = 50,
    y: float = 50,
    **kwargs,
) -> CaptionRecord:
    return CaptionRecord(kind=kind, text=text, position=CaptionPosition(x=x, y=y), **kwargs)


def svg_root(markup: str) -> ET.Element:
    return ET.fromstring(markup.encode("utf-8"))


def local_tags(el: ET.Element) -> list[str]:
    """Local names of the direct element children of ``el``."""
    return [local_name(child.tag) for child in el if isinstance(child.tag, str)]


def find_all(el: ET.Element, tag: str) -> list[ET.Element]:
    return el.findall(f".//{{{SVG_NS}}}{tag}")


def write_image(path: Path, size: tuple[int, int], color: tuple[int, int, int, int]) -> Path:
    Image.new("RGBA", size, color).save(path)
    return path


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(SEED)


@pytest.fixture
def rasterizer(rng) -> CaptionRasterizer:
    return CaptionRasterizer(rng=rng)


@pytest.fixture
def speech_record() -> CaptionRecord:
    return make_record("speech", HELLO_TEXT, 30, 20, style=StyleOverride(font_size=16))


@pytest.fixture
def red_panel(tmp_path) -> Path:
    return write_image(tmp_path / "red.png", (400, 300), RED)


@pytest.fixture
def blue_panel(tmp_path) -> Path:
    return write_image(tmp_path / "blue.png", (300, 400), BLUE)


@pytest.fixture
def green_panel(tmp_path) -> Path:
    return write_image(tmp_path / "green.png", (256, 256), GREEN)
