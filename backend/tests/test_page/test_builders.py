"""Tests for grid pages, named-template pages, and contact sheets."""

import asyncio
import itertools

import pytest
from PIL import Image

from tests.conftest import BLUE, GREEN, RED, write_image

from panelforge.models.page import PanelPlacement, PixelSize, RenderOptions
from panelforge.page.builders import (
    GRID_TEMPLATE_ID,
    build_grid_template,
    render_contact_sheet,
    render_grid,
    render_page,
)


def _overlaps(a, b):
    return (
        a.x < b.x + b.width - 1e-9 and b.x < a.x + a.width - 1e-9
        and a.y < b.y + b.height - 1e-9 and b.y < a.y + a.height - 1e-9
    )


class TestGridTemplate:
    def test_five_in_two_columns(self):
        template = build_grid_template(5, columns=2)
        assert template.id == GRID_TEMPLATE_ID
        assert [s.id for s in template.slots] == [f"cell-{i}" for i in range(5)]
        rows = sorted({round(s.y, 6) for s in template.slots})
        assert len(rows) == 3
        per_row = [sum(1 for s in template.slots if round(s.y, 6) == y) for y in rows]
        assert per_row == [2, 2, 1]

    def test_slots_disjoint_and_inside(self):
        template = build_grid_template(7, columns=3, gutter=1.5, margin=3)
        for a, b in itertools.combinations(template.slots, 2):
            assert not _overlaps(a, b)
        for slot in template.slots:
            assert slot.x >= 3 - 1e-9
            assert slot.x + slot.width <= 97 + 1e-9
            assert slot.y + slot.height <= 97 + 1e-9

    @pytest.mark.parametrize("count,columns", [(0, 2), (3, 0)])
    def test_invalid(self, count, columns):
        with pytest.raises(ValueError):
            build_grid_template(count, columns=columns)


class TestRenderGrid:
    def test_renders_cells(self, tmp_path, red_panel, blue_panel, green_panel):
        out = tmp_path / "grid.png"
        result = asyncio.run(render_grid(
            [red_panel, blue_panel, green_panel], out, columns=3, page_size=PixelSize(width=300, height=100),
        ))
        assert result.success, result.error
        with Image.open(out) as im:
            assert im.size == (300, 100)
            page = im.convert("RGBA")
            assert page.getpixel((50, 50)) == RED
            assert page.getpixel((150, 50)) == BLUE
            assert page.getpixel((250, 50)) == GREEN

    def test_empty_list_fails(self, tmp_path):
        result = asyncio.run(render_grid([], tmp_path / "grid.png"))
        assert not result.success
        assert result.error


class TestRenderPage:
    def test_unknown_template_result(self, tmp_path, red_panel):
        out = tmp_path / "page.png"
        result = asyncio.run(render_page("mystery", [PanelPlacement(path=str(red_panel), slot_id="main")], out))
        assert not result.success
        assert "mystery" in result.error
        assert not out.exists()

    def test_named_template(self, tmp_path, red_panel):
        out = tmp_path / "page.webp"
        options = RenderOptions(page_size=PixelSize(width=120, height=180))
        result = asyncio.run(render_page(
            "full-page", [PanelPlacement(path=str(red_panel), slot_id="main")], out, options,
        ))
        assert result.success
        assert result.format == "webp"
        with Image.open(out) as im:
            assert im.format == "WEBP"


class TestContactSheet:
    def test_sheet_size_and_layout(self, tmp_path):
        paths = [write_image(tmp_path / f"p{i}.png", (80 + i * 10, 60), c) for i, c in enumerate([RED, BLUE, GREEN])]
        out = tmp_path / "sheet.png"
        result = asyncio.run(render_contact_sheet(paths, out, columns=2, thumbnail_size=64, padding=10))
        assert result.success
        assert (result.width, result.height) == (2 * 64 + 3 * 10, 2 * 64 + 3 * 10)
        with Image.open(out) as im:
            sheet = im.convert("RGBA")
            assert sheet.getpixel((42, 42)) == RED
            assert sheet.getpixel((116, 42)) == BLUE
            assert sheet.getpixel((42, 116)) == GREEN
            # Padding and the unused fourth cell keep the background
            assert sheet.getpixel((5, 5)) == (255, 255, 255, 255)
            assert sheet.getpixel((116, 116)) == (255, 255, 255, 255)

    def test_labels_drawn(self, tmp_path, red_panel):
        plain = tmp_path / "plain.png"
        labelled = tmp_path / "labelled.png"
        asyncio.run(render_contact_sheet([red_panel], plain, columns=1, thumbnail_size=64))
        asyncio.run(render_contact_sheet([red_panel], labelled, columns=1, thumbnail_size=64, labels=["p1"]))
        with Image.open(plain) as a, Image.open(labelled) as b:
            assert a.convert("RGBA").getpixel((12, 72)) == RED
            assert b.convert("RGBA").getpixel((12, 72)) != RED

    def test_unreadable_images_skipped(self, tmp_path, red_panel):
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"not an image")
        out = tmp_path / "sheet.png"
        result = asyncio.run(render_contact_sheet([broken, red_panel], out, columns=2, thumbnail_size=32))
        assert result.success
        assert len(result.warnings) == 1

    def test_nothing_loadable_fails(self, tmp_path):
        result = asyncio.run(render_contact_sheet([tmp_path / "missing.png"], tmp_path / "sheet.png"))
        assert not result.success
        assert not (tmp_path / "sheet.png").exists()

    def test_empty_fails(self, tmp_path):
        assert not asyncio.run(render_contact_sheet([], tmp_path / "sheet.png")).success
