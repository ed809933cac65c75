"""Tests for caption resolution, rasterization, and placement bounds."""

import asyncio
from unittest.mock import patch

import pytest
from PIL import Image

from tests.conftest import PANEL_H, PANEL_W, RED, make_record, write_image

from panelforge.captions import rasterizer as rasterizer_module
from panelforge.captions.rasterizer import CaptionRasterizer, caption_id, compute_bounds
from panelforge.errors import RenderError, ResourceError, UnknownCaptionKind
from panelforge.models.caption import StyleOverride
from panelforge.models.effects import GlowEffect, WobbleEffect


class TestResolution:
    def test_style_override_only_set_fields(self, rasterizer):
        record = make_record("speech", style=StyleOverride(font_size=30, font_color="#123456"))
        style = rasterizer.resolve_style(record)
        assert style.font_size == 30
        assert style.font_color == "#123456"
        assert style.background_color == "#FFFFFF"
        assert style.padding == 12

    def test_unknown_kind(self, rasterizer):
        with pytest.raises(UnknownCaptionKind):
            rasterizer.resolve_style(make_record("mumble"))

    def test_explicit_effects_beat_preset(self, rasterizer):
        record = make_record(effects=[GlowEffect()], effect_preset="neon")
        assert [e.type for e in rasterizer.resolve_effects(record)] == ["glow"]

    def test_preset_used_without_explicit(self, rasterizer):
        record = make_record(effect_preset="hand_drawn")
        assert rasterizer.resolve_effects(record) == [WobbleEffect(intensity=4)]

    def test_empty_effect_list_disables_preset(self, rasterizer):
        record = make_record(id="plain", effects=[], effect_preset="neon")
        assert rasterizer.resolve_effects(record) == []
        svg, _, _ = rasterizer.build_svg(record, PANEL_W, PANEL_H)
        assert "plain-0-glow" not in svg

    def test_unknown_preset_means_no_effects(self, rasterizer):
        assert rasterizer.resolve_effects(make_record(effect_preset="missing")) == []

    def test_caption_id_stable(self):
        a = make_record(text="same")
        b = make_record(text="same")
        assert caption_id(a) == caption_id(b)
        assert caption_id(make_record(id="c1")) == "c1"
        assert caption_id(make_record(text="other")) != caption_id(a)

    def test_effect_ids_use_caption_id(self, rasterizer):
        svg, _, _ = rasterizer.build_svg(make_record(id="bubble", effects=[GlowEffect()]), PANEL_W, PANEL_H)
        assert 'id="bubble-0-glow"' in svg


class TestBounds:
    def test_centered_on_anchor(self):
        record = make_record(x=50, y=50)
        bounds = compute_bounds(record, 100, 40, PANEL_W, PANEL_H)
        assert (bounds.x, bounds.y) == (350, 280)

    @pytest.mark.parametrize("x", [0, 1, 25, 50, 99, 100])
    @pytest.mark.parametrize("y", [0, 3, 50, 100])
    @pytest.mark.parametrize("size", [(1, 1), (300, 50), (2000, 2000)])
    def test_never_negative(self, x, y, size):
        bounds = compute_bounds(make_record(x=x, y=y), size[0], size[1], PANEL_W, PANEL_H)
        assert bounds.x >= 0
        assert bounds.y >= 0

    def test_no_upper_clamp(self):
        bounds = compute_bounds(make_record(x=100, y=100), 200, 100, PANEL_W, PANEL_H)
        assert bounds.x + bounds.width > PANEL_W
        assert bounds.y + bounds.height > PANEL_H


class TestRender:
    def test_render_speech(self, rasterizer, speech_record):
        rendered = asyncio.run(rasterizer.render(speech_record, PANEL_W, PANEL_H))
        assert rendered.record is speech_record
        assert rendered.buffer.startswith(b"\x89PNG")
        assert rendered.image.mode == "RGBA"
        assert (rendered.bounds.width, rendered.bounds.height) == rendered.image.size
        assert rendered.svg.startswith("<svg")

    def test_render_with_preset(self, rasterizer):
        record = make_record("sfx", "KRAK", effect_preset="electric_shock")
        rendered = asyncio.run(rasterizer.render(record, PANEL_W, PANEL_H))
        assert rendered.image.width > 0
        assert "electric" in rendered.svg

    def test_render_preview(self, rasterizer, speech_record):
        rendered = asyncio.run(rasterizer.render_preview(speech_record))
        assert rendered.image.width > 0

    def test_conversion_failure_is_render_error(self, rasterizer, speech_record):
        with patch.object(rasterizer_module.cairosvg, "svg2png", side_effect=ValueError("bad svg")):
            with pytest.raises(RenderError):
                asyncio.run(rasterizer.render(speech_record, PANEL_W, PANEL_H))

    def test_undecodable_png_is_render_error(self, rasterizer, speech_record):
        with patch.object(rasterizer_module.cairosvg, "svg2png", return_value=b"not a png"):
            with pytest.raises(RenderError):
                asyncio.run(rasterizer.render(speech_record, PANEL_W, PANEL_H))

    def test_render_many_stable_z_order(self, rasterizer):
        records = [
            make_record(id="a", z_index=5),
            make_record(id="b", z_index=1),
            make_record(id="c", z_index=5),
            make_record(id="d", z_index=3),
        ]
        rendered = asyncio.run(rasterizer.render_many(records, PANEL_W, PANEL_H))
        assert [r.record.id for r in rendered] == ["b", "d", "a", "c"]

    def test_render_many_unknown_kind_propagates(self, rasterizer):
        records = [make_record(id="ok"), make_record("bogus", id="bad")]
        with pytest.raises(UnknownCaptionKind):
            asyncio.run(rasterizer.render_many(records, PANEL_W, PANEL_H))


class TestCompositeCaptions:
    def test_draws_onto_image(self, rasterizer, tmp_path):
        src = write_image(tmp_path / "panel.png", (400, 300), RED)
        out = tmp_path / "out" / "captioned.png"
        image = asyncio.run(rasterizer.composite_captions(src, [make_record(x=50, y=50)], out))
        assert image.size == (400, 300)
        assert out.exists()
        with Image.open(out) as written:
            assert written.size == (400, 300)
        # Bubble interior is white, away from the red background
        assert image.getpixel((200, 150))[:3] != RED[:3]
        assert image.getpixel((2, 2)) == RED

    def test_missing_image_raises(self, rasterizer, tmp_path):
        with pytest.raises(ResourceError):
            asyncio.run(rasterizer.composite_captions(tmp_path / "nope.png", [make_record()]))

    def test_rng_seed_from_settings(self, speech_record):
        with patch.object(rasterizer_module.settings, "random_seed", 7):
            a = CaptionRasterizer().build_svg(speech_record, PANEL_W, PANEL_H)
            b = CaptionRasterizer().build_svg(speech_record, PANEL_W, PANEL_H)
        assert a == b
