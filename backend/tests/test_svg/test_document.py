"""Tests for the layered SVG document."""

from __future__ import annotations

import pytest

from tests.conftest import BUBBLE_SVG, find_all, local_tags, svg_root

from panelforge.svg.document import SvgDocument, element, fmt, group, parse_markup, points_attr


# ---------------------------------------------------------------------------
# Attribute formatting
# ---------------------------------------------------------------------------

class TestFormatting:
    @pytest.mark.parametrize("value,expected", [
        (1.0, "1"),
        (0.5, "0.5"),
        (2.346, "2.35"),
        (-0.001, "0"),
        (10, "10"),
        ("#FFF", "#FFF"),
        (True, "true"),
    ])
    def test_fmt(self, value, expected):
        assert fmt(value) == expected

    def test_element_attribute_names(self):
        el = element("rect", stroke_width=2.0, fill_opacity=0.5, class_="box", skipped=None)
        assert el.get("stroke-width") == "2"
        assert el.get("fill-opacity") == "0.5"
        assert el.get("class") == "box"
        assert el.get("skipped") is None

    def test_points_attr(self):
        assert points_attr([(0, 0), (1.5, 2.25)]) == "0,0 1.5,2.25"

    def test_group_children(self):
        g = group([element("circle"), element("rect")], id="g1")
        assert local_tags(g) == ["circle", "rect"]
        assert g.get("id") == "g1"


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestSerialization:
    def test_slot_order(self):
        doc = SvgDocument(100, 50)
        doc.foreground.append(element("line", id="fg"))
        doc.content.append(element("ellipse", id="body"))
        doc.background.append(element("rect", id="bg"))
        doc.defs.append(element("filter", id="f"))
        root = svg_root(doc.to_svg())
        assert local_tags(root) == ["defs", "rect", "ellipse", "line"]
        assert root.get("viewBox") == "0 0 100 50"

    def test_no_empty_defs(self):
        doc = SvgDocument(10, 10)
        doc.content.append(element("rect"))
        assert "defs" not in doc.to_svg()

    def test_content_filter_wraps_content_only(self):
        doc = SvgDocument(10, 10)
        doc.defs.append(element("filter", id="glow"))
        doc.content.extend([element("ellipse"), element("text", "hi")])
        doc.foreground.append(element("line"))
        doc.content_filter = "glow"
        root = svg_root(doc.to_svg())
        assert local_tags(root) == ["defs", "g", "line"]
        wrapper = root[1]
        assert wrapper.get("filter") == "url(#glow)"
        assert local_tags(wrapper) == ["ellipse", "text"]

    def test_serialization_is_repeatable(self):
        doc = parse_markup(BUBBLE_SVG)
        assert doc.to_svg() == doc.to_svg()

    def test_to_bytes_has_declaration(self):
        assert parse_markup(BUBBLE_SVG).to_bytes().startswith(b"<?xml")


# ---------------------------------------------------------------------------
# Copy and parse
# ---------------------------------------------------------------------------

class TestCopy:
    def test_copy_is_independent(self):
        doc = SvgDocument(20, 20)
        doc.content.append(element("rect", fill="#000"))
        clone = doc.copy()
        clone.content[0].set("fill", "#FFF")
        clone.defs.append(element("filter"))
        assert doc.content[0].get("fill") == "#000"
        assert doc.defs == []

    def test_copy_remaps_body(self):
        doc = SvgDocument(20, 20)
        body = element("ellipse", fill="#FFF")
        doc.content.append(group([body]))
        doc.body.append(body)
        clone = doc.copy()
        assert len(clone.body) == 1
        assert clone.body[0] is not body
        clone.body[0].set("fill", "url(#grad)")
        assert find_all(svg_root(clone.to_svg()), "ellipse")[0].get("fill") == "url(#grad)"
        assert body.get("fill") == "#FFF"


class TestParse:
    def test_defs_split_out(self):
        doc = parse_markup(BUBBLE_SVG)
        assert (doc.width, doc.height) == (120.0, 80.0)
        assert [el.get("id") for el in doc.defs] == ["shadow"]
        assert [el.tag.split("}")[1] for el in doc.content] == ["ellipse", "text"]

    def test_size_from_width_height(self):
        doc = parse_markup('<svg xmlns="http://www.w3.org/2000/svg" width="40px" height="30"><rect/></svg>')
        assert (doc.width, doc.height) == (40.0, 30.0)

    def test_rejects_non_svg_root(self):
        with pytest.raises(ValueError):
            parse_markup("<html/>")
