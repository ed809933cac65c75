"""Layered in-memory SVG document, serialized once with ElementTree.

A caption document keeps its elements in four ordered slots:

    defs        gradients, filters, patterns
    background  layers drawn behind the caption shape
    content     the caption shape and its text
    foreground  layers drawn over everything

``content_filter`` wraps the content slot in a single ``<g filter=...>`` so a
filter effect applies to the whole shape but never to ``<defs>``.
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import Any

SVG_NS = "http://www.w3.org/2000/svg"
# Serialize SVG elements without a prefix
ET.register_namespace("", SVG_NS)


def qname(tag: str) -> str:
    """Namespace-qualified SVG tag name."""
    return f"{{{SVG_NS}}}{tag}"


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def fmt(value: Any) -> str:
    """Format an attribute value; floats are trimmed to 2 decimals."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = f"{value:.2f}".rstrip("0").rstrip(".")
        return "0" if text in ("", "-0") else text
    return str(value)


def element(tag: str, text: str | None = None, **attrs: Any) -> ET.Element:
    """Create a detached SVG element.

    Attribute names use underscores for hyphens (``stroke_width`` →
    ``stroke-width``). ``None`` values are dropped.
    """
    el = ET.Element(qname(tag))
    for key, value in attrs.items():
        if value is None:
            continue
        el.set(key.rstrip("_").replace("_", "-"), fmt(value))
    if text is not None:
        el.text = text
    return el


def group(children: Iterable[ET.Element] = (), **attrs: Any) -> ET.Element:
    g = element("g", **attrs)
    for child in children:
        g.append(child)
    return g


def points_attr(points: Iterable[tuple[float, float]]) -> str:
    """SVG ``points`` attribute from (x, y) pairs."""
    return " ".join(f"{fmt(float(x))},{fmt(float(y))}" for x, y in points)


class SvgDocument:
    """Caption SVG as ordered element slots plus canvas size."""

    def __init__(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.defs: list[ET.Element] = []
        self.background: list[ET.Element] = []
        self.content: list[ET.Element] = []
        self.foreground: list[ET.Element] = []
        # Content elements whose fill a gradient effect may override
        self.body: list[ET.Element] = []
        self.content_filter: str | None = None

    def copy(self) -> SvgDocument:
        """Deep copy; ``body`` references are remapped onto the copied tree."""
        clone = SvgDocument(self.width, self.height)
        clone.content_filter = self.content_filter
        clone.defs = [copy.deepcopy(el) for el in self.defs]
        clone.background = [copy.deepcopy(el) for el in self.background]
        clone.foreground = [copy.deepcopy(el) for el in self.foreground]

        mapping: dict[int, ET.Element] = {}
        for original in self.content:
            duplicate = copy.deepcopy(original)
            for src, dst in zip(original.iter(), duplicate.iter()):
                mapping[id(src)] = dst
            clone.content.append(duplicate)
        clone.body = [mapping[id(el)] for el in self.body if id(el) in mapping]
        return clone

    def to_element(self) -> ET.Element:
        root = ET.Element(qname("svg"))
        root.set("width", fmt(self.width))
        root.set("height", fmt(self.height))
        root.set("viewBox", f"0 0 {fmt(self.width)} {fmt(self.height)}")

        if self.defs:
            defs = ET.SubElement(root, qname("defs"))
            for el in self.defs:
                defs.append(copy.deepcopy(el))

        for el in self.background:
            root.append(copy.deepcopy(el))

        content_parent = root
        if self.content_filter:
            content_parent = ET.SubElement(root, qname("g"))
            content_parent.set("filter", f"url(#{self.content_filter})")
        for el in self.content:
            content_parent.append(copy.deepcopy(el))

        for el in self.foreground:
            root.append(copy.deepcopy(el))
        return root

    def to_svg(self) -> str:
        return ET.tostring(self.to_element(), encoding="unicode")

    def to_bytes(self) -> bytes:
        return ET.tostring(self.to_element(), xml_declaration=True, encoding="UTF-8")


def parse_markup(markup: str) -> SvgDocument:
    """Load existing SVG text into a document.

    Top-level ``<defs>`` children go to the defs slot; every other top-level
    element becomes content.
    """
    root = ET.fromstring(markup.strip().encode("utf-8"))
    if local_name(root.tag) != "svg":
        raise ValueError("Markup root is not <svg>")
    # Indentation-only text is dropped
    for el in root.iter():
        if el.text is not None and not el.text.strip():
            el.text = None
        if el.tail is not None and not el.tail.strip():
            el.tail = None

    width, height = _canvas_size(root)
    doc = SvgDocument(width, height)
    for child in root:
        if not isinstance(child.tag, str):
            continue
        if local_name(child.tag) == "defs":
            doc.defs.extend(list(child))
        else:
            doc.content.append(child)
    return doc


def _canvas_size(root: ET.Element) -> tuple[float, float]:
    viewbox = root.get("viewBox")
    if viewbox:
        parts = viewbox.replace(",", " ").split()
        if len(parts) == 4:
            return float(parts[2]), float(parts[3])
    width = _parse_length(root.get("width"))
    height = _parse_length(root.get("height"))
    return width, height


def _parse_length(raw: str | None) -> float:
    if not raw:
        return 0.0
    try:
        return float(raw.replace("px", "").replace("pt", ""))
    except ValueError:
        return 0.0
