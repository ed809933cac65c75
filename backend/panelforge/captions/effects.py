"""Procedural caption effects merged into an SvgDocument.

Each effect kind has one builder. Builders only add elements to the document's
slots (defs, background, foreground) or set its content filter; the layering
itself happens once, at serialization.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

import numpy as np

from panelforge.models.effects import (
    EffectSpec,
    ElectricEffect,
    ExplosionEffect,
    GlowEffect,
    GradientEffect,
    JaggedEffect,
    MangaEmphasisEffect,
    ScreentoneEffect,
    SpeedLinesEffect,
    WobbleEffect,
)
from panelforge.svg.document import SvgDocument, element, group, points_attr
from panelforge.utils.geometry import (
    edge_normal,
    radial_segments,
    star_polygon,
    subdivide_edge,
    unit_vector_endpoints,
)

logger = logging.getLogger(__name__)

# Radial speed lines start this far out from the center
SPEED_LINE_INNER_RATIO = 0.3
JAGGED_PADDING = 5.0
ELECTRIC_JITTER = 30.0
ELECTRIC_STEP_RATIO = 0.3
SCREENTONE_OVERLAY_OPACITY = 0.3
COMEDY_DROP_COLOR = "#4444FF"

Builder = Callable[[SvgDocument, EffectSpec, float, float, str], None]


class EffectCompositor:
    """Applies an ordered effect list to a caption document."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self._builders: dict[str, Builder] = {
            "speed_lines": self._speed_lines,
            "explosion": self._explosion,
            "gradient": self._gradient,
            "wobble": self._wobble,
            "glow": self._glow,
            "jagged": self._jagged,
            "electric": self._electric,
            "manga_emphasis": self._manga_emphasis,
            "screentone": self._screentone,
        }

    def apply(
        self,
        document: SvgDocument,
        effects: Sequence[EffectSpec],
        width: float,
        height: float,
        element_id: str,
    ) -> SvgDocument:
        """Return a new document with ``effects`` applied in list order."""
        doc = document.copy()
        for index, effect in enumerate(effects):
            effect_id = f"{element_id}-{index}-{effect.type}"
            self._builders[effect.type](doc, effect, width, height, effect_id)
        logger.debug("Applied %d effects to %s", len(effects), element_id)
        return doc

    # ── Background layers ──

    def _speed_lines(self, doc: SvgDocument, effect: SpeedLinesEffect, w: float, h: float, eid: str) -> None:
        lines = []
        if effect.direction == "radial":
            max_r = max(w, h)
            step = 360.0 / (effect.density * 8)
            angles = np.arange(0.0, 360.0, step)
            for x1, y1, x2, y2 in radial_segments(w / 2, h / 2, max_r * SPEED_LINE_INNER_RATIO, max_r, angles):
                lines.append(element(
                    "line", x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2),
                    stroke=effect.color, stroke_width=1, opacity=effect.opacity,
                ))
        else:
            count = effect.density * 3
            spacing = h / count
            for i in range(count):
                y = spacing * (i + 0.5)
                length = w * (0.3 + float(self.rng.random()) * 0.4)
                if effect.direction == "right":
                    start = -length * 0.2
                    end = start + length
                else:
                    start = w + length * 0.2
                    end = start - length
                lines.append(element(
                    "line", x1=start, y1=y, x2=end, y2=y,
                    stroke=effect.color,
                    stroke_width=1 + float(self.rng.random()),
                    opacity=effect.opacity * (0.5 + float(self.rng.random()) * 0.5),
                    stroke_linecap="round",
                ))
        doc.background.append(group(lines, id=eid))

    def _explosion(self, doc: SvgDocument, effect: ExplosionEffect, w: float, h: float, eid: str) -> None:
        outer = min(w, h) / 2
        points = star_polygon(w / 2, h / 2, outer, outer * effect.inner_radius, effect.spikes)

        grad_id = f"{eid}-explosion-grad"
        gradient = element("radialGradient", id=grad_id)
        gradient.append(element("stop", offset="0%", stop_color=effect.color))
        gradient.append(element("stop", offset="100%", stop_color=effect.secondary_color))
        doc.defs.append(gradient)

        doc.background.append(element(
            "polygon", id=eid, points=points_attr(points),
            fill=f"url(#{grad_id})", stroke="#000000", stroke_width=2,
        ))

    def _jagged(self, doc: SvgDocument, effect: JaggedEffect, w: float, h: float, eid: str) -> None:
        p = JAGGED_PADDING
        corners = [(p, p), (w - p, p), (w - p, h - p), (p, h - p)]
        perimeter_half = w + h
        vertices: list[tuple[float, float]] = []
        for i, start in enumerate(corners):
            end = corners[(i + 1) % 4]
            length = math.hypot(end[0] - start[0], end[1] - start[1])
            segments = max(1, math.ceil(length / perimeter_half * effect.spikes * 2))
            nx, ny = edge_normal(start, end)
            for x, y in subdivide_edge(start, end, segments):
                jag = (float(self.rng.random()) - 0.5) * effect.depth * 2
                vertices.append((float(x) + nx * jag, float(y) + ny * jag))

        d = "M " + " L ".join(points_attr([v]) for v in vertices) + " Z"
        doc.background.append(element(
            "path", id=eid, d=d, fill=effect.fill, stroke=effect.color, stroke_width=2,
        ))

    def _screentone(self, doc: SvgDocument, effect: ScreentoneEffect, w: float, h: float, eid: str) -> None:
        size = 20.0 / effect.density
        pattern_id = f"{eid}-pattern"
        pattern = element(
            "pattern", id=pattern_id, patternUnits="userSpaceOnUse", width=size, height=size,
        )
        if effect.pattern == "dots":
            pattern.append(element(
                "circle", cx=size / 2, cy=size / 2, r=size / 4, fill=effect.color, opacity=0.5,
            ))
        elif effect.pattern == "lines":
            pattern.append(element(
                "line", x1=0, y1=0, x2=size, y2=0, stroke=effect.color, stroke_width=1, opacity=0.5,
            ))
        else:
            pattern.append(element(
                "line", x1=0, y1=0, x2=size, y2=size, stroke=effect.color, stroke_width=0.5, opacity=0.3,
            ))
            pattern.append(element(
                "line", x1=size, y1=0, x2=0, y2=size, stroke=effect.color, stroke_width=0.5, opacity=0.3,
            ))
        doc.defs.append(pattern)
        doc.background.append(element(
            "rect", id=eid, x=0, y=0, width=w, height=h,
            fill=f"url(#{pattern_id})", opacity=SCREENTONE_OVERLAY_OPACITY,
        ))

    # ── Defs: fills and filters ──

    def _gradient(self, doc: SvgDocument, effect: GradientEffect, w: float, h: float, eid: str) -> None:
        if effect.style == "radial":
            gradient = element("radialGradient", id=eid)
        else:
            x1, y1, x2, y2 = unit_vector_endpoints(effect.angle)
            gradient = element(
                "linearGradient", id=eid,
                x1=f"{x1:g}%", y1=f"{y1:g}%", x2=f"{x2:g}%", y2=f"{y2:g}%",
            )
        last = len(effect.colors) - 1
        for i, color in enumerate(effect.colors):
            gradient.append(element("stop", offset=f"{i / last * 100:g}%", stop_color=color))
        doc.defs.append(gradient)
        for body_el in doc.body:
            body_el.set("fill", f"url(#{eid})")

    def _wobble(self, doc: SvgDocument, effect: WobbleEffect, w: float, h: float, eid: str) -> None:
        seed = effect.seed if effect.seed is not None else int(self.rng.integers(0, 1000))
        wobble = element("filter", id=eid, x="-10%", y="-10%", width="120%", height="120%")
        wobble.append(element(
            "feTurbulence", type="turbulence", baseFrequency=0.01 * effect.intensity,
            numOctaves=2, seed=seed, result="turbulence",
        ))
        wobble.append(element(
            "feDisplacementMap", in_="SourceGraphic", in2="turbulence",
            scale=effect.intensity * 2, xChannelSelector="R", yChannelSelector="G",
        ))
        doc.defs.append(wobble)
        doc.content_filter = eid

    def _glow(self, doc: SvgDocument, effect: GlowEffect, w: float, h: float, eid: str) -> None:
        glow = element("filter", id=eid, x="-50%", y="-50%", width="200%", height="200%")
        glow.append(element("feGaussianBlur", in_="SourceGraphic", stdDeviation=effect.blur, result="blur"))
        glow.append(element("feFlood", flood_color=effect.color, flood_opacity=effect.spread, result="color"))
        glow.append(element("feComposite", in_="color", in2="blur", operator="in", result="glow"))
        merge = element("feMerge")
        for source in ("glow", "glow", "SourceGraphic"):
            merge.append(element("feMergeNode", in_=source))
        glow.append(merge)
        doc.defs.append(glow)
        doc.content_filter = eid

    # ── Foreground layers ──

    def _electric(self, doc: SvgDocument, effect: ElectricEffect, w: float, h: float, eid: str) -> None:
        blur_id = f"{eid}-blur"
        blur = element("filter", id=blur_id)
        blur.append(element("feGaussianBlur", stdDeviation=3))
        doc.defs.append(blur)

        cx, cy = w / 2, h / 2
        paths = []
        for _ in range(effect.bolts):
            x, y = self._edge_point(w, h)
            segments = 5 + int(self.rng.integers(0, 5))
            commands = [f"M {points_attr([(x, y)])}"]
            for _ in range(segments):
                x = x + (cx - x) * ELECTRIC_STEP_RATIO + (float(self.rng.random()) - 0.5) * ELECTRIC_JITTER
                y = y + (cy - y) * ELECTRIC_STEP_RATIO + (float(self.rng.random()) - 0.5) * ELECTRIC_JITTER
                commands.append(f"L {points_attr([(x, y)])}")
            d = " ".join(commands)
            paths.append(element("path", d=d, fill="none", stroke=effect.color, stroke_width=2, opacity=0.8))
            paths.append(element(
                "path", d=d, fill="none", stroke=effect.color, stroke_width=6, opacity=0.3,
                filter=f"url(#{blur_id})",
            ))
        doc.foreground.append(group(paths, id=eid))

    def _edge_point(self, w: float, h: float) -> tuple[float, float]:
        edge = int(self.rng.integers(0, 4))
        if edge == 0:
            return float(self.rng.random()) * w, 0.0
        if edge == 1:
            return w, float(self.rng.random()) * h
        if edge == 2:
            return float(self.rng.random()) * w, h
        return 0.0, float(self.rng.random()) * h

    def _manga_emphasis(self, doc: SvgDocument, effect: MangaEmphasisEffect, w: float, h: float, eid: str) -> None:
        cx, cy = w / 2, h / 2
        radius = min(w, h) / 2.5
        marks = []
        if effect.style == "impact":
            angles = np.arange(16) * (360.0 / 16)
            for x1, y1, x2, y2 in radial_segments(cx, cy, radius * 1.1, radius * 1.5, angles):
                marks.append(element(
                    "line", x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2),
                    stroke=effect.color, stroke_width=2 + float(self.rng.random()),
                ))
        elif effect.style == "surprise":
            for i in range(6):
                angle = i / 6 * math.tau - math.pi / 2
                marks.append(element(
                    "text", text="!",
                    x=cx + math.cos(angle) * radius * 1.3,
                    y=cy + math.sin(angle) * radius * 1.3,
                    font_size=14, font_weight="bold", fill=effect.color,
                    text_anchor="middle", dominant_baseline="middle",
                ))
        elif effect.style == "dramatic":
            spread = 0.1
            for i in range(8):
                angle = i / 8 * math.tau
                wedge = [
                    (cx + math.cos(angle - spread) * radius * 1.05, cy + math.sin(angle - spread) * radius * 1.05),
                    (cx + math.cos(angle) * radius * 1.4, cy + math.sin(angle) * radius * 1.4),
                    (cx + math.cos(angle + spread) * radius * 1.05, cy + math.sin(angle + spread) * radius * 1.05),
                ]
                marks.append(element("polygon", points=points_attr(wedge), fill=effect.color))
        else:
            # Sweat drops up and to the right
            for i in range(3):
                angle = -math.pi / 4 + (i - 1) * 0.3
                x = cx + math.cos(angle) * radius * 1.2
                y = cy + math.sin(angle) * radius * 1.2
                rotation = math.degrees(angle) + 45
                marks.append(element(
                    "ellipse", cx=x, cy=y, rx=3, ry=6, fill=COMEDY_DROP_COLOR,
                    transform=f"rotate({rotation:.2f} {x:.2f} {y:.2f})",
                ))
        doc.foreground.append(group(marks, id=eid))
