"""Caption placement suggestions.

Two strategies: pure heuristics per caption kind (``quick_placement``) and an
edge-density analysis of the panel image that prefers visually calm regions.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

import numpy as np
from numpy.typing import NDArray

from panelforge.errors import UnknownCaptionKind
from panelforge.models.caption import CaptionPosition
from panelforge.models.placement import (
    CalmRegion,
    ImageAnalysis,
    PlacementSuggestion,
    PreferredRegion,
    Region,
)
from panelforge.utils.imaging import load_image

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 8
# Mean gradient magnitude that maps to density 1.0
GRADIENT_SATURATION = 100.0
CALM_THRESHOLD = 0.3
QUICK_CONFIDENCE = 0.7
PRIMARY_REGION_BONUS = 0.1
CENTER_PENALTY = 0.2
# Calm-region suggestions are trusted less than the standard regions
CALM_CONFIDENCE_FACTOR = 0.8
CALM_CANDIDATES = 3
# Minimum distance (percent) between a calm suggestion and existing ones
CALM_MIN_DISTANCE = 15.0
MAX_SUGGESTIONS = 5


@dataclass(frozen=True)
class KindPreference:
    regions: tuple[Region, ...]
    avoid_center: bool


KIND_PREFERENCES: Mapping[str, KindPreference] = MappingProxyType({
    "speech": KindPreference(("top-left", "top-right", "top-center"), avoid_center=True),
    "thought": KindPreference(("top-left", "top-right", "top-center"), avoid_center=True),
    "narration": KindPreference(("top-left", "top-center", "bottom-left", "bottom-center"), avoid_center=True),
    "sfx": KindPreference(("center", "center-left", "center-right"), avoid_center=False),
    "whisper": KindPreference(("bottom-left", "bottom-right", "center-left", "center-right"), avoid_center=True),
})

REGION_COORDS: Mapping[str, tuple[float, float]] = MappingProxyType({
    "top-left": (20.0, 15.0),
    "top-center": (50.0, 12.0),
    "top-right": (80.0, 15.0),
    "center-left": (15.0, 50.0),
    "center": (50.0, 50.0),
    "center-right": (85.0, 50.0),
    "bottom-left": (20.0, 85.0),
    "bottom-center": (50.0, 88.0),
    "bottom-right": (80.0, 85.0),
})


def _preference(kind: str) -> KindPreference:
    try:
        return KIND_PREFERENCES[kind]
    except KeyError:
        raise UnknownCaptionKind(kind) from None


def _position(region: str) -> CaptionPosition:
    x, y = REGION_COORDS[region]
    return CaptionPosition(x=x, y=y)


def region_name(x: float, y: float) -> Region:
    """Region label for a point given in panel percentages."""
    horizontal = "left" if x < 33 else "right" if x > 66 else "center"
    vertical = "top" if y < 33 else "bottom" if y > 66 else "center"
    if horizontal == "center" and vertical == "center":
        return "center"
    if vertical == "center":
        return f"center-{horizontal}"  # type: ignore[return-value]
    return f"{vertical}-{horizontal}"  # type: ignore[return-value]


# ── Heuristics only ──


def quick_placement(kind: str) -> PlacementSuggestion:
    """Primary region for a caption kind, no image analysis."""
    region = _preference(kind).regions[0]
    return PlacementSuggestion(
        position=_position(region),
        confidence=QUICK_CONFIDENCE,
        reasoning=f"Default {kind} position based on comic conventions",
        region=region,
    )


def quick_placements(kinds: Sequence[str]) -> list[PlacementSuggestion | None]:
    """One suggestion per kind, never reusing a region.

    A kind whose preferred regions are all taken gets ``None``.
    """
    used: set[str] = set()
    results: list[PlacementSuggestion | None] = []
    for kind in kinds:
        choice = None
        for region in _preference(kind).regions:
            if region not in used:
                used.add(region)
                choice = PlacementSuggestion(
                    position=_position(region),
                    confidence=QUICK_CONFIDENCE,
                    reasoning=f"Default {kind} position",
                    region=region,
                )
                break
        results.append(choice)
    return results


# ── Image analysis ──


def edge_density_grid(gray: NDArray[np.float64], grid_size: int = DEFAULT_GRID_SIZE) -> NDArray[np.float64]:
    """Per-cell mean gradient magnitude, normalized to [0, 1].

    Gradients are forward differences to the right and down neighbours; the
    last row and column contribute no samples.
    """
    h, w = gray.shape
    gx = np.abs(np.diff(gray, axis=1))[:-1, :]
    gy = np.abs(np.diff(gray, axis=0))[:, :-1]
    magnitude = np.sqrt(gx**2 + gy**2)

    cell_w = w // grid_size
    cell_h = h // grid_size
    density = np.zeros((grid_size, grid_size), dtype=np.float64)
    for row in range(grid_size):
        for col in range(grid_size):
            y0, x0 = row * cell_h, col * cell_w
            # Bounded by the magnitude map, which is one pixel short per axis
            cell = magnitude[y0:min(y0 + cell_h, h - 1), x0:min(x0 + cell_w, w - 1)]
            mean = float(cell.mean()) if cell.size else 0.0
            density[row, col] = min(mean / GRADIENT_SATURATION, 1.0)
    return density


def analyze_grayscale(gray: NDArray[np.float64], grid_size: int = DEFAULT_GRID_SIZE) -> ImageAnalysis:
    h, w = gray.shape
    density = edge_density_grid(gray, grid_size)
    cell_pct = 100.0 / grid_size

    calm = [
        CalmRegion(x=col * cell_pct, y=row * cell_pct, width=cell_pct, height=cell_pct, score=1.0 - float(d))
        for (row, col), d in np.ndenumerate(density)
        if d < CALM_THRESHOLD
    ]
    calm.sort(key=lambda r: r.score, reverse=True)
    return ImageAnalysis(
        width=w,
        height=h,
        edge_density=density.tolist(),
        calm_regions=calm,
        grid_size=grid_size,
    )


def _load_grayscale(path: str | Path) -> NDArray[np.float64]:
    image = load_image(path)
    return np.asarray(image.convert("L"), dtype=np.float64)


async def analyze_image(path: str | Path, grid_size: int = DEFAULT_GRID_SIZE) -> ImageAnalysis:
    """Edge-density grid and calm regions of an image on disk."""
    loop = asyncio.get_running_loop()
    gray = await loop.run_in_executor(None, _load_grayscale, path)
    analysis = analyze_grayscale(gray, grid_size)
    logger.debug("Analyzed %s: %d calm regions", path, len(analysis.calm_regions))
    return analysis


def density_at(analysis: ImageAnalysis, x: float, y: float) -> float:
    n = analysis.grid_size
    col = min(max(math.floor(x / 100 * n), 0), n - 1)
    row = min(max(math.floor(y / 100 * n), 0), n - 1)
    return analysis.edge_density[row][col]


def _matches(region: str, preferred: PreferredRegion) -> bool:
    if preferred == "center":
        return region == "center"
    return preferred in region


def _describe(density: float) -> str:
    pct = round(density * 100)
    if density < 0.2:
        return f"Clear area with low visual complexity ({pct}% edge density)"
    if density < 0.4:
        return f"Moderately clear area ({pct}% edge density)"
    return f"Some visual activity present ({pct}% edge density)"


def suggest_from_analysis(
    analysis: ImageAnalysis,
    kind: str,
    preferred_region: PreferredRegion | None = None,
) -> list[PlacementSuggestion]:
    preference = _preference(kind)
    candidates = list(preference.regions)
    if preferred_region and preferred_region != "any":
        candidates = [r for r in candidates if _matches(r, preferred_region)] or list(preference.regions)

    suggestions: list[PlacementSuggestion] = []
    for region in candidates:
        x, y = REGION_COORDS[region]
        density = density_at(analysis, x, y)
        confidence = 1.0 - density
        if region == preference.regions[0]:
            confidence += PRIMARY_REGION_BONUS
        if preference.avoid_center and region == "center":
            confidence -= CENTER_PENALTY

        reasoning = _describe(density)
        if "top" in region and kind == "speech":
            reasoning += ". Good position for speech near character faces."
        if "bottom" in region and kind == "narration":
            reasoning += ". Traditional narration box placement."

        suggestions.append(PlacementSuggestion(
            position=CaptionPosition(x=x, y=y),
            confidence=min(max(confidence, 0.0), 1.0),
            reasoning=reasoning,
            region=region,
        ))

    for calm in analysis.calm_regions[:CALM_CANDIDATES]:
        cx = calm.x + calm.width / 2
        cy = calm.y + calm.height / 2
        too_close = any(
            math.hypot(s.position.x - cx, s.position.y - cy) < CALM_MIN_DISTANCE for s in suggestions
        )
        if too_close:
            continue
        suggestions.append(PlacementSuggestion(
            position=CaptionPosition(x=cx, y=cy),
            confidence=calm.score * CALM_CONFIDENCE_FACTOR,
            reasoning=f"Detected calm region with {round(calm.score * 100)}% clarity",
            region=region_name(cx, cy),
        ))

    suggestions.sort(key=lambda s: s.confidence, reverse=True)
    return suggestions[:MAX_SUGGESTIONS]


async def suggest_placement(
    path: str | Path,
    kind: str,
    preferred_region: PreferredRegion | None = None,
) -> list[PlacementSuggestion]:
    """Up to five scored positions for one caption on the given panel image."""
    analysis = await analyze_image(path)
    return suggest_from_analysis(analysis, kind, preferred_region)


async def suggest_multiple_placements(
    path: str | Path,
    kinds: Sequence[str],
) -> list[PlacementSuggestion | None]:
    """Calmest unused preferred region for each kind, in input order."""
    analysis = await analyze_image(path)
    used: set[str] = set()
    results: list[PlacementSuggestion | None] = []
    for kind in kinds:
        best: PlacementSuggestion | None = None
        for region in _preference(kind).regions:
            if region in used:
                continue
            x, y = REGION_COORDS[region]
            density = density_at(analysis, x, y)
            score = 1.0 - density
            if best is None or score > best.confidence:
                best = PlacementSuggestion(
                    position=CaptionPosition(x=x, y=y),
                    confidence=score,
                    reasoning=f"Assigned to {region} ({round(density * 100)}% edge density)",
                    region=region,
                )
        if best is not None:
            used.add(best.region)
        results.append(best)
    return results
