"""Leaf-node geometry helpers for procedural shapes. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def star_polygon(
    cx: float,
    cy: float,
    outer_radius: float,
    inner_radius: float,
    spikes: int,
    start_angle: float = -math.pi / 2,
) -> NDArray[np.float64]:
    """Alternating outer/inner vertices, ``spikes * 2`` rows of (x, y)."""
    n = spikes * 2
    angles = start_angle + np.arange(n) * (math.pi / spikes)
    radii = np.where(np.arange(n) % 2 == 0, outer_radius, inner_radius)
    return np.column_stack([cx + radii * np.cos(angles), cy + radii * np.sin(angles)])


def radial_segments(
    cx: float,
    cy: float,
    r_start: float,
    r_end: float,
    angles_deg: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Line segments (x1, y1, x2, y2) radiating from a center at given angles."""
    rad = np.radians(angles_deg)
    cos, sin = np.cos(rad), np.sin(rad)
    return np.column_stack([
        cx + cos * r_start,
        cy + sin * r_start,
        cx + cos * r_end,
        cy + sin * r_end,
    ])


def unit_vector_endpoints(angle_deg: float) -> tuple[float, float, float, float]:
    """Gradient vector endpoints in percent for an angle on the unit circle."""
    rad = math.radians(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    return (50 - c * 50, 50 - s * 50, 50 + c * 50, 50 + s * 50)


def subdivide_edge(
    start: tuple[float, float],
    end: tuple[float, float],
    segments: int,
) -> NDArray[np.float64]:
    """Evenly spaced points from ``start`` up to (not including) ``end``."""
    t = np.arange(segments) / segments
    sx, sy = start
    ex, ey = end
    return np.column_stack([sx + (ex - sx) * t, sy + (ey - sy) * t])


def edge_normal(start: tuple[float, float], end: tuple[float, float]) -> tuple[float, float]:
    """Unit normal of an edge (rotated 90 degrees clockwise in screen space)."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    length = math.hypot(dx, dy)
    if length < 1e-10:
        return (0.0, 0.0)
    return (-dy / length, dx / length)
