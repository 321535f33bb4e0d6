from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from ..model import Position

TAU = 2.0 * math.pi


def _as_array(positions: Sequence[Position]) -> np.ndarray:
    return np.array([pos.as_tuple() for pos in positions], dtype=float).reshape(-1, 3)


def _to_position(vec: np.ndarray) -> Position:
    return Position(float(vec[0]), float(vec[1]), float(vec[2]))


def even_angle(index: int, count: int) -> float:
    """Angle of slot ``index`` among ``count`` evenly spaced slots on a circle."""

    return TAU * index / count


def point_on_circle(radius: float, angle: float, y: float) -> Position:
    return Position(radius * math.cos(angle), y, radius * math.sin(angle))


def arc_spacing(radius: float, count: int) -> float:
    if count <= 0:
        return math.inf
    return TAU * radius / count


def centroid(positions: Sequence[Position], weights: Optional[Sequence[float]] = None) -> Position:
    """Mean of ``positions``; weighted when ``weights`` are supplied."""

    if not positions:
        raise ValueError("centroid requires at least one position")
    points = _as_array(positions)
    if weights is None:
        return _to_position(points.mean(axis=0))
    w = np.asarray(weights, dtype=float)
    if w.shape != (len(positions),):
        raise ValueError("weights must match positions one-to-one")
    total = float(w.sum())
    if not math.isfinite(total) or total <= 0.0 or bool((w < 0).any()):
        return _to_position(points.mean(axis=0))
    return _to_position((points * w[:, None]).sum(axis=0) / total)


def nearest(anchor: Position, positions: Sequence[Position]) -> int:
    """Index of the position closest to ``anchor``; ties resolve to the lowest index."""

    points = _as_array(positions)
    target = np.array(anchor.as_tuple(), dtype=float)
    distances = np.linalg.norm(points - target, axis=1)
    return int(np.argmin(distances))


def orbit_offset(anchor: Position, radius: float, angle: float, lift: float) -> Position:
    """Point at ``radius`` from ``anchor`` in its local horizontal plane, raised by ``lift``."""

    return Position(
        anchor.x + radius * math.cos(angle),
        anchor.y + lift,
        anchor.z + radius * math.sin(angle),
    )


__all__ = [
    "TAU",
    "even_angle",
    "point_on_circle",
    "arc_spacing",
    "centroid",
    "nearest",
    "orbit_offset",
]
