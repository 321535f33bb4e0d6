"""Closed-form placement of primary nodes on rings, the global spiral, or the column."""

from __future__ import annotations

import logging
import math

from ..config import LayoutConfig
from ..logging_utils import apply_debug_logging
from ..model import Position
from .math_utils import TAU, even_angle, point_on_circle
from .rings import RingBand

logger = logging.getLogger(__name__)


def _check_ordinal(ordinal: int, count: int, what: str) -> None:
    if count <= 0:
        raise ValueError(f"{what} count must be positive, got {count}")
    if not 0 <= ordinal < count:
        raise ValueError(f"{what} ordinal {ordinal} outside [0, {count})")


def column_height_at(ordinal: int, count: int, height: float) -> float:
    return (ordinal / count) * height - height / 2.0


def place_column(ordinal: int, count: int, config: LayoutConfig, elevation: float = 0.0) -> Position:
    """Place member ``ordinal`` of a ``column`` category on the vertical axis."""

    _check_ordinal(ordinal, count, "column")
    return Position(0.0, elevation + column_height_at(ordinal, count, config.column_height), 0.0)


def ring_height_at(ordinal: int, config: LayoutConfig, elevation: float = 0.0) -> float:
    return elevation + math.sin(ordinal * config.ring_wave_frequency) * config.ring_wave_amplitude


def place_on_ring(band: RingBand, ordinal: int, config: LayoutConfig) -> Position:
    """Place member ``ordinal`` evenly on the category's ring."""

    _check_ordinal(ordinal, band.member_count, f"ring {band.category_id!r}")
    angle = even_angle(ordinal, band.member_count)
    return point_on_circle(band.radius, angle, ring_height_at(ordinal, config, band.elevation))


def spiral_radius_at(global_ordinal: int, total: int, config: LayoutConfig) -> float:
    span = config.spiral_outer_radius - config.spiral_inner_radius
    return config.spiral_inner_radius + (global_ordinal / total) * span


def place_on_spiral(global_ordinal: int, total: int, config: LayoutConfig) -> Position:
    """Place a primary on the single spiral shared by all ring categories.

    The angle sweeps ``spiral_turns`` full turns over the whole domain while
    the radius grows linearly from the inner to the outer bound.
    """

    _check_ordinal(global_ordinal, total, "spiral")
    angle = TAU * config.spiral_turns * global_ordinal / total
    radius = spiral_radius_at(global_ordinal, total, config)
    y = math.sin(global_ordinal * config.spiral_wave_frequency) * config.spiral_height_variation
    return point_on_circle(radius, angle, y)


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "column_height_at",
    "place_column",
    "ring_height_at",
    "place_on_ring",
    "spiral_radius_at",
    "place_on_spiral",
]
