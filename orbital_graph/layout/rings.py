"""Category ring allocation.

Every ``ring`` category receives its own radius band around the origin.  Bands
are assigned in category order, grow strictly outward, and never overlap.  A
band must be wide enough in circumference to keep ``min_arc_spacing`` between
neighbouring members; radii computed by the allocator are pushed outward until
that holds, while an explicitly requested radius that is too tight is reported
as a :class:`ConfigurationError` unless ``expand_rings`` is enabled.

``column`` categories live on the vertical axis and take no band, but the
innermost ring must stay clear of the axis by ``column_clearance``.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..config import LayoutConfig
from ..errors import ConfigurationError
from ..model import Category, PrimaryNode
from .math_utils import TAU, arc_spacing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RingBand:
    category_id: str
    policy: str
    member_count: int
    radius: float
    inner: float
    outer: float
    elevation: float = 0.0

    @property
    def angle_step(self) -> float:
        return TAU / self.member_count

    @property
    def arc_spacing(self) -> float:
        return arc_spacing(self.radius, self.member_count)


@dataclass
class RingAllocation:
    bands: Dict[str, RingBand] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    fallback_radius: float = 0.0

    def ring_bands(self) -> List[RingBand]:
        return [self.bands[cid] for cid in self.order if self.bands[cid].policy == "ring"]

    def band(self, category_id: str) -> Optional[RingBand]:
        return self.bands.get(category_id)


def minimum_radius(member_count: int, min_arc_spacing: float) -> float:
    """Smallest radius that keeps ``min_arc_spacing`` between ``member_count`` members."""

    if member_count <= 1:
        return 0.0
    return member_count * min_arc_spacing / TAU


def member_counts(
    categories: Sequence[Category], primaries: Iterable[PrimaryNode]
) -> Dict[str, int]:
    """Declared member count per category, falling back to the number of primaries."""

    observed: Dict[str, int] = defaultdict(int)
    for node in primaries:
        observed[node.category_id] += 1
    counts: Dict[str, int] = {}
    for category in categories:
        if category.member_count is not None:
            counts[category.id] = int(category.member_count)
        else:
            counts[category.id] = observed.get(category.id, 0)
    return counts


def allocate_rings(
    categories: Sequence[Category],
    config: LayoutConfig,
    counts: Optional[Dict[str, int]] = None,
) -> RingAllocation:
    """Assign a non-overlapping radius band to each non-empty ``ring`` category."""

    allocation = RingAllocation()
    seen: Set[str] = set()
    previous: Optional[RingBand] = None
    cursor = config.first_ring_radius
    half = config.band_half_width

    if half < 0 or config.ring_spacing <= 2 * half:
        raise ConfigurationError(
            f"ring_spacing ({config.ring_spacing}) must exceed the band width ({2 * half})"
        )
    if config.primary_mode == "spiral" and config.spiral_inner_radius <= config.column_clearance:
        raise ConfigurationError(
            f"spiral inner radius {config.spiral_inner_radius:g} lies inside the column "
            f"clearance {config.column_clearance:g}"
        )

    for category in categories:
        if category.id in seen:
            raise ConfigurationError(f"category {category.id!r} declared twice", category.id)
        seen.add(category.id)
        if category.policy not in ("ring", "column"):
            raise ConfigurationError(
                f"category {category.id!r} has unknown placement policy {category.policy!r}",
                category.id,
            )

        count = counts.get(category.id, 0) if counts is not None else (category.member_count or 0)
        if count < 0:
            raise ConfigurationError(f"category {category.id!r} has a negative member count", category.id)
        if count == 0:
            logger.debug("Skipping empty category %s", category.id)
            allocation.skipped.append(category.id)
            continue

        if category.policy == "column":
            allocation.bands[category.id] = RingBand(
                category.id, "column", count, 0.0, 0.0, 0.0, category.elevation
            )
            allocation.order.append(category.id)
            continue

        required = minimum_radius(count, config.min_arc_spacing)
        if category.radius is not None:
            radius = float(category.radius)
            if previous is not None and radius - half <= previous.outer:
                raise ConfigurationError(
                    f"ring for {category.id!r} at radius {radius:g} overlaps the band of "
                    f"{previous.category_id!r} (outer {previous.outer:g})",
                    category.id,
                )
            if radius < required:
                if not config.expand_rings:
                    raise ConfigurationError(
                        f"{count} members on radius {radius:g} leave an arc of "
                        f"{arc_spacing(radius, count):.3f} < min_arc_spacing {config.min_arc_spacing:g} "
                        f"for {category.id!r}",
                        category.id,
                    )
                logger.info(
                    "Expanding ring %s from radius %.3f to %.3f to respect min_arc_spacing",
                    category.id,
                    radius,
                    required,
                )
                radius = required
        else:
            radius = max(cursor, required)

        if radius - half <= config.column_clearance:
            raise ConfigurationError(
                f"ring for {category.id!r} reaches radius {radius - half:g}, inside the column "
                f"clearance {config.column_clearance:g}",
                category.id,
            )
        band = RingBand(
            category.id, "ring", count, radius, radius - half, radius + half, category.elevation
        )
        allocation.bands[category.id] = band
        allocation.order.append(category.id)
        previous = band
        cursor = radius + config.ring_spacing

    outermost = previous.outer if previous is not None else 0.0
    if config.primary_mode == "spiral":
        outermost = max(outermost, config.spiral_outer_radius)
    allocation.fallback_radius = max(config.fallback_radius, outermost + config.fallback_gap)

    logger.info(
        "Allocated %d band(s), skipped %d empty categor%s, fallback radius %.3f",
        len(allocation.order),
        len(allocation.skipped),
        "y" if len(allocation.skipped) == 1 else "ies",
        allocation.fallback_radius,
    )
    return allocation


def order_members(
    primaries: Iterable[PrimaryNode], allocation: RingAllocation
) -> Dict[str, List[PrimaryNode]]:
    """Members of each allocated category, ordered by ordinal then id."""

    grouped: Dict[str, List[PrimaryNode]] = {cid: [] for cid in allocation.order}
    for node in primaries:
        if node.category_id in grouped:
            grouped[node.category_id].append(node)
    for members in grouped.values():
        members.sort(key=lambda node: (node.ordinal, node.id))
    return grouped


def bands_overlap(a: RingBand, b: RingBand) -> bool:
    return a.inner <= b.outer and b.inner <= a.outer


def check_separation(allocation: RingAllocation) -> List[Tuple[str, str]]:
    """Pairs of ring categories whose bands intersect."""

    rings = allocation.ring_bands()
    overlaps: List[Tuple[str, str]] = []
    for i, first in enumerate(rings):
        for second in rings[i + 1:]:
            if bands_overlap(first, second):
                overlaps.append((first.category_id, second.category_id))
    return overlaps


__all__ = [
    "RingBand",
    "RingAllocation",
    "minimum_radius",
    "member_counts",
    "allocate_rings",
    "order_members",
    "bands_overlap",
    "check_separation",
]
