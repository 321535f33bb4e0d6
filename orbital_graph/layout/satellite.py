"""Placement of secondary nodes around the primaries they reference.

A satellite with references orbits an anchor at ``moon_radius`` in the
anchor's horizontal plane.  Satellites that end up sharing the same anchor
point are spread over evenly spaced slots, so two of them can never coincide.
Satellites without resolvable references sit on the fallback ring outside
every category band.
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import LayoutConfig
from ..model import NodeId, Position
from .math_utils import centroid, even_angle, nearest, orbit_offset, point_on_circle

logger = logging.getLogger(__name__)

ReferenceStrengths = Mapping[NodeId, Mapping[NodeId, float]]


@dataclass(frozen=True)
class SatellitePlacement:
    node_id: NodeId
    position: Position
    anchor: Optional[Position]
    reference_ids: Tuple[NodeId, ...]
    slot: int
    slots: int

    @property
    def is_fallback(self) -> bool:
        return self.anchor is None


def aggregate_anchor(
    positions: Sequence[Position],
    config: LayoutConfig,
    strengths: Optional[Sequence[float]] = None,
) -> Position:
    """Orbit centre for a satellite referencing ``positions``."""

    if not positions:
        raise ValueError("aggregate_anchor requires at least one referenced position")
    if len(positions) == 1:
        return positions[0]
    if config.aggregate == "weighted":
        return centroid(positions, strengths)
    mean = centroid(positions)
    if config.aggregate == "nearest":
        return positions[nearest(mean, positions)]
    return mean


def place_orbit(anchor: Position, slot: int, slots: int, config: LayoutConfig) -> Position:
    if not 0 <= slot < slots:
        raise ValueError(f"orbit slot {slot} outside [0, {slots})")
    return orbit_offset(anchor, config.moon_radius, even_angle(slot, slots), config.moon_lift)


def place_fallback(index: int, count: int, radius: float, config: LayoutConfig) -> Position:
    """Place the ``index``-th unconnected satellite on the fallback ring."""

    if not 0 <= index < count:
        raise ValueError(f"fallback index {index} outside [0, {count})")
    y = math.sin(index * config.fallback_wave_frequency) * config.fallback_height_variation
    return point_on_circle(radius, even_angle(index, count), y)


def place_satellites(
    satellites: Sequence[Tuple[NodeId, Tuple[NodeId, ...]]],
    primary_positions: Mapping[NodeId, Position],
    fallback_radius: float,
    config: LayoutConfig,
    strengths: Optional[ReferenceStrengths] = None,
) -> Dict[NodeId, SatellitePlacement]:
    """Place every satellite given its already-resolved reference ids.

    ``satellites`` is ordered; the order decides fallback positions and the
    slot each satellite takes around a shared anchor.
    """

    anchors: Dict[NodeId, Position] = {}
    groups: "OrderedDict[Tuple[float, float, float], List[NodeId]]" = OrderedDict()
    unconnected: List[NodeId] = []
    refs_by_node: Dict[NodeId, Tuple[NodeId, ...]] = {}

    for node_id, refs in satellites:
        refs_by_node[node_id] = refs
        if not refs:
            unconnected.append(node_id)
            continue
        ref_positions = [primary_positions[ref] for ref in refs]
        weights = None
        if strengths is not None and node_id in strengths:
            weights = [float(strengths[node_id].get(ref, 1.0)) for ref in refs]
        anchor = aggregate_anchor(ref_positions, config, weights)
        anchors[node_id] = anchor
        groups.setdefault(anchor.as_tuple(), []).append(node_id)

    placements: Dict[NodeId, SatellitePlacement] = {}
    for members in groups.values():
        for slot, node_id in enumerate(members):
            anchor = anchors[node_id]
            placements[node_id] = SatellitePlacement(
                node_id=node_id,
                position=place_orbit(anchor, slot, len(members), config),
                anchor=anchor,
                reference_ids=refs_by_node[node_id],
                slot=slot,
                slots=len(members),
            )

    for index, node_id in enumerate(unconnected):
        placements[node_id] = SatellitePlacement(
            node_id=node_id,
            position=place_fallback(index, len(unconnected), fallback_radius, config),
            anchor=None,
            reference_ids=(),
            slot=index,
            slots=len(unconnected),
        )

    logger.info(
        "Placed %d satellite(s) around %d anchor(s); %d on the fallback ring",
        len(placements) - len(unconnected),
        len(groups),
        len(unconnected),
    )
    return {node_id: placements[node_id] for node_id, _ in satellites}


__all__ = [
    "ReferenceStrengths",
    "SatellitePlacement",
    "aggregate_anchor",
    "place_orbit",
    "place_fallback",
    "place_satellites",
]
