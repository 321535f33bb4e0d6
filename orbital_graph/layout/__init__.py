"""Layout façade composing ring allocation, primary placement and satellites."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Sequence, Set, Tuple

from ..config import LayoutConfig, get_layout_config
from ..errors import ConfigurationError, LayoutWarning, UnresolvedReferenceWarning
from ..model import Category, NodeId, Position, PrimaryNode, SecondaryNode
from .math_utils import arc_spacing, centroid
from .primary import place_column, place_on_ring, place_on_spiral
from .rings import (
    RingAllocation,
    RingBand,
    allocate_rings,
    check_separation,
    member_counts,
    minimum_radius,
    order_members,
)
from .satellite import (
    ReferenceStrengths,
    SatellitePlacement,
    aggregate_anchor,
    place_fallback,
    place_orbit,
    place_satellites,
)

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    status: Literal["ok", "error"]
    positions: Dict[NodeId, Position] = field(default_factory=dict)
    warnings: List[LayoutWarning] = field(default_factory=list)
    allocation: Optional[RingAllocation] = None
    satellites: Dict[NodeId, SatellitePlacement] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status,
            "positions": {node_id: pos.to_dict() for node_id, pos in self.positions.items()},
            "warnings": [
                {"kind": warning.kind, "node": warning.node_id, "message": warning.message}
                for warning in self.warnings
            ],
            "error": self.error,
        }


def _accept_primaries(
    categories: Sequence[Category],
    primaries: Sequence[PrimaryNode],
    warnings: List[LayoutWarning],
) -> List[PrimaryNode]:
    known = {category.id for category in categories}
    seen: Set[NodeId] = set()
    accepted: List[PrimaryNode] = []
    for node in primaries:
        if node.id in seen:
            warnings.append(
                LayoutWarning("duplicate_node", node.id, f"primary {node.id!r} declared more than once; dropped")
            )
            continue
        seen.add(node.id)
        if node.category_id not in known:
            warnings.append(
                LayoutWarning(
                    "unknown_category",
                    node.id,
                    f"primary {node.id!r} references unknown category {node.category_id!r}; dropped",
                )
            )
            continue
        accepted.append(node)
    return accepted


def _place_primary(
    node: PrimaryNode,
    band: RingBand,
    total: int,
    config: LayoutConfig,
) -> Position:
    if band.policy == "column":
        return place_column(node.ordinal, band.member_count, config, band.elevation)
    if config.primary_mode == "spiral":
        if not 0 <= node.ordinal < band.member_count:
            raise ValueError(
                f"ring {band.category_id!r} ordinal {node.ordinal} outside [0, {band.member_count})"
            )
        return place_on_spiral(node.global_ordinal, total, config)
    return place_on_ring(band, node.ordinal, config)


def _place_primaries(
    primaries: Sequence[PrimaryNode],
    allocation: RingAllocation,
    total: int,
    config: LayoutConfig,
    warnings: List[LayoutWarning],
) -> Dict[NodeId, Position]:
    positions: Dict[NodeId, Position] = {}
    taken: Dict[Tuple[str, int], NodeId] = {}
    for node in primaries:
        band = allocation.band(node.category_id)
        if band is None:
            warnings.append(
                LayoutWarning(
                    "invalid_ordinal",
                    node.id,
                    f"primary {node.id!r} belongs to empty category {node.category_id!r}; dropped",
                )
            )
            continue
        if band.policy == "ring" and config.primary_mode == "spiral":
            slot_key = ("<spiral>", node.global_ordinal)
        else:
            slot_key = (node.category_id, node.ordinal)
        if slot_key in taken:
            warnings.append(
                LayoutWarning(
                    "duplicate_ordinal",
                    node.id,
                    f"primary {node.id!r} shares ordinal {slot_key[1]} with {taken[slot_key]!r}; dropped",
                )
            )
            continue
        try:
            position = _place_primary(node, band, total, config)
        except ValueError as exc:
            warnings.append(LayoutWarning("invalid_ordinal", node.id, f"primary {node.id!r}: {exc}; dropped"))
            continue
        taken[slot_key] = node.id
        positions[node.id] = position
    return positions


def _resolve_satellites(
    secondaries: Sequence[SecondaryNode],
    primary_positions: Dict[NodeId, Position],
    warnings: List[LayoutWarning],
) -> List[Tuple[NodeId, Tuple[NodeId, ...]]]:
    resolved: List[Tuple[NodeId, Tuple[NodeId, ...]]] = []
    seen: Set[NodeId] = set(primary_positions)
    for node in secondaries:
        if node.id in seen:
            warnings.append(
                LayoutWarning("duplicate_node", node.id, f"secondary {node.id!r} reuses an existing node id; dropped")
            )
            continue
        seen.add(node.id)
        refs: List[NodeId] = []
        for ref in dict.fromkeys(node.references):
            if ref in primary_positions:
                refs.append(ref)
                continue
            warnings.append(
                UnresolvedReferenceWarning(
                    "unresolved_reference",
                    node.id,
                    f"secondary {node.id!r} references unknown primary {ref!r}; reference dropped",
                    reference_id=ref,
                )
            )
        resolved.append((node.id, tuple(refs)))
    return resolved


def compute_layout(
    categories: Sequence[Category],
    primaries: Sequence[PrimaryNode],
    secondaries: Sequence[SecondaryNode] = (),
    config: Optional[LayoutConfig] = None,
    *,
    strengths: Optional[ReferenceStrengths] = None,
) -> LayoutResult:
    """Compute a position for every primary and secondary node.

    Structural problems with the category configuration stop the computation
    and are returned as an ``error`` result.  Problems with individual nodes
    are reported as warnings while the rest of the layout proceeds.

    In spiral mode the spiral spans every supplied primary, so dropping a
    record never shifts the others.  Ring bands are still allocated: they
    bound each category's ordinals and place the fallback ring.
    """

    config = config or get_layout_config()
    warnings: List[LayoutWarning] = []

    accepted = _accept_primaries(categories, primaries, warnings)
    counts = member_counts(categories, accepted)
    try:
        allocation = allocate_rings(categories, config, counts)
    except ConfigurationError as exc:
        logger.warning("Layout configuration rejected: %s", exc)
        return LayoutResult(status="error", error=str(exc))

    positions = _place_primaries(accepted, allocation, len(primaries), config, warnings)
    resolved = _resolve_satellites(secondaries, positions, warnings)
    satellites = place_satellites(resolved, positions, allocation.fallback_radius, config, strengths)
    for node_id, placement in satellites.items():
        positions[node_id] = placement.position

    for warning in warnings:
        logger.warning("Layout warning [%s]: %s", warning.kind, warning.message)
    logger.info(
        "Computed layout for %d node(s) (%d primaries, %d satellites) with %d warning(s)",
        len(positions),
        len(positions) - len(satellites),
        len(satellites),
        len(warnings),
    )
    return LayoutResult(
        status="ok",
        positions=positions,
        warnings=warnings,
        allocation=allocation,
        satellites=satellites,
    )


__all__ = [
    "LayoutResult",
    "RingAllocation",
    "RingBand",
    "SatellitePlacement",
    "ReferenceStrengths",
    "aggregate_anchor",
    "allocate_rings",
    "arc_spacing",
    "centroid",
    "check_separation",
    "compute_layout",
    "member_counts",
    "minimum_radius",
    "order_members",
    "place_column",
    "place_fallback",
    "place_on_ring",
    "place_on_spiral",
    "place_orbit",
    "place_satellites",
]
