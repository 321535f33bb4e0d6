from __future__ import annotations

import math
from typing import List, Optional

import numpy as np
from scipy.spatial.distance import pdist

from .config import LayoutConfig, get_layout_config
from .errors import LayoutWarning
from .layout import LayoutResult
from .layout.rings import check_separation


def orbit_bound(config: LayoutConfig) -> float:
    return config.moon_radius + abs(config.moon_lift) + config.orbit_tolerance


def _orbit_warnings(result: LayoutResult, config: LayoutConfig) -> List[LayoutWarning]:
    warnings: List[LayoutWarning] = []
    bound = orbit_bound(config)
    for node_id, placement in result.satellites.items():
        if placement.anchor is None:
            continue
        dist = placement.position.distance_to(placement.anchor)
        if dist > bound:
            warnings.append(
                LayoutWarning(
                    "orbit_bound",
                    node_id,
                    f"satellite {node_id!r} sits {dist:.6f} from its anchor (bound {bound:.6f})",
                )
            )
        if len(placement.reference_ids) == 1 or config.aggregate == "nearest":
            nearest_dist = min(
                placement.position.distance_to(result.positions[ref])
                for ref in placement.reference_ids
            )
            if nearest_dist > bound:
                warnings.append(
                    LayoutWarning(
                        "orbit_bound",
                        node_id,
                        f"satellite {node_id!r} sits {nearest_dist:.6f} from its nearest primary "
                        f"(bound {bound:.6f})",
                    )
                )
    return warnings


def _collocated_warnings(result: LayoutResult, config: LayoutConfig) -> List[LayoutWarning]:
    ids = list(result.positions)
    if len(ids) < 2:
        return []
    coords = np.array([result.positions[node_id].as_tuple() for node_id in ids], dtype=float)
    distances = pdist(coords)
    # pdist's condensed order matches the upper-triangle pair order.
    rows, cols = np.triu_indices(len(ids), k=1)
    warnings: List[LayoutWarning] = []
    for k in np.flatnonzero(distances < config.min_separation):
        i, j = int(rows[k]), int(cols[k])
        warnings.append(
            LayoutWarning(
                "collocated",
                ids[j],
                f"nodes {ids[i]!r} and {ids[j]!r} are {distances[k]:.3g} apart "
                f"(min separation {config.min_separation:g})",
            )
        )
    return warnings


def check_layout(result: LayoutResult, config: Optional[LayoutConfig] = None) -> List[LayoutWarning]:
    """Re-check the geometric invariants of a computed layout."""

    if not result.ok:
        return []
    config = config or get_layout_config()
    warnings: List[LayoutWarning] = []
    for node_id, position in result.positions.items():
        if not all(math.isfinite(v) for v in position.as_tuple()):
            warnings.append(LayoutWarning("non_finite", node_id, f"node {node_id!r} has a non-finite coordinate"))
    if result.allocation is not None:
        for first, second in check_separation(result.allocation):
            warnings.append(
                LayoutWarning("ring_overlap", first, f"ring bands of {first!r} and {second!r} overlap")
            )
    warnings.extend(_orbit_warnings(result, config))
    warnings.extend(_collocated_warnings(result, config))
    return warnings


__all__ = ["check_layout", "orbit_bound"]
