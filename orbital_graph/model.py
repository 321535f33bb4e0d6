"""Immutable records shared by the layout and ranking engines."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Literal, Optional, Tuple

NodeId = str
PlacementPolicy = Literal["ring", "column"]
Tier = Literal[1, 2, 3]
VerificationStatus = Literal["verified", "pending", "unverified"]

PLACEMENT_POLICIES: Tuple[str, ...] = ("ring", "column")
TIERS: Tuple[int, ...] = (1, 2, 3)
# Ordered by precedence, strongest first.
VERIFICATION_STATUSES: Tuple[str, ...] = ("verified", "pending", "unverified")
SORT_FIELDS: Tuple[str, ...] = ("ranking", "weight", "created", "views")
SORT_ORDERS: Tuple[str, ...] = ("asc", "desc")


@dataclass(frozen=True)
class Position:
    """A point in the visualisation space; every coordinate is finite."""

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        for axis in ("x", "y", "z"):
            value = getattr(self, axis)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"Position.{axis} must be a finite number, got {value!r}")

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    def distance_to(self, other: "Position") -> float:
        return math.sqrt(
            (other.x - self.x) ** 2 + (other.y - self.y) ** 2 + (other.z - self.z) ** 2
        )


@dataclass(frozen=True)
class Category:
    id: str
    policy: PlacementPolicy = "ring"
    member_count: Optional[int] = None
    importance: Optional[float] = None
    radius: Optional[float] = None
    elevation: float = 0.0


@dataclass(frozen=True)
class PrimaryNode:
    id: NodeId
    category_id: str
    ordinal: int
    global_ordinal: int
    size: Optional[float] = None


@dataclass(frozen=True)
class SecondaryNode:
    id: NodeId
    references: Tuple[NodeId, ...] = ()
    category_id: Optional[str] = None


@dataclass(frozen=True)
class Engagement:
    views: float = 0.0
    helpful: float = 0.0
    not_helpful: float = 0.0
    featured: bool = False


@dataclass(frozen=True)
class Edge:
    """A scored connection between two nodes, as consumed by the ranking engine."""

    id: str
    source: NodeId
    target: NodeId
    category: str
    tier: int
    weight: float
    verification: str
    updated_at: datetime
    centrality: float = 0.0
    engagement: Engagement = field(default_factory=Engagement)
    texts: Tuple[Tuple[str, str], ...] = ()
    themes: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def featured(self) -> bool:
        return self.engagement.featured

    def searchable_text(self) -> str:
        parts = [text for _, text in self.texts]
        parts.extend(self.themes)
        return " ".join(part for part in parts if part)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "category": self.category,
            "tier": self.tier,
            "weight": self.weight,
            "verification": self.verification,
            "centrality": self.centrality,
            "engagement": {
                "views": self.engagement.views,
                "helpful": self.engagement.helpful,
                "not_helpful": self.engagement.not_helpful,
                "featured": self.engagement.featured,
            },
            "updated_at": self.updated_at.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "texts": dict(self.texts),
            "themes": list(self.themes),
        }


@dataclass(frozen=True)
class SearchFilters:
    category: Optional[str] = None
    tier: Optional[int] = None
    verification: Optional[str] = None
    featured_only: bool = False
    min_weight: Optional[float] = None
    node: Optional[NodeId] = None

    def is_empty(self) -> bool:
        return self == SearchFilters()


@dataclass(frozen=True)
class Pagination:
    limit: int = 20
    offset: int = 0


@dataclass(frozen=True)
class Query:
    text: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    pagination: Pagination = field(default_factory=Pagination)
    sort_by: str = "ranking"
    sort_order: str = "desc"

    @property
    def terms(self) -> Tuple[str, ...]:
        return tuple(self.text.casefold().split())


__all__ = [
    "NodeId",
    "PlacementPolicy",
    "Tier",
    "VerificationStatus",
    "PLACEMENT_POLICIES",
    "TIERS",
    "VERIFICATION_STATUSES",
    "SORT_FIELDS",
    "SORT_ORDERS",
    "Position",
    "Category",
    "PrimaryNode",
    "SecondaryNode",
    "Engagement",
    "Edge",
    "SearchFilters",
    "Pagination",
    "Query",
]
