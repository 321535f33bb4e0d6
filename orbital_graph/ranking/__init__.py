"""Composite ranking engine for graph edges."""

from .engine import (
    RankedEdge,
    RankingResult,
    apply_filters,
    composite_score,
    importance_table,
    matches_filters,
    order_results,
    rank_edges,
)
from .factors import (
    FactorScores,
    capped_ratio,
    category_importance,
    edge_confidence,
    engagement_score,
    extract_factors,
    recency,
    text_relevance,
    verification_level,
)

__all__ = [
    "RankedEdge",
    "RankingResult",
    "apply_filters",
    "composite_score",
    "importance_table",
    "matches_filters",
    "order_results",
    "rank_edges",
    "FactorScores",
    "capped_ratio",
    "category_importance",
    "edge_confidence",
    "engagement_score",
    "extract_factors",
    "recency",
    "text_relevance",
    "verification_level",
]
