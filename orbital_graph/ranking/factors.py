"""The seven ranking factors, each normalised to ``[0, 1]``.

Every factor reads exactly one aspect of an edge, so changing a single field
moves a single factor:

========================  ===========================================
factor                    edge fields read
========================  ===========================================
``text_relevance``        ``texts``, ``themes`` (and the query)
``edge_confidence``       ``tier``, ``weight``
``category_importance``   ``category``
``verification``          ``verification``
``centrality``            ``centrality``
``engagement``            ``engagement``
``recency``               ``updated_at`` (and ``now``)
========================  ===========================================
"""

from __future__ import annotations

import logging
import math
from dataclasses import astuple, dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence, Tuple

from ..config import FACTOR_NAMES, RankingConfig
from ..logging_utils import apply_debug_logging
from ..model import Edge, Engagement

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86400.0
# Share of a tier band that weight may span; keeps every tier strictly above the next.
_WEIGHT_SPAN = 0.99
_VIEWS_SHARE = 0.6
_RATING_SHARE = 0.2
_FEATURED_SHARE = 0.2


@dataclass(frozen=True)
class FactorScores:
    text_relevance: float
    edge_confidence: float
    category_importance: float
    verification: float
    centrality: float
    engagement: float
    recency: float

    def as_tuple(self) -> Tuple[float, ...]:
        return astuple(self)

    def to_dict(self) -> dict:
        return dict(zip(FACTOR_NAMES, self.as_tuple()))


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def text_relevance(edge: Edge, terms: Sequence[str]) -> float:
    """Fraction of query terms found in any of the edge's texts.

    An empty query is neutral and scores 1.0 so that the remaining factors
    decide the order.
    """

    if not terms:
        return 1.0
    haystack = edge.searchable_text().casefold()
    matched = sum(1 for term in terms if term in haystack)
    return matched / len(terms)


def edge_confidence(tier: int, weight: float) -> float:
    return _clamp01(((3 - tier) + _WEIGHT_SPAN * weight) / 3.0)


def category_importance(category: str, table: Mapping[str, float], default: float) -> float:
    return _clamp01(table.get(category, default))


def verification_level(status: str, levels: Mapping[str, float]) -> float:
    return _clamp01(levels.get(status, 0.0))


def capped_ratio(count: float, cap: float) -> float:
    return min(count, cap) / cap


def engagement_score(engagement: Engagement, views_cap: float) -> float:
    rated = engagement.helpful + engagement.not_helpful
    if rated > 0:
        helpful_ratio = engagement.helpful / (rated + 1.0)
    else:
        helpful_ratio = 0.5
    score = (
        _VIEWS_SHARE * capped_ratio(engagement.views, views_cap)
        + _RATING_SHARE * helpful_ratio
        + _FEATURED_SHARE * (1.0 if engagement.featured else 0.0)
    )
    return _clamp01(score)


def recency(updated_at: datetime, now: datetime, half_life_days: float, decay: str = "exponential") -> float:
    """Freshness of an edge, 1.0 when updated at ``now`` and decaying with age."""

    age_days = max(0.0, (now - updated_at).total_seconds() / _SECONDS_PER_DAY)
    if decay == "linear":
        return _clamp01(1.0 - age_days / (2.0 * half_life_days))
    return _clamp01(math.pow(0.5, age_days / half_life_days))


def extract_factors(
    edge: Edge,
    terms: Sequence[str],
    now: datetime,
    config: RankingConfig,
    importance: Optional[Mapping[str, float]] = None,
) -> FactorScores:
    table = importance if importance is not None else config.category_importance
    return FactorScores(
        text_relevance=text_relevance(edge, terms),
        edge_confidence=edge_confidence(edge.tier, edge.weight),
        category_importance=category_importance(edge.category, table, config.default_importance),
        verification=verification_level(edge.verification, config.verification_levels),
        centrality=capped_ratio(edge.centrality, config.centrality_cap),
        engagement=engagement_score(edge.engagement, config.views_cap),
        recency=recency(edge.updated_at, now, config.recency_half_life_days, config.recency_decay),
    )


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "FactorScores",
    "text_relevance",
    "edge_confidence",
    "category_importance",
    "verification_level",
    "capped_ratio",
    "engagement_score",
    "recency",
    "extract_factors",
]
