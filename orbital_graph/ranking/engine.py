"""Composite ranking of edges against a query."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Literal, Optional, Sequence, Union

from ..config import RankingConfig, RankingWeights, get_ranking_config
from ..errors import ConfigurationError, MalformedQueryError, RejectedRecord
from ..model import Category, Edge, Query, SearchFilters
from ..validate import partition_edges, validate_query
from .factors import FactorScores, extract_factors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedEdge:
    edge: Edge
    score: float
    factors: FactorScores

    def to_dict(self) -> Dict[str, object]:
        payload = self.edge.to_dict()
        payload["_score"] = self.score
        payload["_factors"] = self.factors.to_dict()
        return payload


@dataclass
class RankingResult:
    status: Literal["ok", "error"]
    results: List[RankedEdge] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    rejected: List[RejectedRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status,
            "results": [ranked.to_dict() for ranked in self.results],
            "total": self.total,
            "hasMore": self.has_more,
            "rejected": [{"id": r.record_id, "message": r.message} for r in self.rejected],
            "error": self.error,
        }


def composite_score(factors: FactorScores, weights: RankingWeights) -> float:
    return math.fsum(w * f for w, f in zip(weights.as_tuple(), factors.as_tuple()))


def matches_filters(edge: Edge, filters: SearchFilters) -> bool:
    if filters.category is not None and edge.category != filters.category:
        return False
    if filters.tier is not None and edge.tier != filters.tier:
        return False
    if filters.verification is not None and edge.verification != filters.verification:
        return False
    if filters.featured_only and not edge.featured:
        return False
    if filters.min_weight is not None and edge.weight < filters.min_weight:
        return False
    if filters.node is not None and filters.node not in (edge.source, edge.target):
        return False
    return True


def apply_filters(edges: Sequence[Edge], filters: SearchFilters) -> List[Edge]:
    """Every filter narrows the set; an empty filter keeps all edges."""

    return [edge for edge in edges if matches_filters(edge, filters)]


def importance_table(
    config: RankingConfig, categories: Optional[Sequence[Category]] = None
) -> Dict[str, float]:
    """Category importance lookup, with per-category overrides taking precedence."""

    table = dict(config.category_importance)
    for category in categories or ():
        if category.importance is not None:
            table[category.id] = float(category.importance)
        else:
            table.setdefault(category.id, config.default_importance)
    return table


_SORT_KEYS: Dict[str, Callable[[RankedEdge], float]] = {
    "ranking": lambda ranked: ranked.score,
    "weight": lambda ranked: ranked.edge.weight,
    # Edges without a creation time sort as the oldest.
    "created": lambda ranked: ranked.edge.created_at.timestamp() if ranked.edge.created_at else 0.0,
    "views": lambda ranked: ranked.edge.engagement.views,
}


def order_results(scored: List[RankedEdge], sort_by: str = "ranking", sort_order: str = "desc") -> None:
    """Sort ``scored`` in place; equal keys always fall back to ascending edge id."""

    scored.sort(key=lambda ranked: ranked.edge.id)
    scored.sort(key=_SORT_KEYS[sort_by], reverse=sort_order == "desc")


def _utc_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def rank_edges(
    edges: Sequence[Edge],
    query: Union[Query, str, None] = None,
    config: Optional[RankingConfig] = None,
    *,
    now: Optional[datetime] = None,
    categories: Optional[Sequence[Category]] = None,
) -> RankingResult:
    """Filter, score, order and paginate ``edges`` for ``query``.

    Results are ordered by ``query.sort_by`` (composite score unless set) in
    ``query.sort_order``.  Ties are broken by ascending edge id in every mode,
    so identical calls always produce the same order and page boundaries.
    """

    if query is None:
        query = Query()
    elif isinstance(query, str):
        query = Query(text=query)
    config = config or get_ranking_config()

    try:
        config.check()
        table = importance_table(config, categories)
        validate_query(query, table.keys())
    except (ConfigurationError, MalformedQueryError) as exc:
        logger.warning("Ranking request rejected: %s", exc)
        return RankingResult(status="error", error=str(exc))

    now = _utc_now(now)
    valid, rejected = partition_edges(edges, now)
    for record in rejected:
        logger.warning("Excluding invalid edge %s: %s", record.record_id, record.message)

    candidates = apply_filters(valid, query.filters)
    terms = query.terms
    scored = []
    for edge in candidates:
        factors = extract_factors(edge, terms, now, config, table)
        scored.append(RankedEdge(edge, composite_score(factors, config.weights), factors))
    order_results(scored, query.sort_by, query.sort_order)

    page = query.pagination
    window = scored[page.offset:page.offset + page.limit]
    total = len(scored)
    logger.info(
        "Ranked %d of %d edge(s) for query %r (%d rejected); returning %d from offset %d",
        total,
        len(edges),
        query.text,
        len(rejected),
        len(window),
        page.offset,
    )
    return RankingResult(
        status="ok",
        results=window,
        total=total,
        has_more=page.offset + page.limit < total,
        rejected=rejected,
    )


__all__ = [
    "RankedEdge",
    "RankingResult",
    "composite_score",
    "matches_filters",
    "apply_filters",
    "importance_table",
    "order_results",
    "rank_edges",
]
