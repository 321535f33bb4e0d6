import math
from datetime import datetime
from typing import Collection, Iterable, List, Tuple

from .errors import InvalidRecordError, MalformedQueryError, RejectedRecord
from .model import SORT_FIELDS, SORT_ORDERS, TIERS, VERIFICATION_STATUSES, Edge, Query


def _ensure_finite(edge: Edge, name: str, value: object, *, non_negative: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidRecordError(edge.id, f'{name} must be a finite number, got {value!r}')
    if non_negative and value < 0:
        raise InvalidRecordError(edge.id, f'{name} must be non-negative, got {value!r}')


def validate_edge(edge: Edge, now: datetime) -> None:
    if not edge.id:
        raise InvalidRecordError('<missing>', 'edge id must be non-empty')
    if edge.tier not in TIERS or isinstance(edge.tier, bool):
        raise InvalidRecordError(edge.id, f'tier must be one of 1|2|3, got {edge.tier!r}')
    _ensure_finite(edge, 'weight', edge.weight)
    if not 0.0 <= edge.weight <= 1.0:
        raise InvalidRecordError(edge.id, f'weight must lie in [0, 1], got {edge.weight!r}')
    if edge.verification not in VERIFICATION_STATUSES:
        raise InvalidRecordError(
            edge.id, f'verification must be verified|pending|unverified, got {edge.verification!r}'
        )
    _ensure_finite(edge, 'centrality', edge.centrality, non_negative=True)
    _ensure_finite(edge, 'engagement.views', edge.engagement.views, non_negative=True)
    _ensure_finite(edge, 'engagement.helpful', edge.engagement.helpful, non_negative=True)
    _ensure_finite(edge, 'engagement.not_helpful', edge.engagement.not_helpful, non_negative=True)
    if edge.updated_at.tzinfo is None:
        raise InvalidRecordError(edge.id, 'updated_at must be timezone-aware')
    if edge.updated_at > now:
        raise InvalidRecordError(
            edge.id, f'updated_at {edge.updated_at.isoformat()} is after {now.isoformat()}'
        )
    if edge.created_at is not None and edge.created_at.tzinfo is None:
        raise InvalidRecordError(edge.id, 'created_at must be timezone-aware')


def partition_edges(edges: Iterable[Edge], now: datetime) -> Tuple[List[Edge], List[RejectedRecord]]:
    """Split ``edges`` into valid records and rejections, preserving order."""

    valid: List[Edge] = []
    rejected: List[RejectedRecord] = []
    for edge in edges:
        try:
            validate_edge(edge, now)
        except InvalidRecordError as exc:
            rejected.append(RejectedRecord.from_error(exc))
            continue
        valid.append(edge)
    return valid, rejected


def validate_query(query: Query, categories: Collection[str]) -> None:
    filters = query.filters
    if filters.category is not None and filters.category not in categories:
        raise MalformedQueryError('category', f'unknown category {filters.category!r}')
    if filters.tier is not None and (isinstance(filters.tier, bool) or filters.tier not in TIERS):
        raise MalformedQueryError('tier', f'tier must be one of 1|2|3, got {filters.tier!r}')
    if filters.verification is not None and filters.verification not in VERIFICATION_STATUSES:
        raise MalformedQueryError(
            'verification', f'verification must be verified|pending|unverified, got {filters.verification!r}'
        )
    if filters.min_weight is not None:
        if not isinstance(filters.min_weight, (int, float)) or not 0.0 <= filters.min_weight <= 1.0:
            raise MalformedQueryError('min_weight', f'min_weight must lie in [0, 1], got {filters.min_weight!r}')
    page = query.pagination
    if isinstance(page.limit, bool) or not isinstance(page.limit, int) or page.limit < 1:
        raise MalformedQueryError('limit', f'limit must be a positive integer, got {page.limit!r}')
    if isinstance(page.offset, bool) or not isinstance(page.offset, int) or page.offset < 0:
        raise MalformedQueryError('offset', f'offset must be a non-negative integer, got {page.offset!r}')
    if query.sort_by not in SORT_FIELDS:
        raise MalformedQueryError('sort_by', f'sort_by must be ranking|weight|created|views, got {query.sort_by!r}')
    if query.sort_order not in SORT_ORDERS:
        raise MalformedQueryError('sort_order', f'sort_order must be asc|desc, got {query.sort_order!r}')
