from .model import (
    Category,
    Edge,
    Engagement,
    Pagination,
    Position,
    PrimaryNode,
    Query,
    SearchFilters,
    SecondaryNode,
)
from .errors import (
    ConfigurationError,
    InvalidRecordError,
    LayoutWarning,
    MalformedQueryError,
    RejectedRecord,
    UnresolvedReferenceWarning,
)
from .config import (
    LayoutConfig,
    RankingConfig,
    RankingWeights,
    get_layout_config,
    get_ranking_config,
    set_layout_config,
    set_ranking_config,
)
from .layout import (
    LayoutResult,
    RingAllocation,
    RingBand,
    SatellitePlacement,
    allocate_rings,
    compute_layout,
    place_column,
    place_on_ring,
    place_on_spiral,
    place_satellites,
)
from .consistency import check_layout
from .ranking import FactorScores, RankedEdge, RankingResult, extract_factors, rank_edges
from .validate import validate_edge, validate_query
from .loader import edge_from_dict, load_config_document, load_edges, load_scene, parse_scene, parse_timestamp
from .printer import print_layout, print_ranking

__all__ = [
    'Category',
    'Edge',
    'Engagement',
    'Pagination',
    'Position',
    'PrimaryNode',
    'Query',
    'SearchFilters',
    'SecondaryNode',
    'ConfigurationError',
    'InvalidRecordError',
    'LayoutWarning',
    'MalformedQueryError',
    'RejectedRecord',
    'UnresolvedReferenceWarning',
    'LayoutConfig',
    'RankingConfig',
    'RankingWeights',
    'get_layout_config',
    'get_ranking_config',
    'set_layout_config',
    'set_ranking_config',
    'LayoutResult',
    'RingAllocation',
    'RingBand',
    'SatellitePlacement',
    'allocate_rings',
    'compute_layout',
    'place_column',
    'place_on_ring',
    'place_on_spiral',
    'place_satellites',
    'check_layout',
    'FactorScores',
    'RankedEdge',
    'RankingResult',
    'extract_factors',
    'rank_edges',
    'validate_edge',
    'validate_query',
    'edge_from_dict',
    'load_config_document',
    'load_edges',
    'load_scene',
    'parse_scene',
    'parse_timestamp',
    'print_layout',
    'print_ranking',
]
