"""Example pipeline: rank a handful of edges for a free-text query."""

from datetime import datetime, timedelta, timezone

from orbital_graph import Edge, Engagement, Pagination, Query, SearchFilters, print_ranking, rank_edges

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)

EDGES = [
    Edge(
        'salah-times',
        'salah-0',
        'hadith-1',
        'salah',
        1,
        0.9,
        'verified',
        NOW - timedelta(days=12),
        centrality=8,
        engagement=Engagement(views=640, helpful=21, not_helpful=2, featured=True),
        texts=(('en', 'The five daily prayer times'),),
        themes=('prayer',),
    ),
    Edge(
        'zakat-gold',
        'zakat-2',
        'hadith-3',
        'zakat',
        2,
        0.7,
        'pending',
        NOW - timedelta(days=200),
        centrality=3,
        texts=(('en', 'Zakat due on gold and silver'),),
    ),
    Edge(
        'sawm-travel',
        'sawm-1',
        'hadith-3',
        'sawm',
        3,
        0.4,
        'unverified',
        NOW - timedelta(days=800),
        texts=(('en', 'Fasting while travelling'),),
        themes=('travel', 'prayer'),
    ),
    Edge('broken', 'hajj-0', 'hadith-9', 'hajj', 5, 0.4, 'verified', NOW),
]


def main() -> None:
    for text, filters in (('prayer', SearchFilters()), ('', SearchFilters(min_weight=0.5))):
        query = Query(text=text, filters=filters, pagination=Pagination(limit=2))
        result = rank_edges(EDGES, query, now=NOW)
        print(f'Query {text!r} with {filters}:')
        print(print_ranking(result), end='')
        for ranked in result.results:
            print(f'    factors: {ranked.factors.to_dict()}')


if __name__ == '__main__':
    main()
