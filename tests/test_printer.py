from datetime import datetime, timezone

from orbital_graph import Category, Edge, PrimaryNode, SecondaryNode, compute_layout, rank_edges
from orbital_graph.layout import LayoutResult
from orbital_graph.printer import format_position, print_layout, print_ranking
from orbital_graph.ranking import RankingResult

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_format_position_uses_fixed_precision():
    result = compute_layout([Category('salah')], [PrimaryNode('p', 'salah', 0, 0)])

    assert format_position(result.positions['p']) == '(30.000000, 0.000000, 0.000000)'


def test_print_layout_lists_bands_positions_and_warnings():
    categories = [Category('salah'), Category('shahada', policy='column')]
    primaries = [PrimaryNode('p', 'salah', 0, 0), PrimaryNode('c', 'shahada', 0, 1)]
    secondaries = [SecondaryNode('h', ('missing',))]

    text = print_layout(compute_layout(categories, primaries, secondaries))

    lines = text.splitlines()
    assert lines[0] == 'Bands:'
    assert lines[1] == '  salah: ring r=30.000 [25.000, 35.000] (1 members)'
    assert lines[2] == '  shahada: column (1 members)'
    assert lines[3] == '  fallback: r=70.000'
    assert '  p: (30.000000, 0.000000, 0.000000)' in lines
    assert '  c: (0.000000, -17.500000, 0.000000)' in lines
    assert lines[-1].startswith('  - [unresolved_reference]')


def test_print_layout_without_warnings():
    text = print_layout(compute_layout([Category('salah')], [PrimaryNode('p', 'salah', 0, 0)]))

    assert text.endswith('Warnings:\n  (none)\n')


def test_print_layout_reports_failure():
    assert print_layout(LayoutResult(status='error', error='bad rings')) == 'Layout failed: bad rings\n'


def test_print_ranking_numbers_results_from_offset():
    edges = [
        Edge('b', 'x', 'y', 'salah', 1, 0.75, 'verified', NOW),
        Edge('a', 'x', 'z', 'zakat', 3, 0.25, 'pending', NOW),
        Edge('bad', 'x', 'z', 'zakat', 7, 0.25, 'pending', NOW),
    ]
    result = rank_edges(edges, now=NOW)

    lines = print_ranking(result, offset=4).splitlines()

    assert lines[0] == 'Total: 2 (has more: no)'
    assert lines[1].startswith('  5. b score=')
    assert lines[1].endswith('tier=1 weight=0.75 salah/verified')
    assert lines[2].startswith('  6. a score=')
    assert lines[3] == 'Rejected:'
    assert lines[4].startswith("  - bad: tier")


def test_print_ranking_reports_failure():
    text = print_ranking(RankingResult(status='error', error='limit: must be positive'))

    assert text == 'Search failed: limit: must be positive\n'
