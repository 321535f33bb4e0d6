import json

import pytest

import orbital_graph.__main__ as cli
from orbital_graph.ranking import RankingResult


def write_scene(tmp_path):
    scene = {
        'categories': [{'id': 'salah'}, {'id': 'shahada', 'placementPolicy': 'column'}],
        'primaries': [
            {'id': 's-0', 'categoryId': 'salah', 'ordinalInCategory': 0, 'globalOrdinal': 0},
            {'id': 's-1', 'categoryId': 'salah', 'ordinalInCategory': 1, 'globalOrdinal': 1},
            {'id': 'c-0', 'categoryId': 'shahada', 'ordinalInCategory': 0, 'globalOrdinal': 2},
        ],
        'secondaries': [{'id': 'h-1', 'referencedPrimaryIds': ['s-0']}],
    }
    path = tmp_path / 'scene.json'
    path.write_text(json.dumps(scene), encoding='utf-8')
    return path


def write_edges(tmp_path):
    records = [
        {
            'id': edge_id,
            'source': 's-0',
            'target': 'h-1',
            'category': 'salah',
            'tier': tier,
            'weight': 0.5,
            'verificationStatus': 'verified',
            'updatedAt': '2024-01-01T00:00:00Z',
        }
        for edge_id, tier in (('e1', 2), ('e2', 1))
    ]
    path = tmp_path / 'edges.jsonl'
    path.write_text('\n'.join(json.dumps(r) for r in records), encoding='utf-8')
    return path


def run(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_layout_command_prints_positions(tmp_path, capsys):
    scene = write_scene(tmp_path)

    assert run(['layout', str(scene), '--check']) == 0

    out = capsys.readouterr().out
    assert '  s-0: (30.000000, 0.000000, 0.000000)' in out
    assert '  h-1: ' in out
    assert out.endswith('Warnings:\n  (none)\n')


def test_layout_command_emits_json(tmp_path, capsys):
    scene = write_scene(tmp_path)

    assert run(['--json', 'layout', str(scene), '--spiral']) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload['status'] == 'ok'
    assert set(payload['positions']) == {'s-0', 's-1', 'c-0', 'h-1'}


def test_layout_command_applies_config_document(tmp_path, capsys):
    scene = write_scene(tmp_path)
    config_path = tmp_path / 'config.json'
    config_path.write_text(json.dumps({'layout': {'first_ring_radius': 40.0}}), encoding='utf-8')

    assert run(['--config', str(config_path), 'layout', str(scene)]) == 0

    assert '  s-0: (40.000000, 0.000000, 0.000000)' in capsys.readouterr().out


def test_rank_command_passes_filters_to_engine(tmp_path, monkeypatch, capsys):
    calls = []

    def _rank_edges(edges, query, config, now=None):
        calls.append((edges, query, now))
        return RankingResult(status='ok')

    monkeypatch.setattr(cli, 'load_edges', lambda path: (['edge'], []))
    monkeypatch.setattr(cli, 'rank_edges', _rank_edges)

    code = run(
        [
            'rank',
            str(tmp_path),
            '--query',
            'five prayers',
            '--category',
            'salah',
            '--tier',
            '1',
            '--featured-only',
            '--min-weight',
            '0.4',
            '--limit',
            '5',
            '--offset',
            '10',
            '--now',
            '2024-06-01T00:00:00Z',
        ]
    )

    assert code == 0
    (edges, query, now), = calls
    assert edges == ['edge']
    assert query.text == 'five prayers'
    assert query.filters.category == 'salah'
    assert query.filters.tier == 1
    assert query.filters.featured_only
    assert query.filters.min_weight == 0.4
    assert (query.pagination.limit, query.pagination.offset) == (5, 10)
    assert (query.sort_by, query.sort_order) == ('ranking', 'desc')
    assert now.year == 2024 and now.tzinfo is not None
    assert capsys.readouterr().out == 'Total: 0 (has more: no)\n'


def test_rank_command_emits_ranked_json(tmp_path, capsys):
    edges = write_edges(tmp_path)

    assert run(['--json', 'rank', str(edges), '--now', '2024-06-01T00:00:00Z']) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [item['id'] for item in payload['results']] == ['e2', 'e1']
    assert payload['hasMore'] is False


def test_rank_command_fails_on_malformed_query(tmp_path, capsys):
    edges = write_edges(tmp_path)

    assert run(['rank', str(edges), '--verification', 'maybe']) == 1

    assert capsys.readouterr().out.startswith('Search failed: verification')


@pytest.mark.parametrize(
    'options, expected',
    [
        (['--sort-order', 'asc'], ['e1', 'e2']),
        (['--sort-by', 'weight'], ['e1', 'e2']),
        (['--sort-by', 'weight', '--sort-order', 'asc'], ['e1', 'e2']),
    ],
)
def test_rank_command_applies_sort_options(tmp_path, capsys, options, expected):
    edges = write_edges(tmp_path)

    assert run(['--json', 'rank', str(edges), '--now', '2024-06-01T00:00:00Z', *options]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [item['id'] for item in payload['results']] == expected


def test_rank_command_rejects_unknown_sort_key(tmp_path):
    edges = write_edges(tmp_path)

    assert run(['rank', str(edges), '--sort-by', 'popularity']) == 2
