from typing import List

from .errors import LayoutWarning
from .layout import LayoutResult
from .model import Position
from .ranking import RankedEdge, RankingResult


def format_position(pos: Position) -> str:
    return f'({pos.x:.6f}, {pos.y:.6f}, {pos.z:.6f})'


def format_warning(warning: LayoutWarning) -> str:
    return f'[{warning.kind}] {warning.message}'


def print_layout(result: LayoutResult) -> str:
    if not result.ok:
        return f'Layout failed: {result.error}\n'
    lines: List[str] = []
    if result.allocation is not None:
        lines.append('Bands:')
        for cid in result.allocation.order:
            band = result.allocation.bands[cid]
            if band.policy == 'column':
                lines.append(f'  {cid}: column ({band.member_count} members)')
            else:
                lines.append(
                    f'  {cid}: ring r={band.radius:.3f} [{band.inner:.3f}, {band.outer:.3f}] '
                    f'({band.member_count} members)'
                )
        lines.append(f'  fallback: r={result.allocation.fallback_radius:.3f}')
    lines.append('Positions:')
    for node_id, pos in result.positions.items():
        lines.append(f'  {node_id}: {format_position(pos)}')
    lines.append('Warnings:')
    if result.warnings:
        lines.extend(f'  - {format_warning(w)}' for w in result.warnings)
    else:
        lines.append('  (none)')
    return '\n'.join(lines) + '\n'


def format_ranked(rank: int, ranked: RankedEdge) -> str:
    edge = ranked.edge
    return (
        f'{rank:>3}. {edge.id} score={ranked.score:.4f} '
        f'tier={edge.tier} weight={edge.weight:.2f} {edge.category}/{edge.verification}'
    )


def print_ranking(result: RankingResult, offset: int = 0) -> str:
    if not result.ok:
        return f'Search failed: {result.error}\n'
    lines = [f'Total: {result.total} (has more: {"yes" if result.has_more else "no"})']
    for idx, ranked in enumerate(result.results, start=offset + 1):
        lines.append(format_ranked(idx, ranked))
    if result.rejected:
        lines.append('Rejected:')
        lines.extend(f'  - {record.record_id}: {record.message}' for record in result.rejected)
    return '\n'.join(lines) + '\n'
