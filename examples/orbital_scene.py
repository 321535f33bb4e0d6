"""Example pipeline: lay out a small knowledge graph around concentric rings."""

from orbital_graph import (
    Category,
    LayoutConfig,
    PrimaryNode,
    SecondaryNode,
    check_layout,
    compute_layout,
    print_layout,
)

PILLARS = {
    'shahada': ('column', 3),
    'salah': ('ring', 19),
    'zakat': ('ring', 8),
    'sawm': ('ring', 6),
    'hajj': ('ring', 12),
}


def build_scene():
    categories = [Category(cid, policy=policy) for cid, (policy, _) in PILLARS.items()]
    primaries = []
    for cid, (_, count) in PILLARS.items():
        for ordinal in range(count):
            primaries.append(PrimaryNode(f'{cid}-{ordinal}', cid, ordinal, len(primaries)))
    secondaries = [
        SecondaryNode('hadith-1', ('salah-0',)),
        SecondaryNode('hadith-2', ('salah-0',)),
        SecondaryNode('hadith-3', ('zakat-2', 'sawm-1')),
        SecondaryNode('hadith-4', ('hajj-11', 'unknown-7')),
        SecondaryNode('hadith-5'),
    ]
    return categories, primaries, secondaries


def main() -> None:
    categories, primaries, secondaries = build_scene()
    for mode in ('rings', 'spiral'):
        config = LayoutConfig(primary_mode=mode)
        result = compute_layout(categories, primaries, secondaries, config)
        print(f'== {mode} ==')
        print(print_layout(result), end='')
        problems = check_layout(result, config)
        print(f'Consistency problems: {len(problems)}')


if __name__ == '__main__':
    main()
