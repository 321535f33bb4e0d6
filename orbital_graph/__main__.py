import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Optional, Sequence

from orbital_graph import (
    LayoutConfig,
    Pagination,
    Query,
    RankingConfig,
    SearchFilters,
    check_layout,
    compute_layout,
    load_config_document,
    load_edges,
    load_scene,
    parse_timestamp,
    print_layout,
    print_ranking,
    rank_edges,
)
from orbital_graph.model import SORT_FIELDS, SORT_ORDERS

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _run_layout(args: argparse.Namespace) -> int:
    document = load_config_document(args.config)
    config = LayoutConfig.from_mapping(document.get("layout", {}))
    if args.spiral:
        config.primary_mode = "spiral"

    logger.info("Loading scene from %s", args.path)
    categories, primaries, secondaries = load_scene(args.path)
    result = compute_layout(categories, primaries, secondaries, config)
    if not result.ok:
        logger.error("Layout failed: %s", result.error)
    if result.ok and args.check:
        result.warnings.extend(check_layout(result, config))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
    else:
        print(print_layout(result), end="")
    return 0 if result.ok else 1


def _run_rank(args: argparse.Namespace) -> int:
    document = load_config_document(args.config)
    config = RankingConfig.from_mapping(document.get("ranking", {}))

    edges, load_rejections = load_edges(args.path)
    for record in load_rejections:
        logger.warning("Skipped record %s: %s", record.record_id, record.message)

    query = Query(
        text=args.query,
        filters=SearchFilters(
            category=args.category,
            tier=args.tier,
            verification=args.verification,
            featured_only=args.featured_only,
            min_weight=args.min_weight,
            node=args.node,
        ),
        pagination=Pagination(limit=args.limit, offset=args.offset),
        sort_by=args.sort_by,
        sort_order=args.sort_order,
    )
    now: Optional[datetime] = parse_timestamp(args.now) if args.now else None
    result = rank_edges(edges, query, config, now=now)
    if not result.ok:
        logger.error("Search failed: %s", result.error)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, sort_keys=True, ensure_ascii=False))
    else:
        print(print_ranking(result, offset=args.offset), end="")
    return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Orbital layout and edge ranking")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--config",
        help="JSON document with optional 'layout' and 'ranking' sections",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON instead of text",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    layout = sub.add_parser("layout", help="Compute node positions for a scene document")
    layout.add_argument("path", help="Path to the scene JSON document")
    layout.add_argument(
        "--spiral",
        action="store_true",
        help="Place ring categories on the global spiral",
    )
    layout.add_argument(
        "--check",
        action="store_true",
        help="Append geometric consistency warnings",
    )
    layout.set_defaults(handler=_run_layout)

    rank = sub.add_parser("rank", help="Rank edges against a query")
    rank.add_argument("path", help="Edge file (.json/.jsonl) or directory of edge files")
    rank.add_argument("--query", default="", help="Free-text query (default: empty)")
    rank.add_argument("--category", help="Only edges of this category")
    rank.add_argument("--tier", type=int, help="Only edges of this tier (1-3)")
    rank.add_argument("--verification", help="Only edges with this verification status")
    rank.add_argument("--featured-only", action="store_true", help="Only featured edges")
    rank.add_argument("--min-weight", type=float, help="Only edges with at least this weight")
    rank.add_argument("--node", help="Only edges touching this node id")
    rank.add_argument("--limit", type=int, default=20, help="Page size (default: 20)")
    rank.add_argument("--offset", type=int, default=0, help="Page offset (default: 0)")
    rank.add_argument("--sort-by", choices=SORT_FIELDS, default="ranking", help="Result order key (default: ranking)")
    rank.add_argument("--sort-order", choices=SORT_ORDERS, default="desc", help="Result order direction (default: desc)")
    rank.add_argument("--now", help="Reference time for recency (ISO 8601, default: current time)")
    rank.set_defaults(handler=_run_rank)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    raise SystemExit(args.handler(args))


if __name__ == "__main__":
    main(sys.argv[1:])
