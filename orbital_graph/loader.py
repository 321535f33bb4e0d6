"""Build records from JSON documents and edge files.

Scene documents use the field names of the layout interface::

    {"categories": [{"id": "salah", "memberCount": 19, "placementPolicy": "ring"}],
     "primaries": [{"id": "s-1", "categoryId": "salah", "ordinalInCategory": 0, "globalOrdinal": 0}],
     "secondaries": [{"id": "h-1", "referencedPrimaryIds": ["s-1"]}]}

Edge files are either ``.json`` (one object or an array of objects) or
``.jsonl`` (one object per line).  A directory is read file by file in name
order.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidRecordError, RejectedRecord
from .model import Category, Edge, Engagement, PrimaryNode, SecondaryNode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
EDGE_SUFFIXES = (".json", ".jsonl")


def _field(data: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in data:
            return data[name]
    return default


def category_from_dict(data: Mapping[str, Any]) -> Category:
    member_count = _field(data, "memberCount", "member_count")
    radius = _field(data, "radius")
    importance = _field(data, "importance", "weight")
    return Category(
        id=str(data["id"]),
        policy=_field(data, "placementPolicy", "policy", default="ring"),
        member_count=int(member_count) if member_count is not None else None,
        importance=float(importance) if importance is not None else None,
        radius=float(radius) if radius is not None else None,
        elevation=float(_field(data, "elevation", default=0.0)),
    )


def primary_from_dict(data: Mapping[str, Any]) -> PrimaryNode:
    size = _field(data, "size")
    return PrimaryNode(
        id=str(data["id"]),
        category_id=str(_field(data, "categoryId", "category_id")),
        ordinal=int(_field(data, "ordinalInCategory", "ordinal")),
        global_ordinal=int(_field(data, "globalOrdinal", "global_ordinal", default=0)),
        size=float(size) if size is not None else None,
    )


def secondary_from_dict(data: Mapping[str, Any]) -> SecondaryNode:
    refs = _field(data, "referencedPrimaryIds", "references", default=[]) or []
    category = _field(data, "categoryId", "category_id")
    return SecondaryNode(
        id=str(data["id"]),
        references=tuple(str(ref) for ref in refs),
        category_id=str(category) if category is not None else None,
    )


def parse_scene(
    data: Mapping[str, Any],
) -> Tuple[List[Category], List[PrimaryNode], List[SecondaryNode]]:
    categories = [category_from_dict(item) for item in data.get("categories", [])]
    primaries = [primary_from_dict(item) for item in data.get("primaries", [])]
    secondaries = [secondary_from_dict(item) for item in data.get("secondaries", [])]
    logger.info(
        "Parsed scene: %d categories, %d primaries, %d secondaries",
        len(categories),
        len(primaries),
        len(secondaries),
    )
    return categories, primaries, secondaries


def load_scene(path: PathLike) -> Tuple[List[Category], List[PrimaryNode], List[SecondaryNode]]:
    with open(path, encoding="utf-8") as fin:
        return parse_scene(json.load(fin))


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        stamp = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        stamp = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported timestamp {value!r}")
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


def _number(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)


def _tier(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"tier must be 1, 2 or 3, got {value!r}")
    if isinstance(value, str) and value.strip() in ("1", "2", "3"):
        return int(value.strip())
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"tier must be 1, 2 or 3, got {value!r}")


def edge_from_dict(data: Mapping[str, Any]) -> Edge:
    """Build an :class:`Edge`; malformed fields raise :class:`InvalidRecordError`."""

    record_id = str(data.get("id", "<missing>"))
    try:
        engagement_data = data.get("engagement") or {}
        engagement = Engagement(
            views=_number(engagement_data.get("views")),
            helpful=_number(engagement_data.get("helpful")),
            not_helpful=_number(_field(engagement_data, "notHelpful", "not_helpful")),
            featured=bool(_field(engagement_data, "featured", default=data.get("featured", False))),
        )
        texts = data.get("texts") or {}
        created = _field(data, "createdAt", "created_at")
        return Edge(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            category=str(data["category"]),
            tier=_tier(data["tier"]),
            weight=_number(data["weight"]),
            verification=str(_field(data, "verificationStatus", "verification")),
            updated_at=parse_timestamp(_field(data, "updatedAt", "updated_at")),
            centrality=_number(data.get("centrality")),
            engagement=engagement,
            texts=tuple((str(lang), str(text)) for lang, text in sorted(texts.items())),
            themes=tuple(str(theme) for theme in data.get("themes") or ()),
            created_at=parse_timestamp(created) if created is not None else None,
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidRecordError(record_id, f"cannot build edge: {exc}") from exc


def _documents(path: Path) -> List[Tuple[str, Any]]:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        return [
            (f"{path.name}:{lineno}", line)
            for lineno, line in enumerate(text.splitlines(), start=1)
            if line.strip()
        ]
    return [(path.name, text)]


def _edge_files(path: Path) -> List[Path]:
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.suffix in EDGE_SUFFIXES)
    return [path]


def load_edges(path: PathLike) -> Tuple[List[Edge], List[RejectedRecord]]:
    """Read every edge under ``path``; unreadable records are returned as rejections."""

    edges: List[Edge] = []
    rejected: List[RejectedRecord] = []
    for file_path in _edge_files(Path(path)):
        try:
            documents = _documents(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable edge file %s: %s", file_path, exc)
            rejected.append(RejectedRecord(file_path.name, f"unreadable file: {exc}"))
            continue
        for origin, raw in documents:
            try:
                payload = json.loads(raw)
            except json.JSONDecodeError as exc:
                logger.warning("Skipping unparsable record at %s: %s", origin, exc)
                rejected.append(RejectedRecord(origin, f"invalid JSON: {exc.msg}"))
                continue
            items: Sequence[Any] = payload if isinstance(payload, list) else [payload]
            for item in items:
                if not isinstance(item, dict):
                    rejected.append(RejectedRecord(origin, "edge record must be a JSON object"))
                    continue
                try:
                    edges.append(edge_from_dict(item))
                except InvalidRecordError as exc:
                    rejected.append(RejectedRecord.from_error(exc))
    logger.info("Loaded %d edge(s) from %s (%d rejected)", len(edges), path, len(rejected))
    return edges, rejected


def load_config_document(path: Optional[PathLike]) -> Dict[str, Any]:
    if path is None:
        return {}
    with open(path, encoding="utf-8") as fin:
        data = json.load(fin)
    if not isinstance(data, dict):
        raise ValueError(f"configuration document {path} must be a JSON object")
    return data


__all__ = [
    "EDGE_SUFFIXES",
    "category_from_dict",
    "primary_from_dict",
    "secondary_from_dict",
    "parse_scene",
    "load_scene",
    "parse_timestamp",
    "edge_from_dict",
    "load_edges",
    "load_config_document",
]
