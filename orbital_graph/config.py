"""Configuration for the layout and ranking engines."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Literal, Mapping, Tuple, Type, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

PrimaryMode = Literal["rings", "spiral"]
AggregatePolicy = Literal["centroid", "weighted", "nearest"]
RecencyDecay = Literal["exponential", "linear"]

FACTOR_NAMES: Tuple[str, ...] = (
    "text_relevance",
    "edge_confidence",
    "category_importance",
    "verification",
    "centrality",
    "engagement",
    "recency",
)

DEFAULT_CATEGORY_IMPORTANCE: Dict[str, float] = {
    "shahada": 1.00,
    "salah": 0.95,
    "zakat": 0.90,
    "sawm": 0.85,
    "hajj": 0.80,
    "general": 0.70,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _from_mapping(cls: Type[T], data: Mapping[str, Any]) -> T:
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"unknown {cls.__name__} option(s): {', '.join(unknown)}")
    return cls(**dict(data))


@dataclass
class LayoutConfig:
    """Knobs for ring allocation and node placement."""

    primary_mode: PrimaryMode = "rings"
    first_ring_radius: float = 30.0
    ring_spacing: float = 20.0
    band_half_width: float = 5.0
    min_arc_spacing: float = 5.0
    expand_rings: bool = True
    column_clearance: float = 5.0
    column_height: float = 35.0
    ring_wave_amplitude: float = 0.0
    ring_wave_frequency: float = 0.18
    spiral_turns: float = 3.5
    spiral_inner_radius: float = 22.0
    spiral_outer_radius: float = 57.0
    spiral_height_variation: float = 10.0
    spiral_wave_frequency: float = 0.18
    moon_radius: float = 2.5
    moon_lift: float = 0.0
    orbit_tolerance: float = 1e-6
    aggregate: AggregatePolicy = "centroid"
    fallback_radius: float = 70.0
    fallback_gap: float = 10.0
    fallback_height_variation: float = 3.0
    fallback_wave_frequency: float = 0.5
    min_separation: float = 1e-3

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        return _from_mapping(cls, data)


@dataclass
class RankingWeights:
    text_relevance: float = 0.25
    edge_confidence: float = 0.20
    category_importance: float = 0.15
    verification: float = 0.15
    centrality: float = 0.10
    engagement: float = 0.10
    recency: float = 0.05

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in FACTOR_NAMES)

    def check(self) -> None:
        values = self.as_tuple()
        for name, value in zip(FACTOR_NAMES, values):
            if not _is_number(value) or value < 0.0:
                raise ConfigurationError(f"weight {name} must be a non-negative finite number, got {value!r}")
        total = math.fsum(values)
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ConfigurationError(f"ranking weights must sum to 1.0, got {total:.6f}")


@dataclass
class RankingConfig:
    """Knobs for factor extraction and composite scoring."""

    weights: RankingWeights = field(default_factory=RankingWeights)
    category_importance: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_IMPORTANCE)
    )
    default_importance: float = 0.5
    verification_levels: Dict[str, float] = field(
        default_factory=lambda: {"verified": 1.0, "pending": 0.5, "unverified": 0.0}
    )
    centrality_cap: float = 20.0
    views_cap: float = 1000.0
    recency_decay: RecencyDecay = "exponential"
    recency_half_life_days: float = 365.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RankingConfig":
        payload = dict(data)
        weights = payload.pop("weights", None)
        config = _from_mapping(cls, payload)
        if weights is not None:
            config.weights = _from_mapping(RankingWeights, weights)
        return config

    def check(self) -> None:
        if not isinstance(self.weights, RankingWeights):
            raise ConfigurationError(f"weights must be RankingWeights, got {type(self.weights).__name__}")
        self.weights.check()
        for name in ("centrality_cap", "views_cap", "recency_half_life_days"):
            value = getattr(self, name)
            if not _is_number(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
        if not _is_number(self.default_importance) or not 0.0 <= self.default_importance <= 1.0:
            raise ConfigurationError(f"default_importance must lie in [0, 1], got {self.default_importance!r}")
        if self.recency_decay not in ("exponential", "linear"):
            raise ConfigurationError(f"recency_decay must be exponential or linear, got {self.recency_decay!r}")
        for status, level in self.verification_levels.items():
            if not _is_number(level) or not 0.0 <= level <= 1.0:
                raise ConfigurationError(f"verification level for {status!r} must lie in [0, 1]")
        for category, importance in self.category_importance.items():
            if not _is_number(importance) or not 0.0 <= importance <= 1.0:
                raise ConfigurationError(f"importance for {category!r} must lie in [0, 1]", category)


_LAYOUT_CONFIG = LayoutConfig()
_RANKING_CONFIG = RankingConfig()


def get_layout_config() -> LayoutConfig:
    return copy.deepcopy(_LAYOUT_CONFIG)


def set_layout_config(config: LayoutConfig) -> None:
    global _LAYOUT_CONFIG
    _LAYOUT_CONFIG = copy.deepcopy(config)


def get_ranking_config() -> RankingConfig:
    return copy.deepcopy(_RANKING_CONFIG)


def set_ranking_config(config: RankingConfig) -> None:
    config.check()
    global _RANKING_CONFIG
    _RANKING_CONFIG = copy.deepcopy(config)


__all__ = [
    "FACTOR_NAMES",
    "DEFAULT_CATEGORY_IMPORTANCE",
    "LayoutConfig",
    "RankingWeights",
    "RankingConfig",
    "get_layout_config",
    "set_layout_config",
    "get_ranking_config",
    "set_ranking_config",
]
