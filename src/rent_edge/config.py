"""Configuration loader."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .models import (
    DealParams,
    DealWeights,
    LeverageParams,
    LeverageWeights,
    NarrativeCopy,
)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

_WEIGHT_TOLERANCE = 1e-6


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested mappings merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load packaged defaults, with an optional YAML override file merged on top."""
    cfg = _read_yaml(DEFAULTS_PATH)
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        cfg = _deep_merge(cfg, _read_yaml(path))
    return cfg


def _section(parent: dict[str, Any], key: str, name: str) -> dict[str, Any]:
    """Nested config mapping; an absent key is an empty mapping."""
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping, got {type(value).__name__}")
    return value


def _tiers(raw: Any, name: str) -> list[tuple[float, float]]:
    """Parse a list of [threshold, points] pairs."""
    if not isinstance(raw, list):
        raise ConfigError(f"{name} must be a list of [threshold, points] pairs")
    tiers: list[tuple[float, float]] = []
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ConfigError(f"{name} entry must be [threshold, points]: {item!r}")
        tiers.append((float(item[0]), float(item[1])))
    return tiers


def _check_weights(weights: dict[str, float], name: str) -> None:
    if any(w < 0 for w in weights.values()):
        raise ConfigError(f"{name} weights must be non-negative: {weights}")
    total = sum(weights.values())
    if abs(total - 1.0) > _WEIGHT_TOLERANCE:
        raise ConfigError(f"{name} weights must sum to 1.0, got {total:.4f}")


def get_deal_params(config: dict[str, Any]) -> DealParams:
    """Extract Deal Score parameters from config."""
    d = _section(config, "deal", "deal")
    w = _section(d, "weights", "deal.weights")
    weights = DealWeights(
        rent_vs_market=float(w.get("rent_vs_market", 0.35)),
        occupancy=float(w.get("occupancy", 0.20)),
        concession=float(w.get("concession", 0.20)),
        trend=float(w.get("trend", 0.15)),
        quality=float(w.get("quality", 0.10)),
    )
    _check_weights(weights.as_dict(), "deal")

    rent = _section(d, "rent", "deal.rent")
    occ = _section(d, "occupancy", "deal.occupancy")
    con = _section(d, "concession", "deal.concession")
    trend = _section(d, "trend", "deal.trend")
    q = _section(d, "quality", "deal.quality")
    return DealParams(
        weights=weights,
        rent_slope=float(rent.get("slope", 2.5)),
        sqft_blend=float(rent.get("sqft_blend", 0.30)),
        occupancy_slope=float(occ.get("slope", 2.5)),
        occupancy_fallback_tiers=_tiers(
            occ.get("fallback_tiers", [[80, 90], [85, 80], [90, 70], [95, 55]]),
            "deal.occupancy.fallback_tiers",
        ),
        occupancy_fallback_floor=float(occ.get("fallback_floor", 35)),
        concession_slope=float(con.get("slope", 25)),
        concession_max_ratio=float(con.get("max_ratio", 3.0)),
        concession_market_none_value=float(con.get("market_none_value", 85)),
        trend_short_share=float(trend.get("short_share", 0.60)),
        trend_short_slope=float(trend.get("short_slope", 10)),
        trend_long_slope=float(trend.get("long_slope", 5)),
        quality_neutral_rating=float(q.get("neutral_rating", 3.5)),
        quality_rating_slope=float(q.get("rating_slope", 20)),
        quality_age_grace_years=float(q.get("age_grace_years", 10)),
        quality_age_slope=float(q.get("age_slope", 0.5)),
        quality_age_max_penalty=float(q.get("age_max_penalty", 20)),
        quality_neutral_amenities=float(q.get("neutral_amenities", 5)),
        quality_amenity_slope=float(q.get("amenity_slope", 2)),
        quality_amenity_max_bonus=float(q.get("amenity_max_bonus", 10)),
        quality_dampener_range=float(q.get("dampener_range", 0.20)),
        summary_min_deviation=float(d.get("summary_min_deviation", 10)),
    )


def get_seasonality_table(config: dict[str, Any]) -> dict[int, float]:
    """Extract the month -> leverage table; all twelve months are required."""
    raw = _section(_section(config, "leverage", "leverage"), "seasonality", "leverage.seasonality")
    table = {int(month): float(value) for month, value in raw.items()}
    missing = [m for m in range(1, 13) if m not in table]
    if missing:
        raise ConfigError(f"leverage.seasonality is missing months: {missing}")
    return table


def get_leverage_params(config: dict[str, Any]) -> LeverageParams:
    """Extract Leverage Score parameters from config."""
    lv = _section(config, "leverage", "leverage")
    w = _section(lv, "weights", "leverage.weights")
    weights = LeverageWeights(
        occupancy_gap=float(w.get("occupancy_gap", 0.30)),
        seasonality=float(w.get("seasonality", 0.20)),
        rent_position=float(w.get("rent_position", 0.20)),
        concession_prevalence=float(w.get("concession_prevalence", 0.15)),
        property=float(w.get("property", 0.15)),
    )
    _check_weights(weights.as_dict(), "leverage")

    gap = _section(lv, "occupancy_gap", "leverage.occupancy_gap")
    prev = _section(lv, "concession_prevalence", "leverage.concession_prevalence")
    prop = _section(lv, "property", "leverage.property")
    timing = _section(lv, "timing", "leverage.timing")
    position = _section(lv, "rent_position", "leverage.rent_position")
    return LeverageParams(
        weights=weights,
        gap_slope=float(gap.get("slope", 4)),
        low_occupancy=float(gap.get("low_occupancy", 80)),
        low_occupancy_bonus=float(gap.get("low_occupancy_bonus", 10)),
        full_occupancy=float(gap.get("full_occupancy", 97)),
        full_occupancy_penalty=float(gap.get("full_occupancy_penalty", 20)),
        seasonality=get_seasonality_table(config),
        rent_position_slope=float(position.get("slope", 300)),
        prevalence_base=float(prev.get("base", 20)),
        prevalence_slope=float(prev.get("slope", 1.2)),
        property_base=float(prop.get("base", 40)),
        age_tiers=_tiers(prop.get("age_tiers", [[40, 25], [25, 15], [15, 5]]), "leverage.property.age_tiers"),
        new_building_age=float(prop.get("new_building_age", 5)),
        new_building_penalty=float(prop.get("new_building_penalty", 15)),
        rating_tiers=_tiers(
            prop.get("rating_tiers", [[3.0, 25], [3.5, 15], [4.0, 5]]), "leverage.property.rating_tiers"
        ),
        top_rating=float(prop.get("top_rating", 4.5)),
        top_rating_penalty=float(prop.get("top_rating_penalty", 10)),
        unit_tiers=_tiers(prop.get("unit_tiers", [[300, 10], [150, 5]]), "leverage.property.unit_tiers"),
        tip_threshold=float(lv.get("tip_threshold", 65)),
        max_tips=int(lv.get("max_tips", 3)),
        timing_strong=float(timing.get("strong", 75)),
        timing_weak=float(timing.get("weak", 30)),
    )


def get_narrative_copy(config: dict[str, Any]) -> NarrativeCopy:
    """Extract narrative copy from config."""
    n = _section(config, "narrative", "narrative")
    summaries = dict(_section(n, "deal_summaries", "narrative.deal_summaries"))
    balanced = str(summaries.pop("balanced", "Terms are close to market norms."))
    deal_summaries: dict[str, dict[str, str]] = {}
    for key in summaries:
        entry = _section(summaries, key, f"narrative.deal_summaries.{key}")
        deal_summaries[key] = {"high": str(entry.get("high", "")), "low": str(entry.get("low", ""))}

    raw = n.get("deal_recommendations") or []
    if not isinstance(raw, list):
        raise ConfigError("narrative.deal_recommendations must be a list of [threshold, text] pairs")
    recommendations: list[tuple[float, str]] = []
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ConfigError(f"narrative.deal_recommendations entry must be [threshold, text]: {item!r}")
        recommendations.append((float(item[0]), str(item[1])))
    if not recommendations:
        raise ConfigError("narrative.deal_recommendations must not be empty")
    # Highest threshold first so the first match wins
    recommendations.sort(key=lambda r: -r[0])

    return NarrativeCopy(
        deal_summaries=deal_summaries,
        balanced_summary=balanced,
        deal_recommendations=recommendations,
        negotiation_tips={
            k: str(v) for k, v in _section(n, "negotiation_tips", "narrative.negotiation_tips").items()
        },
        fallback_tip=str(n.get("fallback_tip", "")),
        best_timing={k: str(v) for k, v in _section(n, "best_timing", "narrative.best_timing").items()},
    )


def get_version(config: dict[str, Any]) -> str:
    """Config (ruleset) version reported by the engine."""
    return str(config.get("version", "0.0.0"))
