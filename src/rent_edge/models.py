"""Data models for property/market snapshots, scoring inputs and results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


def _from_dict(cls, data: dict[str, Any]):
    """Build a numeric input dataclass from a plain dict (unknown keys ignored)."""
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data or data[f.name] is None:
            continue
        value = data[f.name]
        if f.type in ("int", "int | None"):
            number = float(value)
            # NaN/inf keep the field default
            if math.isfinite(number):
                kwargs[f.name] = int(number)
        else:
            kwargs[f.name] = float(value)
    return cls(**kwargs)


@dataclass
class PropertySnapshot:
    """Subject property fields consumed by the scoring engine."""

    property_id: str
    name: str = ""
    city: str = ""
    state: str = ""
    average_unit_size: float = 0.0
    occupancy_rate: float = 0.0
    google_rating: float | None = None
    year_built: int = 0
    amenity_count: int = 0
    total_units: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "property_id": self.property_id,
            "name": self.name,
            "city": self.city,
            "state": self.state,
            "average_unit_size": self.average_unit_size,
            "occupancy_rate": self.occupancy_rate,
            "google_rating": self.google_rating,
            "year_built": self.year_built,
            "amenity_count": self.amenity_count,
            "total_units": self.total_units,
        }


@dataclass
class MarketSnapshot:
    """Aggregate figures for the comparable market area."""

    city: str
    state: str
    avg_rent: float = 0.0
    avg_rent_per_sqft: float = 0.0
    avg_occupancy: float = 0.0
    avg_concession_value: float = 0.0
    rent_trend_3mo: float = 0.0
    rent_trend_12mo: float = 0.0
    # Percentage (0-100) of comparable properties offering a concession
    concession_prevalence: float = 0.0
    property_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "state": self.state,
            "avg_rent": self.avg_rent,
            "avg_rent_per_sqft": self.avg_rent_per_sqft,
            "avg_occupancy": self.avg_occupancy,
            "avg_concession_value": self.avg_concession_value,
            "rent_trend_3mo": self.rent_trend_3mo,
            "rent_trend_12mo": self.rent_trend_12mo,
            "concession_prevalence": self.concession_prevalence,
            "property_count": self.property_count,
        }


@dataclass
class RentRecord:
    """Latest monthly rent record for a property."""

    average_rent: float
    rent_per_sqft: float = 0.0
    month: str = ""


@dataclass
class OccupancyRecord:
    """Latest monthly occupancy record for a property."""

    occupancy_rate: float
    month: str = ""


@dataclass
class ConcessionRecord:
    """Latest monthly concession record for a property."""

    concession_amount: float
    month: str = ""


@dataclass
class PropertyContext:
    """Merged property + market snapshot returned by the snapshot query."""

    property: PropertySnapshot
    property_rent: RentRecord | None = None
    property_occupancy: OccupancyRecord | None = None
    property_concession: ConcessionRecord | None = None
    market_stats: MarketSnapshot | None = None


@dataclass(frozen=True)
class DealScoreInput:
    """Flattened inputs for the Deal Score. Trends may be negative."""

    current_rent: float = 0.0
    market_rent: float = 0.0
    avg_rent_per_sqft: float = 0.0
    unit_sqft: float = 0.0
    occupancy_rate: float = 0.0
    market_occupancy: float = 0.0
    concession_value: float = 0.0
    market_concession_value: float = 0.0
    rent_trend_3mo: float = 0.0
    rent_trend_12mo: float = 0.0
    google_rating: float | None = None
    building_year: int = 0
    amenity_count: int = 0
    # Year building age is measured against; current year when None
    reference_year: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DealScoreInput:
        return _from_dict(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class LeverageScoreInput:
    """Flattened inputs for the Leverage Score.

    ``rent_vs_market_pct`` is a ratio (1.0 = at market).
    ``concession_prevalence`` is a percentage 0-100.
    """

    occupancy_rate: float = 0.0
    market_occupancy: float = 0.0
    current_month: int = 1
    rent_vs_market_pct: float = 1.0
    concession_prevalence: float = 0.0
    building_age: float = 0.0
    google_rating: float | None = None
    property_units: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LeverageScoreInput:
        return _from_dict(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ScoreGrade(Enum):
    """Letter-style grade bands shared by both scores."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "VeryPoor"


@dataclass(frozen=True)
class ScoreFactor:
    """One named, bounded sub-score contributing to an aggregate score."""

    name: str
    value: float  # 0-100
    description: str
    weight: float = 0.0  # 0-1
    contribution: float = 0.0  # weight * value

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "weight": self.weight,
            "contribution": self.contribution,
            "description": self.description,
        }


@dataclass
class DealScoreResult:
    """Deal Score with its factor breakdown and narrative."""

    score: float
    grade: ScoreGrade
    factors: list[ScoreFactor]
    summary: str
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "grade": self.grade.value,
            "factors": [f.to_dict() for f in self.factors],
            "summary": self.summary,
            "recommendation": self.recommendation,
        }


@dataclass
class LeverageScoreResult:
    """Leverage Score with its factor breakdown, tips and timing hint."""

    score: float
    grade: ScoreGrade
    factors: list[ScoreFactor]
    negotiation_tips: list[str] = field(default_factory=list)
    best_timing: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "grade": self.grade.value,
            "factors": [f.to_dict() for f in self.factors],
            "negotiation_tips": self.negotiation_tips,
            "best_timing": self.best_timing,
        }


@dataclass
class PropertyScores:
    """Both scores for one stored property; either may be absent."""

    property: PropertySnapshot
    deal: DealScoreResult | None = None
    leverage: LeverageScoreResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "property": self.property.to_dict(),
            "deal": self.deal.to_dict() if self.deal else None,
            "leverage": self.leverage.to_dict() if self.leverage else None,
        }


@dataclass
class DealWeights:
    """Deal Score factor weights (must sum to 1.0)."""

    rent_vs_market: float
    occupancy: float
    concession: float
    trend: float
    quality: float

    def as_dict(self) -> dict[str, float]:
        return {
            "rent_vs_market": self.rent_vs_market,
            "occupancy": self.occupancy,
            "concession": self.concession,
            "trend": self.trend,
            "quality": self.quality,
        }


@dataclass
class DealParams:
    """Deal Score calculator parameters (from config)."""

    weights: DealWeights
    rent_slope: float
    sqft_blend: float
    occupancy_slope: float
    occupancy_fallback_tiers: list[tuple[float, float]]
    occupancy_fallback_floor: float
    concession_slope: float
    concession_max_ratio: float
    concession_market_none_value: float
    trend_short_share: float
    trend_short_slope: float
    trend_long_slope: float
    quality_neutral_rating: float
    quality_rating_slope: float
    quality_age_grace_years: float
    quality_age_slope: float
    quality_age_max_penalty: float
    quality_neutral_amenities: float
    quality_amenity_slope: float
    quality_amenity_max_bonus: float
    quality_dampener_range: float
    summary_min_deviation: float


@dataclass
class LeverageWeights:
    """Leverage Score factor weights (must sum to 1.0)."""

    occupancy_gap: float
    seasonality: float
    rent_position: float
    concession_prevalence: float
    property: float

    def as_dict(self) -> dict[str, float]:
        return {
            "occupancy_gap": self.occupancy_gap,
            "seasonality": self.seasonality,
            "rent_position": self.rent_position,
            "concession_prevalence": self.concession_prevalence,
            "property": self.property,
        }


@dataclass
class LeverageParams:
    """Leverage Score calculator parameters (from config)."""

    weights: LeverageWeights
    gap_slope: float
    low_occupancy: float
    low_occupancy_bonus: float
    full_occupancy: float
    full_occupancy_penalty: float
    seasonality: dict[int, float]
    rent_position_slope: float
    prevalence_base: float
    prevalence_slope: float
    property_base: float
    age_tiers: list[tuple[float, float]]
    new_building_age: float
    new_building_penalty: float
    rating_tiers: list[tuple[float, float]]
    top_rating: float
    top_rating_penalty: float
    unit_tiers: list[tuple[float, float]]
    tip_threshold: float
    max_tips: int
    timing_strong: float
    timing_weak: float


@dataclass
class NarrativeCopy:
    """Product copy for summaries, recommendations, tips and timing hints."""

    deal_summaries: dict[str, dict[str, str]]
    balanced_summary: str
    deal_recommendations: list[tuple[float, str]]
    negotiation_tips: dict[str, str]
    fallback_tip: str
    best_timing: dict[str, str]
