"""Weighted aggregation of factors into a single bounded score."""

from __future__ import annotations

from dataclasses import replace

from ..models import ScoreFactor, ScoreGrade
from .normalize import clamp

_GRADE_BANDS: list[tuple[float, ScoreGrade]] = [
    (90, ScoreGrade.EXCELLENT),
    (75, ScoreGrade.GOOD),
    (60, ScoreGrade.FAIR),
    (40, ScoreGrade.POOR),
]


def weigh_factors(
    factors: dict[str, ScoreFactor],
    weights: dict[str, float],
) -> dict[str, ScoreFactor]:
    """Attach weight and contribution to each factor, keeping key order."""
    weighted: dict[str, ScoreFactor] = {}
    for key, factor in factors.items():
        weight = weights[key]
        value = round(clamp(factor.value), 1)
        weighted[key] = replace(
            factor,
            value=value,
            weight=weight,
            contribution=round(value * weight, 2),
        )
    return weighted


def aggregate(factors: dict[str, ScoreFactor], multiplier: float = 1.0) -> float:
    """Sum of contributions times multiplier, clamped to [0, 100], one decimal."""
    total = sum(f.value * f.weight for f in factors.values())
    return round(clamp(total * multiplier), 1)


def grade_for(score: float) -> ScoreGrade:
    """Grade band for a 0-100 score."""
    for threshold, grade in _GRADE_BANDS:
        if score >= threshold:
            return grade
    return ScoreGrade.VERY_POOR
