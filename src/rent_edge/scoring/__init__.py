"""Deal and Leverage scoring engine."""

from .engine import ScoringEngine
from .narrative import deal_label, leverage_label
from .normalize import age_from_year, clamp, ratio_to_pct, safe_ratio

__all__ = [
    "ScoringEngine",
    "deal_label",
    "leverage_label",
    "age_from_year",
    "clamp",
    "ratio_to_pct",
    "safe_ratio",
]
