"""Rent Edge: market Deal Score and renter Leverage Score engine."""

from .api import calculate_deal_score, calculate_leverage_score, configure, reset_engine
from .errors import ConfigError, EngineUnavailable
from .models import (
    DealScoreInput,
    DealScoreResult,
    LeverageScoreInput,
    LeverageScoreResult,
    ScoreFactor,
    ScoreGrade,
)

__all__ = [
    "calculate_deal_score",
    "calculate_leverage_score",
    "configure",
    "reset_engine",
    "ConfigError",
    "EngineUnavailable",
    "DealScoreInput",
    "DealScoreResult",
    "LeverageScoreInput",
    "LeverageScoreResult",
    "ScoreFactor",
    "ScoreGrade",
]
