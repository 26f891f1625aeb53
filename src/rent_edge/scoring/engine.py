"""Deal and Leverage scoring engine."""

from __future__ import annotations

from typing import Any

from ..config import (
    get_deal_params,
    get_leverage_params,
    get_narrative_copy,
    get_version,
    load_config,
)
from ..models import (
    DealParams,
    DealScoreInput,
    DealScoreResult,
    LeverageParams,
    LeverageScoreInput,
    LeverageScoreResult,
    NarrativeCopy,
)
from . import deal, leverage, narrative
from .aggregate import aggregate, grade_for, weigh_factors


class ScoringEngine:
    """
    Stateless Deal Score / Leverage Score calculator.
    Parameters are fixed at construction; every call is a pure function of its input.
    """

    def __init__(
        self,
        deal_params: DealParams | None = None,
        leverage_params: LeverageParams | None = None,
        copy: NarrativeCopy | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        cfg = config or load_config()
        self.version = get_version(cfg)
        self.deal_params = deal_params or get_deal_params(cfg)
        self.leverage_params = leverage_params or get_leverage_params(cfg)
        self.copy = copy or get_narrative_copy(cfg)

    def health_check(self) -> bool:
        """Score a neutral input pair and confirm both results are well formed."""
        d = self.score_deal(DealScoreInput(current_rent=1000, market_rent=1000, reference_year=2000))
        lv = self.score_leverage(LeverageScoreInput(occupancy_rate=90, market_occupancy=90))
        return all(
            len(r.factors) == 5 and 0 <= r.score <= 100
            for r in (d, lv)
        )

    def score_deal(self, inp: DealScoreInput) -> DealScoreResult:
        """Deal Score: how favorable the rent is relative to the market."""
        p = self.deal_params
        factors = weigh_factors(
            {
                "rent_vs_market": deal.rent_vs_market_factor(inp, p),
                "occupancy": deal.occupancy_factor(inp, p),
                "concession": deal.concession_factor(inp, p),
                "trend": deal.trend_factor(inp, p),
                "quality": deal.quality_factor(inp, p),
            },
            p.weights.as_dict(),
        )
        dampener = deal.quality_dampener(factors["quality"].value, p)
        score = aggregate(factors, multiplier=dampener)

        return DealScoreResult(
            score=score,
            grade=grade_for(score),
            factors=list(factors.values()),
            summary=narrative.deal_summary(factors, self.copy, p.summary_min_deviation),
            recommendation=narrative.deal_recommendation(score, self.copy),
        )

    def score_leverage(self, inp: LeverageScoreInput) -> LeverageScoreResult:
        """Leverage Score: how much negotiating power the renter holds."""
        p = self.leverage_params
        factors = weigh_factors(
            {
                "occupancy_gap": leverage.occupancy_gap_factor(inp, p),
                "seasonality": leverage.seasonality_factor(inp, p),
                "rent_position": leverage.rent_position_factor(inp, p),
                "concession_prevalence": leverage.concession_prevalence_factor(inp, p),
                "property": leverage.property_factor(inp, p),
            },
            p.weights.as_dict(),
        )
        score = aggregate(factors)

        return LeverageScoreResult(
            score=score,
            grade=grade_for(score),
            factors=list(factors.values()),
            negotiation_tips=narrative.negotiation_tips(factors, p, self.copy),
            best_timing=narrative.best_timing(factors["seasonality"], p, self.copy),
        )
