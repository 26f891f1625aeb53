"""Tests for the Deal Score engine."""

import asyncio
import math
from dataclasses import replace

import pytest

from rent_edge import calculate_deal_score
from rent_edge.models import DealScoreInput, ScoreGrade
from rent_edge.scoring import ScoringEngine, deal_label


class TestDealFactors:
    """Tests for individual deal factors."""

    def test_five_named_factors(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(neutral_deal_input)
        assert [f.name for f in result.factors] == [
            "Rent vs Market",
            "Occupancy Differential",
            "Concession Value",
            "Rent Trend",
            "Quality Modifier",
        ]
        assert all(f.description for f in result.factors)

    def test_weights_sum_to_one(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(neutral_deal_input)
        assert math.isclose(sum(f.weight for f in result.factors), 1.0)
        rent = result.factors[0]
        assert rent.weight == 0.35
        assert math.isclose(rent.contribution, rent.value * rent.weight, abs_tol=0.01)

    def test_below_market_rent_raises_rent_factor(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        cheaper = replace(neutral_deal_input, current_rent=1800)
        pricier = replace(neutral_deal_input, current_rent=2200)
        assert engine.score_deal(cheaper).factors[0].value > 50
        assert engine.score_deal(pricier).factors[0].value < 50

    def test_far_below_market_caps_at_100(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(replace(neutral_deal_input, current_rent=500))
        assert result.factors[0].value == 100

    def test_market_rent_zero_is_neutral(self, engine: ScoringEngine) -> None:
        inp = DealScoreInput(current_rent=1800, market_rent=0, occupancy_rate=90, reference_year=2026)
        result = engine.score_deal(inp)
        assert result.factors[0].value == 50
        assert result.factors[0].description == "No market rent available"
        assert math.isfinite(result.score)

    def test_market_rent_zero_uses_per_sqft_when_known(self, engine: ScoringEngine) -> None:
        inp = DealScoreInput(
            current_rent=1600, market_rent=0, avg_rent_per_sqft=2.0, unit_sqft=1000, reference_year=2026
        )
        result = engine.score_deal(inp)
        # $1.60/sqft vs $2.00/sqft is 20% below market
        assert result.factors[0].value == 100
        assert "/sqft" in result.factors[0].description

    def test_occupancy_below_market_raises_factor(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(replace(neutral_deal_input, occupancy_rate=82))
        assert result.factors[1].value == 70.0

    def test_occupancy_fallback_tiers_without_market(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        low = engine.score_deal(replace(neutral_deal_input, occupancy_rate=78, market_occupancy=0))
        full = engine.score_deal(replace(neutral_deal_input, occupancy_rate=97, market_occupancy=0))
        assert low.factors[1].value == 90
        assert full.factors[1].value == 35

    def test_concession_vs_market(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        richer = engine.score_deal(replace(neutral_deal_input, concession_value=1000, market_concession_value=500))
        none_here = engine.score_deal(replace(neutral_deal_input, concession_value=0, market_concession_value=500))
        market_none = engine.score_deal(replace(neutral_deal_input, concession_value=300, market_concession_value=0))
        assert richer.factors[2].value == 75
        assert none_here.factors[2].value == 25
        assert market_none.factors[2].value == 85

    def test_softening_trend_raises_factor(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        soft = engine.score_deal(replace(neutral_deal_input, rent_trend_3mo=-2, rent_trend_12mo=-2))
        hot = engine.score_deal(replace(neutral_deal_input, rent_trend_3mo=2, rent_trend_12mo=2))
        assert soft.factors[3].value > 50 > hot.factors[3].value

    def test_short_trend_weighs_more_than_long(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        short_drop = engine.score_deal(replace(neutral_deal_input, rent_trend_3mo=-2))
        long_drop = engine.score_deal(replace(neutral_deal_input, rent_trend_12mo=-2))
        assert short_drop.factors[3].value > long_drop.factors[3].value


class TestDealScore:
    """Tests for the aggregate Deal Score and narrative."""

    def test_neutral_input_scores_near_50(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(neutral_deal_input)
        assert 45 <= result.score <= 55

    def test_neutral_without_reference_year(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(replace(neutral_deal_input, reference_year=None))
        assert 45 <= result.score <= 55

    def test_neutral_summary_is_balanced(self, engine: ScoringEngine, neutral_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(neutral_deal_input)
        assert result.summary == engine.copy.balanced_summary

    def test_strong_deal(self, engine: ScoringEngine, strong_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(strong_deal_input)
        assert result.score == pytest.approx(93.0, abs=0.1)
        assert result.grade == ScoreGrade.EXCELLENT
        assert result.recommendation.startswith("Excellent deal")
        assert result.summary == "Rent is well below comparable properties in this market."
        assert deal_label(result.score) == "Great Deal"

    def test_weak_deal(self, engine: ScoringEngine, weak_deal_input: DealScoreInput) -> None:
        result = engine.score_deal(weak_deal_input)
        assert result.score < 20
        assert result.grade == ScoreGrade.VERY_POOR
        assert result.recommendation.startswith("Below average deal")
        assert result.summary == "Rent is priced above comparable properties in this market."
        assert deal_label(result.score) == "Below Avg"

    def test_quality_dampens_same_numeric_deal(self, engine: ScoringEngine, strong_deal_input: DealScoreInput) -> None:
        good_building = engine.score_deal(replace(strong_deal_input, google_rating=5.0))
        poor_building = engine.score_deal(replace(strong_deal_input, google_rating=2.0))
        # The non-quality factors are identical
        assert good_building.factors[:4] == poor_building.factors[:4]
        assert good_building.score > poor_building.score

    @pytest.mark.parametrize(
        "score,prefix",
        [(85, "Excellent"), (70, "Good"), (55, "Fair"), (30, "Below average")],
    )
    def test_recommendation_buckets(self, engine: ScoringEngine, score: float, prefix: str) -> None:
        from rent_edge.scoring.narrative import deal_recommendation

        assert deal_recommendation(score, engine.copy).startswith(prefix)

    def test_deterministic(self, engine: ScoringEngine, strong_deal_input: DealScoreInput) -> None:
        first = engine.score_deal(strong_deal_input).to_dict()
        second = engine.score_deal(strong_deal_input).to_dict()
        assert first == second

    def test_input_not_mutated(self, engine: ScoringEngine, strong_deal_input: DealScoreInput) -> None:
        before = strong_deal_input.to_dict()
        engine.score_deal(strong_deal_input)
        assert strong_deal_input.to_dict() == before

    @pytest.mark.parametrize(
        "overrides",
        [
            {"current_rent": 0, "market_rent": 0},
            {"current_rent": 1e9, "market_rent": 1},
            {"current_rent": 1, "market_rent": 1e9, "occupancy_rate": 0, "market_occupancy": 100},
            {"unit_sqft": -500, "avg_rent_per_sqft": -3, "amenity_count": -4},
            {"rent_trend_3mo": -80, "rent_trend_12mo": 500},
            {"google_rating": 11, "building_year": 3000},
            {"google_rating": math.nan, "concession_value": math.inf},
            {"occupancy_rate": 250, "market_occupancy": -10, "market_concession_value": 1e-15},
            {"reference_year": math.nan, "building_year": 1990},
        ],
    )
    def test_bounded_for_extreme_inputs(
        self, engine: ScoringEngine, neutral_deal_input: DealScoreInput, overrides: dict
    ) -> None:
        result = engine.score_deal(replace(neutral_deal_input, **overrides))
        assert 0 <= result.score <= 100
        assert len(result.factors) == 5
        for f in result.factors:
            assert 0 <= f.value <= 100
            assert math.isfinite(f.contribution)


class TestDealInput:
    def test_from_dict_ignores_unknown_and_none(self) -> None:
        inp = DealScoreInput.from_dict({
            "current_rent": "1500",
            "market_rent": 1700,
            "google_rating": None,
            "building_year": 1999.0,
            "grade": "ignored",
        })
        assert inp.current_rent == 1500.0
        assert inp.google_rating is None
        assert inp.building_year == 1999
        assert isinstance(inp.building_year, int)

    @pytest.mark.parametrize(
        "raw",
        [
            {"current_rent": 2000, "market_rent": 2000, "building_year": math.nan},
            {"current_rent": 2000, "market_rent": 2000, "amenity_count": math.inf},
            {"current_rent": 2000, "market_rent": 2000, "reference_year": -math.inf, "building_year": 1990},
            {"current_rent": math.nan, "market_rent": math.inf, "occupancy_rate": math.nan},
        ],
    )
    def test_non_finite_dict_values_are_scored(self, raw: dict) -> None:
        result = asyncio.run(calculate_deal_score(raw))
        assert 0 <= result.score <= 100
        assert all(0 <= f.value <= 100 for f in result.factors)

    def test_non_finite_int_field_keeps_default(self) -> None:
        inp = DealScoreInput.from_dict({"building_year": math.nan, "amenity_count": math.inf, "reference_year": math.nan})
        assert inp.building_year == 0
        assert inp.amenity_count == 0
        assert inp.reference_year is None
