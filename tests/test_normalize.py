"""Tests for normalization primitives."""

import math

from rent_edge.scoring.normalize import (
    age_from_year,
    clamp,
    finite,
    ratio_to_pct,
    safe_ratio,
    tier_points,
)


class TestSafeRatio:
    """Tests for zero-guarded division."""

    def test_regular_division(self) -> None:
        assert safe_ratio(3, 2, 1.0) == 1.5

    def test_zero_denominator_returns_fallback(self) -> None:
        assert safe_ratio(2000, 0, 1.0) == 1.0
        assert safe_ratio(2000, 1e-12, 0.0) == 0.0

    def test_non_finite_operands_return_fallback(self) -> None:
        assert safe_ratio(math.nan, 2, 1.0) == 1.0
        assert safe_ratio(5, math.inf, 1.0) == 1.0
        assert safe_ratio(None, 2, 0.5) == 0.5


class TestClamp:
    """Tests for bounding to [0, 100]."""

    def test_bounds(self) -> None:
        assert clamp(-5) == 0
        assert clamp(150) == 100
        assert clamp(42.5) == 42.5

    def test_custom_range(self) -> None:
        assert clamp(7, 0, 5) == 5
        assert clamp(-7, -10, 10) == -7

    def test_non_finite_maps_to_midpoint(self) -> None:
        assert clamp(math.nan) == 50
        assert clamp(math.inf) == 50


class TestHelpers:
    def test_ratio_to_pct(self) -> None:
        assert math.isclose(ratio_to_pct(1.05), 5.0)
        assert math.isclose(ratio_to_pct(0.9), -10.0)
        assert ratio_to_pct(1.0) == 0.0

    def test_age_from_year(self) -> None:
        assert age_from_year(2000, 2026) == 26
        assert age_from_year(2030, 2026) == 0
        assert age_from_year(0, 2026) == 0

    def test_finite(self) -> None:
        assert finite(None, 3.0) == 3.0
        assert finite("abc", 1.0) == 1.0
        assert finite(-math.inf) == 0.0
        assert finite(4) == 4.0

    def test_tier_points_above(self) -> None:
        tiers = [(40, 25), (25, 15), (15, 5)]
        assert tier_points(50, tiers) == 25
        assert tier_points(30, tiers) == 15
        assert tier_points(10, tiers) == 0

    def test_tier_points_below(self) -> None:
        tiers = [(3.0, 25), (3.5, 15), (4.0, 5)]
        assert tier_points(2.5, tiers, above=False) == 25
        assert tier_points(3.7, tiers, above=False) == 5
        assert tier_points(4.2, tiers, above=False) == 0
