"""Deal Score factor calculators.

Each calculator reads one slice of a DealScoreInput and returns an unweighted
ScoreFactor with a value in [0, 100]; 50 is neutral (at market).
"""

from __future__ import annotations

from datetime import date

from ..models import DealParams, DealScoreInput, ScoreFactor
from .normalize import EPSILON, age_from_year, clamp, finite, ratio_to_pct, safe_ratio

RENT_VS_MARKET = "Rent vs Market"
OCCUPANCY = "Occupancy Differential"
CONCESSION = "Concession Value"
TREND = "Rent Trend"
QUALITY = "Quality Modifier"


def _nonneg(x: float | None) -> float:
    return max(0.0, finite(x))


def _position_score(ratio: float, slope: float) -> float:
    """50 at parity; paying less than the reference raises the score."""
    return clamp(50 - ratio_to_pct(ratio) * slope)


def rent_vs_market_factor(inp: DealScoreInput, params: DealParams) -> ScoreFactor:
    """Compare rent to market rent and, when known, to market rent per sqft."""
    current = _nonneg(inp.current_rent)
    market = _nonneg(inp.market_rent)
    per_sqft = _nonneg(inp.avg_rent_per_sqft)
    sqft = _nonneg(inp.unit_sqft)

    market_ratio = safe_ratio(current, market, 1.0)
    value = _position_score(market_ratio, params.rent_slope)

    has_market = market > EPSILON
    has_sqft = per_sqft > EPSILON and sqft > EPSILON and current > EPSILON
    if has_sqft:
        sqft_ratio = safe_ratio(current / sqft, per_sqft, 1.0)
        sqft_value = _position_score(sqft_ratio, params.rent_slope)
        if has_market:
            blend = clamp(params.sqft_blend, 0.0, 1.0)
            value = (1 - blend) * value + blend * sqft_value
        else:
            value = sqft_value

    if has_market:
        description = f"${current:,.0f} vs ${market:,.0f} market ({ratio_to_pct(market_ratio):+.1f}%)"
    elif has_sqft:
        description = f"${current / sqft:.2f}/sqft vs ${per_sqft:.2f}/sqft market"
    else:
        description = "No market rent available"
    return ScoreFactor(name=RENT_VS_MARKET, value=clamp(value), description=description)


def occupancy_factor(inp: DealScoreInput, params: DealParams) -> ScoreFactor:
    """Occupancy below the market signals more negotiable inventory."""
    occ = clamp(_nonneg(inp.occupancy_rate))
    market = clamp(_nonneg(inp.market_occupancy))

    if market > EPSILON:
        gap = market - occ
        value = 50 + gap * params.occupancy_slope
        description = f"{occ:.1f}% occupied vs {market:.1f}% market"
    elif occ > EPSILON:
        value = next(
            (points for threshold, points in params.occupancy_fallback_tiers if occ < threshold),
            params.occupancy_fallback_floor,
        )
        description = f"{occ:.1f}% occupied (no market figure)"
    else:
        value = 50.0
        description = "No occupancy data"
    return ScoreFactor(name=OCCUPANCY, value=clamp(value), description=description)


def concession_factor(inp: DealScoreInput, params: DealParams) -> ScoreFactor:
    """Concessions richer than the market average raise the factor."""
    con = _nonneg(inp.concession_value)
    market = _nonneg(inp.market_concession_value)

    if market > EPSILON:
        ratio = min(con / market, params.concession_max_ratio)
        value = 50 + (ratio - 1) * params.concession_slope
        description = f"${con:,.0f} vs ${market:,.0f} market average"
    elif con > EPSILON:
        value = params.concession_market_none_value
        description = f"${con:,.0f} offered; market offers none"
    else:
        value = 50.0
        description = "No concessions offered"
    return ScoreFactor(name=CONCESSION, value=clamp(value), description=description)


def trend_factor(inp: DealScoreInput, params: DealParams) -> ScoreFactor:
    """Softening rents raise the factor; the 3-month trend dominates."""
    short = finite(inp.rent_trend_3mo)
    long = finite(inp.rent_trend_12mo)
    share = clamp(params.trend_short_share, 0.0, 1.0)
    short_value = clamp(50 - short * params.trend_short_slope)
    long_value = clamp(50 - long * params.trend_long_slope)
    value = share * short_value + (1 - share) * long_value
    return ScoreFactor(
        name=TREND,
        value=clamp(value),
        description=f"3-mo {short:+.1f}%, 12-mo {long:+.1f}%",
    )


def reference_year(inp: DealScoreInput) -> int:
    """Year building age is measured against."""
    return int(finite(inp.reference_year, date.today().year))


def quality_factor(inp: DealScoreInput, params: DealParams) -> ScoreFactor:
    """Rating, building age and amenities folded into one quality reading."""
    if inp.google_rating is None:
        rating = params.quality_neutral_rating
        rating_text = "unrated"
    else:
        rating = clamp(finite(inp.google_rating, params.quality_neutral_rating), 0.0, 5.0)
        rating_text = f"{rating:.1f} stars"

    age = age_from_year(inp.building_year, reference_year(inp))
    age_penalty = min(
        params.quality_age_max_penalty,
        max(0.0, age - params.quality_age_grace_years) * params.quality_age_slope,
    )
    amenities = _nonneg(inp.amenity_count)
    amenity_bonus = clamp(
        (amenities - params.quality_neutral_amenities) * params.quality_amenity_slope,
        -params.quality_amenity_max_bonus,
        params.quality_amenity_max_bonus,
    )

    value = 50 + (rating - params.quality_neutral_rating) * params.quality_rating_slope - age_penalty + amenity_bonus
    return ScoreFactor(
        name=QUALITY,
        value=clamp(value),
        description=f"{rating_text}, {age:.0f}yr old, {amenities:.0f} amenities",
    )


def quality_dampener(quality_value: float, params: DealParams) -> float:
    """Multiplier applied to the weighted deal score; 1.0 at neutral quality."""
    return 1 + (clamp(quality_value) - 50) / 100 * params.quality_dampener_range
