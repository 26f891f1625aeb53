"""Leverage Score factor calculators.

Each calculator reads one slice of a LeverageScoreInput and returns an
unweighted ScoreFactor with a value in [0, 100]; higher means more
negotiating power for the renter.
"""

from __future__ import annotations

import calendar

from ..models import LeverageParams, LeverageScoreInput, ScoreFactor
from .normalize import EPSILON, clamp, finite, ratio_to_pct, tier_points

OCCUPANCY_GAP = "Occupancy Gap"
SEASONALITY = "Seasonality"
RENT_POSITION = "Rent Positioning"
CONCESSION_PREVALENCE = "Concession Prevalence"
PROPERTY = "Property Characteristics"

NEUTRAL = 50.0


def occupancy_gap_factor(inp: LeverageScoreInput, params: LeverageParams) -> ScoreFactor:
    """A property emptier than its market gives the renter leverage.

    Non-increasing in occupancy_rate for a fixed market occupancy.
    """
    occ = clamp(max(0.0, finite(inp.occupancy_rate)))
    market = clamp(max(0.0, finite(inp.market_occupancy)))

    value = NEUTRAL
    if market > EPSILON:
        value += (market - occ) * params.gap_slope
        description = f"{occ:.1f}% occupied vs {market:.1f}% market"
    else:
        description = f"{occ:.1f}% occupied (no market figure)"
    if occ < params.low_occupancy:
        value += params.low_occupancy_bonus
    elif occ > params.full_occupancy:
        value -= params.full_occupancy_penalty
    return ScoreFactor(name=OCCUPANCY_GAP, value=clamp(value), description=description)


def month_of(inp: LeverageScoreInput) -> int | None:
    """Calendar month 1-12, or None when the input month is out of range."""
    month = finite(inp.current_month, 0.0)
    if month != int(month) or not 1 <= month <= 12:
        return None
    return int(month)


def seasonality_factor(inp: LeverageScoreInput, params: LeverageParams) -> ScoreFactor:
    """Static month lookup; winter favors renters, summer favors landlords."""
    month = month_of(inp)
    if month is None:
        return ScoreFactor(name=SEASONALITY, value=NEUTRAL, description="Unknown month")
    return ScoreFactor(
        name=SEASONALITY,
        value=clamp(params.seasonality.get(month, NEUTRAL)),
        description=calendar.month_name[month],
    )


def rent_position_factor(inp: LeverageScoreInput, params: LeverageParams) -> ScoreFactor:
    """Paying above market gives room to negotiate down."""
    ratio = finite(inp.rent_vs_market_pct, 1.0)
    if ratio <= EPSILON:
        return ScoreFactor(name=RENT_POSITION, value=NEUTRAL, description="No market comparison")
    pct = ratio_to_pct(ratio)
    return ScoreFactor(
        name=RENT_POSITION,
        value=clamp(NEUTRAL + (ratio - 1.0) * params.rent_position_slope),
        description=f"{pct:+.0f}% vs market",
    )


def concession_prevalence_factor(inp: LeverageScoreInput, params: LeverageParams) -> ScoreFactor:
    """Landlords already conceding in this market means more leverage."""
    prevalence = clamp(finite(inp.concession_prevalence))
    return ScoreFactor(
        name=CONCESSION_PREVALENCE,
        value=clamp(params.prevalence_base + prevalence * params.prevalence_slope),
        description=f"{prevalence:.0f}% of properties offering",
    )


def property_factor(inp: LeverageScoreInput, params: LeverageParams) -> ScoreFactor:
    """Older, larger, lower-rated properties concede more readily."""
    age = max(0.0, finite(inp.building_age))
    units = max(0.0, finite(inp.property_units))

    value = params.property_base
    if age < params.new_building_age:
        value -= params.new_building_penalty
    else:
        value += tier_points(age, params.age_tiers)

    rating_text = "unrated"
    if inp.google_rating is not None:
        rating = clamp(finite(inp.google_rating, 0.0), 0.0, 5.0)
        rating_text = f"{rating:.1f} stars"
        if rating >= params.top_rating:
            value -= params.top_rating_penalty
        else:
            value += tier_points(rating, params.rating_tiers, above=False)

    value += tier_points(units, params.unit_tiers)
    return ScoreFactor(
        name=PROPERTY,
        value=clamp(value),
        description=f"{age:.0f}yr old, {units:.0f} units, {rating_text}",
    )
