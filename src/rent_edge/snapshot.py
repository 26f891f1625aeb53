"""Flatten a merged property/market context into scoring inputs.

Call sites skip scoring when the snapshot carries no meaningful signal, so a
neutral 50 is never presented as a real score.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from .api import calculate_deal_score, calculate_leverage_score
from .errors import EngineUnavailable
from .models import (
    DealScoreInput,
    LeverageScoreInput,
    PropertyContext,
    PropertyScores,
)
from .scoring.normalize import age_from_year, safe_ratio

logger = logging.getLogger(__name__)


def build_deal_input(ctx: PropertyContext, today: date | None = None) -> DealScoreInput:
    """DealScoreInput from a property context; missing records count as zero."""
    today = today or date.today()
    prop = ctx.property
    rent = ctx.property_rent
    occ = ctx.property_occupancy
    con = ctx.property_concession
    market = ctx.market_stats

    current_rent = rent.average_rent if rent else 0.0
    if market is not None:
        market_rent = market.avg_rent
        avg_rent_per_sqft = market.avg_rent_per_sqft
    else:
        market_rent = current_rent
        avg_rent_per_sqft = rent.rent_per_sqft if rent else 0.0

    return DealScoreInput(
        current_rent=current_rent,
        market_rent=market_rent,
        avg_rent_per_sqft=avg_rent_per_sqft,
        unit_sqft=prop.average_unit_size or 0.0,
        occupancy_rate=occ.occupancy_rate if occ else prop.occupancy_rate,
        market_occupancy=market.avg_occupancy if market else 0.0,
        concession_value=con.concession_amount if con else 0.0,
        market_concession_value=market.avg_concession_value if market else 0.0,
        rent_trend_3mo=market.rent_trend_3mo if market else 0.0,
        rent_trend_12mo=market.rent_trend_12mo if market else 0.0,
        google_rating=prop.google_rating,
        building_year=prop.year_built,
        amenity_count=prop.amenity_count,
        reference_year=today.year,
    )


def build_leverage_input(ctx: PropertyContext, today: date | None = None) -> LeverageScoreInput:
    """LeverageScoreInput from a property context as of ``today``."""
    today = today or date.today()
    prop = ctx.property
    rent = ctx.property_rent
    occ = ctx.property_occupancy
    market = ctx.market_stats

    current_rent = rent.average_rent if rent else 0.0
    market_rent = market.avg_rent if market else 0.0

    return LeverageScoreInput(
        occupancy_rate=occ.occupancy_rate if occ else prop.occupancy_rate,
        market_occupancy=market.avg_occupancy if market else 0.0,
        current_month=today.month,
        rent_vs_market_pct=safe_ratio(current_rent, market_rent, 1.0) if current_rent > 0 else 1.0,
        concession_prevalence=market.concession_prevalence if market else 0.0,
        building_age=age_from_year(prop.year_built, today.year),
        google_rating=prop.google_rating,
        property_units=prop.total_units,
    )


def should_score_deal(inp: DealScoreInput) -> bool:
    """Only score when there is some rent signal."""
    return inp.current_rent > 0 or inp.market_rent > 0


def should_score_leverage(inp: LeverageScoreInput) -> bool:
    """Only score when there is some occupancy signal."""
    return inp.occupancy_rate > 0 or inp.market_occupancy > 0


def is_scorable(ctx: PropertyContext, today: date | None = None) -> bool:
    """True when at least one of the two scores would be computed."""
    return should_score_deal(build_deal_input(ctx, today)) or should_score_leverage(build_leverage_input(ctx, today))


async def score_property(ctx: PropertyContext, today: date | None = None) -> PropertyScores:
    """Both scores for one property; a score is None when skipped or unavailable."""
    result = PropertyScores(property=ctx.property)
    deal_input = build_deal_input(ctx, today)
    leverage_input = build_leverage_input(ctx, today)
    try:
        if should_score_deal(deal_input):
            result.deal = await calculate_deal_score(deal_input)
        if should_score_leverage(leverage_input):
            result.leverage = await calculate_leverage_score(leverage_input)
    except EngineUnavailable as e:
        logger.warning("Scores unavailable for %s: %s", ctx.property.property_id, e)
    return result


async def score_properties(contexts: list[PropertyContext], today: date | None = None) -> list[PropertyScores]:
    """Score many properties concurrently, preserving input order."""
    return list(await asyncio.gather(*(score_property(ctx, today) for ctx in contexts)))
