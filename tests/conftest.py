"""Pytest fixtures."""

import pytest

from rent_edge import api
from rent_edge.models import (
    ConcessionRecord,
    DealScoreInput,
    LeverageScoreInput,
    MarketSnapshot,
    OccupancyRecord,
    PropertyContext,
    PropertySnapshot,
    RentRecord,
)
from rent_edge.scoring import ScoringEngine


@pytest.fixture(autouse=True)
def fresh_engine():
    """Every test starts without an instantiated engine singleton."""
    api.configure(None)
    yield
    api.configure(None)


@pytest.fixture
def engine() -> ScoringEngine:
    return ScoringEngine()


@pytest.fixture
def neutral_deal_input() -> DealScoreInput:
    """Property priced, occupied and discounted exactly at market."""
    return DealScoreInput(
        current_rent=2000,
        market_rent=2000,
        avg_rent_per_sqft=2.0,
        unit_sqft=1000,
        occupancy_rate=90,
        market_occupancy=90,
        concession_value=0,
        market_concession_value=0,
        rent_trend_3mo=0,
        rent_trend_12mo=0,
        building_year=2015,
        amenity_count=5,
        reference_year=2026,
    )


@pytest.fixture
def strong_deal_input() -> DealScoreInput:
    """Below-market rent, soft market, generous concessions, good building."""
    return DealScoreInput(
        current_rent=1500,
        market_rent=2000,
        avg_rent_per_sqft=2.0,
        unit_sqft=1000,
        occupancy_rate=80,
        market_occupancy=92,
        concession_value=1000,
        market_concession_value=400,
        rent_trend_3mo=-3,
        rent_trend_12mo=-4,
        google_rating=4.5,
        building_year=2015,
        amenity_count=10,
        reference_year=2026,
    )


@pytest.fixture
def weak_deal_input() -> DealScoreInput:
    """Above-market rent in a full, rising market at a tired building."""
    return DealScoreInput(
        current_rent=2400,
        market_rent=2000,
        avg_rent_per_sqft=2.0,
        unit_sqft=1000,
        occupancy_rate=98,
        market_occupancy=90,
        concession_value=0,
        market_concession_value=500,
        rent_trend_3mo=4,
        rent_trend_12mo=6,
        google_rating=2.5,
        building_year=1970,
        amenity_count=1,
        reference_year=2026,
    )


@pytest.fixture
def strong_leverage_input() -> LeverageScoreInput:
    return LeverageScoreInput(
        occupancy_rate=82,
        market_occupancy=94,
        current_month=1,
        rent_vs_market_pct=1.12,
        concession_prevalence=60,
        building_age=45,
        google_rating=2.8,
        property_units=350,
    )


@pytest.fixture
def weak_leverage_input() -> LeverageScoreInput:
    return LeverageScoreInput(
        occupancy_rate=98,
        market_occupancy=92,
        current_month=7,
        rent_vs_market_pct=0.9,
        concession_prevalence=0,
        building_age=2,
        google_rating=4.8,
        property_units=50,
    )


@pytest.fixture
def property_context() -> PropertyContext:
    """Merged snapshot for one property with full market context."""
    return PropertyContext(
        property=PropertySnapshot(
            property_id="prop-1",
            name="Lakeview Flats",
            city="Austin",
            state="TX",
            average_unit_size=850,
            occupancy_rate=91,
            google_rating=3.2,
            year_built=1984,
            amenity_count=4,
            total_units=320,
        ),
        property_rent=RentRecord(average_rent=1575, rent_per_sqft=1.85, month="2026-09"),
        property_occupancy=OccupancyRecord(occupancy_rate=86.5, month="2026-09"),
        property_concession=ConcessionRecord(concession_amount=800, month="2026-09"),
        market_stats=MarketSnapshot(
            city="Austin",
            state="TX",
            avg_rent=1750,
            avg_rent_per_sqft=2.05,
            avg_occupancy=92.4,
            avg_concession_value=450,
            rent_trend_3mo=-1.8,
            rent_trend_12mo=-3.1,
            concession_prevalence=46,
            property_count=48,
        ),
    )
