"""DuckDB snapshot store: property records, monthly records and market stats."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import duckdb

from ..models import (
    ConcessionRecord,
    MarketSnapshot,
    OccupancyRecord,
    PropertyContext,
    PropertySnapshot,
    RentRecord,
)

STATE_ROW = "__STATE__"

_PROPERTY_COLS = [
    "property_id", "name", "city", "state", "average_unit_size", "occupancy_rate",
    "google_rating", "year_built", "amenity_count", "total_units",
]
_MARKET_COLS = [
    "city", "state", "avg_rent", "avg_rent_per_sqft", "avg_occupancy",
    "avg_concession_value", "rent_trend_3mo", "rent_trend_12mo",
    "concession_prevalence", "property_count",
]


class SnapshotStore:
    """
    DuckDB store answering the property + market context query.
    """

    def __init__(self, db_path: Path | str = "rent_edge.duckdb") -> None:
        self.db_path = Path(db_path)
        self._conn: duckdb.DuckDBPyConnection | None = None

    def _connect(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = duckdb.connect(str(self.db_path))
            self._init_schema()
        return self._conn

    def _init_schema(self) -> None:
        conn = self._conn
        conn.execute("""
            CREATE TABLE IF NOT EXISTS properties (
                property_id TEXT PRIMARY KEY,
                name TEXT,
                city TEXT,
                state TEXT,
                average_unit_size REAL,
                occupancy_rate REAL,
                google_rating REAL,
                year_built INTEGER,
                amenity_count INTEGER,
                total_units INTEGER
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rent_data (
                property_id TEXT,
                month TEXT,
                average_rent REAL,
                rent_per_sqft REAL,
                PRIMARY KEY (property_id, month)
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS occupancy_data (
                property_id TEXT,
                month TEXT,
                occupancy_rate REAL,
                PRIMARY KEY (property_id, month)
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS concession_data (
                property_id TEXT,
                month TEXT,
                concession_amount REAL,
                PRIMARY KEY (property_id, month)
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS market_stats (
                city TEXT,
                state TEXT,
                avg_rent REAL,
                avg_rent_per_sqft REAL,
                avg_occupancy REAL,
                avg_concession_value REAL,
                rent_trend_3mo REAL,
                rent_trend_12mo REAL,
                concession_prevalence REAL,
                property_count INTEGER,
                PRIMARY KEY (city, state)
            )
        """)

    def save_property(self, prop: PropertySnapshot) -> None:
        """Upsert a property record."""
        conn = self._connect()
        conn.execute(
            """
            INSERT OR REPLACE INTO properties
            (property_id, name, city, state, average_unit_size, occupancy_rate,
             google_rating, year_built, amenity_count, total_units)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                prop.property_id,
                prop.name,
                prop.city,
                prop.state,
                prop.average_unit_size,
                prop.occupancy_rate,
                prop.google_rating,
                prop.year_built,
                prop.amenity_count,
                prop.total_units,
            ],
        )

    def save_rent(self, property_id: str, record: RentRecord) -> None:
        conn = self._connect()
        conn.execute(
            "INSERT OR REPLACE INTO rent_data (property_id, month, average_rent, rent_per_sqft) VALUES (?, ?, ?, ?)",
            [property_id, record.month, record.average_rent, record.rent_per_sqft],
        )

    def save_occupancy(self, property_id: str, record: OccupancyRecord) -> None:
        conn = self._connect()
        conn.execute(
            "INSERT OR REPLACE INTO occupancy_data (property_id, month, occupancy_rate) VALUES (?, ?, ?)",
            [property_id, record.month, record.occupancy_rate],
        )

    def save_concession(self, property_id: str, record: ConcessionRecord) -> None:
        conn = self._connect()
        conn.execute(
            "INSERT OR REPLACE INTO concession_data (property_id, month, concession_amount) VALUES (?, ?, ?)",
            [property_id, record.month, record.concession_amount],
        )

    def save_market_stats(self, stats: MarketSnapshot) -> None:
        """Upsert market stats for a city (or the state row, city '__STATE__')."""
        conn = self._connect()
        conn.execute(
            f"INSERT OR REPLACE INTO market_stats ({', '.join(_MARKET_COLS)}) VALUES ({', '.join('?' * len(_MARKET_COLS))})",
            [getattr(stats, c) for c in _MARKET_COLS],
        )

    def load_json(self, path: Path | str) -> tuple[int, int]:
        """Load a snapshot file; returns (properties, market rows) loaded.

        Format: {"properties": [{...property fields, "rent": [...],
        "occupancy": [...], "concessions": [...]}], "market_stats": [{...}]}
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        properties = data.get("properties", [])
        for raw in properties:
            prop = _property_from_dict(raw)
            self.save_property(prop)
            for r in raw.get("rent", []):
                self.save_rent(prop.property_id, RentRecord(
                    average_rent=float(r.get("average_rent", 0)),
                    rent_per_sqft=float(r.get("rent_per_sqft", 0)),
                    month=str(r.get("month", "")),
                ))
            for r in raw.get("occupancy", []):
                self.save_occupancy(prop.property_id, OccupancyRecord(
                    occupancy_rate=float(r.get("occupancy_rate", 0)),
                    month=str(r.get("month", "")),
                ))
            for r in raw.get("concessions", []):
                self.save_concession(prop.property_id, ConcessionRecord(
                    concession_amount=float(r.get("concession_amount", 0)),
                    month=str(r.get("month", "")),
                ))

        markets = data.get("market_stats", [])
        for raw in markets:
            self.save_market_stats(_market_from_dict(raw))
        return len(properties), len(markets)

    def list_property_ids(self) -> list[str]:
        conn = self._connect()
        rows = conn.execute("SELECT property_id FROM properties ORDER BY property_id").fetchall()
        return [r[0] for r in rows]

    def get_property_with_market_context(self, property_id: str) -> PropertyContext | None:
        """Property plus its latest monthly records and matching market stats."""
        conn = self._connect()
        row = conn.execute(
            f"SELECT {', '.join(_PROPERTY_COLS)} FROM properties WHERE property_id = ?",
            [property_id],
        ).fetchone()
        if row is None:
            return None
        prop = _property_from_dict(dict(zip(_PROPERTY_COLS, row)))

        rent = conn.execute(
            "SELECT average_rent, rent_per_sqft, month FROM rent_data WHERE property_id = ? ORDER BY month DESC LIMIT 1",
            [property_id],
        ).fetchone()
        occ = conn.execute(
            "SELECT occupancy_rate, month FROM occupancy_data WHERE property_id = ? ORDER BY month DESC LIMIT 1",
            [property_id],
        ).fetchone()
        con = conn.execute(
            "SELECT concession_amount, month FROM concession_data WHERE property_id = ? ORDER BY month DESC LIMIT 1",
            [property_id],
        ).fetchone()

        return PropertyContext(
            property=prop,
            property_rent=RentRecord(average_rent=rent[0], rent_per_sqft=rent[1] or 0.0, month=rent[2]) if rent else None,
            property_occupancy=OccupancyRecord(occupancy_rate=occ[0], month=occ[1]) if occ else None,
            property_concession=ConcessionRecord(concession_amount=con[0], month=con[1]) if con else None,
            market_stats=self._market_for(prop.city, prop.state),
        )

    def _market_for(self, city: str, state: str) -> MarketSnapshot | None:
        """City-level stats, falling back to the state-level row."""
        conn = self._connect()
        query = f"SELECT {', '.join(_MARKET_COLS)} FROM market_stats WHERE city = ? AND state = ?"
        row = conn.execute(query, [city, state]).fetchone()
        if row is None:
            row = conn.execute(query, [STATE_ROW, state]).fetchone()
        if row is None:
            return None
        return _market_from_dict(dict(zip(_MARKET_COLS, row)))

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None


def _property_from_dict(d: dict[str, Any]) -> PropertySnapshot:
    rating = d.get("google_rating")
    return PropertySnapshot(
        property_id=str(d["property_id"]),
        name=d.get("name") or "",
        city=d.get("city") or "",
        state=d.get("state") or "",
        average_unit_size=float(d.get("average_unit_size") or 0),
        occupancy_rate=float(d.get("occupancy_rate") or 0),
        google_rating=float(rating) if rating is not None else None,
        year_built=int(d.get("year_built") or 0),
        amenity_count=int(d.get("amenity_count") or 0),
        total_units=int(d.get("total_units") or 0),
    )


def _market_from_dict(d: dict[str, Any]) -> MarketSnapshot:
    return MarketSnapshot(
        city=d.get("city") or STATE_ROW,
        state=d.get("state") or "",
        avg_rent=float(d.get("avg_rent") or 0),
        avg_rent_per_sqft=float(d.get("avg_rent_per_sqft") or 0),
        avg_occupancy=float(d.get("avg_occupancy") or 0),
        avg_concession_value=float(d.get("avg_concession_value") or 0),
        rent_trend_3mo=float(d.get("rent_trend_3mo") or 0),
        rent_trend_12mo=float(d.get("rent_trend_12mo") or 0),
        concession_prevalence=float(d.get("concession_prevalence") or 0),
        property_count=int(d.get("property_count") or 0),
    )
