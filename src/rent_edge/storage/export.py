"""Export scored properties to CSV and JSON."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..models import PropertyScores
from ..scoring import deal_label, leverage_label


def _serialize(obj: Any) -> Any:
    """JSON serializer for datetime and other objects."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def export_csv(results: list[PropertyScores], path: Path | str) -> None:
    """Export ranked scores to CSV; skipped scores are left blank."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "rank",
        "property_id",
        "name",
        "city",
        "state",
        "deal_score",
        "deal_grade",
        "deal_label",
        "leverage_score",
        "leverage_grade",
        "leverage_label",
        "summary",
        "recommendation",
        "top_tip",
        "best_timing",
    ]

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for i, r in enumerate(results, 1):
            d, lv = r.deal, r.leverage
            writer.writerow({
                "rank": i,
                "property_id": r.property.property_id,
                "name": r.property.name,
                "city": r.property.city,
                "state": r.property.state,
                "deal_score": d.score if d else "",
                "deal_grade": d.grade.value if d else "",
                "deal_label": deal_label(d.score) if d else "",
                "leverage_score": lv.score if lv else "",
                "leverage_grade": lv.grade.value if lv else "",
                "leverage_label": leverage_label(lv.score) if lv else "",
                "summary": d.summary if d else "",
                "recommendation": d.recommendation if d else "",
                "top_tip": lv.negotiation_tips[0] if lv and lv.negotiation_tips else "",
                "best_timing": lv.best_timing if lv else "",
            })


def export_json(results: list[PropertyScores], path: Path | str) -> None:
    """Export full score details to JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "run_at": datetime.now(timezone.utc).isoformat(),
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=_serialize)
