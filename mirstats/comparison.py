from __future__ import annotations

from typing import Any, Dict, List, Sequence

from mirstats.models import PERCENTAGE_FIELDS, UniversityRecord
from mirstats.palette import DEFAULT_PALETTE, Palette
from mirstats.scaling import compute_domain


def without_place_percent(presented: float, places_awarded: float) -> float:
    if presented > 0:
        return (presented - places_awarded) / presented * 100
    return 0


def _identity(record: UniversityRecord) -> Dict[str, Any]:
    return {"abbreviation": record.abbreviation, "full_name": record.name, "rank": record.rank}


def _colored(record: UniversityRecord, index: int, palette: Palette) -> Dict[str, Any]:
    row = _identity(record)
    row["color_slot"] = palette.slot(index)
    row["color"] = palette.color(index)
    return row


def shape_comparison(records: Sequence[UniversityRecord], *, palette: Palette = DEFAULT_PALETTE) -> Dict[str, Any]:
    """Single-year snapshot: parallel series keyed by abbreviation, in input order."""
    absolute: List[Dict[str, Any]] = []
    rank: List[Dict[str, Any]] = []
    percentages: Dict[str, List[Dict[str, Any]]] = {field: [] for field in PERCENTAGE_FIELDS}
    without_place: List[Dict[str, Any]] = []

    for i, record in enumerate(records):
        absolute.append(
            {
                **_identity(record),
                "admitted": record.admitted,
                "presented": record.presented,
                "places_awarded": record.places_awarded,
            }
        )
        rank.append(_colored(record, i, palette))
        for field in PERCENTAGE_FIELDS:
            percentages[field].append({**_colored(record, i, palette), "value": getattr(record, field)})
        without_place.append(
            {
                **_colored(record, i, palette),
                "without_place_absolute": record.presented - record.places_awarded,
                "without_place_percent": without_place_percent(record.presented, record.places_awarded),
            }
        )

    domains = {field: compute_domain(row["value"] for row in rows if row["value"] is not None) for field, rows in percentages.items()}
    domains["without_place_percent"] = compute_domain(row["without_place_percent"] for row in without_place)

    return {
        "year": records[0].year if records else None,
        "absolute": absolute,
        "rank": rank,
        "percentages": percentages,
        "without_place": without_place,
        "domains": domains,
    }
