from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from mirstats.models import AUTO_DOMAIN, Domain, MetricDescriptor, UniversityRecord
from mirstats.palette import DEFAULT_PALETTE, Palette
from mirstats.pivot import PivotRows
from mirstats.scaling import compute_domain


def university_names(records: Sequence[UniversityRecord]) -> List[str]:
    return list(dict.fromkeys(r.name for r in records))


def first_year_with_data(records: Sequence[UniversityRecord]) -> Optional[int]:
    """Earliest year in which any university has a record, or None."""
    first_years: Dict[str, int] = {}
    for r in records:
        seen = first_years.get(r.name)
        if seen is None or r.year < seen:
            first_years[r.name] = r.year
    return min(first_years.values()) if first_years else None


def relevant_years(all_years: Iterable[int], first_year: Optional[int]) -> List[int]:
    if first_year is None:
        return []
    return sorted({int(y) for y in all_years if int(y) >= first_year})


def abbreviation_map(records: Sequence[UniversityRecord], names: Optional[Sequence[str]] = None) -> Dict[str, str]:
    """First-seen abbreviation per university name; the name itself when none is known."""
    first_seen: Dict[str, str] = {}
    for r in records:
        if r.name not in first_seen and r.abbreviation:
            first_seen[r.name] = r.abbreviation
    names = university_names(records) if names is None else names
    return {name: first_seen.get(name) or name for name in names}


def _metric_domain(records: Sequence[UniversityRecord], metric: MetricDescriptor, first_year: Optional[int]) -> Domain:
    if not metric.is_percentage:
        return AUTO_DOMAIN
    values = []
    if first_year is not None:
        for r in records:
            value = getattr(r, metric.key, None)
            if r.year >= first_year and value is not None and value > 0:
                values.append(value)
    return compute_domain(values)


def shape_evolution(
    records: Sequence[UniversityRecord],
    metrics: Sequence[MetricDescriptor],
    all_years: Iterable[int],
    *,
    palette: Palette = DEFAULT_PALETTE,
) -> List[Dict[str, Any]]:
    """Pivot university-year records into one year-indexed series per metric.

    Rows carry ``<abbr>`` and ``<abbr>_rank`` for every university; a
    university without a record for a year gets ``None`` in both so the line
    breaks rather than interpolating. Duplicate (name, year) records resolve
    to the last one in input order. An abbreviation that collides with
    ``year`` or another university's ``<abbr>_rank`` key raises ValueError.
    """
    names = university_names(records)
    first_year = first_year_with_data(records)
    years = relevant_years(all_years, first_year)
    abbreviations = abbreviation_map(records, names)

    by_key: Dict[Tuple[str, int], UniversityRecord] = {}
    for r in records:
        by_key[(r.name, r.year)] = r

    universities = [
        {"name": name, "abbreviation": abbreviations[name], "color_slot": palette.slot(i), "color": palette.color(i)}
        for i, name in enumerate(names)
    ]

    entries: List[Dict[str, Any]] = []
    for metric in metrics:
        pivot = PivotRows("year", [abbreviations[name] for name in names])
        for year in years:
            pivot.row(year)
            for name in names:
                record = by_key.get((name, year))
                if record is None:
                    continue
                pivot.set(year, abbreviations[name], getattr(record, metric.key, None), rank=record.rank)
        entries.append(
            {
                "metric": asdict(metric),
                "universities": [dict(u) for u in universities],
                "series": pivot.to_records(),
                "domain": _metric_domain(records, metric, first_year),
                "has_data": pivot.has_values(),
            }
        )
    return entries
