from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from mirstats.models import METRIC_CATALOG, METRICS_BY_KEY, MetricDescriptor
from mirstats.palette import DEFAULT_PALETTE


@dataclass(frozen=True)
class ViewFilters:
    year: Optional[int] = None
    universities: List[str] = field(default_factory=list)
    metrics: List[str] = field(default_factory=list)

    def metric_descriptors(self) -> List[MetricDescriptor]:
        return [METRICS_BY_KEY[k] for k in self.metrics if k in METRICS_BY_KEY]


def _as_int_list(values: Optional[Iterable[object]]) -> List[int]:
    if not values:
        return []
    out: List[int] = []
    for v in values:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            continue
    return out


def _as_int(value: object) -> Optional[int]:
    found = _as_int_list([value])
    return found[0] if found else None


def normalize_filters(
    raw: dict,
    *,
    available_years: Optional[List[int]] = None,
    available_universities: Optional[List[str]] = None,
) -> ViewFilters:
    available_years = sorted(_as_int_list(available_years))
    available_universities = list(available_universities or [])

    year = _as_int(raw.get("year"))
    if available_years and year not in available_years:
        year = available_years[-1]

    universities = [str(x) for x in (raw.get("universities") or []) if x is not None]
    if available_universities:
        known = set(available_universities)
        universities = [u for u in universities if u in known]
        if not universities:
            universities = available_universities[: len(DEFAULT_PALETTE)]
    universities = list(dict.fromkeys(universities))

    metrics = [str(x) for x in (raw.get("metrics") or []) if str(x) in METRICS_BY_KEY]
    if not metrics:
        metrics = [m.key for m in METRIC_CATALOG]
    metrics = list(dict.fromkeys(metrics))

    return ViewFilters(year=year, universities=universities, metrics=metrics)
