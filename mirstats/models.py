from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

DomainBound = Union[float, str]
Domain = Tuple[DomainBound, DomainBound]

AUTO_DOMAIN: Domain = ("auto", "auto")


@dataclass(frozen=True)
class UniversityRecord:
    """One university's exam results for one year.

    Counts are not validated: ``presented`` may exceed ``admitted`` in dirty
    source data and every consumer has to cope with that.
    """

    name: str
    abbreviation: str
    year: int
    admitted: int = 0
    presented: int = 0
    places_awarded: int = 0
    passed: int = 0
    percentage_presented_over_admitted: float = 0.0
    percentage_places_over_presented: float = 0.0
    percentage_places_over_passed: float = 0.0
    without_place_absolute: float = 0.0
    rank: Optional[int] = None


@dataclass(frozen=True)
class MetricDescriptor:
    key: str
    label: str
    is_percentage: bool = False


COUNT_FIELDS = ("admitted", "presented", "places_awarded", "passed")
PERCENTAGE_FIELDS = (
    "percentage_presented_over_admitted",
    "percentage_places_over_presented",
    "percentage_places_over_passed",
)

METRIC_CATALOG: Tuple[MetricDescriptor, ...] = (
    MetricDescriptor("admitted", "Admitidos"),
    MetricDescriptor("presented", "Presentados"),
    MetricDescriptor("places_awarded", "Plazas Adjudicadas"),
    MetricDescriptor("without_place_absolute", "Alumnos Sin Plaza"),
    MetricDescriptor("percentage_presented_over_admitted", "Presentados / Admitidos (%)", is_percentage=True),
    MetricDescriptor("percentage_places_over_presented", "Plazas / Presentados (%)", is_percentage=True),
    MetricDescriptor("percentage_places_over_passed", "Plazas / Superan Nota (%)", is_percentage=True),
    MetricDescriptor("rank", "Ranking Nacional"),
)

METRICS_BY_KEY: Dict[str, MetricDescriptor] = {m.key: m for m in METRIC_CATALOG}
