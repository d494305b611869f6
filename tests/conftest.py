from __future__ import annotations

import pytest

from mirstats.models import UniversityRecord


def make_record(name: str, year: int, abbreviation: str | None = None, **values) -> UniversityRecord:
    return UniversityRecord(name=name, abbreviation=abbreviation if abbreviation is not None else name, year=year, **values)


@pytest.fixture
def comparison_records():
    return [
        make_record(
            "Universidad Autónoma de Madrid",
            2021,
            "UAM",
            admitted=230,
            presented=220,
            places_awarded=205,
            passed=215,
            percentage_presented_over_admitted=95.65,
            percentage_places_over_presented=93.18,
            percentage_places_over_passed=95.35,
            without_place_absolute=15,
            rank=2,
        ),
        make_record(
            "Universidad de Navarra",
            2021,
            "UNAV",
            admitted=180,
            presented=176,
            places_awarded=170,
            passed=172,
            percentage_presented_over_admitted=97.78,
            percentage_places_over_presented=96.59,
            percentage_places_over_passed=98.84,
            without_place_absolute=6,
            rank=1,
        ),
        make_record(
            "Universidad de Sevilla",
            2021,
            "US",
            admitted=300,
            presented=270,
            places_awarded=231,
            passed=250,
            percentage_presented_over_admitted=90.0,
            percentage_places_over_presented=85.56,
            percentage_places_over_passed=92.4,
            without_place_absolute=39,
            rank=3,
        ),
    ]


@pytest.fixture
def evolution_records():
    return [
        make_record("Alpha", 2018, "A", presented=100, places_awarded=90, percentage_places_over_presented=90.0, rank=1),
        make_record("Alpha", 2019, "A", presented=110, places_awarded=88, percentage_places_over_presented=80.0, rank=2),
        make_record("Beta", 2020, "B", presented=50, places_awarded=45, percentage_places_over_presented=90.0, rank=1),
        make_record("Alpha", 2021, "A", presented=120, places_awarded=114, percentage_places_over_presented=95.0, rank=1),
        make_record("Beta", 2021, "B", presented=60, places_awarded=51, percentage_places_over_presented=85.0, rank=2),
    ]
