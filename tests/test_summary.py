import json

import pytest

from mirstats.models import METRICS_BY_KEY
from mirstats.summary import PROJECTION_FIELDS, build_summary_prompt, summary_projection

from conftest import make_record


def test_projection_keeps_only_condensed_fields(comparison_records):
    projection = summary_projection(comparison_records)
    assert len(projection) == 3
    assert tuple(projection[0]) == PROJECTION_FIELDS
    assert projection[0] == {
        "universidad": "UAM",
        "año": 2021,
        "admitidos": 230,
        "presentados": 220,
        "plazas_adjudicadas": 205,
        "plazas_/_presentados_%": "93.18",
        "alumnos_sin_plaza": 15,
    }


def test_projection_rounds_percentage_to_two_decimals():
    record = make_record("A", 2020, percentage_places_over_presented=87.456)
    assert summary_projection([record])[0]["plazas_/_presentados_%"] == "87.46"


def test_comparison_prompt_mentions_year_and_universities(comparison_records):
    prompt = build_summary_prompt("comparison", comparison_records, year=2021)
    assert "para el año 2021" in prompt
    assert "Universidad Autónoma de Madrid, Universidad de Navarra, Universidad de Sevilla" in prompt
    payload = prompt.split("Datos (en formato JSON):\n", 1)[1]
    assert json.loads(payload) == summary_projection(comparison_records)


def test_evolution_prompt_lists_metric_labels(evolution_records):
    metrics = [METRICS_BY_KEY["presented"], METRICS_BY_KEY["rank"]]
    prompt = build_summary_prompt("evolution", evolution_records, metrics=metrics)
    assert "Alpha, Beta" in prompt
    assert "Presentados, Ranking Nacional" in prompt
    assert "seleccionadas" in build_summary_prompt("evolution", evolution_records)


def test_no_records_means_no_prompt():
    assert build_summary_prompt("comparison", [], year=2021) is None


def test_unknown_view_mode_is_rejected(comparison_records):
    with pytest.raises(ValueError):
        build_summary_prompt("table", comparison_records)
