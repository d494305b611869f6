import pandas as pd
import pytest
from fastapi.testclient import TestClient

import mirstats_api.main as api
from mirstats.data import normalize_frame, frame_to_records


@pytest.fixture
def data_ctx():
    raw = pd.DataFrame(
        {
            "Universidad": ["Universidad de Navarra", "Universidad de Sevilla", "Universidad de Sevilla"],
            "Abreviatura": ["UNAV", "US", "US"],
            "Año": [2021, 2021, 2020],
            "Admitidos": [180, 300, 280],
            "Presentados": [176, 270, 260],
            "Superan Nota": [172, 250, 240],
            "Plazas Adjudicadas": [170, 231, 200],
        }
    )
    frame = normalize_frame(raw)
    records = frame_to_records(frame)
    return {
        "files": ["mir.csv"],
        "years": sorted({r.year for r in records}),
        "universities": sorted({r.name for r in records}),
        "frame": frame,
        "records": records,
    }


@pytest.fixture
def client(monkeypatch, data_ctx):
    monkeypatch.setattr(api, "load_dashboard_data", lambda: data_ctx)
    return TestClient(api.app)


def test_meta_endpoints(client):
    assert client.get("/meta/years").json() == {"years": [2020, 2021]}
    universities = client.get("/meta/universities", params={"year": 2020}).json()["universities"]
    assert universities == [{"name": "Universidad de Sevilla", "abbreviation": "US"}]
    metrics = client.get("/meta/metrics").json()["metrics"]
    assert {"key": "rank", "label": "Ranking Nacional", "is_percentage": False} in metrics


def test_comparison_endpoint(client):
    resp = client.post("/comparison", json={"year": 2021, "universities": ["Universidad de Sevilla", "Universidad de Navarra"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["year"] == 2021
    assert [r["abbreviation"] for r in body["series"]["without_place"]] == ["US", "UNAV"]
    assert body["series"]["without_place"][0]["without_place_absolute"] == 39
    assert body["series"]["domains"]["percentage_places_over_presented"] == [75, 100]
    assert "absolute" in body["charts"]


def test_evolution_endpoint_keeps_gaps_as_null(client):
    resp = client.post("/evolution", json={"universities": ["Universidad de Navarra", "Universidad de Sevilla"], "metrics": ["presented"]})
    assert resp.status_code == 200
    entry = resp.json()["entries"][0]
    assert entry["series"][0] == {"year": 2020, "UNAV": None, "UNAV_rank": None, "US": 260, "US_rank": 1}
    assert entry["domain"] == ["auto", "auto"]


def test_summary_endpoint(client):
    resp = client.post("/summary", params={"view_mode": "evolution"}, json={"metrics": ["presented"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["view_mode"] == "evolution"
    assert len(body["projection"]) == 3
    assert "Presentados" in body["prompt"]


def test_summary_rejects_unknown_view_mode(client):
    assert client.post("/summary", params={"view_mode": "table"}, json={}).status_code == 422


def test_export_comparison_csv(client):
    resp = client.post("/export/comparison", json={"year": 2021})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "comparison_2021.csv" in resp.headers["content-disposition"]
    lines = resp.text.strip().splitlines()
    assert lines[0].startswith("name,abbreviation,year")
    assert len(lines) == 3


def test_loader_failure_returns_500(monkeypatch):
    def boom():
        raise RuntimeError("source unreadable")

    monkeypatch.setattr(api, "load_dashboard_data", boom)
    resp = TestClient(api.app).post("/comparison", json={})
    assert resp.status_code == 500
    assert resp.json() == {"error": "source unreadable", "type": "RuntimeError"}
