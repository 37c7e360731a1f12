from fastapi.testclient import TestClient

from api.main import app


def _client():
    return TestClient(app)


def test_api_routes_exist():
    paths = {route.path for route in app.routes}
    for path in ["/health", "/source", "/overview", "/properties", "/performance", "/upload", "/reset", "/export/{page}"]:
        assert path in paths


def test_overview_default():
    r = _client().post("/overview", json={})
    assert r.status_code == 200
    kpis = r.json()["kpis"]
    assert kpis["total_properties"] == 3
    assert kpis["total_forecast"] == 235440
    assert round(kpis["roi_pct"], 2) == 7.08


def test_settings_validation_rejects_bad_horizon():
    r = _client().post("/overview", json={"forecast_years": 0})
    assert r.status_code == 422


def test_upload_then_reset():
    client = _client()
    csv_bytes = b"address,value,rent\nA St,100000,1000\nB St,200000,1500\nC St,0,900\n"
    r = client.post("/upload", files={"file": ("mine.csv", csv_bytes, "text/csv")})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert body["source"] == {"kind": "upload", "name": "mine.csv", "count": 3}

    r = client.post("/properties", json={})
    props = r.json()["properties"]
    assert [p["id"] for p in props] == [1, 2, 3]
    # NaN forecast and infinite ROI are encoded as null.
    assert props[0]["forecast"] is None
    assert props[2]["roi_pct"] is None

    r = client.post("/reset")
    assert r.json() == {"kind": "default", "name": None, "count": 3}
    r = client.post("/overview", json={})
    assert r.json()["kpis"]["total_value"] == 830000


def test_export_properties_csv():
    r = _client().post("/export/properties", json={"sort_by": "value"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    lines = r.text.strip().splitlines()
    assert lines[0].startswith("id,address,value")
    assert len(lines) == 4


def test_performance_endpoint():
    r = _client().post("/performance", json={})
    assert r.status_code == 200
    assert len(r.json()["series"]) == 5
