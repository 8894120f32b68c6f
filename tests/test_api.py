from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.app.main import app


@pytest.fixture
def client(store_home) -> TestClient:
    return TestClient(app)


def test_health(client) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_analyze_snapshot(client, snapshot) -> None:
    resp = client.post("/api/v1/analyze", json={**snapshot, "level": "basic"})
    assert resp.status_code == 200

    data = resp.json()
    assert data["url"] == "https://shop.example.com/"
    assert data["suggestionLevel"] == "basic"
    assert data["bottlenecks"][0]["severity"] == "high"
    assert all(len(b["suggestions"]) <= 2 for b in data["bottlenecks"])


def test_analyze_requires_input(client) -> None:
    resp = client.post("/api/v1/analyze", json={})
    assert resp.status_code == 422

    resp = client.post("/api/v1/analyze", json={"metrics": "fast", "resources": []})
    assert resp.status_code == 422


def test_analyze_with_missing_half_returns_nothing(client) -> None:
    resp = client.post("/api/v1/analyze", json={"metrics": {"totalBlockingTime": 900}})
    assert resp.status_code == 200
    assert resp.json()["bottlenecks"] == []


def test_session_lifecycle(client, snapshot) -> None:
    resp = client.post("/api/v1/analyze", json={**snapshot, "session": "tab-7"})
    assert resp.status_code == 200

    assert client.get("/api/v1/sessions").json() == {"sessions": ["tab-7"]}

    stored = client.get("/api/v1/sessions/tab-7")
    assert stored.status_code == 200
    assert stored.json()["data"]["url"] == "https://shop.example.com/"

    assert client.delete("/api/v1/sessions/tab-7").json() == {"key": "tab-7", "cleared": True}
    assert client.get("/api/v1/sessions/tab-7").status_code == 404
    assert client.delete("/api/v1/sessions/tab-7").status_code == 404


def test_settings_drive_default_level(client, snapshot) -> None:
    assert client.get("/api/v1/settings").json()["suggestionLevel"] == "intermediate"

    updated = client.put("/api/v1/settings", json={"suggestionLevel": "basic"})
    assert updated.status_code == 200
    assert updated.json()["suggestionLevel"] == "basic"
    assert updated.json()["autoAnalysis"] is True

    data = client.post("/api/v1/analyze", json=snapshot).json()
    assert data["suggestionLevel"] == "basic"

    reset = client.post("/api/v1/settings/reset").json()
    assert reset["suggestionLevel"] == "intermediate"
    assert client.get("/api/v1/settings").json() == reset


def test_settings_reject_wrong_types(client) -> None:
    resp = client.put("/api/v1/settings", json={"autoAnalysis": "sometimes"})
    assert resp.status_code == 422


def test_analyze_tolerates_non_finite_literals(client) -> None:
    body = (
        '{"metrics": {"transferSize": Infinity},'
        ' "resources": [{"url": "https://x.com/app.js", "type": "script", "size": NaN}]}'
    )
    resp = client.post("/api/v1/analyze", content=body, headers={"Content-Type": "application/json"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["metrics"]["transferSize"] == 0
    assert data["resources"][0]["size"] == 0
