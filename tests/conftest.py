from __future__ import annotations

import pytest

from pageperf.core.metrics import parse_metrics
from pageperf.core.resource_analyzer import analyze_resources


@pytest.fixture
def records():
    """Build ResourceRecords from raw snapshot entries."""

    def build(*raws):
        return analyze_resources(list(raws))

    return build


@pytest.fixture
def metrics():
    """Build a MetricsRecord from camelCase keyword arguments."""

    def build(**raw):
        return parse_metrics(raw)

    return build


@pytest.fixture
def store_home(tmp_path, monkeypatch):
    home = tmp_path / "pageperf-home"
    monkeypatch.setenv("PAGEPERF_HOME", str(home))
    return home


@pytest.fixture
def snapshot() -> dict:
    return {
        "url": "https://shop.example.com/",
        "metrics": {
            "pageLoadTime": 4200,
            "domContentLoaded": 1800,
            "firstContentfulPaint": 1200,
            "largestContentfulPaint": 3100,
            "totalBlockingTime": 420,
        },
        "resources": [
            {"url": "https://shop.example.com/", "type": "document", "size": 40_000,
             "startTime": 0, "endTime": 2500},
            {"url": "https://shop.example.com/app.js", "type": "script", "size": 620 * 1024,
             "startTime": 300, "endTime": 900},
            {"url": "https://shop.example.com/site.css", "type": "stylesheet", "size": 30 * 1024,
             "startTime": 250, "endTime": 400},
            {"url": "https://shop.example.com/hero.png", "type": "image", "size": 350 * 1024,
             "startTime": 500, "endTime": 1400},
        ],
    }
