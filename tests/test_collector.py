from __future__ import annotations

import asyncio

import pytest

from pageperf.core.collector import collect_metrics, collect_page, collect_resources, resource_from_entry
from pageperf.models.types import ResourceType


class FakePage:
    """Answers page.evaluate() with canned Performance API data."""

    def __init__(self, metrics=None, entries=None):
        self.metrics = metrics
        self.entries = entries
        self.scripts = []

    async def evaluate(self, script):
        self.scripts.append(script)
        if "getEntriesByType('paint')" in script:
            return self.metrics
        return self.entries


ENTRIES = [
    {"url": "https://example.com/", "initiatorType": "navigation", "startTime": 0, "endTime": 420,
     "requestStart": 20, "responseStart": 320, "transferSize": 12000},
    {"url": "https://example.com/site.css", "initiatorType": "link", "startTime": 350, "endTime": 500,
     "transferSize": 30000},
    {"url": "https://example.com/fonts/inter.woff2?v=2", "initiatorType": "link", "startTime": 510,
     "endTime": 600, "transferSize": 0, "encodedBodySize": 40000},
    {"url": "https://example.com/api/cart", "initiatorType": "fetch", "startTime": 900, "endTime": 950},
    {"url": "https://example.com/hero.webp", "initiatorType": "img", "startTime": 520, "endTime": 800},
    {"url": "https://example.com/bundle.js", "initiatorType": "other", "startTime": 400, "endTime": 700},
]


def test_initiator_types_map_to_resource_types() -> None:
    types = [resource_from_entry(e).type for e in ENTRIES]
    assert types == [
        ResourceType.DOCUMENT,
        ResourceType.STYLESHEET,
        ResourceType.FONT,
        ResourceType.XHR,
        ResourceType.IMAGE,
        ResourceType.SCRIPT,
    ]


def test_measured_waiting_time_replaces_estimate() -> None:
    document = resource_from_entry(ENTRIES[0])
    assert document.timing_breakdown.total == pytest.approx(420)
    assert document.timing_breakdown.waiting == pytest.approx(300)
    assert document.timing_breakdown.downloading == pytest.approx(100)

    stylesheet = resource_from_entry(ENTRIES[1])
    assert stylesheet.timing_breakdown.waiting == pytest.approx(150 * 0.3)


def test_size_falls_back_to_encoded_body() -> None:
    assert resource_from_entry(ENTRIES[2]).size == 40000


def test_collect_metrics() -> None:
    page = FakePage(metrics={
        "pageLoadTime": 1900, "domContentLoaded": 800, "firstContentfulPaint": 600,
        "largestContentfulPaint": None, "totalBlockingTime": 40, "requestCount": 6,
        "transferSize": 12000, "pageSize": 50000,
    })
    metrics = asyncio.run(collect_metrics(page))

    assert metrics.page_load_time == 1900
    assert metrics.largest_contentful_paint is None
    assert metrics.total_blocking_time == 40
    assert metrics.page_size == 50000


def test_collect_metrics_without_timing() -> None:
    metrics = asyncio.run(collect_metrics(FakePage(metrics=None)))
    assert metrics.page_load_time is None
    assert metrics.request_count == 0


def test_collect_page_fills_totals() -> None:
    page = FakePage(metrics={"domContentLoaded": 800}, entries=ENTRIES + ["junk"])
    metrics, resources = asyncio.run(collect_page(page))

    assert len(resources) == len(ENTRIES)
    assert metrics.request_count == len(ENTRIES)
    assert metrics.time_to_interactive == 850
    assert len(page.scripts) == 2


def test_collect_resources_handles_empty_page() -> None:
    assert asyncio.run(collect_resources(FakePage(entries=None))) == []
