from __future__ import annotations

from pageperf.core.metrics import (
    estimate_time_to_interactive,
    parse_metrics,
    rate_metric,
    rate_metrics,
    with_resource_totals,
)
from pageperf.core.resource_analyzer import analyze_resources
from pageperf.models.types import MetricsRecord


def test_parse_metrics_reads_both_key_styles() -> None:
    parsed = parse_metrics({"firstContentfulPaint": 900, "total_blocking_time": 120, "requestCount": 7})
    assert parsed.first_contentful_paint == 900
    assert parsed.total_blocking_time == 120
    assert parsed.request_count == 7
    assert parsed.largest_contentful_paint is None


def test_parse_metrics_drops_bad_values() -> None:
    parsed = parse_metrics({"pageLoadTime": -3, "domContentLoaded": "fast", "transferSize": True})
    assert parsed.page_load_time is None
    assert parsed.dom_content_loaded is None
    assert parsed.transfer_size == 0

    assert parse_metrics(None) is None
    assert parse_metrics([1, 2]) == MetricsRecord()


def test_rate_metric_boundaries() -> None:
    assert rate_metric("largest_contentful_paint", 2500) == "good"
    assert rate_metric("largest_contentful_paint", 3000) == "needs-improvement"
    assert rate_metric("largest_contentful_paint", 5000) == "poor"
    assert rate_metric("total_blocking_time", None) is None
    assert rate_metric("cumulative_layout_shift", 0.1) is None


def test_rate_metrics_covers_all_timings() -> None:
    ratings = rate_metrics(MetricsRecord(first_contentful_paint=1000))
    assert ratings["first_contentful_paint"] == "good"
    assert ratings["page_load_time"] is None
    assert len(ratings) == 6


def test_time_to_interactive_estimate() -> None:
    assert estimate_time_to_interactive(1000, 3) == 1150
    assert estimate_time_to_interactive(None, 3) is None


def test_with_resource_totals_fills_gaps_only() -> None:
    resources = analyze_resources([
        {"url": "https://x.com/a.js", "size": 100},
        {"url": "https://x.com/b.js", "size": 200},
    ])

    filled = with_resource_totals(MetricsRecord(dom_content_loaded=800), resources)
    assert filled.request_count == 2
    assert filled.transfer_size == 300
    assert filled.time_to_interactive == 900

    reported = MetricsRecord(request_count=40, transfer_size=5000, time_to_interactive=2000)
    assert with_resource_totals(reported, resources) == reported


def test_parse_metrics_drops_non_finite_values() -> None:
    parsed = parse_metrics({
        "transferSize": float("inf"),
        "firstContentfulPaint": float("nan"),
        "requestCount": 10 ** 400,
    })
    assert parsed.transfer_size == 0
    assert parsed.first_contentful_paint is None
    assert parsed.request_count == 0
