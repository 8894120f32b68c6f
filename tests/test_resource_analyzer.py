from __future__ import annotations

import pytest

from pageperf.core.resource_analyzer import (
    analyze_resource,
    analyze_resources,
    group_by_type,
    size_metrics,
    timing_breakdown,
    to_epoch_ms,
    total_size_by_type,
)
from pageperf.models.types import ResourceRecord, ResourceType


def test_timing_breakdown_splits_total() -> None:
    breakdown = timing_breakdown(1000, 2000)
    assert breakdown.total == pytest.approx(1000)
    assert breakdown.waiting == pytest.approx(300)
    assert breakdown.downloading == pytest.approx(700)


def test_timing_breakdown_without_timestamps_uses_fallback() -> None:
    assert timing_breakdown(None, 2000, 450).total == 450
    assert timing_breakdown(None, None).total == 0
    assert timing_breakdown(3000, 1000).waiting == 0


def test_to_epoch_ms() -> None:
    assert to_epoch_ms(1234.5) == 1234.5
    assert to_epoch_ms("2024-01-01T00:00:00Z") == pytest.approx(1704067200000)
    assert to_epoch_ms("yesterday") is None
    assert to_epoch_ms(-1) is None
    assert to_epoch_ms(None) is None


def test_analyze_resource_accepts_camel_and_snake_case() -> None:
    camel = analyze_resource({"url": "https://x.com/pic", "mimeType": "image/png", "size": 10,
                              "startTime": 0, "endTime": 100})
    snake = analyze_resource({"url": "https://x.com/pic", "mime_type": "image/png", "size": 10,
                              "start_time": 0, "end_time": 100})

    assert camel == snake
    assert camel.type is ResourceType.IMAGE
    assert camel.timing_breakdown.total == pytest.approx(100)
    assert not camel.is_render_blocking


def test_malformed_fields_degrade_to_defaults() -> None:
    record = analyze_resource({"url": 42, "size": -5, "type": "stylesheet", "startTime": "soon"})
    assert record.url == ""
    assert record.size == 0
    assert record.start_time is None
    assert record.is_render_blocking

    assert analyze_resource("not a mapping") == ResourceRecord()


def test_explicit_breakdown_and_blocking_flag_are_kept() -> None:
    record = analyze_resource({
        "url": "https://x.com/app.js",
        "timingBreakdown": {"total": 900, "waiting": 700, "downloading": 200},
        "isRenderBlocking": False,
    })
    assert record.timing_breakdown.waiting == 700
    assert not record.is_render_blocking


def test_records_pass_through() -> None:
    record = ResourceRecord(url="https://x.com/a.js", type=ResourceType.SCRIPT, size=5)
    assert analyze_resources([record]) == [record]
    assert analyze_resources(None) is None


def test_grouping_and_size_metrics() -> None:
    resources = analyze_resources([
        {"url": "https://x.com/a.js", "size": 150 * 1024},
        {"url": "https://x.com/b.js", "size": 10},
        {"url": "https://x.com/c.css", "size": 20},
    ])

    assert {k: len(v) for k, v in group_by_type(resources).items()} == {
        ResourceType.SCRIPT: 2,
        ResourceType.STYLESHEET: 1,
    }
    assert total_size_by_type(resources)[ResourceType.SCRIPT] == 150 * 1024 + 10
    assert size_metrics(resources[0]) == {"size": 150 * 1024, "is_large": True, "threshold": 100 * 1024}
    assert size_metrics(resources[2])["is_large"] is False


def test_non_finite_timings_are_dropped() -> None:
    record = analyze_resource({
        "url": "https://x.com/a.js",
        "size": float("nan"),
        "startTime": float("nan"),
        "endTime": float("inf"),
        "timing": float("inf"),
    })
    assert record.size == 0
    assert record.start_time is None
    assert record.end_time is None
    assert record.timing_breakdown.total == 0
