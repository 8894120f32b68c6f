"""Page-level metrics: parsing, Core Web Vitals style ratings and estimates."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Sequence

from pageperf.models.types import MetricsRecord, ResourceRecord, ResourceType
from pageperf.utils.resources import filter_by_type, total_size


# Upper bounds (ms) for "good" and "needs-improvement"; anything above is "poor".
METRIC_THRESHOLDS = {
    "page_load_time": {"good": 2000, "medium": 4000},
    "dom_content_loaded": {"good": 1500, "medium": 3000},
    "first_contentful_paint": {"good": 1800, "medium": 3000},
    "largest_contentful_paint": {"good": 2500, "medium": 4000},
    "time_to_interactive": {"good": 3500, "medium": 7500},
    "total_blocking_time": {"good": 200, "medium": 600},
}

METRIC_LABELS = {
    "page_load_time": "Page Load",
    "dom_content_loaded": "DOM Content Loaded",
    "first_contentful_paint": "First Contentful Paint",
    "largest_contentful_paint": "Largest Contentful Paint",
    "time_to_interactive": "Time to Interactive",
    "total_blocking_time": "Total Blocking Time",
}

_CAMEL_KEYS = {
    "page_load_time": "pageLoadTime",
    "dom_content_loaded": "domContentLoaded",
    "first_contentful_paint": "firstContentfulPaint",
    "largest_contentful_paint": "largestContentfulPaint",
    "time_to_interactive": "timeToInteractive",
    "total_blocking_time": "totalBlockingTime",
    "request_count": "requestCount",
    "transfer_size": "transferSize",
    "page_size": "pageSize",
}

# Rough per-script cost used when no interactivity measurement exists.
TTI_MS_PER_SCRIPT = 50


def _timing(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _count(value) -> int:
    timing = _timing(value)
    return int(timing) if timing is not None else 0


def parse_metrics(raw) -> MetricsRecord | None:
    """MetricsRecord from a camelCase or snake_case mapping. None stays None."""
    if raw is None:
        return None
    if isinstance(raw, MetricsRecord):
        return raw
    if not isinstance(raw, dict):
        return MetricsRecord()

    def pick(name):
        value = raw.get(_CAMEL_KEYS[name])
        return raw.get(name) if value is None else value

    return MetricsRecord(
        page_load_time=_timing(pick("page_load_time")),
        dom_content_loaded=_timing(pick("dom_content_loaded")),
        first_contentful_paint=_timing(pick("first_contentful_paint")),
        largest_contentful_paint=_timing(pick("largest_contentful_paint")),
        time_to_interactive=_timing(pick("time_to_interactive")),
        total_blocking_time=_timing(pick("total_blocking_time")),
        request_count=_count(pick("request_count")),
        transfer_size=_count(pick("transfer_size")),
        page_size=_count(pick("page_size")),
    )


def rate_metric(name: str, value: float | None) -> str | None:
    thresholds = METRIC_THRESHOLDS.get(name)
    if thresholds is None or value is None:
        return None
    if value <= thresholds["good"]:
        return "good"
    if value <= thresholds["medium"]:
        return "needs-improvement"
    return "poor"


def rate_metrics(metrics: MetricsRecord) -> dict[str, str | None]:
    return {name: rate_metric(name, getattr(metrics, name)) for name in METRIC_THRESHOLDS}


def estimate_time_to_interactive(dom_content_loaded: float | None, script_count: int) -> float | None:
    if not dom_content_loaded:
        return None
    return dom_content_loaded + script_count * TTI_MS_PER_SCRIPT


def with_resource_totals(metrics: MetricsRecord, resources: Sequence[ResourceRecord]) -> MetricsRecord:
    """Fill counts and estimates the metrics source could not provide."""
    updates = {}
    if not metrics.request_count and resources:
        updates["request_count"] = len(resources)
    if not metrics.transfer_size and resources:
        updates["transfer_size"] = total_size(resources)
    if metrics.time_to_interactive is None:
        scripts = filter_by_type(resources, ResourceType.SCRIPT)
        tti = estimate_time_to_interactive(metrics.dom_content_loaded, len(scripts))
        if tti is not None:
            updates["time_to_interactive"] = tti
    return replace(metrics, **updates) if updates else metrics
