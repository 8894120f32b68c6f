"""Normalize raw resource entries into ResourceRecord values.

The resource source hands over loosely-shaped dictionaries (camelCase keys
from the browser side, snake_case from Python callers). Anything missing
or malformed degrades to zero/empty here so detectors never need to guard
against it.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable

from pageperf.detectors.base import KB
from pageperf.models.types import ResourceRecord, ResourceType, TimingBreakdown
from pageperf.utils.resources import resource_size, resource_type

logger = logging.getLogger("pageperf.resources")

# Fraction of a resource's total time attributed to waiting for the first byte
# when no server timing is available.
WAITING_SHARE = 0.3

SIZE_THRESHOLDS = {
    ResourceType.DOCUMENT: 100 * KB,
    ResourceType.STYLESHEET: 50 * KB,
    ResourceType.SCRIPT: 100 * KB,
    ResourceType.IMAGE: 200 * KB,
    ResourceType.FONT: 50 * KB,
}
DEFAULT_SIZE_THRESHOLD = 100 * KB


def _get(raw: dict, *keys):
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _number(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def to_epoch_ms(value) -> float | None:
    """Epoch milliseconds from a number or an ISO-8601 string."""
    number = _number(value)
    if number is not None:
        return number
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).timestamp() * 1000
        except ValueError:
            logger.debug("unparseable timestamp %r", value)
    return None


def timing_breakdown(start_time: float | None, end_time: float | None, fallback_total=None) -> TimingBreakdown:
    if start_time is None or end_time is None or end_time < start_time:
        return TimingBreakdown(total=_number(fallback_total) or 0)
    total = end_time - start_time
    return TimingBreakdown(
        total=total,
        waiting=total * WAITING_SHARE,
        downloading=total * (1 - WAITING_SHARE),
    )


def _given_breakdown(raw) -> TimingBreakdown | None:
    if not isinstance(raw, dict):
        return None
    return TimingBreakdown(
        total=_number(raw.get("total")) or 0,
        waiting=_number(raw.get("waiting")) or 0,
        downloading=_number(raw.get("downloading")) or 0,
    )


def is_render_blocking(rtype: ResourceType) -> bool:
    # Without async/defer or media attributes, stylesheets and scripts are assumed blocking.
    return rtype in (ResourceType.STYLESHEET, ResourceType.SCRIPT)


def analyze_resource(raw) -> ResourceRecord:
    if isinstance(raw, ResourceRecord):
        return raw
    if not isinstance(raw, dict):
        return ResourceRecord()

    url = raw.get("url") if isinstance(raw.get("url"), str) else ""
    mime_type = _get(raw, "mimeType", "mime_type")
    mime_type = mime_type if isinstance(mime_type, str) else None
    rtype = resource_type({"type": raw.get("type"), "mimeType": mime_type, "url": url})

    start = to_epoch_ms(_get(raw, "startTime", "start_time"))
    end = to_epoch_ms(_get(raw, "endTime", "end_time"))
    breakdown = _given_breakdown(_get(raw, "timingBreakdown", "timing_breakdown"))
    if breakdown is None:
        breakdown = timing_breakdown(start, end, raw.get("timing"))

    blocking = _get(raw, "isRenderBlocking", "is_render_blocking")
    if not isinstance(blocking, bool):
        blocking = is_render_blocking(rtype)

    return ResourceRecord(
        url=url,
        type=rtype,
        size=resource_size(raw),
        mime_type=mime_type,
        start_time=start,
        end_time=end,
        timing_breakdown=breakdown,
        is_render_blocking=blocking,
    )


def analyze_resources(raws: Iterable | None) -> list[ResourceRecord] | None:
    if raws is None:
        return None
    return [analyze_resource(raw) for raw in raws]


def group_by_type(resources: Iterable[ResourceRecord]) -> dict[ResourceType, list[ResourceRecord]]:
    grouped: dict[ResourceType, list[ResourceRecord]] = {}
    for resource in resources:
        grouped.setdefault(resource_type(resource), []).append(resource)
    return grouped


def total_size_by_type(resources: Iterable[ResourceRecord]) -> dict[ResourceType, int]:
    return {
        rtype: sum(r.size for r in members)
        for rtype, members in group_by_type(resources).items()
    }


def size_metrics(resource: ResourceRecord) -> dict:
    threshold = SIZE_THRESHOLDS.get(resource_type(resource), DEFAULT_SIZE_THRESHOLD)
    return {
        "size": resource.size,
        "is_large": resource.size > threshold,
        "threshold": threshold,
    }
