"""Collect metrics and resources from a live page with Playwright.

An init script records Largest Contentful Paint and long tasks from the
first byte; after load, Navigation, Paint and Resource Timing entries are
read back and turned into MetricsRecord / ResourceRecord values.
"""

from __future__ import annotations

import logging

from playwright.async_api import Page, async_playwright

from pageperf.core.metrics import parse_metrics, with_resource_totals
from pageperf.core.resource_analyzer import analyze_resource
from pageperf.models.settings import NETWORK_THROTTLING_PRESETS
from pageperf.models.types import MetricsRecord, ResourceRecord, ResourceType, TimingBreakdown

logger = logging.getLogger("pageperf.collector")

OBSERVER_SCRIPT = """(() => {
    const state = { lcp: null, tbt: 0 };
    window.__pageperf = state;
    try {
        new PerformanceObserver((list) => {
            const entries = list.getEntries();
            const last = entries[entries.length - 1];
            if (last) state.lcp = last.startTime;
        }).observe({ type: 'largest-contentful-paint', buffered: true });
    } catch (e) {}
    try {
        new PerformanceObserver((list) => {
            for (const entry of list.getEntries()) {
                const blocking = entry.duration - 50;
                if (blocking > 0) state.tbt += blocking;
            }
        }).observe({ type: 'longtask', buffered: true });
    } catch (e) {}
})();"""

METRICS_SCRIPT = """() => {
    const nav = performance.getEntriesByType('navigation')[0];
    const paint = performance.getEntriesByType('paint');
    const fcp = paint.find(p => p.name === 'first-contentful-paint');
    const state = window.__pageperf || {};
    return {
        pageLoadTime: nav ? Math.round(nav.loadEventEnd) : null,
        domContentLoaded: nav ? Math.round(nav.domContentLoadedEventEnd) : null,
        firstContentfulPaint: fcp ? Math.round(fcp.startTime) : null,
        largestContentfulPaint: state.lcp != null ? Math.round(state.lcp) : null,
        totalBlockingTime: window.__pageperf ? Math.round(state.tbt) : null,
        requestCount: performance.getEntriesByType('resource').length + (nav ? 1 : 0),
        transferSize: nav ? (nav.transferSize || 0) : 0,
        pageSize: nav ? (nav.decodedBodySize || 0) : 0,
    };
}"""

RESOURCES_SCRIPT = """() => {
    const entries = [
        ...performance.getEntriesByType('navigation'),
        ...performance.getEntriesByType('resource'),
    ];
    return entries.map(e => ({
        url: e.name,
        initiatorType: e.initiatorType || (e.entryType === 'navigation' ? 'navigation' : ''),
        startTime: e.startTime,
        endTime: e.responseEnd,
        requestStart: e.requestStart,
        responseStart: e.responseStart,
        transferSize: e.transferSize || 0,
        encodedBodySize: e.encodedBodySize || 0,
    }));
}"""

INITIATOR_TYPES = {
    "navigation": ResourceType.DOCUMENT,
    "link": ResourceType.STYLESHEET,
    "css": ResourceType.STYLESHEET,
    "script": ResourceType.SCRIPT,
    "img": ResourceType.IMAGE,
    "image": ResourceType.IMAGE,
    "xmlhttprequest": ResourceType.XHR,
    "fetch": ResourceType.XHR,
    "audio": ResourceType.MEDIA,
    "video": ResourceType.MEDIA,
}


def resource_from_entry(entry: dict) -> ResourceRecord:
    """ResourceRecord from one Resource Timing entry.

    Timestamps stay relative to navigation start so they compare directly
    with paint metrics. When the browser exposes request/response marks the
    waiting time is measured instead of estimated.
    """
    initiator = (entry.get("initiatorType") or "").lower()
    rtype = INITIATOR_TYPES.get(initiator)
    # <link> also loads fonts and icons; let the URL decide for those.
    if initiator == "link" and entry.get("url", "").split("?")[0].endswith((".woff", ".woff2", ".ttf", ".otf")):
        rtype = None

    raw = {
        "url": entry.get("url") or "",
        "type": rtype.value if rtype else None,
        "size": entry.get("transferSize") or entry.get("encodedBodySize") or 0,
        "startTime": entry.get("startTime"),
        "endTime": entry.get("endTime"),
    }
    record = analyze_resource(raw)

    request_start = entry.get("requestStart") or 0
    response_start = entry.get("responseStart") or 0
    if record.start_time is not None and record.end_time is not None and 0 < request_start <= response_start:
        total = record.end_time - record.start_time
        waiting = response_start - request_start
        downloading = max(record.end_time - response_start, 0)
        return ResourceRecord(
            url=record.url,
            type=record.type,
            size=record.size,
            mime_type=record.mime_type,
            start_time=record.start_time,
            end_time=record.end_time,
            timing_breakdown=TimingBreakdown(total=total, waiting=waiting, downloading=downloading),
            is_render_blocking=record.is_render_blocking,
        )
    return record


async def collect_metrics(page: Page) -> MetricsRecord:
    timing = await page.evaluate(METRICS_SCRIPT)
    if not timing:
        return MetricsRecord()
    return parse_metrics(timing)


async def collect_resources(page: Page) -> list[ResourceRecord]:
    entries = await page.evaluate(RESOURCES_SCRIPT) or []
    return [resource_from_entry(e) for e in entries if isinstance(e, dict)]


async def collect_page(page: Page) -> tuple[MetricsRecord, list[ResourceRecord]]:
    metrics = await collect_metrics(page)
    resources = await collect_resources(page)
    return with_resource_totals(metrics, resources), resources


async def apply_throttling(ctx, page: Page, preset: str) -> None:
    """Emulate one of the NETWORK_THROTTLING_PRESETS through a CDP session."""
    conditions = NETWORK_THROTTLING_PRESETS.get(preset)
    if not conditions or preset == "none":
        return
    cdp = await ctx.new_cdp_session(page)
    await cdp.send("Network.enable")
    await cdp.send("Network.emulateNetworkConditions", {
        "offline": conditions["offline"],
        "latency": conditions["latency"],
        "downloadThroughput": conditions["download_throughput"],
        "uploadThroughput": conditions["upload_throughput"],
    })
    logger.info("network throttling: %s", preset)


async def collect_snapshot(
    url: str,
    headful: bool = False,
    throttling: str = "none",
    settle_ms: int = 1500,
    timeout_ms: int = 30000,
) -> tuple[MetricsRecord, list[ResourceRecord]]:
    """Load the URL in Chromium and return its (metrics, resources) snapshot."""
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=not headful)
        try:
            ctx = await browser.new_context()
            await ctx.add_init_script(OBSERVER_SCRIPT)
            page = await ctx.new_page()
            await apply_throttling(ctx, page, throttling)
            logger.info("loading %s", url)
            await page.goto(url, wait_until="load", timeout=timeout_ms)
            # Give late LCP candidates and long tasks a moment to be reported.
            await page.wait_for_timeout(settle_ms)
            snapshot = await collect_page(page)
            await ctx.close()
        finally:
            await browser.close()
    return snapshot
