"""One analysis cycle: normalize inputs, detect, filter suggestions, rate metrics."""

from __future__ import annotations

from datetime import datetime

from pageperf.core.engine import BottleneckEngine
from pageperf.core.metrics import parse_metrics, rate_metrics, with_resource_totals
from pageperf.core.resource_analyzer import analyze_resources
from pageperf.core.suggestions import generate_suggestions
from pageperf.models.settings import DEFAULT_LEVEL
from pageperf.models.types import AnalysisResult, MetricsRecord, ResourceType


def analyze(
    metrics,
    resources,
    level=None,
    url: str = "",
    engine: BottleneckEngine | None = None,
) -> AnalysisResult:
    """Run every detector over the snapshot and return a presentation-ready result.

    `metrics` and `resources` may be records or raw mappings. A missing level
    falls back to the default; an unrecognized one keeps every suggestion.
    """
    started = datetime.now()
    engine = engine or BottleneckEngine()
    level_name = level.value if hasattr(level, "value") else (level or DEFAULT_LEVEL.value)

    records = analyze_resources(resources)
    parsed = parse_metrics(metrics)

    if parsed is None or records is None:
        return AnalysisResult(
            url=url,
            metrics=parsed or MetricsRecord(),
            resources=records or [],
            suggestion_level=level_name,
            started_at=started,
            completed_at=datetime.now(),
        )

    outcomes, bottlenecks = engine.run(parsed, records)
    filled = with_resource_totals(parsed, records)

    return AnalysisResult(
        url=url or _page_url(records),
        metrics=filled,
        resources=records,
        bottlenecks=generate_suggestions(bottlenecks, level_name),
        suggestion_level=level_name,
        ratings=rate_metrics(filled),
        errors=[f"{o.detector}: {o.error}" for o in outcomes if not o.ok],
        started_at=started,
        completed_at=datetime.now(),
    )


def _page_url(records) -> str:
    for record in records:
        if record.type is ResourceType.DOCUMENT and record.url:
            return record.url
    return ""
