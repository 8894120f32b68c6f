"""Common detector contract.

Detectors are plain classes that satisfy the Detector protocol; shared
behaviour lives in free functions (here and in pageperf.utils.resources)
rather than in a base class.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from pageperf.models.types import (
    Bottleneck,
    BottleneckCategory,
    MetricsRecord,
    ResourceRecord,
    Severity,
    Suggestion,
)


KB = 1024
MB = 1024 * 1024


class Detector(Protocol):
    name: str
    category: BottleneckCategory

    def detect(
        self, metrics: MetricsRecord | None, resources: Sequence[ResourceRecord] | None
    ) -> list[Bottleneck]:
        ...


def missing_input(metrics, resources) -> bool:
    return metrics is None or resources is None


def make_bottleneck(
    category: BottleneckCategory,
    title: str,
    description: str,
    severity: Severity,
    resources: Iterable[ResourceRecord] = (),
    suggestions: Iterable[tuple[str, str]] = (),
) -> Bottleneck:
    return Bottleneck(
        category=category,
        title=title,
        description=description,
        severity=severity,
        resources=tuple(resources),
        suggestions=tuple(Suggestion(text, link) for text, link in suggestions),
    )


def tiered(value: float, high: float, medium: float) -> Severity | None:
    """HIGH above the high threshold, MEDIUM above medium, otherwise None."""
    if value > high:
        return Severity.HIGH
    if value > medium:
        return Severity.MEDIUM
    return None
